"""Shared fixtures: a fake network of socketpair projectors, and the emulator
running on a background event loop."""

import asyncio
import socket
import threading

import pytest

from sdcp_projector.emulator import SdcpProjectorEmulator

from .fakes import FakeNetwork


@pytest.fixture
def fake_network(monkeypatch):
    network = FakeNetwork()
    monkeypatch.setattr(socket, "create_connection", network.create_connection)
    yield network
    for projector in network.projectors:
        projector.close()


@pytest.fixture
def emulator():
    """An SdcpProjectorEmulator listening on a free loopback port."""
    loop = asyncio.new_event_loop()
    thread = threading.Thread(target=loop.run_forever, daemon=True)
    thread.start()
    emu = SdcpProjectorEmulator(
        model_name="VPL-HW45ES",
        lamp_hours=1234,
        ip_address="192.168.1.20",
        bind_addr="127.0.0.1",
        port=0,
    )
    asyncio.run_coroutine_threadsafe(emu.start(), loop).result(timeout=5)
    try:
        yield emu
    finally:
        asyncio.run_coroutine_threadsafe(emu.close_and_wait(), loop).result(timeout=5)
        loop.call_soon_threadsafe(loop.stop)
        thread.join(timeout=5)
        loop.close()

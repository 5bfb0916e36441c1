"""End-to-end tests: the real client against the asyncio emulator over loopback TCP."""

import ipaddress
import threading

import pytest

from sdcp_projector import PowerStatus, SdcpProjectorClient, SdcpProjectorMonitor
from sdcp_projector.emulator import SdcpProjectorEmulator
from sdcp_projector.protocol import OperationKind, Packet


@pytest.fixture
def client(emulator):
    client = SdcpProjectorClient("127.0.0.1", "SONY", port=emulator.bound_port, timeout_secs=1.0)
    yield client
    client.close()


def test_queries(client):
    assert client.get_power_status() is PowerStatus.STANDBY
    assert client.get_model_name() == "VPL-HW45ES"
    assert client.get_lamp_timer() == 1234
    assert client.get_ip() == ipaddress.IPv4Address("192.168.1.20")


def test_power_on_and_off(client, emulator):
    client.set_power(True)
    assert client.get_power_status() is PowerStatus.POWER_ON
    client.set_power(False)
    assert client.get_power_status() is PowerStatus.STANDBY
    assert [(p.operation, p.item_number) for p in emulator.requests] == [
        (OperationKind.SET, 0x172E),
        (OperationKind.GET, 0x0102),
        (OperationKind.SET, 0x172F),
        (OperationKind.GET, 0x0102),
    ]


def test_single_connection_is_reused(client, emulator):
    for _ in range(3):
        assert client.get_power_status() is not None
    assert emulator.next_session_id == 1


def test_wrong_community_fails_without_closing(emulator):
    with SdcpProjectorClient("127.0.0.1", "ABCD", port=emulator.bound_port, timeout_secs=1.0) as client:
        assert client.get_power_status() is None
        assert client.transport.is_open
        assert client.get_model_name() is None
        assert emulator.next_session_id == 1


def test_concurrent_clients_threads(client):
    results = []
    lock = threading.Lock()

    def worker():
        for _ in range(10):
            status = client.get_power_status()
            lamp = client.get_lamp_timer()
            with lock:
                results.append((status, lamp))

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    assert results == [(PowerStatus.STANDBY, 1234)] * 40


def test_reconnects_after_close(emulator):
    client = SdcpProjectorClient("127.0.0.1", "SONY", port=emulator.bound_port, timeout_secs=1.0)
    assert client.get_power_status() is PowerStatus.STANDBY
    client.transport.close()
    assert client.get_power_status() is PowerStatus.STANDBY
    assert emulator.next_session_id == 2
    client.close()


def test_monitor_against_emulator(client):
    monitor = SdcpProjectorMonitor(client, slow_poll_every=0)
    state = monitor.poll_once()
    assert state.online
    assert state.power is False
    assert state.model_name == "VPL-HW45ES"
    assert state.lamp_hours == 1234


def test_unreachable_projector():
    client = SdcpProjectorClient("127.0.0.1", "SONY", port=1, connect_timeout_secs=1.0)
    assert client.get_power_status() is None
    assert not client.transport.is_open
    client.set_power(True)


def test_unknown_power_status_is_sent_out_of_range():
    emu = SdcpProjectorEmulator(power_status=PowerStatus.UNKNOWN)
    response = emu.handle_request_packet(Packet(b"SONY", OperationKind.GET, 0x0102))
    assert response is not None
    assert response.operation == OperationKind.GET
    assert response.payload == b"\x00\xff"


def test_unknown_power_status_end_to_end(client, emulator):
    emulator.power_status = PowerStatus.UNKNOWN
    assert client.get_power_status() is PowerStatus.UNKNOWN
    assert client.transport.is_open

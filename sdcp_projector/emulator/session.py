# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
SDCP projector emulator session.

One asyncio protocol instance per accepted client connection. Splits the incoming
byte stream into frames and hands each one to the emulator.
"""

from __future__ import annotations

import asyncio

from ..internal_types import *
from ..pkg_logging import logger
from ..protocol import Packet, PACKET_MAGIC

if TYPE_CHECKING:
    from .emulator_impl import SdcpProjectorEmulator

class SdcpProjectorEmulatorSession(asyncio.Protocol):
    emulator: SdcpProjectorEmulator
    session_id: int
    transport: Optional[asyncio.Transport] = None
    peer: Any = None
    buffer: bytes

    def __init__(self, emulator: SdcpProjectorEmulator):
        self.emulator = emulator
        self.session_id = emulator.alloc_session_id(self)
        self.buffer = b''

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        assert isinstance(transport, asyncio.Transport)
        self.transport = transport
        self.peer = transport.get_extra_info('peername')
        logger.debug(f"{self}: Connection made")

    def connection_lost(self, exc: Optional[Exception]) -> None:
        logger.debug(f"{self}: Connection lost: {exc}")
        self.transport = None
        self.emulator.free_session_id(self.session_id)

    def data_received(self, data: bytes) -> None:
        self.buffer += data
        while True:
            if len(self.buffer) >= len(PACKET_MAGIC) and self.buffer[:len(PACKET_MAGIC)] != PACKET_MAGIC:
                # resynchronize on the next magic sequence
                next_start = self.buffer.find(PACKET_MAGIC, 1)
                logger.debug(f"{self}: Discarding unframed bytes: {self.buffer[:next_start].hex(' ') if next_start > 0 else self.buffer.hex(' ')}")
                self.buffer = b'' if next_start < 0 else self.buffer[next_start:]
                continue
            frame_length = Packet.frame_length(self.buffer)
            if frame_length is None or len(self.buffer) < frame_length:
                break
            frame = self.buffer[:frame_length]
            self.buffer = self.buffer[frame_length:]
            try:
                packet = Packet.from_raw_data(frame)
            except Exception as e:
                logger.warning(f"{self}: Invalid frame received; closing session: {e}")
                self.close()
                return
            self.emulator.on_packet_received(self, packet)

    def write(self, data: bytes) -> None:
        if self.transport is not None:
            logger.debug(f"{self}: Writing {len(data)} bytes: {data.hex(' ')}")
            self.transport.write(data)

    def close(self) -> None:
        if self.transport is not None:
            self.transport.close()

    def __str__(self) -> str:
        return f"EmulatorSession({self.session_id}, {self.peer})"

    def __repr__(self) -> str:
        return str(self)

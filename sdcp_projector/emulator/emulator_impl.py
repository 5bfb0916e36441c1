# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
SDCP projector emulator.

Provides a simple emulation of an SDCP projector on TCP/IP.
"""

from __future__ import annotations

import asyncio
import ipaddress

from ..internal_types import *
from ..pkg_logging import logger
from ..protocol import (
    Packet,
    OperationKind,
    PowerStatus,
    IpAddress,
    power_status_map,
    POWER_STATUS,
    POWER_ON,
    POWER_OFF,
    MODEL_NAME,
    LAMP_TIMER,
    IP_ADDRESS,
    ERROR_RESPONSE_MARKER,
    community_to_bytes,
  )
from ..constants import DEFAULT_PORT, DEFAULT_COMMUNITY
from ..exceptions import SdcpProjectorError

from .session import SdcpProjectorEmulatorSession

ERROR_ITEM = b"\x01\x01"
"""Error code sent for an unsupported item number."""

ERROR_COMMUNITY = b"\x02\x02"
"""Error code sent when the request carries the wrong community."""

UNKNOWN_POWER_STATUS_CODE = 0xff
"""Power status code sent when the emulated state is PowerStatus.UNKNOWN. Outside the defined 0..8 range."""

_power_status_codes: Dict[PowerStatus, int] = dict((v, k) for k, v in power_status_map.items())

class SdcpProjectorEmulator:
    community: bytes
    model_name: str
    lamp_hours: int
    ip_address: IpAddress
    power_status: PowerStatus
    ack_set_commands: bool
    bind_addr: str
    port: int
    sessions: Dict[int, SdcpProjectorEmulatorSession]
    next_session_id: int = 0
    requests: List[Packet]
    """Every request frame received, in order. For tests."""
    server: Optional[asyncio.Server] = None
    final_result: Optional[asyncio.Future[None]] = None

    def __init__(
            self,
            community: str=DEFAULT_COMMUNITY,
            model_name: str="VPL-VW5000",
            lamp_hours: int=0,
            ip_address: Optional[str]=None,
            power_status: PowerStatus=PowerStatus.STANDBY,
            ack_set_commands: bool=False,
            bind_addr: Optional[str]=None,
            port: int=DEFAULT_PORT,
          ):
        self.community = community_to_bytes(community)
        self.model_name = model_name
        self.lamp_hours = lamp_hours
        self.ip_address = ipaddress.ip_address('192.168.0.10' if ip_address is None else ip_address)
        self.power_status = power_status
        self.ack_set_commands = ack_set_commands
        self.bind_addr = '0.0.0.0' if bind_addr is None else bind_addr
        self.port = port
        self.sessions = {}
        self.requests = []

    @property
    def bound_port(self) -> int:
        """The port actually listened on; differs from port when port is 0."""
        if self.server is None or len(self.server.sockets) == 0:
            raise SdcpProjectorError("Emulator is not listening")
        return self.server.sockets[0].getsockname()[1]

    def alloc_session_id(self, session: SdcpProjectorEmulatorSession) -> int:
        result = self.next_session_id
        self.next_session_id += 1
        self.sessions[result] = session
        return result

    def free_session_id(self, session_id: int) -> None:
        self.sessions.pop(session_id, None)

    def on_packet_received(self, session: SdcpProjectorEmulatorSession, packet: Packet) -> None:
        """Called when a complete frame is received from a session."""
        logger.debug(f"{session}: Emulator received packet: {packet}")
        self.requests.append(packet)
        response = self.handle_request_packet(packet)
        if response is not None:
            logger.debug(f"{session}: Emulator sending response packet: {response}")
            session.write(response.raw_data)

    def handle_get(self, item_number: int) -> Optional[bytes]:
        """Returns the response payload for a GET item, or None if the item is unsupported."""
        if item_number == POWER_STATUS.item_number:
            return bytes([0, _power_status_codes.get(self.power_status, UNKNOWN_POWER_STATUS_CODE)])
        if item_number == MODEL_NAME.item_number:
            return self.model_name.encode('latin-1') + b'\x00'
        if item_number == LAMP_TIMER.item_number:
            return min(self.lamp_hours, 0xffff).to_bytes(2, 'big')
        if item_number == IP_ADDRESS.item_number:
            return self.ip_address.packed
        return None

    def handle_set(self, item_number: int) -> bool:
        """Applies a SET item. Returns False if the item is unsupported."""
        if item_number == POWER_ON.item_number:
            if not self.power_status.is_powered:
                self.power_status = PowerStatus.POWER_ON
            return True
        if item_number == POWER_OFF.item_number:
            if self.power_status.is_powered:
                self.power_status = PowerStatus.STANDBY
            return True
        return False

    def handle_request_packet(self, packet: Packet) -> Optional[Packet]:
        """Handles a single request frame, and returns the response frame, if any."""
        if packet.community != self.community:
            return self.error_response(packet, ERROR_COMMUNITY)
        if packet.operation == OperationKind.GET:
            payload = self.handle_get(packet.item_number)
            if payload is None:
                return self.error_response(packet, ERROR_ITEM)
            return Packet(self.community, OperationKind.GET, packet.item_number, payload)
        if packet.operation == OperationKind.SET:
            if not self.handle_set(packet.item_number):
                return self.error_response(packet, ERROR_ITEM)
            if self.ack_set_commands:
                return Packet(self.community, OperationKind.GET, packet.item_number)
            return None
        return self.error_response(packet, ERROR_ITEM)

    def error_response(self, packet: Packet, error_code: bytes) -> Packet:
        logger.debug(f"Emulator: error {error_code.hex(' ')} for request {packet}")
        return Packet(self.community, ERROR_RESPONSE_MARKER, packet.item_number, error_code)

    async def start(self) -> None:
        loop = asyncio.get_running_loop()
        self.final_result = loop.create_future()
        try:
            self.server = await loop.create_server(
                lambda: SdcpProjectorEmulatorSession(self),
                host=self.bind_addr,
                port=self.port)
            logger.debug(f"Emulator: Listening on {self.bind_addr}:{self.bound_port}")
            await self.server.start_serving()
        except BaseException as e:
            self.set_final_result(e)
            try:
                await self.wait_closed()
            except BaseException:
                pass
            raise

    async def run(self) -> None:
        """Runs the Emulator until it is closed."""
        async with self:
            await self.wait_closed()

    def close(self, exc: Optional[BaseException]=None) -> None:
        """Stops the Emulator."""
        self.set_final_result(exc)

    async def wait_closed(self) -> None:
        """Waits for the emulator to be fully closed. Does not initiate shutdown."""
        try:
            if self.final_result is not None:
                await self.final_result
        finally:
            if self.server is not None:
                server = self.server
                self.server = None
                for session in list(self.sessions.values()):
                    session.close()
                server.close()
                await server.wait_closed()

    async def close_and_wait(self, exc: Optional[BaseException]=None) -> None:
        self.close(exc)
        await self.wait_closed()

    def set_final_result(self, exc: Optional[BaseException]=None) -> None:
        if self.final_result is not None and not self.final_result.done():
            if exc is None:
                logger.debug(f"Emulator: Setting final result to success")
                self.final_result.set_result(None)
            else:
                logger.debug(f"Emulator: Setting final exception: {exc}")
                self.final_result.set_exception(exc)

    async def __aenter__(self) -> SdcpProjectorEmulator:
        await self.start()
        return self

    async def __aexit__(self,
            exc_type: Optional[Type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType]
      ) -> None:
        self.set_final_result(exc)
        try:
            await self.wait_closed()
        except Exception:
            pass

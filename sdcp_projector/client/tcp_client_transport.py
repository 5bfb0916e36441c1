# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
SDCP projector TCP/IP client transport.

Provides an implementation of SdcpClientTransport over a single persistent
TCP/IP socket.
"""

from __future__ import annotations

import socket
import threading

from ..internal_types import *
from ..constants import DEFAULT_PORT, DEFAULT_TIMEOUT, CONNECT_TIMEOUT, DRAIN_TIMEOUT
from ..pkg_logging import logger
from ..protocol import (
    Packet,
    OperationKind,
    community_to_bytes,
    ECHO_HEADER_LENGTH,
    OPERATION_OFFSET,
    ERROR_RESPONSE_MARKER,
  )

from .client_transport import SdcpClientTransport

class TcpSdcpClientTransport(SdcpClientTransport):
    """SDCP projector TCP/IP client transport.

    The connection is opened lazily by the first command and torn down on any
    I/O error; the next command reopens it. Nothing is retried internally.
    """

    host: str
    port: int
    community: bytes
    connect_timeout_secs: float
    timeout_secs: float
    drain_timeout_secs: float
    sock: Optional[socket.socket] = None

    _transaction_lock: threading.Lock
    """A mutex to ensure that only one exchange (open, write, read) is in progress
    at a time; the socket and its buffered input are shared by all callers."""

    def __init__(
            self,
            host: str,
            community: Union[str, bytes],
            port: int=DEFAULT_PORT,
            connect_timeout_secs: float=CONNECT_TIMEOUT,
            timeout_secs: float=DEFAULT_TIMEOUT,
            drain_timeout_secs: float=DRAIN_TIMEOUT,
          ) -> None:
        """Initializes the transport. Does not connect.

           Raises SdcpProjectorError if the community is not exactly 4 ASCII characters.
        """
        super().__init__()
        self.host = host
        self.port = port
        self.community = community_to_bytes(community)
        self.connect_timeout_secs = connect_timeout_secs
        self.timeout_secs = timeout_secs
        self.drain_timeout_secs = drain_timeout_secs
        self._transaction_lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self.sock is not None

    def _close(self) -> None:
        """Releases the socket (nonlocking). Errors while closing are ignored; the
           socket is discarded either way."""
        sock = self.sock
        self.sock = None
        if sock is not None:
            try:
                sock.close()
                logger.debug(f"{self}: Connection closed")
            except OSError:
                logger.debug(f"{self}: Exception while closing socket", exc_info=True)

    def close(self) -> None:
        with self._transaction_lock:
            self._close()

    def _ensure_open(self) -> bool:
        """Opens the connection if necessary (nonlocking)."""
        if self.sock is not None:
            return True
        sock: Optional[socket.socket] = None
        try:
            logger.debug(f"Connecting to projector at {self.host}:{self.port}")
            sock = socket.create_connection((self.host, self.port), timeout=self.connect_timeout_secs)
            sock.settimeout(self.timeout_secs)
        except OSError as e:
            # includes socket.gaierror for unresolvable hosts and socket.timeout for slow connects
            logger.warning(f"{self}: Connection failed: {e}")
            if sock is not None:
                try:
                    sock.close()
                except OSError:
                    pass
            return False
        self.sock = sock
        logger.info(f"{self}: Connection opened")
        return True

    def ensure_open(self) -> bool:
        with self._transaction_lock:
            return self._ensure_open()

    def _read_exactly(self, length: int) -> bytes:
        """Reads exactly length bytes with the normal timeout (nonlocking).

        Raises OSError on timeout or error, and ConnectionError if the projector
        closes the connection first.
        """
        assert self.sock is not None
        data = b''
        while len(data) < length:
            chunk = self.sock.recv(length - len(data))
            if len(chunk) == 0:
                raise ConnectionError(
                    f"Connection closed by projector after {len(data)} of {length} bytes")
            data += chunk
        return data

    def _write_exactly(self, data: bytes) -> None:
        """Writes the whole of data with the normal timeout (nonlocking).

        Raises OSError on timeout or error. A partial write is not recoverable.
        """
        assert self.sock is not None
        logger.debug(f"Writing exactly {len(data)} bytes: {data.hex(' ')}")
        self.sock.sendall(data)

    def _drain_input(self) -> None:
        """Discards any bytes already waiting on the socket (nonlocking).

        Uses a near-zero timeout to decide that nothing more is buffered, so this is
        best-effort resynchronization: bytes that arrive later are not drained.

        Raises OSError on error, and ConnectionError if the projector has closed the
        connection.
        """
        assert self.sock is not None
        self.sock.settimeout(self.drain_timeout_secs)
        try:
            while True:
                try:
                    stale = self.sock.recv(4096)
                except socket.timeout:
                    break
                if len(stale) == 0:
                    raise ConnectionError("Connection closed by projector")
                logger.debug(f"Discarded {len(stale)} stale bytes: {stale.hex(' ')}")
        finally:
            self.sock.settimeout(self.timeout_secs)

    def _read_response_payload(self, request: Packet) -> Optional[bytes]:
        """Reads and validates the response to a GET request (nonlocking).

        The echoed header is compared one byte at a time; the first mismatch
        abandons the response and returns None without closing the connection.
        Stray bytes left behind are discarded by the drain before the next GET.

        Raises OSError on timeout or error.
        """
        expected = request.echo_header
        for index in range(ECHO_HEADER_LENGTH):
            actual = self._read_exactly(1)[0]
            if actual != expected[index]:
                if index == OPERATION_OFFSET and actual == ERROR_RESPONSE_MARKER:
                    logger.warning(f"{self}: Projector returned an error response to item 0x{request.item_number:04x}")
                else:
                    logger.warning(
                        f"{self}: Unexpected response byte at offset {index} "
                        f"(expected 0x{expected[index]:02x}, got 0x{actual:02x}) for item 0x{request.item_number:04x}")
                return None
        logger.debug(f"Read response header: {expected.hex(' ')}")
        payload_length = self._read_exactly(1)[0]
        payload = self._read_exactly(payload_length)
        logger.debug(f"Read response payload: [{payload.hex(' ')}]")
        return payload

    def send_set(self, item_number: int, payload: bytes=b'') -> bool:
        packet = Packet(self.community, OperationKind.SET, item_number, payload)
        with self._transaction_lock:
            if not self._ensure_open():
                return False
            try:
                self._write_exactly(packet.raw_data)
            except OSError as e:
                logger.warning(f"{self}: SET 0x{item_number:04x} failed: {e}")
                self._close()
                return False
            logger.debug(f"{self}: SET 0x{item_number:04x} sent")
            return True

    def send_get(self, item_number: int, payload: bytes=b'') -> Optional[bytes]:
        packet = Packet(self.community, OperationKind.GET, item_number, payload)
        with self._transaction_lock:
            if not self._ensure_open():
                return None
            try:
                self._drain_input()
                self._write_exactly(packet.raw_data)
                logger.debug(f"{self}: GET 0x{item_number:04x} sent")
                return self._read_response_payload(packet)
            except OSError as e:
                logger.warning(f"{self}: GET 0x{item_number:04x} failed: {e}")
                self._close()
                return None

    def __str__(self) -> str:
        return f"TcpSdcpClientTransport({self.host}:{self.port})"

    def __repr__(self) -> str:
        return str(self)

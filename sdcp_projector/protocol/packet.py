# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
SDCP frame encoding and decoding.

Every frame, request or response, has the form:

    02 0A <community:4> <op> <item_hi> <item_lo> <length> <payload...>

All integers are big-endian.
"""

from __future__ import annotations

from ..internal_types import *
from ..exceptions import SdcpProjectorError
from .constants import (
    OperationKind,
    PACKET_MAGIC,
    COMMUNITY_LENGTH,
    OPERATION_OFFSET,
    ECHO_HEADER_LENGTH,
    HEADER_LENGTH,
    MAX_PAYLOAD_LENGTH,
    MAX_ITEM_NUMBER,
  )

def community_to_bytes(community: Union[str, bytes]) -> bytes:
    """Converts a community token to its 4-byte wire form.

    Raises SdcpProjectorError if the token is not exactly 4 ASCII characters.
    """
    if isinstance(community, str):
        try:
            community = community.encode('ascii')
        except UnicodeEncodeError as e:
            raise SdcpProjectorError(f"Community token must be ASCII: {community!r}") from e
    if len(community) != COMMUNITY_LENGTH:
        raise SdcpProjectorError(
            f"Community token must be exactly {COMMUNITY_LENGTH} characters long: {community!r}")
    return bytes(community)

class Packet:
    """A single SDCP frame"""
    community: bytes
    operation_byte: int
    item_number: int
    payload: bytes

    def __init__(
            self,
            community: Union[str, bytes],
            operation: Union[OperationKind, int],
            item_number: int,
            payload: Optional[bytes]=None,
          ):
        if payload is None:
            payload = b''
        self.community = community_to_bytes(community)
        self.operation_byte = operation.value if isinstance(operation, OperationKind) else operation
        self.item_number = item_number
        self.payload = bytes(payload)
        self.validate()

    def validate(self) -> None:
        """Raises SdcpProjectorError if any field cannot be encoded in a frame."""
        if not 0 <= self.operation_byte <= 0xff:
            raise SdcpProjectorError(f"Operation byte out of range: {self.operation_byte}")
        if not 0 <= self.item_number <= MAX_ITEM_NUMBER:
            raise SdcpProjectorError(f"Item number out of range: {self.item_number}")
        if len(self.payload) > MAX_PAYLOAD_LENGTH:
            raise SdcpProjectorError(
                f"Payload too long ({len(self.payload)} bytes, max {MAX_PAYLOAD_LENGTH})")

    @property
    def operation(self) -> Optional[OperationKind]:
        """The operation kind, or None if the operation byte is not a known kind."""
        try:
            return OperationKind(self.operation_byte)
        except ValueError:
            return None

    @property
    def item_bytes(self) -> bytes:
        return self.item_number.to_bytes(2, 'big')

    @property
    def echo_header(self) -> bytes:
        """The header fields that a valid response to this packet must echo,
           with the operation byte replaced by the GET-response marker."""
        return (
            PACKET_MAGIC +
            self.community +
            bytes([OperationKind.GET.value]) +
            self.item_bytes
          )

    @property
    def raw_data(self) -> bytes:
        """The encoded frame"""
        return (
            PACKET_MAGIC +
            self.community +
            bytes([self.operation_byte]) +
            self.item_bytes +
            bytes([len(self.payload)]) +
            self.payload
          )

    def __len__(self) -> int:
        return HEADER_LENGTH + len(self.payload)

    @classmethod
    def frame_length(cls, data: bytes) -> Optional[int]:
        """Returns the total length of the frame at the start of data, or None
           if fewer than HEADER_LENGTH bytes are available."""
        if len(data) < HEADER_LENGTH:
            return None
        return HEADER_LENGTH + data[ECHO_HEADER_LENGTH]

    @classmethod
    def from_raw_data(cls, data: bytes) -> Self:
        """Decodes a complete frame. Raises SdcpProjectorError on a malformed frame."""
        if len(data) < HEADER_LENGTH:
            raise SdcpProjectorError(f"Frame too short: {data.hex(' ')}")
        if data[:len(PACKET_MAGIC)] != PACKET_MAGIC:
            raise SdcpProjectorError(f"Bad frame magic: {data.hex(' ')}")
        if cls.frame_length(data) != len(data):
            raise SdcpProjectorError(f"Frame length does not match length byte: {data.hex(' ')}")
        community = data[2:2+COMMUNITY_LENGTH]
        operation_byte = data[OPERATION_OFFSET]
        item_number = int.from_bytes(data[7:9], 'big')
        return cls(community, operation_byte, item_number, data[HEADER_LENGTH:])

    def __str__(self) -> str:
        return f"Packet([{self.raw_data.hex(' ')}])"

    def __repr__(self) -> str:
        return str(self)

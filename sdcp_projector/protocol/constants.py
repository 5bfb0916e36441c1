# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Wire-level constants for the SDCP (PJTalk) protocol.
"""

from __future__ import annotations

from enum import Enum

class OperationKind(Enum):
    """The operation byte at offset 6 of every frame."""
    SET = 0x00
    GET = 0x01

PACKET_MAGIC = b"\x02\x0a"
"""The two bytes that begin every SDCP frame, in both directions."""

COMMUNITY_LENGTH = 4
"""Length of the community token, in bytes."""

OPERATION_OFFSET = len(PACKET_MAGIC) + COMMUNITY_LENGTH
"""Offset of the operation byte within a frame."""

ECHO_HEADER_LENGTH = len(PACKET_MAGIC) + COMMUNITY_LENGTH + 1 + 2
"""Length of the header fields that a response echoes back: magic, community,
   operation kind and item number."""

HEADER_LENGTH = ECHO_HEADER_LENGTH + 1
"""Length of the full frame header, including the payload length byte."""

MAX_PAYLOAD_LENGTH = 0xff
"""The payload length is carried in a single byte."""

MAX_ITEM_NUMBER = 0xffff
"""Item numbers are 16-bit, big-endian."""

ERROR_RESPONSE_MARKER = 0x00
"""A response carrying 0x00 in the operation byte is an error reply from the projector;
   its 2-byte payload holds the error code."""

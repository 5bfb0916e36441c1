# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
SDCP item numbers and payload decoders.

Each item number identifies an attribute or action on the projector. This module
holds only the metadata and the pure functions that turn response payloads into
values; there is no I/O here.
"""

from __future__ import annotations

import ipaddress
from enum import Enum

from ..internal_types import *
from .constants import OperationKind

IpAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

class PowerStatus(Enum):
    """Projector power states reported by the power status item."""
    STANDBY = "standby"
    STARTUP = "startup"
    STARTUP_LAMP = "startup-lamp"
    POWER_ON = "power-on"
    COOLING_1 = "cooling-1"
    COOLING_2 = "cooling-2"
    SAVING_COOLING_1 = "saving-cooling-1"
    SAVING_COOLING_2 = "saving-cooling-2"
    SAVING_STANDBY = "saving-standby"
    UNKNOWN = "unknown"

    @property
    def is_powered(self) -> bool:
        """True unless the projector is in one of the standby states, or the state is unknown."""
        return self not in (PowerStatus.STANDBY, PowerStatus.SAVING_STANDBY, PowerStatus.UNKNOWN)

power_status_map: Dict[int, PowerStatus] = {
    0: PowerStatus.STANDBY,
    1: PowerStatus.STARTUP,
    2: PowerStatus.STARTUP_LAMP,
    3: PowerStatus.POWER_ON,
    4: PowerStatus.COOLING_1,
    5: PowerStatus.COOLING_2,
    6: PowerStatus.SAVING_COOLING_1,
    7: PowerStatus.SAVING_COOLING_2,
    8: PowerStatus.SAVING_STANDBY,
  }
"""Values of byte 1 of the power status payload, and the power states they correspond to."""

class ItemMeta:
    """Metadata for a single item number"""
    name: str
    item_number: int
    operation: OperationKind
    description: Optional[str]
    response_payload_length: Optional[int]
    """Fixed length of the GET response payload, if known. None if the payload is
       variable in size or the item is a SET action."""

    def __init__(
            self,
            name: str,
            item_number: int,
            operation: OperationKind,
            description: Optional[str]=None,
            response_payload_length: Optional[int]=None,
          ):
        self.name = name
        self.item_number = item_number
        self.operation = operation
        self.description = description
        self.response_payload_length = response_payload_length

    def __str__(self) -> str:
        return f"ItemMeta({self.name}: 0x{self.item_number:04x})"

    def __repr__(self) -> str:
        return str(self)

_I = ItemMeta

POWER_STATUS = _I("power_status", 0x0102, OperationKind.GET, "Query power status", response_payload_length=2)
POWER_ON = _I("power_on", 0x172e, OperationKind.SET, "Power - On")
POWER_OFF = _I("power_off", 0x172f, OperationKind.SET, "Power - Off")
MODEL_NAME = _I("model_name", 0x8001, OperationKind.GET, "Query model name (NUL-terminated ASCII)")
LAMP_TIMER = _I("lamp_timer", 0x0113, OperationKind.GET, "Query lamp timer (hours)", response_payload_length=2)
IP_ADDRESS = _I("ip_address", 0x9001, OperationKind.GET, "Query IP address")

item_metas: Dict[str, ItemMeta] = dict(
    (meta.name, meta) for meta in (POWER_STATUS, POWER_ON, POWER_OFF, MODEL_NAME, LAMP_TIMER, IP_ADDRESS))

item_number_to_meta: Dict[int, ItemMeta] = dict((meta.item_number, meta) for meta in item_metas.values())

def decode_power_status(payload: bytes) -> Optional[PowerStatus]:
    """Decodes a power status payload. The state is carried in byte 1; a byte value
       with no known state yields PowerStatus.UNKNOWN. Returns None if the payload
       is too short to carry a state."""
    if len(payload) < 2:
        return None
    return power_status_map.get(payload[1], PowerStatus.UNKNOWN)

def decode_model_name(payload: bytes) -> str:
    """Decodes a NUL-terminated model name. Bytes after the first NUL are ignored."""
    end = payload.find(b'\x00')
    if end >= 0:
        payload = payload[:end]
    return payload.decode('latin-1')

def decode_lamp_timer(payload: bytes) -> Optional[int]:
    """Decodes a big-endian 16-bit lamp hour count. Any length other than 2 yields None."""
    if len(payload) != LAMP_TIMER.response_payload_length:
        return None
    return int.from_bytes(payload, 'big')

def decode_ip_address(payload: bytes) -> Optional[IpAddress]:
    """Decodes a raw 4-byte (IPv4) or 16-byte (IPv6) address. Any other length yields None."""
    try:
        return ipaddress.ip_address(bytes(payload))
    except ValueError:
        return None

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Low-level protocol definitions for SDCP (PJTalk) projectors.
"""

from .constants import (
    OperationKind,
    PACKET_MAGIC,
    COMMUNITY_LENGTH,
    OPERATION_OFFSET,
    ECHO_HEADER_LENGTH,
    HEADER_LENGTH,
    MAX_PAYLOAD_LENGTH,
    MAX_ITEM_NUMBER,
    ERROR_RESPONSE_MARKER,
  )

from .packet import (
    Packet,
    community_to_bytes,
  )

from .item_meta import (
    IpAddress,
    PowerStatus,
    ItemMeta,
    power_status_map,
    item_metas,
    item_number_to_meta,
    POWER_STATUS,
    POWER_ON,
    POWER_OFF,
    MODEL_NAME,
    LAMP_TIMER,
    IP_ADDRESS,
    decode_power_status,
    decode_model_name,
    decode_lamp_timer,
    decode_ip_address,
  )

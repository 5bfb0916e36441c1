# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Package sdcp_projector provides an API for querying and controlling
video projectors via the SDCP (PJTalk) TCP/IP protocol.
"""

from .version import __version__

from .pkg_logging import logger

from .internal_types import Jsonable, JsonableDict

from .exceptions import SdcpProjectorError

from .constants import (
    DEFAULT_PORT,
    DEFAULT_COMMUNITY,
    DEFAULT_TIMEOUT,
    CONNECT_TIMEOUT,
    DRAIN_TIMEOUT,
    POLL_INTERVAL,
    SLOW_POLL_EVERY,
  )

from .protocol import (
    Packet,
    OperationKind,
    PowerStatus,
    ItemMeta,
    IpAddress,
    item_metas,
  )

from .client import (
    resolve_projector_tcp_host,
    SdcpClientTransport,
    TcpSdcpClientTransport,
    SdcpProjectorClientConfig,
    SdcpProjectorClient,
    SdcpProjectorMonitor,
    ProjectorState,
  )

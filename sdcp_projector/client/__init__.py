# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
SDCP projector client.

Provides the TCP/IP transport, the device-level client, configuration and a
background status monitor.
"""

from .resolve_host import resolve_projector_tcp_host
from .client_transport import SdcpClientTransport
from .tcp_client_transport import TcpSdcpClientTransport
from .client_config import SdcpProjectorClientConfig
from .client_impl import SdcpProjectorClient
from .monitor import SdcpProjectorMonitor, ProjectorState

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
SDCP projector host/port resolver.

Provides a function that resolves host specifiers and environment variables into a
projector host and port.
"""

from __future__ import annotations

import os

from ..internal_types import *
from ..exceptions import SdcpProjectorError
from ..constants import DEFAULT_PORT

def resolve_projector_tcp_host(
        host: Optional[str]=None,
        default_port: Optional[int]=None,
      ) -> Tuple[str, int]:
    """Resolves a projector host string into a hostname and port.

        Args:
            host: The hostname or IPV4 address of the projector.
                    may optionally be prefixed with "tcp://".
                    May be suffixed with ":<port>" to specify a
                    non-default port, which will override the default_port argument.
                    If None, the host will be taken from the
                    SDCP_PROJECTOR_HOST environment variable.
            default_port: The default TCP/IP port number to use. If None, the port
                    will be taken from SDCP_PROJECTOR_PORT. If that
                    environment variable is not found, the default SDCP
                    port (53484) will be used.

        Returns:
            A tuple of (hostname: str, port: int).

        Raises SdcpProjectorError if no host is available or the port is not a number.
    """
    if host is None or host == '':
        host = os.environ.get('SDCP_PROJECTOR_HOST')
        if host is None or host == '':
            raise SdcpProjectorError("No projector host specified")

    if default_port is None or default_port <= 0:
        default_port_str = os.environ.get('SDCP_PROJECTOR_PORT')
        if default_port_str is None or default_port_str == '':
            default_port = DEFAULT_PORT
        else:
            default_port = _parse_port(default_port_str)

    if '://' in host:
        if not host.startswith('tcp://'):
            raise SdcpProjectorError(f"Invalid host protocol specifier for TCP transport: '{host}'")
        host = host[6:]

    # a bare IPv6 address contains more than one ':', so only "[addr]:port" carries a port
    if host.startswith('['):
        addr, sep, rest = host[1:].partition(']')
        if sep == '':
            raise SdcpProjectorError(f"Unterminated IPv6 address in host specifier: '{host}'")
        port = _parse_port(rest[1:]) if rest.startswith(':') else default_port
        host = addr
    elif host.count(':') == 1:
        host, port_str = host.rsplit(':', 1)
        port = _parse_port(port_str)
    else:
        port = default_port

    if host == '':
        raise SdcpProjectorError("No projector host specified")

    return (host, port)

def _parse_port(port_str: str) -> int:
    try:
        port = int(port_str)
    except ValueError as e:
        raise SdcpProjectorError(f"Invalid TCP port: '{port_str}'") from e
    if not 0 < port < 65536:
        raise SdcpProjectorError(f"TCP port out of range: {port}")
    return port

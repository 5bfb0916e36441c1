# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
SDCP projector client configuration.

Provides a config object holding the settings needed to build a client and
its monitor. Configuration errors are reported here, before any client is built.
"""

from __future__ import annotations

import os

from ..internal_types import *
from ..exceptions import SdcpProjectorError
from ..constants import (
    DEFAULT_PORT,
    DEFAULT_COMMUNITY,
    DEFAULT_TIMEOUT,
    CONNECT_TIMEOUT,
    POLL_INTERVAL,
    SLOW_POLL_EVERY,
  )
from ..protocol import community_to_bytes
from .resolve_host import resolve_projector_tcp_host

class SdcpProjectorClientConfig:
    """SDCP projector client configuration."""
    default_host: Optional[str]
    default_port: int
    community: str
    connect_timeout_secs: float
    timeout_secs: float
    poll_interval_secs: float
    slow_poll_every: int

    def __init__(
            self,
            default_host: Optional[str]=None,
            community: Optional[str]=None,
            *,
            default_port: Optional[int]=None,
            connect_timeout_secs: Optional[float]=None,
            timeout_secs: Optional[float]=None,
            poll_interval_secs: Optional[float]=None,
            slow_poll_every: Optional[int]=None,
            base_config: Optional[SdcpProjectorClientConfig]=None
          ) -> None:
        """Creates a configuration for an SDCP projector client.

           Args:
             default_host: The hostname or IPV4 address of the projector.
                   May optionally be prefixed with "tcp://".
                   May be suffixed with ":<port>" to specify a
                   non-default port, which will override the default_port argument.
                   If None, the default host will be taken from the
                     SDCP_PROJECTOR_HOST environment variable.
             community:
                   The 4-character community token. If None, it will be taken
                   from the SDCP_PROJECTOR_COMMUNITY environment variable, or
                   "SONY" if that is not set.
             default_port: The TCP/IP port number to use.
                    If None, the default port will be taken from SDCP_PROJECTOR_PORT.
                    If that environment variable is not found, 53484 will be used.
             connect_timeout_secs:
                   The timeout for opening a connection, in seconds.
             timeout_secs:
                   The timeout for each read or write, in seconds.
             poll_interval_secs:
                   The interval between power status polls by the monitor, in seconds.
             slow_poll_every:
                   The monitor refreshes model name and lamp hours after this many
                   successful power status polls.
             base_config:
                   An optional base configuration to use.
        """
        if base_config is None:
            self.init_from_defaults()
        else:
            self.init_from_base_config(base_config)

        if default_host is not None and default_host != '':
            self.default_host = default_host

        if default_port is not None and default_port > 0:
            self.default_port = default_port

        if community is not None:
            self.community = community

        if connect_timeout_secs is not None:
            self.connect_timeout_secs = connect_timeout_secs

        if timeout_secs is not None:
            self.timeout_secs = timeout_secs

        if poll_interval_secs is not None:
            self.poll_interval_secs = poll_interval_secs

        if slow_poll_every is not None:
            self.slow_poll_every = slow_poll_every

        if self.default_host is not None:
            # "tcp://host:port" overrides the port
            self.default_host, self.default_port = resolve_projector_tcp_host(
                self.default_host, self.default_port)

    def init_from_defaults(self) -> None:
        """Initializes the configuration from defaults."""
        default_host: Optional[str] = os.environ.get('SDCP_PROJECTOR_HOST')
        if default_host == '':
            default_host = None
        self.default_host = default_host
        default_port_str = os.environ.get('SDCP_PROJECTOR_PORT')
        if default_port_str is None or default_port_str == '':
            self.default_port = DEFAULT_PORT
        else:
            try:
                self.default_port = int(default_port_str)
            except ValueError as e:
                raise SdcpProjectorError(f"Invalid SDCP_PROJECTOR_PORT: '{default_port_str}'") from e
        community = os.environ.get('SDCP_PROJECTOR_COMMUNITY')
        if community is None or community == '':
            community = DEFAULT_COMMUNITY
        self.community = community
        self.connect_timeout_secs = CONNECT_TIMEOUT
        self.timeout_secs = DEFAULT_TIMEOUT
        self.poll_interval_secs = POLL_INTERVAL
        self.slow_poll_every = SLOW_POLL_EVERY

    def init_from_base_config(self, base_config: SdcpProjectorClientConfig) -> None:
        """Initializes the configuration from a base configuration."""
        self.default_host = base_config.default_host
        self.default_port = base_config.default_port
        self.community = base_config.community
        self.connect_timeout_secs = base_config.connect_timeout_secs
        self.timeout_secs = base_config.timeout_secs
        self.poll_interval_secs = base_config.poll_interval_secs
        self.slow_poll_every = base_config.slow_poll_every

    def validate(self) -> None:
        """Raises SdcpProjectorError if the configuration cannot be used to build a client."""
        if self.default_host is None or self.default_host == '':
            raise SdcpProjectorError("No network address specified")
        if self.community == '':
            raise SdcpProjectorError("No community specified")
        community_to_bytes(self.community)
        if not 0 < self.default_port < 65536:
            raise SdcpProjectorError(f"TCP port out of range: {self.default_port}")
        if self.connect_timeout_secs <= 0 or self.timeout_secs <= 0:
            raise SdcpProjectorError("Timeouts must be positive")
        if self.poll_interval_secs <= 0:
            raise SdcpProjectorError("Poll interval must be positive")
        if self.slow_poll_every < 0:
            raise SdcpProjectorError("slow_poll_every must not be negative")

    @classmethod
    def from_jsonable(cls, data: JsonableDict, base_config: Optional[SdcpProjectorClientConfig]=None) -> Self:
        """Creates a configuration from a JSON-compatible dict. Keys are the
           constructor argument names; missing keys fall back to the defaults.

           Raises SdcpProjectorError on an unknown key or a value of the wrong type."""
        unknown = set(data.keys()) - set(_JSON_KEYS)
        if len(unknown) > 0:
            raise SdcpProjectorError(f"Unknown projector config keys: {sorted(unknown)}")
        for key, value in data.items():
            if value is None:
                continue
            allowed_types = _JSON_KEY_TYPES[key]
            # JSON true/false load as bool, which isinstance() treats as int
            if isinstance(value, bool) or not isinstance(value, allowed_types):
                type_names = ' or '.join(t.__name__ for t in allowed_types)
                raise SdcpProjectorError(
                    f"Projector config key '{key}' must be {type_names}, not {type(value).__name__}: {value!r}")
        return cls(
            default_host=cast(Optional[str], data.get('default_host')),
            community=cast(Optional[str], data.get('community')),
            default_port=cast(Optional[int], data.get('default_port')),
            connect_timeout_secs=cast(Optional[float], data.get('connect_timeout_secs')),
            timeout_secs=cast(Optional[float], data.get('timeout_secs')),
            poll_interval_secs=cast(Optional[float], data.get('poll_interval_secs')),
            slow_poll_every=cast(Optional[int], data.get('slow_poll_every')),
            base_config=base_config,
          )

    def to_jsonable(self) -> JsonableDict:
        """Returns a JSON-compatible dict that from_jsonable() accepts."""
        return dict((key, getattr(self, key)) for key in _JSON_KEYS)

    def __str__(self) -> str:
        return (
            f"SdcpProjectorClientConfig("
            f"default_host={self.default_host}, "
            f"default_port={self.default_port}, "
            f"timeout_secs={self.timeout_secs!r})"
          )

    def __repr__(self) -> str:
        return str(self)

_JSON_KEYS: Tuple[str, ...] = (
    'default_host',
    'community',
    'default_port',
    'connect_timeout_secs',
    'timeout_secs',
    'poll_interval_secs',
    'slow_poll_every',
  )

_JSON_KEY_TYPES: Dict[str, Tuple[type, ...]] = {
    'default_host': (str,),
    'community': (str,),
    'default_port': (int,),
    'connect_timeout_secs': (int, float),
    'timeout_secs': (int, float),
    'poll_interval_secs': (int, float),
    'slow_poll_every': (int,),
  }

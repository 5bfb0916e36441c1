# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
SDCP projector client.

Provides device-level operations (power, power status, model name, lamp timer,
IP address) on top of an SdcpClientTransport.
"""

from __future__ import annotations

import threading

from ..internal_types import *
from ..constants import DEFAULT_PORT, DEFAULT_TIMEOUT, CONNECT_TIMEOUT
from ..pkg_logging import logger
from ..exceptions import SdcpProjectorError
from ..protocol import (
    ItemMeta,
    IpAddress,
    PowerStatus,
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

from .client_transport import SdcpClientTransport
from .tcp_client_transport import TcpSdcpClientTransport

if TYPE_CHECKING:
    from .client_config import SdcpProjectorClientConfig

class SdcpProjectorClient:
    """SDCP projector client.

    All operations are synchronous and mutually exclusive: one exchange completes
    before the next begins, whichever thread issued it. No operation raises on
    communication failure; queries return None and commands return nothing (or
    False, for send_power_command()). Values are never cached between calls.
    """

    transport: SdcpClientTransport

    _exchange_lock: threading.Lock
    """Held for the whole of each exchange, including opening the connection."""

    def __init__(
            self,
            host: Optional[str]=None,
            community: Optional[str]=None,
            *,
            port: int=DEFAULT_PORT,
            connect_timeout_secs: float=CONNECT_TIMEOUT,
            timeout_secs: float=DEFAULT_TIMEOUT,
            transport: Optional[SdcpClientTransport]=None,
          ):
        """Creates a client for the projector at host. Does not connect.

           Args:
             host: The hostname or IP address of the projector. Ignored if transport is provided.
             community: The 4-character community token. Ignored if transport is provided.
             port: The TCP port of the projector.
             connect_timeout_secs: Timeout for opening the connection.
             timeout_secs: Timeout for each read or write.
             transport: An existing transport to use instead of creating a TCP transport.
        """
        if transport is None:
            if host is None or community is None:
                raise SdcpProjectorError("host and community are required unless a transport is given")
            transport = TcpSdcpClientTransport(
                host,
                community,
                port=port,
                connect_timeout_secs=connect_timeout_secs,
                timeout_secs=timeout_secs,
              )
        self.transport = transport
        self._exchange_lock = threading.Lock()

    @classmethod
    def from_config(cls, config: SdcpProjectorClientConfig) -> Self:
        """Creates a client from a validated configuration.

        Raises SdcpProjectorError if the configuration is invalid.
        """
        config.validate()
        assert config.default_host is not None
        return cls(
            config.default_host,
            config.community,
            port=config.default_port,
            connect_timeout_secs=config.connect_timeout_secs,
            timeout_secs=config.timeout_secs,
          )

    def _set(self, item: ItemMeta, payload: bytes=b'') -> bool:
        with self._exchange_lock:
            try:
                if not self.transport.ensure_open():
                    return False
                return self.transport.send_set(item.item_number, payload)
            except Exception as e:
                logger.warning(f"{self}: Unexpected exception sending {item}: {e}", exc_info=True)
                return False

    def _get(self, item: ItemMeta, payload: bytes=b'') -> Optional[bytes]:
        with self._exchange_lock:
            try:
                if not self.transport.ensure_open():
                    return None
                return self.transport.send_get(item.item_number, payload)
            except Exception as e:
                logger.warning(f"{self}: Unexpected exception querying {item}: {e}", exc_info=True)
                return None

    def send_power_command(self, on: bool) -> bool:
        """Sends a power on or power off command.

        Returns True iff the command frame was written. The projector sends no
        acknowledgement, so True does not mean the power state changed; poll
        get_power_status() to confirm.
        """
        return self._set(POWER_ON if on else POWER_OFF)

    def set_power(self, on: bool) -> None:
        """Turns the projector on or off, best effort.

        Failures are not reported. Poll get_power_status() to confirm the effect.
        """
        if not self.send_power_command(on):
            logger.debug(f"{self}: power {'on' if on else 'off'} command was not sent")

    def get_power_status(self) -> Optional[PowerStatus]:
        """Returns the projector power status, or None if communication failed."""
        payload = self._get(POWER_STATUS)
        if payload is None:
            return None
        result = decode_power_status(payload)
        if result is None:
            logger.warning(f"{self}: Invalid power status payload: [{payload.hex(' ')}]")
        return result

    def get_model_name(self) -> Optional[str]:
        """Returns the projector model name, or None if communication failed."""
        payload = self._get(MODEL_NAME)
        if payload is None:
            return None
        return decode_model_name(payload)

    def get_lamp_timer(self) -> Optional[int]:
        """Returns the lamp timer in hours, or None if communication failed."""
        payload = self._get(LAMP_TIMER)
        if payload is None:
            return None
        result = decode_lamp_timer(payload)
        if result is None:
            logger.warning(f"{self}: Invalid lamp timer payload: [{payload.hex(' ')}]")
        return result

    def get_ip(self) -> Optional[IpAddress]:
        """Returns the IP address reported by the projector, or None if communication failed."""
        payload = self._get(IP_ADDRESS)
        if payload is None:
            return None
        result = decode_ip_address(payload)
        if result is None:
            logger.warning(f"{self}: Invalid IP address payload: [{payload.hex(' ')}]")
        return result

    def close(self) -> None:
        """Releases the connection. Never raises."""
        try:
            self.transport.close()
        except Exception:
            logger.debug(f"{self}: Exception while closing transport", exc_info=True)

    def __enter__(self) -> Self:
        return self

    def __exit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc_val: Optional[BaseException],
            exc_tb: Optional[TracebackType],
          ) -> None:
        self.close()

    def __str__(self) -> str:
        return f"SdcpProjectorClient(transport={self.transport})"

    def __repr__(self) -> str:
       return str(self)

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
SDCP projector client abstract transport interface.

Provides a low-level abstract interface for sending SET and GET frames to an
SDCP projector and receiving raw GET response payloads. Does not provide any
higher-level abstractions such as decoded device state.

This abstraction allows the device facade to be exercised against instrumented
or alternate transports.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..internal_types import *

class SdcpClientTransport(ABC):
    @property
    @abstractmethod
    def is_open(self) -> bool:
        """True iff a connection to the projector is currently open."""
        raise NotImplementedError()

    @abstractmethod
    def ensure_open(self) -> bool:
        """Opens the connection if it is not already open.

        Returns False if the connection could not be opened. Never raises on I/O failure.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    @abstractmethod
    def close(self) -> None:
        """Closes the connection. Idempotent; never raises.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    @abstractmethod
    def send_set(self, item_number: int, payload: bytes=b'') -> bool:
        """Sends a SET frame. Returns True iff the whole frame was written.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    @abstractmethod
    def send_get(self, item_number: int, payload: bytes=b'') -> Optional[bytes]:
        """Sends a GET frame and returns the validated response payload,
        or None if the exchange failed.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    def __enter__(self) -> Self:
        """Enters a context that will close the transport on exit."""
        return self

    def __exit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType],
          ) -> None:
        self.close()

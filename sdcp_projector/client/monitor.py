# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
SDCP projector status monitor.

Polls a projector's power status on a fixed interval from a background thread
and, after every few successful polls, also refreshes the slow-changing model
name and lamp hours. Interested parties receive a ProjectorState snapshot after
each poll.
"""

from __future__ import annotations

import threading
import time

from ..internal_types import *
from ..constants import POLL_INTERVAL, INITIAL_POLL_DELAY, SLOW_POLL_EVERY
from ..pkg_logging import logger
from ..protocol import PowerStatus

from .client_impl import SdcpProjectorClient

class ProjectorState:
    """A snapshot of what is known about the projector."""
    online: bool = False
    power_status: Optional[PowerStatus] = None
    model_name: Optional[str] = None
    lamp_hours: Optional[int] = None
    last_success_time: Optional[float] = None
    """time.time() of the last successful power status poll"""

    def __init__(
            self,
            online: bool=False,
            power_status: Optional[PowerStatus]=None,
            model_name: Optional[str]=None,
            lamp_hours: Optional[int]=None,
            last_success_time: Optional[float]=None,
          ):
        self.online = online
        self.power_status = power_status
        self.model_name = model_name
        self.lamp_hours = lamp_hours
        self.last_success_time = last_success_time

    @property
    def power(self) -> Optional[bool]:
        """True if the projector is on (or warming/cooling), False in standby, None if unknown."""
        if self.power_status is None:
            return None
        return self.power_status.is_powered

    def copy(self) -> ProjectorState:
        return ProjectorState(
            online=self.online,
            power_status=self.power_status,
            model_name=self.model_name,
            lamp_hours=self.lamp_hours,
            last_success_time=self.last_success_time,
          )

    def to_jsonable(self) -> JsonableDict:
        return {
            "online": self.online,
            "power": self.power,
            "power_status": None if self.power_status is None else self.power_status.value,
            "model_name": self.model_name,
            "lamp_hours": self.lamp_hours,
            "last_success_time": self.last_success_time,
          }

    def __str__(self) -> str:
        return f"ProjectorState({self.to_jsonable()})"

    def __repr__(self) -> str:
        return str(self)

StateCallback = Callable[[ProjectorState], None]

class SdcpProjectorMonitor:
    """Background poller for one projector.

    The monitor holds the only counter state; the client itself keeps none.
    """

    client: SdcpProjectorClient
    poll_interval_secs: float
    initial_delay_secs: float
    slow_poll_every: int
    on_update: Optional[StateCallback]

    success_count: int = 0
    thread: Optional[threading.Thread] = None

    _state: ProjectorState
    _state_lock: threading.Lock
    _poll_lock: threading.Lock
    _stop_event: threading.Event

    def __init__(
            self,
            client: SdcpProjectorClient,
            poll_interval_secs: float=POLL_INTERVAL,
            initial_delay_secs: float=INITIAL_POLL_DELAY,
            slow_poll_every: int=SLOW_POLL_EVERY,
            on_update: Optional[StateCallback]=None,
          ):
        self.client = client
        self.poll_interval_secs = poll_interval_secs
        self.initial_delay_secs = initial_delay_secs
        self.slow_poll_every = slow_poll_every
        self.on_update = on_update
        self._state = ProjectorState()
        self._state_lock = threading.Lock()
        self._poll_lock = threading.Lock()
        self._stop_event = threading.Event()

    @property
    def state(self) -> ProjectorState:
        """A copy of the most recent snapshot."""
        with self._state_lock:
            return self._state.copy()

    def poll_once(self) -> ProjectorState:
        """Runs one poll cycle synchronously and returns the resulting snapshot.
           Cycles are serialized, so this may be called while the polling thread runs."""
        with self._poll_lock:
            state = self._poll()
        if self.on_update is not None:
            try:
                self.on_update(state.copy())
            except Exception:
                logger.warning(f"{self}: Exception in state update callback", exc_info=True)
        return state

    def _poll(self) -> ProjectorState:
        power_status = self.client.get_power_status()
        with self._state_lock:
            state = self._state.copy()
        if power_status is None:
            if state.online:
                logger.info(f"{self}: Projector went offline")
            state.online = False
        else:
            if not state.online:
                logger.info(f"{self}: Projector is online")
            state.online = True
            state.power_status = power_status
            state.last_success_time = time.time()
            self.success_count += 1
            if self.success_count > self.slow_poll_every:
                model_name = self.client.get_model_name()
                if model_name is not None:
                    state.model_name = model_name
                lamp_hours = self.client.get_lamp_timer()
                if lamp_hours is not None:
                    state.lamp_hours = lamp_hours
                self.success_count = 0
        with self._state_lock:
            self._state = state
        return state

    def _run(self) -> None:
        if self._stop_event.wait(self.initial_delay_secs):
            return
        while True:
            try:
                self.poll_once()
            except Exception as e:
                logger.warning(f"{self}: Exception while polling projector: {e}", exc_info=True)
            if self._stop_event.wait(self.poll_interval_secs):
                break
        logger.debug(f"{self}: Polling stopped")

    def start(self) -> None:
        """Starts polling on a daemon thread. Has no effect if already started."""
        if self.thread is not None:
            return
        self._stop_event.clear()
        self.thread = threading.Thread(target=self._run, name=f"sdcp-monitor-{id(self):x}", daemon=True)
        self.thread.start()

    def stop(self, timeout_secs: Optional[float]=None) -> None:
        """Stops polling and waits for the polling thread to exit. A poll already in
           progress finishes first, bounded by the client's timeouts."""
        self._stop_event.set()
        thread = self.thread
        self.thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout_secs)

    def __enter__(self) -> Self:
        self.start()
        return self

    def __exit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc_val: Optional[BaseException],
            exc_tb: Optional[TracebackType],
          ) -> None:
        self.stop()

    def __str__(self) -> str:
        return f"SdcpProjectorMonitor({self.client})"

    def __repr__(self) -> str:
        return str(self)

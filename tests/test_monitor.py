"""Tests for the background status monitor."""

import threading
import time

from sdcp_projector import PowerStatus, ProjectorState, SdcpProjectorMonitor


class FakeClient:
    def __init__(self, statuses, model_name="VPL-HW45ES", lamp_hours=300):
        self.statuses = list(statuses)
        self.model_name = model_name
        self.lamp_hours = lamp_hours
        self.model_queries = 0
        self.lamp_queries = 0

    def get_power_status(self):
        if len(self.statuses) == 0:
            return PowerStatus.POWER_ON
        return self.statuses.pop(0)

    def get_model_name(self):
        self.model_queries += 1
        return self.model_name

    def get_lamp_timer(self):
        self.lamp_queries += 1
        return self.lamp_hours


def test_offline_when_no_status():
    monitor = SdcpProjectorMonitor(FakeClient([None]))
    state = monitor.poll_once()
    assert not state.online
    assert state.power is None


def test_online_with_status():
    monitor = SdcpProjectorMonitor(FakeClient([PowerStatus.STANDBY]))
    state = monitor.poll_once()
    assert state.online
    assert state.power_status is PowerStatus.STANDBY
    assert state.power is False
    assert state.last_success_time is not None


def test_goes_offline_keeps_last_values():
    monitor = SdcpProjectorMonitor(FakeClient([PowerStatus.POWER_ON, None]))
    monitor.poll_once()
    state = monitor.poll_once()
    assert not state.online
    assert state.power_status is PowerStatus.POWER_ON


def test_slow_refresh_after_enough_successes():
    client = FakeClient([])
    monitor = SdcpProjectorMonitor(client, slow_poll_every=3)
    for _ in range(3):
        state = monitor.poll_once()
    assert client.model_queries == 0
    assert state.model_name is None

    state = monitor.poll_once()
    assert client.model_queries == 1
    assert client.lamp_queries == 1
    assert state.model_name == "VPL-HW45ES"
    assert state.lamp_hours == 300
    assert monitor.success_count == 0


def test_failed_polls_do_not_count():
    client = FakeClient([None, None, PowerStatus.POWER_ON, PowerStatus.POWER_ON])
    monitor = SdcpProjectorMonitor(client, slow_poll_every=1)
    for _ in range(3):
        monitor.poll_once()
    assert client.model_queries == 0
    monitor.poll_once()
    assert client.model_queries == 1


def test_slow_refresh_keeps_old_values_on_failure():
    client = FakeClient([])
    monitor = SdcpProjectorMonitor(client, slow_poll_every=0)
    monitor.poll_once()
    client.model_name = None
    client.lamp_hours = None
    state = monitor.poll_once()
    assert state.model_name == "VPL-HW45ES"
    assert state.lamp_hours == 300


def test_callback_errors_are_contained():
    def on_update(state):
        raise ValueError("listener failed")

    monitor = SdcpProjectorMonitor(FakeClient([PowerStatus.STANDBY]), on_update=on_update)
    assert monitor.poll_once().online


def test_state_is_a_copy():
    monitor = SdcpProjectorMonitor(FakeClient([PowerStatus.STANDBY]))
    monitor.poll_once()
    monitor.state.online = False
    assert monitor.state.online


def test_state_to_jsonable():
    state = ProjectorState(online=True, power_status=PowerStatus.COOLING_1, lamp_hours=12)
    assert state.to_jsonable() == {
        "online": True,
        "power": True,
        "power_status": "cooling-1",
        "model_name": None,
        "lamp_hours": 12,
        "last_success_time": None,
    }


def test_background_polling():
    updates = []
    done = threading.Event()

    def on_update(state):
        updates.append(state)
        if len(updates) >= 3:
            done.set()

    monitor = SdcpProjectorMonitor(
        FakeClient([PowerStatus.STARTUP]),
        poll_interval_secs=0.01,
        initial_delay_secs=0.0,
        on_update=on_update,
    )
    with monitor:
        assert done.wait(timeout=5)
    assert monitor.thread is None
    assert updates[0].power_status is PowerStatus.STARTUP
    assert updates[-1].power_status is PowerStatus.POWER_ON


def test_stop_before_first_poll():
    client = FakeClient([])
    monitor = SdcpProjectorMonitor(client, initial_delay_secs=10.0)
    monitor.start()
    monitor.stop(timeout_secs=5)
    assert monitor.state.online is False


class OverlapDetectingClient(FakeClient):
    """Records whether two status queries ever ran at the same time."""

    def __init__(self):
        super().__init__([])
        self.active = 0
        self.overlapped = False
        self.lock = threading.Lock()

    def get_power_status(self):
        with self.lock:
            self.active += 1
            if self.active > 1:
                self.overlapped = True
        time.sleep(0.001)
        with self.lock:
            self.active -= 1
        return PowerStatus.POWER_ON


def test_concurrent_poll_once_is_serialized():
    client = OverlapDetectingClient()
    monitor = SdcpProjectorMonitor(client, slow_poll_every=1000)

    def worker():
        for _ in range(25):
            monitor.poll_once()

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    assert not client.overlapped
    assert monitor.success_count == 100

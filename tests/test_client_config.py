"""Tests for configuration layering, host resolution and validation."""

import pytest

from sdcp_projector import (
    SdcpProjectorClientConfig,
    SdcpProjectorError,
    resolve_projector_tcp_host,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("SDCP_PROJECTOR_HOST", "SDCP_PROJECTOR_PORT", "SDCP_PROJECTOR_COMMUNITY"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = SdcpProjectorClientConfig()
    assert config.default_host is None
    assert config.default_port == 53484
    assert config.community == "SONY"
    assert config.connect_timeout_secs == 5.0
    assert config.timeout_secs == 2.0
    assert config.poll_interval_secs == 5.0
    assert config.slow_poll_every == 10


def test_environment(monkeypatch):
    monkeypatch.setenv("SDCP_PROJECTOR_HOST", "10.1.1.1")
    monkeypatch.setenv("SDCP_PROJECTOR_PORT", "6000")
    monkeypatch.setenv("SDCP_PROJECTOR_COMMUNITY", "PJTK")
    config = SdcpProjectorClientConfig()
    assert (config.default_host, config.default_port, config.community) == ("10.1.1.1", 6000, "PJTK")


def test_invalid_port_environment(monkeypatch):
    monkeypatch.setenv("SDCP_PROJECTOR_PORT", "abc")
    with pytest.raises(SdcpProjectorError):
        SdcpProjectorClientConfig()


def test_arguments_override_base_config():
    base = SdcpProjectorClientConfig("10.0.0.1", "AAAA", timeout_secs=1.0)
    config = SdcpProjectorClientConfig(community="BBBB", base_config=base)
    assert config.default_host == "10.0.0.1"
    assert config.community == "BBBB"
    assert config.timeout_secs == 1.0


def test_host_with_port():
    config = SdcpProjectorClientConfig("tcp://projector.lan:5000")
    assert config.default_host == "projector.lan"
    assert config.default_port == 5000


def test_validate_ok():
    SdcpProjectorClientConfig("projector.lan", "SONY").validate()


def test_validate_missing_host():
    with pytest.raises(SdcpProjectorError, match="No network address"):
        SdcpProjectorClientConfig(community="SONY").validate()


@pytest.mark.parametrize("community", ["SON", "SONYS", "SöNY"])
def test_validate_bad_community(community):
    with pytest.raises(SdcpProjectorError):
        SdcpProjectorClientConfig("projector.lan", community).validate()


def test_validate_empty_community():
    config = SdcpProjectorClientConfig("projector.lan")
    config.community = ""
    with pytest.raises(SdcpProjectorError, match="No community"):
        config.validate()


def test_validate_bad_timeout():
    with pytest.raises(SdcpProjectorError):
        SdcpProjectorClientConfig("projector.lan", timeout_secs=0).validate()


def test_jsonable_round_trip():
    config = SdcpProjectorClientConfig("projector.lan", "PJTK", poll_interval_secs=3.0)
    copy = SdcpProjectorClientConfig.from_jsonable(config.to_jsonable())
    assert copy.to_jsonable() == config.to_jsonable()


def test_from_jsonable_unknown_key():
    with pytest.raises(SdcpProjectorError, match="Unknown"):
        SdcpProjectorClientConfig.from_jsonable({"host": "projector.lan"})


@pytest.mark.parametrize("host, expected", [
    ("projector.lan", ("projector.lan", 53484)),
    ("tcp://projector.lan", ("projector.lan", 53484)),
    ("10.0.0.2:1234", ("10.0.0.2", 1234)),
    ("fe80::1", ("fe80::1", 53484)),
    ("[fe80::1]:1234", ("fe80::1", 1234)),
])
def test_resolve_host(host, expected):
    assert resolve_projector_tcp_host(host) == expected


def test_resolve_host_from_environment(monkeypatch):
    monkeypatch.setenv("SDCP_PROJECTOR_HOST", "envhost")
    monkeypatch.setenv("SDCP_PROJECTOR_PORT", "7000")
    assert resolve_projector_tcp_host() == ("envhost", 7000)


@pytest.mark.parametrize("host", ["http://projector.lan", "projector.lan:http", "projector.lan:70000", "[fe80::1"])
def test_resolve_host_invalid(host):
    with pytest.raises(SdcpProjectorError):
        resolve_projector_tcp_host(host)


def test_resolve_host_missing():
    with pytest.raises(SdcpProjectorError):
        resolve_projector_tcp_host()


@pytest.mark.parametrize("data, key", [
    ({"default_host": "10.0.0.5", "default_port": "4000"}, "default_port"),
    ({"default_host": "10.0.0.5", "default_port": 4000.0}, "default_port"),
    ({"default_host": "10.0.0.5", "timeout_secs": "2"}, "timeout_secs"),
    ({"default_host": "10.0.0.5", "connect_timeout_secs": True}, "connect_timeout_secs"),
    ({"default_host": "10.0.0.5", "community": 1234}, "community"),
    ({"default_host": 10, "community": "SONY"}, "default_host"),
    ({"default_host": "10.0.0.5", "slow_poll_every": 2.5}, "slow_poll_every"),
])
def test_from_jsonable_wrong_type(data, key):
    with pytest.raises(SdcpProjectorError, match=key):
        SdcpProjectorClientConfig.from_jsonable(data)


def test_from_jsonable_accepts_int_seconds_and_nulls():
    config = SdcpProjectorClientConfig.from_jsonable(
        {"default_host": "10.0.0.5", "timeout_secs": 3, "poll_interval_secs": 2.5, "community": None})
    config.validate()
    assert config.timeout_secs == 3
    assert config.poll_interval_secs == 2.5
    assert config.community == "SONY"

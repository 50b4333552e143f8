"""
Tests for the command-line interface.
"""

import aiohttp
import pytest
from click.testing import CliRunner

from lighting_service import cli
from lighting_service.api import server as server_module
from lighting_service.api.server import ServerBindError
from lighting_service.client import DeviceNotFoundError
from lighting_service.config import reset_config
from lighting_service.registry import SEED_DEVICES, Device

OFFLINE_URL = "http://offline:1"


class FakeClient:
    """Stands in for LightingClient without a network."""

    calls = []

    def __init__(self, base_url):
        self.base_url = base_url

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        pass

    def _check_reachable(self):
        if self.base_url == OFFLINE_URL:
            raise aiohttp.ClientConnectionError("Cannot connect to host offline:1")

    async def list_devices(self):
        FakeClient.calls.append(("list", self.base_url))
        self._check_reachable()
        return list(SEED_DEVICES)

    async def set_value(self, device_id, value):
        FakeClient.calls.append(("set", self.base_url, device_id, value))
        self._check_reachable()
        if device_id == "zzzz9":
            raise DeviceNotFoundError(device_id)
        return Device(id=device_id, name="Foyer 1", dimmable=True, value=value)


@pytest.fixture(autouse=True)
def fake_client(monkeypatch):
    FakeClient.calls = []
    monkeypatch.setattr(cli, "LightingClient", FakeClient)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def runner():
    return CliRunner()


class TestDevicesCommand:
    """Tests for `lighting-service devices`."""

    def test_lists_devices(self, runner):
        result = runner.invoke(cli.main, ["devices"])

        assert result.exit_code == 0
        assert "Kitchen" in result.output
        assert "Foyer 2" in result.output
        assert FakeClient.calls == [("list", "http://localhost:3000")]

    def test_custom_url(self, runner):
        result = runner.invoke(cli.main, ["devices", "--url", "http://lamps:8080"])

        assert result.exit_code == 0
        assert FakeClient.calls == [("list", "http://lamps:8080")]

    def test_service_unreachable(self, runner):
        result = runner.invoke(cli.main, ["devices", "--url", OFFLINE_URL])

        assert result.exit_code == 1
        assert "Could not reach lighting service" in result.output
        assert "Traceback" not in result.output


class TestSetCommand:
    """Tests for `lighting-service set`."""

    def test_set_value(self, runner):
        result = runner.invoke(cli.main, ["set", "aa901", "0.42"])

        assert result.exit_code == 0
        assert "0.42" in result.output
        assert FakeClient.calls == [("set", "http://localhost:3000", "aa901", 0.42)]

    def test_unknown_device(self, runner):
        result = runner.invoke(cli.main, ["set", "zzzz9", "0.5"])

        assert result.exit_code == 1
        assert "Device not found" in result.output

    def test_service_unreachable(self, runner):
        result = runner.invoke(cli.main, ["set", "aa901", "0.5", "--url", OFFLINE_URL])

        assert result.exit_code == 1
        assert "Could not reach lighting service" in result.output

    def test_value_must_be_number(self, runner):
        result = runner.invoke(cli.main, ["set", "aa901", "bright"])

        assert result.exit_code != 0
        assert FakeClient.calls == []


class TestServeCommand:
    """Tests for `lighting-service serve`."""

    def test_uses_overrides(self, runner, monkeypatch):
        seen = []
        monkeypatch.setattr(server_module, "run_server", lambda config: seen.append(config))

        result = runner.invoke(cli.main, ["serve", "--port", "8080", "--delay", "0", "--host", "127.0.0.1"])

        assert result.exit_code == 0
        assert seen[0].server.port == 8080
        assert seen[0].server.delay_ms == 0
        assert seen[0].server.host == "127.0.0.1"

    def test_port_from_environment(self, runner, monkeypatch):
        seen = []
        monkeypatch.setattr(server_module, "run_server", lambda config: seen.append(config))
        monkeypatch.setenv("PORT", "5050")

        result = runner.invoke(cli.main, ["serve"])

        assert result.exit_code == 0
        assert seen[0].server.port == 5050
        assert "5050" in result.output

    def test_bind_failure_exits(self, runner, monkeypatch):
        def fail(config):
            raise ServerBindError("Could not bind 0.0.0.0:3000: address in use")

        monkeypatch.setattr(server_module, "run_server", fail)

        result = runner.invoke(cli.main, ["serve"])

        assert result.exit_code == 1
        assert "Could not start" in result.output

    def test_port_out_of_range_exits(self, runner, monkeypatch):
        monkeypatch.setenv("PORT", "70000")

        result = runner.invoke(cli.main, ["serve"])

        assert result.exit_code == 1
        assert "Could not start" in result.output

    def test_banner_brackets_ipv6_host(self, runner, monkeypatch):
        monkeypatch.setattr(server_module, "run_server", lambda config: None)

        result = runner.invoke(cli.main, ["serve", "--port", "8080"])

        assert result.exit_code == 0
        assert "http://[::]:8080" in result.output

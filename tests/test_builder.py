"""Tests for the client builder."""

from unittest.mock import Mock

import httpx
import pytest

from dwolla_toolkit.core import ClientSettings, ConfigError, save_settings
from dwolla_toolkit.core.token_manager import encode_credentials
from dwolla_toolkit.client import DwollaClient, generate_client


@pytest.fixture
def temp_config_dir(tmp_path, monkeypatch):
    """Create temporary config directory."""
    config_dir = tmp_path / "dwolla_config"
    config_dir.mkdir()
    monkeypatch.setenv("DWOLLA_TOOLKIT_HOME", str(config_dir))
    monkeypatch.delenv("DWOLLA_CLIENT_ID", raising=False)
    monkeypatch.delenv("DWOLLA_SANDBOX", raising=False)
    monkeypatch.setenv("DWOLLA_CLIENT_SECRET", "secret")
    return config_dir


def test_generate_client_from_saved_settings(temp_config_dir):
    save_settings(ClientSettings(client_id="saved-id", sandbox=False, timeout_seconds=4.0))

    client = generate_client(http_client=Mock(spec=httpx.Client))

    assert isinstance(client, DwollaClient)
    assert client.sandbox is False
    assert client.timeout_seconds == 4.0
    assert client.token_manager.credentials == encode_credentials("saved-id", "secret")
    assert client.token_manager.token is None


def test_generate_client_defaults_to_sandbox(temp_config_dir, monkeypatch):
    monkeypatch.setenv("DWOLLA_CLIENT_ID", "env-id")

    client = generate_client(http_client=Mock(spec=httpx.Client))

    assert client.sandbox is True
    assert client.base_url == "https://api-sandbox.dwolla.com"


def test_generate_client_env_overrides_saved_mode(temp_config_dir, monkeypatch):
    save_settings(ClientSettings(client_id="saved-id", sandbox=True))
    monkeypatch.setenv("DWOLLA_SANDBOX", "false")

    client = generate_client(http_client=Mock(spec=httpx.Client))

    assert client.sandbox is False


def test_generate_client_explicit_mode_wins(temp_config_dir, monkeypatch):
    save_settings(ClientSettings(client_id="saved-id", sandbox=False))
    monkeypatch.setenv("DWOLLA_SANDBOX", "false")

    client = generate_client(sandbox=True, http_client=Mock(spec=httpx.Client))

    assert client.sandbox is True


def test_generate_client_without_credentials(temp_config_dir):
    with pytest.raises(ConfigError):
        generate_client()

"""
Tests for ProviderConfig and load_config.
"""

import pytest
from pydantic import ValidationError

from sfxprovider.config import DEFAULT_API_URL, ProviderConfig, load_config


class TestProviderConfig:

    def test_defaults(self):
        config = ProviderConfig()
        assert config.auth_token is None
        assert config.api_url == DEFAULT_API_URL
        assert config.timeout_seconds == 30.0
        assert config.log_level == "info"

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("SFX_AUTH_TOKEN", "from-env")
        monkeypatch.setenv("SFX_API_URL", "https://api.eu0.signalfx.com/")
        config = ProviderConfig()
        assert config.auth_token == "from-env"
        assert config.api_url == "https://api.eu0.signalfx.com"

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("SFX_AUTH_TOKEN=from-dotenv\n")
        assert ProviderConfig().auth_token == "from-dotenv"

    def test_state_file_expanded(self, monkeypatch, tmp_path):
        monkeypatch.setenv("STATE_ROOT", str(tmp_path))
        config = ProviderConfig(state_file="$STATE_ROOT/state.json")
        assert config.get_state_path() == tmp_path / "state.json"

    def test_invalid_timeout(self):
        with pytest.raises(ValidationError):
            ProviderConfig(timeout_seconds=0)


class TestLoadConfig:

    def test_none_overrides_ignored(self, monkeypatch):
        monkeypatch.setenv("SFX_AUTH_TOKEN", "from-env")
        config = load_config(auth_token=None, log_level="debug")
        assert config.auth_token == "from-env"
        assert config.log_level == "debug"

    def test_explicit_override_wins(self, monkeypatch):
        monkeypatch.setenv("SFX_AUTH_TOKEN", "from-env")
        assert load_config(auth_token="explicit").auth_token == "explicit"

    def test_fresh_instance_each_call(self):
        assert load_config() is not load_config()

"""
Tests for endpoint configuration loading.
"""

import dataclasses
import os

import pytest

from kutimo.config import DEFAULT_TIMEOUT, EndpointConfig
from kutimo.env import load_env
from kutimo.errors import ConfigError


class TestEndpointConfig:

    def test_trailing_slash_stripped(self):
        config = EndpointConfig(endpoint="https://korekton.example.org/api/")
        assert config.score_item_url == "https://korekton.example.org/api/scoreItem"

    def test_defaults(self):
        config = EndpointConfig(endpoint="http://localhost:8080")
        assert config.timeout == DEFAULT_TIMEOUT
        assert config.auth == ("", "")

    @pytest.mark.parametrize("endpoint", ["", "not-a-url", "ftp://example.org", None])
    def test_invalid_endpoint(self, endpoint):
        with pytest.raises(ConfigError):
            EndpointConfig(endpoint=endpoint)

    @pytest.mark.parametrize("timeout", [0, -1, "soon"])
    def test_invalid_timeout(self, timeout):
        with pytest.raises(ConfigError):
            EndpointConfig(endpoint="http://localhost", timeout=timeout)

    def test_immutable(self, endpoint_config):
        with pytest.raises(dataclasses.FrozenInstanceError):
            endpoint_config.timeout = 99

    def test_password_hidden(self, endpoint_config):
        assert "s3cret" not in repr(endpoint_config)
        assert "s3cret" not in str(endpoint_config.masked())
        assert endpoint_config.masked()["korekton.password"] == "********"


class TestFromMapping:

    def test_extension_setting_names(self):
        config = EndpointConfig.from_mapping({
            "korekton.endpoint": "https://korekton.example.org",
            "korekton.timeout": "12",
            "korekton.user": "tao",
            "korekton.password": "pw",
        })
        assert config.endpoint == "https://korekton.example.org"
        assert config.timeout == 12
        assert config.auth == ("tao", "pw")

    def test_missing_endpoint(self):
        with pytest.raises(ConfigError, match="korekton.endpoint"):
            EndpointConfig.from_mapping({"korekton.timeout": 5})

    def test_missing_timeout_uses_default(self):
        config = EndpointConfig.from_mapping({"korekton.endpoint": "http://localhost"})
        assert config.timeout == DEFAULT_TIMEOUT


class TestFromEnv:

    def test_explicit_environ(self):
        config = EndpointConfig.from_env({
            "KUTIMO_KOREKTON_ENDPOINT": "http://scoring.local",
            "KUTIMO_KOREKTON_TIMEOUT": "7",
            "KUTIMO_KOREKTON_USER": "u",
            "KUTIMO_KOREKTON_PASSWORD": "p",
        })
        assert config.score_item_url == "http://scoring.local/scoreItem"
        assert config.timeout == 7
        assert config.auth == ("u", "p")

    def test_missing_endpoint_env(self):
        with pytest.raises(ConfigError, match="KUTIMO_KOREKTON_ENDPOINT"):
            EndpointConfig.from_env({})

    def test_dotenv_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        # setenv first so teardown removes whatever load_dotenv writes
        for var in ("KUTIMO_KOREKTON_ENDPOINT", "KUTIMO_KOREKTON_TIMEOUT",
                    "KUTIMO_KOREKTON_USER", "KUTIMO_KOREKTON_PASSWORD"):
            monkeypatch.setenv(var, "")
            monkeypatch.delenv(var)
        (tmp_path / ".env").write_text(
            "KUTIMO_KOREKTON_ENDPOINT=http://from-dotenv.local\n"
            "KUTIMO_KOREKTON_TIMEOUT=9\n"
        )
        config = EndpointConfig.from_env()
        assert config.endpoint == "http://from-dotenv.local"
        assert config.timeout == 9


class TestLoadEnv:

    def test_no_file(self, tmp_path):
        assert load_env(tmp_path / ".env") is False

    def test_process_env_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("KUTIMO_TEST_VAR", "from-process")
        env_file = tmp_path / ".env"
        env_file.write_text("KUTIMO_TEST_VAR=from-file\n")
        load_env(env_file)
        assert os.environ["KUTIMO_TEST_VAR"] == "from-process"

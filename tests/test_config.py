"""Tests for configuration loading."""

import pytest

from config import TrackerConfig
from core.errors import ConfigurationError


class TestFromEnv:
    """Tests for TrackerConfig.from_env()."""

    def test_defaults(self, monkeypatch):
        for name in ("MESSAGE_POLL_INTERVAL", "TRANSFER_MAX_ATTEMPTS", "OPERATION_TTL"):
            monkeypatch.delenv(name, raising=False)

        config = TrackerConfig.from_env()

        assert config.message_poll_interval == 6.0
        assert config.transfer_max_attempts == 60
        assert config.operation_ttl == 3600.0

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("CIRCLE_IRIS_API", "https://iris-api-sandbox.circle.com/v2/messages")
        monkeypatch.setenv("MESSAGE_POLL_INTERVAL", "2.5")
        monkeypatch.setenv("TRANSFER_MAX_ATTEMPTS", "5")

        config = TrackerConfig.from_env()

        assert config.iris_api == "https://iris-api-sandbox.circle.com/v2/messages"
        assert config.message_poll_interval == 2.5
        assert config.transfer_max_attempts == 5

    def test_bad_number(self, monkeypatch):
        monkeypatch.setenv("MESSAGE_MAX_ATTEMPTS", "many")

        with pytest.raises(ConfigurationError):
            TrackerConfig.from_env()


class TestFromFile:
    """Tests for TrackerConfig.from_file()."""

    def test_sections(self, tmp_path):
        path = tmp_path / "tracker.toml"
        path.write_text(
            'iris_api = "http://localhost:9000/v2/messages"\n'
            "operation_ttl = 60\n"
            "\n"
            "[message]\n"
            "poll_interval = 1\n"
            "max_attempts = 3\n"
            "\n"
            "[transfer]\n"
            "startup_delay = 0\n"
        )

        config = TrackerConfig.from_file(path)

        assert config.iris_api == "http://localhost:9000/v2/messages"
        assert config.operation_ttl == 60.0
        assert config.message_poll_interval == 1.0
        assert config.message_max_attempts == 3
        assert config.transfer_startup_delay == 0.0
        assert config.transfer_poll_interval == 8.0

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            TrackerConfig.from_file(tmp_path / "missing.toml")

    def test_unparseable_file(self, tmp_path):
        path = tmp_path / "broken.toml"
        path.write_text("[message\npoll_interval = \n")

        with pytest.raises(ConfigurationError):
            TrackerConfig.from_file(path)


class TestValidate:
    """Tests for TrackerConfig.validate()."""

    def test_defaults_are_valid(self):
        TrackerConfig().validate()

    @pytest.mark.parametrize("field, value", [
        ("layerzero_scan_api", ""),
        ("message_poll_interval", 0),
        ("transfer_max_attempts", 0),
        ("message_startup_delay", -1),
        ("request_timeout", 0),
        ("operation_ttl", -5),
    ])
    def test_rejects(self, field, value):
        config = TrackerConfig(**{field: value})

        with pytest.raises(ConfigurationError):
            config.validate()

    def test_ttl_must_outlive_tracking_budget(self):
        # Transfer budget: 60 * 8 + 5 = 485 seconds
        with pytest.raises(ConfigurationError, match="tracking budget"):
            TrackerConfig(operation_ttl=400).validate()

        TrackerConfig(operation_ttl=485).validate()

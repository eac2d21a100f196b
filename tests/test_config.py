"""Unit tests for configuration (pushpipe/config.py)."""

import logging

import pytest

from pushpipe import config


@pytest.fixture
def mock_pushpipe_env(monkeypatch):
    """Provide pushpipe environment variables."""
    monkeypatch.setenv("PUSHPIPE_LOG_LEVEL", "debug")
    monkeypatch.setenv("PUSHPIPE_EXTENSIONS_FILE", "/etc/pushpipe/extensions.yaml")
    monkeypatch.setenv("PUSHPIPE_WARN_UNHANDLED_ERRORS", "no")


@pytest.fixture
def mock_pushpipe_env_defaults(monkeypatch):
    """Clear pushpipe environment variables to test defaults."""
    for var in [
        "PUSHPIPE_LOG_LEVEL",
        "PUSHPIPE_EXTENSIONS_FILE",
        "PUSHPIPE_WARN_UNHANDLED_ERRORS",
    ]:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def restore_package_logger():
    package_logger = logging.getLogger("pushpipe")
    level = package_logger.level
    yield package_logger
    package_logger.setLevel(level)


class TestStreamConfig:
    """Test suite for StreamConfig."""

    def test_defaults(self, mock_pushpipe_env_defaults):
        settings = config.StreamConfig()

        assert settings.log_level == "WARNING"
        assert settings.extensions_file is None
        assert settings.warn_unhandled_errors is True

    def test_from_environment(self, mock_pushpipe_env):
        settings = config.StreamConfig()

        assert settings.log_level == "DEBUG"
        assert settings.extensions_file == "/etc/pushpipe/extensions.yaml"
        assert settings.warn_unhandled_errors is False

    def test_empty_extensions_file_is_unset(self, monkeypatch):
        monkeypatch.setenv("PUSHPIPE_EXTENSIONS_FILE", "")

        assert config.StreamConfig().extensions_file is None

    def test_repr(self, mock_pushpipe_env_defaults):
        assert repr(config.StreamConfig()) == (
            "StreamConfig(log_level=WARNING, extensions_file=None, "
            "warn_unhandled_errors=True)"
        )

    @pytest.mark.parametrize(
        "raw,expected",
        [("1", True), ("TRUE", True), ("on", True), ("0", False), ("off", False), ("", False)],
    )
    def test_get_bool(self, monkeypatch, raw, expected):
        monkeypatch.setenv("PUSHPIPE_TEST_FLAG", raw)

        assert config.get_bool("PUSHPIPE_TEST_FLAG", not expected) is expected

    def test_get_bool_default(self, monkeypatch):
        monkeypatch.delenv("PUSHPIPE_TEST_FLAG", raising=False)

        assert config.get_bool("PUSHPIPE_TEST_FLAG", True) is True


class TestGetConfig:
    """Test suite for the cached process-wide config."""

    def test_cached(self):
        assert config.get_config() is config.get_config()

    def test_reset_rereads_environment(self, monkeypatch):
        monkeypatch.setenv("PUSHPIPE_LOG_LEVEL", "ERROR")
        first = config.get_config()

        monkeypatch.setenv("PUSHPIPE_LOG_LEVEL", "INFO")
        config.reset_config()

        assert first.log_level == "ERROR"
        assert config.get_config().log_level == "INFO"


class TestConfigureLogging:
    """Test suite for configure_logging()."""

    def test_explicit_level(self, restore_package_logger):
        package_logger = config.configure_logging("info")

        assert package_logger is restore_package_logger
        assert package_logger.level == logging.INFO

    def test_level_from_environment(self, monkeypatch, restore_package_logger):
        monkeypatch.setenv("PUSHPIPE_LOG_LEVEL", "ERROR")

        assert config.configure_logging().level == logging.ERROR

    def test_invalid_level_falls_back(self, caplog, restore_package_logger):
        package_logger = config.configure_logging("chatty")

        assert package_logger.level == logging.WARNING
        assert "Invalid log level CHATTY" in caplog.text

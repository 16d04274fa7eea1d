"""Test the centralized logging functionality."""

import logging
from io import StringIO

import pytest

from freightflow.logging import (
    LOG_LEVEL_ENV_VAR,
    ROOT_LOGGER_NAME,
    disable_debug_logging,
    enable_debug_logging,
    env_log_level,
    get_logger,
    reset_logging,
    set_global_log_level,
    setup_root_logger,
)


@pytest.fixture(autouse=True)
def _restore_info_level():
    yield
    set_global_log_level(logging.INFO)


def test_centralized_logging():
    """Test that centralized logging works properly."""
    logger = get_logger("freightflow.test")

    log_capture = StringIO()
    handler = logging.StreamHandler(log_capture)
    handler.setLevel(logging.DEBUG)

    logger.handlers.clear()
    logger.addHandler(handler)
    try:
        # Info level appears by default
        logger.info("Test info message")
        assert "Test info message" in log_capture.getvalue()

        # Debug level does not
        log_capture.seek(0)
        log_capture.truncate(0)
        logger.debug("Test debug message")
        assert "Test debug message" not in log_capture.getvalue()

        enable_debug_logging()
        logger.debug("Test debug message after enable")
        assert "Test debug message after enable" in log_capture.getvalue()

        disable_debug_logging()
        logger.debug("Hidden again")
        assert "Hidden again" not in log_capture.getvalue()
    finally:
        logger.handlers.clear()


def test_logger_naming():
    """Test that loggers use consistent naming."""
    logger = get_logger("freightflow.flow.test")
    assert logger.name == "freightflow.flow.test"
    assert logger.level == logging.NOTSET


def test_multiple_loggers():
    """Test that multiple loggers can be created and configured."""
    logger1 = get_logger("freightflow.module1")
    logger2 = get_logger("freightflow.module2")

    assert logger1 is not logger2

    set_global_log_level(logging.WARNING)
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    assert root_logger.level == logging.WARNING

    # Children inherit the effective level from the package root
    assert logger1.getEffectiveLevel() == logging.WARNING
    assert logger2.getEffectiveLevel() == logging.WARNING


def test_setup_root_logger_is_idempotent():
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    before = list(root_logger.handlers)
    setup_root_logger(level=logging.DEBUG)
    assert root_logger.handlers == before


def test_reset_logging_allows_reconfiguration():
    log_capture = StringIO()
    reset_logging()
    try:
        setup_root_logger(
            format_string="%(levelname)s:%(message)s",
            handler=logging.StreamHandler(log_capture),
        )
        get_logger("freightflow.reset").warning("configured")
        assert "WARNING:configured" in log_capture.getvalue()
    finally:
        reset_logging()
        setup_root_logger()


def test_engine_logs_alternative_mode_activation(alt_triangle, caplog):
    from freightflow.flow.engine import FlowAssignmentEngine
    from freightflow.model.network import EdgeKey

    engine = FlowAssignmentEngine(alt_triangle)
    engine.recalculate()
    with caplog.at_level(logging.INFO, logger=ROOT_LOGGER_NAME):
        engine.toggle_block(EdgeKey.of(1, 2))
    assert "Alternative mode activated" in caplog.text


class TestLogLevelEnvironment:
    @pytest.fixture
    def fresh_logging(self):
        reset_logging()
        yield
        reset_logging()
        setup_root_logger()

    def test_env_var_sets_default_level(self, monkeypatch, fresh_logging):
        monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "debug")
        setup_root_logger()
        assert logging.getLogger(ROOT_LOGGER_NAME).level == logging.DEBUG

    def test_explicit_level_overrides_env_var(self, monkeypatch, fresh_logging):
        monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "DEBUG")
        setup_root_logger(level=logging.ERROR)
        assert logging.getLogger(ROOT_LOGGER_NAME).level == logging.ERROR

    @pytest.mark.parametrize("value", ["", "chatty", "basic_format"])
    def test_unusable_values_fall_back(self, monkeypatch, value):
        monkeypatch.setenv(LOG_LEVEL_ENV_VAR, value)
        assert env_log_level(logging.WARNING) == logging.WARNING

    def test_unset_uses_default(self, monkeypatch):
        monkeypatch.delenv(LOG_LEVEL_ENV_VAR, raising=False)
        assert env_log_level() == logging.INFO

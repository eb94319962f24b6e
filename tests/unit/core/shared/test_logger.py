# ============================================================================
# Tests for the shared logger
# ============================================================================
"""Unit tests for ContextLogger and the formatters."""

import json
import logging

import pytest

from app.config.settings import Settings
from app.core import shared
from app.core.shared.logger import (
    ColoredFormatter,
    JSONFormatter,
    configure_logging,
    configure_logging_from_settings,
    get_rule_logger,
    get_service_logger,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    level, handlers = root.level, list(root.handlers)
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def make_record(message: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("rules.test", logging.WARNING, __file__, 10, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestContextLogger:
    """Tests for ContextLogger."""

    def test_service_logger_context(self) -> None:
        """Should tag service loggers with their component."""
        logger = get_service_logger("validation_orchestrator")

        assert logger.name == "service.validation_orchestrator"
        assert logger.context == {"component": "service", "service": "validation_orchestrator"}

    def test_shared_package_exports_component_factories(self) -> None:
        """Should expose loggers only through the component factories."""
        assert "get_service_logger" in shared.__all__
        assert "get_rule_logger" in shared.__all__
        assert not hasattr(shared, "get_logger")

    def test_with_context_extends(self) -> None:
        """Should return a new logger with merged context."""
        base = get_rule_logger("transition_guard")
        child = base.with_context(reception_id=42)

        assert child.context["reception_id"] == 42
        assert child.context["engine"] == "transition_guard"
        assert "reception_id" not in base.context

    def test_attaches_context_to_records(self, caplog: pytest.LogCaptureFixture) -> None:
        """Should pass context and call arguments as extra_data."""
        logger = get_rule_logger("business_rules").with_context(mode="create")

        with caplog.at_level(logging.INFO, logger="rules.business_rules"):
            logger.info("rule applied", rule="PatientValidation")

        record = caplog.records[-1]
        assert record.getMessage() == "rule applied"
        assert record.extra_data == {
            "component": "rules",
            "engine": "business_rules",
            "mode": "create",
            "rule": "PatientValidation",
        }


class TestFormatters:
    """Tests for the log formatters."""

    def test_json_formatter(self) -> None:
        """Should emit one JSON object including extra data."""
        output = JSONFormatter().format(make_record("transition rejected", extra_data={"reception_id": 7}))

        data = json.loads(output)
        assert data["level"] == "WARNING"
        assert data["logger"] == "rules.test"
        assert data["message"] == "transition rejected"
        assert data["extra"] == {"reception_id": 7}

    def test_colored_formatter_keeps_record(self) -> None:
        """Should color the level without mutating the original record."""
        record = make_record()

        output = ColoredFormatter("%(levelname)s %(message)s").format(record)

        assert "\033[33m" in output
        assert record.levelname == "WARNING"


class TestConfigureLogging:
    """Tests for logging configuration."""

    def test_configure_json(self, restore_root_logger: logging.Logger) -> None:
        """Should install a single JSON console handler."""
        configure_logging(level="DEBUG", format_type="json")

        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, JSONFormatter)

    def test_configure_from_settings(self, restore_root_logger: logging.Logger, tmp_path) -> None:
        """Should add a JSON file handler when LOG_FILE is set."""
        log_file = tmp_path / "reception.log"
        settings = Settings(LOG_LEVEL="WARNING", LOG_FORMAT="plain", LOG_FILE=str(log_file))

        configure_logging_from_settings(settings)

        assert restore_root_logger.level == logging.WARNING
        assert len(restore_root_logger.handlers) == 2
        assert isinstance(restore_root_logger.handlers[1], logging.FileHandler)
        restore_root_logger.handlers[1].close()

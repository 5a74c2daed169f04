import logging
import logging.handlers

import structlog

from fleet_reports.config.logging import setup_logging
from fleet_reports.config.settings import Settings
from fleet_reports.core.logging import get_logger


def test_setup_logging_with_structlog(tmp_path):
    settings = Settings(
        _env_file=None,
        LOG_LEVEL="DEBUG",
        LOG_FILE=str(tmp_path / "reports.log"),
        ENABLE_STRUCTURED_LOGGING=True,
    )

    setup_logging(settings)

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers)
    assert structlog.is_configured()

    structlog.reset_defaults()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


def test_default_logger_name():
    assert get_logger().logger.name == "fleet_reports"


def test_bound_context_reaches_records(caplog):
    base = get_logger("fleet_reports.tests", component="reports")
    bound = base.bind(requester_id=7, report_type="ALARM_REPORT")

    with caplog.at_level(logging.INFO, logger="fleet_reports.tests"):
        bound.info("Report assembled", extra={"plant_id": 1, "requester_id": 8})
        bound.unbind("report_type").info("Second")
        base.info("Unbound")

    first, second, third = caplog.records
    assert first.requester_id == 8
    assert first.report_type == "ALARM_REPORT"
    assert first.component == "reports"
    assert first.plant_id == 1
    assert second.requester_id == 7
    assert not hasattr(second, "report_type")
    assert not hasattr(third, "requester_id")


def test_disabled_level_is_skipped(caplog):
    logger = get_logger("fleet_reports.tests").bind(requester_id=7)

    with caplog.at_level(logging.WARNING, logger="fleet_reports.tests"):
        logger.debug("hidden")

    assert caplog.records == []

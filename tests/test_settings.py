import logging

import pytest
from pydantic import ValidationError

from fleet_reports.config.logging import CustomJsonFormatter, build_logging_config
from fleet_reports.config.settings import Settings


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ENERGY_TAG_NAMES", raising=False)
        settings = Settings(_env_file=None)

        assert settings.ENERGY_TAG_NAMES == ["Energy", "TotalEnergy"]
        assert settings.DOWNTIME_SEVERITIES == ["CRITICAL", "HIGH"]
        assert settings.EXPORT_MAX_WORKERS == 4
        assert settings.EXPORT_TIMEOUT_SECONDS == 60
        assert settings.AUDIT_DEFAULT_RETENTION_DAYS == 90

    def test_comma_separated_lists_from_env(self, monkeypatch):
        monkeypatch.setenv("ENERGY_TAG_NAMES", "Energy, YieldToday ,")
        monkeypatch.setenv("DOWNTIME_SEVERITIES", "critical")

        settings = Settings(_env_file=None)

        assert settings.ENERGY_TAG_NAMES == ["Energy", "YieldToday"]
        assert settings.DOWNTIME_SEVERITIES == ["CRITICAL"]

    def test_invalid_log_format(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, LOG_FORMAT="xml")

    def test_invalid_page_size(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, PDF_PAGE_SIZE="A3")

    def test_environment_helpers(self):
        assert Settings(_env_file=None, ENVIRONMENT="production").is_production()
        assert Settings(_env_file=None).is_development()


class TestLoggingConfig:

    def test_console_only_by_default(self):
        config = build_logging_config(Settings(_env_file=None, LOG_LEVEL="WARNING"))

        assert list(config["handlers"]) == ["console"]
        assert config["loggers"][""]["level"] == "WARNING"
        assert config["loggers"]["sqlalchemy.engine"]["level"] == "WARNING"

    def test_file_handler_and_json_formatter(self, tmp_path):
        log_file = tmp_path / "logs" / "reports.log"
        config = build_logging_config(Settings(
            _env_file=None, LOG_FILE=str(log_file), LOG_FORMAT="json", LOG_SQL_QUERIES=True,
        ))

        assert log_file.parent.is_dir()
        assert config["handlers"]["file"]["formatter"] == "json"
        assert config["loggers"]["sqlalchemy.engine"]["level"] == "INFO"

    def test_json_formatter_fields(self):
        formatter = CustomJsonFormatter("%(message)s", environment="test")
        record = logging.LogRecord("fleet_reports", logging.INFO, __file__, 1, "hello", None, None)
        record.requester_id = 7

        output = formatter.format(record)

        assert '"environment": "test"' in output
        assert '"requester_id": 7' in output
        assert '"level": "INFO"' in output

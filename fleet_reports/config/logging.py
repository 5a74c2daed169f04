"""
Logging configuration for the reporting engine.
Provides structured logging with different handlers and formatters.
"""

import logging
import logging.config
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
from pythonjsonlogger import jsonlogger

from fleet_reports.config.settings import Settings, get_settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with additional fields"""

    def __init__(self, *args, environment: str = "development", **kwargs):
        super().__init__(*args, **kwargs)
        self.environment = environment

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
        """Add custom fields to the log record"""
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['environment'] = self.environment

        if hasattr(record, 'requester_id'):
            log_record['requester_id'] = record.requester_id

        if record.exc_info:
            log_record['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': self.formatException(record.exc_info)
            }


def build_logging_config(settings: Settings) -> Dict[str, Any]:
    """Create the dictConfig mapping for the given settings"""
    handlers: Dict[str, Dict[str, Any]] = {
        'console': {
            'level': 'DEBUG' if settings.DEBUG else settings.LOG_LEVEL,
            'class': 'logging.StreamHandler',
            'formatter': settings.LOG_FORMAT,
        },
    }

    if settings.LOG_FILE:
        Path(settings.LOG_FILE).parent.mkdir(parents=True, exist_ok=True)
        handlers['file'] = {
            'level': settings.LOG_LEVEL,
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': settings.LOG_FILE,
            'maxBytes': 10485760,  # 10MB
            'backupCount': 10,
            'formatter': settings.LOG_FORMAT,
            'encoding': 'utf8'
        }

    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
            },
            'json': {
                '()': CustomJsonFormatter,
                'format': '%(timestamp)s %(level)s %(logger)s %(message)s',
                'environment': settings.ENVIRONMENT,
            },
        },
        'handlers': handlers,
        'loggers': {
            '': {
                'handlers': list(handlers),
                'level': settings.LOG_LEVEL,
            },
            'sqlalchemy.engine': {
                'level': 'INFO' if settings.LOG_SQL_QUERIES else 'WARNING',
            },
            'reportlab': {
                'level': 'WARNING',
            },
        },
    }


def configure_structured_logging(settings: Settings) -> None:
    """Configure structlog on top of the standard library loggers"""
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.processors.KeyValueRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Initialize logging configuration"""
    settings = settings or get_settings()
    logging.config.dictConfig(build_logging_config(settings))

    if settings.ENABLE_STRUCTURED_LOGGING:
        configure_structured_logging(settings)

    logging.getLogger(__name__).info(
        "Logging system initialized",
        extra={
            'log_level': settings.LOG_LEVEL,
            'log_format': settings.LOG_FORMAT,
            'structured_logging': settings.ENABLE_STRUCTURED_LOGGING,
        },
    )

"""
Context-carrying loggers for service calls.

A service binds the identifiers of one call (requester, report type,
export format) once and every record logged through the bound logger
carries them as ``extra`` fields, which the JSON formatter emits as
top-level keys. Handlers are installed by
fleet_reports.config.logging.setup_logging().
"""

import logging
from typing import Any, Dict, Mapping, Optional


class ContextLogger:
    """Immutable logger view with bound context fields"""

    def __init__(self, logger: logging.Logger, context: Optional[Mapping[str, Any]] = None):
        self.logger = logger
        self.context: Dict[str, Any] = dict(context or {})

    def bind(self, **fields: Any) -> "ContextLogger":
        """New logger carrying these fields in addition to the current ones"""
        return ContextLogger(self.logger, {**self.context, **fields})

    def unbind(self, *keys: str) -> "ContextLogger":
        return ContextLogger(
            self.logger, {k: v for k, v in self.context.items() if k not in keys}
        )

    def log(self, level: int, message: str, *args: Any, **kwargs: Any) -> None:
        if not self.logger.isEnabledFor(level):
            return
        # Per-call extra wins over bound context
        kwargs["extra"] = {**self.context, **(kwargs.get("extra") or {})}
        kwargs.setdefault("stacklevel", 3)
        self.logger.log(level, message, *args, **kwargs)

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.DEBUG, message, *args, **kwargs)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.INFO, message, *args, **kwargs)

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.WARNING, message, *args, **kwargs)

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.ERROR, message, *args, **kwargs)

    def exception(self, message: str, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("exc_info", True)
        self.log(logging.ERROR, message, *args, **kwargs)


def get_logger(name: Optional[str] = None, **context: Any) -> ContextLogger:
    """
    Logger for a module, optionally with initial context.

    Args:
        name: Logger name (defaults to the package logger)
        **context: Fields attached to every record

    Returns:
        ContextLogger bound to ``context``
    """
    return ContextLogger(logging.getLogger(name or "fleet_reports"), context)


__all__ = ['ContextLogger', 'get_logger']

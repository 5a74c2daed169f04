from fleet_reports.core.logging import ContextLogger, get_logger

__all__ = ["ContextLogger", "get_logger"]

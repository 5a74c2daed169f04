"""
All enumeration types used across the reporting engine.

These enums represent the core domain concepts of a monitored plant fleet
(users, devices, alarms, audit actions) and the report/export vocabulary.
"""

from enum import Enum

__all__ = [
    "UserRole",
    "DeviceStatus",
    "AlarmSeverity",
    "AlarmStatus",
    "AuditAction",
    "ReportType",
    "ExportFormat",
    "SortOrder",
]


class UserRole(str, Enum):
    """User role enumeration."""

    ADMIN = "ADMIN"
    OPERATOR = "OPERATOR"
    VIEWER = "VIEWER"


class DeviceStatus(str, Enum):
    """Device status enumeration."""

    ONLINE = "ONLINE"
    OFFLINE = "OFFLINE"
    ERROR = "ERROR"
    MAINTENANCE = "MAINTENANCE"


class AlarmSeverity(str, Enum):
    """Alarm severity, declared from most to least severe."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    INFO = "INFO"

    @property
    def rank(self) -> int:
        """0 for CRITICAL, increasing towards INFO."""
        return list(AlarmSeverity).index(self)


class AlarmStatus(str, Enum):
    """Alarm lifecycle status."""

    ACTIVE = "ACTIVE"
    ACKNOWLEDGED = "ACKNOWLEDGED"
    RESOLVED = "RESOLVED"


class AuditAction(str, Enum):
    """Audited mutation kind."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class ReportType(str, Enum):
    """Report type enumeration."""

    PLANT_PERFORMANCE = "PLANT_PERFORMANCE"
    DEVICE_PERFORMANCE = "DEVICE_PERFORMANCE"
    ALARM_REPORT = "ALARM_REPORT"
    ENERGY_PRODUCTION = "ENERGY_PRODUCTION"

    @property
    def slug(self) -> str:
        """File-name friendly form, e.g. ``plant-performance``."""
        return self.value.lower().replace("_", "-")


class ExportFormat(str, Enum):
    """Export output format."""

    JSON = "json"
    CSV = "csv"
    PDF = "pdf"
    EXCEL = "excel"


class SortOrder(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"

"""
SQLAlchemy models.

Importing this package registers every table on ``Base.metadata``.
"""

from fleet_reports.models.base import Base
from fleet_reports.models.user import User
from fleet_reports.models.plant import Device, Plant, UserPlantAccess
from fleet_reports.models.telemetry import MetricSample, Tag
from fleet_reports.models.alarm import Alarm
from fleet_reports.models.audit import AuditLog

__all__ = [
    "Base",
    "User",
    "Plant",
    "Device",
    "UserPlantAccess",
    "Tag",
    "MetricSample",
    "Alarm",
    "AuditLog",
]

"""
Repository layer: the engine's data fetchers.
"""

from fleet_reports.repositories.base import BaseRepository
from fleet_reports.repositories.plant_repository import (
    DeviceRepository,
    PlantRepository,
)
from fleet_reports.repositories.telemetry_repository import TelemetryRepository
from fleet_reports.repositories.alarm_repository import AlarmRepository
from fleet_reports.repositories.audit_log_repository import AuditLogRepository

__all__ = [
    "BaseRepository",
    "PlantRepository",
    "DeviceRepository",
    "TelemetryRepository",
    "AlarmRepository",
    "AuditLogRepository",
]

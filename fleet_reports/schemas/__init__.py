"""
Pydantic schemas shared by the services.
"""

from fleet_reports.schemas.common import *  # noqa: F401,F403
from fleet_reports.schemas.common import __all__ as _common_all
from fleet_reports.schemas.export import ExportDocument, ExportSection, ExportTable
from fleet_reports.schemas.reports import (
    AlarmReport,
    BaseReport,
    DevicePerformanceReport,
    EnergyProductionReport,
    PlantPerformanceReport,
    ReportRequest,
    ReportResponse,
)
from fleet_reports.schemas.audit import (
    AuditEntryCreate,
    AuditExportRequest,
    AuditFilterParams,
    AuditLogEntry,
    AuditLogPage,
    AuditStats,
    CleanupResult,
    EntityHistory,
    ExportPayload,
)

__all__ = [
    *_common_all,
    "ExportDocument",
    "ExportSection",
    "ExportTable",
    "BaseReport",
    "PlantPerformanceReport",
    "DevicePerformanceReport",
    "AlarmReport",
    "EnergyProductionReport",
    "ReportRequest",
    "ReportResponse",
    "AuditEntryCreate",
    "AuditExportRequest",
    "AuditFilterParams",
    "AuditLogEntry",
    "AuditLogPage",
    "AuditStats",
    "CleanupResult",
    "EntityHistory",
    "ExportPayload",
]

from fleet_reports.schemas.common.base import BaseSchema, CamelSchema
from fleet_reports.schemas.common.enums import (
    AlarmSeverity,
    AlarmStatus,
    AuditAction,
    DeviceStatus,
    ExportFormat,
    ReportType,
    SortOrder,
    UserRole,
)
from fleet_reports.schemas.common.pagination import (
    PaginatedResponse,
    PaginationMeta,
    PaginationParams,
)

__all__ = [
    "BaseSchema",
    "CamelSchema",
    "AlarmSeverity",
    "AlarmStatus",
    "AuditAction",
    "DeviceStatus",
    "ExportFormat",
    "ReportType",
    "SortOrder",
    "UserRole",
    "PaginatedResponse",
    "PaginationMeta",
    "PaginationParams",
]

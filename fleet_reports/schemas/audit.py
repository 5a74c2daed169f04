"""
Audit history schemas: filters, entries, statistics, export and cleanup.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import AliasChoices, Field, field_validator

from fleet_reports.schemas.common.base import BaseSchema, CamelSchema
from fleet_reports.schemas.common.enums import AuditAction, SortOrder, UserRole
from fleet_reports.schemas.common.pagination import PaginatedResponse, PaginationParams
from fleet_reports.utils.date_utils import to_utc_naive

__all__ = [
    "AuditFilterParams",
    "AuditUser",
    "AuditLogEntry",
    "AuditLogPage",
    "TopUser",
    "AuditStats",
    "ChangeSet",
    "EntityHistoryItem",
    "EntityHistory",
    "AuditExportRequest",
    "ExportPayload",
    "CleanupResult",
    "AuditEntryCreate",
]

AuditSortField = Literal["timestamp", "action", "resource", "userId"]


class _AuditFilterFields(CamelSchema):
    entity_type: Optional[str] = None
    entity_id: Optional[int] = None
    user_id: Optional[int] = None
    action: Optional[AuditAction] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_utc_naive(v) if v is not None else None

    def to_filters(self) -> Dict[str, Any]:
        """Repository filter dictionary with unset keys dropped."""
        fields = ("entity_type", "entity_id", "user_id", "action", "start_date", "end_date")
        return {name: getattr(self, name) for name in fields if getattr(self, name) is not None}


class AuditFilterParams(_AuditFilterFields, PaginationParams):
    """Audit listing query with paging and sorting."""

    sort_by: AuditSortField = "timestamp"
    sort_order: SortOrder = SortOrder.DESC


class AuditUser(CamelSchema):
    id: int
    name: str
    email: str
    role: UserRole


class AuditLogEntry(CamelSchema):
    """One audit trail entry as returned to callers."""

    id: int
    user_id: Optional[int] = None
    user: Optional[AuditUser] = None
    action: AuditAction
    resource: str
    resource_id: Optional[int] = None
    changes: Optional[Dict[str, Any]] = None
    context_metadata: Optional[Dict[str, Any]] = Field(
        default=None,
        validation_alias=AliasChoices("context_metadata", "contextMetadata", "metadata"),
        serialization_alias="metadata",
    )
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    timestamp: datetime


AuditLogPage = PaginatedResponse[AuditLogEntry]


class TopUser(CamelSchema):
    user_id: int
    name: Optional[str] = None
    email: Optional[str] = None
    count: int


class AuditStats(CamelSchema):
    total: int
    by_action: Dict[str, int] = Field(default_factory=dict)
    by_resource: Dict[str, int] = Field(default_factory=dict)
    top_users: List[TopUser] = Field(default_factory=list)


class ChangeSet(CamelSchema):
    before: Optional[Any] = None
    after: Optional[Any] = None


class EntityHistoryItem(CamelSchema):
    id: int
    action: AuditAction
    user_id: Optional[int] = None
    user_name: Optional[str] = None
    changes: ChangeSet
    timestamp: datetime


class EntityHistory(CamelSchema):
    entity_type: str
    entity_id: int
    total: int
    history: List[EntityHistoryItem] = Field(default_factory=list)


class AuditExportRequest(_AuditFilterFields):
    """Unpaginated export query; only json and csv are accepted."""

    format: str = "json"


class ExportPayload(BaseSchema):
    content: bytes
    content_type: str
    filename: str


class CleanupResult(CamelSchema):
    deleted_count: int
    retention_days: int
    cutoff: datetime


class AuditEntryCreate(CamelSchema):
    """Data for appending one audit entry."""

    user_id: Optional[int] = None
    action: AuditAction
    resource: str
    resource_id: Optional[int] = None
    before: Optional[Any] = None
    after: Optional[Any] = None
    context_metadata: Optional[Dict[str, Any]] = Field(
        default=None,
        validation_alias=AliasChoices("context_metadata", "contextMetadata", "metadata"),
        serialization_alias="metadata",
    )
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    timestamp: Optional[datetime] = None

    @field_validator("timestamp")
    @classmethod
    def normalize_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_utc_naive(v) if v is not None else None

"""
Audit history queries, statistics, export and retention cleanup.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Callable, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from fleet_reports.config.settings import Settings, get_settings
from fleet_reports.core.logging import get_logger
from fleet_reports.models import AuditLog
from fleet_reports.repositories import AuditLogRepository
from fleet_reports.schemas.audit import (
    AuditEntryCreate,
    AuditExportRequest,
    AuditFilterParams,
    AuditLogEntry,
    AuditLogPage,
    AuditStats,
    ChangeSet,
    CleanupResult,
    EntityHistory,
    EntityHistoryItem,
    ExportPayload,
    TopUser,
)
from fleet_reports.schemas.common.enums import ExportFormat
from fleet_reports.schemas.export import AUDIT_COLUMNS, ExportDocument, ExportTable
from fleet_reports.services.common import UnitOfWork, errors
from fleet_reports.services.common.pagination import paginate
from fleet_reports.services.export import ExporterRegistry
from fleet_reports.utils.date_utils import utcnow

logger = get_logger(__name__)

TSchema = TypeVar("TSchema", bound=BaseModel)

AUDIT_EXPORT_FORMATS = frozenset({ExportFormat.JSON, ExportFormat.CSV})


def _coerce(schema: Type[TSchema], data: Union[TSchema, Mapping[str, Any], None]) -> TSchema:
    """Accept a schema instance or a plain mapping; invalid input is a bad request."""
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(dict(data or {}))
    except ValidationError as exc:
        raise errors.BadRequestError(
            "Invalid audit query parameters",
            details={"errors": exc.errors(include_url=False)},
        ) from exc


class AuditLogService:
    """
    Audit trail service:

    - List entries with filters, sorting and pagination
    - Aggregate statistics (by action, by resource, most active users)
    - Per-entity change history
    - Export as JSON or CSV
    - Retention cleanup
    - Append new entries
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        settings: Optional[Settings] = None,
        registry: Optional[ExporterRegistry] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._session_factory = session_factory
        self._settings = settings or get_settings()
        self._registry = registry or ExporterRegistry.default(self._settings.PDF_PAGE_SIZE)
        self._clock = clock

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _get_repo(self, uow: UnitOfWork) -> AuditLogRepository:
        return uow.get_repo(AuditLogRepository)

    def _read_unit(self) -> UnitOfWork:
        return UnitOfWork(self._session_factory, auto_commit=False)

    def _now(self) -> datetime:
        return self._clock()

    # ------------------------------------------------------------------ #
    # Mapping helpers
    # ------------------------------------------------------------------ #
    def _to_entry(self, log: AuditLog) -> AuditLogEntry:
        return AuditLogEntry.model_validate(log)

    def _to_history_item(self, log: AuditLog) -> EntityHistoryItem:
        changes = log.changes or {}
        return EntityHistoryItem(
            id=log.id,
            action=log.action,
            user_id=log.user_id,
            user_name=log.user.name if log.user is not None else None,
            changes=ChangeSet(before=changes.get("before"), after=changes.get("after")),
            timestamp=log.timestamp,
        )

    def _to_export_row(self, log: AuditLog) -> List[Any]:
        user = log.user
        return [
            log.timestamp,
            log.action,
            log.resource,
            log.resource_id,
            log.user_id,
            user.name if user is not None else None,
            user.email if user is not None else None,
            user.role if user is not None else None,
            log.ip_address,
            log.user_agent,
        ]

    # ------------------------------------------------------------------ #
    # Listing with filters
    # ------------------------------------------------------------------ #
    def list_logs(
        self,
        filters: Union[AuditFilterParams, Mapping[str, Any], None] = None,
    ) -> AuditLogPage:
        """
        List audit entries with filters, sorting and pagination.

        Args:
            filters: AuditFilterParams or an equivalent mapping

        Returns:
            ``{data, pagination: {page, limit, total, totalPages}}``

        Raises:
            BadRequestError: Invalid page, limit, sort field or filter value
        """
        params = _coerce(AuditFilterParams, filters)
        repo_filters = params.to_filters()

        with self._read_unit() as uow:
            repo = self._get_repo(uow)
            total = repo.count_filtered(repo_filters)
            logs = repo.find_page(
                repo_filters,
                offset=params.offset,
                limit=params.limit,
                sort_by=params.sort_by,
                sort_order=params.sort_order.value,
            )
            return paginate(
                items=logs,
                total=total,
                page=params.page,
                limit=params.limit,
                mapper=self._to_entry,
                response_cls=AuditLogPage,
            )

    # ------------------------------------------------------------------ #
    # Statistics
    # ------------------------------------------------------------------ #
    def get_stats(
        self,
        filters: Union[AuditFilterParams, Mapping[str, Any], None] = None,
    ) -> AuditStats:
        """
        Aggregate counts over the filtered entries.

        ``top_users`` is ordered by count desc, then user id asc, and holds at
        most ``AUDIT_TOP_USERS_LIMIT`` users.
        """
        params = _coerce(AuditFilterParams, filters)
        repo_filters = params.to_filters()

        with self._read_unit() as uow:
            repo = self._get_repo(uow)
            top_users = [
                TopUser(user_id=user_id, name=name, email=email, count=count)
                for user_id, name, email, count in repo.top_users(
                    repo_filters, limit=self._settings.AUDIT_TOP_USERS_LIMIT
                )
            ]
            return AuditStats(
                total=repo.count_filtered(repo_filters),
                by_action=repo.count_by_action(repo_filters),
                by_resource=repo.count_by_resource(repo_filters),
                top_users=top_users,
            )

    # ------------------------------------------------------------------ #
    # Entity history
    # ------------------------------------------------------------------ #
    def get_entity_history(self, entity_type: str, entity_id: int, limit: int = 50) -> EntityHistory:
        """Change history of one entity, newest first."""
        if limit < 1:
            raise errors.BadRequestError("Limit must be >= 1", field="limit", details={"limit": limit})

        with self._read_unit() as uow:
            logs = self._get_repo(uow).find_history(entity_type, entity_id, limit)
            history = [self._to_history_item(log) for log in logs]

        return EntityHistory(
            entity_type=entity_type,
            entity_id=entity_id,
            total=len(history),
            history=history,
        )

    # ------------------------------------------------------------------ #
    # Export
    # ------------------------------------------------------------------ #
    def export_logs(
        self,
        fmt: Union[ExportFormat, str, None] = None,
        filters: Union[AuditExportRequest, Mapping[str, Any], None] = None,
    ) -> ExportPayload:
        """
        Export filtered entries, newest first, as JSON or CSV.

        At most ``AUDIT_EXPORT_MAX_ROWS`` entries are exported. Without an
        explicit ``fmt`` the request's own ``format`` field is used.

        Raises:
            BadRequestError: Format other than json or csv
            RenderError: Rendering failed
        """
        params = _coerce(AuditExportRequest, filters)
        if fmt is None:
            fmt = params.format
        try:
            export_format = ExportFormat(str(getattr(fmt, "value", fmt)).lower())
        except ValueError:
            export_format = None
        if export_format not in AUDIT_EXPORT_FORMATS:
            raise errors.BadRequestError(
                f"Unsupported audit export format: {fmt}",
                field="format",
                details={"supported": sorted(f.value for f in AUDIT_EXPORT_FORMATS)},
            )

        now = self._now()
        export_logger = logger.bind(format=export_format.value, filters=params.to_filters())

        with self._read_unit() as uow:
            logs = self._get_repo(uow).find_for_export(
                params.to_filters(), self._settings.AUDIT_EXPORT_MAX_ROWS
            )
            entries = [self._to_entry(log).model_dump(mode="json", by_alias=True) for log in logs]
            rows = [self._to_export_row(log) for log in logs]

        document = ExportDocument(
            title="Audit Logs",
            payload={"data": entries, "count": len(entries), "exportedAt": now.isoformat()},
            header=[f"Exported: {now.isoformat()}"],
            table=ExportTable(columns=list(AUDIT_COLUMNS), rows=rows, title="Audit Logs"),
        )
        exporter = self._registry.get(export_format)
        content = exporter.export(document)

        export_logger.info("Audit logs exported", extra={"count": len(entries)})
        return ExportPayload(
            content=content,
            content_type=exporter.content_type,
            filename=f"audit-logs-{now.date().isoformat()}.{exporter.extension}",
        )

    # ------------------------------------------------------------------ #
    # Retention
    # ------------------------------------------------------------------ #
    def cleanup(self, retention_days: Optional[int] = None) -> CleanupResult:
        """
        Delete entries older than ``retention_days``.

        The cutoff is computed once; deletion is a single bulk statement
        committed by one unit of work. Irreversible.

        Raises:
            BadRequestError: ``retention_days`` is not positive
            TransactionError: The delete could not be committed
        """
        if retention_days is None:
            retention_days = self._settings.AUDIT_DEFAULT_RETENTION_DAYS
        if retention_days <= 0:
            raise errors.BadRequestError(
                "Retention days must be a positive number",
                field="retention_days",
                details={"retention_days": retention_days},
            )

        cutoff = self._now() - timedelta(days=retention_days)
        with UnitOfWork(self._session_factory) as uow:
            deleted_count = self._get_repo(uow).delete_older_than(cutoff)

        logger.bind(retention_days=retention_days, cutoff=cutoff.isoformat()).info(
            f"Cleaned up {deleted_count} audit logs older than {retention_days} days",
            extra={"deleted_count": deleted_count},
        )
        return CleanupResult(deleted_count=deleted_count, retention_days=retention_days, cutoff=cutoff)

    # ------------------------------------------------------------------ #
    # Create
    # ------------------------------------------------------------------ #
    def record_entry(self, data: Union[AuditEntryCreate, Mapping[str, Any]]) -> AuditLogEntry:
        """Append one audit entry with ``changes = {before, after}``."""
        entry = _coerce(AuditEntryCreate, data)
        with UnitOfWork(self._session_factory) as uow:
            log = self._get_repo(uow).add(
                AuditLog(
                    user_id=entry.user_id,
                    action=entry.action,
                    resource=entry.resource,
                    resource_id=entry.resource_id,
                    changes={"before": entry.before, "after": entry.after},
                    context_metadata=entry.context_metadata,
                    ip_address=entry.ip_address,
                    user_agent=entry.user_agent,
                    timestamp=entry.timestamp or self._now(),
                )
            )
            uow.session.refresh(log)
            return self._to_entry(log)

"""
Audit log repository.

Filtering, paging, grouping and retention deletes over ``audit_logs``.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import asc, delete, desc, func
from sqlalchemy.orm import Query, Session

from fleet_reports.models import AuditLog, User
from fleet_reports.repositories.base import BaseRepository
from fleet_reports.schemas.common.enums import AuditAction

SORT_COLUMNS = {
    "timestamp": AuditLog.timestamp,
    "action": AuditLog.action,
    "resource": AuditLog.resource,
    "userId": AuditLog.user_id,
}


class AuditLogRepository(BaseRepository[AuditLog]):
    """
    Repository for audit trail queries.

    Filter dictionaries accept ``entity_type``, ``entity_id``, ``user_id``,
    ``action``, ``start_date`` and ``end_date``; all present keys are
    combined with AND and both date bounds are inclusive.
    """

    def __init__(self, db: Session):
        super().__init__(AuditLog, db)

    # ==================== Filtering ====================

    def _apply_filters(self, query: Query, filters: Optional[Dict[str, Any]]) -> Query:
        filters = filters or {}

        if filters.get("entity_type") is not None:
            query = query.filter(AuditLog.resource == filters["entity_type"])
        if filters.get("entity_id") is not None:
            query = query.filter(AuditLog.resource_id == filters["entity_id"])
        if filters.get("user_id") is not None:
            query = query.filter(AuditLog.user_id == filters["user_id"])
        if filters.get("action") is not None:
            query = query.filter(AuditLog.action == AuditAction(filters["action"]))
        if filters.get("start_date") is not None:
            query = query.filter(AuditLog.timestamp >= filters["start_date"])
        if filters.get("end_date") is not None:
            query = query.filter(AuditLog.timestamp <= filters["end_date"])

        return query

    # ==================== Listing ====================

    def count_filtered(self, filters: Optional[Dict[str, Any]] = None) -> int:
        query = self._apply_filters(self.db.query(func.count(AuditLog.id)), filters)
        return query.scalar() or 0

    def find_page(
        self,
        filters: Optional[Dict[str, Any]],
        offset: int,
        limit: int,
        sort_by: str = "timestamp",
        sort_order: str = "desc",
    ) -> List[AuditLog]:
        """
        One page of entries.

        Args:
            filters: Filter dictionary
            offset: Rows to skip
            limit: Page size
            sort_by: One of ``SORT_COLUMNS``
            sort_order: ``asc`` or ``desc``

        Returns:
            Entries of the page; ties broken by id in the same direction
        """
        direction = asc if sort_order == "asc" else desc
        column = SORT_COLUMNS[sort_by]
        query = self._apply_filters(self.query(), filters)
        return (
            query.order_by(direction(column), direction(AuditLog.id))
            .offset(offset)
            .limit(limit)
            .all()
        )

    def find_for_export(self, filters: Optional[Dict[str, Any]], max_rows: int) -> List[AuditLog]:
        """Newest entries first, capped at ``max_rows``."""
        query = self._apply_filters(self.query(), filters)
        return query.order_by(desc(AuditLog.timestamp), desc(AuditLog.id)).limit(max_rows).all()

    def find_history(self, resource: str, resource_id: int, limit: int) -> List[AuditLog]:
        return (
            self.query()
            .filter(AuditLog.resource == resource, AuditLog.resource_id == resource_id)
            .order_by(desc(AuditLog.timestamp), desc(AuditLog.id))
            .limit(limit)
            .all()
        )

    # ==================== Analytics ====================

    def count_by_action(self, filters: Optional[Dict[str, Any]] = None) -> Dict[str, int]:
        query = self._apply_filters(
            self.db.query(AuditLog.action, func.count(AuditLog.id)), filters
        ).group_by(AuditLog.action)
        return {action.value: count for action, count in query.all()}

    def count_by_resource(self, filters: Optional[Dict[str, Any]] = None) -> Dict[str, int]:
        query = self._apply_filters(
            self.db.query(AuditLog.resource, func.count(AuditLog.id)), filters
        ).group_by(AuditLog.resource)
        return {resource: count for resource, count in query.all()}

    def top_users(
        self, filters: Optional[Dict[str, Any]] = None, limit: int = 10
    ) -> List[Tuple[Optional[int], Optional[str], Optional[str], int]]:
        """
        Most active users.

        Returns:
            ``(user_id, name, email, count)`` ordered by count desc then
            user id asc
        """
        entry_count = func.count(AuditLog.id).label("entry_count")
        query = self._apply_filters(
            self.db.query(AuditLog.user_id, User.name, User.email, entry_count)
            .outerjoin(User, AuditLog.user_id == User.id)
            .filter(AuditLog.user_id.isnot(None)),
            filters,
        )
        rows = (
            query.group_by(AuditLog.user_id, User.name, User.email)
            .order_by(entry_count.desc(), AuditLog.user_id.asc())
            .limit(limit)
            .all()
        )
        return [(user_id, name, email, count) for user_id, name, email, count in rows]

    # ==================== Retention ====================

    def delete_older_than(self, cutoff: datetime) -> int:
        """
        Bulk-delete entries with ``timestamp < cutoff``.

        Returns:
            Number of deleted rows
        """
        result = self.db.execute(
            delete(AuditLog)
            .where(AuditLog.timestamp < cutoff)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

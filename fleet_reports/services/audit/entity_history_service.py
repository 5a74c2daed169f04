"""
Per-entity change history.
"""
from __future__ import annotations

from typing import Callable, Optional

from sqlalchemy.orm import Session

from fleet_reports.config.settings import Settings
from fleet_reports.schemas.audit import EntityHistory

from .audit_log_service import AuditLogService


class EntityHistoryService:
    """Thin wrapper around AuditLogService focused on one entity."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        settings: Optional[Settings] = None,
    ) -> None:
        self._audit = AuditLogService(session_factory, settings)

    def get_history(self, *, entity_type: str, entity_id: int, limit: int = 50) -> EntityHistory:
        return self._audit.get_entity_history(entity_type, entity_id, limit)

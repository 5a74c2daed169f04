from .audit_log_service import AuditLogService
from .entity_history_service import EntityHistoryService

__all__ = ["AuditLogService", "EntityHistoryService"]

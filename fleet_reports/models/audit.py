"""
Audit log model for data change tracking.

Entries are append-only; the only removal path is retention cleanup.
"""

from sqlalchemy import Column, DateTime, Enum as SQLEnum, ForeignKey, Index, Integer, JSON, String, Text
from sqlalchemy.orm import relationship

from fleet_reports.models.base import Base, ModelMixin
from fleet_reports.schemas.common.enums import AuditAction


class AuditLog(ModelMixin, Base):
    """
    Audit trail entry for one mutation.

    ``changes`` holds ``{"before": ..., "after": ...}``.
    """

    __tablename__ = "audit_logs"
    __table_args__ = (
        Index("ix_audit_logs_resource", "resource", "resource_id"),
        Index("ix_audit_logs_timestamp", "timestamp"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="User who performed the action",
    )
    action = Column(SQLEnum(AuditAction, name="audit_action_enum"), nullable=False, index=True)
    resource = Column(String(50), nullable=False, comment="Type of entity affected")
    resource_id = Column(Integer, nullable=True, comment="Primary key of affected entity")
    changes = Column(JSON, nullable=True)
    # "metadata" is reserved on declarative classes
    context_metadata = Column("metadata", JSON, nullable=True)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)
    timestamp = Column(DateTime, nullable=False)

    user = relationship("User", lazy="joined")

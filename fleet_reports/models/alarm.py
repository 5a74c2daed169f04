"""
Alarm event model.
"""

from sqlalchemy import (
    CheckConstraint, Column, DateTime, Enum as SQLEnum, ForeignKey, Index, Integer, Text,
)
from sqlalchemy.orm import relationship

from fleet_reports.models.base import Base, ModelMixin
from fleet_reports.schemas.common.enums import AlarmSeverity, AlarmStatus


class Alarm(ModelMixin, Base):
    """Alarm raised for a plant, optionally pinned to one device."""

    __tablename__ = "alarms"
    __table_args__ = (
        Index("ix_alarms_plant_triggered", "plant_id", "triggered_at"),
        CheckConstraint(
            "resolved_at IS NULL OR resolved_at >= triggered_at",
            name="ck_alarms_resolved_after_triggered",
        ),
    )

    id = Column(Integer, primary_key=True)
    plant_id = Column(Integer, ForeignKey("plants.id", ondelete="CASCADE"), nullable=False)
    device_id = Column(
        Integer,
        ForeignKey("devices.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    severity = Column(SQLEnum(AlarmSeverity, name="alarm_severity_enum"), nullable=False, index=True)
    status = Column(
        SQLEnum(AlarmStatus, name="alarm_status_enum"),
        nullable=False,
        default=AlarmStatus.ACTIVE,
        index=True,
    )
    message = Column(Text, nullable=False)
    triggered_at = Column(DateTime, nullable=False)
    acknowledged_at = Column(DateTime, nullable=True)
    resolved_at = Column(DateTime, nullable=True)

    plant = relationship("Plant", lazy="joined")
    device = relationship("Device", lazy="joined")

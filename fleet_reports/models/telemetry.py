"""
Telemetry models: tags and processed metric samples.
"""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from fleet_reports.models.base import Base, ModelMixin


class Tag(ModelMixin, Base):
    """Named measurement channel with its unit."""

    __tablename__ = "tags"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False, index=True)
    unit = Column(String(32), nullable=True)


class MetricSample(ModelMixin, Base):
    """
    One processed measurement.

    Samples are immutable; gaps in the series are simply absent rows.
    Timestamps are naive UTC.
    """

    __tablename__ = "processed_data"
    __table_args__ = (
        Index("ix_processed_data_device_time", "device_id", "timestamp"),
        Index("ix_processed_data_plant_time", "plant_id", "timestamp"),
    )

    id = Column(Integer, primary_key=True)
    plant_id = Column(Integer, ForeignKey("plants.id", ondelete="CASCADE"), nullable=False)
    device_id = Column(Integer, ForeignKey("devices.id", ondelete="CASCADE"), nullable=False)
    tag_id = Column(Integer, ForeignKey("tags.id", ondelete="CASCADE"), nullable=False, index=True)
    timestamp = Column(DateTime, nullable=False)
    value = Column(Float, nullable=False)

    tag = relationship("Tag", lazy="joined")

    @property
    def unit(self):
        return self.tag.unit if self.tag is not None else None

"""
Plant, device and access grant models.
"""

from sqlalchemy import (
    Column, Date, Enum as SQLEnum, Float, ForeignKey, Integer, JSON, String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from fleet_reports.models.base import Base, ModelMixin
from fleet_reports.schemas.common.enums import DeviceStatus


class Plant(ModelMixin, Base):
    """Energy-production site."""

    __tablename__ = "plants"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    location = Column(JSON, nullable=True, comment="Free-form location document")
    capacity = Column(Float, nullable=True, comment="Nominal capacity")
    status = Column(String(50), nullable=True)
    installation_date = Column(Date, nullable=True)
    owner_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    devices = relationship("Device", back_populates="plant", lazy="selectin")


class Device(ModelMixin, Base):
    """Monitored device belonging to one plant."""

    __tablename__ = "devices"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    plant_id = Column(
        Integer,
        ForeignKey("plants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    device_type = Column(String(100), nullable=False)
    status = Column(
        SQLEnum(DeviceStatus, name="device_status_enum"),
        nullable=False,
        default=DeviceStatus.OFFLINE,
    )
    serial_number = Column(String(100), nullable=True)

    plant = relationship("Plant", back_populates="devices")


class UserPlantAccess(ModelMixin, Base):
    """Explicit grant of a plant to a user."""

    __tablename__ = "user_plant_access"
    __table_args__ = (
        UniqueConstraint("user_id", "plant_id", name="uq_user_plant_access"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    plant_id = Column(
        Integer,
        ForeignKey("plants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

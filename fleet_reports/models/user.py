"""
User lookup model.

Users are managed elsewhere; the engine reads them for ownership checks
and to enrich audit exports.
"""

from sqlalchemy import Column, Enum as SQLEnum, Integer, String

from fleet_reports.models.base import Base, ModelMixin
from fleet_reports.schemas.common.enums import UserRole


class User(ModelMixin, Base):
    """Platform user."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    role = Column(
        SQLEnum(UserRole, name="user_role_enum"),
        nullable=False,
        default=UserRole.VIEWER,
        comment="Role deciding access bypass",
    )

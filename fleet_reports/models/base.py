"""SQLAlchemy declarative base for all models."""
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class ModelMixin:
    """Common helpers shared by every mapped class."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={getattr(self, 'id', None)})>"

"""
Base repository with standard lookup operations.

Repositories wrap one SQLAlchemy session; transaction boundaries belong to
the UnitOfWork that created the session.
"""

from typing import Generic, Iterable, List, Optional, Type, TypeVar

from sqlalchemy.orm import Query, Session

from fleet_reports.core.logging import get_logger
from fleet_reports.models.base import Base

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository for one mapped model.

    Subclasses bind the model and accept only the session so that
    ``UnitOfWork.get_repo`` can build them.
    """

    def __init__(self, model: Type[ModelType], db: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    # ==================== Read Operations ====================

    def query(self) -> Query:
        return self.db.query(self.model)

    def find_by_id(self, id: int) -> Optional[ModelType]:
        """Get entity by primary key, or None."""
        return self.db.get(self.model, id)

    def find_by_ids(self, ids: Iterable[int]) -> List[ModelType]:
        ids = list(ids)
        if not ids:
            return []
        return self.query().filter(self.model.id.in_(ids)).order_by(self.model.id).all()

    # ==================== Write Operations ====================

    def add(self, entity: ModelType) -> ModelType:
        """Stage a new entity and flush to obtain its id."""
        self.db.add(entity)
        self.db.flush()
        logger.debug(f"Created {self.model.__name__} with id: {entity.id}")
        return entity

"""
Unit of Work pattern implementation.

One SQLAlchemy session per unit; repositories obtained from the unit share
it and commit or roll back together.
"""
from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from typing import Any, Callable, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fleet_reports.repositories.base import BaseRepository

from .errors import TransactionError

logger = logging.getLogger(__name__)

TRepository = TypeVar("TRepository", bound=BaseRepository)


class UnitOfWork(AbstractContextManager["UnitOfWork"]):
    """
    Session scope for one report build, audit query or cleanup.

    Usage:
        >>> with UnitOfWork(session_factory) as uow:
        ...     deleted = uow.get_repo(AuditLogRepository).delete_older_than(cutoff)

    Writers commit on a clean exit; any exception rolls the session back.
    Readers pass ``auto_commit=False`` and the session is only closed.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        auto_commit: bool = True,
    ) -> None:
        self._session_factory = session_factory
        self._auto_commit = auto_commit
        self.session: Optional[Session] = None
        self._repos: dict[type, BaseRepository] = {}

    def __enter__(self) -> "UnitOfWork":
        if self.session is not None:
            raise RuntimeError("UnitOfWork context already entered")
        self.session = self._session_factory()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        session = self.session
        if session is None:
            return False

        try:
            if exc_type is not None:
                session.rollback()
                logger.warning("UnitOfWork rolled back due to %s", exc_type.__name__)
            elif self._auto_commit:
                self._commit(session)
        finally:
            session.close()
            self.session = None
            self._repos.clear()

        return False

    def _commit(self, session: Session) -> None:
        try:
            session.commit()
        except SQLAlchemyError as exc:
            logger.error("Commit failed: %s", exc, exc_info=True)
            session.rollback()
            raise TransactionError("Failed to commit transaction", exc) from exc

    def get_repo(self, repo_cls: Type[TRepository]) -> TRepository:
        """Repository of ``repo_cls`` bound to this unit's session, built once."""
        if self.session is None:
            raise RuntimeError("UnitOfWork.get_repo() called outside of context")

        if repo_cls not in self._repos:
            self._repos[repo_cls] = repo_cls(self.session)
        return self._repos[repo_cls]  # type: ignore[return-value]

"""Generic persistence scaffold shared by entity repositories."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

ModelT = TypeVar("ModelT")


class BaseRepository(Generic[ModelT]):
    """Primary-key lookups and inserts for one ORM model."""

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    def get(self, session: Session, entity_id: int) -> ModelT | None:
        return session.get(self.model, entity_id)

    def get_for_update(self, session: Session, entity_id: int) -> ModelT | None:
        """Load one row and lock it for the rest of the transaction where supported."""
        id_column = getattr(self.model, "id")
        statement = select(self.model).where(id_column == entity_id).with_for_update()
        return session.execute(statement).scalar_one_or_none()

    def add(self, session: Session, **fields: Any) -> ModelT:
        entity = self.model(**fields)  # type: ignore[call-arg]
        session.add(entity)
        session.flush()
        return entity

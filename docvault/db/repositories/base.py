"""Generic base repository for SQLAlchemy models."""

from typing import Any, Generic, TypeVar

from sqlalchemy import exists as sa_exists
from sqlalchemy import select
from sqlalchemy.orm import Session

from docvault.core.exceptions import EntityNotFound, ValidationError


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """Lookups and session bookkeeping shared by every repository.

    Repositories never commit; services decide when a unit of work ends.
    Lookups return None, or raise a domain exception from the ``require*``
    family, never an HTTPException.
    """

    model: type[T]
    label: str = "Entity"

    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, id_: Any) -> T | None:
        if id_ is None:
            return None
        return self.db.get(self.model, id_)

    def require(self, id_: Any) -> T:
        """Get entity by primary key or raise EntityNotFound."""
        obj = self.get(id_)
        if obj is None:
            raise EntityNotFound(f"{self.label} not found", context={"id": id_})
        return obj

    def get_many(self, ids: list[str], **filters: Any) -> list[T]:
        """Entities whose id is in ``ids`` and that match ``filters``; unknown ids are skipped."""
        if not ids:
            return []
        stmt = select(self.model).where(self.model.id.in_(set(ids)))
        for key, value in filters.items():
            stmt = stmt.where(getattr(self.model, key) == value)
        return list(self.db.scalars(stmt).all())

    def require_all(self, ids: list[str], **filters: Any) -> list[T]:
        """Resolve an id list supplied by a caller, keeping its order.

        Duplicates collapse to their first occurrence. Ids that do not exist,
        or whose row fails ``filters``, are reported together.

        Raises:
            ValidationError: ``invalid_ids`` lists every id that did not resolve.
        """
        wanted = list(dict.fromkeys(ids))
        by_id = {obj.id: obj for obj in self.get_many(wanted, **filters)}
        missing = [id_ for id_ in wanted if id_ not in by_id]
        if missing:
            raise ValidationError(
                f"Unknown {self.label.lower()} ids", context={"invalid_ids": missing}
            )
        return [by_id[id_] for id_ in wanted]

    def list_by(self, **filters: Any) -> list[T]:
        stmt = select(self.model)
        for key, value in filters.items():
            stmt = stmt.where(getattr(self.model, key) == value)
        return list(self.db.scalars(stmt).all())

    def exists(self, **filters: Any) -> bool:
        conditions = [getattr(self.model, k) == v for k, v in filters.items()]
        return self.db.scalar(select(sa_exists().where(*conditions))) or False

    def add(self, obj: T) -> T:
        self.db.add(obj)
        return obj

    def delete(self, obj: T) -> None:
        self.db.delete(obj)

    def partial_update(self, obj: T, skip_none: bool = True, **fields: Any) -> T:
        """Assign ``fields`` onto ``obj``; None values are skipped unless ``skip_none`` is False."""
        for key, value in fields.items():
            if skip_none and value is None:
                continue
            setattr(obj, key, value)
        self.db.add(obj)
        return obj

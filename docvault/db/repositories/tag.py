"""Tag repository."""

from sqlalchemy import select

from docvault.db.models import Tag
from docvault.db.repositories.base import BaseRepository


class TagRepository(BaseRepository[Tag]):
    model = Tag
    label = "Tag"

    def get_by_name(self, owner_id: str, name: str) -> Tag | None:
        """Get one of the owner's tags by name."""
        results = self.list_by(owner_id=owner_id, name=name)
        return results[0] if results else None

    def list_for_owner(self, owner_id: str) -> list[Tag]:
        """List the owner's tags sorted by name."""
        stmt = select(Tag).where(Tag.owner_id == owner_id).order_by(Tag.name.asc())
        return list(self.db.scalars(stmt).all())

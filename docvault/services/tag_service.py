"""Per-user tag management."""

import logging

from sqlalchemy.orm import Session

from docvault.core.exceptions import Conflict, PermissionDenied, ValidationError
from docvault.db.models import Tag, User
from docvault.db.repositories import TagRepository

logger = logging.getLogger(__name__)

DEFAULT_TAG_COLOR = "#007bff"


class TagService:
    """Tags are private to their owner; names are unique per owner."""

    def __init__(self, db: Session):
        self.db = db
        self.tags = TagRepository(db)

    def list_tags(self, user: User) -> list[Tag]:
        return self.tags.list_for_owner(user.id)

    def _require_owned(self, user: User, tag_id: str) -> Tag:
        tag = self.tags.require(tag_id)
        if tag.owner_id != user.id:
            raise PermissionDenied("Only the tag owner can modify this tag", context={"tag_id": tag_id})
        return tag

    def _check_unique(self, user: User, name: str, exclude_id: str | None = None) -> None:
        existing = self.tags.get_by_name(user.id, name)
        if existing and existing.id != exclude_id:
            raise Conflict(f"Tag '{name}' already exists", context={"tag_id": existing.id})

    def create_tag(self, user: User, name: str, color: str | None = None) -> Tag:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Tag name is required")
        self._check_unique(user, name)

        tag = Tag(name=name, color=color or DEFAULT_TAG_COLOR, owner_id=user.id)
        self.tags.add(tag)
        self.db.commit()
        self.db.refresh(tag)
        logger.info("tag_created", extra={"tag_id": tag.id, "owner_id": user.id})
        return tag

    def update_tag(
        self, user: User, tag_id: str, name: str | None = None, color: str | None = None
    ) -> Tag:
        tag = self._require_owned(user, tag_id)
        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Tag name is required")
            self._check_unique(user, name, exclude_id=tag.id)
        self.tags.partial_update(tag, name=name, color=color)
        self.db.commit()
        self.db.refresh(tag)
        return tag

    def delete_tag(self, user: User, tag_id: str) -> None:
        """Delete a tag; document links are removed with it."""
        tag = self._require_owned(user, tag_id)
        self.tags.delete(tag)
        self.db.commit()
        logger.info("tag_deleted", extra={"tag_id": tag_id, "owner_id": user.id})

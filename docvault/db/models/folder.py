"""Folder model."""

from sqlalchemy import Boolean, Column, ForeignKey, String
from sqlalchemy.orm import relationship

from docvault.db.database import Base
from docvault.db.models.base import (
    UpdatedAtMixin,
    folder_departments,
    folder_shared_users,
    generate_uuid,
)


class Folder(UpdatedAtMixin, Base):
    __tablename__ = "folders"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String, nullable=False)
    # Weak reference: deleting a parent with children is refused, never cascaded
    parent_id = Column(
        String, ForeignKey("folders.id", ondelete="RESTRICT"), nullable=True, index=True
    )
    owner_id = Column(String, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    is_shared = Column(Boolean, default=False, nullable=False)

    parent = relationship("Folder", remote_side=[id])
    owner = relationship("User")
    shared_with = relationship("User", secondary=folder_shared_users)
    department_access = relationship("Department", secondary=folder_departments)

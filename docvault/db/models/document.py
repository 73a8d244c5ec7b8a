"""Document model."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from docvault.db.database import Base
from docvault.db.models.base import (
    UpdatedAtMixin,
    document_delete_users,
    document_read_users,
    document_shared_users,
    document_tags,
    document_write_users,
    generate_uuid,
)


class Document(UpdatedAtMixin, Base):
    __tablename__ = "documents"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String, nullable=False)  # stored filename
    original_name = Column(String, nullable=False)
    mime_type = Column(String, nullable=False)
    size = Column(Integer, nullable=False)
    path = Column(String, nullable=False)
    folder_id = Column(
        String, ForeignKey("folders.id", ondelete="RESTRICT"), nullable=True, index=True
    )
    owner_id = Column(String, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    is_starred = Column(Boolean, default=False, nullable=False)
    is_shared = Column(Boolean, default=False, nullable=False)
    content = Column(Text, default="", nullable=False)  # empty until extraction completes

    folder = relationship("Folder")
    owner = relationship("User")
    tags = relationship("Tag", secondary=document_tags, back_populates="documents")
    shared_with = relationship("User", secondary=document_shared_users)
    read_users = relationship("User", secondary=document_read_users)
    write_users = relationship("User", secondary=document_write_users)
    delete_users = relationship("User", secondary=document_delete_users)

    def permission_users(self, action: str) -> list:
        """Return the explicit grant list for ``read``, ``write`` or ``delete``."""
        return {
            "read": self.read_users,
            "write": self.write_users,
            "delete": self.delete_users,
        }[action]

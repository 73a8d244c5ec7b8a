"""User and Department models."""

from sqlalchemy import Boolean, Column, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from docvault.db.database import Base
from docvault.db.models.base import TimestampMixin, generate_uuid


class Department(TimestampMixin, Base):
    __tablename__ = "departments"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String, unique=True, nullable=False, index=True)  # lowercase canonical
    display_name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    users = relationship("User", back_populates="department")


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False, default="employee")
    department_id = Column(
        String, ForeignKey("departments.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    is_active = Column(Boolean, default=True, nullable=False)

    department = relationship("Department", back_populates="users")

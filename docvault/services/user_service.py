"""Users, registration and the department directory."""

import logging

from sqlalchemy.orm import Session

from docvault.config import get_settings
from docvault.core.dependencies import ROLE_EMPLOYEE, VALID_ROLES
from docvault.core.exceptions import Conflict, ValidationError
from docvault.core.security import hash_password, verify_password
from docvault.db.models import Department, User
from docvault.db.repositories import (
    DepartmentRepository,
    DocumentRepository,
    FolderRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)

DEFAULT_DEPARTMENTS = [
    ("hr", "Human Resources", "Recruiting, onboarding and people operations"),
    ("finance", "Finance", "Accounting, invoices and budgeting"),
    ("it", "Information Technology", "Infrastructure, security and support"),
    ("marketing", "Marketing", "Brand, campaigns and communications"),
    ("operations", "Operations", "Logistics and day-to-day operations"),
]


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)
        self.departments = DepartmentRepository(db)

    # --- Validation helpers ---

    def _resolve_department(self, ref: str) -> Department:
        department = self.departments.resolve(ref) if ref else None
        if department is None:
            raise ValidationError("Department not found", context={"department": ref})
        return department

    @staticmethod
    def _check_role(role: str) -> str:
        if role not in VALID_ROLES:
            raise ValidationError(
                f"Invalid role: {role}", context={"allowed": sorted(VALID_ROLES)}
            )
        return role

    @staticmethod
    def _check_password(password: str) -> None:
        min_length = get_settings().password_min_length
        if len(password or "") < min_length:
            raise ValidationError(f"Password must be at least {min_length} characters")

    def _check_email_free(self, email: str, exclude_id: str | None = None) -> None:
        existing = self.users.get_by_email(email)
        if existing and existing.id != exclude_id:
            raise Conflict("User already exists", context={"email": email})

    # --- Users ---

    def create_user(
        self,
        name: str,
        email: str,
        password: str,
        department: str,
        role: str | None = None,
    ) -> User:
        """Create a user; ``department`` may be an id or a department name.

        Raises:
            Conflict: Email already registered
            ValidationError: Unknown department, invalid role or short password
        """
        email = email.strip().lower()
        self._check_email_free(email)
        self._check_password(password)
        dept = self._resolve_department(department)

        user = User(
            name=name.strip(),
            email=email,
            password_hash=hash_password(password),
            role=self._check_role(role or ROLE_EMPLOYEE),
            department_id=dept.id,
        )
        self.users.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info(
            "user_created",
            extra={"user_id": user.id, "role": user.role, "department": dept.name},
        )
        return user

    def authenticate(self, email: str, password: str) -> User | None:
        """Return the user for valid credentials, else None."""
        user = self.users.get_by_email(email.strip().lower())
        if user is None or not verify_password(password, user.password_hash):
            return None
        return user

    def update_user(
        self,
        user_id: str,
        name: str | None = None,
        email: str | None = None,
        role: str | None = None,
        department: str | None = None,
        is_active: bool | None = None,
    ) -> User:
        user = self.users.require(user_id)
        if email is not None:
            email = email.strip().lower()
            self._check_email_free(email, exclude_id=user.id)
        department_id = self._resolve_department(department).id if department else None
        self.users.partial_update(
            user,
            name=name.strip() if name else None,
            email=email,
            role=self._check_role(role) if role else None,
            department_id=department_id,
            is_active=is_active,
        )
        self.db.commit()
        self.db.refresh(user)
        logger.info("user_updated", extra={"user_id": user.id})
        return user

    def delete_user(self, acting_user: User, user_id: str) -> None:
        """Delete a user that owns no folders or documents."""
        user = self.users.require(user_id)
        if user.id == acting_user.id:
            raise ValidationError("You cannot delete your own account")
        folders = FolderRepository(self.db)
        documents = DocumentRepository(self.db)
        if folders.exists(owner_id=user.id) or documents.exists(owner_id=user.id):
            raise Conflict(
                "User still owns folders or documents", context={"user_id": user_id}
            )
        self.users.delete(user)
        self.db.commit()
        logger.info("user_deleted", extra={"user_id": user_id, "by_user_id": acting_user.id})

    # --- Departments ---

    def list_departments(self) -> list[tuple[Department, int]]:
        return self.departments.list_active_with_counts()

    def create_department(
        self, name: str, display_name: str, description: str | None = None
    ) -> Department:
        name = (name or "").strip().lower()
        if not name:
            raise ValidationError("Department name is required")
        if self.departments.get_by_name(name):
            raise Conflict("Department already exists", context={"name": name})

        department = Department(
            name=name, display_name=display_name or name.title(), description=description
        )
        self.departments.add(department)
        self.db.commit()
        self.db.refresh(department)
        logger.info("department_created", extra={"department_id": department.id, "name": name})
        return department

    def update_department(
        self,
        department_id: str,
        display_name: str | None = None,
        description: str | None = None,
        is_active: bool | None = None,
    ) -> Department:
        department = self.departments.require(department_id)
        self.departments.partial_update(
            department, display_name=display_name, description=description, is_active=is_active
        )
        self.db.commit()
        self.db.refresh(department)
        return department

    def delete_department(self, department_id: str) -> None:
        """Delete a department no user belongs to.

        Raises:
            Conflict: Users still reference the department
        """
        department = self.departments.require(department_id)
        members = self.departments.count_members(department.id)
        if members:
            raise Conflict(
                "Cannot delete department with employees",
                context={"department_id": department_id, "employee_count": members},
            )
        self.departments.delete(department)
        self.db.commit()
        logger.info("department_deleted", extra={"department_id": department_id})

    def ensure_default_departments(self) -> int:
        """Create any missing default departments. Returns the number created."""
        created = 0
        for name, display_name, description in DEFAULT_DEPARTMENTS:
            if self.departments.get_by_name(name) is None:
                self.departments.add(
                    Department(name=name, display_name=display_name, description=description)
                )
                created += 1
        if created:
            self.db.commit()
            logger.info("default_departments_seeded", extra={"created": created})
        return created

    def ensure_admin(self, email: str, password: str, name: str, department: str) -> User:
        """Create the bootstrap admin account if it does not exist yet."""
        existing = self.users.get_by_email(email.strip().lower())
        if existing:
            return existing
        return self.create_user(
            name=name, email=email, password=password, department=department, role="admin"
        )

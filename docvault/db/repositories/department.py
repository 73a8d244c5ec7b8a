"""Department repository."""

from sqlalchemy import func, select

from docvault.db.models import Department, User
from docvault.db.repositories.base import BaseRepository


class DepartmentRepository(BaseRepository[Department]):
    model = Department
    label = "Department"

    def get_by_name(self, name: str) -> Department | None:
        """Get department by canonical (lowercase) name."""
        results = self.list_by(name=name.strip().lower())
        return results[0] if results else None

    def resolve(self, ref: str) -> Department | None:
        """Resolve a department by id, falling back to its name."""
        return self.get(ref) or self.get_by_name(ref)

    def list_active_with_counts(self) -> list[tuple[Department, int]]:
        """Active departments with their employee count, ordered by display name."""
        stmt = (
            select(Department, func.count(User.id))
            .outerjoin(User, User.department_id == Department.id)
            .where(Department.is_active.is_(True))
            .group_by(Department.id)
            .order_by(Department.display_name.asc())
        )
        return [(dept, count) for dept, count in self.db.execute(stmt).all()]

    def count_members(self, department_id: str) -> int:
        """Number of users assigned to the department."""
        stmt = select(func.count(User.id)).where(User.department_id == department_id)
        return self.db.scalar(stmt) or 0

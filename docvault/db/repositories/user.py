"""User repository."""

from sqlalchemy import func, or_, select
from sqlalchemy.orm import joinedload

from docvault.db.models import User
from docvault.db.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User
    label = "User"

    def get_by_email(self, email: str) -> User | None:
        """Get user by email address."""
        results = self.list_by(email=email)
        return results[0] if results else None

    def exists_by_email(self, email: str) -> bool:
        """Check if user with email exists."""
        return self.exists(email=email)

    def list_directory(self, order_by_name: bool = True) -> list[User]:
        """List all users with their department loaded."""
        stmt = select(User).options(joinedload(User.department))
        stmt = stmt.order_by(User.name.asc() if order_by_name else User.created_at.desc())
        return list(self.db.scalars(stmt).all())

    def search(self, keywords: list[str], limit: int = 10) -> list[User]:
        """Case-insensitive match of any keyword against name, email or role."""
        if not keywords:
            return []
        conditions = []
        for keyword in keywords:
            term = f"%{keyword.lower()}%"
            conditions.extend(
                [
                    func.lower(User.name).like(term),
                    func.lower(User.email).like(term),
                    func.lower(User.role).like(term),
                ]
            )
        stmt = (
            select(User)
            .options(joinedload(User.department))
            .where(or_(*conditions))
            .order_by(User.created_at.desc())
            .limit(limit)
        )
        return list(self.db.scalars(stmt).unique().all())

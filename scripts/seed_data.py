#!/usr/bin/env python3
"""Seed default departments and demo users.

Usage:
    python scripts/seed_data.py
    python scripts/seed_data.py --reset-users
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from docvault.core.exceptions import Conflict  # noqa: E402
from docvault.db.database import init_db, session_scope  # noqa: E402
from docvault.db.repositories import UserRepository  # noqa: E402
from docvault.services.user_service import UserService  # noqa: E402

DEMO_USERS = [
    ("Admin User", "admin@company.com", "admin123", "admin", "it"),
    ("HR Manager", "hr.manager@company.com", "manager123", "manager", "hr"),
    ("Finance Manager", "finance.manager@company.com", "manager123", "manager", "finance"),
    ("HR Employee", "hr.employee@company.com", "employee123", "employee", "hr"),
    ("Finance Employee", "finance.employee@company.com", "employee123", "employee", "finance"),
    ("IT Employee", "it.employee@company.com", "employee123", "employee", "it"),
]


def seed(reset_users: bool = False) -> None:
    init_db()
    with session_scope() as db:
        service = UserService(db)
        created = service.ensure_default_departments()
        print(f"Departments created: {created}")

        users = UserRepository(db)
        for name, email, password, role, department in DEMO_USERS:
            existing = users.get_by_email(email)
            if existing and reset_users:
                service.update_user(existing.id, name=name, role=role, department=department)
                print(f"  updated  {email} ({role}, {department})")
                continue
            try:
                service.create_user(name, email, password, department, role)
                print(f"  created  {email} ({role}, {department})")
            except Conflict:
                print(f"  exists   {email}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed departments and demo users")
    parser.add_argument(
        "--reset-users",
        action="store_true",
        help="Reset role and department of existing demo users",
    )
    args = parser.parse_args()
    seed(reset_users=args.reset_users)


if __name__ == "__main__":
    main()

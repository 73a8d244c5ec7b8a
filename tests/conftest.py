"""Pytest configuration and fixtures."""

import os
import tempfile

# Settings are read once at import time; point them at throwaway locations first
_TMP_DIR = tempfile.mkdtemp(prefix="docvault-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TMP_DIR}/app.db")
os.environ.setdefault("UPLOAD_DIR", f"{_TMP_DIR}/uploads")
os.environ.setdefault("USE_ARQ_WORKER", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("CHATBOT_LLM_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import docvault.db.models  # noqa: E402, F401
from docvault.core.security import create_user_token, hash_password  # noqa: E402
from docvault.db.database import Base, get_db  # noqa: E402
from docvault.db.models import Department, Document, Folder, User  # noqa: E402
from docvault.main import app  # noqa: E402

# Test database - in-memory SQLite with StaticPool for connection sharing
TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Create tables once for entire test session."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db(setup_database):
    """Provide a transactional database session that rolls back after each test.

    Service-level ``commit()`` calls join the outer transaction, so nothing
    outlives the test.
    """
    connection = engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def client(db):
    """Create test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass  # Do not close - managed by db fixture

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# --- Departments and users ---


@pytest.fixture(scope="function")
def departments(db) -> dict[str, Department]:
    """The hr, finance and it departments keyed by name."""
    created = {}
    for name, display_name in (("hr", "Human Resources"), ("finance", "Finance"), ("it", "IT")):
        dept = Department(name=name, display_name=display_name)
        db.add(dept)
        created[name] = dept
    db.flush()
    return created


def _make_user(db, name: str, email: str, role: str, department: Department) -> User:
    user = User(
        name=name,
        email=email,
        password_hash=hash_password("Password123"),
        role=role,
        department_id=department.id,
        is_active=True,
    )
    db.add(user)
    db.flush()  # Flush to get ID without committing
    db.refresh(user)
    return user


@pytest.fixture(scope="function")
def admin_user(db, departments) -> User:
    return _make_user(db, "Ada Admin", "admin@test.com", "admin", departments["it"])


@pytest.fixture(scope="function")
def manager_user(db, departments) -> User:
    return _make_user(db, "Mona Manager", "manager@test.com", "manager", departments["it"])


@pytest.fixture(scope="function")
def alice(db, departments) -> User:
    """Finance employee."""
    return _make_user(db, "Alice Finch", "alice@test.com", "employee", departments["finance"])


@pytest.fixture(scope="function")
def bob(db, departments) -> User:
    """HR employee."""
    return _make_user(db, "Bob Hart", "bob@test.com", "employee", departments["hr"])


@pytest.fixture(scope="function")
def carol(db, departments) -> User:
    """Second finance employee."""
    return _make_user(db, "Carol Fenn", "carol@test.com", "employee", departments["finance"])


def auth_headers(user: User) -> dict:
    """Authorization headers for a user."""
    return {"Authorization": f"Bearer {create_user_token(user)}"}


@pytest.fixture(scope="function")
def admin_headers(admin_user) -> dict:
    return auth_headers(admin_user)


@pytest.fixture(scope="function")
def manager_headers(manager_user) -> dict:
    return auth_headers(manager_user)


@pytest.fixture(scope="function")
def alice_headers(alice) -> dict:
    return auth_headers(alice)


@pytest.fixture(scope="function")
def bob_headers(bob) -> dict:
    return auth_headers(bob)


@pytest.fixture(scope="function")
def carol_headers(carol) -> dict:
    return auth_headers(carol)


# --- Content factories ---


@pytest.fixture(scope="function")
def make_folder(db):
    """Factory creating a folder directly in the database."""

    def _make(owner: User, name: str, parent: Folder | None = None) -> Folder:
        folder = Folder(name=name, owner_id=owner.id, parent_id=parent.id if parent else None)
        db.add(folder)
        db.flush()
        db.refresh(folder)
        return folder

    return _make


@pytest.fixture(scope="function")
def make_document(db, tmp_path):
    """Factory creating a document record backed by a real file."""

    def _make(
        owner: User,
        name: str,
        folder: Folder | None = None,
        content: str = "",
        mime_type: str = "text/plain",
    ) -> Document:
        path = tmp_path / f"{owner.id}-{name}"
        path.write_text(content or name)
        document = Document(
            name=path.name,
            original_name=name,
            mime_type=mime_type,
            size=path.stat().st_size,
            path=str(path),
            folder_id=folder.id if folder else None,
            owner_id=owner.id,
            content=content,
        )
        db.add(document)
        db.flush()
        db.refresh(document)
        return document

    return _make


@pytest.fixture(scope="function")
def headers_for():
    """Build Authorization headers for an arbitrary user."""
    return auth_headers

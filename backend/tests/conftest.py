# tests/conftest.py

from __future__ import annotations

import os
import tempfile

# settings are read on import; keep the app away from the working directory
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="task-uploads-"))

from datetime import date, timedelta
from pathlib import Path
from typing import Callable

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import main
from core.database import get_session
from models import session_token  # noqa: F401  (registers the table)
from models.task import Task, TaskStatus
from models.user import User, UserRole
from services.storage import ImageStorage, get_storage
from utils.clock import utcnow
from utils.security import create_session, hash_password

PASSWORD = "secret-pass"
# bcrypt is slow on purpose; hash once for the whole run
PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture()
def session():
    """
    One SQLModel session over a private in-memory database.

    StaticPool keeps every checkout on the same connection so the schema
    created here is what the app sees.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    engine.dispose()


@pytest.fixture()
def storage(tmp_path: Path) -> ImageStorage:
    return ImageStorage(str(tmp_path / "uploads"), "task-images", "http://testserver")


@pytest.fixture()
def client(session: Session, storage: ImageStorage):
    main.app.dependency_overrides[get_session] = lambda: session
    main.app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()


def _make_user(session: Session, username: str, phone: str, role: UserRole) -> User:
    user = User(username=username, phone_number=phone, password_hash=PASSWORD_HASH, role=role)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture()
def employee(session: Session) -> User:
    return _make_user(session, "ravi", "9999999999", UserRole.employee)


@pytest.fixture()
def other_employee(session: Session) -> User:
    return _make_user(session, "sana", "9888888888", UserRole.employee)


@pytest.fixture()
def admin(session: Session) -> User:
    return _make_user(session, "admin", "9000000001", UserRole.admin)


@pytest.fixture()
def auth_headers(session: Session) -> Callable[[User], dict]:
    def _headers(user: User) -> dict:
        token = create_session(session, user)
        return {"Authorization": f"Bearer {token.token}"}

    return _headers


@pytest.fixture()
def make_task(session: Session) -> Callable[..., Task]:
    """Insert a task directly, bypassing the HTTP layer."""

    def _make(created_by: User, **overrides) -> Task:
        values = dict(
            name="Install 4 dome cameras",
            owner_name="Mehta Traders",
            task_date=date(2025, 2, 10),
            status=TaskStatus.pending,
            comments=None,
            amount_received=1000.0,
            remaining_amount=500.0,
            total_amount=1500.0,
            latitude=19.076,
            longitude=72.8777,
            created_by=created_by.id,
            created_at=utcnow() - timedelta(days=1),
        )
        values.update(overrides)
        task = Task(**values)
        session.add(task)
        session.commit()
        session.refresh(task)
        return task

    return _make

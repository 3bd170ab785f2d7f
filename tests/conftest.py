"""Pytest configuration and fixtures."""

import itertools
import os
from collections.abc import Callable, Generator
from typing import Any

# Must be set before the application modules read their configuration
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from app import app
from core.database import build_engine, get_db
from models.base import Base
from schemas.user import Principal, User
from utils.class_manager import ClassManager
from utils.converters import user_to_principal
from utils.credential_service import CredentialService
from utils.user_manager import UserManager

# Test database URL (in-memory SQLite, one shared connection)
test_engine = build_engine("sqlite://")

TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=test_engine)

    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, Any, None]:
    """Create a test client with database session."""

    def override_get_db() -> Generator[Session, None, None]:
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session: Session) -> Callable[..., User]:
    """Factory creating users with unique emails."""
    manager = UserManager(db_session)
    counter = itertools.count(1)

    def _make_user(
        role: str = "student",
        institution: str = "north-high",
        name: str | None = None,
        email: str | None = None,
        password: str = "secret-password",
    ) -> User:
        n = next(counter)
        return manager.create_user(
            email=email or f"user{n}@example.com",
            name=name or f"User {n}",
            password=password,
            role=role,
            institution=institution,
        )

    return _make_user


@pytest.fixture
def principal_for(db_session: Session) -> Callable[[User], Principal]:
    """Build a principal from the user's current database row."""
    manager = UserManager(db_session)

    def _principal_for(user: User) -> Principal:
        return user_to_principal(manager.get_user_by_id(user.id))

    return _principal_for


@pytest.fixture
def auth_headers() -> Callable[[User], dict]:
    service = CredentialService()

    def _auth_headers(user: User) -> dict:
        return {"Authorization": f"Bearer {service.issue(user)}"}

    return _auth_headers


@pytest.fixture
def assign(db_session: Session, principal_for) -> Callable[..., int]:
    """Assign students to a teacher's class."""
    manager = ClassManager(db_session)

    def _assign(teacher: User, class_name: str, *students: User) -> int:
        return manager.assign_students_to_class(
            principal_for(teacher), class_name, [s.id for s in students]
        )

    return _assign

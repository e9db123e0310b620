"""
Test configuration and fixtures.

The app reads DATABASE_URL at import time, so it is pointed at an in-memory
SQLite database before anything from `episupport` is imported.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient

from episupport.database.database import Base, SessionLocal, engine
from episupport.dependencies import get_push_notifier
from episupport.main import app
from episupport.models.models import User
from episupport.schemas.enums import UserRole
from episupport.utils.push import Delivered, Failed
from episupport.utils.security import get_password_hash

PASSWORD = "secret-pass"
PASSWORD_HASH = get_password_hash(PASSWORD)


class RecordingNotifier:
    """Stands in for PushNotifier; records every send and fails chosen tokens."""

    def __init__(self, failing_tokens=()):
        self.calls = []
        self.failing_tokens = set(failing_tokens)

    def send(self, push_token, title, body, data=None):
        self.calls.append({"to": push_token, "title": title, "body": body, "data": data or {}})
        if push_token in self.failing_tokens:
            return Failed(token=push_token, reason="gateway unavailable")
        return Delivered(token=push_token)

    def send_to_user(self, user, title, body, data=None):
        if not user.push_token:
            return Failed(token="", reason="no push token")
        return self.send(user.push_token, title, body, data)


@pytest.fixture
def db():
    """Fresh schema and session per test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(db, notifier):
    """Test client with the push gateway replaced by the recording notifier."""
    app.dependency_overrides[get_push_notifier] = lambda: notifier
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Factory for users created straight through the ORM."""

    def _make_user(email, role=UserRole.MONITORED, first_name=None, push_token=None, **extra):
        user = User(
            email=email,
            password=PASSWORD_HASH,
            first_name=first_name or email.split("@")[0].title(),
            surname="Tester",
            role=role,
            push_token=push_token,
            **extra,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user

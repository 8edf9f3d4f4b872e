"""
Pytest configuration and fixtures.
"""
import os

# Settings are read at import time; point them at an in-memory database.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from annotator.core.security import create_access_token
from annotator.db.models import Document, Label, User
from annotator.db.session import Base, get_db
from annotator.main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db():
    """Fresh schema and session per test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _add_user(db, username):
    user = User(username=username)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def user(db):
    return _add_user(db, "alice")


@pytest.fixture
def other_user(db):
    return _add_user(db, "bob")


@pytest.fixture
def make_label(db):
    def _make(owner, name, color=None):
        label = Label(name=name, color=color, user_id=owner.id)
        db.add(label)
        db.commit()
        db.refresh(label)
        return label

    return _make


@pytest.fixture
def make_document(db):
    def _make(owner, content, title="notes.txt"):
        document = Document(title=title, content=content, file_type="txt", user_id=owner.id)
        db.add(document)
        db.commit()
        db.refresh(document)
        return document

    return _make


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token({'sub': user.username})}"}


@pytest.fixture
def headers(user):
    return auth_headers(user)


@pytest.fixture
def other_headers(other_user):
    return auth_headers(other_user)

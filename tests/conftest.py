# tests/conftest.py

import os

# Settings are read at import time, so the test environment is fixed first.
os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("CLEANUP_ORPHANED_UPLOADS", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core.s3 import ObjectStoreError, get_object_store
from app.db.session import get_db
from app.models import Base
from tests.utils.auth import get_user_authentication_headers

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

OWNER_ID = "user_owner"
OTHER_ID = "user_other"


class FakeObjectStore:
    """In-memory stand-in for the S3 object store."""

    def __init__(self):
        self.objects = {}
        self.uploaded = []
        self.deleted = []
        self.fail_after = None

    def upload(self, path, data, content_type):
        if self.fail_after is not None and len(self.uploaded) >= self.fail_after:
            raise ObjectStoreError(f"upload failed for {path}")
        self.objects[path] = (data, content_type)
        self.uploaded.append(path)
        return f"https://cdn.test/{path}"

    def delete(self, path):
        self.objects.pop(path, None)
        self.deleted.append(path)


@pytest.fixture(scope="function")
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def object_store():
    return FakeObjectStore()


@pytest.fixture(scope="function")
def test_client(db_session, object_store):
    """
    Provides a TestClient backed by the in-memory database and object store.
    Authentication is real: requests carry JWTs minted for the test users.
    """

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_object_store] = lambda: object_store

    with TestClient(app, raise_server_exceptions=False) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def owner_headers():
    return get_user_authentication_headers(OWNER_ID)


@pytest.fixture
def other_headers():
    return get_user_authentication_headers(OTHER_ID)

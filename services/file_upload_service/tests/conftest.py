"""Shared fixtures for the file upload service tests."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from file_upload_service import models  # noqa: F401
from file_upload_service.db import Base
from file_upload_service.main import app, get_db


@pytest.fixture
def session_factory():
    """In-memory SQLite shared across threads for one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def upload(client):
    """Post a file to the upload endpoint."""

    def _upload(name="photo.png", data=b"\x89PNG\r\n\x1a\n" + b"0" * 32, content_type="image/png"):
        return client.post("/api/FileUpload/Upload", files={"file": (name, data, content_type)})

    return _upload

#!/usr/bin/env python
"""
pytest configuration file

This file contains shared fixtures for all tests.
"""

import os

# Must be set before dataroom.settings is first imported
os.environ.setdefault("DATAROOM_ENVIRONMENT", "test")
os.environ.setdefault("DATAROOM_USE_MEMORY_STORE", "true")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from dataroom.components.workspace import create_workspace  # noqa: E402
from dataroom.db.database import build_engine  # noqa: E402
from dataroom.db.models import Base  # noqa: E402
from dataroom.services.identity import StaticIdentity  # noqa: E402
from dataroom.services.memory_persistence import MemoryPersistence  # noqa: E402
from dataroom.services.object_storage import MemoryObjectStorage  # noqa: E402

TEST_USER_ID = "user_test"

SAMPLE_PDF = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\ntrailer\n<< /Root 1 0 R >>\n%%EOF\n"


@pytest.fixture
def pdf_bytes() -> bytes:
    """Minimal PDF payload"""
    return SAMPLE_PDF


@pytest.fixture
def persistence() -> MemoryPersistence:
    """In-memory record store"""
    return MemoryPersistence()


@pytest.fixture
def object_storage() -> MemoryObjectStorage:
    """In-memory object store"""
    return MemoryObjectStorage()


@pytest.fixture
def workspace(persistence, object_storage):
    """Workspace wired to in-memory collaborators for TEST_USER_ID."""
    return create_workspace(
        persistence=persistence,
        object_storage=object_storage,
        identity=StaticIdentity(TEST_USER_ID),
    )


@pytest.fixture
def session_factory():
    """Session factory over a fresh in-memory SQLite database."""
    engine = build_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)

    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    try:
        yield factory
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db_session(session_factory):
    """Single session on the in-memory database."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(workspace):
    """API client serving the workspace fixture."""
    from dataroom.main import create_app

    with TestClient(create_app(workspace)) as test_client:
        yield test_client

from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from src.bookstore.api.http.app import app
from src.bookstore.api.http.deps import get_database_service
from src.bookstore.core.services import DbSessionService


def _client_for(engine: Engine) -> Generator[TestClient]:
    database_service = DbSessionService(engine=engine)
    app.dependency_overrides[get_database_service] = lambda: database_service
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def client(engine: Engine) -> Generator[TestClient]:
    """Test client backed by a migrated in-memory database."""
    yield from _client_for(engine)


@pytest.fixture
def unmigrated_client(bare_engine: Engine) -> Generator[TestClient]:
    """Test client whose database has no tables, so every query fails."""
    yield from _client_for(bare_engine)

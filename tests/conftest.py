from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from portal.config import Settings
from portal.database import sqlite_engine
from portal.main import create_app
from portal.repository import MemoryRepository, SqlRepository, seed_initial_data
from tests.factories import make_user

TEST_DATABASE_URL = "sqlite://"


def build_repository(backend: str):
    if backend == "memory":
        return MemoryRepository()
    return SqlRepository(sqlite_engine(TEST_DATABASE_URL))


@pytest.fixture(params=["memory", "sql"])
def repository(request):
    repo = build_repository(request.param)
    yield repo
    if isinstance(repo, SqlRepository):
        repo.engine.dispose()


@pytest.fixture
def people(repository):
    """One admin, two managers and two clients."""
    return SimpleNamespace(
        admin=make_user(repository, "admin@example.com", role="admin", first_name="Ada", last_name="Admin"),
        manager=make_user(repository, "manager@example.com", role="manager", first_name="Max", last_name="Manager"),
        other_manager=make_user(repository, "manager2@example.com", role="manager"),
        client=make_user(repository, "client@example.com", first_name="Cleo", last_name="Client"),
        other_client=make_user(repository, "client2@example.com"),
    )


@pytest.fixture
def settings():
    return Settings(STORAGE_BACKEND="memory", SEED_DEMO_USERS=False, LOG_LEVEL="WARNING")


@pytest.fixture
def client(repository, settings):
    seed_initial_data(repository)
    app = create_app(repository=repository, settings=settings)
    with TestClient(app) as test_client:
        yield test_client

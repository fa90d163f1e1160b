"""pytest fixtures: a fresh SQLite database per test."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from users_api.app.core.config import Settings
from users_api.app.core.db import ConnectionPool, create_pool, init_db
from users_api.app.main import create_app
from users_api.app.services.user_service import UserService


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(database_url=str(tmp_path / "users.db"), db_pool_size=2)


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    # The context manager runs the startup and shutdown handlers.
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def pool(settings: Settings) -> Iterator[ConnectionPool]:
    pool = create_pool(settings.database_url, size=settings.db_pool_size)
    init_db(pool)
    yield pool
    pool.close()


@pytest.fixture
def service(pool: ConnectionPool) -> UserService:
    return UserService(pool)

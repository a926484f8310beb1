# tests/conftest.py
from __future__ import annotations

import os
from typing import Generator

# In-memory store for the whole run; must be set before catalog is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DB_CREATE_ALL"] = "0"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from catalog import models  # noqa: F401
from catalog.database import Base, engine
from catalog.main import app


@pytest.fixture(autouse=True)
def _schema() -> Generator[None, None, None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """TestClient on the app; lifespan runs so startup checks are exercised."""
    with TestClient(app) as c:
        yield c

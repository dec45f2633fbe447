"""Shared fixtures: an in-memory store, services and an HTTP client."""

import asyncio
import os

import pytest

# Keep the default settings away from any real database file.
os.environ.setdefault("DATABASE_URL", ":memory:")

from scholaria_api.app.core.db import Database
from scholaria_api.app.core.search_options import SearchDefaults
from scholaria_api.app.services import FindingService, ResearcherService, SubjectService


class FakeClock:
    """Strictly increasing ISO timestamps, one second apart."""

    def __init__(self):
        self.ticks = 0

    def __call__(self) -> str:
        self.ticks += 1
        minutes, seconds = divmod(self.ticks, 60)
        return f"2024-01-01T00:{minutes:02d}:{seconds:02d}.000000+00:00"


@pytest.fixture
def database():
    db = Database(":memory:").connect()
    yield db
    db.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def defaults():
    return SearchDefaults(default_page_size=5, max_page_size=10, default_sort="updated_at")


@pytest.fixture
def researchers(database, defaults, clock):
    return ResearcherService(database, defaults=defaults, clock=clock)


@pytest.fixture
def subjects(database, defaults, clock):
    return SubjectService(database, defaults=defaults, clock=clock)


@pytest.fixture
def findings(database, defaults, clock):
    return FindingService(database, defaults=defaults, clock=clock)


@pytest.fixture
def run():
    """Run a service coroutine to completion."""
    return asyncio.run


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from scholaria_api.app.main import create_app

    with TestClient(create_app(":memory:")) as test_client:
        yield test_client

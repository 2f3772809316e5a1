"""
pytest configuration and fixtures for the lookups test suite
Each test gets fresh in-memory stores wired through the real services and app
"""

import pytest
from fastapi.testclient import TestClient

from app import create_app
from config.settings import Scopes, UserRoles
from services.container import build_container

from lookups.infrastructure import FakePrimaryStore, FakeSearchIndex, RecordingPublisher, auth_headers


@pytest.fixture
def primary_store():
    return FakePrimaryStore()


@pytest.fixture
def search_index():
    return FakeSearchIndex()


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def container(primary_store, search_index, publisher):
    return build_container(primary_store, search_index, publisher)


@pytest.fixture
def client(container):
    return TestClient(create_app(container))


@pytest.fixture
def admin_headers():
    return auth_headers(roles=[UserRoles.ADMIN])


@pytest.fixture
def user_headers():
    return auth_headers(roles=["Topcoder User"])


@pytest.fixture
def machine_headers():
    return auth_headers(machine=True, scopes=[Scopes.ALL_LOOKUP])

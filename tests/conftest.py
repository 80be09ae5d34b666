"""Shared fixtures for the invoice verification test suite"""

import pytest
from fastapi.testclient import TestClient

from api.storage import InMemoryInvoiceStore
from config import AppConfig, STORE_BACKEND_MEMORY
from main import create_app

ADMIN_KEY = "s3cr3t"


@pytest.fixture
def store() -> InMemoryInvoiceStore:
    """Fresh in-memory record store."""
    return InMemoryInvoiceStore()


@pytest.fixture
def app_config() -> AppConfig:
    """Configuration with a known admin key and the in-memory backend."""
    return AppConfig(admin_key=ADMIN_KEY, store_backend=STORE_BACKEND_MEMORY)


@pytest.fixture
def client(app_config, store):
    """HTTP client bound to an app using the fixture store."""
    with TestClient(create_app(app_config, store)) as test_client:
        yield test_client

"""Pytest configuration and shared fixtures for tests."""

import logging
from pathlib import Path

import pytest

from src.core.config import config
from src.web_app import app as flask_app
from src.web_app import get_encryption_service, get_signing_service

logger = logging.getLogger(__name__)


@pytest.fixture(autouse=True)
def _isolate_services():
    """Drop cached services and reload config after each test.

    Tests that change SIGNING_SECRET or PORT through monkeypatch get a
    clean signer and config on the next test.
    """
    yield
    get_encryption_service.cache_clear()
    get_signing_service.cache_clear()
    config.reload()


@pytest.fixture
def app():
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture
def client(app):
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def sample_payload():
    """Provide a payload mixing flat and nested values."""
    return {
        "name": "John Doe",
        "age": 30,
        "contact": {
            "email": "john@example.com",
            "phone": "123-456-7890",
        },
    }


@pytest.fixture
def project_root():
    """Get the project root directory."""
    return Path(__file__).parent.parent

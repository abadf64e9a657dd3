# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up test environment variables before any imports
# - Builds a ContactService over an in-memory store
# - Provides a TestClient with the service dependency overridden
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

TEST_JWT_SECRET = "test-jwt-secret-0123456789"

os.environ.setdefault("JWT_SECRET", TEST_JWT_SECRET)
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "false")

import pytest
from fastapi.testclient import TestClient

from core.services import ContactService, PasswordHasher, TokenIssuer
from lib.contact_store import InMemoryContactStore


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def store():
    """Empty in-memory contact store."""
    return InMemoryContactStore()


@pytest.fixture
def hasher():
    """bcrypt hasher at the minimum cost factor to keep tests fast."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens():
    """Token issuer signing with the test secret."""
    return TokenIssuer(secret=TEST_JWT_SECRET)


@pytest.fixture
def service(store, hasher, tokens):
    """ContactService over the in-memory store."""
    return ContactService(store=store, hasher=hasher, tokens=tokens)


@pytest.fixture
def client(service):
    """TestClient whose routes use the `service` fixture."""
    from app.dependencies import get_contact_service
    from app.main import app

    app.dependency_overrides[get_contact_service] = lambda: service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def contact_payload():
    """A valid create body, camelCase as clients send it."""
    return {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "middleName": "King",
        "dob": "1815-12-10",
        "email": "ada@analytical.io",
        "phone": "+44 20 7946 0000",
        "occupation": "Mathematician",
        "company": "Analytical Engines Ltd",
        "password": "secret1",
    }


@pytest.fixture
def other_payload():
    """A second valid create body that collides with nothing above."""
    return {
        "firstName": "Charles",
        "lastName": "Babbage",
        "email": "charles@analytical.io",
        "phone": "+44 20 7946 0001",
        "password": "engine42",
    }

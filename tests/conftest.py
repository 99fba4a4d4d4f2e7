# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up test environment variables before any imports
# - Points the app at a throwaway SQLite database
# - Provides a TestClient, user fixtures and a CSRF helper
# =============================================================================

import os
import re
import tempfile

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

_TEST_DIR = tempfile.mkdtemp(prefix="staffdesk-tests-")

os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DIR, 'test.sqlite3')}"
os.environ["MEDIA_ROOT"] = os.path.join(_TEST_DIR, "media")
os.environ.setdefault("SECRET_KEY", "test-secret-key-0123456789")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("ALLOWED_HOSTS", "testserver,localhost")

import pytest
from fastapi.testclient import TestClient

from app.main import app
from core.services.user_service import UserService
from lib.database import SessionLocal, drop_db, init_db

CSRF_PATTERN = re.compile(r'name="csrf_token" value="([^"]+)"')

PASSWORD = "amber-Lantern-42"
STAFF_PASSWORD = "violet-Harbor-77"


# =============================================================================
# Helpers
# =============================================================================

def extract_csrf(html: str) -> str:
    """Pull the CSRF token out of a rendered form."""
    match = CSRF_PATTERN.search(html)
    assert match, "page has no csrf_token field"
    return match.group(1)


def login_via_form(client: TestClient, username: str, password: str, next_url: str = ""):
    """Submit the login form the way a browser would. Returns the 303 response."""
    token = extract_csrf(client.get("/login/").text)
    return client.post(
        "/login/",
        data={"username": username, "password": password, "csrf_token": token, "next": next_url},
        follow_redirects=False,
    )


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def db():
    """Fresh schema and a session for each test."""
    drop_db()
    init_db()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    """TestClient with the app lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def user(db):
    """A regular active user in the Finance department."""
    return UserService.create_user(
        db,
        username="asmith",
        password=PASSWORD,
        email="Alice.Smith@Example.com",
        first_name="Alice",
        last_name="Smith",
        department="Finance",
        designation="Analyst",
    )


@pytest.fixture
def staff_user(db):
    """A staff account that can use the admin pages."""
    return UserService.create_superuser(
        db,
        username="boss",
        password=STAFF_PASSWORD,
        email="boss@example.com",
        first_name="Bea",
        last_name="Oswald",
        department="Operations",
        designation="Manager",
    )


@pytest.fixture
def logged_in_client(client, user):
    """Client whose session belongs to `user`."""
    response = login_via_form(client, "asmith", PASSWORD)
    assert response.status_code == 303
    return client


@pytest.fixture
def staff_client(client, staff_user):
    """Client whose session belongs to `staff_user`."""
    response = login_via_form(client, "boss", STAFF_PASSWORD)
    assert response.status_code == 303
    return client


@pytest.fixture
def registration_data():
    """Valid sign-up form fields (without the CSRF token)."""
    return {
        "username": "jdoe",
        "email": "jdoe@example.com",
        "first_name": "John",
        "last_name": "Doe",
        "department": "Engineering",
        "designation": "Developer",
        "password1": "granite-Meadow-19",
        "password2": "granite-Meadow-19",
    }

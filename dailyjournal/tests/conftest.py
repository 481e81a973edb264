import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from dailyjournal import create_app
from dailyjournal.core.auth.auth_service import issue_session_token
from dailyjournal.core.auth.password import hash_password
from dailyjournal.core.users.models import User
from dailyjournal.extensions import db


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (database, API)")
    config.addinivalue_line("markers", "slow: Slow running tests")
    config.addinivalue_line("markers", "smoke: Quick smoke tests for CI")


@pytest.fixture()
def app():
    """
    Create a per-test app backed by a fresh in-memory database.

    The app context stays pushed for the whole test so services, fixtures and
    test-client requests share one session.
    """
    app = create_app("testing")
    ctx = app.app_context()
    ctx.push()
    db.create_all()
    try:
        yield app
    finally:
        db.session.remove()
        db.drop_all()
        ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


def _make_user(username: str, email: str, password: str = "secret123") -> User:
    user = User(username=username, email=email, password_hash=hash_password(password))
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture()
def user(app):
    """Primary test user (password ``secret123``)."""
    return _make_user("journal-tester", "tester@example.com")


@pytest.fixture()
def other_user(app):
    """Second user for isolation tests."""
    return _make_user("other-tester", "other@example.com")


def auth_headers_for(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_session_token(user)}"}


@pytest.fixture()
def auth_headers(user):
    return auth_headers_for(user)


@pytest.fixture()
def other_auth_headers(other_user):
    return auth_headers_for(other_user)

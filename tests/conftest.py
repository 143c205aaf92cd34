"""Pytest configuration and fixtures."""

import os

import pytest

# Settings are read lazily and cached; set before any test builds them
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("ANTHROPIC_API_KEY", "test-anthropic-key")
os.environ["COACH_ENV"] = "test"


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables."""
    from app.core.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def auth_user():
    """Authenticate every request as a fixed test user."""
    from app.core.auth_middleware import AuthContext, require_auth
    from app.main import app

    user = AuthContext(user_id="user-123", token="test-token", email="runner@example.com")
    app.dependency_overrides[require_auth] = lambda: user
    yield user
    app.dependency_overrides.pop(require_auth, None)

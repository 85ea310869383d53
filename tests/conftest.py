"""
Shared fixtures: isolated Settings per test and a TestClient wired to them.
No test talks to the real GitHub API.
"""
import httpx
import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings, get_settings

FAKE_TOKEN = "ghp_fake_secret_token_123"
FAKE_REPO = "sterik/game-issues"
ISSUES_URL = f"https://api.github.com/repos/{FAKE_REPO}/issues"


def github_response(status_code=201, payload=None):
    """Build a real httpx.Response as GitHub would return it."""
    if payload is None:
        payload = {"number": 42, "html_url": f"https://github.com/{FAKE_REPO}/issues/42"}
    return httpx.Response(
        status_code,
        json=payload,
        request=httpx.Request("POST", ISSUES_URL),
    )


@pytest.fixture
def settings(tmp_path):
    return Settings(
        github_token=FAKE_TOKEN,
        github_repo=FAKE_REPO,
        upload_dir=str(tmp_path / "uploads"),
        max_upload_bytes=1024,
    )


@pytest.fixture
def client(settings):
    from main import app

    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()

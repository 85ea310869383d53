import dataclasses

import pytest

from app.core.config import Settings
from app.core.constants import DEFAULT_ALLOWED_EXTENSIONS, DEFAULT_MAX_UPLOAD_BYTES

_ENV_VARS = [
    "GITHUB_TOKEN", "GITHUB_REPO", "GITHUB_API_URL", "GITHUB_TIMEOUT", "HOST", "PORT",
    "UPLOAD_DIR", "MAX_UPLOAD_BYTES", "ALLOWED_EXTENSIONS", "REQUIRE_DESCRIPTION",
    "LOG_LEVEL", "LOG_DIR",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    s = Settings.from_env()
    assert s.github_token is None
    assert s.github_repo is None
    assert s.has_github_config is False
    assert s.port == 5000
    assert s.upload_dir == "uploads"
    assert s.max_upload_bytes == DEFAULT_MAX_UPLOAD_BYTES
    assert s.allowed_extensions == DEFAULT_ALLOWED_EXTENSIONS
    assert s.require_description is False


def test_values_from_env(clean_env):
    clean_env.setenv("GITHUB_TOKEN", "ghp_x")
    clean_env.setenv("GITHUB_REPO", "/studio/issues/")
    clean_env.setenv("GITHUB_API_URL", "https://ghe.example.com/api/v3/")
    clean_env.setenv("PORT", "8080")
    clean_env.setenv("MAX_UPLOAD_BYTES", "2048")
    clean_env.setenv("REQUIRE_DESCRIPTION", "TRUE")
    clean_env.setenv("ALLOWED_EXTENSIONS", "png, .LOG,,vessel")

    s = Settings.from_env()
    assert s.has_github_config is True
    assert s.github_repo == "studio/issues"
    assert s.github_api_url == "https://ghe.example.com/api/v3"
    assert s.port == 8080
    assert s.max_upload_bytes == 2048
    assert s.require_description is True
    assert s.allowed_extensions == frozenset({".png", ".log", ".vessel"})


def test_settings_are_immutable():
    s = Settings()
    with pytest.raises(dataclasses.FrozenInstanceError):
        s.github_token = "changed"

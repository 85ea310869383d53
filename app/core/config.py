"""
Configuration
=============
Loads environment variables from .env file using python-dotenv.

Environment Variables:
    GITHUB_TOKEN         — Credential used to create issues (required for /report)
    GITHUB_REPO          — Target repository, "owner/repo" (required for /report)
    GITHUB_API_URL       — Tracker base URL (default: https://api.github.com)
    GITHUB_TIMEOUT       — Outbound request timeout in seconds (default: 20)
    HOST / PORT          — Bind address for `python main.py` (default: 0.0.0.0:5000)
    UPLOAD_DIR           — Flat directory for stored uploads (default: uploads)
    MAX_UPLOAD_BYTES     — Upload ceiling in bytes (default: 100 MiB)
    ALLOWED_EXTENSIONS   — Comma list overriding the default extension allow-list
    REQUIRE_DESCRIPTION  — Reject reports with a blank description (default: false)
    LOG_LEVEL            — Root log level (default: INFO)
    LOG_DIR              — When set, logs are also written to a dated file there

Settings are read once per process and never change afterwards. Routes get
them through `Depends(get_settings)`, so tests swap them with
`app.dependency_overrides[get_settings]`.
"""
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import FrozenSet, Optional

from dotenv import load_dotenv

from app.core.constants import DEFAULT_ALLOWED_EXTENSIONS, DEFAULT_MAX_UPLOAD_BYTES

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _parse_extensions(raw: Optional[str]) -> FrozenSet[str]:
    """Normalise a comma list like "png, .JPG" into {".png", ".jpg"}."""
    if not raw:
        return DEFAULT_ALLOWED_EXTENSIONS
    exts = set()
    for item in raw.split(","):
        item = item.strip().lower()
        if not item:
            continue
        exts.add(item if item.startswith(".") else f".{item}")
    return frozenset(exts) or DEFAULT_ALLOWED_EXTENSIONS


@dataclass(frozen=True, repr=False)
class Settings:
    github_token: Optional[str] = None
    github_repo: Optional[str] = None
    github_api_url: str = "https://api.github.com"
    github_timeout: float = 20.0
    host: str = "0.0.0.0"
    port: int = 5000
    upload_dir: str = "uploads"
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    allowed_extensions: FrozenSet[str] = DEFAULT_ALLOWED_EXTENSIONS
    require_description: bool = False
    log_level: str = "INFO"
    log_dir: Optional[str] = None

    @property
    def has_github_config(self) -> bool:
        return bool(self.github_token and self.github_repo)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            github_token=os.getenv("GITHUB_TOKEN") or None,
            github_repo=(os.getenv("GITHUB_REPO") or "").strip().strip("/") or None,
            github_api_url=os.getenv("GITHUB_API_URL", "https://api.github.com").rstrip("/"),
            github_timeout=float(os.getenv("GITHUB_TIMEOUT", 20)),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", 5000)),
            upload_dir=os.getenv("UPLOAD_DIR", "uploads"),
            max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)),
            allowed_extensions=_parse_extensions(os.getenv("ALLOWED_EXTENSIONS")),
            require_description=_env_bool("REQUIRE_DESCRIPTION"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_dir=os.getenv("LOG_DIR") or None,
        )

    def __repr__(self) -> str:
        # Keep the credential out of reprs that end up in logs or tracebacks
        token = "***" if self.github_token else None
        return (
            f"Settings(github_repo={self.github_repo!r}, github_token={token!r}, "
            f"upload_dir={self.upload_dir!r}, max_upload_bytes={self.max_upload_bytes}, "
            f"require_description={self.require_description})"
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, built on first use."""
    return Settings.from_env()

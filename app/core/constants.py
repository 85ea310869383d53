"""
Constants
Centralised storage for report defaults, label names and upload rules.
"""
import re

DEFAULT_TITLE = "Unity Bug Report"
DEFAULT_LABEL = "bug"
ANONYMOUS_SUBMITTER = "Anonymous"
NO_SCREENSHOT_SENTINEL = "[No screenshot provided]"

LABEL_HAS_SCREENSHOT = "has-screenshot"
LABEL_HAS_VESSEL = "has-vessel"

# "Game Version: 2.3.1" / "game version: v2.3" inside the systemInfo blob
GAME_VERSION_RE = re.compile(r"game\s+version\s*:\s*v?(\d+(?:\.\d+)+)", re.IGNORECASE)

DEFAULT_ALLOWED_EXTENSIONS = frozenset({
    ".png", ".jpg", ".jpeg", ".gif", ".webp",
    ".vessel", ".txt", ".log", ".zip", ".gz", ".json",
})
DEFAULT_MAX_UPLOAD_BYTES = 100 * 1024 * 1024  # 100 MiB

# Multipart field names
VESSEL_FIELD = "vessel"
ATTACHMENT_FIELD = "attachment"

UPLOADS_URL_PREFIX = "/uploads"

ISSUE_FAILURE_MESSAGE = "Failed to create issue"

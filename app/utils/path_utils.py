"""
Path Utils
==========
Filename sanitisation and upload path/URL helpers.

Responsibilities:
    - Reduce a client-supplied filename to a safe basename
    - Generate collision-resistant stored names
    - Resolve stored names back to paths inside the upload directory
    - Build public retrieval URLs for stored files
"""
import os
import re
import secrets
import time
from typing import Optional

from app.core.constants import UPLOADS_URL_PREFIX

_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9._-]")


def sanitize_filename(filename: str) -> str:
    """
    Reduce a client filename to characters in [A-Za-z0-9._-].

    Directory parts (either separator) are dropped first, then every other
    character is replaced with "_". A leading dot is replaced as well so the
    result is never hidden and never "." or "..".
    """
    base = re.split(r"[\\/]", filename or "")[-1]
    base = _UNSAFE_CHARS_RE.sub("_", base)
    if base.startswith("."):
        base = "_" + base[1:]
    return base or "file"


def get_extension(filename: str) -> str:
    """Lower-cased extension including the dot, "" when there is none."""
    base = re.split(r"[\\/]", filename or "")[-1]
    return os.path.splitext(base)[1].lower()


def generate_stored_name(filename: str, now_ms: Optional[int] = None) -> str:
    """
    Build "<epoch-millis>-<token>-<sanitized name>".

    The millisecond prefix keeps names sortable by upload time; the random
    token separates uploads landing in the same millisecond.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{now_ms}-{secrets.token_hex(4)}-{sanitize_filename(filename)}"


def resolve_stored_path(upload_dir: str, stored_name: str) -> Optional[str]:
    """
    Map a stored name to its absolute path, or None when the name would
    escape the upload directory or does not name a regular file in it.
    """
    if not stored_name or stored_name != sanitize_filename(stored_name):
        return None
    root = os.path.realpath(upload_dir)
    path = os.path.realpath(os.path.join(root, stored_name))
    if os.path.dirname(path) != root or not os.path.isfile(path):
        return None
    return path


def build_file_url(base_url: str, stored_name: str) -> str:
    """Absolute URL under /uploads for a stored file, from the request's base URL."""
    return f"{base_url.rstrip('/')}{UPLOADS_URL_PREFIX}/{stored_name}"

"""
Issue Formatter
===============
THE SINGLE SOURCE OF TRUTH for issue titles, bodies and labels.

DETERMINISM CONTRACT:
  - This module NEVER reads environment variables.
  - This module NEVER performs I/O.
  - Given the same BugReport and attachment, it ALWAYS returns the same
    IssueDraft, byte for byte.

BODY LAYOUT (sections joined by one blank line, in this order):
    ### Description            — only when a description was given
    ### Screenshot             — URL, or "[No screenshot provided]"
    ### Vessel File            — only when a file was uploaded or referenced
    <details> System Info      — only when systemInfo was given
    Submitted by: <token>      — always last, "Anonymous" without a token

LABEL RULES:
    base    : explicit labels  >  [issue_type]  >  ["bug"]
    derived : v<version>, has-screenshot, has-vessel (appended in that order)
    duplicates dropped, first occurrence wins
"""
import posixpath
import re
from typing import List, Optional
from urllib.parse import urlparse

from app.core.constants import (
    ANONYMOUS_SUBMITTER,
    DEFAULT_LABEL,
    GAME_VERSION_RE,
    LABEL_HAS_SCREENSHOT,
    LABEL_HAS_VESSEL,
    NO_SCREENSHOT_SENTINEL,
)
from app.models.bug_report import BugReport
from app.models.issue import IssueDraft
from app.models.uploaded_file import UploadedFile


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------
def extract_game_version(system_info: Optional[str]) -> Optional[str]:
    """Return "2.3.1" from a blob containing "Game Version: 2.3.1", else None."""
    if not system_info:
        return None
    match = GAME_VERSION_RE.search(system_info)
    return match.group(1) if match else None


def derive_labels(report: BugReport, has_attachment: bool = False) -> List[str]:
    """
    Compute the ordered label list for a report.

    Parameters
    ----------
    report : BugReport
        Normalised report.
    has_attachment : bool
        True when a file was uploaded alongside the report.

    Returns
    -------
    list[str]
        Base labels followed by derived ones, without duplicates.
    """
    if report.labels:
        base = list(report.labels)
    elif report.issue_type:
        base = [report.issue_type]
    else:
        base = [DEFAULT_LABEL]

    derived: List[str] = []
    version = extract_game_version(report.system_info)
    if version:
        derived.append(f"v{version}")
    if report.screenshot_url:
        derived.append(LABEL_HAS_SCREENSHOT)
    if has_attachment or report.vessel_url:
        derived.append(LABEL_HAS_VESSEL)

    labels: List[str] = []
    for label in base + derived:
        if label not in labels:
            labels.append(label)
    return labels


# ---------------------------------------------------------------------------
# Body sections
# ---------------------------------------------------------------------------
def _vessel_link(report: BugReport, attachment: Optional[UploadedFile]) -> Optional[str]:
    if attachment is not None:
        return f"[Download {attachment.original_name}]({attachment.url})"
    if report.vessel_url:
        name = posixpath.basename(urlparse(report.vessel_url).path) or "vessel file"
        return f"[Download {name}]({report.vessel_url})"
    return None


def code_fence(text: str) -> str:
    """Backtick fence one longer than any backtick run in text, at least three."""
    longest = max((len(run) for run in re.findall(r"`+", text)), default=0)
    return "`" * max(3, longest + 1)


def format_body(report: BugReport, attachment: Optional[UploadedFile] = None) -> str:
    sections: List[str] = []

    if report.description:
        sections.append(f"### Description\n{report.description}")

    sections.append(f"### Screenshot\n{report.screenshot_url or NO_SCREENSHOT_SENTINEL}")

    link = _vessel_link(report, attachment)
    if link:
        sections.append(f"### Vessel File\n{link}")

    if report.system_info:
        fence = code_fence(report.system_info)
        sections.append(
            "<details>\n<summary>System Info</summary>\n\n"
            f"{fence}\n{report.system_info}\n{fence}\n</details>"
        )

    sections.append(f"Submitted by: {report.user_token or ANONYMOUS_SUBMITTER}")
    return "\n\n".join(sections)


def build_issue(report: BugReport, attachment: Optional[UploadedFile] = None) -> IssueDraft:
    """Compose the full IssueDraft (title, body, labels) for a report."""
    return IssueDraft(
        title=report.title,
        body=format_body(report, attachment),
        labels=derive_labels(report, has_attachment=attachment is not None),
    )

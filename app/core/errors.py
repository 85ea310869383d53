"""
Errors
======
Typed failures raised inside the pipeline. Each carries the HTTP status the
client should see and a message that is safe to show them. The report
pipeline catches these and turns them into a failed ReportOutcome.
"""
from app.core.constants import ISSUE_FAILURE_MESSAGE


class RelayError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ReportValidationError(RelayError):
    """Client sent a report we cannot accept (bad body, missing description, ...)."""
    status_code = 400


class IssueTrackerError(RelayError):
    """
    Issue creation failed: missing configuration, transport error, or a
    non-success reply. `status_code` is the upstream status when known.
    `detail` holds redacted upstream text for logs only.
    """

    def __init__(self, status_code: int = 500, detail: str = "") -> None:
        super().__init__(ISSUE_FAILURE_MESSAGE, status_code)
        self.detail = detail

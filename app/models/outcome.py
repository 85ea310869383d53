"""
Outcome Models
==============
Explicit result values threaded through the upload and report pipelines.
Services never raise for expected failures; they return an outcome with
success=False, a status code and a client-safe error message. The router
turns outcomes into HTTP responses in one place (see app/api/responses.py).
"""
from typing import Optional

from pydantic import BaseModel

from .issue import CreatedIssue
from .uploaded_file import UploadedFile


class UploadOutcome(BaseModel):
    success: bool = False
    status_code: int = 200
    error: str = ""
    file: Optional[UploadedFile] = None

    @classmethod
    def ok(cls, file: UploadedFile) -> "UploadOutcome":
        return cls(success=True, file=file)

    @classmethod
    def fail(cls, status_code: int, error: str) -> "UploadOutcome":
        return cls(success=False, status_code=status_code, error=error)


class ReportOutcome(BaseModel):
    success: bool = False
    status_code: int = 200
    error: str = ""
    issue: Optional[CreatedIssue] = None
    attachment: Optional[UploadedFile] = None

    @classmethod
    def fail(cls, status_code: int, error: str) -> "ReportOutcome":
        return cls(success=False, status_code=status_code, error=error)

"""
Response Adapter
================
The one place where pipeline outcomes become HTTP responses.

Success shapes are what the game client parses:
    upload : {"success": true, "fileUrl": ...}
    report : {"success": true, "issue_url", "issue_number", "attachment"}
Every failure is {"error": <message>} with the outcome's status code.
"""
from fastapi.responses import JSONResponse

from app.models.outcome import ReportOutcome, UploadOutcome


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def upload_response(outcome: UploadOutcome) -> JSONResponse:
    if not outcome.success:
        return error_response(outcome.status_code, outcome.error)
    return JSONResponse(content={"success": True, "fileUrl": outcome.file.url})


def report_response(outcome: ReportOutcome) -> JSONResponse:
    if not outcome.success:
        return error_response(outcome.status_code, outcome.error)
    attachment = None
    if outcome.attachment is not None:
        attachment = {"name": outcome.attachment.original_name, "url": outcome.attachment.url}
    return JSONResponse(content={
        "success": True,
        "issue_url": outcome.issue.html_url,
        "issue_number": outcome.issue.number,
        "attachment": attachment,
    })

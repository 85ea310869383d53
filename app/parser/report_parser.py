"""
Report Parser
=============
Normalises an inbound /report request into one BugReport.

The game client posts either JSON or a multipart form (the latter when it
attaches a file). Both encodings are read here and validated into the same
BugReport, so nothing downstream ever looks at the raw request again.

Form quirks handled:
    - "labels" may repeat, or arrive as "labels[]" from urlencoded clients
    - a file is only accepted under the configured field name
    - at most one file per request
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import ValidationError
from starlette.datastructures import UploadFile
from starlette.requests import Request

from app.core.constants import ATTACHMENT_FIELD
from app.core.errors import ReportValidationError
from app.models.bug_report import BugReport

logger = logging.getLogger(__name__)

_FORM_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


@dataclass
class ParsedReport:
    report: BugReport
    upload: Optional[UploadFile] = None


def _is_json(content_type: str) -> bool:
    return content_type.startswith("application/json") or "+json" in content_type


def _to_report(fields: Dict[str, Any]) -> BugReport:
    try:
        return BugReport.model_validate(fields)
    except ValidationError as e:
        logger.info("report_rejected reason=validation errors=%d", e.error_count())
        raise ReportValidationError("Invalid report fields") from e


async def _parse_json(request: Request) -> Dict[str, Any]:
    # Unparseable bodies are not caught here; the app-level handler answers
    # them with a 500 and logs the traceback
    raw = await request.body()
    if not raw.strip():
        return {}
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(f"JSON body must be an object, got {type(data).__name__}")
    return data


async def parse_report_request(
    request: Request,
    file_field: str = ATTACHMENT_FIELD,
) -> ParsedReport:
    """
    Read the request body (JSON or form) into a ParsedReport.

    Raises
    ------
    ReportValidationError
        A file under an unexpected field, more than one file, or fields
        that do not validate.
    ValueError
        Malformed JSON or a non-object JSON body. Left to the app-level
        handler as an internal error.
    """
    content_type = request.headers.get("content-type", "").lower()

    if _is_json(content_type):
        return ParsedReport(report=_to_report(await _parse_json(request)))

    if not content_type.startswith(_FORM_TYPES):
        # Nothing we can read; an empty report still gets all defaults
        return ParsedReport(report=BugReport())

    form = await request.form()
    fields: Dict[str, Any] = {}
    upload: Optional[UploadFile] = None

    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            if key != file_field:
                raise ReportValidationError(f"Unexpected file field: {key}")
            if not value.filename:
                # Empty file input submitted by a browser form
                continue
            if upload is not None:
                raise ReportValidationError("Only one file may be uploaded")
            upload = value
            continue

        if key in ("labels", "labels[]"):
            fields.setdefault("labels", []).append(value)
        else:
            fields[key] = value

    return ParsedReport(report=_to_report(fields), upload=upload)

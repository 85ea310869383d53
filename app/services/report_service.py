"""
Report Service
==============
The request-to-issue pipeline shared by /report and /submit-bug:

    parse -> validate -> (store attachment) -> compose -> submit

Each step either hands its value to the next or ends the run with a failed
ReportOutcome. Nothing is retried and nothing survives the request except a
stored attachment file.
"""
import logging
from typing import Optional

from starlette.requests import Request

from app.core.config import Settings
from app.core.constants import ATTACHMENT_FIELD
from app.core.errors import IssueTrackerError, ReportValidationError
from app.core.issue_formatter import build_issue
from app.models.bug_report import BugReport
from app.models.outcome import ReportOutcome
from app.models.uploaded_file import UploadedFile
from app.parser.report_parser import parse_report_request
from app.services.issue_submitter import IssueSubmitter
from app.services.upload_service import UploadService

logger = logging.getLogger(__name__)


class ReportService:
    """
    Runs one bug report through the pipeline.
    """

    def __init__(
        self,
        settings: Settings,
        uploads: Optional[UploadService] = None,
        submitter: Optional[IssueSubmitter] = None,
        file_field: str = ATTACHMENT_FIELD,
    ) -> None:
        self.settings = settings
        self.uploads = uploads or UploadService(settings)
        self.submitter = submitter or IssueSubmitter(settings)
        self.file_field = file_field

    def validate(self, report: BugReport) -> None:
        if self.settings.require_description and not report.description.strip():
            raise ReportValidationError("Description is required")

    async def submit(self, request: Request) -> ReportOutcome:
        """Run the whole pipeline for one request."""
        try:
            parsed = await parse_report_request(request, self.file_field)
            self.validate(parsed.report)
        except ReportValidationError as e:
            return ReportOutcome.fail(e.status_code, e.message)

        report = parsed.report
        attachment: Optional[UploadedFile] = None
        if parsed.upload is not None:
            stored = await self.uploads.store(parsed.upload, str(request.base_url))
            if not stored.success:
                return ReportOutcome.fail(stored.status_code, stored.error)
            attachment = stored.file

        logger.info(
            "report_received label_hint=%s user_token_present=%s "
            "screenshot_present=%s attachment_present=%s",
            report.issue_type, bool(report.user_token),
            bool(report.screenshot_url), bool(attachment or report.vessel_url),
        )

        draft = build_issue(report, attachment)
        try:
            issue = await self.submitter.create_issue(draft)
        except IssueTrackerError as e:
            logger.error("report_failed status=%d", e.status_code)
            return ReportOutcome.fail(e.status_code, e.message)

        return ReportOutcome(success=True, issue=issue, attachment=attachment)

"""
Issue Submitter
===============
Creates one issue through the GitHub REST API.

    POST {api_url}/repos/{owner}/{repo}/issues   {title, body, labels}

Single best-effort call: no retry, no backoff. Any failure is raised as
IssueTrackerError carrying the upstream status (500 when unknown). The token
is redacted from everything this module logs.
"""
import logging

import httpx

from app.core.config import Settings
from app.core.errors import IssueTrackerError
from app.models.issue import CreatedIssue, IssueDraft
from app.utils.logging_config import redact

logger = logging.getLogger(__name__)

_MAX_DETAIL_CHARS = 300


class IssueSubmitter:
    """
    Thin client for the tracker's issue-creation endpoint.
    """

    def __init__(self, settings: Settings) -> None:
        self.github_token = settings.github_token
        self.repo = settings.github_repo
        self.api_url = settings.github_api_url.rstrip("/")
        self.timeout = settings.github_timeout
        self.headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "UnityBugReporter",
        }
        if self.github_token:
            self.headers["Authorization"] = f"token {self.github_token}"

    @property
    def issues_url(self) -> str:
        return f"{self.api_url}/repos/{self.repo}/issues"

    def _safe(self, text: str) -> str:
        return redact(text or "", [self.github_token])[:_MAX_DETAIL_CHARS]

    async def create_issue(self, draft: IssueDraft) -> CreatedIssue:
        """
        Submit the draft and return the tracker's number and URL.

        Raises
        ------
        IssueTrackerError
            Missing configuration, transport failure, non-2xx reply, or a
            reply without html_url/number.
        """
        if not self.github_token or not self.repo:
            logger.error(
                "create_issue_failed reason=missing_config has_token=%s has_repo=%s",
                bool(self.github_token), bool(self.repo),
            )
            raise IssueTrackerError(500, "GitHub configuration missing (GITHUB_TOKEN / GITHUB_REPO)")

        logger.info(
            "create_issue_attempt repo=%s title=%r labels=%s",
            self.repo, draft.title, draft.labels,
        )

        try:
            async with httpx.AsyncClient(headers=self.headers, timeout=self.timeout) as client:
                response = await client.post(self.issues_url, json=draft.model_dump())
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as http_err:
            status_code = http_err.response.status_code
            detail = self._safe(http_err.response.text)
            logger.error("create_issue_failed status=%d detail=%s", status_code, detail)
            raise IssueTrackerError(status_code, detail) from http_err
        except (httpx.HTTPError, ValueError) as e:
            # Transport errors and undecodable bodies have no upstream status
            detail = self._safe(str(e))
            logger.error("create_issue_failed status=500 error=%s", detail)
            raise IssueTrackerError(500, detail) from e

        number = data.get("number") if isinstance(data, dict) else None
        html_url = data.get("html_url") if isinstance(data, dict) else None
        if number is None or not html_url:
            logger.error("create_issue_failed status=502 reason=incomplete_response")
            raise IssueTrackerError(502, "Tracker response missing number/html_url")

        issue = CreatedIssue(number=number, html_url=html_url)
        logger.info("create_issue_success number=%d url=%s", issue.number, issue.html_url)
        return issue

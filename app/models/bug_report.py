"""
Bug Report Model
================
Pydantic model for one inbound report from the game client.
This is the contract between the request parse step and everything downstream:
JSON bodies and form fields both end up here before any business logic runs.

Fields:
    title           — trimmed, "Unity Bug Report" when blank or absent
    description     — free text, may be empty
    issue_type      — label hint from the client (e.g. "bug", "crash")
    labels          — explicit labels; a single string, "a,b" or a list
    screenshot_url  — link to a screenshot hosted elsewhere
    system_info     — free-text hardware/build dump from the client
    user_token      — opaque submitter id, never logged
    vessel_url      — link to a file stored earlier through /upload-vessel

The client sends camelCase keys (issueType, screenshotUrl, ...); snake_case
names are accepted too.
"""
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.constants import DEFAULT_TITLE


def _blank_to_none(v: Any) -> Optional[str]:
    if v is None:
        return None
    v = str(v).strip()
    return v or None


class BugReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str = DEFAULT_TITLE
    description: str = ""
    issue_type: Optional[str] = Field(default=None, alias="issueType")
    labels: List[str] = Field(default_factory=list)
    screenshot_url: Optional[str] = Field(default=None, alias="screenshotUrl")
    system_info: Optional[str] = Field(default=None, alias="systemInfo")
    user_token: Optional[str] = Field(default=None, alias="userToken")
    vessel_url: Optional[str] = Field(default=None, alias="vesselUrl")

    @field_validator("title", mode="before")
    @classmethod
    def default_title(cls, v: Any) -> str:
        return _blank_to_none(v) or DEFAULT_TITLE

    @field_validator("description", mode="before")
    @classmethod
    def coerce_description(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("issue_type", "screenshot_url", "user_token", "vessel_url", mode="before")
    @classmethod
    def strip_optional(cls, v: Any) -> Optional[str]:
        return _blank_to_none(v)

    @field_validator("system_info", mode="before")
    @classmethod
    def keep_system_info(cls, v: Any) -> Optional[str]:
        # Keep inner whitespace, the dump is rendered verbatim in a code block
        if v is None or not str(v).strip():
            return None
        return str(v).rstrip()

    @field_validator("labels", mode="before")
    @classmethod
    def split_labels(cls, v: Any) -> List[str]:
        if v is None:
            return []
        items = v if isinstance(v, (list, tuple)) else [v]
        labels: List[str] = []
        for item in items:
            if item is None:
                continue
            for part in str(item).split(","):
                part = part.strip()
                if part:
                    labels.append(part)
        return labels

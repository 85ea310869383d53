"""
Issue Models
============
IssueDraft is what gets sent to the tracker; CreatedIssue is the part of the
tracker's reply handed back to the client. Neither is kept after the request.
"""
from typing import List

from pydantic import BaseModel


class IssueDraft(BaseModel):
    title: str
    body: str
    labels: List[str]


class CreatedIssue(BaseModel):
    number: int
    html_url: str

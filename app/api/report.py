"""
POST /report  and  POST /submit-bug
===================================
Turns one bug report into a GitHub issue. /submit-bug is kept for older game
clients and behaves identically.

Accepted bodies:
    application/json                    — report fields only
    multipart/form-data                 — report fields + optional "attachment" file
    application/x-www-form-urlencoded   — report fields only
"""
from fastapi import APIRouter, Depends, Request

from app.api.responses import report_response
from app.core.config import Settings, get_settings
from app.services.report_service import ReportService

router = APIRouter(tags=["Reports"])


@router.post("/report")
@router.post("/submit-bug")
async def submit_report(request: Request, settings: Settings = Depends(get_settings)):
    outcome = await ReportService(settings).submit(request)
    return report_response(outcome)

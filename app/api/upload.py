"""
POST /upload-vessel  (alias: POST /upload)
Stores one file sent under the "vessel" field and returns its public URL.
The client then references that URL as vesselUrl in a later /report call.
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile

from app.api.responses import upload_response
from app.core.config import Settings, get_settings
from app.services.upload_service import UploadService

router = APIRouter(tags=["Uploads"])


@router.post("/upload-vessel")
@router.post("/upload", include_in_schema=False)
async def upload_vessel(
    request: Request,
    vessel: Optional[UploadFile] = File(default=None),
    settings: Settings = Depends(get_settings),
):
    outcome = await UploadService(settings).store(vessel, str(request.base_url))
    return upload_response(outcome)

"""
GET /uploads/{stored_name}
Serves stored uploads back so issue links resolve. Only regular files
directly inside the upload directory are reachable.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from app.api.responses import error_response
from app.core.config import Settings, get_settings
from app.core.constants import UPLOADS_URL_PREFIX
from app.utils.path_utils import resolve_stored_path

router = APIRouter(tags=["Uploads"])


@router.get(UPLOADS_URL_PREFIX + "/{stored_name}")
async def get_upload(stored_name: str, settings: Settings = Depends(get_settings)):
    path = resolve_stored_path(settings.upload_dir, stored_name)
    if path is None:
        return error_response(404, "Not found")
    return FileResponse(path)

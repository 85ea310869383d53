"""
Upload Service
==============
Stores one client file in the flat upload directory.

Rules:
    - extension must be in the allow-list (case-insensitive)
    - size must not exceed the configured maximum; the file is streamed in
      chunks and the partial file is removed as soon as the limit is crossed
      or the stream fails
    - disk work (mkdir, open, write, close, remove) runs in the threadpool
    - stored name = "<epoch-millis>-<token>-<sanitized original name>"
    - files are never modified or deleted afterwards (retention is an ops job)

Every rejection is returned as an UploadOutcome. I/O errors propagate after
the partial file is removed.
"""
import logging
import os
from typing import Optional

from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from app.core.config import Settings
from app.models.outcome import UploadOutcome
from app.models.uploaded_file import UploadedFile
from app.utils.path_utils import build_file_url, generate_stored_name, get_extension

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024  # 1 MiB


def _discard(out, path: str) -> None:
    """Close and delete a partially written upload."""
    out.close()
    os.remove(path)


class UploadService:
    """
    Validates and persists uploads for one Settings instance.
    """

    def __init__(self, settings: Settings) -> None:
        self.upload_dir = settings.upload_dir
        self.max_bytes = settings.max_upload_bytes
        self.allowed_extensions = settings.allowed_extensions

    def ensure_upload_dir(self) -> None:
        os.makedirs(self.upload_dir, exist_ok=True)

    def check_extension(self, filename: str) -> Optional[str]:
        """Return an error message when the extension is not allowed, else None."""
        ext = get_extension(filename)
        if ext not in self.allowed_extensions:
            return f"Unsupported file type: {ext or '(none)'}"
        return None

    async def store(self, upload: Optional[UploadFile], base_url: str) -> UploadOutcome:
        """
        Validate and write one upload.

        Parameters
        ----------
        upload : UploadFile | None
            The multipart file part, or None when the request carried none.
        base_url : str
            Scheme + host of the inbound request, used for the returned URL.

        Returns
        -------
        UploadOutcome
            success with the UploadedFile, or a 400/413 failure.
        """
        if upload is None or not upload.filename:
            return UploadOutcome.fail(400, "No file uploaded")

        original_name = upload.filename
        ext_error = self.check_extension(original_name)
        if ext_error:
            logger.warning("upload_rejected reason=extension name=%r", original_name)
            return UploadOutcome.fail(400, ext_error)

        await run_in_threadpool(self.ensure_upload_dir)
        stored_name = generate_stored_name(original_name)
        path = os.path.join(self.upload_dir, stored_name)

        size = 0
        # "xb" never clobbers an existing file
        out = await run_in_threadpool(open, path, "xb")
        try:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > self.max_bytes:
                    break
                await run_in_threadpool(out.write, chunk)
            if size <= self.max_bytes:
                await run_in_threadpool(out.close)
        except BaseException:
            await run_in_threadpool(_discard, out, path)
            raise

        if size > self.max_bytes:
            await run_in_threadpool(_discard, out, path)
            logger.warning(
                "upload_rejected reason=size name=%r limit=%d", original_name, self.max_bytes
            )
            return UploadOutcome.fail(413, f"File too large (max {self.max_bytes} bytes)")

        stored = UploadedFile(
            original_name=original_name,
            stored_name=stored_name,
            size=size,
            extension=get_extension(original_name),
            path=os.path.abspath(path),
            url=build_file_url(base_url, stored_name),
        )
        logger.info("upload_stored name=%s size=%d", stored_name, size)
        return UploadOutcome.ok(stored)

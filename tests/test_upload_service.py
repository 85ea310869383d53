"""
Unit Tests — Upload Service
===========================
Drives UploadService.store() directly with in-memory uploads.
"""
import asyncio
import io
import os
import threading
from unittest.mock import patch

import pytest
from starlette.datastructures import UploadFile

from app.core.constants import DEFAULT_ALLOWED_EXTENSIONS
from app.services.upload_service import UploadService

BASE_URL = "http://relay.local/"


def _upload(name, data=b"payload"):
    return UploadFile(io.BytesIO(data), filename=name)


@pytest.fixture
def service(settings):
    return UploadService(settings)


@pytest.mark.parametrize("ext", sorted(DEFAULT_ALLOWED_EXTENSIONS))
def test_allowed_extensions_stored(service, settings, ext):
    data = f"content for {ext}".encode()
    outcome = asyncio.run(service.store(_upload(f"file{ext}", data), BASE_URL))

    assert outcome.success is True
    stored = outcome.file
    assert stored.extension == ext
    assert stored.size == len(data)
    assert stored.url == f"http://relay.local/uploads/{stored.stored_name}"
    with open(os.path.join(settings.upload_dir, stored.stored_name), "rb") as fh:
        assert fh.read() == data


def test_extension_check_is_case_insensitive(service):
    outcome = asyncio.run(service.store(_upload("SHOT.PNG"), BASE_URL))
    assert outcome.success is True
    assert outcome.file.extension == ".png"


@pytest.mark.parametrize("name", ["cheat.exe", "script.sh", "noext", ".vessel"])
def test_disallowed_extension_rejected_and_nothing_written(service, settings, name):
    outcome = asyncio.run(service.store(_upload(name), BASE_URL))

    assert outcome.success is False
    assert outcome.status_code == 400
    assert outcome.error.startswith("Unsupported file type:")
    assert not os.path.exists(settings.upload_dir) or os.listdir(settings.upload_dir) == []


def test_rejected_extension_named_in_error(service):
    outcome = asyncio.run(service.store(_upload("cheat.EXE"), BASE_URL))
    assert outcome.error == "Unsupported file type: .exe"


def test_oversized_upload_removed(service, settings):
    data = b"x" * (settings.max_upload_bytes + 1)
    outcome = asyncio.run(service.store(_upload("big.log", data), BASE_URL))

    assert outcome.success is False
    assert outcome.status_code == 413
    assert os.listdir(settings.upload_dir) == []


def test_exact_limit_accepted(service, settings):
    data = b"x" * settings.max_upload_bytes
    outcome = asyncio.run(service.store(_upload("edge.log", data), BASE_URL))
    assert outcome.success is True
    assert outcome.file.size == settings.max_upload_bytes


def test_missing_file(service):
    outcome = asyncio.run(service.store(None, BASE_URL))
    assert outcome.success is False
    assert outcome.status_code == 400
    assert outcome.error == "No file uploaded"


def test_traversal_name_stays_in_upload_dir(service, settings):
    outcome = asyncio.run(service.store(_upload("../../evil.txt"), BASE_URL))

    assert outcome.success is True
    assert os.path.dirname(outcome.file.path) == os.path.abspath(settings.upload_dir)
    assert outcome.file.stored_name.endswith("-evil.txt")
    assert outcome.file.original_name == "../../evil.txt"


def test_same_name_twice_gets_two_files(service, settings):
    first = asyncio.run(service.store(_upload("save.vessel", b"one"), BASE_URL))
    second = asyncio.run(service.store(_upload("save.vessel", b"two"), BASE_URL))

    assert first.file.stored_name != second.file.stored_name
    assert len(os.listdir(settings.upload_dir)) == 2


class _ThreadRecordingFile:
    """Wraps a real file and records the thread of every write."""

    def __init__(self, fh, threads):
        self.fh = fh
        self.threads = threads

    def write(self, data):
        self.threads.append(threading.get_ident())
        return self.fh.write(data)

    def close(self):
        self.fh.close()


def test_disk_writes_run_off_the_event_loop(service, settings):
    write_threads = []
    real_open = open

    def recording_open(path, mode="r", *args, **kwargs):
        return _ThreadRecordingFile(real_open(path, mode, *args, **kwargs), write_threads)

    async def run_test():
        loop_thread = threading.get_ident()
        with patch("app.services.upload_service.open", recording_open, create=True), \
             patch("app.services.upload_service.CHUNK_SIZE", 4):
            outcome = await service.store(_upload("chunks.log", b"0123456789"), BASE_URL)
        return loop_thread, outcome

    loop_thread, outcome = asyncio.run(run_test())

    assert outcome.success is True
    assert len(write_threads) == 3
    assert loop_thread not in write_threads
    with open(outcome.file.path, "rb") as fh:
        assert fh.read() == b"0123456789"


class _FailingStream(io.BytesIO):
    """Serves the first read, then fails like a dropped connection or bad disk."""

    def __init__(self, data):
        super().__init__(data)
        self.reads = 0

    def read(self, size=-1):
        self.reads += 1
        if self.reads > 1:
            raise OSError("stream broke mid-upload")
        return super().read(size)


def test_failed_stream_leaves_no_partial_file(service, settings):
    upload = UploadFile(_FailingStream(b"abcdefghijkl"), filename="a.txt")

    with patch("app.services.upload_service.CHUNK_SIZE", 4):
        with pytest.raises(OSError, match="stream broke"):
            asyncio.run(service.store(upload, BASE_URL))

    assert os.listdir(settings.upload_dir) == []


def test_failed_write_leaves_no_partial_file(service, settings):
    real_open = open

    class _FullDisk:
        def __init__(self, fh):
            self.fh = fh
            self.writes = 0

        def write(self, data):
            self.writes += 1
            if self.writes > 1:
                raise OSError(28, "No space left on device")
            return self.fh.write(data)

        def close(self):
            self.fh.close()

    def full_disk_open(path, mode="r", *args, **kwargs):
        return _FullDisk(real_open(path, mode, *args, **kwargs))

    with patch("app.services.upload_service.open", full_disk_open, create=True), \
         patch("app.services.upload_service.CHUNK_SIZE", 4):
        with pytest.raises(OSError):
            asyncio.run(service.store(_upload("save.vessel", b"x" * 12), BASE_URL))

    assert os.listdir(settings.upload_dir) == []

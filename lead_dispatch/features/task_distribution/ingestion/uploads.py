"""
Transient storage for uploaded files.

An upload is written to the upload directory only for as long as the
pipeline needs it; the file is removed on every exit path, including
parse, validation and persistence failures.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Protocol
from uuid import uuid4

from lead_dispatch.infrastructure.observability.logging import get_logger

from ..domain.errors import UploadTooLargeError

logger = get_logger(__name__)

CHUNK_SIZE = 64 * 1024


class UploadedFile(Protocol):
    """The part of starlette's UploadFile the pipeline relies on."""

    filename: str | None

    async def read(self, size: int = -1) -> bytes:  # pragma: no cover - protocol
        ...


@asynccontextmanager
async def transient_upload(
    upload: UploadedFile, upload_dir: Path, *, max_bytes: int | None = None
) -> AsyncIterator[Path]:
    """
    Persist the upload under a random name and yield its path.

    Usage:
        async with transient_upload(file, settings.upload_path()) as path:
            records = parse_records(path, detect_format(file.filename))
    """
    upload_dir.mkdir(parents=True, exist_ok=True)
    suffix = Path(upload.filename or "").suffix.lower()
    destination = upload_dir / f"{uuid4().hex}{suffix}"

    try:
        written = 0
        with destination.open("wb") as handle:
            while chunk := await upload.read(CHUNK_SIZE):
                written += len(chunk)
                if max_bytes is not None and written > max_bytes:
                    raise UploadTooLargeError(max_bytes)
                handle.write(chunk)

        logger.debug("Upload stored", path=str(destination), size_bytes=written)
        yield destination
    finally:
        destination.unlink(missing_ok=True)
        logger.debug("Upload removed", path=str(destination))

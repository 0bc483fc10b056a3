"""Turn selected image files into previews the editor can display."""

from __future__ import annotations

import asyncio
import base64
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import List, Protocol, Sequence

from .models import ImagePreview, IngestionResult

logger = logging.getLogger(__name__)

FILE_SIZE_UNITS = ["Bytes", "KB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB"]
K = 1024
MAX_FILE_SIZE = 10 * K ** 2
DEFAULT_MEDIA_TYPE = "application/octet-stream"


class FileHandle(Protocol):
    """Raw file selected by the user."""

    @property
    def name(self) -> str:
        ...

    @property
    def size(self) -> int:
        ...

    def read(self) -> bytes:
        ...


@dataclass(frozen=True)
class LocalFile:
    """File handle backed by a path on disk."""

    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def size(self) -> int:
        return self.path.stat().st_size

    def read(self) -> bytes:
        return self.path.read_bytes()


def format_file_size(size: int, decimals: int = 2) -> str:
    """Render a byte count using the 1024-based unit ladder."""
    if size <= 0:
        return "0 Bytes"

    exponent = 0
    while size >= K ** (exponent + 1) and exponent < len(FILE_SIZE_UNITS) - 1:
        exponent += 1
    return f"{size / K ** exponent:.{decimals}f} {FILE_SIZE_UNITS[exponent]}"


def to_data_url(file_name: str, data: bytes) -> str:
    media_type = mimetypes.guess_type(file_name)[0] or DEFAULT_MEDIA_TYPE
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{media_type};base64,{encoded}"


async def read_file(handle: FileHandle) -> ImagePreview:
    """Read one file off the event loop and build its preview."""
    data = await asyncio.to_thread(handle.read)
    return ImagePreview(
        file_name=handle.name,
        file_size=format_file_size(len(data)),
        content=to_data_url(handle.name, data),
        source_file=handle,
    )


async def ingest_files(handles: Sequence[FileHandle]) -> IngestionResult:
    """Read a batch of files concurrently, skipping oversized or unreadable ones.

    Previews come back in the order the files were selected. Every rejected
    file is reported in ``IngestionResult.errors``; oversized files share a
    single message naming the size ceiling.
    """
    result = IngestionResult()
    if not handles:
        return result

    accepted: List[FileHandle] = []
    oversized: List[str] = []
    for handle in handles:
        try:
            size = handle.size
        except OSError as exc:
            logger.warning("Failed to stat %s", handle.name, exc_info=exc)
            result.errors.append(f"Could not read {handle.name}: {exc}")
            continue
        if size > MAX_FILE_SIZE:
            oversized.append(handle.name)
        else:
            accepted.append(handle)

    if oversized:
        logger.info("Rejected %d file(s) above the size ceiling: %s",
                    len(oversized), ", ".join(oversized))
        result.errors.append(
            f"Images must not be larger than {format_file_size(MAX_FILE_SIZE)} "
            f"(skipped: {', '.join(oversized)})"
        )

    outcomes = await asyncio.gather(
        *(read_file(handle) for handle in accepted),
        return_exceptions=True,
    )
    for handle, outcome in zip(accepted, outcomes):
        if isinstance(outcome, BaseException):
            if not isinstance(outcome, Exception):
                raise outcome
            logger.warning("Failed to read %s", handle.name, exc_info=outcome)
            result.errors.append(f"Could not read {handle.name}: {outcome}")
            continue
        result.previews.append(outcome)

    logger.debug("Ingested %d of %d file(s)", len(result.previews), len(handles))
    return result

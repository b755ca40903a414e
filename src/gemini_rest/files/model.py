"""File API wire models."""

from __future__ import annotations

from datetime import datetime

from gemini_rest.core.wire import WireEnum, WireModel
from gemini_rest.models import OperationError

FILES_PREFIX = "files/"


def normalize_file_name(name: str) -> str:
    """Return ``name`` with the ``files/`` prefix."""
    return name if name.startswith(FILES_PREFIX) else f"{FILES_PREFIX}{name}"


class FileState(WireEnum):
    UNSPECIFIED = "STATE_UNSPECIFIED"
    PROCESSING = "PROCESSING"
    ACTIVE = "ACTIVE"
    FAILED = "FAILED"


class File(WireModel):
    """Metadata of a file stored by the File API."""

    name: str
    display_name: str | None = None
    mime_type: str | None = None
    size_bytes: int | None = None
    create_time: datetime | None = None
    update_time: datetime | None = None
    expiration_time: datetime | None = None
    sha256_hash: str | None = None
    uri: str | None = None
    download_uri: str | None = None
    state: FileState | None = None
    source: str | None = None
    error: OperationError | None = None


class ListFilesResponse(WireModel):
    files: list[File] = []
    next_page_token: str | None = None

"""Builder for File API uploads."""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import TYPE_CHECKING, Self

from gemini_rest.constants import DEFAULT_MIME_TYPE

from .handle import FileHandle
from .model import File

if TYPE_CHECKING:
    from gemini_rest.transport import GeminiTransport

logger = logging.getLogger(__name__)


class FileBuilder:
    """Configures and performs an upload.

    Obtained from ``Gemini.create_file(data)``. The MIME type defaults to the
    type guessed from ``from_path`` when given, else
    ``application/octet-stream``.
    """

    def __init__(self, transport: GeminiTransport, data: bytes) -> None:
        self._transport = transport
        self._data = bytes(data)
        self._display_name: str | None = None
        self._mime_type: str | None = None
        self._path: Path | None = None

    def with_display_name(self, display_name: str) -> Self:
        self._display_name = display_name
        return self

    def with_mime_type(self, mime_type: str) -> Self:
        self._mime_type = mime_type
        return self

    def from_path(self, path: str | Path) -> Self:
        """Record where the bytes came from, for MIME type and display name."""
        self._path = Path(path)
        return self

    @property
    def mime_type(self) -> str:
        if self._mime_type:
            return self._mime_type
        if self._path is not None:
            guessed, _ = mimetypes.guess_type(self._path.name)
            if guessed:
                return guessed
        return DEFAULT_MIME_TYPE

    @property
    def display_name(self) -> str | None:
        if self._display_name is not None:
            return self._display_name
        return self._path.name if self._path is not None else None

    async def upload(self) -> FileHandle:
        """Upload with the resumable protocol and return a handle."""
        data = await self._transport.upload(
            self._data, mime_type=self.mime_type, display_name=self.display_name
        )
        file = File.from_wire(data)
        logger.info(
            "Uploaded %s (%d bytes, %s)", file.name, len(self._data), self.mime_type
        )
        return FileHandle(file, self._transport)

"""Handle to a file stored by the File API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gemini_rest.core.handle import ConsumableHandle
from gemini_rest.core.types import Result
from gemini_rest.exceptions import MissingDownloadUriError

from .model import File

if TYPE_CHECKING:
    from gemini_rest.transport import GeminiTransport

logger = logging.getLogger(__name__)


class FileHandle(ConsumableHandle):
    """An uploaded (or generated) file.

    ``file`` holds the metadata as last seen; ``refresh()`` re-reads it.
    ``delete()`` consumes the handle.
    """

    __slots__ = ("_transport", "file")

    def __init__(self, file: File, transport: GeminiTransport) -> None:
        super().__init__(file.name)
        self.file = file
        self._transport = transport

    async def refresh(self) -> File:
        """Fetch current metadata (e.g. to see ``PROCESSING`` become ``ACTIVE``)."""
        self._ensure_live()
        data = await self._transport.request_json("GET", self.name)
        self.file = File.from_wire(data)
        return self.file

    async def download(self) -> bytes:
        """Download the file content.

        Only generated files can be downloaded; uploaded files have no
        download URI.

        Raises:
            MissingDownloadUriError: The file has no download URI.
        """
        self._ensure_live()
        if not self.file.download_uri:
            raise MissingDownloadUriError(self.name)
        return await self._transport.download(self.name)

    async def delete(self) -> Result[None]:
        return await self._consume(
            "delete", lambda: self._transport.request_json("DELETE", self.name)
        )

"""The ``Gemini`` client facade.

The client resolves configuration once, owns one HTTP transport and hands
out builders and handles that share it::

    async with Gemini() as client:  # key from GEMINI_API_KEY
        response = await (
            client.generate_content().with_user_message("Hello").execute()
        )
"""

from __future__ import annotations

from collections.abc import AsyncIterator
import dataclasses
from enum import StrEnum
import logging
from types import TracebackType
from typing import Self

import httpx

from .batch import BatchBuilder, BatchHandle, BatchOperation
from .cache import CacheBuilder, CachedContent, CachedContentHandle, normalize_cache_name
from .config import FrozenConfig, resolve_config
from .constants import DEFAULT_EMBEDDING_MODEL
from .embedding import EmbedBuilder
from .exceptions import MissingKeyError
from .files import File, FileBuilder, FileHandle, normalize_file_name
from .generation import ContentBuilder
from .telemetry import TelemetryContext, TelemetryContextProtocol
from .transport import GeminiTransport

logger = logging.getLogger(__name__)

BATCHES_PREFIX = "batches/"


class Model(StrEnum):
    """Well-known model names. Any other ``models/...`` string works too."""

    GEMINI_2_5_FLASH = "models/gemini-2.5-flash"
    GEMINI_2_5_FLASH_LITE = "models/gemini-2.5-flash-lite"
    GEMINI_2_5_PRO = "models/gemini-2.5-pro"
    TEXT_EMBEDDING_004 = "models/text-embedding-004"

    DEFAULT = GEMINI_2_5_FLASH


class Gemini:
    """Entry point to the Gemini REST API.

    Args:
        api_key: API key; when omitted it is resolved from ``GEMINI_API_KEY``
            or the configuration files.
        model: Default model for builders.
        base_url: Versioned API root, for proxies or test servers.
        config: Pre-resolved configuration. Explicit arguments still win.
        http_client: Externally managed ``httpx.AsyncClient``; the client
            will not close it.
        telemetry: Telemetry context shared by every request.

    Raises:
        MissingKeyError: No API key was given or found.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        model: str | None = None,
        base_url: str | None = None,
        config: FrozenConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
        telemetry: TelemetryContextProtocol | None = None,
    ) -> None:
        if config is None:
            config = resolve_config(
                api_key=api_key,
                model=str(model) if model else None,
                base_url=base_url,
            ).to_frozen()
        else:
            overrides = {
                k: v
                for k, v in (
                    ("api_key", api_key),
                    ("model", str(model) if model else None),
                    ("base_url", base_url),
                )
                if v is not None
            }
            config = dataclasses.replace(config, **overrides)

        if not config.api_key:
            raise MissingKeyError(
                "No Gemini API key: pass api_key=... or set GEMINI_API_KEY"
            )

        self.config = config
        self._telemetry = telemetry or TelemetryContext()
        self._transport = GeminiTransport(
            config.api_key,
            base_url=config.base_url,
            timeout=config.timeout_seconds,
            http_client=http_client,
            telemetry=self._telemetry,
        )
        logger.debug("Gemini client initialized: %s", config)

    @classmethod
    def pro(cls, api_key: str | None = None, **kwargs) -> Self:
        """Client defaulting to Gemini 2.5 Pro."""
        return cls(api_key, model=Model.GEMINI_2_5_PRO, **kwargs)

    @classmethod
    def with_model(cls, api_key: str | None, model: str | Model, **kwargs) -> Self:
        return cls(api_key, model=str(model), **kwargs)

    def __repr__(self) -> str:
        return f"Gemini(model={self.model!r}, base_url={self.config.base_url!r})"

    @property
    def model(self) -> str:
        return str(self.config.model)

    @property
    def transport(self) -> GeminiTransport:
        return self._transport

    # --- Lifecycle ---

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    # --- Generation and embeddings ---

    def generate_content(self) -> ContentBuilder:
        return ContentBuilder(self._transport, self.model)

    def embed_content(self, model: str | None = None) -> EmbedBuilder:
        """Embedding builder.

        Uses ``model`` when given, else the client model if it is an
        embedding model, else ``text-embedding-004``.
        """
        if model is None:
            model = self.model if "embedding" in self.model else DEFAULT_EMBEDDING_MODEL
        return EmbedBuilder(self._transport, model)

    # --- Batches ---

    def batch_generate_content(self) -> BatchBuilder:
        return BatchBuilder(
            self._transport,
            self.model,
            telemetry=self._telemetry,
            poll_interval=self.config.poll_interval_seconds,
        )

    def get_batch(self, name: str) -> BatchHandle:
        """Re-attach to an existing batch by name (no request is made)."""
        if not name.startswith(BATCHES_PREFIX):
            name = f"{BATCHES_PREFIX}{name}"
        return BatchHandle(
            name,
            self._transport,
            telemetry=self._telemetry,
            poll_interval=self.config.poll_interval_seconds,
        )

    async def list_batches(
        self, page_size: int | None = None
    ) -> AsyncIterator[BatchOperation]:
        """Iterate over all batch operations, fetching pages as needed."""
        async for item in self._transport.paginate(
            "batches", "operations", page_size=page_size
        ):
            yield BatchOperation.from_wire(item)

    # --- Context caching ---

    def create_cache(self) -> CacheBuilder:
        return CacheBuilder(self._transport, self.model)

    def get_cached_content(self, name: str) -> CachedContentHandle:
        """Re-attach to cached content by name (no request is made)."""
        return CachedContentHandle(normalize_cache_name(name), self._transport)

    async def list_cached_contents(
        self, page_size: int | None = None
    ) -> AsyncIterator[CachedContent]:
        async for item in self._transport.paginate(
            "cachedContents", "cachedContents", page_size=page_size
        ):
            yield CachedContent.from_wire(item)

    # --- Files ---

    def create_file(self, data: bytes) -> FileBuilder:
        return FileBuilder(self._transport, data)

    async def get_file(self, name: str) -> FileHandle:
        """Fetch file metadata and return a handle to it."""
        data = await self._transport.request_json("GET", normalize_file_name(name))
        return FileHandle(File.from_wire(data), self._transport)

    async def list_files(self, page_size: int | None = None) -> AsyncIterator[File]:
        async for item in self._transport.paginate("files", "files", page_size=page_size):
            yield File.from_wire(item)

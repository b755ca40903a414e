"""Builder for cached content."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta
import logging
from typing import TYPE_CHECKING, Self

from gemini_rest.constants import MAX_CACHE_DISPLAY_NAME_CHARS
from gemini_rest.exceptions import DecodeError, MissingExpirationError, ValidationError
from gemini_rest.models import Content, Message
from gemini_rest.tools import Tool, ToolConfig
from gemini_rest.transport import normalize_model

from .handle import CachedContentHandle
from .model import CacheExpiration, CreateCachedContentRequest

if TYPE_CHECKING:
    from gemini_rest.transport import GeminiTransport

logger = logging.getLogger(__name__)


class CacheBuilder:
    """Assembles a cached context (system instruction, history, tools).

    An expiration is mandatory::

        cache = await (
            client.create_cache()
            .with_system_instruction(long_manual)
            .with_ttl(3600)
            .execute()
        )
    """

    def __init__(self, transport: GeminiTransport, model: str) -> None:
        self._transport = transport
        self.model = normalize_model(model)
        self._display_name: str | None = None
        self._contents: list[Content] = []
        self._system_instruction: Content | None = None
        self._tools: list[Tool] = []
        self._tool_config: ToolConfig | None = None
        self._expiration: CacheExpiration | None = None

    def with_model(self, model: str) -> Self:
        self.model = normalize_model(model)
        return self

    def with_display_name(self, display_name: str) -> Self:
        """Set a display name.

        Raises:
            ValidationError: If longer than 128 characters.
        """
        if len(display_name) > MAX_CACHE_DISPLAY_NAME_CHARS:
            raise ValidationError(
                f"cache display name ('{display_name[:32]}...') too long "
                f"({len(display_name)} chars), must be at most "
                f"{MAX_CACHE_DISPLAY_NAME_CHARS}"
            )
        self._display_name = display_name
        return self

    def with_system_instruction(self, text: str) -> Self:
        self._system_instruction = Content.text(text)
        return self

    def with_user_message(self, text: str) -> Self:
        self._contents.append(Message.user(text).content)
        return self

    def with_model_message(self, text: str) -> Self:
        self._contents.append(Message.model(text).content)
        return self

    def with_content(self, content: Content) -> Self:
        self._contents.append(content)
        return self

    def with_contents(self, contents: Iterable[Content]) -> Self:
        self._contents.extend(contents)
        return self

    def with_tool(self, tool: Tool) -> Self:
        self._tools.append(tool)
        return self

    def with_tools(self, tools: Iterable[Tool]) -> Self:
        self._tools.extend(tools)
        return self

    def with_tool_config(self, tool_config: ToolConfig) -> Self:
        self._tool_config = tool_config
        return self

    def with_ttl(self, ttl: float | timedelta) -> Self:
        self._expiration = CacheExpiration.from_ttl(ttl)
        return self

    def with_expire_time(self, expire_time: datetime) -> Self:
        self._expiration = CacheExpiration.from_expire_time(expire_time)
        return self

    def build(self) -> CreateCachedContentRequest:
        return CreateCachedContentRequest(
            model=self.model,
            display_name=self._display_name,
            contents=list(self._contents) or None,
            tools=list(self._tools) or None,
            system_instruction=self._system_instruction,
            tool_config=self._tool_config,
        )

    async def execute(self) -> CachedContentHandle:
        """Create the cache.

        Raises:
            MissingExpirationError: Neither a TTL nor an expire time was set.
        """
        if self._expiration is None:
            raise MissingExpirationError(
                "expiration (TTL or expire time) is required for cache creation"
            )
        body = self.build().to_wire_with(self._expiration)
        data = await self._transport.request_json("POST", "cachedContents", json=body)
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise DecodeError("cachedContents.create response did not include a name")
        logger.info("Created cached content %s on %s", name, self.model)
        return CachedContentHandle(name, self._transport)

"""Handle to a cached content resource."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gemini_rest.core.handle import ConsumableHandle
from gemini_rest.core.types import Result

from .model import CacheExpiration, CachedContent

if TYPE_CHECKING:
    from gemini_rest.transport import GeminiTransport


class CachedContentHandle(ConsumableHandle):
    """A ``cachedContents/...`` resource.

    Pass it to ``ContentBuilder.with_cached_content`` to generate against the
    cached context.
    """

    __slots__ = ("_transport",)

    def __init__(self, name: str, transport: GeminiTransport) -> None:
        super().__init__(name)
        self._transport = transport

    async def get(self) -> CachedContent:
        self._ensure_live()
        data = await self._transport.request_json("GET", self.name)
        return CachedContent.from_wire(data)

    async def update(self, expiration: CacheExpiration) -> CachedContent:
        """Change the expiration; only TTL or expire time can be updated."""
        self._ensure_live()
        data = await self._transport.request_json(
            "PATCH",
            self.name,
            json=expiration.to_wire(),
            params={"updateMask": expiration.field_name},
        )
        return CachedContent.from_wire(data)

    async def delete(self) -> Result[None]:
        return await self._consume(
            "delete", lambda: self._transport.request_json("DELETE", self.name)
        )

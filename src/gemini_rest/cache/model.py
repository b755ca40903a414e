"""Context caching wire models and expiration handling."""

from __future__ import annotations

import dataclasses
from datetime import UTC, datetime, timedelta
from typing import Any, Self

from gemini_rest.core.wire import WireModel
from gemini_rest.exceptions import ValidationError
from gemini_rest.models import Content
from gemini_rest.tools import Tool, ToolConfig

CACHE_PREFIX = "cachedContents/"


def normalize_cache_name(name: str) -> str:
    return name if name.startswith(CACHE_PREFIX) else f"{CACHE_PREFIX}{name}"


def format_duration(ttl: timedelta) -> str:
    """Render a ``google.protobuf.Duration`` (``"3600s"``, ``"1.5s"``)."""
    seconds = ttl.total_seconds()
    if seconds.is_integer():
        return f"{int(seconds)}s"
    return f"{seconds}s"


def format_timestamp(moment: datetime) -> str:
    """RFC 3339 in UTC; naive datetimes are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).isoformat().replace("+00:00", "Z")


@dataclasses.dataclass(frozen=True, slots=True)
class CacheExpiration:
    """Either a time-to-live or an absolute expiry time."""

    ttl: timedelta | None = None
    expire_time: datetime | None = None

    def __post_init__(self) -> None:
        if (self.ttl is None) == (self.expire_time is None):
            raise ValidationError("cache expiration needs exactly one of ttl or expire_time")
        if self.ttl is not None and self.ttl <= timedelta(0):
            raise ValidationError(f"cache ttl must be positive, got {self.ttl}")

    @classmethod
    def from_ttl(cls, ttl: float | timedelta) -> Self:
        """TTL in seconds or as a ``timedelta``."""
        if not isinstance(ttl, timedelta):
            ttl = timedelta(seconds=ttl)
        return cls(ttl=ttl)

    @classmethod
    def from_expire_time(cls, expire_time: datetime) -> Self:
        return cls(expire_time=expire_time)

    @property
    def field_name(self) -> str:
        """Wire field carrying the expiration, used as the update mask."""
        return "ttl" if self.ttl is not None else "expireTime"

    def to_wire(self) -> dict[str, str]:
        if self.expire_time is not None:
            return {"expireTime": format_timestamp(self.expire_time)}
        return {"ttl": format_duration(self.ttl or timedelta(0))}


class CacheUsageMetadata(WireModel):
    total_token_count: int | None = None


class CachedContent(WireModel):
    """Cached content as returned by the API (contents are not echoed back)."""

    name: str | None = None
    display_name: str | None = None
    model: str | None = None
    create_time: datetime | None = None
    update_time: datetime | None = None
    expire_time: datetime | None = None
    usage_metadata: CacheUsageMetadata | None = None
    contents: list[Content] | None = None
    tools: list[Tool] | None = None
    system_instruction: Content | None = None
    tool_config: ToolConfig | None = None


class CreateCachedContentRequest(WireModel):
    model: str
    display_name: str | None = None
    contents: list[Content] | None = None
    tools: list[Tool] | None = None
    system_instruction: Content | None = None
    tool_config: ToolConfig | None = None

    def to_wire_with(self, expiration: CacheExpiration) -> dict[str, Any]:
        return {**self.to_wire(), **expiration.to_wire()}


class ListCachedContentsResponse(WireModel):
    cached_contents: list[CachedContent] = []
    next_page_token: str | None = None

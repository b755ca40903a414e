"""Core configuration data types.

Configuration follows a resolve-once, freeze-then-flow pattern: sources are
merged into a ``ResolvedConfig`` (with per-field origins), which is frozen into
the ``FrozenConfig`` the client carries for its lifetime.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal, NamedTuple

ConfigOrigin = Literal["programmatic", "env", "file", "default"]
SourceMap = Mapping[str, ConfigOrigin]


class ResolvedConfig(NamedTuple):
    """Configuration after resolution from all sources, before freezing."""

    api_key: str | None
    model: str
    base_url: str
    timeout_seconds: float
    poll_interval_seconds: float

    # Where each field value came from
    origin: SourceMap

    def __str__(self) -> str:
        """String representation with redacted API key for safe logging."""
        api_key_display = "[REDACTED]" if self.api_key else None
        return (
            f"ResolvedConfig(api_key={api_key_display!r}, model={self.model!r}, "
            f"base_url={self.base_url!r}, timeout_seconds={self.timeout_seconds!r}, "
            f"poll_interval_seconds={self.poll_interval_seconds!r}, "
            f"origin={dict(self.origin)!r})"
        )

    def __repr__(self) -> str:
        return self.__str__()

    def to_frozen(self) -> "FrozenConfig":
        """Drop audit metadata and return the immutable client configuration."""
        return FrozenConfig(
            api_key=self.api_key,
            model=self.model,
            base_url=self.base_url,
            timeout_seconds=self.timeout_seconds,
            poll_interval_seconds=self.poll_interval_seconds,
        )

    def audit(self) -> str:
        """Report the origin of each field without revealing the API key.

        Returns:
            One ``field: origin:value`` line per field.
        """
        lines = []
        for field in (
            "api_key",
            "model",
            "base_url",
            "timeout_seconds",
            "poll_interval_seconds",
        ):
            origin = self.origin.get(field, "default")
            value = getattr(self, field)
            if field == "api_key":
                shown = "None" if value is None else "<redacted>"
                lines.append(f"{field}: {origin}:{shown}")
            elif origin == "env":
                lines.append(f"{field}: env:GEMINI_{field.upper()}={value}")
            else:
                lines.append(f"{field}: {origin}:{value}")
        return "\n".join(lines)


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable configuration held by a ``Gemini`` client."""

    api_key: str | None
    model: str
    base_url: str
    timeout_seconds: float
    poll_interval_seconds: float

    def __str__(self) -> str:
        """String representation with redacted API key for safe logging."""
        api_key_display = "[REDACTED]" if self.api_key else None
        return (
            f"FrozenConfig(api_key={api_key_display!r}, model={self.model!r}, "
            f"base_url={self.base_url!r}, timeout_seconds={self.timeout_seconds!r}, "
            f"poll_interval_seconds={self.poll_interval_seconds!r})"
        )

    def __repr__(self) -> str:
        return self.__str__()

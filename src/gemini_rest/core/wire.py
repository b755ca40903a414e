"""Base classes for JSON wire models.

Every request and response body is a pydantic model whose fields are
snake_case in Python and camelCase on the wire. ``None`` fields are left out
of serialized payloads.
"""

from __future__ import annotations

from enum import StrEnum
import logging
from typing import Any, Self

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from gemini_rest.exceptions import DecodeError

logger = logging.getLogger(__name__)


class WireModel(BaseModel):
    """Base model for Gemini API payloads."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON object the API expects."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_wire(cls, data: Any) -> Self:
        """Parse a decoded JSON body.

        Raises:
            DecodeError: If ``data`` does not match the model.
        """
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise DecodeError(f"unexpected {cls.__name__} payload: {e}") from e


class WireEnum(StrEnum):
    """String enum that tolerates values added to the API after release.

    Unknown values become pseudo-members (logged at WARNING) instead of
    failing the whole response.
    """

    @classmethod
    def _missing_(cls, value: object) -> Self | None:
        if not isinstance(value, str):
            return None
        logger.warning("Unknown %s value from API: %r", cls.__name__, value)
        member = str.__new__(cls, value)
        member._name_ = value
        member._value_ = value
        return member

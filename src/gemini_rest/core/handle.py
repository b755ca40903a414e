"""Consume-on-use bookkeeping shared by resource handles."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
import logging
from typing import Any

from gemini_rest.exceptions import HandleConsumedError

from .types import Failure, Result, Success

logger = logging.getLogger(__name__)


class ConsumableHandle:
    """Base for handles whose destructive operations use them up.

    A destructive operation marks the handle consumed when it starts. On
    success it stays consumed; on failure the mark is cleared and the handle
    travels back to the caller inside the ``Failure``. Any call on a consumed
    handle raises ``HandleConsumedError``.
    """

    __slots__ = ("_consumed", "name")

    def __init__(self, name: str) -> None:
        self.name = name
        self._consumed = False

    def __repr__(self) -> str:
        state = "consumed" if self._consumed else "live"
        return f"{type(self).__name__}(name={self.name!r}, {state})"

    @property
    def consumed(self) -> bool:
        return self._consumed

    def _ensure_live(self) -> None:
        if self._consumed:
            raise HandleConsumedError(self.name)

    def _take(self) -> None:
        self._ensure_live()
        self._consumed = True

    def _give_back(self, error: Exception) -> Failure[Exception]:
        self._consumed = False
        return Failure(error, handle=self)

    async def _consume(
        self, action: str, call: Callable[[], Awaitable[Any]]
    ) -> Result[None]:
        """Run ``call`` as a consuming operation named ``action``."""
        self._take()
        try:
            await call()
        except Exception as e:
            logger.debug("%s of %s failed: %s", action.capitalize(), self.name, e)
            return self._give_back(e)
        except BaseException:
            self._consumed = False
            raise
        logger.info("%s succeeded for %s", action.capitalize(), self.name)
        return Success(None)

"""Result values for operations that hand their resource back on failure.

Consuming operations on handles (``cancel``, ``delete``,
``wait_for_completion``) do not raise. They return ``Success`` once the handle
has been used up, or ``Failure`` carrying both the error and the very same
handle so the caller can decide whether to retry. This keeps retry policy with
the caller and makes the failure a predictable part of the data flow.
"""

from __future__ import annotations

from collections.abc import Iterator
import dataclasses
import typing

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure", bound=Exception)


@dataclasses.dataclass(frozen=True, slots=True)
class Success[TSuccess]:
    """The operation completed and its handle (if any) is consumed."""

    value: TSuccess

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> TSuccess:
        """Return the wrapped value."""
        return self.value


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[TFailure]:
    """The operation failed; ``handle`` is returned usable for a retry.

    Unpacks as ``(handle, error)``::

        result = await batch.cancel()
        if not result.ok:
            batch, error = result
    """

    error: TFailure
    handle: typing.Any = None

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> typing.NoReturn:
        """Raise the carried error."""
        raise typing.cast("Exception", self.error)

    def __iter__(self) -> Iterator[typing.Any]:
        yield self.handle
        yield self.error


type Result[T] = Success[T] | Failure[Exception]

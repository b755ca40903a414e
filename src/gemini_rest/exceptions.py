"""Exceptions raised by the Gemini REST client.

Every error carries the data needed to log or display it without a further
lookup: HTTP status and server message for API failures, the resource name
for batch and handle failures.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from gemini_rest.models import OperationError


class GeminiError(Exception):
    """Base exception for all client errors"""  # noqa: D415


class ConfigurationError(GeminiError):
    """Raised when client configuration is invalid or incomplete"""  # noqa: D415


class MissingKeyError(ConfigurationError):
    """Raised when no API key could be resolved from any source"""  # noqa: D415


class ValidationError(GeminiError):
    """Raised when a request cannot be built from the given input"""  # noqa: D415


class MissingExpirationError(ValidationError):
    """Raised when cached content is created without a TTL or expire time"""  # noqa: D415


class TransportError(GeminiError):
    """Raised when the request never produced an HTTP response.

    Covers connection failures, TLS errors and timeouts. The original
    ``httpx`` exception is chained as ``__cause__``.
    """

    def __init__(self, message: str, *, url: str | None = None) -> None:
        self.url = url
        super().__init__(message)


class APIError(GeminiError):
    """Raised for a non-2xx response from the Gemini API."""

    def __init__(
        self,
        status_code: int,
        message: str,
        *,
        status: str | None = None,
        details: list[Any] | None = None,
    ) -> None:
        self.status_code = status_code
        self.message = message
        self.status = status
        self.details = details or []
        label = f"{status_code} {status}" if status else str(status_code)
        super().__init__(f"Gemini API error {label}: {message}")

    @property
    def is_retryable(self) -> bool:
        """True for rate limiting and server-side failures."""
        return self.status_code == 429 or self.status_code >= 500


class DecodeError(GeminiError):
    """Raised when a response body does not match the expected JSON shape"""  # noqa: D415


class FunctionCallError(GeminiError):
    """Raised when a function call argument cannot be extracted"""  # noqa: D415


class MissingDownloadUriError(GeminiError):
    """Raised when a file has no download URI (only generated files do)."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"file '{name}' has no download URI")


class HandleConsumedError(GeminiError, RuntimeError):
    """Raised when a handle is used after a consuming operation.

    Handles for server-side resources are consumed by ``cancel``, ``delete``
    and ``wait_for_completion``. A consumed handle must not be reused; obtain
    a fresh one by name instead.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"handle for '{name}' was consumed by a previous operation; "
            "re-attach by name to issue further calls"
        )


# --- Batch lifecycle ---


class BatchError(GeminiError):
    """Base class for batch job errors, carrying the job's resource name."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(message)


class BatchFailedError(BatchError):
    """Raised when a batch job reached the failed state."""

    def __init__(self, name: str, error: OperationError) -> None:
        self.error = error
        super().__init__(
            name, f"batch '{name}' failed: {error.code} - {error.message}"
        )


class BatchExpiredError(BatchError):
    """Raised when a batch job expired before finishing."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f"batch '{name}' expired before finishing")


class InconsistentBatchStateError(BatchError):
    """Raised when the server reports a finished job with no result and no error."""

    def __init__(self, name: str, description: str | None = None) -> None:
        self.description = description or "completed but no result provided"
        super().__init__(name, f"batch '{name}' {self.description}")


class BatchWaitTimeoutError(BatchError):
    """Raised when waiting for a batch exceeds the caller's timeout."""

    def __init__(self, name: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(
            name, f"batch '{name}' did not finish within {timeout:g} seconds"
        )

"""Handle to a server-side batch job.

The handle is a name plus the transport used to reach it; it caches no
server state, so every ``status()`` call is a fresh read.

``cancel``, ``delete`` and ``wait_for_completion`` consume the handle. They
never raise for API or network problems: on success they return ``Success``
and the handle is used up; on failure they return ``Failure`` carrying the
error and the very same handle, which can be retried::

    result = await batch.delete()
    if not result.ok:
        batch, error = result
        log.warning("delete failed: %s", error)
        result = await batch.delete()  # fresh request
"""

from __future__ import annotations

import asyncio
import logging

from gemini_rest.constants import DEFAULT_POLL_INTERVAL
from gemini_rest.core.handle import ConsumableHandle
from gemini_rest.core.types import Result, Success
from gemini_rest.exceptions import (
    BatchExpiredError,
    BatchFailedError,
    BatchWaitTimeoutError,
)
from gemini_rest.telemetry import TelemetryContext, TelemetryContextProtocol
from gemini_rest.transport import BatchTransport

from .model import (
    BatchCancelled,
    BatchExpired,
    BatchFailed,
    BatchOperation,
    BatchStatus,
    BatchSucceeded,
)

logger = logging.getLogger(__name__)


class BatchHandle(ConsumableHandle):
    """A batch job addressed by its resource name (``batches/...``)."""

    __slots__ = ("_poll_interval", "_telemetry", "_transport")

    def __init__(
        self,
        name: str,
        transport: BatchTransport,
        *,
        telemetry: TelemetryContextProtocol | None = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        super().__init__(name)
        self._transport = transport
        self._poll_interval = poll_interval
        self._telemetry = telemetry or TelemetryContext()

    async def operation(self) -> BatchOperation:
        """Fetch and parse the raw operation without classifying it."""
        self._ensure_live()
        data = await self._transport.get_batch_operation(self.name)
        return BatchOperation.from_wire(data)

    async def status(self) -> BatchStatus:
        """Read the current status with one network call.

        Raises:
            HandleConsumedError: The handle was already consumed.
            TransportError: The request never produced a response.
            APIError: The server rejected the request.
            DecodeError: The operation did not match the expected shape.
            InconsistentBatchStateError: The job reports completion with
                neither results nor an error.
        """
        operation = await self.operation()
        return BatchStatus.from_operation(operation)

    async def cancel(self) -> Result[None]:
        """Ask the server to cancel the job.

        Cancellation is asynchronous on the server: a fresh handle may still
        observe the job running for a while.
        """
        return await self._consume(
            "cancel", lambda: self._transport.cancel_batch_operation(self.name)
        )

    async def delete(self) -> Result[None]:
        """Delete the job resource.

        Deleting does not stop a running job. By convention callers wait for
        a terminal state first, but the server decides whether to accept it.
        """
        return await self._consume(
            "delete", lambda: self._transport.delete_batch_operation(self.name)
        )

    async def wait_for_completion(
        self,
        poll_interval: float | None = None,
        *,
        timeout: float | None = None,
    ) -> Result[BatchStatus]:
        """Poll until the job reaches a terminal state.

        Args:
            poll_interval: Seconds to sleep between polls. Defaults to the
                interval the handle was created with.
            timeout: Optional bound on the whole wait, in seconds. ``None``
                waits indefinitely.

        Returns:
            ``Success(status)`` for succeeded or cancelled jobs (the handle
            is consumed). ``Failure(error, handle)`` for failed or expired
            jobs, for any error raised while polling, and when ``timeout``
            elapses; the handle is usable again in every failure case.
        """
        if poll_interval is None:
            poll_interval = self._poll_interval
        if poll_interval < 0:
            raise ValueError(f"poll_interval must not be negative, got {poll_interval}")
        self._take()
        try:
            async with asyncio.timeout(timeout):
                return await self._poll(poll_interval)
        except TimeoutError:
            logger.info("Gave up waiting for %s after %gs", self.name, timeout)
            return self._give_back(BatchWaitTimeoutError(self.name, timeout or 0.0))
        except asyncio.CancelledError:
            self._consumed = False
            raise

    async def _poll(self, poll_interval: float) -> Result[BatchStatus]:
        polls = 0
        while True:
            polls += 1
            self._telemetry.count("batch.polls")
            try:
                status = await self._read_status()
            except Exception as e:
                logger.debug("Poll %d of %s failed: %s", polls, self.name, e)
                return self._give_back(e)

            logger.debug("Poll %d of %s: %s", polls, self.name, type(status).__name__)
            match status:
                case BatchSucceeded() | BatchCancelled():
                    logger.info(
                        "Batch %s finished as %s after %d poll(s)",
                        self.name,
                        type(status).__name__,
                        polls,
                    )
                    return Success(status)
                case BatchExpired():
                    logger.info("Batch %s expired", self.name)
                    return self._give_back(BatchExpiredError(self.name))
                case BatchFailed(error=error):
                    logger.info("Batch %s failed: %s", self.name, error.message)
                    return self._give_back(BatchFailedError(self.name, error))
            await asyncio.sleep(poll_interval)

    async def _read_status(self) -> BatchStatus:
        data = await self._transport.get_batch_operation(self.name)
        return BatchStatus.from_operation(BatchOperation.from_wire(data))

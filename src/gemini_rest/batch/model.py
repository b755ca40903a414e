"""Batch job wire models and status classification.

A batch job is a long-running operation. ``GET batches/{id}`` returns the
operation; ``BatchStatus.from_operation`` turns it into one of six status
snapshots. Classification is pure: it depends only on the operation's state,
``done`` flag, error and response payloads.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime
import logging
from typing import Any, ClassVar, Self

from pydantic import Field

from gemini_rest.core.wire import WireEnum, WireModel
from gemini_rest.exceptions import InconsistentBatchStateError
from gemini_rest.generation.model import GenerateContentRequest, GenerationResponse
from gemini_rest.models import OperationError

logger = logging.getLogger(__name__)


class BatchState(WireEnum):
    """Server-side state of a batch job.

    Short names (``RUNNING``) and ``JOB_STATE_*`` spellings are accepted on
    input and normalized to the ``BATCH_STATE_*`` members.
    """

    UNSPECIFIED = "BATCH_STATE_UNSPECIFIED"
    PENDING = "BATCH_STATE_PENDING"
    RUNNING = "BATCH_STATE_RUNNING"
    SUCCEEDED = "BATCH_STATE_SUCCEEDED"
    FAILED = "BATCH_STATE_FAILED"
    CANCELLED = "BATCH_STATE_CANCELLED"
    EXPIRED = "BATCH_STATE_EXPIRED"

    @classmethod
    def _missing_(cls, value: object) -> Self | None:
        if isinstance(value, str):
            short = value.upper().removeprefix("BATCH_STATE_").removeprefix("JOB_STATE_")
            short = _STATE_ALIASES.get(short, short)
            member = cls._value2member_map_.get(f"BATCH_STATE_{short}")
            if member is not None:
                return member  # type: ignore[return-value]
        return super()._missing_(value)


_STATE_ALIASES = {"CANCELED": "CANCELLED", "QUEUED": "PENDING"}


class BatchStats(WireModel):
    """Request counts of a batch. Counts arrive as int64 strings."""

    request_count: int = 0
    pending_request_count: int | None = None
    completed_request_count: int | None = None
    successful_request_count: int | None = None
    failed_request_count: int | None = None

    @property
    def total(self) -> int:
        return self.request_count

    @property
    def pending(self) -> int:
        return self.request_count if self.pending_request_count is None else self.pending_request_count

    @property
    def completed(self) -> int:
        if self.completed_request_count is not None:
            return self.completed_request_count
        return self.successful_request_count or 0

    @property
    def failed(self) -> int:
        return self.failed_request_count or 0


class InlinedResponse(WireModel):
    response: GenerationResponse | None = None
    error: OperationError | None = None
    metadata: dict[str, Any] | None = None


class InlinedResponses(WireModel):
    inlined_responses: list[InlinedResponse] = []


class BatchOutput(WireModel):
    """Results of a finished batch: inline responses or a results file."""

    inlined_responses: InlinedResponses | None = None
    responses_file: str | None = None


class BatchMetadata(WireModel):
    state: BatchState = BatchState.UNSPECIFIED
    name: str | None = None
    display_name: str | None = None
    model: str | None = None
    create_time: datetime | None = None
    update_time: datetime | None = None
    end_time: datetime | None = None
    batch_stats: BatchStats | None = None
    output: BatchOutput | None = None


class BatchOperation(WireModel):
    """Long-running operation behind a batch job."""

    name: str
    metadata: BatchMetadata = Field(default_factory=BatchMetadata)
    done: bool = False
    error: OperationError | None = None
    response: BatchOutput | None = None

    @property
    def state(self) -> BatchState:
        return self.metadata.state

    @property
    def output(self) -> BatchOutput | None:
        """Result payload, from ``response`` or (newer API) ``metadata.output``."""
        return self.response or self.metadata.output


class ListBatchesResponse(WireModel):
    operations: list[BatchOperation] = []
    next_page_token: str | None = None


# --- Requests ---


class BatchRequestItem(WireModel):
    request: GenerateContentRequest
    metadata: dict[str, Any] | None = None


class RequestsContainer(WireModel):
    requests: list[BatchRequestItem] = []


class InputConfig(WireModel):
    requests: RequestsContainer | None = None
    file_name: str | None = None


class BatchConfig(WireModel):
    display_name: str
    input_config: InputConfig


class BatchGenerateContentRequest(WireModel):
    """Body of ``models/{model}:batchGenerateContent``."""

    batch: BatchConfig


# --- Status snapshots ---


@dataclasses.dataclass(frozen=True, slots=True)
class BatchResultItem:
    """One entry of a finished batch, matched to its request by ``key``."""

    key: str
    response: GenerationResponse | None = None
    error: OperationError | None = None

    @property
    def is_success(self) -> bool:
        return self.response is not None


@dataclasses.dataclass(frozen=True, slots=True)
class BatchStatus:
    """Snapshot of a batch job; see the subclasses."""

    is_terminal: ClassVar[bool] = False

    @classmethod
    def from_operation(cls, operation: BatchOperation) -> BatchStatus:
        """Classify a parsed operation.

        Raises:
            InconsistentBatchStateError: If the operation reports completion
                without results and without an error.
        """
        return classify_operation(
            operation.state,
            done=operation.done,
            error=operation.error,
            response=operation.output,
            stats=operation.metadata.batch_stats,
            name=operation.name,
        )


@dataclasses.dataclass(frozen=True, slots=True)
class BatchPending(BatchStatus):
    pass


@dataclasses.dataclass(frozen=True, slots=True)
class BatchRunning(BatchStatus):
    stats: BatchStats = dataclasses.field(default_factory=BatchStats)


@dataclasses.dataclass(frozen=True, slots=True)
class BatchSucceeded(BatchStatus):
    is_terminal: ClassVar[bool] = True

    results: tuple[BatchResultItem, ...] = ()
    responses_file: str | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class BatchFailed(BatchStatus):
    is_terminal: ClassVar[bool] = True

    error: OperationError = dataclasses.field(default_factory=OperationError)


@dataclasses.dataclass(frozen=True, slots=True)
class BatchCancelled(BatchStatus):
    is_terminal: ClassVar[bool] = True


@dataclasses.dataclass(frozen=True, slots=True)
class BatchExpired(BatchStatus):
    is_terminal: ClassVar[bool] = True


def _result_items(name: str, output: BatchOutput) -> tuple[BatchResultItem, ...]:
    if output.inlined_responses is None:
        return ()
    items = []
    for index, item in enumerate(output.inlined_responses.inlined_responses):
        key = str((item.metadata or {}).get("key", index))
        if item.response is None and item.error is None:
            raise InconsistentBatchStateError(
                name, f"result '{key}' has neither a response nor an error"
            )
        items.append(BatchResultItem(key=key, response=item.response, error=item.error))
    return tuple(items)


def classify_operation(
    state: BatchState | None,
    *,
    done: bool,
    error: OperationError | None,
    response: BatchOutput | None,
    stats: BatchStats | None = None,
    name: str = "",
) -> BatchStatus:
    """Map operation fields to a ``BatchStatus``.

    Rules apply in order: cancelled and expired states win; then an error
    payload means failure; then a finished operation (``done`` or a terminal
    success/failure state) must carry results; then running; else pending.

    Args:
        state: Reported state (``None`` treated as unspecified).
        done: The operation's ``done`` flag.
        error: Operation-level error payload.
        response: Result payload.
        stats: Request counts, used for the running snapshot.
        name: Job name, used in errors.

    Returns:
        The status snapshot. Results keep the order the server sent them in.

    Raises:
        InconsistentBatchStateError: A finished operation has neither results
            nor an error.
    """
    if state is BatchState.CANCELLED:
        return BatchCancelled()
    if state is BatchState.EXPIRED:
        return BatchExpired()
    if error is not None:
        return BatchFailed(error=error)
    if done or state in (BatchState.SUCCEEDED, BatchState.FAILED):
        if response is None:
            raise InconsistentBatchStateError(name)
        if state is BatchState.FAILED:
            raise InconsistentBatchStateError(name, "reported failure without an error")
        return BatchSucceeded(
            results=_result_items(name, response),
            responses_file=response.responses_file,
        )
    if state is BatchState.RUNNING:
        return BatchRunning(stats=stats or BatchStats())
    return BatchPending()

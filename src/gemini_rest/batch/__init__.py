"""Batch generation jobs: builder, handle and status snapshots."""

from .builder import BatchBuilder
from .handle import BatchHandle
from .model import (
    BatchCancelled,
    BatchExpired,
    BatchFailed,
    BatchGenerateContentRequest,
    BatchOperation,
    BatchPending,
    BatchResultItem,
    BatchRunning,
    BatchState,
    BatchStats,
    BatchStatus,
    BatchSucceeded,
    OperationError,
    classify_operation,
)

__all__ = [
    "BatchBuilder",
    "BatchCancelled",
    "BatchExpired",
    "BatchFailed",
    "BatchGenerateContentRequest",
    "BatchHandle",
    "BatchOperation",
    "BatchPending",
    "BatchResultItem",
    "BatchRunning",
    "BatchState",
    "BatchStats",
    "BatchStatus",
    "BatchSucceeded",
    "OperationError",
    "classify_operation",
]

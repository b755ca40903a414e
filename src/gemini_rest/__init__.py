"""Async client for the Gemini REST API."""

import importlib.metadata
import logging

from gemini_rest.batch import (
    BatchBuilder,
    BatchCancelled,
    BatchExpired,
    BatchFailed,
    BatchHandle,
    BatchOperation,
    BatchPending,
    BatchResultItem,
    BatchRunning,
    BatchState,
    BatchStats,
    BatchStatus,
    BatchSucceeded,
)
from gemini_rest.cache import CacheBuilder, CachedContent, CachedContentHandle, CacheExpiration
from gemini_rest.client import Gemini, Model
from gemini_rest.config import FrozenConfig, ResolvedConfig, resolve_config
from gemini_rest.core.types import Failure, Result, Success
from gemini_rest.embedding import EmbedBuilder, TaskType
from gemini_rest.exceptions import (
    APIError,
    BatchError,
    BatchExpiredError,
    BatchFailedError,
    BatchWaitTimeoutError,
    ConfigurationError,
    DecodeError,
    FunctionCallError,
    GeminiError,
    HandleConsumedError,
    InconsistentBatchStateError,
    MissingDownloadUriError,
    MissingExpirationError,
    MissingKeyError,
    TransportError,
    ValidationError,
)
from gemini_rest.files import File, FileBuilder, FileHandle, FileState
from gemini_rest.generation import (
    ContentBuilder,
    GenerationConfig,
    GenerationResponse,
    SpeechConfig,
    ThinkingConfig,
    ThinkingLevel,
)
from gemini_rest.models import Content, Message, OperationError, Part, Role
from gemini_rest.safety import HarmBlockThreshold, HarmCategory, SafetySetting
from gemini_rest.telemetry import InMemoryReporter, TelemetryContext, TelemetryReporter
from gemini_rest.tools import (
    FunctionCall,
    FunctionCallingMode,
    FunctionDeclaration,
    FunctionResponse,
    Tool,
    ToolConfig,
)

try:
    __version__ = importlib.metadata.version("gemini-rest")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Library logging stays silent unless the application configures handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Client
    "Gemini",
    "Model",
    # Configuration
    "resolve_config",
    "ResolvedConfig",
    "FrozenConfig",
    # Telemetry (extension points)
    "TelemetryContext",
    "TelemetryReporter",
    "InMemoryReporter",
    # Results
    "Result",
    "Success",
    "Failure",
    # Messages and content
    "Role",
    "Part",
    "Content",
    "Message",
    # Generation
    "ContentBuilder",
    "GenerationConfig",
    "GenerationResponse",
    "ThinkingConfig",
    "ThinkingLevel",
    "SpeechConfig",
    "SafetySetting",
    "HarmCategory",
    "HarmBlockThreshold",
    # Tools
    "Tool",
    "ToolConfig",
    "FunctionDeclaration",
    "FunctionCall",
    "FunctionResponse",
    "FunctionCallingMode",
    # Embeddings
    "EmbedBuilder",
    "TaskType",
    # Batches
    "BatchBuilder",
    "BatchHandle",
    "BatchOperation",
    "BatchState",
    "BatchStats",
    "BatchStatus",
    "BatchPending",
    "BatchRunning",
    "BatchSucceeded",
    "BatchFailed",
    "BatchCancelled",
    "BatchExpired",
    "BatchResultItem",
    "OperationError",
    # Files
    "FileBuilder",
    "FileHandle",
    "File",
    "FileState",
    # Context caching
    "CacheBuilder",
    "CachedContentHandle",
    "CachedContent",
    "CacheExpiration",
    # Exceptions
    "GeminiError",
    "ConfigurationError",
    "MissingKeyError",
    "ValidationError",
    "MissingExpirationError",
    "TransportError",
    "APIError",
    "DecodeError",
    "FunctionCallError",
    "MissingDownloadUriError",
    "HandleConsumedError",
    "BatchError",
    "BatchFailedError",
    "BatchExpiredError",
    "InconsistentBatchStateError",
    "BatchWaitTimeoutError",
]

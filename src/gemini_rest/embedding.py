"""Text embeddings: wire models and the ``EmbedBuilder``."""

from __future__ import annotations

from collections.abc import Iterable
import logging
from typing import TYPE_CHECKING, Self

from .core.wire import WireEnum, WireModel
from .exceptions import ValidationError
from .models import Content, Part
from .transport import normalize_model

if TYPE_CHECKING:
    from .transport import GeminiTransport

logger = logging.getLogger(__name__)


class TaskType(WireEnum):
    SEMANTIC_SIMILARITY = "SEMANTIC_SIMILARITY"
    CLASSIFICATION = "CLASSIFICATION"
    CLUSTERING = "CLUSTERING"
    RETRIEVAL_DOCUMENT = "RETRIEVAL_DOCUMENT"
    RETRIEVAL_QUERY = "RETRIEVAL_QUERY"
    QUESTION_ANSWERING = "QUESTION_ANSWERING"
    FACT_VERIFICATION = "FACT_VERIFICATION"
    CODE_RETRIEVAL_QUERY = "CODE_RETRIEVAL_QUERY"


class EmbedContentRequest(WireModel):
    model: str
    content: Content
    task_type: TaskType | None = None
    title: str | None = None
    output_dimensionality: int | None = None


class BatchEmbedContentsRequest(WireModel):
    requests: list[EmbedContentRequest]


class ContentEmbedding(WireModel):
    values: list[float] = []


class ContentEmbeddingResponse(WireModel):
    embedding: ContentEmbedding


class BatchContentEmbeddingResponse(WireModel):
    embeddings: list[ContentEmbedding] = []


class EmbedBuilder:
    """Builds and sends embedding requests.

    ``execute()`` embeds all chunks as one content (one vector);
    ``execute_batch()`` embeds each chunk separately (one vector per chunk,
    in input order).
    """

    def __init__(self, transport: GeminiTransport, model: str) -> None:
        self._transport = transport
        self.model = normalize_model(model)
        self._chunks: list[str] = []
        self._task_type: TaskType | None = None
        self._title: str | None = None
        self._output_dimensionality: int | None = None

    def with_text(self, text: str) -> Self:
        self._chunks.append(text)
        return self

    def with_chunks(self, chunks: Iterable[str]) -> Self:
        self._chunks.extend(chunks)
        return self

    def with_task_type(self, task_type: TaskType) -> Self:
        self._task_type = task_type
        return self

    def with_title(self, title: str) -> Self:
        """Document title; only meaningful with ``RETRIEVAL_DOCUMENT``."""
        self._title = title
        return self

    def with_output_dimensionality(self, dimensions: int) -> Self:
        if dimensions <= 0:
            raise ValidationError(f"output dimensionality must be positive, got {dimensions}")
        self._output_dimensionality = dimensions
        return self

    def _request(self, content: Content) -> EmbedContentRequest:
        return EmbedContentRequest(
            model=self.model,
            content=content,
            task_type=self._task_type,
            title=self._title,
            output_dimensionality=self._output_dimensionality,
        )

    def _require_chunks(self) -> list[str]:
        if not self._chunks:
            raise ValidationError("nothing to embed; add text with with_text() or with_chunks()")
        return list(self._chunks)

    def build(self) -> EmbedContentRequest:
        chunks = self._require_chunks()
        return self._request(Content(parts=[Part(text=chunk) for chunk in chunks]))

    def build_batch(self) -> BatchEmbedContentsRequest:
        chunks = self._require_chunks()
        return BatchEmbedContentsRequest(
            requests=[self._request(Content.text(chunk)) for chunk in chunks]
        )

    async def execute(self) -> ContentEmbeddingResponse:
        """POST ``:embedContent``."""
        request = self.build()
        data = await self._transport.request_json(
            "POST", f"{self.model}:embedContent", json=request.to_wire()
        )
        return ContentEmbeddingResponse.from_wire(data)

    async def execute_batch(self) -> BatchContentEmbeddingResponse:
        """POST ``:batchEmbedContents``."""
        request = self.build_batch()
        logger.debug("Embedding %d chunk(s) with %s", len(request.requests), self.model)
        data = await self._transport.request_json(
            "POST", f"{self.model}:batchEmbedContents", json=request.to_wire()
        )
        return BatchContentEmbeddingResponse.from_wire(data)

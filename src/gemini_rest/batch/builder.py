"""Builder for batch generation jobs."""

from __future__ import annotations

from collections.abc import Iterable
import logging
from typing import TYPE_CHECKING, Self

from gemini_rest.constants import DEFAULT_BATCH_DISPLAY_NAME, DEFAULT_POLL_INTERVAL
from gemini_rest.exceptions import DecodeError, ValidationError
from gemini_rest.generation.model import GenerateContentRequest
from gemini_rest.telemetry import TelemetryContextProtocol
from gemini_rest.transport import normalize_model

from .handle import BatchHandle
from .model import (
    BatchConfig,
    BatchGenerateContentRequest,
    BatchRequestItem,
    InputConfig,
    RequestsContainer,
)

if TYPE_CHECKING:
    from gemini_rest.transport import GeminiTransport

logger = logging.getLogger(__name__)


class BatchBuilder:
    """Collects requests for ``batchGenerateContent`` and submits the job.

    Inline requests are keyed by position (``"0"``, ``"1"``...) so results can
    be matched back to them. Alternatively the input can be a JSONL file
    uploaded through the File API (``with_input_file``); the two are
    exclusive.
    """

    def __init__(
        self,
        transport: GeminiTransport,
        model: str,
        *,
        telemetry: TelemetryContextProtocol | None = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self._transport = transport
        self._telemetry = telemetry
        self._poll_interval = poll_interval
        self.model = normalize_model(model)
        self.display_name = DEFAULT_BATCH_DISPLAY_NAME
        self._requests: list[GenerateContentRequest] = []
        self._input_file: str | None = None

    def with_name(self, display_name: str) -> Self:
        self.display_name = display_name
        return self

    def with_request(self, request: GenerateContentRequest) -> Self:
        self._requests.append(request)
        return self

    def with_requests(self, requests: Iterable[GenerateContentRequest]) -> Self:
        """Replace the inline requests."""
        self._requests = list(requests)
        return self

    def with_input_file(self, file_name: str) -> Self:
        """Read requests from an uploaded JSONL file (``files/...``)."""
        self._input_file = file_name
        return self

    def build(self) -> BatchGenerateContentRequest:
        """Assemble the request body.

        Raises:
            ValidationError: If both or neither of inline requests and an
                input file were given.
        """
        if self._input_file and self._requests:
            raise ValidationError("a batch takes inline requests or an input file, not both")
        if self._input_file:
            input_config = InputConfig(file_name=self._input_file)
        elif self._requests:
            input_config = InputConfig(
                requests=RequestsContainer(
                    requests=[
                        BatchRequestItem(request=request, metadata={"key": str(index)})
                        for index, request in enumerate(self._requests)
                    ]
                )
            )
        else:
            raise ValidationError("a batch needs at least one request")
        return BatchGenerateContentRequest(
            batch=BatchConfig(display_name=self.display_name, input_config=input_config)
        )

    async def execute(self) -> BatchHandle:
        """Submit the job and return a handle to it."""
        request = self.build()
        data = await self._transport.request_json(
            "POST", f"{self.model}:batchGenerateContent", json=request.to_wire()
        )
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise DecodeError("batchGenerateContent response did not include a batch name")
        logger.info(
            "Created batch %s (%s, %d inline request(s))",
            name,
            self.display_name,
            len(self._requests),
        )
        return BatchHandle(
            name,
            self._transport,
            telemetry=self._telemetry,
            poll_interval=self._poll_interval,
        )

"""Content primitives shared by generation, embedding, caching and batches.

A ``Content`` is an ordered list of ``Part`` objects with an optional role.
A part carries exactly one kind of payload (text, inline bytes, a file
reference, a function call or response, or code execution data). Thought
signatures are opaque strings returned by the model and must be sent back
unchanged.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
import json
from typing import Any, Self

from .core.wire import WireEnum, WireModel
from .exceptions import ValidationError
from .tools import FunctionCall, FunctionResponse


class Role(WireEnum):
    USER = "user"
    MODEL = "model"


class Blob(WireModel):
    """Inline bytes; ``data`` is base64 encoded."""

    mime_type: str
    data: str

    @classmethod
    def from_bytes(cls, mime_type: str, raw: bytes) -> Self:
        return cls(mime_type=mime_type, data=base64.b64encode(raw).decode("ascii"))

    def decode(self) -> bytes:
        """Raw bytes of the payload."""
        return base64.b64decode(self.data)


class FileData(WireModel):
    """Reference to a file uploaded through the File API."""

    mime_type: str | None = None
    file_uri: str


class ExecutableCode(WireModel):
    language: str
    code: str


class CodeExecutionResult(WireModel):
    outcome: str
    output: str | None = None


class Part(WireModel):
    text: str | None = None
    thought: bool | None = None
    thought_signature: str | None = None
    inline_data: Blob | None = None
    file_data: FileData | None = None
    function_call: FunctionCall | None = None
    function_response: FunctionResponse | None = None
    executable_code: ExecutableCode | None = None
    code_execution_result: CodeExecutionResult | None = None

    @classmethod
    def from_text(cls, text: str) -> Self:
        return cls(text=text)

    @property
    def is_thought(self) -> bool:
        return bool(self.thought)


class Content(WireModel):
    """A single turn: parts plus an optional role."""

    parts: list[Part] | None = None
    role: Role | None = None

    @classmethod
    def text(cls, text: str) -> Self:
        return cls(parts=[Part(text=text)])

    @classmethod
    def function_call(
        cls, call: FunctionCall, thought_signature: str | None = None
    ) -> Self:
        return cls(parts=[Part(function_call=call, thought_signature=thought_signature)])

    @classmethod
    def function_response(cls, response: FunctionResponse) -> Self:
        return cls(parts=[Part(function_response=response)])

    @classmethod
    def function_response_json(cls, name: str, response: Any) -> Self:
        return cls.function_response(FunctionResponse(name=name, response=response))

    @classmethod
    def inline_data(cls, mime_type: str, data: str) -> Self:
        """Content holding one inline blob (``data`` already base64)."""
        return cls(parts=[Part(inline_data=Blob(mime_type=mime_type, data=data))])

    @classmethod
    def file_data(cls, file_uri: str, mime_type: str | None = None) -> Self:
        return cls(parts=[Part(file_data=FileData(file_uri=file_uri, mime_type=mime_type))])

    @classmethod
    def text_with_thought_signature(cls, text: str, thought_signature: str) -> Self:
        return cls(parts=[Part(text=text, thought_signature=thought_signature)])

    @classmethod
    def thought_with_signature(cls, text: str, thought_signature: str) -> Self:
        return cls(
            parts=[Part(text=text, thought=True, thought_signature=thought_signature)]
        )

    def with_role(self, role: Role) -> Self:
        """Copy of this content with ``role`` set."""
        return self.model_copy(update={"role": role})


@dataclass(frozen=True, slots=True)
class Message:
    """A role paired with its content, as accepted by the builders."""

    content: Content
    role: Role

    @classmethod
    def user(cls, text: str) -> Message:
        return cls(Content.text(text).with_role(Role.USER), Role.USER)

    @classmethod
    def model(cls, text: str) -> Message:
        return cls(Content.text(text).with_role(Role.MODEL), Role.MODEL)

    @classmethod
    def embed(cls, text: str) -> Message:
        """Role-less text content as used by embedding requests."""
        return cls(Content.text(text), Role.MODEL)

    @classmethod
    def function(cls, name: str, response: Any) -> Message:
        content = Content.function_response_json(name, response).with_role(Role.MODEL)
        return cls(content, Role.MODEL)

    @classmethod
    def function_str(cls, name: str, response: str) -> Message:
        """Function response message from a JSON document.

        Raises:
            ValidationError: If ``response`` is not valid JSON.
        """
        try:
            payload = json.loads(response)
        except json.JSONDecodeError as e:
            raise ValidationError(f"function response for '{name}' is not JSON: {e}") from e
        return cls.function(name, payload)


class CitationSource(WireModel):
    uri: str | None = None
    title: str | None = None
    start_index: int | None = None
    end_index: int | None = None
    license: str | None = None
    publication_date: dict[str, int] | str | None = None


class CitationMetadata(WireModel):
    citation_sources: list[CitationSource] = []


class OperationError(WireModel):
    """``google.rpc.Status`` as carried by failed operations, items and files."""

    code: int = 0
    message: str = ""
    details: list[Any] = []

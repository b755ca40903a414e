"""Fluent builder for generateContent requests."""

from __future__ import annotations

import base64
from collections.abc import AsyncIterator, Iterable
import logging
from typing import TYPE_CHECKING, Any, Self

from pydantic import BaseModel

from gemini_rest.models import Content, Message, Role
from gemini_rest.safety import SafetySetting
from gemini_rest.tools import (
    FunctionCallingConfig,
    FunctionCallingMode,
    FunctionDeclaration,
    Tool,
    ToolConfig,
    gemini_schema,
)
from gemini_rest.transport import normalize_model

from .model import (
    CountTokensResponse,
    GenerateContentRequest,
    GenerationConfig,
    GenerationResponse,
    Modality,
    SpeakerVoiceConfig,
    SpeechConfig,
    ThinkingConfig,
    ThinkingLevel,
)

if TYPE_CHECKING:
    from gemini_rest.cache.handle import CachedContentHandle
    from gemini_rest.files.handle import FileHandle
    from gemini_rest.transport import GeminiTransport

logger = logging.getLogger(__name__)


class ContentBuilder:
    """Accumulates a ``GenerateContentRequest`` and sends it.

    Obtained from ``Gemini.generate_content()``. Every ``with_*`` method
    mutates the builder and returns it for chaining::

        response = await (
            client.generate_content()
            .with_system_prompt("You are terse.")
            .with_user_message("Name three primes.")
            .with_temperature(0.2)
            .execute()
        )
        print(response.text())
    """

    def __init__(self, transport: GeminiTransport, model: str) -> None:
        self._transport = transport
        self.model = normalize_model(model)
        self.contents: list[Content] = []
        self._generation_config: GenerationConfig | None = None
        self._safety_settings: list[SafetySetting] | None = None
        self._tools: list[Tool] | None = None
        self._tool_config: ToolConfig | None = None
        self._system_instruction: Content | None = None
        self._cached_content: str | None = None

    def _config(self) -> GenerationConfig:
        if self._generation_config is None:
            self._generation_config = GenerationConfig()
        return self._generation_config

    def _thinking(self) -> ThinkingConfig:
        config = self._config()
        if config.thinking_config is None:
            config.thinking_config = ThinkingConfig()
        return config.thinking_config

    # --- Contents ---

    def with_system_prompt(self, text: str) -> Self:
        return self.with_system_instruction(text)

    def with_system_instruction(self, text: str) -> Self:
        self._system_instruction = Content.text(text)
        return self

    def with_user_message(self, text: str) -> Self:
        self.contents.append(Message.user(text).content)
        return self

    def with_model_message(self, text: str) -> Self:
        self.contents.append(Message.model(text).content)
        return self

    def with_message(self, message: Message) -> Self:
        """Append a message; its content keeps its own role if it has one."""
        content = message.content
        self.contents.append(content if content.role else content.with_role(message.role))
        return self

    def with_messages(self, messages: Iterable[Message]) -> Self:
        for message in messages:
            self.with_message(message)
        return self

    def with_content(self, content: Content) -> Self:
        self.contents.append(content)
        return self

    def with_inline_data(self, data: str | bytes, mime_type: str) -> Self:
        """Append a user turn with inline data (bytes are base64 encoded)."""
        if isinstance(data, bytes):
            data = base64.b64encode(data).decode("ascii")
        self.contents.append(Content.inline_data(mime_type, data).with_role(Role.USER))
        return self

    def with_file_data(
        self, file: str | FileHandle, mime_type: str | None = None
    ) -> Self:
        """Append a user turn referring to an uploaded file (handle or URI)."""
        if isinstance(file, str):
            uri = file
        else:
            uri = file.file.uri or file.name
            mime_type = mime_type or file.file.mime_type
        self.contents.append(Content.file_data(uri, mime_type).with_role(Role.USER))
        return self

    def with_function_response(self, name: str, response: Any) -> Self:
        self.contents.append(
            Content.function_response_json(name, response).with_role(Role.USER)
        )
        return self

    def with_function_response_str(self, name: str, response: str) -> Self:
        """Like ``with_function_response`` with a JSON document.

        Raises:
            ValidationError: If ``response`` is not valid JSON.
        """
        message = Message.function_str(name, response)
        self.contents.append(message.content.with_role(Role.USER))
        return self

    def with_cached_content(self, cached: str | CachedContentHandle) -> Self:
        self._cached_content = cached if isinstance(cached, str) else cached.name
        return self

    # --- Generation config ---

    def with_generation_config(self, config: GenerationConfig) -> Self:
        self._generation_config = config
        return self

    def with_temperature(self, temperature: float) -> Self:
        self._config().temperature = temperature
        return self

    def with_top_p(self, top_p: float) -> Self:
        self._config().top_p = top_p
        return self

    def with_top_k(self, top_k: int) -> Self:
        self._config().top_k = top_k
        return self

    def with_max_output_tokens(self, max_output_tokens: int) -> Self:
        self._config().max_output_tokens = max_output_tokens
        return self

    def with_candidate_count(self, candidate_count: int) -> Self:
        self._config().candidate_count = candidate_count
        return self

    def with_stop_sequences(self, stop_sequences: Iterable[str]) -> Self:
        self._config().stop_sequences = list(stop_sequences)
        return self

    def with_response_mime_type(self, mime_type: str) -> Self:
        self._config().response_mime_type = mime_type
        return self

    def with_response_schema(self, schema: dict[str, Any] | type[BaseModel]) -> Self:
        """Structured output schema, as a dict or a pydantic model class."""
        if isinstance(schema, type) and issubclass(schema, BaseModel):
            schema = gemini_schema(schema)
        self._config().response_schema = dict(schema)
        return self

    def with_thinking_config(self, thinking_config: ThinkingConfig) -> Self:
        self._config().thinking_config = thinking_config
        return self

    def with_thinking_budget(self, budget: int) -> Self:
        self._thinking().thinking_budget = budget
        return self

    def with_dynamic_thinking(self) -> Self:
        return self.with_thinking_budget(-1)

    def with_thinking_level(self, level: ThinkingLevel) -> Self:
        self._thinking().thinking_level = level
        return self

    def with_thoughts_included(self, include: bool = True) -> Self:
        self._thinking().include_thoughts = include
        return self

    def with_audio_output(self) -> Self:
        self._config().response_modalities = [Modality.AUDIO]
        return self

    def with_speech_config(self, speech_config: SpeechConfig) -> Self:
        self._config().speech_config = speech_config
        return self

    def with_voice(self, voice_name: str) -> Self:
        return self.with_speech_config(SpeechConfig.single_voice(voice_name)).with_audio_output()

    def with_multi_speaker_config(self, speakers: list[SpeakerVoiceConfig]) -> Self:
        return self.with_speech_config(SpeechConfig.multi_speaker(speakers)).with_audio_output()

    # --- Tools and safety ---

    def with_tool(self, tool: Tool) -> Self:
        if self._tools is None:
            self._tools = []
        self._tools.append(tool)
        return self

    def with_function(self, declaration: FunctionDeclaration) -> Self:
        return self.with_tool(Tool.function(declaration))

    def with_function_calling_mode(
        self, mode: FunctionCallingMode, allowed_function_names: Iterable[str] | None = None
    ) -> Self:
        config = FunctionCallingConfig(
            mode=mode,
            allowed_function_names=(
                list(allowed_function_names) if allowed_function_names else None
            ),
        )
        if self._tool_config is None:
            self._tool_config = ToolConfig(function_calling_config=config)
        else:
            self._tool_config.function_calling_config = config
        return self

    def with_tool_config(self, tool_config: ToolConfig) -> Self:
        self._tool_config = tool_config
        return self

    def with_safety_settings(self, settings: Iterable[SafetySetting]) -> Self:
        self._safety_settings = list(settings)
        return self

    # --- Terminal operations ---

    def build(self) -> GenerateContentRequest:
        """Snapshot of the request in its current state."""
        return GenerateContentRequest(
            contents=list(self.contents),
            generation_config=(
                self._generation_config.model_copy(deep=True)
                if self._generation_config
                else None
            ),
            safety_settings=self._safety_settings,
            tools=self._tools,
            tool_config=self._tool_config,
            system_instruction=self._system_instruction,
            cached_content=self._cached_content,
        )

    async def execute(self) -> GenerationResponse:
        """POST ``:generateContent`` and parse the response.

        Raises:
            TransportError: The request never produced a response.
            APIError: The server rejected the request.
            DecodeError: The response did not match the expected shape.
        """
        request = self.build()
        logger.debug("generateContent on %s with %d content(s)", self.model, len(request.contents))
        data = await self._transport.request_json(
            "POST", f"{self.model}:generateContent", json=request.to_wire()
        )
        return GenerationResponse.from_wire(data)

    async def execute_stream(self) -> AsyncIterator[GenerationResponse]:
        """Stream ``:streamGenerateContent`` chunks as they arrive.

        Usage::

            async for chunk in builder.execute_stream():
                print(chunk.text(), end="")
        """
        request = self.build()
        logger.debug("streamGenerateContent on %s", self.model)
        async for frame in self._transport.stream_sse(
            f"{self.model}:streamGenerateContent", request.to_wire()
        ):
            yield GenerationResponse.from_wire(frame)

    async def count_tokens(self) -> CountTokensResponse:
        """POST ``:countTokens`` for the request as built so far."""
        body = {"generateContentRequest": {"model": self.model, **self.build().to_wire()}}
        data = await self._transport.request_json(
            "POST", f"{self.model}:countTokens", json=body
        )
        return CountTokensResponse.from_wire(data)

"""Wire models for content generation."""

from __future__ import annotations

from typing import Any, Self

from gemini_rest.core.wire import WireEnum, WireModel
from gemini_rest.models import Blob, CitationMetadata, Content, Part
from gemini_rest.safety import PromptFeedback, SafetyRating, SafetySetting
from gemini_rest.tools import FunctionCall, Tool, ToolConfig


class Modality(WireEnum):
    UNSPECIFIED = "MODALITY_UNSPECIFIED"
    TEXT = "TEXT"
    IMAGE = "IMAGE"
    AUDIO = "AUDIO"
    VIDEO = "VIDEO"
    DOCUMENT = "DOCUMENT"


class ThinkingLevel(WireEnum):
    UNSPECIFIED = "THINKING_LEVEL_UNSPECIFIED"
    MINIMAL = "MINIMAL"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class ThinkingConfig(WireModel):
    """Thinking controls.

    ``thinking_budget=-1`` lets the model decide; ``0`` disables thinking on
    models that allow it. ``thinking_level`` applies to models that use
    levels instead of budgets.
    """

    thinking_budget: int | None = None
    include_thoughts: bool | None = None
    thinking_level: ThinkingLevel | None = None

    @classmethod
    def dynamic(cls) -> Self:
        return cls(thinking_budget=-1)


class PrebuiltVoiceConfig(WireModel):
    voice_name: str


class VoiceConfig(WireModel):
    prebuilt_voice_config: PrebuiltVoiceConfig | None = None

    @classmethod
    def prebuilt(cls, voice_name: str) -> Self:
        return cls(prebuilt_voice_config=PrebuiltVoiceConfig(voice_name=voice_name))


class SpeakerVoiceConfig(WireModel):
    speaker: str
    voice_config: VoiceConfig

    @classmethod
    def prebuilt(cls, speaker: str, voice_name: str) -> Self:
        return cls(speaker=speaker, voice_config=VoiceConfig.prebuilt(voice_name))


class MultiSpeakerVoiceConfig(WireModel):
    speaker_voice_configs: list[SpeakerVoiceConfig]


class SpeechConfig(WireModel):
    voice_config: VoiceConfig | None = None
    multi_speaker_voice_config: MultiSpeakerVoiceConfig | None = None
    language_code: str | None = None

    @classmethod
    def single_voice(cls, voice_name: str) -> Self:
        return cls(voice_config=VoiceConfig.prebuilt(voice_name))

    @classmethod
    def multi_speaker(cls, speakers: list[SpeakerVoiceConfig]) -> Self:
        return cls(
            multi_speaker_voice_config=MultiSpeakerVoiceConfig(
                speaker_voice_configs=list(speakers)
            )
        )


class GenerationConfig(WireModel):
    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None
    candidate_count: int | None = None
    max_output_tokens: int | None = None
    stop_sequences: list[str] | None = None
    presence_penalty: float | None = None
    frequency_penalty: float | None = None
    seed: int | None = None
    response_mime_type: str | None = None
    response_schema: dict[str, Any] | None = None
    response_modalities: list[Modality] | None = None
    thinking_config: ThinkingConfig | None = None
    speech_config: SpeechConfig | None = None


class GenerateContentRequest(WireModel):
    """Body of ``models/{model}:generateContent`` and the streaming variant."""

    contents: list[Content] = []
    generation_config: GenerationConfig | None = None
    safety_settings: list[SafetySetting] | None = None
    tools: list[Tool] | None = None
    tool_config: ToolConfig | None = None
    system_instruction: Content | None = None
    cached_content: str | None = None


# --- Responses ---


class FinishReason(WireEnum):
    UNSPECIFIED = "FINISH_REASON_UNSPECIFIED"
    STOP = "STOP"
    MAX_TOKENS = "MAX_TOKENS"
    SAFETY = "SAFETY"
    RECITATION = "RECITATION"
    LANGUAGE = "LANGUAGE"
    OTHER = "OTHER"
    BLOCKLIST = "BLOCKLIST"
    PROHIBITED_CONTENT = "PROHIBITED_CONTENT"
    SPII = "SPII"
    MALFORMED_FUNCTION_CALL = "MALFORMED_FUNCTION_CALL"
    IMAGE_SAFETY = "IMAGE_SAFETY"
    UNEXPECTED_TOOL_CALL = "UNEXPECTED_TOOL_CALL"


class ModalityTokenCount(WireModel):
    modality: Modality
    token_count: int = 0


class UsageMetadata(WireModel):
    prompt_token_count: int | None = None
    candidates_token_count: int | None = None
    total_token_count: int | None = None
    thoughts_token_count: int | None = None
    cached_content_token_count: int | None = None
    tool_use_prompt_token_count: int | None = None
    prompt_tokens_details: list[ModalityTokenCount] | None = None


class Candidate(WireModel):
    content: Content | None = None
    finish_reason: FinishReason | None = None
    safety_ratings: list[SafetyRating] | None = None
    citation_metadata: CitationMetadata | None = None
    grounding_metadata: dict[str, Any] | None = None
    index: int | None = None
    token_count: int | None = None
    avg_logprobs: float | None = None


class GenerationResponse(WireModel):
    """Response of ``generateContent`` (or one chunk of a stream).

    The accessors read the first candidate only, which is the only one unless
    ``candidate_count`` was raised.
    """

    candidates: list[Candidate] = []
    prompt_feedback: PromptFeedback | None = None
    usage_metadata: UsageMetadata | None = None
    model_version: str | None = None
    response_id: str | None = None

    def _parts(self) -> list[Part]:
        if not self.candidates:
            return []
        content = self.candidates[0].content
        if content is None or content.parts is None:
            return []
        return content.parts

    def text(self) -> str:
        """Concatenated non-thought text of the first candidate."""
        return "".join(
            p.text for p in self._parts() if p.text is not None and not p.is_thought
        )

    def thoughts(self) -> list[str]:
        """Thought summaries (present when thoughts were requested)."""
        return [p.text for p in self._parts() if p.text is not None and p.is_thought]

    def function_calls(self) -> list[FunctionCall]:
        return [p.function_call for p in self._parts() if p.function_call is not None]

    def function_calls_with_thoughts(self) -> list[tuple[FunctionCall, str | None]]:
        """Function calls paired with the thought signature of their part.

        The signature must be sent back with the call in the next turn for
        the model to keep its reasoning context.
        """
        return [
            (p.function_call, p.thought_signature or p.function_call.thought_signature)
            for p in self._parts()
            if p.function_call is not None
        ]

    def inline_data(self) -> list[Blob]:
        """Inline blobs (generated images or audio)."""
        return [p.inline_data for p in self._parts() if p.inline_data is not None]


class CountTokensResponse(WireModel):
    total_tokens: int = 0
    cached_content_token_count: int | None = None
    prompt_tokens_details: list[ModalityTokenCount] | None = None

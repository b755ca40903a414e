"""Content generation: request/response models and the ``ContentBuilder``."""

from .builder import ContentBuilder
from .model import (
    Candidate,
    CountTokensResponse,
    FinishReason,
    GenerateContentRequest,
    GenerationConfig,
    GenerationResponse,
    Modality,
    ModalityTokenCount,
    MultiSpeakerVoiceConfig,
    PrebuiltVoiceConfig,
    SpeakerVoiceConfig,
    SpeechConfig,
    ThinkingConfig,
    ThinkingLevel,
    UsageMetadata,
    VoiceConfig,
)

__all__ = [
    "Candidate",
    "ContentBuilder",
    "CountTokensResponse",
    "FinishReason",
    "GenerateContentRequest",
    "GenerationConfig",
    "GenerationResponse",
    "Modality",
    "ModalityTokenCount",
    "MultiSpeakerVoiceConfig",
    "PrebuiltVoiceConfig",
    "SpeakerVoiceConfig",
    "SpeechConfig",
    "ThinkingConfig",
    "ThinkingLevel",
    "UsageMetadata",
    "VoiceConfig",
]

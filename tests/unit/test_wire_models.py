"""Wire model conventions and content primitives."""

import pytest

from gemini_rest.core.types import Failure, Success
from gemini_rest.exceptions import DecodeError, ValidationError
from gemini_rest.generation import GenerationResponse
from gemini_rest.models import Blob, Content, Message, Role
from gemini_rest.safety import HarmCategory, SafetyRating


class TestWireConventions:
    @pytest.mark.unit
    def test_unknown_enum_value_is_tolerated(self, caplog):
        rating = SafetyRating.from_wire(
            {"category": "HARM_CATEGORY_SOMETHING_NEW", "probability": "LOW"}
        )

        assert rating.category == "HARM_CATEGORY_SOMETHING_NEW"
        assert rating.category not in list(HarmCategory)
        assert "HARM_CATEGORY_SOMETHING_NEW" in caplog.text

    @pytest.mark.unit
    def test_unknown_fields_are_ignored(self):
        response = GenerationResponse.from_wire({"candidates": [], "brandNewField": 1})

        assert response.candidates == []

    @pytest.mark.unit
    def test_shape_mismatch_is_decode_error(self):
        with pytest.raises(DecodeError):
            GenerationResponse.from_wire({"candidates": "not a list"})

    @pytest.mark.unit
    def test_none_fields_are_omitted(self):
        assert Content.text("hi").to_wire() == {"parts": [{"text": "hi"}]}


class TestContentPrimitives:
    @pytest.mark.unit
    def test_blob_round_trip(self):
        blob = Blob.from_bytes("audio/wav", b"RIFF")

        assert blob.decode() == b"RIFF"

    @pytest.mark.unit
    def test_thought_signature_parts(self):
        content = Content.thought_with_signature("plan", "sig")

        assert content.to_wire() == {
            "parts": [{"text": "plan", "thought": True, "thoughtSignature": "sig"}]
        }

    @pytest.mark.unit
    def test_messages_carry_roles(self):
        assert Message.user("q").content.role is Role.USER
        assert Message.model("a").content.role is Role.MODEL
        assert Message.embed("e").content.role is None

    @pytest.mark.unit
    def test_function_str_rejects_invalid_json(self):
        with pytest.raises(ValidationError):
            Message.function_str("f", "not json")


class TestResults:
    @pytest.mark.unit
    def test_success_unwraps(self):
        assert Success(3).unwrap() == 3

    @pytest.mark.unit
    def test_failure_unpacks_handle_then_error(self):
        error = RuntimeError("x")
        handle, carried = Failure(error, handle="h")

        assert handle == "h"
        assert carried is error
        with pytest.raises(RuntimeError):
            Failure(error).unwrap()

"""Function declarations, schema reduction and function call arguments."""

from typing import Literal

from pydantic import BaseModel
import pytest

from gemini_rest.exceptions import FunctionCallError, ValidationError
from gemini_rest.tools import (
    FunctionCall,
    FunctionCallingMode,
    FunctionDeclaration,
    FunctionResponse,
    Tool,
    ToolConfig,
    gemini_schema,
)


class Location(BaseModel):
    city: str
    country: str | None = None


class WeatherQuery(BaseModel):
    """Weather lookup."""

    location: Location
    unit: Literal["celsius", "fahrenheit"] = "celsius"


class Node(BaseModel):
    value: int
    children: list["Node"] = []


class TestSchema:
    @pytest.mark.unit
    def test_nested_models_are_inlined_without_titles(self):
        schema = gemini_schema(WeatherQuery)

        assert "$defs" not in schema
        assert "title" not in schema
        location = schema["properties"]["location"]
        assert location["type"] == "object"
        assert location["properties"]["city"] == {"type": "string"}
        assert location["properties"]["country"] == {"type": "string", "nullable": True}
        assert schema["properties"]["unit"]["enum"] == ["celsius", "fahrenheit"]
        assert schema["required"] == ["location"]

    @pytest.mark.unit
    def test_property_named_title_is_kept(self):
        class Book(BaseModel):
            title: str

        assert gemini_schema(Book)["properties"] == {"title": {"type": "string"}}

    @pytest.mark.unit
    def test_recursive_model_is_rejected(self):
        with pytest.raises(ValueError, match="recursive"):
            gemini_schema(Node)


class TestDeclarations:
    @pytest.mark.unit
    def test_with_parameters_returns_copy(self):
        bare = FunctionDeclaration(name="get_weather", description="Current weather")

        declared = bare.with_parameters(WeatherQuery)

        assert bare.parameters is None
        assert declared.parameters["properties"]["location"]["type"] == "object"

    @pytest.mark.unit
    def test_tool_constructors_serialize_to_their_wire_field(self):
        assert Tool.google_search().to_wire() == {"googleSearch": {}}
        assert Tool.code_execution().to_wire() == {"codeExecution": {}}
        assert Tool.url_context().to_wire() == {"urlContext": {}}

    @pytest.mark.unit
    def test_tool_config_with_mode(self):
        config = ToolConfig.with_mode(FunctionCallingMode.ANY, "a", "b")

        assert config.to_wire() == {
            "functionCallingConfig": {"mode": "ANY", "allowedFunctionNames": ["a", "b"]}
        }


class TestFunctionCall:
    @pytest.mark.unit
    def test_typed_argument_access(self):
        call = FunctionCall(name="book", args={"seats": "2", "city": "Oslo"})

        assert call.get("seats", int) == 2
        assert call.get("city") == "Oslo"

    @pytest.mark.unit
    def test_argument_validated_as_model(self):
        call = FunctionCall(name="weather", args={"location": {"city": "Oslo"}})

        location = call.get("location", Location)

        assert location == Location(city="Oslo")

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("args", "key", "type_"),
        [
            (["not", "an", "object"], "x", None),
            ({"a": 1}, "missing", None),
            ({"n": "many"}, "n", int),
        ],
    )
    def test_bad_arguments_raise(self, args, key, type_):
        call = FunctionCall(name="f", args=args)

        with pytest.raises(FunctionCallError):
            call.get(key, type_)

    @pytest.mark.unit
    def test_function_response_from_json(self):
        response = FunctionResponse.from_str("f", '{"ok": true}')

        assert response.to_wire() == {"name": "f", "response": {"ok": True}}

    @pytest.mark.unit
    def test_function_response_rejects_invalid_json(self):
        with pytest.raises(ValidationError):
            FunctionResponse.from_str("f", "{oops")

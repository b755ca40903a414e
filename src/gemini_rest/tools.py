"""Tools and function calling.

Function parameters can be described with a pydantic model; the generated
JSON schema is reduced to the OpenAPI subset the API accepts (references
inlined, ``$defs`` and titles removed, ``Optional`` rendered as
``nullable``).
"""

from __future__ import annotations

import json
import logging
from typing import Any, Self

from pydantic import BaseModel, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .core.wire import WireEnum, WireModel
from .exceptions import FunctionCallError, ValidationError

logger = logging.getLogger(__name__)


# --- Schema generation ---


def gemini_schema(model_cls: type[BaseModel]) -> dict[str, Any]:
    """JSON schema for ``model_cls`` in the form function declarations use.

    Raises:
        ValueError: If the model refers to itself.
    """
    schema = model_cls.model_json_schema()
    defs = schema.pop("$defs", {})
    return _simplify(schema, defs, ())


def _simplify(node: Any, defs: dict[str, Any], refs: tuple[str, ...]) -> Any:
    if isinstance(node, list):
        return [_simplify(item, defs, refs) for item in node]
    if not isinstance(node, dict):
        return node

    if "$ref" in node:
        ref_name = node["$ref"].rsplit("/", 1)[-1]
        if ref_name in refs:
            raise ValueError(f"recursive schema '{ref_name}' cannot be inlined")
        siblings = {k: v for k, v in node.items() if k != "$ref"}
        return _simplify({**defs[ref_name], **siblings}, defs, (*refs, ref_name))

    any_of = node.get("anyOf")
    if isinstance(any_of, list):
        non_null = [s for s in any_of if s.get("type") != "null"]
        if len(non_null) == 1 and len(non_null) < len(any_of):
            rest = {k: v for k, v in node.items() if k != "anyOf"}
            return _simplify({**non_null[0], **rest, "nullable": True}, defs, refs)

    simplified: dict[str, Any] = {}
    for key, value in node.items():
        if key == "title" or (key == "default" and value is None):
            continue
        if key == "properties" and isinstance(value, dict):
            simplified[key] = {
                name: _simplify(prop, defs, refs) for name, prop in value.items()
            }
        else:
            simplified[key] = _simplify(value, defs, refs)
    return simplified


# --- Declarations ---


class Behavior(WireEnum):
    BLOCKING = "BLOCKING"
    NON_BLOCKING = "NON_BLOCKING"


class FunctionDeclaration(WireModel):
    """A function the model may call.

    Example::

        class WeatherQuery(BaseModel):
            location: str
            unit: Literal["celsius", "fahrenheit"] = "celsius"

        decl = FunctionDeclaration(
            name="get_weather", description="Current weather"
        ).with_parameters(WeatherQuery)
    """

    name: str
    description: str
    behavior: Behavior | None = None
    parameters: dict[str, Any] | None = None
    response: dict[str, Any] | None = None

    def with_parameters(self, model_cls: type[BaseModel]) -> Self:
        """Copy with parameters described by ``model_cls``."""
        return self.model_copy(update={"parameters": gemini_schema(model_cls)})

    def with_parameters_schema(self, schema: dict[str, Any]) -> Self:
        """Copy with a hand-written parameters schema."""
        return self.model_copy(update={"parameters": dict(schema)})

    def with_response(self, model_cls: type[BaseModel]) -> Self:
        """Copy with the response described by ``model_cls``."""
        return self.model_copy(update={"response": gemini_schema(model_cls)})


class Tool(WireModel):
    """One entry of a request's ``tools`` list.

    Exactly one field is set; use the constructors.
    """

    function_declarations: list[FunctionDeclaration] | None = None
    google_search_config: dict[str, Any] | None = Field(default=None, alias="googleSearch")
    code_execution_config: dict[str, Any] | None = Field(
        default=None, alias="codeExecution"
    )
    url_context_config: dict[str, Any] | None = Field(default=None, alias="urlContext")

    @classmethod
    def function(cls, declaration: FunctionDeclaration) -> Self:
        return cls(function_declarations=[declaration])

    @classmethod
    def functions(cls, declarations: list[FunctionDeclaration]) -> Self:
        return cls(function_declarations=list(declarations))

    @classmethod
    def google_search(cls) -> Self:
        """Grounding with Google Search."""
        return cls(google_search_config={})

    @classmethod
    def code_execution(cls) -> Self:
        return cls(code_execution_config={})

    @classmethod
    def url_context(cls) -> Self:
        return cls(url_context_config={})


# --- Calls and responses ---


class FunctionCall(WireModel):
    """A call requested by the model."""

    name: str
    args: Any = None
    id: str | None = None
    thought_signature: str | None = None

    def get[T](self, key: str, type_: type[T] | None = None) -> T | Any:
        """Return argument ``key``, optionally validated as ``type_``.

        Raises:
            FunctionCallError: If the arguments are not an object, the key is
                missing, or the value does not validate.
        """
        if not isinstance(self.args, dict):
            raise FunctionCallError(
                f"arguments of '{self.name}' should be an object; actual: {self.args!r}"
            )
        if key not in self.args:
            raise FunctionCallError(
                f"parameter '{key}' is missing in arguments {self.args!r}"
            )
        value = self.args[key]
        if type_ is None:
            return value
        try:
            return TypeAdapter(type_).validate_python(value)
        except PydanticValidationError as e:
            raise FunctionCallError(f"failed to deserialize parameter '{key}': {e}") from e


class FunctionResponse(WireModel):
    """The result of executing a function call, sent back to the model."""

    name: str
    response: Any = None
    id: str | None = None

    @classmethod
    def from_str(cls, name: str, response: str) -> Self:
        """Build from a JSON document.

        Raises:
            ValidationError: If ``response`` is not valid JSON.
        """
        try:
            payload = json.loads(response)
        except json.JSONDecodeError as e:
            raise ValidationError(f"function response for '{name}' is not JSON: {e}") from e
        return cls(name=name, response=payload)


class FunctionCallingMode(WireEnum):
    AUTO = "AUTO"
    ANY = "ANY"
    NONE = "NONE"
    VALIDATED = "VALIDATED"


class FunctionCallingConfig(WireModel):
    mode: FunctionCallingMode
    allowed_function_names: list[str] | None = None


class ToolConfig(WireModel):
    function_calling_config: FunctionCallingConfig | None = None

    @classmethod
    def with_mode(cls, mode: FunctionCallingMode, *names: str) -> Self:
        """Tool config restricting calls to ``mode`` (and ``names`` if given)."""
        return cls(
            function_calling_config=FunctionCallingConfig(
                mode=mode, allowed_function_names=list(names) or None
            )
        )


__all__ = [  # noqa: RUF022
    "Behavior",
    "FunctionCall",
    "FunctionCallingConfig",
    "FunctionCallingMode",
    "FunctionDeclaration",
    "FunctionResponse",
    "Tool",
    "ToolConfig",
    "gemini_schema",
]

"""Schemas for structured-output requests.

Callers describe structured output the same way across providers:

    {"type": "json_schema", "json_schema": {"name": ..., "description": ..., "schema": {...}}}

Pydantic validates the descriptor before it is translated into a forced tool.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TOOL_DESCRIPTION = 'Output data in this structured format'


class JsonSchemaSpec(BaseModel):
    """A named JSON schema.

    Args:
        name: Schema name (becomes the forced tool name).
        description: Optional human-readable description.
        schema: JSON Schema object describing the output.

    Examples:
        >>> JsonSchemaSpec.model_validate({"name": "person", "schema": {"type": "object"}}).schema_
        {'type': 'object'}
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    description: str | None = None
    schema_: dict[str, Any] = Field(alias='schema', default_factory=dict)


class ResponseFormat(BaseModel):
    """Response-format descriptor. Only `json_schema` selects structured output."""

    type: str = 'text'
    json_schema: JsonSchemaSpec | None = None

    @property
    def is_json_schema(self) -> bool:
        return self.type == 'json_schema' and self.json_schema is not None


def coerce_response_format(value: ResponseFormat | dict[str, Any] | None) -> ResponseFormat | None:
    """Validate a response-format descriptor.

    Args:
        value: Model instance, raw dict, or None.

    Returns:
        A ResponseFormat, or None when no descriptor was given.

    Raises:
        pydantic.ValidationError: If a dict descriptor is malformed.
    """
    if value is None:
        return None
    if isinstance(value, ResponseFormat):
        return value
    return ResponseFormat.model_validate(value)


def build_structured_output_tool(spec: JsonSchemaSpec) -> dict[str, Any]:
    """Translate a named schema into an Anthropic tool definition."""
    return {
        'name': spec.name,
        'description': spec.description or DEFAULT_TOOL_DESCRIPTION,
        'input_schema': spec.schema_,
    }

"""
Output Schema Descriptors

Tagged schema descriptors shared by the request builders (which turn them into
JSON Schema for the completion service) and by the normalizer (which uses the
same descriptors to validate and default the response).

Two root shapes are supported:
  - OBJECT: a JSON object whose named fields are all required
  - STRING_LIST: a bare JSON array of strings, no object wrapper

Validation is a single pass with a two-tier failure model:
  - a payload of the wrong root shape raises SchemaShapeError (fatal)
  - a missing or malformed individual field is replaced by its fallback
    (an empty array is a valid sequence and passes through)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

logger = logging.getLogger(__name__)


class FieldKind(str, Enum):
    """Declared type of a schema field."""

    STRING = "string"
    STRING_LIST = "string_list"


class SchemaRoot(str, Enum):
    """Shape of the top-level JSON value."""

    OBJECT = "object"
    STRING_LIST = "string_list"


class SchemaShapeError(ValueError):
    """The payload does not have the declared root shape."""


def string_items(values: list[Any]) -> list[str]:
    """Strings of a decoded JSON array; nulls are dropped, scalars stringified."""
    return [item if isinstance(item, str) else str(item) for item in values if item is not None]


@dataclass(frozen=True)
class SchemaField:
    """A single required field of an object schema."""

    name: str
    kind: FieldKind
    description: str = ""
    fallback: Union[str, tuple[str, ...]] = ""

    def to_json_schema(self) -> dict[str, Any]:
        if self.kind == FieldKind.STRING:
            spec: dict[str, Any] = {"type": "string"}
        else:
            spec = {"type": "array", "items": {"type": "string"}}
        if self.description:
            spec["description"] = self.description
        return spec

    def resolve(self, data: dict[str, Any]) -> Union[str, list[str]]:
        """Return the field value from ``data``, or its fallback."""
        value = data.get(self.name)

        if self.kind == FieldKind.STRING:
            if isinstance(value, str) and value:
                return value
            logger.debug(f"Field '{self.name}' missing or malformed, using fallback")
            return str(self.fallback)

        if isinstance(value, list):
            return string_items(value)
        logger.debug(f"Field '{self.name}' missing or malformed, using fallback")
        fallback = self.fallback
        return list(fallback) if isinstance(fallback, tuple) else [fallback]


@dataclass(frozen=True)
class OutputSchema:
    """Declarative description of the structured output we ask for."""

    name: str
    fields: tuple[SchemaField, ...] = field(default_factory=tuple)
    root: SchemaRoot = SchemaRoot.OBJECT
    description: str = ""

    @property
    def is_object(self) -> bool:
        return self.root == SchemaRoot.OBJECT

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    @property
    def required(self) -> list[str]:
        """All declared fields are required."""
        return self.field_names

    def to_json_schema(self) -> dict[str, Any]:
        """Render the descriptor as a JSON Schema document."""
        if not self.is_object:
            schema: dict[str, Any] = {"type": "array", "items": {"type": "string"}}
        else:
            schema = {
                "type": "object",
                "properties": {f.name: f.to_json_schema() for f in self.fields},
                "required": self.required,
                "additionalProperties": False,
            }
        if self.description:
            schema["description"] = self.description
        return schema

    def validate(self, data: Any) -> Union[dict[str, Any], list[str]]:
        """
        Validate and default a decoded payload in one pass.

        Args:
            data: Decoded JSON value

        Returns:
            For object schemas, a dict with every declared field populated.
            For string-list schemas, a list of strings (empty when the payload
            is not a list).

        Raises:
            SchemaShapeError: If an object schema receives a non-object payload
        """
        if not self.is_object:
            if not isinstance(data, list):
                logger.debug(f"Schema '{self.name}' expected a list, got {type(data).__name__}")
                return []
            return string_items(data)

        if not isinstance(data, dict):
            raise SchemaShapeError(
                f"Schema '{self.name}' expected an object, got {type(data).__name__}"
            )
        return {f.name: f.resolve(data) for f in self.fields}

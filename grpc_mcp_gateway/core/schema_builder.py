"""Schema Builder — protobuf message descriptors → JSON Schema for tool input.

Invariants:
    - OUTPUT_ONLY fields never appear in properties
    - "required" is present only when non-empty and names only keys in properties
    - Every object schema for a message sets additionalProperties: false
    - visited is restored on every exit path: a message's name is removed
      once its expansion returns, so sibling branches re-expand it fully
    - A message already on the current expansion path becomes
      {"type": "object", "additionalProperties": true}; generation always terminates
    - Unknown field kinds yield {} and never raise

Design Decisions:
    - Map keys are always strings in JSON, so a map becomes an object whose
      additionalProperties is the value schema
    - Enum zero values ("UNSPECIFIED") are dropped unless they are all the enum has
    - Well-known types resolved before the cycle check and never recursed into
"""

import logging
from collections.abc import Mapping

from google.protobuf.descriptor import Descriptor, EnumDescriptor, FieldDescriptor

from grpc_mcp_gateway.core.domain_types import SchemaNode
from grpc_mcp_gateway.core.field_behavior import is_output_only, is_required
from grpc_mcp_gateway.core.source_comments import normalize_comment
from grpc_mcp_gateway.core.well_known_types import well_known_schema

logger = logging.getLogger(__name__)


_SCALAR_SCHEMAS: dict[int, SchemaNode] = {
    FieldDescriptor.TYPE_BOOL: {"type": "boolean"},
    FieldDescriptor.TYPE_STRING: {"type": "string"},
    FieldDescriptor.TYPE_BYTES: {"type": "string", "format": "byte"},
    FieldDescriptor.TYPE_INT32: {"type": "integer", "format": "int32"},
    FieldDescriptor.TYPE_SINT32: {"type": "integer", "format": "int32"},
    FieldDescriptor.TYPE_SFIXED32: {"type": "integer", "format": "int32"},
    FieldDescriptor.TYPE_UINT32: {"type": "integer", "format": "int32"},
    FieldDescriptor.TYPE_FIXED32: {"type": "integer", "format": "int32"},
    FieldDescriptor.TYPE_INT64: {"type": "integer", "format": "int64"},
    FieldDescriptor.TYPE_SINT64: {"type": "integer", "format": "int64"},
    FieldDescriptor.TYPE_SFIXED64: {"type": "integer", "format": "int64"},
    FieldDescriptor.TYPE_UINT64: {"type": "integer", "format": "int64"},
    FieldDescriptor.TYPE_FIXED64: {"type": "integer", "format": "int64"},
    FieldDescriptor.TYPE_FLOAT: {"type": "number", "format": "float"},
    FieldDescriptor.TYPE_DOUBLE: {"type": "number", "format": "double"},
}

_MESSAGE_TYPES = frozenset({FieldDescriptor.TYPE_MESSAGE, FieldDescriptor.TYPE_GROUP})


# === Public API ===============================================================

def build_message_schema(
    descriptor: Descriptor,
    visited: set[str] | None = None,
    comments: Mapping[str, str] | None = None,
) -> SchemaNode:
    """Object schema for a message: one property per input field, in declaration order."""
    if visited is None:
        visited = set()
    properties: dict[str, SchemaNode] = {}
    required: list[str] = []

    for field in descriptor.fields:
        if is_output_only(field):
            continue

        schema = build_field_schema(field, visited, comments)
        description = normalize_comment(comments.get(field.full_name, "")) if comments else ""
        if description:
            schema["description"] = description

        properties[field.json_name] = schema
        if is_required(field):
            required.append(field.json_name)

    result: SchemaNode = {
        "type": "object",
        "properties": properties,
        "additionalProperties": False,
    }
    if required:
        result["required"] = required
    return result


def build_field_schema(
    field: FieldDescriptor,
    visited: set[str],
    comments: Mapping[str, str] | None = None,
) -> SchemaNode:
    """Schema for one field: map, then repeated, then scalar-or-message."""
    if _is_map(field):
        value_field = field.message_type.fields_by_name["value"]
        return {
            "type": "object",
            "additionalProperties": build_field_schema(value_field, visited, comments),
        }

    if field.is_repeated:
        return {
            "type": "array",
            "items": _build_scalar_or_message_schema(field, visited, comments),
        }

    return _build_scalar_or_message_schema(field, visited, comments)


def build_enum_schema(enum: EnumDescriptor) -> SchemaNode:
    """String enum of value names; the zero value only when nothing else exists."""
    names = [value.name for value in enum.values if value.number != 0]
    if not names:
        names = [value.name for value in enum.values]
    return {"type": "string", "enum": names}


# === Dispatch =================================================================

def _is_map(field: FieldDescriptor) -> bool:
    return (
        field.type == FieldDescriptor.TYPE_MESSAGE
        and field.message_type.GetOptions().map_entry
    )


def _build_scalar_or_message_schema(
    field: FieldDescriptor,
    visited: set[str],
    comments: Mapping[str, str] | None,
) -> SchemaNode:
    scalar = _SCALAR_SCHEMAS.get(field.type)
    if scalar is not None:
        return dict(scalar)
    if field.type == FieldDescriptor.TYPE_ENUM:
        return build_enum_schema(field.enum_type)
    if field.type in _MESSAGE_TYPES:
        return _build_nested_message_schema(field.message_type, visited, comments)

    logger.warning(
        f"Unrecognized kind {field.type} on {field.full_name}; accepting any value",
        extra={"field_name": field.full_name},
    )
    return {}


def _build_nested_message_schema(
    message: Descriptor,
    visited: set[str],
    comments: Mapping[str, str] | None,
) -> SchemaNode:
    known = well_known_schema(message.full_name)
    if known is not None:
        return known

    if message.full_name in visited:
        logger.debug(f"Recursive reference to {message.full_name}; using open object")
        return {"type": "object", "additionalProperties": True}

    visited.add(message.full_name)
    try:
        return build_message_schema(message, visited, comments)
    finally:
        visited.discard(message.full_name)

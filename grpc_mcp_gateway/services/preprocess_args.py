"""Argument Preprocessors — normalize caller-supplied values before strict decode.

Invariants:
    - Input mappings are never mutated; a new mapping is returned
    - Only strings on enum-typed fields are rewritten, and only on a match;
      anything else passes through for the strict decoder to judge
    - Recurses into nested messages, lists and map values; well-known types are left alone

Design Decisions:
    - Matching is case-insensitive, treats "-" and " " as "_", and accepts the
      value name without its enum prefix ("active" -> STATUS_ACTIVE)
"""

from typing import Any

from google.protobuf.descriptor import Descriptor, EnumDescriptor, FieldDescriptor

from grpc_mcp_gateway.core.naming import enum_value_prefix
from grpc_mcp_gateway.core.well_known_types import is_well_known


def normalize_enum_labels(args: dict[str, Any], descriptor: Descriptor) -> dict[str, Any]:
    """Rewrite human-readable enum labels in args to canonical enum value names."""
    return _normalize_message(args, descriptor)


def _normalize_message(value: Any, descriptor: Descriptor) -> Any:
    if not isinstance(value, dict):
        return value
    fields = _fields_by_key(descriptor)
    normalized = {}
    for key, item in value.items():
        field = fields.get(key)
        normalized[key] = item if field is None else _normalize_field(item, field)
    return normalized


def _fields_by_key(descriptor: Descriptor) -> dict[str, FieldDescriptor]:
    """json_format accepts both the JSON name and the declared name."""
    fields = {}
    for field in descriptor.fields:
        fields[field.name] = field
        fields[field.json_name] = field
    return fields


def _normalize_field(value: Any, field: FieldDescriptor) -> Any:
    if field.type == FieldDescriptor.TYPE_MESSAGE and field.message_type.GetOptions().map_entry:
        if not isinstance(value, dict):
            return value
        value_field = field.message_type.fields_by_name["value"]
        return {k: _normalize_single(v, value_field) for k, v in value.items()}

    if field.is_repeated:
        if not isinstance(value, list):
            return value
        return [_normalize_single(item, field) for item in value]

    return _normalize_single(value, field)


def _normalize_single(value: Any, field: FieldDescriptor) -> Any:
    if field.type == FieldDescriptor.TYPE_ENUM:
        return _canonical_enum_name(value, field.enum_type)
    if field.type == FieldDescriptor.TYPE_MESSAGE and not is_well_known(field.message_type.full_name):
        return _normalize_message(value, field.message_type)
    return value


def _canonical_enum_name(value: Any, enum: EnumDescriptor) -> Any:
    if not isinstance(value, str):
        return value
    wanted = value.strip().upper().replace("-", "_").replace(" ", "_")
    prefix = enum_value_prefix(enum.name)
    for candidate in enum.values:
        name = candidate.name.upper()
        if wanted == name:
            return candidate.name
        if name.startswith(prefix) and wanted == name[len(prefix):]:
            return candidate.name
    return value

"""Well-Known Types — fixed JSON schemas for google.protobuf well-known messages.

Invariants:
    - Keyed by fully-qualified message name; the table is closed
    - Schemas mirror the proto3 JSON mapping, never the message's internal fields
    - well_known_schema() returns a fresh copy: callers may mutate it

Design Decisions:
    - Static dict over per-type classes: the set is fixed by protobuf itself
"""

import copy

from grpc_mcp_gateway.core.domain_types import SchemaNode


_INT32 = {"type": "integer", "format": "int32"}
_INT64 = {"type": "integer", "format": "int64"}

WELL_KNOWN_SCHEMAS: dict[str, SchemaNode] = {
    "google.protobuf.Timestamp": {"type": "string", "format": "date-time"},
    "google.protobuf.Duration": {"type": "string"},
    "google.protobuf.Struct": {"type": "object", "additionalProperties": True},
    "google.protobuf.Value": {},
    "google.protobuf.ListValue": {"type": "array"},
    "google.protobuf.Empty": {
        "type": "object", "properties": {}, "additionalProperties": False,
    },
    # Scalar wrappers unwrap to their scalar schema
    "google.protobuf.StringValue": {"type": "string"},
    "google.protobuf.BoolValue": {"type": "boolean"},
    "google.protobuf.Int32Value": _INT32,
    "google.protobuf.Int64Value": _INT64,
    "google.protobuf.UInt32Value": _INT32,
    "google.protobuf.UInt64Value": _INT64,
    "google.protobuf.FloatValue": {"type": "number", "format": "float"},
    "google.protobuf.DoubleValue": {"type": "number", "format": "double"},
    "google.protobuf.BytesValue": {"type": "string", "format": "byte"},
}


def is_well_known(full_name: str) -> bool:
    return full_name in WELL_KNOWN_SCHEMAS


def well_known_schema(full_name: str) -> SchemaNode | None:
    """Schema for a well-known message, or None if full_name is not one."""
    schema = WELL_KNOWN_SCHEMAS.get(full_name)
    if schema is None:
        return None
    return copy.deepcopy(schema)

"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - FieldBehavior values match google.api.FieldBehavior numbering
    - WireType values match the protobuf wire format (tag & 0x7)
    - All valid output formats encoded as an Enum — no raw string matching

Design Decisions:
    - NewType/aliases over wrapper classes: schemas stay plain JSON-ready dicts
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum, IntEnum
from typing import Any, NewType


# ─── Value Types ─────────────────────────────────────────────────

SchemaNode = dict[str, Any]                  # JSON-Schema-shaped mapping
ToolName = NewType("ToolName", str)          # "<service>.<method>", snake case


# ─── Enums ───────────────────────────────────────────────────────

class FieldBehavior(IntEnum):
    """google.api.field_behavior values this gateway acts on."""
    REQUIRED = 2
    OUTPUT_ONLY = 3


class WireType(IntEnum):
    """Protobuf wire types. Groups (3, 4) are not walked."""
    VARINT = 0
    FIXED64 = 1
    LENGTH_DELIMITED = 2
    START_GROUP = 3
    END_GROUP = 4
    FIXED32 = 5


class OutputFormat(str, Enum):
    """Shape of the file the protoc plugin writes per proto file."""
    PYTHON = "python"
    JSON = "json"

"""Field Behavior Extraction — recover google.api.field_behavior from raw options bytes.

Invariants:
    - extract_field_behaviors never raises: malformed input truncates the walk
    - Values recovered before a malformed region are always kept
    - Only varint payloads under the wanted field number are collected;
      every other payload is skipped by its own length rule
    - Works whether or not google/api/field_behavior.proto was loaded:
      a recognized extension serializes to the same bytes as an unknown field

Design Decisions:
    - Minimal wire walker instead of registering the extension: the plugin
      must not depend on googleapis protos being importable
    - _read_varint returns None on truncation rather than raising, so the
      walker has a single explicit exit for partial results
"""

import logging
import struct

from google.protobuf.descriptor import FieldDescriptor

from grpc_mcp_gateway.core.domain_types import FieldBehavior, WireType

logger = logging.getLogger(__name__)

FIELD_BEHAVIOR_FIELD_NUMBER: int = 1052

_MAX_FIELD_NUMBER = (1 << 29) - 1
_MAX_VARINT_BYTES = 10


def _read_varint(data: bytes, pos: int) -> tuple[int, int] | None:
    """Read a base-128 varint at pos. Returns (value, new_pos) or None if malformed."""
    result = 0
    shift = 0
    for i in range(_MAX_VARINT_BYTES):
        if pos + i >= len(data):
            return None
        byte = data[pos + i]
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return result & 0xFFFFFFFFFFFFFFFF, pos + i + 1
        shift += 7
    return None


def _skip_payload(data: bytes, pos: int, wire_type: int) -> int | None:
    """Advance past a non-varint payload. Returns new position or None if malformed."""
    if wire_type == WireType.FIXED32:
        end = pos + struct.calcsize("<I")
    elif wire_type == WireType.FIXED64:
        end = pos + struct.calcsize("<Q")
    elif wire_type == WireType.LENGTH_DELIMITED:
        header = _read_varint(data, pos)
        if header is None:
            return None
        length, pos = header
        end = pos + length
    elif wire_type in (WireType.START_GROUP, WireType.END_GROUP):
        logger.debug(f"Group wire type {wire_type} at byte {pos}; not walked")
        return None
    else:
        return None
    if end > len(data):
        return None
    return end


def extract_field_behaviors(
    raw: bytes, field_number: int = FIELD_BEHAVIOR_FIELD_NUMBER,
) -> list[int]:
    """Collect varint values tagged with field_number from a serialized message.

    Stops at the first unreadable tag or payload and returns what it has.
    """
    behaviors: list[int] = []
    pos = 0
    while pos < len(raw):
        tag = _read_varint(raw, pos)
        if tag is None:
            break
        key, pos = tag
        number, wire_type = key >> 3, key & 0x7
        if not 1 <= number <= _MAX_FIELD_NUMBER:
            break

        if wire_type == WireType.VARINT:
            payload = _read_varint(raw, pos)
            if payload is None:
                break
            value, pos = payload
            if number == field_number:
                behaviors.append(value)
            continue

        next_pos = _skip_payload(raw, pos, wire_type)
        if next_pos is None:
            break
        pos = next_pos

    if pos < len(raw):
        logger.debug(
            f"Annotation region truncated at byte {pos}/{len(raw)}; "
            f"kept {len(behaviors)} value(s)",
        )
    return behaviors


def field_behaviors(field: FieldDescriptor) -> list[int]:
    """Field behaviors declared on a field descriptor's options."""
    if not field.has_options:
        return []
    return extract_field_behaviors(field.GetOptions().SerializeToString())


def is_required(field: FieldDescriptor) -> bool:
    return FieldBehavior.REQUIRED in field_behaviors(field)


def is_output_only(field: FieldDescriptor) -> bool:
    return FieldBehavior.OUTPUT_ONLY in field_behaviors(field)

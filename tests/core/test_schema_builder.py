"""Schema Builder — tests for descriptor → JSON Schema translation.

Tests cover:
    - Scalar kind table, repeated fields, map fields
    - Enum zero-value exclusion and the all-zero fallback
    - Well-known types never expanded
    - OUTPUT_ONLY excluded, REQUIRED listed, required omitted when empty
    - Recursive and mutually recursive messages terminate with an open object
    - Sibling branches re-expand the same message; visited restored afterwards
    - Descriptions from leading comments, normalized
"""

from types import SimpleNamespace

from google.protobuf.descriptor import FieldDescriptor

from grpc_mcp_gateway.core.schema_builder import (
    build_enum_schema,
    build_field_schema,
    build_message_schema,
)
from grpc_mcp_gateway.core.well_known_types import WELL_KNOWN_SCHEMAS
from tests.proto_fixtures import COMMENTS, message

OPEN_OBJECT = {"type": "object", "additionalProperties": True}


def _everything_properties() -> dict:
    return build_message_schema(message("Everything"))["properties"]


def _field_schema(message_name: str, field_name: str) -> dict:
    field = message(message_name).fields_by_name[field_name]
    return build_field_schema(field, set())


# ─── message shape ───────────────────────────────────────────────

def test_single_string_field_message():
    assert build_message_schema(message("HelloRequest")) == {
        "type": "object",
        "properties": {"name": {"type": "string"}},
        "additionalProperties": False,
    }


def test_properties_keyed_by_json_name_in_declaration_order():
    keys = list(_everything_properties())
    assert keys[:4] == ["flag", "title", "blob", "count"]
    assert "bigUnsigned" in keys
    assert "createdAt" in keys
    assert "big_unsigned" not in keys


def test_output_only_field_excluded():
    props = _everything_properties()
    assert "id" not in props
    item = build_message_schema(message("Item"))
    assert "updateTime" not in item["properties"]


def test_required_fields_listed():
    schema = build_message_schema(message("Everything"))
    assert schema["required"] == ["displayName", "pageSize"]
    assert all(name in schema["properties"] for name in schema["required"])


def test_required_omitted_when_empty():
    assert "required" not in build_message_schema(message("HelloReply"))


# ─── scalar dispatch ─────────────────────────────────────────────

def test_scalar_kinds():
    props = _everything_properties()
    assert props["flag"] == {"type": "boolean"}
    assert props["title"] == {"type": "string"}
    assert props["blob"] == {"type": "string", "format": "byte"}
    for name in ("count", "small", "tiny", "fixed"):
        assert props[name] == {"type": "integer", "format": "int32"}, name
    for name in ("total", "bigUnsigned"):
        assert props[name] == {"type": "integer", "format": "int64"}, name
    assert props["ratio"] == {"type": "number", "format": "float"}
    assert props["score"] == {"type": "number", "format": "double"}


def test_repeated_scalar():
    assert _field_schema("Everything", "tags") == {
        "type": "array", "items": {"type": "string"},
    }


def test_map_of_strings():
    assert _field_schema("Everything", "labels") == {
        "type": "object", "additionalProperties": {"type": "string"},
    }


def test_map_of_messages_expands_value_message():
    schema = _field_schema("Everything", "nodes")
    assert schema["type"] == "object"
    assert schema["additionalProperties"]["properties"]["label"] == {"type": "string"}


def test_map_of_enums():
    assert _field_schema("Item", "by_region") == {
        "type": "object",
        "additionalProperties": {
            "type": "string", "enum": ["STATUS_ACTIVE", "STATUS_ARCHIVED"],
        },
    }


def test_unrecognized_kind_accepts_anything():
    field = SimpleNamespace(
        type=99, is_repeated=False, full_name="gateway.test.X.y",
    )
    assert build_field_schema(field, set()) == {}


def test_repeated_detected_without_label_attribute():
    field = SimpleNamespace(
        type=FieldDescriptor.TYPE_STRING, is_repeated=True, full_name="gateway.test.X.tags",
    )
    assert build_field_schema(field, set()) == {"type": "array", "items": {"type": "string"}}


# ─── enums ───────────────────────────────────────────────────────

def test_enum_excludes_zero_value():
    assert _everything_properties()["status"] == {
        "type": "string", "enum": ["STATUS_ACTIVE", "STATUS_ARCHIVED"],
    }


def test_enum_with_only_zero_value_keeps_it():
    assert build_enum_schema(message("Everything").fields_by_name["only_zero"].enum_type) == {
        "type": "string", "enum": ["ONLY_ZERO_UNSPECIFIED"],
    }


def test_repeated_enum():
    assert _field_schema("Item", "history") == {
        "type": "array",
        "items": {"type": "string", "enum": ["STATUS_ACTIVE", "STATUS_ARCHIVED"]},
    }


# ─── well-known types ────────────────────────────────────────────

def test_timestamp_is_date_time_string():
    assert _everything_properties()["createdAt"] == {"type": "string", "format": "date-time"}


def test_well_known_types_not_expanded():
    props = _everything_properties()
    assert props["ttl"] == {"type": "string"}
    assert props["attrs"] == {"type": "object", "additionalProperties": True}
    assert props["anyValue"] == {}
    assert props["items"] == {"type": "array"}
    assert props["nothing"] == {
        "type": "object", "properties": {}, "additionalProperties": False,
    }


def test_scalar_wrappers_unwrap():
    props = _everything_properties()
    assert props["nickname"] == {"type": "string"}
    assert props["big"] == {"type": "integer", "format": "int64"}
    assert props["raw"] == {"type": "string", "format": "byte"}


def test_returned_well_known_schema_is_a_copy():
    props = _everything_properties()
    props["createdAt"]["description"] = "mutated"
    assert "description" not in WELL_KNOWN_SCHEMAS["google.protobuf.Timestamp"]


# ─── recursion ───────────────────────────────────────────────────

def test_self_reference_terminates_with_open_object():
    schema = build_message_schema(message("Node"))
    child = schema["properties"]["child"]
    assert child["properties"]["label"] == {"type": "string"}
    assert child["properties"]["child"] == OPEN_OBJECT
    assert child["properties"]["children"] == {"type": "array", "items": OPEN_OBJECT}


def test_sibling_fields_expand_independently():
    schema = build_message_schema(message("Node"))
    child = schema["properties"]["child"]
    assert schema["properties"]["children"]["items"] == child


def test_mutual_recursion_terminates():
    schema = build_message_schema(message("Ping"))
    pong = schema["properties"]["pong"]
    ping = pong["properties"]["ping"]
    assert ping["properties"]["pong"] == OPEN_OBJECT


def test_same_message_in_sibling_branches_fully_expanded():
    props = build_message_schema(message("Pair"))["properties"]
    assert props["left"] == props["right"]
    for side in ("left", "right"):
        node = props[side]
        assert node["additionalProperties"] is False
        assert node["properties"]["label"] == {"type": "string"}
        assert node["properties"]["child"] == OPEN_OBJECT


def test_visited_restored_after_build():
    visited = set()
    build_message_schema(message("Node"), visited)
    assert visited == set()


def test_visited_entries_from_caller_preserved():
    visited = {"gateway.test.Node"}
    schema = build_message_schema(message("Pair"), visited)
    assert visited == {"gateway.test.Node"}
    assert schema["properties"]["left"] == OPEN_OBJECT


# ─── descriptions ────────────────────────────────────────────────

def test_leading_comment_becomes_description():
    schema = build_message_schema(message("HelloRequest"), comments=COMMENTS)
    assert schema["properties"]["name"]["description"] == "The caller's name."


def test_multiline_comment_normalized():
    props = build_message_schema(message("Everything"), comments=COMMENTS)["properties"]
    assert props["title"]["description"] == "Display title. Shown in lists."


def test_trailing_comment_ignored():
    props = build_message_schema(message("Everything"), comments=COMMENTS)["properties"]
    assert "description" not in props["flag"]


def test_no_descriptions_without_comments():
    props = _everything_properties()
    assert all("description" not in schema for schema in props.values())

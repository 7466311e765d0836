"""Value Transcoder — tests for JSON arguments ⇄ protobuf messages.

Tests cover:
    - decode/encode of a single string field round-trips
    - void input (no message type) and absent arguments
    - Strict decode: type mismatches and unknown keys raise ArgumentDecodeError
    - Preprocessor runs on a copy, receives the target descriptor
    - encode omits unpopulated fields and uses JSON names
    - Null document normalized to {}; non-object documents and invalid values raise
"""

import pytest
from google.protobuf import duration_pb2, struct_pb2, timestamp_pb2

from grpc_mcp_gateway.core.errors import ArgumentDecodeError, ResultEncodeError
from grpc_mcp_gateway.services.transcoder import Transcoder, decode_args, encode_result
from tests.proto_fixtures import message_class


# ─── decode ──────────────────────────────────────────────────────

def test_decode_single_string_field():
    request = decode_args({"name": "Ada"}, message_class("HelloRequest"))
    assert request.name == "Ada"


def test_decode_then_encode_round_trip():
    request = decode_args({"name": "Ada"}, message_class("HelloRequest"))
    assert encode_result(request) == {"name": "Ada"}


def test_decode_without_message_type_is_noop():
    assert decode_args({"anything": 1}, None) is None


def test_decode_none_args_as_empty():
    request = decode_args(None, message_class("HelloRequest"))
    assert request.name == ""


def test_decode_accepts_declared_field_name():
    request = decode_args({"display_name": "D"}, message_class("Everything"))
    assert request.display_name == "D"


def test_decode_type_mismatch_raises():
    with pytest.raises(ArgumentDecodeError) as exc_info:
        decode_args({"count": "not a number"}, message_class("Everything"))
    assert exc_info.value.code == "DECODE_ERROR"
    assert exc_info.value.context.message_type == "gateway.test.Everything"


def test_decode_list_for_scalar_raises():
    with pytest.raises(ArgumentDecodeError):
        decode_args({"flag": [True]}, message_class("Everything"))


def test_decode_unknown_key_raises():
    with pytest.raises(ArgumentDecodeError):
        decode_args({"name": "Ada", "extra": 1}, message_class("HelloRequest"))


def test_decode_unknown_enum_label_raises():
    with pytest.raises(ArgumentDecodeError):
        decode_args({"status": "active"}, message_class("Everything"))


def test_decode_error_result_envelope():
    with pytest.raises(ArgumentDecodeError) as exc_info:
        decode_args({"count": "x"}, message_class("Everything"))
    result = exc_info.value.to_tool_result()
    assert result["status"] == "error"
    assert result["error_code"] == "DECODE_ERROR"
    assert result["category"] == "validation"
    assert result["message_type"] == "gateway.test.Everything"


# ─── preprocessor ────────────────────────────────────────────────

def test_preprocessor_rewrites_before_decode():
    seen = []

    def upper_name(args, descriptor):
        seen.append(descriptor.full_name)
        args["name"] = args["name"].upper()
        return args

    original = {"name": "ada"}
    request = Transcoder(upper_name).decode_args(original, message_class("HelloRequest"))
    assert request.name == "ADA"
    assert original == {"name": "ada"}
    assert seen == ["gateway.test.HelloRequest"]


def test_preprocessor_not_called_for_void_input():
    def fail(args, descriptor):
        raise AssertionError("should not run")

    assert Transcoder(fail).decode_args({}, None) is None


def test_preprocessor_sees_empty_mapping_for_none_args():
    received = []

    def record(args, descriptor):
        received.append(args)
        return args

    Transcoder(record).decode_args(None, message_class("HelloRequest"))
    assert received == [{}]


# ─── encode ──────────────────────────────────────────────────────

def test_encode_none_is_empty_mapping():
    assert encode_result(None) == {}


def test_encode_omits_unpopulated_fields():
    reply = message_class("Everything")(title="only this")
    assert encode_result(reply) == {"title": "only this"}


def test_encode_uses_json_names():
    reply = message_class("Everything")(display_name="D", page_size=10)
    assert encode_result(reply) == {"displayName": "D", "pageSize": 10}


def test_encode_int64_as_string():
    reply = message_class("Everything")(total=7)
    assert encode_result(reply) == {"total": "7"}


def test_int64_string_result_decodes_back():
    cls = message_class("Everything")
    assert decode_args(encode_result(cls(total=7)), cls).total == 7
    assert decode_args({"total": 7}, cls).total == 7


def test_round_trip_preserves_populated_fields():
    args = {
        "flag": True,
        "title": "T",
        "count": 3,
        "tags": ["a", "b"],
        "labels": {"k": "v"},
        "status": "STATUS_ACTIVE",
        "createdAt": "2024-01-02T03:04:05Z",
        "nickname": "nick",
        "attrs": {"nested": {"x": 1.5}},
    }
    assert encode_result(decode_args(args, message_class("Everything"))) == args


def test_null_document_becomes_empty_mapping():
    assert encode_result(struct_pb2.Value(null_value=struct_pb2.NULL_VALUE)) == {}


def test_non_object_document_raises():
    with pytest.raises(ResultEncodeError) as exc_info:
        encode_result(timestamp_pb2.Timestamp(seconds=1))
    assert exc_info.value.code == "ENCODE_ERROR"
    assert exc_info.value.context.message_type == "google.protobuf.Timestamp"


def test_invalid_value_raises_encode_error():
    reply = message_class("Everything")(ttl=duration_pb2.Duration(seconds=10**12))
    with pytest.raises(ResultEncodeError):
        encode_result(reply)


def test_transcoder_exposes_preprocessor():
    assert Transcoder().preprocessor is None

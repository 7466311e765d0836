"""Value Transcoder — tool-call JSON arguments ⇄ protobuf messages.

Invariants:
    - decode_args(args, None) is a no-op success returning None (void input)
    - args=None is treated as {}
    - The preprocessor (if any) runs before the strict decode, on a copy
    - Decode is strict: unknown keys and type mismatches raise ArgumentDecodeError
    - encode_result(None) == {}; output keys use json_name (lowerCamelCase);
      unpopulated fields are omitted; a null document becomes {}
    - A Transcoder is immutable after construction: safe to share across calls

Design Decisions:
    - json_format (proto3 JSON mapping) does the structural work: the same
      mapping the generated schemas describe (Timestamp as RFC 3339, bytes
      as base64, maps as objects)
    - Preprocessor passed to the constructor, not set on a module global
"""

import copy
import logging
from collections.abc import Callable
from typing import Any

from google.protobuf import json_format
from google.protobuf.descriptor import Descriptor
from google.protobuf.message import Message

from grpc_mcp_gateway.core.errors import ArgumentDecodeError, ResultEncodeError

logger = logging.getLogger(__name__)

ArgPreprocessor = Callable[[dict[str, Any], Descriptor], dict[str, Any]]


class Transcoder:
    """Converts tool arguments to request messages and responses back to JSON."""

    def __init__(self, preprocessor: ArgPreprocessor | None = None):
        self._preprocessor = preprocessor

    @property
    def preprocessor(self) -> ArgPreprocessor | None:
        return self._preprocessor

    def decode_args(
        self, args: dict[str, Any] | None, message_type: type[Message] | None,
    ) -> Message | None:
        """Build a message_type instance from tool arguments."""
        if message_type is None:
            return None
        if args is None:
            args = {}

        descriptor = message_type.DESCRIPTOR
        if self._preprocessor is not None:
            args = self._preprocessor(copy.deepcopy(args), descriptor)

        message = message_type()
        try:
            json_format.ParseDict(args, message, ignore_unknown_fields=False)
        except (json_format.ParseError, TypeError, ValueError) as e:
            logger.warning(
                f"Argument decode failed for {descriptor.full_name}: {e}",
                extra={"message_type": descriptor.full_name, "error_code": "DECODE_ERROR"},
            )
            raise ArgumentDecodeError(str(e), descriptor.full_name) from e
        return message

    def encode_result(self, message: Message | None) -> dict[str, Any]:
        """JSON mapping of a response message, populated fields only.

        64-bit integer fields come back as decimal strings ({"total": "7"}),
        per the proto3 JSON mapping, even though their schema says
        integer/int64. decode_args accepts either form, so a result fed back
        as arguments still decodes to the same message.
        """
        if message is None:
            return {}

        full_name = message.DESCRIPTOR.full_name
        try:
            document = json_format.MessageToDict(
                message, preserving_proto_field_name=False,
            )
        except (json_format.SerializeToJsonError, TypeError, ValueError) as e:
            raise ResultEncodeError(str(e), full_name) from e

        if document is None:
            return {}
        if not isinstance(document, dict):
            raise ResultEncodeError(
                f"top-level JSON is {type(document).__name__}, not an object",
                full_name,
            )
        return document


_default_transcoder = Transcoder()


def decode_args(
    args: dict[str, Any] | None, message_type: type[Message] | None,
) -> Message | None:
    """decode_args on a transcoder without preprocessing."""
    return _default_transcoder.decode_args(args, message_type)


def encode_result(message: Message | None) -> dict[str, Any]:
    """encode_result on a transcoder without preprocessing."""
    return _default_transcoder.encode_result(message)

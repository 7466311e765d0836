"""Tool Dispatch — explicit routing from tool_name to an RPC handler.

Invariants:
    - Every tool->handler mapping is registered explicitly — no getattr on stubs
    - Unknown tools return UNKNOWN_TOOL error (never raises)
    - Known tools without a handler return NOT_IMPLEMENTED error (never raises)
    - Decode/encode failures become the error's tool result, local to that call
    - Handler exceptions propagate: they belong to the RPC layer

Design Decisions:
    - Handler is any callable taking the request message: a grpc stub method,
      an aio stub method, or an in-process servicer function
    - Request classes resolved once at construction from the service
      descriptor via message_factory
"""

import inspect
import logging
from collections.abc import Callable, Mapping
from typing import Any

from google.protobuf import message_factory
from google.protobuf.descriptor import MethodDescriptor, ServiceDescriptor

from grpc_mcp_gateway.core.errors import GatewayError
from grpc_mcp_gateway.services.tool_definitions import (
    build_tool_definition, is_unary, tool_name,
)
from grpc_mcp_gateway.services.transcoder import Transcoder

logger = logging.getLogger(__name__)

RpcHandler = Callable[[Any], Any]


class ToolDispatch:
    """Routes tool_name -> RPC handler. Explicit registration, no auto-discovery."""

    def __init__(
        self,
        service: ServiceDescriptor,
        transcoder: Transcoder | None = None,
        comments: Mapping[str, str] | None = None,
    ):
        self._service = service
        self._transcoder = transcoder or Transcoder()
        self._comments = comments
        self._methods: dict[str, MethodDescriptor] = {
            tool_name(service, method): method
            for method in service.methods
            if is_unary(method)
        }
        self._request_types = {
            name: message_factory.GetMessageClass(method.input_type)
            for name, method in self._methods.items()
        }
        self._handlers: dict[str, RpcHandler] = {}

    def register(self, method_name: str, handler: RpcHandler) -> None:
        """Bind a handler to a method by its proto name (e.g. "SayHello")."""
        method = self._service.methods_by_name.get(method_name)
        if method is None or not is_unary(method):
            raise KeyError(
                f"{self._service.full_name} has no unary method '{method_name}'",
            )
        self._handlers[tool_name(self._service, method)] = handler

    def tool_definitions(self) -> list[dict]:
        return [
            build_tool_definition(method, self._comments)
            for method in self._methods.values()
        ]

    async def execute(self, tool_name: str, arguments: dict | None) -> dict:
        """Decode arguments, call the handler, encode its response."""
        if tool_name not in self._methods:
            return {
                "status": "error",
                "error_code": "UNKNOWN_TOOL",
                "message": f"Tool '{tool_name}' does not exist.",
            }
        handler = self._handlers.get(tool_name)
        if handler is None:
            return {
                "status": "error",
                "error_code": "NOT_IMPLEMENTED",
                "message": f"Tool '{tool_name}' has no registered handler.",
            }

        try:
            request = self._transcoder.decode_args(
                arguments, self._request_types[tool_name],
            )
        except GatewayError as e:
            return self._error_result(tool_name, e)

        response = handler(request)
        if inspect.isawaitable(response):
            response = await response

        try:
            result = self._transcoder.encode_result(response)
        except GatewayError as e:
            return self._error_result(tool_name, e)

        logger.debug(f"Tool call '{tool_name}' ok", extra={"tool_name": tool_name})
        return {"status": "ok", "result": result}

    def _error_result(self, tool_name: str, error: GatewayError) -> dict:
        error.context.tool_name = tool_name
        logger.warning(f"Tool call failed: {error.message}", extra=error.to_log_extra())
        return error.to_tool_result()

"""Tool Definitions — one tool per unary RPC method, in tool-use dict format.

Invariants:
    - Tool name is "<snake service>.<snake method>" (Greeter.SayHello -> greeter.say_hello)
    - input_schema is always an object schema with additionalProperties: false
    - Each tool is built with its own visited set: no schema sharing between tools
    - Streaming methods are skipped: a tool call is one request, one response

Design Decisions:
    - Plain dicts (name / description / input_schema) like hand-written tool
      lists, plus rpc_method / input_type / output_type for dispatch wiring
"""

import logging
from collections.abc import Mapping

from google.protobuf.descriptor import MethodDescriptor, ServiceDescriptor

from grpc_mcp_gateway.core.domain_types import ToolName
from grpc_mcp_gateway.core.naming import to_snake_case
from grpc_mcp_gateway.core.schema_builder import build_message_schema
from grpc_mcp_gateway.core.source_comments import normalize_comment

logger = logging.getLogger(__name__)


def tool_name(service: ServiceDescriptor, method: MethodDescriptor) -> ToolName:
    return ToolName(f"{to_snake_case(service.name)}.{to_snake_case(method.name)}")


def is_unary(method: MethodDescriptor) -> bool:
    return not (method.client_streaming or method.server_streaming)


def build_tool_definition(
    method: MethodDescriptor, comments: Mapping[str, str] | None = None,
) -> dict:
    """Tool definition for one RPC method."""
    service = method.containing_service
    description = normalize_comment(comments.get(method.full_name, "")) if comments else ""
    if not description:
        description = f"Calls {service.full_name}.{method.name}."

    return {
        "name": tool_name(service, method),
        "description": description,
        "input_schema": build_message_schema(method.input_type, set(), comments),
        "rpc_method": f"/{service.full_name}/{method.name}",
        "input_type": method.input_type.full_name,
        "output_type": method.output_type.full_name,
    }


def build_service_tools(
    service: ServiceDescriptor, comments: Mapping[str, str] | None = None,
) -> list[dict]:
    """Tool definitions for every unary method of a service, in declaration order."""
    tools = []
    for method in service.methods:
        if not is_unary(method):
            logger.info(
                f"Skipping streaming method {method.full_name}",
                extra={"tool_name": tool_name(service, method)},
            )
            continue
        tools.append(build_tool_definition(method, comments))
    return tools

"""protoc-gen-mcp-gateway — protoc plugin entry point.

Invariants:
    - Reads one CodeGeneratorRequest from stdin, writes one CodeGeneratorResponse to stdout
    - One output file per file_to_generate that declares at least one service
    - GatewayError (bad parameters) is reported via response.error, never a traceback
    - Services are emitted in declaration order

Design Decisions:
    - Fresh DescriptorPool per request: the request carries every dependency,
      and descriptors must not leak into the process default pool
    - Comments indexed from request.proto_file: protoc strips source_code_info
      everywhere else
"""

import logging
import sys

from google.protobuf import descriptor_pool
from google.protobuf.compiler import plugin_pb2

from grpc_mcp_gateway.config import Settings, get_settings
from grpc_mcp_gateway.core.domain_types import OutputFormat
from grpc_mcp_gateway.core.errors import GatewayError, PluginParameterError
from grpc_mcp_gateway.core.source_comments import SourceComments
from grpc_mcp_gateway.infrastructure.observability import setup_logging
from grpc_mcp_gateway.services.emit_schema import render_tools_document, render_tools_module
from grpc_mcp_gateway.services.tool_definitions import build_service_tools

logger = logging.getLogger(__name__)


def parse_parameter(parameter: str, settings: Settings) -> tuple[OutputFormat, str]:
    """Parse "format=json,suffix=_tools" over the settings defaults."""
    output_format = settings.output_format
    suffix = settings.output_suffix
    for item in (p.strip() for p in parameter.split(",")):
        if not item:
            continue
        key, sep, value = item.partition("=")
        if not sep:
            raise PluginParameterError(item, "expected key=value")
        key = key.strip()
        if key == "format":
            try:
                output_format = OutputFormat(value.strip().lower())
            except ValueError:
                choices = ", ".join(f.value for f in OutputFormat)
                raise PluginParameterError(item, f"format must be one of: {choices}") from None
        elif key == "suffix":
            suffix = value.strip()
        else:
            raise PluginParameterError(item, f"unknown option '{key}'")
    return output_format, suffix


def generate(
    request: plugin_pb2.CodeGeneratorRequest, settings: Settings | None = None,
) -> plugin_pb2.CodeGeneratorResponse:
    """Build tool schema files for every requested proto file with services."""
    settings = settings or get_settings()
    response = plugin_pb2.CodeGeneratorResponse(
        supported_features=plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL,
    )
    try:
        output_format, suffix = parse_parameter(request.parameter, settings)
    except GatewayError as e:
        logger.error(e.message, extra=e.to_log_extra())
        response.error = e.message
        return response

    pool = descriptor_pool.DescriptorPool()
    for file_proto in request.proto_file:
        pool.AddSerializedFile(file_proto.SerializeToString())
    comments = SourceComments.from_file_protos(request.proto_file)
    file_protos = {f.name: f for f in request.proto_file}

    for file_name in request.file_to_generate:
        file_proto = file_protos[file_name]
        prefix = f"{file_proto.package}." if file_proto.package else ""
        tools_by_service = {}
        for service_proto in file_proto.service:
            service = pool.FindServiceByName(prefix + service_proto.name)
            tools_by_service[service.full_name] = build_service_tools(service, comments)
        if not tools_by_service:
            logger.debug(f"{file_name} declares no services; nothing to generate")
            continue

        output = response.file.add()
        base_name = file_name.removesuffix(".proto") + suffix
        if output_format == OutputFormat.JSON:
            output.name = base_name + ".json"
            output.content = render_tools_document(tools_by_service)
        else:
            output.name = base_name + ".py"
            output.content = render_tools_module(file_name, tools_by_service)
        logger.info(f"Generated {output.name} ({len(tools_by_service)} service(s))")

    return response


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    request = plugin_pb2.CodeGeneratorRequest.FromString(sys.stdin.buffer.read())
    response = generate(request, settings)
    sys.stdout.buffer.write(response.SerializeToString())


if __name__ == "__main__":
    main()

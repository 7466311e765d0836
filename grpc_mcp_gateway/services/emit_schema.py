"""Schema Emitter — deterministic Python-literal and JSON renderings of tool schemas.

Invariants:
    - Mapping keys are written in lexicographic order; list order is preserved
    - Same input, same output: generated files are stable across runs
    - Rendered literals evaluate back to the input (bool/None spelled as Python)
"""

import json
from typing import Any

from grpc_mcp_gateway.core.naming import to_snake_case

_INDENT = "    "
GENERATED_HEADER = "# Generated by protoc-gen-mcp-gateway. DO NOT EDIT."


def render_python_literal(value: Any, indent: int = 0) -> str:
    """Python source for value, keys sorted, one element per line."""
    pad = _INDENT * indent
    inner = _INDENT * (indent + 1)
    if isinstance(value, dict):
        if not value:
            return "{}"
        lines = [
            f"{inner}{json.dumps(key)}: {render_python_literal(value[key], indent + 1)},"
            for key in sorted(value)
        ]
        return "{\n" + "\n".join(lines) + f"\n{pad}}}"
    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        lines = [f"{inner}{render_python_literal(item, indent + 1)}," for item in value]
        return "[\n" + "\n".join(lines) + f"\n{pad}]"
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if value is None or isinstance(value, (bool, int, float)):
        return repr(value)
    raise TypeError(f"Cannot render {type(value).__name__} as a literal")


def render_json_document(value: Any) -> str:
    return json.dumps(value, sort_keys=True, indent=2, ensure_ascii=False) + "\n"


def tools_variable_name(service_full_name: str) -> str:
    """helloworld.Greeter -> GREETER_TOOLS."""
    short_name = service_full_name.rsplit(".", 1)[-1]
    return f"{to_snake_case(short_name).upper()}_TOOLS"


def render_tools_module(source_file: str, tools_by_service: dict[str, list[dict]]) -> str:
    """Generated Python module with one <SERVICE>_TOOLS list per service."""
    parts = [GENERATED_HEADER, f"# source: {source_file}", ""]
    for service_name in tools_by_service:
        literal = render_python_literal(tools_by_service[service_name])
        parts.append("")
        parts.append(f"{tools_variable_name(service_name)} = {literal}")
    return "\n".join(parts) + "\n"


def render_tools_document(tools_by_service: dict[str, list[dict]]) -> str:
    """JSON object keyed by service full name."""
    return render_json_document(tools_by_service)

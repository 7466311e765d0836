"""Error Hierarchy — typed, categorized exceptions for gateway failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Call-time errors (decode/encode) are local to one tool call
    - to_tool_result() produces the tool error envelope returned to callers
    - Schema generation never raises these: malformed annotations, unknown
      kinds and recursive messages degrade to permissive schemas instead

Design Decisions:
    - Single hierarchy with GatewayError base: dispatch and plugin catch one type
    - ErrorContext as dataclass: rich observability without coupling to logging
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    INTERNAL = "internal"
    CONFIGURATION = "configuration"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    tool_name: str | None = None
    message_type: str | None = None


class GatewayError(Exception):
    """Base exception for all gateway errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def to_tool_result(self) -> dict:
        """Convert to the tool-call error envelope."""
        result = {
            "status": "error",
            "error_code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
        }
        if self.context.tool_name:
            result["tool_name"] = self.context.tool_name
        if self.context.message_type:
            result["message_type"] = self.context.message_type
        return result

    def to_log_extra(self) -> dict:
        """Fields surfaced by the JSON log formatter."""
        return {
            "error_code": self.code,
            "tool_name": self.context.tool_name,
            "message_type": self.context.message_type,
        }


# ─── Call-time Errors ───────────────────────────────────────────

class ArgumentDecodeError(GatewayError):
    """Tool arguments do not match the request message shape."""
    def __init__(
        self, message: str, message_type: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.message_type = message_type
        super().__init__(
            f"Cannot decode arguments into {message_type}: {message}",
            "DECODE_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx,
        )


class ResultEncodeError(GatewayError):
    """RPC response could not be serialized to a JSON mapping."""
    def __init__(
        self, message: str, message_type: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.message_type = message_type
        super().__init__(
            f"Cannot encode {message_type} result: {message}",
            "ENCODE_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, ctx,
        )


# ─── Generation Errors ──────────────────────────────────────────

class PluginParameterError(GatewayError):
    """protoc plugin parameter string is malformed or names an unknown option."""
    def __init__(self, parameter: str, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid plugin parameter '{parameter}': {reason}",
            "INVALID_PARAMETER", ErrorCategory.CONFIGURATION,
            ErrorSeverity.ERROR, context,
        )
        self.parameter = parameter

"""Structured Logging — stderr log setup for the protoc plugin.

protoc reads the plugin's stdout as a serialized CodeGeneratorResponse, so a
single stray log line there corrupts the response. Every handler installed
here writes to stderr, which protoc relays to the user's terminal.

Invariants:
    - Log records never reach stdout
    - JSON records carry timestamp, level, logger, message, and any gateway
      extras (tool_name, message_type, error_code, field_name) that were set
    - setup_logging is idempotent: a second call replaces the gateway handler

Design Decisions:
    - JSONFormatter on stdlib logging, no extra dependency
    - Default level WARNING: a clean protoc run prints nothing
"""

import logging
import json
import sys
from datetime import datetime, timezone
from typing import TextIO

GATEWAY_EXTRA_KEYS = ("tool_name", "message_type", "error_code", "field_name")

_HANDLER_NAME = "grpc_mcp_gateway"


class JSONFormatter(logging.Formatter):
    """One JSON object per record, gateway extras included when present."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in GATEWAY_EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "WARNING", fmt: str = "text", stream: TextIO | None = None):
    """Install the gateway's root handler on stderr (or stream, for tests)."""
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "protoc-gen-mcp-gateway: %(levelname)s %(name)s: %(message)s",
        ))

    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.WARNING))

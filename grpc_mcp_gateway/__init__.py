"""gRPC → MCP Gateway — exposes protobuf RPC methods as JSON-Schema tools.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""

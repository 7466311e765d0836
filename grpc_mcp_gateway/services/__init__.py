"""Services Layer — call-time transcoding, tool definitions, emission, dispatch.

Invariants:
    - Tool dispatch uses explicit registration (no auto-discovery)
    - Every per-call failure is local to that call

Design Decisions:
    - One file per concern: transcoder, preprocessors, definitions, emitter, dispatch
"""

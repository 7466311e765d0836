"""Core Layer — pure descriptor → schema translation, no IO.

Invariants:
    - No module in core/ imports from services/, infrastructure/ or plugin
    - Functions never mutate the descriptors they are given
    - Nothing in core/ raises on malformed annotations, unknown kinds or cycles

Design Decisions:
    - Functional core separated from the imperative shell (plugin, dispatch)
"""

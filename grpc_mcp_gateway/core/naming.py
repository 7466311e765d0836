"""Naming — identifier case conversion for tool names and enum prefixes."""

import re

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")


def to_snake_case(name: str) -> str:
    """SayHello -> say_hello, GetHTTPStatus -> get_http_status."""
    name = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    name = _WORD_BOUNDARY.sub(r"\1_\2", name)
    return name.lower()


def enum_value_prefix(enum_name: str) -> str:
    """Conventional value prefix of an enum type: OrderStatus -> ORDER_STATUS_."""
    return to_snake_case(enum_name).upper() + "_"

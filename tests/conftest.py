"""Root conftest — shared test configuration."""

import os

import pytest

from grpc_mcp_gateway.config import get_settings

# Ensure tests don't pick up a developer's gateway settings
for _key in [k for k in os.environ if k.startswith("MCP_GATEWAY_")]:
    del os.environ[_key]


@pytest.fixture(autouse=True)
def fresh_settings():
    """get_settings() is lru_cached; every test starts from the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

"""
Basic tests for MCP Server

Tests for server setup: instance metadata, tool registration, lifespan.
"""

import pytest
from analytics.services.mcp_server.main import app_lifespan, mcp
from analytics.services.mcp_server.state import get_shared_state


@pytest.mark.asyncio
async def test_mcp_server_initialization():
    """Test MCP server initializes correctly."""
    assert mcp.name == "Time Registration Generator"
    assert mcp.version == "1.0.0"


def test_generation_tools_registered():
    """Tool module is imported by main, which registers it via @mcp.tool."""
    from analytics.services.mcp_server.tools import (
        clear_work_patterns,
        export_time_registrations,
        generate_time_registrations,
    )

    assert generate_time_registrations is not None
    assert export_time_registrations is not None
    assert clear_work_patterns is not None


@pytest.mark.asyncio
async def test_lifespan_clears_shared_state():
    state = get_shared_state()
    state.set("scratch", 1)

    async with app_lifespan(mcp):
        assert state.has("scratch")

    assert not state.has("scratch")

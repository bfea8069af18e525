"""Tests for the MCP server wiring."""

import logging

import pytest

from better_icons.server import SERVER_NAME, configure_logging, create_server
from better_icons.tools import IconTools


@pytest.fixture
def server(fake_client, memory_store):
    return create_server(IconTools(fake_client, memory_store))


class TestCreateServer:
    """Tests for create_server."""

    def test_name(self, server):
        """Test the server advertises its name."""
        assert server.name == SERVER_NAME

    @pytest.mark.asyncio
    async def test_tools_registered(self, server):
        """Test every icon tool is exposed."""
        names = {tool.name for tool in await server.list_tools()}
        assert names == {
            "search_icons",
            "get_icon",
            "get_icons",
            "list_collections",
            "recommend_icons",
            "find_similar_icons",
            "get_icon_preferences",
            "clear_icon_preferences",
            "get_recent_icons",
            "sync_icon",
        }

    @pytest.mark.asyncio
    async def test_argument_bounds(self, server):
        """Test limits are published in the input schemas."""
        tools = {tool.name: tool for tool in await server.list_tools()}

        icon_ids = tools["get_icons"].inputSchema["properties"]["icon_ids"]
        assert icon_ids["maxItems"] == 20
        assert icon_ids["minItems"] == 1

        limit = tools["recommend_icons"].inputSchema["properties"]["limit"]
        assert limit["maximum"] == 20
        assert tools["search_icons"].inputSchema["required"] == ["query"]


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_env_override(self, monkeypatch):
        """Test BETTER_ICONS_LOG_LEVEL wins over the argument."""
        monkeypatch.setenv("BETTER_ICONS_LOG_LEVEL", "debug")
        configure_logging("WARNING")
        assert logging.getLogger().level == logging.DEBUG

    def test_level_argument(self, monkeypatch):
        """Test the argument sets the root level."""
        monkeypatch.delenv("BETTER_ICONS_LOG_LEVEL", raising=False)
        configure_logging("ERROR")
        assert logging.getLogger().level == logging.ERROR

"""MCP stdio server exposing the icon tools."""

import logging
import os
import sys
from typing import Annotated, Literal, Optional

import structlog
from mcp.server.fastmcp import FastMCP
from pydantic import Field

from better_icons import __version__
from better_icons.iconify import IconifyClient
from better_icons.storage import StorageManager
from better_icons.tools import IconTools

SERVER_NAME = "better-icons"

INSTRUCTIONS = (
    "Search and retrieve SVG icons from 200+ icon libraries powered by Iconify. "
    "Use search_icons or recommend_icons to find icon IDs, then get_icon or get_icons "
    "to fetch SVG code. The server learns which collections you use most."
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

logger = structlog.get_logger()


def configure_logging(level: str = "INFO") -> None:
    """Configure structured logging on stderr.

    stdout carries the MCP protocol, so nothing may be logged there.
    """
    level = os.environ.get("BETTER_ICONS_LOG_LEVEL", level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        stream=sys.stderr,
        format="%(message)s",
        force=True,
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer() if sys.stderr.isatty()
            else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


def create_server(tools: IconTools) -> FastMCP:
    """Build the FastMCP server with every icon tool registered."""
    server = FastMCP(SERVER_NAME, instructions=INSTRUCTIONS)

    @server.tool(
        description=(
            "Search for icons across 200+ icon libraries powered by Iconify. "
            "Returns icon identifiers that can be used with get_icon."
        )
    )
    async def search_icons(
        query: Annotated[str, Field(description="Search query (e.g., 'arrow', 'home', 'user', 'check')")],
        limit: Annotated[int, Field(ge=1, le=999, description="Maximum number of results (1-999, default: 32)")] = 32,
        prefix: Annotated[Optional[str], Field(description="Filter by icon collection prefix (e.g., 'mdi', 'lucide', 'heroicons')")] = None,
        category: Annotated[Optional[str], Field(description="Filter by category (e.g., 'General', 'Emoji', 'Thematic')")] = None,
    ) -> str:
        return await tools.search_icons(query, limit=limit, prefix=prefix, category=category)

    @server.tool(
        description="Get the SVG code for a specific icon. Use the icon ID from search_icons results."
    )
    async def get_icon(
        icon_id: Annotated[str, Field(description="Icon identifier in format 'prefix:name' (e.g., 'mdi:home', 'lucide:arrow-right')")],
        color: Annotated[Optional[str], Field(description="Icon color (e.g., '#ff0000', 'currentColor')")] = None,
        size: Annotated[Optional[int], Field(gt=0, description="Icon size in pixels")] = None,
    ) -> str:
        return await tools.get_icon(icon_id, color=color, size=size)

    @server.tool(
        description=(
            "Get multiple icons at once. More efficient than calling get_icon multiple times. "
            "Returns all SVGs together."
        )
    )
    async def get_icons(
        icon_ids: Annotated[list[str], Field(min_length=1, max_length=20, description="Array of icon IDs in format 'prefix:name' (max 20)")],
        color: Annotated[Optional[str], Field(description="Icon color for all icons (e.g., '#ff0000', 'currentColor')")] = None,
        size: Annotated[Optional[int], Field(gt=0, description="Icon size in pixels for all icons")] = None,
    ) -> str:
        return await tools.get_icons(icon_ids, color=color, size=size)

    @server.tool(description="List available icon collections/libraries.")
    async def list_collections(
        category: Annotated[Optional[str], Field(description="Filter by category")] = None,
        search: Annotated[Optional[str], Field(description="Search collections by name")] = None,
    ) -> str:
        return await tools.list_collections(category=category, search=search)

    @server.tool(description="Get icon recommendations for a specific use case.")
    async def recommend_icons(
        use_case: Annotated[str, Field(description="Describe what you need (e.g., 'navigation menu', 'settings button')")],
        style: Annotated[Literal["solid", "outline", "any"], Field(description="Preferred style")] = "any",
        limit: Annotated[int, Field(ge=1, le=20, description="Number of recommendations")] = 10,
    ) -> str:
        return await tools.recommend_icons(use_case, style=style, limit=limit)

    @server.tool(
        description=(
            "Find similar icons or variations of a given icon. Useful for finding the same "
            "icon in different styles (solid, outline) or from different collections."
        )
    )
    async def find_similar_icons(
        icon_id: Annotated[str, Field(description="Icon identifier in format 'prefix:name' (e.g., 'lucide:home')")],
        limit: Annotated[int, Field(ge=1, le=50, description="Maximum number of similar icons to return")] = 10,
    ) -> str:
        return await tools.find_similar_icons(icon_id, limit=limit)

    @server.tool(
        description=(
            "View your learned icon collection preferences. The server automatically learns "
            "which icon collections you use most frequently."
        )
    )
    def get_icon_preferences() -> str:
        return tools.get_icon_preferences()

    @server.tool(
        description=(
            "Reset all learned icon preferences. Use this if you want to start fresh "
            "with a different icon style."
        )
    )
    def clear_icon_preferences() -> str:
        return tools.clear_icon_preferences()

    @server.tool(
        description=(
            "View your recently used icons. Useful for quickly reusing icons you've "
            "already retrieved."
        )
    )
    def get_recent_icons(
        limit: Annotated[int, Field(ge=1, le=50, description="Number of recent icons to show (default: 20)")] = 20,
    ) -> str:
        return tools.get_recent_icons(limit=limit)

    @server.tool(
        description=(
            "Add an icon as a component to your project's icons file. Creates the file "
            "if needed and skips icons that are already there."
        )
    )
    async def sync_icon(
        icon_id: Annotated[str, Field(description="Icon identifier in format 'prefix:name'")],
        file_path: Annotated[str, Field(description="Path to the icons file (e.g., 'src/components/icons.tsx')")],
        framework: Annotated[
            Literal["react", "vue", "svelte", "solid", "svg"],
            Field(description="Component format to generate"),
        ] = "svg",
        component_name: Annotated[Optional[str], Field(description="Custom component name (default: derived from icon name)")] = None,
        color: Annotated[Optional[str], Field(description="Icon color")] = None,
        size: Annotated[Optional[int], Field(gt=0, description="Icon size in pixels")] = None,
    ) -> str:
        return await tools.sync_icon(
            icon_id,
            file_path,
            framework=framework,
            component_name=component_name,
            color=color,
            size=size,
        )

    return server


def run_server(storage: Optional[StorageManager] = None) -> None:
    """Run the MCP server on stdio until the client disconnects."""
    storage = storage or StorageManager()
    config = storage.load_config()
    configure_logging(config.log_level)

    client = IconifyClient(base_url=config.api_url, timeout=config.request_timeout)
    server = create_server(IconTools(client, storage.preference_store()))

    logger.info("server_starting", name=SERVER_NAME, version=__version__, api=config.api_url)
    server.run(transport="stdio")

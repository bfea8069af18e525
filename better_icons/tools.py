"""Icon tools served over MCP.

Each tool returns markdown text for the calling agent. Failures that make
the whole call unusable raise ToolError so the client sees an error result;
batch calls report per-icon failures inline instead.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import structlog
from mcp.server.fastmcp.exceptions import ToolError

from better_icons.codegen import FORMATTERS, IconFramework, add_icon_to_file, import_statement
from better_icons.iconify import IconifyClient, IconifyError
from better_icons.icons import (
    InvalidIconIdError,
    icon_dimensions,
    parse_icon_id,
    render_svg,
)
from better_icons.preferences import PreferenceStore
from better_icons.ranking import IconStyle, rank_by_learned, rank_by_style

logger = structlog.get_logger()

POPULAR_COLLECTIONS = ["mdi", "lucide", "heroicons", "tabler", "ph", "ri"]
MAX_LISTED_COLLECTIONS = 50


@dataclass
class IconResult:
    """One icon from a batch retrieval."""

    icon_id: str
    svg: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def time_ago(timestamp: str, now: Optional[datetime] = None) -> str:
    """Human-friendly age of an ISO timestamp ("just now", "5m ago", ...)."""
    try:
        then = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return timestamp
    if then.tzinfo is None:
        then = then.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)

    seconds = int((now - then).total_seconds())
    if seconds < 60:
        return "just now"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    days = hours // 24
    if days < 7:
        return f"{days}d ago"
    return then.date().isoformat()


def _format_date(timestamp: str) -> str:
    try:
        return datetime.fromisoformat(timestamp.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return timestamp or "unknown"


def _bullets(icon_ids: list[str]) -> str:
    return "\n".join(f"- `{i}`" for i in icon_ids)


def _parse(icon_id: str) -> tuple[str, str]:
    try:
        return parse_icon_id(icon_id)
    except InvalidIconIdError as e:
        raise ToolError(str(e)) from e


class IconTools:
    """Implementation of every icon tool.

    Holds the Iconify client and the preference store that learns from
    successful retrievals.
    """

    def __init__(self, client: IconifyClient, store: PreferenceStore):
        self.client = client
        self.store = store

    def _learned_note(self, learned: list[str], prefix: str) -> str:
        if not learned:
            return ""
        return f"\n\n_{prefix}: {', '.join(learned[:3])}_"

    async def search_icons(
        self,
        query: str,
        limit: int = 32,
        prefix: Optional[str] = None,
        category: Optional[str] = None,
    ) -> str:
        """Search icons, most used collections first."""
        try:
            result = await self.client.search(query, limit=limit, prefix=prefix, category=category)
        except IconifyError as e:
            raise ToolError(f"Error: {e}") from e

        learned = self.store.ranked_collections()
        icons = rank_by_learned(result.icons, learned)
        note = self._learned_note(
            learned, "Results prioritized from your frequently used collections"
        )

        return (
            f"Found {result.total} icons (showing {len(icons)})\n\n"
            f"**Icons:**\n{_bullets(icons)}\n\n"
            f"Use `get_icon` with any icon ID to get the SVG code.{note}"
        )

    async def _render(
        self,
        icon_id: str,
        color: Optional[str],
        size: Optional[int],
    ) -> tuple[str, int, int]:
        """Fetch and render one icon, recording its usage."""
        prefix, name = _parse(icon_id)
        try:
            icon_set = await self.client.get_icon_set(prefix, [name])
        except IconifyError as e:
            raise ToolError(f"Error: {e}") from e

        icon = icon_set.get(name)
        if icon is None:
            raise ToolError(f"Icon '{icon_id}' not found")

        svg = render_svg(icon, icon_set, size=size, color=color)
        width, height = icon_dimensions(icon, icon_set)

        self.store.record_usage(prefix, icon_id)
        logger.info("icon_fetched", icon_id=icon_id)
        return svg, width, height

    async def get_icon(
        self,
        icon_id: str,
        color: Optional[str] = None,
        size: Optional[int] = None,
    ) -> str:
        """SVG, JSX and Iconify snippets for a single icon."""
        svg, width, height = await self._render(icon_id, color, size)
        jsx = svg.replace("class=", "className=")

        return (
            f"# Icon: {icon_id}\n\n"
            f"**Dimensions:** {width}x{height}\n\n"
            f"## SVG\n\n```svg\n{svg}\n```\n\n"
            f"## React/JSX\n\n```jsx\n{jsx}\n```\n\n"
            f"## Iconify\n\n```jsx\n"
            f"import {{ Icon }} from '@iconify/react';\n"
            f'<Icon icon="{icon_id}" />\n```'
        )

    async def fetch_icons(
        self,
        icon_ids: list[str],
        color: Optional[str] = None,
        size: Optional[int] = None,
    ) -> list[IconResult]:
        """Retrieve several icons with one request per collection.

        Returns:
            One IconResult per requested ID, in request order
        """
        results: dict[str, IconResult] = {}
        by_prefix: dict[str, list[str]] = defaultdict(list)

        for icon_id in icon_ids:
            try:
                prefix, name = parse_icon_id(icon_id)
            except InvalidIconIdError:
                results[icon_id] = IconResult(icon_id, error="Invalid format")
                continue
            if name not in by_prefix[prefix]:
                by_prefix[prefix].append(name)

        for prefix, names in by_prefix.items():
            try:
                icon_set = await self.client.get_icon_set(prefix, names)
            except IconifyError as e:
                for name in names:
                    results[f"{prefix}:{name}"] = IconResult(f"{prefix}:{name}", error=str(e))
                continue

            for name in names:
                icon_id = f"{prefix}:{name}"
                icon = icon_set.get(name)
                if icon is None:
                    results[icon_id] = IconResult(icon_id, error="Not found")
                    continue
                svg = render_svg(icon, icon_set, size=size, color=color)
                results[icon_id] = IconResult(icon_id, svg=svg)
                self.store.record_usage(prefix, icon_id)

        return [results[icon_id] for icon_id in icon_ids]

    async def get_icons(
        self,
        icon_ids: list[str],
        color: Optional[str] = None,
        size: Optional[int] = None,
    ) -> str:
        """Batch retrieval; failures are listed after the icons that succeeded."""
        results = await self.fetch_icons(icon_ids, color=color, size=size)
        succeeded = [r for r in results if r.ok]
        failed = [r for r in results if not r.ok]

        text = f"# {len(succeeded)} Icons Retrieved\n\n"
        for result in succeeded:
            text += f"## {result.icon_id}\n\n```svg\n{result.svg}\n```\n\n"

        if failed:
            lines = "\n".join(f"- `{r.icon_id}`: {r.error}" for r in failed)
            text += f"**Failed to retrieve:**\n{lines}\n"

        return text

    async def list_collections(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> str:
        """Collections by size, optionally filtered."""
        try:
            collections = await self.client.collections()
        except IconifyError as e:
            raise ToolError(f"Error: {e}") from e

        filtered = list(collections.items())
        if category:
            wanted = category.lower()
            filtered = [(p, c) for p, c in filtered if c.category and wanted in c.category.lower()]
        if search:
            s = search.lower()
            filtered = [(p, c) for p, c in filtered if s in p.lower() or s in c.name.lower()]

        filtered.sort(key=lambda item: -item[1].total)
        lines = "\n".join(
            f"- **{p}** - {c.name} ({c.total} icons)"
            for p, c in filtered[:MAX_LISTED_COLLECTIONS]
        )

        return (
            f"# Icon Collections\n\n"
            f"Found {len(filtered)} collections (showing top {MAX_LISTED_COLLECTIONS})\n\n"
            f"{lines}\n\n"
            f"**Popular:** {', '.join(POPULAR_COLLECTIONS)}"
        )

    async def recommend_icons(
        self,
        use_case: str,
        style: IconStyle = "any",
        limit: int = 10,
    ) -> str:
        """Icons for a use case, ranked by learned and style preferences."""
        try:
            result = await self.client.search(use_case, limit=limit * 2)
        except IconifyError as e:
            raise ToolError(f"Error: {e}") from e

        learned = self.store.ranked_collections()
        ranked = rank_by_style(result.icons, style, learned)[:limit]
        note = self._learned_note(learned, "Prioritized from your frequently used collections")

        return (
            f'# Recommendations for "{use_case}"\n\n'
            f"{_bullets(ranked)}\n\n"
            f"Use `get_icon` to get SVG code.{note}"
        )

    async def find_similar_icons(self, icon_id: str, limit: int = 10) -> str:
        """The same icon in other collections, then related names."""
        current_prefix, icon_name = _parse(icon_id)
        try:
            result = await self.client.search(icon_name, limit=100)
        except IconifyError as e:
            raise ToolError(f"Error: {e}") from e

        exact, related = [], []
        for candidate in result.icons:
            prefix, _, name = candidate.partition(":")
            if prefix == current_prefix:
                continue
            if name == icon_name:
                exact.append(candidate)
            elif icon_name in name:
                related.append(candidate)

        combined = (exact + related)[:limit]
        ranked = rank_by_learned(combined, self.store.ranked_collections())

        if not ranked:
            return (
                f"No similar icons found for `{icon_id}`. "
                f"Try searching with `search_icons` using related keywords."
            )

        exact_list = [i for i in ranked if i.partition(":")[2] == icon_name]
        related_list = [i for i in ranked if i.partition(":")[2] != icon_name]

        text = f"# Similar Icons for `{icon_id}`\n\n"
        if exact_list:
            text += f"**Same icon in other collections:**\n{_bullets(exact_list)}\n\n"
        if related_list:
            text += f"**Related icons:**\n{_bullets(related_list)}\n\n"
        text += "Use `get_icon` to retrieve any of these icons."
        return text

    def get_icon_preferences(self) -> str:
        """Learned collection preferences, most used first."""
        prefs = self.store.load()
        ranked = self.store.ranked_collections()

        if not ranked:
            return (
                "No icon preferences learned yet. Use `get_icon` to retrieve icons "
                "and the server will automatically learn your preferences."
            )

        lines = "\n".join(
            f"- **{prefix}**: {prefs.collections[prefix].count} uses "
            f"(last: {_format_date(prefs.collections[prefix].last_used)})"
            for prefix in ranked
        )
        return (
            f"# Your Icon Preferences\n\n"
            f"The server has learned these collection preferences based on your usage:\n\n"
            f"{lines}\n\n"
            f"Search results and recommendations will prioritize icons from these collections."
        )

    def clear_icon_preferences(self) -> str:
        """Forget everything learned so far."""
        self.store.reset()
        logger.info("preferences_cleared")
        return (
            "Icon preferences have been cleared. The server will start learning "
            "your preferences again from scratch."
        )

    def get_recent_icons(self, limit: int = 20) -> str:
        """Recently retrieved icons with their age."""
        recent = self.store.recent_history(limit)
        if not recent:
            return "No icon history yet. Use `get_icon` to retrieve icons and they'll appear here."

        now = datetime.now(timezone.utc)
        lines = "\n".join(
            f"{i}. `{entry.icon_id}` - {time_ago(entry.timestamp, now)}"
            for i, entry in enumerate(recent, 1)
        )
        return (
            f"# Recent Icons\n\n{lines}\n\n"
            f"Use `get_icon` or `get_icons` to retrieve any of these again."
        )

    async def sync_icon(
        self,
        icon_id: str,
        file_path: str,
        framework: IconFramework = "svg",
        component_name: Optional[str] = None,
        color: Optional[str] = None,
        size: Optional[int] = None,
    ) -> str:
        """Add an icon as a component to a project icons file."""
        if framework not in FORMATTERS:
            raise ToolError(f"Unknown framework: {framework}. Use one of: {', '.join(FORMATTERS)}")

        svg, _, _ = await self._render(icon_id, color, size)
        path = Path(file_path).expanduser()
        result = add_icon_to_file(path, icon_id, svg, framework, component_name)

        statement = import_statement(path, result.component_name, framework)
        if result.already_exists:
            return (
                f"`{icon_id}` is already in `{path}` as `{result.component_name}`.\n\n"
                f"```\n{statement}\n```"
            )

        logger.info("icon_synced", icon_id=icon_id, path=str(path))
        return (
            f"Added `{icon_id}` to `{path}` as `{result.component_name}`.\n\n"
            f"## Import\n\n```\n{statement}\n```"
        )

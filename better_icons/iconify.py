"""Async client for the Iconify API."""

from dataclasses import dataclass, field
from typing import Any, Optional

import httpx
import structlog

from better_icons.icons import IconSet
from better_icons.storage import ICONIFY_API

logger = structlog.get_logger()


class IconifyError(Exception):
    """The Iconify API could not be reached or answered with an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class SearchResult:
    """Response of the /search endpoint."""

    icons: list[str] = field(default_factory=list)
    total: int = 0
    limit: int = 0
    start: int = 0
    collections: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "SearchResult":
        """Create from dictionary."""
        icons = [i for i in data.get("icons") or [] if isinstance(i, str)]
        return cls(
            icons=icons,
            total=data.get("total", len(icons)),
            limit=data.get("limit", 0),
            start=data.get("start", 0),
            collections=data.get("collections") or {},
        )


@dataclass
class CollectionInfo:
    """Summary of one icon collection from /collections."""

    name: str
    total: int = 0
    category: Optional[str] = None
    author: Optional[str] = None
    license: Optional[str] = None
    samples: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, prefix: str, data: dict) -> "CollectionInfo":
        """Create from dictionary."""
        author = data.get("author") or {}
        license_ = data.get("license") or {}
        return cls(
            name=data.get("name") or prefix,
            total=data.get("total", 0),
            category=data.get("category"),
            author=author.get("name") if isinstance(author, dict) else None,
            license=license_.get("title") if isinstance(license_, dict) else None,
            samples=data.get("samples") or [],
        )


class IconifyClient:
    """Thin wrapper over the Iconify HTTP API.

    Each call opens its own connection; nothing is cached.
    """

    def __init__(
        self,
        base_url: str = ICONIFY_API,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize client.

        Args:
            base_url: Iconify API root
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def _get(self, path: str, params: Optional[dict] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, params=params)
        except httpx.RequestError as e:
            logger.warning("iconify_request_failed", url=url, error=str(e))
            raise IconifyError(f"Request failed: {e}") from e

        if response.status_code >= 400:
            reason = response.reason_phrase or f"HTTP {response.status_code}"
            logger.warning("iconify_error_status", url=url, status=response.status_code)
            raise IconifyError(reason, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise IconifyError("Invalid JSON response") from e

    async def search(
        self,
        query: str,
        limit: int = 32,
        prefix: Optional[str] = None,
        category: Optional[str] = None,
    ) -> SearchResult:
        """Search icons across all collections.

        Args:
            query: Search keywords
            limit: Maximum results
            prefix: Restrict to one collection
            category: Restrict to a collection category

        Returns:
            SearchResult with matching icon IDs
        """
        params = {"query": query, "limit": str(limit)}
        if prefix:
            params["prefix"] = prefix
        if category:
            params["category"] = category
        data = await self._get("/search", params)
        return SearchResult.from_dict(data if isinstance(data, dict) else {})

    async def get_icon_set(self, prefix: str, names: list[str]) -> IconSet:
        """Fetch icon data for the given names from one collection."""
        data = await self._get(f"/{prefix}.json", {"icons": ",".join(names)})
        return IconSet.from_dict(data if isinstance(data, dict) else {})

    async def collections(self) -> dict[str, CollectionInfo]:
        """List all available collections keyed by prefix."""
        data = await self._get("/collections")
        if not isinstance(data, dict):
            return {}
        return {
            prefix: CollectionInfo.from_dict(prefix, info)
            for prefix, info in data.items()
            if isinstance(info, dict)
        }

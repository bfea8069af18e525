"""Tests for better_icons iconify client."""

import httpx
import pytest

from better_icons.iconify import IconifyClient, IconifyError


def make_client(handler) -> IconifyClient:
    return IconifyClient(base_url="https://api.test", transport=httpx.MockTransport(handler))


class TestIconifyClient:
    """Tests for IconifyClient against a mocked transport."""

    @pytest.mark.asyncio
    async def test_search_params(self):
        """Test search sends query, limit and filters."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"icons": ["mdi:home"], "total": 1, "limit": 5})

        result = await make_client(handler).search("home", limit=5, prefix="mdi", category="General")

        assert seen["path"] == "/search"
        assert seen["params"] == {"query": "home", "limit": "5", "prefix": "mdi", "category": "General"}
        assert result.icons == ["mdi:home"]
        assert result.total == 1

    @pytest.mark.asyncio
    async def test_search_missing_fields(self):
        """Test absent fields are defaulted."""
        client = make_client(lambda request: httpx.Response(200, json={}))
        result = await client.search("nothing")
        assert result.icons == []
        assert result.total == 0

    @pytest.mark.asyncio
    async def test_get_icon_set(self):
        """Test icon set request and parsing."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["icons"] = request.url.params["icons"]
            return httpx.Response(200, json={
                "icons": {"home": {"body": "<path/>"}},
                "aliases": {"house": {"parent": "home"}},
                "width": 24,
            })

        icon_set = await make_client(handler).get_icon_set("mdi", ["home", "house"])

        assert seen["path"] == "/mdi.json"
        assert seen["icons"] == "home,house"
        assert icon_set.get("house").body == "<path/>"
        assert icon_set.width == 24

    @pytest.mark.asyncio
    async def test_collections(self):
        """Test collections parsing."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={
                "mdi": {
                    "name": "Material Design Icons",
                    "total": 7000,
                    "author": {"name": "Pictogrammers"},
                    "license": {"title": "Apache 2.0"},
                },
            })

        collections = await make_client(handler).collections()
        assert collections["mdi"].name == "Material Design Icons"
        assert collections["mdi"].author == "Pictogrammers"
        assert collections["mdi"].license == "Apache 2.0"

    @pytest.mark.asyncio
    async def test_error_status_uses_reason(self):
        """Test non-success responses raise with the status text."""
        client = make_client(lambda request: httpx.Response(404))
        with pytest.raises(IconifyError, match="Not Found") as exc_info:
            await client.get_icon_set("nope", ["home"])
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_transport_error(self):
        """Test connection failures raise IconifyError."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(IconifyError, match="Request failed"):
            await make_client(handler).search("home")

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        """Test a non-JSON body raises IconifyError."""
        client = make_client(lambda request: httpx.Response(200, text="oops"))
        with pytest.raises(IconifyError, match="Invalid JSON"):
            await client.collections()

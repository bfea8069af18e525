"""Shared pytest fixtures for better-icons tests."""

import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import pytest

from better_icons.iconify import CollectionInfo, IconifyError, SearchResult
from better_icons.icons import IconSet
from better_icons.preferences import PreferenceRepository, PreferenceStore, Preferences
from better_icons.storage import StorageManager


class InMemoryPreferenceRepository(PreferenceRepository):
    """Preference repository that keeps a serialized copy in memory."""

    def __init__(self, initial: Optional[Preferences] = None):
        self.data = (initial or Preferences()).to_dict()
        self.saves = 0

    def load(self) -> Preferences:
        return Preferences.from_dict(self.data)

    def save(self, prefs: Preferences) -> None:
        self.data = prefs.to_dict()
        self.saves += 1


class FakeClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


class FakeIconifyClient:
    """Stand-in for IconifyClient serving canned data."""

    def __init__(
        self,
        search_icons: Optional[list[str]] = None,
        icon_sets: Optional[dict[str, dict]] = None,
        collections: Optional[dict[str, dict]] = None,
        errors: Optional[dict[str, str]] = None,
    ):
        self.search_icons = search_icons or []
        self.icon_sets = icon_sets or {}
        self._collections = collections or {}
        self.errors = errors or {}  # prefix or endpoint -> status text
        self.search_calls: list[dict] = []
        self.icon_set_calls: list[tuple[str, list[str]]] = []

    async def search(self, query, limit=32, prefix=None, category=None):
        self.search_calls.append(
            {"query": query, "limit": limit, "prefix": prefix, "category": category}
        )
        if "search" in self.errors:
            raise IconifyError(self.errors["search"], status_code=503)
        return SearchResult(icons=list(self.search_icons), total=len(self.search_icons))

    async def get_icon_set(self, prefix, names):
        self.icon_set_calls.append((prefix, list(names)))
        if prefix in self.errors:
            raise IconifyError(self.errors[prefix], status_code=404)
        return IconSet.from_dict(self.icon_sets.get(prefix, {}))

    async def collections(self):
        if "collections" in self.errors:
            raise IconifyError(self.errors["collections"], status_code=500)
        return {
            prefix: CollectionInfo.from_dict(prefix, info)
            for prefix, info in self._collections.items()
        }


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_storage(temp_dir):
    """Create a temporary StorageManager."""
    storage = StorageManager(base_dir=temp_dir)
    storage.ensure_dirs()
    return storage


@pytest.fixture
def fake_clock():
    """Create a deterministic clock."""
    return FakeClock()


@pytest.fixture
def repo_factory():
    """Build in-memory preference repositories from optional initial state."""
    return InMemoryPreferenceRepository


@pytest.fixture
def memory_repo(repo_factory):
    """Create an empty in-memory preference repository."""
    return repo_factory()


@pytest.fixture
def memory_store(memory_repo, fake_clock):
    """Create a PreferenceStore over the in-memory repository."""
    return PreferenceStore(memory_repo, clock=fake_clock)


@pytest.fixture
def client_factory():
    """Build fake Iconify clients with custom canned data."""
    return FakeIconifyClient


@pytest.fixture
def icon_sets():
    """Icon set documents keyed by prefix, as the Iconify API returns them."""
    return {
        "mdi": {
            "prefix": "mdi",
            "icons": {"home": {"body": '<path d="M10 20v-6h4v6"/>'}},
            "aliases": {"house": {"parent": "home"}},
            "width": 24,
            "height": 24,
        },
        "lucide": {
            "prefix": "lucide",
            "icons": {
                "home": {
                    "body": '<path fill="none" stroke="currentColor" d="M3 9l9-7 9 7"/>',
                },
            },
        },
    }


@pytest.fixture
def fake_client(icon_sets):
    """Create a FakeIconifyClient with a few icons."""
    return FakeIconifyClient(
        search_icons=["fa:home", "mdi:home", "lucide:home", "tabler:home"],
        icon_sets=icon_sets,
        collections={
            "mdi": {"name": "Material Design Icons", "total": 7000, "category": "General"},
            "lucide": {"name": "Lucide", "total": 1500, "category": "General"},
            "twemoji": {"name": "Twitter Emoji", "total": 3600, "category": "Emoji"},
        },
    )

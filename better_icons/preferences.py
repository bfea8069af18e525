"""Learned icon preferences: collection usage counts and recent icon history."""

import json
import os
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

import structlog

logger = structlog.get_logger()

MAX_HISTORY_SIZE = 50


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _str_field(data: dict, key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


@dataclass
class CollectionUsage:
    """Usage counter for one icon collection."""

    count: int = 0
    last_used: str = ""

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"count": self.count, "lastUsed": self.last_used}

    @classmethod
    def from_dict(cls, data: dict) -> "CollectionUsage":
        """Create from dictionary."""
        count = data.get("count", 0)
        return cls(
            count=count if isinstance(count, int) and count >= 0 else 0,
            last_used=_str_field(data, "lastUsed"),
        )


@dataclass
class HistoryEntry:
    """A recently retrieved icon."""

    icon_id: str
    timestamp: str

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"iconId": self.icon_id, "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryEntry":
        """Create from dictionary."""
        return cls(
            icon_id=_str_field(data, "iconId"),
            timestamp=_str_field(data, "timestamp"),
        )


@dataclass
class Preferences:
    """Everything learned about the user's icon usage."""

    collections: dict[str, CollectionUsage] = field(default_factory=dict)
    history: list[HistoryEntry] = field(default_factory=list)  # newest first

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "collections": {
                prefix: usage.to_dict() for prefix, usage in self.collections.items()
            },
            "history": [entry.to_dict() for entry in self.history],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Preferences":
        """Create from dictionary.

        Unknown or malformed items are dropped rather than rejected so that
        older or hand-edited files still load.
        """
        collections = data.get("collections")
        history = data.get("history")
        if not isinstance(collections, dict):
            collections = {}
        if not isinstance(history, list):
            history = []
        return cls(
            collections={
                prefix: CollectionUsage.from_dict(usage)
                for prefix, usage in collections.items()
                if isinstance(usage, dict)
            },
            history=[
                HistoryEntry.from_dict(entry)
                for entry in history
                if isinstance(entry, dict) and _str_field(entry, "iconId")
            ],
        )


class PreferenceRepository(ABC):
    """Where preferences are persisted.

    Implementations always load and save the whole aggregate.
    """

    @abstractmethod
    def load(self) -> Preferences:
        """Load preferences, returning empty defaults when none exist."""
        pass

    @abstractmethod
    def save(self, prefs: Preferences) -> None:
        """Overwrite persisted preferences."""
        pass


class JsonPreferenceRepository(PreferenceRepository):
    """Preferences stored as a single JSON document."""

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> Preferences:
        if not self.path.exists():
            return Preferences()

        try:
            data = json.loads(self.path.read_text())
        except (json.JSONDecodeError, UnicodeDecodeError, IOError):
            logger.warning("preferences_unreadable", path=str(self.path))
            return Preferences()

        if not isinstance(data, dict):
            return Preferences()
        return Preferences.from_dict(data)

    def save(self, prefs: Preferences) -> None:
        """Replace the file atomically; a failed write leaves the old file intact."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = tempfile.NamedTemporaryFile(
            "w",
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp",
            delete=False,
        )
        try:
            with tmp as f:
                json.dump(prefs.to_dict(), f, indent=2)
            os.replace(tmp.name, self.path)
        except Exception:
            Path(tmp.name).unlink(missing_ok=True)
            raise


class PreferenceStore:
    """Records icon usage and exposes what has been learned from it."""

    def __init__(
        self,
        repository: PreferenceRepository,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize preference store.

        Args:
            repository: Backing storage for preferences
            clock: Returns the current time. Defaults to UTC now.
        """
        self.repository = repository
        self._clock = clock or _utc_now

    def load(self) -> Preferences:
        """Load current preferences."""
        return self.repository.load()

    def save(self, prefs: Preferences) -> None:
        """Persist preferences, replacing what was stored."""
        self.repository.save(prefs)

    def record_usage(self, prefix: str, icon_id: Optional[str] = None) -> None:
        """Count a retrieval from a collection and push the icon onto history.

        Args:
            prefix: Collection prefix (e.g. "mdi")
            icon_id: Full icon ID to add to history, if any
        """
        prefs = self.load()
        now = self._clock().isoformat()

        usage = prefs.collections.get(prefix)
        prefs.collections[prefix] = CollectionUsage(
            count=(usage.count if usage else 0) + 1,
            last_used=now,
        )

        if icon_id:
            history = [e for e in prefs.history if e.icon_id != icon_id]
            history.insert(0, HistoryEntry(icon_id=icon_id, timestamp=now))
            prefs.history = history[:MAX_HISTORY_SIZE]

        self.save(prefs)
        logger.debug("usage_recorded", prefix=prefix, icon_id=icon_id)

    def ranked_collections(self) -> list[str]:
        """Collection prefixes, most used first.

        Equal counts keep the order in which collections were first recorded.
        """
        collections = self.load().collections
        return sorted(collections, key=lambda prefix: -collections[prefix].count)

    def recent_history(self, limit: int) -> list[HistoryEntry]:
        """Most recently retrieved icons, newest first."""
        return self.load().history[:limit]

    def reset(self) -> None:
        """Forget all learned preferences."""
        self.save(Preferences())

"""Storage manager for better-icons configuration and preferences."""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from better_icons.preferences import JsonPreferenceRepository, PreferenceStore

ICONIFY_API = "https://api.iconify.design"


@dataclass
class Config:
    """better-icons configuration."""

    api_url: str = ICONIFY_API
    request_timeout: float = 30.0
    log_level: str = "INFO"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "api_url": self.api_url,
            "request_timeout": self.request_timeout,
            "log_level": self.log_level,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Create from dictionary."""
        return cls(
            api_url=data.get("api_url", ICONIFY_API),
            request_timeout=data.get("request_timeout", 30.0),
            log_level=data.get("log_level", "INFO"),
        )


class StorageManager:
    """Manages better-icons storage: config and learned preferences."""

    def __init__(self, base_dir: Optional[Path] = None):
        """Initialize storage manager.

        Args:
            base_dir: Base directory for storage. Defaults to $BETTER_ICONS_HOME
                or ~/.better-icons
        """
        if base_dir is None:
            env_home = os.environ.get("BETTER_ICONS_HOME")
            base_dir = Path(env_home).expanduser() if env_home else Path.home() / ".better-icons"
        self.base_dir = base_dir
        self._config: Optional[Config] = None

    @property
    def config_path(self) -> Path:
        return self.base_dir / "config.json"

    @property
    def preferences_path(self) -> Path:
        return self.base_dir / "preferences.json"

    def ensure_dirs(self) -> None:
        """Ensure storage directories exist."""
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def load_config(self) -> Config:
        """Load configuration from file."""
        if self._config is not None:
            return self._config

        if not self.config_path.exists():
            self._config = Config()
            return self._config

        try:
            data = json.loads(self.config_path.read_text())
            self._config = Config.from_dict(data)
        except (json.JSONDecodeError, AttributeError, IOError):
            self._config = Config()

        return self._config

    def save_config(self, config: Config) -> None:
        """Save configuration to file."""
        self.ensure_dirs()
        self.config_path.write_text(json.dumps(config.to_dict(), indent=2))
        self._config = config

    def reset_config(self) -> Config:
        """Reset configuration to defaults."""
        config = Config()
        self.save_config(config)
        return config

    def preference_store(self) -> PreferenceStore:
        """Get a preference store backed by preferences.json."""
        return PreferenceStore(JsonPreferenceRepository(self.preferences_path))

"""
Centralized Configuration for NodeScope.

This module provides a single source of truth for configuration values
used by the editor core.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


@dataclass
class DiagramConfig:
    """Visual model configuration values."""

    # Where newly created nodes appear on the canvas
    default_node_x: float = 50.0
    default_node_y: float = 50.0


@dataclass
class NavigationConfig:
    """Graph navigation configuration values."""

    # Label of the first breadcrumb
    root_label: str = "Root"

    # Separator used when the trail is rendered as text
    breadcrumb_separator: str = " → "


@dataclass
class PathConfig:
    """Path-related configuration values."""

    # User configuration directory
    user_config_dir: Path = field(default_factory=lambda: Path.home() / ".nodescope")


@dataclass
class EditorConfig:
    """Main configuration container for NodeScope."""

    diagram: DiagramConfig = field(default_factory=DiagramConfig)
    navigation: NavigationConfig = field(default_factory=NavigationConfig)
    paths: PathConfig = field(default_factory=PathConfig)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "diagram": {
                "default_node_x": self.diagram.default_node_x,
                "default_node_y": self.diagram.default_node_y,
            },
            "navigation": {
                "root_label": self.navigation.root_label,
                "breadcrumb_separator": self.navigation.breadcrumb_separator,
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EditorConfig":
        """Create configuration from dictionary."""
        config = cls()

        if "diagram" in data:
            for key, value in data["diagram"].items():
                if hasattr(config.diagram, key):
                    setattr(config.diagram, key, value)

        if "navigation" in data:
            for key, value in data["navigation"].items():
                if hasattr(config.navigation, key):
                    setattr(config.navigation, key, value)

        return config

    def save(self, path: Optional[Path] = None) -> None:
        """Save configuration to file."""
        if path is None:
            path = self.paths.user_config_dir / "config.json"

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

        logger.info(f"Configuration saved to {path}")

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "EditorConfig":
        """Load configuration from file, using defaults if not found."""
        config = cls()

        if path is None:
            path = config.paths.user_config_dir / "config.json"

        if path.exists():
            try:
                with open(path) as f:
                    data = json.load(f)
                config = cls.from_dict(data)
                logger.info(f"Configuration loaded from {path}")
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to load configuration from {path}: {e}")
                logger.info("Using default configuration")

        return config


# Global configuration instance - lazy loaded
_config: Optional[EditorConfig] = None


def get_config() -> EditorConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = EditorConfig.load()
    return _config


def set_config(config: EditorConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config

"""Configuration and settings management."""
import json
import logging
from pathlib import Path
from dataclasses import dataclass, asdict, field
from typing import Dict, List, Tuple

from platformdirs import user_config_dir

from .repository import MAX_IMAGES_PER_ROOT

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when configuration operations fail."""
    pass


@dataclass
class AppSettings:
    """Application settings."""
    output: str = "sort.sh"
    recurse: bool = False
    max_images_per_root: int = MAX_IMAGES_PER_ROOT
    bindings: Dict[str, str] = field(default_factory=dict)
    autosave: bool = False

    def to_dict(self) -> dict:
        """Convert settings to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'AppSettings':
        """Create settings from dictionary."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})

    def binding_pairs(self) -> List[Tuple[str, Path]]:
        """Configured bindings as (key, destination) pairs."""
        return [(key, Path(path).expanduser()) for key, path in self.bindings.items()]


def get_config_path() -> Path:
    """
    Get the path to the configuration file.

    Returns:
        Path to settings.json
    """
    return Path(user_config_dir("PicSorter")) / "settings.json"


def load_settings() -> AppSettings:
    """
    Load settings from disk.

    Returns:
        AppSettings object with loaded settings
    """
    config_path = get_config_path()

    if not config_path.exists():
        logger.info("No settings file found, using defaults")
        return AppSettings()

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        settings = AppSettings.from_dict(data)
        logger.info(f"Loaded settings from {config_path}")
        return settings
    except Exception as e:
        logger.warning(f"Failed to load settings: {e}, using defaults")
        return AppSettings()


def save_settings(settings: AppSettings) -> None:
    """
    Save settings to disk.

    Args:
        settings: AppSettings object to save

    Raises:
        ConfigError: If save fails
    """
    config_path = get_config_path()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, 'w', encoding='utf-8') as f:
            json.dump(settings.to_dict(), f, indent=2)
        logger.info(f"Saved settings to {config_path}")
    except Exception as e:
        logger.error(f"Failed to save settings: {e}")
        raise ConfigError(f"Failed to save settings: {str(e)}") from e

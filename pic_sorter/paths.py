"""Key binding resolution for destination directories."""
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

from .actions import MkDir

logger = logging.getLogger(__name__)


class BindingError(Exception):
    """Raised when a key binding cannot be used."""
    pass


def parse_binding_arg(value: str) -> Tuple[str, Path]:
    """
    Parse a ``KEY=PATH`` binding argument.

    Args:
        value: Raw argument, e.g. ``"c=~/Pictures/cats"``

    Returns:
        (trigger character, destination path)

    Raises:
        BindingError: If the argument is malformed
    """
    key, sep, path = value.partition('=')
    if not sep or not path:
        raise BindingError(f"Expected KEY=PATH, got '{value}'")
    validate_trigger(key)
    return key, Path(path).expanduser()


def validate_trigger(key: str) -> None:
    """Reject triggers that are not a single visible character."""
    if len(key) != 1 or key.isspace() or not key.isprintable():
        raise BindingError(f"Binding key must be a single visible character, got '{key}'")


def parse_key_mapping(
    pairs: Iterable[Tuple[str, Path]]
) -> Tuple[Dict[str, Path], List[MkDir]]:
    """
    Validate bindings and plan creation of missing destinations.

    Only checks the filesystem; nothing is created here. A key bound twice
    keeps its later destination.

    Args:
        pairs: (trigger character, destination path) in command-line order

    Returns:
        (key -> destination mapping, MkDir actions for missing destinations)

    Raises:
        BindingError: If a destination exists and is not a directory
    """
    key_mapping: Dict[str, Path] = {}
    actions: List[MkDir] = []

    for key, path in pairs:
        path = Path(path)
        validate_trigger(key)

        if path.exists() and not path.is_dir():
            raise BindingError(f"{path} exists and it's not a directory!")

        if not path.exists():
            logger.info(f"Directory {path} will be created by the script")
            actions.append(MkDir(path))

        if key in key_mapping and key_mapping[key] != path:
            logger.warning(f"Key '{key}' rebound from {key_mapping[key]} to {path}")
        key_mapping[key] = path

    return key_mapping, actions

"""Recorded filing decisions for a review session."""
from dataclasses import dataclass
from pathlib import Path
from typing import Union


@dataclass(frozen=True)
class Skip:
    """Leave the image where it is."""
    path: Path

    def is_poppable(self) -> bool:
        return True

    def queue_step(self) -> int:
        return 1


@dataclass(frozen=True)
class Move:
    """Move the image into a bound destination directory."""
    path: Path
    destination: Path

    def is_poppable(self) -> bool:
        return True

    def queue_step(self) -> int:
        return 1


@dataclass(frozen=True)
class Delete:
    """Remove the image."""
    path: Path

    def is_poppable(self) -> bool:
        return True

    def queue_step(self) -> int:
        return 1


@dataclass(frozen=True)
class Rename:
    """
    Give the image under review a new file name.

    Does not consume an image slot: it only changes the target of the
    next stepped action recorded for the same image.
    """
    name: str

    def is_poppable(self) -> bool:
        return True

    def queue_step(self) -> int:
        return 0


@dataclass(frozen=True)
class MkDir:
    """
    Create a destination directory before anything is moved into it.

    Seeded once at startup for bindings whose directory is missing, so it
    can never be undone.
    """
    path: Path

    def is_poppable(self) -> bool:
        return False

    def queue_step(self) -> int:
        return 0


Action = Union[Skip, Move, Delete, Rename, MkDir]

# Actions that settle the image under review
DECISION_TYPES = (Skip, Move, Delete)

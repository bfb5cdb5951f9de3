"""Service layer for a review session."""
import logging
import time
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .actions import Action, Delete, MkDir, Move, Rename, Skip
from .config import AppSettings
from .history import ActionLog
from .paths import BindingError, parse_key_mapping
from .repository import parse_images
from .script import ScriptWriteError, render_lines, render_script, write_script
from .state import SessionState, TabId

logger = logging.getLogger(__name__)


class UserFacingError(Exception):
    """User-facing error that should be shown in UI."""
    pass


class SortService:
    """Review session: images, bindings, recorded decisions and view state."""

    def __init__(
        self,
        images: Sequence[Path],
        key_mapping: Dict[str, Path],
        seed: Sequence[MkDir] = (),
        output: Path = Path("sort.sh"),
        autosave: bool = False
    ):
        """
        Initialize the session.

        Args:
            images: Images to review, in order
            key_mapping: Trigger character -> destination directory
            seed: Directory creations planned for missing destinations
            output: Where the script is written
            autosave: Rewrite the script after every change; a failed
                write is logged and the change stays recorded but unsaved
        """
        self.key_mapping = dict(key_mapping)
        self.log = ActionLog(images, seed)
        self.state = SessionState()
        self.output = Path(output)
        self.autosave = autosave
        self.last_save: Optional[float] = None
        self._pending_rename: Optional[str] = None
        self._unsaved = False

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        inputs: Iterable[Path],
        bindings: Iterable[Tuple[str, Path]] = (),
        output: Optional[Path] = None
    ) -> 'SortService':
        """
        Build a session from settings and command-line values.

        Args:
            settings: Loaded application settings
            inputs: Discovery roots
            bindings: Extra bindings, applied after the configured ones
            output: Script path, defaults to the configured one

        Raises:
            UserFacingError: If a binding is unusable
        """
        pairs = settings.binding_pairs() + list(bindings)
        try:
            key_mapping, seed = parse_key_mapping(pairs)
        except BindingError as e:
            raise UserFacingError(str(e)) from e

        images = parse_images(inputs, settings.recurse, settings.max_images_per_root)
        logger.info(f"Loaded {len(images)} images, {len(key_mapping)} bindings")
        return cls(
            images,
            key_mapping,
            seed,
            output or Path(settings.output).expanduser(),
            settings.autosave,
        )

    # Accessors

    @property
    def images(self) -> Tuple[Path, ...]:
        return self.log.images

    @property
    def actions(self) -> Tuple[Action, ...]:
        return self.log.actions

    @property
    def pending_rename(self) -> Optional[str]:
        return self._pending_rename

    @property
    def has_unsaved_changes(self) -> bool:
        return self._unsaved

    def current_image(self) -> Optional[Path]:
        """Get the image under review, or None when review is complete."""
        return self.log.current_image()

    def is_complete(self) -> bool:
        return self.log.is_complete()

    def progress(self) -> Tuple[int, int]:
        """(images decided, total images)"""
        return self.log.cursor, len(self.log.images)

    def seconds_since_save(self) -> Optional[float]:
        if self.last_save is None:
            return None
        return time.monotonic() - self.last_save

    def script_text(self) -> str:
        return render_script(self.log.actions)

    def script_lines(self) -> List[str]:
        return render_lines(self.log.actions)

    # Primitive log access

    def push_action(self, action: Action) -> bool:
        """Record a single action as-is. See ActionLog.push."""
        pushed = self.log.push(action)
        if pushed:
            self._changed()
        return pushed

    def pop_action(self) -> Optional[Action]:
        """Remove the last action as-is. See ActionLog.pop."""
        removed = self.log.pop()
        if removed is not None:
            self._changed()
        return removed

    # Decisions

    def skip_current(self) -> bool:
        """Keep the current image where it is."""
        current = self.current_image()
        if current is None:
            return False
        return self._decide(Skip(current))

    def move_current(self, key: str) -> bool:
        """
        Move the current image to the directory bound to ``key``.

        Raises:
            UserFacingError: If nothing is bound to ``key``
        """
        destination = self.key_mapping.get(key)
        if destination is None:
            raise UserFacingError(f"No destination bound to '{key}'")
        current = self.current_image()
        if current is None:
            return False
        return self._decide(Move(current, destination))

    def delete_current(self) -> bool:
        """Delete the current image."""
        current = self.current_image()
        if current is None:
            return False
        return self._decide(Delete(current))

    def undo(self) -> bool:
        """
        Undo the last decision, including its rename.

        A rename committed but not yet followed by a decision is dropped first.

        Returns:
            True if anything was undone
        """
        if self._pending_rename is not None:
            self._pending_rename = None
            return True

        removed = self.log.undo_decision()
        if not removed:
            return False
        self._changed()
        return True

    def _decide(self, action: Action) -> bool:
        group: List[Action] = [action]
        if self._pending_rename is not None:
            group.insert(0, Rename(self._pending_rename))

        recorded = self.log.push_decision(group)
        self._pending_rename = None
        self.state.rename.clear()
        if recorded:
            self._changed()
        return recorded

    def _changed(self) -> None:
        self._unsaved = True
        if not self.autosave:
            return
        # The change is already recorded; a failed write leaves it unsaved
        try:
            self.save()
        except UserFacingError as e:
            logger.error(f"Autosave failed: {e}")

    # Renaming

    def begin_rename(self) -> bool:
        """Seed the rename buffer from the current image's file name."""
        current = self.current_image()
        if current is None:
            return False
        self.state.rename.start(self._pending_rename or current.name)
        return True

    def commit_rename(self) -> Optional[str]:
        """
        Accept the rename buffer as the new name for the current image.

        The rename is recorded together with the next decision.

        Returns:
            The pending name, or None if it equals the current name

        Raises:
            UserFacingError: If the name is not a usable file name
        """
        current = self.current_image()
        if current is None:
            self.state.rename.clear()
            return None

        name = self.state.rename.text
        if not name.strip() or '/' in name or name in ('.', '..'):
            raise UserFacingError(f"Invalid file name: '{name}'")

        self.state.rename.clear()
        self._pending_rename = None if name == current.name else name
        return self._pending_rename

    def cancel_rename(self) -> None:
        self.state.rename.clear()

    # View

    @property
    def current_tab(self) -> TabId:
        return self.state.current_tab

    def switch_tab(self) -> None:
        self.state.switch_tab()

    def scroll_up(self) -> None:
        self.state.scroll_up()

    def scroll_down(self) -> None:
        self.state.scroll_down(len(self.log))

    def scroll_left(self) -> None:
        self.state.scroll_left()

    def scroll_right(self) -> None:
        self.state.scroll_right()

    # Output

    def save(self) -> None:
        """
        Write the script to the output path.

        Raises:
            UserFacingError: If the script cannot be written
        """
        try:
            write_script(self.log.actions, self.output)
        except ScriptWriteError as e:
            raise UserFacingError(str(e)) from e
        self.last_save = time.monotonic()
        self._unsaved = False

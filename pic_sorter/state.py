"""Interactive state of a review session."""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple


class TabId(Enum):
    MAIN = "main"
    SCRIPT = "script"


TABS = (TabId.MAIN, TabId.SCRIPT)

# Rows the script preview may scroll past its last action line
SCROLL_MARGIN = 3


@dataclass
class RenameBuffer:
    """Line editor used while typing a new file name."""
    chars: List[str] = field(default_factory=list)
    index: int = 0
    active: bool = False

    @property
    def text(self) -> str:
        return "".join(self.chars)

    def start(self, name: str) -> None:
        """Seed the buffer with ``name`` and put the edit index at its end."""
        self.chars = list(name)
        self.index = len(self.chars)
        self.active = True

    def insert(self, char: str) -> None:
        self.chars.insert(self.index, char)
        self.index += 1

    def backspace(self) -> None:
        """Remove the character before the edit index."""
        if self.index > 0:
            self.index -= 1
            del self.chars[self.index]

    def delete(self) -> None:
        """Remove the character at the edit index."""
        if self.index < len(self.chars):
            del self.chars[self.index]

    def left(self) -> None:
        self.index = max(0, self.index - 1)

    def right(self) -> None:
        self.index = min(len(self.chars), self.index + 1)

    def home(self) -> None:
        self.index = 0

    def end(self) -> None:
        self.index = len(self.chars)

    def clear(self) -> None:
        self.chars = []
        self.index = 0
        self.active = False

    def edit(self, key: str, char: str = "") -> bool:
        """
        Apply one keystroke.

        Args:
            key: Key name, e.g. ``"BackSpace"`` or ``"Left"``
            char: Printable character produced by the key, if any

        Returns:
            True if the keystroke changed the buffer or its index
        """
        command = EDIT_KEYS.get(key)
        if command is not None:
            command(self)
            return True
        if char and char.isprintable():
            self.insert(char)
            return True
        return False

    def display(self, marker: str = "|") -> str:
        """Buffer text with ``marker`` at the edit index."""
        return self.text[:self.index] + marker + self.text[self.index:]


EDIT_KEYS = {
    "BackSpace": RenameBuffer.backspace,
    "Delete": RenameBuffer.delete,
    "Left": RenameBuffer.left,
    "Right": RenameBuffer.right,
    "Home": RenameBuffer.home,
    "End": RenameBuffer.end,
}


@dataclass
class SessionState:
    """View state layered over the action log; never touches the filesystem."""
    tab: int = 0
    script_offset: Tuple[int, int] = (0, 0)  # (row, column)
    rename: RenameBuffer = field(default_factory=RenameBuffer)

    @property
    def current_tab(self) -> TabId:
        return TABS[self.tab]

    def switch_tab(self) -> None:
        """Cycle to the next view and reset the preview scroll."""
        self.tab = (self.tab + 1) % len(TABS)
        self.script_offset = (0, 0)

    def scroll_up(self) -> None:
        y, x = self.script_offset
        if y > 0:
            self.script_offset = (y - 1, x)

    def scroll_down(self, action_count: int) -> None:
        """
        Scroll the preview down one row.

        Args:
            action_count: Number of actions in the log, bounding the row offset
        """
        y, x = self.script_offset
        if y < action_count + SCROLL_MARGIN:
            self.script_offset = (y + 1, x)

    def scroll_left(self) -> None:
        y, x = self.script_offset
        if x > 0:
            self.script_offset = (y, x - 1)

    def scroll_right(self) -> None:
        y, x = self.script_offset
        self.script_offset = (y, x + 1)

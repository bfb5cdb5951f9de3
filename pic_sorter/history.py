"""Action log with undo, tracking which image is under review."""
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .actions import Action, MkDir

logger = logging.getLogger(__name__)


class HistoryError(Exception):
    """Raised when a decision group is malformed."""
    pass


class ActionLog:
    """
    Ordered stack of recorded actions coupled to a cursor over the images.

    The cursor always equals the sum of ``queue_step()`` over the actions
    in the log. It is kept incrementally so that reading it is O(1); only
    the push/pop methods below touch it.

    Callers must pair undo with earlier pushes: popping more stepped
    actions than were pushed is a contract violation and is not guarded.
    """

    def __init__(self, images: Sequence[Path], seed: Sequence[MkDir] = ()):
        """
        Initialize the log.

        Args:
            images: Images to review, in review order
            seed: Directory creations recorded before any decision
        """
        self._images: Tuple[Path, ...] = tuple(images)
        self._actions: List[Action] = []
        # Sizes of the recorded groups, oldest first
        self._groups: List[int] = []
        self._cursor = 0

        for action in seed:
            if not isinstance(action, MkDir):
                raise HistoryError(f"Only directory creation can be seeded, got {action!r}")
            self._actions.append(action)
            self._groups.append(1)

    @property
    def images(self) -> Tuple[Path, ...]:
        return self._images

    @property
    def actions(self) -> Tuple[Action, ...]:
        return tuple(self._actions)

    @property
    def cursor(self) -> int:
        return self._cursor

    def __len__(self) -> int:
        return len(self._actions)

    def is_complete(self) -> bool:
        """True once every image has a decision."""
        return self._cursor == len(self._images)

    def current_image(self) -> Optional[Path]:
        """Get the image awaiting a decision, or None when review is complete."""
        if self.is_complete():
            return None
        return self._images[self._cursor]

    def push(self, action: Action) -> bool:
        """
        Record a single action.

        Returns:
            False if review was already complete and nothing was recorded
        """
        if self.is_complete():
            return False

        self._actions.append(action)
        self._groups.append(1)
        self._cursor += action.queue_step()
        return True

    def pop(self) -> Optional[Action]:
        """
        Undo the most recent action.

        A fixed tail action stays in the log; the cursor still rewinds by its
        step, which is zero for every fixed kind.

        Returns:
            The removed action, or None if nothing was removed
        """
        if not self._actions:
            return None

        last = self._actions[-1]
        removed = None
        if last.is_poppable():
            self._actions.pop()
            self._groups[-1] -= 1
            if self._groups[-1] == 0:
                self._groups.pop()
            removed = last
        self._cursor -= last.queue_step()
        return removed

    def push_decision(self, actions: Sequence[Action]) -> bool:
        """
        Record the actions deciding one image as a single undoable group.

        The group must end with its only stepped action, so that it consumes
        exactly one image slot.

        Args:
            actions: e.g. ``[Rename(name), Move(path, destination)]``

        Returns:
            False if review was already complete and nothing was recorded

        Raises:
            HistoryError: If the group does not consume exactly one slot
        """
        steps = [action.queue_step() for action in actions]
        if not steps or sum(steps) != 1 or steps[-1] != 1:
            raise HistoryError(f"A decision must end with its only stepped action: {list(actions)!r}")
        if any(not action.is_poppable() for action in actions):
            raise HistoryError("A decision cannot contain fixed actions")

        if self.is_complete():
            return False

        self._actions.extend(actions)
        self._groups.append(len(actions))
        self._cursor += 1
        return True

    def undo_decision(self) -> List[Action]:
        """
        Undo the most recent group of actions in one step.

        Returns:
            The removed actions in log order, empty if nothing was undoable
        """
        if not self._groups:
            return []

        size = self._groups[-1]
        tail = self._actions[-size:]
        if any(not action.is_poppable() for action in tail):
            return []

        del self._actions[-size:]
        self._groups.pop()
        self._cursor -= sum(action.queue_step() for action in tail)
        logger.debug(f"Undid {len(tail)} action(s), cursor at {self._cursor}")
        return tail

"""Rendering of the action log as a shell script."""
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from .actions import Action, Delete, MkDir, Move, Rename, Skip

logger = logging.getLogger(__name__)

SHEBANG = "#!/bin/sh"


class ScriptWriteError(Exception):
    """Raised when the script cannot be written."""
    pass


def quote(path) -> str:
    """
    Double-quote a path for /bin/sh.

    Backslash, double quote, dollar and backtick stay special inside double
    quotes, so they are backslash-escaped. Paths containing them therefore
    differ from the plain ``"<path>"`` text; every other path is emitted
    unchanged between the quotes.
    """
    text = str(path)
    for char in ('\\', '"', '$', '`'):
        text = text.replace(char, '\\' + char)
    return f'"{text}"'


def render_lines(actions: Iterable[Action]) -> List[str]:
    """
    Render actions to script lines, shebang first.

    A Rename emits nothing itself; it sets the file name used by the next
    Move or Skip. Skip without a pending rename emits nothing.
    """
    lines = [SHEBANG]
    new_name: Optional[str] = None

    for action in actions:
        if isinstance(action, Rename):
            new_name = action.name
            continue

        if isinstance(action, MkDir):
            lines.append(f"mkdir -p {quote(action.path)}")
            continue

        if isinstance(action, Move):
            target = Path(action.destination) / new_name if new_name else action.destination
            lines.append(f"mv {quote(action.path)} {quote(target)}")
        elif isinstance(action, Skip) and new_name:
            lines.append(f"mv {quote(action.path)} {quote(Path(action.path).with_name(new_name))}")
        elif isinstance(action, Delete):
            lines.append(f"rm {quote(action.path)}")
        new_name = None

    return lines


def render_script(actions: Iterable[Action]) -> str:
    """Render the whole script as text, without a trailing newline."""
    return "\n".join(render_lines(actions))


def write_script(actions: Iterable[Action], output: Path) -> None:
    """
    Write the script, replacing any previous content.

    Args:
        actions: Action log in recorded order
        output: Destination file

    Raises:
        ScriptWriteError: If the file cannot be created or written
    """
    script = render_script(actions)
    try:
        with open(output, 'w', encoding='utf-8') as f:
            f.write(script)
        logger.info(f"Wrote script to {output}")
    except OSError as e:
        logger.error(f"Failed to write script {output}: {e}")
        raise ScriptWriteError(f"Failed to write {output}: {e}") from e

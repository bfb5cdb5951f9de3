"""Discovery of images to review."""
import os
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple

from PIL import Image

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ('.jpg', '.jpeg', '.png')
# Pillow reports multi-picture JPEGs from cameras and phones as MPO
IMAGE_MIME_TYPES = {
    "JPEG": "image/jpeg",
    "MPO": "image/jpeg",
    "PNG": "image/png",
}
MAX_IMAGES_PER_ROOT = 500


def parse_images(
    roots: Iterable[Path],
    recurse: bool = False,
    limit: int = MAX_IMAGES_PER_ROOT
) -> List[Path]:
    """
    Collect images from every root, in root order.

    Each root gets its own budget of ``limit`` images. A path found under
    more than one root is kept at its first position only.

    Args:
        roots: Directories to scan
        recurse: Descend into subdirectories below each root
        limit: Maximum number of images collected per root

    Returns:
        Image paths in discovery order
    """
    images: List[Path] = []
    seen: Set[str] = set()

    for root in roots:
        found, _ = discover_images(Path(root), recurse, limit)
        if len(found) >= limit:
            logger.warning(f"Stopped scanning {root} after {limit} images")
        logger.info(f"Found {len(found)} images in {root}")

        for path in found:
            key = os.path.abspath(path)
            if key in seen:
                continue
            seen.add(key)
            images.append(path)

    return images


def discover_images(
    path: Path,
    recurse: bool,
    budget: int,
    expand: bool = True,
    visited: Optional[Set[Path]] = None
) -> Tuple[List[Path], int]:
    """
    Walk one directory for images.

    A root is always expanded one level: its own entries and those of its
    direct subdirectories are listed. Deeper levels are only entered when
    ``recurse`` is set. Unreadable or missing directories
    yield nothing. Entries come in the order the filesystem lists them.

    Args:
        path: Directory to walk
        recurse: Descend into subdirectories at every level
        budget: Number of images this walk may still collect
        expand: Enter direct subdirectories even without ``recurse``
        visited: Resolved directories already walked for the same root

    Returns:
        (images found, remaining budget)
    """
    if visited is None:
        visited = set()

    try:
        real = path.resolve()
        if real in visited:
            return [], budget
        visited.add(real)
        entries = list(path.iterdir())
    except OSError as e:
        logger.debug(f"Skipping {path}: {e}")
        return [], budget

    images: List[Path] = []
    for entry in entries:
        if budget <= 0:
            break

        try:
            entry_is_dir = entry.is_dir()
        except OSError:
            continue

        if entry_is_dir:
            if expand or recurse:
                found, budget = discover_images(entry, recurse, budget, False, visited)
                images.extend(found)
        elif is_image(entry):
            images.append(entry)
            budget -= 1

    return images, budget


def is_image(file: Path) -> bool:
    """
    Check whether a file is a JPEG or PNG image.

    The extension is checked first, case-insensitively; the content is
    then identified from the file header.

    Args:
        file: File to check

    Returns:
        True if the file looks like and is a JPEG or PNG image
    """
    if file.suffix.lower() not in IMAGE_EXTENSIONS:
        return False

    try:
        with Image.open(file, formats=('JPEG', 'PNG')) as image:
            mime = IMAGE_MIME_TYPES.get(image.format)
    except Exception as e:
        logger.debug(f"Not an image {file}: {e}")
        return False

    return mime is not None

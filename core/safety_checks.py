"""
safety_checks.py - Safety Check Module

Provides the structural checks run before any file is copied, and the
cleanup of a destination directory whose output was rejected
"""

from pathlib import Path
from typing import Iterable, Tuple, Optional
import logging
import os

logger = logging.getLogger(__name__)


class StructuralError(RuntimeError):
    """A run cannot start or continue (unreadable source, unwritable target...)"""


def check_source(path: Path) -> Path:
    """
    Check that the source directory exists and can be listed

    Args:
        path: Source directory

    Returns:
        The resolved path

    Raises:
        StructuralError
    """
    path = Path(path)
    if not path.is_dir():
        raise StructuralError(f"Directory does not exist: {path}")
    if not os.access(path, os.R_OK | os.X_OK):
        raise StructuralError(f"Directory is not readable: {path}")
    return path.resolve()


def check_writable(path: Path) -> Tuple[bool, Optional[str]]:
    """
    Check if a directory can be written to, or created

    Args:
        path: Directory to check

    Returns:
        (is_writable, error_reason)
    """
    path = Path(path)
    if path.exists():
        if not path.is_dir():
            return False, f"Not a directory: {path}"
        if not os.access(path, os.W_OK):
            return False, f"Directory is not writable: {path}"
        return True, None

    # Walk up to the nearest existing parent
    parent = path.parent
    while not parent.exists() and parent != parent.parent:
        parent = parent.parent
    if not os.access(parent, os.W_OK):
        return False, f"Directory is not writable: {parent}"
    return True, None


def prepare_target(path: Path) -> bool:
    """
    Create the destination directory if needed

    Args:
        path: Destination directory

    Returns:
        Whether this call created it

    Raises:
        StructuralError
    """
    path = Path(path)
    valid, error = check_writable(path)
    if not valid:
        raise StructuralError(error)

    created = not path.exists()
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StructuralError(f"Cannot create directory {path}: {e}") from e
    return created


def check_name_encodable(name: str) -> None:
    """Raise StructuralError when a filename cannot be represented as text"""
    try:
        name.encode('utf-8')
    except UnicodeEncodeError as e:
        raise StructuralError(
            f"Filename is not valid text: {name.encode('utf-8', 'surrogateescape')!r}"
        ) from e


def discard_written(paths: Iterable[Path]) -> int:
    """
    Delete files written by a rejected run (best effort)

    Returns:
        Number of files removed
    """
    count = 0
    for path in paths:
        try:
            Path(path).unlink()
            count += 1
        except FileNotFoundError:
            continue
        except OSError as e:
            logger.warning("Could not remove %s: %s", path, e)
    return count


def remove_if_empty(path: Path) -> bool:
    """Remove a directory when it holds nothing (best effort)"""
    path = Path(path)
    try:
        path.rmdir()
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.debug("Keeping %s: %s", path, e)
        return False

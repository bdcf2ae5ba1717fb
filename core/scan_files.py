"""
scan_files.py - Directory Listing Module

Takes the one-pass snapshot of the source directory a run works on
"""

from pathlib import Path
from typing import List, Iterable
import os

from .models_fs import FileEntry
from .safety_checks import StructuralError, check_source, check_name_encodable


def scan_directory(directory: Path) -> List[FileEntry]:
    """
    List a single directory (non-recursive)

    Subdirectories are included; classification decides what to skip.
    The listing is read once and is not refreshed during the run.

    Args:
        directory: Source directory

    Returns:
        Entries in listing order

    Raises:
        StructuralError: when the directory cannot be read or a filename
            is not representable as text
    """
    directory = check_source(directory)

    results: List[FileEntry] = []
    try:
        with os.scandir(directory) as it:
            for item in it:
                check_name_encodable(item.name)
                results.append(FileEntry.from_dir_entry(item))
    except StructuralError:
        raise
    except OSError as e:
        raise StructuralError(f"Error reading directory {directory}: {e}") from e

    return results


def list_extensions(entries: Iterable[FileEntry]) -> List[str]:
    """
    List distinct file extensions, for extension selection

    Args:
        entries: Directory entries

    Returns:
        Extensions in first-seen order, without the leading dot
    """
    extensions: List[str] = []
    for entry in entries:
        if entry.is_dir:
            continue
        if entry.extension not in extensions:
            extensions.append(entry.extension)
    return extensions

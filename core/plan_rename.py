"""
plan_rename.py - Naming Policy Module

Responsibilities:
- Render the modification timestamp of an entry
- Assemble the destination filename from ordered segments
- Build the preview listing (names only, nothing copied)

Everything here is pure except preview_items, which only checks existence.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Iterable, Union, Set, Tuple

from .models_fs import (
    FileEntry, NamingOptions, Position, NAME_DELIMITER, split_name
)
from .text_match import sanitize_filename


class SegmentKind(Enum):
    """Parts a destination stem is built from"""
    TIMESTAMP = "timestamp"
    USER_TEXT = "user_text"
    ORIGINAL = "original"


@dataclass(frozen=True)
class Segment:
    """One named piece of a destination stem"""
    kind: SegmentKind
    text: str


@dataclass(frozen=True)
class PreviewItem:
    """One line of a dry-run listing"""
    src: Path
    dst: Path
    exists: bool


def timestamp_format(naming: NamingOptions) -> str:
    """strftime format used for the built-in timestamp styles"""
    sep = naming.word_separator.value
    if naming.date_only:
        return "%Y-%m-%d"
    if naming.twelve_hour_clock:
        return f"%Y-%m-%d{sep}%I-%M-%S-%p"
    return f"%Y-%m-%d{sep}%H-%M-%S"


def format_timestamp(mtime: float, naming: NamingOptions) -> str:
    """
    Render a modification time in local time

    A custom format wins over every other option and is sanitized after
    rendering, since it may produce path separators or colons.
    """
    moment = datetime.fromtimestamp(mtime)
    if naming.custom_format:
        return sanitize_filename(moment.strftime(naming.custom_format))
    return moment.strftime(timestamp_format(naming))


def build_segments(name: str, mtime: float, naming: NamingOptions) -> List[Segment]:
    """
    Order the stem segments for one file

    Args:
        name: Original filename
        mtime: Modification time
        naming: Naming policy

    Returns:
        Segments in output order (empty ones included)
    """
    stem, _, _ = split_name(name)

    user_text = ""
    if naming.user_text is not None:
        user_text = sanitize_filename(naming.user_text.strip())

    original = sanitize_filename(stem) if naming.keeps_original_name else ""

    timestamp = Segment(SegmentKind.TIMESTAMP, format_timestamp(mtime, naming))
    user = Segment(SegmentKind.USER_TEXT, user_text)
    orig = Segment(SegmentKind.ORIGINAL, original)

    if naming.user_text_position is Position.PREFIX:
        name_part = [user, orig]
    else:
        name_part = [orig]

    if naming.date_first:
        segments = [timestamp] + name_part
    else:
        segments = name_part + [timestamp]

    if naming.user_text_position is Position.SUFFIX:
        segments.append(user)

    return segments


def join_segments(segments: Iterable[Segment], delimiter: str = NAME_DELIMITER) -> str:
    """Join non-empty segments with a single delimiter"""
    stem = ""
    for segment in segments:
        if not segment.text:
            continue
        stem = f"{stem}{delimiter}{segment.text}" if stem else segment.text
    return stem


def destination_name(
    entry: Union[FileEntry, str],
    mtime: float,
    naming: NamingOptions
) -> str:
    """
    Compute the destination filename for an entry

    Args:
        entry: FileEntry or original filename
        mtime: Modification time (timestamp)
        naming: Naming policy

    Returns:
        New filename, extension preserved
    """
    name = entry.name if isinstance(entry, FileEntry) else entry
    _, extension, _ = split_name(name)

    stem = join_segments(build_segments(name, mtime, naming))
    extension = sanitize_filename(extension)
    if extension:
        return f"{stem}.{extension}"
    return stem


def preview_items(pairs: Iterable[Tuple[Path, Path]]) -> List[PreviewItem]:
    """
    Flag the (src, dst) pairs of a dry run

    An item is flagged when its destination already exists on disk or
    repeats an earlier item of the same listing.
    """
    items: List[PreviewItem] = []
    seen: Set[Path] = set()
    for src, dst in pairs:
        exists = dst in seen or dst.exists()
        seen.add(dst)
        items.append(PreviewItem(src=src, dst=dst, exists=exists))
    return items

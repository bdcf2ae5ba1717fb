"""
select_rules.py - Selection Rules Module

Decides which directory entries take part in a run
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional
import mimetypes

from .models_fs import FileEntry, RunConfig, RunCounters, SelectionMode


MediaTypeLookup = Callable[[str], Optional[str]]


class SkipReason(Enum):
    """Why an entry was left out"""
    IS_DIRECTORY = "is a directory"
    EXTENSION_NOT_SELECTED = "extension not selected"
    NOT_AN_IMAGE = "not an image"


@dataclass(frozen=True)
class Decision:
    """Outcome of classifying one entry"""
    eligible: bool
    reason: Optional[SkipReason] = None


ELIGIBLE = Decision(eligible=True)


def guess_media_type(name: str) -> Optional[str]:
    """Best-effort media type from the filename alone"""
    media_type, _ = mimetypes.guess_type(name, strict=False)
    return media_type


def is_image_type(media_type: Optional[str]) -> bool:
    if not media_type:
        return False
    return media_type.split('/', 1)[0] == "image"


def classify_entry(
    entry: FileEntry,
    config: RunConfig,
    counters: Optional[RunCounters] = None,
    media_type: MediaTypeLookup = guess_media_type
) -> Decision:
    """
    Classify one entry against the selection policy

    Args:
        entry: Directory entry
        config: Run configuration
        counters: Run counters; `total` grows by one for each eligible entry
        media_type: Filename -> media type lookup

    Returns:
        Decision
    """
    if entry.is_dir:
        return Decision(eligible=False, reason=SkipReason.IS_DIRECTORY)

    if config.selection is SelectionMode.EXTENSIONS:
        if entry.extension not in config.extensions:
            return Decision(eligible=False, reason=SkipReason.EXTENSION_NOT_SELECTED)
    elif config.selection is SelectionMode.IMAGES:
        if not is_image_type(media_type(entry.name)):
            return Decision(eligible=False, reason=SkipReason.NOT_AN_IMAGE)

    if counters is not None:
        counters.add_total()
    return ELIGIBLE

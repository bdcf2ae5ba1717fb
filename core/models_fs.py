"""
models_fs.py - Core Data Structure Definitions

Contains:
- FileEntry: One directory entry taken from the source listing
- NamingOptions: How destination names are assembled
- RunConfig: Immutable configuration of one run
- RunCounters: Thread-safe counters and destination registry shared by workers
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, FrozenSet, Set, List, Iterable
from enum import Enum
import os
import threading


# Defaults
MAX_CONCURRENCY = 15
RETRY_ATTEMPTS = 3
RETRY_DELAY = 0.1           # Seconds between copy attempts
DEFAULT_TARGET = "renamed"
NAME_DELIMITER = "-"        # Glue between name segments


class SelectionMode(Enum):
    """Which entries of the source directory take part in a run"""
    ALL = "all"                 # Every regular file
    EXTENSIONS = "extensions"   # Files whose extension was selected
    IMAGES = "images"           # Files whose media type is image/*


class Position(Enum):
    """Placement of a name segment relative to the timestamp"""
    PREFIX = "prefix"
    SUFFIX = "suffix"


class WordSeparator(Enum):
    """Character between the date and time parts of a timestamp"""
    UNDERSCORE = "_"
    SPACE = " "


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry for copy operations"""
    attempts: int = RETRY_ATTEMPTS
    delay: float = RETRY_DELAY

    def __post_init__(self):
        if self.attempts < 1:
            raise ValueError("Retry attempts must be at least 1")
        if self.delay < 0:
            raise ValueError("Retry delay cannot be negative")


@dataclass(frozen=True)
class NamingOptions:
    """Naming policy configuration"""
    # Original filename
    include_original_name: bool = False     # Explicitly keep it (the default)
    omit_original_name: bool = False        # Drop it from the new name
    original_name_position: Position = Position.PREFIX  # SUFFIX puts the date first

    # Custom text
    user_text: Optional[str] = None
    user_text_position: Position = Position.PREFIX

    # Timestamp rendering
    date_only: bool = False
    twelve_hour_clock: bool = False
    word_separator: WordSeparator = WordSeparator.UNDERSCORE
    custom_format: Optional[str] = None     # strftime format, wins over the above

    def __post_init__(self):
        if self.include_original_name and self.omit_original_name:
            raise ValueError("Cannot both keep and omit the original name")
        if self.date_only and self.twelve_hour_clock:
            raise ValueError("Date-only names have no clock to render")

    @property
    def keeps_original_name(self) -> bool:
        return not self.omit_original_name

    @property
    def date_first(self) -> bool:
        """Whether the timestamp leads the original name"""
        return self.original_name_position is Position.SUFFIX


@dataclass(frozen=True)
class RunConfig:
    """Configuration of one rename-and-copy run, built once before it starts"""
    source: Path = field(default_factory=Path.cwd)
    target: Path = Path(DEFAULT_TARGET)
    selection: SelectionMode = SelectionMode.IMAGES
    extensions: FrozenSet[str] = frozenset()
    naming: NamingOptions = field(default_factory=NamingOptions)
    preview: bool = False
    max_workers: int = MAX_CONCURRENCY
    retry: RetryPolicy = field(default_factory=RetryPolicy)

    def __post_init__(self):
        # Normalize without breaking immutability
        object.__setattr__(self, "source", Path(self.source))
        object.__setattr__(self, "target", Path(self.target))
        object.__setattr__(self, "extensions", normalize_extensions(self.extensions))

        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if self.selection is SelectionMode.EXTENSIONS and not self.extensions:
            raise ValueError("Extension selection needs at least one extension")

    @property
    def noun(self) -> str:
        """Word used in the summary line"""
        return "Images" if self.selection is SelectionMode.IMAGES else "Files"


def normalize_extensions(extensions: Iterable[str]) -> FrozenSet[str]:
    """
    Strip surrounding whitespace and a single leading dot from each extension

    The empty string is kept: it selects files that have no extension.
    """
    result = set()
    for ext in extensions:
        ext = ext.strip()
        if ext.startswith('.'):
            ext = ext[1:]
        result.add(ext)
    return frozenset(result)


def split_name(name: str):
    """
    Split a filename into (stem, extension, is_dotfile)

    A leading-dot name treats everything after the dot as its extension,
    so ".gitignore" -> ("", "gitignore", True) and ".config.json" ->
    ("", "config.json", True).
    """
    if name.startswith('.') and len(name) > 1:
        return "", name[1:], True

    stem, dot, extension = name.rpartition('.')
    if not dot or not stem:
        return name, "", False
    return stem, extension, False


@dataclass(frozen=True)
class FileEntry:
    """One entry of the source directory listing"""
    path: Path                      # Full path
    name: str                       # Filename, leading dot included
    is_dir: bool                    # Directory (never renamed)
    mtime: float                    # Modification time (timestamp)

    @property
    def stem(self) -> str:
        return split_name(self.name)[0]

    @property
    def extension(self) -> str:
        return split_name(self.name)[1]

    @classmethod
    def from_dir_entry(cls, entry: os.DirEntry) -> "FileEntry":
        """Create FileEntry from an os.scandir() entry"""
        return cls(
            path=Path(entry.path),
            name=entry.name,
            is_dir=entry.is_dir(),
            mtime=entry.stat().st_mtime,
        )


class Claim(Enum):
    """Result of reserving a destination path"""
    GRANTED = "granted"         # Free to copy
    DUPLICATE = "duplicate"     # Path already taken
    ABANDONED = "abandoned"     # Run already invalidated by a duplicate


@dataclass(frozen=True)
class FileCount:
    """Final counters of a run"""
    renamed: int = 0
    total: int = 0
    duplicate: int = 0


class RunCounters:
    """
    Run-scoped state shared by all workers of one run

    Holds the total/renamed/duplicate counters and the registry of
    destination paths claimed so far. All mutation goes through one lock.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.total = 0
        self.renamed = 0
        self.duplicate = 0
        self._claimed: Set[Path] = set()
        self._written: List[Path] = []

    def add_total(self) -> None:
        with self._lock:
            self.total += 1

    def add_renamed(self, dst: Path) -> None:
        with self._lock:
            self.renamed += 1
            self._written.append(dst)

    @property
    def has_duplicates(self) -> bool:
        with self._lock:
            return self.duplicate > 0

    def claim_destination(self, dst: Path) -> Claim:
        """
        Reserve a destination path for one worker

        A path that exists on disk or was already claimed by a sibling is
        counted as a duplicate. Once any duplicate is seen, every later
        claim is abandoned; its path is still registered so repeats of it
        keep being counted.
        """
        with self._lock:
            if dst in self._claimed or dst.exists():
                self.duplicate += 1
                return Claim.DUPLICATE
            self._claimed.add(dst)
            if self.duplicate > 0:
                return Claim.ABANDONED
            return Claim.GRANTED

    @property
    def written(self) -> List[Path]:
        """Destination files written by this run"""
        with self._lock:
            return list(self._written)

    def snapshot(self) -> FileCount:
        with self._lock:
            return FileCount(
                renamed=self.renamed,
                total=self.total,
                duplicate=self.duplicate,
            )

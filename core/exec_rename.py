"""
exec_rename.py - Rename-and-Copy Execution Module

Responsibilities:
- Bounded concurrency (one job per directory entry, at most 15 in flight)
- Destination collision handling (any duplicate invalidates the run)
- Copy with bounded retry
- Final report once every job has finished
"""

from pathlib import Path
from typing import List, Tuple, Optional, Callable, Iterable, Sequence, TypeVar
from dataclasses import dataclass, field
from concurrent.futures import ThreadPoolExecutor, as_completed
from enum import Enum
import logging
import shutil
import threading
import time

from .models_fs import (
    FileEntry, RunConfig, RunCounters, RetryPolicy, FileCount, Claim,
    SelectionMode, MAX_CONCURRENCY
)
from .plan_rename import PreviewItem, destination_name, preview_items
from .scan_files import scan_directory
from .select_rules import SkipReason, MediaTypeLookup, classify_entry, guess_media_type
from .safety_checks import prepare_target, discard_written, remove_if_empty
from .text_match import is_valid_filename

logger = logging.getLogger(__name__)

T = TypeVar("T")

ProgressCallback = Callable[[int, int, str], None]


class EntryStatus(Enum):
    """Terminal state of one per-entry job"""
    SKIPPED = "skipped"         # Rejected by the selection policy
    PREVIEWED = "previewed"     # Name computed, nothing written
    DUPLICATE = "duplicate"     # Destination already taken
    ABANDONED = "abandoned"     # Run invalidated by another duplicate
    RENAMED = "renamed"         # Copied
    FAILED = "failed"           # Copy failed after all retries


@dataclass(frozen=True)
class EntryResult:
    """Result of processing one directory entry"""
    entry: FileEntry
    status: EntryStatus
    dst: Optional[Path] = None
    reason: Optional[SkipReason] = None
    error: str = ""


class RunOutcome(Enum):
    """How a run ended"""
    COMPLETED = "completed"
    PREVIEW = "preview"
    DUPLICATES = "duplicates"
    NOTHING_SELECTED = "nothing_selected"
    NOTHING_FOUND = "nothing_found"
    NO_IMAGES = "no_images"


@dataclass
class RunReport:
    """Aggregated result of a run"""
    outcome: RunOutcome
    counts: FileCount
    elapsed: float
    noun: str = "Files"
    preview: List[PreviewItem] = field(default_factory=list)
    failed: List[Tuple[Path, str]] = field(default_factory=list)  # (src, error_msg)
    discarded: int = 0

    @property
    def ok(self) -> bool:
        return self.outcome is not RunOutcome.DUPLICATES

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    def summary(self) -> str:
        """Generate summary"""
        counts = self.counts
        if self.outcome is RunOutcome.PREVIEW:
            if counts.duplicate > 0:
                return f"{counts.duplicate} Files would be overwritten with the current options."
            return f"{counts.total} {self.noun} would be renamed"
        if self.outcome is RunOutcome.DUPLICATES:
            return (f"{counts.duplicate} Duplicate names were skipped. "
                    f"Renamed files were discarded.")
        if self.outcome is RunOutcome.NOTHING_SELECTED:
            return "No files selected"
        if self.outcome is RunOutcome.NOTHING_FOUND:
            return "No files found"
        if self.outcome is RunOutcome.NO_IMAGES:
            return "No images found. (Use '-a' or '--all' to rename any files found)"
        return (f"{counts.renamed}/{counts.total} {self.noun} renamed in "
                f"{format_duration(self.elapsed)}")


def format_duration(seconds: float) -> str:
    """Short human-readable duration"""
    if seconds < 1:
        return f"{seconds * 1000:.2f}ms"
    if seconds < 60:
        return f"{seconds:.2f}s"
    minutes, seconds = divmod(int(seconds), 60)
    return f"{minutes}m {seconds}s"


class SlotPool:
    """
    Concurrency ceiling for per-entry jobs

    Use as a context manager around one job. Tracks how many jobs hold a
    slot right now and the highest number seen.
    """

    def __init__(self, limit: int = MAX_CONCURRENCY):
        self.limit = limit
        self._semaphore = threading.BoundedSemaphore(limit)
        self._lock = threading.Lock()
        self.in_flight = 0
        self.peak = 0

    def __enter__(self) -> "SlotPool":
        self._semaphore.acquire()
        with self._lock:
            self.in_flight += 1
            if self.in_flight > self.peak:
                self.peak = self.in_flight
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        with self._lock:
            self.in_flight -= 1
        self._semaphore.release()
        return False


def retry_call(
    func: Callable[[], T],
    policy: RetryPolicy,
    sleep: Callable[[float], None] = time.sleep
) -> T:
    """
    Call func, retrying on OSError

    Args:
        func: Operation to run
        policy: Number of attempts and delay between them
        sleep: Delay function

    Returns:
        func's return value

    Raises:
        OSError: the last failure once all attempts are used
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            return func()
        except OSError as e:
            if attempt >= policy.attempts:
                raise
            logger.debug("Attempt %d/%d failed: %s", attempt, policy.attempts, e)
            sleep(policy.delay)


def copy_file(
    src: Path,
    dst: Path,
    policy: RetryPolicy,
    sleep: Callable[[float], None] = time.sleep
) -> Path:
    """Copy one file (content and timestamps) with bounded retry"""
    return retry_call(lambda: Path(shutil.copy2(src, dst)), policy, sleep)


def process_entry(
    entry: FileEntry,
    config: RunConfig,
    counters: RunCounters,
    slots: SlotPool,
    media_type: MediaTypeLookup = guess_media_type,
    sleep: Callable[[float], None] = time.sleep
) -> EntryResult:
    """
    Classify, name and copy one entry while holding a concurrency slot

    Args:
        entry: Directory entry
        config: Run configuration
        counters: Shared run counters
        slots: Concurrency ceiling
        media_type: Filename -> media type lookup
        sleep: Delay function used between copy attempts

    Returns:
        EntryResult
    """
    with slots:
        decision = classify_entry(entry, config, counters, media_type)
        if not decision.eligible:
            logger.debug("Skipping %s: %s", entry.name, decision.reason.value)
            return EntryResult(entry, EntryStatus.SKIPPED, reason=decision.reason)

        name = destination_name(entry, entry.mtime, config.naming)
        valid, error = is_valid_filename(name)
        if not valid:
            logger.error("Cannot name %s: %s", entry.path, error)
            return EntryResult(entry, EntryStatus.FAILED, error=error)

        dst = config.target / name

        if config.preview:
            return EntryResult(entry, EntryStatus.PREVIEWED, dst=dst)

        claim = counters.claim_destination(dst)
        if claim is Claim.DUPLICATE:
            logger.warning("%s already exists. Skipping.", dst)
            return EntryResult(entry, EntryStatus.DUPLICATE, dst=dst)
        if claim is Claim.ABANDONED or counters.has_duplicates:
            return EntryResult(entry, EntryStatus.ABANDONED, dst=dst)

        try:
            copy_file(entry.path, dst, config.retry, sleep)
        except OSError as e:
            logger.error("Max retries reached. Skipping file: %s (%s)", entry.path, e)
            # The claim makes this worker the only owner of dst
            discard_written([dst])
            return EntryResult(entry, EntryStatus.FAILED, dst=dst, error=str(e))

        counters.add_renamed(dst)
        return EntryResult(entry, EntryStatus.RENAMED, dst=dst)


def run_pipeline(
    config: RunConfig,
    entries: Optional[Iterable[FileEntry]] = None,
    media_type: MediaTypeLookup = guess_media_type,
    progress_callback: Optional[ProgressCallback] = None,
    sleep: Callable[[float], None] = time.sleep,
    slots: Optional[SlotPool] = None
) -> RunReport:
    """
    Run the rename-and-copy pipeline over one directory snapshot

    Args:
        config: Run configuration
        entries: Directory snapshot (listed from config.source when omitted)
        media_type: Filename -> media type lookup
        progress_callback: Progress callback (current, total, message)
        sleep: Delay function used between copy attempts
        slots: Concurrency ceiling (a new one of config.max_workers when omitted)

    Returns:
        RunReport

    Raises:
        StructuralError: the source cannot be listed or the target created
    """
    start = time.monotonic()

    if entries is None:
        entries = scan_directory(config.source)
    entries = list(entries)

    created_target = False
    if not config.preview:
        created_target = prepare_target(config.target)

    counters = RunCounters()
    if slots is None:
        slots = SlotPool(config.max_workers)

    results: List[Optional[EntryResult]] = [None] * len(entries)
    total = len(entries)

    with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
        futures = {
            executor.submit(process_entry, entry, config, counters, slots, media_type, sleep): i
            for i, entry in enumerate(entries)
        }
        for done, future in enumerate(as_completed(futures), start=1):
            result = future.result()
            results[futures[future]] = result
            if progress_callback:
                progress_callback(done, total, _progress_message(result))

    finished = [r for r in results if r is not None]
    return finalize_run(
        config,
        counters,
        finished,
        created_target=created_target,
        elapsed=time.monotonic() - start,
    )


def _progress_message(result: EntryResult) -> str:
    label = result.status.value.capitalize()
    if result.dst is None:
        return f"[{label}] {result.entry.name}"
    return f"[{label}] {result.entry.name} -> {result.dst.name}"


def finalize_run(
    config: RunConfig,
    counters: RunCounters,
    results: Sequence[EntryResult],
    created_target: bool = False,
    elapsed: float = 0.0
) -> RunReport:
    """
    Decide the outcome of a run from its final counters

    Must only be called after every job has finished. Cleans up the target
    directory when the run produced nothing or its output is invalid.
    """
    counts = counters.snapshot()
    failed = [(r.entry.path, r.error) for r in results if r.status is EntryStatus.FAILED]

    if config.preview:
        items = preview_items(
            (r.entry.path, r.dst) for r in results if r.status is EntryStatus.PREVIEWED
        )
        duplicates = sum(1 for item in items if item.exists)
        return RunReport(
            outcome=RunOutcome.PREVIEW,
            counts=FileCount(renamed=0, total=counts.total, duplicate=duplicates),
            elapsed=elapsed,
            noun=config.noun,
            preview=items,
            failed=failed,
        )

    report = RunReport(
        outcome=RunOutcome.COMPLETED,
        counts=counts,
        elapsed=elapsed,
        noun=config.noun,
        failed=failed,
    )

    if counts.duplicate > 0:
        report.outcome = RunOutcome.DUPLICATES
        report.discarded = discard_written(counters.written)
        logger.warning("%d duplicate names, discarded %d copied files",
                       counts.duplicate, report.discarded)
        if created_target:
            remove_if_empty(config.target)
    elif counts.renamed == 0:
        if config.selection is SelectionMode.EXTENSIONS:
            report.outcome = RunOutcome.NOTHING_SELECTED
        elif config.selection is SelectionMode.ALL:
            report.outcome = RunOutcome.NOTHING_FOUND
        else:
            report.outcome = RunOutcome.NO_IMAGES
        if created_target:
            remove_if_empty(config.target)

    return report

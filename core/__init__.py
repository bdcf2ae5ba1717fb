"""
core - createdat Core Module

Provides directory listing, selection, naming, and the concurrent
rename-and-copy pipeline.
"""

from .models_fs import (
    FileEntry,
    FileCount,
    RunConfig,
    RunCounters,
    NamingOptions,
    RetryPolicy,
    SelectionMode,
    Position,
    WordSeparator,
    Claim,
    MAX_CONCURRENCY,
    DEFAULT_TARGET,
)

from .scan_files import (
    scan_directory,
    list_extensions,
)

from .text_match import (
    is_valid_filename,
    sanitize_filename,
)

from .select_rules import (
    classify_entry,
    guess_media_type,
    Decision,
    SkipReason,
)

from .plan_rename import (
    format_timestamp,
    build_segments,
    destination_name,
    PreviewItem,
)

from .exec_rename import (
    run_pipeline,
    process_entry,
    finalize_run,
    retry_call,
    copy_file,
    SlotPool,
    RunReport,
    RunOutcome,
    EntryStatus,
)

from .safety_checks import (
    StructuralError,
    check_writable,
    prepare_target,
)

__all__ = [
    # Data models
    "FileEntry",
    "FileCount",
    "RunConfig",
    "RunCounters",
    "NamingOptions",
    "RetryPolicy",
    "SelectionMode",
    "Position",
    "WordSeparator",
    "Claim",
    "MAX_CONCURRENCY",
    "DEFAULT_TARGET",

    # Listing
    "scan_directory",
    "list_extensions",

    # Text processing
    "is_valid_filename",
    "sanitize_filename",

    # Selection
    "classify_entry",
    "guess_media_type",
    "Decision",
    "SkipReason",

    # Naming
    "format_timestamp",
    "build_segments",
    "destination_name",
    "PreviewItem",

    # Execution
    "run_pipeline",
    "process_entry",
    "finalize_run",
    "retry_call",
    "copy_file",
    "SlotPool",
    "RunReport",
    "RunOutcome",
    "EntryStatus",

    # Safety checks
    "StructuralError",
    "check_writable",
    "prepare_target",
]

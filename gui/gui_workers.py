"""
gui_workers.py - GUI Worker Threads

Runs directory listing and the rename pipeline off the UI thread
"""

from pathlib import Path
from typing import List, Optional

from PySide6.QtCore import QThread, Signal, QObject

from core import FileEntry, RunConfig, scan_directory, list_extensions, run_pipeline


class ScanWorker(QThread):
    """Directory listing worker thread"""

    # Signals
    finished = Signal(list, list)   # Complete, returns entries and extensions
    error = Signal(str)             # Error message

    def __init__(self, directory: Path, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.directory = directory

    def run(self):
        try:
            entries = scan_directory(self.directory)
            self.finished.emit(entries, list_extensions(entries))
        except Exception as e:
            self.error.emit(str(e))


class RenameWorker(QThread):
    """Rename-and-copy worker thread (also used for previews)"""

    # Signals
    progress = Signal(int, int, str)    # current, total, message
    finished = Signal(object)           # RunReport
    error = Signal(str)                 # Error message

    def __init__(
        self,
        config: RunConfig,
        entries: Optional[List[FileEntry]] = None,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.config = config
        self.entries = entries  # Snapshot from the last scan, relisted when None

    def run(self):
        try:
            def progress_callback(current: int, total: int, msg: str):
                self.progress.emit(current, total, msg)

            report = run_pipeline(
                self.config,
                entries=self.entries,
                progress_callback=progress_callback,
            )
            self.finished.emit(report)
        except Exception as e:
            self.error.emit(str(e))

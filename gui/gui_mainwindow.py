"""
gui_mainwindow.py - GUI Main Window

One panel: pick a source folder, choose which files and how to name
them, preview the new names, then copy.
"""

from pathlib import Path
from typing import Optional, List

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QLabel, QLineEdit, QPushButton, QCheckBox, QComboBox, QListWidget,
    QListWidgetItem, QTableWidget, QTableWidgetItem, QProgressBar,
    QFileDialog, QMessageBox, QHeaderView, QGroupBox
)
from PySide6.QtCore import Qt, Slot
from PySide6.QtGui import QColor

from core import (
    FileEntry, RunConfig, RunReport, RunOutcome, NamingOptions,
    SelectionMode, Position, WordSeparator, DEFAULT_TARGET
)
from .gui_workers import ScanWorker, RenameWorker


SELECTION_MODES = [
    ("Images", SelectionMode.IMAGES),
    ("All Files", SelectionMode.ALL),
    ("Selected Extensions", SelectionMode.EXTENSIONS),
]


class RenamePanel(QWidget):
    """Copy-and-rename panel"""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.entries: List[FileEntry] = []
        self.scanned_source: Optional[Path] = None  # Directory self.entries was listed from
        self.scan_worker: Optional[ScanWorker] = None
        self.rename_worker: Optional[RenameWorker] = None

        self._init_ui()

    def _init_ui(self):
        layout = QVBoxLayout(self)

        # Folder settings group
        dir_group = QGroupBox("Folders")
        dir_layout = QGridLayout(dir_group)

        dir_layout.addWidget(QLabel("Source:"), 0, 0)
        self.source_edit = QLineEdit()
        self.source_edit.setText(str(Path.cwd()))
        dir_layout.addWidget(self.source_edit, 0, 1)
        self.browse_btn = QPushButton("Browse...")
        self.browse_btn.clicked.connect(self._browse_source)
        dir_layout.addWidget(self.browse_btn, 0, 2)

        dir_layout.addWidget(QLabel("Target:"), 1, 0)
        self.target_edit = QLineEdit()
        self.target_edit.setPlaceholderText(f"Default: {DEFAULT_TARGET}")
        dir_layout.addWidget(self.target_edit, 1, 1)
        self.target_btn = QPushButton("Browse...")
        self.target_btn.clicked.connect(self._browse_target)
        dir_layout.addWidget(self.target_btn, 1, 2)

        self.scan_btn = QPushButton("Scan")
        self.scan_btn.clicked.connect(self._do_scan)
        dir_layout.addWidget(self.scan_btn, 2, 0, 1, 3)

        layout.addWidget(dir_group)

        # Selection group
        select_group = QGroupBox("Files to Rename")
        select_layout = QGridLayout(select_group)

        select_layout.addWidget(QLabel("Select:"), 0, 0)
        self.selection_combo = QComboBox()
        self.selection_combo.addItems([label for label, _ in SELECTION_MODES])
        self.selection_combo.currentIndexChanged.connect(self._on_selection_changed)
        select_layout.addWidget(self.selection_combo, 0, 1)

        self.extension_list = QListWidget()
        self.extension_list.setMaximumHeight(90)
        self.extension_list.setEnabled(False)
        select_layout.addWidget(self.extension_list, 1, 0, 1, 2)

        layout.addWidget(select_group)

        # Naming settings group
        name_group = QGroupBox("Naming Settings")
        name_layout = QGridLayout(name_group)

        name_layout.addWidget(QLabel("Custom Text:"), 0, 0)
        self.text_edit = QLineEdit()
        self.text_edit.setPlaceholderText("Optional, e.g. holiday")
        name_layout.addWidget(self.text_edit, 0, 1, 1, 2)

        name_layout.addWidget(QLabel("Date Format:"), 1, 0)
        self.format_edit = QLineEdit()
        self.format_edit.setPlaceholderText("Optional strftime format, e.g. %a %b %d %Y")
        name_layout.addWidget(self.format_edit, 1, 1, 1, 2)

        self.front_check = QCheckBox("Date in Front")
        self.suffix_check = QCheckBox("Custom Text After Date")
        self.no_name_check = QCheckBox("Remove Original Name")
        self.twelve_check = QCheckBox("12-Hour Clock")
        self.date_check = QCheckBox("Date Only")
        self.space_check = QCheckBox("Space Between Date and Time")
        self.twelve_check.toggled.connect(lambda on: on and self.date_check.setChecked(False))
        self.date_check.toggled.connect(lambda on: on and self.twelve_check.setChecked(False))

        name_layout.addWidget(self.front_check, 2, 0)
        name_layout.addWidget(self.suffix_check, 2, 1)
        name_layout.addWidget(self.no_name_check, 2, 2)
        name_layout.addWidget(self.twelve_check, 3, 0)
        name_layout.addWidget(self.date_check, 3, 1)
        name_layout.addWidget(self.space_check, 3, 2)

        self.preview_btn = QPushButton("Preview")
        self.preview_btn.clicked.connect(self._do_preview)
        name_layout.addWidget(self.preview_btn, 4, 0, 1, 3)

        layout.addWidget(name_group)

        # Results table
        self.table = QTableWidget()
        self.table.setColumnCount(3)
        self.table.setHorizontalHeaderLabels(["Original Name", "New Name", "Status"])
        self.table.horizontalHeader().setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
        self.table.horizontalHeader().setSectionResizeMode(1, QHeaderView.ResizeMode.Stretch)
        self.table.horizontalHeader().setSectionResizeMode(2, QHeaderView.ResizeMode.ResizeToContents)
        self.table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        layout.addWidget(self.table, 1)

        # Progress and execution
        bottom_layout = QHBoxLayout()

        self.progress_bar = QProgressBar()
        self.progress_bar.setVisible(False)
        bottom_layout.addWidget(self.progress_bar, 1)

        self.execute_btn = QPushButton("Copy and Rename")
        self.execute_btn.clicked.connect(self._do_execute)
        self.execute_btn.setStyleSheet("QPushButton { background-color: #4CAF50; color: white; font-weight: bold; padding: 8px 16px; }")
        bottom_layout.addWidget(self.execute_btn)

        layout.addLayout(bottom_layout)

        # Status label
        self.status_label = QLabel("")
        layout.addWidget(self.status_label)

    def _browse_source(self):
        """Browse and select source directory"""
        directory = QFileDialog.getExistingDirectory(self, "Select Source Directory")
        if directory:
            self.source_edit.setText(directory)
            self._do_scan()

    def _browse_target(self):
        """Browse and select target directory"""
        directory = QFileDialog.getExistingDirectory(self, "Select Target Directory")
        if directory:
            self.target_edit.setText(directory)

    @Slot(int)
    def _on_selection_changed(self, index: int):
        mode = SELECTION_MODES[index][1]
        self.extension_list.setEnabled(mode is SelectionMode.EXTENSIONS)

    def _checked_extensions(self) -> List[str]:
        extensions = []
        for i in range(self.extension_list.count()):
            item = self.extension_list.item(i)
            if item.checkState() == Qt.CheckState.Checked:
                extensions.append(item.data(Qt.ItemDataRole.UserRole) or "")
        return extensions

    def collect_config(self, preview: bool) -> RunConfig:
        """
        Build the run configuration from the form

        Raises:
            ValueError: when the options are inconsistent
        """
        source = self.source_edit.text().strip()
        if not source:
            raise ValueError("Please select a source directory first")
        target = self.target_edit.text().strip() or DEFAULT_TARGET
        target_path = Path(target)
        if not target_path.is_absolute():
            target_path = Path(source) / target_path

        naming = NamingOptions(
            omit_original_name=self.no_name_check.isChecked(),
            original_name_position=Position.SUFFIX if self.front_check.isChecked() else Position.PREFIX,
            user_text=self.text_edit.text() or None,
            user_text_position=Position.SUFFIX if self.suffix_check.isChecked() else Position.PREFIX,
            date_only=self.date_check.isChecked(),
            twelve_hour_clock=self.twelve_check.isChecked(),
            word_separator=WordSeparator.SPACE if self.space_check.isChecked() else WordSeparator.UNDERSCORE,
            custom_format=self.format_edit.text() or None,
        )

        selection = SELECTION_MODES[self.selection_combo.currentIndex()][1]
        return RunConfig(
            source=Path(source),
            target=target_path,
            selection=selection,
            extensions=frozenset(self._checked_extensions()),
            naming=naming,
            preview=preview,
        )

    def snapshot_for(self, config: RunConfig) -> Optional[List[FileEntry]]:
        """Scanned entries, when they were listed from the configured source"""
        if self.scanned_source is not None and self.scanned_source == config.source:
            return self.entries
        return None

    def _set_busy(self, busy: bool):
        self.scan_btn.setEnabled(not busy)
        self.preview_btn.setEnabled(not busy)
        self.execute_btn.setEnabled(not busy)
        self.progress_bar.setVisible(busy)

    def _do_scan(self):
        """Execute scan"""
        directory = self.source_edit.text().strip()
        if not directory:
            QMessageBox.warning(self, "Warning", "Please select a directory first")
            return

        self.scanned_source = None
        self._set_busy(True)
        self.progress_bar.setRange(0, 0)  # Indeterminate progress

        self.scan_worker = ScanWorker(Path(directory))
        self.scan_worker.finished.connect(self._on_scan_finished)
        self.scan_worker.error.connect(self._on_worker_error)
        self.scan_worker.start()

    @Slot(list, list)
    def _on_scan_finished(self, entries: List[FileEntry], extensions: List[str]):
        """Scan complete"""
        self.entries = entries
        self.scanned_source = self.scan_worker.directory if self.scan_worker else None
        self._set_busy(False)

        self.extension_list.clear()
        for ext in extensions:
            item = QListWidgetItem(f".{ext}" if ext else "(no extension)")
            item.setData(Qt.ItemDataRole.UserRole, ext)
            item.setFlags(item.flags() | Qt.ItemFlag.ItemIsUserCheckable)
            item.setCheckState(Qt.CheckState.Unchecked)
            self.extension_list.addItem(item)

        files = [e for e in entries if not e.is_dir]
        self.table.setRowCount(len(files))
        for i, entry in enumerate(files):
            self.table.setItem(i, 0, QTableWidgetItem(entry.name))
            self.table.setItem(i, 1, QTableWidgetItem(""))
            self.table.setItem(i, 2, QTableWidgetItem(""))
        self.status_label.setText(f"Found {len(files)} files")

    def _start_run(self, preview: bool) -> bool:
        try:
            config = self.collect_config(preview)
        except ValueError as e:
            QMessageBox.warning(self, "Warning", str(e))
            return False

        self._set_busy(True)
        self.progress_bar.setRange(0, 0)

        self.rename_worker = RenameWorker(config, self.snapshot_for(config))
        self.rename_worker.progress.connect(self._on_rename_progress)
        self.rename_worker.finished.connect(self._on_rename_finished)
        self.rename_worker.error.connect(self._on_worker_error)
        self.rename_worker.start()
        return True

    def _do_preview(self):
        """Generate preview"""
        self._start_run(preview=True)

    def _do_execute(self):
        """Copy and rename"""
        reply = QMessageBox.question(
            self, "Confirm",
            "Copy the selected files into the target folder under their new names?\n\nOriginal files are not changed.",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No
        )
        if reply != QMessageBox.StandardButton.Yes:
            return
        self._start_run(preview=False)

    @Slot(int, int, str)
    def _on_rename_progress(self, current: int, total: int, msg: str):
        """Progress update"""
        self.progress_bar.setRange(0, total)
        self.progress_bar.setValue(current)
        self.status_label.setText(msg[-80:] if len(msg) > 80 else msg)

    @Slot(object)
    def _on_rename_finished(self, report: RunReport):
        """Run complete"""
        self._set_busy(False)

        if report.outcome is RunOutcome.PREVIEW:
            self._update_table_preview(report)
            self.status_label.setText(report.summary())
            return

        msg = report.summary()
        if report.failed:
            msg += "\n\nFailure Details:\n"
            for src, error in report.failed[:5]:
                msg += f"  {src.name}: {error}\n"
            if len(report.failed) > 5:
                msg += f"  ... and {len(report.failed) - 5} more failures"

        if report.outcome is RunOutcome.COMPLETED:
            QMessageBox.information(self, "Complete", msg)
        else:
            QMessageBox.warning(self, "Warning", msg)

        # Copies may have changed the folder, list it again next time
        self.scanned_source = None
        self.table.setRowCount(0)
        self.status_label.setText(report.summary())

    def _update_table_preview(self, report: RunReport):
        """Update table to display preview results"""
        self.table.setRowCount(len(report.preview))
        for i, item in enumerate(report.preview):
            self.table.setItem(i, 0, QTableWidgetItem(item.src.name))
            new_name_item = QTableWidgetItem(item.dst.name)
            if item.exists:
                new_name_item.setBackground(QColor(255, 220, 220))
                status_item = QTableWidgetItem("Duplicate")
                status_item.setForeground(QColor(200, 0, 0))
            else:
                status_item = QTableWidgetItem("Will Copy")
                status_item.setForeground(QColor(0, 150, 0))
            self.table.setItem(i, 1, new_name_item)
            self.table.setItem(i, 2, status_item)

    @Slot(str)
    def _on_worker_error(self, error: str):
        """Worker error"""
        self._set_busy(False)
        QMessageBox.critical(self, "Error", error)


class MainWindow(QMainWindow):
    """Main window"""

    def __init__(self):
        super().__init__()
        self.setWindowTitle("createdat")
        self.setMinimumSize(800, 600)

        self.panel = RenamePanel()
        self.setCentralWidget(self.panel)

        # Status bar
        self.statusBar().showMessage("Ready")

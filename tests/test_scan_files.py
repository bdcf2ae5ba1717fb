"""
Tests for directory listing, filename helpers and structural checks.
"""

import os

import pytest

from core import (
    StructuralError, scan_directory, list_extensions,
    is_valid_filename, sanitize_filename, check_writable, prepare_target,
)
from core.models_fs import split_name, normalize_extensions
from core.safety_checks import discard_written, remove_if_empty, check_name_encodable

from conftest import MTIME, touch


class TestScanDirectory:

    def test_lists_files_and_directories(self, source_dir):
        (source_dir / "nested").mkdir()
        entries = scan_directory(source_dir)
        by_name = {e.name: e for e in entries}
        assert set(by_name) == {"test.jpg", "test.mp4", ".gitignore", "nested"}
        assert by_name["nested"].is_dir
        assert not by_name["test.jpg"].is_dir
        assert by_name["test.jpg"].mtime == pytest.approx(MTIME)

    def test_does_not_recurse(self, source_dir):
        nested = source_dir / "nested"
        nested.mkdir()
        touch(nested / "inner.jpg")
        names = {e.name for e in scan_directory(source_dir)}
        assert "inner.jpg" not in names

    def test_missing_directory(self, tmp_path):
        with pytest.raises(StructuralError):
            scan_directory(tmp_path / "missing")

    def test_file_is_not_a_directory(self, source_dir):
        with pytest.raises(StructuralError):
            scan_directory(source_dir / "test.jpg")


def test_list_extensions(source_dir):
    (source_dir / "sub.dir").mkdir()
    touch(source_dir / "other.jpg")
    touch(source_dir / "README")
    extensions = list_extensions(scan_directory(source_dir))
    assert sorted(extensions) == ["", "gitignore", "jpg", "mp4"]


@pytest.mark.parametrize("filename, expected", [
    ("test.jpg", ("test", "jpg", False)),
    (".gitignore", ("", "gitignore", True)),
    (".config.json", ("", "config.json", True)),
    ("archive.tar.gz", ("archive.tar", "gz", False)),
    ("README", ("README", "", False)),
    ("trailing.", ("trailing", "", False)),
])
def test_split_name(filename, expected):
    assert split_name(filename) == expected


def test_dotfile_entry(source_dir):
    entry = next(e for e in scan_directory(source_dir) if e.name == ".gitignore")
    assert entry.extension == "gitignore"
    assert entry.stem == ""
    assert entry.mtime == pytest.approx(MTIME)


def test_normalize_extensions():
    assert normalize_extensions([".jpg", " png "]) == frozenset({"jpg", "png"})


def test_normalize_extensions_keeps_no_extension():
    assert normalize_extensions(["", ".", "jpg"]) == frozenset({"", "jpg"})


class TestFilenameText:

    def test_sanitize_removes_illegal_characters(self):
        assert sanitize_filename('a<b>c:d"e/f\\g|h?i*j') == "abcdefghij"

    def test_sanitize_removes_control_characters(self):
        assert sanitize_filename("a\x00b\x1fc") == "abc"

    def test_sanitize_reserved_names(self):
        assert sanitize_filename("CON") == ""
        assert sanitize_filename("..") == ""

    def test_sanitize_trailing_dots_and_spaces(self):
        assert sanitize_filename("name. . ") == "name"

    def test_sanitize_truncates_to_255_bytes(self):
        assert len(sanitize_filename("é" * 200).encode("utf-8")) <= 255

    def test_is_valid_filename(self):
        assert is_valid_filename("test-2024-07-17_10-30-00.jpg") == (True, None)
        assert not is_valid_filename("")[0]
        assert not is_valid_filename("a/b")[0]
        assert not is_valid_filename("x" * 256)[0]


class TestSafetyChecks:

    def test_prepare_target_creates(self, tmp_path):
        target = tmp_path / "out" / "nested"
        assert prepare_target(target) is True
        assert target.is_dir()
        assert prepare_target(target) is False

    def test_prepare_target_on_file(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        with pytest.raises(StructuralError):
            prepare_target(blocker)

    def test_check_writable(self, tmp_path):
        assert check_writable(tmp_path / "new")[0]

    @pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0,
                        reason="permission bits are not enforced")
    def test_check_writable_read_only(self, tmp_path):
        locked = tmp_path / "locked"
        locked.mkdir()
        locked.chmod(0o500)
        try:
            assert not check_writable(locked / "child")[0]
        finally:
            locked.chmod(0o700)

    def test_discard_written_and_remove_if_empty(self, tmp_path):
        target = tmp_path / "out"
        target.mkdir()
        written = [touch(target / "a.jpg"), touch(target / "b.jpg")]
        assert discard_written(written + [target / "gone.jpg"]) == 2
        assert remove_if_empty(target)
        assert not target.exists()

    def test_remove_if_empty_keeps_content(self, tmp_path):
        target = tmp_path / "out"
        target.mkdir()
        touch(target / "keep.jpg")
        assert not remove_if_empty(target)
        assert (target / "keep.jpg").exists()

    def test_undecodable_name(self):
        with pytest.raises(StructuralError):
            check_name_encodable("bad\udcffname.jpg")

"""
Tests for entry classification.
"""

from pathlib import Path

import pytest

from core import (
    FileEntry, RunConfig, RunCounters, SelectionMode, SkipReason,
    classify_entry, guess_media_type,
)

from conftest import MTIME


def entry(name, is_dir=False):
    return FileEntry(path=Path("/src") / name, name=name, is_dir=is_dir, mtime=MTIME)


def config(selection=SelectionMode.IMAGES, extensions=()):
    return RunConfig(source=Path("/src"), selection=selection, extensions=frozenset(extensions))


class TestClassifyEntry:

    @pytest.mark.parametrize("selection", list(SelectionMode))
    def test_directories_are_always_skipped(self, selection):
        cfg = config(selection, extensions={"photos"} if selection is SelectionMode.EXTENSIONS else ())
        decision = classify_entry(entry("photos", is_dir=True), cfg, media_type=lambda n: "image/png")
        assert not decision.eligible
        assert decision.reason is SkipReason.IS_DIRECTORY

    def test_images_mode_uses_media_type(self):
        cfg = config()
        assert classify_entry(entry("test.jpg"), cfg).eligible
        decision = classify_entry(entry("test.mp4"), cfg)
        assert decision.reason is SkipReason.NOT_AN_IMAGE

    def test_unknown_media_type_is_not_an_image(self):
        decision = classify_entry(entry(".gitignore"), config(), media_type=lambda n: None)
        assert not decision.eligible
        assert decision.reason is SkipReason.NOT_AN_IMAGE

    def test_injected_lookup(self):
        lookup = {"raw.cr3": "image/x-canon-cr3"}.get
        assert classify_entry(entry("raw.cr3"), config(), media_type=lookup).eligible
        assert not classify_entry(entry("a.jpg"), config(), media_type=lookup).eligible

    def test_all_mode_skips_media_lookup(self):
        def lookup(name):
            raise AssertionError("lookup must not be called")

        for name in ("test.mp4", ".gitignore", "README"):
            assert classify_entry(entry(name), config(SelectionMode.ALL), media_type=lookup).eligible

    def test_extension_mode(self):
        cfg = config(SelectionMode.EXTENSIONS, extensions={"jpg", ".gitignore"})
        assert classify_entry(entry("test.jpg"), cfg).eligible
        assert classify_entry(entry(".gitignore"), cfg).eligible
        decision = classify_entry(entry("test.mp4"), cfg)
        assert decision.reason is SkipReason.EXTENSION_NOT_SELECTED

    def test_empty_extension_selects_files_without_one(self):
        cfg = config(SelectionMode.EXTENSIONS, extensions={"", "jpg"})
        assert classify_entry(entry("README"), cfg).eligible
        assert classify_entry(entry("a.jpg"), cfg).eligible
        assert not classify_entry(entry("b.mp4"), cfg).eligible
        assert not classify_entry(entry(".gitignore"), cfg).eligible

    def test_extension_mode_is_case_sensitive(self):
        cfg = config(SelectionMode.EXTENSIONS, extensions={"jpg"})
        assert not classify_entry(entry("IMG.JPG"), cfg).eligible

    def test_eligible_entries_count_total_once(self):
        counters = RunCounters()
        cfg = config(SelectionMode.ALL)
        classify_entry(entry("a.jpg"), cfg, counters)
        classify_entry(entry("dir", is_dir=True), cfg, counters)
        classify_entry(entry("b.txt"), cfg, counters)
        assert counters.total == 2

    def test_idempotent(self):
        cfg = config()
        for name in ("a.png", "b.mp4", ".hidden"):
            assert classify_entry(entry(name), cfg) == classify_entry(entry(name), cfg)


def test_guess_media_type():
    assert guess_media_type("photo.jpeg") == "image/jpeg"
    assert guess_media_type("photo.PNG") == "image/png"
    assert guess_media_type(".gitignore") is None


def test_extension_mode_needs_extensions():
    with pytest.raises(ValueError):
        RunConfig(selection=SelectionMode.EXTENSIONS)

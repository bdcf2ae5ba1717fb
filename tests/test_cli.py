"""
Tests for the command-line entry point.
"""

import io

import pytest

from cli.cli_entry import main, create_parser, build_config
from core import SelectionMode, Position, WordSeparator

from conftest import MTIME, STAMP, touch


def run(*argv):
    return main(list(argv))


class TestBuildConfig:

    def parse(self, *argv):
        return build_config(create_parser().parse_args(list(argv)))

    def test_defaults(self):
        config = self.parse()
        assert config.selection is SelectionMode.IMAGES
        assert str(config.target) == "renamed"
        assert config.naming.keeps_original_name
        assert not config.preview

    def test_combined_short_flags(self):
        config = self.parse("-af", "holiday")
        assert config.selection is SelectionMode.ALL
        assert config.naming.original_name_position is Position.SUFFIX
        assert config.naming.user_text == "holiday"

    def test_naming_flags(self):
        config = self.parse("-n", "-s", "-t", "--space", "trip")
        naming = config.naming
        assert naming.omit_original_name
        assert naming.user_text_position is Position.SUFFIX
        assert naming.twelve_hour_clock
        assert naming.word_separator is WordSeparator.SPACE

    def test_extensions_win_over_all(self):
        config = self.parse("-a", "-e", "jpg", ".png")
        assert config.selection is SelectionMode.EXTENSIONS
        assert config.extensions == frozenset({"jpg", "png"})

    def test_paths_are_trimmed(self, tmp_path):
        config = self.parse("-S", f" {tmp_path} ", "-T", " out ")
        assert config.source == tmp_path
        assert str(config.target) == "out"

    @pytest.mark.parametrize("argv", [["-n", "-k"], ["-t", "-d"]])
    def test_exclusive_flags(self, argv, capsys):
        with pytest.raises(SystemExit) as exc:
            create_parser().parse_args(argv)
        assert exc.value.code == 2


class TestMain:

    def test_copies_images(self, source_dir, target_dir, capsys):
        assert run("-S", str(source_dir), "-T", str(target_dir)) == 0
        assert [p.name for p in target_dir.iterdir()] == [f"test-{STAMP}.jpg"]
        assert capsys.readouterr().out.startswith("1/1 Images renamed in ")

    def test_defaults_to_current_folder(self, source_dir, monkeypatch, capsys):
        monkeypatch.chdir(source_dir)
        assert run("-a") == 0
        names = sorted(p.name for p in (source_dir / "renamed").iterdir())
        assert names == sorted([f"test-{STAMP}.jpg", f"test-{STAMP}.mp4", f"{STAMP}.gitignore"])
        assert "3/3 Files renamed" in capsys.readouterr().out

    def test_preview_lists_names(self, source_dir, target_dir, capsys):
        assert run("-S", str(source_dir), "-T", str(target_dir), "-p", "-d", "holiday") == 0
        out = capsys.readouterr().out
        assert "holiday-test-2024-07-17.jpg" in out
        assert not target_dir.exists()

    def test_custom_format(self, source_dir, target_dir):
        run("-S", str(source_dir), "-T", str(target_dir), "-n", "--format", "%Y%m%d")
        assert [p.name for p in target_dir.iterdir()] == ["20240717.jpg"]

    def test_duplicates_exit_code(self, tmp_path, target_dir, capsys):
        src = tmp_path / "src"
        src.mkdir()
        touch(src / "a.jpg")
        touch(src / "b.jpg")

        assert run("-S", str(src), "-T", str(target_dir), "-n") == 1
        assert "WARNING 1 Duplicate names were skipped" in capsys.readouterr().err
        assert not target_dir.exists()

    def test_no_images(self, tmp_path, target_dir, capsys):
        src = tmp_path / "src"
        src.mkdir()
        touch(src / "notes.txt")

        assert run("-S", str(src), "-T", str(target_dir)) == 0
        assert "No images found" in capsys.readouterr().err

    def test_missing_source(self, tmp_path, capsys):
        assert run("-S", str(tmp_path / "missing")) == 1
        assert capsys.readouterr().err.startswith("Error: Directory does not exist")

    def test_empty_extension_is_a_usage_error(self, source_dir, target_dir, capsys):
        with pytest.raises(SystemExit) as exc:
            run("-S", str(source_dir), "-T", str(target_dir), "-e", ".")
        assert exc.value.code == 2

    def test_interactive_extension_choice(self, source_dir, target_dir, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("all\n"))
        assert run("-S", str(source_dir), "-T", str(target_dir), "-e") == 0
        assert len(list(target_dir.iterdir())) == 3
        assert "3/3 Files renamed" in capsys.readouterr().out

    def test_interactive_choice_of_no_extension(self, tmp_path, target_dir, monkeypatch, capsys):
        src = tmp_path / "src"
        src.mkdir()
        touch(src / "Makefile")
        monkeypatch.setattr("sys.stdin", io.StringIO("1\n"))

        assert run("-S", str(src), "-T", str(target_dir), "-e") == 0
        assert [p.name for p in target_dir.iterdir()] == [f"Makefile-{STAMP}"]
        assert "(no extension)" in capsys.readouterr().out

    def test_blank_extension_argument_is_a_usage_error(self, source_dir, target_dir, capsys):
        with pytest.raises(SystemExit) as exc:
            run("-S", str(source_dir), "-T", str(target_dir), "-e", "jpg", " ")
        assert exc.value.code == 2

    def test_interactive_choice_of_nothing(self, source_dir, target_dir, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("\n"))
        assert run("-S", str(source_dir), "-T", str(target_dir), "-e") == 0
        assert "No files selected" in capsys.readouterr().err
        assert not target_dir.exists()

    def test_failed_copies_are_reported(self, source_dir, target_dir, monkeypatch, capsys):
        def failing_copy(src, dst, *args, **kwargs):
            raise OSError("read error")

        monkeypatch.setattr("shutil.copy2", failing_copy)
        assert run("-S", str(source_dir), "-T", str(target_dir)) == 0
        err = capsys.readouterr().err
        assert "ERROR Skipped" in err
        assert "No images found" in err


def test_mtime_fixture_is_local_time():
    from datetime import datetime
    assert datetime.fromtimestamp(MTIME).strftime("%Y-%m-%d_%H-%M-%S") == STAMP

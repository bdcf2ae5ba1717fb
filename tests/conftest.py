"""
Global pytest configuration and fixtures for the createdat test suite.
"""

import os
import sys
from datetime import datetime

# Add project root to sys.path so 'core', 'cli' and 'gui' can be imported
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest


# 2024-07-17 10:30:00 local time
MTIME = datetime(2024, 7, 17, 10, 30, 0).timestamp()
STAMP = "2024-07-17_10-30-00"


def touch(path, mtime=MTIME, content=b""):
    """Create a file with a fixed modification time"""
    path.write_bytes(content)
    os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def source_dir(tmp_path):
    """Source folder with an image, a video and a dotfile"""
    src = tmp_path / "source"
    src.mkdir()
    touch(src / "test.jpg", content=b"jpeg")
    touch(src / "test.mp4", content=b"mp4")
    touch(src / ".gitignore", content=b"*.pyc\n")
    return src


@pytest.fixture
def target_dir(tmp_path):
    """Destination path (not created)"""
    return tmp_path / "renamed"

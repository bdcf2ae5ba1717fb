"""
gui - PySide6 front-end for createdat
"""

from .gui_entry import main

__all__ = ["main"]

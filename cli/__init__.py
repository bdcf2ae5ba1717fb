"""
cli - Command Line Interface for createdat
"""

from .cli_entry import main
from .cli_interactive import select_extensions

__all__ = ["main", "select_extensions"]

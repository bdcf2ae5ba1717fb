"""
text_match.py - Filename Text Tools

Provides filename validation and sanitizing
"""

from typing import Optional
import re


# Characters illegal in a filename on at least one major platform
INVALID_CHARS = '<>:"/\\|?*'

CONTROL_CHARS = re.compile(r'[\x00-\x1f\x80-\x9f]')

RESERVED_NAMES = {
    'CON', 'PRN', 'AUX', 'NUL',
    'COM1', 'COM2', 'COM3', 'COM4', 'COM5', 'COM6', 'COM7', 'COM8', 'COM9',
    'LPT1', 'LPT2', 'LPT3', 'LPT4', 'LPT5', 'LPT6', 'LPT7', 'LPT8', 'LPT9'
}

MAX_NAME_BYTES = 255


def is_valid_filename(name: str) -> tuple[bool, Optional[str]]:
    """
    Check if filename is valid on every supported platform

    Args:
        name: Filename

    Returns:
        (is_valid, error_reason)
    """
    if not name:
        return False, "Filename cannot be empty"

    if name in ('.', '..'):
        return False, f"Filename is a relative path: {name}"

    for char in INVALID_CHARS:
        if char in name:
            return False, f"Filename contains invalid character: {char}"

    if CONTROL_CHARS.search(name):
        return False, "Filename contains a control character"

    # Trailing space or dot
    if name.endswith(' ') or name.endswith('.'):
        return False, "Filename cannot end with space or dot"

    name_upper = name.upper().split('.')[0]
    if name_upper in RESERVED_NAMES:
        return False, f"Filename is a Windows reserved name: {name_upper}"

    if len(name.encode('utf-8')) > MAX_NAME_BYTES:
        return False, f"Filename exceeds {MAX_NAME_BYTES} bytes"

    return True, None


def sanitize_filename(name: str, replacement: str = "") -> str:
    """
    Remove characters that cannot appear in a filename

    Args:
        name: Text destined for a filename
        replacement: Text substituted for each illegal character

    Returns:
        Cleaned text, possibly empty
    """
    for char in INVALID_CHARS:
        name = name.replace(char, replacement)
    name = CONTROL_CHARS.sub(replacement, name)

    if name in ('.', '..'):
        return replacement

    if name.upper().split('.')[0] in RESERVED_NAMES:
        return replacement

    # Remove trailing spaces and dots
    name = name.rstrip(' .')

    return truncate_bytes(name, MAX_NAME_BYTES)


def truncate_bytes(text: str, limit: int) -> str:
    """Cut text to at most `limit` UTF-8 bytes without splitting a character"""
    encoded = text.encode('utf-8')
    if len(encoded) <= limit:
        return text
    return encoded[:limit].decode('utf-8', errors='ignore')

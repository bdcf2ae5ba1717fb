"""
cli_interactive.py - Interactive Prompts

Provides the numbered multi-select used to pick which file extensions to rename
"""

from typing import List, Optional, Callable


def print_header(title: str):
    """Print header"""
    print()
    print("=" * 60)
    print(f"  {title}")
    print("=" * 60)
    print()


def parse_selection(value: str, count: int) -> Optional[List[int]]:
    """
    Parse a selection such as "1,3", "2-4" or "all"

    Args:
        value: User input
        count: Number of options

    Returns:
        Zero-based indices in input order, or None if the input is invalid
    """
    value = value.strip().lower()
    if not value:
        return []
    if value in ("a", "all", "*"):
        return list(range(count))

    indices: List[int] = []
    for part in value.replace(" ", ",").split(","):
        if not part:
            continue
        try:
            if "-" in part:
                first, last = (int(p) for p in part.split("-", 1))
                numbers = range(first, last + 1)
            else:
                numbers = [int(part)]
        except ValueError:
            return None
        for num in numbers:
            if num < 1 or num > count:
                return None
            if num - 1 not in indices:
                indices.append(num - 1)
    return indices


def format_extension(extension: str) -> str:
    return f".{extension}" if extension else "(no extension)"


def select_extensions(
    options: List[str],
    input_func: Callable[[str], str] = input
) -> List[str]:
    """
    Ask which extensions to rename

    Args:
        options: Extensions found in the source directory
        input_func: Line reader (input by default)

    Returns:
        Selected extensions, possibly empty
    """
    if not options:
        return []

    print_header("Select file types to rename")
    for i, ext in enumerate(options, start=1):
        print(f"  {i:>3}. {format_extension(ext)}")
    print()

    while True:
        value = input_func("Numbers to rename, e.g. 1,3 or 2-4 (all = every type, empty = none): ")
        indices = parse_selection(value, len(options))
        if indices is not None:
            return [options[i] for i in indices]
        print(f"Invalid choice, please enter numbers between 1 and {len(options)}")

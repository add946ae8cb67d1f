"""Plain-text layout helpers for command output."""

import math
import shutil
import textwrap

COLUMN_PADDING = 2


def _terminal_width() -> int:
    return shutil.get_terminal_size().columns


def table(items: list[str], width: int | None = None) -> list[str]:
    """
    Lay out items in columns, filled top-to-bottom then left-to-right.

    Args:
        items: Strings to lay out. Never truncated.
        width: Available width; defaults to the terminal width.

    Returns:
        Lines of output, without trailing whitespace.
    """
    if not items:
        return []
    width = width or _terminal_width()

    column_width = max(len(item) for item in items) + COLUMN_PADDING
    columns = max(1, width // column_width)
    rows = math.ceil(len(items) / columns)

    lines = []
    for row in range(rows):
        cells = [items[i] for i in range(row, len(items), rows)]
        lines.append("".join(cell.ljust(column_width) for cell in cells).rstrip())
    return lines


def wrap(text: str, width: int | None = None) -> list[str]:
    """Word-wrap text to the given (or terminal) width."""
    return textwrap.wrap(text, width=width or _terminal_width())

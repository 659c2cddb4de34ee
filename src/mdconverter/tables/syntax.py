"""Pipe-table syntax definitions and patterns.

Table detection is line based: everything that decides whether a line
belongs to a table lives here so the extractor and the table reader agree on
table boundaries, and therefore on table indices.
"""

import re
from typing import Optional, Pattern

# {=SUM(B2:B5)} - Formula marker inside a table cell
FORMULA_MARKER_PATTERN: Pattern = re.compile(r"\{=([^}]+)\}")

# Interior of a separator row, e.g. " --- | :---: | ---: "
SEPARATOR_INTERIOR_PATTERN: Pattern = re.compile(r"^[\s|:\-]+$")

# Single separator cell, used to read column alignment
SEPARATOR_CELL_PATTERN: Pattern = re.compile(r"^\s*(:)?-+(:)?\s*$")


def is_table_line(line: str) -> bool:
    """Return True if the line, once trimmed, starts and ends with a pipe."""
    trimmed = line.strip()
    return trimmed.startswith("|") and trimmed.endswith("|")


def is_separator_line(line: str) -> bool:
    """
    Return True if the line is a header separator row such as |---|:--:|.

    The interior may only hold dashes, colons, whitespace and pipes, and must
    contain at least one dash.
    """
    if not is_table_line(line):
        return False
    inner = line.strip()[1:-1]
    return bool(SEPARATOR_INTERIOR_PATTERN.match(inner)) and "-" in inner


def split_table_row(line: str) -> list[str]:
    """Split a table line into cells, keeping the whitespace inside each cell."""
    inner = line.strip()[1:-1]
    return inner.split("|")


def join_table_row(cells: list[str]) -> str:
    """Reassemble cells produced by split_table_row into a table line."""
    return "|" + "|".join(cells) + "|"


def parse_alignment(cell: str) -> Optional[str]:
    """Read the alignment of a separator cell (left, center, right or None)."""
    match = SEPARATOR_CELL_PATTERN.match(cell)
    if not match:
        return None
    left, right = match.group(1), match.group(2)
    if left and right:
        return "center"
    if right:
        return "right"
    if left:
        return "left"
    return None


def column_index_to_letter(index: int) -> str:
    """Convert 0-based index to column letter(s). 0 -> A, 25 -> Z, 26 -> AA."""
    if index < 0:
        raise ValueError(f"Column index must be non-negative: {index}")
    result = ""
    index += 1
    while index > 0:
        index -= 1
        result = chr(ord("A") + (index % 26)) + result
        index //= 26
    return result


def column_letter_to_index(col: str) -> int:
    """Convert column letter(s) to 0-based index. A=0, B=1, ..., Z=25, AA=26, etc."""
    if not col or not col.isalpha():
        raise ValueError(f"Invalid column letter: {col!r}")
    result = 0
    for char in col.upper():
        result = result * 26 + (ord(char) - ord("A") + 1)
    return result - 1

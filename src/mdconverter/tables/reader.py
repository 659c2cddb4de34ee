"""Read pipe tables out of markdown text."""

import logging

from .models import TableData
from .syntax import is_separator_line, is_table_line, parse_alignment, split_table_row

logger = logging.getLogger(__name__)


class MarkdownTableReader:
    """
    Collect pipe tables from markdown.

    Every run of consecutive table lines is one table, in document order,
    which is exactly how the formula extractor numbers tables. The first
    non-separator line of a run is the header row; the remaining
    non-separator lines are body rows, padded or truncated to the header
    width. Body cells keep their surrounding whitespace.
    """

    def read(self, content: str) -> list[TableData]:
        tables = []
        block: list[str] = []

        for line in content.split("\n"):
            if is_table_line(line):
                block.append(line)
                continue
            if block:
                tables.append(self._build_table(block))
                block = []

        if block:
            tables.append(self._build_table(block))

        logger.debug(f"Read {len(tables)} table(s) from markdown")
        return tables

    def _build_table(self, lines: list[str]) -> TableData:
        headers: list[str] = []
        alignments = []
        rows = []

        for line in lines:
            if is_separator_line(line):
                if not alignments:
                    alignments = [parse_alignment(cell) for cell in split_table_row(line)]
                continue

            cells = split_table_row(line)
            if not headers:
                headers = [cell.strip() for cell in cells]
                continue
            rows.append(cells)

        width = len(headers)
        rows = [(row + [""] * width)[:width] for row in rows]
        alignments = (alignments + [None] * width)[:width]

        return TableData(headers=headers, rows=rows, alignments=alignments)

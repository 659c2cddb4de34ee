"""Replace table formulas with placeholders ahead of document rendering.

Formulas written as ``{=SUM(B2:B5)}`` inside pipe-table cells cannot survive
a markdown-to-spreadsheet render as live formulas. The extractor swaps each
one for a placeholder token that names the cell it came from, and records
the mapping so the reinjector can put the formula back into the rendered
workbook.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional, Pattern

from ..tables.syntax import (
    FORMULA_MARKER_PATTERN,
    is_separator_line,
    is_table_line,
    join_table_row,
    split_table_row,
)
from .models import ExtractionResult, FormulaLocation
from .validator import FormulaValidator, find_malformed_markers

logger = logging.getLogger(__name__)

PLACEHOLDER_TEMPLATE = "__FORMULA_{table}_{row}_{column}__"
PLACEHOLDER_PATTERN: Pattern = re.compile(r"__FORMULA_(\d+)_(\d+)_(\d+)__")


def make_placeholder(table_index: int, row: int, column: int) -> str:
    """Build the placeholder token for a cell position."""
    return PLACEHOLDER_TEMPLATE.format(table=table_index, row=row, column=column)


def contains_placeholder(text: str) -> bool:
    return PLACEHOLDER_PATTERN.search(text) is not None


@dataclass
class TableTracker:
    """Per-pass position in the document's tables."""

    table_index: int = -1
    row_index: int = 0
    in_table: bool = False
    formulas: list[FormulaLocation] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def enter_line(self, table_line: bool) -> None:
        if table_line and not self.in_table:
            self.table_index += 1
            self.row_index = 0
        self.in_table = table_line

    @property
    def table_count(self) -> int:
        return self.table_index + 1


class FormulaExtractor:
    """
    Extract {=...} formulas from pipe tables.

    Input must already use LF line endings. Only lines that are table lines
    are scanned, so a formula marker in ordinary prose is left as it is.
    """

    def __init__(self, validator: Optional[FormulaValidator] = None, validate: bool = True):
        self.validator = validator or FormulaValidator()
        self.validate = validate

    def extract(self, content: str) -> ExtractionResult:
        """
        Replace every in-table formula with its placeholder.

        Args:
            content: LF-normalised markdown (front matter already removed)

        Returns:
            ExtractionResult with processed text, formulas in document order,
            number of tables seen and any warnings
        """
        tracker = TableTracker()
        processed_lines = []

        for line in content.split("\n"):
            table_line = is_table_line(line)
            tracker.enter_line(table_line)

            if not table_line or is_separator_line(line):
                processed_lines.append(line)
                continue

            processed_lines.append(self._process_row(line, tracker))
            tracker.row_index += 1

        logger.info(
            f"Extracted {len(tracker.formulas)} formula(s) from {tracker.table_count} table(s)"
        )

        return ExtractionResult(
            processed_content="\n".join(processed_lines),
            formulas=tracker.formulas,
            table_count=tracker.table_count,
            warnings=tracker.warnings,
        )

    def _process_row(self, line: str, tracker: TableTracker) -> str:
        cells = split_table_row(line)
        processed_cells = []
        changed = False

        for column, cell in enumerate(cells):
            match = FORMULA_MARKER_PATTERN.search(cell)
            if match:
                location = FormulaLocation(
                    table_index=tracker.table_index,
                    row=tracker.row_index,
                    column=column,
                    formula=match.group(1),
                    placeholder=make_placeholder(tracker.table_index, tracker.row_index, column),
                )
                tracker.formulas.append(location)
                logger.debug(f"Found formula at {location.label}: {location.formula}")

                if self.validate:
                    validation = self.validator.validate(location.formula)
                    if not validation.is_valid:
                        tracker.warnings.append(
                            f"Invalid formula at {location.label}: {', '.join(validation.errors)}"
                        )

                cell = cell[: match.start()] + location.placeholder + cell[match.end() :]
                changed = True

                if FORMULA_MARKER_PATTERN.search(cell):
                    tracker.warnings.append(
                        f"Multiple formulas at {location.label}: only the first is extracted"
                    )

            for problem in find_malformed_markers(cell):
                tracker.warnings.append(
                    f"Malformed formula at table {tracker.table_index}, row {tracker.row_index}, "
                    f"column {column}: {problem}"
                )

            processed_cells.append(cell)

        if not changed:
            return line
        return join_table_row(processed_cells)

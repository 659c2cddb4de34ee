"""Cell type detection for markdown table cells."""

import logging
import re
from datetime import date
from typing import Optional, Union

from .models import (
    CellDataType,
    DateFormat,
    ProcessedCell,
    ProcessedRow,
    ProcessedTable,
    TableData,
    TableDimensions,
)
from .syntax import FORMULA_MARKER_PATTERN

logger = logging.getLogger(__name__)

CURRENCY_PATTERN = re.compile(r"AUD|[$€£¥]")
NUMBER_PATTERN = re.compile(r"^-?\d+(\.\d+)?$", re.ASCII)
ISO_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$", re.ASCII)
SLASH_DATE_PATTERN = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$", re.ASCII)

BOOLEAN_VALUES = {"true", "false"}


def parse_numeric(value: str) -> Optional[float]:
    """
    Parse a number, tolerating currency symbols and thousands separators.

    The whole cleaned string has to be numeric, so "28/01/2025" is rejected
    rather than read as 28.
    """
    cleaned = CURRENCY_PATTERN.sub("", value)
    cleaned = cleaned.replace(",", "")
    cleaned = re.sub(r"\s", "", cleaned)

    if not cleaned or not NUMBER_PATTERN.match(cleaned):
        return None
    return float(cleaned)


def parse_date(value: str, date_format: DateFormat) -> Optional[date]:
    """Parse a date laid out according to date_format, or return None."""
    if date_format == DateFormat.ISO:
        match = ISO_DATE_PATTERN.match(value)
        if not match:
            return None
        year, month, day = (int(g) for g in match.groups())
    else:
        match = SLASH_DATE_PATTERN.match(value)
        if not match:
            return None
        first, second, year = (int(g) for g in match.groups())
        if date_format == DateFormat.DMY:
            day, month = first, second
        else:
            month, day = first, second

    # date() rejects day 32, month 13, Feb 30 and year 0
    try:
        return date(year, month, day)
    except ValueError:
        return None


class CellClassifier:
    """
    Classify table cells as formula, boolean, number, date or string.

    Each instance carries its own date format, so callers converting several
    documents can hold independent classifiers. Classification of a cell
    depends only on its text and the configured format.
    """

    def __init__(self, date_format: Union[DateFormat, str] = DateFormat.DMY):
        self.date_format = DateFormat(date_format)

    def classify(self, raw: str) -> ProcessedCell:
        """
        Classify a single cell value.

        Args:
            raw: Cell text as it appeared in the table (untrimmed)

        Returns:
            ProcessedCell with data_type and the matching typed value
        """
        trimmed = raw.strip()

        formula_match = FORMULA_MARKER_PATTERN.search(trimmed)
        if formula_match:
            return ProcessedCell(
                raw_value=raw,
                display_value=trimmed,
                data_type=CellDataType.FORMULA,
                formula=formula_match.group(1),
            )

        if trimmed.lower() in BOOLEAN_VALUES:
            return ProcessedCell(
                raw_value=raw,
                display_value=trimmed,
                data_type=CellDataType.BOOLEAN,
            )

        numeric_value = parse_numeric(trimmed)
        if numeric_value is not None:
            return ProcessedCell(
                raw_value=raw,
                display_value=trimmed,
                data_type=CellDataType.NUMBER,
                numeric_value=numeric_value,
            )

        date_value = parse_date(trimmed, self.date_format)
        if date_value is not None:
            return ProcessedCell(
                raw_value=raw,
                display_value=trimmed,
                data_type=CellDataType.DATE,
                date_value=date_value,
            )

        return ProcessedCell(
            raw_value=raw,
            display_value=trimmed,
            data_type=CellDataType.STRING,
        )

    def process_table(self, table: TableData) -> ProcessedTable:
        """Classify every body cell of a table."""
        rows = []
        has_formulas = False

        for row in table.rows:
            cells = [self.classify(value) for value in row]
            if any(cell.is_formula for cell in cells):
                has_formulas = True
            rows.append(ProcessedRow(cells=cells))

        logger.debug(
            f"Processed table with {len(table.headers)} columns and {len(rows)} rows "
            f"(date format {self.date_format.value})"
        )
        return ProcessedTable(headers=table.headers, rows=rows, has_formulas=has_formulas)


def classify(raw: str, date_format: Union[DateFormat, str] = DateFormat.DMY) -> ProcessedCell:
    """Classify a cell with a throwaway classifier."""
    return CellClassifier(date_format).classify(raw)


def extract_formulas(table: ProcessedTable) -> list[str]:
    """Return the formula bodies of a processed table in row order."""
    return [
        cell.formula
        for row in table.rows
        for cell in row.cells
        if cell.is_formula and cell.formula
    ]


def get_table_dimensions(table: ProcessedTable) -> TableDimensions:
    return TableDimensions(
        rows=len(table.rows),
        cols=len(table.headers),
        has_headers=len(table.headers) > 0,
    )

"""Pipe-table detection, reading and cell classification."""

from .models import (
    CellDataType,
    DateFormat,
    ProcessedCell,
    ProcessedRow,
    ProcessedTable,
    TableData,
    TableDimensions,
)
from .classifier import CellClassifier, classify, extract_formulas, get_table_dimensions
from .reader import MarkdownTableReader
from .syntax import (
    column_index_to_letter,
    column_letter_to_index,
    is_separator_line,
    is_table_line,
    split_table_row,
)

__all__ = [
    "CellDataType",
    "DateFormat",
    "ProcessedCell",
    "ProcessedRow",
    "ProcessedTable",
    "TableData",
    "TableDimensions",
    "CellClassifier",
    "classify",
    "extract_formulas",
    "get_table_dimensions",
    "MarkdownTableReader",
    "column_index_to_letter",
    "column_letter_to_index",
    "is_separator_line",
    "is_table_line",
    "split_table_row",
]

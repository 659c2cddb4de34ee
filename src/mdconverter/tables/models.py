"""Data models for markdown tables and classified cells."""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DateFormat(str, Enum):
    """Date layout used to interpret date-like table cells."""

    DMY = "DD/MM/YYYY"
    MDY = "MM/DD/YYYY"
    ISO = "YYYY-MM-DD"

    @property
    def excel_number_format(self) -> str:
        """Number format string that renders dates in this layout."""
        return {
            DateFormat.DMY: "dd/mm/yyyy",
            DateFormat.MDY: "mm/dd/yyyy",
            DateFormat.ISO: "yyyy-mm-dd",
        }[self]


class CellDataType(str, Enum):
    """Type assigned to a table cell."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    FORMULA = "formula"


class ProcessedCell(BaseModel):
    """Classification result for a single table cell."""

    model_config = ConfigDict(frozen=True)

    raw_value: str  # As it appeared in the source, untrimmed
    display_value: str  # Trimmed
    data_type: CellDataType
    numeric_value: Optional[float] = None
    date_value: Optional[date] = None
    formula: Optional[str] = None  # Body without "{=" and "}"

    @property
    def is_formula(self) -> bool:
        return self.data_type == CellDataType.FORMULA


class TableData(BaseModel):
    """A pipe table as read from markdown, before classification."""

    headers: list[str]
    rows: list[list[str]] = Field(default_factory=list)
    alignments: list[Optional[str]] = Field(default_factory=list)  # left, center, right or None


class ProcessedRow(BaseModel):
    """A body row of classified cells."""

    cells: list[ProcessedCell]


class ProcessedTable(BaseModel):
    """A table whose body cells have been classified."""

    headers: list[str]
    rows: list[ProcessedRow] = Field(default_factory=list)
    has_formulas: bool = False


class TableDimensions(BaseModel):
    """Size of a processed table."""

    rows: int
    cols: int
    has_headers: bool

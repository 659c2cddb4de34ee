"""Data models for formula extraction and validation."""

from pydantic import BaseModel, ConfigDict, Field


class FormulaLocation(BaseModel):
    """A formula lifted out of a table cell, and the token left in its place."""

    model_config = ConfigDict(frozen=True)

    table_index: int = Field(ge=0)  # 0-based, document order
    row: int = Field(ge=0)  # 0 = header row; separator rows are not counted
    column: int = Field(ge=0)
    formula: str  # Text between "{=" and "}", unevaluated
    placeholder: str

    @property
    def coordinates(self) -> tuple[int, int, int]:
        return (self.table_index, self.row, self.column)

    @property
    def label(self) -> str:
        return f"table {self.table_index}, row {self.row}, column {self.column}"


class ExtractionResult(BaseModel):
    """Output of one extraction pass over a document."""

    processed_content: str
    formulas: list[FormulaLocation] = Field(default_factory=list)
    table_count: int = 0
    warnings: list[str] = Field(default_factory=list)


class FormulaValidation(BaseModel):
    """Result of a syntax check on a formula body."""

    is_valid: bool
    formula: str  # Body with any leading "=" removed
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    cell_references: list[str] = Field(default_factory=list)
    functions: list[str] = Field(default_factory=list)


class CellReference(BaseModel):
    """An A1-style reference split into its parts."""

    column: str
    row: int
    absolute_column: bool = False
    absolute_row: bool = False

    def __str__(self) -> str:
        col_prefix = "$" if self.absolute_column else ""
        row_prefix = "$" if self.absolute_row else ""
        return f"{col_prefix}{self.column}{row_prefix}{self.row}"

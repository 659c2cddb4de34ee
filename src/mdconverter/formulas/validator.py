"""Syntax checks and reference helpers for spreadsheet formulas.

Nothing here evaluates a formula. Validation only looks for problems that
would make the output spreadsheet reject the formula outright (unbalanced
parentheses, an empty body), plus an advisory check of function names.
"""

import logging
import re
from typing import Optional, Pattern

from ..errors import FormulaValidationError
from ..tables.syntax import (
    FORMULA_MARKER_PATTERN,
    column_index_to_letter,
    column_letter_to_index,
)
from .models import CellReference, FormulaValidation

logger = logging.getLogger(__name__)

# Cell and range references (A1, $A$1, A1:B5, A:A, 1:10)
CELL_REFERENCE_PATTERN: Pattern = re.compile(r"\$?[A-Z]+\$?\d+")
RANGE_PATTERN: Pattern = re.compile(r"\$?[A-Z]+\$?\d+:\$?[A-Z]+\$?\d+")
COLUMN_RANGE_PATTERN: Pattern = re.compile(r"\$?[A-Z]+:\$?[A-Z]+")
ROW_RANGE_PATTERN: Pattern = re.compile(r"\$?\d+:\$?\d+")

# Bare word directly followed by "(" - a function call candidate
FUNCTION_PATTERN: Pattern = re.compile(r"\b([A-Za-z_][A-Za-z0-9_.]*)\s*\(")

SINGLE_CELL_PATTERN: Pattern = re.compile(r"^(\$)?([A-Z]+)(\$)?(\d+)$")
HTML_TAG_PATTERN: Pattern = re.compile(r"<[^>]*>")

# Marker problems inside a table cell
MISSING_EQUALS_PATTERN: Pattern = re.compile(r"\{\s*[A-Za-z][A-Za-z0-9_.]*\s*\([^{}]*\)\s*\}")
UNCLOSED_MARKER_PATTERN: Pattern = re.compile(r"\{=[^}]*$")
EMPTY_MARKER_PATTERN: Pattern = re.compile(r"\{=\}")

# Spreadsheet functions that are known to work in generated workbooks
KNOWN_FUNCTIONS = {
    # Math
    "SUM",
    "SUMPRODUCT",
    "AVERAGE",
    "COUNT",
    "COUNTA",
    "COUNTBLANK",
    "COUNTIF",
    "COUNTIFS",
    "MIN",
    "MAX",
    "ROUND",
    "ROUNDUP",
    "ROUNDDOWN",
    "INT",
    "ABS",
    "SQRT",
    "POWER",
    "MOD",
    "PRODUCT",
    "SUMIF",
    "SUMIFS",
    "AVERAGEIF",
    "AVERAGEIFS",
    "MEDIAN",
    "MODE",
    "FLOOR",
    "CEILING",
    # Logical
    "IF",
    "IFS",
    "SWITCH",
    "AND",
    "OR",
    "NOT",
    "XOR",
    "TRUE",
    "FALSE",
    "IFERROR",
    "IFNA",
    "ISNUMBER",
    "ISTEXT",
    "ISBLANK",
    "ISERROR",
    # Text
    "CONCATENATE",
    "CONCAT",
    "LEFT",
    "RIGHT",
    "MID",
    "LEN",
    "TRIM",
    "UPPER",
    "LOWER",
    "PROPER",
    "SUBSTITUTE",
    "REPLACE",
    "TEXT",
    "VALUE",
    # Date
    "TODAY",
    "NOW",
    "DATE",
    "YEAR",
    "MONTH",
    "DAY",
    "WEEKDAY",
    "DATEDIF",
    "DAYS",
    "NETWORKDAYS",
    "EOMONTH",
    # Lookup
    "VLOOKUP",
    "HLOOKUP",
    "XLOOKUP",
    "INDEX",
    "MATCH",
    "CHOOSE",
    "OFFSET",
    "INDIRECT",
    "ROW",
    "COLUMN",
    # Statistical
    "STDEV",
    "STDEVP",
    "VAR",
    "VARP",
    "RANK",
    "PERCENTILE",
    # Financial
    "PMT",
    "FV",
    "PV",
    "RATE",
    "NPV",
    "IRR",
}


class FormulaValidator:
    """Lightweight syntax validation for formula bodies."""

    def __init__(self, known_functions: Optional[set[str]] = None):
        self.known_functions = known_functions if known_functions is not None else KNOWN_FUNCTIONS

    def validate(self, formula: str) -> FormulaValidation:
        """
        Check a formula body without evaluating it.

        Unknown function names only produce warnings; is_valid depends on
        errors alone.

        Args:
            formula: Formula body, with or without a leading "="

        Returns:
            FormulaValidation with errors, warnings, references and functions
        """
        errors = []
        warnings = []

        clean = formula[1:] if formula.startswith("=") else formula

        functions = []
        for match in FUNCTION_PATTERN.finditer(clean):
            name = match.group(1)
            functions.append(name)
            if name.upper() not in self.known_functions:
                warnings.append(f"Unknown function: {name}")

        if clean.count("(") != clean.count(")"):
            errors.append("Mismatched parentheses")

        if not clean.strip():
            errors.append("Empty formula")

        if errors:
            logger.debug(f"Formula {formula!r} failed validation: {errors}")

        return FormulaValidation(
            is_valid=len(errors) == 0,
            formula=clean,
            errors=errors,
            warnings=warnings,
            cell_references=find_references(clean),
            functions=functions,
        )

    def validate_strict(self, formula: str) -> FormulaValidation:
        """Validate and raise FormulaValidationError if the formula is invalid."""
        result = self.validate(formula)
        if not result.is_valid:
            raise FormulaValidationError(formula, "; ".join(result.errors))
        return result


def find_references(formula: str) -> list[str]:
    """Collect cell, range, column-range and row-range references in order of kind."""
    references = []
    for pattern in (CELL_REFERENCE_PATTERN, RANGE_PATTERN, COLUMN_RANGE_PATTERN, ROW_RANGE_PATTERN):
        references.extend(pattern.findall(formula))
    return references


def find_malformed_markers(text: str) -> list[str]:
    """
    Describe formula markers in a cell that will not be extracted.

    Covers a function call wrapped in braces without "=", a "{=" that is never
    closed, and an empty "{=}".
    """
    problems = []
    if MISSING_EQUALS_PATTERN.search(text):
        problems.append("formula marker is missing '=' after '{'")
    if UNCLOSED_MARKER_PATTERN.search(text):
        problems.append("formula marker is missing its closing '}'")
    if EMPTY_MARKER_PATTERN.search(text):
        problems.append("Empty formula")
    return problems


def is_formula(value: str) -> bool:
    """Check whether a string contains a {=...} formula marker."""
    return FORMULA_MARKER_PATTERN.search(value) is not None


def extract_formula(value: str) -> Optional[str]:
    """Return the body of the first {=...} marker in value."""
    match = FORMULA_MARKER_PATTERN.search(value)
    return match.group(1) if match else None


def is_valid_cell_reference(ref: str) -> bool:
    return SINGLE_CELL_PATTERN.match(ref) is not None


def is_valid_range_reference(ref: str) -> bool:
    return bool(
        re.match(r"^\$?[A-Z]+\$?\d+:\$?[A-Z]+\$?\d+$", ref)
        or re.match(r"^\$?[A-Z]+:\$?[A-Z]+$", ref)
        or re.match(r"^\$?\d+:\$?\d+$", ref)
    )


def parse_cell_reference(ref: str) -> Optional[CellReference]:
    """Split an A1 reference such as $B$12 into its parts."""
    match = SINGLE_CELL_PATTERN.match(ref)
    if not match:
        return None
    return CellReference(
        column=match.group(2),
        row=int(match.group(4)),
        absolute_column=match.group(1) == "$",
        absolute_row=match.group(3) == "$",
    )


def format_cell_reference(
    column: str, row: int, absolute_column: bool = False, absolute_row: bool = False
) -> str:
    return str(
        CellReference(
            column=column,
            row=row,
            absolute_column=absolute_column,
            absolute_row=absolute_row,
        )
    )


def get_all_references(formula: str) -> list[str]:
    """Unique references in a formula, first occurrence first."""
    clean = formula[1:] if formula.startswith("=") else formula
    return list(dict.fromkeys(find_references(clean)))


def has_circular_reference(formula: str, current_cell: str) -> bool:
    """Basic check: does the formula reference the cell it lives in?"""
    return current_cell in get_all_references(formula)


def sanitise_formula(formula: str) -> str:
    """Trim, drop a leading "=" and strip any HTML tags."""
    cleaned = formula.strip()
    if cleaned.startswith("="):
        cleaned = cleaned[1:]
    return HTML_TAG_PATTERN.sub("", cleaned)


def adjust_references(formula: str, row_offset: int, col_offset: int) -> str:
    """
    Shift relative cell references by the given offsets.

    Absolute parts ($A, $1) stay put. References are rewritten in a single
    pass so a shifted reference is never shifted again.
    """

    def shift(match: re.Match) -> str:
        parsed = parse_cell_reference(match.group(0))
        if parsed is None:
            return match.group(0)

        column = parsed.column
        row = parsed.row
        if not parsed.absolute_column and col_offset:
            column = column_index_to_letter(column_letter_to_index(column) + col_offset)
        if not parsed.absolute_row and row_offset:
            row = row + row_offset

        return format_cell_reference(column, row, parsed.absolute_column, parsed.absolute_row)

    return CELL_REFERENCE_PATTERN.sub(shift, formula)

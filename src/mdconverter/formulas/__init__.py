"""Formula extraction, placeholder generation and syntax validation."""

from .models import CellReference, ExtractionResult, FormulaLocation, FormulaValidation
from .extractor import (
    PLACEHOLDER_PATTERN,
    FormulaExtractor,
    contains_placeholder,
    make_placeholder,
)
from .validator import (
    KNOWN_FUNCTIONS,
    FormulaValidator,
    adjust_references,
    extract_formula,
    find_malformed_markers,
    format_cell_reference,
    get_all_references,
    has_circular_reference,
    is_formula,
    is_valid_cell_reference,
    is_valid_range_reference,
    parse_cell_reference,
    sanitise_formula,
)

__all__ = [
    "CellReference",
    "ExtractionResult",
    "FormulaLocation",
    "FormulaValidation",
    "PLACEHOLDER_PATTERN",
    "FormulaExtractor",
    "contains_placeholder",
    "make_placeholder",
    "KNOWN_FUNCTIONS",
    "FormulaValidator",
    "adjust_references",
    "extract_formula",
    "find_malformed_markers",
    "format_cell_reference",
    "get_all_references",
    "has_circular_reference",
    "is_formula",
    "is_valid_cell_reference",
    "is_valid_range_reference",
    "parse_cell_reference",
    "sanitise_formula",
]

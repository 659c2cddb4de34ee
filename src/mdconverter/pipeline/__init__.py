"""Pre-processing before render and formula reinjection after it."""

from .preprocessor import PreProcessor, PreProcessorResult, normalize_line_endings
from .reinjector import FormulaReinjector, InjectionResult, PostProcessResult, to_cell_formula

__all__ = [
    "PreProcessor",
    "PreProcessorResult",
    "normalize_line_endings",
    "FormulaReinjector",
    "InjectionResult",
    "PostProcessResult",
    "to_cell_formula",
]

"""Exception types raised by md-converter.

Only a handful of conditions are fatal. Everything recoverable (invalid
formulas, missing recommended metadata, placeholders that could not be
found in a rendered workbook) is reported through ``warnings`` lists on the
result objects instead.
"""

from typing import Any, Optional


class ConverterError(Exception):
    """Base class for all converter errors."""

    pass


class FormulaValidationError(ConverterError):
    """Raised by strict formula validation when a formula is invalid."""

    def __init__(self, formula: str, reason: str):
        self.formula = formula
        self.reason = reason
        super().__init__(f'Invalid formula "{formula}": {reason}')


class FrontMatterError(ConverterError):
    """Raised when YAML front matter cannot be parsed or fails validation."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        self.field = field
        self.value = value
        if field:
            super().__init__(f'Front matter error in field "{field}": {message}')
        else:
            super().__init__(f"Front matter error: {message}")


class PreProcessorError(ConverterError):
    """Raised when pre-processing cannot continue (unparsable metadata)."""

    def __init__(self, message: str, details: Optional[str] = None):
        self.details = details
        super().__init__(f"{message}: {details}" if details else message)


class ConversionError(ConverterError):
    """Raised when rendering a document to an output format fails."""

    def __init__(self, message: str, format: str, source: str):
        self.format = format
        self.source = source
        super().__init__(f'Conversion to {format} failed for "{source}": {message}')

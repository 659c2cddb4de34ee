"""Document converters."""

from .xlsx import XlsxConversionOptions, XlsxConversionResult, XlsxConverter

__all__ = [
    "XlsxConversionOptions",
    "XlsxConversionResult",
    "XlsxConverter",
]

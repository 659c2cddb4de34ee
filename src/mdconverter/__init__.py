"""md-converter - Markdown tables to Excel workbooks with live formulas."""

__version__ = "0.1.0"

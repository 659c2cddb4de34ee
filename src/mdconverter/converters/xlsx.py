"""Convert markdown tables to an Excel workbook with live formulas."""

import logging
import re
from pathlib import Path
from typing import Optional, Union

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet
from pydantic import BaseModel, Field

from ..config import Settings, settings as default_settings
from ..errors import ConversionError, ConverterError, PreProcessorError
from ..formulas import contains_placeholder
from ..pipeline import FormulaReinjector, PreProcessor
from ..tables import (
    CellClassifier,
    CellDataType,
    DateFormat,
    MarkdownTableReader,
    ProcessedCell,
    TableData,
)

logger = logging.getLogger(__name__)

THIN_SIDE = Side(style="thin")
THIN_BORDER = Border(left=THIN_SIDE, right=THIN_SIDE, top=THIN_SIDE, bottom=THIN_SIDE)

BOLD_PATTERN = re.compile(r"^\*\*(.+)\*\*$")
ITALIC_PATTERN = re.compile(r"^(?:\*([^*].*)\*|_([^_].*)_)$")


class XlsxConversionOptions(BaseModel):
    """Options controlling workbook output. None means use settings."""

    freeze_headers: Optional[bool] = None
    auto_width: Optional[bool] = None
    add_borders: Optional[bool] = None
    validate_formulas: Optional[bool] = None
    header_bold: bool = True


class XlsxConversionResult(BaseModel):
    """Outcome of a markdown to XLSX conversion."""

    success: bool
    output_path: Path
    worksheet_names: list[str] = Field(default_factory=list)
    table_count: int = 0
    formula_count: int = 0
    warnings: list[str] = Field(default_factory=list)
    modifications: list[str] = Field(default_factory=list)


def styled_text(text: str) -> tuple[str, Optional[Font]]:
    """
    Strip whole-cell markdown emphasis and return the matching font.

    Placeholders look like __strong__ text and are returned untouched.
    """
    if contains_placeholder(text):
        return text, None

    match = BOLD_PATTERN.match(text)
    if match:
        return match.group(1), Font(bold=True)

    match = ITALIC_PATTERN.match(text)
    if match:
        return match.group(1) or match.group(2), Font(italic=True)

    return text, None


class XlsxConverter:
    """
    Markdown to XLSX converter.

    The conversion follows the placeholder round trip: formulas are
    extracted during pre-processing, the tables are rendered with the
    placeholders as plain text, and the saved workbook is post-processed
    to turn placeholders back into formulas.
    """

    def __init__(self, config: Optional[Settings] = None):
        self.settings = config or default_settings
        self.preprocessor = PreProcessor()
        self.reader = MarkdownTableReader()
        self.reinjector = FormulaReinjector()

    def convert(
        self,
        input_path: Union[str, Path],
        output_path: Optional[Union[str, Path]] = None,
        options: Optional[XlsxConversionOptions] = None,
    ) -> XlsxConversionResult:
        """
        Convert a markdown file to XLSX.

        Raises:
            PreProcessorError: if the front matter cannot be parsed
            ConversionError: for any other failure
        """
        input_path = Path(input_path)
        try:
            markdown = input_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConversionError(str(e), "xlsx", str(input_path)) from e

        target = Path(output_path) if output_path else self._default_output_path(input_path)
        return self.convert_text(markdown, target, options, source=str(input_path))

    def convert_text(
        self,
        markdown: str,
        output_path: Union[str, Path],
        options: Optional[XlsxConversionOptions] = None,
        source: str = "<text>",
    ) -> XlsxConversionResult:
        """Convert markdown text and write the workbook to output_path."""
        opts = options or XlsxConversionOptions()
        output_path = Path(output_path)

        if len(markdown) > self.settings.max_markdown_chars:
            raise ConversionError(
                f"Document is {len(markdown)} characters "
                f"(limit: {self.settings.max_markdown_chars})",
                "xlsx",
                source,
            )

        try:
            processed = self.preprocessor.process(
                markdown,
                validate_formulas=self._option(opts.validate_formulas, self.settings.validate_formulas),
                preserve_line_endings=self.settings.preserve_line_endings,
            )

            tables = self.reader.read(processed.body)
            if not tables:
                raise ConversionError("No tables found in the markdown file", "xlsx", source)

            date_format = processed.metadata.date_format or DateFormat(self.settings.default_date_format)
            workbook = self._render_workbook(tables, date_format, opts)
            workbook.properties.creator = processed.metadata.author or self.settings.generator_name

            output_path.parent.mkdir(parents=True, exist_ok=True)
            workbook.save(output_path)
            logger.info(f"Rendered {len(tables)} worksheet(s) to {output_path}")

            post = self.reinjector.process_xlsx(output_path, processed.formulas, processed.metadata)
        except (ConversionError, PreProcessorError):
            raise
        except ConverterError as e:
            raise ConversionError(str(e), "xlsx", source) from e
        except (OSError, ValueError) as e:
            raise ConversionError(str(e), "xlsx", source) from e

        return XlsxConversionResult(
            success=True,
            output_path=output_path,
            worksheet_names=workbook.sheetnames,
            table_count=len(tables),
            formula_count=len(processed.formulas),
            warnings=processed.warnings + post.warnings,
            modifications=post.modifications,
        )

    def _default_output_path(self, input_path: Path) -> Path:
        if self.settings.output_dir:
            return self.settings.output_dir / f"{input_path.stem}.xlsx"
        return input_path.with_suffix(".xlsx")

    @staticmethod
    def _option(value: Optional[bool], default: bool) -> bool:
        return default if value is None else value

    def _render_workbook(
        self,
        tables: list[TableData],
        date_format: DateFormat,
        opts: XlsxConversionOptions,
    ) -> Workbook:
        workbook = Workbook()
        workbook.remove(workbook.active)
        classifier = CellClassifier(date_format)

        for index, table in enumerate(tables):
            worksheet = workbook.create_sheet(title=f"Table {index + 1}")
            self._write_table(worksheet, table, classifier, opts)

        return workbook

    def _write_table(
        self,
        worksheet: Worksheet,
        table: TableData,
        classifier: CellClassifier,
        opts: XlsxConversionOptions,
    ) -> None:
        processed = classifier.process_table(table)
        add_borders = self._option(opts.add_borders, self.settings.add_borders)

        for col, header in enumerate(table.headers, start=1):
            text, font = styled_text(header)
            cell = worksheet.cell(row=1, column=col, value=text)
            if opts.header_bold:
                cell.font = Font(bold=True)
            elif font is not None:
                cell.font = font
            if add_borders:
                cell.border = THIN_BORDER

        for row_number, row in enumerate(processed.rows, start=2):
            for col, processed_cell in enumerate(row.cells, start=1):
                cell = worksheet.cell(row=row_number, column=col)
                self._write_cell(cell, processed_cell, classifier.date_format)
                alignment = table.alignments[col - 1] if col - 1 < len(table.alignments) else None
                if alignment:
                    cell.alignment = Alignment(horizontal=alignment)
                if add_borders:
                    cell.border = THIN_BORDER

        if self._option(opts.freeze_headers, self.settings.freeze_headers) and table.headers:
            worksheet.freeze_panes = "A2"

        if self._option(opts.auto_width, self.settings.auto_width):
            self._fit_columns(worksheet)

    @staticmethod
    def _write_cell(cell, processed: ProcessedCell, date_format: DateFormat) -> None:
        if processed.data_type == CellDataType.NUMBER:
            number = processed.numeric_value
            cell.value = int(number) if number.is_integer() else number
        elif processed.data_type == CellDataType.BOOLEAN:
            cell.value = processed.display_value.lower() == "true"
        elif processed.data_type == CellDataType.DATE:
            cell.value = processed.date_value
            cell.number_format = date_format.excel_number_format
        else:
            text, font = styled_text(processed.display_value)
            cell.value = text
            if text.startswith("="):
                # Literal text, not a formula
                cell.data_type = "s"
            if font is not None:
                cell.font = font

    def _fit_columns(self, worksheet: Worksheet) -> None:
        for column_cells in worksheet.iter_cols():
            longest = max((len(str(c.value)) for c in column_cells if c.value is not None), default=0)
            letter = get_column_letter(column_cells[0].column)
            worksheet.column_dimensions[letter].width = min(longest + 2, self.settings.max_column_width)

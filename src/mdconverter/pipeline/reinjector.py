"""Put extracted formulas back into a rendered workbook.

Runs after rendering. Each FormulaLocation names the worksheet (by table
index) and the placeholder text the renderer wrote into a cell; the
placeholder is replaced with a live formula. A placeholder that cannot be
found produces a warning and the remaining formulas are still processed.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from openpyxl import Workbook, load_workbook
from openpyxl.cell import Cell
from openpyxl.worksheet.worksheet import Worksheet
from pydantic import BaseModel, Field

from ..formulas import FormulaLocation
from ..metadata import DocumentMetadata

logger = logging.getLogger(__name__)


class InjectionResult(BaseModel):
    """Outcome of replacing placeholders in a workbook."""

    modifications: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class PostProcessResult(BaseModel):
    """Outcome of post-processing a workbook file."""

    success: bool
    output_path: Path
    modifications: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


def to_cell_formula(formula: str) -> str:
    """Formula body as stored in an openpyxl cell (leading "=")."""
    return f"={formula}"


class FormulaReinjector:
    """Replace formula placeholders in a workbook with live formulas."""

    def reinject(self, workbook: Workbook, formulas: list[FormulaLocation]) -> InjectionResult:
        """
        Inject formulas into an open workbook.

        Args:
            workbook: Rendered workbook, one worksheet per table, in order
            formulas: Locations recorded during extraction

        Returns:
            InjectionResult with a modification entry per injected formula
        """
        result = InjectionResult()
        worksheets = workbook.worksheets

        for location in formulas:
            if location.table_index >= len(worksheets):
                result.warnings.append(
                    f"Worksheet {location.table_index} not found for formula placeholder: "
                    f"{location.placeholder}"
                )
                continue

            worksheet = worksheets[location.table_index]
            cell = self._find_placeholder(worksheet, location)
            if cell is None:
                logger.warning(f"Formula placeholder not found: {location.placeholder}")
                result.warnings.append(f"Formula placeholder not found: {location.placeholder}")
                continue

            cell.value = to_cell_formula(location.formula)
            result.modifications.append(
                f"Injected formula at {worksheet.title}!{cell.coordinate}: {location.formula}"
            )
            logger.debug(f"Injected {location.placeholder} into {worksheet.title}!{cell.coordinate}")

        return result

    @staticmethod
    def _find_placeholder(worksheet: Worksheet, location: FormulaLocation) -> Optional[Cell]:
        """Find the cell holding the placeholder, by search then by position."""
        for row in worksheet.iter_rows():
            for cell in row:
                if cell.value is not None and location.placeholder in str(cell.value):
                    return cell

        # Row and column are 0-based with the header as row 0. worksheet.cell()
        # creates missing cells, so stay inside the used range.
        row, column = location.row + 1, location.column + 1
        if row > worksheet.max_row or column > worksheet.max_column:
            return None
        cell = worksheet.cell(row=row, column=column)
        if cell.value is not None and location.placeholder in str(cell.value):
            return cell
        return None

    def update_properties(self, workbook: Workbook, metadata: DocumentMetadata) -> list[str]:
        """Copy document metadata into the workbook properties."""
        modifications = []
        properties = workbook.properties

        if metadata.title:
            properties.title = metadata.title
            modifications.append(f"Set workbook title: {metadata.title}")

        if metadata.author:
            properties.creator = metadata.author
            modifications.append(f"Set workbook creator: {metadata.author}")

        subject = metadata.subject or metadata.classification
        if subject:
            properties.subject = subject
            modifications.append(f"Set workbook subject: {subject}")

        if metadata.keywords:
            properties.keywords = ", ".join(metadata.keywords)
            modifications.append(f"Set workbook keywords: {properties.keywords}")

        properties.modified = datetime.now(timezone.utc).replace(tzinfo=None)
        return modifications

    def process_xlsx(
        self,
        path: Union[str, Path],
        formulas: list[FormulaLocation],
        metadata: Optional[DocumentMetadata] = None,
    ) -> PostProcessResult:
        """Load a workbook, inject formulas, update properties and save it in place."""
        path = Path(path)
        workbook = load_workbook(filename=path)

        modifications = []
        warnings = []

        if formulas:
            injection = self.reinject(workbook, formulas)
            modifications.extend(injection.modifications)
            warnings.extend(injection.warnings)

        if metadata is not None:
            modifications.extend(self.update_properties(workbook, metadata))

        workbook.save(path)
        logger.info(
            f"Post-processed {path.name}: {len(modifications)} modification(s), "
            f"{len(warnings)} warning(s)"
        )

        return PostProcessResult(
            success=True,
            output_path=path,
            modifications=modifications,
            warnings=warnings,
        )

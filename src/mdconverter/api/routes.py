"""API routes for md-converter."""

import logging
import tempfile
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel

from ..config import settings
from ..converters import XlsxConversionOptions, XlsxConverter
from ..errors import ConverterError, FrontMatterError
from ..formulas import FormulaExtractor, FormulaValidator
from ..metadata import MetadataNormalizer, parse_front_matter
from ..pipeline import PreProcessor, normalize_line_endings
from ..tables import CellClassifier, DateFormat, MarkdownTableReader

logger = logging.getLogger(__name__)

router = APIRouter()

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class MarkdownRequest(BaseModel):
    """Request carrying a markdown document."""

    markdown: str
    date_format: Optional[DateFormat] = None


class FormulaValidateRequest(BaseModel):
    """Validate one formula, or every formula in a document."""

    formula: Optional[str] = None
    markdown: Optional[str] = None


class PreprocessRequest(BaseModel):
    """Request to pre-process a document."""

    markdown: str
    validate_formulas: bool = True
    preserve_line_endings: bool = False


class ConvertRequest(BaseModel):
    """Request to convert a document to XLSX."""

    markdown: str
    filename: str = "document.xlsx"
    freeze_headers: Optional[bool] = None
    auto_width: Optional[bool] = None
    add_borders: Optional[bool] = None
    validate_formulas: Optional[bool] = None


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "md-converter",
        "config": {
            "default_date_format": settings.default_date_format,
            "validate_formulas": settings.validate_formulas,
            "generator_name": settings.generator_name,
        },
    }


@router.post("/tables/preview")
async def preview_tables(request: MarkdownRequest):
    """
    Classify every table cell in a document.

    Returns the tables in document order, each cell with its detected type.
    """
    front_matter = parse_front_matter(normalize_line_endings(request.markdown))
    if front_matter.errors:
        raise HTTPException(status_code=400, detail=front_matter.errors[0])

    date_format = request.date_format
    if date_format is None and front_matter.metadata:
        try:
            metadata, _ = MetadataNormalizer().normalize(front_matter.metadata)
        except FrontMatterError as e:
            raise HTTPException(status_code=400, detail=str(e))
        date_format = metadata.date_format
    classifier = CellClassifier(date_format or settings.default_date_format)

    tables = MarkdownTableReader().read(front_matter.content)
    preview = []
    for index, table in enumerate(tables):
        processed = classifier.process_table(table)
        preview.append(
            {
                "index": index,
                "headers": processed.headers,
                "has_formulas": processed.has_formulas,
                "rows": [
                    [cell.model_dump(mode="json", exclude_none=True) for cell in row.cells]
                    for row in processed.rows
                ],
            }
        )

    return {
        "date_format": classifier.date_format.value,
        "table_count": len(preview),
        "tables": preview,
        "warnings": front_matter.warnings,
    }


@router.post("/formulas/validate")
async def validate_formulas(request: FormulaValidateRequest):
    """Validate a single formula or every table formula of a document."""
    validator = FormulaValidator()

    if request.formula is not None:
        return {"validation": validator.validate(request.formula).model_dump()}

    if request.markdown is None:
        raise HTTPException(status_code=400, detail="Provide either 'formula' or 'markdown'")

    front_matter = parse_front_matter(normalize_line_endings(request.markdown))
    if front_matter.errors:
        raise HTTPException(status_code=400, detail=front_matter.errors[0])

    extraction = FormulaExtractor(validator=validator, validate=False).extract(front_matter.content)
    results = []
    for location in extraction.formulas:
        results.append(
            {
                "location": location.model_dump(),
                "validation": validator.validate(location.formula).model_dump(),
            }
        )

    return {
        "formula_count": len(results),
        "invalid_count": sum(1 for r in results if not r["validation"]["is_valid"]),
        "formulas": results,
    }


@router.post("/preprocess")
async def preprocess(request: PreprocessRequest):
    """Run the pre-processor and return processed content plus formula map."""
    try:
        result = PreProcessor().process(
            request.markdown,
            validate_formulas=request.validate_formulas,
            preserve_line_endings=request.preserve_line_endings,
        )
    except ConverterError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "content": result.content,
        "formulas": [f.model_dump() for f in result.formulas],
        "metadata": result.metadata.model_dump(mode="json", exclude_none=True),
        "table_count": result.table_count,
        "warnings": result.warnings,
    }


@router.post("/convert/xlsx")
def convert_xlsx(request: ConvertRequest):
    """Convert a markdown document and return the workbook."""
    options = XlsxConversionOptions(
        freeze_headers=request.freeze_headers,
        auto_width=request.auto_width,
        add_borders=request.add_borders,
        validate_formulas=request.validate_formulas,
    )
    filename = Path(request.filename).name or "document.xlsx"

    with tempfile.TemporaryDirectory() as tmp_dir:
        output_path = Path(tmp_dir) / filename
        try:
            result = XlsxConverter().convert_text(request.markdown, output_path, options)
        except ConverterError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.exception("XLSX conversion failed")
            raise HTTPException(status_code=500, detail=str(e))
        content = output_path.read_bytes()

    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "X-Table-Count": str(result.table_count),
            "X-Formula-Count": str(result.formula_count),
            "X-Warning-Count": str(len(result.warnings)),
        },
    )

"""Parse and validate YAML front matter from markdown documents."""

import logging
import re
from datetime import date, datetime
from typing import Any, Optional

import yaml

from ..errors import FrontMatterError
from .models import DocumentMetadata, FrontMatterResult, MetadataValidationResult

logger = logging.getLogger(__name__)

DELIMITER = "---"

VALID_FORMATS = ["docx", "pptx", "xlsx", "docx,pptx", "docx,xlsx", "all"]
VALID_STATUSES = ["draft", "review", "approved", "final"]
VALID_SECTION_BREAKS = ["auto", "all", "none"]
VALID_SLIDE_BREAKS = ["h1", "h2", "hr"]
VALID_DOCUMENT_TYPES = ["document", "email", "reference", "note", "system"]
VALID_DATE_FORMATS = ["DD/MM/YYYY", "MM/DD/YYYY", "YYYY-MM-DD"]

EXCLUDED_DOCUMENT_TYPES = {"email", "reference", "note", "system"}
RECOMMENDED_FIELDS = ["author", "date", "classification", "version", "keywords"]
MAX_DESCRIPTION_LENGTH = 250

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)


def parse_front_matter(markdown: str) -> FrontMatterResult:
    """
    Split a document into front matter and body, and load the YAML.

    A missing block is not an error (only a warning). A block without a
    closing delimiter, YAML that does not load, or a block that fails
    schema validation is reported in ``errors``.
    """
    stripped = markdown.lstrip("\n")
    if not stripped.startswith(DELIMITER):
        return FrontMatterResult(
            metadata=None,
            content=markdown,
            has_front_matter=False,
            warnings=["No YAML front matter found. Consider adding metadata."],
        )

    lines = stripped.split("\n")
    if lines[0].strip() != DELIMITER:
        return FrontMatterResult(
            metadata=None,
            content=markdown,
            has_front_matter=False,
            warnings=["No YAML front matter found. Consider adding metadata."],
        )

    end = None
    for index in range(1, len(lines)):
        if lines[index].strip() == DELIMITER:
            end = index
            break

    if end is None:
        return FrontMatterResult(
            metadata=None,
            content=markdown,
            has_front_matter=True,
            errors=["Invalid front matter: Missing closing --- delimiter"],
        )

    front_matter_text = "\n".join(lines[1:end])
    content = "\n".join(lines[end + 1 :])

    try:
        metadata = yaml.safe_load(front_matter_text)
    except yaml.YAMLError as e:
        logger.warning(f"Front matter is not valid YAML: {e}")
        return FrontMatterResult(
            metadata=None,
            content=content,
            has_front_matter=True,
            errors=[f"Invalid YAML syntax: {e}"],
        )

    if isinstance(metadata, dict):
        # YAML allows keys such as 2025 or true; metadata keys are field names
        metadata = {str(key): value for key, value in metadata.items()}

    validation = validate_front_matter(metadata)
    if not validation.valid:
        return FrontMatterResult(
            metadata=None,
            content=content,
            has_front_matter=True,
            warnings=validation.warnings,
            errors=validation.errors,
        )

    return FrontMatterResult(
        metadata=metadata,
        content=content,
        has_front_matter=True,
        warnings=validation.warnings,
    )


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def validate_front_matter(metadata: Any) -> MetadataValidationResult:
    """Check loaded front matter against the metadata schema."""
    errors = []
    warnings = []

    if not isinstance(metadata, dict):
        errors.append("Front matter must be a valid object")
        return MetadataValidationResult(valid=False, errors=errors, warnings=warnings)

    # Required fields
    fmt = metadata.get("format")
    if not fmt:
        errors.append("Required field missing: format")
    elif fmt not in VALID_FORMATS:
        errors.append(f'Invalid format: "{fmt}". Must be one of: {", ".join(VALID_FORMATS)}')

    title = metadata.get("title")
    if not title:
        errors.append("Required field missing: title")
    elif not _is_string(title):
        errors.append('Field "title" must be a string')

    # Optional string fields
    for name in ("author", "classification", "subject"):
        value = metadata.get(name)
        if value and not _is_string(value):
            errors.append(f'Field "{name}" must be a string')

    version = metadata.get("version")
    if version is not None and (isinstance(version, bool) or not isinstance(version, (str, int, float))):
        errors.append('Field "version" must be a string')

    doc_date = metadata.get("date")
    if doc_date:
        if isinstance(doc_date, (date, datetime)):
            pass
        elif not _is_string(doc_date):
            errors.append('Field "date" must be a string')
        elif not ISO_DATE_PATTERN.match(doc_date):
            warnings.append('Field "date" should be in YYYY-MM-DD format')

    description = metadata.get("description")
    if description:
        if not _is_string(description):
            errors.append('Field "description" must be a string')
        elif len(description) > MAX_DESCRIPTION_LENGTH:
            warnings.append(
                f"Description is {len(description)} characters "
                f"(recommended max: {MAX_DESCRIPTION_LENGTH})"
            )

    keywords = metadata.get("keywords")
    if keywords:
        if not isinstance(keywords, list):
            errors.append('Field "keywords" must be an array')
        elif not all(_is_string(k) for k in keywords):
            errors.append("All keywords must be strings")

    if "convert" in metadata and not isinstance(metadata["convert"], bool):
        errors.append('Field "convert" must be a boolean (true or false)')

    # Enumerated fields
    for name, allowed in (
        ("status", VALID_STATUSES),
        ("section_breaks", VALID_SECTION_BREAKS),
        ("slide_breaks", VALID_SLIDE_BREAKS),
        ("document_type", VALID_DOCUMENT_TYPES),
        ("date_format", VALID_DATE_FORMATS),
    ):
        value = metadata.get(name)
        if value and value not in allowed:
            errors.append(f'Invalid {name}: "{value}". Must be one of: {", ".join(allowed)}')

    # Completeness
    for name in RECOMMENDED_FIELDS:
        if not metadata.get(name):
            warnings.append(f"Recommended field missing: {name}")

    return MetadataValidationResult(valid=len(errors) == 0, errors=errors, warnings=warnings)


def get_formats(metadata: Optional[DocumentMetadata]) -> list[str]:
    """Output formats requested by the document (docx when unspecified)."""
    if metadata is None or not metadata.format:
        return ["docx"]
    if metadata.format == "all":
        return ["docx", "pptx", "xlsx"]
    return metadata.format.split(",")


def should_generate_format(metadata: Optional[DocumentMetadata], fmt: str) -> bool:
    return fmt in get_formats(metadata)


def should_convert_document(metadata: Optional[DocumentMetadata]) -> bool:
    """False when conversion is switched off or the document type is excluded."""
    if metadata is None:
        return True
    if metadata.convert is False:
        return False
    if metadata.document_type in EXCLUDED_DOCUMENT_TYPES:
        return False
    return True


def should_exclude_by_path(file_path: str) -> bool:
    """README files and notes/ or reference(s)/ directories are never converted."""
    normalized = file_path.replace("\\", "/")

    if re.search(r"(^|/)README\.md$", normalized, re.IGNORECASE):
        return True
    if re.search(r"/notes/", normalized, re.IGNORECASE):
        return True
    if re.search(r"/references?/", normalized, re.IGNORECASE):
        return True
    return False


def parse_front_matter_strict(markdown: str) -> tuple[DocumentMetadata, str, list[str]]:
    """
    Parse front matter, raising FrontMatterError on any problem.

    Returns:
        Tuple of (metadata, body, warnings)
    """
    result = parse_front_matter(markdown)

    if result.errors:
        first_error = result.errors[0]
        field_match = re.search(r'field (?:missing: |")?(\w+)', first_error, re.IGNORECASE)
        if field_match:
            raise FrontMatterError(first_error, field_match.group(1))
        raise FrontMatterError(first_error)

    if result.metadata is None:
        raise FrontMatterError("No valid front matter found")

    return DocumentMetadata.model_validate(result.metadata), result.content, result.warnings

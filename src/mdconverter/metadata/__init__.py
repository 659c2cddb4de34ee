"""Document metadata: front-matter parsing, validation and normalization."""

from .models import DocumentMetadata, FrontMatterResult, MetadataValidationResult
from .frontmatter import (
    get_formats,
    parse_front_matter,
    parse_front_matter_strict,
    should_convert_document,
    should_exclude_by_path,
    should_generate_format,
    validate_front_matter,
)
from .normalizer import NO_METADATA_WARNING, MetadataNormalizer

__all__ = [
    "DocumentMetadata",
    "FrontMatterResult",
    "MetadataValidationResult",
    "get_formats",
    "parse_front_matter",
    "parse_front_matter_strict",
    "should_convert_document",
    "should_exclude_by_path",
    "should_generate_format",
    "validate_front_matter",
    "NO_METADATA_WARNING",
    "MetadataNormalizer",
]

"""Prepare markdown for rendering.

Steps, in order:
1. Normalize line endings to LF (table detection assumes LF input)
2. Parse and normalize the front matter
3. Swap table formulas for placeholders
4. Rebuild the document with the normalized front matter
"""

import logging
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from ..errors import FrontMatterError, PreProcessorError
from ..formulas import FormulaExtractor, FormulaLocation, FormulaValidator
from ..metadata import DocumentMetadata, MetadataNormalizer, parse_front_matter

logger = logging.getLogger(__name__)


class PreProcessorResult(BaseModel):
    """Processed document plus everything needed after rendering."""

    content: str  # Full document, front matter included
    body: str  # Processed document without front matter
    formulas: list[FormulaLocation] = Field(default_factory=list)
    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)
    has_front_matter: bool = False
    table_count: int = 0
    warnings: list[str] = Field(default_factory=list)


def normalize_line_endings(content: str) -> str:
    return content.replace("\r\n", "\n").replace("\r", "\n")


class PreProcessor:
    """
    Run metadata normalization and formula extraction over a document.

    Instances hold no per-document state, but each caller should construct
    its own; nothing is shared between instances.
    """

    def __init__(
        self,
        normalizer: Optional[MetadataNormalizer] = None,
        validator: Optional[FormulaValidator] = None,
    ):
        self.normalizer = normalizer or MetadataNormalizer()
        self.validator = validator or FormulaValidator()

    def process(
        self,
        markdown: str,
        validate_formulas: bool = True,
        preserve_line_endings: bool = False,
    ) -> PreProcessorResult:
        """
        Process a markdown document.

        Args:
            markdown: Raw document text
            validate_formulas: Add a warning for every invalid formula
            preserve_line_endings: Skip CRLF/CR normalization. Table
                detection is only reliable on LF input.

        Returns:
            PreProcessorResult

        Raises:
            PreProcessorError: if the front matter cannot be parsed
        """
        warnings: list[str] = []
        content = markdown if preserve_line_endings else normalize_line_endings(markdown)

        front_matter = parse_front_matter(content)
        if front_matter.errors:
            raise PreProcessorError("Invalid YAML front matter", front_matter.errors[0])

        try:
            metadata, metadata_warnings = self.normalizer.normalize(front_matter.metadata)
        except FrontMatterError as e:
            raise PreProcessorError("Failed to normalize front matter", str(e)) from e

        if front_matter.has_front_matter:
            warnings.extend(front_matter.warnings)
        warnings.extend(metadata_warnings)

        extractor = FormulaExtractor(validator=self.validator, validate=validate_formulas)
        extraction = extractor.extract(front_matter.content)
        warnings.extend(extraction.warnings)

        if front_matter.has_front_matter:
            final_content = self.reconstruct_content(metadata, extraction.processed_content)
        else:
            final_content = extraction.processed_content

        logger.info(
            f"Pre-processed document: {extraction.table_count} table(s), "
            f"{len(extraction.formulas)} formula(s), {len(warnings)} warning(s)"
        )

        return PreProcessorResult(
            content=final_content,
            body=extraction.processed_content,
            formulas=extraction.formulas,
            metadata=metadata,
            has_front_matter=front_matter.has_front_matter,
            table_count=extraction.table_count,
            warnings=warnings,
        )

    @staticmethod
    def reconstruct_content(metadata: DocumentMetadata, body: str) -> str:
        """Prefix body with a YAML front-matter block built from metadata."""
        data = metadata.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        yaml_text = yaml.safe_dump(
            data,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
            width=float("inf"),
        )
        return f"---\n{yaml_text}---\n{body}"

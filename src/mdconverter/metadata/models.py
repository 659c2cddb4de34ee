"""Data models for document metadata (YAML front matter)."""

from datetime import date as date_type, datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..tables.models import DateFormat

OutputFormat = Literal["docx", "pptx", "xlsx", "docx,pptx", "docx,xlsx", "all"]
DocumentStatus = Literal["draft", "review", "approved", "final"]
DocumentType = Literal["document", "email", "reference", "note", "system"]
SectionBreaks = Literal["auto", "all", "none"]
SlideBreaks = Literal["h1", "h2", "hr"]


class DocumentMetadata(BaseModel):
    """
    Front-matter fields understood by the converter.

    Unknown keys are kept as extra fields and written back out unchanged.
    """

    model_config = ConfigDict(extra="allow")

    format: Optional[OutputFormat] = None
    title: Optional[str] = None

    author: Optional[str] = None
    date: Optional[str] = None  # YYYY-MM-DD recommended
    classification: Optional[str] = None
    version: Optional[str] = None
    status: Optional[DocumentStatus] = None
    description: Optional[str] = None
    keywords: list[str] = Field(default_factory=list)
    subject: Optional[str] = None

    # Document control
    convert: Optional[bool] = None
    document_type: Optional[DocumentType] = None

    # Format specific
    section_breaks: Optional[SectionBreaks] = None
    slide_breaks: Optional[SlideBreaks] = None
    date_format: Optional[DateFormat] = None

    generator: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, value: Any) -> Any:
        # YAML loads unquoted 2025-01-15 as a date object
        if isinstance(value, (date_type, datetime)):
            return value.isoformat()
        return value

    @field_validator("version", mode="before")
    @classmethod
    def coerce_version(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("keywords", mode="before")
    @classmethod
    def coerce_keywords(cls, value: Any) -> Any:
        # An empty "keywords:" key loads as None
        if value is None:
            return []
        return value


class FrontMatterResult(BaseModel):
    """Result of splitting and parsing a front-matter block."""

    metadata: Optional[dict[str, Any]] = None  # Raw mapping as loaded from YAML
    content: str  # Document body without the front matter
    has_front_matter: bool = False
    warnings: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


class MetadataValidationResult(BaseModel):
    """Result of validating raw front matter against the schema."""

    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

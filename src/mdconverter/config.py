"""Configuration management for md-converter."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


def _parse_cors_origins() -> list[str]:
    """Parse CORS origins from environment variable."""
    cors_env = os.getenv("CORS_ALLOW_ORIGINS")
    if cors_env:
        return cors_env.split(",")
    return ["*"]


def _parse_output_dir() -> Optional[Path]:
    """Parse the optional output directory from environment variable."""
    output_dir = os.getenv("OUTPUT_DIR")
    if output_dir:
        return Path(output_dir)
    return None


class Settings(BaseModel):
    """Application settings."""

    # Table parsing - one of DD/MM/YYYY, MM/DD/YYYY, YYYY-MM-DD
    default_date_format: str = os.getenv("DEFAULT_DATE_FORMAT", "DD/MM/YYYY")

    # Pre-processing
    validate_formulas: bool = os.getenv("VALIDATE_FORMULAS", "true").lower() == "true"
    preserve_line_endings: bool = os.getenv("PRESERVE_LINE_ENDINGS", "false").lower() == "true"
    generator_name: str = os.getenv("GENERATOR_NAME", "md-converter")
    max_markdown_chars: int = int(os.getenv("MAX_MARKDOWN_CHARS", "2000000"))

    # Output location (None means next to the input file)
    output_dir: Optional[Path] = _parse_output_dir()

    # Workbook styling
    freeze_headers: bool = os.getenv("FREEZE_HEADERS", "true").lower() == "true"
    auto_width: bool = os.getenv("AUTO_WIDTH", "true").lower() == "true"
    add_borders: bool = os.getenv("ADD_BORDERS", "true").lower() == "true"
    max_column_width: int = int(os.getenv("MAX_COLUMN_WIDTH", "60"))

    # Server settings
    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT", "8000"))
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"

    # CORS settings (comma-separated list of allowed origins, or * for all)
    cors_allow_origins: list[str] = _parse_cors_origins()

    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()

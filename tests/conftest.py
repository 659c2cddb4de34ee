"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from mdconverter.config import Settings


SAMPLE_MARKDOWN = """---
format: xlsx
title: Quarterly Budget
author: Finance Team
date: "2025-01-15"
classification: OFFICIAL
version: "1.0"
keywords:
  - budget
  - forecast
date_format: DD/MM/YYYY
---

# Budget

Totals are computed with {=SUM(A1:A2)} style formulas.

| Item | Cost | Due |
|------|-----:|-----|
| Rent | $1,200.50 | 01/02/2025 |
| Power | 300 | 15/02/2025 |
| Total | {=SUM(B2:B3)} | |

## Staff

| Name | Active | Hours |
|:-----|:------:|------:|
| Ada | true | 38 |
| Grace | FALSE | {=AVERAGE(C2:C2)} |
"""


@pytest.fixture
def sample_markdown() -> str:
    """A document with front matter, prose and two tables with formulas."""
    return SAMPLE_MARKDOWN


@pytest.fixture
def markdown_file(tmp_path: Path, sample_markdown: str) -> Path:
    """Write the sample document to a temporary file."""
    path = tmp_path / "budget.md"
    path.write_text(sample_markdown, encoding="utf-8")
    return path


@pytest.fixture
def test_settings() -> Settings:
    """Create settings with test values."""
    return Settings(
        default_date_format="DD/MM/YYYY",
        validate_formulas=True,
        preserve_line_endings=False,
        generator_name="md-converter",
        output_dir=None,
        freeze_headers=True,
        auto_width=True,
        add_borders=True,
        max_column_width=60,
        max_markdown_chars=2000000,
    )

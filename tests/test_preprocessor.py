"""Tests for the pre-processor."""

import pytest
import yaml

from mdconverter.errors import PreProcessorError
from mdconverter.metadata import NO_METADATA_WARNING, DocumentMetadata
from mdconverter.pipeline import PreProcessor, normalize_line_endings


class TestNormalizeLineEndings:
    """Test line ending normalization."""

    def test_crlf_and_cr(self):
        """Test CRLF and bare CR become LF."""
        assert normalize_line_endings("a\r\nb\rc\n") == "a\nb\nc\n"


class TestPreProcessor:
    """Test PreProcessor.process."""

    def test_full_document(self, sample_markdown):
        """Test metadata, formulas and reconstructed content."""
        result = PreProcessor().process(sample_markdown)

        assert result.has_front_matter is True
        assert result.table_count == 2
        assert [f.placeholder for f in result.formulas] == ["__FORMULA_0_3_1__", "__FORMULA_1_2_2__"]
        assert result.metadata.title == "Quarterly Budget"
        assert result.metadata.subject == "OFFICIAL"
        assert result.metadata.generator == "md-converter"
        assert result.warnings == []

        assert result.content.startswith("---\n")
        assert "{=SUM(B2:B3)}" not in result.content
        assert "__FORMULA_0_3_1__" in result.content
        assert "Totals are computed with {=SUM(A1:A2)} style formulas." in result.content
        assert result.content.endswith(result.body)

    def test_reconstructed_front_matter_loads(self, sample_markdown):
        """Test the rebuilt block is YAML with the derived fields."""
        result = PreProcessor().process(sample_markdown)

        _, block, _ = result.content.split("---\n", 2)
        data = yaml.safe_load(block)
        assert data["title"] == "Quarterly Budget"
        assert data["subject"] == "OFFICIAL"
        assert data["generator"] == "md-converter"
        assert data["keywords"] == ["budget", "forecast"]
        assert data["date_format"] == "DD/MM/YYYY"

    def test_extra_fields_round_trip(self):
        """Test unknown front-matter keys are written back."""
        markdown = "---\nformat: xlsx\ntitle: T\nproject: Apollo\n---\n| A |\n|---|\n| 1 |"
        result = PreProcessor().process(markdown)

        assert "project: Apollo" in result.content

    def test_without_front_matter(self):
        """Test documents without front matter keep their body as is."""
        markdown = "| A | B |\n|---|---|\n| 1 | {=A2*2} |"
        result = PreProcessor().process(markdown)

        assert result.has_front_matter is False
        assert result.metadata.title is None
        assert result.warnings == [NO_METADATA_WARNING]
        assert result.content == "| A | B |\n|---|---|\n| 1 | __FORMULA_0_1_1__ |"

    def test_crlf_input(self):
        """Test CRLF documents are normalized before table detection."""
        markdown = "---\r\nformat: xlsx\r\ntitle: T\r\n---\r\n| A |\r\n|---|\r\n| {=A1} |\r\n"
        result = PreProcessor().process(markdown)

        assert "\r" not in result.content
        assert len(result.formulas) == 1
        assert result.formulas[0].placeholder == "__FORMULA_0_1_0__"

    def test_empty_keywords_key(self):
        """Test a bare keywords key is treated as no keywords."""
        markdown = "---\nformat: xlsx\ntitle: T\nkeywords:\n---\n| A |\n|---|\n| {=SUM(A1)} |\n"
        result = PreProcessor().process(markdown)

        assert result.metadata.keywords == []
        assert len(result.formulas) == 1
        assert "Recommended field missing: keywords" in result.warnings

    def test_non_string_yaml_keys(self):
        """Test keys YAML loads as numbers pass through as strings."""
        markdown = "---\nformat: xlsx\ntitle: T\n2025: x\n---\n| A |\n|---|\n| {=SUM(A1)} |\n"
        result = PreProcessor().process(markdown)

        assert result.metadata.model_dump()["2025"] == "x"
        assert len(result.formulas) == 1
        _, block, _ = result.content.split("---\n", 2)
        assert yaml.safe_load(block)["2025"] == "x"

    def test_invalid_yaml_is_fatal(self):
        """Test unparsable front matter raises."""
        with pytest.raises(PreProcessorError) as exc_info:
            PreProcessor().process("---\ntitle: [oops\n---\n| A |\n|---|\n| 1 |")
        assert str(exc_info.value).startswith("Invalid YAML front matter: Invalid YAML syntax")

    def test_schema_errors_are_fatal(self):
        """Test front matter missing required fields raises."""
        with pytest.raises(PreProcessorError):
            PreProcessor().process("---\nauthor: A\n---\nBody")

    def test_invalid_formulas_warn(self):
        """Test invalid formulas are extracted with a warning."""
        result = PreProcessor().process("| A |\n|---|\n| {=SUM(A1} |")

        assert len(result.formulas) == 1
        assert "Invalid formula at table 0, row 1, column 0: Mismatched parentheses" in result.warnings

    def test_formula_validation_off(self):
        """Test validation can be skipped."""
        result = PreProcessor().process("| A |\n|---|\n| {=SUM(A1} |", validate_formulas=False)
        assert result.warnings == [NO_METADATA_WARNING]

    def test_front_matter_warnings_included(self):
        """Test recommended-field warnings come through."""
        result = PreProcessor().process("---\nformat: xlsx\ntitle: T\n---\nBody")
        assert "Recommended field missing: author" in result.warnings

    def test_reconstruct_content(self):
        """Test only set fields are written."""
        metadata = DocumentMetadata(title="T", format="xlsx")
        content = PreProcessor.reconstruct_content(metadata, "Body")

        assert content == "---\nformat: xlsx\ntitle: T\n---\nBody"

"""Tests for formula extraction and placeholder generation."""

from mdconverter.formulas import (
    PLACEHOLDER_PATTERN,
    FormulaExtractor,
    contains_placeholder,
    make_placeholder,
)


SINGLE_TABLE = """| A | B | C |
|---|---|---|
| 1 | 2 | {=SUM(B2:B5)} |"""


class TestPlaceholders:
    """Test placeholder tokens."""

    def test_make_placeholder(self):
        """Test the token encodes table, row and column."""
        assert make_placeholder(0, 1, 2) == "__FORMULA_0_1_2__"
        assert make_placeholder(12, 30, 4) == "__FORMULA_12_30_4__"

    def test_placeholder_pattern(self):
        """Test tokens can be found and parsed back."""
        match = PLACEHOLDER_PATTERN.search("x __FORMULA_3_4_5__ y")
        assert match.groups() == ("3", "4", "5")
        assert contains_placeholder("__FORMULA_0_0_0__") is True
        assert contains_placeholder("__bold__") is False


class TestFormulaExtractor:
    """Test FormulaExtractor.extract."""

    def test_single_formula(self):
        """Test the formula in the first body row, third column."""
        result = FormulaExtractor().extract(SINGLE_TABLE)

        assert len(result.formulas) == 1
        location = result.formulas[0]
        assert location.formula == "SUM(B2:B5)"
        assert location.placeholder == "__FORMULA_0_1_2__"
        assert location.coordinates == (0, 1, 2)
        assert result.table_count == 1
        assert result.warnings == []

        lines = result.processed_content.split("\n")
        assert lines[0] == "| A | B | C |"
        assert lines[1] == "|---|---|---|"
        assert lines[2] == "| 1 | 2 | __FORMULA_0_1_2__ |"

    def test_multiple_tables(self):
        """Test table indices increase with each new table."""
        content = (
            "| X | W |\n|---|---|\n| {=A1} | {=B1+1} |\n"
            "\n"
            "Some prose.\n"
            "\n"
            "| Y | Z |\n|---|---|\n| 1 | {=B2*2} |"
        )
        result = FormulaExtractor().extract(content)

        assert result.table_count == 2
        assert [f.placeholder for f in result.formulas] == [
            "__FORMULA_0_1_0__",
            "__FORMULA_0_1_1__",
            "__FORMULA_1_1_1__",
        ]
        assert [f.formula for f in result.formulas] == ["A1", "B1+1", "B2*2"]

    def test_header_row_is_row_zero(self):
        """Test formulas in the header row get row 0."""
        result = FormulaExtractor().extract("| {=NOW()} |\n|---|\n| x |")
        assert result.formulas[0].placeholder == "__FORMULA_0_0_0__"

    def test_invalid_formula_still_extracted(self):
        """Test an invalid formula is extracted and reported as a warning."""
        result = FormulaExtractor().extract("| A |\n|---|\n| {=SUM(A1:A5} |")

        assert len(result.formulas) == 1
        assert result.formulas[0].formula == "SUM(A1:A5"
        assert "__FORMULA_0_1_0__" in result.processed_content
        assert result.warnings == [
            "Invalid formula at table 0, row 1, column 0: Mismatched parentheses"
        ]

    def test_validation_can_be_disabled(self):
        """Test no warnings when validation is off."""
        result = FormulaExtractor(validate=False).extract("| A |\n|---|\n| {=SUM(A1:A5} |")
        assert len(result.formulas) == 1
        assert result.warnings == []

    def test_prose_is_untouched(self):
        """Test markers outside tables stay in the output."""
        content = "Use {=SUM(A1:A2)} in a cell.\n\n| A |\n|---|\n| 1 |"
        result = FormulaExtractor().extract(content)

        assert result.formulas == []
        assert result.processed_content == content
        assert result.table_count == 1

    def test_lines_without_formulas_unchanged(self):
        """Test table lines without markers keep their exact text."""
        content = "|  A |B|\n| :-- | --: |\n|  1 |  2  |\n|x|{=A2}|"
        result = FormulaExtractor().extract(content)

        lines = result.processed_content.split("\n")
        assert lines[:3] == ["|  A |B|", "| :-- | --: |", "|  1 |  2  |"]
        assert lines[3] == "|x|__FORMULA_0_2_1__|"

    def test_multiple_formulas_in_one_cell(self):
        """Test only the first marker in a cell is extracted."""
        result = FormulaExtractor().extract("| A |\n|---|\n| {=A1} and {=B1} |")

        assert len(result.formulas) == 1
        assert result.formulas[0].formula == "A1"
        assert "__FORMULA_0_1_0__ and {=B1}" in result.processed_content
        assert result.warnings == [
            "Multiple formulas at table 0, row 1, column 0: only the first is extracted"
        ]

    def test_malformed_markers_warn(self):
        """Test malformed markers produce warnings and are left alone."""
        content = "| A | B | C |\n|---|---|---|\n| {SUM(A1)} | {=SUM(A1) | {=} |"
        result = FormulaExtractor().extract(content)

        assert result.formulas == []
        assert result.warnings == [
            "Malformed formula at table 0, row 1, column 0: formula marker is missing '=' after '{'",
            "Malformed formula at table 0, row 1, column 1: formula marker is missing its closing '}'",
            "Malformed formula at table 0, row 1, column 2: Empty formula",
        ]
        assert result.processed_content == content

    def test_placeholders_unique(self, sample_markdown):
        """Test every extracted formula gets a distinct placeholder."""
        result = FormulaExtractor().extract(sample_markdown)
        placeholders = [f.placeholder for f in result.formulas]

        assert len(placeholders) == 2
        assert len(set(placeholders)) == len(placeholders)
        for placeholder in placeholders:
            assert result.processed_content.count(placeholder) == 1

    def test_deterministic(self, sample_markdown):
        """Test repeated extraction gives identical results."""
        first = FormulaExtractor().extract(sample_markdown)
        second = FormulaExtractor().extract(sample_markdown)
        assert first == second

    def test_no_tables(self):
        """Test documents without tables."""
        result = FormulaExtractor().extract("# Heading\n\nText only.")
        assert result.table_count == 0
        assert result.formulas == []
        assert result.processed_content == "# Heading\n\nText only."

"""
Test suite for direct table answers.

Tests table question detection, highest-score lookup and table rendering.

System role: Verification of deterministic table question answering
"""

from taskdesk.core.bot.table_answers import (
    EMPTY_CELL,
    describe_table,
    detect_max_score,
    format_cell,
    is_max_question,
    is_table_question,
    safe_columns,
    summarize_table,
)

COLUMNS = ["שם", "ציון"]
ROWS = [["דנה", 70], ["יואב", 95], ["עומר", 60]]


class TestQuestionDetection:
    """Test suite for table and max question detection."""

    def test_is_table_question_should_match_table_keyword(self) -> None:
        """Test the table keyword is found inside an inflected word."""
        assert is_table_question("מה הציון הגבוה ביותר בטבלה?")
        assert not is_table_question("מה קורה?")

    def test_is_max_question_should_match_hebrew_and_english(self) -> None:
        """Test both Hebrew and English maximum phrasing."""
        assert is_max_question("מה הציון הגבוה ביותר?")
        assert is_max_question("what is the HIGHEST score")
        assert not is_max_question("כמה שורות יש?")


class TestDetectMaxScore:
    """Test suite for detect_max_score."""

    def test_detect_max_score_should_name_value_and_row(self) -> None:
        """Test the highest score and its name are reported."""
        # Act
        answer = detect_max_score(COLUMNS, ROWS)

        # Assert
        assert answer == "הציון הגבוה ביותר הוא 95 של יואב. (עמודה: ציון)"

    def test_detect_max_score_should_parse_numeric_strings(self) -> None:
        """Test string cells holding numbers are compared numerically."""
        rows = [["א", "9"], ["ב", "10"], ["ג", "לא ידוע"]]

        assert detect_max_score(COLUMNS, rows).startswith("הציון הגבוה ביותר הוא 10 של ב.")

    def test_detect_max_score_without_name_column(self) -> None:
        """Test the name part is omitted when there is no name column."""
        assert detect_max_score(["score"], [[1], [3.5]]) == (
            "הציון הגבוה ביותר הוא 3.5. (עמודה: score)"
        )

    def test_detect_max_score_should_return_none_without_score_column(self) -> None:
        """Test tables without a score column are not answered."""
        assert detect_max_score(["שם", "עיר"], [["דנה", "חיפה"]]) is None

    def test_detect_max_score_should_return_none_without_numbers(self) -> None:
        """Test no numeric value yields None."""
        assert detect_max_score(COLUMNS, [["דנה", ""], ["יואב", None]]) is None


class TestTableRendering:
    """Test suite for table description and summary."""

    def test_format_cell_should_drop_integral_fraction(self) -> None:
        """Test integral floats render without .0 and blanks as a dash."""
        assert format_cell(95.0) == "95"
        assert format_cell(2.5) == "2.5"
        assert format_cell(None) == EMPTY_CELL
        assert format_cell("") == EMPTY_CELL

    def test_safe_columns_should_name_foreign_columns_by_position(self) -> None:
        """Test columns with no Hebrew text get a positional name."""
        assert safe_columns(["name", "שם"]) == ["עמודה 1", "שם"]

    def test_describe_table_should_report_shape_and_rows(self) -> None:
        """Test description header and first rows."""
        # Act
        lines = describe_table("דוגמא", COLUMNS, ROWS, max_rows=2).split("\n")

        # Assert
        assert lines == [
            'בטבלה "דוגמא" יש 3 שורות ו-2 עמודות: שם, ציון.',
            "1. שם: דנה | ציון: 70",
            "2. שם: יואב | ציון: 95",
        ]

    def test_summarize_table_should_be_single_line(self) -> None:
        """Test the retrieval summary is whitespace-normalized."""
        # Act
        summary = summarize_table("דוגמא", COLUMNS, ROWS)

        # Assert
        assert "\n" not in summary
        assert summary.startswith("שם: דוגמא עמודות (2): שם, ציון")
        assert "3. שם: עומר | ציון: 60" in summary

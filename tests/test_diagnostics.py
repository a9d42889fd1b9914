# =============================================================================
# test_diagnostics.py - Error Formatting Tests
# =============================================================================
# Tests for the caret excerpt formatter, the error classes built on it and
# the ErrorCollector report.
# =============================================================================

import pytest

from hack_asm.diagnostics import format_excerpt
from hack_asm.errors import (
    AddressRangeError,
    AssemblySyntaxError,
    DuplicateSymbolError,
    ErrorCollector,
    SourceLocation,
    TooManyErrors,
)


class TestFormatExcerpt:

    def test_single_digit_line_number(self):
        assert format_excerpt("0;JPM", 2, 3, 3) == "3 | 0;JPM\n      ^^^--here"

    def test_padding_grows_with_line_number(self):
        text = format_excerpt("D=X", 2, 1, 12)
        first, second = text.split("\n")
        assert first == "12 | D=X"
        assert second == " " * (len("12 | ") + 2) + "^--here"

    def test_offset_zero(self):
        assert format_excerpt("@", 0, 1, 1) == "1 | @\n    ^--here"

    def test_zero_length_still_shows_one_caret(self):
        assert format_excerpt("D=", 2, 0, 1).endswith("^--here")

    def test_line_text_is_unchanged(self):
        line = "\tD=M   // tab indented"
        assert format_excerpt(line, 1, 1, 5).split("\n")[0] == f"5 | {line}"

    def test_pure(self):
        assert format_excerpt("A", 0, 1, 1) == format_excerpt("A", 0, 1, 1)


class TestAssemblerErrorMessages:

    def test_located_error(self):
        error = AssemblySyntaxError(
            "expected jump keyword after ';'",
            SourceLocation("Max.asm", 7, 3),
            source_line="0;JPM",
            length=3,
        )
        assert str(error) == (
            "Max.asm:7:3: error: expected jump keyword after ';'\n"
            "7 | 0;JPM\n"
            "      ^^^--here"
        )

    def test_unlocated_error(self):
        assert str(AssemblySyntaxError("boom")) == "error: boom"

    def test_duplicate_label_hint(self):
        error = DuplicateSymbolError("LOOP", original_address=4)
        assert error.symbol == "LOOP"
        assert "already bound to address 4" in str(error)

    def test_duplicate_predefined_hint(self):
        error = DuplicateSymbolError("SP", original_address=0, predefined=True)
        assert "predefined symbol" in str(error)

    def test_address_range_error(self):
        error = AddressRangeError(40000, 32767)
        assert error.value == 40000
        assert "32767" in error.message


class TestErrorCollector:

    def test_empty(self):
        collector = ErrorCollector()
        assert not collector.has_errors()
        assert collector.error_count() == 0

    def test_report_lists_every_error_and_summary(self):
        collector = ErrorCollector()
        collector.add(AssemblySyntaxError("first"))
        collector.add(AssemblySyntaxError("second"))
        report = collector.report()
        assert "error: first" in report
        assert "error: second" in report
        assert report.endswith("Encountered 2 errors, aborting compilation")

    def test_singular_summary(self):
        collector = ErrorCollector()
        collector.add(AssemblySyntaxError("only"))
        assert collector.report().endswith("Encountered 1 error, aborting compilation")

    def test_too_many_errors(self):
        collector = ErrorCollector(max_errors=2)
        collector.add(AssemblySyntaxError("one"))
        with pytest.raises(TooManyErrors):
            collector.add(AssemblySyntaxError("two"))
        assert collector.error_count() == 2

    def test_clear(self):
        collector = ErrorCollector()
        collector.add(AssemblySyntaxError("one"))
        collector.clear()
        assert not collector.has_errors()

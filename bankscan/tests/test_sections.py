"""
Tests for the section scanner state machine.
"""
import pytest
from decimal import Decimal

from ..core.detectors import default_layout
from ..core.sections import (
    SectionState,
    Step,
    advance,
    scan_section,
    sum_section,
    deposits_section,
    withdrawals_section,
)


@pytest.fixture
def deposits():
    return deposits_section(default_layout())


@pytest.fixture
def withdrawals():
    return withdrawals_section(default_layout())


class TestAdvance:
    """Test cases for single-line transitions."""

    def test_header_enters_section(self, deposits):
        state, step = advance(SectionState.OUTSIDE, "Deposits and Other Credits", deposits)
        assert state == SectionState.IN_DEPOSITS
        assert step is Step.ENTER

    def test_line_outside_is_skipped(self, deposits):
        state, step = advance(SectionState.OUTSIDE, "01/03 DEPOSIT 100.00", deposits)
        assert state == SectionState.OUTSIDE
        assert step is Step.SKIP

    def test_line_inside_is_scanned(self, deposits):
        state, step = advance(SectionState.IN_DEPOSITS, "01/03 DEPOSIT 100.00", deposits)
        assert state == SectionState.IN_DEPOSITS
        assert step is Step.SCAN

    def test_exit_header_inside_stops(self, deposits):
        state, step = advance(SectionState.IN_DEPOSITS, "Withdrawals and Other Debits", deposits)
        assert state == SectionState.OUTSIDE
        assert step is Step.STOP

    def test_exit_header_outside_is_skipped(self, deposits):
        """The opposing header only ends a section the scanner is in."""
        state, step = advance(SectionState.OUTSIDE, "Withdrawals and Other Debits", deposits)
        assert state == SectionState.OUTSIDE
        assert step is Step.SKIP

    def test_header_takes_precedence_over_exit(self, withdrawals):
        line = "Withdrawals and Other Debits / Deposits and Other Credits"
        state, step = advance(SectionState.IN_WITHDRAWALS, line, withdrawals)
        assert state == SectionState.IN_WITHDRAWALS
        assert step is Step.ENTER


class TestScanSection:
    """Test cases for whole-document scanning."""

    def test_header_line_is_consumed(self, deposits):
        lines = ["Deposits and Other Credits 999.99", "A 1.00"]
        assert list(scan_section(lines, deposits)) == ["A 1.00"]

    def test_missing_header_yields_nothing(self, deposits):
        assert list(scan_section(["A 1.00", "B 2.00"], deposits)) == []

    def test_stop_is_final(self, deposits):
        """Once the opposing header is seen, a later target header is ignored."""
        lines = [
            "Deposits and Other Credits",
            "A 100.00",
            "Withdrawals and Other Debits",
            "B 200.00",
            "Deposits and Other Credits",
            "C 300.00",
        ]
        assert list(scan_section(lines, deposits)) == ["A 100.00"]

    def test_section_runs_to_end_of_input(self, withdrawals):
        lines = ["Withdrawals and Other Debits", "A 1.00", "B 2.00"]
        assert list(scan_section(lines, withdrawals)) == ["A 1.00", "B 2.00"]


class TestSumSection:
    """Test cases for folding section amounts into a total."""

    def test_no_headers_total_zero(self, deposits, withdrawals):
        lines = ["JOHN Q PUBLIC", "01/03 DEPOSIT 100.00"]
        assert sum_section(lines, deposits) == Decimal("0")
        assert sum_section(lines, withdrawals) == Decimal("0")

    def test_exact_sum(self, deposits):
        lines = [
            "Deposits and Other Credits",
            "01/03 PAYROLL 1,234.56",
            "01/04 TRANSFER 0.10",
            "01/05 MOBILE DEPOSIT 20.20",
            "01/06 NOTE WITHOUT AMOUNT",
        ]
        # "1,234.56" ends the line as "234.56"
        assert sum_section(lines, deposits) == Decimal("254.86")

    def test_line_filter(self, withdrawals):
        lines = [
            "Withdrawals and Other Debits",
            "01/05 ATM WITHDRAWAL 4000",
            "01/06 CHECK 25.00",
        ]
        total = sum_section(lines, withdrawals, line_filter=lambda line: "ATM" in line)
        assert total == Decimal("40.00")

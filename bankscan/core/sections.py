"""
Line-by-line section tracking for statement regions.
"""
from decimal import Decimal
from enum import Enum
from typing import Callable, Iterable, Iterator, NamedTuple, Optional, Tuple
import logging

from .normalize import find_trailing_amount
from ..models.schema import StatementLayout

logger = logging.getLogger(__name__)


class SectionState(str, Enum):
    OUTSIDE = "outside"
    IN_DEPOSITS = "in_deposits"
    IN_WITHDRAWALS = "in_withdrawals"


class Step(str, Enum):
    """What the scanner does with the current line."""
    ENTER = "enter"
    SCAN = "scan"
    SKIP = "skip"
    STOP = "stop"


class Section(NamedTuple):
    """A statement region opened by one header and closed by another."""
    name: str
    header: str
    exit_header: str
    state: SectionState


def deposits_section(layout: StatementLayout) -> Section:
    return Section(
        name="deposits",
        header=layout.deposits_header,
        exit_header=layout.withdrawals_header,
        state=SectionState.IN_DEPOSITS,
    )


def withdrawals_section(layout: StatementLayout) -> Section:
    return Section(
        name="withdrawals",
        header=layout.withdrawals_header,
        exit_header=layout.deposits_header,
        state=SectionState.IN_WITHDRAWALS,
    )


def advance(state: SectionState, line: str, section: Section) -> Tuple[SectionState, Step]:
    """
    Compute the scanner transition for one line.

    The header check runs first, so a header line is always consumed even
    when the scanner is already inside the section.

    Args:
        state: Current scanner state
        line: Line being examined
        section: Section being tracked

    Returns:
        Tuple of (next state, step to take for this line)
    """
    if section.header in line:
        return section.state, Step.ENTER

    if state == section.state:
        if section.exit_header in line:
            return SectionState.OUTSIDE, Step.STOP
        return state, Step.SCAN

    return state, Step.SKIP


def scan_section(lines: Iterable[str], section: Section) -> Iterator[str]:
    """
    Yield the lines that fall inside a section.

    Reaching the exit header ends the scan for good: later occurrences of
    the section header are not considered.
    """
    state = SectionState.OUTSIDE
    for line in lines:
        state, step = advance(state, line, section)
        if step is Step.STOP:
            logger.debug(f"Left {section.name} section at: {line.strip()}")
            return
        if step is Step.ENTER:
            logger.debug(f"Entered {section.name} section")
        elif step is Step.SCAN:
            yield line


def sum_section(lines: Iterable[str], section: Section,
                line_filter: Optional[Callable[[str], bool]] = None) -> Decimal:
    """
    Sum the trailing amounts of every qualifying line inside a section.

    Args:
        lines: Ordered recognized lines
        section: Section to scan
        line_filter: Optional extra predicate a line must satisfy

    Returns:
        Total as a Decimal (0 when the section is absent)
    """
    total = Decimal('0')
    for line in scan_section(lines, section):
        if line_filter is not None and not line_filter(line):
            continue
        amount = find_trailing_amount(line)
        if amount is None:
            continue
        logger.debug(f"{section.name} line: {line.strip()} -> Amount: {amount}")
        total += amount
    return total

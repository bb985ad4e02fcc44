"""
Field extractors over recognized statement lines.

Each extractor makes its own pass over the full line list and never looks at
another extractor's output.
"""
import re
from decimal import Decimal
from typing import List, Optional, Sequence
import logging

from .normalize import find_trailing_amount
from .sections import deposits_section, withdrawals_section, sum_section
from ..models.schema import Identity, StatementLayout, Transaction, NOT_FOUND

logger = logging.getLogger(__name__)

# All-caps holder name, optionally with middle initials: "JOHN Q. PUBLIC"
NAME_PATTERN = re.compile(r'^([A-Z]{2,}(?:\s+[A-Z]+\.?)*\s+[A-Z]{2,})$')

# "123 MAIN ST"
STREET_PATTERN = re.compile(r'[0-9]+\s[A-Z]+\s[A-Z]+')

# "ANYTOWN, TX 75001"
CITY_STATE_ZIP_PATTERN = re.compile(r'[A-Z\s]+,\s[A-Z]+\s[0-9]{5}')


def _first_match(lines: Sequence[str], pattern: re.Pattern) -> Optional[str]:
    for line in lines:
        if pattern.search(line):
            return line
    return None


def extract_identity(lines: Sequence[str]) -> Identity:
    """
    Extract the account holder name and address.

    Name, street line and city line are independent first-match scans. A
    partial address is never returned.

    Args:
        lines: Ordered recognized lines

    Returns:
        Identity with NOT_FOUND for missing parts
    """
    name = NOT_FOUND
    for line in lines:
        match = NAME_PATTERN.match(line)
        if match:
            name = match.group(1).strip()
            break

    street = _first_match(lines, STREET_PATTERN)
    city = _first_match(lines, CITY_STATE_ZIP_PATTERN)
    address = f"{street.strip()}, {city.strip()}" if street and city else NOT_FOUND

    logger.info(f"Name match: {name}")
    logger.info(f"Address match: {address}")
    return Identity(name=name, address=address)


def calculate_total_deposits(lines: Sequence[str], layout: StatementLayout) -> Decimal:
    """Sum every line-end amount inside the deposits section."""
    total = sum_section(lines, deposits_section(layout))
    logger.info(f"Total deposits: {total}")
    return total


def calculate_total_atm_withdrawals(lines: Sequence[str], layout: StatementLayout) -> Decimal:
    """Sum line-end amounts of ATM withdrawal lines inside the withdrawals section."""
    total = sum_section(
        lines,
        withdrawals_section(layout),
        line_filter=lambda line: layout.atm_marker in line,
    )
    logger.info(f"Total ATM withdrawals: {total}")
    return total


def extract_merchant_purchases(lines: Sequence[str], layout: StatementLayout) -> List[Transaction]:
    """
    Extract merchant purchases from anywhere in the document.

    Args:
        lines: Ordered recognized lines
        layout: Layout supplying the purchase markers and description

    Returns:
        Transactions in document order, duplicates included
    """
    purchases = []

    for line in lines:
        if not all(marker in line for marker in layout.purchase_markers):
            continue

        amount = find_trailing_amount(line)
        if amount is None:
            logger.debug(f"Purchase line without amount skipped: {line.strip()}")
            continue

        purchases.append(Transaction(
            date=line[:5].strip(),
            description=layout.purchase_description,
            amount=amount,
        ))
        logger.debug(f"Purchase line: {line.strip()} -> Amount: {amount}")

    logger.info(f"Merchant purchases found: {len(purchases)}")
    return purchases

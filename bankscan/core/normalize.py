"""
Amount normalization for OCR-recovered currency values.
"""
import re
from decimal import Decimal, InvalidOperation
from typing import Optional
import logging

logger = logging.getLogger(__name__)

# Already formatted "123.45"
CANONICAL_AMOUNT = re.compile(r'^\d+\.\d{2}$', re.ASCII)

# Last numeric token on a line: either two-decimal or a run of 3+ bare digits
TRAILING_AMOUNT_PATTERN = re.compile(r'(\d+\.\d{2}|\d{3,})$', re.ASCII)

_LEADING_NUMBER = re.compile(r'[+-]?(?:\d+\.?\d*|\.\d+)', re.ASCII)


def _parse_leading_number(value: str) -> Optional[Decimal]:
    """Parse the longest numeric prefix of value, ignoring trailing junk."""
    match = _LEADING_NUMBER.match(value.strip())
    if not match:
        return None
    try:
        return Decimal(match.group())
    except InvalidOperation:
        return None


def normalize_amount(raw: str) -> Optional[Decimal]:
    """
    Normalize an amount captured from the end of a statement line.

    OCR often loses the decimal point of a two-decimal currency value, so bare
    digit runs are repaired by fixed-position insertion of the point.

    Args:
        raw: Raw digit-and-punctuation substring

    Returns:
        Decimal amount, or None when the value cannot be read as a number
    """
    if CANONICAL_AMOUNT.match(raw):
        return Decimal(raw)

    cleaned = re.sub(r'[,\s]', '', raw)

    if len(cleaned) == 3:
        # "423" -> "4.23": single dollar digit merged with the cents
        amount = _parse_leading_number(f"{cleaned[0]}.{cleaned[1:]}")
    elif len(cleaned) >= 2:
        # "5000" -> "50.00"
        amount = _parse_leading_number(f"{cleaned[:-2]}.{cleaned[-2:]}")
    else:
        amount = _parse_leading_number(raw)

    if amount is None:
        logger.warning(f"Could not normalize amount: {raw!r}")
    return amount


def find_trailing_amount(line: str) -> Optional[Decimal]:
    """
    Find and normalize the amount at the end of a line.

    Args:
        line: One line of recognized text

    Returns:
        Normalized amount, or None if the line carries no usable amount
    """
    match = TRAILING_AMOUNT_PATTERN.search(line)
    if not match:
        return None
    return normalize_amount(match.group(1))

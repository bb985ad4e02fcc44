"""
Scanned Bank Statement Interpreter

Recovers account holder identity, deposit and ATM withdrawal totals and
merchant purchases from OCR text of scanned bank statements.
"""

__version__ = "1.0.0"
__author__ = "bankscan Team"

from .core.runner import interpret_text, parse_statement, parse_statement_sync, StatementInterpreter
from .core.detectors import detect_layout, LayoutRegistry
from .core.normalize import normalize_amount
from .models.schema import StatementSummary, Identity, Transaction, StatementLayout, DocumentResult, NOT_FOUND

__all__ = [
    "interpret_text",
    "parse_statement",
    "parse_statement_sync",
    "StatementInterpreter",
    "detect_layout",
    "LayoutRegistry",
    "normalize_amount",
    "StatementSummary",
    "Identity",
    "Transaction",
    "StatementLayout",
    "DocumentResult",
    "NOT_FOUND",
]

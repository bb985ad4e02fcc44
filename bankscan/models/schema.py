"""
Pydantic models for interpreted bank statement data.
"""
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


NOT_FOUND = "Not found"


def split_lines(text: str) -> List[str]:
    """
    Split recognized text into its ordered line sequence.

    Args:
        text: Raw text produced by the text recognizer

    Returns:
        List of lines in document order (no line is dropped)
    """
    if not isinstance(text, str):
        raise TypeError(f"Recognized text must be str, got {type(text).__name__}")
    return text.split('\n')


class Identity(BaseModel):
    """Account holder name and mailing address."""
    model_config = ConfigDict(frozen=True)

    name: str = NOT_FOUND
    address: str = NOT_FOUND


class Transaction(BaseModel):
    """Individual merchant purchase."""
    model_config = ConfigDict(frozen=True)

    date: str
    description: str
    amount: Decimal


class StatementSummary(BaseModel):
    """Everything the interpreter recovers from one statement."""
    identity: Identity = Field(default_factory=Identity)
    total_deposits: Decimal = Decimal('0')
    total_atm_withdrawals: Decimal = Decimal('0')
    purchases: List[Transaction] = Field(default_factory=list)

    @field_validator('total_deposits', 'total_atm_withdrawals')
    @classmethod
    def validate_non_negative(cls, v):
        """Section totals only ever accumulate non-negative amounts."""
        if v < 0:
            raise ValueError(f"Total cannot be negative: {v}")
        return v


class PageMatch(BaseModel):
    must_contain: List[str] = Field(default_factory=list)
    fuzzy_threshold: float = 85


class StatementLayout(BaseModel):
    """Layout configuration loaded from a YAML file."""
    model_config = ConfigDict(frozen=True)

    layout_id: str
    bank: str = "Generic US checking"
    deposits_header: str = "Deposits and Other Credits"
    withdrawals_header: str = "Withdrawals and Other Debits"
    atm_marker: str = "ATM WITHDRAWAL"
    purchase_markers: List[str] = Field(default_factory=lambda: ["WAL-MART", "POS PURCHASE"])
    purchase_description: str = "POS PURCHASE"
    page_match: PageMatch = Field(default_factory=PageMatch)

    @field_validator('purchase_markers')
    @classmethod
    def validate_purchase_markers(cls, v):
        """A purchase filter without markers would select every line."""
        if not v:
            raise ValueError("At least one purchase marker is required")
        return v


class DocumentResult(BaseModel):
    """Result of running the full OCR pipeline over one document."""
    source: str
    page_count: int
    layout_id: Optional[str] = None
    summary: StatementSummary

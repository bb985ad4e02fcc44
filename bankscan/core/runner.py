"""
End-to-end interpretation orchestration.
"""
import asyncio
from typing import Optional, Sequence
import logging

from .detectors import LayoutRegistry, default_layout
from .extractors import (
    extract_identity,
    calculate_total_deposits,
    calculate_total_atm_withdrawals,
    extract_merchant_purchases,
)
from .loader import (
    DocumentSource,
    DEFAULT_LANG,
    DEFAULT_SCALE,
    DEFAULT_TESSERACT_CONFIG,
    recognition_session,
    extract_text_from_document,
)
from ..models.schema import DocumentResult, StatementLayout, StatementSummary, split_lines

logger = logging.getLogger(__name__)


class StatementInterpreter:
    """Runs every field extractor over one recognized text."""

    def __init__(self, layout: Optional[StatementLayout] = None):
        self.layout = layout or default_layout()

    def interpret(self, text: str) -> StatementSummary:
        """
        Interpret recognized statement text.

        Args:
            text: Complete recognized text of one document

        Returns:
            StatementSummary object
        """
        return self.interpret_lines(split_lines(text))

    def interpret_lines(self, lines: Sequence[str]) -> StatementSummary:
        """Interpret an already split line sequence."""
        lines = list(lines)
        logger.debug(f"Interpreting {len(lines)} lines with layout {self.layout.layout_id}")

        return StatementSummary(
            identity=extract_identity(lines),
            total_deposits=calculate_total_deposits(lines, self.layout),
            total_atm_withdrawals=calculate_total_atm_withdrawals(lines, self.layout),
            purchases=extract_merchant_purchases(lines, self.layout),
        )


def interpret_text(text: str, layout: Optional[StatementLayout] = None) -> StatementSummary:
    """
    Interpret recognized statement text.

    Args:
        text: Complete recognized text of one document
        layout: Layout to use (defaults to the built-in layout)

    Returns:
        StatementSummary object
    """
    return StatementInterpreter(layout).interpret(text)


def resolve_layout(text: str, layout_id: Optional[str],
                   registry: Optional[LayoutRegistry] = None) -> StatementLayout:
    """
    Pick the layout for a document.

    An explicit layout id must exist. Without one the layout is detected from
    the text, falling back to the built-in layout.
    """
    registry = registry or LayoutRegistry()
    if layout_id:
        return registry.get_layout(layout_id)

    detected = registry.detect_layout(text)
    if detected:
        return registry.get_layout(detected)

    logger.info("Using default layout")
    return default_layout()


async def parse_statement(source: DocumentSource, layout_id: Optional[str] = None,
                          scale: float = DEFAULT_SCALE, lang: str = DEFAULT_LANG,
                          tesseract_config: str = DEFAULT_TESSERACT_CONFIG,
                          registry: Optional[LayoutRegistry] = None) -> DocumentResult:
    """
    OCR a scanned statement and interpret it.

    Args:
        source: PDF path or raw PDF bytes
        layout_id: Layout to use; detected from the text when omitted
        scale: Page render scale
        lang: Tesseract language
        tesseract_config: Extra Tesseract options
        registry: Layout registry (a fresh one is loaded when omitted)

    Returns:
        DocumentResult object
    """
    async with recognition_session(lang=lang, config=tesseract_config) as recognizer:
        text, page_count = await extract_text_from_document(source, recognizer, scale=scale)

    # Reads layout files from disk
    layout = await asyncio.to_thread(resolve_layout, text, layout_id, registry)
    summary = StatementInterpreter(layout).interpret(text)

    return DocumentResult(
        source=str(source) if not isinstance(source, bytes) else "<bytes>",
        page_count=page_count,
        layout_id=layout.layout_id,
        summary=summary,
    )


def parse_statement_sync(source: DocumentSource, layout_id: Optional[str] = None,
                         **kwargs) -> DocumentResult:
    """Blocking wrapper around parse_statement for scripts and the CLI."""
    return asyncio.run(parse_statement(source, layout_id, **kwargs))

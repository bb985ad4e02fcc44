"""
Document rasterization and text recognition.

These are the only stages that touch files or the OCR engine. The blocking
PyMuPDF and Tesseract calls are pushed to worker threads so a caller on an
event loop can await a whole document.
"""
import asyncio
import os
import fitz  # PyMuPDF
import pytesseract
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Iterator, Optional, Tuple, Union
from PIL import Image
import logging

from ..exceptions import RasterizationError, RecognitionError

logger = logging.getLogger(__name__)

DEFAULT_SCALE = 2.0
DEFAULT_LANG = "eng"
DEFAULT_TESSERACT_CONFIG = "--oem 3 --psm 6"

DocumentSource = Union[Path, str, bytes]


class PageRasterizer:
    """Renders each page of a PDF document to an image."""

    def __init__(self, source: DocumentSource, scale: float = DEFAULT_SCALE):
        self.source = source
        self.scale = scale
        self._doc = None

    def open(self):
        """Open the document."""
        if self._doc is not None:
            return self
        try:
            if isinstance(self.source, bytes):
                self._doc = fitz.open(stream=self.source, filetype="pdf")
            else:
                self._doc = fitz.open(str(self.source))
        except Exception as e:
            raise RasterizationError(f"Could not open document: {e}") from e
        logger.info(f"PDF document loaded successfully. Total pages: {self._doc.page_count}")
        return self

    @property
    def page_count(self) -> int:
        if self._doc is None:
            self.open()
        return self._doc.page_count

    def render_page(self, index: int) -> Image.Image:
        """
        Render one page (0-indexed) to an RGB image.

        Args:
            index: Page index in document order

        Returns:
            PIL image of the page
        """
        if self._doc is None:
            self.open()
        try:
            page = self._doc[index]
            pix = page.get_pixmap(matrix=fitz.Matrix(self.scale, self.scale))
            return Image.frombytes("RGB", [pix.width, pix.height], pix.samples)
        except Exception as e:
            raise RasterizationError(f"Could not render page {index + 1}: {e}") from e

    def pages(self) -> Iterator[Image.Image]:
        for index in range(self.page_count):
            yield self.render_page(index)

    def close(self):
        """Close the document."""
        if self._doc is not None:
            self._doc.close()
            self._doc = None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()


class TextRecognizer:
    """Tesseract OCR over page images."""

    def __init__(self, lang: str = DEFAULT_LANG, config: str = DEFAULT_TESSERACT_CONFIG,
                 tesseract_cmd: Optional[str] = None):
        self.lang = lang
        self.config = config
        self.tesseract_cmd = tesseract_cmd or os.environ.get('BANKSCAN_TESSERACT_CMD')

    def recognize(self, image: Image.Image) -> str:
        """
        Recognize the text on one page image.

        Args:
            image: Rendered page

        Returns:
            Raw recognized text
        """
        try:
            return pytesseract.image_to_string(image, lang=self.lang, config=self.config)
        except Exception as e:
            raise RecognitionError(f"OCR failed: {e}") from e


@asynccontextmanager
async def recognition_session(lang: str = DEFAULT_LANG,
                              config: str = DEFAULT_TESSERACT_CONFIG,
                              tesseract_cmd: Optional[str] = None) -> AsyncIterator[TextRecognizer]:
    """
    Acquire a text recognizer for one document.

    A custom tesseract binary applies only while the session is open; the
    previous binary is restored when the block exits, whether the document
    succeeded or failed.
    """
    logger.info('Starting OCR process...')
    recognizer = TextRecognizer(lang=lang, config=config, tesseract_cmd=tesseract_cmd)
    previous_cmd = pytesseract.pytesseract.tesseract_cmd
    if recognizer.tesseract_cmd:
        pytesseract.pytesseract.tesseract_cmd = recognizer.tesseract_cmd
    try:
        yield recognizer
    finally:
        pytesseract.pytesseract.tesseract_cmd = previous_cmd
        logger.debug('OCR session released')


async def extract_text_from_document(source: DocumentSource, recognizer: TextRecognizer,
                                     scale: float = DEFAULT_SCALE) -> Tuple[str, int]:
    """
    Rasterize every page and recognize its text.

    Pages are processed in document order and their texts are joined with a
    single space.

    Args:
        source: PDF path or raw PDF bytes
        recognizer: Recognizer from an open session
        scale: Render scale (2.0 gives good OCR accuracy)

    Returns:
        Tuple of (recognized text, page count)
    """
    rasterizer = PageRasterizer(source, scale=scale)
    await asyncio.to_thread(rasterizer.open)
    try:
        page_texts = []
        for index in range(rasterizer.page_count):
            logger.info(f"Processing page {index + 1}...")
            image = await asyncio.to_thread(rasterizer.render_page, index)
            text = await asyncio.to_thread(recognizer.recognize, image)
            logger.debug(f"Extracted text from page {index + 1}: {text}")
            page_texts.append(text)

        return ' '.join(page_texts).strip(), rasterizer.page_count
    finally:
        rasterizer.close()

"""
Exceptions raised by bankscan.

Missing statement data is never an error; these cover upstream failures and
bad configuration only.
"""


class BankscanError(Exception):
    """Base class for all bankscan errors."""


class DocumentError(BankscanError):
    """The document could not be turned into recognized text."""


class RasterizationError(DocumentError):
    """A document or one of its pages could not be rendered to an image."""


class RecognitionError(DocumentError):
    """The OCR engine failed on a page image."""


class LayoutNotFoundError(BankscanError, ValueError):
    """No layout is registered under the requested id."""

from __future__ import annotations

__all__ = [
    "ChapterTreeError",
    "PdfNotFoundError",
    "NotAPdfError",
    "ReadError",
    "MalformedPdfError",
    "UnexpectedReadError",
    "ResolutionError",
    "NoOutlineFound",
]


class ChapterTreeError(Exception):
    """Base class for errors reported to the user."""


class PdfNotFoundError(ChapterTreeError):
    pass


class NotAPdfError(ChapterTreeError):
    pass


class ReadError(ChapterTreeError):
    """The document as a whole could not be read."""


class MalformedPdfError(ReadError):
    pass


class UnexpectedReadError(ReadError):
    pass


class ResolutionError(Exception):
    """A single object in the document could not be decoded."""


class NoOutlineFound(LookupError):
    """The document has no outline entries with a title."""

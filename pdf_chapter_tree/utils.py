from __future__ import annotations

import codecs
from pathlib import Path
from typing import Any, Optional

from .errors import NotAPdfError, PdfNotFoundError

__all__ = [
    "decode_title",
    "validate_pdf_path",
]


_UTF16_BOM = b"\xfe\xff"
_REPLACE = "pdf-title-replace"

# invalid byte sequences become "?" rather than U+FFFD; codec error
# handlers are process-wide, hence the package-specific name
codecs.register_error(_REPLACE, lambda exc: ("?", exc.end))


def _decode_bytes(raw: bytes) -> str:
    # a NUL byte almost always means UTF-16BE written without a BOM
    if raw[:2] == _UTF16_BOM or b"\x00" in raw:
        try:
            return raw.decode("utf-16-be")
        except UnicodeDecodeError:
            pass
    return raw.decode("utf-8", errors=_REPLACE)


def decode_title(raw: Any) -> Optional[str]:
    """Return a clean outline title, or None if there is nothing to show.

    Accepts the raw bytes of a PDF string (or an already decoded ``str``).
    Strips a leading BOM, turns ideographic spaces (U+3000) into plain
    spaces and trims surrounding whitespace and trailing NULs.
    """
    if isinstance(raw, (bytes, bytearray)):
        text = _decode_bytes(bytes(raw))
    elif isinstance(raw, str):
        text = raw
    else:
        return None
    text = text.removeprefix("\ufeff").replace("\u3000", " ")
    # some producers terminate titles with NUL, which str.strip keeps
    text = text.strip().rstrip("\x00").strip()
    return text or None


def validate_pdf_path(path: Path | str) -> Path:
    """Return ``path`` as a Path if it names an existing ``.pdf`` file."""
    path = Path(path)
    if not path.exists():
        raise PdfNotFoundError(f"File not found: {path}")
    if path.suffix.lower() != ".pdf":
        raise NotAPdfError(f"Not a PDF file: {path}")
    return path

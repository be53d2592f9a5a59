from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from .errors import NoOutlineFound
from .outline import OutlineRecord, extract_outline
from .render import render_markdown, render_tree
from .utils import validate_pdf_path

__all__ = ["ChapterTree"]

logger = logging.getLogger(__name__)


class ChapterTree:
    """Chapter structure of one PDF file, rendered as Markdown or a tree."""

    def __init__(self, pdf_path: Path | str) -> None:
        self.pdf_path = validate_pdf_path(pdf_path)

    @property
    def name(self) -> str:
        return self.pdf_path.name

    def extract_chapters(self) -> Optional[List[OutlineRecord]]:
        """Flattened outline, or None when the PDF has no usable outline."""
        try:
            return extract_outline(self.pdf_path)
        except NoOutlineFound as e:
            logger.info("%s: %s", self.name, e)
            return None

    def to_markdown(self, max_depth: Optional[int] = None, indent: int = 2) -> str:
        return render_markdown(self.name, self.extract_chapters(), max_depth=max_depth, indent=indent)

    def to_tree(self, max_depth: Optional[int] = None, indent: int = 2) -> str:
        return render_tree(self.name, self.extract_chapters(), max_depth=max_depth, indent=indent)

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence

import pikepdf
import pytest


SAMPLE_OUTLINE = [
    {
        "title": "1. Introduction",
        "dest": 1,
        "children": [
            {"title": "1.1 Background", "dest": 2},
            {"title": "1.2 Overview", "dest": 3},
        ],
    },
    {
        "title": "2. Getting Started",
        "dest": 4,
        "children": [
            {"title": "2.1 Installation", "dest": 5},
            {"title": "2.2 Configuration", "dest": 6},
        ],
    },
    {"title": "3. Advanced Topics", "dest": 7},
]


def _destination(pdf: pikepdf.Pdf, value: Any) -> Any:
    """int → explicit [page /Fit], bytes/str → named string, else as given."""
    if isinstance(value, int):
        return pikepdf.Array([pdf.pages[value].obj, pikepdf.Name.Fit])
    if isinstance(value, (bytes, str)):
        return pikepdf.String(value)
    return value


def _link_items(pdf: pikepdf.Pdf, items: Sequence[dict], parent: pikepdf.Object):
    nodes: List[pikepdf.Object] = []
    for spec in items:
        node = pdf.make_indirect(pikepdf.Dictionary(Parent=parent))
        if spec.get("title") is not None:
            node.Title = pikepdf.String(spec["title"])
        if "dest" in spec:
            node.Dest = _destination(pdf, spec["dest"])
        if "action_dest" in spec:
            node.A = pdf.make_indirect(
                pikepdf.Dictionary(S=pikepdf.Name.GoTo, D=_destination(pdf, spec["action_dest"]))
            )
        children = spec.get("children") or []
        if children:
            first, last, count = _link_items(pdf, children, node)
            node.First = first
            node.Last = last
            node.Count = count
        nodes.append(node)
    for prev, nxt in zip(nodes, nodes[1:]):
        prev.Next = nxt
        nxt.Prev = prev
    if not nodes:
        return None, None, 0
    return nodes[0], nodes[-1], len(nodes)


def add_outline(pdf: pikepdf.Pdf, items: Sequence[dict]) -> pikepdf.Object:
    """Attach a hand-built /Outlines tree described by nested dicts.

    Item keys: ``title`` (str or raw bytes), ``dest``, ``action_dest``
    (page index, named string or a pikepdf object) and ``children``.
    """
    outlines = pdf.make_indirect(pikepdf.Dictionary(Type=pikepdf.Name.Outlines))
    first, last, count = _link_items(pdf, items, outlines)
    if first is not None:
        outlines.First = first
        outlines.Last = last
    outlines.Count = count
    pdf.Root.Outlines = outlines
    return outlines


@pytest.fixture
def make_pdf(tmp_path: Path) -> Callable[..., Path]:
    def _make(
        name: str = "doc.pdf",
        pages: int = 8,
        outline: Optional[Sequence[dict]] = None,
        customize: Optional[Callable[[pikepdf.Pdf], None]] = None,
    ) -> Path:
        path = tmp_path / name
        pdf = pikepdf.new()
        for _ in range(pages):
            pdf.add_blank_page(page_size=(612, 792))
        if outline is not None:
            add_outline(pdf, outline)
        if customize is not None:
            customize(pdf)
        pdf.save(path)
        pdf.close()
        return path

    return _make


@pytest.fixture
def sample_pdf(make_pdf) -> Path:
    return make_pdf("sample_with_outline.pdf", outline=SAMPLE_OUTLINE)


@pytest.fixture
def pdf_without_outline(make_pdf) -> Path:
    return make_pdf("sample_without_outline.pdf", pages=3)

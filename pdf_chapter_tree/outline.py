from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, List, Mapping, Optional, Set, Tuple

from .destinations import PageIndex, build_page_index, resolve_page
from .errors import (
    ChapterTreeError,
    MalformedPdfError,
    NoOutlineFound,
    ResolutionError,
    UnexpectedReadError,
)
from .objects import ObjectStore, Ref, open_store
from .utils import decode_title

__all__ = [
    "OutlineRecord",
    "OutlineNode",
    "OutlineTree",
    "walk_outline",
    "extract_outline",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutlineRecord:
    title: str
    page: Optional[int]
    depth: int


@dataclass
class OutlineNode:
    title: Optional[str]
    page: Optional[int]
    depth: int
    first_child: Optional[int] = None
    next_sibling: Optional[int] = None


class OutlineTree:
    """Outline items stored in a flat list, linked by list indices.

    Each item is resolved once; a reference seen twice (a cycle in a
    broken file) is skipped.
    """

    def __init__(self, nodes: List[OutlineNode] | None = None) -> None:
        self.nodes: List[OutlineNode] = nodes or []

    def __len__(self) -> int:
        return len(self.nodes)

    @classmethod
    def build(
        cls, store: ObjectStore, first: Any, page_index: PageIndex | None = None
    ) -> "OutlineTree":
        tree = cls()
        if page_index is None:
            page_index = build_page_index(store)
        seen: Set[Ref] = set()
        # (reference, depth, (owner index, link attribute) or None)
        stack: List[Tuple[Any, int, Optional[Tuple[int, str]]]] = [(first, 0, None)]
        while stack:
            ref, depth, link = stack.pop()
            if isinstance(ref, Ref):
                if ref in seen:
                    logger.warning("outline item %s visited twice, skipping", ref)
                    continue
                seen.add(ref)
            try:
                item = store.resolve(ref)
            except ResolutionError as e:
                logger.debug("skipping outline item %s: %s", ref, e)
                continue
            if not isinstance(item, Mapping):
                logger.debug("skipping outline item %s: not a dictionary", ref)
                continue

            index = len(tree.nodes)
            tree.nodes.append(
                OutlineNode(
                    title=_title(store, item),
                    page=resolve_page(store, item, page_index),
                    depth=depth,
                )
            )
            if link is not None:
                owner, attr = link
                setattr(tree.nodes[owner], attr, index)

            # sibling pushed first so the child subtree is popped before it
            if item.get("Next") is not None:
                stack.append((item["Next"], depth, (index, "next_sibling")))
            if item.get("First") is not None:
                stack.append((item["First"], depth + 1, (index, "first_child")))
        return tree

    def walk(self) -> Iterator[OutlineNode]:
        """Yield nodes in pre-order following the child/sibling links."""
        if not self.nodes:
            return
        stack = [0]
        while stack:
            node = self.nodes[stack.pop()]
            yield node
            if node.next_sibling is not None:
                stack.append(node.next_sibling)
            if node.first_child is not None:
                stack.append(node.first_child)

    def records(self) -> List[OutlineRecord]:
        return [
            OutlineRecord(title=node.title, page=node.page, depth=node.depth)
            for node in self.walk()
            if node.title
        ]


def _title(store: ObjectStore, item: Mapping[str, Any]) -> Optional[str]:
    try:
        return decode_title(store.resolve(item.get("Title")))
    except ResolutionError as e:
        logger.debug("unreadable outline title: %s", e)
        return None


def _find_outline_root(store: ObjectStore) -> Optional[Mapping[str, Any]]:
    catalog = store.resolve(store.trailer().get("Root"))
    if not isinstance(catalog, Mapping) or catalog.get("Outlines") is None:
        return None
    root = store.resolve(catalog["Outlines"])
    if not isinstance(root, Mapping) or root.get("First") is None:
        return None
    return root


def walk_outline(store: ObjectStore) -> List[OutlineRecord]:
    """Flatten the document outline into pre-order ``OutlineRecord`` s.

    Raises :class:`NoOutlineFound` if there is no outline root, the root
    has no children, or none of the items carries a title.
    """
    root = _find_outline_root(store)
    if root is None:
        raise NoOutlineFound("document has no outline")
    tree = OutlineTree.build(store, root["First"])
    records = tree.records()
    if not records:
        raise NoOutlineFound("outline has no titled entries")
    logger.debug("outline: %d items, %d with titles", len(tree), len(records))
    return records


def extract_outline(pdf_path: Path | str) -> List[OutlineRecord]:
    """Open ``pdf_path`` and return its flattened outline.

    Document-level failures are raised as :class:`ReadError` subclasses;
    :class:`NoOutlineFound` passes through untouched.
    """
    try:
        with open_store(pdf_path) as store:
            return walk_outline(store)
    except (ChapterTreeError, NoOutlineFound):
        raise
    except ResolutionError as e:
        raise MalformedPdfError(f"Error reading PDF: {e}") from e
    except Exception as e:
        raise UnexpectedReadError(f"Unexpected error: {e}") from e

from __future__ import annotations

from typing import List, Optional, Sequence

from .outline import OutlineRecord

__all__ = [
    "NO_OUTLINE_MESSAGE",
    "visible_records",
    "render_markdown",
    "render_tree",
]

NO_OUTLINE_MESSAGE = "No outline/chapters found in this PDF."

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE = "│"


def _check(max_depth: Optional[int], indent: int) -> None:
    if max_depth is not None and max_depth < 1:
        raise ValueError(f"max_depth must be a positive integer, got {max_depth}")
    if indent < 1:
        raise ValueError(f"indent must be a positive integer, got {indent}")


def _page_suffix(record: OutlineRecord) -> str:
    return f" (p.{record.page})" if record.page is not None else ""


def visible_records(
    records: Sequence[OutlineRecord], max_depth: Optional[int] = None
) -> List[OutlineRecord]:
    """Records within ``max_depth`` levels (1 = top level only)."""
    if max_depth is None:
        return list(records)
    return [r for r in records if r.depth + 1 <= max_depth]


def render_markdown(
    name: str,
    records: Optional[Sequence[OutlineRecord]],
    max_depth: Optional[int] = None,
    indent: int = 2,
) -> str:
    """Markdown bullet list under a ``# name`` heading.

    ``records=None`` means the document has no outline.
    """
    _check(max_depth, indent)
    lines = [f"# {name}", ""]
    if records is None:
        lines.append(NO_OUTLINE_MESSAGE)
        return "\n".join(lines)
    for record in visible_records(records, max_depth):
        lines.append(f"{' ' * (indent * record.depth)}- {record.title}{_page_suffix(record)}")
    return "\n".join(lines)


def _is_last_sibling(records: Sequence[OutlineRecord], index: int) -> bool:
    depth = records[index].depth
    for later in records[index + 1:]:
        if later.depth == depth:
            return False
        if later.depth < depth:
            break
    return True


def _has_more_at(records: Sequence[OutlineRecord], index: int, depth: int) -> bool:
    for later in records[index + 1:]:
        if later.depth == depth:
            return True
        if later.depth < depth:
            return False
    return False


def _prefix(records: Sequence[OutlineRecord], index: int, indent: int) -> str:
    parts = []
    for level in range(records[index].depth):
        if _has_more_at(records, index, level):
            parts.append(PIPE + " " * (indent + 1))
        else:
            parts.append(" " * (indent + 2))
    return "".join(parts)


def render_tree(
    name: str,
    records: Optional[Sequence[OutlineRecord]],
    max_depth: Optional[int] = None,
    indent: int = 2,
) -> str:
    """Box-drawing tree with ``name`` as the root line."""
    _check(max_depth, indent)
    lines = [name]
    if records is None:
        lines.append(NO_OUTLINE_MESSAGE)
        return "\n".join(lines)
    shown = visible_records(records, max_depth)
    for index, record in enumerate(shown):
        branch = LAST_BRANCH if _is_last_sibling(shown, index) else BRANCH
        lines.append(f"{_prefix(shown, index, indent)}{branch}{record.title}{_page_suffix(record)}")
    return "\n".join(lines)

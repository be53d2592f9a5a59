from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Hashable, Mapping, Optional, Tuple, Union

from .objects import Name, ObjectStore, Ref

__all__ = [
    "ExplicitDestination",
    "NamedDestination",
    "Destination",
    "find_destination",
    "build_page_index",
    "page_for_destination",
    "resolve_page",
]

logger = logging.getLogger(__name__)

_PAGE_NAME_RE = re.compile(rb"p(\d+)")

PageIndex = Dict[Hashable, int]


@dataclass(frozen=True)
class ExplicitDestination:
    """``[page /Fit ...]`` array, possibly reached through a GoTo action."""

    page: Any
    view: Tuple[Any, ...] = ()
    via_action: bool = False


@dataclass(frozen=True)
class NamedDestination:
    name: bytes
    via_action: bool = False

    @property
    def page_number(self) -> Optional[int]:
        """Page encoded in the ``pN`` naming convention, if any."""
        match = _PAGE_NAME_RE.fullmatch(self.name)
        return int(match.group(1)) if match else None


Destination = Union[ExplicitDestination, NamedDestination]


def find_destination(store: ObjectStore, node: Mapping[str, Any]) -> Optional[Destination]:
    """Classify the target of an outline item.

    ``/Dest`` wins over ``/A``; an action only counts if it carries ``/D``.
    A destination given by reference is followed one level.
    """
    via_action = False
    value = node.get("Dest")
    if value is None:
        action = store.resolve(node.get("A"))
        if not isinstance(action, Mapping):
            return None
        value = action.get("D")
        via_action = True
    value = store.resolve(value)

    if isinstance(value, list):
        if not value:
            return None
        return ExplicitDestination(page=value[0], view=tuple(value[1:]), via_action=via_action)
    if isinstance(value, str) and not isinstance(value, Name):
        value = value.encode("utf-8")
    if isinstance(value, (bytes, bytearray)):
        return NamedDestination(name=bytes(value), via_action=via_action)
    return None


def build_page_index(store: ObjectStore) -> PageIndex:
    """Map page identity to its 1-based position; first occurrence wins."""
    index: PageIndex = {}
    for number, ref in enumerate(store.pages(), 1):
        identity = store.identity(ref)
        if identity is not None:
            index.setdefault(identity, number)
    return index


def page_for_destination(
    store: ObjectStore, dest: Destination, page_index: PageIndex
) -> Optional[int]:
    if isinstance(dest, NamedDestination):
        # name trees are not consulted, only the pN convention
        return dest.page_number
    if isinstance(dest, ExplicitDestination):
        if not isinstance(dest.page, Ref):
            return None
        return page_index.get(store.identity(dest.page))
    return None


def resolve_page(
    store: ObjectStore,
    node: Mapping[str, Any],
    page_index: PageIndex | None = None,
) -> Optional[int]:
    """Return the 1-based page an outline item points at, or None.

    Never raises: a destination that cannot be read is just unresolved.
    """
    try:
        dest = find_destination(store, node)
        if dest is None:
            return None
        if page_index is None:
            page_index = build_page_index(store)
        page = page_for_destination(store, dest, page_index)
    except Exception as e:
        logger.debug("destination lookup failed: %s", e)
        return None
    if page is None:
        logger.debug("unresolved destination %r", dest)
    return page

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Hashable, Iterator, List, Mapping, Optional, Protocol, Sequence

import pikepdf

from .errors import MalformedPdfError, ResolutionError

__all__ = [
    "Ref",
    "Name",
    "ObjectStore",
    "MemoryStore",
    "PikepdfStore",
    "open_store",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Ref:
    """Indirect reference ``num gen R``."""

    num: int
    gen: int = 0

    @property
    def objgen(self) -> tuple[int, int]:
        return (self.num, self.gen)

    def __str__(self) -> str:
        return f"{self.num} {self.gen} R"


class Name(str):
    """PDF name object, stored without the leading slash."""

    def __repr__(self) -> str:
        return f"Name({str(self)!r})"


class ObjectStore(Protocol):
    """Read-only view of a document's decoded object graph.

    Dictionaries are ``dict`` keyed by name without the slash, arrays are
    ``list``, PDF strings are ``bytes`` and indirect references are
    :class:`Ref`. Nothing is resolved until :meth:`resolve` is called.
    """

    def trailer(self) -> Mapping[str, Any]:
        ...

    def resolve(self, value: Any) -> Any:
        """Follow one indirection. ``None`` for a missing object.

        Raises :class:`ResolutionError` when the object exists but cannot
        be decoded.
        """
        ...

    def identity(self, value: Any) -> Optional[Hashable]:
        """Identity of the object behind ``value`` (after resolution)."""
        ...

    def pages(self) -> Sequence[Ref]:
        ...


class MemoryStore:
    """Object graph held in a plain dict, mostly for tests and tooling."""

    def __init__(
        self,
        objects: Mapping[Ref, Any] | None = None,
        trailer: Mapping[str, Any] | None = None,
        pages: Sequence[Ref] = (),
    ) -> None:
        self.objects: Dict[Ref, Any] = dict(objects or {})
        self._trailer: Dict[str, Any] = dict(trailer or {})
        self._pages: List[Ref] = list(pages)
        self._next_num = max((r.num for r in self.objects), default=0) + 1

    def add(self, obj: Any) -> Ref:
        """Store ``obj`` under the next free object number."""
        while Ref(self._next_num) in self.objects:
            self._next_num += 1
        ref = Ref(self._next_num)
        self.objects[ref] = obj
        self._next_num += 1
        return ref

    def add_page(self, page: Mapping[str, Any] | None = None) -> Ref:
        ref = self.add(dict(page or {"Type": Name("Page")}))
        self._pages.append(ref)
        return ref

    def set_root(self, catalog: Mapping[str, Any]) -> Ref:
        ref = self.add(dict(catalog))
        self._trailer["Root"] = ref
        return ref

    def trailer(self) -> Mapping[str, Any]:
        return self._trailer

    def resolve(self, value: Any) -> Any:
        if isinstance(value, Ref):
            return self.objects.get(value)
        return value

    def identity(self, value: Any) -> Optional[Hashable]:
        obj = self.resolve(value)
        return None if obj is None else id(obj)

    def pages(self) -> Sequence[Ref]:
        return list(self._pages)


class PikepdfStore:
    """:class:`ObjectStore` over an open :class:`pikepdf.Pdf`.

    Objects are converted one level at a time: nested indirect objects
    come back as :class:`Ref` and stay unread until resolved.
    """

    def __init__(self, pdf: pikepdf.Pdf) -> None:
        self.pdf = pdf

    def trailer(self) -> Mapping[str, Any]:
        return self._convert(self.pdf.trailer, nested=False) or {}

    def resolve(self, value: Any) -> Any:
        if not isinstance(value, Ref):
            return value
        return self._convert(self._get(value), nested=False)

    def identity(self, value: Any) -> Optional[Hashable]:
        if not isinstance(value, Ref):
            return None
        obj = self._get(value)
        if isinstance(obj, (pikepdf.Dictionary, pikepdf.Array, pikepdf.Stream)):
            return obj.objgen
        return None

    def pages(self) -> Sequence[Ref]:
        return [Ref(*page.obj.objgen) for page in self.pdf.pages]

    def _get(self, ref: Ref) -> Any:
        try:
            return self.pdf.get_object(ref.objgen)
        except (pikepdf.PdfError, ValueError) as exc:
            raise ResolutionError(f"cannot read object {ref}: {exc}") from exc

    def _convert(self, obj: Any, nested: bool = True) -> Any:
        if nested and isinstance(obj, pikepdf.Object) and obj.is_indirect:
            return Ref(*obj.objgen)
        try:
            if isinstance(obj, pikepdf.Dictionary):
                return {str(key)[1:]: self._convert(obj[key]) for key in obj.keys()}
            if isinstance(obj, pikepdf.Array):
                return [self._convert(item) for item in obj]
            if isinstance(obj, pikepdf.String):
                return bytes(obj)
            if isinstance(obj, pikepdf.Name):
                return Name(str(obj)[1:])
        except pikepdf.PdfError as exc:
            raise ResolutionError(str(exc)) from exc
        if obj is None or isinstance(obj, pikepdf.Object):
            # null, streams, operators: nothing an outline walk can use
            return None
        return obj


@contextmanager
def open_store(pdf_path: Path | str) -> Iterator[PikepdfStore]:
    """Open ``pdf_path`` read-only and yield a store over it.

    Structural errors from pikepdf, at open time or while the body runs,
    surface as :class:`MalformedPdfError`. The file is always closed.
    """
    try:
        pdf = pikepdf.open(pdf_path)
    except pikepdf.PdfError as exc:
        raise MalformedPdfError(f"Error reading PDF: {exc}") from exc
    try:
        logger.debug("opened %s (%d pages)", pdf_path, len(pdf.pages))
        yield PikepdfStore(pdf)
    except pikepdf.PdfError as exc:
        raise MalformedPdfError(f"Error reading PDF: {exc}") from exc
    finally:
        pdf.close()

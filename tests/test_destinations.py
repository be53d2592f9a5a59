from __future__ import annotations

import pytest

from pdf_chapter_tree.destinations import (
    ExplicitDestination,
    NamedDestination,
    build_page_index,
    find_destination,
    resolve_page,
)
from pdf_chapter_tree.errors import ResolutionError
from pdf_chapter_tree.objects import MemoryStore, Name, Ref


@pytest.fixture
def store() -> MemoryStore:
    store = MemoryStore()
    for _ in range(5):
        store.add_page()
    return store


def page(store: MemoryStore, number: int) -> Ref:
    return store.pages()[number - 1]


def test_direct_array_destination(store: MemoryStore) -> None:
    node = {"Dest": [page(store, 3), Name("Fit")]}
    assert resolve_page(store, node) == 3


def test_destination_given_by_reference(store: MemoryStore) -> None:
    dest = store.add([page(store, 2), Name("XYZ"), 0, 792, None])
    assert resolve_page(store, {"Dest": dest}) == 2


def test_action_destination(store: MemoryStore) -> None:
    action = store.add({"S": Name("GoTo"), "D": [page(store, 5), Name("Fit")]})
    assert resolve_page(store, {"A": action}) == 5
    assert find_destination(store, {"A": action}).via_action


def test_inline_action_dictionary(store: MemoryStore) -> None:
    node = {"A": {"S": Name("GoTo"), "D": [page(store, 1), Name("Fit")]}}
    assert resolve_page(store, node) == 1


def test_dest_wins_over_action(store: MemoryStore) -> None:
    node = {
        "Dest": [page(store, 2), Name("Fit")],
        "A": {"S": Name("GoTo"), "D": [page(store, 4), Name("Fit")]},
    }
    assert resolve_page(store, node) == 2


def test_action_without_destination(store: MemoryStore) -> None:
    node = {"A": {"S": Name("URI"), "URI": b"https://example.com"}}
    assert find_destination(store, node) is None
    assert resolve_page(store, node) is None


@pytest.mark.parametrize(
    "name, expected",
    [(b"p35", 35), (b"p1", 1), ("p7", 7), (b"page1", None), (b"p", None), (b"", None), (b"p3x", None)],
)
def test_named_destinations(store: MemoryStore, name, expected) -> None:
    assert resolve_page(store, {"Dest": name}) == expected


def test_name_object_is_not_a_named_string(store: MemoryStore) -> None:
    assert find_destination(store, {"Dest": Name("p3")}) is None


def test_array_pointing_outside_page_tree(store: MemoryStore) -> None:
    stray = store.add({"Type": Name("Page")})
    assert resolve_page(store, {"Dest": [stray, Name("Fit")]}) is None


def test_empty_array_and_non_reference_target(store: MemoryStore) -> None:
    assert resolve_page(store, {"Dest": []}) is None
    # remote go-to style integer page
    assert resolve_page(store, {"Dest": [0, Name("Fit")]}) is None


def test_no_destination_at_all(store: MemoryStore) -> None:
    assert resolve_page(store, {"Title": b"Orphan"}) is None


def test_page_identity_compares_resolved_objects(store: MemoryStore) -> None:
    # a second reference to the same page dictionary
    alias = Ref(99)
    store.objects[alias] = store.objects[page(store, 4)]
    assert resolve_page(store, {"Dest": [alias, Name("Fit")]}) == 4


def test_first_matching_page_wins() -> None:
    shared = {"Type": Name("Page")}
    store = MemoryStore(objects={Ref(1): shared, Ref(2): shared}, pages=[Ref(1), Ref(2)])
    assert build_page_index(store) == {id(shared): 1}


def test_resolution_errors_yield_no_page(store: MemoryStore) -> None:
    class BrokenStore(MemoryStore):
        def resolve(self, value):
            if value == Ref(50):
                raise ResolutionError("bad xref entry")
            return super().resolve(value)

    broken = BrokenStore(store.objects, pages=store.pages())
    assert resolve_page(broken, {"Dest": Ref(50)}) is None
    assert resolve_page(broken, {"A": Ref(50)}) is None


def test_destination_variants(store: MemoryStore) -> None:
    explicit = find_destination(store, {"Dest": [page(store, 1), Name("FitH"), 700]})
    assert explicit == ExplicitDestination(page=page(store, 1), view=(Name("FitH"), 700))
    assert find_destination(store, {"Dest": b"p2"}) == NamedDestination(name=b"p2")
    assert NamedDestination(name=b"p12").page_number == 12

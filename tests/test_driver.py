from typing import Any

import pytest

from typstbib.core.diagnostics import CollectingEmitter
from typstbib.core.driver import drive_bibliography, select_entries
from typstbib.core.exceptions import (
    MissingCitationsError,
    NoBibliographySectionError,
    RenderFailureError,
    UnknownCitationKeyError,
)
from typstbib.core.locales import resolve_locale
from typstbib.core.ordering import SortMode, decide_sort_mode
from typstbib.core.references import BibliographyEntry, ReferenceCollection, load_bibliography
from typstbib.core.styles import resolve_style


def _drive(bib: str, style: str, cited: list[str], full: bool = False, **kwargs: Any):
    definition = resolve_style(style, "csl")
    return drive_bibliography(
        load_bibliography(bib, "yaml"),
        definition,
        resolve_locale("en-US"),
        cited,
        decide_sort_mode(definition, full),
        full,
        **kwargs,
    )


def test_manual_mode_preserves_citation_order(yaml_bib: str, unsorted_style: str) -> None:
    rendered = _drive(yaml_bib, unsorted_style, ["k2", "k1", "k3"])

    assert rendered.keys == ["k2", "k1", "k3"]
    assert [item.content for item in rendered.items] == ["B", "A", "C"]
    assert all(item.prefix is None for item in rendered.items)
    assert rendered.manual_sort is True
    assert rendered.hanging_indent is False


def test_manual_mode_renders_only_cited_entries(yaml_bib: str, unsorted_style: str) -> None:
    rendered = _drive(yaml_bib, unsorted_style, ["k3"])

    assert rendered.keys == ["k3"]
    assert len(rendered) == 1


def test_full_render_lets_the_engine_order(
    unordered_yaml_bib: str, unsorted_style: str, sorted_style: str
) -> None:
    unsorted = _drive(unordered_yaml_bib, unsorted_style, [], full=True)
    by_title = _drive(unordered_yaml_bib, sorted_style, [], full=True)

    assert unsorted.keys == ["late", "early"]
    assert unsorted.manual_sort is False
    assert by_title.keys == ["early", "late"]
    assert by_title.hanging_indent is True


def test_sorted_style_orders_cited_subset(unordered_yaml_bib: str, sorted_style: str) -> None:
    rendered = _drive(unordered_yaml_bib, sorted_style, ["late", "early"])

    assert rendered.keys == ["early", "late"]
    assert rendered.manual_sort is False


def test_numbered_style_splits_prefixes(yaml_bib: str, numbered_style: str) -> None:
    rendered = _drive(yaml_bib, numbered_style, ["k2", "k1"])

    assert rendered.keys == ["k2", "k1"]
    assert [item.prefix for item in rendered.items] == ["[1]", "[2]"]
    assert [item.content for item in rendered.items] == ["B", "A"]


@pytest.mark.parametrize("full", [True, False])
def test_unknown_cited_key_is_reported(yaml_bib: str, full: bool) -> None:
    collection = load_bibliography(yaml_bib, "yaml")
    mode = SortMode.ENGINE_SORT

    if full:
        assert len(select_entries(collection, ["missing"], mode, full)) == 3
        return
    with pytest.raises(UnknownCitationKeyError, match="Cannot find 'missing'"):
        select_entries(collection, ["k1", "missing"], mode, full)


def test_unknown_key_in_manual_mode(yaml_bib: str, unsorted_style: str) -> None:
    with pytest.raises(UnknownCitationKeyError):
        _drive(yaml_bib, unsorted_style, ["k1", "nope"])


def test_repeated_keys_keep_first_position(yaml_bib: str, unsorted_style: str) -> None:
    emitter = CollectingEmitter()

    rendered = _drive(yaml_bib, unsorted_style, ["k2", "k1", "k2"], emitter=emitter)

    assert rendered.keys == ["k2", "k1"]
    assert any("k2" in message for message in emitter.warnings)


def test_manual_mode_requires_citations(yaml_bib: str, unsorted_style: str) -> None:
    with pytest.raises(MissingCitationsError):
        _drive(yaml_bib, unsorted_style, [])


def test_engine_mode_without_citations_is_empty(yaml_bib: str, sorted_style: str) -> None:
    rendered = _drive(yaml_bib, sorted_style, [])

    assert rendered.items == ()
    assert rendered.hanging_indent is True


def test_style_without_bibliography_is_rejected(
    yaml_bib: str, citation_only_style: str
) -> None:
    with pytest.raises(NoBibliographySectionError):
        _drive(yaml_bib, citation_only_style, ["k1"])


def test_keys_differing_only_in_case_are_rejected(sorted_style: str) -> None:
    collection = ReferenceCollection(
        [
            BibliographyEntry("Key", "book", {"title": "Upper"}),
            BibliographyEntry("key", "book", {"title": "Lower"}),
        ]
    )
    definition = resolve_style(sorted_style, "csl")

    with pytest.raises(RenderFailureError, match="differ only in case"):
        drive_bibliography(
            collection,
            definition,
            resolve_locale("en-US"),
            [],
            SortMode.ENGINE_SORT,
            True,
        )


def test_mixed_case_keys_are_returned_as_written(sorted_style: str) -> None:
    collection = ReferenceCollection([BibliographyEntry("Smith2020", "book", {"title": "S"})])
    definition = resolve_style(sorted_style, "csl")

    rendered = drive_bibliography(
        collection,
        definition,
        resolve_locale("en-US"),
        ["Smith2020"],
        SortMode.ENGINE_SORT,
        False,
    )

    assert rendered.keys == ["Smith2020"]

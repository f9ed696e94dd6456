import pytest

from typstbib.core.diagnostics import CollectingEmitter
from typstbib.core.exceptions import InvalidFormatError, UnknownCitationKeyError
from typstbib.core.pipeline import generate_bibliography, render_bibliography, split_cited


def test_manual_render_produces_wire_buffer(yaml_bib: str, unsorted_style: str) -> None:
    payload = render_bibliography(
        yaml_bib, "yaml", False, unsorted_style, "csl", "en-US", ["k2", "k1"]
    )

    assert payload == b"k2%%%none%%%B%%%k1%%%none%%%A%%%false%%%true"


def test_full_render_ignores_cited_keys(unordered_yaml_bib: str, sorted_style: str) -> None:
    rendered = generate_bibliography(
        unordered_yaml_bib, "yaml", True, sorted_style, "csl", "en-US", ["missing"]
    )

    assert rendered.keys == ["early", "late"]
    assert rendered.hanging_indent is True
    assert rendered.manual_sort is False


def test_archived_style_renders_numbered_labels(yaml_bib: str) -> None:
    rendered = generate_bibliography(yaml_bib, "yaml", False, "numeric", "text", "de", ["k3"])

    assert rendered.keys == ["k3"]
    assert rendered.items[0].prefix == "[1]"
    assert "C" in rendered.items[0].content


def test_rendering_is_deterministic(yaml_bib: str, sorted_style: str) -> None:
    first = render_bibliography(yaml_bib, "yaml", True, sorted_style, "csl", "en-US", None)
    second = render_bibliography(yaml_bib, "yaml", True, sorted_style, "csl", "en-US", None)

    assert first == second


def test_unknown_locale_still_renders(yaml_bib: str, unsorted_style: str) -> None:
    rendered = generate_bibliography(
        yaml_bib, "yaml", False, unsorted_style, "csl", "xx-YY", ["k1"]
    )

    assert rendered.keys == ["k1"]


def test_unknown_format_is_reported(yaml_bib: str, unsorted_style: str) -> None:
    with pytest.raises(InvalidFormatError):
        render_bibliography(yaml_bib, "xml", False, unsorted_style, "csl", "en-US", ["k1"])


def test_unknown_key_is_reported(yaml_bib: str, sorted_style: str) -> None:
    with pytest.raises(UnknownCitationKeyError, match="ghost"):
        render_bibliography(yaml_bib, "yaml", False, sorted_style, "csl", "en-US", ["ghost"])


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("k1,k2", ["k1", "k2"]),
        (" k1 , k2 ,", ["k1", "k2"]),
        ("", []),
        (",,", []),
    ],
)
def test_split_cited(raw: str, expected: list[str]) -> None:
    assert split_cited(raw) == expected


MARKUP_BIB = """\
k1:
  type: article
  title: "Zeta *star* #hash"
  author: Smith, John
  date: 2020
  parent:
    type: periodical
    title: "Journal_of [Things]"
"""


def test_field_values_are_escaped_for_typst(unsorted_style: str) -> None:
    rendered = generate_bibliography(
        MARKUP_BIB, "yaml", False, unsorted_style, "csl", "en-US", ["k1"]
    )

    assert rendered.items[0].content == r"Zeta \*star\* \#hash"


def test_archived_style_escapes_values_inside_markup() -> None:
    rendered = generate_bibliography(
        MARKUP_BIB, "yaml", False, "numeric", "text", "en-US", ["k1"]
    )

    content = rendered.items[0].content
    assert r"Zeta \*star\* \#hash" in content
    assert r"#emph[Journal\_of \[Things\]]" in content
    assert "#hash" not in content.replace(r"\#hash", "")
    assert rendered.items[0].prefix == "[1]"


def test_empty_language_uses_english_silently(yaml_bib: str, unsorted_style: str) -> None:
    emitter = CollectingEmitter()

    generate_bibliography(
        yaml_bib, "yaml", False, unsorted_style, "csl", "", ["k1"], emitter=emitter
    )

    assert emitter.warnings == []
    assert emitter.payloads("locale_resolved") == [{"requested": "", "resolved": "en-US"}]

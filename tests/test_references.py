from pathlib import Path
import textwrap

import pytest

from typstbib.core.exceptions import InvalidFormatError, MalformedBibliographyError
from typstbib.core.references import (
    BibliographyEntry,
    ReferenceCollection,
    list_keys,
    load_bibliography,
)


def _dedent(payload: str) -> str:
    return textwrap.dedent(payload).strip() + "\n"


def test_yaml_bibliography_maps_hayagriva_fields() -> None:
    payload = _dedent(
        """
        turing1950:
          type: article
          title: Computing Machinery and Intelligence
          author: Turing, Alan Mathison
          date: 1950-10
          page-range: 433-460
          serial-number:
            doi: 10.1093/mind/LIX.236.433
          parent:
            type: periodical
            title: Mind
            volume: 59
            issue: 236
        """
    )

    collection = load_bibliography(payload, "yaml")

    entry = collection["turing1950"]
    assert entry.entry_type == "article-journal"
    assert entry.fields["title"] == "Computing Machinery and Intelligence"
    assert entry.fields["author"] == [{"family": "Turing", "given": "Alan Mathison"}]
    assert entry.fields["issued"] == {"date-parts": [[1950, 10]]}
    assert entry.fields["container-title"] == "Mind"
    assert entry.fields["volume"] == "59"
    assert entry.fields["issue"] == "236"
    assert entry.fields["page"] == "433-460"
    assert entry.fields["DOI"] == "10.1093/mind/LIX.236.433"


def test_yaml_bibliography_accepts_person_mappings_and_publishers() -> None:
    payload = _dedent(
        """
        knuth:
          type: book
          title:
            value: The Art of Computer Programming
            short: TAOCP
          author:
            - name: Knuth
              given-name: Donald E.
          publisher:
            name: Addison-Wesley
            location: Reading, MA
          date: 1968
          url:
            value: https://example.org/taocp
            date: 2024-03-01
        """
    )

    entry = load_bibliography(payload, "yaml")["knuth"]

    assert entry.entry_type == "book"
    assert entry.fields["title"] == "The Art of Computer Programming"
    assert entry.fields["author"] == [{"family": "Knuth", "given": "Donald E."}]
    assert entry.fields["publisher"] == "Addison-Wesley"
    assert entry.fields["publisher-place"] == "Reading, MA"
    assert entry.fields["issued"] == {"date-parts": [[1968]]}
    assert entry.fields["URL"] == "https://example.org/taocp"
    assert entry.fields["accessed"] == {"date-parts": [[2024, 3, 1]]}


def test_yaml_conference_parent_refines_type() -> None:
    payload = _dedent(
        """
        paper:
          type: article
          title: Fast Things
          parent:
            type: proceedings
            title: Proceedings of Speed
            publisher: ACM
        """
    )

    entry = load_bibliography(payload, "yaml")["paper"]

    assert entry.entry_type == "paper-conference"
    assert entry.fields["container-title"] == "Proceedings of Speed"
    assert entry.fields["publisher"] == "ACM"


def test_yaml_rejects_invalid_dates() -> None:
    payload = _dedent(
        """
        broken:
          type: book
          title: Broken
          date: next spring
        """
    )

    with pytest.raises(MalformedBibliographyError, match="broken"):
        load_bibliography(payload, "yaml")


def test_yaml_rejects_non_mapping_documents() -> None:
    with pytest.raises(MalformedBibliographyError):
        load_bibliography("- just\n- a list\n", "yaml")


def test_yaml_syntax_errors_are_reported() -> None:
    with pytest.raises(MalformedBibliographyError, match="Failed to parse YAML"):
        load_bibliography("key: [unclosed\n", "yaml")


def test_empty_yaml_document_yields_empty_collection() -> None:
    assert len(load_bibliography("", "yaml")) == 0


def test_bibtex_bibliography_maps_fields() -> None:
    payload = _dedent(
        r"""
        @article{smith2020,
            title = {An {Example} Article},
            author = {Smith, John and M{\"u}ller, Anna},
            journal = {Journal of Testing},
            volume = {12},
            number = {3},
            pages = {10--20},
            year = {2020},
            month = mar,
            doi = {10.1000/test_doi},
        }
        """
    )

    collection = load_bibliography(payload, "bibtex")

    entry = collection["smith2020"]
    assert entry.entry_type == "article-journal"
    assert entry.fields["title"] == "An Example Article"
    assert entry.fields["author"] == [
        {"family": "Smith", "given": "John"},
        {"family": "Müller", "given": "Anna"},
    ]
    assert entry.fields["container-title"] == "Journal of Testing"
    assert entry.fields["volume"] == "12"
    assert entry.fields["issue"] == "3"
    assert entry.fields["page"] == "10-20"
    assert entry.fields["issued"] == {"date-parts": [[2020, 3]]}
    assert entry.fields["DOI"] == "10.1000/test_doi"


def test_bibtex_thesis_and_status_years() -> None:
    payload = _dedent(
        """
        @phdthesis{doe,
            title = {A Thesis},
            author = {Doe, Jane},
            school = {Example University},
            year = {forthcoming},
        }
        """
    )

    entry = load_bibliography(payload, "bibtex")["doe"]

    assert entry.entry_type == "thesis"
    assert entry.fields["genre"] == "PhD thesis"
    assert entry.fields["publisher"] == "Example University"
    assert entry.fields["status"] == "forthcoming"
    assert "issued" not in entry.fields


def test_bibtex_misc_with_url_becomes_webpage() -> None:
    payload = "@misc{site, title = {Site}, url = {https://example.org/a_b%20c}}\n"

    entry = load_bibliography(payload, "bibtex")["site"]

    assert entry.entry_type == "webpage"
    assert entry.fields["URL"] == "https://example.org/a_b%20c"


def test_bibtex_syntax_errors_are_reported() -> None:
    with pytest.raises(MalformedBibliographyError):
        load_bibliography("@article{broken, title = {Unclosed\n", "bibtex")


def test_unknown_format_is_rejected() -> None:
    with pytest.raises(InvalidFormatError, match="xml"):
        load_bibliography("<xml/>", "xml")


def test_list_keys_preserves_source_order(yaml_bib: str) -> None:
    assert list_keys(yaml_bib, "yaml") == ["k1", "k2", "k3"]


def test_every_listed_key_can_be_looked_up(yaml_bib: str, tmp_path: Path) -> None:
    bib_path = tmp_path / "refs.bib"
    bib_path.write_text(
        "@book{one, title = {One}}\n@book{two, title = {Two}}\n", encoding="utf-8"
    )

    for raw, fmt in ((yaml_bib, "yaml"), (bib_path.read_text(encoding="utf-8"), "bibtex")):
        collection = load_bibliography(raw, fmt)
        for key in collection.keys():
            assert collection.get(key) is not None
            assert key in collection


def test_collection_rejects_duplicate_keys() -> None:
    collection = ReferenceCollection([BibliographyEntry("dup", "book", {"title": "A"})])

    with pytest.raises(MalformedBibliographyError, match="dup"):
        collection.add(BibliographyEntry("dup", "book", {"title": "B"}))


def test_entries_emit_fresh_csl_payloads() -> None:
    entry = BibliographyEntry("k", "book", {"author": [{"family": "Doe"}]})

    payload = entry.to_csl()
    payload["author"].append({"family": "Other"})

    assert payload["id"] == "k"
    assert payload["type"] == "book"
    assert entry.to_csl()["author"] == [{"family": "Doe"}]


def test_impossible_yaml_dates_are_reported() -> None:
    with pytest.raises(MalformedBibliographyError, match="Failed to parse YAML"):
        load_bibliography("a:\n  title: x\n  date: 2020-02-30\n", "yaml")


def test_collection_exports_csl_payloads(yaml_bib: str) -> None:
    collection = load_bibliography(yaml_bib, "yaml")

    assert [record["id"] for record in collection.to_csl_json()] == ["k1", "k2", "k3"]
    assert collection.find("k2") == {"id": "k2", "type": "book", "title": "B"}
    assert collection.find("missing") is None

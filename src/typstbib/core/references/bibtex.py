"""BibTeX loading through pybtex, mapped onto CSL-JSON variables."""

from __future__ import annotations

import codecs
import re
from typing import Any

import latexcodec  # noqa: F401  (registers the "ulatex" codec)
from pybtex.database import BibliographyData, Entry, Person
from pybtex.database.input import bibtex
from pybtex.exceptions import PybtexError

from ..exceptions import MalformedBibliographyError
from ._csl import csl_date, normalise_month, parse_date
from .collection import BibliographyEntry, ReferenceCollection


_TYPE_MAP: dict[str, str] = {
    "article": "article-journal",
    "book": "book",
    "mvbook": "book",
    "booklet": "pamphlet",
    "collection": "book",
    "conference": "paper-conference",
    "dataset": "dataset",
    "electronic": "webpage",
    "inbook": "chapter",
    "incollection": "chapter",
    "inproceedings": "paper-conference",
    "manual": "book",
    "mastersthesis": "thesis",
    "misc": "article",
    "online": "webpage",
    "patent": "patent",
    "periodical": "article-journal",
    "phdthesis": "thesis",
    "proceedings": "book",
    "report": "report",
    "techreport": "report",
    "thesis": "thesis",
    "unpublished": "manuscript",
    "www": "webpage",
}

_THESIS_GENRES = {
    "phdthesis": "PhD thesis",
    "mastersthesis": "Master's thesis",
}

# BibTeX field -> CSL variable, applied verbatim after text cleanup.
_FIELD_MAP: dict[str, str] = {
    "title": "title",
    "shorttitle": "title-short",
    "journal": "container-title",
    "journaltitle": "container-title",
    "booktitle": "container-title",
    "series": "collection-title",
    "volume": "volume",
    "volumes": "number-of-volumes",
    "edition": "edition",
    "chapter": "chapter-number",
    "publisher": "publisher",
    "address": "publisher-place",
    "location": "publisher-place",
    "doi": "DOI",
    "isbn": "ISBN",
    "issn": "ISSN",
    "url": "URL",
    "note": "note",
    "abstract": "abstract",
    "language": "language",
    "pagetotal": "number-of-pages",
    "type": "genre",
}

_PUBLISHER_FALLBACKS = ("school", "institution", "organization")
_PERSON_ROLES = ("author", "editor", "translator")
_VERBATIM_FIELDS = frozenset({"url", "doi", "isbn", "issn"})
_FORMATTING_COMMAND_RE = re.compile(
    r"\\(?:emph|textit|textbf|textsc|texttt|textrm|textsf|mkbibquote|url)\s*(?=\{)"
)
_BRACE_RE = re.compile(r"(?<!\\)[{}]")
_PAGE_DASH_RE = re.compile(r"\s*(?:--|\u2013|\u2014)\s*")


def load_bibtex(raw_text: str) -> ReferenceCollection:
    """Parse BibTeX text into a collection of CSL-ready entries."""
    parser = bibtex.Parser()
    try:
        data: BibliographyData = parser.parse_string(raw_text)
    except PybtexError as exc:
        raise MalformedBibliographyError(f"Failed to parse BibTeX bibliography: {exc}") from exc

    collection = ReferenceCollection()
    for key, entry in data.entries.items():
        collection.add(_convert_entry(key, entry))
    return collection


def _convert_entry(key: str, entry: Entry) -> BibliographyEntry:
    bib_type = entry.type.lower()
    fields: dict[str, Any] = {}

    for role in _PERSON_ROLES:
        persons = entry.persons.get(role)
        if persons:
            fields[role] = [_person_to_csl(key, person) for person in persons]

    for field_name, variable in _FIELD_MAP.items():
        value = entry.fields.get(field_name)
        if value is None:
            continue
        text = clean_latex(key, field_name, value)
        if text:
            fields.setdefault(variable, text)

    if "publisher" not in fields:
        for field_name in _PUBLISHER_FALLBACKS:
            value = entry.fields.get(field_name)
            if value:
                fields["publisher"] = clean_latex(key, field_name, value)
                break

    pages = entry.fields.get("pages")
    if pages:
        fields["page"] = _PAGE_DASH_RE.sub("-", clean_latex(key, "pages", pages))

    number = entry.fields.get("number")
    if number:
        variable = "issue" if bib_type in {"article", "periodical"} else "number"
        fields[variable] = clean_latex(key, "number", number)

    issued = _entry_issued(key, entry, fields)
    if issued is not None:
        fields["issued"] = issued

    urldate = entry.fields.get("urldate")
    if urldate:
        accessed = parse_date(clean_latex(key, "urldate", urldate))
        if accessed is not None:
            fields["accessed"] = accessed

    genre = _THESIS_GENRES.get(bib_type)
    if genre is not None:
        fields.setdefault("genre", genre)

    csl_type = _TYPE_MAP.get(bib_type, "article")
    if bib_type == "misc" and "URL" in fields:
        csl_type = "webpage"

    return BibliographyEntry(key=key, entry_type=csl_type, fields=fields)


def _entry_issued(key: str, entry: Entry, fields: dict[str, Any]) -> dict[str, Any] | None:
    raw_date = entry.fields.get("date")
    if raw_date:
        issued = parse_date(clean_latex(key, "date", raw_date))
        if issued is not None:
            return issued

    raw_year = entry.fields.get("year")
    if not raw_year:
        return None
    year_text = clean_latex(key, "year", raw_year)
    if not re.fullmatch(r"-?\d{1,4}", year_text):
        # Values like "in press" or "forthcoming" describe a status, not a date.
        fields.setdefault("status", year_text)
        return None

    month = None
    raw_month = entry.fields.get("month")
    if raw_month:
        month = normalise_month(raw_month)
    day = None
    raw_day = entry.fields.get("day")
    if month is not None and raw_day and raw_day.strip().isdigit():
        day = int(raw_day.strip())
    return csl_date(int(year_text), month, day)


def _person_to_csl(key: str, person: Person) -> dict[str, str]:
    family_parts = [*person.prelast_names, *person.last_names]
    given_parts = [*person.first_names, *person.middle_names]
    name: dict[str, str] = {}
    family = clean_latex(key, "person", " ".join(family_parts))
    if family:
        name["family"] = family
    given = clean_latex(key, "person", " ".join(given_parts))
    if given:
        name["given"] = given
    suffix = clean_latex(key, "person", " ".join(person.lineage_names))
    if suffix:
        name["suffix"] = suffix
    if not name:
        raise MalformedBibliographyError(f"Bibliography entry '{key}' contains an empty name.")
    return name


def clean_latex(key: str, field: str, value: str) -> str:
    """Decode LaTeX accents and drop protective braces from a field value."""
    if field in _VERBATIM_FIELDS:
        # "%" and "_" are literal in identifiers; never run them through the codec.
        return _BRACE_RE.sub("", str(value)).replace(r"\_", "_").replace(r"\%", "%").strip()
    text = _FORMATTING_COMMAND_RE.sub("", str(value))
    try:
        text = codecs.decode(text, "ulatex")
    except ValueError as exc:
        raise MalformedBibliographyError(
            f"Bibliography entry '{key}' field '{field}' contains invalid LaTeX: {exc}"
        ) from exc
    text = _BRACE_RE.sub("", text)
    return " ".join(text.split())


__all__ = ["clean_latex", "load_bibtex"]

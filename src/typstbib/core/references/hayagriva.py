"""Hayagriva YAML loading, mapped onto CSL-JSON variables.

A hayagriva document is a mapping of citation keys to entries. Entries declare
a `type`, a handful of scalar fields, persons, and optionally one or more
`parent` entries describing the container the work appeared in (a journal, a
proceedings volume, a website...). Parents contribute the container title and
any container-level fields the child does not set itself.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import yaml

from ..exceptions import MalformedBibliographyError
from ._csl import parse_date, scalar_text
from .collection import BibliographyEntry, ReferenceCollection


_TYPE_MAP: dict[str, str] = {
    "anthology": "book",
    "anthos": "chapter",
    "article": "article-journal",
    "artwork": "graphic",
    "audio": "song",
    "blog": "webpage",
    "book": "book",
    "case": "legal_case",
    "chapter": "chapter",
    "conference": "paper-conference",
    "entry": "entry",
    "exhibition": "article",
    "legislation": "legislation",
    "manuscript": "manuscript",
    "misc": "article",
    "newspaper": "article-newspaper",
    "original": "book",
    "patent": "patent",
    "performance": "speech",
    "periodical": "article-journal",
    "post": "post",
    "proceedings": "book",
    "reference": "book",
    "report": "report",
    "repository": "article",
    "scene": "motion_picture",
    "thesis": "thesis",
    "thread": "post",
    "video": "motion_picture",
    "web": "webpage",
}

# (child type, parent type) pairs that refine the CSL type.
_PARENT_TYPE_MAP: dict[tuple[str, str], str] = {
    ("article", "periodical"): "article-journal",
    ("article", "newspaper"): "article-newspaper",
    ("article", "proceedings"): "paper-conference",
    ("article", "conference"): "paper-conference",
    ("article", "blog"): "post-weblog",
    ("article", "web"): "webpage",
    ("article", "reference"): "entry-encyclopedia",
    ("entry", "reference"): "entry-encyclopedia",
    ("entry", "book"): "entry-dictionary",
    ("web", "web"): "webpage",
    ("post", "blog"): "post-weblog",
}

_PERSON_ROLES: dict[str, str] = {
    "author": "author",
    "editor": "editor",
}

_AFFILIATED_ROLES: dict[str, str] = {
    "translator": "translator",
    "director": "director",
    "illustrator": "illustrator",
    "composer": "composer",
    "collection-editor": "collection-editor",
}

_TEXT_FIELDS: dict[str, str] = {
    "title": "title",
    "volume": "volume",
    "volume-total": "number-of-volumes",
    "issue": "issue",
    "edition": "edition",
    "page-range": "page",
    "page-total": "number-of-pages",
    "note": "note",
    "abstract": "abstract",
    "genre": "genre",
    "language": "language",
    "archive": "archive",
    "archive-location": "archive_location",
    "call-number": "call-number",
    "runtime": "dimensions",
}

# Fields a child inherits from its first parent when it does not set them.
_INHERITED_FIELDS = ("volume", "issue", "publisher", "publisher-place", "edition", "ISSN")

_SERIAL_NUMBERS: dict[str, str] = {
    "doi": "DOI",
    "isbn": "ISBN",
    "issn": "ISSN",
    "pmid": "PMID",
    "pmcid": "PMCID",
}


def load_hayagriva(raw_text: str) -> ReferenceCollection:
    """Parse a hayagriva YAML document into a collection of CSL-ready entries."""
    try:
        document = yaml.safe_load(raw_text)
    except (yaml.YAMLError, ValueError) as exc:
        # Well-formed but impossible timestamps (2020-02-30) surface as ValueError.
        raise MalformedBibliographyError(f"Failed to parse YAML bibliography: {exc}") from exc

    if document is None:
        return ReferenceCollection()
    if not isinstance(document, Mapping):
        raise MalformedBibliographyError(
            "YAML bibliography must be a mapping of citation keys to entries."
        )

    collection = ReferenceCollection()
    for key, payload in document.items():
        if not isinstance(key, str) or not key.strip():
            raise MalformedBibliographyError(
                f"YAML bibliography key {key!r} must be a non-empty string."
            )
        if not isinstance(payload, Mapping):
            raise MalformedBibliographyError(f"Bibliography entry '{key}' must be a mapping.")
        entry_type, fields = _convert_entry(key, payload)
        collection.add(BibliographyEntry(key=key, entry_type=entry_type, fields=fields))
    return collection


def _convert_entry(key: str, payload: Mapping[str, Any]) -> tuple[str, dict[str, Any]]:
    kind = _entry_kind(key, payload)
    fields = _convert_fields(key, payload)

    parents = _parents(key, payload)
    entry_type = _TYPE_MAP.get(kind, "article")
    if parents:
        parent_payload = parents[0]
        parent_kind = _entry_kind(key, parent_payload)
        parent_fields = _convert_fields(key, parent_payload)
        if "title" in parent_fields:
            fields.setdefault("container-title", parent_fields["title"])
        for variable in _INHERITED_FIELDS:
            if variable in parent_fields:
                fields.setdefault(variable, parent_fields[variable])
        if "issued" not in fields and "issued" in parent_fields:
            fields["issued"] = parent_fields["issued"]
        if "editor" not in fields and "editor" in parent_fields:
            fields["editor"] = parent_fields["editor"]
        entry_type = _PARENT_TYPE_MAP.get((kind, parent_kind), entry_type)
        if kind in {"anthos", "chapter"}:
            entry_type = "chapter"

    return entry_type, fields


def _entry_kind(key: str, payload: Mapping[str, Any]) -> str:
    raw_type = payload.get("type", "misc")
    if not isinstance(raw_type, str) or not raw_type.strip():
        raise MalformedBibliographyError(
            f"Bibliography entry '{key}' must define a textual 'type'."
        )
    return raw_type.strip().lower()


def _parents(key: str, payload: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    raw = payload.get("parent")
    if raw is None:
        return []
    if isinstance(raw, Mapping):
        return [raw]
    if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)):
        parents = list(raw)
        if all(isinstance(parent, Mapping) for parent in parents):
            return parents
    raise MalformedBibliographyError(
        f"Bibliography entry '{key}' field 'parent' must be a mapping or list of mappings."
    )


def _convert_fields(key: str, payload: Mapping[str, Any]) -> dict[str, Any]:
    fields: dict[str, Any] = {}

    for field_name, variable in _PERSON_ROLES.items():
        if field_name in payload:
            names = _coerce_persons(key, field_name, payload[field_name])
            if names:
                fields[variable] = names

    for affiliation in _as_list(payload.get("affiliated")):
        if not isinstance(affiliation, Mapping):
            raise MalformedBibliographyError(
                f"Bibliography entry '{key}' field 'affiliated' must contain mappings."
            )
        role = str(affiliation.get("role", "")).strip().lower()
        variable = _AFFILIATED_ROLES.get(role)
        if variable is None:
            continue
        names = _coerce_persons(key, "affiliated", affiliation.get("names"))
        if names:
            fields.setdefault(variable, []).extend(names)

    for field_name, variable in _TEXT_FIELDS.items():
        if field_name in payload:
            text = _coerce_text(key, field_name, payload[field_name])
            if text is not None:
                fields[variable] = text

    if "page" in fields:
        fields["page"] = fields["page"].replace("–", "-").replace("--", "-")

    if "date" in payload:
        issued = parse_date(payload["date"])
        if issued is None:
            raise MalformedBibliographyError(
                f"Bibliography entry '{key}' field 'date' must follow YYYY, YYYY-MM, or YYYY-MM-DD."
            )
        fields["issued"] = issued

    _convert_publisher(key, payload, fields)
    _convert_url(key, payload, fields)
    _convert_serial_numbers(key, payload, fields)
    return fields


def _convert_publisher(key: str, payload: Mapping[str, Any], fields: dict[str, Any]) -> None:
    publisher = payload.get("publisher")
    if isinstance(publisher, Mapping):
        name = _coerce_text(key, "publisher", publisher.get("name"))
        if name:
            fields["publisher"] = name
        location = _coerce_text(key, "publisher", publisher.get("location"))
        if location:
            fields["publisher-place"] = location
    elif publisher is not None:
        name = _coerce_text(key, "publisher", publisher)
        if name:
            fields["publisher"] = name

    location = _coerce_text(key, "location", payload.get("location"))
    if location:
        fields.setdefault("publisher-place", location)

    organization = _coerce_text(key, "organization", payload.get("organization"))
    if organization:
        fields.setdefault("publisher", organization)


def _convert_url(key: str, payload: Mapping[str, Any], fields: dict[str, Any]) -> None:
    url = payload.get("url")
    if url is None:
        return
    if isinstance(url, Mapping):
        value = _coerce_text(key, "url", url.get("value"))
        if value:
            fields["URL"] = value
        accessed = url.get("date")
        if accessed is not None:
            parsed = parse_date(accessed)
            if parsed is None:
                raise MalformedBibliographyError(
                    f"Bibliography entry '{key}' field 'url.date' is not a valid date."
                )
            fields["accessed"] = parsed
        return
    value = _coerce_text(key, "url", url)
    if value:
        fields["URL"] = value


def _convert_serial_numbers(key: str, payload: Mapping[str, Any], fields: dict[str, Any]) -> None:
    serial = payload.get("serial-number")
    if serial is None:
        return
    if isinstance(serial, Mapping):
        for name, value in serial.items():
            text = _coerce_text(key, "serial-number", value)
            if not text:
                continue
            variable = _SERIAL_NUMBERS.get(str(name).lower())
            if variable is not None:
                fields[variable] = text
            else:
                fields.setdefault("number", text)
        return
    text = _coerce_text(key, "serial-number", serial)
    if text:
        fields["number"] = text


def _coerce_text(key: str, field: str, value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, Mapping):
        # Formattable strings: {value: ..., short: ..., verbatim: ...}
        return _coerce_text(key, field, value.get("value"))
    text = scalar_text(value)
    if text is None and not isinstance(value, str):
        raise MalformedBibliographyError(
            f"Bibliography entry '{key}' field '{field}' must be a string or number."
        )
    return text


def _coerce_persons(key: str, field: str, value: Any) -> list[dict[str, str]]:
    names: list[dict[str, str]] = []
    for item in _as_list(value):
        if isinstance(item, str):
            names.append(_parse_person_string(key, field, item))
        elif isinstance(item, Mapping):
            names.append(_parse_person_mapping(key, field, item))
        else:
            raise MalformedBibliographyError(
                f"Bibliography entry '{key}' field '{field}' must contain names."
            )
    return names


def _parse_person_string(key: str, field: str, value: str) -> dict[str, str]:
    parts = [part.strip() for part in value.split(",")]
    if not parts[0]:
        raise MalformedBibliographyError(
            f"Bibliography entry '{key}' field '{field}' contains an empty name."
        )
    name = {"family": parts[0]}
    if len(parts) > 1 and parts[1]:
        name["given"] = parts[1]
    if len(parts) > 2 and parts[2]:
        name["suffix"] = parts[2]
    return name


def _parse_person_mapping(key: str, field: str, value: Mapping[str, Any]) -> dict[str, str]:
    family = scalar_text(value.get("name"))
    if not family:
        raise MalformedBibliographyError(
            f"Bibliography entry '{key}' field '{field}' contains a person without 'name'."
        )
    prefix = scalar_text(value.get("prefix"))
    name = {"family": f"{prefix} {family}" if prefix else family}
    given = scalar_text(value.get("given-name"))
    if given:
        name["given"] = given
    suffix = scalar_text(value.get("suffix"))
    if suffix:
        name["suffix"] = suffix
    return name


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (str, bytes, Mapping)):
        return [value]
    if isinstance(value, Sequence):
        return list(value)
    return [value]


__all__ = ["load_hayagriva"]

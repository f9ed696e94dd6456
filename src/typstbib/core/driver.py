"""Drive citeproc-py to produce an ordered, rendered bibliography."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
import io
import logging
from types import ModuleType
from typing import Any

from citeproc import (
    Citation,
    CitationItem,
    CitationStylesBibliography,
    CitationStylesStyle,
)
from citeproc.source.json import CiteProcJSON

from .config import DEFAULT_CONFIG, RenderConfig
from .diagnostics import DiagnosticEmitter, NullEmitter
from .exceptions import (
    MissingCitationsError,
    NoBibliographySectionError,
    RenderFailureError,
    UnknownCitationKeyError,
)
from .formatter import get_writer, typst
from .locales import LocaleSelection
from .ordering import SortMode
from .references import BibliographyEntry, ReferenceCollection
from .styles import StyleDefinition


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RenderedItem:
    """One bibliography entry as rendered by the engine."""

    key: str
    prefix: str | None
    content: str


@dataclass(frozen=True, slots=True)
class RenderedBibliography:
    """Ordered rendered entries plus the layout flags the host needs."""

    items: tuple[RenderedItem, ...]
    hanging_indent: bool
    manual_sort: bool

    @property
    def keys(self) -> list[str]:
        return [item.key for item in self.items]

    def __len__(self) -> int:
        return len(self.items)


def select_entries(
    collection: ReferenceCollection,
    cited_keys: Sequence[str],
    mode: SortMode,
    full: bool,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> list[BibliographyEntry]:
    """Return the entries to submit, in submission order."""
    emitter = emitter or NullEmitter()

    if not full:
        for key in cited_keys:
            if key not in collection:
                raise UnknownCitationKeyError(key)

    if mode is SortMode.MANUAL:
        if not cited_keys:
            raise MissingCitationsError(
                "Order-of-appearance bibliographies need at least one cited key."
            )
        seen: set[str] = set()
        entries: list[BibliographyEntry] = []
        for key in cited_keys:
            if key in seen:
                emitter.warning(
                    f"Citation key '{key}' is cited more than once; keeping its first position."
                )
                continue
            seen.add(key)
            entries.append(collection[key])
        return entries

    if full:
        return list(collection)
    cited = set(cited_keys)
    return [entry for entry in collection if entry.key in cited]


def drive_bibliography(
    collection: ReferenceCollection,
    style: StyleDefinition,
    locale: LocaleSelection,
    cited_keys: Sequence[str],
    mode: SortMode,
    full: bool,
    *,
    config: RenderConfig = DEFAULT_CONFIG,
    emitter: DiagnosticEmitter | None = None,
) -> RenderedBibliography:
    """Submit one citation per relevant entry and render the bibliography."""
    entries = select_entries(collection, cited_keys, mode, full, emitter=emitter)

    section = style.bibliography
    if section is None:
        raise NoBibliographySectionError(
            f"Style '{style.title or style.style_id or style.source}' "
            "does not define a bibliography."
        )

    by_engine_key: dict[str, str] = {}
    for entry in entries:
        folded = entry.key.lower()
        if folded in by_engine_key:
            raise RenderFailureError(
                f"Citation keys '{by_engine_key[folded]}' and '{entry.key}' "
                "differ only in case and cannot be rendered together."
            )
        by_engine_key[folded] = entry.key

    logger.debug(
        "Submitting %d citation(s) in %s order with style %s",
        len(entries),
        mode.value,
        style.style_id or style.source,
    )

    if not entries:
        return RenderedBibliography(
            items=(), hanging_indent=section.hanging_indent, manual_sort=mode.is_manual
        )

    if section.splits_first_field:
        prefix_xml, content_xml = style.split_layout()
    else:
        prefix_xml, content_xml = None, style.xml

    if full:
        records = collection.to_csl_json()
    else:
        records = [
            record for entry in entries if (record := collection.find(entry.key)) is not None
        ]

    submitted = [entry.key for entry in entries]
    engine_order, contents = _render(
        content_xml,
        locale,
        records,
        submitted,
        typst,
        sort=not mode.is_manual,
    )
    ordered_keys = [by_engine_key[key.lower()] for key in engine_order]

    prefixes: list[str | None] = [None] * len(ordered_keys)
    if prefix_xml is not None:
        _, rendered_prefixes = _render(
            prefix_xml,
            locale,
            records,
            ordered_keys,
            get_writer(config.prefix_format),
            sort=False,
        )
        prefixes = [prefix.strip() or None for prefix in rendered_prefixes]

    items = tuple(
        RenderedItem(key=key, prefix=prefix, content=content.strip())
        for key, prefix, content in zip(ordered_keys, prefixes, contents, strict=True)
    )
    return RenderedBibliography(
        items=items,
        hanging_indent=section.hanging_indent,
        manual_sort=mode.is_manual,
    )


# Variables the engine matches on; they never reach the output.
_RAW_VARIABLES = frozenset({"id", "type"})


def _escape_record(record: Mapping[str, Any], escape: Callable[[str], str]) -> dict[str, Any]:
    return {
        name: value if name in _RAW_VARIABLES else _escape_value(value, escape)
        for name, value in record.items()
    }


def _escape_value(value: Any, escape: Callable[[str], str]) -> Any:
    if isinstance(value, str):
        return escape(value)
    if isinstance(value, list):
        return [_escape_value(item, escape) for item in value]
    if isinstance(value, Mapping):
        return {name: _escape_value(item, escape) for name, item in value.items()}
    return value


def _render(
    style_xml: bytes,
    locale: LocaleSelection,
    records: Sequence[Mapping[str, Any]],
    keys: Sequence[str],
    writer: ModuleType,
    *,
    sort: bool,
) -> tuple[list[str], list[str]]:
    """Register ``keys`` with a fresh engine and return (engine order, rendered text).

    citeproc-py only passes style literals through the writer's `preformat`;
    field values are read straight from the source, so they are escaped here.
    """
    try:
        engine_style = CitationStylesStyle(
            io.BytesIO(style_xml), locale=locale.resolved, validate=False
        )
        source = CiteProcJSON([_escape_record(record, writer.preformat) for record in records])
        bibliography = CitationStylesBibliography(engine_style, source, writer)
        for key in keys:
            bibliography.register(Citation([CitationItem(key)]))
        if sort:
            bibliography.sort()
        rendered = [str(text) for text in bibliography.bibliography()]
        order = [str(key) for key in bibliography.keys]
    except Exception as exc:
        raise RenderFailureError(f"Citation engine failed to render bibliography: {exc}") from exc

    if len(rendered) != len(keys) or len(order) != len(keys):
        raise RenderFailureError(
            f"Citation engine rendered {len(rendered)} of {len(keys)} submitted entries."
        )
    return order, rendered


__all__ = [
    "RenderedBibliography",
    "RenderedItem",
    "drive_bibliography",
    "select_entries",
]

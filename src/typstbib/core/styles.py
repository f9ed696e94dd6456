"""CSL style resolution and inspection.

Styles arrive either as inline CSL markup (the host reads the file for us) or
as the name of a style bundled with this package or with citeproc-py. Only
independent styles are accepted: a dependent style merely points at a parent
style and cannot be rendered on its own.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from importlib import resources
from importlib.resources.abc import Traversable
import logging
import xml.etree.ElementTree as ElementTree

from .exceptions import (
    InvalidStyleFormatError,
    MalformedStyleError,
    StyleNotFoundError,
    UnsupportedStyleKindError,
)


logger = logging.getLogger(__name__)

CSL_NS = "http://purl.org/net/xbiblio/csl"
_NS = {"cs": CSL_NS}

ElementTree.register_namespace("", CSL_NS)

STYLE_FORMATS = ("csl", "text")


@dataclass(frozen=True, slots=True)
class BibliographySection:
    """Layout-relevant facts about a style's ``<bibliography>`` element."""

    sorted: bool
    hanging_indent: bool
    second_field_align: str | None = None
    first_field_display: str | None = None

    @property
    def splits_first_field(self) -> bool:
        """Return True when the first layout element renders as a separate label."""
        return self.second_field_align is not None or self.first_field_display == "left-margin"


@dataclass(frozen=True, slots=True)
class StyleDefinition:
    """A parsed, independent CSL style."""

    xml: bytes
    source: str
    style_id: str | None = None
    title: str | None = None
    default_locale: str | None = None
    bibliography: BibliographySection | None = None

    def split_layout(self) -> tuple[bytes, bytes]:
        """Return (prefix, content) style documents for first-field rendering.

        The prefix document keeps only the first element of the bibliography
        layout; the content document keeps everything else. Sorting rules are
        preserved in both so item order stays aligned.
        """
        root = ElementTree.fromstring(self.xml)
        layout = root.find("cs:bibliography/cs:layout", _NS)
        if layout is None or len(layout) == 0:
            raise MalformedStyleError("Bibliography section does not declare a layout.")

        prefix_root = copy.deepcopy(root)
        prefix_layout = prefix_root.find("cs:bibliography/cs:layout", _NS)
        assert prefix_layout is not None
        first = prefix_layout[0]
        for child in list(prefix_layout)[1:]:
            prefix_layout.remove(child)
        for attribute in ("prefix", "suffix", "delimiter"):
            prefix_layout.attrib.pop(attribute, None)
        first.attrib.pop("display", None)

        layout.remove(layout[0])
        return _serialise(prefix_root), _serialise(root)


def resolve_style(style_source: str, source_kind: str) -> StyleDefinition:
    """Resolve inline CSL markup (``csl``) or an archived style name (``text``)."""
    if source_kind == "csl":
        return parse_style(style_source, source="inline")
    if source_kind == "text":
        path = find_archived_style(style_source)
        if path is None:
            raise StyleNotFoundError(style_source)
        logger.debug("Resolved archived style %s to %s", style_source, path)
        return parse_style(path.read_bytes(), source=style_source)
    raise InvalidStyleFormatError(source_kind)


def parse_style(markup: str | bytes, *, source: str = "inline") -> StyleDefinition:
    """Parse CSL markup and reject dependent styles."""
    payload = markup.encode("utf-8") if isinstance(markup, str) else markup
    try:
        root = ElementTree.fromstring(payload)
    except ElementTree.ParseError as exc:
        raise MalformedStyleError(f"Failed to parse CSL style: {exc}") from exc

    if root.tag != f"{{{CSL_NS}}}style":
        raise MalformedStyleError(
            "CSL style must have a <style> root element in the CSL namespace."
        )

    style_id = _text(root.find("cs:info/cs:id", _NS))
    title = _text(root.find("cs:info/cs:title", _NS))

    parent_link = root.find("cs:info/cs:link[@rel='independent-parent']", _NS)
    if parent_link is not None:
        parent = parent_link.get("href", "<unknown>")
        raise UnsupportedStyleKindError(
            f"Style '{title or style_id or source}' is a dependent style of {parent}; "
            "only independent styles are supported."
        )

    return StyleDefinition(
        xml=_serialise(root),
        source=source,
        style_id=style_id,
        title=title,
        default_locale=root.get("default-locale"),
        bibliography=_bibliography_section(root),
    )


def _bibliography_section(root: ElementTree.Element) -> BibliographySection | None:
    bibliography = root.find("cs:bibliography", _NS)
    if bibliography is None:
        return None
    layout = bibliography.find("cs:layout", _NS)
    first_display = None
    if layout is not None and len(layout):
        first_display = layout[0].get("display")
    return BibliographySection(
        sorted=bibliography.find("cs:sort", _NS) is not None,
        hanging_indent=bibliography.get("hanging-indent") == "true",
        second_field_align=bibliography.get("second-field-align"),
        first_field_display=first_display,
    )


def _archive_roots() -> list[Traversable]:
    roots = [resources.files("typstbib") / "styles"]
    roots.append(resources.files("citeproc") / "data" / "styles")
    return [root for root in roots if root.is_dir()]


def _normalise_style_name(name: str) -> str:
    candidate = name.strip().lower()
    if candidate.endswith(".csl"):
        candidate = candidate[: -len(".csl")]
    return candidate


def find_archived_style(name: str) -> Traversable | None:
    """Return the bundled style file for ``name``, or None when unknown."""
    candidate = _normalise_style_name(name)
    if not candidate or "/" in candidate or "\\" in candidate:
        return None
    for root in _archive_roots():
        path = root / f"{candidate}.csl"
        if path.is_file():
            return path
    return None


def available_styles() -> list[str]:
    """List the names accepted by ``resolve_style(..., "text")``."""
    names: set[str] = set()
    for root in _archive_roots():
        for path in root.iterdir():
            if path.name.endswith(".csl"):
                names.add(path.name[: -len(".csl")].lower())
    return sorted(names)


def _serialise(root: ElementTree.Element) -> bytes:
    return ElementTree.tostring(root, encoding="utf-8", xml_declaration=True)


def _text(element: ElementTree.Element | None) -> str | None:
    if element is None or element.text is None:
        return None
    return element.text.strip() or None


__all__ = [
    "BibliographySection",
    "CSL_NS",
    "STYLE_FORMATS",
    "StyleDefinition",
    "available_styles",
    "find_archived_style",
    "parse_style",
    "resolve_style",
]

"""Render CSL bibliographies as Typst markup for plugin hosts."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as _distribution_version

from typstbib.core import (
    BibliographyEntry,
    BibliographyError,
    ReferenceCollection,
    RenderConfig,
    RenderedBibliography,
    RenderedItem,
    SortMode,
    StyleDefinition,
    available_styles,
    generate_bibliography,
    list_keys,
    load_bibliography,
    render_bibliography,
    resolve_locale,
    resolve_style,
)
from typstbib.protocol import (
    HostResult,
    get_bib_keys,
    initiate_protocol,
    invoke,
    parcio_bib,
)


def get_version() -> str:
    """Return the installed distribution version, or 0.0.0 from a source checkout."""
    try:
        return _distribution_version("typstbib")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = get_version()

__all__ = [
    "BibliographyEntry",
    "BibliographyError",
    "HostResult",
    "ReferenceCollection",
    "RenderConfig",
    "RenderedBibliography",
    "RenderedItem",
    "SortMode",
    "StyleDefinition",
    "__version__",
    "available_styles",
    "generate_bibliography",
    "get_version",
    "get_bib_keys",
    "initiate_protocol",
    "invoke",
    "list_keys",
    "load_bibliography",
    "parcio_bib",
    "render_bibliography",
    "resolve_locale",
    "resolve_style",
]

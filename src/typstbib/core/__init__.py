"""Core bibliography rendering primitives."""

from __future__ import annotations

from .config import DEFAULT_CONFIG, RenderConfig
from .diagnostics import CollectingEmitter, DiagnosticEmitter, LoggingEmitter, NullEmitter
from .driver import RenderedBibliography, RenderedItem, drive_bibliography
from .encoding import encode_bibliography
from .exceptions import BibliographyError
from .locales import LocaleSelection, resolve_locale
from .ordering import SortMode, decide_sort_mode
from .pipeline import generate_bibliography, render_bibliography, split_cited
from .references import BibliographyEntry, ReferenceCollection, list_keys, load_bibliography
from .styles import StyleDefinition, available_styles, resolve_style


__all__ = [
    "DEFAULT_CONFIG",
    "BibliographyEntry",
    "BibliographyError",
    "CollectingEmitter",
    "DiagnosticEmitter",
    "LocaleSelection",
    "LoggingEmitter",
    "NullEmitter",
    "ReferenceCollection",
    "RenderConfig",
    "RenderedBibliography",
    "RenderedItem",
    "SortMode",
    "StyleDefinition",
    "available_styles",
    "decide_sort_mode",
    "drive_bibliography",
    "encode_bibliography",
    "generate_bibliography",
    "list_keys",
    "load_bibliography",
    "render_bibliography",
    "resolve_locale",
    "resolve_style",
    "split_cited",
]

"""End-to-end bibliography rendering: load, resolve, order, render, encode."""

from __future__ import annotations

from collections.abc import Sequence
import logging

from .config import DEFAULT_CONFIG, RenderConfig
from .diagnostics import DiagnosticEmitter, NullEmitter
from .driver import RenderedBibliography, drive_bibliography
from .encoding import encode_bibliography
from .locales import resolve_locale
from .ordering import decide_sort_mode
from .references import load_bibliography
from .styles import resolve_style


logger = logging.getLogger(__name__)


def generate_bibliography(
    bib: str,
    format: str,
    full: bool,
    style: str,
    style_format: str,
    lang: str,
    cited: Sequence[str] | None,
    *,
    config: RenderConfig = DEFAULT_CONFIG,
    emitter: DiagnosticEmitter | None = None,
) -> RenderedBibliography:
    """Render the bibliography for ``cited`` keys, or for every entry when ``full``.

    - `bib` holds the contents of a BibTeX file or a hayagriva YAML file.
    - `format` is `yaml` or `bibtex`.
    - `style` is either raw CSL markup or an archived style name, as told by
      `style_format` (`csl` or `text`).
    - `lang` is an IETF language tag.
    - `cited` lists the cited keys in order of first appearance; it is ignored
      when `full` is true.
    """
    emitter = emitter or NullEmitter()

    collection = load_bibliography(bib, format)
    emitter.event("bibliography_loaded", {"format": format, "count": len(collection)})

    definition = resolve_style(style, style_format)
    emitter.event(
        "style_resolved",
        {"style": definition.style_id or definition.title, "source": definition.source},
    )

    locale = resolve_locale(lang)
    if locale.is_fallback:
        emitter.warning(f"Locale '{lang}' is not bundled; using {locale.resolved}.")
    emitter.event("locale_resolved", {"requested": lang, "resolved": locale.resolved})

    mode = decide_sort_mode(definition, full)
    emitter.event("sort_mode", {"mode": mode.value})

    rendered = drive_bibliography(
        collection,
        definition,
        locale,
        [] if full else list(cited or ()),
        mode,
        full,
        config=config,
        emitter=emitter,
    )
    emitter.event("bibliography_rendered", {"count": len(rendered), "mode": mode.value})
    logger.debug("Rendered %d bibliography item(s)", len(rendered))
    return rendered


def render_bibliography(
    bib: str,
    format: str,
    full: bool,
    style: str,
    style_format: str,
    lang: str,
    cited: Sequence[str] | None,
    *,
    config: RenderConfig = DEFAULT_CONFIG,
    emitter: DiagnosticEmitter | None = None,
) -> bytes:
    """Render and encode a bibliography into the host wire format."""
    rendered = generate_bibliography(
        bib,
        format,
        full,
        style,
        style_format,
        lang,
        cited,
        config=config,
        emitter=emitter,
    )
    return encode_bibliography(rendered, config)


def split_cited(raw: str, separator: str = ",") -> list[str]:
    """Split the host's cited-key list, dropping blanks around and between keys."""
    return [key.strip() for key in raw.split(separator) if key.strip()]


__all__ = ["generate_bibliography", "render_bibliography", "split_cited"]

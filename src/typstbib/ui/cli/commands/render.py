"""Render command for the typstbib CLI."""

from __future__ import annotations

import typer

from typstbib.core.exceptions import BibliographyError
from typstbib.core.pipeline import render_bibliography, split_cited

from .._options import (
    BibliographyArgument,
    CitedOption,
    ConfigOption,
    EncodingOption,
    FormatOption,
    FullOption,
    LangOption,
    PrefixFormatOption,
    StyleFormatOption,
    StyleOption,
)
from ..diagnostics import CliEmitter
from ..state import emit_error, get_cli_state
from ..utils import infer_bibliography_format, load_render_config, resolve_style_argument


def render(
    bibliography: BibliographyArgument,
    style: StyleOption = "numeric",
    style_format: StyleFormatOption = None,
    bib_format: FormatOption = None,
    lang: LangOption = "en-US",
    cited: CitedOption = "",
    full: FullOption = False,
    encoding: EncodingOption = None,
    prefix_format: PrefixFormatOption = None,
    config_file: ConfigOption = None,
) -> None:
    """Render a bibliography and print the encoded host buffer."""
    state = get_cli_state()
    config = load_render_config(config_file, encoding=encoding, prefix_format=prefix_format)
    fmt = infer_bibliography_format(bibliography, bib_format)
    style_source, resolved_style_format = resolve_style_argument(style, style_format)

    try:
        payload = render_bibliography(
            bibliography.read_text(encoding="utf-8"),
            fmt,
            full,
            style_source,
            resolved_style_format,
            lang,
            None if full else split_cited(cited, config.cited_separator),
            config=config,
            emitter=CliEmitter(state),
        )
    except BibliographyError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    typer.echo(payload.decode("utf-8"))

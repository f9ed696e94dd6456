"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
STYLE_PANEL = "Style"
OUTPUT_PANEL = "Output"
DIAGNOSTICS_PANEL = "Diagnostics"

BibliographyArgument = Annotated[
    Path,
    typer.Argument(
        metavar="BIBLIOGRAPHY",
        help="Hayagriva YAML (.yml, .yaml) or BibTeX (.bib) bibliography file.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
    ),
]

FormatOption = Annotated[
    str | None,
    typer.Option(
        "--format",
        "-f",
        help="Bibliography format ('yaml' or 'bibtex'). Inferred from the file suffix when omitted.",
        rich_help_panel=INPUTS_PANEL,
    ),
]

CitedOption = Annotated[
    str,
    typer.Option(
        "--cited",
        "-c",
        help="Comma-separated citation keys in order of first appearance.",
        rich_help_panel=INPUTS_PANEL,
    ),
]

FullOption = Annotated[
    bool,
    typer.Option(
        "--full",
        help="Render every bibliography entry regardless of citations.",
        rich_help_panel=INPUTS_PANEL,
    ),
]

StyleOption = Annotated[
    str,
    typer.Option(
        "--style",
        "-s",
        help="Path to a CSL file, or the name of a bundled style.",
        rich_help_panel=STYLE_PANEL,
    ),
]

StyleFormatOption = Annotated[
    str | None,
    typer.Option(
        "--style-format",
        help="Treat --style as inline CSL ('csl') or as a bundled style name ('text').",
        rich_help_panel=STYLE_PANEL,
    ),
]

LangOption = Annotated[
    str,
    typer.Option(
        "--lang",
        "-l",
        help="IETF language tag used for localised terms and dates.",
        rich_help_panel=STYLE_PANEL,
    ),
]

EncodingOption = Annotated[
    str | None,
    typer.Option(
        "--encoding",
        help="Per-item output layout: 'flat' or 'structured' (JSON).",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

PrefixFormatOption = Annotated[
    str | None,
    typer.Option(
        "--prefix-format",
        help="Writer for item prefixes: 'plain' or 'typst'.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        help="YAML file holding render settings (encoding, separator, absence_marker...).",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

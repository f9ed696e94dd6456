"""List the citation keys of a bibliography file."""

from __future__ import annotations

import typer

from typstbib.core.exceptions import BibliographyError
from typstbib.core.references import list_keys

from .._options import BibliographyArgument, FormatOption
from ..state import emit_error
from ..utils import infer_bibliography_format


def keys(
    bibliography: BibliographyArgument,
    bib_format: FormatOption = None,
) -> None:
    """Print every citation key, one per line, in source order."""
    fmt = infer_bibliography_format(bibliography, bib_format)
    try:
        found = list_keys(bibliography.read_text(encoding="utf-8"), fmt)
    except BibliographyError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    for key in found:
        typer.echo(key)

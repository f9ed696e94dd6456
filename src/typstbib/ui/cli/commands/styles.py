"""List the styles bundled with typstbib and citeproc-py."""

from __future__ import annotations

from typstbib.core.exceptions import BibliographyError
from typstbib.core.styles import available_styles, resolve_style

from ..state import emit_warning, get_cli_state


def styles() -> None:
    """Print the names accepted by --style without a CSL file."""
    from rich.table import Table

    table = Table(title="Bundled styles")
    table.add_column("Name", style="bold green", no_wrap=True)
    table.add_column("Title")
    table.add_column("Default locale", no_wrap=True)
    for name in available_styles():
        try:
            definition = resolve_style(name, "text")
        except BibliographyError as exc:
            emit_warning(f"Skipping bundled style '{name}': {exc}")
            continue
        table.add_row(name, definition.title or "", definition.default_locale or "")
    get_cli_state().console.print(table)

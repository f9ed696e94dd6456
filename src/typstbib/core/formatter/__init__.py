"""Output writers handed to the citation engine."""

from __future__ import annotations

from types import ModuleType

from citeproc.formatter import plain

from . import typst


WRITERS: dict[str, ModuleType] = {
    "plain": plain,
    "typst": typst,
}


def get_writer(name: str) -> ModuleType:
    """Return the citeproc formatter module registered under ``name``."""
    try:
        return WRITERS[name]
    except KeyError as exc:
        raise ValueError(f"Unknown output writer '{name}'.") from exc


__all__ = ["WRITERS", "get_writer", "plain", "typst"]

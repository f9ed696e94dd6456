"""Helpers shared by CLI commands."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError
import typer
import yaml

from typstbib.core.config import RenderConfig
from typstbib.core.references import BIBLIOGRAPHY_FORMATS
from typstbib.core.styles import STYLE_FORMATS

from .state import emit_error


_SUFFIX_FORMATS = {
    ".bib": "bibtex",
    ".bibtex": "bibtex",
    ".yaml": "yaml",
    ".yml": "yaml",
}


def infer_bibliography_format(path: Path, explicit: str | None) -> str:
    """Return the explicit format, or the one implied by the file suffix."""
    if explicit:
        if explicit not in BIBLIOGRAPHY_FORMATS:
            emit_error(
                f"Unsupported bibliography format '{explicit}'; "
                f"expected one of: {', '.join(BIBLIOGRAPHY_FORMATS)}."
            )
            raise typer.Exit(code=1)
        return explicit
    inferred = _SUFFIX_FORMATS.get(path.suffix.lower())
    if inferred is None:
        emit_error(
            f"Cannot infer the bibliography format of '{path.name}'; pass --format yaml|bibtex."
        )
        raise typer.Exit(code=1)
    return inferred


def resolve_style_argument(style: str, style_format: str | None) -> tuple[str, str]:
    """Return (style source, style format), reading CSL files from disk."""
    if style_format is not None and style_format not in STYLE_FORMATS:
        emit_error(
            f"Unsupported style format '{style_format}'; "
            f"expected one of: {', '.join(STYLE_FORMATS)}."
        )
        raise typer.Exit(code=1)
    if style_format == "text":
        return style, "text"
    if os.path.isfile(style):
        return Path(style).read_text(encoding="utf-8"), "csl"
    if style_format == "csl":
        return style, "csl"
    return style, "text"


def load_render_config(path: Path | None, **overrides: Any) -> RenderConfig:
    """Build the render configuration from an optional YAML file and CLI overrides."""
    payload: dict[str, Any] = {}
    if path is not None:
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            emit_error(f"Failed to parse configuration file '{path}'.", exception=exc)
            raise typer.Exit(code=1) from exc
        if data is not None and not isinstance(data, dict):
            emit_error(f"Configuration file '{path}' must contain a mapping.")
            raise typer.Exit(code=1)
        payload.update(data or {})
    payload.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return RenderConfig.from_mapping(payload)
    except ValidationError as exc:
        emit_error("Invalid render configuration.", exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["infer_bibliography_format", "load_render_config", "resolve_style_argument"]

"""CLI command implementations."""

from __future__ import annotations

from .keys import keys
from .render import render
from .styles import styles


__all__ = ["keys", "render", "styles"]

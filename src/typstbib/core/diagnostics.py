"""Warnings and progress events raised while rendering a bibliography.

The pipeline never prints. It reports through a `DiagnosticEmitter`, and the
caller picks where reports go: nowhere (`NullEmitter`), the `logging` module
(`LoggingEmitter`), memory (`CollectingEmitter`), or the terminal (the CLI's
`CliEmitter`).

Events emitted by the pipeline, in order:

`bibliography_loaded`
: `format`, `count`

`style_resolved`
: `style`, `source`

`locale_resolved`
: `requested`, `resolved`

`sort_mode`
: `mode`

`bibliography_rendered`
: `count`, `mode`
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
import logging
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@runtime_checkable
class DiagnosticEmitter(Protocol):
    """Sink for non-fatal problems and structured progress events."""

    def warning(self, message: str) -> None: ...

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


class NullEmitter:
    """Discard every diagnostic."""

    def warning(self, message: str) -> None:
        return

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        return


class LoggingEmitter:
    """Forward warnings and summarised events to a logger."""

    def __init__(self, logger_obj: logging.Logger | None = None) -> None:
        self._logger = logger_obj or logger

    def warning(self, message: str) -> None:
        self._logger.warning(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message:
            self._logger.info(message)
        else:
            self._logger.debug("event %s: %s", name, dict(payload))


@dataclass(slots=True)
class CollectingEmitter:
    """Keep diagnostics in memory so callers can inspect them afterwards."""

    warnings: list[str] = field(default_factory=list)
    events: list[tuple[str, dict[str, Any]]] = field(default_factory=list)

    def warning(self, message: str) -> None:
        self.warnings.append(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        self.events.append((name, dict(payload)))

    def payloads(self, name: str) -> list[dict[str, Any]]:
        """Return the payloads recorded for ``name`` in emission order."""
        return [payload for event, payload in self.events if event == name]


def _plural(count: int, singular: str, plural: str) -> str:
    return singular if count == 1 else plural


def _loaded(data: Mapping[str, Any]) -> str:
    count = data.get("count", 0)
    fmt = data.get("format") or "<unknown>"
    return f"Loaded {count} {_plural(count, 'entry', 'entries')} from {fmt} bibliography"


def _style(data: Mapping[str, Any]) -> str:
    style = data.get("style") or "<inline>"
    source = data.get("source")
    return f"Using citation style {style} ({source})" if source else f"Using citation style {style}"


def _locale(data: Mapping[str, Any]) -> str | None:
    requested = data.get("requested") or "<empty>"
    resolved = data.get("resolved") or "<unknown>"
    if requested == resolved:
        return None
    return f"Locale {requested} resolved to {resolved}"


def _rendered(data: Mapping[str, Any]) -> str:
    count = data.get("count", 0)
    mode = data.get("mode") or "engine"
    return f"Rendered {count} bibliography {_plural(count, 'item', 'items')} ({mode} order)"


EVENT_FORMATTERS: dict[str, Callable[[Mapping[str, Any]], str | None]] = {
    "bibliography_loaded": _loaded,
    "style_resolved": _style,
    "locale_resolved": _locale,
    "bibliography_rendered": _rendered,
}


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Return a one-line summary of an event, or None when it has none."""
    formatter = EVENT_FORMATTERS.get(name)
    if formatter is None:
        return None
    return formatter(payload)


__all__ = [
    "EVENT_FORMATTERS",
    "CollectingEmitter",
    "DiagnosticEmitter",
    "LoggingEmitter",
    "NullEmitter",
    "format_event_message",
]

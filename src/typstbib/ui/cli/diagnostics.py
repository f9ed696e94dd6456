"""Terminal rendering of pipeline diagnostics."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from typstbib.core.diagnostics import format_event_message

from .state import CLIState, emit_info, emit_warning, get_cli_state


class CliEmitter:
    """Print warnings to stderr and, with ``-v``, a summary line per event."""

    def __init__(self, state: CLIState | None = None) -> None:
        self._state = state or get_cli_state()
        self.warning_count = 0
        self.events: dict[str, list[dict[str, Any]]] = {}

    def warning(self, message: str) -> None:
        self.warning_count += 1
        emit_warning(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        data = dict(payload)
        self.events.setdefault(name, []).append(data)
        if self._state.verbosity < 1:
            return
        message = format_event_message(name, data)
        if message:
            emit_info(message)


__all__ = ["CliEmitter"]

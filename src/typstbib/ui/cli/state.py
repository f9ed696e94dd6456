"""Per-invocation CLI state: verbosity, consoles, and message rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import sys
from typing import TYPE_CHECKING

import click
import typer


if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "CLIState",
    "configure_logging",
    "debug_enabled",
    "emit_error",
    "emit_info",
    "emit_warning",
    "get_cli_state",
    "set_cli_state",
]


@dataclass(slots=True)
class CLIState:
    """Options shared by every command of one CLI invocation."""

    verbosity: int = 0
    show_tracebacks: bool = False
    _console: Console | None = field(default=None, init=False, repr=False)
    _err_console: Console | None = field(default=None, init=False, repr=False)

    @property
    def console(self) -> Console:
        """Console bound to the current ``sys.stdout``."""
        from rich.console import Console

        if self._console is None or self._console.file is not sys.stdout:
            self._console = Console(file=sys.stdout)
        return self._console

    @property
    def err_console(self) -> Console:
        """Console bound to the current ``sys.stderr``; output redirection swaps it."""
        from rich.console import Console

        if self._err_console is None or self._err_console.file is not sys.stderr:
            self._err_console = Console(file=sys.stderr, highlight=False)
        return self._err_console


# Used outside of a click context, e.g. when helpers are called from tests.
_DETACHED_STATE = CLIState()


def get_cli_state(ctx: typer.Context | click.Context | None = None) -> CLIState:
    """Return the state stored on the root click context, creating it on first use."""
    if ctx is None:
        ctx = click.get_current_context(silent=True)
    if ctx is None:
        return _DETACHED_STATE
    root = ctx.find_root()
    if not isinstance(root.obj, CLIState):
        root.obj = CLIState()
    return root.obj


def set_cli_state(
    *,
    ctx: typer.Context | None = None,
    verbosity: int | None = None,
    debug: bool | None = None,
) -> CLIState:
    """Update the active state in place and return it."""
    state = get_cli_state(ctx)
    if verbosity is not None:
        state.verbosity = max(0, verbosity)
    if debug is not None:
        state.show_tracebacks = debug
    return state


def configure_logging(state: CLIState) -> None:
    """Send typstbib's debug log to stderr through Rich at ``-vv`` and above."""
    if state.verbosity < 2:
        return
    from rich.logging import RichHandler

    package_logger = logging.getLogger("typstbib")
    if not any(isinstance(handler, RichHandler) for handler in package_logger.handlers):
        package_logger.addHandler(RichHandler(console=state.err_console, show_path=False))
    package_logger.setLevel(logging.DEBUG)


def _causes(exc: BaseException) -> list[str]:
    lines: list[str] = []
    current = exc.__cause__
    while current is not None and len(lines) < 10:
        lines.append(f"  {type(current).__name__}: {current}")
        current = current.__cause__
    return lines


def _emit(level: str, colour: str, message: str, exception: BaseException | None) -> None:
    from rich.text import Text

    state = get_cli_state()
    text = Text.assemble((f"{level}: ", f"bold {colour}"), (message, colour))
    if exception is not None and state.verbosity >= 1:
        details = [f"type: {type(exception).__name__}"]
        causes = _causes(exception)
        if causes and state.verbosity >= 2:
            details.append("caused by:")
            details.extend(causes)
        text.append("\n" + "\n".join(details), style=colour)
    state.err_console.print(text)


def emit_info(message: str) -> None:
    """Print a timestamped progress line to stderr."""
    get_cli_state().err_console.log(message)


def emit_warning(message: str, *, exception: BaseException | None = None) -> None:
    _emit("warning", "yellow", message, exception)


def emit_error(message: str, *, exception: BaseException | None = None) -> None:
    _emit("error", "red", message, exception)


def debug_enabled() -> bool:
    """Return whether ``--debug`` asked for full tracebacks."""
    return get_cli_state().show_tracebacks

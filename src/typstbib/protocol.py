"""Byte-buffer calling convention for plugin hosts.

Hosts such as a WebAssembly plugin runtime cannot share memory or rich types
with us: every parameter arrives as a byte buffer and a single byte buffer
goes back, either as the result or as an error message. `initiate_protocol`
is the one-time handshake that installs the render configuration and makes
the exported functions callable through `invoke`.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import logging
from typing import TypeVar

from typstbib.core.config import DEFAULT_CONFIG, RenderConfig
from typstbib.core.diagnostics import LoggingEmitter
from typstbib.core.exceptions import BibliographyError, InvalidInputEncodingError, ProtocolError
from typstbib.core.pipeline import render_bibliography, split_cited
from typstbib.core.references import list_keys


logger = logging.getLogger(__name__)

ExportedFunction = Callable[..., bytes]
F = TypeVar("F", bound=ExportedFunction)

_EXPORTS: dict[str, ExportedFunction] = {}


@dataclass(slots=True)
class _ProtocolState:
    initialised: bool = False
    config: RenderConfig = DEFAULT_CONFIG


_STATE = _ProtocolState()


@dataclass(frozen=True, slots=True)
class HostResult:
    """Outcome of a host call: the payload is the result or the error message."""

    ok: bool
    payload: bytes

    @property
    def message(self) -> str | None:
        return None if self.ok else self.payload.decode("utf-8")


def export(func: F) -> F:
    """Register ``func`` as callable by the host under its own name."""
    _EXPORTS[func.__name__] = func
    return func


def initiate_protocol(config: RenderConfig | None = None) -> None:
    """Perform the process-wide handshake; repeated calls only swap the configuration."""
    if config is not None:
        _STATE.config = config
    if _STATE.initialised:
        return
    _STATE.initialised = True
    logger.debug("Host protocol initialised with exports: %s", ", ".join(sorted(_EXPORTS)))


def reset_protocol() -> None:
    """Forget the handshake and restore the default configuration."""
    _STATE.initialised = False
    _STATE.config = DEFAULT_CONFIG


def protocol_config() -> RenderConfig:
    return _STATE.config


def exported_functions() -> list[str]:
    return sorted(_EXPORTS)


def invoke(name: str, *buffers: bytes) -> HostResult:
    """Call an exported function, routing pipeline errors through the failure channel."""
    if not _STATE.initialised:
        raise ProtocolError("initiate_protocol() must be called before invoking exports.")
    func = _EXPORTS.get(name)
    if func is None:
        raise ProtocolError(f"Unknown exported function '{name}'.")
    try:
        payload = func(*buffers)
    except BibliographyError as exc:
        logger.debug("Export %s failed: %s", name, exc)
        return HostResult(ok=False, payload=str(exc).encode("utf-8"))
    return HostResult(ok=True, payload=payload)


def _decode(buffer: bytes, parameter: str) -> str:
    try:
        return bytes(buffer).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidInputEncodingError(parameter, exc) from exc


@export
def get_bib_keys(bib: bytes, format: bytes) -> bytes:
    """Return every key of the bibliography joined with the field separator."""
    keys = list_keys(_decode(bib, "bib"), _decode(format, "format"))
    return _STATE.config.separator.join(keys).encode("utf-8")


@export
def parcio_bib(
    bib: bytes,
    format: bytes,
    full: bytes,
    style: bytes,
    style_format: bytes,
    lang: bytes,
    cited: bytes,
) -> bytes:
    """Render a bibliography from host buffers into the delimited wire format.

    - `full` is `true` to render every entry; any other value renders only
      the `cited` keys.
    - `style` is raw CSL markup when `style_format` is `csl` and an archived
      style name when it is `text`.
    - `cited` is a comma-separated list of keys in order of first citation.
    """
    config = _STATE.config
    is_full = bytes(full) == b"true"
    cited_keys = split_cited(_decode(cited, "cited"), config.cited_separator)
    return render_bibliography(
        _decode(bib, "bib"),
        _decode(format, "format"),
        is_full,
        _decode(style, "style"),
        _decode(style_format, "style_format"),
        _decode(lang, "lang"),
        None if is_full else cited_keys,
        config=config,
        emitter=LoggingEmitter(logger),
    )


__all__ = [
    "HostResult",
    "export",
    "exported_functions",
    "get_bib_keys",
    "initiate_protocol",
    "invoke",
    "parcio_bib",
    "protocol_config",
    "reset_protocol",
]

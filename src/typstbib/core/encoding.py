"""Serialise rendered bibliographies into the delimited host buffer.

Two per-item layouts are supported. `flat` emits the key, the prefix (or the
absence marker), and the content as three consecutive fields; `structured`
emits one JSON object per item. Both append the hanging-indent and manual-sort
flags as the final two fields.
"""

from __future__ import annotations

from collections.abc import Callable
import json

from .config import DEFAULT_CONFIG, RenderConfig
from .driver import RenderedBibliography, RenderedItem
from .exceptions import RenderFailureError


ItemEncoder = Callable[[RenderedItem, RenderConfig], list[str]]


def _flat_fields(item: RenderedItem, config: RenderConfig) -> list[str]:
    prefix = item.prefix if item.prefix is not None else config.absence_marker
    return [item.key, prefix, item.content]


def _structured_fields(item: RenderedItem, config: RenderConfig) -> list[str]:
    payload = {"key": item.key, "prefix": item.prefix, "content": item.content}
    return [json.dumps(payload, ensure_ascii=False)]


ENCODERS: dict[str, ItemEncoder] = {
    "flat": _flat_fields,
    "structured": _structured_fields,
}


def _flag(value: bool) -> str:
    return "true" if value else "false"


def encode_fields(
    rendered: RenderedBibliography, config: RenderConfig = DEFAULT_CONFIG
) -> list[str]:
    """Return every output field in order, trailing flags included."""
    encoder = ENCODERS[config.encoding]
    fields: list[str] = []
    for item in rendered.items:
        fields.extend(encoder(item, config))
    fields.append(_flag(rendered.hanging_indent))
    fields.append(_flag(rendered.manual_sort))
    return fields


def encode_bibliography(
    rendered: RenderedBibliography, config: RenderConfig = DEFAULT_CONFIG
) -> bytes:
    """Join the output fields with the configured separator as UTF-8 bytes."""
    try:
        return config.separator.join(encode_fields(rendered, config)).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise RenderFailureError(f"Failed to encode rendered bibliography: {exc}") from exc


__all__ = ["ENCODERS", "encode_bibliography", "encode_fields"]

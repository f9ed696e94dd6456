"""Configuration model for the bibliography renderer.

RenderConfig

`encoding` (`"flat" | "structured"`)
: Wire layout of each bibliography item. `flat` emits three separated fields
  per item (key, prefix or absence marker, content); `structured` emits one
  JSON object per item.

`separator` (`str`)
: Delimiter placed between every field of the output buffer. Defaults to
  `%%%`, which the Typst side splits on.

`absence_marker` (`str`)
: Literal emitted in place of a missing prefix when `encoding` is `flat`.

`prefix_format` (`"plain" | "typst"`)
: Writer used for the leading label of each item. `plain` yields raw text,
  `typst` keeps inline formatting as Typst markup.

`cited_separator` (`str`)
: Delimiter used to split the `cited` parameter received from the host.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RenderConfig(BaseModel):
    """Settings controlling how rendered bibliographies are encoded."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    encoding: Literal["flat", "structured"] = Field(
        default="flat", description="Per-item wire layout"
    )
    separator: str = Field(default="%%%", description="Field delimiter")
    absence_marker: str = Field(default="none", description="Missing prefix placeholder")
    prefix_format: Literal["plain", "typst"] = Field(
        default="plain", description="Writer used for prefixes"
    )
    cited_separator: str = Field(default=",", description="Delimiter of cited keys")

    @field_validator("separator", "cited_separator")
    @classmethod
    def _require_delimiter(cls, value: str) -> str:
        if not value:
            raise ValueError("delimiters must not be empty")
        return value

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> RenderConfig:
        """Validate a plain mapping (for example parsed YAML) into a configuration."""
        if payload is None:
            return cls()
        return cls.model_validate(dict(payload))


DEFAULT_CONFIG = RenderConfig()


__all__ = ["DEFAULT_CONFIG", "RenderConfig"]

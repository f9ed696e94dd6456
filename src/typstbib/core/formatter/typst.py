"""Citeproc formatter emitting Typst markup.

citeproc-py formatters are plain modules: `preformat` escapes raw text and
each font style is a `str` subclass whose constructor wraps already formatted
text. Everything here follows that contract so the module can be handed to
`CitationStylesBibliography` like `citeproc.formatter.html`.
"""

from __future__ import annotations

import re


_SPECIAL_RE = re.compile(r"([\\#*_$`<>@\[\]~])")


def preformat(text: object) -> str:
    """Escape characters that carry meaning in Typst markup mode."""
    return _SPECIAL_RE.sub(r"\\\1", str(text))


class FunctionWrapper(str):
    """Wrap text in a Typst content function call such as ``#emph[...]``."""

    function: str = ""

    @classmethod
    def _wrap(cls, text: str) -> str:
        return f"#{cls.function}[{text}]"

    def __new__(cls, text: object) -> FunctionWrapper:
        return super().__new__(cls, cls._wrap(str(text)))


class Italic(FunctionWrapper):
    function = "emph"


class Oblique(Italic):
    pass


class Bold(FunctionWrapper):
    function = "strong"


class Light(FunctionWrapper):
    function = 'text(weight: "light")'


class Underline(FunctionWrapper):
    function = "underline"


class Superscript(FunctionWrapper):
    function = "super"


class Subscript(FunctionWrapper):
    function = "sub"


class SmallCaps(FunctionWrapper):
    function = "smallcaps"


__all__ = [
    "Bold",
    "FunctionWrapper",
    "Italic",
    "Light",
    "Oblique",
    "SmallCaps",
    "Subscript",
    "Superscript",
    "Underline",
    "preformat",
]

"""Custom exception hierarchy for the bibliography rendering pipeline."""

from __future__ import annotations


class BibliographyError(RuntimeError):
    """Base exception for bibliography rendering failures."""


class InvalidFormatError(BibliographyError):
    """Raised when the bibliography format tag is not recognised."""

    def __init__(self, format_name: str) -> None:
        super().__init__(
            f"Invalid bibliography file format '{format_name}'. Expected 'yaml' or 'bibtex'."
        )
        self.format_name = format_name


class MalformedBibliographyError(BibliographyError):
    """Raised when bibliography data cannot be parsed."""


class StyleNotFoundError(BibliographyError):
    """Raised when an archived style name cannot be resolved."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown citation style '{name}'.")
        self.name = name


class UnsupportedStyleKindError(BibliographyError):
    """Raised when a dependent style is supplied where an independent one is required."""


class MalformedStyleError(BibliographyError):
    """Raised when inline CSL markup cannot be parsed."""


class InvalidStyleFormatError(BibliographyError):
    """Raised when the style source kind is neither ``csl`` nor ``text``."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"Invalid style format '{kind}'. Expected 'csl' or 'text'.")
        self.kind = kind


class UnknownCitationKeyError(BibliographyError):
    """Raised when a cited key is missing from the loaded bibliography."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Cannot find '{key}' in bibliography file.")
        self.key = key


class MissingCitationsError(BibliographyError):
    """Raised when order-of-appearance rendering receives no cited keys."""


class NoBibliographySectionError(BibliographyError):
    """Raised when the style declares no bibliography rendering rules."""


class RenderFailureError(BibliographyError):
    """Raised when the citation engine or the encoder fails to produce output."""


class InvalidInputEncodingError(BibliographyError):
    """Raised when a host buffer is not valid UTF-8 text."""

    def __init__(self, parameter: str, exc: UnicodeDecodeError) -> None:
        super().__init__(f"Parameter '{parameter}' is not valid UTF-8: {exc.reason}.")
        self.parameter = parameter


class ProtocolError(RuntimeError):
    """Raised when the host protocol is used before initialisation or incorrectly."""


__all__ = [
    "BibliographyError",
    "InvalidFormatError",
    "InvalidInputEncodingError",
    "InvalidStyleFormatError",
    "MalformedBibliographyError",
    "MalformedStyleError",
    "MissingCitationsError",
    "NoBibliographySectionError",
    "ProtocolError",
    "RenderFailureError",
    "StyleNotFoundError",
    "UnknownCitationKeyError",
    "UnsupportedStyleKindError",
]

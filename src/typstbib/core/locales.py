"""Locale resolution against the CSL locale files bundled with citeproc-py."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from importlib.resources.abc import Traversable
import json
import logging


logger = logging.getLogger(__name__)

FALLBACK_LOCALE = "en-US"

# Used when citeproc-py does not ship locales.json alongside its locale files.
_PRIMARY_DIALECTS: dict[str, str] = {
    "af": "af-ZA",
    "ar": "ar",
    "bg": "bg-BG",
    "ca": "ca-AD",
    "cs": "cs-CZ",
    "da": "da-DK",
    "de": "de-DE",
    "el": "el-GR",
    "en": "en-US",
    "es": "es-ES",
    "et": "et-EE",
    "fa": "fa-IR",
    "fi": "fi-FI",
    "fr": "fr-FR",
    "he": "he-IL",
    "hr": "hr-HR",
    "hu": "hu-HU",
    "it": "it-IT",
    "ja": "ja-JP",
    "ko": "ko-KR",
    "lt": "lt-LT",
    "nb": "nb-NO",
    "nl": "nl-NL",
    "nn": "nn-NO",
    "pl": "pl-PL",
    "pt": "pt-PT",
    "ro": "ro-RO",
    "ru": "ru-RU",
    "sk": "sk-SK",
    "sl": "sl-SI",
    "sr": "sr-RS",
    "sv": "sv-SE",
    "th": "th-TH",
    "tr": "tr-TR",
    "uk": "uk-UA",
    "vi": "vi-VN",
    "zh": "zh-CN",
}


class LocaleCode(str):
    """An IETF language tag as supplied by the caller."""

    __slots__ = ()


@dataclass(frozen=True, slots=True)
class LocaleSelection:
    """The requested locale and the bundled locale file that serves it."""

    code: LocaleCode
    resolved: str

    @property
    def is_fallback(self) -> bool:
        """True when a non-empty tag had to be served by another locale."""
        requested = normalise_tag(self.code)
        return bool(requested) and requested != self.resolved


def normalise_tag(tag: str) -> str:
    """Return ``ll-RR`` casing for a language tag, accepting ``_`` separators."""
    parts = [part for part in tag.strip().replace("_", "-").split("-") if part]
    if not parts:
        return ""
    language = parts[0].lower()
    rest = [part.upper() if len(part) == 2 else part.title() for part in parts[1:]]
    return "-".join([language, *rest])


def resolve_locale(tag: str) -> LocaleSelection:
    """Resolve a language tag to a bundled locale; always succeeds."""
    code = LocaleCode(tag)
    available = _available_locales()
    normalised = normalise_tag(tag)

    candidates: list[str] = []
    if normalised:
        candidates.append(normalised)
        language = normalised.split("-", 1)[0]
        dialect = _primary_dialects().get(language)
        if dialect:
            candidates.append(dialect)
    candidates.append(FALLBACK_LOCALE)

    for candidate in candidates:
        if candidate in available:
            selection = LocaleSelection(code=code, resolved=candidate)
            break
    else:
        selection = LocaleSelection(code=code, resolved=FALLBACK_LOCALE)

    logger.debug("Locale %r resolved to %s", tag, selection.resolved)
    return selection


def _locales_root() -> Traversable:
    return resources.files("citeproc") / "data" / "locales"


@lru_cache(maxsize=1)
def _available_locales() -> frozenset[str]:
    root = _locales_root()
    if not root.is_dir():
        return frozenset({FALLBACK_LOCALE})
    names = set()
    for path in root.iterdir():
        name = path.name
        if name.startswith("locales-") and name.endswith(".xml"):
            names.add(name[len("locales-") : -len(".xml")])
    return frozenset(names)


@lru_cache(maxsize=1)
def _primary_dialects() -> dict[str, str]:
    manifest = _locales_root() / "locales.json"
    if manifest.is_file():
        data = json.loads(manifest.read_text(encoding="utf-8"))
        dialects = data.get("primary-dialects")
        if isinstance(dialects, dict):
            return {**_PRIMARY_DIALECTS, **dialects}
    return dict(_PRIMARY_DIALECTS)


__all__ = ["FALLBACK_LOCALE", "LocaleCode", "LocaleSelection", "normalise_tag", "resolve_locale"]

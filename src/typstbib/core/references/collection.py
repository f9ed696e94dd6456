"""Keyed storage for parsed bibliography entries."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
import copy
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from ..exceptions import MalformedBibliographyError


@dataclass(frozen=True, slots=True)
class BibliographyEntry:
    """A single reference expressed with CSL-JSON variables."""

    key: str
    entry_type: str
    fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def to_csl(self) -> dict[str, Any]:
        """Return a fresh CSL-JSON mapping suitable for the citation engine."""
        payload: dict[str, Any] = {"id": self.key, "type": self.entry_type}
        payload.update(copy.deepcopy(dict(self.fields)))
        return payload


class ReferenceCollection:
    """Ordered, key-addressable collection of bibliography entries."""

    def __init__(self, entries: Iterable[BibliographyEntry] = ()) -> None:
        self._entries: dict[str, BibliographyEntry] = {}
        for entry in entries:
            self.add(entry)

    def add(self, entry: BibliographyEntry) -> None:
        """Insert an entry, rejecting duplicate keys."""
        if entry.key in self._entries:
            raise MalformedBibliographyError(
                f"Duplicate bibliography key '{entry.key}'."
            )
        self._entries[entry.key] = entry

    def get(self, key: str) -> BibliographyEntry | None:
        return self._entries.get(key)

    def find(self, key: str) -> dict[str, Any] | None:
        """Return the CSL-JSON payload for a key, or None when absent."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        return entry.to_csl()

    def keys(self) -> list[str]:
        return list(self._entries)

    def to_csl_json(self) -> list[dict[str, Any]]:
        return [entry.to_csl() for entry in self._entries.values()]

    def __getitem__(self, key: str) -> BibliographyEntry:
        return self._entries[key]

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[BibliographyEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ReferenceCollection({len(self)} entries)"


__all__ = ["BibliographyEntry", "ReferenceCollection"]

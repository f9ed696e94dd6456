"""Decide who orders the bibliography: the caller or the citation engine."""

from __future__ import annotations

from enum import Enum

from .styles import StyleDefinition


class SortMode(Enum):
    """Ordering strategy for submitted citations."""

    MANUAL = "manual"
    ENGINE_SORT = "engine"

    @property
    def is_manual(self) -> bool:
        return self is SortMode.MANUAL


def decide_sort_mode(style: StyleDefinition, full_requested: bool) -> SortMode:
    """Return MANUAL when the caller's citation order must be preserved.

    CSL engines only sort when the style declares ``<sort>``. Without one, the
    bibliography follows order of first citation, which only the document
    knows, so the cited keys are submitted one by one in that order. Full
    bibliographies have no citation order and always defer to the engine.
    """
    section = style.bibliography
    if section is not None and not section.sorted and not full_requested:
        return SortMode.MANUAL
    return SortMode.ENGINE_SORT


__all__ = ["SortMode", "decide_sort_mode"]

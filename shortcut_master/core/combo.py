from __future__ import annotations

import logging
from enum import Enum
from typing import AbstractSet, Iterable

from shortcut_master.core.keys import KeyInput, normalize_key

logger = logging.getLogger(__name__)


class ComboVerdict(Enum):
    NO_MATCH = "no_match"
    PARTIAL = "partial"
    MATCH = "match"
    OVER_PRESS = "over_press"

    @property
    def is_mistake(self) -> bool:
        return self is ComboVerdict.OVER_PRESS


def classify_combo(
    held: AbstractSet[str],
    target: AbstractSet[str],
    added_modifier: bool,
) -> ComboVerdict:
    """Judge a held key set against a target combo.

    ``added_modifier`` tells whether the key that produced ``held`` is a
    modifier. A wrong set only counts as an over-press once a non-modifier key
    lands, so reaching for the modifiers in any order is never a mistake.
    """
    if len(held) == len(target):
        if all(k in held for k in target):
            return ComboVerdict.MATCH
        return ComboVerdict.NO_MATCH if added_modifier else ComboVerdict.OVER_PRESS
    if len(held) > len(target):
        return ComboVerdict.NO_MATCH if added_modifier else ComboVerdict.OVER_PRESS
    if all(k in target for k in held):
        return ComboVerdict.PARTIAL
    return ComboVerdict.NO_MATCH


class ComboMatcher:
    """Held-key bookkeeping for a single target combo."""

    def __init__(self, target: Iterable[str]) -> None:
        self._target = frozenset(normalize_key(k) for k in target)
        if not self._target:
            raise ValueError("target combo must contain at least one key")
        self._held: frozenset[str] = frozenset()

    @property
    def target(self) -> frozenset[str]:
        return self._target

    @property
    def held(self) -> frozenset[str]:
        return self._held

    def press(self, event: KeyInput) -> ComboVerdict:
        self._held = event.held_keys()
        verdict = classify_combo(self._held, self._target, event.is_modifier)
        logger.debug("held=%s target=%s -> %s", sorted(self._held), sorted(self._target), verdict.value)
        return verdict

    def release(self, event: KeyInput) -> None:
        """Clear the attempt once every modifier has been let go."""
        if not event.has_modifier:
            self._held = frozenset()

    def reset(self) -> None:
        self._held = frozenset()

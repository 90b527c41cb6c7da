"""Canonical key names and the normalized key event handed to the engine."""

from __future__ import annotations

import re
from dataclasses import dataclass

MODIFIER_KEYS = frozenset({"control", "meta", "shift", "alt"})

# Physical left/right variants and common aliases -> canonical name.
_ALIASES = {
    "ctrl": "control",
    "control_l": "control",
    "control_r": "control",
    "controlleft": "control",
    "controlright": "control",
    "cmd": "meta",
    "command": "meta",
    "super": "meta",
    "super_l": "meta",
    "super_r": "meta",
    "win": "meta",
    "os": "meta",
    "metaleft": "meta",
    "metaright": "meta",
    "meta_l": "meta",
    "meta_r": "meta",
    "shift_l": "shift",
    "shift_r": "shift",
    "shiftleft": "shift",
    "shiftright": "shift",
    "option": "alt",
    "opt": "alt",
    "alt_l": "alt",
    "alt_r": "alt",
    "altleft": "alt",
    "altright": "alt",
    "altgr": "alt",
    "return": "enter",
    "esc": "escape",
    "del": "delete",
    "left": "arrowleft",
    "right": "arrowright",
    "up": "arrowup",
    "down": "arrowdown",
    "pgup": "pageup",
    "pgdn": "pagedown",
}

_FUNCTION_KEY = re.compile(r"^f([1-9]|1[0-9]|2[0-4])$")


def normalize_key(name: str) -> str:
    """Return the canonical lower-case identifier for a key name."""
    if name == " ":
        return "space"
    key = name.strip().lower()
    if not key:
        raise ValueError("empty key name")
    return _ALIASES.get(key, key)


def is_function_key(key: str) -> bool:
    return bool(_FUNCTION_KEY.match(key))


@dataclass(frozen=True)
class KeyInput:
    """One platform-normalized key-down or key-up event.

    ``key`` is the key that changed state; the flags describe which modifiers
    are held after the change.
    """

    key: str
    ctrl: bool = False
    meta: bool = False
    shift: bool = False
    alt: bool = False

    @classmethod
    def of(cls, key: str, *modifiers: str) -> "KeyInput":
        """Build an event from a key and the names of held modifiers."""
        held = {normalize_key(m) for m in modifiers}
        unknown = held - MODIFIER_KEYS
        if unknown:
            raise ValueError(f"not modifier keys: {sorted(unknown)}")
        return cls(
            key=normalize_key(key),
            ctrl="control" in held,
            meta="meta" in held,
            shift="shift" in held,
            alt="alt" in held,
        )

    @property
    def is_modifier(self) -> bool:
        return self.key in MODIFIER_KEYS

    @property
    def has_modifier(self) -> bool:
        """True while any modifier flag is set."""
        return self.ctrl or self.meta or self.shift or self.alt

    @property
    def suppresses_default(self) -> bool:
        """Whether the host's default action for this key-down belongs to the trainer."""
        return self.ctrl or self.meta or self.alt or is_function_key(self.key)

    def modifiers(self) -> frozenset[str]:
        held = set()
        if self.ctrl:
            held.add("control")
        if self.meta:
            held.add("meta")
        if self.shift:
            held.add("shift")
        if self.alt:
            held.add("alt")
        return frozenset(held)

    def held_keys(self) -> frozenset[str]:
        """Keys held once this key-down lands: the flagged modifiers plus the key."""
        return self.modifiers() | {self.key}

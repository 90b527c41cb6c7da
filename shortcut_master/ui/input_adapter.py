"""Translate Qt key events into the engine's normalized ``KeyInput``."""

from __future__ import annotations

import sys
from typing import Optional

from PySide6.QtCore import QEvent, Qt
from PySide6.QtGui import QKeyEvent

from shortcut_master.core.keys import KeyInput
from shortcut_master.core.settings import OperatingSystem

_SPECIAL_KEYS = {
    Qt.Key.Key_Control.value: "control",
    Qt.Key.Key_Meta.value: "meta",
    Qt.Key.Key_Shift.value: "shift",
    Qt.Key.Key_Alt.value: "alt",
    Qt.Key.Key_AltGr.value: "alt",
    Qt.Key.Key_Space.value: "space",
    Qt.Key.Key_Tab.value: "tab",
    Qt.Key.Key_Backtab.value: "tab",
    Qt.Key.Key_Return.value: "enter",
    Qt.Key.Key_Enter.value: "enter",
    Qt.Key.Key_Escape.value: "escape",
    Qt.Key.Key_Backspace.value: "backspace",
    Qt.Key.Key_Delete.value: "delete",
    Qt.Key.Key_Insert.value: "insert",
    Qt.Key.Key_Home.value: "home",
    Qt.Key.Key_End.value: "end",
    Qt.Key.Key_PageUp.value: "pageup",
    Qt.Key.Key_PageDown.value: "pagedown",
    Qt.Key.Key_Left.value: "arrowleft",
    Qt.Key.Key_Right.value: "arrowright",
    Qt.Key.Key_Up.value: "arrowup",
    Qt.Key.Key_Down.value: "arrowdown",
}

_F1 = Qt.Key.Key_F1.value
_F24 = Qt.Key.Key_F24.value


def detect_os() -> OperatingSystem:
    """Default OS variant for the home screen."""
    return OperatingSystem.MAC if sys.platform == "darwin" else OperatingSystem.WINDOWS


def key_name(key: int) -> Optional[str]:
    """Canonical name for a ``Qt.Key`` code, or None for keys the trainer ignores."""
    key = int(key)
    if key in _SPECIAL_KEYS:
        return _SPECIAL_KEYS[key]
    if _F1 <= key <= _F24:
        return f"f{key - _F1 + 1}"
    if 0x21 <= key <= 0x7E:
        return chr(key).lower()
    return None


def key_input_from_event(event: QKeyEvent, swap_control_meta: Optional[bool] = None) -> Optional[KeyInput]:
    """Build a ``KeyInput`` from a key press or release.

    Qt on macOS reports Command as Control; *swap_control_meta* (default: on
    macOS) restores the physical meaning. The changed modifier is forced on for
    a press and off for a release since platforms disagree on whether
    ``modifiers()`` already reflects it.
    """
    name = key_name(event.key())
    if name is None:
        return None
    if swap_control_meta is None:
        swap_control_meta = sys.platform == "darwin"

    mods = event.modifiers()
    flags = {
        "control": bool(mods & Qt.KeyboardModifier.ControlModifier),
        "meta": bool(mods & Qt.KeyboardModifier.MetaModifier),
        "shift": bool(mods & Qt.KeyboardModifier.ShiftModifier),
        "alt": bool(mods & Qt.KeyboardModifier.AltModifier),
    }
    if swap_control_meta:
        flags["control"], flags["meta"] = flags["meta"], flags["control"]
        if name in ("control", "meta"):
            name = "meta" if name == "control" else "control"
    if name in flags:
        flags[name] = event.type() == QEvent.Type.KeyPress

    return KeyInput(
        key=name,
        ctrl=flags["control"],
        meta=flags["meta"],
        shift=flags["shift"],
        alt=flags["alt"],
    )

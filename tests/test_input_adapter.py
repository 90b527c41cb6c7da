"""Tests for shortcut_master.ui.input_adapter – Qt key events to KeyInput."""

from __future__ import annotations

import pytest
from PySide6.QtCore import QEvent, Qt
from PySide6.QtGui import QKeyEvent

from shortcut_master.core.settings import OperatingSystem
from shortcut_master.ui.input_adapter import detect_os, key_input_from_event, key_name

NO_MODS = Qt.KeyboardModifier.NoModifier
CTRL = Qt.KeyboardModifier.ControlModifier
META = Qt.KeyboardModifier.MetaModifier
SHIFT = Qt.KeyboardModifier.ShiftModifier


def press(key: Qt.Key, modifiers=NO_MODS) -> QKeyEvent:
    return QKeyEvent(QEvent.Type.KeyPress, key, modifiers)


def release(key: Qt.Key, modifiers=NO_MODS) -> QKeyEvent:
    return QKeyEvent(QEvent.Type.KeyRelease, key, modifiers)


# ===========================================================================
# key_name
# ===========================================================================

class TestKeyName:
    @pytest.mark.parametrize(
        "key, expected",
        [
            (Qt.Key.Key_Control, "control"),
            (Qt.Key.Key_Meta, "meta"),
            (Qt.Key.Key_AltGr, "alt"),
            (Qt.Key.Key_Space, "space"),
            (Qt.Key.Key_Return, "enter"),
            (Qt.Key.Key_Enter, "enter"),
            (Qt.Key.Key_Backtab, "tab"),
            (Qt.Key.Key_Left, "arrowleft"),
        ],
    )
    def test_special_keys(self, key, expected):
        assert key_name(key.value) == expected

    def test_function_keys(self):
        assert key_name(Qt.Key.Key_F1.value) == "f1"
        assert key_name(Qt.Key.Key_F12.value) == "f12"
        assert key_name(Qt.Key.Key_F24.value) == "f24"

    def test_letters_lower_cased(self):
        assert key_name(Qt.Key.Key_A.value) == "a"
        assert key_name(Qt.Key.Key_Z.value) == "z"

    def test_printable_symbols(self):
        assert key_name(Qt.Key.Key_1.value) == "1"
        assert key_name(Qt.Key.Key_Slash.value) == "/"

    def test_unknown_key(self):
        assert key_name(Qt.Key.Key_CapsLock.value) is None
        assert key_name(Qt.Key.Key_VolumeUp.value) is None


# ===========================================================================
# key_input_from_event
# ===========================================================================

class TestKeyInputFromEvent:
    def test_plain_letter(self):
        event = key_input_from_event(press(Qt.Key.Key_C), swap_control_meta=False)
        assert event.key == "c"
        assert not event.has_modifier

    def test_ctrl_combo(self):
        event = key_input_from_event(press(Qt.Key.Key_C, CTRL), swap_control_meta=False)
        assert event.key == "c"
        assert event.ctrl is True
        assert event.meta is False

    def test_modifier_press_forced_on(self):
        event = key_input_from_event(press(Qt.Key.Key_Control), swap_control_meta=False)
        assert event.key == "control"
        assert event.ctrl is True

    def test_modifier_release_forced_off(self):
        event = key_input_from_event(release(Qt.Key.Key_Control, CTRL), swap_control_meta=False)
        assert event.key == "control"
        assert event.ctrl is False

    def test_release_keeps_other_modifiers(self):
        event = key_input_from_event(release(Qt.Key.Key_Shift, CTRL | SHIFT), swap_control_meta=False)
        assert event.shift is False
        assert event.ctrl is True

    def test_backtab_is_shift_tab(self):
        event = key_input_from_event(press(Qt.Key.Key_Backtab, SHIFT), swap_control_meta=False)
        assert event.key == "tab"
        assert event.shift is True

    def test_unknown_key_dropped(self):
        assert key_input_from_event(press(Qt.Key.Key_CapsLock), swap_control_meta=False) is None


class TestControlMetaSwap:
    def test_control_flag_becomes_meta(self):
        event = key_input_from_event(press(Qt.Key.Key_C, CTRL), swap_control_meta=True)
        assert event.meta is True
        assert event.ctrl is False

    def test_meta_flag_becomes_control(self):
        event = key_input_from_event(press(Qt.Key.Key_C, META), swap_control_meta=True)
        assert event.ctrl is True
        assert event.meta is False

    def test_control_key_becomes_meta(self):
        event = key_input_from_event(press(Qt.Key.Key_Control), swap_control_meta=True)
        assert event.key == "meta"
        assert event.meta is True
        assert event.ctrl is False

    def test_swapped_release_forced_off(self):
        event = key_input_from_event(release(Qt.Key.Key_Control, CTRL), swap_control_meta=True)
        assert event.key == "meta"
        assert event.meta is False

    def test_default_follows_platform(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr("sys.platform", "darwin")
        event = key_input_from_event(press(Qt.Key.Key_C, CTRL))
        assert event.meta is True
        monkeypatch.setattr("sys.platform", "linux")
        event = key_input_from_event(press(Qt.Key.Key_C, CTRL))
        assert event.ctrl is True


class TestDetectOs:
    def test_mac(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr("sys.platform", "darwin")
        assert detect_os() is OperatingSystem.MAC

    def test_other(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr("sys.platform", "win32")
        assert detect_os() is OperatingSystem.WINDOWS

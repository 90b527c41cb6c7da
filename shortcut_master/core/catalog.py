from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml

from shortcut_master.core.keys import normalize_key
from shortcut_master.core.settings import OperatingSystem

logger = logging.getLogger(__name__)

CTRL_PLACEHOLDER = "{ctrl}"


class TaskKind(Enum):
    COPY_PASTE = "copy-paste"
    CUT_PASTE = "cut-paste"
    SELECT_ALL_DELETE = "select-all-delete"
    TAB_NAVIGATION = "tab-navigation"

    @property
    def needs_text(self) -> bool:
        return self is not TaskKind.TAB_NAVIGATION


@dataclass(frozen=True)
class Shortcut:
    id: str
    category: str
    task: str
    win_keys: Tuple[str, ...]
    mac_keys: Tuple[str, ...]
    win_display: Tuple[str, ...]
    mac_display: Tuple[str, ...]

    def keys_for(self, os: OperatingSystem) -> Tuple[str, ...]:
        return self.mac_keys if os is OperatingSystem.MAC else self.win_keys

    def display_for(self, os: OperatingSystem) -> Tuple[str, ...]:
        return self.mac_display if os is OperatingSystem.MAC else self.win_display


@dataclass(frozen=True)
class PracticalTask:
    id: str
    title: str
    instruction: str
    kind: TaskKind
    initial_text: Optional[str] = None

    def instruction_for(self, os: OperatingSystem) -> str:
        """Instruction text with the primary modifier named for *os*."""
        return self.instruction.replace(CTRL_PLACEHOLDER, os.primary_modifier_label)


class TaskCatalog:
    """Read-only shortcut and practical-task definitions loaded from YAML."""

    def __init__(self, data_dir: Optional[Path] = None) -> None:
        self._data_dir = data_dir or Path(__file__).resolve().parent.parent / "data"
        if not self._data_dir.exists():
            raise FileNotFoundError(f"Catalog directory not found: {self._data_dir}")
        self._shortcuts = self._load_shortcuts(self._data_dir / "shortcuts.yaml")
        self._practical = self._load_practical(self._data_dir / "practical_tasks.yaml")
        logger.info(
            "Loaded %d shortcuts and %d practical tasks from %s",
            len(self._shortcuts),
            len(self._practical),
            self._data_dir,
        )

    def shortcuts(self) -> List[Shortcut]:
        return list(self._shortcuts.values())

    def get_shortcut(self, shortcut_id: str) -> Shortcut:
        return self._shortcuts[shortcut_id]

    def categories(self) -> List[str]:
        """Distinct categories in catalog order."""
        seen: Dict[str, None] = {}
        for shortcut in self._shortcuts.values():
            seen.setdefault(shortcut.category, None)
        return list(seen)

    def practical_tasks(self) -> List[PracticalTask]:
        return list(self._practical)

    @staticmethod
    def _read_entries(path: Path, section: str) -> list:
        if not path.exists():
            raise FileNotFoundError(f"Catalog file not found: {path}")
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        if not raw or not isinstance(raw, dict):
            raise ValueError(f"{path.name}: expected YAML mapping with '{section}'")
        entries = raw.get(section)
        if not isinstance(entries, list) or not entries:
            raise ValueError(f"{path.name}: '{section}' must be a non-empty list")
        return entries

    def _load_shortcuts(self, path: Path) -> Dict[str, Shortcut]:
        shortcuts: Dict[str, Shortcut] = {}
        for entry in self._read_entries(path, "shortcuts"):
            if not isinstance(entry, dict):
                raise ValueError(f"{path.name}: shortcut entries must be mappings")
            shortcut_id = _required_str(path, entry, "id")
            if shortcut_id in shortcuts:
                raise ValueError(f"{path.name}: duplicate shortcut id '{shortcut_id}'")
            keys = _per_os(path, shortcut_id, entry, "keys")
            display = _per_os(path, shortcut_id, entry, "display")
            shortcuts[shortcut_id] = Shortcut(
                id=shortcut_id,
                category=_required_str(path, entry, "category"),
                task=_required_str(path, entry, "task"),
                win_keys=tuple(normalize_key(k) for k in keys["windows"]),
                mac_keys=tuple(normalize_key(k) for k in keys["mac"]),
                win_display=tuple(display["windows"]),
                mac_display=tuple(display["mac"]),
            )
        return shortcuts

    def _load_practical(self, path: Path) -> List[PracticalTask]:
        tasks: List[PracticalTask] = []
        for entry in self._read_entries(path, "tasks"):
            if not isinstance(entry, dict):
                raise ValueError(f"{path.name}: task entries must be mappings")
            task_id = _required_str(path, entry, "id")
            kind_name = _required_str(path, entry, "kind")
            try:
                kind = TaskKind(kind_name)
            except ValueError:
                raise ValueError(f"{path.name}: task '{task_id}' has unknown kind '{kind_name}'") from None
            initial_text = entry.get("initial_text")
            if kind.needs_text and (not isinstance(initial_text, str) or not initial_text):
                raise ValueError(f"{path.name}: task '{task_id}' needs a non-empty 'initial_text'")
            tasks.append(
                PracticalTask(
                    id=task_id,
                    title=_required_str(path, entry, "title"),
                    instruction=_required_str(path, entry, "instruction"),
                    kind=kind,
                    initial_text=initial_text if kind.needs_text else None,
                )
            )
        return tasks


def _required_str(path: Path, entry: dict, field: str) -> str:
    value = entry.get(field)
    if not value or not isinstance(value, str):
        raise ValueError(f"{path.name}: missing or invalid '{field}'")
    return value.strip()


def _per_os(path: Path, shortcut_id: str, entry: dict, field: str) -> Dict[str, List[str]]:
    value = entry.get(field)
    if not isinstance(value, dict):
        raise ValueError(f"{path.name}: shortcut '{shortcut_id}' missing '{field}'")
    result: Dict[str, List[str]] = {}
    for os_name in ("windows", "mac"):
        items = value.get(os_name)
        if not isinstance(items, list) or not items:
            raise ValueError(f"{path.name}: shortcut '{shortcut_id}' has no '{field}.{os_name}'")
        result[os_name] = [str(item) for item in items]
    return result

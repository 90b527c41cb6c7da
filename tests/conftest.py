"""Shared fixtures: small on-disk catalogs and a deterministic scheduler."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from shortcut_master.core.catalog import TaskCatalog
from shortcut_master.core.scheduler import ManualScheduler

SMALL_SHORTCUTS = [
    {
        "id": "copy",
        "category": "General",
        "task": "Copy",
        "keys": {"windows": ["control", "c"], "mac": ["meta", "c"]},
        "display": {"windows": ["Ctrl", "C"], "mac": ["⌘", "C"]},
    },
    {
        "id": "paste",
        "category": "General",
        "task": "Paste",
        "keys": {"windows": ["Ctrl", "v"], "mac": ["Cmd", "v"]},
        "display": {"windows": ["Ctrl", "V"], "mac": ["⌘", "V"]},
    },
    {
        "id": "reopen-tab",
        "category": "Browser",
        "task": "Reopen the closed tab",
        "keys": {"windows": ["control", "shift", "t"], "mac": ["meta", "shift", "t"]},
        "display": {"windows": ["Ctrl", "Shift", "T"], "mac": ["⌘", "⇧", "T"]},
    },
    {
        "id": "rename",
        "category": "Files",
        "task": "Rename",
        "keys": {"windows": ["F2"], "mac": ["Return"]},
        "display": {"windows": ["F2"], "mac": ["Return"]},
    },
]

SMALL_TASKS = [
    {
        "id": "p1",
        "title": "Copy & Paste",
        "kind": "copy-paste",
        "initial_text": "Shortcut Master",
        "instruction": "Copy ({ctrl}+C) and paste ({ctrl}+V).",
    },
    {
        "id": "p4",
        "title": "Move with Tab",
        "kind": "tab-navigation",
        "instruction": "Use Tab to reach the third field.",
    },
]


def write_catalog(directory: Path, shortcuts: list, tasks: list) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "shortcuts.yaml").write_text(
        yaml.dump({"shortcuts": shortcuts}, allow_unicode=True, default_flow_style=False),
        encoding="utf-8",
    )
    (directory / "practical_tasks.yaml").write_text(
        yaml.dump({"tasks": tasks}, allow_unicode=True, default_flow_style=False),
        encoding="utf-8",
    )
    return directory


@pytest.fixture()
def small_catalog(tmp_path: Path) -> TaskCatalog:
    return TaskCatalog(write_catalog(tmp_path / "data", SMALL_SHORTCUTS, SMALL_TASKS))


@pytest.fixture()
def bundled_catalog() -> TaskCatalog:
    return TaskCatalog()


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()

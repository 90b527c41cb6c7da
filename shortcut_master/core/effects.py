from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Mapping, Optional

from shortcut_master.core.catalog import PracticalTask, TaskKind

logger = logging.getLogger(__name__)

# Zero-based index of the input a tab-navigation task must reach.
FINAL_FOCUS_TARGET = 2


class Buffer(Enum):
    SOURCE = "source"
    DESTINATION = "destination"
    SINGLE = "single"


def initial_buffers(task: PracticalTask) -> Dict[Buffer, str]:
    text = task.initial_text or ""
    if task.kind in (TaskKind.COPY_PASTE, TaskKind.CUT_PASTE):
        return {Buffer.SOURCE: text, Buffer.DESTINATION: ""}
    if task.kind is TaskKind.SELECT_ALL_DELETE:
        return {Buffer.SINGLE: text}
    return {}


def is_task_complete(
    task: PracticalTask,
    buffers: Mapping[Buffer, str],
    focus: Optional[int],
) -> bool:
    """Completion predicate, judged on the effects of the user's editing."""
    original = task.initial_text or ""
    if task.kind is TaskKind.COPY_PASTE:
        return buffers.get(Buffer.DESTINATION) == original
    if task.kind is TaskKind.CUT_PASTE:
        return buffers.get(Buffer.SOURCE) == "" and buffers.get(Buffer.DESTINATION) == original
    if task.kind is TaskKind.SELECT_ALL_DELETE:
        return buffers.get(Buffer.SINGLE) == ""
    return focus == FINAL_FOCUS_TARGET


class PracticalEffectMatcher:
    """Mirror of the practical task surface: buffer contents and focus position."""

    def __init__(self) -> None:
        self._task: Optional[PracticalTask] = None
        self._buffers: Dict[Buffer, str] = {}
        self._focus: Optional[int] = None

    @property
    def task(self) -> Optional[PracticalTask]:
        return self._task

    @property
    def buffers(self) -> Dict[Buffer, str]:
        return dict(self._buffers)

    @property
    def focus(self) -> Optional[int]:
        return self._focus

    def load(self, task: PracticalTask) -> None:
        self._task = task
        self._buffers = initial_buffers(task)
        self._focus = 0 if task.kind is TaskKind.TAB_NAVIGATION else None

    def set_buffer(self, buffer: Buffer, text: str) -> bool:
        """Record new buffer contents; returns False for a buffer the task does not use."""
        if buffer not in self._buffers:
            logger.warning("Ignoring change to unused buffer %s", buffer.value)
            return False
        self._buffers[buffer] = text
        return True

    def set_focus(self, target: int) -> None:
        self._focus = target

    def is_complete(self) -> bool:
        if self._task is None:
            return False
        return is_task_complete(self._task, self._buffers, self._focus)

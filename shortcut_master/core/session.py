from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Generic, List, Optional, Tuple, TypeVar

from shortcut_master.core.catalog import PracticalTask, Shortcut, TaskCatalog
from shortcut_master.core.combo import ComboMatcher, ComboVerdict
from shortcut_master.core.effects import Buffer, PracticalEffectMatcher
from shortcut_master.core.keys import KeyInput
from shortcut_master.core.scheduler import Scheduler, TimerHandle, monotonic_ms
from shortcut_master.core.selection import select_quiz_tasks
from shortcut_master.core.settings import ALL_CATEGORIES, GameSettings, OperatingSystem, Timings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Feedback(Enum):
    NONE = "none"
    SUCCESS = "success"
    ERROR = "error"


class SessionState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    FINISHED = "finished"
    ABANDONED = "abandoned"


@dataclass(frozen=True)
class GameResult:
    """Terminal record of one finished session."""

    elapsed_ms: int
    correct_count: int
    mistake_count: int
    total_questions: int


class _PendingTimer:
    """A scheduled callback and the run/task it was armed for."""

    def __init__(self, run: int, index: Optional[int]) -> None:
        self.run = run
        self.index = index
        self.handle: Optional[TimerHandle] = None


class SessionController(ABC, Generic[T]):
    """Owns the task sequence, the clock, the mistake count and transient feedback.

    Subclasses decide how tasks are drawn (``_build_tasks``) and how a matcher
    is re-armed for each task (``_arm_task``). Input handlers in subclasses
    report outcomes through ``_complete_current`` and ``record_mistake``.

    Every delayed transition goes through ``_schedule``. The pending timer is
    stored with the run number and task index it belongs to; when it fires it
    is ignored unless it is still the registered timer for its name, the
    session is still running and, for task-bound timers, the index has not
    moved.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        clock: Optional[Callable[[], int]] = None,
        timings: Optional[Timings] = None,
        on_finish: Optional[Callable[[GameResult], None]] = None,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self._scheduler = scheduler
        self._clock = clock or monotonic_ms
        self.timings = timings or Timings()
        self.on_finish = on_finish
        self.on_change = on_change

        self._settings: Optional[GameSettings] = None
        self._tasks: List[T] = []
        self._index = 0
        self._start_ms = 0
        self._now_ms = 0
        self._mistakes = 0
        self._feedback = Feedback.NONE
        self._state = SessionState.IDLE
        self._result: Optional[GameResult] = None
        self._timers: Dict[str, _PendingTimer] = {}
        self._run = 0

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def settings(self) -> Optional[GameSettings]:
        return self._settings

    @property
    def os(self) -> OperatingSystem:
        return self._settings.os if self._settings else OperatingSystem.WINDOWS

    @property
    def tasks(self) -> Tuple[T, ...]:
        return tuple(self._tasks)

    @property
    def index(self) -> int:
        """Index of the active task; equals ``total`` once finished."""
        return self._index

    @property
    def total(self) -> int:
        return len(self._tasks)

    @property
    def position(self) -> int:
        """1-based counter for display."""
        return min(self._index + 1, len(self._tasks))

    @property
    def current_task(self) -> Optional[T]:
        if self._state is not SessionState.RUNNING:
            return None
        return self._tasks[self._index]

    @property
    def mistakes(self) -> int:
        return self._mistakes

    @property
    def feedback(self) -> Feedback:
        return self._feedback

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is SessionState.RUNNING

    @property
    def elapsed_ms(self) -> int:
        """Elapsed time as of the last tick."""
        if self._state is SessionState.IDLE:
            return 0
        return max(0, self._now_ms - self._start_ms)

    @property
    def result(self) -> Optional[GameResult]:
        return self._result

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, settings: GameSettings) -> None:
        if self._state is SessionState.RUNNING:
            raise RuntimeError("session already running")
        tasks = self._build_tasks(settings)
        if not tasks:
            raise ValueError("no tasks available for these settings")

        self._cancel_timers()
        self._run += 1
        self._settings = settings
        self._tasks = list(tasks)
        self._index = 0
        self._mistakes = 0
        self._feedback = Feedback.NONE
        self._result = None
        self._start_ms = self._clock()
        self._now_ms = self._start_ms
        self._state = SessionState.RUNNING
        self._arm_task(self._tasks[0])
        self._schedule("tick", self.timings.tick_ms, self._tick, task_bound=False)
        logger.info("Started %s session with %d tasks", settings.mode.value, len(self._tasks))
        self._notify()

    def advance(self, was_skip: bool = False) -> Optional[GameResult]:
        """Move past the active task; returns the result when that was the last one."""
        if self._state is not SessionState.RUNNING:
            return None
        if was_skip:
            self._mistakes += 1
        if self._index >= len(self._tasks) - 1:
            return self._finish()

        self._cancel_timers(task_bound_only=True)
        self._index += 1
        self._feedback = Feedback.NONE
        self._arm_task(self._tasks[self._index])
        logger.debug("Advanced to task %d/%d (skip=%s)", self._index + 1, len(self._tasks), was_skip)
        self._notify()
        return None

    def skip(self) -> Optional[GameResult]:
        """Forced mistake plus advance; ignored once the task is already solved."""
        if self._state is not SessionState.RUNNING or self._feedback is Feedback.SUCCESS:
            return None
        return self.advance(was_skip=True)

    def record_mistake(self) -> None:
        if self._state is not SessionState.RUNNING:
            return
        self._mistakes += 1
        logger.debug("Mistake recorded on task %d (total %d)", self._index + 1, self._mistakes)
        self._notify()

    def abandon(self) -> None:
        """Discard the running session without producing a result."""
        if self._state is not SessionState.RUNNING:
            return
        self._cancel_timers()
        self._state = SessionState.ABANDONED
        self._feedback = Feedback.NONE
        self._on_stop()
        logger.info("Abandoned session at task %d/%d", self._index + 1, len(self._tasks))
        self._notify()

    def _finish(self) -> GameResult:
        self._cancel_timers()
        self._now_ms = self._clock()
        self._index = len(self._tasks)
        self._state = SessionState.FINISHED
        self._on_stop()
        self._result = GameResult(
            elapsed_ms=max(0, self._now_ms - self._start_ms),
            correct_count=len(self._tasks),
            mistake_count=self._mistakes,
            total_questions=len(self._tasks),
        )
        logger.info(
            "Finished session: %d tasks, %d mistakes, %d ms",
            self._result.total_questions,
            self._result.mistake_count,
            self._result.elapsed_ms,
        )
        if self.on_finish is not None:
            self.on_finish(self._result)
        self._notify()
        return self._result

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------

    @abstractmethod
    def _build_tasks(self, settings: GameSettings) -> List[T]:
        raise NotImplementedError

    @abstractmethod
    def _arm_task(self, task: T) -> None:
        raise NotImplementedError

    def _on_stop(self) -> None:
        pass

    def _on_error_cleared(self) -> None:
        pass

    def _complete_current(self, hold_ms: int) -> bool:
        """Latch success for the active task and advance after *hold_ms*, once."""
        if self._state is not SessionState.RUNNING or self._feedback is Feedback.SUCCESS:
            return False
        self._cancel_timer("error")
        self._feedback = Feedback.SUCCESS
        self._schedule("advance", hold_ms, self.advance)
        logger.debug("Task %d complete", self._index + 1)
        self._notify()
        return True

    def _flash_error(self) -> None:
        self._feedback = Feedback.ERROR
        self._schedule("error", self.timings.error_cooldown_ms, self._clear_error)
        self._notify()

    def _clear_error(self) -> None:
        if self._feedback is not Feedback.ERROR:
            return
        self._feedback = Feedback.NONE
        self._on_error_cleared()
        self._notify()

    def _tick(self) -> None:
        self._now_ms = self._clock()
        self._schedule("tick", self.timings.tick_ms, self._tick, task_bound=False)
        self._notify()

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change()

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    def _schedule(self, name: str, delay_ms: int, callback: Callable[[], object], task_bound: bool = True) -> None:
        self._cancel_timer(name)
        entry = _PendingTimer(self._run, self._index if task_bound else None)

        def fire() -> None:
            if self._timers.get(name) is not entry:
                logger.debug("Ignoring superseded %s timer", name)
                return
            del self._timers[name]
            if (
                self._state is not SessionState.RUNNING
                or entry.run != self._run
                or (entry.index is not None and entry.index != self._index)
            ):
                logger.debug("Ignoring stale %s timer for task %s", name, entry.index)
                return
            callback()

        entry.handle = self._scheduler.call_later(delay_ms, fire)
        self._timers[name] = entry

    def _cancel_timer(self, name: str) -> None:
        entry = self._timers.pop(name, None)
        if entry is not None and entry.handle is not None:
            entry.handle.cancel()

    def _cancel_timers(self, task_bound_only: bool = False) -> None:
        for name, entry in list(self._timers.items()):
            if task_bound_only and entry.index is None:
                continue
            self._cancel_timer(name)


class QuizSession(SessionController[Shortcut]):
    """Shortcut quiz: the user presses the key combination for each prompt."""

    def __init__(
        self,
        catalog: TaskCatalog,
        scheduler: Scheduler,
        clock: Optional[Callable[[], int]] = None,
        rng: Optional[random.Random] = None,
        timings: Optional[Timings] = None,
        on_finish: Optional[Callable[[GameResult], None]] = None,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        super().__init__(scheduler, clock, timings, on_finish, on_change)
        self._catalog = catalog
        self._rng = rng or random.Random()
        self._matcher: Optional[ComboMatcher] = None

    @property
    def target_keys(self) -> frozenset[str]:
        return self._matcher.target if self._matcher and self.is_running else frozenset()

    @property
    def held_keys(self) -> frozenset[str]:
        return self._matcher.held if self._matcher and self.is_running else frozenset()

    @property
    def display_keys(self) -> Tuple[str, ...]:
        task = self.current_task
        return task.display_for(self.os) if task else ()

    def _build_tasks(self, settings: GameSettings) -> List[Shortcut]:
        if settings.category != ALL_CATEGORIES and settings.category not in self._catalog.categories():
            raise ValueError(f"unknown category: {settings.category}")
        return select_quiz_tasks(
            self._catalog.shortcuts(),
            settings.category,
            settings.question_count,
            self._rng,
        )

    def _arm_task(self, task: Shortcut) -> None:
        self._matcher = ComboMatcher(task.keys_for(self.os))

    def _on_error_cleared(self) -> None:
        if self._matcher is not None:
            self._matcher.reset()

    def key_down(self, event: KeyInput) -> bool:
        """Judge a key-down; returns True when the host's default action must be suppressed."""
        if not self.is_running or self._feedback is Feedback.SUCCESS or self._matcher is None:
            return False
        verdict = self._matcher.press(event)
        if verdict is ComboVerdict.MATCH:
            self._complete_current(self.timings.success_hold_ms)
        elif verdict.is_mistake:
            self.record_mistake()
            self._flash_error()
        else:
            self._notify()
        return event.suppresses_default

    def key_up(self, event: KeyInput) -> None:
        if not self.is_running or self._feedback is Feedback.SUCCESS or self._matcher is None:
            return
        self._matcher.release(event)
        self._notify()


class PracticalSession(SessionController[PracticalTask]):
    """Keyboard-only editing drills judged by their effect on the task surface."""

    def __init__(
        self,
        catalog: TaskCatalog,
        scheduler: Scheduler,
        clock: Optional[Callable[[], int]] = None,
        timings: Optional[Timings] = None,
        on_finish: Optional[Callable[[GameResult], None]] = None,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        super().__init__(scheduler, clock, timings, on_finish, on_change)
        self._catalog = catalog
        self._effects = PracticalEffectMatcher()
        self._warning = False

    @property
    def instruction(self) -> str:
        task = self.current_task
        return task.instruction_for(self.os) if task else ""

    @property
    def buffers(self) -> Dict[Buffer, str]:
        return self._effects.buffers

    @property
    def focus(self) -> Optional[int]:
        return self._effects.focus

    @property
    def warning(self) -> bool:
        """True while the mouse warning banner should be shown."""
        return self._warning

    def _build_tasks(self, settings: GameSettings) -> List[PracticalTask]:
        return self._catalog.practical_tasks()

    def _arm_task(self, task: PracticalTask) -> None:
        self._effects.load(task)

    def _on_stop(self) -> None:
        self._warning = False

    def buffer_changed(self, buffer: Buffer, text: str) -> None:
        if not self.is_running or self._feedback is Feedback.SUCCESS:
            return
        if self._effects.set_buffer(buffer, text):
            self._evaluate()

    def focus_changed(self, target: int) -> None:
        if not self.is_running or self._feedback is Feedback.SUCCESS:
            return
        self._effects.set_focus(target)
        self._evaluate()

    def mouse_down(self) -> bool:
        """Reject a pointer interaction; returns True when its default action must be suppressed."""
        if not self.is_running:
            return False
        self.record_mistake()
        self._warning = True
        self._schedule("warning", self.timings.mouse_warning_ms, self._clear_warning, task_bound=False)
        self._notify()
        return True

    def _clear_warning(self) -> None:
        self._warning = False
        self._notify()

    def _evaluate(self) -> None:
        if self._effects.is_complete():
            self._complete_current(self.timings.practical_success_ms)
        else:
            self._notify()

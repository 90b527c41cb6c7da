"""Tests for shortcut_master.core.session – practical session engine."""

from __future__ import annotations

from typing import List

import pytest

from shortcut_master.core.catalog import TaskCatalog, TaskKind
from shortcut_master.core.effects import Buffer
from shortcut_master.core.scheduler import ManualScheduler
from shortcut_master.core.session import Feedback, GameResult, PracticalSession, SessionState
from shortcut_master.core.settings import GameMode, GameSettings, OperatingSystem

PRACTICAL = GameSettings(mode=GameMode.PRACTICAL)


@pytest.fixture()
def results() -> List[GameResult]:
    return []


@pytest.fixture()
def practical(bundled_catalog: TaskCatalog, scheduler: ManualScheduler, results: list) -> PracticalSession:
    session = PracticalSession(bundled_catalog, scheduler, clock=scheduler.now, on_finish=results.append)
    session.start(PRACTICAL)
    return session


def complete_current(session: PracticalSession) -> None:
    task = session.current_task
    if task.kind is TaskKind.COPY_PASTE:
        session.buffer_changed(Buffer.DESTINATION, task.initial_text)
    elif task.kind is TaskKind.CUT_PASTE:
        session.buffer_changed(Buffer.SOURCE, "")
        session.buffer_changed(Buffer.DESTINATION, task.initial_text)
    elif task.kind is TaskKind.SELECT_ALL_DELETE:
        session.buffer_changed(Buffer.SINGLE, "")
    else:
        session.focus_changed(2)


# ---------------------------------------------------------------------------
# start
# ---------------------------------------------------------------------------

class TestStart:
    def test_fixed_order(self, practical: PracticalSession):
        assert [t.id for t in practical.tasks] == ["p1", "p2", "p3", "p4"]
        assert practical.total == 4

    def test_initial_buffers(self, practical: PracticalSession):
        assert practical.buffers == {Buffer.SOURCE: "Shortcut Master", Buffer.DESTINATION: ""}

    def test_ignores_quiz_only_settings(self, bundled_catalog: TaskCatalog, scheduler: ManualScheduler):
        session = PracticalSession(bundled_catalog, scheduler, clock=scheduler.now)
        session.start(GameSettings(mode=GameMode.PRACTICAL, category="Excel", question_count=1))
        assert session.total == 4

    def test_instruction_windows(self, practical: PracticalSession):
        assert "Ctrl+C" in practical.instruction
        assert "{ctrl}" not in practical.instruction

    def test_instruction_mac(self, bundled_catalog: TaskCatalog, scheduler: ManualScheduler):
        session = PracticalSession(bundled_catalog, scheduler, clock=scheduler.now)
        session.start(GameSettings(mode=GameMode.PRACTICAL, os=OperatingSystem.MAC))
        assert "Cmd+C" in session.instruction
        assert "Cmd+V" in session.instruction


# ---------------------------------------------------------------------------
# completion predicates through the session
# ---------------------------------------------------------------------------

class TestCompletion:
    def test_copy_paste(self, practical: PracticalSession, scheduler: ManualScheduler):
        practical.buffer_changed(Buffer.DESTINATION, "Shortcut Master")
        assert practical.feedback is Feedback.SUCCESS
        scheduler.advance(599)
        assert practical.index == 0
        scheduler.advance(1)
        assert practical.index == 1
        assert practical.feedback is Feedback.NONE

    def test_copy_paste_incomplete(self, practical: PracticalSession, scheduler: ManualScheduler):
        practical.buffer_changed(Buffer.DESTINATION, "Shortcut Maste")
        assert practical.feedback is Feedback.NONE
        scheduler.advance(1000)
        assert practical.index == 0

    def test_cut_paste_needs_both(self, practical: PracticalSession, scheduler: ManualScheduler):
        practical.skip()
        practical.buffer_changed(Buffer.DESTINATION, "Move this text")
        assert practical.feedback is Feedback.NONE
        practical.buffer_changed(Buffer.SOURCE, "")
        assert practical.feedback is Feedback.SUCCESS

    def test_cut_paste_source_only(self, practical: PracticalSession):
        practical.skip()
        practical.buffer_changed(Buffer.SOURCE, "")
        assert practical.feedback is Feedback.NONE

    def test_select_all_delete(self, practical: PracticalSession):
        practical.skip()
        practical.skip()
        assert practical.buffers == {Buffer.SINGLE: "Delete all of this"}
        practical.buffer_changed(Buffer.SINGLE, "Delete all")
        assert practical.feedback is Feedback.NONE
        practical.buffer_changed(Buffer.SINGLE, "")
        assert practical.feedback is Feedback.SUCCESS

    def test_tab_navigation_skipping_second(self, practical: PracticalSession):
        for _ in range(3):
            practical.skip()
        assert practical.focus == 0
        practical.focus_changed(2)
        assert practical.feedback is Feedback.SUCCESS

    def test_tab_navigation_intermediate(self, practical: PracticalSession):
        for _ in range(3):
            practical.skip()
        practical.focus_changed(1)
        assert practical.feedback is Feedback.NONE

    def test_unused_buffer_ignored(self, practical: PracticalSession):
        practical.buffer_changed(Buffer.SINGLE, "")
        assert practical.feedback is Feedback.NONE
        assert Buffer.SINGLE not in practical.buffers

    def test_duplicate_completing_event(self, practical: PracticalSession, scheduler: ManualScheduler):
        practical.buffer_changed(Buffer.DESTINATION, "Shortcut Master")
        practical.buffer_changed(Buffer.DESTINATION, "Shortcut Master")
        scheduler.advance(600)
        assert practical.index == 1
        scheduler.advance(2000)
        assert practical.index == 1
        assert practical.mistakes == 0

    def test_input_ignored_while_latched(self, practical: PracticalSession):
        practical.buffer_changed(Buffer.DESTINATION, "Shortcut Master")
        practical.buffer_changed(Buffer.DESTINATION, "")
        assert practical.buffers[Buffer.DESTINATION] == "Shortcut Master"

    def test_next_task_rearmed(self, practical: PracticalSession, scheduler: ManualScheduler):
        practical.buffer_changed(Buffer.DESTINATION, "Shortcut Master")
        scheduler.advance(600)
        assert practical.buffers == {Buffer.SOURCE: "Move this text", Buffer.DESTINATION: ""}


# ---------------------------------------------------------------------------
# mouse rejection
# ---------------------------------------------------------------------------

class TestMouse:
    def test_mouse_is_mistake_with_warning(self, practical: PracticalSession, scheduler: ManualScheduler):
        assert practical.mouse_down() is True
        assert practical.mistakes == 1
        assert practical.warning is True
        scheduler.advance(1999)
        assert practical.warning is True
        scheduler.advance(1)
        assert practical.warning is False

    def test_each_click_counts(self, practical: PracticalSession):
        practical.mouse_down()
        practical.mouse_down()
        practical.mouse_down()
        assert practical.mistakes == 3

    def test_new_click_extends_warning(self, practical: PracticalSession, scheduler: ManualScheduler):
        practical.mouse_down()
        scheduler.advance(1500)
        practical.mouse_down()
        scheduler.advance(600)
        assert practical.warning is True
        scheduler.advance(1400)
        assert practical.warning is False

    def test_warning_survives_task_change(self, practical: PracticalSession, scheduler: ManualScheduler):
        practical.mouse_down()
        practical.skip()
        assert practical.warning is True
        scheduler.advance(2000)
        assert practical.warning is False

    def test_mouse_does_not_advance(self, practical: PracticalSession, scheduler: ManualScheduler):
        practical.mouse_down()
        scheduler.advance(5000)
        assert practical.index == 0

    def test_mouse_after_finish(self, practical: PracticalSession):
        for _ in range(4):
            practical.skip()
        assert practical.mouse_down() is False
        assert practical.mistakes == 4


# ---------------------------------------------------------------------------
# whole session
# ---------------------------------------------------------------------------

class TestSession:
    def test_full_run(self, practical: PracticalSession, scheduler: ManualScheduler, results: list):
        practical.mouse_down()
        for _ in range(4):
            complete_current(practical)
            scheduler.advance(600)
        assert practical.state is SessionState.FINISHED
        assert practical.index == 4
        assert results == [
            GameResult(elapsed_ms=2400, correct_count=4, mistake_count=1, total_questions=4)
        ]

    def test_finish_clears_warning(self, practical: PracticalSession, scheduler: ManualScheduler):
        for _ in range(3):
            practical.skip()
        practical.mouse_down()
        practical.skip()
        assert practical.warning is False
        assert scheduler.pending() == 0

    def test_events_after_finish_ignored(self, practical: PracticalSession, results: list):
        for _ in range(4):
            practical.skip()
        practical.buffer_changed(Buffer.SINGLE, "")
        practical.focus_changed(2)
        assert practical.feedback is Feedback.NONE
        assert len(results) == 1
        assert results[0].mistake_count == 4

    def test_abandon_emits_nothing(self, practical: PracticalSession, scheduler: ManualScheduler, results: list):
        practical.buffer_changed(Buffer.DESTINATION, "Shortcut Master")
        practical.abandon()
        scheduler.advance(5000)
        assert results == []
        assert practical.state is SessionState.ABANDONED
        assert practical.current_task is None
        assert practical.instruction == ""

from __future__ import annotations

import logging
from typing import List, Optional

from PySide6.QtCore import QEvent, QObject, Qt, QTimer
from PySide6.QtWidgets import (
    QApplication,
    QComboBox,
    QFormLayout,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSpinBox,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from shortcut_master.core.catalog import TaskCatalog, TaskKind
from shortcut_master.core.effects import Buffer
from shortcut_master.core.scoring import format_elapsed, score
from shortcut_master.core.session import (
    GameResult,
    PracticalSession,
    QuizSession,
    SessionController,
)
from shortcut_master.core.settings import (
    ALL_CATEGORIES,
    GameMode,
    GameSettings,
    OperatingSystem,
    Timings,
)
from shortcut_master.ui.colors import Palette, feedback_tint
from shortcut_master.ui.input_adapter import key_input_from_event
from shortcut_master.ui.key_widgets import FeedbackBadge, KeyComboWidget
from shortcut_master.ui.qt_scheduler import QtScheduler

logger = logging.getLogger(__name__)

_PAGE_HOME, _PAGE_QUIZ, _PAGE_PRACTICAL, _PAGE_RESULT = range(4)
_SURFACE_DUAL, _SURFACE_SINGLE, _SURFACE_TABS = range(3)


class MainWindow(QMainWindow):
    """Home / playing / result router around the two session engines."""

    def __init__(self, catalog: TaskCatalog, settings: GameSettings, timings: Timings) -> None:
        super().__init__()
        self.setWindowTitle("Shortcut Master")
        self._catalog = catalog
        self._settings = settings
        self._scheduler = QtScheduler(self)
        self._quiz = QuizSession(
            catalog,
            self._scheduler,
            timings=timings,
            on_finish=self._on_finish,
            on_change=self._refresh_quiz,
        )
        self._practical = PracticalSession(
            catalog,
            self._scheduler,
            timings=timings,
            on_finish=self._on_finish,
            on_change=self._refresh_practical,
        )
        self._active: Optional[SessionController] = None
        self._rendered_index = -1
        self._tab_inputs: List[QLineEdit] = []

        self._build_ui()
        app = QApplication.instance()
        if app is not None:
            app.installEventFilter(self)

    # ------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        root = QWidget()
        root.setStyleSheet(f"background: {Palette.BG}; color: {Palette.TEXT_PRIMARY};")
        layout = QVBoxLayout(root)

        header = QHBoxLayout()
        title = QLabel("Shortcut Master")
        title.setStyleSheet(f"font-size: 20px; font-weight: 800; color: {Palette.PRIMARY_DARK};")
        header.addWidget(title)
        header.addStretch(1)
        self._home_button = QPushButton("Home")
        self._home_button.setFocusPolicy(Qt.NoFocus)
        self._home_button.clicked.connect(self._go_home)
        self._home_button.setVisible(False)
        header.addWidget(self._home_button)
        layout.addLayout(header)

        self._stack = QStackedWidget()
        self._stack.addWidget(self._build_home_page())
        self._stack.addWidget(self._build_quiz_page())
        self._stack.addWidget(self._build_practical_page())
        self._stack.addWidget(self._build_result_page())
        layout.addWidget(self._stack, 1)
        self.setCentralWidget(root)
        self.resize(900, 640)

    def _build_home_page(self) -> QWidget:
        page = QWidget()
        form = QFormLayout(page)

        self._mode_combo = QComboBox()
        self._mode_combo.addItem("Shortcut quiz", GameMode.QUIZ)
        self._mode_combo.addItem("Practical training", GameMode.PRACTICAL)
        self._mode_combo.setCurrentIndex(self._mode_combo.findData(self._settings.mode))
        self._mode_combo.currentIndexChanged.connect(self._update_home_controls)

        self._os_combo = QComboBox()
        self._os_combo.addItem("Windows", OperatingSystem.WINDOWS)
        self._os_combo.addItem("Mac", OperatingSystem.MAC)
        self._os_combo.setCurrentIndex(self._os_combo.findData(self._settings.os))

        self._category_combo = QComboBox()
        self._category_combo.addItem(ALL_CATEGORIES, ALL_CATEGORIES)
        for category in self._catalog.categories():
            self._category_combo.addItem(category, category)
        index = self._category_combo.findData(self._settings.category)
        self._category_combo.setCurrentIndex(max(0, index))

        self._count_spin = QSpinBox()
        self._count_spin.setRange(1, max(1, len(self._catalog.shortcuts())))
        self._count_spin.setValue(self._settings.question_count)

        start = QPushButton("Start")
        start.clicked.connect(self._start_from_home)

        form.addRow("Mode", self._mode_combo)
        form.addRow("OS", self._os_combo)
        form.addRow("Category", self._category_combo)
        form.addRow("Questions", self._count_spin)
        form.addRow(start)
        self._update_home_controls()
        return page

    def _stats_row(self) -> tuple[QHBoxLayout, QLabel, QLabel, QLabel]:
        row = QHBoxLayout()
        counter = QLabel()
        mistakes = QLabel()
        mistakes.setStyleSheet(f"color: {Palette.ERROR}; font-weight: 600;")
        clock = QLabel()
        clock.setStyleSheet(f"color: {Palette.PRIMARY}; font-size: 22px; font-weight: 700;")
        row.addWidget(counter)
        row.addWidget(mistakes)
        row.addStretch(1)
        row.addWidget(clock)
        return row, counter, mistakes, clock

    def _skip_button(self, session: SessionController) -> QPushButton:
        button = QPushButton("Skip (counts as a mistake)")
        button.setFocusPolicy(Qt.NoFocus)
        button.clicked.connect(session.skip)
        return button

    def _build_quiz_page(self) -> QWidget:
        page = QWidget()
        page.setFocusPolicy(Qt.StrongFocus)
        layout = QVBoxLayout(page)
        row, self._quiz_counter, self._quiz_mistakes, self._quiz_clock = self._stats_row()
        layout.addLayout(row)

        self._quiz_card = QFrame()
        self._quiz_card.setObjectName("quizCard")
        card = QVBoxLayout(self._quiz_card)
        self._quiz_category = QLabel()
        self._quiz_category.setAlignment(Qt.AlignCenter)
        self._quiz_category.setStyleSheet(f"color: {Palette.PRIMARY}; font-weight: 700;")
        self._quiz_task = QLabel()
        self._quiz_task.setAlignment(Qt.AlignCenter)
        self._quiz_task.setStyleSheet("font-size: 36px; font-weight: 800;")
        self._quiz_keys = KeyComboWidget()
        self._quiz_badge = FeedbackBadge()
        card.addWidget(self._quiz_category)
        card.addWidget(self._quiz_task)
        card.addWidget(self._quiz_keys)
        card.addWidget(self._quiz_badge, 0, Qt.AlignCenter)
        layout.addWidget(self._quiz_card, 1)
        layout.addWidget(self._skip_button(self._quiz), 0, Qt.AlignCenter)
        return page

    def _build_practical_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        row, self._prac_counter, self._prac_mistakes, self._prac_clock = self._stats_row()
        layout.addLayout(row)

        self._prac_warning = QLabel("Mouse use is not allowed! Use the keyboard.")
        self._prac_warning.setAlignment(Qt.AlignCenter)
        self._prac_warning.setStyleSheet(
            f"background: {Palette.ERROR}; color: white; font-weight: 700; border-radius: 14px; padding: 8px;"
        )
        self._prac_warning.setVisible(False)

        self._prac_card = QFrame()
        self._prac_card.setObjectName("practicalCard")
        card = QVBoxLayout(self._prac_card)
        card.addWidget(self._prac_warning)
        self._prac_title = QLabel()
        self._prac_title.setAlignment(Qt.AlignCenter)
        self._prac_title.setStyleSheet("font-size: 28px; font-weight: 800;")
        self._prac_instruction = QLabel()
        self._prac_instruction.setWordWrap(True)
        self._prac_instruction.setAlignment(Qt.AlignCenter)
        self._prac_instruction.setStyleSheet(f"color: {Palette.TEXT_SECONDARY}; font-size: 16px;")
        card.addWidget(self._prac_title)
        card.addWidget(self._prac_instruction)

        self._surface = QStackedWidget()

        dual = QWidget()
        dual_layout = QHBoxLayout(dual)
        self._left_input = QLineEdit()
        self._left_input.setPlaceholderText("Left field")
        self._right_input = QLineEdit()
        self._right_input.setPlaceholderText("Right field")
        dual_layout.addWidget(self._left_input)
        dual_layout.addWidget(QLabel("→"))
        dual_layout.addWidget(self._right_input)
        self._left_input.textChanged.connect(lambda text: self._practical.buffer_changed(Buffer.SOURCE, text))
        self._right_input.textChanged.connect(lambda text: self._practical.buffer_changed(Buffer.DESTINATION, text))

        single = QWidget()
        single_layout = QVBoxLayout(single)
        self._single_input = QLineEdit()
        self._single_input.setAlignment(Qt.AlignCenter)
        self._single_input.textChanged.connect(lambda text: self._practical.buffer_changed(Buffer.SINGLE, text))
        single_layout.addWidget(self._single_input)

        tabs = QWidget()
        tabs_layout = QVBoxLayout(tabs)
        for placeholder in ("1st (start here)", "2nd (pass through with Tab)", "3rd (reach this to clear)"):
            field = QLineEdit()
            field.setPlaceholderText(placeholder)
            tabs_layout.addWidget(field)
            self._tab_inputs.append(field)

        self._surface.addWidget(dual)
        self._surface.addWidget(single)
        self._surface.addWidget(tabs)
        card.addWidget(self._surface)

        self._prac_badge = FeedbackBadge()
        card.addWidget(self._prac_badge, 0, Qt.AlignCenter)
        layout.addWidget(self._prac_card, 1)
        layout.addWidget(self._skip_button(self._practical), 0, Qt.AlignCenter)
        return page

    def _build_result_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        heading = QLabel("Results")
        heading.setAlignment(Qt.AlignCenter)
        heading.setStyleSheet("font-size: 32px; font-weight: 800;")
        self._result_score = QLabel()
        self._result_score.setAlignment(Qt.AlignCenter)
        self._result_score.setStyleSheet(f"font-size: 56px; font-weight: 900; color: {Palette.PRIMARY};")
        self._result_time = QLabel()
        self._result_time.setAlignment(Qt.AlignCenter)
        self._result_mistakes = QLabel()
        self._result_mistakes.setAlignment(Qt.AlignCenter)

        buttons = QHBoxLayout()
        retry = QPushButton("Play again")
        retry.clicked.connect(self._retry)
        home = QPushButton("Back to home")
        home.clicked.connect(self._go_home)
        buttons.addWidget(retry)
        buttons.addWidget(home)

        layout.addWidget(heading)
        layout.addWidget(self._result_score)
        layout.addWidget(self._result_time)
        layout.addWidget(self._result_mistakes)
        layout.addLayout(buttons)
        return page

    def _update_home_controls(self) -> None:
        is_quiz = self._mode_combo.currentData() is GameMode.QUIZ
        self._category_combo.setEnabled(is_quiz)
        self._count_spin.setEnabled(is_quiz)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _start_from_home(self) -> None:
        self._settings = GameSettings(
            mode=self._mode_combo.currentData(),
            os=self._os_combo.currentData(),
            category=self._category_combo.currentData(),
            question_count=self._count_spin.value(),
        )
        self._start_game()

    def _start_game(self) -> None:
        session = self._quiz if self._settings.mode is GameMode.QUIZ else self._practical
        self._rendered_index = -1
        try:
            session.start(self._settings)
        except ValueError as e:
            logger.warning("Could not start session: %s", e)
            QMessageBox.warning(self, "Shortcut Master", str(e))
            return
        self._active = session
        self._home_button.setVisible(True)
        if session is self._quiz:
            self._stack.setCurrentIndex(_PAGE_QUIZ)
            self._stack.currentWidget().setFocus()
            self._refresh_quiz()
        else:
            self._stack.setCurrentIndex(_PAGE_PRACTICAL)
            self._refresh_practical()

    def _retry(self) -> None:
        self._start_game()

    def _go_home(self) -> None:
        if self._active is not None:
            self._active.abandon()
        self._active = None
        self._home_button.setVisible(False)
        self._stack.setCurrentIndex(_PAGE_HOME)

    def _on_finish(self, result: GameResult) -> None:
        self._active = None
        self._result_score.setText(f"{score(result):,}")
        self._result_time.setText(f"Clear time: {format_elapsed(result.elapsed_ms)} s")
        self._result_mistakes.setText(f"Mistakes: {result.mistake_count}")
        self._stack.setCurrentIndex(_PAGE_RESULT)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render_stats(self, session: SessionController, counter: QLabel, mistakes: QLabel, clock: QLabel) -> None:
        counter.setText(f"{session.position} / {session.total}")
        mistakes.setText(f"Mistakes: {session.mistakes}")
        clock.setText(format_elapsed(session.elapsed_ms))

    def _refresh_quiz(self) -> None:
        if self._active is not self._quiz or not self._quiz.is_running:
            return
        session = self._quiz
        self._render_stats(session, self._quiz_counter, self._quiz_mistakes, self._quiz_clock)
        task = session.current_task
        if session.index != self._rendered_index:
            self._rendered_index = session.index
            self._quiz_category.setText(task.category)
            self._quiz_task.setText(task.task)
            self._quiz_keys.set_keys(session.display_keys)
        feedback = session.feedback.value
        self._quiz_keys.set_feedback(feedback)
        self._quiz_badge.set_feedback(feedback)
        self._quiz_card.setStyleSheet(f"QFrame#quizCard {{ background: {feedback_tint(feedback)}; border-radius: 24px; }}")

    def _refresh_practical(self) -> None:
        session = self._practical
        self._prac_warning.setVisible(session.warning)
        if self._active is not session or not session.is_running:
            return
        self._render_stats(session, self._prac_counter, self._prac_mistakes, self._prac_clock)
        if session.index != self._rendered_index:
            self._rendered_index = session.index
            self._load_practical_task()
        feedback = session.feedback.value
        self._prac_badge.set_feedback(feedback)
        self._prac_card.setStyleSheet(f"QFrame#practicalCard {{ background: {feedback_tint(feedback)}; border-radius: 24px; }}")

    def _load_practical_task(self) -> None:
        session = self._practical
        task = session.current_task
        self._prac_title.setText(task.title)
        self._prac_instruction.setText(session.instruction)
        buffers = session.buffers

        if task.kind in (TaskKind.COPY_PASTE, TaskKind.CUT_PASTE):
            self._surface.setCurrentIndex(_SURFACE_DUAL)
            self._set_field(self._left_input, buffers[Buffer.SOURCE])
            self._set_field(self._right_input, buffers[Buffer.DESTINATION])
            first = self._left_input
        elif task.kind is TaskKind.SELECT_ALL_DELETE:
            self._surface.setCurrentIndex(_SURFACE_SINGLE)
            self._set_field(self._single_input, buffers[Buffer.SINGLE])
            first = self._single_input
        else:
            self._surface.setCurrentIndex(_SURFACE_TABS)
            for field in self._tab_inputs:
                self._set_field(field, "")
            first = self._tab_inputs[0]
        QTimer.singleShot(100, first.setFocus)

    @staticmethod
    def _set_field(field: QLineEdit, text: str) -> None:
        field.blockSignals(True)
        field.setText(text)
        field.blockSignals(False)

    # ------------------------------------------------------------------
    # Input routing
    # ------------------------------------------------------------------

    def eventFilter(self, obj: QObject, event: QEvent) -> bool:
        # Only widget deliveries; the window-level copy of each event is skipped.
        if not isinstance(obj, QWidget):
            return False
        etype = event.type()
        if self._active is self._quiz and etype in (QEvent.Type.KeyPress, QEvent.Type.KeyRelease):
            if self._stack.currentIndex() != _PAGE_QUIZ:
                return False
            # The quiz page has no text inputs: every key is consumed so it
            # cannot propagate to a parent and be judged twice.
            if event.isAutoRepeat():
                return True
            key_input = key_input_from_event(event)
            if key_input is None:
                return True
            if etype == QEvent.Type.KeyPress:
                if self._quiz.key_down(key_input):
                    logger.debug("Suppressed default action for %s", key_input.key)
            else:
                self._quiz.key_up(key_input)
            return True

        if self._active is self._practical:
            if etype in (QEvent.Type.MouseButtonPress, QEvent.Type.MouseButtonDblClick):
                if obj is self._prac_card or self._prac_card.isAncestorOf(obj):
                    return self._practical.mouse_down()
            elif etype == QEvent.Type.FocusIn and obj in self._tab_inputs:
                self._practical.focus_changed(self._tab_inputs.index(obj))
        return False

    def closeEvent(self, event) -> None:
        if self._active is not None:
            self._active.abandon()
        super().closeEvent(event)

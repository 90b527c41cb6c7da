"""Quiz UI: key-cap row and the feedback badge."""

from __future__ import annotations

from typing import Optional, Sequence

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QPainter, QPen
from PySide6.QtWidgets import QLabel, QWidget

from shortcut_master.ui.colors import Palette


class KeyComboWidget(QWidget):
    """Row of key caps joined by '+', outlined in the feedback color."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._labels: list[str] = []
        self._feedback = "none"
        self.setFixedHeight(72)
        self.setMinimumWidth(240)

    def set_keys(self, labels: Sequence[str]) -> None:
        self._labels = list(labels)
        self.update()

    def set_feedback(self, feedback: str) -> None:
        self._feedback = feedback
        self.update()

    def paintEvent(self, event) -> None:
        super().paintEvent(event)
        if not self._labels:
            return
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)

        border = {
            "success": Palette.SUCCESS,
            "error": Palette.ERROR,
        }.get(self._feedback, Palette.KEY_CAP_BORDER)

        font = painter.font()
        font.setPointSize(16)
        font.setBold(True)
        painter.setFont(font)
        metrics = painter.fontMetrics()

        cap_h = 52
        plus_w = 32
        widths = [max(cap_h, metrics.horizontalAdvance(label) + 28) for label in self._labels]
        total = sum(widths) + plus_w * (len(widths) - 1)
        x = max(0, (self.width() - total) // 2)
        y = (self.height() - cap_h) // 2
        for i, (label, w) in enumerate(zip(self._labels, widths)):
            if i > 0:
                painter.setPen(QColor(Palette.TEXT_MUTED))
                painter.drawText(x, y, plus_w, cap_h, Qt.AlignCenter, "+")
                x += plus_w
            painter.setBrush(QColor(Palette.KEY_CAP_BG))
            painter.setPen(QPen(QColor(border), 2))
            painter.drawRoundedRect(x, y, w, cap_h, 10, 10)
            painter.setPen(QColor(Palette.TEXT_PRIMARY))
            painter.drawText(x, y, w, cap_h, Qt.AlignCenter, label)
            x += w


class FeedbackBadge(QLabel):
    """Round badge showing a check mark on success and a cross on error."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setAlignment(Qt.AlignCenter)
        self.setFixedSize(96, 96)
        self.set_feedback("none")

    def set_feedback(self, feedback: str) -> None:
        if feedback == "success":
            color, text = Palette.SUCCESS, "✓"
        elif feedback == "error":
            color, text = Palette.ERROR, "✕"
        else:
            self.setText("")
            self.setStyleSheet("QLabel { background: transparent; }")
            return
        self.setText(text)
        self.setStyleSheet(
            f"""
            QLabel {{
                background: {color};
                color: white;
                border-radius: 48px;
                font-size: 48px;
                font-weight: 900;
            }}
            """
        )

# ui/components.py
"""
アプリケーション全体で再利用されるカスタムUIコンポーネントを提供します。

- TimerLabel: 残り時間を HH:MM:SS 形式で表示するラベル。
- StatusBadge: 機器チェックの合否を ✓ / ✗ で表示するラベル。
- PlaceholderPanel: エディタの代わりに表示される案内パネル。
"""
from __future__ import annotations
from typing import Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QFrame, QLabel, QVBoxLayout, QWidget

from utils.audio_utils import AudioUtils


class TimerLabel(QLabel):
    """残り時間を表示するラベル。"""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setStyleSheet("font-size: 16pt; color: red; font-weight: bold;")
        self.setToolTip("残り時間")
        self.set_seconds(0)

    def set_seconds(self, seconds: int) -> None:
        self.setText(AudioUtils.format_clock(seconds))


class StatusBadge(QLabel):
    """合格なら緑の ✓、未合格なら灰色の ✗ を表示するラベル。"""

    def __init__(self, label: str, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.label = label
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.set_passed(False)

    def set_passed(self, passed: bool) -> None:
        mark, color = ("✓", "#2e7d32") if passed else ("✗", "#9e9e9e")
        self.setText(f"{mark} {self.label}")
        self.setStyleSheet(f"color: {color}; font-weight: bold; padding: 6px;")


class PlaceholderPanel(QFrame):
    """エディタの代わりに表示される、見出しと本文だけのパネル。"""

    def __init__(self, heading: str, message: str = "", parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setFrameShape(QFrame.Shape.StyledPanel)
        self.setStyleSheet("PlaceholderPanel { background-color: #fafafa; }")

        self.layout_ = QVBoxLayout(self)
        self.layout_.addStretch()
        self.heading_label = QLabel(heading)
        self.heading_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.heading_label.setStyleSheet("font-size: 18pt; font-weight: bold;")
        self.message_label = QLabel(message)
        self.message_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.message_label.setWordWrap(True)
        self.layout_.addWidget(self.heading_label)
        self.layout_.addWidget(self.message_label)

    def set_message(self, message: str) -> None:
        self.message_label.setText(message)

from typing import Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QComboBox, QHBoxLayout, QLabel, QPushButton, QWidget

from models.exam_models import AudioSessionState
from services.audio_gate import AudioGate, PlaybackMode
from ui.components import PlaceholderPanel, TimerLabel


class ListeningPanel(PlaceholderPanel):
    """
    リスニング中にエディタの代わりに表示されるパネル。

    残り時間と、GATEDモードのAudioGateの操作（再生/一時停止・10秒スキップ・再生速度）を表示します。
    """

    def __init__(self, audio_gate: AudioGate, parent: Optional[QWidget] = None) -> None:
        super().__init__("リスニング中", "音声を聞いてください。時間が終了すると答案を入力できるようになります。", parent)
        if audio_gate.mode != PlaybackMode.GATED:
            raise ValueError("ListeningPanel requires a gated AudioGate")
        self.audio_gate = audio_gate

        self.timer_label = TimerLabel()
        self.timer_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.layout_.addWidget(self.timer_label)

        controls = QHBoxLayout()
        controls.addStretch()
        self.back_button = QPushButton("-10秒")
        self.play_button = QPushButton("一時停止")
        self.forward_button = QPushButton("+10秒")
        self.rate_combo = QComboBox()
        for rate in AudioGate.ALLOWED_RATES:
            self.rate_combo.addItem(f"{rate}x", rate)
        for widget in (self.back_button, self.play_button, self.forward_button, QLabel("速度"), self.rate_combo):
            controls.addWidget(widget)
        controls.addStretch()
        self.layout_.addLayout(controls)
        self.layout_.addStretch()

        self.play_button.clicked.connect(self.audio_gate.toggle)
        self.back_button.clicked.connect(self.audio_gate.skip_back)
        self.forward_button.clicked.connect(self.audio_gate.skip_forward)
        self.rate_combo.currentIndexChanged.connect(
            lambda index: self.audio_gate.set_rate(self.rate_combo.itemData(index)))
        self.audio_gate.state_changed.connect(self._on_state_changed)

    def set_remaining(self, seconds: int) -> None:
        self.timer_label.set_seconds(seconds)

    def _on_state_changed(self, state: AudioSessionState) -> None:
        self.play_button.setText("一時停止" if state.is_playing else "再生")
        enabled = not self.audio_gate.revoked
        for widget in (self.play_button, self.back_button, self.forward_button, self.rate_combo):
            widget.setEnabled(enabled)

from typing import Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QFileDialog, QFrame, QHBoxLayout, QLabel, QPushButton, QSlider, QVBoxLayout, QWidget
)

from models.exam_models import AudioSessionState
from services.audio_gate import AudioGate, PlaybackMode
from utils.audio_utils import AudioUtils


class AudioPlayerWidget(QFrame):
    """
    記述中に自由に使える音声プレーヤー。

    AD_HOCモードのAudioGateを操作し、ファイル選択・再生/一時停止・10秒スキップ・
    シークバー・音量スライダーを提供します。
    """
    VOLUME_STEPS = 10

    def __init__(self, audio_gate: AudioGate, parent: Optional[QWidget] = None) -> None:
        """
        AudioPlayerWidgetのコンストラクタ。

        Args:
            audio_gate (AudioGate): AD_HOCモードのAudioGate。
            parent (Optional[QWidget]): 親ウィジェット。
        """
        super().__init__(parent)
        if audio_gate.mode != PlaybackMode.AD_HOC:
            raise ValueError("AudioPlayerWidget requires an ad-hoc AudioGate")
        self.audio_gate = audio_gate
        self._seeking = False
        self.setFrameShape(QFrame.Shape.StyledPanel)

        layout = QVBoxLayout(self)
        title = QLabel("音声プレーヤー")
        title.setStyleSheet("color: #666;")
        layout.addWidget(title)

        self.open_button = QPushButton("音声ファイルを開く...")
        layout.addWidget(self.open_button)

        controls = QHBoxLayout()
        self.back_button = QPushButton("-10秒")
        self.play_button = QPushButton("再生")
        self.forward_button = QPushButton("+10秒")
        for button in (self.back_button, self.play_button, self.forward_button):
            controls.addWidget(button)
        layout.addLayout(controls)

        self.seek_slider = QSlider(Qt.Orientation.Horizontal)
        self.seek_slider.setRange(0, 100)
        layout.addWidget(self.seek_slider)

        time_layout = QHBoxLayout()
        self.position_label = QLabel("0:00")
        self.duration_label = QLabel("0:00")
        time_layout.addWidget(self.position_label)
        time_layout.addStretch()
        time_layout.addWidget(self.duration_label)
        layout.addLayout(time_layout)

        volume_layout = QHBoxLayout()
        volume_layout.addWidget(QLabel("音量"))
        self.volume_slider = QSlider(Qt.Orientation.Horizontal)
        self.volume_slider.setRange(0, self.VOLUME_STEPS)
        self.volume_slider.setValue(self.VOLUME_STEPS)
        volume_layout.addWidget(self.volume_slider)
        layout.addLayout(volume_layout)
        layout.addStretch()

        self.open_button.clicked.connect(self.open_file)
        self.play_button.clicked.connect(self.audio_gate.toggle)
        self.back_button.clicked.connect(self.audio_gate.skip_back)
        self.forward_button.clicked.connect(self.audio_gate.skip_forward)
        self.seek_slider.sliderPressed.connect(lambda: setattr(self, '_seeking', True))
        self.seek_slider.sliderReleased.connect(self._on_seek_released)
        self.volume_slider.valueChanged.connect(
            lambda value: self.audio_gate.set_volume(value / self.VOLUME_STEPS))

        self.audio_gate.state_changed.connect(self._on_state_changed)
        self.audio_gate.transport.duration_changed.connect(self._on_duration_changed)
        self.audio_gate.transport.position_changed.connect(self._on_position_changed)
        self._update_enabled()

    def open_file(self) -> None:
        """ファイルダイアログで音声ファイルを選び、プレーヤーに読み込む。"""
        file_path, _ = QFileDialog.getOpenFileName(
            self, "音声ファイルを開く", "", "Audio Files (*.mp3 *.wav *.ogg *.m4a);;All Files (*)"
        )
        if not file_path:
            return
        self.load(file_path)

    def load(self, source: str) -> None:
        self.audio_gate.configure(source)
        self._update_enabled()

    def _update_enabled(self) -> None:
        has_source = self.audio_gate.transport.has_source()
        for widget in (self.play_button, self.back_button, self.forward_button, self.seek_slider):
            widget.setEnabled(has_source)

    def _on_state_changed(self, state: AudioSessionState) -> None:
        self.play_button.setText("一時停止" if state.is_playing else "再生")
        self._update_enabled()

    def _on_duration_changed(self, seconds: float) -> None:
        self.seek_slider.setRange(0, max(1, int(seconds)))
        self.duration_label.setText(AudioUtils.format_position(seconds))

    def _on_position_changed(self, seconds: float) -> None:
        if not self._seeking:
            self.seek_slider.setValue(int(seconds))
        self.position_label.setText(AudioUtils.format_position(seconds))

    def _on_seek_released(self) -> None:
        self._seeking = False
        self.audio_gate.seek_to(self.seek_slider.value())

# ui/screens/device_test_screen.py
from typing import Dict

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QComboBox, QGroupBox, QHBoxLayout, QLabel, QPlainTextEdit, QProgressBar,
    QPushButton, QVBoxLayout, QWidget
)

from models.exam_models import DeviceTest, ExamPhase, PhaseView
from services.device_readiness import DeviceReadinessTracker
from services.device_test_service import DeviceTestSession
from services.exam_controller import ExamPhaseController
from ui.components import StatusBadge

# キーボードチェックで入力する例文（言語コード, 表示名, 例文）
SAMPLE_TEXTS = (
    ("en", "English", "The quick brown fox jumps over the lazy dog. Type this sentence to test your keyboard."),
    ("mr", "मराठी (Marathi)", "मराठी भाषेतील लेखन चाचणी. हा वाक्य टाइप करून तुमचा कीबोर्ड तपासा."),
    ("hi", "हिंदी (Hindi)", "हिंदी भाषा में लेखन परीक्षा। इस वाक्य को टाइप करके अपना कीबोर्ड जांचें।"),
    ("ta", "தமிழ் (Tamil)",
     "தமிழ் மொழியில் எழுதும் சோதனை. இந்த வாக்கியத்தை தட்டச்சு செய்து உங்கள் விசைப்பலகையை சரிபார்க்கவும்."),
    ("te", "తెలుగు (Telugu)", "తెలుగు భాషలో రాయడం పరీక్ష. ఈ వాక్యాన్ని టైప్ చేసి మీ కీబోర్డ్ను తనిఖీ చేయండి."),
    ("kn", "ಕನ್ನಡ (Kannada)", "ಕನ್ನಡ ಭಾಷೆಯಲ್ಲಿ ಬರೆಯುವ ಪರೀಕ್ಷೆ. ಈ ವಾಕ್ಯವನ್ನು ಟೈಪ್ ಮಾಡಿ ನಿಮ್ಮ ಕೀಬೋರ್ಡ್ ಅನ್ನು ಪರಿಶೀಲಿಸಿ."),
)


class DeviceTestScreen(QWidget):
    """
    機器チェック画面
    - 音声再生チェック
    - マイクチェック（入力レベル表示）
    - キーボードチェック（必要な構成のみ）
    - 結果一覧と「次へ」ボタン
    """

    def __init__(self, controller: ExamPhaseController, session: DeviceTestSession, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.session = session
        self.tracker: DeviceReadinessTracker = controller.tracker
        self.required_tests = controller.config.phases[
            controller.config.index_of(ExamPhase.DEVICE_TEST)].required_tests
        self.setup_ui()
        self.setup_connections()
        self.refresh_results()

    def setup_ui(self):
        layout = QVBoxLayout(self)

        title = QLabel("機器チェック")
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        title.setStyleSheet("font-size: 20pt; font-weight: bold;")
        layout.addWidget(title)

        # 再生チェック
        playback_box = QGroupBox("音声再生チェック")
        playback_layout = QHBoxLayout(playback_box)
        playback_layout.addWidget(QLabel("音声が聞こえることを確認してください。"))
        playback_layout.addStretch()
        self.playback_button = QPushButton("テスト音声を再生")
        playback_layout.addWidget(self.playback_button)
        layout.addWidget(playback_box)

        # マイクチェック
        mic_box = QGroupBox("マイクチェック")
        mic_layout = QVBoxLayout(mic_box)
        mic_row = QHBoxLayout()
        mic_row.addWidget(QLabel("マイクに向かって話し、録音を停止してください。"))
        mic_row.addStretch()
        self.mic_button = QPushButton("録音開始")
        mic_row.addWidget(self.mic_button)
        mic_layout.addLayout(mic_row)
        self.level_bar = QProgressBar()
        self.level_bar.setRange(0, 100)
        self.level_bar.setValue(0)
        self.level_bar.setFormat("入力レベル %p%")
        mic_layout.addWidget(self.level_bar)
        layout.addWidget(mic_box)

        # キーボードチェック
        self.keyboard_box = QGroupBox("キーボードチェック")
        keyboard_layout = QVBoxLayout(self.keyboard_box)
        language_row = QHBoxLayout()
        language_row.addWidget(QLabel("言語:"))
        self.language_combo = QComboBox()
        for code, label, _text in SAMPLE_TEXTS:
            self.language_combo.addItem(label, code)
        language_row.addWidget(self.language_combo)
        language_row.addStretch()
        keyboard_layout.addLayout(language_row)
        self.sample_label = QLabel()
        self.sample_label.setWordWrap(True)
        self.sample_label.setStyleSheet("background-color: #f5f5f5; padding: 6px;")
        keyboard_layout.addWidget(self.sample_label)
        self.keyboard_input = QPlainTextEdit()
        self.keyboard_input.setPlaceholderText("上の文を入力してください...")
        self.keyboard_input.setFixedHeight(80)
        keyboard_layout.addWidget(self.keyboard_input)
        self.progress_label = QLabel(f"進捗: 0/{DeviceReadinessTracker.MIN_KEYBOARD_CHARS} 文字")
        self.progress_label.setStyleSheet("color: #666;")
        keyboard_layout.addWidget(self.progress_label)
        self.keyboard_box.setVisible(DeviceTest.KEYBOARD in self.required_tests)
        layout.addWidget(self.keyboard_box)

        # 結果一覧
        results_layout = QHBoxLayout()
        self.badges: Dict[DeviceTest, StatusBadge] = {}
        labels = {DeviceTest.PLAYBACK: "音声", DeviceTest.MICROPHONE: "マイク", DeviceTest.KEYBOARD: "キーボード"}
        for test, label in labels.items():
            if test not in self.required_tests:
                continue
            badge = StatusBadge(label)
            self.badges[test] = badge
            results_layout.addWidget(badge)
        layout.addLayout(results_layout)

        self.next_button = QPushButton("次へ")
        self.next_button.setMinimumHeight(36)
        layout.addWidget(self.next_button, alignment=Qt.AlignmentFlag.AlignCenter)
        layout.addStretch()

        self.on_language_changed(0)

    def setup_connections(self):
        self.playback_button.clicked.connect(lambda: self.session.toggle_playback())
        self.mic_button.clicked.connect(lambda: self.session.toggle_microphone())
        self.language_combo.currentIndexChanged.connect(self.on_language_changed)
        self.keyboard_input.textChanged.connect(self.on_keyboard_text_changed)
        self.next_button.clicked.connect(lambda: self.controller.advance())

        self.session.playback_changed.connect(self.on_playback_changed)
        self.session.recording_changed.connect(self.on_recording_changed)
        self.session.level_changed.connect(self.level_bar.setValue)
        self.tracker.result_recorded.connect(lambda _test: self.refresh_results())
        self.controller.view_changed.connect(self.on_view_changed)

    def on_language_changed(self, index: int):
        self.sample_label.setText(SAMPLE_TEXTS[index][2])

    def on_keyboard_text_changed(self):
        text = self.keyboard_input.toPlainText()
        self.session.update_keyboard_text(text)
        minimum = DeviceReadinessTracker.MIN_KEYBOARD_CHARS
        if len(text) >= minimum:
            self.progress_label.setText("進捗: ✓ 完了")
        else:
            self.progress_label.setText(f"進捗: {len(text)}/{minimum} 文字")

    def on_playback_changed(self, playing: bool):
        self.playback_button.setText("一時停止" if playing else "テスト音声を再生")

    def on_recording_changed(self, recording: bool):
        self.mic_button.setText("録音停止" if recording else "録音開始")

    def on_view_changed(self, view: PhaseView):
        if view.phase == ExamPhase.DEVICE_TEST:
            self.next_button.setEnabled(view.can_advance)

    def refresh_results(self):
        for test, badge in self.badges.items():
            badge.set_passed(self.tracker.passed(test))
        self.next_button.setEnabled(self.controller.phase == ExamPhase.DEVICE_TEST and self.controller.can_advance())

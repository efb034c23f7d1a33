# ui/screens/writing_screen.py
from typing import Optional

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QStackedWidget, QVBoxLayout, QWidget

from models.document_models import Document
from models.exam_models import ExamPhase, PhaseView, PlaceholderKind
from services.audio_gate import AudioGate
from services.exam_controller import ExamPhaseController
from ui.components import PlaceholderPanel, TimerLabel
from ui.widgets.audio_player import AudioPlayerWidget
from ui.widgets.document_editor import DocumentEditor
from ui.widgets.document_toolbar import DocumentToolbar, FormattingToolbar
from ui.widgets.listening_panel import ListeningPanel
from ui.widgets.text_editor_config import TextEditorConfig


class WritingScreen(QWidget):
    """
    答案作成画面
    - リスニング中・記述中・終了後で共通の画面
    - エディタ部分はフェーズに応じてプレースホルダーに差し替える
    - 文書ツールバー（新規・保存・開く・ダウンロード）と書式ツールバー
    - 右側に自由に使える音声プレーヤー
    """
    submitRequested = pyqtSignal()

    EDITOR_PAGE = 0
    LISTENING_PAGE = 1
    COMPLETED_PAGE = 2

    def __init__(self, controller: ExamPhaseController, player_gate: Optional[AudioGate] = None,
                 editor_config: Optional[TextEditorConfig] = None, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.player_gate = player_gate
        self.editor_config = editor_config or TextEditorConfig()
        self.setup_ui()
        self.setup_connections()

    def setup_ui(self):
        layout = QVBoxLayout(self)

        self.document_toolbar = DocumentToolbar()
        layout.addWidget(self.document_toolbar)

        body_layout = QHBoxLayout()
        editor_column = QVBoxLayout()

        self.editor = DocumentEditor(config=self.editor_config)
        self.formatting_toolbar = FormattingToolbar(self.editor)
        editor_column.addWidget(self.formatting_toolbar)

        self.editor_stack = QStackedWidget()
        self.listening_panel = ListeningPanel(self.controller.audio_gate)
        self.completed_panel = PlaceholderPanel(
            "試験終了", "答案は提出済みです。テキスト形式またはWord形式でダウンロードできます。")
        self.editor_stack.insertWidget(self.EDITOR_PAGE, self.editor)
        self.editor_stack.insertWidget(self.LISTENING_PAGE, self.listening_panel)
        self.editor_stack.insertWidget(self.COMPLETED_PAGE, self.completed_panel)
        editor_column.addWidget(self.editor_stack)
        body_layout.addLayout(editor_column, stretch=3)

        self.player = None
        if self.player_gate is not None:
            self.player = AudioPlayerWidget(self.player_gate)
            self.player.setFixedWidth(260)
            body_layout.addWidget(self.player, alignment=Qt.AlignmentFlag.AlignTop)
        layout.addLayout(body_layout)

        footer = QHBoxLayout()
        self.back_button = QPushButton("戻る")
        footer.addWidget(self.back_button)
        footer.addStretch()
        self.time_caption = QLabel("残り時間:")
        self.timer_label = TimerLabel()
        footer.addWidget(self.time_caption)
        footer.addWidget(self.timer_label)
        footer.addStretch()
        self.submit_button = QPushButton("提出")
        self.submit_button.setMinimumHeight(32)
        footer.addWidget(self.submit_button)
        layout.addLayout(footer)

    def setup_connections(self):
        self.editor.contentModified.connect(self.on_content_modified)
        self.document_toolbar.titleChanged.connect(lambda title: self.controller.update_document(title=title))
        self.back_button.clicked.connect(lambda: self.controller.back())
        self.submit_button.clicked.connect(lambda: self.submitRequested.emit())

        self.controller.view_changed.connect(self.apply_view)
        self.controller.time_changed.connect(self.on_time_changed)
        self.controller.document_changed.connect(self.show_document)

    def on_content_modified(self):
        self.controller.update_document(body=self.editor.get_content(), plain_text=self.editor.get_plain_text())

    def on_time_changed(self, seconds: int):
        self.timer_label.set_seconds(seconds)
        self.listening_panel.set_remaining(seconds)

    def show_document(self, document: Document):
        """文書の内容をエディタとタイトル欄に反映する。"""
        self.editor.set_content(document.body)
        self.document_toolbar.set_title(document.title)
        self.controller.update_document(plain_text=self.editor.get_plain_text())

    def apply_view(self, view: PhaseView):
        """ビュー記述子に従ってエディタ・ツールバー・ボタンの状態を切り替える。"""
        lock = view.editor
        if lock.placeholder == PlaceholderKind.LISTENING:
            self.editor_stack.setCurrentIndex(self.LISTENING_PAGE)
        elif lock.placeholder == PlaceholderKind.COMPLETED:
            self.editor_stack.setCurrentIndex(self.COMPLETED_PAGE)
        else:
            self.editor_stack.setCurrentIndex(self.EDITOR_PAGE)

        self.editor.set_locked(not lock.editable)
        self.formatting_toolbar.setVisible(lock.toolbar_visible)
        self.document_toolbar.set_editing_enabled(lock.editable)

        self.time_caption.setVisible(view.timed)
        self.timer_label.setVisible(view.timed)
        self.timer_label.set_seconds(view.remaining)
        self.listening_panel.set_remaining(view.remaining)

        self.back_button.setVisible(view.can_go_back)
        self.submit_button.setVisible(view.phase == ExamPhase.WRITING)
        self.submit_button.setEnabled(view.can_advance)

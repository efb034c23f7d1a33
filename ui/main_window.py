# ui/main_window.py
from typing import Callable, Dict, Optional

from PyQt6.QtCore import QObject
from PyQt6.QtGui import QCloseEvent
from PyQt6.QtWidgets import QLabel, QMainWindow, QMessageBox, QStackedWidget, QStatusBar, QWidget

from models.exam_models import NOTICE_ERROR, NOTICE_SUCCESS, ExamPhase
from models.session_models import ExamConfig
from services.audio_gate import AudioGate, PlaybackMode
from services.device_readiness import DeviceReadinessTracker
from services.device_test_service import DeviceTestSession
from services.document_service import DocumentService
from services.exam_controller import ExamPhaseController
from services.media_transport import MediaTransport
from services.microphone_service import MicrophoneService
from ui.handlers.document_handler import DocumentHandler
from ui.handlers.export_handler import ExportHandler
from ui.screens.device_test_screen import DeviceTestScreen
from ui.screens.hall_ticket_screen import HallTicketScreen
from ui.screens.writing_screen import WritingScreen

TransportFactory = Callable[[QObject], MediaTransport]


class ExamWindow(QMainWindow):
    """
    試験アプリケーションのメインウィンドウ。

    フェーズごとの画面をQStackedWidgetで切り替え、通知はステータスバーに表示します。
    音声の再生バックエンドとマイクは外部から渡され、ウィンドウ自身はQtMultimediaに依存しません。
    """
    NOTICE_COLORS = {NOTICE_SUCCESS: "#2e7d32", NOTICE_ERROR: "#c62828"}
    NOTICE_TIMEOUT_MS = 5000

    def __init__(self, config: ExamConfig, transport_factory: TransportFactory,
                 microphone_service: MicrophoneService, sample_source: str,
                 document_service: Optional[DocumentService] = None) -> None:
        """
        ExamWindowのコンストラクタ。

        Args:
            config (ExamConfig): 試験設定。
            transport_factory (TransportFactory): 親オブジェクトを受け取りMediaTransportを生成する関数。
            microphone_service (MicrophoneService): マイクチェックに使うサービス。
            sample_source (str): 再生チェック用の音声ファイル。
            document_service (Optional[DocumentService]): 文書の保存・読み込みに使うサービス。
        """
        super().__init__()
        self.setWindowTitle("記述式試験システム")
        self.setGeometry(80, 80, 1280, 860)

        self.tracker = DeviceReadinessTracker(self)
        self.listening_gate = AudioGate(transport_factory(self), PlaybackMode.GATED, self)
        self.player_gate = AudioGate(transport_factory(self), PlaybackMode.AD_HOC, self)
        self.device_gate = AudioGate(transport_factory(self), PlaybackMode.AD_HOC, self)
        self.device_session = DeviceTestSession(
            self.tracker, self.device_gate, microphone_service, sample_source, self)

        config = config.with_actions(ExamPhase.DEVICE_TEST, exit_action=lambda _controller: self.device_session.close())
        self.controller = ExamPhaseController(config, self.listening_gate, self.tracker, parent=self)

        self.document_handler = DocumentHandler(self, document_service)
        self.export_handler = ExportHandler(self)

        self.setup_ui()
        self.setup_connections()
        self.controller.start()

    def setup_ui(self) -> None:
        self.screen_stack = QStackedWidget()
        self.hall_ticket_screen = HallTicketScreen(self.controller)
        self.device_test_screen = DeviceTestScreen(self.controller, self.device_session)
        self.writing_screen = WritingScreen(self.controller, self.player_gate)
        for screen in (self.hall_ticket_screen, self.device_test_screen, self.writing_screen):
            self.screen_stack.addWidget(screen)
        self.setCentralWidget(self.screen_stack)

        self.screens: Dict[ExamPhase, QWidget] = {
            ExamPhase.HALL_TICKET: self.hall_ticket_screen,
            ExamPhase.DEVICE_TEST: self.device_test_screen,
            ExamPhase.LISTENING: self.writing_screen,
            ExamPhase.WRITING: self.writing_screen,
            ExamPhase.ENDED: self.writing_screen,
        }

        self.status_bar = QStatusBar()
        self.phase_label = QLabel()
        self.status_bar.addPermanentWidget(self.phase_label)
        self.setStatusBar(self.status_bar)

    def setup_connections(self) -> None:
        self.controller.phase_changed.connect(self.on_phase_changed)
        self.controller.notice.connect(self.on_controller_notice)
        self.device_session.notice.connect(self.show_notice)
        self.listening_gate.playback_failed.connect(self.on_playback_failed)
        self.player_gate.playback_failed.connect(self.on_playback_failed)

        toolbar = self.writing_screen.document_toolbar
        toolbar.newRequested.connect(self.document_handler.new_document)
        toolbar.saveRequested.connect(self.document_handler.save_document)
        toolbar.openRequested.connect(self.document_handler.load_document)
        toolbar.downloadTextRequested.connect(self.export_handler.save_as_text)
        toolbar.downloadDocxRequested.connect(self.export_handler.save_as_word)
        self.writing_screen.submitRequested.connect(self.confirm_submit)

    def on_phase_changed(self, phase: ExamPhase) -> None:
        self.screen_stack.setCurrentWidget(self.screens[phase])
        labels = {
            ExamPhase.HALL_TICKET: "受験票",
            ExamPhase.DEVICE_TEST: "機器チェック",
            ExamPhase.LISTENING: "リスニング",
            ExamPhase.WRITING: "記述",
            ExamPhase.ENDED: "終了",
        }
        self.phase_label.setText(labels[phase])

    def show_notice(self, kind: str, message: str) -> None:
        """通知をステータスバーに表示する。"""
        color = self.NOTICE_COLORS.get(kind, "black")
        self.status_bar.setStyleSheet(f"QStatusBar {{ color: {color}; }}")
        self.status_bar.showMessage(message.replace("\n", " "), self.NOTICE_TIMEOUT_MS)

    def on_playback_failed(self, message: str) -> None:
        self.show_notice(NOTICE_ERROR, f"音声を再生できません。\n{message}")

    def on_controller_notice(self, kind: str, message: str) -> None:
        """試験終了の通知はステータスバーに加えて、モードレスのメッセージボックスで表示する。"""
        self.show_notice(kind, message)
        if self.controller.phase == ExamPhase.ENDED:
            self.end_message_box = QMessageBox(QMessageBox.Icon.Information, "試験終了", message,
                                               QMessageBox.StandardButton.Ok, self)
            self.end_message_box.setModal(False)
            self.end_message_box.open()

    def confirm_submit(self) -> None:
        if not self.controller.can_advance():
            return
        reply = QMessageBox.question(
            self, "提出の確認", "答案を提出しますか？提出後は編集できません。",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No,
        )
        if reply == QMessageBox.StandardButton.Yes:
            self.controller.advance()

    def closeEvent(self, event: QCloseEvent) -> None:
        """試験中にウィンドウを閉じる場合は確認し、閉じる際はタイマーと音声・マイクを解放する。"""
        if self.controller.started and self.controller.phase != ExamPhase.ENDED:
            reply = QMessageBox.question(
                self, "終了の確認", "試験の途中です。終了してもよろしいですか？\n保存していない答案は失われます。",
                QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
                QMessageBox.StandardButton.No,
            )
            if reply != QMessageBox.StandardButton.Yes:
                event.ignore()
                return
        self.shutdown()
        event.accept()

    def shutdown(self) -> None:
        self.controller.shutdown()
        self.device_session.close()
        self.player_gate.release()

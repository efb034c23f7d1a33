# services/device_test_service.py
from __future__ import annotations
from typing import Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from models.errors import MicrophoneAccessError
from models.exam_models import NOTICE_ERROR, NOTICE_INFO, NOTICE_SUCCESS, DeviceTest
from services.audio_gate import AudioGate
from services.device_readiness import DeviceReadinessTracker
from services.microphone_service import MicrophoneHandle, MicrophoneService


class DeviceTestSession(QObject):
    """
    機器チェック画面の処理を担当するクラス。

    再生チェックはAudioGate（AD_HOCモード）で、マイクチェックはMicrophoneServiceで行い、
    結果をDeviceReadinessTrackerに記録します。失敗はすべて `notice` シグナルで通知され、
    例外として外に出ることはありません。

    Signals:
        notice (pyqtSignal): (種別, メッセージ) を送信する。種別は "info" / "success" / "error"。
        recording_changed (pyqtSignal): マイク録音の開始・停止時に bool を送信する。
        level_changed (pyqtSignal): マイク入力レベル（0〜100）を送信する。
        playback_changed (pyqtSignal): チェック用音声の再生状態を bool で送信する。
    """
    notice = pyqtSignal(str, str)
    recording_changed = pyqtSignal(bool)
    level_changed = pyqtSignal(int)
    playback_changed = pyqtSignal(bool)

    LEVEL_POLL_MS = 100

    def __init__(self, tracker: DeviceReadinessTracker, audio_gate: AudioGate,
                 microphone_service: MicrophoneService, sample_source: str,
                 parent: Optional[QObject] = None) -> None:
        """
        DeviceTestSessionのコンストラクタ。

        Args:
            tracker (DeviceReadinessTracker): 合否を記録するトラッカー。
            audio_gate (AudioGate): 再生チェックに使うAudioGate。
            microphone_service (MicrophoneService): マイク入力の取得に使うサービス。
            sample_source (str): 再生チェック用の音声ファイル。
            parent (Optional[QObject]): 親オブジェクト。
        """
        super().__init__(parent)
        self.tracker = tracker
        self.audio_gate = audio_gate
        self.microphone_service = microphone_service
        self.sample_source = sample_source
        self._microphone: Optional[MicrophoneHandle] = None
        self._playback_pending = False
        self._source_loaded = False

        self._level_timer = QTimer(self)
        self._level_timer.setInterval(self.LEVEL_POLL_MS)
        self._level_timer.timeout.connect(self._poll_level)

        self.audio_gate.playback_started.connect(self._on_playback_started)
        self.audio_gate.playback_failed.connect(self._on_playback_failed)
        self.audio_gate.state_changed.connect(lambda state: self.playback_changed.emit(state.is_playing))

    @property
    def recording(self) -> bool:
        return self._microphone is not None

    # ---------- 再生チェック ----------
    def toggle_playback(self) -> None:
        """チェック用音声の再生と一時停止を切り替える。"""
        if self.audio_gate.is_playing:
            self.audio_gate.pause()
            return
        if not self._source_loaded:
            self.audio_gate.configure(self.sample_source)
            self._source_loaded = True
        self._playback_pending = True
        if not self.audio_gate.play():
            self._playback_pending = False
            self.notice.emit(NOTICE_ERROR, "音声を再生できません。")

    def _on_playback_started(self) -> None:
        if not self._playback_pending:
            return
        self._playback_pending = False
        if self.tracker.record_result(DeviceTest.PLAYBACK, True):
            self.notice.emit(NOTICE_SUCCESS, "音声再生チェックに合格しました。")

    def _on_playback_failed(self, message: str) -> None:
        self._playback_pending = False
        self.notice.emit(NOTICE_ERROR, f"音声を再生できません。\n{message}")

    # ---------- マイクチェック ----------
    def toggle_microphone(self) -> bool:
        """
        マイクチェックを開始または停止する。停止した時点でマイクチェックは合格となる。

        Returns:
            bool: 操作後に録音中であればTrue。
        """
        if self._microphone is not None:
            self._release_microphone()
            if self.tracker.record_result(DeviceTest.MICROPHONE, True):
                self.notice.emit(NOTICE_SUCCESS, "マイクチェックに合格しました。")
            return False

        try:
            self._microphone = self.microphone_service.acquire()
        except MicrophoneAccessError as e:
            print(f"マイクの取得に失敗しました: {e}")
            self.notice.emit(NOTICE_ERROR, f"マイクへのアクセスが拒否されました。\n{e}")
            return False

        self._level_timer.start()
        self.recording_changed.emit(True)
        self.notice.emit(NOTICE_INFO, "マイクに向かって話してください。")
        return True

    def _poll_level(self) -> None:
        if self._microphone is not None:
            self.level_changed.emit(self._microphone.level())

    def _release_microphone(self) -> None:
        handle, self._microphone = self._microphone, None
        self._level_timer.stop()
        if handle is not None:
            handle.release()
            self.recording_changed.emit(False)
            self.level_changed.emit(0)

    # ---------- キーボードチェック ----------
    def update_keyboard_text(self, text: str) -> None:
        """キーボードチェック欄の入力内容を評価する。"""
        if self.tracker.record_keyboard_input(text):
            self.notice.emit(NOTICE_SUCCESS, "キーボードチェックに合格しました。")

    def close(self) -> None:
        """保持しているマイクと再生ハンドルを解放する。機器チェックフェーズの終了時に呼ぶ。"""
        self._release_microphone()
        self._playback_pending = False
        self.audio_gate.release()
        self._source_loaded = False

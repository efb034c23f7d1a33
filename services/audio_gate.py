# services/audio_gate.py
from __future__ import annotations
from enum import Enum
from typing import Optional

from PyQt6.QtCore import QObject, pyqtSignal

from models.exam_models import AudioSessionState
from services.media_transport import MediaTransport


class PlaybackMode(str, Enum):
    """AudioGateの動作モード。

    GATED: リスニングフェーズ用。再生速度は1/2/3倍のみ、タイマー満了で強制停止される。
    AD_HOC: 自由に使える再生プレーヤー用。音量と再生位置を連続値で操作できる。
    """
    GATED = "gated"
    AD_HOC = "ad_hoc"


class AudioGate(QObject):
    """
    音声再生ハンドルを所有し、再生状態（AudioSessionState）を管理するクラス。

    再生の開始はトランスポート側で非同期に完了するため、失敗（自動再生の拒否や
    不正なソースなど）は例外ではなく `playback_failed` シグナルで通知します。
    GATEDモードでは revoke() 以降、再生を再開できません。

    Signals:
        state_changed (pyqtSignal): 再生状態が変わった時に AudioSessionState を送信する。
        playback_started (pyqtSignal): トランスポートが実際に再生を開始した時に送信する。
        playback_failed (pyqtSignal): 再生に失敗した時にエラーメッセージ（str）を送信する。
    """
    state_changed = pyqtSignal(object)
    playback_started = pyqtSignal()
    playback_failed = pyqtSignal(str)

    ALLOWED_RATES = (1, 2, 3)
    SKIP_SECONDS = 10

    def __init__(self, transport: MediaTransport, mode: PlaybackMode = PlaybackMode.AD_HOC,
                 parent: Optional[QObject] = None) -> None:
        """
        AudioGateのコンストラクタ。

        Args:
            transport (MediaTransport): 実際の再生を行うバックエンド。
            mode (PlaybackMode): 動作モード。
            parent (Optional[QObject]): 親オブジェクト。
        """
        super().__init__(parent)
        self.transport = transport
        self.mode = mode
        self._is_playing = False
        self._rate = 1
        self._volume = 1.0
        self._revoked = False
        self.transport.playing_changed.connect(self._on_transport_playing_changed)
        self.transport.error_occurred.connect(self._on_transport_error)

    @property
    def is_playing(self) -> bool:
        return self._is_playing

    @property
    def revoked(self) -> bool:
        return self._revoked

    @property
    def volume(self) -> float:
        return self._volume

    def state(self) -> AudioSessionState:
        """現在の再生状態のスナップショットを返す。"""
        position = self.transport.position() if self.transport.has_source() else 0.0
        return AudioSessionState(is_playing=self._is_playing, playback_rate=self._rate, position=position)

    def configure(self, source: str, loop: bool = False, autoplay: bool = False) -> None:
        """
        再生する音声ソースを設定する。

        Args:
            source (str): 音声ファイルのパスまたはURL。
            loop (bool): 繰り返し再生するかどうか。
            autoplay (bool): 設定直後に再生を開始するかどうか。
        """
        if self._revoked:
            return
        if self._is_playing:
            self.transport.pause()
            self._is_playing = False
        self.transport.set_source(source)
        self.transport.set_looping(loop)
        self.transport.set_playback_rate(float(self._rate))
        self.transport.set_volume(self._volume)
        self._emit_state()
        if autoplay:
            self.play()

    def play(self) -> bool:
        """
        再生を開始する。

        Returns:
            bool: 再生を要求できた場合はTrue。ソース未設定や停止済みの場合はFalse。
        """
        if self._revoked or not self.transport.has_source():
            return False
        self._is_playing = True
        self._emit_state()
        self.transport.play()
        return True

    def pause(self) -> None:
        """再生を一時停止する。"""
        if self.transport.has_source():
            self.transport.pause()
        if self._is_playing:
            self._is_playing = False
            self._emit_state()

    def toggle(self) -> bool:
        """再生と一時停止を切り替え、切り替え後に再生中かどうかを返す。"""
        if self._is_playing:
            self.pause()
        else:
            self.play()
        return self._is_playing

    def force_pause(self) -> None:
        """ユーザーの操作に関わらず再生を停止する。タイマー満了時に使う。"""
        self.pause()

    def revoke(self) -> None:
        """再生を停止し、以後の再生要求をすべて無視する。"""
        self.force_pause()
        self._revoked = True

    def seek_by(self, delta_seconds: float) -> float:
        """
        再生位置を相対的に移動する。移動後の位置は0以上、長さが判明していればその長さ以下に収める。

        Args:
            delta_seconds (float): 移動量（秒）。負の値で巻き戻し。

        Returns:
            float: 移動後の再生位置（秒）。
        """
        if not self.transport.has_source():
            return 0.0
        return self._set_position(self.transport.position() + delta_seconds)

    def skip_forward(self) -> float:
        return self.seek_by(self.SKIP_SECONDS)

    def skip_back(self) -> float:
        return self.seek_by(-self.SKIP_SECONDS)

    def seek_to(self, seconds: float) -> float:
        """再生位置を絶対値で指定する。AD_HOCモード専用。"""
        self._require_mode(PlaybackMode.AD_HOC, "seek_to")
        if not self.transport.has_source():
            return 0.0
        return self._set_position(seconds)

    def set_rate(self, multiplier: int) -> None:
        """
        再生速度を設定する。GATEDモード専用。

        Args:
            multiplier (int): 1, 2, 3 のいずれか。

        Raises:
            ValueError: 許可されていない倍率、またはAD_HOCモードで呼ばれた場合。
        """
        self._require_mode(PlaybackMode.GATED, "set_rate")
        if multiplier not in self.ALLOWED_RATES:
            raise ValueError(f"playback rate must be one of {self.ALLOWED_RATES}: {multiplier}")
        self._rate = int(multiplier)
        self.transport.set_playback_rate(float(self._rate))
        self._emit_state()

    def set_volume(self, volume: float) -> None:
        """音量を0.0〜1.0の範囲で設定する。AD_HOCモード専用。"""
        self._require_mode(PlaybackMode.AD_HOC, "set_volume")
        self._volume = min(1.0, max(0.0, float(volume)))
        self.transport.set_volume(self._volume)

    def release(self) -> None:
        """再生を停止してソースを解放する。別のフェーズへ再生ハンドルを引き渡す前に呼ぶ。"""
        self.pause()
        if self.transport.has_source():
            self.transport.clear_source()
        self._emit_state()

    def _set_position(self, seconds: float) -> float:
        position = max(0.0, float(seconds))
        duration = self.transport.duration()
        if duration is not None:
            position = min(position, duration)
        self.transport.set_position(position)
        self._emit_state()
        return position

    def _require_mode(self, mode: PlaybackMode, operation: str) -> None:
        if self.mode != mode:
            raise ValueError(f"{operation} is only available in {mode.value} mode")

    def _emit_state(self) -> None:
        self.state_changed.emit(self.state())

    def _on_transport_playing_changed(self, playing: bool) -> None:
        """トランスポートの実際の再生状態を反映する内部スロット。"""
        if playing and self._revoked:
            # 停止済みのゲートで再生が始まってしまった場合は止め直す
            self.transport.pause()
            return
        changed = playing != self._is_playing
        self._is_playing = playing
        if playing:
            self.playback_started.emit()
        if changed:
            self._emit_state()

    def _on_transport_error(self, message: str) -> None:
        """再生エラーを処理する内部スロット。状態を停止に戻し、失敗を通知する。"""
        print(f"音声の再生に失敗しました: {message}")
        if self._is_playing:
            self._is_playing = False
            self._emit_state()
        self.playback_failed.emit(message)

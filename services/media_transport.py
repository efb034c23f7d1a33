# services/media_transport.py
"""音声再生バックエンド（トランスポート）の共通インターフェースを定義します。

AudioGateはこのインターフェースだけに依存します。実際の再生はQMediaPlayerを使う
services.qt_media.QtMediaTransportが担当し、テストでは偽の実装に差し替えます。
"""
from typing import Optional

from PyQt6.QtCore import QObject, pyqtSignal


class MediaTransport(QObject):
    """
    音声再生バックエンドの基底クラス。

    再生開始や停止は非同期に完了するため、結果はシグナルで通知されます。

    Signals:
        playing_changed (pyqtSignal): 実際の再生状態が変わった時に bool を送信する。
        error_occurred (pyqtSignal): 再生に失敗した時にエラーメッセージ（str）を送信する。
        duration_changed (pyqtSignal): 音声の長さ（秒, float）が判明した時に送信する。
        position_changed (pyqtSignal): 再生位置（秒, float）が変わった時に送信する。
    """
    playing_changed = pyqtSignal(bool)
    error_occurred = pyqtSignal(str)
    duration_changed = pyqtSignal(float)
    position_changed = pyqtSignal(float)

    def set_source(self, source: str) -> None:
        raise NotImplementedError

    def clear_source(self) -> None:
        raise NotImplementedError

    def has_source(self) -> bool:
        raise NotImplementedError

    def play(self) -> None:
        raise NotImplementedError

    def pause(self) -> None:
        raise NotImplementedError

    def position(self) -> float:
        raise NotImplementedError

    def set_position(self, seconds: float) -> None:
        raise NotImplementedError

    def duration(self) -> Optional[float]:
        """音声の長さ（秒）。まだ判明していない場合はNone。"""
        raise NotImplementedError

    def set_playback_rate(self, rate: float) -> None:
        raise NotImplementedError

    def set_volume(self, volume: float) -> None:
        raise NotImplementedError

    def set_looping(self, loop: bool) -> None:
        raise NotImplementedError

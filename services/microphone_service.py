# services/microphone_service.py
"""マイク入力の取得と解放を扱うインターフェースを定義します。

マイクはハードウェア資源なので、取得したハンドルは必ず release() で解放します。
ハンドルはコンテキストマネージャとしても使えます。

    with service.acquire() as handle:
        level = handle.level()
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional


class MicrophoneHandle(ABC):
    """取得済みのマイク入力ストリームを所有するハンドルの抽象クラス（ABC）。"""

    def __init__(self) -> None:
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    @abstractmethod
    def level(self) -> int:
        """現在の入力レベルを0〜100で返す。"""

    def release(self) -> None:
        """ストリームを停止してデバイスを解放する。複数回呼んでも安全。"""
        if self._released:
            return
        self._released = True
        self._stop()

    @abstractmethod
    def _stop(self) -> None:
        """デバイス固有の停止処理。release() から一度だけ呼ばれる。"""

    def __enter__(self) -> MicrophoneHandle:
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.release()
        return None


class MicrophoneService(ABC):
    """マイク入力を取得するサービスの抽象クラス（ABC）。"""

    @abstractmethod
    def acquire(self) -> MicrophoneHandle:
        """
        マイク入力を取得する。

        Returns:
            MicrophoneHandle: 取得したストリームのハンドル。

        Raises:
            MicrophoneAccessError: アクセスが拒否された、またはデバイスが見つからない場合。
        """

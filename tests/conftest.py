import os
import sys
from typing import List, Optional

# ヘッドレス環境でQtウィジェットを生成できるようにする
os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest
from PyQt6.QtWidgets import QApplication

from models.errors import MicrophoneAccessError
from services.media_transport import MediaTransport
from services.microphone_service import MicrophoneHandle, MicrophoneService


@pytest.fixture(scope='session', autouse=True)
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


class FakeTransport(MediaTransport):
    """
    同期的に再生状態を通知する偽の再生バックエンド。

    fail_message が設定されていると、play() で再生エラーを通知する。
    """

    def __init__(self, duration: Optional[float] = 60.0, fail_message: Optional[str] = None, parent=None):
        super().__init__(parent)
        self.source: Optional[str] = None
        self.playing = False
        self._position = 0.0
        self._duration = duration
        self.fail_message = fail_message
        self.rate = 1.0
        self.volume = 1.0
        self.looping = False
        self.play_calls = 0

    def set_source(self, source):
        self.source = source
        self._position = 0.0

    def clear_source(self):
        self.source = None
        self.playing = False

    def has_source(self):
        return self.source is not None

    def play(self):
        self.play_calls += 1
        if self.fail_message:
            self.error_occurred.emit(self.fail_message)
            return
        self.playing = True
        self.playing_changed.emit(True)

    def pause(self):
        if self.playing:
            self.playing = False
            self.playing_changed.emit(False)

    def position(self):
        return self._position

    def set_position(self, seconds):
        self._position = seconds
        self.position_changed.emit(seconds)

    def duration(self):
        return self._duration

    def set_playback_rate(self, rate):
        self.rate = rate

    def set_volume(self, volume):
        self.volume = volume

    def set_looping(self, loop):
        self.looping = loop


class FakeMicrophoneHandle(MicrophoneHandle):
    def __init__(self, level: int = 42):
        super().__init__()
        self._level = level
        self.stop_calls = 0

    def level(self):
        return 0 if self.released else self._level

    def _stop(self):
        self.stop_calls += 1


class FakeMicrophoneService(MicrophoneService):
    """deny=True の場合はアクセス拒否を再現する偽のマイクサービス。"""

    def __init__(self, deny: bool = False):
        self.deny = deny
        self.handles: List[FakeMicrophoneHandle] = []
        self.attempts = 0

    def acquire(self):
        self.attempts += 1
        if self.deny:
            raise MicrophoneAccessError("Permission denied")
        handle = FakeMicrophoneHandle()
        self.handles.append(handle)
        return handle


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def microphone_service():
    return FakeMicrophoneService()

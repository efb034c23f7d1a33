# services/qt_media.py
"""Qt Multimediaを使った音声再生・マイク入力の実装を提供します。

- QtMediaTransport: QMediaPlayer + QAudioOutput による再生バックエンド。
- QtMicrophoneService: QMediaDevices + QAudioSource によるマイク入力の取得。
"""
from __future__ import annotations
import os
from typing import Optional

from PyQt6.QtCore import QObject, QUrl, QIODevice
from PyQt6.QtMultimedia import (
    QAudio, QAudioFormat, QAudioOutput, QAudioSource, QMediaDevices, QMediaPlayer
)

from models.errors import MicrophoneAccessError
from services.media_transport import MediaTransport
from services.microphone_service import MicrophoneHandle, MicrophoneService
from utils.audio_utils import AudioUtils


def _to_url(source: str) -> QUrl:
    """ファイルパスまたはURL文字列をQUrlに変換する。"""
    if os.path.exists(source):
        return QUrl.fromLocalFile(os.path.abspath(source))
    return QUrl(source)


class QtMediaTransport(MediaTransport):
    """
    QMediaPlayerを使った再生バックエンド。

    QMediaPlayerの再生状態とエラーをMediaTransportのシグナルに変換して通知します。
    位置と長さはミリ秒から秒に換算して扱います。
    """

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.player = QMediaPlayer(self)
        self.audio_output = QAudioOutput(self)
        self.player.setAudioOutput(self.audio_output)
        self._has_source = False

        self.player.playbackStateChanged.connect(self._on_playback_state_changed)
        self.player.errorOccurred.connect(self._on_error)
        self.player.durationChanged.connect(lambda ms: self.duration_changed.emit(ms / 1000.0))
        self.player.positionChanged.connect(lambda ms: self.position_changed.emit(ms / 1000.0))

    def set_source(self, source: str) -> None:
        self.player.setSource(_to_url(source))
        self._has_source = True

    def clear_source(self) -> None:
        self.player.stop()
        self.player.setSource(QUrl())
        self._has_source = False

    def has_source(self) -> bool:
        return self._has_source

    def play(self) -> None:
        self.player.play()

    def pause(self) -> None:
        self.player.pause()

    def position(self) -> float:
        return self.player.position() / 1000.0

    def set_position(self, seconds: float) -> None:
        self.player.setPosition(int(seconds * 1000))

    def duration(self) -> Optional[float]:
        ms = self.player.duration()
        return ms / 1000.0 if ms > 0 else None

    def set_playback_rate(self, rate: float) -> None:
        self.player.setPlaybackRate(rate)

    def set_volume(self, volume: float) -> None:
        self.audio_output.setVolume(volume)

    def set_looping(self, loop: bool) -> None:
        # QMediaPlayer::Infinite == -1, QMediaPlayer::Once == 1
        self.player.setLoops(-1 if loop else 1)

    def _on_playback_state_changed(self, state: QMediaPlayer.PlaybackState) -> None:
        self.playing_changed.emit(state == QMediaPlayer.PlaybackState.PlayingState)

    def _on_error(self, error: QMediaPlayer.Error, message: str) -> None:
        if error != QMediaPlayer.Error.NoError:
            self.error_occurred.emit(message or str(error))


class QtMicrophoneHandle(MicrophoneHandle):
    """QAudioSourceで取得したマイク入力ストリーム。"""

    def __init__(self, source: QAudioSource, device: QIODevice) -> None:
        super().__init__()
        self._source = source
        self._device = device
        self._level = 0
        self._device.readyRead.connect(self._on_ready_read)

    def level(self) -> int:
        return 0 if self.released else self._level

    def _on_ready_read(self) -> None:
        data = self._device.readAll().data()
        if data:
            self._level = AudioUtils.input_level(data)

    def _stop(self) -> None:
        self._device.readyRead.disconnect(self._on_ready_read)
        self._source.stop()
        self._level = 0


class QtMicrophoneService(MicrophoneService):
    """既定の入力デバイスからマイク入力を取得するサービス。"""
    SAMPLE_RATE = 16000

    def acquire(self) -> MicrophoneHandle:
        device_info = QMediaDevices.defaultAudioInput()
        if device_info.isNull():
            raise MicrophoneAccessError("マイクが見つかりません。")

        audio_format = QAudioFormat()
        audio_format.setSampleRate(self.SAMPLE_RATE)
        audio_format.setChannelCount(1)
        audio_format.setSampleFormat(QAudioFormat.SampleFormat.Int16)
        if not device_info.isFormatSupported(audio_format):
            raise MicrophoneAccessError("マイクが対応していない入力形式です。")

        source = QAudioSource(device_info, audio_format)
        device = source.start()
        if device is None or source.error() != QAudio.Error.NoError:
            source.stop()
            raise MicrophoneAccessError("マイクへのアクセスが拒否されました。")
        return QtMicrophoneHandle(source, device)

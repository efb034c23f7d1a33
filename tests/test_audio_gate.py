import pytest

from conftest import FakeTransport
from services.audio_gate import AudioGate, PlaybackMode


def _gated(transport):
    return AudioGate(transport, PlaybackMode.GATED)


def test_play_without_source_is_rejected(transport):
    gate = AudioGate(transport)
    assert gate.play() is False
    assert not gate.is_playing


def test_configure_with_autoplay_starts_playback(transport):
    """autoplay付きで設定すると再生が始まり、再生開始が通知される。"""
    gate = _gated(transport)
    started = []
    gate.playback_started.connect(lambda: started.append(True))

    gate.configure("listening.mp3", autoplay=True)

    assert transport.source == "listening.mp3"
    assert gate.is_playing
    assert started == [True]


def test_toggle_pauses_and_resumes(transport):
    gate = AudioGate(transport)
    gate.configure("sample.wav")
    assert gate.toggle() is True
    assert gate.toggle() is False
    assert not transport.playing


def test_revoke_blocks_further_playback(transport):
    """revoke() 後は再生要求がすべて無視される。"""
    gate = _gated(transport)
    gate.configure("listening.mp3", autoplay=True)

    gate.revoke()

    assert gate.revoked
    assert not gate.is_playing
    assert gate.play() is False
    assert not transport.playing


def test_transport_starting_after_revoke_is_paused_again(transport):
    gate = _gated(transport)
    gate.configure("listening.mp3")
    gate.revoke()

    transport.playing = True
    transport.playing_changed.emit(True)

    assert not transport.playing
    assert not gate.is_playing


def test_rate_is_limited_to_allowed_values(transport):
    gate = _gated(transport)
    gate.configure("listening.mp3")
    gate.set_rate(2)
    assert gate.state().playback_rate == 2
    assert transport.rate == 2.0

    with pytest.raises(ValueError):
        gate.set_rate(4)
    assert gate.state().playback_rate == 2


def test_rate_and_volume_depend_on_mode(transport):
    """再生速度はGATED専用、音量と絶対シークはAD_HOC専用。"""
    with pytest.raises(ValueError):
        AudioGate(FakeTransport()).set_rate(2)
    with pytest.raises(ValueError):
        _gated(transport).set_volume(0.5)
    with pytest.raises(ValueError):
        _gated(transport).seek_to(5)


def test_skip_is_clamped_to_media_bounds():
    transport = FakeTransport(duration=25.0)
    gate = AudioGate(transport)
    gate.configure("sample.wav")

    assert gate.skip_back() == 0.0
    assert gate.skip_forward() == 10.0
    assert gate.skip_forward() == 20.0
    assert gate.skip_forward() == 25.0


def test_volume_is_clamped(transport):
    gate = AudioGate(transport)
    gate.set_volume(1.7)
    assert gate.volume == 1.0
    gate.set_volume(-0.2)
    assert transport.volume == 0.0


def test_transport_error_reports_failure():
    """再生エラーは例外にならず、playback_failedで通知される。"""
    transport = FakeTransport(fail_message="NotAllowedError")
    gate = AudioGate(transport)
    failures = []
    gate.playback_failed.connect(failures.append)
    gate.configure("sample.wav")

    gate.play()

    assert failures == ["NotAllowedError"]
    assert not gate.is_playing


def test_release_clears_source(transport):
    gate = AudioGate(transport)
    gate.configure("sample.wav", autoplay=True)
    gate.release()
    assert not transport.has_source()
    assert not gate.is_playing

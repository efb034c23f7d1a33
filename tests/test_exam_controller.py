from conftest import FakeTransport
from models.document_models import Document
from models.exam_models import NOTICE_INFO, DeviceTest, ExamPhase, PlaceholderKind
from models.session_models import direct_writing_config, listening_config
from services.audio_gate import AudioGate, PlaybackMode
from services.exam_controller import ExamPhaseController


def _controller(config):
    transport = FakeTransport()
    gate = AudioGate(transport, PlaybackMode.GATED)
    controller = ExamPhaseController(config, gate)
    notices = []
    controller.notice.connect(lambda kind, message: notices.append((kind, message)))
    return controller, transport, notices


def _pass_tests(controller, tests):
    for test in tests:
        controller.tracker.record_result(test, True)


def _tick(controller, times):
    for _ in range(times):
        controller.timer._on_timeout()


def _to_device_test(controller):
    controller.start()
    assert controller.advance()
    assert controller.phase == ExamPhase.DEVICE_TEST


def test_listening_expiry_moves_to_writing():
    """4秒のリスニングが満了すると記述へ移り、残り時間0・再生停止となる。"""
    controller, transport, _notices = _controller(listening_config("listening.mp3", listening_seconds=4))
    _to_device_test(controller)
    _pass_tests(controller, [DeviceTest.PLAYBACK, DeviceTest.MICROPHONE])
    controller.advance()

    assert controller.phase == ExamPhase.LISTENING
    assert controller.audio_gate.is_playing
    assert transport.source == "listening.mp3"
    assert controller.view().editor.placeholder == PlaceholderKind.LISTENING

    times = []
    controller.time_changed.connect(times.append)
    _tick(controller, 4)

    assert controller.phase == ExamPhase.WRITING
    assert controller.remaining_seconds == 0
    assert not controller.audio_gate.is_playing
    assert controller.audio_gate.play() is False
    assert times[:4] == [3, 2, 1, 0]


def test_listening_expiry_while_paused_moves_to_writing():
    """一時停止中にリスニングが満了しても、記述へ移り残り時間0・再生不可となる。"""
    controller, transport, _notices = _controller(listening_config("listening.mp3", listening_seconds=4))
    _to_device_test(controller)
    _pass_tests(controller, [DeviceTest.PLAYBACK, DeviceTest.MICROPHONE])
    controller.advance()

    _tick(controller, 3)
    controller.audio_gate.pause()
    assert not controller.audio_gate.is_playing
    assert controller.phase == ExamPhase.LISTENING

    _tick(controller, 1)

    assert controller.phase == ExamPhase.WRITING
    assert controller.remaining_seconds == 0
    assert not controller.audio_gate.is_playing
    assert not transport.playing
    assert controller.audio_gate.play() is False


def test_listening_cannot_be_skipped_or_revisited():
    controller, _transport, _notices = _controller(listening_config("listening.mp3", listening_seconds=4))
    _to_device_test(controller)
    _pass_tests(controller, [DeviceTest.PLAYBACK, DeviceTest.MICROPHONE])
    controller.advance()

    assert controller.can_advance() is False
    assert controller.advance() is False
    _tick(controller, 4)
    assert controller.can_go_back() is False
    assert controller.back() is False


def test_device_test_gate_blocks_until_required_tests_pass():
    """必要なチェックが揃うまで「次へ」は何もしない。"""
    controller, _transport, _notices = _controller(direct_writing_config())
    _to_device_test(controller)

    _pass_tests(controller, [DeviceTest.PLAYBACK, DeviceTest.MICROPHONE])
    assert controller.can_advance() is False
    assert controller.advance() is False
    assert controller.phase == ExamPhase.DEVICE_TEST

    controller.tracker.record_keyboard_input("0123456789")
    assert controller.advance() is True
    assert controller.phase == ExamPhase.WRITING


def test_basic_config_does_not_require_keyboard():
    controller, _transport, _notices = _controller(listening_config())
    _to_device_test(controller)
    _pass_tests(controller, [DeviceTest.PLAYBACK, DeviceTest.MICROPHONE])
    assert controller.can_advance()


def test_timed_writing_expires_to_ended_with_single_notice():
    controller, _transport, notices = _controller(direct_writing_config(writing_seconds=3))
    _to_device_test(controller)
    _pass_tests(controller, list(DeviceTest))
    controller.advance()

    assert controller.remaining_seconds == 3
    assert controller.timer_active
    _tick(controller, 3)
    _tick(controller, 2)

    assert controller.phase == ExamPhase.ENDED
    assert notices == [(NOTICE_INFO, "試験時間が終了しました。")]
    assert controller.view().editor.placeholder == PlaceholderKind.COMPLETED


def test_untimed_writing_is_submitted_manually():
    controller, _transport, notices = _controller(listening_config(listening_seconds=1))
    _to_device_test(controller)
    _pass_tests(controller, list(DeviceTest))
    controller.advance()
    _tick(controller, 1)

    assert controller.phase == ExamPhase.WRITING
    assert not controller.spec.timed
    assert not controller.timer_active
    assert controller.advance() is True
    assert controller.advance() is False

    assert controller.phase == ExamPhase.ENDED
    assert notices == [(NOTICE_INFO, "答案を提出しました。")]


def test_ended_is_irreversible():
    """終了後は進む・戻る・文書の変更がすべて無効になる。"""
    controller, _transport, _notices = _controller(direct_writing_config(writing_seconds=2))
    _to_device_test(controller)
    _pass_tests(controller, list(DeviceTest))
    controller.advance()
    controller.update_document(title="Essay", body="<p>draft</p>", plain_text="draft")
    _tick(controller, 2)

    assert controller.phase == ExamPhase.ENDED
    assert controller.advance() is False
    assert controller.back() is False
    assert controller.update_document(body="changed") is False
    assert controller.replace_document(Document()) is False
    assert controller.document.plain_text == "draft"


def test_back_preserves_remaining_time():
    """記述から戻って再び入ると、残り時間の続きからカウントダウンする。"""
    controller, _transport, _notices = _controller(direct_writing_config(writing_seconds=10))
    _to_device_test(controller)
    _pass_tests(controller, list(DeviceTest))
    controller.advance()
    _tick(controller, 3)

    assert controller.can_go_back()
    assert controller.back() is True
    assert controller.phase == ExamPhase.DEVICE_TEST
    assert not controller.timer_active
    _tick(controller, 5)

    controller.advance()
    assert controller.phase == ExamPhase.WRITING
    assert controller.remaining_seconds == 7


def test_stale_timer_callbacks_are_ignored():
    """フェーズが変わった後に古いタイマーのコールバックが届いても何も起きない。"""
    controller, _transport, _notices = _controller(direct_writing_config(writing_seconds=10))
    _to_device_test(controller)
    _pass_tests(controller, list(DeviceTest))
    controller.advance()
    stale_token = controller.phase_token

    controller.back()
    controller._on_tick(stale_token, 1)
    controller._on_expire(stale_token)

    assert controller.phase == ExamPhase.DEVICE_TEST
    assert controller.remaining_seconds == 0


def test_document_only_editable_while_writing():
    controller, _transport, _notices = _controller(direct_writing_config())
    controller.start()
    assert controller.update_document(title="Essay") is False

    controller.advance()
    _pass_tests(controller, list(DeviceTest))
    controller.advance()
    changed = []
    controller.document_changed.connect(changed.append)

    assert controller.update_document(title="Essay", plain_text="hello") is True
    replacement = Document(title="Loaded", body="<p>x</p>")
    assert controller.replace_document(replacement) is True
    assert changed == [replacement]


def test_exit_action_runs_when_leaving_phase():
    calls = []
    config = direct_writing_config().with_actions(
        ExamPhase.DEVICE_TEST, exit_action=lambda c: calls.append(c.phase))
    controller, _transport, _notices = _controller(config)
    _to_device_test(controller)
    _pass_tests(controller, list(DeviceTest))
    controller.advance()
    assert calls == [ExamPhase.DEVICE_TEST]


def test_start_is_idempotent_and_emits_view():
    controller, _transport, _notices = _controller(direct_writing_config())
    phases = []
    controller.phase_changed.connect(phases.append)
    controller.start()
    controller.start()
    assert phases == [ExamPhase.HALL_TICKET]
    assert controller.view().can_advance


def test_shutdown_stops_timer_and_audio():
    controller, transport, _notices = _controller(listening_config("listening.mp3", listening_seconds=30))
    _to_device_test(controller)
    _pass_tests(controller, list(DeviceTest))
    controller.advance()

    controller.shutdown()
    _tick(controller, 30)

    assert controller.phase == ExamPhase.LISTENING
    assert not transport.playing
    assert not controller.timer_active

from conftest import FakeMicrophoneService, FakeTransport
from models.exam_models import DeviceTest, ExamPhase
from models.session_models import ExamConfig, direct_writing_config, listening_config
from services.document_service import DocumentService
from services.storage_service import StorageService
from ui.main_window import ExamWindow


def _window(tmp_path, config, transport_factory=None, microphone_service=None):
    return ExamWindow(
        config,
        transport_factory=transport_factory or (lambda parent: FakeTransport(parent=parent)),
        microphone_service=microphone_service or FakeMicrophoneService(),
        sample_source="tone.wav",
        document_service=DocumentService(StorageService(str(tmp_path))),
    )


def _to_writing(window):
    window.hall_ticket_screen.next_button.click()
    for test in DeviceTest:
        window.tracker.record_result(test, True)
    window.device_test_screen.next_button.click()


def test_window_starts_on_hall_ticket(tmp_path):
    window = _window(tmp_path, direct_writing_config())
    assert window.screen_stack.currentWidget() is window.hall_ticket_screen
    assert window.hall_ticket_screen.value_labels["受験番号"].text() == "EX2024001"
    window.shutdown()


def test_device_test_next_button_follows_readiness(tmp_path):
    """必要なチェックがすべて合格するまで「次へ」ボタンは無効。"""
    window = _window(tmp_path, direct_writing_config())
    window.hall_ticket_screen.next_button.click()
    screen = window.device_test_screen
    assert window.screen_stack.currentWidget() is screen
    assert not screen.next_button.isEnabled()
    assert not screen.keyboard_box.isHidden()

    screen.playback_button.click()
    screen.mic_button.click()
    screen.mic_button.click()
    assert not screen.next_button.isEnabled()

    screen.keyboard_input.setPlainText("0123456789")
    assert screen.progress_label.text() == "進捗: ✓ 完了"
    assert screen.next_button.isEnabled()
    window.shutdown()


def test_keyboard_check_hidden_for_basic_tests(tmp_path):
    window = _window(tmp_path, listening_config())
    assert window.device_test_screen.keyboard_box.isHidden()
    window.shutdown()


def test_writing_screen_tracks_document_and_locks_on_end(tmp_path):
    window = _window(tmp_path, direct_writing_config(writing_seconds=2))
    _to_writing(window)
    screen = window.writing_screen
    assert window.controller.phase == ExamPhase.WRITING
    assert screen.editor_stack.currentIndex() == screen.EDITOR_PAGE
    assert not screen.editor.isReadOnly()

    screen.editor.setPlainText("first line\nsecond line")
    assert window.controller.document.plain_text == "first line\nsecond line"

    for _ in range(2):
        window.controller.timer._on_timeout()

    assert window.controller.phase == ExamPhase.ENDED
    assert screen.editor_stack.currentIndex() == screen.COMPLETED_PAGE
    assert screen.editor.isReadOnly()
    assert screen.formatting_toolbar.isHidden()
    assert screen.submit_button.isHidden()
    window.shutdown()


def test_listening_panel_replaces_editor(tmp_path):
    window = _window(tmp_path, listening_config("listening.mp3", listening_seconds=5))
    _to_writing(window)
    screen = window.writing_screen
    assert window.controller.phase == ExamPhase.LISTENING
    assert screen.editor_stack.currentIndex() == screen.LISTENING_PAGE
    assert screen.listening_panel.timer_label.text() == "00:00:05"
    window.shutdown()


def test_saved_document_is_loaded_into_editor(tmp_path):
    window = _window(tmp_path, direct_writing_config())
    _to_writing(window)
    window.controller.update_document(title="Essay", body="<p>saved body</p>", plain_text="saved body")
    window.document_handler.save_document()

    window.controller.replace_document(window.document_handler.document_service.new_document())
    assert window.writing_screen.editor.get_plain_text() == ""

    window.document_handler.load_document()
    assert window.writing_screen.editor.get_plain_text() == "saved body"
    assert window.writing_screen.document_toolbar.title_edit.text() == "Essay"
    assert window.controller.document.plain_text == "saved body"
    window.shutdown()


def test_window_builds_from_loaded_listening_config(tmp_path):
    """設定ファイル相当の辞書から作った設定で、ウィンドウを生成してリスニングまで進める。"""
    config = ExamConfig.from_dict({
        "listening_source": "listening.mp3",
        "phases": [
            {"phase": "hall_ticket"},
            {"phase": "device_test", "required_tests": ["playback", "microphone"]},
            {"phase": "listening", "timer_seconds": 60},
            {"phase": "writing"},
            {"phase": "ended"},
        ],
    })
    window = _window(tmp_path, config)
    _to_writing(window)
    assert window.controller.phase == ExamPhase.LISTENING
    window.shutdown()


def test_listening_playback_failure_is_shown_in_status_bar(tmp_path):
    """リスニング音声の自動再生が拒否された場合、ステータスバーに通知する。"""
    window = _window(tmp_path, listening_config("listening.mp3"),
                     transport_factory=lambda parent: FakeTransport(fail_message="autoplay rejected", parent=parent))
    _to_writing(window)

    assert window.controller.phase == ExamPhase.LISTENING
    assert "autoplay rejected" in window.status_bar.currentMessage()
    window.shutdown()


def test_player_playback_failure_is_shown_in_status_bar(tmp_path):
    window = _window(tmp_path, direct_writing_config(),
                     transport_factory=lambda parent: FakeTransport(fail_message="unsupported format", parent=parent))
    window.player_gate.configure("sample.mp3")
    window.player_gate.play()

    assert "unsupported format" in window.status_bar.currentMessage()
    window.shutdown()


def test_leaving_device_test_releases_microphone(tmp_path):
    """録音中のまま機器チェックを終えても、フェーズ遷移時にマイクが解放される。"""
    service = FakeMicrophoneService()
    window = _window(tmp_path, direct_writing_config(), microphone_service=service)
    window.hall_ticket_screen.next_button.click()
    window.device_test_screen.mic_button.click()
    assert window.device_session.recording
    handle = service.handles[0]
    assert not handle.released

    for test in DeviceTest:
        window.tracker.record_result(test, True)
    assert window.controller.advance()

    assert window.controller.phase == ExamPhase.WRITING
    assert handle.released
    assert handle.stop_calls == 1
    assert not window.device_session.recording
    window.shutdown()

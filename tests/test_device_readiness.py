from models.exam_models import DeviceTest
from services.device_readiness import DeviceReadinessTracker


def test_keyboard_requires_ten_characters():
    """9文字では不合格のまま、10文字で合格になる。"""
    tracker = DeviceReadinessTracker()
    tracker.record_keyboard_input("a" * 9)
    assert tracker.passed(DeviceTest.KEYBOARD) is False

    tracker.record_keyboard_input("a" * 10)
    assert tracker.passed(DeviceTest.KEYBOARD) is True


def test_keyboard_counts_non_latin_characters():
    tracker = DeviceReadinessTracker()
    assert tracker.record_keyboard_input("मराठी भाषेतील") is True


def test_pass_is_never_reverted():
    """一度合格したチェックは、その後の失敗で不合格に戻らない。"""
    tracker = DeviceReadinessTracker()
    tracker.record_result(DeviceTest.MICROPHONE, True)
    tracker.record_result(DeviceTest.MICROPHONE, False)
    tracker.record_keyboard_input("0123456789")
    tracker.record_keyboard_input("")

    assert tracker.passed(DeviceTest.MICROPHONE)
    assert tracker.passed(DeviceTest.KEYBOARD)


def test_result_recorded_emitted_only_on_new_pass():
    tracker = DeviceReadinessTracker()
    recorded = []
    tracker.result_recorded.connect(recorded.append)

    assert tracker.record_result(DeviceTest.PLAYBACK, True) is True
    assert tracker.record_result(DeviceTest.PLAYBACK, True) is False
    assert recorded == [DeviceTest.PLAYBACK]


def test_all_passed_respects_required_subset():
    tracker = DeviceReadinessTracker()
    tracker.record_result(DeviceTest.PLAYBACK, True)
    tracker.record_result(DeviceTest.MICROPHONE, True)

    assert tracker.all_passed([DeviceTest.PLAYBACK, DeviceTest.MICROPHONE])
    assert not tracker.all_passed()
    assert tracker.results() == {
        DeviceTest.PLAYBACK: True,
        DeviceTest.MICROPHONE: True,
        DeviceTest.KEYBOARD: False,
    }

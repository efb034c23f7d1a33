import pytest

from utils.countdown_timer import CountdownTimer


def _drive(timer, times):
    for _ in range(times):
        timer._on_timeout()


def test_ticks_down_and_expires_once():
    """4秒のカウントダウンで 3,2,1,0 が通知され、満了は1回だけ呼ばれる。"""
    timer = CountdownTimer()
    ticks, expired = [], []
    handle = timer.start(4, on_tick=ticks.append, on_expire=lambda: expired.append(True))

    _drive(timer, 4)
    assert ticks == [3, 2, 1, 0]
    assert expired == [True]
    assert not handle.active
    assert not timer.is_active()

    _drive(timer, 3)
    assert ticks == [3, 2, 1, 0]
    assert expired == [True]


def test_cancel_stops_further_ticks():
    """cancel() した後はtickも満了も発生しない。"""
    timer = CountdownTimer()
    ticks, expired = [], []
    handle = timer.start(5, on_tick=ticks.append, on_expire=lambda: expired.append(True))
    _drive(timer, 2)
    handle.cancel()
    _drive(timer, 5)

    assert ticks == [4, 3]
    assert expired == []
    assert handle.remaining == 3


def test_restart_replaces_previous_run():
    """start() を再度呼ぶと前のランは停止され、古いハンドルのcancelは新しいランに影響しない。"""
    timer = CountdownTimer()
    first_ticks, second_ticks = [], []
    first = timer.start(10, on_tick=first_ticks.append)
    _drive(timer, 1)
    second = timer.start(3, on_tick=second_ticks.append)

    assert not first.active
    first.cancel()
    assert second.active

    _drive(timer, 2)
    assert first_ticks == [9]
    assert second_ticks == [2, 1]
    assert timer.remaining() == 1
    assert second.run_id != first.run_id


def test_zero_duration_expires_on_first_timeout():
    timer = CountdownTimer()
    ticks, expired = [], []
    timer.start(0, on_tick=ticks.append, on_expire=lambda: expired.append(True))
    _drive(timer, 1)
    assert ticks == []
    assert expired == [True]


def test_negative_duration_is_rejected():
    with pytest.raises(ValueError):
        CountdownTimer().start(-1)

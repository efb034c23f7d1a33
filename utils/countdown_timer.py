# utils/countdown_timer.py
"""1秒ごとに残り時間を減らしていくカウントダウンタイマーを提供します。

QTimerを内部に持ち、start() ごとに1回分のカウントダウン（ラン）を管理します。
start() はそのランを所有するCountdownHandleを返し、呼び出し側はフェーズ終了時に
handle.cancel() で明示的に停止します。
"""
from __future__ import annotations
from typing import Callable, Optional

from PyQt6.QtCore import QObject, QTimer

TickCallback = Callable[[int], None]
ExpireCallback = Callable[[], None]


class _CountdownRun:
    """1回分のカウントダウンの状態。"""

    def __init__(self, run_id: int, remaining: int,
                 on_tick: Optional[TickCallback], on_expire: Optional[ExpireCallback]) -> None:
        self.run_id = run_id
        self.remaining = remaining
        self.on_tick = on_tick
        self.on_expire = on_expire
        self.active = True
        self.expired = False


class CountdownHandle:
    """start() が返す、1回分のカウントダウンを所有するハンドル。"""

    def __init__(self, timer: CountdownTimer, run: _CountdownRun) -> None:
        self._timer = timer
        self._run = run

    @property
    def run_id(self) -> int:
        return self._run.run_id

    @property
    def remaining(self) -> int:
        return self._run.remaining

    @property
    def active(self) -> bool:
        return self._run.active

    def cancel(self) -> None:
        """このランを停止する。既に別のランに置き換わっている場合は何もしない。"""
        self._timer._cancel(self._run)


class CountdownTimer(QObject):
    """
    指定秒数から0まで1秒ごとにカウントダウンするタイマー。

    on_tick には減算後の残り秒数（N-1, N-2, ..., 0）が渡され、0に達した時点で
    カウントダウンは停止し、on_expire がちょうど1回だけ呼ばれます。
    start() を再度呼ぶと、前のランは暗黙的に停止されます。
    """
    TICK_INTERVAL_MS = 1000

    def __init__(self, parent: Optional[QObject] = None) -> None:
        """
        CountdownTimerのコンストラクタ。

        Args:
            parent (Optional[QObject]): 親オブジェクト。
        """
        super().__init__(parent)
        self._qtimer = QTimer(self)
        self._qtimer.setInterval(self.TICK_INTERVAL_MS)
        self._qtimer.timeout.connect(self._on_timeout)
        self._run: Optional[_CountdownRun] = None
        self._next_run_id = 0

    def start(self, duration_seconds: int,
              on_tick: Optional[TickCallback] = None,
              on_expire: Optional[ExpireCallback] = None) -> CountdownHandle:
        """
        カウントダウンを開始する。

        Args:
            duration_seconds (int): カウントダウンする秒数。
            on_tick (Optional[TickCallback]): 1秒ごとに減算後の残り秒数を受け取るコールバック。
            on_expire (Optional[ExpireCallback]): 残り時間が0になった時に1回だけ呼ばれるコールバック。

        Returns:
            CountdownHandle: このランを所有するハンドル。

        Raises:
            ValueError: duration_secondsが負の値の場合。
        """
        if duration_seconds < 0:
            raise ValueError("duration_seconds must be >= 0")
        self.stop()
        self._next_run_id += 1
        run = _CountdownRun(self._next_run_id, int(duration_seconds), on_tick, on_expire)
        self._run = run
        self._qtimer.start()
        return CountdownHandle(self, run)

    def stop(self) -> None:
        """現在のランを停止し、以降のtickを発生させない。"""
        if self._run is not None:
            self._run.active = False
            self._run = None
        if self._qtimer.isActive():
            self._qtimer.stop()

    def is_active(self) -> bool:
        return self._run is not None and self._run.active

    def remaining(self) -> int:
        return self._run.remaining if self._run is not None else 0

    def _cancel(self, run: _CountdownRun) -> None:
        run.active = False
        if self._run is run:
            self.stop()

    def _on_timeout(self) -> None:
        """QTimerのtimeoutを処理する内部スロット。"""
        run = self._run
        if run is None or not run.active:
            if self._qtimer.isActive():
                self._qtimer.stop()
            return

        if run.remaining > 0:
            run.remaining -= 1
            if run.on_tick is not None:
                run.on_tick(run.remaining)
            # on_tick の中で停止・再開された場合はこのランの処理を打ち切る
            if not run.active or self._run is not run:
                return

        if run.remaining == 0 and not run.expired:
            run.expired = True
            run.active = False
            self._run = None
            self._qtimer.stop()
            if run.on_expire is not None:
                run.on_expire()

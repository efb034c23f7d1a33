# services/exam_controller.py
"""
試験の進行（フェーズ遷移）を管理する状態機械を提供します。

受験票 → 機器チェック → （リスニング） → 記述 → 終了 の各フェーズを、
ExamConfigのフェーズ列に従って順に進めます。リスニングの有無や記述の時間制限は
フェーズ列の設定で切り替え、別々の状態機械は持ちません。

フェーズが切り替わるたびにフェーズトークンを更新し、タイマーのコールバックは
登録時のトークンと一致する場合にのみ処理されます。これにより、前のフェーズの
タイマーが新しいフェーズに対して満了処理を行うことはありません。
"""
from __future__ import annotations
from functools import partial
from typing import Dict, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from models.document_models import Document
from models.exam_models import NOTICE_INFO, ExamPhase, PhaseSpec, PhaseView, TimerState
from models.session_models import ExamConfig
from services.audio_gate import AudioGate
from services.device_readiness import DeviceReadinessTracker
from utils.countdown_timer import CountdownHandle, CountdownTimer
from utils.phase_utils import build_phase_view


class ExamPhaseController(QObject):
    """
    試験フェーズの状態機械。

    Signals:
        phase_changed (pyqtSignal): フェーズが切り替わった時に ExamPhase を送信する。
        time_changed (pyqtSignal): 残り時間（秒, int）が変わった時に送信する。
        view_changed (pyqtSignal): 画面の状態が変わった時に PhaseView を送信する。
        notice (pyqtSignal): ユーザーに表示する (種別, メッセージ) を送信する。
        document_changed (pyqtSignal): 文書全体が差し替えられた時に Document を送信する。
    """
    phase_changed = pyqtSignal(object)
    time_changed = pyqtSignal(int)
    view_changed = pyqtSignal(object)
    notice = pyqtSignal(str, str)
    document_changed = pyqtSignal(object)

    def __init__(self, config: ExamConfig, audio_gate: AudioGate,
                 tracker: Optional[DeviceReadinessTracker] = None,
                 timer: Optional[CountdownTimer] = None,
                 parent: Optional[QObject] = None) -> None:
        """
        ExamPhaseControllerのコンストラクタ。

        Args:
            config (ExamConfig): フェーズ列を含む試験設定。
            audio_gate (AudioGate): リスニングに使うAudioGate（GATEDモード）。
            tracker (Optional[DeviceReadinessTracker]): 機器チェックの合否トラッカー。
            timer (Optional[CountdownTimer]): フェーズタイマー。
            parent (Optional[QObject]): 親オブジェクト。
        """
        super().__init__(parent)
        self.config = config
        self.audio_gate = audio_gate
        self.tracker = tracker or DeviceReadinessTracker(self)
        self.timer = timer or CountdownTimer(self)
        self.document = Document()

        self._index = 0
        self._started = False
        self._phase_token = 0
        self._timer_handle: Optional[CountdownHandle] = None
        self._timer_state = TimerState()
        self._saved_remaining: Dict[int, int] = {}
        self._transitioning = False
        self._completion_notified = False

        self.tracker.result_recorded.connect(lambda _test: self._emit_view())

    # ---------- 状態の参照 ----------
    @property
    def phase(self) -> ExamPhase:
        return self.spec.phase

    @property
    def spec(self) -> PhaseSpec:
        return self.config.phases[self._index]

    @property
    def started(self) -> bool:
        return self._started

    @property
    def remaining_seconds(self) -> int:
        return self._timer_state.remaining

    @property
    def timer_active(self) -> bool:
        return self._timer_state.active

    @property
    def phase_token(self) -> int:
        return self._phase_token

    def timer_state(self) -> TimerState:
        return TimerState(remaining=self._timer_state.remaining, active=self._timer_state.active)

    def view(self) -> PhaseView:
        """現在のフェーズのビュー記述子を返す。"""
        return build_phase_view(
            self.phase,
            remaining=self._timer_state.remaining,
            timed=self.spec.timed,
            can_advance=self.can_advance(),
            can_go_back=self.can_go_back(),
        )

    # ---------- 遷移 ----------
    def start(self) -> None:
        """フェーズ列の最初のフェーズからセッションを開始する。2回目以降の呼び出しは無視される。"""
        if self._started:
            return
        self._started = True
        self._enter(0)

    def can_advance(self) -> bool:
        """「次へ」「提出」操作で次のフェーズへ進めるかどうかを返す。"""
        if not self._started or self.phase == ExamPhase.ENDED:
            return False
        spec = self.spec
        if not spec.manual_advance:
            return False
        if spec.phase == ExamPhase.DEVICE_TEST:
            return self.tracker.all_passed(spec.required_tests)
        return True

    def advance(self) -> bool:
        """
        次のフェーズへ進む。進めない状態で呼ばれた場合は何もしない。

        Returns:
            bool: 遷移した場合はTrue。
        """
        if not self.can_advance():
            return False
        next_index = self._index + 1
        if not self._transition_to(next_index):
            return False
        if self.phase == ExamPhase.ENDED:
            self._notify_completion("答案を提出しました。")
        return True

    def can_go_back(self) -> bool:
        """直前のフェーズへ戻れるかどうかを返す。終了後やリスニングへ戻る遷移は存在しない。"""
        if not self._started or self.phase == ExamPhase.ENDED or self._index == 0:
            return False
        if not self.spec.allow_back:
            return False
        return self.config.phases[self._index - 1].phase != ExamPhase.LISTENING

    def back(self) -> bool:
        """
        直前のフェーズへ戻る。時間制限付きのフェーズから戻った場合、残り時間は保持され、
        再び入った時に続きからカウントダウンする。

        Returns:
            bool: 遷移した場合はTrue。
        """
        if not self.can_go_back():
            return False
        if self.spec.timed:
            self._saved_remaining[self._index] = self._timer_state.remaining
        return self._transition_to(self._index - 1)

    def shutdown(self) -> None:
        """タイマーと再生を停止する。ウィンドウを閉じる時に呼ぶ。"""
        self._cancel_timer()
        self._phase_token += 1
        self.audio_gate.release()

    def _transition_to(self, index: int) -> bool:
        if self._transitioning:
            return False
        self._transitioning = True
        try:
            self._exit_current()
            self._enter(index)
        finally:
            self._transitioning = False
        return True

    def _exit_current(self) -> None:
        spec = self.spec
        self._cancel_timer()
        self._phase_token += 1
        if spec.phase == ExamPhase.LISTENING:
            self._timer_state.remaining = 0
            self.audio_gate.revoke()
        if spec.exit_action is not None:
            spec.exit_action(self)

    def _enter(self, index: int) -> None:
        self._index = index
        spec = self.spec
        self._phase_token += 1
        token = self._phase_token

        remaining = self._saved_remaining.pop(index, spec.timer_seconds) if spec.timed else 0
        self._timer_state = TimerState(remaining=remaining, active=False)

        if spec.phase == ExamPhase.LISTENING and self.config.listening_source:
            self.audio_gate.configure(self.config.listening_source, autoplay=True)
        if spec.entry_action is not None:
            spec.entry_action(self)
        if spec.timed:
            self._timer_handle = self.timer.start(
                remaining,
                on_tick=partial(self._on_tick, token),
                on_expire=partial(self._on_expire, token),
            )
            self._timer_state.active = True

        self.phase_changed.emit(spec.phase)
        self.time_changed.emit(self._timer_state.remaining)
        self._emit_view()

    def _cancel_timer(self) -> None:
        if self._timer_handle is not None:
            self._timer_handle.cancel()
            self._timer_handle = None
        self._timer_state.active = False

    def _on_tick(self, token: int, remaining: int) -> None:
        if token != self._phase_token:
            return
        self._timer_state.remaining = max(0, remaining)
        self.time_changed.emit(self._timer_state.remaining)

    def _on_expire(self, token: int) -> None:
        if token != self._phase_token:
            return
        self._timer_handle = None
        self._timer_state = TimerState(remaining=0, active=False)
        if self.phase == ExamPhase.LISTENING:
            self.audio_gate.force_pause()
        self.time_changed.emit(0)

        next_index = self._index + 1
        if next_index >= len(self.config.phases):
            return
        # 通知は遷移の完了後に行う
        if self._transition_to(next_index) and self.phase == ExamPhase.ENDED:
            self._notify_completion("試験時間が終了しました。")

    def _notify_completion(self, message: str) -> None:
        if self._completion_notified:
            return
        self._completion_notified = True
        self.notice.emit(NOTICE_INFO, message)

    def _emit_view(self) -> None:
        if self._started:
            self.view_changed.emit(self.view())

    # ---------- 文書 ----------
    @property
    def document_editable(self) -> bool:
        return self._started and self.phase == ExamPhase.WRITING

    def update_document(self, title: Optional[str] = None, body: Optional[str] = None,
                        plain_text: Optional[str] = None) -> bool:
        """
        記述中の文書を更新する。記述フェーズ以外（特に終了後）は変更を受け付けない。

        Returns:
            bool: 更新した場合はTrue。
        """
        if not self.document_editable:
            return False
        if title is not None:
            self.document.title = title
        if body is not None:
            self.document.body = body
        if plain_text is not None:
            self.document.plain_text = plain_text
        return True

    def replace_document(self, document: Document) -> bool:
        """文書全体を差し替える（新規作成・読み込み時）。記述フェーズ以外では何もしない。"""
        if not self.document_editable:
            return False
        self.document = document
        self.document_changed.emit(document)
        return True

# models/exam_models.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, FrozenSet, Optional

if TYPE_CHECKING:
    from services.exam_controller import ExamPhaseController


class ExamPhase(str, Enum):
    """試験セッションの段階（フェーズ）。常にいずれか一つだけが有効となる。"""
    HALL_TICKET = "hall_ticket"
    DEVICE_TEST = "device_test"
    LISTENING = "listening"
    WRITING = "writing"
    ENDED = "ended"


class DeviceTest(str, Enum):
    """機器チェックの種類。"""
    PLAYBACK = "playback"
    MICROPHONE = "microphone"
    KEYBOARD = "keyboard"


class PlaceholderKind(str, Enum):
    """エディタの代わりに表示するプレースホルダーの種類。"""
    LISTENING = "listening"
    COMPLETED = "completed"


PhaseAction = Callable[["ExamPhaseController"], None]


@dataclass(frozen=True)
class PhaseSpec:
    """フェーズ列を構成する1フェーズ分の設定。

    Attributes:
        phase (ExamPhase): 対象フェーズ。
        timer_seconds (Optional[int]): フェーズの制限時間（秒）。Noneの場合は時間制限なし。
        required_tests (FrozenSet[DeviceTest]): 次へ進むために合格が必要な機器チェック（DEVICE_TESTのみ）。
        allow_back (bool): 直前のフェーズへ戻る操作を許可するかどうか。
        manual_advance (bool): 「次へ」「提出」などの明示的な操作で進めるかどうか。
        entry_action (Optional[PhaseAction]): フェーズ開始時に呼ばれる追加処理。
        exit_action (Optional[PhaseAction]): フェーズ終了時に呼ばれる追加処理。
    """
    phase: ExamPhase
    timer_seconds: Optional[int] = None
    required_tests: FrozenSet[DeviceTest] = frozenset()
    allow_back: bool = False
    manual_advance: bool = True
    entry_action: Optional[PhaseAction] = field(default=None, compare=False)
    exit_action: Optional[PhaseAction] = field(default=None, compare=False)

    @property
    def timed(self) -> bool:
        return self.timer_seconds is not None


@dataclass
class TimerState:
    """フェーズタイマーの状態。

    Attributes:
        remaining (int): 残り時間（秒）。0未満になることはない。
        active (bool): カウントダウン中かどうか。
    """
    remaining: int = 0
    active: bool = False


@dataclass
class AudioSessionState:
    """音声再生の状態。AudioGateだけが更新する。

    Attributes:
        is_playing (bool): 再生中かどうか。
        playback_rate (int): 再生速度（1, 2, 3倍のいずれか）。
        position (float): 再生位置（秒）。
    """
    is_playing: bool = False
    playback_rate: int = 1
    position: float = 0.0


@dataclass(frozen=True)
class EditorLock:
    """フェーズから導出されるエディタの表示・編集状態。

    Attributes:
        editable (bool): 本文を編集できるかどうか。
        toolbar_visible (bool): 書式ツールバーを表示するかどうか。
        placeholder (Optional[PlaceholderKind]): エディタの代わりに表示するプレースホルダー。
    """
    editable: bool
    toolbar_visible: bool
    placeholder: Optional[PlaceholderKind] = None


@dataclass(frozen=True)
class PhaseView:
    """画面描画用のビュー記述子。状態遷移ロジックと画面表示を切り離すために使う。

    Attributes:
        phase (ExamPhase): 表示対象のフェーズ。
        editor (EditorLock): エディタのロック状態。
        remaining (int): 表示する残り時間（秒）。
        timed (bool): 残り時間を表示するかどうか。
        can_advance (bool): 「次へ」「提出」ボタンを有効にするかどうか。
        can_go_back (bool): 「戻る」ボタンを表示するかどうか。
    """
    phase: ExamPhase
    editor: EditorLock
    remaining: int = 0
    timed: bool = False
    can_advance: bool = False
    can_go_back: bool = False


# ユーザー通知の種別
NOTICE_INFO = "info"
NOTICE_SUCCESS = "success"
NOTICE_ERROR = "error"

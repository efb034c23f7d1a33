# utils/phase_utils.py
"""フェーズから画面の状態を導出する純粋関数を提供します。"""
from typing import Dict

from models.exam_models import EditorLock, ExamPhase, PhaseView, PlaceholderKind

_EDITOR_LOCKS: Dict[ExamPhase, EditorLock] = {
    ExamPhase.HALL_TICKET: EditorLock(editable=False, toolbar_visible=False),
    ExamPhase.DEVICE_TEST: EditorLock(editable=False, toolbar_visible=False),
    ExamPhase.LISTENING: EditorLock(editable=False, toolbar_visible=False,
                                    placeholder=PlaceholderKind.LISTENING),
    ExamPhase.WRITING: EditorLock(editable=True, toolbar_visible=True),
    ExamPhase.ENDED: EditorLock(editable=False, toolbar_visible=False,
                                placeholder=PlaceholderKind.COMPLETED),
}


def editor_lock_for(phase: ExamPhase) -> EditorLock:
    """
    フェーズに対応するエディタのロック状態を返す。

    リスニング中と終了後はエディタそのものをプレースホルダーに差し替え、
    記述中のみ編集と書式ツールバーを有効にする。

    Args:
        phase (ExamPhase): 対象フェーズ。

    Returns:
        EditorLock: エディタのロック状態。
    """
    return _EDITOR_LOCKS[ExamPhase(phase)]


def build_phase_view(phase: ExamPhase, remaining: int = 0, timed: bool = False,
                     can_advance: bool = False, can_go_back: bool = False) -> PhaseView:
    """フェーズと付随情報から画面描画用のビュー記述子を組み立てる。"""
    return PhaseView(
        phase=phase,
        editor=editor_lock_for(phase),
        remaining=max(0, remaining),
        timed=timed,
        can_advance=can_advance,
        can_go_back=can_go_back,
    )

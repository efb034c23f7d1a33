# models/session_models.py
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from models.errors import ConfigError
from models.exam_models import DeviceTest, ExamPhase, PhaseAction, PhaseSpec

LISTENING_SECONDS = 240
DEFAULT_WRITING_SECONDS = 60 * 60

BASIC_TESTS = frozenset({DeviceTest.PLAYBACK, DeviceTest.MICROPHONE})
FULL_TESTS = frozenset({DeviceTest.PLAYBACK, DeviceTest.MICROPHONE, DeviceTest.KEYBOARD})

# フェーズ列はこの順序でのみ並べられる（リスニングのみ省略可能）
PHASE_ORDER = {
    ExamPhase.HALL_TICKET: 0,
    ExamPhase.DEVICE_TEST: 1,
    ExamPhase.LISTENING: 2,
    ExamPhase.WRITING: 3,
    ExamPhase.ENDED: 4,
}
REQUIRED_PHASES = (ExamPhase.HALL_TICKET, ExamPhase.DEVICE_TEST, ExamPhase.WRITING, ExamPhase.ENDED)


@dataclass
class HallTicketData:
    """受験票に表示する受験者情報を表現するデータモデル。

    Attributes:
        name (str): 受験者氏名。
        roll_number (str): 受験番号。
        exam_date (str): 試験日。
        exam_time (str): 試験開始時刻。
        exam_center (str): 試験会場。
        subject (str): 試験科目。
        instructions (List[str]): 注意事項。
    """
    name: str = "राज कुमार शर्मा"
    roll_number: str = "EX2024001"
    exam_date: str = "२५ डिसेंबर २०२४"
    exam_time: str = "सकाळी १० वाजता"
    exam_center: str = "मुंबई परीक्षा केंद्र"
    subject: str = "मराठी भाषा परीक्षा"
    instructions: List[str] = field(default_factory=lambda: [
        "試験開始30分前までに入室してください。",
        "有効な身分証明書を持参してください。",
    ])


@dataclass
class ExamConfig:
    """試験セッション全体の設定。

    フェーズ列（PhaseSpecのリスト）が状態遷移の形を決めます。
    リスニングの有無やキーボードチェックの有無は、別々のコードではなく
    このフェーズ列の違いとして表現します。

    Attributes:
        phases (List[PhaseSpec]): 順序付きのフェーズ列。HALL_TICKET → DEVICE_TEST → (LISTENING) → WRITING → ENDED の順。
        listening_source (Optional[str]): リスニング用音声のパスまたはURL。
        hall_ticket (HallTicketData): 受験票データ。
    """
    phases: List[PhaseSpec]
    listening_source: Optional[str] = None
    hall_ticket: HallTicketData = field(default_factory=HallTicketData)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """
        フェーズ列の整合性を検証する。

        受験票・機器チェック・記述・終了は必須で各1回、リスニングは任意で、
        この順（リスニングは機器チェックと記述の間）に並んでいる必要がある。

        Raises:
            ConfigError: フェーズ列や制限時間が不正な場合。
        """
        if not self.phases:
            raise ConfigError("フェーズ列が空です。")
        if self.phases[0].phase != ExamPhase.HALL_TICKET:
            raise ConfigError("フェーズ列は受験票（hall_ticket）で始まる必要があります。")
        if self.phases[-1].phase != ExamPhase.ENDED:
            raise ConfigError("フェーズ列は終了（ended）で終わる必要があります。")

        seen = set()
        previous_rank = -1
        for spec in self.phases:
            if spec.phase in seen:
                raise ConfigError(f"フェーズ {spec.phase.value} が重複しています。")
            seen.add(spec.phase)
            rank = PHASE_ORDER[spec.phase]
            if rank < previous_rank:
                raise ConfigError(
                    f"フェーズ {spec.phase.value} の位置が不正です。"
                    "受験票・機器チェック・リスニング・記述・終了の順に並べてください。")
            previous_rank = rank
            if spec.timer_seconds is not None and (
                    not isinstance(spec.timer_seconds, int) or isinstance(spec.timer_seconds, bool)):
                raise ConfigError(f"フェーズ {spec.phase.value} の制限時間は整数の秒数で指定してください。")
            if spec.timer_seconds is not None and spec.timer_seconds <= 0:
                raise ConfigError(f"フェーズ {spec.phase.value} の制限時間は正の整数で指定してください。")
            if spec.phase == ExamPhase.LISTENING and spec.timer_seconds is None:
                raise ConfigError("リスニングフェーズには制限時間が必要です。")
            if spec.phase == ExamPhase.ENDED and spec.timer_seconds is not None:
                raise ConfigError("終了フェーズに制限時間は設定できません。")
            if spec.required_tests and spec.phase != ExamPhase.DEVICE_TEST:
                raise ConfigError("required_testsは機器チェックフェーズにのみ指定できます。")

        for phase in REQUIRED_PHASES:
            if phase not in seen:
                raise ConfigError(f"フェーズ {phase.value} がありません。")

    def index_of(self, phase: ExamPhase) -> int:
        for index, spec in enumerate(self.phases):
            if spec.phase == phase:
                return index
        raise ConfigError(f"フェーズ {phase.value} はこの設定に含まれていません。")

    def has_phase(self, phase: ExamPhase) -> bool:
        return any(spec.phase == phase for spec in self.phases)

    def with_actions(
        self,
        phase: ExamPhase,
        entry_action: Optional[PhaseAction] = None,
        exit_action: Optional[PhaseAction] = None,
    ) -> "ExamConfig":
        """指定フェーズに開始時・終了時の追加処理を設定した新しい設定を返す。

        Args:
            phase (ExamPhase): 対象フェーズ。
            entry_action (Optional[PhaseAction]): フェーズ開始時の処理。
            exit_action (Optional[PhaseAction]): フェーズ終了時の処理。

        Returns:
            ExamConfig: 処理が設定された設定オブジェクト。
        """
        index = self.index_of(phase)
        phases = list(self.phases)
        phases[index] = replace(phases[index], entry_action=entry_action, exit_action=exit_action)
        return replace(self, phases=phases)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExamConfig":
        """JSONなどから読み込んだ辞書を設定オブジェクトへ変換する。

        Args:
            data (Dict[str, Any]): "phases"キーにフェーズ定義のリストを持つ辞書。

        Returns:
            ExamConfig: 検証済みの設定オブジェクト。

        Raises:
            ConfigError: フェーズ名や機器チェック名、制限時間、受験票の項目が不正な場合。
        """
        raw_phases = data.get("phases")
        if not isinstance(raw_phases, list):
            raise ConfigError("設定に phases のリストがありません。")

        phases = []
        for item in raw_phases:
            try:
                phase = ExamPhase(item["phase"])
                tests = frozenset(DeviceTest(name) for name in item.get("required_tests", []))
            except (KeyError, TypeError, ValueError) as e:
                raise ConfigError(f"フェーズ定義が不正です: {item!r} ({e})") from e
            phases.append(PhaseSpec(
                phase=phase,
                timer_seconds=item.get("timer_seconds"),
                required_tests=tests,
                allow_back=bool(item.get("allow_back", False)),
                manual_advance=bool(item.get("manual_advance", phase != ExamPhase.LISTENING)),
            ))

        hall_ticket = HallTicketData()
        if "hall_ticket" in data:
            raw_ticket = data["hall_ticket"]
            if not isinstance(raw_ticket, dict):
                raise ConfigError(f"受験票の設定はオブジェクトで指定してください: {raw_ticket!r}")
            try:
                hall_ticket = HallTicketData(**raw_ticket)
            except TypeError as e:
                raise ConfigError(f"受験票の設定が不正です: {raw_ticket!r} ({e})") from e
        return cls(phases=phases, listening_source=data.get("listening_source"), hall_ticket=hall_ticket)


def direct_writing_config(writing_seconds: int = DEFAULT_WRITING_SECONDS) -> ExamConfig:
    """リスニングなしで、機器チェック後すぐに時間制限付きの記述に入る設定を返す。"""
    return ExamConfig(phases=[
        PhaseSpec(ExamPhase.HALL_TICKET),
        PhaseSpec(ExamPhase.DEVICE_TEST, required_tests=FULL_TESTS),
        PhaseSpec(ExamPhase.WRITING, timer_seconds=writing_seconds, allow_back=True),
        PhaseSpec(ExamPhase.ENDED, manual_advance=False),
    ])


def listening_config(listening_source: Optional[str] = None,
                     listening_seconds: int = LISTENING_SECONDS) -> ExamConfig:
    """記述の前に固定時間のリスニングを挟む設定を返す。記述フェーズには時間制限がない。"""
    return ExamConfig(
        phases=[
            PhaseSpec(ExamPhase.HALL_TICKET),
            PhaseSpec(ExamPhase.DEVICE_TEST, required_tests=BASIC_TESTS),
            PhaseSpec(ExamPhase.LISTENING, timer_seconds=listening_seconds, manual_advance=False),
            PhaseSpec(ExamPhase.WRITING),
            PhaseSpec(ExamPhase.ENDED, manual_advance=False),
        ],
        listening_source=listening_source,
    )

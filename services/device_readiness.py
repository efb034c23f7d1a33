# services/device_readiness.py
from typing import Dict, Iterable, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from models.exam_models import DeviceTest


class DeviceReadinessTracker(QObject):
    """
    機器チェック（再生・マイク・キーボード）の合否を蓄積するクラス。

    一度合格したチェックは、その後のチェックで失敗しても不合格には戻りません。

    Signals:
        result_recorded (pyqtSignal): チェックが新たに合格になった時に DeviceTest を送信する。
    """
    result_recorded = pyqtSignal(object)

    MIN_KEYBOARD_CHARS = 10

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._results: Dict[DeviceTest, bool] = {test: False for test in DeviceTest}

    def record_result(self, test: DeviceTest, passed: bool) -> bool:
        """
        チェック結果を記録する。

        Args:
            test (DeviceTest): チェックの種類。
            passed (bool): 合格したかどうか。Falseの場合、既存の結果は変更されない。

        Returns:
            bool: このチェックが新たに合格になった場合はTrue。
        """
        test = DeviceTest(test)
        if not passed or self._results[test]:
            return False
        self._results[test] = True
        self.result_recorded.emit(test)
        return True

    def record_keyboard_input(self, typed_text: str) -> bool:
        """
        キーボードチェック欄の入力内容を評価する。
        入力言語に関わらず、MIN_KEYBOARD_CHARS文字以上の入力で合格とする。

        Returns:
            bool: キーボードチェックが新たに合格になった場合はTrue。
        """
        return self.record_result(DeviceTest.KEYBOARD, len(typed_text) >= self.MIN_KEYBOARD_CHARS)

    def passed(self, test: DeviceTest) -> bool:
        return self._results[DeviceTest(test)]

    def all_passed(self, required: Optional[Iterable[DeviceTest]] = None) -> bool:
        """
        指定されたチェックがすべて合格しているかどうかを返す。

        Args:
            required (Optional[Iterable[DeviceTest]]): 対象のチェック。Noneの場合はすべてのチェック。
        """
        tests = list(DeviceTest) if required is None else [DeviceTest(t) for t in required]
        return all(self._results[test] for test in tests)

    def results(self) -> Dict[DeviceTest, bool]:
        """記録された結果のコピーを返す。"""
        return dict(self._results)

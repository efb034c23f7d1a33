# models/errors.py
"""試験アプリケーション内で送出される例外クラスを定義します。"""


class ExamError(Exception):
    """アプリケーション固有の例外の基底クラス。"""


class ConfigError(ExamError):
    """フェーズ列などの設定内容が不正な場合に送出される。"""


class MicrophoneAccessError(ExamError):
    """マイクの取得が拒否された、またはデバイスが利用できない場合に送出される。"""


class ExportError(ExamError):
    """文書のエクスポートに失敗した場合に送出される。

    Attributes:
        fallback_hint (str): ユーザーに提示する代替手段の案内。
    """

    def __init__(self, message: str, fallback_hint: str = "") -> None:
        super().__init__(message)
        self.fallback_hint = fallback_hint

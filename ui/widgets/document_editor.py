from typing import Optional

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import QTextEdit, QWidget

from .text_editor_config import TextEditorConfig


class DocumentEditor(QTextEdit):
    """
    答案を入力するリッチテキストエディタ。

    本文はHTMLとして保持し、エクスポートにはプレーンテキストを使います。
    テキストがユーザーによって変更された際には `contentModified` シグナルを発行します。

    Attributes:
        contentModified (pyqtSignal): テキスト内容がユーザーによって変更されたときに発行されるシグナル。
    """
    contentModified = pyqtSignal()

    def __init__(self, parent: Optional[QWidget] = None, config: Optional[TextEditorConfig] = None) -> None:
        """
        DocumentEditorのコンストラクタ。

        Args:
            parent (Optional[QWidget]): 親ウィジェット。
            config (Optional[TextEditorConfig]): 表示設定。
        """
        super().__init__(parent)
        self.config: TextEditorConfig = config or TextEditorConfig()
        self._internal_change: bool = False

        self.setFont(self.config.get_font())
        self.setPlaceholderText(self.config.placeholder_text)
        self.document().setDocumentMargin(self.config.document_margin)
        self.setAcceptRichText(True)
        self.textChanged.connect(self._on_text_changed)
        self.set_locked(False)

    def _on_text_changed(self) -> None:
        """
        textChangedシグナルを処理する内部スロット。
        プログラムによる内部的な変更でない場合にのみ `contentModified` シグナルを発行する。
        """
        if self._internal_change:
            return
        self.contentModified.emit()

    def get_plain_text(self) -> str:
        """書式を除いた本文を返す。"""
        return self.toPlainText()

    def get_content(self) -> str:
        """書式付きの本文（HTML）を返す。"""
        return self.toHtml()

    def set_content(self, html: str) -> None:
        """
        エディタの内容をプログラム的に設定する。
        この操作では `contentModified` シグナルは発行されない。

        Args:
            html (str): 設定する本文（HTMLまたはプレーンテキスト）。
        """
        self._internal_change = True
        try:
            if html:
                self.setHtml(html)
            else:
                self.clear()
        finally:
            self._internal_change = False

    def set_locked(self, locked: bool) -> None:
        """編集を禁止または許可する。"""
        self.setReadOnly(locked)
        color = self.config.locked_background_color if locked else self.config.background_color
        self.setStyleSheet(f"QTextEdit {{ background-color: {color.name()}; color: black; }}")

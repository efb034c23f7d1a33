from __future__ import annotations
import os
from typing import TYPE_CHECKING, Optional

from PyQt6.QtWidgets import QFileDialog, QMessageBox

from models.errors import ExportError
from models.exam_models import NOTICE_SUCCESS
from services.export_service import ExportArtifact, ExportService

if TYPE_CHECKING:
    from ..main_window import ExamWindow


class ExportHandler:
    """
    答案文書をテキスト形式・Word形式のファイルとして書き出す操作を担当します。
    終了後も書き出しは可能です。
    """
    def __init__(self, main_window: ExamWindow, export_service: Optional[ExportService] = None) -> None:
        """
        ExportHandlerのコンストラクタ。

        Args:
            main_window (ExamWindow): 親となるメインウィンドウインスタンス。
            export_service (Optional[ExportService]): 変換に使うサービス。
        """
        self.main: ExamWindow = main_window
        self.export_service = export_service or ExportService()

    def save_as_text(self) -> None:
        """現在の文書をテキストファイル（.txt）として保存する。"""
        document = self.main.controller.document
        artifact = self.export_service.export_as_text(document.title, document.plain_text)
        self._save_artifact(artifact, "テキスト形式で保存", "Text Files (*.txt)")

    def save_as_word(self) -> None:
        """
        現在の文書をWord (.docx) 形式で保存する。
        生成に失敗した場合はテキスト形式での保存を案内する。
        """
        document = self.main.controller.document
        try:
            artifact = self.export_service.export_as_docx(document.title, document.plain_text)
        except ExportError as exc:
            QMessageBox.critical(self.main, "保存エラー", f"{exc}\n{exc.fallback_hint}")
            return
        self._save_artifact(artifact, "Word形式で保存", "Word Documents (*.docx)")

    def _save_artifact(self, artifact: ExportArtifact, caption: str, file_filter: str) -> None:
        """ファイルダイアログで保存先を選ばせ、生成済みのファイルを書き込む内部メソッド。"""
        initial_path = os.path.join(os.path.expanduser("~"), artifact.file_name)
        file_path, _ = QFileDialog.getSaveFileName(self.main, caption, initial_path, file_filter)
        if not file_path:
            return
        extension = os.path.splitext(artifact.file_name)[1]
        if not file_path.lower().endswith(extension):
            file_path += extension

        try:
            artifact.save_to(file_path)
        except OSError as exc:
            print(f"ファイルの保存中にエラーが発生しました: {exc}")
            QMessageBox.critical(self.main, "保存エラー", f"ファイルの保存に失敗しました。\n{exc}")
            return
        self.main.show_notice(NOTICE_SUCCESS, f"保存しました: {file_path}")

from __future__ import annotations
from typing import TYPE_CHECKING, Optional

from PyQt6.QtWidgets import QMessageBox

from models.exam_models import NOTICE_ERROR, NOTICE_INFO, NOTICE_SUCCESS
from services.document_service import DocumentService

if TYPE_CHECKING:
    from ..main_window import ExamWindow


class DocumentHandler:
    """
    文書の新規作成・保存・読み込み操作を担当します。
    記述フェーズ以外では文書を変更する操作は受け付けません。
    """
    def __init__(self, main_window: ExamWindow, document_service: Optional[DocumentService] = None) -> None:
        self.main: ExamWindow = main_window
        self.document_service = document_service or DocumentService()

    def new_document(self) -> None:
        """確認の上、空の文書に差し替える。"""
        if not self.main.controller.document_editable:
            return
        reply = QMessageBox.question(
            self.main, "新規作成", "現在の文書を破棄して新しい文書を作成しますか？",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No,
        )
        if reply != QMessageBox.StandardButton.Yes:
            return
        self.main.controller.replace_document(self.document_service.new_document())
        self.main.show_notice(NOTICE_INFO, "新しい文書を作成しました。")

    def save_document(self) -> None:
        """現在の文書をローカルストレージに保存する。"""
        if not self.main.controller.document_editable:
            return
        try:
            self.document_service.save_document(self.main.controller.document)
        except OSError as exc:
            print(f"文書の保存中にエラーが発生しました: {exc}")
            self.main.show_notice(NOTICE_ERROR, f"文書を保存できませんでした。\n{exc}")
            return
        self.main.show_notice(NOTICE_SUCCESS, "文書を保存しました。")

    def load_document(self) -> None:
        """保存されている文書を読み込む。保存された文書がなければその旨を通知する。"""
        if not self.main.controller.document_editable:
            return
        document = self.document_service.load_document()
        if document is None:
            self.main.show_notice(NOTICE_ERROR, "保存された文書が見つかりません。")
            return
        self.main.controller.replace_document(document)
        self.main.show_notice(NOTICE_SUCCESS, "文書を読み込みました。")

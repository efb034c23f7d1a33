# services/document_service.py
from typing import Any, Optional

from models.document_models import DEFAULT_DOCUMENT_TITLE, Document
from .base_service import BaseService
from .storage_service import StorageService


class DocumentService(BaseService[Document]):
    """答案文書の新規作成・保存・読み込みを行うサービスクラス。

    文書は自動保存されず、ユーザーの明示的な操作でのみ保存されます。
    本文とタイトルはローカルストレージの固定キーに保存されます。
    """

    CONTENT_KEY = "document-content"
    TITLE_KEY = "document-title"

    def __init__(self, storage_service: Optional[StorageService] = None) -> None:
        """DocumentServiceのコンストラクタ。

        Args:
            storage_service (Optional[StorageService]): データ永続化のためのストレージサービス。
        """
        super().__init__(storage_service=storage_service or StorageService())

    def new_document(self) -> Document:
        """空の新しい文書を返す。"""
        return Document(title=DEFAULT_DOCUMENT_TITLE)

    def save_document(self, document: Document) -> None:
        """文書の本文とタイトルを保存する。"""
        self.save_data(document)

    def load_document(self) -> Optional[Document]:
        """保存されている文書を読み込む。

        Returns:
            Optional[Document]: 読み込まれた文書。保存された本文がない場合はNone。
        """
        return self.load_data()

    def load_data(self, identifier: Any = None) -> Optional[Document]:
        """BaseServiceから継承したメソッド。ストレージから文書を読み込む。"""
        content = self.storage_service.get_item(self.CONTENT_KEY)
        if not content:
            return None
        title = self.storage_service.get_item(self.TITLE_KEY) or DEFAULT_DOCUMENT_TITLE
        return Document(title=title, body=content)

    def save_data(self, data: Document) -> None:
        """BaseServiceから継承したメソッド。文書をストレージに保存する。"""
        self.storage_service.set_item(self.CONTENT_KEY, data.body)
        self.storage_service.set_item(self.TITLE_KEY, data.title)

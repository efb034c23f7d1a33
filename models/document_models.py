# models/document_models.py
from dataclasses import dataclass

DEFAULT_DOCUMENT_TITLE = "Untitled Document"


@dataclass
class Document:
    """受験者が作成する答案文書を表現するデータモデル。

    Attributes:
        title (str): 文書のタイトル。エクスポート時のファイル名にも使われる。
        body (str): リッチテキスト形式（HTML）の本文。
        plain_text (str): 本文から書式を除いたプレーンテキスト。
    """
    title: str = DEFAULT_DOCUMENT_TITLE
    body: str = ""
    plain_text: str = ""

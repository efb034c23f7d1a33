# services/export_service.py
from __future__ import annotations
import os
from dataclasses import dataclass
from io import BytesIO
from typing import List

from docx import Document as WordDocument
from docx.shared import Cm, Pt

from models.document_models import DEFAULT_DOCUMENT_TITLE
from models.errors import ExportError

TEXT_MEDIA_TYPE = "text/plain;charset=utf-8"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


@dataclass(frozen=True)
class ExportArtifact:
    """ダウンロード用に生成されたファイルの内容。

    Attributes:
        file_name (str): "{タイトル}.{拡張子}" 形式のファイル名。
        data (bytes): ファイルの内容。
        media_type (str): MIMEタイプ。
    """
    file_name: str
    data: bytes
    media_type: str

    def save(self, directory: str) -> str:
        """指定ディレクトリにファイルとして書き出し、そのパスを返す。"""
        file_path = os.path.join(directory, self.file_name)
        self.save_to(file_path)
        return file_path

    def save_to(self, file_path: str) -> None:
        with open(file_path, 'wb') as f:
            f.write(self.data)


class ExportService:
    """
    答案文書をテキスト形式またはWord形式（.docx）のファイルに変換するサービスクラス。

    どちらの形式でも書式情報は破棄され、プレーンテキストのみが出力されます。
    Word形式では改行ごとに1段落として書き出します。
    """

    FONT_NAME = "Noto Serif"
    FONT_SIZE = 12

    def export_as_text(self, title: str, body: str) -> ExportArtifact:
        """
        本文をUTF-8のテキストファイルとして出力する。同じ入力からは常に同じバイト列を生成する。

        Args:
            title (str): 文書タイトル。ファイル名に使われる。
            body (str): プレーンテキストの本文。

        Returns:
            ExportArtifact: 生成されたテキストファイル。
        """
        return ExportArtifact(
            file_name=self.file_name_for(title, "txt"),
            data=body.encode('utf-8'),
            media_type=TEXT_MEDIA_TYPE,
        )

    def export_as_docx(self, title: str, body: str) -> ExportArtifact:
        """
        本文をWord文書として出力する。

        Args:
            title (str): 文書タイトル。ファイル名に使われる。
            body (str): プレーンテキストの本文。

        Returns:
            ExportArtifact: 生成されたWordファイル。

        Raises:
            ExportError: Word文書の生成に失敗した場合。テキスト形式での出力を案内する。
        """
        try:
            data = self._build_docx(body)
        except Exception as exc:
            print(f"Word文書の作成中にエラーが発生しました: {exc}")
            raise ExportError(
                f"Word文書の作成に失敗しました。\n{exc}",
                fallback_hint="テキスト形式でのダウンロードをお試しください。",
            ) from exc
        return ExportArtifact(
            file_name=self.file_name_for(title, "docx"),
            data=data,
            media_type=DOCX_MEDIA_TYPE,
        )

    @staticmethod
    def file_name_for(title: str, extension: str) -> str:
        """タイトルと拡張子からファイル名を決める。空のタイトルは既定のタイトルに置き換える。"""
        return f"{title or DEFAULT_DOCUMENT_TITLE}.{extension}"

    @staticmethod
    def paragraphs_for(body: str) -> List[str]:
        """本文を改行で分割し、段落のリストにする。"""
        return body.split('\n')

    def _build_docx(self, body: str) -> bytes:
        """本文からWord文書のバイト列を生成する内部メソッド。"""
        doc = WordDocument()
        section = doc.sections[0]
        section.page_width, section.page_height = Cm(21.0), Cm(29.7)  # A4
        section.left_margin, section.right_margin = Cm(2.0), Cm(2.0)
        section.top_margin, section.bottom_margin = Cm(2.0), Cm(2.0)

        style = doc.styles['Normal']
        style.font.name = self.FONT_NAME
        style.font.size = Pt(self.FONT_SIZE)

        for line in self.paragraphs_for(body):
            # 空行も段落として残す
            doc.add_paragraph().add_run(line or ' ')

        buffer = BytesIO()
        doc.save(buffer)
        return buffer.getvalue()

from dataclasses import dataclass, field
from typing import Tuple

from PyQt6.QtGui import QColor, QFont, QFontInfo


@dataclass
class TextEditorConfig:
    """
    答案エディタのUI設定をカプセル化するデータクラス。
    """
    font_family: str = "Noto Serif"
    fallback_font_family: str = "Serif"
    font_size: int = 14
    placeholder_text: str = "ここに答案を入力してください..."
    document_margin: int = 24

    # 書式ツールバーに並べる操作
    toolbar_formats: Tuple[str, ...] = (
        "bold", "italic", "underline", "strike",
        "bullet_list", "ordered_list",
        "align_left", "align_center", "align_right",
        "clean",
    )

    background_color: QColor = field(default_factory=lambda: QColor("#ffffff"))
    locked_background_color: QColor = field(default_factory=lambda: QColor("#f0f0f0"))

    def get_font(self) -> QFont:
        """
        プライマリフォントを試み、利用できない場合はフォールバックフォントを使用してQFontオブジェクトを返す。
        """
        font = QFont(self.font_family, self.font_size)
        if not QFontInfo(font).exactMatch():
            font = QFont(self.fallback_font_family, self.font_size)
        return font

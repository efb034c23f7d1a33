# ui/widgets/document_toolbar.py
"""
答案エディタ用のツールバーを提供します。

- DocumentToolbar: 新規作成・保存・読み込み・ダウンロードとタイトル入力欄。
- FormattingToolbar: 太字・斜体・リスト・配置などの書式操作。
"""
from __future__ import annotations
from typing import Callable, Dict, Optional, Tuple

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QAction, QFont, QTextCharFormat, QTextListFormat
from PyQt6.QtWidgets import QHBoxLayout, QLabel, QLineEdit, QPushButton, QToolBar, QWidget

from .document_editor import DocumentEditor


class DocumentToolbar(QWidget):
    """
    文書の操作ボタンとタイトル入力欄を並べたツールバー。

    Signals:
        newRequested, saveRequested, openRequested: 各ボタンが押された時に発行される。
        downloadTextRequested, downloadDocxRequested: ダウンロードボタンが押された時に発行される。
        titleChanged (pyqtSignal): タイトルが編集された時に新しいタイトル（str）を送信する。
    """
    newRequested = pyqtSignal()
    saveRequested = pyqtSignal()
    openRequested = pyqtSignal()
    downloadTextRequested = pyqtSignal()
    downloadDocxRequested = pyqtSignal()
    titleChanged = pyqtSignal(str)

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(8, 4, 8, 4)

        app_label = QLabel("答案エディタ")
        app_label.setStyleSheet("font-weight: bold; font-size: 14pt;")
        layout.addWidget(app_label)

        self.new_button = QPushButton("新規")
        self.save_button = QPushButton("保存")
        self.open_button = QPushButton("開く")
        self.text_button = QPushButton("テキスト")
        self.docx_button = QPushButton("Word")
        for button in (self.new_button, self.save_button, self.open_button, self.text_button, self.docx_button):
            button.setCursor(Qt.CursorShape.PointingHandCursor)
            layout.addWidget(button)
        layout.addStretch()

        self.title_edit = QLineEdit()
        self.title_edit.setPlaceholderText("文書のタイトル...")
        self.title_edit.setFixedWidth(260)
        self.title_edit.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.title_edit)

        self.new_button.clicked.connect(lambda: self.newRequested.emit())
        self.save_button.clicked.connect(lambda: self.saveRequested.emit())
        self.open_button.clicked.connect(lambda: self.openRequested.emit())
        self.text_button.clicked.connect(lambda: self.downloadTextRequested.emit())
        self.docx_button.clicked.connect(lambda: self.downloadDocxRequested.emit())
        self.title_edit.textEdited.connect(self.titleChanged.emit)

    def set_title(self, title: str) -> None:
        """タイトル欄の表示を更新する。titleChangedシグナルは発行されない。"""
        if self.title_edit.text() != title:
            self.title_edit.setText(title)

    def set_editing_enabled(self, enabled: bool) -> None:
        """文書を変更する操作（新規・開く・タイトル編集）の有効/無効を切り替える。"""
        self.new_button.setEnabled(enabled)
        self.open_button.setEnabled(enabled)
        self.save_button.setEnabled(enabled)
        self.title_edit.setReadOnly(not enabled)


class FormattingToolbar(QToolBar):
    """DocumentEditorに対して書式操作を行うツールバー。"""

    LABELS: Dict[str, Tuple[str, str]] = {
        "bold": ("B", "太字"),
        "italic": ("I", "斜体"),
        "underline": ("U", "下線"),
        "strike": ("S", "取り消し線"),
        "bullet_list": ("•", "箇条書き"),
        "ordered_list": ("1.", "番号付きリスト"),
        "align_left": ("左", "左揃え"),
        "align_center": ("中", "中央揃え"),
        "align_right": ("右", "右揃え"),
        "clean": ("×", "書式をクリア"),
    }

    def __init__(self, editor: DocumentEditor, parent: Optional[QWidget] = None) -> None:
        """
        FormattingToolbarのコンストラクタ。

        Args:
            editor (DocumentEditor): 書式を適用する対象のエディタ。
            parent (Optional[QWidget]): 親ウィジェット。
        """
        super().__init__("書式", parent)
        self.editor = editor
        self.setMovable(False)

        handlers: Dict[str, Callable[[], None]] = {
            "bold": self.toggle_bold,
            "italic": lambda: self.editor.setFontItalic(not self.editor.fontItalic()),
            "underline": lambda: self.editor.setFontUnderline(not self.editor.fontUnderline()),
            "strike": self.toggle_strike,
            "bullet_list": lambda: self.insert_list(QTextListFormat.Style.ListDisc),
            "ordered_list": lambda: self.insert_list(QTextListFormat.Style.ListDecimal),
            "align_left": lambda: self.editor.setAlignment(Qt.AlignmentFlag.AlignLeft),
            "align_center": lambda: self.editor.setAlignment(Qt.AlignmentFlag.AlignHCenter),
            "align_right": lambda: self.editor.setAlignment(Qt.AlignmentFlag.AlignRight),
            "clean": self.clear_formatting,
        }
        for name in editor.config.toolbar_formats:
            text, tooltip = self.LABELS[name]
            action = QAction(text, self)
            action.setToolTip(tooltip)
            action.triggered.connect(handlers[name])
            self.addAction(action)

    def toggle_bold(self) -> None:
        bold = self.editor.fontWeight() >= QFont.Weight.Bold.value
        self.editor.setFontWeight(QFont.Weight.Normal.value if bold else QFont.Weight.Bold.value)

    def toggle_strike(self) -> None:
        fmt = QTextCharFormat()
        fmt.setFontStrikeOut(not self.editor.currentCharFormat().fontStrikeOut())
        self.editor.mergeCurrentCharFormat(fmt)

    def insert_list(self, style: QTextListFormat.Style) -> None:
        self.editor.textCursor().createList(style)

    def clear_formatting(self) -> None:
        cursor = self.editor.textCursor()
        if cursor.hasSelection():
            cursor.setCharFormat(QTextCharFormat())
        self.editor.setCurrentCharFormat(QTextCharFormat())

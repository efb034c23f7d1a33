from .text_editor_config import TextEditorConfig
from .document_editor import DocumentEditor
from .document_toolbar import DocumentToolbar, FormattingToolbar
from .audio_player import AudioPlayerWidget
from .listening_panel import ListeningPanel

__all__ = [
    "TextEditorConfig",
    "DocumentEditor",
    "DocumentToolbar",
    "FormattingToolbar",
    "AudioPlayerWidget",
    "ListeningPanel",
]

"""
アプリケーションのエントリーポイント。

このスクリプトは、PyQt6アプリケーションを初期化し、試験設定を読み込んで
メインウィンドウであるExamWindowを生成・表示し、イベントループを開始します。

使い方:
    python main.py [設定ファイル.json]

設定ファイルを省略した場合は、リスニングなし・記述60分の既定の設定で起動します。
また、プロジェクトのルートディレクトリをPythonのパスに追加し、
他のモジュール（ui, servicesなど）を正しくインポートできるように設定します。
"""
import json
import sys
import os
from PyQt6.QtWidgets import QApplication, QMessageBox

# このファイル(main.py)があるディレクトリをモジュールの探索パスに追加します。
current_dir: str = os.path.dirname(os.path.abspath(__file__))
if current_dir not in sys.path:
    sys.path.append(current_dir)

from models.errors import ConfigError
from models.session_models import ExamConfig, direct_writing_config
from services.document_service import DocumentService
from services.qt_media import QtMediaTransport, QtMicrophoneService
from services.storage_service import StorageService
from ui.main_window import ExamWindow
from utils.audio_utils import AudioUtils

DATA_DIR = os.path.join(current_dir, "data")
TEST_TONE_PATH = os.path.join(DATA_DIR, "test_tone.wav")


def load_config(argv) -> ExamConfig:
    """
    コマンドライン引数で指定された設定ファイルを読み込む。

    Raises:
        ConfigError: 設定ファイルが読めない、または内容が不正な場合。
    """
    if len(argv) < 2:
        return direct_writing_config()
    config_path = argv[1]
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (IOError, json.JSONDecodeError) as e:
        raise ConfigError(f"設定ファイルを読み込めません: {config_path}\n{e}") from e
    return ExamConfig.from_dict(data)


if __name__ == "__main__":
    # 1. PyQtアプリケーションインスタンスを作成します。
    app: QApplication = QApplication(sys.argv)

    # 2. 試験設定を読み込みます。不正な設定では起動しません。
    try:
        config: ExamConfig = load_config(sys.argv)
    except ConfigError as e:
        print(f"設定エラー: {e}")
        QMessageBox.critical(None, "設定エラー", str(e))
        sys.exit(1)

    # 3. 再生チェック用のテスト音声を用意します。
    os.makedirs(DATA_DIR, exist_ok=True)
    if not os.path.exists(TEST_TONE_PATH):
        AudioUtils.write_test_tone(TEST_TONE_PATH)

    # 4. メインウィンドウを作成して表示します。
    window: ExamWindow = ExamWindow(
        config,
        transport_factory=QtMediaTransport,
        microphone_service=QtMicrophoneService(),
        sample_source=TEST_TONE_PATH,
        document_service=DocumentService(StorageService(DATA_DIR)),
    )
    window.show()

    # 5. イベントループを開始し、終了コードでプロセスを終了します。
    sys.exit(app.exec())

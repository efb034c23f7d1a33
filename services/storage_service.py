# services/storage_service.py
import json
import os
from typing import Any, Dict, Optional


class StorageService:
    """ローカルファイルシステム上のキー・バリュー形式のストレージを管理するサービスクラス。

    すべての値は1つのJSONファイルに文字列として保存されます。
    キーが存在しないことは通常の状態であり、エラーにはなりません。
    """

    STORE_FILE_NAME = "local_storage.json"

    def __init__(self, base_path: str = "data") -> None:
        """StorageServiceのコンストラクタ。

        Args:
            base_path (str): データを保存する基準ディレクトリのパス。
                             存在しない場合は自動的に作成されます。
        """
        self.base_path = base_path
        os.makedirs(self.base_path, exist_ok=True)

    def get_path(self, file_name: str) -> str:
        """ベースパスとファイル名を結合して完全なファイルパスを取得する。"""
        return os.path.join(self.base_path, file_name)

    def get_item(self, key: str) -> Optional[str]:
        """キーに対応する値を取得する。

        Args:
            key (str): 取得するキー。

        Returns:
            Optional[str]: 保存されている値。存在しない場合はNone。
        """
        value = self._load_store().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        """キーに値を保存する。

        Args:
            key (str): 保存するキー。
            value (str): 保存する値。
        """
        store = self._load_store()
        store[key] = value
        self._save_store(store)

    def remove_item(self, key: str) -> None:
        """キーを削除する。存在しない場合は何もしない。"""
        store = self._load_store()
        if key in store:
            del store[key]
            self._save_store(store)

    def _load_store(self) -> Dict[str, Any]:
        file_path = self.get_path(self.STORE_FILE_NAME)
        if not os.path.exists(file_path):
            return {}
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (IOError, json.JSONDecodeError) as e:
            print(f"ファイル読み込み中にエラーが発生しました: {file_path}, {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save_store(self, store: Dict[str, Any]) -> None:
        file_path = self.get_path(self.STORE_FILE_NAME)
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(store, f, ensure_ascii=False, indent=4)

# services/base_service.py
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Generic, Optional, TypeVar

if TYPE_CHECKING:
    from .storage_service import StorageService

# データモデルを表すジェネリック型を定義
T = TypeVar('T')


class BaseService(Generic[T], ABC):
    """
    ストレージを使うサービスクラスの基底となる抽象クラス（ABC）。

    データの読み込みと保存の共通インターフェースを定義します。

    Attributes:
        storage_service (Optional['StorageService']): ローカルストレージサービスへの参照。
    """

    def __init__(self, storage_service: Optional['StorageService'] = None) -> None:
        """BaseServiceのコンストラクタ。

        Args:
            storage_service (Optional[StorageService]): ストレージサービスインスタンス。
        """
        self.storage_service = storage_service

    @abstractmethod
    def load_data(self, identifier: Any = None) -> Optional[T]:
        """
        データを読み込むための抽象メソッド。

        Args:
            identifier (Any): データを識別するためのキー。

        Returns:
            Optional[T]: 読み込まれたデータモデルオブジェクト。見つからない場合はNone。
        """

    @abstractmethod
    def save_data(self, data: T) -> None:
        """
        データを永続化するための抽象メソッド。

        Args:
            data (T): 保存するデータモデルオブジェクト。
        """

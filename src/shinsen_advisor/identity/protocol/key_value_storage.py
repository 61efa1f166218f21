"""ユーザー名を保持するキー・バリュー領域のプロトコル定義."""

from typing import Protocol


class KeyValueStorage(Protocol):
    """クライアント側の永続キー・バリュー領域のインターフェース."""

    def get(self, key: str) -> str | None:
        """値を取得."""
        ...

    def set(self, key: str, value: str) -> None:
        """値を保存."""
        ...

    def remove(self, key: str) -> None:
        """値を削除."""
        ...

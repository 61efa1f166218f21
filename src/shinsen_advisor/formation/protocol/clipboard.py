"""クリップボードのプロトコル定義."""

from typing import Protocol


class Clipboard(Protocol):
    """テキストをクリップボードへ書き込むインターフェース."""

    def write_text(self, text: str) -> bool:
        """書き込みに成功したら True."""
        ...

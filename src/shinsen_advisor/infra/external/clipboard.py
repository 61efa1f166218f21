"""OSのクリップボードへの書き込みラッパーモジュール."""

import base64
import logging
import shutil
import subprocess
import sys
from typing import TextIO

from shinsen_advisor.common.log_prefix import LogPrefix

logger = logging.getLogger(__name__)

# 先に見つかったコマンドを使う
CLIPBOARD_COMMANDS: tuple[tuple[str, ...], ...] = (
    ("pbcopy",),
    ("wl-copy",),
    ("xclip", "-selection", "clipboard"),
    ("xsel", "--clipboard", "--input"),
    ("clip",),
)


class SystemClipboard:
    """OSのクリップボードコマンドを使うクリップボード.

    コマンドが見つからない、または失敗した場合は、端末へ OSC 52
    エスケープシーケンスを出力して端末エミュレータにコピーさせる。
    出力先が端末でなければ失敗として扱う。

    Attributes
    ----------
        commands: 試行するクリップボードコマンド
        stream: OSC 52 の出力先
        timeout: コマンドのタイムアウト(秒)

    """

    def __init__(
        self,
        commands: tuple[tuple[str, ...], ...] = CLIPBOARD_COMMANDS,
        stream: TextIO | None = None,
        timeout: float = 5.0,
    ) -> None:
        self.commands = commands
        self.stream = stream if stream is not None else sys.stdout
        self.timeout = timeout

    def write_text(self, text: str) -> bool:
        """テキストをクリップボードへ書き込む.

        Args:
        ----
            text: コピーするテキスト

        Returns:
        -------
            成功したら True

        """
        for command in self.commands:
            if shutil.which(command[0]) is None:
                continue
            try:
                subprocess.run(
                    command,
                    input=text.encode("utf-8"),
                    check=True,
                    timeout=self.timeout,
                    capture_output=True,
                )
                logger.debug(f"{LogPrefix.EXPORT} copied with {command[0]}")
                return True
            except (OSError, subprocess.SubprocessError) as e:
                logger.warning(f"{LogPrefix.EXPORT} {command[0]} failed: {e}")

        return self._write_osc52(text)

    def _write_osc52(self, text: str) -> bool:
        """OSC 52 エスケープシーケンスで端末にコピーさせる."""
        isatty = getattr(self.stream, "isatty", None)
        if isatty is None or not isatty():
            return False

        payload = base64.b64encode(text.encode("utf-8")).decode("ascii")
        self.stream.write(f"\033]52;c;{payload}\a")
        self.stream.flush()
        logger.debug(f"{LogPrefix.EXPORT} copied with OSC 52")
        return True

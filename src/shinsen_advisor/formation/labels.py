"""編成ラベル(編成1〜編成5)の採番と並び替え."""

import re
import unicodedata
from collections.abc import Iterable

LABEL_PREFIX = "編成"
DEFAULT_LABEL = f"{LABEL_PREFIX}1"

_LABEL_PATTERN = re.compile(rf"{LABEL_PREFIX}(\d+)")

# カタカナ -> ひらがな (ァ..ヶ)
_KATAKANA_TO_HIRAGANA = {code: code - 0x60 for code in range(0x30A1, 0x30F7)}


def make_label(number: int) -> str:
    """番号から編成ラベルを作る (例: 2 -> 編成2)."""
    return f"{LABEL_PREFIX}{number}"


def label_number(label: str) -> int | None:
    """「編成<整数>」形式なら番号を、それ以外は None を返す."""
    match = _LABEL_PATTERN.fullmatch(label.strip())
    if match is None:
        return None
    return int(match.group(1))


def sort_labels(labels: Iterable[str]) -> list[str]:
    """ラベルを重複なしで並べる.

    すべて「編成<整数>」形式なら番号順、1つでも外れる場合は
    ``collation_key`` による日本語向けの順。
    """
    unique = list(dict.fromkeys(labels))
    numbers = [label_number(label) for label in unique]
    if all(n is not None for n in numbers):
        return [label for _, label in sorted(zip(numbers, unique), key=lambda p: p[0])]
    return sorted(unique, key=collation_key)


def collation_key(text: str) -> tuple[str, str]:
    """日本語の文字列比較用のキー.

    全角・半角の違い(NFKC)、大文字・小文字、カタカナ・ひらがなの違いを
    同一視して比べ、同じになった場合は元の文字列で比べる。
    """
    folded = unicodedata.normalize("NFKC", text).casefold()
    return folded.translate(_KATAKANA_TO_HIRAGANA), text


def next_label(existing: Iterable[str]) -> str:
    """既存ラベルで使われていない最小の正の番号のラベルを返す.

    Examples
    --------
        {"編成1", "編成3"} -> "編成2"
        {} -> "編成1"

    """
    used = {n for n in (label_number(label) for label in existing) if n is not None}
    number = 1
    while number in used:
        number += 1
    return make_label(number)

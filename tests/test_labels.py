"""編成ラベルのテスト."""

from shinsen_advisor.formation.labels import (
    collation_key,
    label_number,
    make_label,
    next_label,
    sort_labels,
)


class TestNextLabel:
    """next_label のテスト."""

    def test_fills_smallest_gap(self) -> None:
        """空いている最小の番号を採番する."""
        assert next_label(["編成1", "編成2", "編成4"]) == "編成3"

    def test_empty(self) -> None:
        """ラベルがなければ編成1."""
        assert next_label([]) == "編成1"

    def test_ignores_free_form_labels(self) -> None:
        """番号のないラベルは採番に影響しない."""
        assert next_label(["編成1", "本命"]) == "編成2"


class TestSortLabels:
    """sort_labels のテスト."""

    def test_numeric_order(self) -> None:
        """すべて番号付きなら番号順(編成10 は 編成2 の後)."""
        assert sort_labels(["編成10", "編成2", "編成1"]) == ["編成1", "編成2", "編成10"]

    def test_falls_back_to_string_order(self) -> None:
        """番号のないラベルが混ざると文字列順."""
        assert sort_labels(["編成2", "本命", "編成10"]) == ["本命", "編成10", "編成2"]

    def test_fallback_folds_width_case_and_kana(self) -> None:
        """全角・半角、大文字・小文字、カタカナ・ひらがなを同一視して並べる."""
        assert sort_labels(["イ案", "ｂ案", "あ案", "A案"]) == ["A案", "ｂ案", "あ案", "イ案"]

    def test_collation_key_folds_kana(self) -> None:
        """カタカナとひらがなは同じ比較キーで、元の文字列で区別する."""
        assert collation_key("イ")[0] == collation_key("い")[0]
        assert collation_key("イ") != collation_key("い")

    def test_deduplicates(self) -> None:
        assert sort_labels(["編成2", "編成1", "編成2"]) == ["編成1", "編成2"]


def test_label_number() -> None:
    """「編成<整数>」形式だけ番号を返す."""
    assert label_number("編成3") == 3
    assert label_number("編成") is None
    assert label_number("編成3a") is None
    assert make_label(5) == "編成5"

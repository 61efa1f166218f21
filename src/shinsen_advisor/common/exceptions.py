"""アプリケーション共通の例外定義.

利用者への通知(アラート)に相当するメッセージを例外メッセージとして保持する。
HTTP層では ``main.py`` の例外ハンドラが ``{"detail": message}`` に変換する。
"""


class ShinsenAdvisorError(Exception):
    """アプリケーション例外の基底クラス."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class FetchError(ShinsenAdvisorError):
    """データストアからの取得失敗."""

    status_code = 502


class RosterLoadError(FetchError):
    """所持武将・所持戦法の読み込み失敗."""


class FormationLoadError(FetchError):
    """編成の読み込み失敗."""


class RosterSaveError(ShinsenAdvisorError):
    """所持武将・所持戦法の保存失敗."""

    status_code = 502


class ValidationError(ShinsenAdvisorError):
    """入力チェックエラー. 永続化は行われない."""

    status_code = 400


class IdentityRequiredError(ValidationError):
    """ユーザー名が未設定."""

    status_code = 401

    def __init__(self) -> None:
        super().__init__("ユーザー名が未設定です。")


class OwnerRequiredError(ValidationError):
    """相談者が未選択."""

    def __init__(self) -> None:
        super().__init__("先に相談者を選択してください")


class FormationPermissionError(ValidationError):
    """自分以外の編成者タブに対する変更操作."""

    status_code = 403


class FormationLimitError(ValidationError):
    """編成数の上限超過."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"編成は最大 {limit} 個までです。")


class InvalidLabelError(ValidationError):
    """編成ラベルが「編成1」〜「編成<上限>」の範囲外."""

    def __init__(self, label: str, limit: int) -> None:
        self.label = label
        super().__init__(f"編成名は 編成1〜編成{limit} のいずれかにしてください: {label}")


class EmptyFormationError(ValidationError):
    """武将が1人も選ばれていない編成の保存."""

    def __init__(self) -> None:
        super().__init__("少なくとも1人は武将を選んでください")


class InvalidEditorStateError(ShinsenAdvisorError):
    """編成エディタの現在の状態では許可されない操作."""

    status_code = 409


class FormationSyncError(ShinsenAdvisorError):
    """編成保存の各ステップでの失敗.

    Attributes
    ----------
        step: 失敗したステップ名 (upsert_header / delete_slots / insert_slots)

    """

    status_code = 502

    def __init__(self, step: str, message: str) -> None:
        self.step = step
        super().__init__(message)

"""ユーザー名(擬似ID)の保持と、リクエストに引き回すユーザーコンテキスト.

ここで扱うユーザー名は利用者が自由に入力した文字列であり、認証ではない。
同じ名前を入力すれば誰でも同じデータにアクセスできる。
"""

import logging

from pydantic import BaseModel, ConfigDict

from shinsen_advisor.common.log_prefix import LogPrefix
from shinsen_advisor.identity.protocol import KeyValueStorage

DEFAULT_STORAGE_KEY = "nobu-user-key"

logger = logging.getLogger(__name__)


class UserContext(BaseModel):
    """操作中のユーザーを表す値.

    サービス層の呼び出しにはすべてこの値を明示的に渡す。
    なりすましに対する保証は一切ない。

    Attributes
    ----------
        user_key: ユーザー名

    """

    model_config = ConfigDict(frozen=True)

    user_key: str


class IdentityStore:
    """ユーザー名を1つのキーでキー・バリュー領域に保存するストア.

    Attributes
    ----------
        storage: 保存先のキー・バリュー領域
        key: 保存に使うキー

    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = DEFAULT_STORAGE_KEY,
    ) -> None:
        self.storage = storage
        self.key = key

    def get(self) -> str | None:
        """保存済みのユーザー名を返す. 未設定なら None."""
        value = self.storage.get(self.key)
        return value or None

    def set(self, name: str) -> bool:
        """前後の空白を除いたユーザー名を保存.

        Args:
        ----
            name: 入力されたユーザー名

        Returns:
        -------
            保存できたら True、空文字だった場合は False(何も保存しない)

        """
        trimmed = name.strip()
        if not trimmed:
            logger.info(f"{LogPrefix.LOGIN} rejected empty user name")
            return False

        self.storage.set(self.key, trimmed)
        logger.info(f"{LogPrefix.LOGIN} user={trimmed}")
        return True

    def clear(self) -> None:
        """保存済みのユーザー名を削除."""
        self.storage.remove(self.key)

    def context(self) -> UserContext | None:
        """保存済みのユーザー名から UserContext を作る."""
        user_key = self.get()
        if user_key is None:
            return None
        return UserContext(user_key=user_key)

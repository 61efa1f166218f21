"""登録済みユーザー一覧のサービスモジュール."""

import logging
from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError

from shinsen_advisor.common.log_prefix import LogPrefix
from shinsen_advisor.database.repository.formation_repository import (
    FormationRepository,
    get_formation_repository,
)
from shinsen_advisor.database.repository.ownership_repository import (
    OwnershipRepository,
    get_ownership_repository,
)

logger = logging.getLogger(__name__)


class UserDirectoryService:
    """データに登場するユーザー名の一覧を提供するサービス.

    Attributes
    ----------
        formation_repo: 編成リポジトリ
        ownership_repo: 所持状況リポジトリ

    """

    def __init__(
        self,
        formation_repo: FormationRepository,
        ownership_repo: OwnershipRepository,
    ) -> None:
        self.formation_repo = formation_repo
        self.ownership_repo = ownership_repo

    async def list_users(self, search: str | None = None) -> list[str]:
        """登録済みユーザー名を重複なし・昇順で返す.

        編成・所持武将・所持戦法の各テーブルからユーザー名を集める。
        取得に失敗したテーブルはログに残して読み飛ばす。

        Args:
        ----
            search: 部分一致(大文字小文字を区別しない)で絞り込む文字列

        Returns:
        -------
            ユーザー名のリスト

        """
        sources: list[tuple[str, Callable[[], Awaitable[list[str]]]]] = [
            ("formations", self.formation_repo.list_user_keys),
            ("user_officers", self.ownership_repo.list_officer_user_keys),
            ("user_skills", self.ownership_repo.list_skill_user_ids),
        ]

        names: set[str] = set()
        for table_name, fetch in sources:
            try:
                names.update(await fetch())
            except SQLAlchemyError as e:
                logger.warning(
                    f"{LogPrefix.LOGIN} failed to list users from {table_name}: {e}"
                )

        users = sorted(names)
        if search and search.strip():
            needle = search.strip().lower()
            users = [u for u in users if needle in u.lower()]
        return users


async def get_user_directory_service(
    formation_repo: Annotated[
        FormationRepository,
        Depends(get_formation_repository),
    ],
    ownership_repo: Annotated[
        OwnershipRepository,
        Depends(get_ownership_repository),
    ],
) -> UserDirectoryService:
    """FastAPI DI用のUserDirectoryServiceファクトリ.

    Returns
    -------
        UserDirectoryService

    """
    return UserDirectoryService(
        formation_repo=formation_repo,
        ownership_repo=ownership_repo,
    )

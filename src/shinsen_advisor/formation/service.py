"""編成作成画面のサービスモジュール."""

import logging
from collections.abc import Mapping, Sequence
from typing import Annotated

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError

from shinsen_advisor.common.exceptions import FormationLoadError
from shinsen_advisor.common.log_prefix import LogPrefix
from shinsen_advisor.database.repository.formation_repository import (
    FormationRepository,
    get_formation_repository,
)
from shinsen_advisor.database.repository.ownership_repository import (
    OwnershipRepository,
    get_ownership_repository,
)
from shinsen_advisor.formation.editor import FormationEditor
from shinsen_advisor.formation.protocol import FormationStore
from shinsen_advisor.formation.share import format_for_copy
from shinsen_advisor.formation.slots import SlotPosition, SlotState
from shinsen_advisor.identity.store import UserContext
from shinsen_advisor.roster.service import Roster, RosterService, get_roster_service
from shinsen_advisor.settings.settings import Settings, get_settings

logger = logging.getLogger(__name__)

OWNER_PARAM_ME = "me"


def resolve_owner(
    owners: Sequence[str],
    owner_param: str | None,
    viewer: UserContext,
) -> str | None:
    """編成画面で最初に選択する相談者を決める.

    1. ``owner=me`` かつ自分が相談者一覧にいる -> 自分
    2. ``owner=<名前>`` でその名前が相談者一覧にいる -> その名前
    3. 自分が相談者一覧にいる -> 自分
    4. それ以外 -> 一覧の先頭(一覧が空なら None)
    """
    if not owners:
        return None
    if owner_param == OWNER_PARAM_ME and viewer.user_key in owners:
        return viewer.user_key
    if owner_param and owner_param in owners:
        return owner_param
    if viewer.user_key in owners:
        return viewer.user_key
    return owners[0]


class FormationService:
    """編成の閲覧・追加・保存・共有を提供するサービス.

    リクエストごとに ``FormationEditor`` を作り、選択・編集・保存を行う。

    Attributes
    ----------
        store: 編成の永続化先
        ownership_repo: 所持状況リポジトリ
        roster_service: 所持武将・戦法サービス
        max_formations: 編成数の上限

    """

    def __init__(
        self,
        store: FormationStore,
        ownership_repo: OwnershipRepository,
        roster_service: RosterService,
        max_formations: int = 5,
    ) -> None:
        self.store = store
        self.ownership_repo = ownership_repo
        self.roster_service = roster_service
        self.max_formations = max_formations

    async def list_owners(self) -> list[str]:
        """所持武将を登録済みのユーザー(相談者)一覧を返す."""
        try:
            owners = await self.ownership_repo.list_officer_user_keys()
        except SQLAlchemyError as e:
            raise FormationLoadError(f"相談者一覧取得エラー: {e}") from e
        return sorted(set(owners))

    async def load_roster(self, owner_key: str) -> Roster:
        """相談者の所持武将・戦法を読み込む."""
        return await self.roster_service.load(owner_key)

    async def open_editor(
        self,
        viewer: UserContext,
        owner_key: str,
        advisor_key: str | None = None,
        label: str | None = None,
    ) -> FormationEditor:
        """相談者のラベル一覧を読み込み、編成を1つ選択したエディタを返す.

        編成者を省略すると自分、ラベルを省略するとその編成者の先頭ラベル。
        """
        editor = self._new_editor(viewer)
        await editor.load_labels(owner_key)

        advisor = advisor_key or viewer.user_key
        selected_label = label or editor.labels_for(advisor)[0]
        await editor.select_formation(owner_key, advisor, selected_label)
        return editor

    async def add_formation(
        self,
        viewer: UserContext,
        owner_key: str,
    ) -> FormationEditor:
        """自分の編成者タブに新しい(未保存の)編成を追加する."""
        editor = await self.open_editor(viewer, owner_key, advisor_key=viewer.user_key)
        label = await editor.add_formation()
        logger.info(
            f"{LogPrefix.FORMATION_LOAD} added label={label} "
            f"owner={owner_key} advisor={viewer.user_key}"
        )
        return editor

    async def save(
        self,
        viewer: UserContext,
        owner_key: str,
        label: str,
        slots: Mapping[SlotPosition, SlotState],
        request_comment: str | None = None,
        answer_comment: str | None = None,
    ) -> FormationEditor:
        """自分が編成者として編成を保存する.

        Raises
        ------
            FormationLimitError: 新しいラベルで、既に上限数の編成がある
            EmptyFormationError: 武将が1人も設定されていない
            FormationSyncError: 保存の各ステップの失敗時

        """
        editor = await self.open_editor(
            viewer, owner_key, advisor_key=viewer.user_key, label=label
        )
        for position in SlotPosition:
            slot = slots.get(position, SlotState())
            editor.set_officer(position, slot.officer_id)
            editor.set_inherited_skill(position, 1, slot.inherit1_id)
            editor.set_inherited_skill(position, 2, slot.inherit2_id)
        editor.set_comments(request_comment, answer_comment)

        await editor.save()
        return editor

    async def share_text(
        self,
        viewer: UserContext,
        owner_key: str,
        advisor_key: str,
        label: str,
    ) -> str:
        """編成を共有用テキストにする."""
        roster = await self.load_roster(owner_key)
        editor = await self.open_editor(viewer, owner_key, advisor_key, label)
        return format_for_copy(
            owner_key=owner_key,
            advisor_label=advisor_key,
            label=label,
            slots=editor.slots,
            officers=roster.officer_index,
            skills=roster.skill_index,
            request_comment=editor.request_comment,
            answer_comment=editor.answer_comment,
        )

    def _new_editor(self, viewer: UserContext) -> FormationEditor:
        return FormationEditor(
            self.store,
            viewer,
            max_formations=self.max_formations,
        )


async def get_formation_service(
    formation_repo: Annotated[
        FormationRepository,
        Depends(get_formation_repository),
    ],
    ownership_repo: Annotated[
        OwnershipRepository,
        Depends(get_ownership_repository),
    ],
    roster_service: Annotated[RosterService, Depends(get_roster_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> FormationService:
    """FastAPI DI用のFormationServiceファクトリ.

    Returns
    -------
        FormationService

    """
    return FormationService(
        store=formation_repo,
        ownership_repo=ownership_repo,
        roster_service=roster_service,
        max_formations=settings.max_formations,
    )

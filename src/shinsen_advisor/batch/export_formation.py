"""編成の共有用テキスト出力バッチ.

指定した編成を共有用テキストに整形して標準出力へ出し、
クリップボードにもコピーする。
"""

import asyncio
import logging
from typing import Annotated

import typer

from shinsen_advisor.common.log_prefix import LogPrefix
from shinsen_advisor.database.database import async_session_factory
from shinsen_advisor.database.repository import (
    FormationRepository,
    OfficerRepository,
    OwnershipRepository,
    SkillRepository,
)
from shinsen_advisor.formation.service import FormationService
from shinsen_advisor.formation.share import copy_formation_text
from shinsen_advisor.identity.store import UserContext
from shinsen_advisor.infra.external.clipboard import SystemClipboard
from shinsen_advisor.roster.service import RosterService
from shinsen_advisor.settings.settings import get_settings

app = typer.Typer()

settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.batch_log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@app.command()
def main(
    owner: Annotated[str, typer.Argument(help="相談者のユーザー名")],
    advisor: Annotated[str, typer.Argument(help="編成者のユーザー名")],
    label: Annotated[str, typer.Argument(help="編成ラベル (例: 編成1)")] = "編成1",
    copy: Annotated[
        bool,
        typer.Option(help="クリップボードにもコピーする"),
    ] = True,
) -> None:
    """編成を共有用テキストとして出力する.

    Args:
    ----
        owner: 相談者のユーザー名
        advisor: 編成者のユーザー名
        label: 編成ラベル
        copy: クリップボードにコピーするか

    """
    text = asyncio.run(export_formation(owner=owner, advisor=advisor, label=label))
    typer.echo(text)

    if copy:
        if copy_formation_text(text, SystemClipboard()):
            typer.echo("編成内容をクリップボードにコピーしました", err=True)
        else:
            typer.echo("コピーに失敗しました", err=True)
            raise typer.Exit(code=1)


async def export_formation(owner: str, advisor: str, label: str) -> str:
    """編成を読み込んで共有用テキストを返す.

    Args:
    ----
        owner: 相談者のユーザー名
        advisor: 編成者のユーザー名
        label: 編成ラベル

    Returns:
    -------
        共有用テキスト

    """
    logger.info(
        f"{LogPrefix.EXPORT} owner={owner} advisor={advisor} label={label}"
    )

    async with async_session_factory() as session:
        ownership_repo = OwnershipRepository(session)
        service = FormationService(
            store=FormationRepository(session),
            ownership_repo=ownership_repo,
            roster_service=RosterService(
                officer_repo=OfficerRepository(session),
                skill_repo=SkillRepository(session),
                ownership_repo=ownership_repo,
            ),
            max_formations=settings.max_formations,
        )
        # 閲覧のみなので、編成者本人として開く
        return await service.share_text(
            UserContext(user_key=advisor), owner, advisor, label
        )


if __name__ == "__main__":
    app()

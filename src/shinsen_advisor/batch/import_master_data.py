"""武将・戦法マスタ取り込みバッチジョブ.

ゲーム内データを書き起こしたCSVを読み込み、
officers / skills テーブルへ ID をキーに登録・更新するバッチジョブ。
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer

from shinsen_advisor.common.log_prefix import LogPrefix
from shinsen_advisor.database.database import async_session_factory
from shinsen_advisor.database.repository import (
    OfficerRepository,
    SkillRepository,
)
from shinsen_advisor.master.service import MasterDataService
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
    officers_csv: Annotated[
        Path | None,
        typer.Option(help="武将マスタCSV", exists=True, dir_okay=False),
    ] = None,
    skills_csv: Annotated[
        Path | None,
        typer.Option(help="戦法マスタCSV", exists=True, dir_okay=False),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(help="ドライランモード(DB書き込みなし)"),
    ] = False,
) -> None:
    """マスタCSVをDBに取り込む.

    Args:
    ----
        officers_csv: 武将マスタCSVのパス
        skills_csv: 戦法マスタCSVのパス
        dry_run: ドライランモード

    """
    if officers_csv is None and skills_csv is None:
        raise typer.BadParameter("--officers-csv か --skills-csv を指定してください")

    asyncio.run(
        import_master_data(
            officers_csv=officers_csv,
            skills_csv=skills_csv,
            dry_run=dry_run,
        )
    )


async def import_master_data(
    officers_csv: Path | None,
    skills_csv: Path | None,
    dry_run: bool,
) -> None:
    """マスタCSVを非同期で取り込む.

    Args:
    ----
        officers_csv: 武将マスタCSVのパス
        skills_csv: 戦法マスタCSVのパス
        dry_run: ドライランモード

    """
    logger.info(
        f"{LogPrefix.BATCH_JOB} Starting with officers_csv={officers_csv}, "
        f"skills_csv={skills_csv}, dry_run={dry_run}"
    )

    async with async_session_factory() as session:
        service = MasterDataService(
            officer_repo=OfficerRepository(session),
            skill_repo=SkillRepository(session),
        )
        if officers_csv is not None:
            await service.import_officers(officers_csv, dry_run=dry_run)
        if skills_csv is not None:
            await service.import_skills(skills_csv, dry_run=dry_run)

    logger.info(f"{LogPrefix.BATCH_JOB} Completed")


if __name__ == "__main__":
    app()

"""テーブル作成バッチジョブ.

``shinsen_advisor.database.model`` に登録されたモデルのテーブルを
存在しなければ作成する。
"""

import asyncio
import logging

import typer
from sqlmodel import SQLModel

from shinsen_advisor.common.log_prefix import LogPrefix
from shinsen_advisor.database import model  # noqa: F401  モデルをメタデータに登録
from shinsen_advisor.database.database import async_engine
from shinsen_advisor.settings.settings import get_settings

app = typer.Typer()

settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.batch_log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@app.command()
def main() -> None:
    """テーブルを作成する."""
    asyncio.run(create_tables())


async def create_tables() -> None:
    """SQLModelのメタデータからテーブルを作成."""
    logger.info(
        f"{LogPrefix.BATCH_JOB} Creating tables: "
        f"{', '.join(sorted(SQLModel.metadata.tables))}"
    )
    async with async_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info(f"{LogPrefix.BATCH_JOB} Completed")


if __name__ == "__main__":
    app()

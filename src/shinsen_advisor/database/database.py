"""データベース接続とセッション管理を提供するモジュール.

APIのリクエストもバッチジョブも ``async_session_factory`` からセッションを作る。
編成保存ではコミット後にヘッダーのIDを参照するため、コミットで属性を
失効させない。
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlmodel.ext.asyncio.session import AsyncSession

from shinsen_advisor.settings.settings import get_settings

settings = get_settings()

async_engine = create_async_engine(
    url=settings.postgres_driver_url,
    echo=settings.sql_log,
    pool_pre_ping=True,
    connect_args={"server_settings": {"timezone": "Asia/Tokyo"}},
)

async_session_factory = async_sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_async_db_session() -> AsyncGenerator[AsyncSession]:
    """リクエスト単位のDBセッションを返す(FastAPI DI用).

    Yields
    ------
        AsyncSession: リクエスト終了時にクローズされるセッション

    """
    async with async_session_factory() as session:
        yield session

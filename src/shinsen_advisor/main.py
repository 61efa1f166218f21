"""FastAPIアプリケーションのメインエントリーポイント."""

import logging
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from shinsen_advisor.common.exceptions import ShinsenAdvisorError
from shinsen_advisor.formation.router import router as formation_router
from shinsen_advisor.identity.router import router as identity_router
from shinsen_advisor.roster.router import router as roster_router
from shinsen_advisor.settings.settings import Settings, get_settings

logger = logging.getLogger(__name__)


async def handle_app_error(request: Request, exc: ShinsenAdvisorError) -> JSONResponse:
    """アプリケーション例外を利用者向けメッセージのJSONに変換する."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def create_app() -> FastAPI:
    """FastAPIアプリケーションを生成する.

    Returns
    -------
        FastAPI: ルーターと例外ハンドラを登録したアプリケーション

    """
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    application = FastAPI(title="信長の野望 真戦 編成相談ツール")
    application.add_exception_handler(
        ShinsenAdvisorError,
        handle_app_error,  # type: ignore[arg-type]
    )
    application.include_router(identity_router)
    application.include_router(roster_router)
    application.include_router(formation_router)

    @application.get("/")
    async def root(
        settings: Annotated[Settings, Depends(get_settings)],
    ) -> dict[str, str]:
        """ルートエンドポイント.

        稼働確認用にアプリケーション名と実行環境を返却する。

        Args:
            settings: アプリケーション設定

        Returns:
            dict: アプリケーション名と実行環境

        """
        return {"app": application.title, "environment": settings.environment}

    return application


app = create_app()

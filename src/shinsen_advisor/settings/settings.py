"""アプリケーション設定を管理するモジュール."""

from functools import lru_cache

from pydantic import computed_field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """アプリケーション全体の設定を管理するクラス.

    環境変数から設定値を読み込み、データベース接続情報などを提供する。

    Attributes
    ----------
        environment: 実行環境(development, production等)
        postgres_host: PostgreSQLホスト名
        postgres_port: PostgreSQLポート番号
        postgres_user: PostgreSQLユーザー名
        postgres_password: PostgreSQLパスワード
        postgres_database: PostgreSQLデータベース名
        sql_log: SQLログの出力有無(デフォルト: False)
        log_level: APIサーバーのログレベル
        batch_log_level: バッチジョブのログレベル
        user_key_cookie: ユーザー名を保持するCookie名
        user_key_cookie_max_age: Cookieの有効期間(秒)
        max_formations: 相談者・編成者の組あたりの編成上限数

    """

    environment: str

    postgres_host: str
    postgres_port: int
    postgres_user: str
    postgres_password: str
    postgres_database: str

    sql_log: bool = False
    log_level: str = "INFO"
    batch_log_level: str = "INFO"

    user_key_cookie: str = "nobu-user-key"
    # ユーザー名は期限切れにしない(ログアウトで消すだけ)
    user_key_cookie_max_age: int = 60 * 60 * 24 * 365 * 10

    max_formations: int = 5

    @computed_field  # type: ignore[prop-decorator]
    @property
    def postgres_driver_url(self) -> str:
        """PostgreSQLの非同期接続URLを生成する.

        Returns
        -------
            str: asyncpg用のPostgreSQL接続URL

        """
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}@"
            f"{self.postgres_host}:{self.postgres_port}/{self.postgres_database}"
        )


@lru_cache
def get_settings() -> Settings:
    """アプリケーション設定のシングルトンインスタンスを取得する.

    LRUキャッシュにより同一インスタンスを再利用し、
    環境変数の読み込みコストを削減する。

    Returns
    -------
        Settings: アプリケーション設定オブジェクト

    """
    return Settings()

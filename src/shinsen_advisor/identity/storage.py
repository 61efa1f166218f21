"""KeyValueStorage の実装(メモリ / HTTP Cookie)."""

from urllib.parse import quote, unquote

from fastapi import Request, Response


class MemoryStorage:
    """プロセス内の辞書に保存するストレージ. Cookieを持たないテストで使う."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)


class CookieStorage:
    """ブラウザのCookieをキー・バリュー領域として扱うストレージ.

    Cookieに載せられない日本語のユーザー名を扱うため、値はURLエンコードして
    保存する。同じリクエスト内で書き込んだ値は以降の ``get`` に反映される。

    Attributes
    ----------
        request: 受信したリクエスト
        response: Set-Cookie を書き込むレスポンス(読み取り専用なら None)
        max_age: Cookieの有効期間(秒)

    """

    def __init__(
        self,
        request: Request,
        response: Response | None = None,
        max_age: int | None = None,
    ) -> None:
        self.request = request
        self.response = response
        self.max_age = max_age
        self._written: dict[str, str | None] = {}

    def get(self, key: str) -> str | None:
        if key in self._written:
            return self._written[key]
        raw = self.request.cookies.get(key)
        if raw is None:
            return None
        return unquote(raw)

    def set(self, key: str, value: str) -> None:
        self._require_response().set_cookie(
            key,
            quote(value, safe=""),
            max_age=self.max_age,
            httponly=True,
            samesite="lax",
        )
        self._written[key] = value

    def remove(self, key: str) -> None:
        self._require_response().delete_cookie(key)
        self._written[key] = None

    def _require_response(self) -> Response:
        if self.response is None:
            raise RuntimeError("CookieStorage is read-only without a response")
        return self.response

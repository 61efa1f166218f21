"""ユーザー名ストアのテスト."""

from unittest.mock import MagicMock

import pytest
from fastapi import Response

from shinsen_advisor.identity.storage import CookieStorage, MemoryStorage
from shinsen_advisor.identity.store import IdentityStore, UserContext


class TestIdentityStore:
    """IdentityStore のテスト."""

    def test_set_trims_name(self) -> None:
        store = IdentityStore(MemoryStorage())

        assert store.set("  Alice  ") is True
        assert store.get() == "Alice"
        assert store.context() == UserContext(user_key="Alice")

    def test_set_empty_writes_nothing(self) -> None:
        """空白だけの名前は保存しない."""
        storage = MemoryStorage({"nobu-user-key": "Alice"})
        store = IdentityStore(storage)

        assert store.set("   ") is False
        assert store.get() == "Alice"

    def test_clear(self) -> None:
        store = IdentityStore(MemoryStorage({"nobu-user-key": "Alice"}))

        store.clear()

        assert store.get() is None
        assert store.context() is None

    def test_custom_key(self) -> None:
        storage = MemoryStorage()
        store = IdentityStore(storage, key="other")

        store.set("Bob")

        assert storage.get("other") == "Bob"
        assert storage.get("nobu-user-key") is None


class TestCookieStorage:
    """CookieStorage のテスト."""

    def _request(self, cookies: dict[str, str]) -> MagicMock:
        request = MagicMock()
        request.cookies = cookies
        return request

    def test_reads_url_encoded_value(self) -> None:
        """日本語名はURLエンコードされたCookieから復元する."""
        storage = CookieStorage(self._request({"k": "%E4%BF%A1%E9%95%B7"}))

        assert storage.get("k") == "信長"

    def test_set_writes_cookie_and_overlays(self) -> None:
        response = Response()
        storage = CookieStorage(self._request({}), response, max_age=60)

        storage.set("k", "信長")

        assert storage.get("k") == "信長"
        header = response.headers["set-cookie"]
        assert "k=%E4%BF%A1%E9%95%B7" in header
        assert "HttpOnly" in header

    def test_remove(self) -> None:
        response = Response()
        storage = CookieStorage(self._request({"k": "Alice"}), response)

        storage.remove("k")

        assert storage.get("k") is None

    def test_read_only_without_response(self) -> None:
        storage = CookieStorage(self._request({}))

        with pytest.raises(RuntimeError):
            storage.set("k", "Alice")

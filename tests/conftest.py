"""テスト共通のフィクスチャ."""

import os
from collections.abc import AsyncIterator, Sequence

# 設定クラスは環境変数を必須とするため、アプリのインポートより前に設定する
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("POSTGRES_HOST", "localhost")
os.environ.setdefault("POSTGRES_PORT", "5432")
os.environ.setdefault("POSTGRES_USER", "test")
os.environ.setdefault("POSTGRES_PASSWORD", "test")
os.environ.setdefault("POSTGRES_DATABASE", "test")

import pytest  # noqa: E402
from sqlalchemy.exc import SQLAlchemyError  # noqa: E402

from shinsen_advisor.database.model import (  # noqa: E402
    Formation,
    FormationSlot,
    Officer,
    Skill,
)
from shinsen_advisor.identity.store import UserContext  # noqa: E402


class FakeFormationStore:
    """メモリ上で動く編成の永続化先.

    ``fail_on`` にメソッド名を入れると、そのメソッドで SQLAlchemyError を送出する。
    コミット前の書き込みは ``rollback`` で破棄される。
    """

    def __init__(self) -> None:
        self.headers: dict[int, Formation] = {}
        self.slots: dict[int, list[FormationSlot]] = {}
        self.fail_on: set[str] = set()
        self.calls: list[str] = []
        self.commits = 0
        self.rollbacks = 0
        self._next_id = 1
        self._snapshot: tuple[dict, dict] | None = None

    def _enter(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise SQLAlchemyError(f"{name} failed")

    def _begin(self) -> None:
        if self._snapshot is None:
            self._snapshot = (
                dict(self.headers),
                {k: list(v) for k, v in self.slots.items()},
            )

    async def list_headers_by_owner(self, owner_key: str) -> Sequence[Formation]:
        self._enter("list_headers_by_owner")
        return [h for h in self.headers.values() if h.owner_key == owner_key]

    async def get_header(
        self, owner_key: str, advisor_key: str, label: str
    ) -> Formation | None:
        self._enter("get_header")
        for header in self.headers.values():
            if (header.owner_key, header.advisor_key, header.label) == (
                owner_key,
                advisor_key,
                label,
            ):
                return header
        return None

    async def get_slots(self, formation_id: int) -> Sequence[FormationSlot]:
        self._enter("get_slots")
        return list(self.slots.get(formation_id, []))

    async def upsert_header(self, formation: Formation) -> int | None:
        self._enter("upsert_header")
        self._begin()
        existing = None
        if formation.id is not None:
            existing = self.headers.get(formation.id)
        if existing is None:
            for header in self.headers.values():
                if (header.owner_key, header.advisor_key, header.label) == (
                    formation.owner_key,
                    formation.advisor_key,
                    formation.label,
                ):
                    existing = header
        formation_id = existing.id if existing is not None else self._next_id
        if existing is None:
            self._next_id += 1
        self.headers[formation_id] = Formation(
            id=formation_id,
            owner_key=formation.owner_key,
            advisor_key=formation.advisor_key,
            user_key=formation.user_key,
            label=formation.label,
            request_comment=formation.request_comment,
            answer_comment=formation.answer_comment,
        )
        return formation_id

    async def delete_slots(self, formation_id: int) -> None:
        self._enter("delete_slots")
        self._begin()
        self.slots.pop(formation_id, None)

    async def insert_slots(self, slots: Sequence[FormationSlot]) -> None:
        self._enter("insert_slots")
        self._begin()
        for slot in slots:
            self.slots.setdefault(slot.formation_id, []).append(slot)

    async def commit(self) -> None:
        self._enter("commit")
        self.commits += 1
        self._snapshot = None

    async def rollback(self) -> None:
        self.calls.append("rollback")
        self.rollbacks += 1
        if self._snapshot is not None:
            self.headers, self.slots = self._snapshot
            self._snapshot = None


@pytest.fixture
def store() -> FakeFormationStore:
    """空の編成ストア."""
    return FakeFormationStore()


@pytest.fixture
def alice() -> UserContext:
    return UserContext(user_key="Alice")


@pytest.fixture
def bob() -> UserContext:
    return UserContext(user_key="Bob")


@pytest.fixture
def officers() -> list[Officer]:
    """テスト用の武将マスタ."""
    return [
        Officer(
            id=1,
            name="Nobunaga",
            rarity=5,
            cost_raw=7,
            faction="織田",
            inherent_skill_name="Atsumori",
        ),
        Officer(id=2, name="Hideyoshi", rarity=5, cost_raw=6, faction="織田"),
        Officer(id=3, name="Ieyasu", rarity=4, cost_raw=6, faction="徳川"),
    ]


@pytest.fixture
def skills() -> list[Skill]:
    """テスト用の戦法マスタ(id=99 は固有戦法)."""
    return [
        Skill(id=10, name="Kachidoki", category="指揮", inherit1_name="Nobunaga"),
        Skill(id=11, name="Kitsutsuki", category="主動", inherit2_name="Ieyasu"),
        Skill(id=12, name="Yuuou", category="主動"),
        Skill(id=99, name="Atsumori", category="指揮", owner_name="Nobunaga"),
    ]


@pytest.fixture
async def app_client() -> AsyncIterator:
    """ASGIアプリに直接つなぐHTTPクライアント."""
    from httpx import ASGITransport, AsyncClient

    from shinsen_advisor.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client
    app.dependency_overrides.clear()

"""戦法マスタモデルを定義するモジュール."""

from sqlalchemy import BigInteger, Column
from sqlmodel import Field, SQLModel


class Skill(SQLModel, table=True):
    """戦法マスタを表すデータベースモデル.

    Attributes
    ----------
        id: 戦法ID(主キー)
        name: 戦法名
        category: 種別 (例: 指揮, 主動, 受動)
        trigger_rate: 発動率(%)
        owner_name: 固有戦法の持ち主の武将名(NULL以外は固有戦法)
        description: 効果説明
        inherit1_name: 伝授元の武将名1
        inherit2_name: 伝授元の武将名2

    """

    __tablename__ = "skills"

    id: int | None = Field(
        default=None,
        sa_column=Column(BigInteger, primary_key=True, autoincrement=True),
    )
    name: str = Field(max_length=100, index=True)
    category: str | None = Field(default=None, max_length=50)
    trigger_rate: int | None = Field(default=None)
    owner_name: str | None = Field(default=None, max_length=100, index=True)
    description: str | None = Field(default=None)
    inherit1_name: str | None = Field(default=None, max_length=100)
    inherit2_name: str | None = Field(default=None, max_length=100)

    @property
    def is_exclusive(self) -> bool:
        """固有戦法かどうか."""
        return self.owner_name is not None

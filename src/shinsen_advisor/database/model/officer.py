"""武将マスタモデルを定義するモジュール."""

from sqlalchemy import BigInteger, Column
from sqlmodel import Field, SQLModel


class Officer(SQLModel, table=True):
    """武将マスタを表すデータベースモデル.

    アプリからは参照のみで、更新はマスタ取り込みバッチが行う。

    Attributes
    ----------
        id: 武将ID(主キー)
        name: 武将名 (例: 織田信長)
        rarity: レアリティ(★の数)
        cost_raw: コスト
        faction: 勢力
        house: 家門
        inherent_skill_name: 固有戦法名
        inherent_skill_type: 固有戦法の種別
        inheritable_skill_name: 伝授戦法名
        trait1: 特性1
        trait2: 特性2

    """

    __tablename__ = "officers"

    id: int | None = Field(
        default=None,
        sa_column=Column(BigInteger, primary_key=True, autoincrement=True),
    )
    name: str = Field(max_length=100, index=True)
    rarity: int = Field(default=0, index=True)
    cost_raw: int | None = Field(default=None)
    faction: str | None = Field(default=None, max_length=50)
    house: str | None = Field(default=None, max_length=50)
    inherent_skill_name: str | None = Field(default=None, max_length=100)
    inherent_skill_type: str | None = Field(default=None, max_length=50)
    inheritable_skill_name: str | None = Field(default=None, max_length=100)
    trait1: str | None = Field(default=None)
    trait2: str | None = Field(default=None)

"""所持武将・所持戦法のデータモデルを定義するモジュール."""

from sqlalchemy import BigInteger, CheckConstraint, Column
from sqlmodel import Field, SQLModel


class UserOfficer(SQLModel, table=True):
    """ユーザーの所持武将(枚数)を表すデータベースモデル.

    (user_key, officer_id) ごとに1行。count > 0 のとき所持とみなす。

    Attributes
    ----------
        user_key: ユーザー名
        officer_id: 武将ID
        count: 所持枚数

    """

    __tablename__ = "user_officers"
    __table_args__ = (
        CheckConstraint("count >= 0", name="ck_user_officers_count"),
    )

    user_key: str = Field(primary_key=True, max_length=100)
    officer_id: int = Field(
        sa_column=Column(BigInteger, primary_key=True),
    )
    count: int = Field(default=0)


class UserSkill(SQLModel, table=True):
    """ユーザーの所持戦法を表すデータベースモデル.

    登録画面からは 0/1 で保存される。

    Attributes
    ----------
        user_id: ユーザー名
        skill_id: 戦法ID
        count: 所持数

    """

    __tablename__ = "user_skills"
    __table_args__ = (
        CheckConstraint("count >= 0", name="ck_user_skills_count"),
    )

    user_id: str = Field(primary_key=True, max_length=100)
    skill_id: int = Field(
        sa_column=Column(BigInteger, primary_key=True),
    )
    count: int = Field(default=0)

"""編成データモデルを定義するモジュール."""

from datetime import UTC, datetime

from sqlalchemy import BigInteger, Column, DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel


class Formation(SQLModel, table=True):
    """編成ヘッダーを表すデータベースモデル.

    (owner_key, advisor_key, label) で一意。

    Attributes
    ----------
        id: 自動採番ID(主キー)
        owner_key: 相談者のユーザー名
        advisor_key: 編成者のユーザー名
        user_key: 旧カラム(相談者と同じ値を入れる)
        label: 編成ラベル (例: 編成1)
        request_comment: 依頼者コメント
        answer_comment: 回答者コメント
        updated_at: 更新日時

    """

    __tablename__ = "formations"
    __table_args__ = (
        UniqueConstraint(
            "owner_key",
            "advisor_key",
            "label",
            name="uq_formations_owner_key_advisor_key_label",
        ),
    )

    id: int | None = Field(
        default=None,
        sa_column=Column(BigInteger, primary_key=True, autoincrement=True),
    )
    owner_key: str = Field(max_length=100, index=True)
    advisor_key: str = Field(max_length=100, index=True)
    user_key: str | None = Field(default=None, max_length=100)
    label: str = Field(max_length=20)
    request_comment: str | None = Field(default=None)
    answer_comment: str | None = Field(default=None)
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class FormationSlot(SQLModel, table=True):
    """編成の各枠(主将・副将1・副将2)を表すデータベースモデル.

    保存のたびに編成単位で削除・再登録される。

    Attributes
    ----------
        formation_id: 編成ID
        position: 枠 (leader / sub1 / sub2)
        officer_id: 武将ID
        inherit_skill1_id: 伝授戦法1のID
        inherit_skill2_id: 伝授戦法2のID

    """

    __tablename__ = "formation_slots"

    formation_id: int = Field(
        sa_column=Column(BigInteger, primary_key=True),
    )
    position: str = Field(primary_key=True, max_length=10)
    officer_id: int = Field(sa_column=Column(BigInteger, nullable=False))
    inherit_skill1_id: int | None = Field(
        default=None, sa_column=Column(BigInteger, nullable=True)
    )
    inherit_skill2_id: int | None = Field(
        default=None, sa_column=Column(BigInteger, nullable=True)
    )

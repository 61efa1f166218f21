"""ID から武将・戦法を引くための読み取り専用インデックス."""

from collections.abc import Iterable, Iterator, Mapping
from typing import Generic, Protocol, TypeVar


class _HasId(Protocol):
    id: int | None


T = TypeVar("T", bound=_HasId)


class RecordIndex(Mapping[int, T], Generic[T]):
    """ID -> レコードの不変マッピング.

    読み込みのたびに1度だけ構築し、画面(リクエスト)の間は変更しない。
    IDが未採番(None)のレコードは含めない。
    """

    def __init__(self, records: Iterable[T]) -> None:
        self._records: dict[int, T] = {
            record.id: record for record in records if record.id is not None
        }

    def __getitem__(self, record_id: int) -> T:
        return self._records[record_id]

    def __iter__(self) -> Iterator[int]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self)} records)"

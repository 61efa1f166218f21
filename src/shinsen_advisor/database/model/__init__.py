"""データベースモデルを一括エクスポートするモジュール.

新しいモデルを追加する際は、ここにインポート文を1行追加するだけで
``SQLModel.metadata`` に登録され、テーブル作成バッチの対象になります。

Example:
-------
    新しいモデル `Clan` を追加した場合:
    ```python
    from .clan import Clan
    ```

"""

from .formation import Formation, FormationSlot
from .officer import Officer
from .ownership import UserOfficer, UserSkill
from .skill import Skill

__all__ = [
    "Formation",
    "FormationSlot",
    "Officer",
    "Skill",
    "UserOfficer",
    "UserSkill",
]

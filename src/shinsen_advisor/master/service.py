"""武将・戦法マスタの取り込みサービスモジュール."""

import logging
import math
from pathlib import Path
from typing import Any

import pandas as pd

from shinsen_advisor.common.log_prefix import LogPrefix
from shinsen_advisor.database.model.officer import Officer
from shinsen_advisor.database.model.skill import Skill
from shinsen_advisor.database.repository.officer_repository import OfficerRepository
from shinsen_advisor.database.repository.skill_repository import SkillRepository

logger = logging.getLogger(__name__)

OFFICER_COLUMNS = [
    "id",
    "name",
    "rarity",
    "cost_raw",
    "faction",
    "house",
    "inherent_skill_name",
    "inherent_skill_type",
    "inheritable_skill_name",
    "trait1",
    "trait2",
]
OFFICER_INT_COLUMNS = {"id", "rarity", "cost_raw"}
OFFICER_REQUIRED_COLUMNS = ["id", "name", "rarity"]

SKILL_COLUMNS = [
    "id",
    "name",
    "category",
    "trigger_rate",
    "owner_name",
    "description",
    "inherit1_name",
    "inherit2_name",
]
SKILL_INT_COLUMNS = {"id", "trigger_rate"}
SKILL_REQUIRED_COLUMNS = ["id", "name"]


class MasterDataError(ValueError):
    """マスタCSVの形式エラー."""


def read_master_csv(
    path: Path,
    columns: list[str],
    required_columns: list[str],
) -> pd.DataFrame:
    """マスタCSVを読み込んで検証・クリーニングする.

    Args:
    ----
        path: CSVファイルのパス
        columns: 取り込む列(存在しない任意列は空で補う)
        required_columns: 必須列

    Returns:
    -------
        必要な列だけに絞ったDataFrame

    Raises:
    ------
        MasterDataError: 必須列がない場合

    """
    df = pd.read_csv(path, dtype=str, keep_default_na=True)
    df.columns = [str(c).strip() for c in df.columns]

    missing = [c for c in required_columns if c not in df.columns]
    if missing:
        raise MasterDataError(f"{path.name}: missing required columns {missing}")

    for column in columns:
        if column not in df.columns:
            df[column] = None
    df = df[columns]

    original_len = len(df)
    df = df.dropna(subset=required_columns)
    if len(df) < original_len:
        logger.warning(
            f"{LogPrefix.IMPORT_MASTER} {path.name}: "
            f"dropped {original_len - len(df)} rows without required values"
        )
    return df


def dataframe_to_rows(df: pd.DataFrame, int_columns: set[str]) -> list[dict[str, Any]]:
    """DataFrameを辞書のリストにする. 空欄は None、整数列は int にする."""
    rows = []
    for record in df.to_dict(orient="records"):
        row: dict[str, Any] = {}
        for key, value in record.items():
            value = _blank_to_none(value)
            if value is not None and key in int_columns:
                value = int(float(value))
            elif isinstance(value, str):
                value = value.strip()
            row[key] = value
        rows.append(row)
    return rows


class MasterDataService:
    """マスタCSVをDBへ取り込むサービス.

    Attributes
    ----------
        officer_repo: 武将リポジトリ
        skill_repo: 戦法リポジトリ

    """

    def __init__(
        self,
        officer_repo: OfficerRepository,
        skill_repo: SkillRepository,
    ) -> None:
        self.officer_repo = officer_repo
        self.skill_repo = skill_repo

    async def import_officers(self, path: Path, dry_run: bool = False) -> int:
        """武将マスタCSVを取り込み、件数を返す."""
        df = read_master_csv(path, OFFICER_COLUMNS, OFFICER_REQUIRED_COLUMNS)
        records = [Officer(**row) for row in dataframe_to_rows(df, OFFICER_INT_COLUMNS)]
        if dry_run:
            logger.info(
                f"{LogPrefix.IMPORT_MASTER} DRY RUN - would import "
                f"{len(records)} officers from {path.name}"
            )
            return len(records)

        count = await self.officer_repo.bulk_upsert(records)
        logger.info(f"{LogPrefix.IMPORT_MASTER} imported {count} officers")
        return count

    async def import_skills(self, path: Path, dry_run: bool = False) -> int:
        """戦法マスタCSVを取り込み、件数を返す."""
        df = read_master_csv(path, SKILL_COLUMNS, SKILL_REQUIRED_COLUMNS)
        records = [Skill(**row) for row in dataframe_to_rows(df, SKILL_INT_COLUMNS)]
        if dry_run:
            logger.info(
                f"{LogPrefix.IMPORT_MASTER} DRY RUN - would import "
                f"{len(records)} skills from {path.name}"
            )
            return len(records)

        count = await self.skill_repo.bulk_upsert(records)
        logger.info(f"{LogPrefix.IMPORT_MASTER} imported {count} skills")
        return count


def _blank_to_none(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value

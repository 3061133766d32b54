"""勢力エンティティモジュール"""

import math
from dataclasses import dataclass, field

from mbforge.constants import MAX_RELATION, MIN_RELATION
from mbforge.models.base import EntityValidationError


@dataclass
class FactionColor:
    """勢力カラー（RGB）"""

    r: int = 0
    g: int = 0
    b: int = 0


@dataclass
class FactionRelation:
    """他勢力との関係

    Attributes:
        faction_id: 対象勢力のID
        relation: 関係値（-100〜100）
    """

    faction_id: str
    relation: float = 0.0


@dataclass
class Faction:
    """勢力データ"""

    id: str
    name: str = ""
    flags: int = 0
    color: FactionColor = field(default_factory=FactionColor)
    relations: list[FactionRelation] = field(default_factory=list)
    ranking: float = 0.0

    def add_relation(self, faction_id: str, relation: float) -> None:
        """勢力関係を追加する"""
        self.relations.append(FactionRelation(faction_id=faction_id, relation=relation))

    def get_relation(self, faction_id: str) -> float | None:
        """指定勢力との関係値を返す

        Args:
            faction_id: 対象勢力のID

        Returns:
            最初に見つかった関係値。関係が定義されていない場合はNone
        """
        for relation in self.relations:
            if relation.faction_id == faction_id:
                return relation.relation
        return None

    def validate(self) -> None:
        """勢力データの整合性を検証する

        Raises:
            EntityValidationError: IDまたは名称が空、色成分・関係値が範囲外、
                またはランキングが有限の数値でない場合
        """
        if not self.id:
            raise EntityValidationError("勢力IDが空です")
        if not self.name:
            raise EntityValidationError("勢力名が空です")
        for component in (self.color.r, self.color.g, self.color.b):
            if not 0 <= component <= 0xFF:
                raise EntityValidationError(f"色成分は0から255の範囲である必要があります: {component}")
        if not math.isfinite(self.ranking):
            raise EntityValidationError(f"ランキングが有限の数値ではありません: {self.ranking}")
        for relation in self.relations:
            if not MIN_RELATION <= relation.relation <= MAX_RELATION:
                raise EntityValidationError(
                    f"{relation.faction_id} との関係値は"
                    f"{MIN_RELATION:g}から{MAX_RELATION:g}の範囲である必要があります"
                )

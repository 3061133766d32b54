"""兵種エンティティモジュール"""

from dataclasses import astuple, dataclass, field, fields
from enum import IntEnum

from mbforge.constants import MAX_ATTRIBUTE_VALUE, MAX_TROOP_LEVEL, MIN_TROOP_LEVEL
from mbforge.models.base import EntityValidationError


class TroopType(IntEnum):
    """兵種タイプ"""

    PLAYER = 0
    REGULAR = 1
    MOUNTED = 2
    RANGED = 3
    HERO = 4


_TYPE_DISPLAY_NAMES: dict[TroopType, str] = {
    TroopType.PLAYER: "プレイヤー",
    TroopType.REGULAR: "一般兵",
    TroopType.MOUNTED: "騎兵",
    TroopType.RANGED: "射撃兵",
    TroopType.HERO: "英雄",
}


@dataclass
class TroopFlags:
    """兵種の独立したフラグ群"""

    hero: bool = False
    female: bool = False
    guarantee_boots: bool = False
    guarantee_armor: bool = False
    guarantee_helmet: bool = False
    guarantee_horse: bool = False
    guarantee_ranged: bool = False
    no_capture_alive: bool = False


@dataclass
class TroopAttributes:
    """基本属性"""

    strength: int = 0
    agility: int = 0
    intelligence: int = 0
    charisma: int = 0


@dataclass
class TroopSkills:
    """スキル値

    フィールド順はゲームのスキルID順（constants.SKILL_NAMES）と一致する。
    """

    ironflesh: int = 0
    power_strike: int = 0
    power_throw: int = 0
    power_draw: int = 0
    weapon_master: int = 0
    shield: int = 0
    athletics: int = 0
    riding: int = 0
    horse_archery: int = 0
    looting: int = 0
    trainer: int = 0
    tracking: int = 0
    tactics: int = 0
    path_finding: int = 0
    spotting: int = 0
    inventory_management: int = 0
    wound_treatment: int = 0
    surgery: int = 0
    first_aid: int = 0
    engineer: int = 0
    persuasion: int = 0
    prisoner_management: int = 0
    leadership: int = 0
    trade: int = 0

    def as_list(self) -> list[int]:
        """スキル値をスキルID順のリストで返す"""
        return list(astuple(self))

    @classmethod
    def from_values(cls, values: list[int]) -> "TroopSkills":
        """スキルID順の値リストから生成する

        リストが短い場合、残りのスキルは0になる。余分な値は無視する。

        Args:
            values: スキルID順の値

        Returns:
            生成したTroopSkills
        """
        names = [f.name for f in fields(cls)]
        return cls(**dict(zip(names, values)))


@dataclass
class WeaponProficiency:
    """武器熟練度"""

    one_handed: int = 0
    two_handed: int = 0
    polearm: int = 0
    archery: int = 0
    crossbow: int = 0
    throwing: int = 0


@dataclass
class Equipment:
    """装備エントリ

    Attributes:
        item_id: 装備アイテムのID
        modifier: 修飾子の値
    """

    item_id: str
    modifier: int = 0


@dataclass
class Troop:
    """兵種データ

    Attributes:
        id: 兵種ID（一意キー）
        name: 表示名
        plural_name: 複数形の表示名
        troop_type: 兵種タイプ
        flags: フラグ群
        level: レベル（1〜63）
        upgrade_troop: アップグレード先の兵種ID
        upgrade_exp: アップグレードに必要な経験値
        attributes: 基本属性
        skills: スキル値
        proficiency: 武器熟練度
        equipment: 装備リスト
        wage: 給料
    """

    id: str
    name: str = ""
    plural_name: str = ""
    troop_type: TroopType = TroopType.REGULAR
    flags: TroopFlags = field(default_factory=TroopFlags)
    level: int = MIN_TROOP_LEVEL
    upgrade_troop: str | None = None
    upgrade_exp: int = 0
    attributes: TroopAttributes = field(default_factory=TroopAttributes)
    skills: TroopSkills = field(default_factory=TroopSkills)
    proficiency: WeaponProficiency = field(default_factory=WeaponProficiency)
    equipment: list[Equipment] = field(default_factory=list)
    wage: int = 0

    def type_display_name(self) -> str:
        """兵種タイプの表示名を返す"""
        return _TYPE_DISPLAY_NAMES[self.troop_type]

    def total_attribute_points(self) -> int:
        """属性値の合計を返す"""
        return sum(astuple(self.attributes))

    def total_skill_points(self) -> int:
        """スキル値の合計を返す"""
        return sum(self.skills.as_list())

    def validate(self) -> None:
        """兵種データの整合性を検証する

        Raises:
            EntityValidationError: IDまたは名称が空、レベル・属性値が範囲外の場合
        """
        if not self.id:
            raise EntityValidationError("兵種IDが空です")
        if not self.name:
            raise EntityValidationError("兵種名が空です")
        if self.level < MIN_TROOP_LEVEL or self.level > MAX_TROOP_LEVEL:
            raise EntityValidationError(
                f"レベルは{MIN_TROOP_LEVEL}から{MAX_TROOP_LEVEL}の範囲である必要があります"
            )
        for attr in fields(self.attributes):
            value = getattr(self.attributes, attr.name)
            if value < 0 or value > MAX_ATTRIBUTE_VALUE:
                raise EntityValidationError(
                    f"属性 {attr.name} は0から{MAX_ATTRIBUTE_VALUE}の範囲である必要があります"
                )

"""アイテムエンティティモジュール"""

from dataclasses import dataclass, field
from enum import IntEnum

from mbforge.constants import MAX_ITEM_PRICE, MAX_ITEM_WEIGHT
from mbforge.models.base import EntityValidationError


class ItemType(IntEnum):
    """アイテム種別

    値はフラグワードの下位8ビットに格納される種別タグ。
    """

    ONE_HANDED_WEAPON = 0x2
    TWO_HANDED_WEAPON = 0x3
    POLEARM = 0x4
    ARCHERY = 0x5
    CROSSBOW = 0x6
    THROWING = 0x7
    SHIELD = 0x8
    HEAD_ARMOR = 0xC
    BODY_ARMOR = 0xD
    LEG_ARMOR = 0xE
    HAND_ARMOR = 0xF
    HORSE = 0x10
    FOOD = 0x11
    BOOK = 0x12
    OTHER = 0x13


WEAPON_TYPES: frozenset[ItemType] = frozenset(
    {
        ItemType.ONE_HANDED_WEAPON,
        ItemType.TWO_HANDED_WEAPON,
        ItemType.POLEARM,
        ItemType.ARCHERY,
        ItemType.CROSSBOW,
        ItemType.THROWING,
    }
)

ARMOR_TYPES: frozenset[ItemType] = frozenset(
    {
        ItemType.HEAD_ARMOR,
        ItemType.BODY_ARMOR,
        ItemType.LEG_ARMOR,
        ItemType.HAND_ARMOR,
    }
)

_TYPE_DISPLAY_NAMES: dict[ItemType, str] = {
    ItemType.ONE_HANDED_WEAPON: "片手武器",
    ItemType.TWO_HANDED_WEAPON: "両手武器",
    ItemType.POLEARM: "長柄武器",
    ItemType.ARCHERY: "弓",
    ItemType.CROSSBOW: "クロスボウ",
    ItemType.THROWING: "投擲武器",
    ItemType.SHIELD: "盾",
    ItemType.HEAD_ARMOR: "頭防具",
    ItemType.BODY_ARMOR: "胴防具",
    ItemType.LEG_ARMOR: "脚防具",
    ItemType.HAND_ARMOR: "手防具",
    ItemType.HORSE: "馬",
    ItemType.FOOD: "食料",
    ItemType.BOOK: "書物",
    ItemType.OTHER: "その他",
}


@dataclass
class ItemFlags:
    """アイテムの独立したフラグ群"""

    can_penetrate_shield: bool = False
    can_knock_down: bool = False
    two_handed: bool = False
    thrust_weapon: bool = False
    swing_weapon: bool = False
    unbalanced: bool = False
    crush_through: bool = False
    bonus_against_shield: bool = False


@dataclass
class Item:
    """アイテムデータ

    Attributes:
        id: アイテムID（一意キー）
        name: 表示名
        mesh_name: メッシュ名
        material: マテリアル名
        texture: テクスチャ名
        item_type: アイテム種別
        flags: フラグ群
        damage: ダメージ
        speed: 速度
        reach: リーチ
        accuracy: 精度
        armor: 防御値
        leg_armor: 脚防御値
        difficulty: 要求難度
        hit_points: 耐久値
        price: 価格
        weight: 重量
        capabilities: 能力ビット
        modifiers: 修飾子（名前, 値）の順序付きリスト
    """

    id: str
    name: str = ""
    mesh_name: str = ""
    material: str = ""
    texture: str = ""
    item_type: ItemType = ItemType.OTHER
    flags: ItemFlags = field(default_factory=ItemFlags)
    damage: int = 0
    speed: int = 0
    reach: int = 0
    accuracy: int = 0
    armor: int = 0
    leg_armor: int = 0
    difficulty: int = 0
    hit_points: int = 0
    price: int = 0
    weight: float = 0.0
    capabilities: int = 0
    modifiers: list[tuple[str, int]] = field(default_factory=list)

    def is_weapon(self) -> bool:
        """武器種別かどうかを返す"""
        return self.item_type in WEAPON_TYPES

    def is_armor(self) -> bool:
        """防具種別かどうかを返す"""
        return self.item_type in ARMOR_TYPES

    def type_display_name(self) -> str:
        """アイテム種別の表示名を返す"""
        return _TYPE_DISPLAY_NAMES[self.item_type]

    def validate(self) -> None:
        """アイテムデータの整合性を検証する

        Raises:
            EntityValidationError: IDまたは名称が空、価格・重量が範囲外の場合
        """
        if not self.id:
            raise EntityValidationError("アイテムIDが空です")
        if not self.name:
            raise EntityValidationError("アイテム名が空です")
        if not 0 <= self.price <= MAX_ITEM_PRICE:
            raise EntityValidationError(f"価格は0から{MAX_ITEM_PRICE}の範囲である必要があります")
        if not 0.0 <= self.weight <= MAX_ITEM_WEIGHT:
            raise EntityValidationError(f"重量は0から{MAX_ITEM_WEIGHT:g}の範囲である必要があります")

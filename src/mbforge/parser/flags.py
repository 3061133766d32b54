"""ビットフィールドコーデックモジュール

パックされた整数フラグワードと、種別の列挙値およびブール値の
フラグ構造体とを相互に変換する。

アイテムのフラグワードは下位8ビットに種別タグ（0x2〜0x13）を持ち、
8個の独立フラグ（0x1〜0x80）はその上位の8ビットに配置される。
兵種のフラグワードは下位8ビットの独立フラグのみからなる。
定義されていないビットはデコード時に破棄される。
"""

from mbforge.models.item import ItemFlags, ItemType
from mbforge.models.troop import TroopFlags, TroopType

ITEM_TYPE_MASK = 0xFF

# 独立フラグを種別タグと衝突させないためのシフト量
ITEM_FLAG_SHIFT = 8

ITEM_FLAG_BITS: dict[str, int] = {
    "can_penetrate_shield": 0x1,
    "can_knock_down": 0x2,
    "two_handed": 0x4,
    "thrust_weapon": 0x8,
    "swing_weapon": 0x10,
    "unbalanced": 0x20,
    "crush_through": 0x40,
    "bonus_against_shield": 0x80,
}

TROOP_FLAG_BITS: dict[str, int] = {
    "hero": 0x1,
    "female": 0x2,
    "guarantee_boots": 0x4,
    "guarantee_armor": 0x8,
    "guarantee_helmet": 0x10,
    "guarantee_horse": 0x20,
    "guarantee_ranged": 0x40,
    "no_capture_alive": 0x80,
}

_ITEM_TYPE_VALUES = frozenset(t.value for t in ItemType)
_TROOP_TYPE_VALUES = frozenset(t.value for t in TroopType)


def decode_item_type(word: int) -> ItemType:
    """フラグワードの下位8ビットからアイテム種別を取得する

    未定義の種別タグはOTHERとして扱う。
    """
    tag = word & ITEM_TYPE_MASK
    if tag in _ITEM_TYPE_VALUES:
        return ItemType(tag)
    return ItemType.OTHER


def decode_item_flags(word: int) -> tuple[ItemType, ItemFlags]:
    """アイテムのフラグワードをデコードする

    Args:
        word: パックされたフラグワード

    Returns:
        (アイテム種別, フラグ群)のタプル
    """
    flag_bits = (word >> ITEM_FLAG_SHIFT) & 0xFF
    flags = ItemFlags(**{name: bool(flag_bits & bit) for name, bit in ITEM_FLAG_BITS.items()})
    return decode_item_type(word), flags


def encode_item_flags(item_type: ItemType, flags: ItemFlags) -> int:
    """アイテム種別とフラグ群をフラグワードにエンコードする

    Args:
        item_type: アイテム種別
        flags: フラグ群

    Returns:
        パックされたフラグワード
    """
    word = int(item_type)
    for name, bit in ITEM_FLAG_BITS.items():
        if getattr(flags, name):
            word |= bit << ITEM_FLAG_SHIFT
    return word


def decode_troop_flags(word: int) -> TroopFlags:
    """兵種のフラグワードをデコードする"""
    return TroopFlags(**{name: bool(word & bit) for name, bit in TROOP_FLAG_BITS.items()})


def encode_troop_flags(flags: TroopFlags) -> int:
    """兵種のフラグ群をフラグワードにエンコードする"""
    word = 0
    for name, bit in TROOP_FLAG_BITS.items():
        if getattr(flags, name):
            word |= bit
    return word


def decode_troop_type(value: int) -> TroopType:
    """兵種タイプ値をデコードする

    未定義の値はREGULARとして扱う。
    """
    if value in _TROOP_TYPE_VALUES:
        return TroopType(value)
    return TroopType.REGULAR


def encode_troop_type(troop_type: TroopType) -> int:
    return int(troop_type)

"""Models module for mbforge.

アイテム、兵種、勢力、トリガーのエンティティ定義を提供するモジュール。
エンティティ間の参照はIDの文字列で表し、実体への参照は保持しない。
"""

from mbforge.models.base import EntityValidationError
from mbforge.models.faction import Faction, FactionColor, FactionRelation
from mbforge.models.item import ARMOR_TYPES, WEAPON_TYPES, Item, ItemFlags, ItemType
from mbforge.models.trigger import (
    Operation,
    OperationType,
    Parameter,
    ParameterType,
    Trigger,
)
from mbforge.models.troop import (
    Equipment,
    Troop,
    TroopAttributes,
    TroopFlags,
    TroopSkills,
    TroopType,
    WeaponProficiency,
)

__all__ = [
    "ARMOR_TYPES",
    "EntityValidationError",
    "Equipment",
    "Faction",
    "FactionColor",
    "FactionRelation",
    "Item",
    "ItemFlags",
    "ItemType",
    "Operation",
    "OperationType",
    "Parameter",
    "ParameterType",
    "Trigger",
    "Troop",
    "TroopAttributes",
    "TroopFlags",
    "TroopSkills",
    "TroopType",
    "WEAPON_TYPES",
    "WeaponProficiency",
]

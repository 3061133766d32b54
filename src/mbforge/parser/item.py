"""アイテムParserモジュール"""

from collections.abc import Mapping

from mbforge.models.item import Item
from mbforge.parser.base import (
    BracketParser,
    FieldHandler,
    format_reference,
    format_text_value,
    parse_ints,
    parse_text_value,
    require_args,
)
from mbforge.parser.flags import decode_item_flags, encode_item_flags
from mbforge.parser.tokens import parse_float, parse_int, parse_string

# 整数を1つだけ取るフィールド（キー名と属性名は同じ）
_INT_FIELDS: tuple[str, ...] = (
    "price",
    "damage",
    "speed",
    "reach",
    "accuracy",
    "armor",
    "leg_armor",
    "difficulty",
    "hit_points",
    "capabilities",
)

_WEAPON_FIELDS = ("damage", "speed", "reach", "accuracy")
_ARMOR_FIELDS = ("armor", "leg_armor", "difficulty", "hit_points")


class ItemParser(BracketParser[Item]):
    """アイテムParser

    `flags` キーのフラグワードはアイテム種別とフラグ群の両方に展開される。
    武器系のステータス（damage, speed, reach, accuracy）は
    武器種別のアイテムについてのみ書き出す。
    """

    entity_label = "アイテム"

    def create(self, entity_id: str) -> Item:
        return Item(id=entity_id)

    def field_handlers(self) -> Mapping[str, FieldHandler[Item]]:
        handlers: dict[str, FieldHandler[Item]] = {
            "name": self._set_name,
            "mesh": self._set_mesh,
            "material": self._set_material,
            "texture": self._set_texture,
            "weight": self._set_weight,
            "flags": self._set_flags,
            "modifier": self._add_modifier,
        }
        for key in _INT_FIELDS:
            handlers[key] = self._int_setter(key)
        return handlers

    @staticmethod
    def _int_setter(attr: str) -> FieldHandler[Item]:
        def setter(item: Item, value: str) -> None:
            (number,) = parse_ints(value, 1, attr)
            setattr(item, attr, number)

        return setter

    def _set_name(self, item: Item, value: str) -> None:
        item.name = parse_text_value(value, "name")

    def _set_mesh(self, item: Item, value: str) -> None:
        item.mesh_name = parse_text_value(value, "mesh")

    def _set_material(self, item: Item, value: str) -> None:
        item.material = parse_text_value(value, "material")

    def _set_texture(self, item: Item, value: str) -> None:
        item.texture = parse_text_value(value, "texture")

    def _set_weight(self, item: Item, value: str) -> None:
        item.weight = parse_float(require_args(value, 1, "weight")[0])

    def _set_flags(self, item: Item, value: str) -> None:
        word = parse_int(require_args(value, 1, "flags")[0])
        item.item_type, item.flags = decode_item_flags(word)

    def _add_modifier(self, item: Item, value: str) -> None:
        args = require_args(value, 2, "modifier")
        item.modifiers.append((parse_string(args[0]), parse_int(args[1])))

    def serialize_entity(self, item: Item) -> list[str]:
        lines = [f"[{item.id}]"]
        for key, text in (
            ("name", item.name),
            ("mesh", item.mesh_name),
            ("material", item.material),
            ("texture", item.texture),
        ):
            if text:
                lines.append(f"{key} {format_text_value(self._check_text(text, key))}")

        lines.append(f"price {item.price}")
        lines.append(f"weight {item.weight:.2f}")

        if item.is_weapon():
            lines.extend(f"{key} {getattr(item, key)}" for key in _WEAPON_FIELDS)

        for key in _ARMOR_FIELDS:
            if getattr(item, key):
                lines.append(f"{key} {getattr(item, key)}")

        if item.capabilities > 0:
            lines.append(f"capabilities 0x{item.capabilities:X}")
        elif item.capabilities < 0:
            lines.append(f"capabilities {item.capabilities}")

        for name, modifier_value in item.modifiers:
            lines.append(f"modifier {format_reference(name, 'modifier')} {modifier_value}")

        lines.append(f"flags 0x{encode_item_flags(item.item_type, item.flags):X}")
        return lines


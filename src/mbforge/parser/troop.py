"""兵種Parserモジュール"""

from collections.abc import Mapping

from mbforge.constants import SKILL_NAMES
from mbforge.models.troop import Equipment, Troop, TroopAttributes, TroopSkills, WeaponProficiency
from mbforge.parser.base import (
    BracketParser,
    FieldHandler,
    format_reference,
    format_text_value,
    parse_ints,
    parse_text_value,
    require_args,
)
from mbforge.parser.flags import (
    decode_troop_flags,
    decode_troop_type,
    encode_troop_flags,
    encode_troop_type,
)
from mbforge.parser.tokens import ParseError, parse_int, parse_string


class TroopParser(BracketParser[Troop]):
    """兵種Parser

    `equipment` キーは繰り返し指定でき、記述順に装備リストへ追加される。
    `skills` キーはスキルID順の値を受け付け、省略された後続スキルは0になる。
    """

    entity_label = "兵種"

    def create(self, entity_id: str) -> Troop:
        return Troop(id=entity_id)

    def field_handlers(self) -> Mapping[str, FieldHandler[Troop]]:
        return {
            "name": self._set_name,
            "plural_name": self._set_plural_name,
            "type": self._set_type,
            "level": self._set_level,
            "upgrade_troop": self._set_upgrade_troop,
            "upgrade_exp": self._set_upgrade_exp,
            "flags": self._set_flags,
            "attributes": self._set_attributes,
            "skills": self._set_skills,
            "proficiency": self._set_proficiency,
            "equipment": self._add_equipment,
            "wage": self._set_wage,
        }

    def _set_name(self, troop: Troop, value: str) -> None:
        troop.name = parse_text_value(value, "name")

    def _set_plural_name(self, troop: Troop, value: str) -> None:
        troop.plural_name = parse_text_value(value, "plural_name")

    def _set_type(self, troop: Troop, value: str) -> None:
        (type_value,) = parse_ints(value, 1, "type")
        troop.troop_type = decode_troop_type(type_value)

    def _set_level(self, troop: Troop, value: str) -> None:
        (troop.level,) = parse_ints(value, 1, "level")

    def _set_upgrade_troop(self, troop: Troop, value: str) -> None:
        troop.upgrade_troop = parse_string(require_args(value, 1, "upgrade_troop")[0])

    def _set_upgrade_exp(self, troop: Troop, value: str) -> None:
        (troop.upgrade_exp,) = parse_ints(value, 1, "upgrade_exp")

    def _set_flags(self, troop: Troop, value: str) -> None:
        (word,) = parse_ints(value, 1, "flags")
        troop.flags = decode_troop_flags(word)

    def _set_attributes(self, troop: Troop, value: str) -> None:
        troop.attributes = TroopAttributes(*parse_ints(value, 4, "attributes"))

    def _set_skills(self, troop: Troop, value: str) -> None:
        tokens = require_args(value, 1, "skills")
        if len(tokens) > len(SKILL_NAMES):
            raise ParseError(f"skills の値は最大{len(SKILL_NAMES)}個です（{len(tokens)}個）")
        troop.skills = TroopSkills.from_values([parse_int(token) for token in tokens])

    def _set_proficiency(self, troop: Troop, value: str) -> None:
        troop.proficiency = WeaponProficiency(*parse_ints(value, 6, "proficiency"))

    def _add_equipment(self, troop: Troop, value: str) -> None:
        args = require_args(value, 1, "equipment")
        modifier = parse_int(args[1]) if len(args) > 1 else 0
        troop.equipment.append(Equipment(item_id=parse_string(args[0]), modifier=modifier))

    def _set_wage(self, troop: Troop, value: str) -> None:
        (troop.wage,) = parse_ints(value, 1, "wage")

    def serialize_entity(self, troop: Troop) -> list[str]:
        lines = [f"[{troop.id}]"]
        if troop.name:
            lines.append(f"name {format_text_value(self._check_text(troop.name, 'name'))}")
        if troop.plural_name:
            plural = self._check_text(troop.plural_name, "plural_name")
            lines.append(f"plural_name {format_text_value(plural)}")
        lines.append(f"type {encode_troop_type(troop.troop_type)}")
        lines.append(f"level {troop.level}")

        if troop.upgrade_troop is not None:
            lines.append(f"upgrade_troop {format_reference(troop.upgrade_troop, 'upgrade_troop')}")
            lines.append(f"upgrade_exp {troop.upgrade_exp}")

        lines.append(f"flags 0x{encode_troop_flags(troop.flags):X}")

        attrs = troop.attributes
        lines.append(
            f"attributes {attrs.strength} {attrs.agility} {attrs.intelligence} {attrs.charisma}"
        )
        lines.append("skills " + " ".join(str(v) for v in troop.skills.as_list()))

        prof = troop.proficiency
        lines.append(
            f"proficiency {prof.one_handed} {prof.two_handed} {prof.polearm} "
            f"{prof.archery} {prof.crossbow} {prof.throwing}"
        )

        for equipment in troop.equipment:
            item_id = format_reference(equipment.item_id, "equipment")
            lines.append(f"equipment {item_id} {equipment.modifier}")

        lines.append(f"wage {troop.wage}")
        return lines


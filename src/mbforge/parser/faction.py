"""勢力Parserモジュール"""

from collections.abc import Mapping

from mbforge.models.faction import Faction, FactionColor, FactionRelation
from mbforge.parser.base import (
    BracketParser,
    FieldHandler,
    format_reference,
    format_text_value,
    parse_ints,
    parse_text_value,
    require_args,
)
from mbforge.parser.tokens import ParseError, parse_float, parse_string


class FactionParser(BracketParser[Faction]):
    """勢力Parser

    `relation` キーは繰り返し指定でき、記述順に関係リストへ追加される。
    関係値とランキングは小数点以下2桁で書き出す。
    """

    entity_label = "勢力"

    def create(self, entity_id: str) -> Faction:
        return Faction(id=entity_id)

    def field_handlers(self) -> Mapping[str, FieldHandler[Faction]]:
        return {
            "name": self._set_name,
            "flags": self._set_flags,
            "color": self._set_color,
            "relation": self._add_relation,
            "ranking": self._set_ranking,
        }

    def _set_name(self, faction: Faction, value: str) -> None:
        faction.name = parse_text_value(value, "name")

    def _set_flags(self, faction: Faction, value: str) -> None:
        (faction.flags,) = parse_ints(value, 1, "flags")

    def _set_color(self, faction: Faction, value: str) -> None:
        r, g, b = parse_ints(value, 3, "color")
        for component in (r, g, b):
            if not 0 <= component <= 0xFF:
                raise ParseError(f"色成分は0から255の範囲である必要があります: {component}")
        faction.color = FactionColor(r, g, b)

    def _add_relation(self, faction: Faction, value: str) -> None:
        args = require_args(value, 2, "relation")
        faction.relations.append(
            FactionRelation(faction_id=parse_string(args[0]), relation=parse_float(args[1]))
        )

    def _set_ranking(self, faction: Faction, value: str) -> None:
        faction.ranking = parse_float(require_args(value, 1, "ranking")[0])

    def serialize_entity(self, faction: Faction) -> list[str]:
        lines = [f"[{faction.id}]"]
        if faction.name:
            lines.append(f"name {format_text_value(self._check_text(faction.name, 'name'))}")
        if faction.flags >= 0:
            lines.append(f"flags 0x{faction.flags:X}")
        else:
            lines.append(f"flags {faction.flags}")

        color = faction.color
        lines.append(f"color {color.r} {color.g} {color.b}")

        for relation in faction.relations:
            target = format_reference(relation.faction_id, "relation")
            lines.append(f"relation {target} {relation.relation:.2f}")

        lines.append(f"ranking {faction.ranking:.2f}")
        return lines

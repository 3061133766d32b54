"""Module Systemファイル読み込みモジュール

`itemsfile version 3` のようなヘッダー行で始まり、1行に1エントリを
`["id", "Name", ...]` のリスト形式で記述したファイルを読み込む。
入れ子のリストを含む完全な文法には対応せず、
トップレベルの既知の位置にあるフィールドのみを取り出す。
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from enum import Enum
from typing import TypeVar

from mbforge.models.base import EntityValidationError
from mbforge.models.faction import Faction
from mbforge.models.item import Item
from mbforge.models.troop import Troop, TroopAttributes
from mbforge.parser.tokens import ParseError, parse_float, parse_int, parse_string

logger = logging.getLogger(__name__)

E = TypeVar("E", Item, Troop, Faction)
N = TypeVar("N", int, float)

_HEADER_PATTERN = re.compile(r"^(?P<kind>\w+)file\s+version\s+(?P<version>\S+)\s*$")

# 各エントリ内のフィールド位置
_ITEM_PRICE_INDEX = 5
_ITEM_WEIGHT_INDEX = 6
_TROOP_PLURAL_INDEX = 2
_TROOP_ATTRIBUTE_INDEX = 9
_TROOP_LEVEL_INDEX = 13


class ModuleFileKind(Enum):
    """Module Systemファイルの種別"""

    ITEMS = "items"
    TROOPS = "troops"
    FACTIONS = "factions"


def _first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""


def is_file_format(text: str, kind: ModuleFileKind) -> bool:
    """テキストが指定種別のModule Systemファイルかどうかを判定する"""
    match = _HEADER_PATTERN.match(_first_line(text))
    return match is not None and match.group("kind") == kind.value


def get_file_version(text: str) -> int:
    """ヘッダー行からファイルバージョンを取得する

    Args:
        text: ファイルの内容

    Returns:
        ファイルバージョン

    Raises:
        ParseError: ヘッダー行が不正な場合
    """
    first_line = _first_line(text)
    match = _HEADER_PATTERN.match(first_line)
    if match is None:
        raise ParseError(f"不正なファイルヘッダーです: {first_line!r}")
    return parse_int(match.group("version"))


def split_entry(line: str) -> list[str]:
    """`[a, "b", [c, d], e]` 形式のエントリをトップレベルのフィールドに分割する

    入れ子のブラケット・括弧・引用符の内側にあるカンマでは分割しない。

    Args:
        line: エントリ行

    Returns:
        前後の空白を除去したフィールドのリスト

    Raises:
        ParseError: 外側のブラケットまたは入れ子の対応が不正な場合
    """
    text = line.strip()
    if not (text.startswith("[") and text.endswith("]")):
        raise ParseError(f"エントリはブラケットで囲まれている必要があります: {line!r}")

    fields: list[str] = []
    depth = 0
    quote: str | None = None
    start = 1
    body_end = len(text) - 1

    for index in range(1, body_end):
        char = text[index]
        if quote is not None:
            if char == quote:
                quote = None
            continue
        if char in ("'", '"'):
            quote = char
        elif char in "[(":
            depth += 1
        elif char in "])":
            depth -= 1
            if depth < 0:
                raise ParseError(f"括弧の対応が不正です: {line!r}")
        elif char == "," and depth == 0:
            fields.append(text[start:index].strip())
            start = index + 1

    if quote is not None or depth != 0:
        raise ParseError(f"引用符または括弧が閉じられていません: {line!r}")

    last = text[start:body_end].strip()
    if last or fields:
        fields.append(last)
    return fields


class ModuleParser:
    """Module Systemファイルの簡易Parser

    ヘッダー行が存在しない、または種別が一致しない場合はParseErrorとする。
    解析できないエントリはログに記録して読み飛ばす。
    """

    def parse_items(self, text: str) -> list[Item]:
        """アイテムファイルの内容を解析する"""
        return self._parse_all(text, ModuleFileKind.ITEMS, self._item_entry)

    def parse_troops(self, text: str) -> list[Troop]:
        """兵種ファイルの内容を解析する"""
        return self._parse_all(text, ModuleFileKind.TROOPS, self._troop_entry)

    def parse_factions(self, text: str) -> list[Faction]:
        """勢力ファイルの内容を解析する"""
        return self._parse_all(text, ModuleFileKind.FACTIONS, self._faction_entry)

    def _parse_all(
        self, text: str, kind: ModuleFileKind, build: Callable[[list[str]], E]
    ) -> list[E]:
        entities: list[E] = []
        for line in self._entries(text, kind):
            try:
                entity = build(split_entry(line))
                entity.validate()
            except (ParseError, EntityValidationError) as e:
                logger.warning(f"エントリを読み飛ばしました: {e}")
                continue
            entities.append(entity)
        return entities

    def _entries(self, text: str, kind: ModuleFileKind) -> list[str]:
        lines = text.splitlines()
        header_index = next((i for i, line in enumerate(lines) if line.strip()), None)
        if header_index is None or not is_file_format(text, kind):
            found = lines[header_index].strip() if header_index is not None else ""
            raise ParseError(f"{kind.value}file のヘッダーがありません: {found!r}")

        entries: list[str] = []
        for raw_line in lines[header_index + 1 :]:
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            entries.append(line)
        return entries

    @staticmethod
    def _require_fields(fields: list[str], count: int) -> None:
        if len(fields) < count:
            raise ParseError(f"フィールドが不足しています（{len(fields)}個、{count}個以上が必要）")

    def _item_entry(self, fields: list[str]) -> Item:
        self._require_fields(fields, 2)
        item = Item(id=parse_string(fields[0]), name=parse_string(fields[1]))
        if len(fields) > _ITEM_PRICE_INDEX:
            item.price = self._optional(parse_int, fields[_ITEM_PRICE_INDEX], item.price)
        if len(fields) > _ITEM_WEIGHT_INDEX:
            item.weight = self._optional(parse_float, fields[_ITEM_WEIGHT_INDEX], item.weight)
        return item

    def _troop_entry(self, fields: list[str]) -> Troop:
        self._require_fields(fields, 2)
        troop = Troop(id=parse_string(fields[0]), name=parse_string(fields[1]))
        if len(fields) > _TROOP_PLURAL_INDEX:
            troop.plural_name = parse_string(fields[_TROOP_PLURAL_INDEX])
        if len(fields) > _TROOP_LEVEL_INDEX:
            troop.level = self._optional(parse_int, fields[_TROOP_LEVEL_INDEX], troop.level)
        if len(fields) > _TROOP_ATTRIBUTE_INDEX + 3:
            values = fields[_TROOP_ATTRIBUTE_INDEX : _TROOP_ATTRIBUTE_INDEX + 4]
            troop.attributes = TroopAttributes(*(self._optional(parse_int, v, 0) for v in values))
        return troop

    def _faction_entry(self, fields: list[str]) -> Faction:
        self._require_fields(fields, 2)
        return Faction(id=parse_string(fields[0]), name=parse_string(fields[1]))

    @staticmethod
    def _optional(parse: Callable[[str], N], token: str, default: N) -> N:
        # 定数名などの非数値フィールドはデフォルト値のままにする
        try:
            return parse(token)
        except ParseError:
            return default

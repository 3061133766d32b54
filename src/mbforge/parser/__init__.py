"""Parser module for mbforge.

ブラケット区切りのテキスト形式とエンティティのリストを相互に変換するモジュール。
字句解析ユーティリティ、フラグワードのコーデック、
エンティティ種別ごとのParserを提供する。
"""

from mbforge.parser.base import BracketParser, DataParser
from mbforge.parser.faction import FactionParser
from mbforge.parser.flags import (
    decode_item_flags,
    decode_troop_flags,
    decode_troop_type,
    encode_item_flags,
    encode_troop_flags,
    encode_troop_type,
)
from mbforge.parser.item import ItemParser
from mbforge.parser.module import ModuleFileKind, ModuleParser, get_file_version, is_file_format
from mbforge.parser.tokens import (
    ParseError,
    parse_float,
    parse_int,
    parse_string,
    split_lines,
    split_params,
    split_quoted,
)
from mbforge.parser.trigger import TriggerParser, format_parameter, parse_parameter
from mbforge.parser.troop import TroopParser

__all__ = [
    "BracketParser",
    "DataParser",
    "FactionParser",
    "ItemParser",
    "ModuleFileKind",
    "ModuleParser",
    "ParseError",
    "TriggerParser",
    "TroopParser",
    "decode_item_flags",
    "decode_troop_flags",
    "decode_troop_type",
    "encode_item_flags",
    "encode_troop_flags",
    "encode_troop_type",
    "format_parameter",
    "get_file_version",
    "is_file_format",
    "parse_float",
    "parse_int",
    "parse_parameter",
    "parse_string",
    "split_lines",
    "split_params",
    "split_quoted",
]

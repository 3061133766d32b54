"""データファイル入出力モジュール

ファイルの読み込み・文字コード変換・解析をまとめて行う。
Parser自体はI/Oを行わないため、ファイル操作はこのモジュールに集約する。
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from mbforge.cache import ParseCache
from mbforge.config import MbforgeConfig, get_default_config
from mbforge.encoding import EncodingError, decode_text, encode_text
from mbforge.models.faction import Faction
from mbforge.models.item import Item
from mbforge.models.trigger import Trigger
from mbforge.models.troop import Troop
from mbforge.parser.base import DataParser
from mbforge.parser.faction import FactionParser
from mbforge.parser.item import ItemParser
from mbforge.parser.tokens import ParseError
from mbforge.parser.trigger import TriggerParser
from mbforge.parser.troop import TroopParser
from mbforge.types import ExitCode, Result

logger = logging.getLogger(__name__)


class EntityKind(Enum):
    """データファイルの種別"""

    ITEMS = "items"
    TROOPS = "troops"
    FACTIONS = "factions"
    TRIGGERS = "triggers"

    def create_parser(self) -> DataParser[Any]:
        """種別に対応するParserを生成する"""
        parsers: dict[EntityKind, type[DataParser[Any]]] = {
            EntityKind.ITEMS: ItemParser,
            EntityKind.TROOPS: TroopParser,
            EntityKind.FACTIONS: FactionParser,
            EntityKind.TRIGGERS: TriggerParser,
        }
        return parsers[self]()

    def file_name(self, config: MbforgeConfig) -> str:
        """設定上のファイル名を返す"""
        return str(getattr(config.files, self.value))


@dataclass
class ModuleData:
    """モジュールディレクトリから読み込んだ全エンティティ

    Attributes:
        directory: 読み込み元ディレクトリ
        items: アイテムのリスト
        troops: 兵種のリスト
        factions: 勢力のリスト
        triggers: トリガーのリスト
        loaded_files: 実際に読み込んだファイルのパス
    """

    directory: Path
    items: list[Item] = field(default_factory=list)
    troops: list[Troop] = field(default_factory=list)
    factions: list[Faction] = field(default_factory=list)
    triggers: list[Trigger] = field(default_factory=list)
    loaded_files: list[Path] = field(default_factory=list)

    def count(self, kind: EntityKind) -> int:
        """種別ごとのエンティティ数を返す"""
        return len(getattr(self, kind.value))


def read_text(path: Path, config: MbforgeConfig | None = None) -> str:
    """ファイルを読み込み、正規化済みのテキストを返す

    Raises:
        ParseError: ファイルが存在しない、読み込めない、またはデコードできない場合
    """
    config = config or get_default_config()
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ParseError(f"ファイルを読み込めません: {path}") from e

    try:
        return decode_text(data, config.encoding.source)
    except EncodingError as e:
        raise ParseError(f"{path}: {e}") from e


def read_entities(
    path: Path, kind: EntityKind, config: MbforgeConfig | None = None
) -> list[Any]:
    """データファイルを読み込んで解析する

    Args:
        path: データファイルのパス
        kind: データファイルの種別
        config: 設定（省略時はデフォルト設定）

    Returns:
        解析したエンティティのリスト

    Raises:
        ParseError: ファイルが存在しない、または読み込めない場合
    """
    text = read_text(path, config)
    entities = kind.create_parser().parse_text(text)
    logger.debug(f"{path.name}: {kind.value} を{len(entities)}件読み込みました")
    return entities


def write_entities(
    path: Path,
    kind: EntityKind,
    entities: Sequence[Any],
    config: MbforgeConfig | None = None,
) -> None:
    """エンティティを直列化してファイルに書き出す

    Args:
        path: 出力先ファイルのパス
        kind: データファイルの種別
        entities: 書き出すエンティティ
        config: 設定（省略時はデフォルト設定）

    Raises:
        ParseError: 直列化できない値を含む場合、または書き込みに失敗した場合
    """
    config = config or get_default_config()
    text = kind.create_parser().serialize_text(entities)
    try:
        data = encode_text(text, config.encoding.target, config.encoding.add_bom)
    except EncodingError as e:
        raise ParseError(f"{path}: {e}") from e

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as e:
        raise ParseError(f"ファイルを書き込めません: {path}") from e
    logger.debug(f"{path.name}: {kind.value} を{len(entities)}件書き出しました")


def format_file(
    source: Path,
    kind: EntityKind,
    output: Path | None = None,
    config: MbforgeConfig | None = None,
) -> Result:
    """データファイルを読み込み、正規化した形式で書き出す

    解析時に除外されたエンティティは出力に含まれない。

    Args:
        source: 入力ファイルのパス
        kind: データファイルの種別
        output: 出力先（省略時は入力ファイルを上書き）
        config: 設定（省略時はデフォルト設定）

    Returns:
        処理結果
    """
    destination = output or source
    try:
        entities = read_entities(source, kind, config)
        write_entities(destination, kind, entities, config)
    except ParseError as e:
        return Result(success=False, message=str(e), exit_code=ExitCode.INVALID_INPUT)
    return Result(success=True, message=f"{len(entities)}件を {destination} に書き出しました")


def load_module(
    directory: Path,
    config: MbforgeConfig | None = None,
    cache: ParseCache | None = None,
) -> ModuleData:
    """モジュールディレクトリ内のデータファイルをすべて読み込む

    存在しない種別のファイルは空として扱う。

    Args:
        directory: モジュールディレクトリ
        config: 設定（省略時はデフォルト設定）
        cache: 解析キャッシュ（設定でキャッシュが無効な場合は使用しない）

    Returns:
        読み込んだModuleData

    Raises:
        ParseError: ディレクトリが存在しない場合、またはファイルを読み込めない場合
    """
    config = config or get_default_config()
    if not directory.is_dir():
        raise ParseError(f"ディレクトリが見つかりません: {directory}")

    module = ModuleData(directory=directory)
    for kind in EntityKind:
        path = directory / kind.file_name(config)
        if not path.is_file():
            logger.debug(f"{path.name} が存在しないため {kind.value} は空として扱います")
            continue
        if cache is not None and config.cache.enabled:
            entities = _read_cached(cache, path, kind, config)
        else:
            entities = read_entities(path, kind, config)
        getattr(module, kind.value).extend(entities)
        module.loaded_files.append(path)

    logger.info(
        f"{directory} を読み込みました: アイテム {len(module.items)}件, "
        f"兵種 {len(module.troops)}件, 勢力 {len(module.factions)}件, "
        f"トリガー {len(module.triggers)}件"
    )
    return module


def _read_cached(
    cache: ParseCache, path: Path, kind: EntityKind, config: MbforgeConfig
) -> list[Any]:
    try:
        return cache.get_or_parse(path, kind.value, lambda p: read_entities(p, kind, config))
    except OSError as e:
        raise ParseError(f"ファイルを読み込めません: {path}") from e

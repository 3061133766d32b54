"""Parser基底クラスモジュール

すべてのエンティティParserの基底クラスと、
`[id]` ヘッダーと `key value...` 行からなるブラケット形式の共通解析処理を定義する。
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping
from typing import Generic, Protocol, TypeVar

from mbforge.models.base import EntityValidationError
from mbforge.parser.tokens import ParseError, parse_int, parse_string, split_lines, split_params

logger = logging.getLogger(__name__)

_QUOTES = ("'", '"')


class Entity(Protocol):
    """Parserが扱うエンティティのプロトコル"""

    def validate(self) -> None: ...


class IdentifiedEntity(Entity, Protocol):
    """IDを持つエンティティのプロトコル"""

    id: str


E = TypeVar("E", bound=Entity)
B = TypeVar("B", bound=IdentifiedEntity)

FieldHandler = Callable[[B, str], None]


class DataParser(ABC, Generic[E]):
    """エンティティParserの基底クラス

    テキストからエンティティのリストへの解析と、その逆方向のシリアライズを行う。
    解析・シリアライズはいずれも入力のみに依存し、内部状態を持たない。
    """

    @abstractmethod
    def parse_text(self, data: str) -> list[E]:
        """テキストを解析してエンティティのリストを返す

        構造検証に失敗したエンティティはログに記録して除外する。

        Args:
            data: 解析対象のテキスト

        Returns:
            解析したエンティティのリスト
        """
        ...

    @abstractmethod
    def serialize_text(self, entities: Iterable[E]) -> str:
        """エンティティのリストをテキストにシリアライズする

        Args:
            entities: シリアライズ対象のエンティティ

        Returns:
            シリアライズしたテキスト

        Raises:
            ParseError: テキスト形式で表現できない値が含まれる場合
        """
        ...

    def validate(self, entity: E) -> None:
        """エンティティの構造検証を行う

        Args:
            entity: 検証対象のエンティティ

        Raises:
            ParseError: 検証に失敗した場合
        """
        try:
            entity.validate()
        except EntityValidationError as e:
            raise ParseError(str(e)) from e

    @staticmethod
    def _check_text(value: str, label: str) -> str:
        """1行に収まる文字列であることを確認する

        Raises:
            ParseError: 改行を含む場合
        """
        if "\n" in value or "\r" in value:
            raise ParseError(f"{label} に改行を含めることはできません: {value!r}")
        return value


class BracketParser(DataParser[B]):
    """ブラケット形式の共通Parser

    `[id]` ヘッダー行でエンティティを開始し、次のヘッダーまでの
    `key value...` 行をフィールドハンドラに振り分ける。
    未知のキーは無視する。フィールド値が不正な場合はログに記録し、
    そのフィールドはデフォルト値のままとする。
    """

    entity_label = "エンティティ"

    def __init__(self) -> None:
        self._handlers: Mapping[str, FieldHandler[B]] = self.field_handlers()

    @abstractmethod
    def create(self, entity_id: str) -> B:
        """指定IDのデフォルト値エンティティを生成する"""
        ...

    @abstractmethod
    def field_handlers(self) -> Mapping[str, FieldHandler[B]]:
        """キー文字列からフィールドハンドラへの対応表を返す"""
        ...

    @abstractmethod
    def serialize_entity(self, entity: B) -> list[str]:
        """1エンティティをヘッダー行を含む行のリストにシリアライズする"""
        ...

    @property
    def known_keys(self) -> frozenset[str]:
        """解釈可能なキーの集合を返す"""
        return frozenset(self._handlers)

    def parse_text(self, data: str) -> list[B]:
        entities: list[B] = []
        current: B | None = None

        for line in split_lines(data):
            if line.startswith("["):
                self._finish(current, entities)
                current = None
                if not line.endswith("]"):
                    # IDを特定できないため、次のヘッダーまでの行は読み飛ばす
                    logger.warning(f"不正なヘッダー行を読み飛ばしました: {line}")
                    continue
                current = self.create(parse_string(line[1:-1]))
                continue

            # 最初のヘッダーより前の行（ファイルヘッダー等）は無視する
            if current is not None:
                self._apply_line(current, line)

        self._finish(current, entities)
        return entities

    def serialize_text(self, entities: Iterable[B]) -> str:
        lines: list[str] = []
        for entity in entities:
            entity_id = self._check_text(entity.id, "ID")
            if (
                not entity_id
                or "]" in entity_id
                or entity_id != entity_id.strip()
                or _is_quoted(entity_id)
            ):
                raise ParseError(f"ヘッダーに書き出せないIDです: {entity_id!r}")
            lines.extend(self.serialize_entity(entity))
            lines.append("")
        return "\n".join(lines) + ("\n" if lines else "")

    def _apply_line(self, entity: B, line: str) -> None:
        parts = line.split(None, 1)
        key = parts[0]
        value = parts[1] if len(parts) > 1 else ""

        handler = self._handlers.get(key)
        if handler is None:
            logger.debug(f"{self.entity_label} {entity.id}: 未知のキー {key} を無視しました")
            return

        try:
            handler(entity, value)
        except ParseError as e:
            logger.warning(
                f"{self.entity_label} {entity.id}: {key} の値が不正なためデフォルト値を使用します ({e})"
            )

    def _finish(self, entity: B | None, entities: list[B]) -> None:
        if entity is None:
            return
        try:
            self.validate(entity)
        except ParseError as e:
            logger.warning(f"{self.entity_label} {entity.id or '(IDなし)'} を除外しました: {e}")
            return
        entities.append(entity)


def require_args(value: str, count: int, key: str) -> list[str]:
    """値を空白区切りで分割し、必要な個数があることを確認する

    Args:
        value: キーに続く値の文字列
        count: 必要なトークン数
        key: エラーメッセージ用のキー名

    Returns:
        分割したトークンのリスト

    Raises:
        ParseError: トークン数が不足している場合
    """
    args = split_params(value)
    if len(args) < count:
        raise ParseError(f"{key} には{count}個の値が必要です（{len(args)}個）")
    return args


def parse_ints(value: str, count: int, key: str) -> list[int]:
    """先頭から指定個数の整数を解析する"""
    return [parse_int(token) for token in require_args(value, count, key)[:count]]


def parse_text_value(value: str, key: str) -> str:
    """行の残りを文字列値として解析する

    Raises:
        ParseError: 値が空の場合
    """
    if not value:
        raise ParseError(f"{key} の値がありません")
    return parse_string(value)


def format_text_value(value: str) -> str:
    """文字列値を解析時に同じ値へ戻る形で書き出す

    前後に空白がある場合や、引用符で囲まれた形の値は引用符で囲む。
    """
    needs_quotes = value != value.strip() or _is_quoted(value)
    return f'"{value}"' if needs_quotes else value


def format_reference(value: str, key: str) -> str:
    """他エンティティへの参照IDを1トークンとして書き出す

    Raises:
        ParseError: 空白を含む場合、または引用符で囲まれた形のIDの場合
    """
    if len(split_params(value)) != 1 or value != value.strip() or _is_quoted(value):
        raise ParseError(f"{key} のIDは空白や前後の引用符を含まない1語である必要があります: {value!r}")
    return value


def _is_quoted(value: str) -> bool:
    return len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES

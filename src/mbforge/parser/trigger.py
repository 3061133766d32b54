"""トリガーParserモジュール

`trigger <check> <delay> <rearm>` ヘッダーに続くオペコード行を解析する。
`try_begin` 行より前の操作は条件、後の操作は結果として扱う。
パラメータの種別は先頭の記号で決まる::

    "text"  文字列
    :n      変数
    $n      レジスタ
    posN    位置
    n       定数
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from mbforge.models.trigger import Operation, Parameter, ParameterType, Trigger
from mbforge.parser.base import DataParser
from mbforge.parser.tokens import (
    ParseError,
    parse_float,
    parse_int,
    parse_string,
    split_lines,
    split_params,
    split_quoted,
)

logger = logging.getLogger(__name__)

TRIGGER_KEYWORD = "trigger"
TRY_BEGIN_KEYWORD = "try_begin"
TRY_END_KEYWORD = "try_end"

_POSITION_PREFIX = "pos"


def parse_parameter(token: str) -> Parameter:
    """記号付きのトークンをパラメータに変換する

    Args:
        token: パラメータトークン

    Returns:
        解析したパラメータ

    Raises:
        ParseError: 数値部分が解析できない場合
    """
    text = token.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
        return Parameter.string(parse_string(text))
    if text.startswith(":"):
        return Parameter.variable(parse_int(text[1:]))
    if text.startswith("$"):
        return Parameter.register(parse_int(text[1:]))
    if text.startswith(_POSITION_PREFIX):
        return Parameter.position(parse_int(text[len(_POSITION_PREFIX) :]))
    return Parameter.constant(parse_int(text))


def format_parameter(parameter: Parameter) -> str:
    """パラメータを記号付きのトークンに変換する

    Raises:
        ParseError: 文字列パラメータが両方の引用符や改行を含む場合
    """
    match parameter.param_type:
        case ParameterType.STRING:
            text = parameter.string_value or ""
            if "\n" in text or "\r" in text:
                raise ParseError(f"文字列パラメータに改行を含めることはできません: {text!r}")
            if '"' not in text:
                return f'"{text}"'
            if "'" not in text:
                return f"'{text}'"
            raise ParseError(f"文字列パラメータに両方の引用符を含めることはできません: {text!r}")
        case ParameterType.VARIABLE:
            return f":{parameter.value}"
        case ParameterType.REGISTER:
            return f"${parameter.value}"
        case ParameterType.POSITION:
            return f"{_POSITION_PREFIX}{parameter.value}"
        case _:
            return str(parameter.value)


class TriggerParser(DataParser[Trigger]):
    """トリガーParser"""

    def parse_text(self, data: str) -> list[Trigger]:
        triggers: list[Trigger] = []
        current: Trigger | None = None
        in_conditions = True
        # 不正なヘッダーに続く操作行を読み飛ばすためのフラグ
        skipping = False

        for line in split_lines(data):
            tokens = split_params(line)
            keyword = tokens[0]

            if keyword == TRIGGER_KEYWORD:
                self._finish(current, triggers)
                current = None
                in_conditions = True
                try:
                    current = self._parse_header(tokens)
                    skipping = False
                except ParseError as e:
                    logger.warning(f"不正なトリガーヘッダーのため除外しました: {line} ({e})")
                    skipping = True
                continue

            if current is None:
                if not skipping:
                    logger.debug(f"トリガー外の行を無視しました: {line}")
                continue

            if keyword == TRY_BEGIN_KEYWORD:
                in_conditions = False
                continue

            operation = self._parse_operation(line)
            if operation is None:
                continue
            if in_conditions:
                current.add_condition(operation)
            else:
                current.add_consequence(operation)

        self._finish(current, triggers)
        return triggers

    def serialize_text(self, entities: Iterable[Trigger]) -> str:
        lines: list[str] = []
        for trigger in entities:
            lines.append(
                f"{TRIGGER_KEYWORD} {float(trigger.check_period)!r} "
                f"{float(trigger.delay_period)!r} {float(trigger.rearm_period)!r}"
            )
            lines.extend(self._format_operation(op) for op in trigger.conditions)
            lines.append(TRY_BEGIN_KEYWORD)
            lines.extend(self._format_operation(op) for op in trigger.consequences)
            lines.append(TRY_END_KEYWORD)
            lines.append("")
        return "\n".join(lines) + ("\n" if lines else "")

    def _parse_header(self, tokens: list[str]) -> Trigger:
        if len(tokens) < 4:
            raise ParseError("チェック間隔・遅延時間・再武装間隔の3つの値が必要です")
        return Trigger(
            check_period=parse_float(tokens[1]),
            delay_period=parse_float(tokens[2]),
            rearm_period=parse_float(tokens[3]),
        )

    def _parse_operation(self, line: str) -> Operation | None:
        tokens = split_quoted(line)
        try:
            opcode = parse_int(tokens[0])
        except ParseError:
            if tokens[0] != TRY_END_KEYWORD:
                logger.debug(f"オペコードで始まらない行を無視しました: {line}")
            return None

        operation = Operation(opcode=opcode)
        for token in tokens[1:]:
            try:
                operation.add_parameter(parse_parameter(token))
            except ParseError as e:
                logger.warning(f"操作 {operation.name}: 不正なパラメータを無視しました ({e})")
        return operation

    @staticmethod
    def _format_operation(operation: Operation) -> str:
        return " ".join([str(operation.opcode), *map(format_parameter, operation.parameters)])

    def _finish(self, trigger: Trigger | None, triggers: list[Trigger]) -> None:
        if trigger is None:
            return
        try:
            self.validate(trigger)
        except ParseError as e:
            logger.warning(f"トリガー #{len(triggers)} を除外しました: {e}")
            return
        triggers.append(trigger)

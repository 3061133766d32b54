"""字句解析ユーティリティモジュール

ブラケット区切りのテキスト形式を読むための行分割、パラメータ分割、
数値・文字列リテラルの解析を行う純粋関数を提供する。
"""

import math
import re

# 引用符で囲まれた文字列（空白を含む）を1トークンとして扱うパターン
_QUOTED_TOKEN_PATTERN = re.compile(r'"[^"]*"|\'[^\']*\'|\S+')

_HEX_PREFIXES = ("0x", "0X")


class ParseError(Exception):
    """テキスト解析エラー

    不正なトークン、数値リテラル、ブラケット構造、
    およびファイル読み込み失敗時に発生する。
    """

    pass


def split_lines(text: str) -> list[str]:
    """テキストを有効な行に分割する

    前後の空白を除去し、空行と `#` で始まるコメント行を取り除く。

    Args:
        text: 解析対象のテキスト

    Returns:
        有効な行のリスト
    """
    lines: list[str] = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        lines.append(line)
    return lines


def split_params(line: str) -> list[str]:
    """行を空白区切りのトークンに分割する"""
    return line.split()


def split_quoted(line: str) -> list[str]:
    """行を空白区切りのトークンに分割する（引用符内の空白は保持）

    Args:
        line: 分割対象の行

    Returns:
        トークンのリスト。引用符で囲まれた部分は引用符ごと1トークンになる
    """
    return _QUOTED_TOKEN_PATTERN.findall(line)


def parse_int(token: str) -> int:
    """整数リテラルを解析する

    10進数と `0x`/`0X` プレフィックス付きの16進数を受け付ける。

    Args:
        token: 解析対象のトークン

    Returns:
        解析した整数値

    Raises:
        ParseError: 数値として解析できない場合
    """
    text = token.strip()
    sign = 1
    body = text
    if body[:1] in ("+", "-"):
        sign = -1 if body[0] == "-" else 1
        body = body[1:]

    try:
        if body.startswith(_HEX_PREFIXES):
            digits = body[2:]
            # int()は "0x" 付きや "_" 区切りも受け付けるため16進数字のみを許可する
            if not digits or not all(c in "0123456789abcdefABCDEF" for c in digits):
                raise ValueError(digits)
            return sign * int(digits, 16)
        if not body or not body.isascii() or not body.isdigit():
            raise ValueError(body)
        return sign * int(body, 10)
    except ValueError as e:
        raise ParseError(f"数値を解析できません: '{token}'") from e


def parse_float(token: str) -> float:
    """浮動小数点リテラルを解析する

    Args:
        token: 解析対象のトークン

    Returns:
        解析した浮動小数点数

    Raises:
        ParseError: 有限の浮動小数点数として解析できない場合
    """
    try:
        value = float(token.strip())
    except ValueError as e:
        raise ParseError(f"浮動小数点数を解析できません: '{token}'") from e
    if not math.isfinite(value):
        raise ParseError(f"有限の数値ではありません: '{token}'")
    return value


def parse_string(token: str) -> str:
    """文字列トークンから前後の引用符を1組除去する

    Args:
        token: 解析対象のトークン

    Returns:
        引用符を除去した文字列。引用符がなければそのまま返す
    """
    text = token.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
        return text[1:-1]
    return text

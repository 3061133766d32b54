"""文字コード検出・変換モジュール

データファイルの文字コードを検出し、解析用のテキストに変換する機能を提供する。
BOMおよびUTF-8として妥当なバイト列はUTF-8として扱い、
それ以外はchardetで推定する。推定できない場合はcp1252とみなす。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import chardet

logger = logging.getLogger(__name__)

UTF8_BOM = b"\xef\xbb\xbf"
DEFAULT_ENCODING = "utf-8"
FALLBACK_ENCODING = "cp1252"

# chardetが返すエンコーディング名の正規化マッピング
_ENCODING_ALIASES: dict[str, str] = {
    "utf8": "utf-8",
    "utf-8-sig": "utf-8",
    "ascii": "utf-8",  # ASCIIはUTF-8のサブセット
    "windows-1252": "cp1252",
    "iso-8859-1": "cp1252",
    "gb2312": "gbk",
    "shift-jis": "shift_jis",
    "sjis": "shift_jis",
}


class EncodingError(ValueError):
    """文字コード変換エラー"""

    pass


@dataclass(frozen=True)
class EncodingDetectionResult:
    """文字コード検出結果

    Attributes:
        encoding: 検出された文字コード
        confidence: 検出の信頼度（0.0〜1.0）
        has_bom: UTF-8 BOMが付与されているか
    """

    encoding: str
    confidence: float
    has_bom: bool = False


def _normalize_encoding(encoding: str) -> str:
    lower_encoding = encoding.lower().replace("_", "-")
    return _ENCODING_ALIASES.get(lower_encoding, encoding.lower())


def detect(data: bytes) -> EncodingDetectionResult:
    """バイトデータの文字コードを検出する

    Args:
        data: 検出対象のバイトデータ

    Returns:
        検出結果を表すEncodingDetectionResultオブジェクト
    """
    if data.startswith(UTF8_BOM):
        return EncodingDetectionResult(encoding=DEFAULT_ENCODING, confidence=1.0, has_bom=True)

    try:
        data.decode(DEFAULT_ENCODING)
    except UnicodeDecodeError:
        pass
    else:
        return EncodingDetectionResult(encoding=DEFAULT_ENCODING, confidence=1.0)

    result = chardet.detect(data)
    encoding = result.get("encoding")
    confidence = result.get("confidence", 0.0) or 0.0
    if encoding is None:
        logger.debug(f"文字コードを推定できませんでした。{FALLBACK_ENCODING} とみなします")
        return EncodingDetectionResult(encoding=FALLBACK_ENCODING, confidence=0.0)

    return EncodingDetectionResult(encoding=_normalize_encoding(encoding), confidence=confidence)


def detect_encoding(data: bytes) -> str:
    """バイトデータの文字コード名を返す"""
    return detect(data).encoding


def add_utf8_bom(data: bytes) -> bytes:
    """UTF-8 BOMを付与する（付与済みの場合はそのまま返す）"""
    if data.startswith(UTF8_BOM):
        return data
    return UTF8_BOM + data


def remove_utf8_bom(data: bytes) -> bytes:
    """UTF-8 BOMを除去する"""
    if data.startswith(UTF8_BOM):
        return data[len(UTF8_BOM) :]
    return data


def normalize_text(text: str) -> str:
    """テキストを正規化する

    先頭のBOM文字を除去し、改行コードをLFに統一する。
    """
    return text.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")


def decode_text(data: bytes, encoding: str | None = None) -> str:
    """バイトデータを正規化済みのテキストに変換する

    Args:
        data: 変換対象のバイトデータ
        encoding: 変換元の文字コード（Noneの場合は自動検出）

    Returns:
        BOMを除去し改行コードをLFに統一したテキスト

    Raises:
        EncodingError: 指定または検出した文字コードでデコードできない場合
    """
    source_encoding = encoding or detect_encoding(data)
    try:
        text = remove_utf8_bom(data).decode(source_encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise EncodingError(f"{source_encoding} としてデコードできません: {e}") from e
    return normalize_text(text)


def encode_text(text: str, encoding: str = DEFAULT_ENCODING, add_bom: bool = False) -> bytes:
    """テキストを指定の文字コードでバイトデータに変換する

    Args:
        text: 変換対象のテキスト
        encoding: 変換先の文字コード
        add_bom: UTF-8 BOMを付与するか（UTF-8の場合のみ有効）

    Returns:
        変換後のバイトデータ

    Raises:
        EncodingError: 指定の文字コードで表現できない文字を含む場合
    """
    try:
        data = text.encode(encoding)
    except (UnicodeEncodeError, LookupError) as e:
        raise EncodingError(f"{encoding} でエンコードできません: {e}") from e

    if add_bom and _normalize_encoding(encoding) == DEFAULT_ENCODING:
        data = add_utf8_bom(data)
    return data

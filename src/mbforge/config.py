"""Configuration module for mbforge."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from mbforge.constants import FACTIONS_FILE, ITEMS_FILE, TRIGGERS_FILE, TROOPS_FILE

CONFIG_FILE_NAME = "mbforge.yml"


class ConfigError(Exception):
    """設定ファイル読み込みエラー"""

    pass


@dataclass(frozen=True)
class EncodingConfig:
    """文字コード設定

    Attributes:
        source: 読み込み時の文字コード（Noneの場合は自動判定）
        target: 書き出し時の文字コード
        add_bom: 書き出し時にUTF-8 BOMを付与するか
    """

    source: str | None = None
    target: str = "utf-8"
    add_bom: bool = False


@dataclass(frozen=True)
class FilesConfig:
    """データファイル名設定"""

    items: str = ITEMS_FILE
    troops: str = TROOPS_FILE
    factions: str = FACTIONS_FILE
    triggers: str = TRIGGERS_FILE


@dataclass(frozen=True)
class ValidationConfig:
    """検証の警告しきい値設定"""

    max_price_warning: int = 100_000
    max_weight_warning: float = 50.0
    max_attribute_total: int = 200
    max_skill_total: int = 500
    check_relation_symmetry: bool = True


@dataclass(frozen=True)
class CacheConfig:
    """解析キャッシュ設定"""

    enabled: bool = True


@dataclass(frozen=True)
class MbforgeConfig:
    """ルート設定"""

    encoding: EncodingConfig = field(default_factory=EncodingConfig)
    files: FilesConfig = field(default_factory=FilesConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)


def load_config(path: Path) -> MbforgeConfig:
    """設定ファイルを読み込む

    Args:
        path: 設定ファイルパス

    Returns:
        MbforgeConfig: 読み込んだ設定（デフォルトとマージ済み）

    Raises:
        ConfigError: ファイル読み込みまたはパースエラー
    """
    if not path.exists():
        raise ConfigError(f"設定ファイルが見つかりません: {path}")

    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML解析エラー: {e}") from e
    except OSError as e:
        raise ConfigError(f"設定ファイルを読み込めません: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError("設定ファイルはYAMLのマッピング形式である必要があります")

    default = get_default_config()

    return MbforgeConfig(
        encoding=_merge_encoding_config(data.get("encoding", {}), default.encoding),
        files=_merge_files_config(data.get("files", {}), default.files),
        validation=_merge_validation_config(data.get("validation", {}), default.validation),
        cache=_merge_cache_config(data.get("cache", {}), default.cache),
    )


def find_config(directory: Path) -> Path | None:
    """ディレクトリ内の設定ファイルを探す

    Returns:
        mbforge.yml が存在すればそのパス、なければNone
    """
    candidate = directory / CONFIG_FILE_NAME
    return candidate if candidate.is_file() else None


def get_default_config() -> MbforgeConfig:
    """デフォルト設定を取得する"""
    return MbforgeConfig()


def _merge_encoding_config(data: dict[str, Any], default: EncodingConfig) -> EncodingConfig:
    """エンコーディング設定をマージする"""
    if not isinstance(data, dict):
        return default
    return EncodingConfig(
        source=data.get("source", default.source),
        target=data.get("target", default.target),
        add_bom=data.get("add_bom", default.add_bom),
    )


def _merge_files_config(data: dict[str, Any], default: FilesConfig) -> FilesConfig:
    """ファイル名設定をマージする"""
    if not isinstance(data, dict):
        return default
    return FilesConfig(
        items=data.get("items", default.items),
        troops=data.get("troops", default.troops),
        factions=data.get("factions", default.factions),
        triggers=data.get("triggers", default.triggers),
    )


def _merge_validation_config(data: dict[str, Any], default: ValidationConfig) -> ValidationConfig:
    """検証設定をマージする"""
    if not isinstance(data, dict):
        return default
    return ValidationConfig(
        max_price_warning=data.get("max_price_warning", default.max_price_warning),
        max_weight_warning=data.get("max_weight_warning", default.max_weight_warning),
        max_attribute_total=data.get("max_attribute_total", default.max_attribute_total),
        max_skill_total=data.get("max_skill_total", default.max_skill_total),
        check_relation_symmetry=data.get(
            "check_relation_symmetry", default.check_relation_symmetry
        ),
    )


def _merge_cache_config(data: dict[str, Any], default: CacheConfig) -> CacheConfig:
    """キャッシュ設定をマージする"""
    if not isinstance(data, dict):
        return default
    return CacheConfig(enabled=data.get("enabled", default.enabled))

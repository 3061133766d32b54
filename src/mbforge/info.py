"""モジュール情報解析モジュール"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from mbforge.config import MbforgeConfig, get_default_config
from mbforge.encoding import detect
from mbforge.loader import EntityKind, read_entities
from mbforge.parser.tokens import ParseError


@dataclass(frozen=True)
class FileStats:
    """データファイル統計

    Attributes:
        kind: データファイルの種別
        path: ファイルパス
        exists: ファイルが存在するか
        size_bytes: ファイルサイズ
        encoding: 検出した文字コード
        has_bom: UTF-8 BOMが付与されているか
        count: 解析できたエンティティ数
    """

    kind: EntityKind
    path: Path
    exists: bool
    size_bytes: int = 0
    encoding: str | None = None
    has_bom: bool = False
    count: int = 0


@dataclass(frozen=True)
class ModuleInfo:
    """モジュール情報"""

    directory: Path
    files: tuple[FileStats, ...]

    @property
    def total_entities(self) -> int:
        """全ファイルのエンティティ数の合計"""
        return sum(stats.count for stats in self.files)


def collect_file_stats(path: Path, kind: EntityKind, config: MbforgeConfig) -> FileStats:
    """データファイルの統計を収集する

    Args:
        path: データファイルのパス
        kind: データファイルの種別
        config: 設定

    Returns:
        ファイル統計情報

    Raises:
        ParseError: ファイルを読み込めない場合
    """
    if not path.is_file():
        return FileStats(kind=kind, path=path, exists=False)

    try:
        data = path.read_bytes()
    except OSError as e:
        raise ParseError(f"ファイルを読み込めません: {path}") from e

    detection = detect(data)
    entities = read_entities(path, kind, config)
    return FileStats(
        kind=kind,
        path=path,
        exists=True,
        size_bytes=len(data),
        encoding=config.encoding.source or detection.encoding,
        has_bom=detection.has_bom,
        count=len(entities),
    )


def analyze_module(directory: Path, config: MbforgeConfig | None = None) -> ModuleInfo:
    """モジュールディレクトリを解析する

    Args:
        directory: 解析対象ディレクトリ
        config: 設定（省略時はデフォルト設定）

    Returns:
        種別ごとのファイル統計を含むモジュール情報
    """
    config = config or get_default_config()
    files = tuple(
        collect_file_stats(directory / kind.file_name(config), kind, config)
        for kind in EntityKind
    )
    return ModuleInfo(directory=directory, files=files)

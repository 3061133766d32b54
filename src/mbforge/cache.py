"""Cache module for mbforge."""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

Loader = Callable[[Path], list[Any]]


@dataclass(frozen=True)
class CacheInfo:
    """キャッシュ情報"""

    entries: int
    hits: int
    misses: int


@dataclass(frozen=True)
class _CacheEntry:
    mtime_ns: int
    size: int
    entities: list[Any]


class ParseCache:
    """解析結果のキャッシュ

    ファイルの更新時刻とサイズをキーに解析結果を保持する。
    ファイルが更新されていれば再解析する。複数スレッドから共有できる。
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[tuple[Path, str], _CacheEntry] = {}
        self._hits = 0
        self._misses = 0

    def get_or_parse(self, path: Path, kind: str, loader: Loader) -> list[Any]:
        """キャッシュ済みの解析結果を返す。無効な場合は解析して保存する

        Args:
            path: データファイルのパス
            kind: データ種別（同一パスを別種別で読む場合の区別に使う）
            loader: パスを受け取りエンティティのリストを返す解析関数

        Returns:
            解析したエンティティのリスト（呼び出しごとに複製を返す）

        Raises:
            OSError: ファイルの状態を取得できない場合
        """
        stat = path.stat()
        key = (path.resolve(), kind)

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.mtime_ns == stat.st_mtime_ns and entry.size == stat.st_size:
                self._hits += 1
                logger.debug(f"キャッシュヒット: {path.name}")
                return copy.deepcopy(entry.entities)
            self._misses += 1

        entities = loader(path)

        with self._lock:
            self._entries[key] = _CacheEntry(
                mtime_ns=stat.st_mtime_ns, size=stat.st_size, entities=copy.deepcopy(entities)
            )
        return entities

    def invalidate(self, path: Path) -> None:
        """指定ファイルのキャッシュを破棄する"""
        resolved = path.resolve()
        with self._lock:
            for key in [key for key in self._entries if key[0] == resolved]:
                del self._entries[key]

    def clear(self) -> None:
        """キャッシュをすべて破棄する"""
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> CacheInfo:
        """キャッシュ情報を取得する"""
        with self._lock:
            return CacheInfo(entries=len(self._entries), hits=self._hits, misses=self._misses)

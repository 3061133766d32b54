"""検証レポートおよびログ出力のインターフェース定義

このモジュールは、mbforgeのCLIにおけるメッセージ出力を管理する。
VerboseLevel (詳細ログレベル)に応じた出力制御を行い、
ライブラリ内部で `logging` に記録されたメッセージもこの出力に転送できる。
"""

from __future__ import annotations

import logging
import re
import sys
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from mbforge.validator import ValidationResult

ROOT_LOGGER_NAME = "mbforge"

_RED = "\x1b[31m"
_YELLOW = "\x1b[33m"
_RESET = "\x1b[0m"


class VerboseLevel(IntEnum):
    """詳細ログレベル

    ログ出力の詳細度を制御するための列挙型。
    QUIET: エラーのみ出力
    NORMAL: サマリと警告を出力
    VERBOSE: 読み込んだファイル一覧も出力（-vオプション）
    DEBUG: 解析中の内部ログも出力（-vvオプション）
    """

    QUIET = -1
    NORMAL = 0
    VERBOSE = 1
    DEBUG = 2


@dataclass
class LogConfig:
    """ログ設定

    Attributes:
        verbose_level: ログの詳細度レベル
        log_file: ログ出力先ファイルパス（Noneの場合はファイル出力なし）
        use_color: カラー出力を使用するか
    """

    verbose_level: VerboseLevel = VerboseLevel.NORMAL
    log_file: Path | None = None
    use_color: bool = True


class ReportLogger:
    """レポートログ出力クラス

    VerboseLevelに応じてメッセージのフィルタリングを行う。

    使用例:
        >>> config = LogConfig(verbose_level=VerboseLevel.VERBOSE)
        >>> with ReportLogger(config) as logger:
        ...     logger.attach()
        ...     logger.info("検証を開始します")
    """

    _ANSI_ESCAPE_PATTERN = re.compile(r"\x1b\[[0-9;]*m")

    def __init__(self, config: LogConfig) -> None:
        """ロガーを初期化する

        Args:
            config: ログ設定
        """
        self._config = config
        self._handler: _ForwardingHandler | None = None
        self._log_file: TextIO | None = None
        if config.log_file:
            # クラス自体がコンテキストマネージャとして動作し、__exit__でファイルを閉じる
            self._log_file = open(config.log_file, "w", encoding="utf-8")  # noqa: SIM115

    def __enter__(self) -> ReportLogger:
        return self

    def __exit__(self, *args: object) -> None:
        self.detach()
        if self._log_file:
            self._log_file.close()
            self._log_file = None

    @property
    def config(self) -> LogConfig:
        """ログ設定を取得する"""
        return self._config

    def _print(self, message: str, file: TextIO | None = None, color: str | None = None) -> None:
        if file is None:
            file = sys.stdout
        # 端末以外（パイプやファイル）にはエスケープシーケンスを出力しない
        if color and self._config.use_color and file.isatty():
            message = f"{color}{message}{_RESET}"
        print(message, file=file)

    def _log_to_file(self, level: str, message: str) -> None:
        if self._log_file:
            timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            clean_message = self._strip_ansi(message)
            self._log_file.write(f"[{timestamp}] {level}: {clean_message}\n")
            self._log_file.flush()

    def _strip_ansi(self, text: str) -> str:
        """ANSIエスケープシーケンスを除去する"""
        return self._ANSI_ESCAPE_PATTERN.sub("", text)

    def info(self, message: str) -> None:
        """情報メッセージを出力する（NORMAL以上）"""
        if self._config.verbose_level >= VerboseLevel.NORMAL:
            self._print(message)
        self._log_to_file("INFO", message)

    def verbose(self, message: str) -> None:
        """詳細メッセージを出力する（VERBOSE以上）"""
        if self._config.verbose_level >= VerboseLevel.VERBOSE:
            self._print(message)
        self._log_to_file("VERBOSE", message)

    def debug(self, message: str) -> None:
        """デバッグメッセージを出力する（DEBUG以上）"""
        if self._config.verbose_level >= VerboseLevel.DEBUG:
            self._print(message)
        self._log_to_file("DEBUG", message)

    def error(self, message: str) -> None:
        """エラーメッセージを出力する（常に出力）"""
        self._print(f"エラー: {message}", file=sys.stderr, color=_RED)
        self._log_to_file("ERROR", message)

    def warning(self, message: str) -> None:
        """警告メッセージを出力する（QUIET以上）"""
        if self._config.verbose_level > VerboseLevel.QUIET:
            self._print(f"警告: {message}", color=_YELLOW)
        self._log_to_file("WARNING", message)

    def log_validation(self, result: ValidationResult) -> None:
        """検証結果のサマリを出力する

        エラーは常に出力し、警告はVERBOSE以上でのみ個別に出力する。

        Args:
            result: 検証結果
        """
        for error in result.errors:
            self.error(str(error))
        for warning in result.warnings:
            self.verbose(f"警告: {warning}")

        if result.is_valid:
            self.info(f"検証に成功しました（警告 {len(result.warnings)}件）")
        else:
            self.info(
                f"検証に失敗しました（エラー {len(result.errors)}件, 警告 {len(result.warnings)}件）"
            )

    def attach(self) -> None:
        """`mbforge` 配下のloggingの記録をこのロガーへ転送する"""
        if self._handler is not None:
            return
        self._handler = _ForwardingHandler(self)
        root = logging.getLogger(ROOT_LOGGER_NAME)
        root.addHandler(self._handler)
        root.setLevel(_logging_level(self._config.verbose_level))

    def detach(self) -> None:
        """attachで登録した転送ハンドラを取り除く"""
        if self._handler is None:
            return
        root = logging.getLogger(ROOT_LOGGER_NAME)
        root.removeHandler(self._handler)
        root.setLevel(logging.NOTSET)
        self._handler = None


def _logging_level(verbose_level: VerboseLevel) -> int:
    """VerboseLevelに対応するloggingのレベルを返す"""
    if verbose_level >= VerboseLevel.DEBUG:
        return logging.DEBUG
    if verbose_level >= VerboseLevel.VERBOSE:
        return logging.INFO
    if verbose_level >= VerboseLevel.NORMAL:
        return logging.WARNING
    return logging.ERROR


class _ForwardingHandler(logging.Handler):
    """loggingの記録をReportLoggerの各メソッドに振り分けるハンドラ"""

    def __init__(self, report: ReportLogger) -> None:
        super().__init__()
        self._report = report

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            if record.levelno >= logging.ERROR:
                self._report.error(message)
            elif record.levelno >= logging.WARNING:
                self._report.warning(message)
            elif record.levelno >= logging.INFO:
                self._report.verbose(message)
            else:
                self._report.debug(message)
        except Exception:
            self.handleError(record)

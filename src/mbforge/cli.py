"""CLI entry point for mbforge."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from mbforge import __version__
from mbforge.cache import ParseCache
from mbforge.config import ConfigError, MbforgeConfig, find_config, get_default_config, load_config
from mbforge.info import analyze_module
from mbforge.loader import EntityKind, format_file, load_module
from mbforge.logger import LogConfig, ReportLogger, VerboseLevel
from mbforge.parser.tokens import ParseError
from mbforge.types import ExitCode
from mbforge.validator import DataValidator, ValidationResult

app = typer.Typer(help="Mount&Blade系モジュールデータの解析・検証CLIツール")
console = Console()


def _format_size(size_bytes: int) -> str:
    """バイト数を人間が読みやすい形式に変換する"""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    else:
        return f"{size_bytes / (1024 * 1024):.1f} MB"


def _resolve_config(directory: Path | None, config_path: Path | None) -> MbforgeConfig:
    """設定ファイルを読み込む

    明示的な指定がなければディレクトリ内の mbforge.yml を使い、
    それもなければデフォルト設定を返す。
    """
    if config_path is None and directory is not None:
        config_path = find_config(directory)
    if config_path is None:
        return get_default_config()
    try:
        return load_config(config_path)
    except ConfigError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(ExitCode.INVALID_INPUT) from e


def _print_validation(result: ValidationResult) -> None:
    if result.errors:
        table = Table(title="検証エラー")
        table.add_column("種別", style="red")
        table.add_column("ID", style="cyan")
        table.add_column("メッセージ", justify="left")
        table.add_column("参照先", style="yellow")
        for error in result.errors:
            table.add_row(error.kind.value, error.entity_id, error.message, error.reference or "-")
        console.print(table)

    if result.warnings:
        table = Table(title="警告")
        table.add_column("メッセージ", style="yellow")
        for warning in result.warnings:
            table.add_row(warning)
        console.print(table)


@app.command()
def check(
    directory: Annotated[Path, typer.Argument(help="モジュールディレクトリ")],
    config_path: Annotated[
        Path | None, typer.Option("--config", help="設定ファイル（mbforge.yml）")
    ] = None,
    verbose: Annotated[int, typer.Option("-v", "--verbose", count=True, help="詳細ログ出力")] = 0,
    quiet: Annotated[bool, typer.Option("-q", "--quiet", help="エラーのみ出力")] = False,
    log_file: Annotated[Path | None, typer.Option(help="ログファイル出力先")] = None,
    no_color: Annotated[bool, typer.Option("--no-color", help="カラー出力を無効にする")] = False,
) -> None:
    """モジュールデータを読み込み、参照整合性を検証する"""
    if not directory.is_dir():
        console.print(f"[red]Error: ディレクトリが見つかりません: {directory}[/red]")
        raise typer.Exit(ExitCode.INVALID_INPUT)

    config = _resolve_config(directory, config_path)
    level = VerboseLevel.QUIET if quiet else VerboseLevel(min(verbose, VerboseLevel.DEBUG))

    with ReportLogger(
        LogConfig(verbose_level=level, log_file=log_file, use_color=not no_color)
    ) as report:
        report.attach()
        try:
            module = load_module(directory, config, ParseCache())
        except ParseError as e:
            report.error(str(e))
            raise typer.Exit(ExitCode.INVALID_INPUT) from e

        for path in module.loaded_files:
            report.verbose(f"読み込み: {path.name}")

        result = DataValidator(config.validation).validate(
            module.items, module.troops, module.factions, module.triggers
        )
        if level > VerboseLevel.QUIET:
            _print_validation(result)
        report.log_validation(result)

    if result.is_valid:
        console.print("[green]検証に成功しました[/green]")
        raise typer.Exit(ExitCode.SUCCESS)
    console.print(f"[red]検証に失敗しました: エラー {len(result.errors)}件[/red]")
    raise typer.Exit(ExitCode.VALIDATION_FAILED)


@app.command()
def info(
    directory: Annotated[Path, typer.Argument(help="モジュールディレクトリ")],
    config_path: Annotated[
        Path | None, typer.Option("--config", help="設定ファイル（mbforge.yml）")
    ] = None,
) -> None:
    """データファイルの構成を表示する"""
    if not directory.is_dir():
        console.print(f"[red]Error: ディレクトリを指定してください: {directory}[/red]")
        raise typer.Exit(ExitCode.INVALID_INPUT)

    config = _resolve_config(directory, config_path)
    try:
        module_info = analyze_module(directory, config)
    except ParseError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(ExitCode.INVALID_INPUT) from e

    table = Table(title="Module Info")
    table.add_column("Kind", style="cyan")
    table.add_column("File", style="white")
    table.add_column("Entities", justify="right", style="green")
    table.add_column("Encoding")
    table.add_column("Size", justify="right")

    for stats in module_info.files:
        if not stats.exists:
            table.add_row(stats.kind.value, stats.path.name, "-", "[dim]なし[/dim]", "-")
            continue
        encoding = f"{stats.encoding} (BOM)" if stats.has_bom else str(stats.encoding)
        table.add_row(
            stats.kind.value,
            stats.path.name,
            str(stats.count),
            encoding,
            _format_size(stats.size_bytes),
        )

    console.print(table)
    raise typer.Exit(ExitCode.SUCCESS)


@app.command("format")
def format_command(
    file: Annotated[Path, typer.Argument(help="データファイル")],
    kind: Annotated[EntityKind, typer.Option("--kind", "-k", help="データ種別")],
    output: Annotated[Path | None, typer.Option("-o", "--output", help="出力先")] = None,
    config_path: Annotated[
        Path | None, typer.Option("--config", help="設定ファイル（mbforge.yml）")
    ] = None,
) -> None:
    """データファイルを解析し、正規化した形式で書き出す"""
    config = _resolve_config(None, config_path)
    result = format_file(file, kind, output, config)
    if result.success:
        console.print(f"[green]{result.message}[/green]")
    else:
        console.print(f"[red]Error: {result.message}[/red]")
    raise typer.Exit(result.exit_code)


def version_callback(value: bool) -> None:
    """バージョン表示コールバック"""
    if value:
        typer.echo(f"mbforge {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="バージョンを表示する",
        ),
    ] = False,
) -> None:
    """mbforge CLI - モジュールデータの解析・検証"""
    pass

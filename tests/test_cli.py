"""CLIエントリポイントのテスト"""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from mbforge.cli import app

runner = CliRunner()


@pytest.fixture
def valid_module(tmp_path: Path) -> Path:
    (tmp_path / "items.txt").write_text("[itm_spear]\nname Spear\nprice 50\n", encoding="utf-8")
    (tmp_path / "troops.txt").write_text(
        "[trp_recruit]\nname Recruit\nupgrade_troop trp_guard\nequipment itm_spear\n\n"
        "[trp_guard]\nname Guard\n",
        encoding="utf-8",
    )
    return tmp_path


class TestMainCommand:
    """メインコマンドのテスト"""

    @pytest.mark.parametrize(
        "args,expected_in_output",
        [
            pytest.param(["--help"], "モジュールデータ", id="正常系: ヘルプ表示"),
            pytest.param(["--version"], "0.1.0", id="正常系: バージョン表示"),
        ],
    )
    def test_main_options(self, args: list[str], expected_in_output: str) -> None:
        result = runner.invoke(app, args)
        assert result.exit_code == 0
        assert expected_in_output in result.stdout


class TestCheckCommand:
    """checkコマンドのテスト"""

    def test_valid_module(self, valid_module: Path) -> None:
        """整合性のあるモジュールは終了コード0"""
        result = runner.invoke(app, ["check", str(valid_module)])
        assert result.exit_code == 0
        assert "検証に成功しました" in result.stdout

    def test_missing_reference_fails(self, valid_module: Path) -> None:
        """参照切れがあれば終了コード1"""
        (valid_module / "troops.txt").write_text("[trp_a]\nname A\nupgrade_troop trp_ghost\n")
        result = runner.invoke(app, ["check", str(valid_module)])
        assert result.exit_code == 1
        assert "trp_ghost" in result.stdout

    def test_missing_directory(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["check", str(tmp_path / "nope")])
        assert result.exit_code == 2

    def test_invalid_config(self, valid_module: Path) -> None:
        """不正な設定ファイルは終了コード2"""
        config = valid_module / "bad.yml"
        config.write_text("- not a mapping\n")
        result = runner.invoke(app, ["check", str(valid_module), "--config", str(config)])
        assert result.exit_code == 2

    def test_config_in_directory_used(self, valid_module: Path) -> None:
        """ディレクトリ内のmbforge.ymlが使われる"""
        (valid_module / "mbforge.yml").write_text("files:\n  items: none.txt\n")
        result = runner.invoke(app, ["check", str(valid_module)])
        assert result.exit_code == 1

    def test_log_file(self, valid_module: Path, tmp_path: Path) -> None:
        log_file = tmp_path / "check.log"
        result = runner.invoke(app, ["check", str(valid_module), "--log-file", str(log_file)])
        assert result.exit_code == 0
        assert "検証に成功しました" in log_file.read_text(encoding="utf-8")

    def test_no_color(self, valid_module: Path) -> None:
        result = runner.invoke(app, ["check", str(valid_module), "--no-color"])
        assert result.exit_code == 0
        assert "\x1b" not in result.stdout

    def test_verbose_lists_files(self, valid_module: Path) -> None:
        result = runner.invoke(app, ["check", str(valid_module), "-v"])
        assert result.exit_code == 0
        assert "items.txt" in result.stdout


class TestInfoCommand:
    """infoコマンドのテスト"""

    def test_info_table(self, valid_module: Path) -> None:
        result = runner.invoke(app, ["info", str(valid_module)])
        assert result.exit_code == 0
        assert "Module Info" in result.stdout
        assert "items.txt" in result.stdout

    def test_info_not_directory(self, tmp_path: Path) -> None:
        file_path = tmp_path / "file.txt"
        file_path.write_text("x")
        result = runner.invoke(app, ["info", str(file_path)])
        assert result.exit_code == 2


class TestFormatCommand:
    """formatコマンドのテスト"""

    def test_format_to_output(self, valid_module: Path, tmp_path: Path) -> None:
        output = tmp_path / "out.txt"
        result = runner.invoke(
            app,
            ["format", str(valid_module / "troops.txt"), "--kind", "troops", "-o", str(output)],
        )
        assert result.exit_code == 0
        assert output.read_text().startswith("[trp_recruit]\nname Recruit\n")

    def test_format_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["format", str(tmp_path / "nope.txt"), "--kind", "items"])
        assert result.exit_code == 2

    def test_format_invalid_kind(self, valid_module: Path) -> None:
        result = runner.invoke(app, ["format", str(valid_module / "items.txt"), "--kind", "dragons"])
        assert result.exit_code != 0

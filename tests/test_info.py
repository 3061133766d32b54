"""モジュール情報解析のテスト"""

from pathlib import Path

from mbforge.encoding import UTF8_BOM
from mbforge.info import analyze_module
from mbforge.loader import EntityKind


class TestAnalyzeModule:
    """analyze_moduleのテスト"""

    def test_collects_per_kind_stats(self, tmp_path: Path) -> None:
        """種別ごとにエンティティ数・文字コード・サイズを収集する"""
        items = UTF8_BOM + b"[itm_a]\nname A\n\n[itm_b]\nname B\n"
        (tmp_path / "items.txt").write_bytes(items)
        (tmp_path / "factions.txt").write_text("[fac_a]\nname A\n", encoding="utf-8")

        info = analyze_module(tmp_path)
        stats = {s.kind: s for s in info.files}

        assert stats[EntityKind.ITEMS].exists
        assert stats[EntityKind.ITEMS].count == 2
        assert stats[EntityKind.ITEMS].encoding == "utf-8"
        assert stats[EntityKind.ITEMS].has_bom is True
        assert stats[EntityKind.ITEMS].size_bytes == len(items)
        assert stats[EntityKind.FACTIONS].count == 1
        assert stats[EntityKind.TROOPS].exists is False
        assert info.total_entities == 3

    def test_empty_directory(self, tmp_path: Path) -> None:
        info = analyze_module(tmp_path)
        assert len(info.files) == len(EntityKind)
        assert info.total_entities == 0

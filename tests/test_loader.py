"""データファイル入出力のテスト"""

from pathlib import Path

import pytest

from mbforge.cache import ParseCache
from mbforge.config import CacheConfig, EncodingConfig, FilesConfig, MbforgeConfig
from mbforge.encoding import UTF8_BOM
from mbforge.loader import (
    EntityKind,
    format_file,
    load_module,
    read_entities,
    write_entities,
)
from mbforge.models.item import Item
from mbforge.models.troop import Troop
from mbforge.parser.tokens import ParseError
from mbforge.types import ExitCode


@pytest.fixture
def module_dir(tmp_path: Path) -> Path:
    (tmp_path / "items.txt").write_text("[itm_a]\nname A\nprice 10\n", encoding="utf-8")
    (tmp_path / "troops.txt").write_text(
        "[trp_a]\nname A\nequipment itm_a\n\n[trp_b]\nname B\n", encoding="utf-8"
    )
    (tmp_path / "triggers.txt").write_text("trigger 1 0 0\n4 :1 2\n", encoding="utf-8")
    return tmp_path


class TestReadEntities:
    """read_entitiesのテスト"""

    def test_read_items(self, module_dir: Path) -> None:
        items = read_entities(module_dir / "items.txt", EntityKind.ITEMS)
        assert items == [Item(id="itm_a", name="A", price=10)]

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        """存在しないファイルはOSErrorを連鎖したParseError"""
        with pytest.raises(ParseError) as exc_info:
            read_entities(tmp_path / "nope.txt", EntityKind.ITEMS)
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_bom_and_crlf(self, tmp_path: Path) -> None:
        path = tmp_path / "items.txt"
        path.write_bytes(UTF8_BOM + b"[itm_a]\r\nname A\r\n")
        assert read_entities(path, EntityKind.ITEMS)[0].name == "A"

    def test_configured_source_encoding(self, tmp_path: Path) -> None:
        path = tmp_path / "items.txt"
        path.write_bytes("[itm_a]\nname Épée\n".encode("cp1252"))
        config = MbforgeConfig(encoding=EncodingConfig(source="cp1252"))
        assert read_entities(path, EntityKind.ITEMS, config)[0].name == "Épée"

    def test_undecodable_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "items.txt"
        path.write_bytes(b"[itm_a]\nname \xff\n")
        config = MbforgeConfig(encoding=EncodingConfig(source="utf-8"))
        with pytest.raises(ParseError):
            read_entities(path, EntityKind.ITEMS, config)


class TestWriteEntities:
    """write_entitiesのテスト"""

    def test_write_and_read_back(self, tmp_path: Path) -> None:
        troops = [Troop(id="trp_a", name="A"), Troop(id="trp_b", name="B", upgrade_troop="trp_a")]
        path = tmp_path / "out" / "troops.txt"
        write_entities(path, EntityKind.TROOPS, troops)
        assert read_entities(path, EntityKind.TROOPS) == troops

    def test_write_with_bom(self, tmp_path: Path) -> None:
        path = tmp_path / "items.txt"
        config = MbforgeConfig(encoding=EncodingConfig(add_bom=True))
        write_entities(path, EntityKind.ITEMS, [Item(id="itm_a", name="A")], config)
        assert path.read_bytes().startswith(UTF8_BOM)

    def test_unencodable_raises(self, tmp_path: Path) -> None:
        config = MbforgeConfig(encoding=EncodingConfig(target="ascii"))
        with pytest.raises(ParseError):
            write_entities(tmp_path / "items.txt", EntityKind.ITEMS, [Item(id="i", name="剣")], config)


class TestFormatFile:
    """format_fileのテスト"""

    def test_normalizes_file(self, tmp_path: Path) -> None:
        source = tmp_path / "items.txt"
        source.write_text("itemsfile version 3\n[itm_a]\nprice 5\nname   A\n[itm_bad\n")
        output = tmp_path / "formatted.txt"

        result = format_file(source, EntityKind.ITEMS, output)

        assert result.success
        assert output.read_text().startswith("[itm_a]\nname A\nprice 5\n")

    def test_missing_source(self, tmp_path: Path) -> None:
        result = format_file(tmp_path / "nope.txt", EntityKind.ITEMS)
        assert not result.success
        assert result.exit_code == ExitCode.INVALID_INPUT


class TestLoadModule:
    """load_moduleのテスト"""

    def test_loads_present_files(self, module_dir: Path) -> None:
        """存在するファイルのみ読み込み、存在しない種別は空になる"""
        module = load_module(module_dir)
        assert [i.id for i in module.items] == ["itm_a"]
        assert [t.id for t in module.troops] == ["trp_a", "trp_b"]
        assert module.factions == []
        assert len(module.triggers) == 1
        assert module.count(EntityKind.TROOPS) == 2
        assert len(module.loaded_files) == 3

    def test_custom_file_names(self, tmp_path: Path) -> None:
        (tmp_path / "item_kinds1.txt").write_text("[itm_a]\nname A\n")
        config = MbforgeConfig(files=FilesConfig(items="item_kinds1.txt"))
        assert len(load_module(tmp_path, config).items) == 1

    def test_missing_directory_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ParseError):
            load_module(tmp_path / "nope")

    def test_uses_cache(self, module_dir: Path) -> None:
        cache = ParseCache()
        load_module(module_dir, cache=cache)
        load_module(module_dir, cache=cache)
        stats = cache.stats()
        assert stats.misses == 3
        assert stats.hits == 3

    def test_cache_disabled_by_config(self, module_dir: Path) -> None:
        cache = ParseCache()
        config = MbforgeConfig(cache=CacheConfig(enabled=False))
        load_module(module_dir, config, cache)
        assert cache.stats().entries == 0

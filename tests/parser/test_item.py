"""アイテムParserのテスト"""

import logging

import pytest

from mbforge.models.item import Item, ItemFlags, ItemType
from mbforge.parser.item import ItemParser
from mbforge.parser.tokens import ParseError

SAMPLE_ITEMS = """itemsfile version 3

[itm_sword]
name Arming Sword
mesh sword_mesh
price 120
weight 1.25
damage 25
speed 95
reach 90
accuracy 0
difficulty 9
flags 0x102
modifier balanced 3

[itm_helmet]
name Nasal Helmet
price 300
weight 2.00
armor 24
flags 0xC
"""


@pytest.fixture
def parser() -> ItemParser:
    return ItemParser()


class TestParseText:
    """parse_textのテスト"""

    def test_parses_all_fields(self, parser: ItemParser) -> None:
        """各キーの値がフィールドに設定される"""
        items = parser.parse_text(SAMPLE_ITEMS)
        assert [item.id for item in items] == ["itm_sword", "itm_helmet"]

        sword = items[0]
        assert sword.name == "Arming Sword"
        assert sword.mesh_name == "sword_mesh"
        assert sword.price == 120
        assert sword.weight == 1.25
        assert sword.damage == 25
        assert sword.speed == 95
        assert sword.reach == 90
        assert sword.difficulty == 9
        assert sword.item_type == ItemType.ONE_HANDED_WEAPON
        assert sword.flags.can_penetrate_shield is True
        assert sword.modifiers == [("balanced", 3)]

        helmet = items[1]
        assert helmet.item_type == ItemType.HEAD_ARMOR
        assert helmet.armor == 24
        assert helmet.is_armor()

    def test_lines_before_first_header_ignored(self, parser: ItemParser) -> None:
        """最初のヘッダーより前の行は無視される"""
        items = parser.parse_text("name Orphan\nprice 5\n[itm_a]\nname A\n")
        assert len(items) == 1
        assert items[0].name == "A"
        assert items[0].price == 0

    def test_unknown_key_ignored(self, parser: ItemParser) -> None:
        """未知のキーは無視される"""
        items = parser.parse_text("[itm_a]\nname A\nsparkle 9000\n")
        assert len(items) == 1

    def test_bad_field_value_keeps_default(
        self, parser: ItemParser, caplog: pytest.LogCaptureFixture
    ) -> None:
        """不正な値のフィールドはデフォルト値のまま警告が出る"""
        with caplog.at_level(logging.WARNING, logger="mbforge"):
            items = parser.parse_text("[itm_a]\nname A\nprice lots\nweight 2.5\n")
        assert items[0].price == 0
        assert items[0].weight == 2.5
        assert "price" in caplog.text

    def test_hex_values_accepted(self, parser: ItemParser) -> None:
        """数値フィールドは16進数も受け付ける"""
        items = parser.parse_text("[itm_a]\nname A\nprice 0x1F\ncapabilities 0x10\n")
        assert items[0].price == 31
        assert items[0].capabilities == 0x10

    def test_malformed_entities_dropped(
        self, parser: ItemParser, caplog: pytest.LogCaptureFixture
    ) -> None:
        """名前のないエンティティと不正なヘッダーは除外され、正常なものだけ残る"""
        text = "[itm_bad\nname Broken\n[itm_noname]\nprice 10\n[itm_good]\nname Good\n"
        with caplog.at_level(logging.WARNING, logger="mbforge"):
            items = parser.parse_text(text)
        assert [item.id for item in items] == ["itm_good"]
        assert "itm_noname" in caplog.text

    def test_out_of_range_price_dropped(self, parser: ItemParser) -> None:
        """価格が範囲外のエンティティは除外される"""
        items = parser.parse_text("[itm_a]\nname A\nprice 1000000\n")
        assert items == []

    def test_quoted_name(self, parser: ItemParser) -> None:
        """引用符で囲まれた名前は引用符が除去される"""
        items = parser.parse_text('[itm_a]\nname "  Padded  "\n')
        assert items[0].name == "  Padded  "


class TestSerializeText:
    """serialize_textのテスト"""

    def test_field_order(self, parser: ItemParser) -> None:
        """決まった順序で書き出される"""
        item = Item(
            id="itm_axe",
            name="Axe",
            item_type=ItemType.TWO_HANDED_WEAPON,
            flags=ItemFlags(two_handed=True),
            damage=30,
            speed=80,
            reach=70,
            price=200,
            weight=3.5,
        )
        text = parser.serialize_text([item])
        assert text.splitlines() == [
            "[itm_axe]",
            "name Axe",
            "price 200",
            "weight 3.50",
            "damage 30",
            "speed 80",
            "reach 70",
            "accuracy 0",
            "flags 0x403",
            "",
        ]

    def test_weapon_stats_omitted_for_non_weapons(self, parser: ItemParser) -> None:
        """武器以外では武器ステータスを書き出さない"""
        item = Item(id="itm_bread", name="Bread", item_type=ItemType.FOOD, damage=5)
        text = parser.serialize_text([item])
        assert "damage" not in text
        assert "flags 0x11" in text

    def test_entities_separated_by_blank_line(self, parser: ItemParser) -> None:
        """エンティティ間は空行で区切られる"""
        text = parser.serialize_text([Item(id="a", name="A"), Item(id="b", name="B")])
        assert "\n\n[b]" in text

    def test_empty_list(self, parser: ItemParser) -> None:
        assert parser.serialize_text([]) == ""

    @pytest.mark.parametrize(
        "item",
        [
            pytest.param(Item(id="", name="A"), id="異常系: 空のID"),
            pytest.param(Item(id="a]b", name="A"), id="異常系: IDに閉じブラケット"),
            pytest.param(Item(id="a", name="line\nbreak"), id="異常系: 名前に改行"),
            pytest.param(Item(id="a", name="A", modifiers=[("two words", 1)]), id="異常系: 修飾子名に空白"),
            pytest.param(Item(id='"itm_q"', name="A"), id="異常系: 引用符で囲まれたID"),
            pytest.param(Item(id=" itm_a", name="A"), id="異常系: IDの前後に空白"),
            pytest.param(Item(id="a", name="A", modifiers=[("'heavy'", 1)]), id="異常系: 引用符で囲まれた修飾子名"),
        ],
    )
    def test_unserializable_raises(self, parser: ItemParser, item: Item) -> None:
        with pytest.raises(ParseError):
            parser.serialize_text([item])


class TestRoundTrip:
    """解析とシリアライズの往復のテスト"""

    def test_roundtrip_preserves_items(self, parser: ItemParser) -> None:
        """serialize→parseで同じエンティティに戻る"""
        items = [
            Item(
                id="itm_spear",
                name="Long Spear",
                mesh_name="spear",
                material="wood",
                texture="spear_tex",
                item_type=ItemType.POLEARM,
                flags=ItemFlags(thrust_weapon=True, crush_through=True),
                damage=33,
                speed=85,
                reach=180,
                accuracy=2,
                difficulty=11,
                hit_points=200,
                price=450,
                weight=2.75,
                capabilities=0x3,
                modifiers=[("fine", 1), ("heavy", -2)],
            ),
            Item(
                id="itm_gloves",
                name=" Leather Gloves ",
                item_type=ItemType.HAND_ARMOR,
                armor=3,
                leg_armor=0,
                price=60,
                weight=0.25,
            ),
            Item(id="itm_book", name="'Quoted'", item_type=ItemType.BOOK),
        ]
        assert parser.parse_text(parser.serialize_text(items)) == items

    def test_parse_serialize_parse_is_stable(self, parser: ItemParser) -> None:
        """parse→serialize→parseの結果が最初の解析結果と一致する"""
        first = parser.parse_text(SAMPLE_ITEMS)
        assert parser.parse_text(parser.serialize_text(first)) == first

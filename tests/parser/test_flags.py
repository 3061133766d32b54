"""ビットフィールドコーデックのテスト"""

from dataclasses import fields

import pytest

from mbforge.models.item import ItemFlags, ItemType
from mbforge.models.troop import TroopFlags, TroopType
from mbforge.parser.flags import (
    ITEM_FLAG_BITS,
    ITEM_FLAG_SHIFT,
    TROOP_FLAG_BITS,
    decode_item_flags,
    decode_troop_flags,
    decode_troop_type,
    encode_item_flags,
    encode_troop_flags,
    encode_troop_type,
)


class TestItemFlags:
    """アイテムのフラグワードのテスト"""

    def test_type_tag_in_low_byte(self) -> None:
        """種別タグが下位8ビットから取得される"""
        item_type, flags = decode_item_flags(0x2)
        assert item_type == ItemType.ONE_HANDED_WEAPON
        assert flags == ItemFlags()

    def test_flags_above_type_byte(self) -> None:
        """独立フラグは種別タグの上位に配置される"""
        word = encode_item_flags(ItemType.POLEARM, ItemFlags(two_handed=True, thrust_weapon=True))
        assert word == 0x4 | (0x4 << ITEM_FLAG_SHIFT) | (0x8 << ITEM_FLAG_SHIFT)

    def test_unknown_type_tag_is_other(self) -> None:
        """未定義の種別タグはOTHERになる"""
        item_type, _ = decode_item_flags(0x9)
        assert item_type == ItemType.OTHER

    def test_undefined_bits_dropped(self) -> None:
        """定義されていないビットは破棄される"""
        item_type, flags = decode_item_flags(0x10000 | 0x3)
        assert item_type == ItemType.TWO_HANDED_WEAPON
        assert flags == ItemFlags()

    @pytest.mark.parametrize("item_type", list(ItemType))
    def test_roundtrip_each_type_with_all_flags(self, item_type: ItemType) -> None:
        """全種別・全フラグでdecode(encode(x)) == x"""
        flags = ItemFlags(**{f.name: True for f in fields(ItemFlags)})
        assert decode_item_flags(encode_item_flags(item_type, flags)) == (item_type, flags)

    @pytest.mark.parametrize("name", list(ITEM_FLAG_BITS))
    def test_roundtrip_single_flag(self, name: str) -> None:
        """各フラグ単独でもラウンドトリップする"""
        flags = ItemFlags(**{name: True})
        assert decode_item_flags(encode_item_flags(ItemType.SHIELD, flags)) == (
            ItemType.SHIELD,
            flags,
        )

    def test_encode_decode_word_with_defined_bits(self) -> None:
        """定義済みビットのみのワードはencode(decode(w)) == w"""
        word = 0xD | (0xA5 << ITEM_FLAG_SHIFT)
        assert encode_item_flags(*decode_item_flags(word)) == word


class TestTroopFlags:
    """兵種のフラグワードのテスト"""

    def test_decode_individual_bits(self) -> None:
        """各ビットが対応するフラグになる"""
        flags = decode_troop_flags(0x1 | 0x2)
        assert flags.hero is True
        assert flags.female is True
        assert flags.guarantee_horse is False

    @pytest.mark.parametrize("word", [0x0, 0x1, 0x55, 0xAA, 0xFF])
    def test_encode_decode_word(self, word: int) -> None:
        """0x1〜0x80のビットのみのワードはラウンドトリップする"""
        assert encode_troop_flags(decode_troop_flags(word)) == word

    def test_undefined_bits_dropped(self) -> None:
        """0xFFより上のビットは破棄される"""
        assert encode_troop_flags(decode_troop_flags(0x100 | 0x4)) == 0x4

    def test_roundtrip_all_flags(self) -> None:
        """全フラグ有効でdecode(encode(x)) == x"""
        flags = TroopFlags(**{name: True for name in TROOP_FLAG_BITS})
        assert decode_troop_flags(encode_troop_flags(flags)) == flags


class TestTroopType:
    """兵種タイプのテスト"""

    @pytest.mark.parametrize("troop_type", list(TroopType))
    def test_roundtrip(self, troop_type: TroopType) -> None:
        assert decode_troop_type(encode_troop_type(troop_type)) == troop_type

    @pytest.mark.parametrize("value", [-1, 5, 99])
    def test_unknown_is_regular(self, value: int) -> None:
        """未定義の値はREGULARになる"""
        assert decode_troop_type(value) == TroopType.REGULAR

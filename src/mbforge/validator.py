"""エンティティ横断の検証モジュール

ID重複、参照切れ、アップグレードの循環、勢力関係の非対称などを検出する。
検証は途中で打ち切らず、見つかった問題をすべてValidationResultに集める。
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from mbforge.config import ValidationConfig
from mbforge.models.base import EntityValidationError
from mbforge.models.faction import Faction
from mbforge.models.item import Item
from mbforge.models.trigger import Trigger
from mbforge.models.troop import Troop

logger = logging.getLogger(__name__)


class ValidationErrorKind(Enum):
    """検証エラーの種別"""

    MISSING_REFERENCE = "missing_reference"
    INVALID_VALUE = "invalid_value"
    DUPLICATE_ID = "duplicate_id"
    CIRCULAR_REFERENCE = "circular_reference"
    DATA_INCONSISTENCY = "data_inconsistency"


@dataclass(frozen=True)
class ValidationError:
    """検証で見つかった1件の問題

    Attributes:
        kind: 問題の種別
        entity_id: 問題のあるエンティティのID
        message: 説明
        reference: 関連する参照先のID
    """

    kind: ValidationErrorKind
    entity_id: str
    message: str
    reference: str | None = None

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.entity_id}: {self.message}"


@dataclass
class ValidationResult:
    """検証結果

    Attributes:
        errors: エラーのリスト
        warnings: 警告メッセージのリスト
    """

    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """エラーが1件もない場合にTrue"""
        return not self.errors

    def add_error(
        self,
        kind: ValidationErrorKind,
        entity_id: str,
        message: str,
        reference: str | None = None,
    ) -> None:
        self.errors.append(ValidationError(kind, entity_id, message, reference))

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def merge(self, other: ValidationResult) -> ValidationResult:
        """2つの検証結果を結合した新しい結果を返す"""
        return ValidationResult(
            errors=[*self.errors, *other.errors],
            warnings=[*self.warnings, *other.warnings],
        )


class DataValidator:
    """エンティティ集合の検証器

    Args:
        config: 警告しきい値などの検証設定。省略時はデフォルト値
    """

    def __init__(self, config: ValidationConfig | None = None) -> None:
        self.config = config or ValidationConfig()

    def validate(
        self,
        items: Sequence[Item],
        troops: Sequence[Troop],
        factions: Sequence[Faction],
        triggers: Sequence[Trigger] = (),
    ) -> ValidationResult:
        """全エンティティを検証する

        Args:
            items: アイテムのリスト
            troops: 兵種のリスト
            factions: 勢力のリスト
            triggers: トリガーのリスト

        Returns:
            検出したエラーと警告
        """
        result = ValidationResult()

        self._check_duplicates(result, "アイテム", (item.id for item in items))
        self._check_duplicates(result, "兵種", (troop.id for troop in troops))
        self._check_duplicates(result, "勢力", (faction.id for faction in factions))

        for entity in (*items, *troops, *factions):
            self._check_structure(result, entity.id, entity)

        self._check_references(result, items, troops, factions)
        self._check_upgrade_cycles(result, troops)

        if self.config.check_relation_symmetry:
            self._check_relation_symmetry(result, factions)

        for item in items:
            self._check_item_warnings(result, item)
        for troop in troops:
            self._check_troop_warnings(result, troop)

        for index, trigger in enumerate(triggers):
            self._check_structure(result, f"trigger#{index}", trigger)

        logger.debug(
            f"検証完了: エラー {len(result.errors)}件, 警告 {len(result.warnings)}件"
        )
        return result

    @staticmethod
    def _check_duplicates(result: ValidationResult, label: str, ids: Iterable[str]) -> None:
        seen: Counter[str] = Counter()
        for entity_id in ids:
            seen[entity_id] += 1
            if seen[entity_id] > 1:
                result.add_error(
                    ValidationErrorKind.DUPLICATE_ID,
                    entity_id,
                    f"{label}IDが重複しています（{seen[entity_id]}回目）",
                )

    @staticmethod
    def _check_structure(
        result: ValidationResult, entity_id: str, entity: Item | Troop | Faction | Trigger
    ) -> None:
        try:
            entity.validate()
        except EntityValidationError as e:
            result.add_error(ValidationErrorKind.INVALID_VALUE, entity_id, str(e))

    @staticmethod
    def _check_references(
        result: ValidationResult,
        items: Sequence[Item],
        troops: Sequence[Troop],
        factions: Sequence[Faction],
    ) -> None:
        item_ids = {item.id for item in items}
        troop_ids = {troop.id for troop in troops}
        faction_ids = {faction.id for faction in factions}

        for troop in troops:
            if troop.upgrade_troop is not None and troop.upgrade_troop not in troop_ids:
                result.add_error(
                    ValidationErrorKind.MISSING_REFERENCE,
                    troop.id,
                    f"アップグレード先の兵種が存在しません: {troop.upgrade_troop}",
                    reference=troop.upgrade_troop,
                )
            for equipment in troop.equipment:
                if equipment.item_id not in item_ids:
                    result.add_error(
                        ValidationErrorKind.MISSING_REFERENCE,
                        troop.id,
                        f"装備アイテムが存在しません: {equipment.item_id}",
                        reference=equipment.item_id,
                    )

        for faction in factions:
            for relation in faction.relations:
                if relation.faction_id not in faction_ids:
                    result.add_error(
                        ValidationErrorKind.MISSING_REFERENCE,
                        faction.id,
                        f"関係先の勢力が存在しません: {relation.faction_id}",
                        reference=relation.faction_id,
                    )

    @staticmethod
    def _check_upgrade_cycles(result: ValidationResult, troops: Sequence[Troop]) -> None:
        # 重複IDは最初に出現したものを解決対象とする
        upgrades: dict[str, str | None] = {}
        for troop in troops:
            upgrades.setdefault(troop.id, troop.upgrade_troop)

        for troop in troops:
            if troop.upgrade_troop is None:
                continue
            visited = {troop.id}
            current = troop.upgrade_troop
            while current is not None and current in upgrades:
                if current in visited:
                    result.add_error(
                        ValidationErrorKind.CIRCULAR_REFERENCE,
                        troop.id,
                        f"アップグレード経路が循環しています（{current} に戻ります）",
                        reference=current,
                    )
                    break
                visited.add(current)
                current = upgrades[current]

    @staticmethod
    def _check_relation_symmetry(result: ValidationResult, factions: Sequence[Faction]) -> None:
        by_id: dict[str, Faction] = {}
        for faction in factions:
            by_id.setdefault(faction.id, faction)

        for faction in factions:
            for relation in faction.relations:
                target = by_id.get(relation.faction_id)
                if target is None:
                    continue
                if target.get_relation(faction.id) is None:
                    result.add_warning(
                        f"勢力 {faction.id} → {target.id} の関係に対応する逆方向の関係がありません"
                    )

    def _check_item_warnings(self, result: ValidationResult, item: Item) -> None:
        if item.is_weapon() and (item.damage == 0 or item.speed == 0):
            result.add_warning(f"アイテム {item.id}: 武器のダメージまたは速度が0です")
        if item.is_armor() and item.armor == 0:
            result.add_warning(f"アイテム {item.id}: 防具の防御値が0です")
        if item.price > self.config.max_price_warning:
            result.add_warning(f"アイテム {item.id}: 価格が高すぎる可能性があります ({item.price})")
        if item.weight > self.config.max_weight_warning:
            result.add_warning(f"アイテム {item.id}: 重量が大きすぎる可能性があります ({item.weight:g})")

    def _check_troop_warnings(self, result: ValidationResult, troop: Troop) -> None:
        attribute_total = troop.total_attribute_points()
        if attribute_total > self.config.max_attribute_total:
            result.add_warning(f"兵種 {troop.id}: 属性値の合計が大きすぎます ({attribute_total})")
        skill_total = troop.total_skill_points()
        if skill_total > self.config.max_skill_total:
            result.add_warning(f"兵種 {troop.id}: スキル値の合計が大きすぎます ({skill_total})")


def validate(
    items: Sequence[Item],
    troops: Sequence[Troop],
    factions: Sequence[Faction],
    triggers: Sequence[Trigger] = (),
    *,
    config: ValidationConfig | None = None,
) -> ValidationResult:
    """全エンティティを検証する

    DataValidatorを生成して検証するショートカット。
    """
    return DataValidator(config).validate(items, troops, factions, triggers)

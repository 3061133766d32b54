"""トリガーエンティティモジュール

トリガー、その中の操作（オペレーション）、および操作のパラメータを定義する。
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from mbforge.constants import PARAMETERLESS_OPCODES, operation_name
from mbforge.models.base import EntityValidationError


class OperationType(Enum):
    """操作種別

    オペコードの範囲から導出される。
    """

    CONDITION = "condition"
    CONSEQUENCE = "consequence"
    ASSIGNMENT = "assignment"
    CALL = "call"

    @classmethod
    def from_opcode(cls, opcode: int) -> OperationType:
        """オペコードから操作種別を判定する

        Args:
            opcode: オペコード

        Returns:
            1〜100はCONDITION、101〜500はCONSEQUENCE、
            501〜600はASSIGNMENT、それ以外はCALL
        """
        if 1 <= opcode <= 100:
            return cls.CONDITION
        if 101 <= opcode <= 500:
            return cls.CONSEQUENCE
        if 501 <= opcode <= 600:
            return cls.ASSIGNMENT
        return cls.CALL


class ParameterType(Enum):
    """パラメータ種別"""

    CONSTANT = "constant"
    VARIABLE = "variable"
    REGISTER = "register"
    POSITION = "position"
    STRING = "string"


@dataclass(frozen=True)
class Parameter:
    """操作パラメータ

    Attributes:
        param_type: パラメータ種別
        value: 数値（STRINGの場合は0）
        string_value: 文字列値（STRING以外はNone）
    """

    param_type: ParameterType
    value: int = 0
    string_value: str | None = None

    @classmethod
    def constant(cls, value: int) -> Parameter:
        return cls(ParameterType.CONSTANT, value)

    @classmethod
    def variable(cls, value: int) -> Parameter:
        return cls(ParameterType.VARIABLE, value)

    @classmethod
    def register(cls, value: int) -> Parameter:
        return cls(ParameterType.REGISTER, value)

    @classmethod
    def position(cls, value: int) -> Parameter:
        return cls(ParameterType.POSITION, value)

    @classmethod
    def string(cls, value: str) -> Parameter:
        return cls(ParameterType.STRING, 0, value)


@dataclass
class Operation:
    """トリガー内の1操作

    Attributes:
        opcode: オペコード
        name: 操作名（省略時はオペコード表から導出）
        parameters: パラメータの順序付きリスト
        comment: 注釈
    """

    opcode: int
    name: str = ""
    parameters: list[Parameter] = field(default_factory=list)
    comment: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            self.name = operation_name(self.opcode)

    @property
    def operation_type(self) -> OperationType:
        """オペコードから導出した操作種別"""
        return OperationType.from_opcode(self.opcode)

    def add_parameter(self, parameter: Parameter) -> None:
        """パラメータを追加する"""
        self.parameters.append(parameter)

    def requires_parameters(self) -> bool:
        """パラメータが必須の操作かどうかを返す"""
        return self.opcode not in PARAMETERLESS_OPCODES

    def validate_parameters(self) -> None:
        """パラメータ数を検証する

        Raises:
            EntityValidationError: 必須パラメータが存在しない場合
        """
        if not self.parameters and self.requires_parameters():
            raise EntityValidationError(f"操作 {self.name} にはパラメータが必要です")


@dataclass
class Trigger:
    """トリガーデータ

    Attributes:
        check_period: チェック間隔
        delay_period: 遅延時間
        rearm_period: 再武装間隔
        conditions: 条件操作のリスト
        consequences: 結果操作のリスト
    """

    check_period: float = 0.0
    delay_period: float = 0.0
    rearm_period: float = 0.0
    conditions: list[Operation] = field(default_factory=list)
    consequences: list[Operation] = field(default_factory=list)

    def add_condition(self, operation: Operation) -> None:
        self.conditions.append(operation)

    def add_consequence(self, operation: Operation) -> None:
        self.consequences.append(operation)

    def validate(self) -> None:
        """トリガーの整合性を検証する

        Raises:
            EntityValidationError: 周期が負または有限の数値でない場合、または操作のパラメータが不足している場合
        """
        periods = (
            ("チェック間隔", self.check_period),
            ("遅延時間", self.delay_period),
            ("再武装間隔", self.rearm_period),
        )
        for label, value in periods:
            if not (math.isfinite(value) and value >= 0.0):
                raise EntityValidationError(f"{label}は0以上の有限の数値である必要があります: {value}")

        for operation in (*self.conditions, *self.consequences):
            operation.validate_parameters()

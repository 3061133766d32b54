"""エンティティ共通定義"""


class EntityValidationError(ValueError):
    """エンティティの構造検証エラー

    ID・名称が空である場合や、数値が許容範囲外である場合に発生する。
    """

    pass

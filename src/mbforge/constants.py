"""ゲームデータ定数定義

オペコード、スキル、属性、武器熟練度のID、
各種上限値およびデフォルトのファイル名を定義する。
"""

# 条件オペコード
OP_EQ = 1
OP_GT = 2
OP_GE = 3
OP_LT = 4
OP_LE = 5
OP_IS_BETWEEN = 6

# 制御フローオペコード
OP_TRY_BEGIN = 10
OP_TRY_END = 11
OP_ELSE_TRY = 12
OP_TRY_FOR_RANGE = 13
OP_TRY_FOR_PARTIES = 14

# 代入オペコード
OP_ASSIGN = 100
OP_STORE_ADD = 101
OP_STORE_SUB = 102
OP_STORE_MUL = 103
OP_STORE_DIV = 104

# ゲームロジックオペコード
OP_DISPLAY_MESSAGE = 200
OP_JUMP_TO_MENU = 201
OP_CHANGE_SCREEN_RETURN = 202

OPERATION_NAMES: dict[int, str] = {
    OP_EQ: "eq",
    OP_GT: "gt",
    OP_GE: "ge",
    OP_LT: "lt",
    OP_LE: "le",
    OP_IS_BETWEEN: "is_between",
    OP_TRY_BEGIN: "try_begin",
    OP_TRY_END: "try_end",
    OP_ELSE_TRY: "else_try",
    OP_TRY_FOR_RANGE: "try_for_range",
    OP_TRY_FOR_PARTIES: "try_for_parties",
    OP_ASSIGN: "assign",
    OP_STORE_ADD: "store_add",
    OP_STORE_SUB: "store_sub",
    OP_STORE_MUL: "store_mul",
    OP_STORE_DIV: "store_div",
    OP_DISPLAY_MESSAGE: "display_message",
    OP_JUMP_TO_MENU: "jump_to_menu",
    OP_CHANGE_SCREEN_RETURN: "change_screen_return",
}

# パラメータを取らないオペコード
PARAMETERLESS_OPCODES: frozenset[int] = frozenset({OP_EQ, OP_GT, OP_GE})

# スキルID（TroopSkillsのフィールド順と一致する）
SKILL_NAMES: tuple[str, ...] = (
    "ironflesh",
    "power_strike",
    "power_throw",
    "power_draw",
    "weapon_master",
    "shield",
    "athletics",
    "riding",
    "horse_archery",
    "looting",
    "trainer",
    "tracking",
    "tactics",
    "path_finding",
    "spotting",
    "inventory_management",
    "wound_treatment",
    "surgery",
    "first_aid",
    "engineer",
    "persuasion",
    "prisoner_management",
    "leadership",
    "trade",
)

SKILL_DISPLAY_NAMES: dict[str, str] = {
    "ironflesh": "鋼の肉体",
    "power_strike": "強打",
    "power_throw": "強投",
    "power_draw": "強弓",
    "weapon_master": "武器熟達",
    "shield": "盾術",
    "athletics": "運動能力",
    "riding": "乗馬",
    "horse_archery": "騎射",
    "looting": "略奪",
    "trainer": "訓練",
    "tracking": "追跡",
    "tactics": "戦術",
    "path_finding": "道案内",
    "spotting": "索敵",
    "inventory_management": "在庫管理",
    "wound_treatment": "治療",
    "surgery": "手術",
    "first_aid": "応急手当",
    "engineer": "工学",
    "persuasion": "説得",
    "prisoner_management": "捕虜管理",
    "leadership": "統率",
    "trade": "交易",
}

# 属性ID
ATT_STRENGTH = 0
ATT_AGILITY = 1
ATT_INTELLIGENCE = 2
ATT_CHARISMA = 3

# 武器熟練度ID
WPT_ONE_HANDED_WEAPON = 0
WPT_TWO_HANDED_WEAPON = 1
WPT_POLEARM = 2
WPT_ARCHERY = 3
WPT_CROSSBOW = 4
WPT_THROWING = 5

# 上限値
MAX_ATTRIBUTE_VALUE = 63
MAX_SKILL_VALUE = 15
MAX_WEAPON_PROFICIENCY = 1000
MIN_TROOP_LEVEL = 1
MAX_TROOP_LEVEL = 63
MAX_ITEM_PRICE = 999_999
MAX_ITEM_WEIGHT = 100.0
MIN_RELATION = -100.0
MAX_RELATION = 100.0

# デフォルトのファイル名
ITEMS_FILE = "items.txt"
TROOPS_FILE = "troops.txt"
FACTIONS_FILE = "factions.txt"
TRIGGERS_FILE = "triggers.txt"


def operation_name(opcode: int) -> str:
    """オペコードに対応する操作名を返す

    Args:
        opcode: オペコード

    Returns:
        操作名。未知のオペコードの場合は10進表記の文字列
    """
    return OPERATION_NAMES.get(opcode, str(opcode))


def skill_display_name(skill_id: int) -> str:
    """スキルIDに対応する表示名を返す"""
    if 0 <= skill_id < len(SKILL_NAMES):
        return SKILL_DISPLAY_NAMES[SKILL_NAMES[skill_id]]
    return "不明なスキル"

import enum
from typing import List, Optional

from .roll_config import FUDGE_SYMBOLS, RESULT_PRECISION
from .roll_utils import format_number


class RollResult:
    """
    记录一个表达式节点的计算结果, 可以被视为一个结构体
    """
    def __init__(self, result: float = 0.0, explanation: str = "", is_roll: bool = False):
        self.result: float = result  # 结果数值
        self.explanation: str = explanation  # 代表计算过程的字符串
        self.is_roll: bool = is_roll  # 该结果是否直接由掷骰产生, 影响外层说明文本的括号

    def get_val(self) -> float:
        """
        获得掷骰结果数值
        """
        return self.result

    def get_val_str(self, precision: int = RESULT_PRECISION) -> str:
        """
        获得固定小数位数的结果文本
        """
        return f"{self.get_val():.{precision}f}"

    def get_complete_result(self, explain: bool = False, precision: int = RESULT_PRECISION) -> str:
        """
        获得形如 7.00000 : [3, 4] 的字符串
        """
        if explain:
            return f"{self.get_val_str(precision)} : {self.explanation}"
        return self.get_val_str(precision)

    def __repr__(self):
        return f"RollResult(result={self.result!r}, explanation={self.explanation!r}, is_roll={self.is_roll!r})"


class Modification(enum.Enum):
    """
    单个骰值的状态, 也用于整颗骰子 (仅FRESH与DROPPED)
    """
    FRESH = ""
    DROPPED = "d"
    REROLLED = "r"
    EXPLODED = "!"

    @property
    def suffix(self) -> str:
        return self.value


def explain_value(value: float, is_fudge: bool) -> str:
    if is_fudge and value in FUDGE_SYMBOLS:
        return FUDGE_SYMBOLS[int(value)]
    return format_number(value)


class DiceRoll:
    """
    一次投掷得到的骰值
    """
    def __init__(self, value: float, modification: Modification = Modification.FRESH):
        self.value: float = value
        self.modification: Modification = modification

    def count_roll(self) -> bool:
        """
        被重骰掉的值不计入总和, 爆炸的值计入
        """
        return self.modification in (Modification.FRESH, Modification.EXPLODED)

    def explain(self, is_fudge: bool = False) -> str:
        return explain_value(self.value, is_fudge) + self.modification.suffix

    def __eq__(self, other):
        if not isinstance(other, DiceRoll):
            return NotImplemented
        return self.value == other.value and self.modification == other.modification

    def __repr__(self):
        return f"DiceRoll({self.value!r}, {self.modification.name})"


class DiceRolls:
    """
    一颗骰子的完整历史, 重骰与爆炸会在末尾追加新的骰值
    """
    def __init__(self, value: float, sides: List[int]):
        self.values: List[DiceRoll] = [DiceRoll(value)]
        self.sides: List[int] = sides  # 该骰子所使用的面
        self.modification: Modification = Modification.FRESH

    @property
    def dropped(self) -> bool:
        return self.modification is Modification.DROPPED

    def drop(self) -> None:
        self.modification = Modification.DROPPED

    def _append(self, value: float, previous: Modification) -> None:
        self.values[-1].modification = previous
        self.values.append(DiceRoll(value))

    def reroll(self, value: float) -> None:
        """
        重骰: 之前的骰值标记为r且不再计入
        """
        self._append(value, Modification.REROLLED)

    def explode(self, value: float) -> None:
        """
        爆炸: 之前的骰值标记为!且仍然计入
        """
        self._append(value, Modification.EXPLODED)

    def last(self) -> float:
        return self.values[-1].value

    def min_side(self) -> Optional[int]:
        return min(self.sides) if self.sides else None

    def max_side(self) -> Optional[int]:
        return max(self.sides) if self.sides else None

    def sum(self) -> float:
        if self.dropped:
            return 0.0
        return float(sum(v.value for v in self.values if v.count_roll()))

    def explain(self, is_fudge: bool = False) -> str:
        suffix = self.modification.suffix
        if len(self.values) == 1:
            return self.values[0].explain(is_fudge) + suffix
        return "{" + ", ".join(v.explain(is_fudge) for v in self.values) + "}" + suffix

    def __repr__(self):
        return f"DiceRolls({self.values!r}, {self.modification.name})"

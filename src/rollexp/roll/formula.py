import operator
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .expression import RollExpression
    from .roll_runtime import RollRuntime

# 条件符号到比较方法的映射, 与 parser 中的 CONDITION_LOOKAHEAD 一一对应
REL_OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "=": operator.eq,
    "~=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


@dataclass(frozen=True)
class RollCondition:
    """
    重骰与爆炸的触发条件, 形如 >=5
    """
    comp: str
    value: "RollExpression"

    def __post_init__(self):
        if self.comp not in REL_OPERATORS:
            raise ValueError(f"unknown relational operator {self.comp}")

    @property
    def op(self) -> Callable[[Any, Any], bool]:
        return REL_OPERATORS[self.comp]

    def resolve(self, runtime: "RollRuntime") -> Callable[[float], bool]:
        """
        计算条件右侧的值, 返回一个判断骰值是否满足条件的函数
        """
        rhs: float = self.value.get_result(runtime).result
        op = self.op
        return lambda val: op(val, rhs)


def condition_probability(sides: List[int], trigger: Callable[[float], bool]) -> float:
    """
    计算从sides中均匀抽取一个值满足条件的概率
    """
    if not sides:
        return 0.0
    return sum(1 for side in sides if trigger(side)) / len(sides)


def condition_mean(sides: List[int], trigger: Callable[[float], bool], matched: bool) -> Optional[float]:
    """
    计算满足(或不满足)条件的面的平均值, 没有这样的面时返回None
    """
    values = [side for side in sides if bool(trigger(side)) == matched]
    if not values:
        return None
    return sum(values) / len(values)


def sides_mean(sides: List[int]) -> float:
    return sum(sides) / len(sides)


def sides_median(sides: List[int]) -> float:
    """
    中位数, 偶数个时取中间两个的平均值
    """
    ordered = sorted(sides)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2
    return float(ordered[mid])

import abc
from dataclasses import dataclass
from typing import List, NamedTuple, Tuple, Type, TYPE_CHECKING

from .connector import RollExpConnector
from .result import RollResult
from .roll_utils import RollEvalError, format_number, round_half_away

if TYPE_CHECKING:
    from .modifier import RollExpModifier
    from .roll_runtime import RollRuntime


class RollExpression(metaclass=abc.ABCMeta):
    """
    投骰表达式基类, 解析完成后不再修改
    """

    @abc.abstractmethod
    def get_result(self, runtime: "RollRuntime") -> RollResult:
        """
        Args:
            runtime: 掷骰模式与随机数来源
        Returns:
            返回该掷骰表达式执行的结果
        """
        raise NotImplementedError()


@dataclass(frozen=True)
class RollExpressionInt(RollExpression):
    """
    基础表达式之一, 代表一个整数
    """
    val: int

    def get_result(self, runtime: "RollRuntime") -> RollResult:
        return RollResult(float(self.val), str(self.val))


@dataclass(frozen=True)
class RollExpressionFloat(RollExpression):
    """
    基础表达式之一, 代表一个浮点数
    """
    val: float

    def get_result(self, runtime: "RollRuntime") -> RollResult:
        return RollResult(self.val, format_number(self.val))


@dataclass(frozen=True)
class RollExpressionBinary(RollExpression):
    """
    由连接符连接的两个子表达式
    """
    left: RollExpression
    connector: Type[RollExpConnector]
    right: RollExpression

    def get_result(self, runtime: "RollRuntime") -> RollResult:
        lhs = self.left.get_result(runtime)
        rhs = self.right.get_result(runtime)
        return RollResult(self.connector.connect(lhs.get_val(), rhs.get_val()),
                          f"{lhs.explanation} {self.connector.symbol} {rhs.explanation}")


class RollExpressionAdditive(RollExpressionBinary):
    """
    加减法
    """


class RollExpressionMultiplicative(RollExpressionBinary):
    """
    乘除与取余
    """


class ResolvedSides(NamedTuple):
    values: List[int]
    explanation: str
    is_roll: bool


class RollSides(metaclass=abc.ABCMeta):
    """
    骰子的面, 计算后得到一组整数面值
    """
    is_fudge: bool = False

    @abc.abstractmethod
    def resolve(self, runtime: "RollRuntime") -> ResolvedSides:
        raise NotImplementedError()


def check_sides_num(sides_num: int, runtime: "RollRuntime") -> None:
    if sides_num > runtime.dice_type_max:
        raise RollEvalError(f"cannot roll a die with more than {runtime.dice_type_max} sides")


@dataclass(frozen=True)
class RollSidesExpr(RollSides):
    """
    面数N, 得到1..N
    """
    bound: RollExpression

    def resolve(self, runtime: "RollRuntime") -> ResolvedSides:
        res = self.bound.get_result(runtime)
        bound = round_half_away(res.result)
        if bound < 0:
            raise RollEvalError(f"cannot roll a negative number of sides ({bound})")
        check_sides_num(bound, runtime)
        return ResolvedSides(list(range(1, bound + 1)), res.explanation, res.is_roll)


@dataclass(frozen=True)
class RollSidesRange(RollSides):
    """
    [min..max], 包含两端, min大于max时为空
    """
    min: RollExpression
    max: RollExpression

    def resolve(self, runtime: "RollRuntime") -> ResolvedSides:
        min_res = self.min.get_result(runtime)
        max_res = self.max.get_result(runtime)
        low, high = round_half_away(min_res.result), round_half_away(max_res.result)
        check_sides_num(high - low + 1, runtime)
        return ResolvedSides(list(range(low, high + 1)),
                             f"[{min_res.explanation}..{max_res.explanation}]", False)


@dataclass(frozen=True)
class RollSidesValues(RollSides):
    """
    [a, b, c], 明确给出每个面
    """
    values: Tuple[RollExpression, ...]

    def resolve(self, runtime: "RollRuntime") -> ResolvedSides:
        results = [value.get_result(runtime) for value in self.values]
        return ResolvedSides([round_half_away(res.result) for res in results],
                             "[" + ", ".join(res.explanation for res in results) + "]", False)


@dataclass(frozen=True)
class RollSidesFudge(RollSides):
    """
    命运骰, 面为 -1 0 1
    """
    is_fudge = True

    def resolve(self, runtime: "RollRuntime") -> ResolvedSides:
        return ResolvedSides([-1, 0, 1], "f", False)


@dataclass(frozen=True)
class RollExpressionRoll(RollExpression):
    """
    XdY表达式, 带有任意数量的修饰符, 修饰符按书写顺序依次生效
    """
    rolls: RollExpression
    sides: RollSides
    modifiers: Tuple["RollExpModifier", ...] = ()

    def get_result(self, runtime: "RollRuntime") -> RollResult:
        rolls_res = self.rolls.get_result(runtime)
        dice_num = round_half_away(rolls_res.result)
        if dice_num < 0:
            raise RollEvalError(f"cannot roll a negative number of times ({dice_num})")
        if dice_num > runtime.dice_num_max:
            raise RollEvalError(f"cannot roll more than {runtime.dice_num_max} dice at once")

        sides = self.sides.resolve(runtime)
        dice_list = runtime.mode.roll_dice(dice_num, sides.values, self.modifiers, runtime)

        dice_info = ", ".join(dice.explain(self.sides.is_fudge) for dice in dice_list)
        if rolls_res.is_roll and sides.is_roll:
            explanation = f"({rolls_res.explanation})d({sides.explanation}): [{dice_info}]"
        elif rolls_res.is_roll:
            explanation = f"({rolls_res.explanation})d{sides.explanation}: [{dice_info}]"
        elif sides.is_roll:
            explanation = f"{rolls_res.explanation}d({sides.explanation}): [{dice_info}]"
        else:
            explanation = f"[{dice_info}]"

        return RollResult(float(sum(dice.sum() for dice in dice_list)), explanation, True)

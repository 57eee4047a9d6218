import abc
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple, Type, TYPE_CHECKING

from .expression import RollExpression
from .formula import RollCondition, condition_mean, condition_probability, sides_mean
from .result import DiceRolls
from .roll_utils import RollEvalError, round_half_away

if TYPE_CHECKING:
    from .roll_runtime import RollRuntime


class RollExpModifier(metaclass=abc.ABCMeta):
    """
    用于表示掷骰表达式修饰符, 直接修改传入的骰子列表
    """
    accepts_condition: bool = False
    amount: RollExpression

    def apply(self, dice_list: List[DiceRolls], runtime: "RollRuntime") -> None:
        """
        根据当前的掷骰模式选择随机处理或直接计算期望
        """
        if runtime.mode.closed_form:
            self.expectation(dice_list, runtime)
        else:
            self.modify(dice_list, runtime)

    @abc.abstractmethod
    def modify(self, dice_list: List[DiceRolls], runtime: "RollRuntime") -> None:
        """
        修改掷骰数据, 已被丢弃的骰子不参与处理
        """
        raise NotImplementedError()

    def expectation(self, dice_list: List[DiceRolls], runtime: "RollRuntime") -> None:
        """
        直接计算期望数值而不进行随机处理, 默认与modify相同
        """
        self.modify(dice_list, runtime)

    def resolve_amount(self, runtime: "RollRuntime") -> int:
        return round_half_away(self.amount.get_result(runtime).result)


# (首个记号, 第二个记号) -> 修饰符, 较长的匹配优先
ROLL_MODIFIERS_DICT: Dict[Tuple[str, ...], Type[RollExpModifier]] = {}


def roll_modifier(*patterns: str):
    """
    类修饰器, 将修饰符注册到前瞻表中
    Args:
        patterns: 一个或多个记号序列, 如 "kh" 表示记号k后紧跟记号h
    """
    def inner(cls: Type[RollExpModifier]):
        assert issubclass(cls, RollExpModifier)
        for pattern in patterns:
            key = tuple(pattern)
            assert 0 < len(key) <= 2
            assert key not in ROLL_MODIFIERS_DICT.keys()
            ROLL_MODIFIERS_DICT[key] = cls
        return cls
    return inner


def lookup_modifier(first: Optional[str], second: Optional[str]) -> Tuple[Optional[Type[RollExpModifier]], int]:
    """
    在前瞻表中查找修饰符
    Returns:
        (修饰符类, 需要消耗的记号数), 无匹配时为(None, 0)
    """
    if first is None:
        return None, 0
    if second is not None and (first, second) in ROLL_MODIFIERS_DICT:
        return ROLL_MODIFIERS_DICT[(first, second)], 2
    if (first,) in ROLL_MODIFIERS_DICT:
        return ROLL_MODIFIERS_DICT[(first,)], 1
    return None, 0


class REModSelect(RollExpModifier):
    """
    保留或丢弃数个最大/最小的骰子
    """
    keep: bool = True
    highest: bool = True

    def modify(self, dice_list: List[DiceRolls], runtime: "RollRuntime") -> None:
        active = [dice for dice in dice_list if not dice.dropped]
        num = self.resolve_amount(runtime)
        if num < 0 or num > len(active):
            raise RollEvalError(f"amount {num} is out of range [0, {len(active)}]")

        # 按当前贡献排序, 排在前面的骰子被丢弃
        descending = self.keep != self.highest
        drop_num = len(active) - num if self.keep else num
        for dice in sorted(active, key=lambda d: d.sum(), reverse=descending)[:drop_num]:
            dice.drop()


@roll_modifier("kh", "k")
@dataclass(frozen=True)
class REModKeepHighest(REModSelect):
    """
    修饰符KH:保留最大的x个骰子
    """
    amount: RollExpression
    keep = True
    highest = True


@roll_modifier("kl")
@dataclass(frozen=True)
class REModKeepLowest(REModSelect):
    """
    修饰符KL:保留最小的x个骰子
    """
    amount: RollExpression
    keep = True
    highest = False


@roll_modifier("dh")
@dataclass(frozen=True)
class REModDropHighest(REModSelect):
    """
    修饰符DH:丢弃最大的x个骰子
    """
    amount: RollExpression
    keep = False
    highest = True


@roll_modifier("dl", "d")
@dataclass(frozen=True)
class REModDropLowest(REModSelect):
    """
    修饰符DL:丢弃最小的x个骰子
    """
    amount: RollExpression
    keep = False
    highest = False


class REModRetry(RollExpModifier):
    """
    重骰与爆炸的共同部分: 每颗骰子最多处理amount次, 最新的骰值满足条件时追加一个骰值
    """
    accepts_condition = True
    condition: Optional[RollCondition]

    @abc.abstractmethod
    def default_trigger(self, dice: DiceRolls) -> Callable[[float], bool]:
        raise NotImplementedError()

    @abc.abstractmethod
    def append(self, dice: DiceRolls, value: float) -> None:
        raise NotImplementedError()

    @abc.abstractmethod
    def expected_value(self, current: float, chance: float, mean: float, keep_mean: float, num: int) -> float:
        """
        计算期望模式下追加的骰值
        Args:
            current: 骰子当前的值
            chance: 单次抽取满足条件的概率
            mean: 全部面的平均值
            keep_mean: 不满足条件的面的平均值
            num: 最多处理次数
        """
        raise NotImplementedError()

    def resolve_num(self, runtime: "RollRuntime") -> int:
        num = self.resolve_amount(runtime)
        if num < 0:
            raise RollEvalError(f"amount {num} cannot be negative")
        return min(num, runtime.explode_limit)

    def resolve_trigger(self, runtime: "RollRuntime") -> Optional[Callable[[float], bool]]:
        if self.condition is None:
            return None
        return self.condition.resolve(runtime)

    def modify(self, dice_list: List[DiceRolls], runtime: "RollRuntime") -> None:
        num = self.resolve_num(runtime)
        trigger = self.resolve_trigger(runtime)
        for dice in dice_list:
            # 面为空时无法抽取, 直接跳过
            if dice.dropped or not dice.sides:
                continue
            dice_trigger = trigger or self.default_trigger(dice)
            for _ in range(num):
                if not dice_trigger(dice.last()):
                    break
                self.append(dice, runtime.mode.draw(dice.sides, runtime.rng))

    def expectation(self, dice_list: List[DiceRolls], runtime: "RollRuntime") -> None:
        num = self.resolve_num(runtime)
        trigger = self.resolve_trigger(runtime)
        if num == 0:
            return
        for dice in dice_list:
            if dice.dropped or not dice.sides:
                continue
            dice_trigger = trigger or self.default_trigger(dice)
            chance = condition_probability(dice.sides, dice_trigger)
            if chance == 0:
                continue
            keep_mean = condition_mean(dice.sides, dice_trigger, False)
            self.append(dice, self.expected_value(dice.last(), chance, sides_mean(dice.sides),
                                                  keep_mean if keep_mean is not None else 0.0, num))


@roll_modifier("r")
@dataclass(frozen=True)
class REModReroll(REModRetry):
    """
    修饰符R:满足条件(默认为最小面)时重骰, 只有最新的骰值计入
    """
    amount: RollExpression
    condition: Optional[RollCondition] = None

    def default_trigger(self, dice: DiceRolls) -> Callable[[float], bool]:
        min_side = dice.min_side()
        return lambda val: val == min_side

    def append(self, dice: DiceRolls, value: float) -> None:
        dice.reroll(value)

    def expected_value(self, current: float, chance: float, mean: float, keep_mean: float, num: int) -> float:
        # 第k次重骰才停下的概率为 chance^(k-1) * (1-chance), 停下时的值为不触发面的平均值
        expected = 0.0
        depth_chance = 1.0
        for _ in range(num):
            expected += depth_chance * (1 - chance) * keep_mean
            depth_chance *= chance
        expected += depth_chance * mean
        return current + expected - mean


@roll_modifier("!")
@dataclass(frozen=True)
class REModExplode(REModRetry):
    """
    修饰符!:满足条件(默认为最大面)时额外再投一颗, 所有骰值均计入
    """
    amount: RollExpression
    condition: Optional[RollCondition] = None

    def default_trigger(self, dice: DiceRolls) -> Callable[[float], bool]:
        max_side = dice.max_side()
        return lambda val: val == max_side

    def append(self, dice: DiceRolls, value: float) -> None:
        dice.explode(value)

    def expected_value(self, current: float, chance: float, mean: float, keep_mean: float, num: int) -> float:
        # 第k次爆炸发生的概率为 chance^k, 每次追加一个平均值
        expected = 0.0
        depth_chance = 1.0
        for _ in range(num):
            depth_chance *= chance
            expected += depth_chance * mean
        return expected

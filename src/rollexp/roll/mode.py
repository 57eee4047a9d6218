import abc
from concurrent.futures import ThreadPoolExecutor
from random import Random
from typing import Dict, List, Sequence, Type, TYPE_CHECKING

from .formula import sides_mean, sides_median
from .result import DiceRolls
from .roll_config import SIMULATE_TIMES_DEFAULT
from ..utils.logger import dice_log, DEBUG

if TYPE_CHECKING:
    from .modifier import RollExpModifier
    from .roll_runtime import RollRuntime


class RollMode(metaclass=abc.ABCMeta):
    """
    掷骰模式, 决定骰子初始值的产生方式, 重骰与爆炸也通过draw取得新的值
    """
    name: str = None
    closed_form: bool = False  # 为True时修饰符使用期望公式而不是随机处理

    @abc.abstractmethod
    def draw(self, sides: List[int], rng: Random) -> float:
        """
        从非空的面中取得一个值
        """
        raise NotImplementedError()

    def generate(self, dice_num: int, sides: List[int], rng: Random) -> List[DiceRolls]:
        """
        生成dice_num颗骰子, 面为空时一颗也不生成
        """
        if not sides:
            return []
        return [DiceRolls(self.draw(sides, rng), sides) for _ in range(dice_num)]

    def roll_dice(self, dice_num: int, sides: List[int], modifiers: Sequence["RollExpModifier"],
                  runtime: "RollRuntime") -> List[DiceRolls]:
        """
        生成骰子并按书写顺序应用所有修饰符
        """
        dice_list = self.generate(dice_num, sides, runtime.rng)
        for mod in modifiers:
            mod.apply(dice_list, runtime)
        return dice_list

    def __repr__(self):
        return f"{self.__class__.__name__}()"

    def __eq__(self, other):
        return type(self) is type(other)

    def __hash__(self):
        return hash(type(self))


ROLL_MODES_DICT: Dict[str, Type[RollMode]] = {}


def roll_mode(*names: str):
    """
    类修饰器, 将掷骰模式按名称注册, 第一个名称为正式名称
    """
    def inner(cls: Type[RollMode]):
        assert issubclass(cls, RollMode)
        cls.name = names[0]
        for name in names:
            assert name not in ROLL_MODES_DICT.keys()
            ROLL_MODES_DICT[name] = cls
        return cls
    return inner


@roll_mode("rng", "random")
class RandomMode(RollMode):
    """
    均匀随机抽取一个面
    """
    def draw(self, sides: List[int], rng: Random) -> float:
        return float(rng.choice(sides))


@roll_mode("avg", "average")
class AverageMode(RollMode):
    """
    取所有面的平均值, 修饰符按概率计算期望
    """
    closed_form = True

    def draw(self, sides: List[int], rng: Random) -> float:
        return sides_mean(sides)


@roll_mode("min", "minimum")
class MinimumMode(RollMode):
    def draw(self, sides: List[int], rng: Random) -> float:
        return float(min(sides))


@roll_mode("max", "maximum")
class MaximumMode(RollMode):
    def draw(self, sides: List[int], rng: Random) -> float:
        return float(max(sides))


@roll_mode("med", "median")
class MedianMode(RollMode):
    def draw(self, sides: List[int], rng: Random) -> float:
        return sides_median(sides)


@roll_mode("simavg", "simulate")
class SimulatedAverageMode(RollMode):
    """
    以随机模式独立模拟整个掷骰(包括修饰符)times次, 并行执行,
    返回一颗值为各次总和平均值的骰子
    """

    def __init__(self, times: int = SIMULATE_TIMES_DEFAULT):
        if times < 1:
            raise ValueError(f"simulate times must be positive, got {times}")
        self.times: int = times

    def draw(self, sides: List[int], rng: Random) -> float:
        return float(rng.choice(sides))

    def roll_dice(self, dice_num: int, sides: List[int], modifiers: Sequence["RollExpModifier"],
                  runtime: "RollRuntime") -> List[DiceRolls]:
        if dice_num == 0 or not sides:
            return []
        # 子任务的随机数来源在启动前依次派生, 保证设定种子后结果可复现
        children = [runtime.spawn(RandomMode()) for _ in range(self.times)]
        dice_log(f"[SimAvg] simulating {dice_num} dice {self.times} times on {runtime.workers} workers", DEBUG)

        def run_once(child: "RollRuntime") -> float:
            dice_list = child.mode.roll_dice(dice_num, sides, modifiers, child)
            return sum(dice.sum() for dice in dice_list)

        with ThreadPoolExecutor(max_workers=runtime.workers) as executor:
            totals = list(executor.map(run_once, children))
        return [DiceRolls(sum(totals) / len(totals), sides)]

    def __repr__(self):
        return f"SimulatedAverageMode(times={self.times})"

    def __eq__(self, other):
        return isinstance(other, SimulatedAverageMode) and self.times == other.times

    def __hash__(self):
        return hash((type(self), self.times))


def get_roll_mode(mode_str: str, simulate_times: int = SIMULATE_TIMES_DEFAULT) -> RollMode:
    """
    根据名称创建掷骰模式, 模拟模式可以写作 simavg:1000 来指定模拟次数
    Raises:
        ValueError: 未知的模式名称或模拟次数不合法
    """
    name, _, times_str = mode_str.strip().lower().partition(":")
    if name not in ROLL_MODES_DICT:
        raise ValueError(f"unknown roll mode '{mode_str}', available: {', '.join(ROLL_MODES_DICT.keys())}")
    mode_cls = ROLL_MODES_DICT[name]
    if mode_cls is SimulatedAverageMode:
        if times_str:
            try:
                simulate_times = int(times_str)
            except ValueError:
                raise ValueError(f"invalid simulate times '{times_str}'")
        return SimulatedAverageMode(simulate_times)
    if times_str:
        raise ValueError(f"roll mode '{name}' does not take a parameter")
    return mode_cls()

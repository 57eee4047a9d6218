"""
掷骰运行时, 持有当前的掷骰模式与随机数来源, 作为参数显式传入表达式的计算过程.
另外提供一个上下文变量, 供外层在不逐层传参的情况下指定默认运行时.
"""

import random
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional, TYPE_CHECKING

from .mode import RollMode, RandomMode, get_roll_mode
from .roll_config import DICE_NUM_MAX, DICE_TYPE_MAX, EXPLODE_LIMIT, WORKERS_DEFAULT

if TYPE_CHECKING:
    from ..core.config import ConfigHelper


class RollRuntime:
    """
    一次计算所需的全部可变状态
    """

    def __init__(self,
                 mode: Optional[RollMode] = None,
                 rng: Optional[random.Random] = None,
                 dice_num_max: int = DICE_NUM_MAX,
                 dice_type_max: int = DICE_TYPE_MAX,
                 explode_limit: int = EXPLODE_LIMIT,
                 workers: int = WORKERS_DEFAULT):
        self.mode: RollMode = mode if mode is not None else RandomMode()
        self.rng: random.Random = rng if rng is not None else random.Random()
        self.dice_num_max: int = dice_num_max
        self.dice_type_max: int = dice_type_max
        self.explode_limit: int = explode_limit
        self.workers: int = max(1, workers)

    @classmethod
    def from_seed(cls, seed: Optional[int], mode: Optional[RollMode] = None, **kwargs) -> "RollRuntime":
        return cls(mode=mode, rng=random.Random(seed), **kwargs)

    @classmethod
    def from_config(cls, cfg: "ConfigHelper") -> "RollRuntime":
        """
        使用配置项构建运行时
        """
        from ..core.config import (CFG_ROLL_MODE, CFG_SIMULATE_TIMES, CFG_SIMULATE_WORKERS,
                                   CFG_DICE_NUM_MAX, CFG_DICE_TYPE_MAX, CFG_EXPLODE_LIMIT, CFG_SEED)
        seed_str = cfg.get_config(CFG_SEED)[0]
        return cls.from_seed(int(seed_str) if seed_str else None,
                             mode=get_roll_mode(cfg.get_config(CFG_ROLL_MODE)[0],
                                                int(cfg.get_config(CFG_SIMULATE_TIMES)[0])),
                             dice_num_max=int(cfg.get_config(CFG_DICE_NUM_MAX)[0]),
                             dice_type_max=int(cfg.get_config(CFG_DICE_TYPE_MAX)[0]),
                             explode_limit=int(cfg.get_config(CFG_EXPLODE_LIMIT)[0]),
                             workers=int(cfg.get_config(CFG_SIMULATE_WORKERS)[0]))

    def spawn(self, mode: Optional[RollMode] = None) -> "RollRuntime":
        """
        派生一个独立的运行时, 随机数种子取自当前运行时, 用于并行任务
        """
        return RollRuntime(mode=mode if mode is not None else self.mode,
                           rng=random.Random(self.rng.getrandbits(64)),
                           dice_num_max=self.dice_num_max,
                           dice_type_max=self.dice_type_max,
                           explode_limit=self.explode_limit,
                           workers=self.workers)

    def __repr__(self):
        return f"RollRuntime(mode={self.mode!r})"


_current_runtime: ContextVar[Optional[RollRuntime]] = ContextVar("roll_runtime", default=None)


def get_runtime() -> Optional[RollRuntime]:
    """获取当前上下文中的掷骰运行时, 未设置时为None"""
    return _current_runtime.get()


def set_runtime(runtime: RollRuntime):
    """设置当前上下文的掷骰运行时, 返回用于恢复的token"""
    return _current_runtime.set(runtime)


def reset_runtime(token):
    """恢复为设置之前的掷骰运行时"""
    _current_runtime.reset(token)


@contextmanager
def use_runtime(runtime: RollRuntime) -> Iterator[RollRuntime]:
    token = set_runtime(runtime)
    try:
        yield runtime
    finally:
        reset_runtime(token)


def resolve_runtime(runtime: Optional[RollRuntime] = None) -> RollRuntime:
    """
    优先使用传入的运行时, 其次是上下文中的运行时, 都没有时新建一个随机模式的运行时
    """
    if runtime is not None:
        return runtime
    current = get_runtime()
    return current if current is not None else RollRuntime()

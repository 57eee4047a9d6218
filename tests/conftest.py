import pytest

from rollexp.roll.mode import get_roll_mode
from rollexp.roll.parser import exec_roll_exp
from rollexp.roll.roll_runtime import RollRuntime


@pytest.fixture
def make_runtime():
    def inner(mode: str = "rng", seed: int = 42, **kwargs) -> RollRuntime:
        return RollRuntime.from_seed(seed, mode=get_roll_mode(mode), **kwargs)
    return inner


@pytest.fixture
def roll(make_runtime):
    """
    roll("2d6", "max") -> RollResult
    """
    def inner(text: str, mode: str = "rng", seed: int = 42, **kwargs):
        return exec_roll_exp(text, make_runtime(mode, seed, **kwargs))
    return inner

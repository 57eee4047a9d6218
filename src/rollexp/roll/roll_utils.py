import math
from typing import Union


class RollDiceError(Exception):
    """
    掷骰过程中的所有错误的基类, info为可以直接反馈给用户的信息
    """
    prefix: str = "roll error"

    def __init__(self, info: str):
        self.info = f"{self.prefix}: {info}"
        super().__init__(self.info)

    def __str__(self):
        return self.info


class RollLexError(RollDiceError):
    """
    表达式中含有无法识别的字符
    """
    prefix = "lex error"


class RollParseError(RollDiceError):
    """
    表达式不符合语法
    """
    prefix = "parse error"


class RollEvalError(RollDiceError):
    """
    表达式合法但无法计算, 如骰子数量为负
    """
    prefix = "eval error"


def round_half_away(val: float) -> int:
    """
    四舍五入到最近的整数, 0.5时远离0 (Python自带的round为银行家舍入)
    """
    if math.isnan(val) or math.isinf(val):
        raise RollEvalError(f"cannot use {format_number(val)} as a count")
    return int(math.copysign(math.floor(abs(val) + 0.5), val))


def format_number(val: Union[int, float]) -> str:
    """
    将数值转为说明文本, 整数值不带小数点
    """
    if isinstance(val, int):
        return str(val)
    if math.isnan(val):
        return "NaN"
    if math.isinf(val):
        return "inf" if val > 0 else "-inf"
    if val.is_integer():
        return str(int(val))
    return repr(val)

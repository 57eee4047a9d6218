"""
掷骰表达式的解析与计算
"""

from .roll import (RollResult, RollExpression, RollDiceError, RollLexError, RollParseError, RollEvalError,
                   RollRuntime, RollMode, get_roll_mode, exec_roll_exp, is_roll_exp, parse_roll_exp,
                   preprocess_roll_exp, use_runtime)

__version__ = "0.1.0"

from .result import RollResult, DiceRoll, DiceRolls, Modification
from .expression import RollExpression
from .parser import is_roll_exp, exec_roll_exp, preprocess_roll_exp, parse_roll_exp
from .roll_utils import RollDiceError, RollLexError, RollParseError, RollEvalError
from .mode import RollMode, get_roll_mode
from .roll_runtime import RollRuntime, get_runtime, set_runtime, reset_runtime, use_runtime
from .roll_command import RollOutputSink, format_result, run_amount, run_lines

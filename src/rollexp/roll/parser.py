"""
递归下降语法分析, 优先级从低到高为: 加减 -> 乘除取余 -> 掷骰 -> 基础值

    Expr           := Additive
    Additive       := Multiplicative (('+'|'-') Multiplicative)*
    Multiplicative := Roll (('*'|'/'|'%') Roll)*
    Roll           := [Primary] 'd' Sides Modifier* | Primary
    Primary        := Int | Float | '(' Expr ')'
    Sides          := Int | '[' Expr (',' Expr)+ ']' | '[' Expr '..' Expr ']' | '(' Expr ')' | 'f'
    Modifier       := ('k'|'kh'|'kl'|'d'|'dl'|'dh') [Amount] | ('r'|'!') [Amount] [Condition]
    Amount         := Int | '(' Expr ')'
    Condition      := ('<='|'>='|'~='|'<'|'>'|'=') Expr
"""

from typing import Dict, List, Optional, Tuple

from .connector import CONNECTOR_ADDITIVE, CONNECTOR_MULTIPLICATIVE, get_connectors
from .cursor import Cursor
from .expression import (RollExpression, RollExpressionInt, RollExpressionFloat, RollExpressionAdditive,
                         RollExpressionMultiplicative, RollExpressionRoll, RollSides, RollSidesExpr,
                         RollSidesRange, RollSidesValues, RollSidesFudge)
from .formula import RollCondition
from .lexer import TOKEN_FLOAT, TOKEN_INT, tokenize
from .modifier import RollExpModifier, lookup_modifier
from .result import RollResult
from .roll_runtime import RollRuntime, resolve_runtime
from .roll_utils import RollDiceError, RollParseError
from ..utils.logger import dice_log, DEBUG
from ..utils.string import to_english_str

ADDITIVE_CONNECTORS = get_connectors(CONNECTOR_ADDITIVE)
MULTIPLICATIVE_CONNECTORS = get_connectors(CONNECTOR_MULTIPLICATIVE)

# (首个记号, 第二个记号) -> 条件符号, 较长的匹配优先
CONDITION_LOOKAHEAD: Dict[Tuple[str, ...], str] = {
    ("<", "="): "<=",
    (">", "="): ">=",
    ("~", "="): "~=",
    ("<",): "<",
    (">",): ">",
    ("=",): "=",
}


def preprocess_roll_exp(input_str: str) -> str:
    """
    预处理掷骰表达式: 去除首尾空白, 全角转半角, 统一为小写
    """
    return to_english_str(input_str.strip()).lower()


def parse_roll_exp(input_str: str) -> RollExpression:
    """
    解析掷骰表达式字符串

    Args:
        input_str: 掷骰表达式字符串, 应当已经过preprocess_roll_exp处理
    Returns:
        roll_exp: 解析后的表达式
    Raises:
        RollLexError: 含有无法识别的字符
        RollParseError: 不符合语法
    """
    tokens = tokenize(input_str)
    dice_log(f"[Parse] tokens: {tokens}", DEBUG)
    cursor = Cursor(tokens)
    exp = parse_expr(cursor)
    if not cursor.at_end():
        raise RollParseError(f"unexpected token {cursor.first()}")
    dice_log(f"[Parse] tree: {exp!r}", DEBUG)
    return exp


def parse_expr(cursor: Cursor) -> RollExpression:
    return parse_additive(cursor)


def parse_additive(cursor: Cursor) -> RollExpression:
    exp = parse_multiplicative(cursor)
    while cursor.first_kind() in ADDITIVE_CONNECTORS:
        connector = ADDITIVE_CONNECTORS[cursor.bump().kind]
        exp = RollExpressionAdditive(exp, connector, parse_multiplicative(cursor))
    return exp


def parse_multiplicative(cursor: Cursor) -> RollExpression:
    exp = parse_roll(cursor)
    while cursor.first_kind() in MULTIPLICATIVE_CONNECTORS:
        connector = MULTIPLICATIVE_CONNECTORS[cursor.bump().kind]
        exp = RollExpressionMultiplicative(exp, connector, parse_roll(cursor))
    return exp


def parse_roll(cursor: Cursor) -> RollExpression:
    """
    XdY, 省略X时视为1
    """
    if cursor.first_kind() == "d":
        cursor.bump()
        return parse_roll_tail(RollExpressionInt(1), cursor)

    is_float = cursor.first_kind() == TOKEN_FLOAT
    rolls = parse_primary(cursor)
    if cursor.first_kind() != "d":
        return rolls
    if is_float:
        raise RollParseError(f"cannot use float {rolls.val} as the number of rolls")
    cursor.bump()
    return parse_roll_tail(rolls, cursor)


def parse_roll_tail(rolls: RollExpression, cursor: Cursor) -> RollExpression:
    sides = parse_sides(cursor)
    modifiers = parse_modifiers(cursor)
    return RollExpressionRoll(rolls, sides, tuple(modifiers))


def parse_primary(cursor: Cursor) -> RollExpression:
    token = cursor.bump()
    if token is None:
        raise RollParseError("expected a number or '(', found end of input")
    if token.kind == TOKEN_INT:
        return RollExpressionInt(token.value)
    if token.kind == TOKEN_FLOAT:
        return RollExpressionFloat(token.value)
    if token.kind == "(":
        exp = parse_expr(cursor)
        cursor.expect(")")
        return exp
    raise RollParseError(f"expected a number or '(', found {token}")


def parse_sides(cursor: Cursor) -> RollSides:
    token = cursor.bump()
    if token is None:
        raise RollParseError("expected sides, found end of input")
    if token.kind == TOKEN_INT:
        return RollSidesExpr(RollExpressionInt(token.value))
    if token.kind == TOKEN_FLOAT:
        raise RollParseError(f"cannot use float {token.value} as the number of sides")
    if token.kind == "(":
        bound = parse_expr(cursor)
        cursor.expect(")")
        return RollSidesExpr(bound)
    if token.kind == "f":
        return RollSidesFudge()
    if token.kind == "[":
        return parse_side_set(cursor)
    raise RollParseError(f"expected sides, found {token}")


def parse_side_set(cursor: Cursor) -> RollSides:
    """
    [a, b, c] 或 [min..max], 左括号已被消耗
    """
    first_value = parse_expr(cursor)
    if cursor.first_kind() == ",":
        values: List[RollExpression] = [first_value]
        while cursor.first_kind() == ",":
            cursor.bump()
            values.append(parse_expr(cursor))
        cursor.expect("]")
        return RollSidesValues(tuple(values))
    if cursor.first_kind() == "." and cursor.second_kind() == ".":
        cursor.bump()
        cursor.bump()
        max_value = parse_expr(cursor)
        cursor.expect("]")
        return RollSidesRange(first_value, max_value)
    found = cursor.first()
    raise RollParseError(f"expected ',' or '..' in side set, found {found if found else 'end of input'}")


def parse_modifiers(cursor: Cursor) -> List[RollExpModifier]:
    """
    按书写顺序解析修饰符, 通过前瞻表区分 k/kh/kl 与 d/dh/dl
    """
    modifiers: List[RollExpModifier] = []
    while True:
        mod_cls, consumed = lookup_modifier(cursor.first_kind(), cursor.second_kind())
        if mod_cls is None:
            break
        for _ in range(consumed):
            cursor.bump()
        amount = parse_amount(cursor)
        if mod_cls.accepts_condition:
            modifiers.append(mod_cls(amount, parse_condition(cursor)))
        else:
            modifiers.append(mod_cls(amount))
    return modifiers


def parse_amount(cursor: Cursor) -> RollExpression:
    if cursor.first_kind() in (TOKEN_INT, "("):
        return parse_primary(cursor)
    return RollExpressionInt(1)


def parse_condition(cursor: Cursor) -> Optional[RollCondition]:
    first, second = cursor.first_kind(), cursor.second_kind()
    for key in ((first, second), (first,)):
        if key in CONDITION_LOOKAHEAD:
            for _ in key:
                cursor.bump()
            return RollCondition(CONDITION_LOOKAHEAD[key], parse_expr(cursor))
    return None


def exec_roll_exp(input_str: str, runtime: Optional[RollRuntime] = None) -> RollResult:
    """
    根据输入执行一次掷骰表达式并返回结果
    若需要重复执行多次同一掷骰表达式, 应当直接调用preprocess_roll_exp和parse_roll_exp并重复get_result
    Args:
        input_str: 掷骰表达式字符串
        runtime: 掷骰运行时, 为None时使用上下文中的运行时, 都没有时使用随机模式
    """
    exp = parse_roll_exp(preprocess_roll_exp(input_str))
    return exp.get_result(resolve_runtime(runtime))


def is_roll_exp(input_str: str) -> bool:
    """
    如果输入一个合法的掷骰表达式, 返回True, 否则返回False
    """
    try:
        parse_roll_exp(preprocess_roll_exp(input_str))
    except RollDiceError:
        return False
    return True

from typing import List, NamedTuple, Union

from .roll_utils import RollLexError

# 单字符记号, 记号类型即为字符本身
SYMBOL_TOKENS = "()[]+-*/%,.dfkhlr!=><~"

TOKEN_INT = "INT"
TOKEN_FLOAT = "FLOAT"


class Token(NamedTuple):
    """
    词法分析产生的记号, kind为INT/FLOAT或符号字符本身, pos为在原字符串中的位置
    """
    kind: str
    value: Union[int, float, str]
    pos: int

    def __str__(self):
        if self.kind in (TOKEN_INT, TOKEN_FLOAT):
            return f"{self.value} at {self.pos}"
        return f"'{self.kind}' at {self.pos}"


def tokenize(input_str: str) -> List[Token]:
    """
    将表达式字符串转为记号列表

    数字后紧跟 '.' 与另一个数字时视为浮点数, 否则为整数 (因此 1..6 为 1 . . 6).
    '-' 总是视为减号, 不存在带符号的字面量.
    Raises:
        RollLexError: 出现无法识别的字符
    """
    tokens: List[Token] = []
    length: int = len(input_str)
    pl: int = 0
    while pl < length:
        word = input_str[pl]
        if word.isspace():
            pl += 1
        elif word in SYMBOL_TOKENS:
            tokens.append(Token(word, word, pl))
            pl += 1
        elif "0" <= word <= "9":
            start = pl
            while pl < length and "0" <= input_str[pl] <= "9":
                pl += 1
            if pl + 1 < length and input_str[pl] == "." and "0" <= input_str[pl + 1] <= "9":
                pl += 1
                while pl < length and "0" <= input_str[pl] <= "9":
                    pl += 1
                tokens.append(Token(TOKEN_FLOAT, float(input_str[start:pl]), start))
            else:
                tokens.append(Token(TOKEN_INT, int(input_str[start:pl]), start))
        else:
            raise RollLexError(f"unexpected character '{word}' at {pl}")
    return tokens

from typing import List, Optional

from .lexer import Token
from .roll_utils import RollParseError


class Cursor:
    """
    记号列表上的游标, 最多向前看两个记号
    """

    def __init__(self, tokens: List[Token]):
        self.tokens: List[Token] = list(tokens)
        self.index: int = 0

    def first(self) -> Optional[Token]:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def second(self) -> Optional[Token]:
        if self.index + 1 < len(self.tokens):
            return self.tokens[self.index + 1]
        return None

    def first_kind(self) -> Optional[str]:
        token = self.first()
        return token.kind if token else None

    def second_kind(self) -> Optional[str]:
        token = self.second()
        return token.kind if token else None

    def bump(self) -> Optional[Token]:
        """
        消耗并返回当前记号, 已到末尾时返回None
        """
        token = self.first()
        if token is not None:
            self.index += 1
        return token

    def expect(self, kind: str) -> Token:
        """
        消耗一个指定类型的记号, 类型不符时报错
        """
        token = self.first()
        if token is None:
            raise RollParseError(f"expected '{kind}', found end of input")
        if token.kind != kind:
            raise RollParseError(f"expected '{kind}', found {token}")
        self.index += 1
        return token

    def at_end(self) -> bool:
        return self.index >= len(self.tokens)

    def __repr__(self):
        return f"Cursor({self.tokens[self.index:]!r})"

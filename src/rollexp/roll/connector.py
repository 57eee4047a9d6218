import abc
import math
from typing import Dict, Type

CONNECTOR_ADDITIVE = "additive"
CONNECTOR_MULTIPLICATIVE = "multiplicative"


class RollExpConnector(metaclass=abc.ABCMeta):
    """
    用于连接两个表达式结果的算术运算符
    """
    symbol: str = None
    kind: str = None

    @staticmethod
    @abc.abstractmethod
    def connect(lhs: float, rhs: float) -> float:
        """
        计算并返回运算结果
        """
        raise NotImplementedError()


ROLL_CONNECTORS_DICT: Dict[str, Type[RollExpConnector]] = {}


def roll_connector(symbol: str, kind: str):
    """
    类修饰器, 将自定义掷骰表达式连接符注册到字典中
    Args:
        symbol: 一个字符, 唯一地匹配该连接符
        kind: 运算优先级分类, additive 或 multiplicative
    """
    def inner(cls: Type[RollExpConnector]):
        assert issubclass(cls, RollExpConnector)
        assert len(symbol) == 1 and symbol not in ROLL_CONNECTORS_DICT.keys()
        assert kind in (CONNECTOR_ADDITIVE, CONNECTOR_MULTIPLICATIVE)
        cls.symbol = symbol
        cls.kind = kind
        ROLL_CONNECTORS_DICT[symbol] = cls
        return cls
    return inner


def get_connectors(kind: str) -> Dict[str, Type[RollExpConnector]]:
    return {s: c for s, c in ROLL_CONNECTORS_DICT.items() if c.kind == kind}


@roll_connector("+", CONNECTOR_ADDITIVE)
class REModAdd(RollExpConnector):
    """
    表示加法
    """
    @staticmethod
    def connect(lhs: float, rhs: float) -> float:
        return lhs + rhs


@roll_connector("-", CONNECTOR_ADDITIVE)
class REModSubtract(RollExpConnector):
    """
    表示减法
    """
    @staticmethod
    def connect(lhs: float, rhs: float) -> float:
        return lhs - rhs


@roll_connector("*", CONNECTOR_MULTIPLICATIVE)
class REModMultiply(RollExpConnector):
    """
    表示乘法
    """
    @staticmethod
    def connect(lhs: float, rhs: float) -> float:
        return lhs * rhs


@roll_connector("/", CONNECTOR_MULTIPLICATIVE)
class REModDivide(RollExpConnector):
    """
    表示除法, 除以0时按IEEE浮点规则得到inf或NaN
    """
    @staticmethod
    def connect(lhs: float, rhs: float) -> float:
        if rhs == 0:
            if lhs == 0 or math.isnan(lhs):
                return math.nan
            return math.copysign(math.inf, lhs) * math.copysign(1.0, rhs)
        return lhs / rhs


@roll_connector("%", CONNECTOR_MULTIPLICATIVE)
class REModModulo(RollExpConnector):
    """
    表示取余, 余数符号与被除数相同; 除数为0或被除数无穷时为NaN
    """
    @staticmethod
    def connect(lhs: float, rhs: float) -> float:
        if rhs == 0 or math.isinf(lhs) or math.isnan(lhs) or math.isnan(rhs):
            return math.nan
        return math.fmod(lhs, rhs)

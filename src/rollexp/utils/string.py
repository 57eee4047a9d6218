from typing import Dict

# 全角字符 ！(65281) 到 ～(65374) 与半角字符一一对应
FULL_WIDTH_OFFSET = 65248
FULL_WIDTH_RANGE = range(65281, 65375)

# 不在全角区间内, 但在输入掷骰表达式时经常出现的中文符号
CHINESE_SYMBOLS: Dict[str, str] = {
    "　": " ",  # 全角空格
    "。": ".",
    "【": "[",
    "】": "]",
    "〔": "(",
    "〕": ")",
}

ENGLISH_TABLE: Dict[int, str] = {code: chr(code - FULL_WIDTH_OFFSET) for code in FULL_WIDTH_RANGE}
ENGLISH_TABLE.update({ord(k): v for k, v in CHINESE_SYMBOLS.items()})


def to_english_str(input_str: str) -> str:
    """
    将字符串中的中文符号与全角字符转为英文, 如 ２Ｄ６＋【1，2】 -> 2D6+[1,2]
    """
    if not isinstance(input_str, str):
        raise ValueError(f"to_english_str: input {input_str!r} must be str type")
    return input_str.translate(ENGLISH_TABLE)

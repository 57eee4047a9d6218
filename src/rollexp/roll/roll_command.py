"""
命令行的执行层: 重复执行同一个表达式, 或逐行执行输入中的表达式
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import List, TextIO

from .expression import RollExpression
from .parser import parse_roll_exp, preprocess_roll_exp
from .result import RollResult
from .roll_config import RESULT_PRECISION, WORKERS_DEFAULT
from .roll_runtime import RollRuntime
from ..utils.logger import dice_log, DEBUG


class RollOutputSink:
    """
    对输出流加锁, 保证并行执行时每条结果完整地写入
    """

    def __init__(self, writer: TextIO):
        self.writer: TextIO = writer
        self.lock = threading.Lock()
        self.count: int = 0  # 已写入的结果数量

    def write(self, text: str, newline: bool = False) -> None:
        with self.lock:
            self.writer.write(text + "\n" if newline else text)
            self.count += 1

    def flush(self) -> None:
        with self.lock:
            self.writer.flush()


def format_result(result: RollResult, explain: bool = False, precision: int = RESULT_PRECISION) -> str:
    """
    得到形如 7.00000 或 7.00000 : [3, 4] 的结果文本
    """
    return result.get_complete_result(explain, precision)


def run_amount(input_str: str, amount: int, sink: RollOutputSink, runtime: RollRuntime,
               explain: bool = False, precision: int = RESULT_PRECISION, workers: int = WORKERS_DEFAULT) -> None:
    """
    解析一次表达式后执行amount次, 前amount-1次并行执行并各自换行输出, 最后一次在其后执行且不换行
    Raises:
        RollDiceError: 任意一次执行失败
        ValueError: amount小于1
    """
    if amount < 1:
        raise ValueError(f"amount must be positive, got {amount}")
    exp: RollExpression = parse_roll_exp(preprocess_roll_exp(input_str))

    # 子运行时在启动前依次派生, 保证设定种子后结果可复现
    children: List[RollRuntime] = [runtime.spawn() for _ in range(amount)]

    def run_once(child: RollRuntime) -> None:
        sink.write(format_result(exp.get_result(child), explain, precision), newline=True)

    if amount > 1:
        dice_log(f"[Repeat] evaluating {input_str} {amount - 1} times on {workers} workers", DEBUG)
        with ThreadPoolExecutor(max_workers=max(1, workers)) as executor:
            for future in [executor.submit(run_once, child) for child in children[:-1]]:
                future.result()

    sink.write(format_result(exp.get_result(children[-1]), explain, precision))


def run_lines(text: str, sink: RollOutputSink, runtime: RollRuntime,
              explain: bool = False, precision: int = RESULT_PRECISION) -> None:
    """
    按顺序执行每个非空行, 结果之间以换行分隔, 最后一条结果后没有换行
    Raises:
        RollDiceError: 某一行执行失败, 之前的结果已经写入
    """
    lines = [line for line in text.splitlines() if line.strip()]
    for index, line in enumerate(lines):
        exp = parse_roll_exp(preprocess_roll_exp(line))
        sink.write(format_result(exp.get_result(runtime), explain, precision), newline=index < len(lines) - 1)

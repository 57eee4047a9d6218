"""
命令行入口

    rollexp 4d6kh3              执行一次
    rollexp -n 6 -e 4d6kh3      执行6次并显示过程
    rollexp -s exps.txt         逐行执行文件中的表达式
"""

import argparse
import configparser
import sys
from typing import List, Optional, TextIO

from . import __version__
from .core.config import (ConfigHelper, create_default_config, CFG_ROLL_MODE, CFG_SEED, CFG_REPEAT_WORKERS,
                          CFG_RESULT_PRECISION)
from .roll.mode import get_roll_mode
from .roll.roll_command import RollOutputSink, run_amount, run_lines
from .roll.roll_runtime import RollRuntime
from .roll.roll_utils import RollDiceError
from .utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def mode_arg(value: str) -> str:
    try:
        get_roll_mode(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))
    return value


def amount_arg(value: str) -> int:
    try:
        amount = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid amount '{value}'")
    if amount < 1:
        raise argparse.ArgumentTypeError(f"amount must be positive, got {amount}")
    return amount


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rollexp", description="Evaluate dice roll expressions such as 4d6kh3+2")
    parser.add_argument("expression", nargs="*",
                        help="the expression to evaluate, read lines from source or stdin when omitted")
    parser.add_argument("-d", "--destination", help="the file to write to, stdout when omitted")
    parser.add_argument("-e", "--explain", action="store_true", help="show how each result was rolled")
    parser.add_argument("-m", "--mode", type=mode_arg,
                        help="roll mode: rng, avg, min, max, med or simavg[:N]")
    parser.add_argument("--seed", type=int, help="seed the random source")
    parser.add_argument("--config", help="ini file with a [rollexp] section")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    log_group = parser.add_mutually_exclusive_group()
    log_group.add_argument("-v", "--verbose", action="store_true", help="log tokens and parse trees to stderr")
    log_group.add_argument("-q", "--quiet", action="store_true", help="do not print errors")

    multi_group = parser.add_mutually_exclusive_group()
    multi_group.add_argument("-s", "--source", help="the file to read expressions from, stdin when omitted")
    multi_group.add_argument("-n", "--amount", type=amount_arg, help="evaluate the expression this many times")
    return parser


def load_config(args: argparse.Namespace) -> ConfigHelper:
    """
    读取配置文件, 命令行参数优先于配置文件
    """
    cfg = create_default_config()
    if args.config:
        cfg.load_config(args.config)
    if args.mode:
        cfg.set_config(CFG_ROLL_MODE, args.mode)
    if args.seed is not None:
        cfg.set_config(CFG_SEED, str(args.seed))
    return cfg


def run(args: argparse.Namespace, cfg: ConfigHelper, writer: TextIO) -> None:
    runtime = RollRuntime.from_config(cfg)
    precision = int(cfg.get_config(CFG_RESULT_PRECISION)[0])
    sink = RollOutputSink(writer)
    logger.debug(f"runtime: {runtime!r}")

    expression = " ".join(args.expression)
    if expression:
        run_amount(expression, args.amount or 1, sink, runtime, args.explain, precision,
                   workers=int(cfg.get_config(CFG_REPEAT_WORKERS)[0]))
    else:
        if args.source:
            with open(args.source, "r", encoding="utf-8") as f:
                text = f.read()
        else:
            text = sys.stdin.read()
        run_lines(text, sink, runtime, args.explain, precision)
    sink.flush()


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose, args.quiet)

    if args.amount is not None and not args.expression:
        parser.error("--amount requires an expression")

    try:
        cfg = load_config(args)
        if args.destination:
            with open(args.destination, "w", encoding="utf-8") as f:
                run(args, cfg, f)
        else:
            run(args, cfg, sys.stdout)
    except RollDiceError as e:
        if not args.quiet:
            print(e.info, file=sys.stderr)
        return 1
    except (OSError, ValueError, configparser.Error) as e:
        if not args.quiet:
            print(f"error: {e}", file=sys.stderr)
        return 1
    return 0

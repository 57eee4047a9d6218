"""
日志模块
"""

import logging
import sys
from logging import DEBUG, INFO, WARNING, ERROR
from typing import Optional, TextIO

LOGGER_NAME = "rollexp"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

__all__ = ["dice_log", "get_logger", "setup_logging", "DEBUG", "INFO", "WARNING", "ERROR"]


def get_logger(module_name: Optional[str] = None) -> logging.Logger:
    """
    获取包内的日志记录器, module_name为空时返回包的根记录器
    """
    if not module_name or module_name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if not module_name.startswith(LOGGER_NAME + "."):
        module_name = f"{LOGGER_NAME}.{module_name}"
    return logging.getLogger(module_name)


def dice_log(msg: str, level: int = INFO) -> None:
    """
    记录一条日志
    """
    get_logger().log(level, msg)


def setup_logging(verbose: bool = False, quiet: bool = False, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    为包的根记录器配置输出到stderr的handler
    """
    logger = get_logger()
    if verbose:
        level = DEBUG
    elif quiet:
        level = ERROR
    else:
        level = WARNING
    logger.setLevel(level)

    # 防止重复添加 handler, 已存在时替换为输出到新流的handler
    for handler in list(logger.handlers):
        if handler.get_name() == LOGGER_NAME:
            logger.removeHandler(handler)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.set_name(LOGGER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(handler)
    return logger

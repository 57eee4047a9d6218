"""
配置项管理, 每个配置项的值都以字符串保存, 多个值之间用逗号分隔
"""

import configparser
from typing import Dict, List

from ..roll.roll_config import (MODE_DEFAULT, SIMULATE_TIMES_DEFAULT, WORKERS_DEFAULT, DICE_NUM_MAX, DICE_TYPE_MAX,
                                EXPLODE_LIMIT, RESULT_PRECISION)
from ..utils.logger import get_logger

logger = get_logger(__name__)

CONFIG_SECTION = "rollexp"

CFG_ROLL_MODE = "roll_mode"
CFG_SIMULATE_TIMES = "simulate_times"
CFG_SIMULATE_WORKERS = "simulate_workers"
CFG_REPEAT_WORKERS = "repeat_workers"
CFG_DICE_NUM_MAX = "dice_num_max"
CFG_DICE_TYPE_MAX = "dice_type_max"
CFG_EXPLODE_LIMIT = "explode_limit"
CFG_RESULT_PRECISION = "result_precision"
CFG_SEED = "seed"


class ConfigItem:
    def __init__(self, key: str, default: str, comment: str = ""):
        self.key: str = key
        self.default: str = default
        self.comment: str = comment
        self.value: str = default

    def __repr__(self):
        return f"ConfigItem({self.key}={self.value!r})"


class ConfigHelper:
    """
    管理所有注册过的配置项, 可以从ini文件中读取覆盖默认值
    """

    def __init__(self):
        self.items: Dict[str, ConfigItem] = {}

    def register_config(self, key: str, default: str, comment: str = "") -> None:
        """
        注册一个配置项, 重复注册时只更新默认值与注释, 不影响已经读取的值
        """
        if key in self.items:
            item = self.items[key]
            if item.value == item.default:
                item.value = default
            item.default, item.comment = default, comment
            return
        self.items[key] = ConfigItem(key, default, comment)

    def get_config(self, key: str) -> List[str]:
        """
        获得配置项的值, 以逗号分隔为列表, 至少包含一个元素
        Raises:
            KeyError: 配置项不存在
        """
        if key not in self.items:
            raise KeyError(f"unknown config item {key}")
        return [val.strip() for val in self.items[key].value.split(",")]

    def set_config(self, key: str, value: str) -> None:
        if key not in self.items:
            raise KeyError(f"unknown config item {key}")
        self.items[key].value = value

    def load_config(self, path: str) -> None:
        """
        从ini文件的[rollexp]段中读取配置, 未注册的配置项会被忽略
        Raises:
            OSError: 文件无法打开
            configparser.Error: 文件格式错误
        """
        parser = configparser.ConfigParser()
        with open(path, "r", encoding="utf-8") as f:
            parser.read_file(f)
        if not parser.has_section(CONFIG_SECTION):
            logger.warning(f"配置文件 {path} 中没有 [{CONFIG_SECTION}] 段")
            return
        for key, value in parser.items(CONFIG_SECTION):
            if key not in self.items:
                logger.warning(f"忽略未知的配置项 {key}")
                continue
            self.items[key].value = value
        logger.debug(f"已读取配置文件 {path}")

    def dump_config(self) -> str:
        """
        以ini格式导出当前所有配置项, 注释写在配置项上方
        """
        lines = [f"[{CONFIG_SECTION}]"]
        for item in self.items.values():
            if item.comment:
                lines.append(f"# {item.comment}")
            lines.append(f"{item.key} = {item.value}")
        return "\n".join(lines) + "\n"


def create_default_config() -> ConfigHelper:
    """
    创建一个注册了全部配置项的ConfigHelper
    """
    cfg = ConfigHelper()
    cfg.register_config(CFG_ROLL_MODE, MODE_DEFAULT, "掷骰模式: rng, avg, min, max, med, simavg[:次数]")
    cfg.register_config(CFG_SIMULATE_TIMES, str(SIMULATE_TIMES_DEFAULT), "模拟平均模式的默认模拟次数")
    cfg.register_config(CFG_SIMULATE_WORKERS, str(WORKERS_DEFAULT), "模拟平均模式使用的线程数")
    cfg.register_config(CFG_REPEAT_WORKERS, str(WORKERS_DEFAULT), "重复执行表达式时使用的线程数")
    cfg.register_config(CFG_DICE_NUM_MAX, str(DICE_NUM_MAX), "单次掷骰的骰子数量上限")
    cfg.register_config(CFG_DICE_TYPE_MAX, str(DICE_TYPE_MAX), "单颗骰子的面数上限")
    cfg.register_config(CFG_EXPLODE_LIMIT, str(EXPLODE_LIMIT), "重骰与爆炸次数的上限, 超出时按上限处理")
    cfg.register_config(CFG_RESULT_PRECISION, str(RESULT_PRECISION), "结果保留的小数位数")
    cfg.register_config(CFG_SEED, "", "随机数种子, 留空时不固定")
    return cfg

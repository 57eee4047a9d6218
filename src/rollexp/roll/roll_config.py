# 掷骰相关的默认配置, 均可被 core.config 中的同名配置项覆盖

DICE_NUM_MAX = 100000  # 单次掷骰的骰子数量上限
DICE_TYPE_MAX = 1000000  # 单颗骰子的面数上限
EXPLODE_LIMIT = 10000  # 单颗骰子重骰/爆炸次数上限

SIMULATE_TIMES_DEFAULT = 1000  # 模拟期望模式的默认模拟次数
WORKERS_DEFAULT = 4  # 并行模拟与多轮掷骰使用的线程数

RESULT_PRECISION = 5  # 输出结果保留的小数位数

MODE_DEFAULT = "rng"

FUDGE_SYMBOLS = {-1: "-", 0: "o", 1: "+"}

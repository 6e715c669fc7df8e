"""系统常量定义"""

from pathlib import Path
from typing import Dict, Set

# 内置样例数据集
SAMPLE_DATASET_PATH: Path = Path(__file__).resolve().parent.parent / "data" / "sample_dataset.json"

# DuckDB 实验表
EXPERIMENT_TABLE = "experiments"
ID_COLUMN = "_experiment_id"
ORDINAL_COLUMN = "_ordinal"

# 详情展示小数位数
DEFAULT_DISPLAY_DECIMALS = 1
DISPLAY_DECIMALS: Dict[str, int] = {
    "Cure Time": 2
}

# 颜色刻度（白 → 蓝）
COLOR_SCALE_START = "#ffffff"
COLOR_SCALE_END = "#1e40af"
LEGEND_TICK_COUNT = 5

# 图表模式
CHART_MODES: Set[str] = {"3d", "2d"}

# 分组区间边界上限
MAX_GROUP_BOUNDARIES = 100

"""Query Engine - 投影、过滤、分组与相关性查询"""

import math
import duckdb
from typing import List, Any, Dict, Optional, Tuple

from polymer_explorer.core.constants import EXPERIMENT_TABLE, ID_COLUMN, ORDINAL_COLUMN
from polymer_explorer.engines.dataset_manager import DatasetManager, get_dataset_manager
from polymer_explorer.models.dataset import Experiment, PropertyRange
from polymer_explorer.models.query import DataPoint, PropertyFilter
from polymer_explorer.utils.logger import log


class QueryExecutionError(Exception):
    """查询执行错误"""

    def __init__(self, message: str, sql: str | None = None, params: List[Any] | None = None, cause: Exception | None = None):
        super().__init__(message)
        self.sql = sql
        self.params = params or []
        self.cause = str(cause) if cause else None


def replace_filter(filters: List[PropertyFilter], new_filter: PropertyFilter) -> List[PropertyFilter]:
    """用新条件替换同一属性上的旧条件（每个属性至多一个条件）"""
    kept = [f for f in filters if f.property != new_filter.property]
    kept.append(new_filter)
    return kept


def format_boundary(value: float) -> str:
    """区间边界文本，整数值不带小数部分"""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


class QueryEngine:
    """查询引擎"""

    def __init__(self, dataset_manager: DatasetManager):
        self.dataset_manager = dataset_manager
        # 属性名 → 位置列名（DuckDB 标识符不区分大小写）
        self._columns: Dict[str, str] = {
            name: f"c{i}" for i, name in enumerate(dataset_manager.properties)
        }
        self._conn = self._create_connection()

    def _create_connection(self) -> duckdb.DuckDBPyConnection:
        """创建内存 DuckDB 连接并写入实验表"""
        frame = self.dataset_manager.to_frame().rename(columns=self._columns)
        frame.insert(0, ORDINAL_COLUMN, range(len(frame)))
        frame.insert(0, ID_COLUMN, frame.index.astype(str))
        frame = frame.reset_index(drop=True)

        conn = duckdb.connect(database=":memory:")
        conn.register("experiments_frame", frame)
        conn.execute(f"CREATE TABLE {EXPERIMENT_TABLE} AS SELECT * FROM experiments_frame")
        conn.unregister("experiments_frame")
        log.info(f"DuckDB 实验表已创建: {EXPERIMENT_TABLE} ({len(frame)} 行)")
        return conn

    def close(self):
        """关闭 DuckDB 连接"""
        self._conn.close()

    def _quote_identifier(self, name: str) -> str:
        """安全引用标识符"""
        escaped = name.replace('"', '""')
        return f'"{escaped}"'

    def compute_stats(self) -> Dict[str, PropertyRange]:
        """获取属性统计"""
        return self.dataset_manager.compute_stats()

    def create_data_points(
        self,
        x_property: str,
        y_property: str,
        z_property: str,
        color_property: str,
        stats: Optional[Dict[str, PropertyRange]] = None,
        ids: Optional[List[str]] = None,
        include_experiment: bool = True
    ) -> List[DataPoint]:
        """
        生成可视化数据点

        每个实验在 x/y/z/颜色 四个属性上的原始值（不做归一化，
        归一化由展示层基于 stats 自行完成）。

        Args:
            x_property: X 轴属性
            y_property: Y 轴属性
            z_property: Z 轴属性
            color_property: 颜色属性
            stats: 属性统计（保留以与调用方接口对称，计算中不使用）
            ids: 仅返回这些实验（可选，仍按数据集顺序）
            include_experiment: 是否附带完整实验记录

        Returns:
            List[DataPoint]: 数据点（数据集顺序）
        """
        x_ref = self.dataset_manager.resolve_property(x_property)
        y_ref = self.dataset_manager.resolve_property(y_property)
        z_ref = self.dataset_manager.resolve_property(z_property)
        color_ref = self.dataset_manager.resolve_property(color_property)

        log.debug(f"生成数据点: x={x_property}, y={y_property}, z={z_property}, color={color_property}")

        selected = set(ids) if ids is not None else None
        points: List[DataPoint] = []
        for experiment_id, experiment in self.dataset_manager.experiments.items():
            if selected is not None and experiment_id not in selected:
                continue
            points.append(DataPoint(
                id=experiment_id,
                x=experiment.value_of(x_ref),
                y=experiment.value_of(y_ref),
                z=experiment.value_of(z_ref),
                value=experiment.value_of(color_ref),
                experiment=experiment.model_copy(deep=True) if include_experiment else None
            ))

        return points

    def filter_experiments(self, filters: List[PropertyFilter]) -> List[str]:
        """
        按属性范围过滤实验

        所有条件取交集（AND），上下界均包含。空条件返回全部实验ID。
        同一属性出现多次时每个条件都生效。

        Returns:
            List[str]: 满足条件的实验ID（数据集顺序）
        """
        for f in filters:
            self.dataset_manager.resolve_property(f.property)

        sql, params = self._build_filter_sql(filters)
        log.debug(f"过滤 SQL: {sql} | params: {params}")

        cursor = self._conn.cursor()
        try:
            rows = cursor.execute(sql, params).fetchall()
        except duckdb.Error as e:
            log.error(f"过滤查询失败: {e} | SQL: {sql} | params: {params}")
            raise QueryExecutionError("过滤查询失败", sql=sql, params=params, cause=e) from e
        finally:
            cursor.close()

        ids = [row[0] for row in rows]
        log.info(f"过滤完成: {len(filters)} 个条件, 命中 {len(ids)}/{len(self.dataset_manager.experiments)}")
        return ids

    def _build_filter_sql(self, filters: List[PropertyFilter]) -> Tuple[str, List[Any]]:
        """构建过滤 SQL 语句"""
        sql_parts = [f"SELECT {self._quote_identifier(ID_COLUMN)} FROM {EXPERIMENT_TABLE}"]
        params: List[Any] = []

        if filters:
            conditions = []
            for f in filters:
                conditions.append(f"{self._quote_identifier(self._columns[f.property])} BETWEEN ? AND ?")
                params.extend([f.min, f.max])
            sql_parts.append(f"WHERE {' AND '.join(conditions)}")

        sql_parts.append(f"ORDER BY {self._quote_identifier(ORDINAL_COLUMN)}")
        return " ".join(sql_parts), params

    def group_by_ranges(self, property_name: str, boundaries: List[float]) -> Dict[str, List[str]]:
        """
        按相邻边界划分左闭右开区间并分组实验

        超出全部区间的实验不出现在任何分组中。

        Args:
            property_name: 分组属性
            boundaries: 区间边界，至少两个

        Returns:
            Dict[str, List[str]]: "{low}-{high}" → 实验ID列表（边界顺序）
        """
        if len(boundaries) < 2:
            raise ValueError("区间分组至少需要两个边界")

        ref = self.dataset_manager.resolve_property(property_name)

        buckets: List[Tuple[float, float, str]] = [
            (low, high, f"{format_boundary(low)}-{format_boundary(high)}")
            for low, high in zip(boundaries, boundaries[1:])
        ]
        result: Dict[str, List[str]] = {label: [] for _, _, label in buckets}

        for experiment_id, experiment in self.dataset_manager.experiments.items():
            value = experiment.value_of(ref)
            for low, high, label in buckets:
                if low <= value < high:
                    result[label].append(experiment_id)
                    break

        return result

    def correlation(self, property_a: str, property_b: str) -> float:
        """
        计算两个属性的 Pearson 相关系数

        任一属性方差为 0（分母为 0）时返回 0。
        """
        ref_a = self.dataset_manager.resolve_property(property_a)
        ref_b = self.dataset_manager.resolve_property(property_b)

        experiments: List[Experiment] = list(self.dataset_manager.experiments.values())
        xs = [e.value_of(ref_a) for e in experiments]
        ys = [e.value_of(ref_b) for e in experiments]

        n = len(xs)
        sum_x = sum(xs)
        sum_y = sum(ys)
        sum_x2 = sum(x * x for x in xs)
        sum_y2 = sum(y * y for y in ys)
        sum_xy = sum(x * y for x, y in zip(xs, ys))

        # 常量列视为零方差
        if min(xs) == max(xs) or min(ys) == max(ys):
            return 0.0

        numerator = n * sum_xy - sum_x * sum_y
        variance_term = (n * sum_x2 - sum_x * sum_x) * (n * sum_y2 - sum_y * sum_y)
        if not math.isfinite(variance_term) or not math.isfinite(numerator):
            raise ValueError(f"相关系数计算溢出: {property_a}, {property_b}")
        if variance_term <= 0:
            return 0.0

        r = numerator / math.sqrt(variance_term)
        return max(-1.0, min(1.0, r))


# 全局单例
_query_engine = None


def get_query_engine() -> QueryEngine:
    """获取 QueryEngine 单例"""
    global _query_engine
    if _query_engine is None:
        _query_engine = QueryEngine(get_dataset_manager())
    return _query_engine

"""Dataset Manager - 实验数据集管理引擎"""

import json
from types import MappingProxyType
import pandas as pd
from pathlib import Path
from typing import List, Optional, Dict, Any, Mapping

from pydantic import ValidationError

from polymer_explorer.core.config import settings
from polymer_explorer.core.constants import (
    SAMPLE_DATASET_PATH,
    DEFAULT_DISPLAY_DECIMALS,
    DISPLAY_DECIMALS
)
from polymer_explorer.models.dataset import (
    Experiment,
    PropertyKind,
    PropertyRef,
    PropertyRange,
    PropertyList,
    FormattedValue,
    FormattedExperiment
)
from polymer_explorer.utils.logger import log


class DatasetValidationError(ValueError):
    """数据集格式错误（加载时立即失败）"""


class UnknownPropertyError(ValueError):
    """未知属性名"""

    def __init__(self, name: str, available: List[str] | None = None):
        super().__init__(f"属性不存在: {name}")
        self.name = name
        self.available = available or []


class DatasetManager:
    """
    数据集管理器

    持有只读的实验数据集（实验ID → Experiment，保持插入顺序），
    在加载时校验所有实验的属性结构一致，并一次性计算属性统计。
    """

    def __init__(self, experiments: Dict[str, Experiment]):
        if not experiments:
            raise DatasetValidationError("数据集为空")

        self._experiments: Dict[str, Experiment] = {
            experiment_id: experiment.model_copy(deep=True)
            for experiment_id, experiment in experiments.items()
        }
        self.properties: Dict[str, PropertyRef] = self._build_property_index()
        self._validate_schema()
        self._stats: Dict[str, PropertyRange] = self._calculate_stats()

        log.info(
            f"数据集加载完成: {len(self.experiments)} 个实验, "
            f"{len(self.input_properties)} 个输入属性, {len(self.output_properties)} 个输出属性"
        )

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "DatasetManager":
        """
        从原始字典创建数据集

        Args:
            raw: {实验ID: {"inputs": {...}, "outputs": {...}}}

        Returns:
            DatasetManager: 数据集管理器
        """
        if not isinstance(raw, dict):
            raise DatasetValidationError(f"数据集必须是对象，实际为: {type(raw).__name__}")

        experiments: Dict[str, Experiment] = {}
        for experiment_id, record in raw.items():
            try:
                experiments[str(experiment_id)] = Experiment.model_validate(record)
            except ValidationError as e:
                log.error(f"实验 {experiment_id} 数据格式错误: {e}")
                raise DatasetValidationError(f"实验 {experiment_id} 数据格式错误: {e}") from e

        return cls(experiments)

    @classmethod
    def from_file(cls, path: Path) -> "DatasetManager":
        """从 JSON 文件加载数据集"""
        log.info(f"读取数据集文件: {path}")

        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            log.error(f"读取数据集文件失败: {e}")
            raise DatasetValidationError(f"无法读取数据集文件 {path}: {e}") from e

        return cls.from_dict(raw)

    @property
    def experiments(self) -> Mapping[str, Experiment]:
        """只读实验映射（数据集顺序）"""
        return MappingProxyType(self._experiments)

    def _first_experiment(self) -> Experiment:
        return next(iter(self._experiments.values()))

    def _build_property_index(self) -> Dict[str, PropertyRef]:
        """根据第一个实验构建属性索引（名称 → 属性引用）"""
        first = self._first_experiment()
        index: Dict[str, PropertyRef] = {}

        for name in first.inputs:
            index[name] = PropertyRef(name=name, kind=PropertyKind.INPUT)

        for name in first.outputs:
            if name in index:
                raise DatasetValidationError(f"属性同时为输入和输出: {name}")
            index[name] = PropertyRef(name=name, kind=PropertyKind.OUTPUT)

        return index

    def _validate_schema(self) -> None:
        """校验每个实验的输入/输出字段集合完全一致"""
        expected_inputs = set(self.input_properties)
        expected_outputs = set(self.output_properties)

        for experiment_id, experiment in self.experiments.items():
            for side, expected, actual in (
                ("inputs", expected_inputs, set(experiment.inputs)),
                ("outputs", expected_outputs, set(experiment.outputs)),
            ):
                missing = expected - actual
                extra = actual - expected
                if missing:
                    raise DatasetValidationError(f"实验 {experiment_id} 的 {side} 缺少字段: {sorted(missing)}")
                if extra:
                    raise DatasetValidationError(f"实验 {experiment_id} 的 {side} 包含多余字段: {sorted(extra)}")

    def _calculate_stats(self) -> Dict[str, PropertyRange]:
        """单次线性扫描计算每个属性的最小/最大值"""
        refs = list(self.properties.values())
        first = self._first_experiment()
        bounds = {ref.name: [first.value_of(ref), first.value_of(ref)] for ref in refs}

        for experiment in self.experiments.values():
            for ref in refs:
                value = experiment.value_of(ref)
                current = bounds[ref.name]
                if value < current[0]:
                    current[0] = value
                if value > current[1]:
                    current[1] = value

        return {name: PropertyRange(min=lo, max=hi) for name, (lo, hi) in bounds.items()}

    @property
    def input_properties(self) -> List[str]:
        return [name for name, ref in self.properties.items() if ref.kind is PropertyKind.INPUT]

    @property
    def output_properties(self) -> List[str]:
        return [name for name, ref in self.properties.items() if ref.kind is PropertyKind.OUTPUT]

    def list_properties(self) -> PropertyList:
        """获取属性列表（输入在前，输出在后）"""
        inputs = self.input_properties
        outputs = self.output_properties
        return PropertyList(inputs=inputs, outputs=outputs, all=inputs + outputs)

    def resolve_property(self, name: str) -> PropertyRef:
        """
        解析属性名

        Raises:
            UnknownPropertyError: 属性名不存在
        """
        ref = self.properties.get(name)
        if ref is None:
            raise UnknownPropertyError(name, list(self.properties))
        return ref

    def compute_stats(self) -> Dict[str, PropertyRange]:
        """获取属性统计（加载时计算，返回副本）"""
        return dict(self._stats)

    def get_experiment(self, experiment_id: str) -> Optional[Experiment]:
        """按ID获取实验（副本），不存在时返回 None"""
        experiment = self._experiments.get(experiment_id)
        if experiment is None:
            return None
        return experiment.model_copy(deep=True)

    def experiment_ids(self) -> List[str]:
        """全部实验ID（数据集顺序）"""
        return list(self.experiments)

    def get_formatted_experiment(self, experiment_id: str) -> Optional[FormattedExperiment]:
        """
        获取用于详情面板展示的实验记录

        仅保留取值大于 0 的输入属性；输出属性按各自的小数位数格式化。
        """
        experiment = self.get_experiment(experiment_id)
        if experiment is None:
            return None

        inputs = [
            FormattedValue(property=name, value=f"{value:.{DEFAULT_DISPLAY_DECIMALS}f}")
            for name, value in experiment.inputs.items()
            if value > 0
        ]
        outputs = [
            FormattedValue(
                property=name,
                value=f"{value:.{DISPLAY_DECIMALS.get(name, DEFAULT_DISPLAY_DECIMALS)}f}"
            )
            for name, value in experiment.outputs.items()
        ]

        return FormattedExperiment(id=experiment_id, inputs=inputs, outputs=outputs)

    def to_frame(self) -> pd.DataFrame:
        """转为 DataFrame（索引为实验ID，列为全部属性）"""
        columns = list(self.properties)
        rows = [
            [experiment.value_of(self.properties[name]) for name in columns]
            for experiment in self.experiments.values()
        ]
        return pd.DataFrame(rows, index=self.experiment_ids(), columns=columns, dtype=float)

    def get_summary(self) -> Dict[str, Any]:
        """获取数据集概要信息"""
        return {
            "total_experiments": len(self.experiments),
            "input_properties": len(self.input_properties),
            "output_properties": len(self.output_properties)
        }


# 全局单例
_dataset_manager = None


def get_dataset_manager() -> DatasetManager:
    """获取 DatasetManager 单例（首次调用时加载配置的数据集）"""
    global _dataset_manager
    if _dataset_manager is None:
        _dataset_manager = DatasetManager.from_file(settings.dataset_path or SAMPLE_DATASET_PATH)
    return _dataset_manager

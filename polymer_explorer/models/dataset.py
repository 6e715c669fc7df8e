"""数据集相关模型"""

from enum import Enum
from typing import Dict, List
from pydantic import BaseModel, ConfigDict, Field, FiniteFloat, model_validator


class PropertyKind(str, Enum):
    """属性类别"""
    INPUT = "input"
    OUTPUT = "output"


class PropertyRef(BaseModel):
    """已解析的属性引用（名称 + 类别）"""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="属性名")
    kind: PropertyKind = Field(..., description="属性类别: input, output")


class Experiment(BaseModel):
    """单个实验记录"""
    model_config = ConfigDict(frozen=True)

    inputs: Dict[str, FiniteFloat] = Field(..., description="输入属性（配方/工艺参数）")
    outputs: Dict[str, FiniteFloat] = Field(..., description="输出属性（测量结果）")

    def value_of(self, prop: PropertyRef) -> float:
        """按已解析的属性引用取值"""
        if prop.kind is PropertyKind.INPUT:
            return self.inputs[prop.name]
        return self.outputs[prop.name]


class PropertyRange(BaseModel):
    """属性取值范围"""
    min: float = Field(..., description="最小值")
    max: float = Field(..., description="最大值")

    @model_validator(mode="after")
    def check_bounds(self) -> "PropertyRange":
        if self.min > self.max:
            raise ValueError(f"最小值大于最大值: {self.min} > {self.max}")
        return self


class PropertyList(BaseModel):
    """属性列表"""
    inputs: List[str] = Field(..., description="输入属性名（有序）")
    outputs: List[str] = Field(..., description="输出属性名（有序）")
    all: List[str] = Field(..., description="全部属性名（输入在前）")


class FormattedValue(BaseModel):
    """格式化后的属性值"""
    property: str = Field(..., description="属性名")
    value: str = Field(..., description="格式化后的值")


class FormattedExperiment(BaseModel):
    """用于详情面板的实验记录"""
    id: str = Field(..., description="实验ID")
    inputs: List[FormattedValue] = Field(default_factory=list, description="非零输入属性")
    outputs: List[FormattedValue] = Field(default_factory=list, description="全部输出属性")

"""查询相关模型"""

from typing import List, Optional
from pydantic import BaseModel, Field, FiniteFloat
from polymer_explorer.core.constants import MAX_GROUP_BOUNDARIES
from polymer_explorer.models.dataset import Experiment


class PropertyFilter(BaseModel):
    """属性范围过滤条件（闭区间）"""
    property: str = Field(..., description="属性名")
    min: FiniteFloat = Field(..., description="下界（包含）")
    max: FiniteFloat = Field(..., description="上界（包含）")

    def summary(self) -> str:
        """过滤范围摘要"""
        return f"{self.min:.1f} - {self.max:.1f}"


class DataPoint(BaseModel):
    """实验在四个选定属性上的投影"""
    id: str = Field(..., description="实验ID")
    x: float = Field(..., description="X 轴属性值")
    y: float = Field(..., description="Y 轴属性值")
    z: float = Field(..., description="Z 轴属性值")
    value: float = Field(..., description="颜色属性值")
    experiment: Optional[Experiment] = Field(None, description="完整实验记录")


class PointsRequest(BaseModel):
    """数据点请求"""
    x_property: str = Field(..., description="X 轴属性")
    y_property: str = Field(..., description="Y 轴属性")
    z_property: str = Field(..., description="Z 轴属性")
    color_property: str = Field(..., description="颜色属性")
    ids: Optional[List[str]] = Field(None, description="仅返回这些实验（可选）")
    include_experiment: bool = Field(True, description="是否附带完整实验记录")


class FilterRequest(BaseModel):
    """过滤请求"""
    filters: List[PropertyFilter] = Field(default_factory=list, description="过滤条件（AND）")


class FilterSummary(BaseModel):
    """单个过滤条件摘要"""
    property: str = Field(..., description="属性名")
    range: str = Field(..., description="范围文本")


class FilterResult(BaseModel):
    """过滤结果"""
    ids: List[str] = Field(..., description="满足全部条件的实验ID")
    matched: int = Field(..., description="命中数量")
    total: int = Field(..., description="数据集实验总数")
    summaries: List[FilterSummary] = Field(default_factory=list, description="过滤条件摘要")


class GroupRequest(BaseModel):
    """区间分组请求"""
    property: str = Field(..., description="分组属性")
    boundaries: List[float] = Field(
        ...,
        min_length=2,
        max_length=MAX_GROUP_BOUNDARIES,
        description="区间边界（左闭右开）"
    )


class CorrelationResult(BaseModel):
    """相关系数结果"""
    property_a: str = Field(..., description="属性 A")
    property_b: str = Field(..., description="属性 B")
    r: float = Field(..., ge=-1.0, le=1.0, description="Pearson 相关系数")

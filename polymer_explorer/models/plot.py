"""图表相关模型"""

from typing import Optional, Dict, Any, List
from pydantic import BaseModel, Field, field_validator, model_validator
from polymer_explorer.core.constants import CHART_MODES


class ChartSpec(BaseModel):
    """图表规范"""
    x_property: str = Field(..., description="X 轴属性")
    y_property: str = Field(..., description="Y 轴属性")
    z_property: Optional[str] = Field(None, description="Z 轴属性（3D 模式必填）")
    color_property: str = Field(..., description="颜色属性")
    mode: str = Field("3d", description="图表模式: 3d, 2d")
    title: Optional[str] = Field(None, description="图表标题")
    ids: Optional[List[str]] = Field(None, description="仅绘制这些实验（可选）")
    normalize: bool = Field(False, description="是否将坐标归一化到 [-scale, scale]")
    auto_rotate: bool = Field(True, description="3D 模式下是否自动旋转")

    @field_validator("mode")
    @classmethod
    def validate_mode(cls, v: str) -> str:
        if v not in CHART_MODES:
            raise ValueError(f"不支持的图表模式: {v}. 允许的模式: {CHART_MODES}")
        return v

    @model_validator(mode="after")
    def check_z_property(self) -> "ChartSpec":
        if self.mode == "3d" and not self.z_property:
            raise ValueError("3D 图表必须提供 z_property")
        return self


class LegendTick(BaseModel):
    """颜色图例刻度"""
    value: float = Field(..., description="刻度值")
    position: str = Field(..., description="刻度位置（百分比）")
    label: str = Field(..., description="刻度文本")


class ColorLegend(BaseModel):
    """颜色图例"""
    property: str = Field(..., description="颜色属性")
    min: float = Field(..., description="最小值")
    max: float = Field(..., description="最大值")
    color_start: str = Field(..., description="起始颜色")
    color_end: str = Field(..., description="结束颜色")
    ticks: List[LegendTick] = Field(default_factory=list, description="刻度")


class ChartOutput(BaseModel):
    """图表输出"""
    type: str = Field(..., description="图表模式")
    title: str = Field(..., description="图表标题")
    option: Dict[str, Any] = Field(..., description="ECharts option JSON")
    legend: Optional[ColorLegend] = Field(None, description="颜色图例")
    point_count: int = Field(0, description="数据点数量")

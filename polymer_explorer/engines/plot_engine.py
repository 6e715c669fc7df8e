"""Plot Engine - 图表生成引擎"""

from typing import Dict, Any, List, Optional

from polymer_explorer.core.config import settings
from polymer_explorer.core.constants import COLOR_SCALE_START, COLOR_SCALE_END, LEGEND_TICK_COUNT
from polymer_explorer.models.dataset import PropertyRange
from polymer_explorer.models.plot import ChartSpec, ChartOutput, ColorLegend, LegendTick
from polymer_explorer.models.query import DataPoint
from polymer_explorer.utils.logger import log


def _scale(value: float, bounds: PropertyRange, scale: float) -> float:
    span = bounds.max - bounds.min
    if span == 0:
        return 0.0
    return ((value - bounds.min) / span) * 2 * scale - scale


class PlotEngine:
    """图表生成引擎"""

    def generate(
        self,
        spec: ChartSpec,
        points: List[DataPoint],
        stats: Optional[Dict[str, PropertyRange]] = None
    ) -> ChartOutput:
        """
        生成图表

        Args:
            spec: 图表规范
            points: 数据点（原始值）
            stats: 属性统计（归一化时必填）

        Returns:
            ChartOutput: 图表输出
        """
        title = spec.title or self._default_title(spec)
        log.info(f"生成图表: mode={spec.mode}, title={title}, points={len(points)}")

        if spec.normalize:
            if stats is None:
                raise ValueError("归一化需要属性统计")
            points = self.normalize_points(points, stats, spec, settings.normalize_scale)

        legend = None
        if points:
            color_values = [p.value for p in points]
            legend = self.build_legend(spec.color_property, min(color_values), max(color_values))

        if spec.mode == "3d":
            option = self._generate_scatter_3d(spec, points, title, legend)
        else:
            option = self._generate_scatter_2d(spec, points, title, legend)

        return ChartOutput(
            type=spec.mode,
            title=title,
            option=option,
            legend=legend,
            point_count=len(points)
        )

    def _default_title(self, spec: ChartSpec) -> str:
        axes = [spec.x_property, spec.y_property]
        if spec.mode == "3d":
            axes.append(spec.z_property)
        return f"{' / '.join(axes)} (颜色: {spec.color_property})"

    def normalize_points(
        self,
        points: List[DataPoint],
        stats: Dict[str, PropertyRange],
        spec: ChartSpec,
        scale: float = 1.0
    ) -> List[DataPoint]:
        """
        将坐标归一化到 [-scale, scale]

        颜色值保持原始值；取值范围退化（min == max）的坐标映射为 0。
        """
        x_bounds = stats[spec.x_property]
        y_bounds = stats[spec.y_property]
        z_bounds = stats[spec.z_property] if spec.z_property else None

        return [
            p.model_copy(update={
                "x": _scale(p.x, x_bounds, scale),
                "y": _scale(p.y, y_bounds, scale),
                "z": _scale(p.z, z_bounds, scale) if z_bounds else p.z,
            })
            for p in points
        ]

    def build_legend(self, property_name: str, min_value: float, max_value: float) -> ColorLegend:
        """构建颜色图例（等距刻度）"""
        steps = LEGEND_TICK_COUNT - 1
        ticks = []
        for i in range(LEGEND_TICK_COUNT):
            value = min_value + (max_value - min_value) * (i / steps)
            ticks.append(LegendTick(
                value=value,
                position=f"{i * 100 // steps}%",
                label=f"{value:.1f}"
            ))

        return ColorLegend(
            property=property_name,
            min=min_value,
            max=max_value,
            color_start=COLOR_SCALE_START,
            color_end=COLOR_SCALE_END,
            ticks=ticks
        )

    def _visual_map(self, legend: Optional[ColorLegend], dimension: int) -> Dict[str, Any]:
        visual_map = {
            "show": True,
            "dimension": dimension,
            "calculable": True,
            "inRange": {"color": [COLOR_SCALE_START, COLOR_SCALE_END]}
        }
        if legend:
            visual_map.update({"min": legend.min, "max": legend.max, "text": [legend.property]})
        return visual_map

    def _generate_scatter_3d(
        self,
        spec: ChartSpec,
        points: List[DataPoint],
        title: str,
        legend: Optional[ColorLegend]
    ) -> Dict[str, Any]:
        """生成 3D 散点图"""
        scatter_data = [[p.x, p.y, p.z, p.value, p.id] for p in points]

        option = {
            "title": {"text": title},
            "tooltip": {"trigger": "item"},
            "visualMap": self._visual_map(legend, dimension=3),
            "xAxis3D": {"type": "value", "name": spec.x_property},
            "yAxis3D": {"type": "value", "name": spec.y_property},
            "zAxis3D": {"type": "value", "name": spec.z_property},
            "grid3D": {
                "viewControl": {"autoRotate": spec.auto_rotate}
            },
            "series": [
                {
                    "type": "scatter3D",
                    "dimensions": [spec.x_property, spec.y_property, spec.z_property, spec.color_property, "id"],
                    "data": scatter_data
                }
            ]
        }

        return option

    def _generate_scatter_2d(
        self,
        spec: ChartSpec,
        points: List[DataPoint],
        title: str,
        legend: Optional[ColorLegend]
    ) -> Dict[str, Any]:
        """生成 2D 投影散点图"""
        scatter_data = [[p.x, p.y, p.value, p.id] for p in points]

        option = {
            "title": {"text": title},
            "tooltip": {"trigger": "item"},
            "visualMap": self._visual_map(legend, dimension=2),
            "xAxis": {"type": "value", "name": spec.x_property},
            "yAxis": {"type": "value", "name": spec.y_property},
            "series": [
                {
                    "type": "scatter",
                    "dimensions": [spec.x_property, spec.y_property, spec.color_property, "id"],
                    "data": scatter_data
                }
            ]
        }

        return option


# 全局单例
_plot_engine = None


def get_plot_engine() -> PlotEngine:
    """获取 PlotEngine 单例"""
    global _plot_engine
    if _plot_engine is None:
        _plot_engine = PlotEngine()
    return _plot_engine

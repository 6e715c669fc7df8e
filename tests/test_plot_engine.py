"""图表引擎测试"""

import pytest

from polymer_explorer.core.constants import COLOR_SCALE_START, COLOR_SCALE_END
from polymer_explorer.engines.plot_engine import PlotEngine
from polymer_explorer.models.plot import ChartSpec


@pytest.fixture
def plot_engine():
    return PlotEngine()


def _spec(**kwargs):
    defaults = {
        "x_property": "Polymer 1",
        "y_property": "Oven Temperature",
        "z_property": "Viscosity",
        "color_property": "Cure Time",
    }
    defaults.update(kwargs)
    return ChartSpec(**defaults)


def test_build_legend(plot_engine):
    """测试颜色图例刻度"""
    legend = plot_engine.build_legend("Viscosity", 2000.0, 3000.0)

    assert [t.position for t in legend.ticks] == ["0%", "25%", "50%", "75%", "100%"]
    assert [t.label for t in legend.ticks] == ["2000.0", "2250.0", "2500.0", "2750.0", "3000.0"]
    assert legend.color_start == COLOR_SCALE_START
    assert legend.color_end == COLOR_SCALE_END


def test_normalize_points(plot_engine, small_engine):
    """测试坐标归一化到 [-scale, scale]，颜色保持原始值"""
    spec = _spec()
    stats = small_engine.compute_stats()
    points = small_engine.create_data_points("Polymer 1", "Oven Temperature", "Viscosity", "Cure Time")

    normalized = plot_engine.normalize_points(points, stats, spec, scale=1.2)

    assert [p.x for p in normalized] == pytest.approx([-1.2, 0.0, 1.2])
    assert [p.z for p in normalized] == pytest.approx([-1.2, 0.0, 1.2])
    assert [p.value for p in normalized] == [3.1, 3.0, 2.5]
    # 原始数据点不变
    assert points[0].x == 10.0


def test_normalize_degenerate_range(plot_engine, small_engine):
    """测试常量属性归一化为 0"""
    spec = _spec(x_property="Antioxidant")
    stats = small_engine.compute_stats()
    points = small_engine.create_data_points("Antioxidant", "Oven Temperature", "Viscosity", "Cure Time")

    normalized = plot_engine.normalize_points(points, stats, spec)
    assert all(p.x == 0.0 for p in normalized)


def test_generate_3d(plot_engine, small_engine):
    """测试 3D 散点图配置"""
    spec = _spec(auto_rotate=False)
    points = small_engine.create_data_points("Polymer 1", "Oven Temperature", "Viscosity", "Cure Time")

    output = plot_engine.generate(spec, points)

    assert output.type == "3d"
    assert output.point_count == 3
    series = output.option["series"][0]
    assert series["type"] == "scatter3D"
    assert series["data"][0] == [10.0, 350.0, 2000.0, 3.1, "EXP_A"]
    assert output.option["grid3D"]["viewControl"]["autoRotate"] is False
    assert output.option["visualMap"]["min"] == 2.5
    assert output.option["visualMap"]["max"] == 3.1
    assert output.legend.property == "Cure Time"


def test_generate_2d_normalized(plot_engine, small_engine):
    """测试 2D 投影散点图"""
    spec = _spec(mode="2d", z_property=None, normalize=True)
    stats = small_engine.compute_stats()
    points = small_engine.create_data_points("Polymer 1", "Oven Temperature", "Oven Temperature", "Cure Time")

    output = plot_engine.generate(spec, points, stats)

    series = output.option["series"][0]
    assert series["type"] == "scatter"
    assert "xAxis3D" not in output.option
    assert series["data"][0][0] == pytest.approx(-1.0)
    assert series["data"][2][0] == pytest.approx(1.0)
    assert series["data"][0][3] == "EXP_A"


def test_generate_normalize_requires_stats(plot_engine, small_engine):
    spec = _spec(normalize=True)
    points = small_engine.create_data_points("Polymer 1", "Oven Temperature", "Viscosity", "Cure Time")
    with pytest.raises(ValueError):
        plot_engine.generate(spec, points)


def test_generate_empty_points(plot_engine):
    """测试无数据点时不生成图例"""
    output = plot_engine.generate(_spec(), [])
    assert output.point_count == 0
    assert output.legend is None
    assert output.option["series"][0]["data"] == []

"""基础测试"""

import pytest
from pydantic import ValidationError
from polymer_explorer.core.config import settings
from polymer_explorer.models.dataset import Experiment, PropertyRange, PropertyKind, PropertyRef
from polymer_explorer.models.query import PropertyFilter, GroupRequest
from polymer_explorer.models.plot import ChartSpec


def test_settings():
    """测试配置加载"""
    assert settings is not None
    assert settings.default_x_property == "Polymer 1"
    assert settings.default_color_property == "Tensile Strength"
    assert settings.normalize_scale == 1.0


def test_property_filter():
    """测试过滤条件模型"""
    f = PropertyFilter(property="Oven Temperature", min=400, max=425)
    assert f.property == "Oven Temperature"
    assert f.min == 400.0
    assert f.max == 425.0
    assert f.summary() == "400.0 - 425.0"


def test_property_filter_rejects_non_finite():
    """测试过滤边界必须为有限数"""
    with pytest.raises(ValidationError):
        PropertyFilter(property="Oven Temperature", min=400, max=float("nan"))
    with pytest.raises(ValidationError):
        PropertyFilter(property="Oven Temperature", min=float("-inf"), max=425)


def test_property_range_bounds():
    """测试范围模型 min <= max"""
    assert PropertyRange(min=1.0, max=1.0).max == 1.0
    with pytest.raises(ValidationError):
        PropertyRange(min=2.0, max=1.0)


def test_experiment_value_of():
    """测试按属性引用取值"""
    experiment = Experiment(inputs={"Polymer 1": 11.2}, outputs={"Viscosity": 2554.4})
    assert experiment.value_of(PropertyRef(name="Polymer 1", kind=PropertyKind.INPUT)) == 11.2
    assert experiment.value_of(PropertyRef(name="Viscosity", kind=PropertyKind.OUTPUT)) == 2554.4


def test_experiment_rejects_non_finite():
    """测试实验值必须为有限数值"""
    with pytest.raises(ValidationError):
        Experiment(inputs={"Polymer 1": float("nan")}, outputs={"Viscosity": 1.0})
    with pytest.raises(ValidationError):
        Experiment(inputs={"Polymer 1": None}, outputs={"Viscosity": 1.0})


def test_group_request_requires_two_boundaries():
    """测试分组请求至少两个边界"""
    with pytest.raises(ValidationError):
        GroupRequest(property="Oven Temperature", boundaries=[325])


def test_chart_spec():
    """测试图表规范"""
    spec = ChartSpec(x_property="Polymer 1", y_property="Polymer 2", color_property="Viscosity", mode="2d")
    assert spec.z_property is None

    with pytest.raises(ValidationError):
        ChartSpec(x_property="Polymer 1", y_property="Polymer 2", color_property="Viscosity", mode="3d")

    with pytest.raises(ValidationError):
        ChartSpec(
            x_property="Polymer 1",
            y_property="Polymer 2",
            z_property="Viscosity",
            color_property="Viscosity",
            mode="4d"
        )


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

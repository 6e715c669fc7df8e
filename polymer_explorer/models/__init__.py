"""数据模型包"""

from polymer_explorer.models.dataset import (
    PropertyKind,
    PropertyRef,
    Experiment,
    PropertyRange,
    PropertyList,
    FormattedValue,
    FormattedExperiment
)
from polymer_explorer.models.query import (
    PropertyFilter,
    DataPoint,
    PointsRequest,
    FilterRequest,
    FilterSummary,
    FilterResult,
    GroupRequest,
    CorrelationResult
)
from polymer_explorer.models.plot import (
    ChartSpec,
    LegendTick,
    ColorLegend,
    ChartOutput
)

__all__ = [
    # Dataset
    "PropertyKind",
    "PropertyRef",
    "Experiment",
    "PropertyRange",
    "PropertyList",
    "FormattedValue",
    "FormattedExperiment",
    # Query
    "PropertyFilter",
    "DataPoint",
    "PointsRequest",
    "FilterRequest",
    "FilterSummary",
    "FilterResult",
    "GroupRequest",
    "CorrelationResult",
    # Plot
    "ChartSpec",
    "LegendTick",
    "ColorLegend",
    "ChartOutput",
]

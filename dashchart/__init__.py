"""Dashboard chart geometry, hover interaction and scene rendering."""

from .adapters import as_dataset, dataset_from_counts, dataset_from_frame, dataset_from_records, dataset_from_values
from .charts import (
    BarChart,
    BarChartConfig,
    ChartFrame,
    DonutChart,
    DonutChartConfig,
    LineChart,
    LineChartConfig,
    Margins,
    ProgressRing,
    ProgressRingConfig,
    SeriesStyle,
    Sparkline,
    SparklineConfig,
    TrendChart,
    TrendChartConfig,
)
from .dataset import DataProvider, Dataset, Record, StaticDataProvider
from .errors import ChartDataError, DegenerateDatasetError, EmptyDatasetError, InvalidValueError
from .interaction import HoverController, HoverState, Tooltip, tooltip_for
from .scales import Scale, compute_scale, fixed_scale
from .scene import Scene

__all__ = [
    "BarChart",
    "BarChartConfig",
    "ChartDataError",
    "ChartFrame",
    "DataProvider",
    "Dataset",
    "DegenerateDatasetError",
    "DonutChart",
    "DonutChartConfig",
    "EmptyDatasetError",
    "HoverController",
    "HoverState",
    "InvalidValueError",
    "LineChart",
    "LineChartConfig",
    "Margins",
    "ProgressRing",
    "ProgressRingConfig",
    "Record",
    "Scale",
    "Scene",
    "SeriesStyle",
    "Sparkline",
    "SparklineConfig",
    "StaticDataProvider",
    "Tooltip",
    "TrendChart",
    "TrendChartConfig",
    "as_dataset",
    "compute_scale",
    "dataset_from_counts",
    "dataset_from_frame",
    "dataset_from_records",
    "dataset_from_values",
    "fixed_scale",
    "tooltip_for",
]

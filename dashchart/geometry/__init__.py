from .arc import ArcGeometry, ArcSweep, ProgressRingGeometry, arc_geometry, progress_ring_geometry, ring_circumference
from .bar import BarGeometry, bar_geometry
from .line import LineGeometry, MultiLineGeometry, line_geometry, multi_line_geometry, x_positions
from .primitives import ArcSegment, Bar, MarkGeometry, MarkKey, PathString, PlotBox, Point
from .sparkline import SparklineGeometry, sparkline_batch, sparkline_geometry

__all__ = [
    "ArcGeometry",
    "ArcSegment",
    "ArcSweep",
    "Bar",
    "BarGeometry",
    "LineGeometry",
    "MarkGeometry",
    "MarkKey",
    "MultiLineGeometry",
    "PathString",
    "PlotBox",
    "Point",
    "ProgressRingGeometry",
    "SparklineGeometry",
    "arc_geometry",
    "bar_geometry",
    "line_geometry",
    "multi_line_geometry",
    "progress_ring_geometry",
    "ring_circumference",
    "sparkline_batch",
    "sparkline_geometry",
    "x_positions",
]

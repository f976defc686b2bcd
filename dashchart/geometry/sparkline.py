from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np

from dashchart.errors import DegenerateDatasetError
from dashchart.geometry.line import nearest_point, x_positions
from dashchart.geometry.primitives import MarkKey, PathString, PlotBox, Point
from dashchart.scales import Scale, as_value_array, compute_scale, three_ticks


SPARKLINE_HIT_RADIUS = 6.0


@dataclass(frozen=True)
class SparklineGeometry:
    scale: Scale
    box: PlotBox
    points: tuple[Point, ...]
    values: tuple[float, ...]
    path: PathString
    area: PathString | None

    def anchor(self, index: int, series_key: str | None = None) -> Point:
        return self.points[index]

    def value_at(self, index: int, series_key: str | None = None) -> float:
        return self.values[index]

    def label_at(self, index: int, series_key: str | None = None) -> str:
        return str(index)

    def hit_test(self, x: float, y: float) -> MarkKey | None:
        index = nearest_point(self.points, x, y, SPARKLINE_HIT_RADIUS)
        return None if index is None else (None, index)


def sparkline_box(width: float, height: float, padding: float) -> PlotBox:
    return PlotBox(left=padding, top=padding, width=width - 2.0 * padding, height=height - 2.0 * padding)


def sparkline_geometry(
    values: Any,
    *,
    width: float = 200.0,
    height: float = 40.0,
    padding: float = 2.0,
    show_area: bool = True,
) -> SparklineGeometry:
    arr = as_value_array(values)
    if arr.size < 2:
        raise DegenerateDatasetError(f"sparklines need at least 2 points, got {arr.size}")
    box = sparkline_box(width, height, padding)
    scale = compute_scale(arr, box.vertical_range())
    return _assemble(arr, scale, box, show_area)


def sparkline_batch(
    series: Sequence[Any],
    *,
    width: float = 200.0,
    height: float = 40.0,
    padding: float = 2.0,
    show_area: bool = True,
) -> list[SparklineGeometry]:
    """Build many sparklines at once; equal-length series are scaled in one numpy pass."""

    arrays = [as_value_array(values) for values in series]
    for index, arr in enumerate(arrays):
        if arr.size < 2:
            raise DegenerateDatasetError(f"sparkline {index} needs at least 2 points, got {arr.size}")
    box = sparkline_box(width, height, padding)
    out: list[SparklineGeometry | None] = [None] * len(arrays)

    groups: dict[int, list[int]] = {}
    for index, arr in enumerate(arrays):
        groups.setdefault(arr.size, []).append(index)

    for _, members in groups.items():
        block = np.vstack([arrays[i] for i in members])
        mins = block.min(axis=1)
        maxs = block.max(axis=1)
        flat = mins == maxs
        delta = np.where(flat, 1.0, 0.0)
        dmins = mins - delta
        dmaxs = maxs + delta
        for row, index in enumerate(members):
            scale = Scale(
                domain_min=float(dmins[row]),
                domain_max=float(dmaxs[row]),
                range_start=box.bottom,
                range_end=box.top,
                ticks=three_ticks(float(dmins[row]), float(dmaxs[row])),
            )
            out[index] = _assemble(arrays[index], scale, box, show_area)
    return [geometry for geometry in out if geometry is not None]


def _assemble(arr: np.ndarray, scale: Scale, box: PlotBox, show_area: bool) -> SparklineGeometry:
    xs = x_positions(arr.size, box)
    ys = scale.map_array(arr)
    points = tuple(Point(float(x), float(y)) for x, y in zip(xs, ys))
    return SparklineGeometry(
        scale=scale,
        box=box,
        points=points,
        values=tuple(float(v) for v in arr),
        path=PathString.polyline(points),
        area=PathString.area(points, box.bottom) if show_area else None,
    )

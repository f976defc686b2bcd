from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np

from dashchart.dataset import DEFAULT_SERIES_KEY, Dataset
from dashchart.errors import DegenerateDatasetError, InvalidValueError
from dashchart.geometry.primitives import MarkKey, PathString, PlotBox, Point, check_vertical_scale, distance
from dashchart.scales import Scale, as_value_array


POINT_HIT_RADIUS = 12.0


@dataclass(frozen=True)
class LineGeometry:
    series_key: str
    scale: Scale
    box: PlotBox
    points: tuple[Point, ...]
    values: tuple[float, ...]
    labels: tuple[str, ...]
    path: PathString
    area: PathString | None = None
    hit_radius: float = POINT_HIT_RADIUS

    def anchor(self, index: int, series_key: str | None = None) -> Point:
        self._check_key(series_key)
        return self.points[index]

    def value_at(self, index: int, series_key: str | None = None) -> float:
        self._check_key(series_key)
        return self.values[index]

    def label_at(self, index: int, series_key: str | None = None) -> str:
        self._check_key(series_key)
        return self.labels[index]

    def hit_test(self, x: float, y: float) -> MarkKey | None:
        index = nearest_point(self.points, x, y, self.hit_radius)
        if index is None:
            return None
        return (self.series_key, index)

    def _check_key(self, series_key: str | None) -> None:
        if series_key is not None and series_key != self.series_key:
            raise KeyError(f"line geometry holds series `{self.series_key}`, not `{series_key}`")


@dataclass(frozen=True)
class MultiLineGeometry:
    """Several series drawn against one shared scale."""

    scale: Scale
    box: PlotBox
    lines: tuple[LineGeometry, ...]

    @property
    def series_keys(self) -> tuple[str, ...]:
        return tuple(line.series_key for line in self.lines)

    def line(self, series_key: str) -> LineGeometry:
        for line in self.lines:
            if line.series_key == series_key:
                return line
        raise KeyError(f"unknown series `{series_key}`")

    def anchor(self, index: int, series_key: str | None = None) -> Point:
        return self._resolve(series_key).points[index]

    def value_at(self, index: int, series_key: str | None = None) -> float:
        return self._resolve(series_key).values[index]

    def label_at(self, index: int, series_key: str | None = None) -> str:
        return self._resolve(series_key).labels[index]

    def hit_test(self, x: float, y: float) -> MarkKey | None:
        best: MarkKey | None = None
        best_dist = float("inf")
        # Later series paint on top, so they win ties.
        for line in self.lines:
            hit = line.hit_test(x, y)
            if hit is None:
                continue
            point = line.points[hit[1]]
            d = distance(point.x, point.y, x, y)
            if d <= best_dist:
                best, best_dist = hit, d
        return best

    def _resolve(self, series_key: str | None) -> LineGeometry:
        if series_key is None:
            if len(self.lines) != 1:
                raise KeyError("series_key is required for multi-series geometry")
            return self.lines[0]
        return self.line(series_key)


def x_positions(count: int, box: PlotBox) -> np.ndarray:
    if count <= 0:
        raise DegenerateDatasetError("x positions need at least one point")
    if count == 1:
        return np.asarray([box.left], dtype=np.float64)
    return box.left + np.arange(count, dtype=np.float64) / float(count - 1) * box.width


def line_geometry(
    values: Any,
    scale: Scale,
    box: PlotBox,
    *,
    labels: Sequence[str] | None = None,
    series_key: str = DEFAULT_SERIES_KEY,
    filled: bool = False,
) -> LineGeometry:
    arr = as_value_array(values)
    check_vertical_scale(scale, box)
    _check_in_domain(arr, scale, labels)
    resolved_labels = _resolve_labels(labels, arr.size)

    xs = x_positions(arr.size, box)
    ys = scale.map_array(arr)
    points = tuple(Point(float(x), float(y)) for x, y in zip(xs, ys))
    return LineGeometry(
        series_key=series_key,
        scale=scale,
        box=box,
        points=points,
        values=tuple(float(v) for v in arr),
        labels=resolved_labels,
        path=PathString.polyline(points),
        area=PathString.area(points, box.bottom) if filled else None,
    )


def multi_line_geometry(
    dataset: Dataset,
    scale: Scale,
    box: PlotBox,
    *,
    series_keys: Sequence[str] | None = None,
) -> MultiLineGeometry:
    if len(dataset) < 2:
        raise DegenerateDatasetError(f"multi-series line charts need at least 2 points, got {len(dataset)}")
    keys = tuple(series_keys) if series_keys is not None else dataset.series_keys
    labels = dataset.labels()
    lines = tuple(
        line_geometry(dataset.values(key), scale, box, labels=labels, series_key=key) for key in keys
    )
    return MultiLineGeometry(scale=scale, box=box, lines=lines)


def nearest_point(points: Sequence[Point], x: float, y: float, radius: float) -> int | None:
    best: int | None = None
    best_dist = radius
    for index, point in enumerate(points):
        d = distance(point.x, point.y, x, y)
        if d <= best_dist:
            best, best_dist = index, d
    return best


def _check_in_domain(arr: np.ndarray, scale: Scale, labels: Sequence[str] | None) -> None:
    outside = np.flatnonzero((arr < scale.domain_min) | (arr > scale.domain_max))
    if outside.size:
        index = int(outside[0])
        label = str(labels[index]) if labels is not None and index < len(labels) else None
        raise InvalidValueError(
            f"value {arr[index]} at index {index} is outside the scale domain "
            f"[{scale.domain_min}, {scale.domain_max}]",
            index=index,
            label=label,
        )


def _resolve_labels(labels: Sequence[str] | None, count: int) -> tuple[str, ...]:
    if labels is None:
        return tuple(str(i) for i in range(count))
    if len(labels) != count:
        raise InvalidValueError(f"labels and values length mismatch: {len(labels)} != {count}")
    return tuple(str(label) for label in labels)

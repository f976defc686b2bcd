from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np

from dashchart.errors import InvalidValueError
from dashchart.geometry.primitives import Bar, MarkKey, PlotBox, Point, check_vertical_scale
from dashchart.scales import Scale, as_value_array


DEFAULT_WIDTH_RATIO = 0.6
DEFAULT_MIN_BAR_HEIGHT = 4.0


@dataclass(frozen=True)
class BarGeometry:
    scale: Scale
    box: PlotBox
    bars: tuple[Bar, ...]
    slot_width: float
    bar_width: float
    gap_width: float

    def anchor(self, index: int, series_key: str | None = None) -> Point:
        bar = self.bars[index]
        return Point(bar.center_x, bar.y)

    def value_at(self, index: int, series_key: str | None = None) -> float:
        return self.bars[index].value

    def label_at(self, index: int, series_key: str | None = None) -> str:
        return self.bars[index].label

    def hit_test(self, x: float, y: float) -> MarkKey | None:
        for bar in self.bars:
            if bar.contains(x, y):
                return (None, bar.index)
        return None


def bar_geometry(
    values: Any,
    scale: Scale,
    box: PlotBox,
    *,
    labels: Sequence[str] | None = None,
    width_ratio: float = DEFAULT_WIDTH_RATIO,
    min_height: float = DEFAULT_MIN_BAR_HEIGHT,
) -> BarGeometry:
    """Lay out one bar per value in equal slots across the plot width.

    Heights are linear in value against `scale.domain_max`, floored at `min_height`
    so zero values stay visible and hoverable.
    """

    if scale.domain_min != 0:
        raise ValueError("bar geometry needs a zero-based scale")
    if not 0.0 < width_ratio <= 1.0:
        raise ValueError("width_ratio must be in (0, 1]")
    if min_height < 0 or min_height > box.height:
        raise ValueError("min_height must be in [0, plot height]")
    check_vertical_scale(scale, box)

    arr = as_value_array(values)
    if labels is not None and len(labels) != arr.size:
        raise InvalidValueError(f"labels and values length mismatch: {len(labels)} != {arr.size}")
    for index in np.flatnonzero((arr < 0) | (arr > scale.domain_max)):
        label = str(labels[index]) if labels is not None else None
        raise InvalidValueError(
            f"bar value {arr[index]} at index {index} is outside [0, {scale.domain_max}]",
            index=int(index),
            label=label,
        )

    count = arr.size
    slot = box.width / count
    bar_width = slot * width_ratio
    gap = slot - bar_width
    heights = np.clip(arr / scale.domain_max * box.height, min_height, box.height)
    xs = box.left + np.arange(count, dtype=np.float64) * slot + gap / 2.0
    ys = box.bottom - heights

    bars = tuple(
        Bar(
            index=i,
            x=float(xs[i]),
            y=float(ys[i]),
            width=bar_width,
            height=float(heights[i]),
            value=float(arr[i]),
            label=str(labels[i]) if labels is not None else str(i),
        )
        for i in range(count)
    )
    return BarGeometry(scale=scale, box=box, bars=bars, slot_width=slot, bar_width=bar_width, gap_width=gap)

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from dashchart.dataset import Dataset, coerce_value
from dashchart.errors import DegenerateDatasetError, EmptyDatasetError, InvalidValueError
from dashchart.formatting import round_half_up
from dashchart.geometry.primitives import ArcSegment, MarkKey, Point, distance, fmt_num
from dashchart.style.palette import StyledCategory, series_color


ArcSweep = Literal["full", "half"]

# Angle (radians, screen coordinates) where offset 0 sits: 12 o'clock for rings,
# 9 o'clock for the upper half ring.
_START_ANGLE: dict[str, float] = {"full": -math.pi / 2.0, "half": math.pi}


@dataclass(frozen=True)
class ArcGeometry:
    center: Point
    radius: float
    stroke_width: float
    sweep: ArcSweep
    circumference: float
    total: float
    segments: tuple[ArcSegment, ...]

    @property
    def scale(self) -> None:
        return None

    def point_at(self, offset: float) -> Point:
        angle = _START_ANGLE[self.sweep] + offset / self.radius
        return Point(
            self.center.x + self.radius * math.cos(angle),
            self.center.y + self.radius * math.sin(angle),
        )

    def anchor(self, index: int, series_key: str | None = None) -> Point:
        segment = self.segments[index]
        return self.point_at(segment.start_offset + segment.length / 2.0)

    def value_at(self, index: int, series_key: str | None = None) -> float:
        return self.segments[index].count

    def label_at(self, index: int, series_key: str | None = None) -> str:
        return self.segments[index].label

    def hit_test(self, x: float, y: float) -> MarkKey | None:
        d = distance(x, y, self.center.x, self.center.y)
        if abs(d - self.radius) > self.stroke_width / 2.0:
            return None
        angle = math.atan2(y - self.center.y, x - self.center.x)
        offset = ((angle - _START_ANGLE[self.sweep]) % (2.0 * math.pi)) * self.radius
        if offset > self.circumference:
            return None
        for segment in self.segments:
            if segment.length > 0 and segment.start_offset <= offset < segment.end_offset:
                return (segment.key, segment.index)
        return None

    def track_path(self) -> str:
        """SVG path of the full sweep; the half ring is drawn as an arc command."""

        cx, cy, r = self.center.x, self.center.y, self.radius
        if self.sweep == "half":
            return f"M {fmt_num(cx - r)} {fmt_num(cy)} A {fmt_num(r)} {fmt_num(r)} 0 0 1 {fmt_num(cx + r)} {fmt_num(cy)}"
        return (
            f"M {fmt_num(cx)} {fmt_num(cy - r)} "
            f"A {fmt_num(r)} {fmt_num(r)} 0 1 1 {fmt_num(cx)} {fmt_num(cy + r)} "
            f"A {fmt_num(r)} {fmt_num(r)} 0 1 1 {fmt_num(cx)} {fmt_num(cy - r)}"
        )

    def percent_total(self) -> int:
        """Sum of the independently rounded percentages; may differ from 100."""

        return sum(segment.percent for segment in self.segments)


@dataclass(frozen=True)
class ProgressRingGeometry:
    center: Point
    radius: float
    stroke_width: float
    circumference: float
    percent: float
    filled_length: float
    dash_offset: float

    def dash_array(self) -> str:
        return fmt_num(self.circumference)


def ring_circumference(radius: float, sweep: ArcSweep = "full") -> float:
    if radius <= 0:
        raise ValueError("radius must be > 0")
    if sweep == "full":
        return 2.0 * math.pi * radius
    if sweep == "half":
        return math.pi * radius
    raise ValueError(f"unsupported sweep: {sweep}")


def arc_geometry(
    counts: Any,
    *,
    radius: float,
    stroke_width: float,
    sweep: ArcSweep = "full",
    center: Point | None = None,
    colors: Sequence[str] | None = None,
) -> ArcGeometry:
    """Split a ring into one segment per category, in the given order.

    `counts` is a `Dataset`, a mapping, or a sequence of `(category, count)` pairs;
    categories may be `StyledCategory` members, which supply label and color.
    """

    if stroke_width <= 0:
        raise ValueError("stroke_width must be > 0")
    circumference = ring_circumference(radius, sweep)
    entries = _category_entries(counts)
    if not entries:
        raise EmptyDatasetError("ring charts need at least one category")
    if colors is not None and len(colors) != len(entries):
        raise ValueError(f"colors and categories length mismatch: {len(colors)} != {len(entries)}")

    keys: list[str] = []
    labels: list[str] = []
    values: list[float] = []
    palette: list[str] = []
    for index, (category, raw) in enumerate(entries):
        key, label, color = _category_style(category, index, colors)
        value = coerce_value(raw, index=index, label=label)
        if value < 0:
            raise InvalidValueError(f"count for `{label}` must be >= 0, got {raw!r}", index=index, label=label)
        keys.append(key)
        labels.append(label)
        values.append(value)
        palette.append(color)

    total = math.fsum(values)
    if total <= 0:
        raise DegenerateDatasetError("ring charts need a positive total count")

    segments: list[ArcSegment] = []
    offset = 0.0
    for index, value in enumerate(values):
        length = value / total * circumference
        segments.append(
            ArcSegment(
                index=index,
                key=keys[index],
                label=labels[index],
                start_offset=offset,
                length=length,
                color=palette[index],
                count=value,
                percent=round_half_up(value / total * 100.0),
            )
        )
        offset += length

    resolved_center = center or Point(radius + stroke_width / 2.0, radius + stroke_width / 2.0)
    return ArcGeometry(
        center=resolved_center,
        radius=float(radius),
        stroke_width=float(stroke_width),
        sweep=sweep,
        circumference=circumference,
        total=total,
        segments=tuple(segments),
    )


def progress_ring_geometry(percent: float, *, size: float = 120.0, stroke_width: float = 10.0) -> ProgressRingGeometry:
    value = coerce_value(percent, index=0, label="percent")
    if not 0.0 <= value <= 100.0:
        raise InvalidValueError(f"percent must be in [0, 100], got {percent!r}", index=0, label="percent")
    if stroke_width <= 0 or size <= stroke_width:
        raise ValueError("progress ring needs size > stroke_width > 0")
    radius = (size - stroke_width) / 2.0
    circumference = ring_circumference(radius)
    filled = value / 100.0 * circumference
    return ProgressRingGeometry(
        center=Point(size / 2.0, size / 2.0),
        radius=radius,
        stroke_width=float(stroke_width),
        circumference=circumference,
        percent=value,
        filled_length=filled,
        dash_offset=circumference - filled,
    )


def _category_entries(counts: Any) -> list[tuple[Any, Any]]:
    if isinstance(counts, Dataset):
        return [(record.label, counts.value(i)) for i, record in enumerate(counts.records)]
    if isinstance(counts, Mapping):
        return list(counts.items())
    if isinstance(counts, Sequence) and not isinstance(counts, (str, bytes)):
        out = []
        for index, item in enumerate(counts):
            if not isinstance(item, Sequence) or isinstance(item, (str, bytes)) or len(item) != 2:
                raise InvalidValueError(f"category {index} must be a (category, count) pair", index=index)
            out.append((item[0], item[1]))
        return out
    raise InvalidValueError(f"unsupported category input type: {type(counts)!r}")


def _category_style(category: Any, index: int, colors: Sequence[str] | None) -> tuple[str, str, str]:
    if isinstance(category, StyledCategory):
        color = colors[index] if colors is not None else category.color
        return (category.name.lower(), category.label, color)
    key = str(category)
    color = colors[index] if colors is not None else series_color(index)
    return (key, key, color)


def start_angle(sweep: ArcSweep) -> float:
    """Screen-space angle (radians) of offset 0 for the given sweep."""

    return _START_ANGLE[sweep]

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Literal, Optional, Protocol

from dashchart.scales import Scale


PathCommand = Literal["M", "L"]
MarkKey = tuple[Optional[str], int]

_EPS = 1e-9


def fmt_num(value: float) -> str:
    """Compact coordinate text: at most three decimals, no trailing zeros."""

    out = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if out in ("-0", "") else out


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class PlotBox:
    """Plot region in chart pixel space (y grows downwards)."""

    left: float
    top: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("PlotBox width/height must be > 0")

    @classmethod
    def from_margins(
        cls,
        width: float,
        height: float,
        *,
        left: float = 0.0,
        right: float = 0.0,
        top: float = 0.0,
        bottom: float = 0.0,
    ) -> "PlotBox":
        return cls(left=left, top=top, width=width - left - right, height=height - top - bottom)

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def vertical_range(self) -> tuple[float, float]:
        """Pixel range for a value axis: baseline first, top last."""

        return (self.bottom, self.top)

    def contains(self, x: float, y: float) -> bool:
        return (self.left - _EPS <= x <= self.right + _EPS) and (self.top - _EPS <= y <= self.bottom + _EPS)


@dataclass(frozen=True)
class PathString:
    commands: tuple[tuple[PathCommand, float, float], ...]
    closed: bool = False

    @classmethod
    def polyline(cls, points: Iterable[Point]) -> "PathString":
        commands = tuple(("M" if i == 0 else "L", p.x, p.y) for i, p in enumerate(points))
        if not commands:
            raise ValueError("a path needs at least one point")
        return cls(commands=commands)

    @classmethod
    def area(cls, points: Iterable[Point], baseline: float) -> "PathString":
        """Polyline through `points` closed back along the baseline."""

        line = cls.polyline(points)
        first_x = line.commands[0][1]
        last_x = line.commands[-1][1]
        return cls(
            commands=line.commands + (("L", last_x, baseline), ("L", first_x, baseline)),
            closed=True,
        )

    def points(self) -> tuple[Point, ...]:
        return tuple(Point(x, y) for _, x, y in self.commands)

    def to_svg(self) -> str:
        parts = [f"{cmd} {fmt_num(x)} {fmt_num(y)}" for cmd, x, y in self.commands]
        if self.closed:
            parts.append("Z")
        return " ".join(parts)


@dataclass(frozen=True)
class Bar:
    index: int
    x: float
    y: float
    width: float
    height: float
    value: float
    label: str

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2.0

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, x: float, y: float) -> bool:
        return self.x <= x <= self.x + self.width and self.y <= y <= self.bottom


@dataclass(frozen=True)
class ArcSegment:
    """Stroke run on a ring; offsets are arc lengths along the ring path."""

    index: int
    key: str
    label: str
    start_offset: float
    length: float
    color: str
    count: float
    percent: int

    @property
    def end_offset(self) -> float:
        return self.start_offset + self.length

    def dash_array(self, circumference: float) -> str:
        return f"{fmt_num(self.length)} {fmt_num(max(0.0, circumference - self.length))}"

    def dash_offset(self) -> str:
        return fmt_num(-self.start_offset)


class MarkGeometry(Protocol):
    """Hover contract shared by every generated geometry."""

    @property
    def scale(self) -> Scale | None:
        ...

    def anchor(self, index: int, series_key: str | None = None) -> Point:
        ...

    def value_at(self, index: int, series_key: str | None = None) -> float:
        ...

    def label_at(self, index: int, series_key: str | None = None) -> str:
        ...

    def hit_test(self, x: float, y: float) -> MarkKey | None:
        ...


def check_vertical_scale(scale: Scale, box: "PlotBox") -> None:
    low = min(scale.range_start, scale.range_end)
    high = max(scale.range_start, scale.range_end)
    if low < box.top - _EPS or high > box.bottom + _EPS:
        raise ValueError("scale pixel range falls outside the plot box")


def distance(ax: float, ay: float, bx: float, by: float) -> float:
    return math.hypot(ax - bx, ay - by)

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal, Sequence, Union

from dashchart.formatting import ValueFormatter, format_integer
from dashchart.geometry import (
    ArcGeometry,
    BarGeometry,
    LineGeometry,
    PlotBox,
    ProgressRingGeometry,
    SparklineGeometry,
)
from dashchart.geometry.arc import start_angle
from dashchart.geometry.primitives import fmt_num
from dashchart.interaction import HoverState, Tooltip
from dashchart.scales import Scale
from dashchart.style.theme import ChartTheme


TextAnchor = Literal["start", "middle", "end"]


@dataclass(frozen=True)
class ArcStroke:
    """Circular stroke run in degrees, clockwise from 3 o'clock (screen coordinates)."""

    cx: float
    cy: float
    r: float
    start_deg: float
    end_deg: float


@dataclass(frozen=True)
class LineShape:
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str
    stroke_width: float = 1.0


@dataclass(frozen=True)
class RectShape:
    x: float
    y: float
    width: float
    height: float
    fill: str
    corner_radius: float = 0.0
    opacity: float = 1.0
    mark_index: int | None = None


@dataclass(frozen=True)
class PathShape:
    d: str
    fill: str | None = None
    stroke: str | None = None
    stroke_width: float = 0.0
    fill_opacity: float = 1.0
    gradient_id: str | None = None
    dash_array: str | None = None
    dash_offset: str | None = None
    round_caps: bool = False
    arc: ArcStroke | None = None


@dataclass(frozen=True)
class CircleShape:
    cx: float
    cy: float
    r: float
    fill: str | None = None
    stroke: str | None = None
    stroke_width: float = 0.0
    dash_array: str | None = None
    dash_offset: str | None = None
    rotate_deg: float = 0.0
    round_caps: bool = False
    arc: ArcStroke | None = None
    mark_index: int | None = None
    series_key: str | None = None


@dataclass(frozen=True)
class PolygonShape:
    points: tuple[tuple[float, float], ...]
    fill: str


@dataclass(frozen=True)
class TextShape:
    x: float
    y: float
    text: str
    fill: str
    font_px: float
    anchor: TextAnchor = "middle"
    bold: bool = False


@dataclass(frozen=True)
class LinearGradient:
    """Vertical fade from `top_opacity` to `bottom_opacity` of one color."""

    gradient_id: str
    color: str
    top_opacity: float
    bottom_opacity: float


Drawable = Union[LineShape, RectShape, PathShape, CircleShape, PolygonShape, TextShape]


@dataclass(frozen=True)
class Scene:
    """Rendering-agnostic, paint-ordered drawables for one chart frame."""

    width: float
    height: float
    items: tuple[Drawable, ...]
    gradients: tuple[LinearGradient, ...] = ()

    def of_type(self, kind: type) -> tuple[Drawable, ...]:
        return tuple(item for item in self.items if isinstance(item, kind))


def axis_layer(
    scale: Scale,
    box: PlotBox,
    theme: ChartTheme,
    *,
    tick_suffix: str = "",
    tick_formatter: ValueFormatter = format_integer,
    show_axis_lines: bool = True,
) -> list[Drawable]:
    """Grid line and label per tick, plus the left and bottom axis lines."""

    items: list[Drawable] = []
    positions = scale.tick_positions()
    labels = scale.tick_labels(tick_formatter)
    for y in positions:
        items.append(LineShape(box.left, y, box.right, y, stroke=theme.grid_color, stroke_width=theme.grid_stroke_width))
    if show_axis_lines:
        items.append(
            LineShape(box.left, box.top, box.left, box.bottom, stroke=theme.axis_color, stroke_width=theme.axis_stroke_width)
        )
    for y, label in zip(positions, labels):
        items.append(
            TextShape(
                x=box.left - 5.0,
                y=y + 4.0,
                text=f"{label}{tick_suffix}",
                fill=theme.tick_text_color,
                font_px=theme.tick_font_px,
                anchor="end",
            )
        )
    if show_axis_lines:
        items.append(
            LineShape(box.left, box.bottom, box.right, box.bottom, stroke=theme.axis_color, stroke_width=theme.axis_stroke_width)
        )
    return items


def x_label_layer(xs: Sequence[float], labels: Sequence[str], baseline: float, theme: ChartTheme) -> list[Drawable]:
    return [
        TextShape(x=x, y=baseline, text=label, fill=theme.tick_text_color, font_px=theme.label_font_px)
        for x, label in zip(xs, labels)
    ]


def line_layer(
    geometry: LineGeometry,
    color: str,
    theme: ChartTheme,
    *,
    hover: HoverState | None = None,
    gradient_id: str | None = None,
    stroke_width: float = 2.5,
    marker_radius: float = 4.0,
    hover_marker_radius: float = 6.0,
    markers: bool = True,
) -> list[Drawable]:
    items: list[Drawable] = []
    if geometry.area is not None:
        items.append(PathShape(d=geometry.area.to_svg(), fill=color, gradient_id=gradient_id))
    items.append(PathShape(d=geometry.path.to_svg(), stroke=color, stroke_width=stroke_width, round_caps=True))
    if markers:
        for index, point in enumerate(geometry.points):
            hovered = hover is not None and hover.index == index and hover.series_key in (None, geometry.series_key)
            items.append(
                CircleShape(
                    cx=point.x,
                    cy=point.y,
                    r=hover_marker_radius if hovered else marker_radius,
                    fill=theme.marker_fill,
                    stroke=color,
                    stroke_width=2.0,
                    mark_index=index,
                    series_key=geometry.series_key,
                )
            )
    return items


def bar_layer(
    geometry: BarGeometry,
    color: str,
    hover_color: str,
    *,
    hover: HoverState | None = None,
    corner_radius: float = 3.0,
) -> list[Drawable]:
    return [
        RectShape(
            x=bar.x,
            y=bar.y,
            width=bar.width,
            height=bar.height,
            fill=hover_color if hover is not None and hover.index == bar.index else color,
            corner_radius=corner_radius,
            mark_index=bar.index,
        )
        for bar in geometry.bars
    ]


def arc_layer(geometry: ArcGeometry, theme: ChartTheme, *, hover: HoverState | None = None) -> list[Drawable]:
    """Track plus one dashed stroke per segment along the same ring path."""

    track = geometry.track_path()
    items: list[Drawable] = [
        PathShape(
            d=track,
            stroke=theme.track_color,
            stroke_width=geometry.stroke_width,
            arc=_arc_stroke(geometry, 0.0, geometry.circumference),
        )
    ]
    for segment in geometry.segments:
        if segment.length <= 0:
            continue
        width = geometry.stroke_width
        if hover is not None and hover.index == segment.index:
            width += 4.0
        items.append(
            PathShape(
                d=track,
                stroke=segment.color,
                stroke_width=width,
                dash_array=segment.dash_array(geometry.circumference),
                dash_offset=segment.dash_offset(),
                arc=_arc_stroke(geometry, segment.start_offset, segment.length),
            )
        )
    return items


def progress_ring_layer(geometry: ProgressRingGeometry, color: str, theme: ChartTheme) -> list[Drawable]:
    cx, cy, r = geometry.center.x, geometry.center.y, geometry.radius
    sweep_deg = math.degrees(geometry.filled_length / r)
    return [
        CircleShape(cx=cx, cy=cy, r=r, stroke=theme.track_color, stroke_width=geometry.stroke_width),
        CircleShape(
            cx=cx,
            cy=cy,
            r=r,
            stroke=color,
            stroke_width=geometry.stroke_width,
            dash_array=geometry.dash_array(),
            dash_offset=fmt_num(geometry.dash_offset),
            rotate_deg=-90.0,
            round_caps=True,
            arc=ArcStroke(cx=cx, cy=cy, r=r, start_deg=-90.0, end_deg=-90.0 + sweep_deg),
        ),
    ]


def sparkline_layer(geometry: SparklineGeometry, color: str, *, area_opacity: float = 0.1) -> list[Drawable]:
    items: list[Drawable] = []
    if geometry.area is not None:
        items.append(PathShape(d=geometry.area.to_svg(), fill=color, fill_opacity=area_opacity))
    items.append(PathShape(d=geometry.path.to_svg(), stroke=color, stroke_width=2.0, round_caps=True))
    return items


def tooltip_layer(tooltip: Tooltip, theme: ChartTheme) -> list[Drawable]:
    box = tooltip.box
    return [
        RectShape(x=box.x, y=box.y, width=box.width, height=box.height, fill=theme.tooltip_bg, corner_radius=box.corner_radius),
        PolygonShape(points=tuple((p.x, p.y) for p in tooltip.pointer), fill=theme.tooltip_bg),
        TextShape(
            x=tooltip.x,
            y=box.y + box.height - 6.0,
            text=tooltip.text,
            fill=theme.tooltip_text,
            font_px=theme.tooltip_font_px,
            bold=True,
        ),
    ]


def _arc_stroke(geometry: ArcGeometry, start_offset: float, length: float) -> ArcStroke:
    base = math.degrees(start_angle(geometry.sweep))
    return ArcStroke(
        cx=geometry.center.x,
        cy=geometry.center.y,
        r=geometry.radius,
        start_deg=base + math.degrees(start_offset / geometry.radius),
        end_deg=base + math.degrees((start_offset + length) / geometry.radius),
    )

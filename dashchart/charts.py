from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from dashchart.adapters.normalize import as_dataset
from dashchart.dataset import DataProvider, Dataset
from dashchart.formatting import ValueFormatter, format_plain, round_half_up, suffix_formatter
from dashchart.geometry import (
    ArcGeometry,
    ArcSweep,
    BarGeometry,
    LineGeometry,
    MarkGeometry,
    MultiLineGeometry,
    PlotBox,
    Point,
    ProgressRingGeometry,
    SparklineGeometry,
    arc_geometry,
    bar_geometry,
    line_geometry,
    multi_line_geometry,
    progress_ring_geometry,
    sparkline_batch,
    sparkline_geometry,
)
from dashchart.geometry.bar import DEFAULT_MIN_BAR_HEIGHT, DEFAULT_WIDTH_RATIO
from dashchart.interaction import HoverController, HoverState, Tooltip
from dashchart.scales import Scale, compute_scale, fixed_scale
from dashchart.scene import (
    Drawable,
    LinearGradient,
    Scene,
    TextShape,
    arc_layer,
    axis_layer,
    bar_layer,
    line_layer,
    progress_ring_layer,
    sparkline_layer,
    tooltip_layer,
    x_label_layer,
)
from dashchart.style.palette import ChartColor, FeatureUsage, StyledCategory
from dashchart.style.theme import DEFAULT_THEME, ChartTheme, is_hex_color


LOGGER = logging.getLogger(__name__)


def _require_color(name: str, value: str) -> None:
    if not is_hex_color(value):
        raise ValueError(f"{name} must be a hex color (#RRGGBB or #RRGGBBAA)")


@dataclass(frozen=True)
class Margins:
    left: float = 0.0
    right: float = 0.0
    top: float = 0.0
    bottom: float = 0.0

    def __post_init__(self) -> None:
        if min(self.left, self.right, self.top, self.bottom) < 0:
            raise ValueError("margins must be >= 0")


def _plot_box(width: float, height: float, margins: Margins) -> PlotBox:
    if width <= 0 or height <= 0:
        raise ValueError("chart width/height must be > 0")
    if margins.left + margins.right >= width or margins.top + margins.bottom >= height:
        raise ValueError("margins leave no room for the plot")
    return PlotBox.from_margins(
        width, height, left=margins.left, right=margins.right, top=margins.top, bottom=margins.bottom
    )


@dataclass(frozen=True)
class LineChartConfig:
    width: float = 280.0
    height: float = 80.0
    margins: Margins = Margins(left=35.0, right=10.0, top=10.0, bottom=25.0)
    padding_ratio: float = 0.1
    integer_domain: bool = True
    series_key: str | None = None
    color: str = ChartColor.EMERALD.value
    filled: bool = True
    show_axes: bool = True
    value_suffix: str = ""
    x_label_offset: float = 14.0
    theme: ChartTheme = DEFAULT_THEME

    def __post_init__(self) -> None:
        _require_color("color", self.color)
        if self.padding_ratio < 0:
            raise ValueError("padding_ratio must be >= 0")
        self.plot_box()

    def plot_box(self) -> PlotBox:
        return _plot_box(self.width, self.height, self.margins)


@dataclass(frozen=True)
class BarChartConfig:
    width: float = 280.0
    height: float = 100.0
    margins: Margins = Margins(left=40.0, right=10.0, top=10.0, bottom=25.0)
    width_ratio: float = DEFAULT_WIDTH_RATIO
    min_bar_height: float = DEFAULT_MIN_BAR_HEIGHT
    ceil_steps: tuple[float, ...] = (100.0, 10.0)
    series_key: str | None = None
    color: str = ChartColor.VIOLET.value
    hover_color: str = ChartColor.VIOLET_DARK.value
    show_axes: bool = True
    value_suffix: str = ""
    x_label_offset: float = 14.0
    theme: ChartTheme = DEFAULT_THEME

    def __post_init__(self) -> None:
        _require_color("color", self.color)
        _require_color("hover_color", self.hover_color)
        if not 0.0 < self.width_ratio <= 1.0:
            raise ValueError("width_ratio must be in (0, 1]")
        box = self.plot_box()
        if self.min_bar_height < 0 or self.min_bar_height > box.height:
            raise ValueError("min_bar_height must be in [0, plot height]")

    def plot_box(self) -> PlotBox:
        return _plot_box(self.width, self.height, self.margins)


@dataclass(frozen=True)
class DonutChartConfig:
    size: float = 180.0
    stroke_width: float = 24.0
    sweep: ArcSweep = "full"
    radius: float | None = None
    colors: tuple[str, ...] | None = None
    center_caption: str | None = None
    theme: ChartTheme = DEFAULT_THEME

    def __post_init__(self) -> None:
        if self.sweep not in ("full", "half"):
            raise ValueError(f"unsupported sweep: {self.sweep}")
        if self.stroke_width <= 0 or self.size <= self.stroke_width:
            raise ValueError("donut needs size > stroke_width > 0")
        if self.radius is not None and self.radius <= 0:
            raise ValueError("radius must be > 0")
        for color in self.colors or ():
            _require_color("colors", color)

    def resolved_radius(self) -> float:
        return self.radius if self.radius is not None else (self.size - self.stroke_width) / 2.0

    def center(self) -> Point:
        r = self.resolved_radius()
        if self.sweep == "half":
            return Point(self.size / 2.0, r + self.stroke_width / 2.0)
        return Point(self.size / 2.0, self.size / 2.0)

    def canvas_height(self) -> float:
        if self.sweep == "half":
            return self.resolved_radius() + self.stroke_width / 2.0 + 10.0
        return self.size


@dataclass(frozen=True)
class ProgressRingConfig:
    size: float = 120.0
    stroke_width: float = 10.0
    color: str = ChartColor.INDIGO.value
    theme: ChartTheme = DEFAULT_THEME

    def __post_init__(self) -> None:
        _require_color("color", self.color)
        if self.stroke_width <= 0 or self.size <= self.stroke_width:
            raise ValueError("progress ring needs size > stroke_width > 0")


@dataclass(frozen=True)
class SparklineConfig:
    width: float = 200.0
    height: float = 40.0
    padding: float = 2.0
    show_area: bool = True
    area_opacity: float = 0.1
    color: str = ChartColor.INDIGO.value

    def __post_init__(self) -> None:
        _require_color("color", self.color)
        if self.padding < 0 or 2 * self.padding >= min(self.width, self.height):
            raise ValueError("sparkline padding leaves no room for the plot")
        if not 0.0 <= self.area_opacity <= 1.0:
            raise ValueError("area_opacity must be in [0, 1]")


@dataclass(frozen=True)
class SeriesStyle:
    key: str
    color: str
    label: str

    def __post_init__(self) -> None:
        _require_color("SeriesStyle.color", self.color)

    @classmethod
    def from_category(cls, category: StyledCategory) -> "SeriesStyle":
        return cls(key=category.name.lower(), color=category.color, label=category.label)


@dataclass(frozen=True)
class TrendChartConfig:
    width: float = 400.0
    height: float = 200.0
    margins: Margins = Margins(left=40.0, right=20.0, top=20.0, bottom=40.0)
    domain: tuple[float, float] = (0.0, 100.0)
    ticks: tuple[float, ...] = (0.0, 25.0, 50.0, 75.0, 100.0)
    series: tuple[SeriesStyle, ...] = field(
        default_factory=lambda: tuple(SeriesStyle.from_category(c) for c in FeatureUsage)
    )
    value_suffix: str = "%"
    stroke_width: float = 3.0
    theme: ChartTheme = DEFAULT_THEME

    def __post_init__(self) -> None:
        if not self.series:
            raise ValueError("TrendChartConfig.series must not be empty")
        keys = [s.key for s in self.series]
        if len(set(keys)) != len(keys):
            raise ValueError("TrendChartConfig.series keys must be unique")
        self.plot_box()

    def plot_box(self) -> PlotBox:
        return _plot_box(self.width, self.height, self.margins)


@dataclass(frozen=True)
class ChartFrame:
    """One fully computed render: scale, geometry and the scene drawn from them."""

    scene: Scene
    geometry: Any
    scale: Scale | None
    dataset: Dataset | None = None
    tooltip: Tooltip | None = None


class _InteractiveChart:
    """Shared render/hover plumbing; subclasses build geometry and compose scenes."""

    kind = "chart"

    def __init__(self, formatter: ValueFormatter) -> None:
        self.hover = HoverController(formatter=formatter)
        self._frame: ChartFrame | None = None

    @property
    def frame(self) -> ChartFrame:
        if self._frame is None:
            raise RuntimeError(f"{self.kind} has not been rendered yet")
        return self._frame

    def render(self, data: Any) -> ChartFrame:
        dataset, geometry, scale = self._build(data)
        self.hover.bind(geometry)
        self._frame = self._frame_for(dataset, geometry, scale)
        LOGGER.debug("%s rendered: %d marks", self.kind, 0 if dataset is None else len(dataset))
        return self._frame

    def render_from(self, provider: DataProvider, key: str) -> ChartFrame:
        return self.render(provider.dataset(key))

    def pointer_enter(self, index: int, series_key: str | None = None) -> ChartFrame:
        self.hover.on_pointer_enter(index, series_key)
        return self._refresh()

    def pointer_leave(self) -> ChartFrame:
        self.hover.on_pointer_leave()
        return self._refresh()

    def pointer_move(self, x: float, y: float) -> ChartFrame:
        self.hover.on_pointer_move(x, y)
        return self._refresh()

    def _refresh(self) -> ChartFrame:
        frame = self.frame
        self._frame = self._frame_for(frame.dataset, frame.geometry, frame.scale)
        return self._frame

    def _frame_for(self, dataset: Dataset | None, geometry: Any, scale: Scale | None) -> ChartFrame:
        tooltip = self.hover.tooltip()
        scene = self._compose(geometry, self.hover.active, tooltip)
        return ChartFrame(scene=scene, geometry=geometry, scale=scale, dataset=dataset, tooltip=tooltip)

    def _build(self, data: Any) -> tuple[Dataset | None, MarkGeometry, Scale | None]:
        raise NotImplementedError

    def _compose(self, geometry: Any, hover: HoverState | None, tooltip: Tooltip | None) -> Scene:
        raise NotImplementedError


class LineChart(_InteractiveChart):
    """Single-series line chart with optional gradient area, ticks and point tooltips."""

    kind = "line chart"

    def __init__(self, config: LineChartConfig | None = None, *, formatter: ValueFormatter | None = None) -> None:
        self.config = config or LineChartConfig()
        super().__init__(formatter or suffix_formatter(self.config.value_suffix))

    def _build(self, data: Any) -> tuple[Dataset, LineGeometry, Scale]:
        cfg = self.config
        dataset = as_dataset(data)
        key = cfg.series_key or dataset.series_keys[0]
        values = dataset.values(key)
        box = cfg.plot_box()
        scale = compute_scale(values, box.vertical_range(), cfg.padding_ratio, integer_domain=cfg.integer_domain)
        geometry = line_geometry(values, scale, box, labels=dataset.labels(), series_key=key, filled=cfg.filled)
        return dataset, geometry, scale

    def _compose(self, geometry: LineGeometry, hover: HoverState | None, tooltip: Tooltip | None) -> Scene:
        cfg = self.config
        theme = cfg.theme
        gradients: tuple[LinearGradient, ...] = ()
        gradient_id = None
        if cfg.filled:
            gradient_id = f"gradient-{geometry.series_key}"
            gradients = (
                LinearGradient(gradient_id, cfg.color, theme.gradient_top_opacity, theme.gradient_bottom_opacity),
            )
        items: list[Drawable] = []
        if cfg.show_axes:
            items.extend(axis_layer(geometry.scale, geometry.box, theme, tick_suffix=cfg.value_suffix))
        items.extend(
            x_label_layer(
                [p.x for p in geometry.points], geometry.labels, geometry.box.bottom + cfg.x_label_offset, theme
            )
        )
        items.extend(line_layer(geometry, cfg.color, theme, hover=hover, gradient_id=gradient_id))
        if tooltip is not None:
            items.extend(tooltip_layer(tooltip, theme))
        return Scene(width=cfg.width, height=cfg.height, items=tuple(items), gradients=gradients)


class BarChart(_InteractiveChart):
    kind = "bar chart"

    def __init__(self, config: BarChartConfig | None = None, *, formatter: ValueFormatter | None = None) -> None:
        self.config = config or BarChartConfig()
        super().__init__(formatter or suffix_formatter(self.config.value_suffix))

    def _build(self, data: Any) -> tuple[Dataset, BarGeometry, Scale]:
        cfg = self.config
        dataset = as_dataset(data)
        values = dataset.values(cfg.series_key or dataset.series_keys[0])
        box = cfg.plot_box()
        scale = compute_scale(values, box.vertical_range(), zero_baseline=True, ceil_steps=cfg.ceil_steps)
        geometry = bar_geometry(
            values,
            scale,
            box,
            labels=dataset.labels(),
            width_ratio=cfg.width_ratio,
            min_height=cfg.min_bar_height,
        )
        return dataset, geometry, scale

    def _compose(self, geometry: BarGeometry, hover: HoverState | None, tooltip: Tooltip | None) -> Scene:
        cfg = self.config
        theme = cfg.theme
        items: list[Drawable] = []
        if cfg.show_axes:
            items.extend(axis_layer(geometry.scale, geometry.box, theme, tick_suffix=cfg.value_suffix))
        items.extend(bar_layer(geometry, cfg.color, cfg.hover_color, hover=hover))
        items.extend(
            x_label_layer(
                [bar.center_x for bar in geometry.bars],
                [bar.label for bar in geometry.bars],
                geometry.box.bottom + cfg.x_label_offset,
                theme,
            )
        )
        if tooltip is not None:
            items.extend(tooltip_layer(tooltip, theme))
        return Scene(width=cfg.width, height=cfg.height, items=tuple(items))


class DonutChart(_InteractiveChart):
    """Full or half ring split into category segments in a fixed order."""

    kind = "donut chart"

    def __init__(self, config: DonutChartConfig | None = None, *, formatter: ValueFormatter = format_plain) -> None:
        self.config = config or DonutChartConfig()
        super().__init__(formatter)

    def _build(self, data: Any) -> tuple[Dataset | None, ArcGeometry, None]:
        cfg = self.config
        geometry = arc_geometry(
            data,
            radius=cfg.resolved_radius(),
            stroke_width=cfg.stroke_width,
            sweep=cfg.sweep,
            center=cfg.center(),
            colors=cfg.colors,
        )
        dataset = data if isinstance(data, Dataset) else None
        return dataset, geometry, None

    def _compose(self, geometry: ArcGeometry, hover: HoverState | None, tooltip: Tooltip | None) -> Scene:
        cfg = self.config
        theme = cfg.theme
        items: list[Drawable] = list(arc_layer(geometry, theme, hover=hover))
        if cfg.center_caption is not None:
            lead = geometry.segments[0]
            baseline = geometry.center.y if cfg.sweep == "half" else geometry.center.y + 6.0
            items.append(
                TextShape(
                    x=geometry.center.x,
                    y=baseline - 14.0,
                    text=f"{lead.percent}%",
                    fill=lead.color,
                    font_px=theme.tooltip_font_px * 2.5,
                    bold=True,
                )
            )
            items.append(
                TextShape(
                    x=geometry.center.x,
                    y=baseline,
                    text=cfg.center_caption,
                    fill=theme.tick_text_color,
                    font_px=theme.tick_font_px,
                )
            )
        if tooltip is not None:
            items.extend(tooltip_layer(tooltip, theme))
        return Scene(width=cfg.size, height=cfg.canvas_height(), items=tuple(items))


class TrendChart(_InteractiveChart):
    """Several series on one fixed-domain scale (percentages by default)."""

    kind = "trend chart"

    def __init__(self, config: TrendChartConfig | None = None, *, formatter: ValueFormatter | None = None) -> None:
        self.config = config or TrendChartConfig()
        super().__init__(formatter or suffix_formatter(self.config.value_suffix))

    def _build(self, data: Any) -> tuple[Dataset, MultiLineGeometry, Scale]:
        cfg = self.config
        dataset = as_dataset(data)
        box = cfg.plot_box()
        scale = fixed_scale(cfg.domain, box.vertical_range(), cfg.ticks)
        geometry = multi_line_geometry(dataset, scale, box, series_keys=[s.key for s in cfg.series])
        return dataset, geometry, scale

    def _compose(self, geometry: MultiLineGeometry, hover: HoverState | None, tooltip: Tooltip | None) -> Scene:
        cfg = self.config
        theme = cfg.theme
        items: list[Drawable] = list(
            axis_layer(geometry.scale, geometry.box, theme, tick_suffix=cfg.value_suffix, show_axis_lines=False)
        )
        first = geometry.lines[0]
        items.extend(x_label_layer([p.x for p in first.points], first.labels, cfg.height - 10.0, theme))
        for style, line in zip(cfg.series, geometry.lines):
            items.extend(line_layer(line, style.color, theme, hover=hover, stroke_width=cfg.stroke_width))
        if tooltip is not None:
            items.extend(tooltip_layer(tooltip, theme))
        return Scene(width=cfg.width, height=cfg.height, items=tuple(items))


class ProgressRing:
    """Single-value completion ring; no hover targets."""

    def __init__(self, config: ProgressRingConfig | None = None) -> None:
        self.config = config or ProgressRingConfig()

    def render(self, percent: float) -> ChartFrame:
        cfg = self.config
        geometry: ProgressRingGeometry = progress_ring_geometry(percent, size=cfg.size, stroke_width=cfg.stroke_width)
        items: list[Drawable] = list(progress_ring_layer(geometry, cfg.color, cfg.theme))
        items.append(
            TextShape(
                x=geometry.center.x,
                y=geometry.center.y + 6.0,
                text=f"{round_half_up(geometry.percent)}%",
                fill=cfg.theme.tooltip_bg,
                font_px=cfg.theme.tooltip_font_px * 1.6,
                bold=True,
            )
        )
        scene = Scene(width=cfg.size, height=cfg.size, items=tuple(items))
        return ChartFrame(scene=scene, geometry=geometry, scale=None)


class Sparkline:
    """Compact trend line without axes, labels or hover."""

    def __init__(self, config: SparklineConfig | None = None) -> None:
        self.config = config or SparklineConfig()

    def render(self, values: Any) -> ChartFrame:
        cfg = self.config
        geometry = sparkline_geometry(
            values, width=cfg.width, height=cfg.height, padding=cfg.padding, show_area=cfg.show_area
        )
        return self._frame(geometry)

    def render_many(self, series: Sequence[Any]) -> list[ChartFrame]:
        cfg = self.config
        geometries = sparkline_batch(
            series, width=cfg.width, height=cfg.height, padding=cfg.padding, show_area=cfg.show_area
        )
        return [self._frame(geometry) for geometry in geometries]

    def _frame(self, geometry: SparklineGeometry) -> ChartFrame:
        cfg = self.config
        items = sparkline_layer(geometry, cfg.color, area_opacity=cfg.area_opacity)
        scene = Scene(width=cfg.width, height=cfg.height, items=tuple(items))
        return ChartFrame(scene=scene, geometry=geometry, scale=geometry.scale)

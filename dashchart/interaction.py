from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from dashchart.formatting import ValueFormatter, format_plain
from dashchart.geometry.primitives import MarkGeometry, Point
from dashchart.scales import Scale


LOGGER = logging.getLogger(__name__)

HoverPhase = Literal["idle", "hovering"]

TOOLTIP_HEIGHT = 20.0
TOOLTIP_MIN_WIDTH = 36.0
TOOLTIP_GAP = 8.0
TOOLTIP_CHAR_WIDTH = 6.5
TOOLTIP_POINTER_HALF_WIDTH = 5.0
TOOLTIP_POINTER_TIP_GAP = 3.0


@dataclass(frozen=True)
class HoverState:
    """Active hover target plus the mark position the tooltip attaches to."""

    index: int
    series_key: str | None
    x: float
    y: float

    def matches(self, index: int, series_key: str | None) -> bool:
        return self.index == index and self.series_key == series_key


@dataclass(frozen=True)
class TooltipBox:
    x: float
    y: float
    width: float
    height: float
    corner_radius: float = 4.0


@dataclass(frozen=True)
class Tooltip:
    x: float
    y: float
    text: str
    label: str
    box: TooltipBox
    pointer: tuple[Point, Point, Point]


class HoverController:
    """Per-chart Idle/Hovering state machine driven by pointer events.

    Geometry is read-only here; `bind` swaps it in after each render and always
    clears any hover left over from the previous geometry.
    """

    def __init__(self, geometry: MarkGeometry | None = None, *, formatter: ValueFormatter = format_plain) -> None:
        self._geometry = geometry
        self._formatter = formatter
        self._active: HoverState | None = None

    @property
    def phase(self) -> HoverPhase:
        return "idle" if self._active is None else "hovering"

    @property
    def active(self) -> HoverState | None:
        return self._active

    @property
    def geometry(self) -> MarkGeometry | None:
        return self._geometry

    def bind(self, geometry: MarkGeometry | None) -> None:
        self._geometry = geometry
        if self._active is not None:
            LOGGER.debug("geometry replaced; dropping hover on index %s", self._active.index)
        self._active = None

    def on_pointer_enter(self, index: int, series_key: str | None = None) -> HoverState:
        geometry = self._require_geometry()
        if index < 0:
            raise IndexError(f"mark index must be >= 0, got {index}")
        anchor = geometry.anchor(index, series_key)
        previous = self._active
        self._active = HoverState(index=index, series_key=series_key, x=anchor.x, y=anchor.y)
        if previous is None:
            LOGGER.debug("hover enter: index=%s series=%s", index, series_key)
        elif not previous.matches(index, series_key):
            LOGGER.debug("hover move: %s -> %s (series=%s)", previous.index, index, series_key)
        return self._active

    def on_pointer_leave(self) -> None:
        if self._active is not None:
            LOGGER.debug("hover leave: index=%s", self._active.index)
        self._active = None
        return None

    def on_pointer_move(self, x: float, y: float) -> HoverState | None:
        geometry = self._require_geometry()
        hit = geometry.hit_test(x, y)
        if hit is None:
            return self.on_pointer_leave()
        series_key, index = hit
        if self._active is not None and self._active.matches(index, series_key):
            return self._active
        return self.on_pointer_enter(index, series_key)

    def tooltip(self) -> Tooltip | None:
        if self._active is None:
            return None
        geometry = self._require_geometry()
        return tooltip_for(self._active, geometry.scale, geometry, formatter=self._formatter)

    def _require_geometry(self) -> MarkGeometry:
        if self._geometry is None:
            raise RuntimeError("hover controller has no geometry bound; render the chart first")
        return self._geometry


def tooltip_for(
    state: HoverState,
    scale: Scale | None,
    geometry: MarkGeometry,
    *,
    formatter: ValueFormatter = format_plain,
    box_width: float | None = None,
) -> Tooltip:
    """Tooltip anchored at the hovered mark, read back from the drawn geometry."""

    if geometry.scale is not scale:
        raise ValueError("tooltip scale is not the scale this geometry was drawn with")
    anchor = geometry.anchor(state.index, state.series_key)
    if anchor.x != state.x or anchor.y != state.y:
        raise ValueError("hover state does not belong to this geometry")

    text = formatter(geometry.value_at(state.index, state.series_key))
    label = geometry.label_at(state.index, state.series_key)
    width = box_width if box_width is not None else max(TOOLTIP_MIN_WIDTH, len(text) * TOOLTIP_CHAR_WIDTH + 14.0)
    box = TooltipBox(
        x=anchor.x - width / 2.0,
        y=anchor.y - TOOLTIP_GAP - TOOLTIP_HEIGHT,
        width=width,
        height=TOOLTIP_HEIGHT,
    )
    pointer = (
        Point(anchor.x - TOOLTIP_POINTER_HALF_WIDTH, anchor.y - TOOLTIP_GAP),
        Point(anchor.x + TOOLTIP_POINTER_HALF_WIDTH, anchor.y - TOOLTIP_GAP),
        Point(anchor.x, anchor.y - TOOLTIP_POINTER_TIP_GAP),
    )
    return Tooltip(x=anchor.x, y=anchor.y, text=text, label=label, box=box, pointer=pointer)

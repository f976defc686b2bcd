from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np

from dashchart.dataset import coerce_value
from dashchart.errors import EmptyDatasetError, InvalidValueError
from dashchart.formatting import ValueFormatter, format_integer, round_half_up


LOGGER = logging.getLogger(__name__)

MIN_TICKS = 2
MAX_TICKS = 5


@dataclass(frozen=True)
class Scale:
    """Linear value→pixel mapping plus the tick values that label it.

    `range_start` is the pixel for `domain_min`; for vertical axes this is the plot
    baseline, so `range_start > range_end`.
    """

    domain_min: float
    domain_max: float
    range_start: float
    range_end: float
    ticks: tuple[float, ...]

    def __post_init__(self) -> None:
        if not (math.isfinite(self.domain_min) and math.isfinite(self.domain_max)):
            raise ValueError("scale domain must be finite")
        if self.domain_max <= self.domain_min:
            raise ValueError("scale domain_max must be > domain_min")
        if self.range_start == self.range_end:
            raise ValueError("scale pixel range must be non-empty")
        if not MIN_TICKS <= len(self.ticks) <= MAX_TICKS:
            raise ValueError(f"scale needs {MIN_TICKS}-{MAX_TICKS} ticks, got {len(self.ticks)}")
        for lo, hi in zip(self.ticks, self.ticks[1:]):
            if hi < lo:
                raise ValueError("scale ticks must be non-decreasing")
        if self.ticks[0] < self.domain_min or self.ticks[-1] > self.domain_max:
            raise ValueError("scale ticks must lie inside the domain")

    @property
    def span(self) -> float:
        return self.domain_max - self.domain_min

    @property
    def pixel_span(self) -> float:
        return self.range_end - self.range_start

    def __call__(self, value: float) -> float:
        return self.range_start + (float(value) - self.domain_min) / self.span * self.pixel_span

    def map_array(self, values: np.ndarray) -> np.ndarray:
        arr = np.asarray(values, dtype=np.float64)
        return self.range_start + (arr - self.domain_min) / self.span * self.pixel_span

    def invert(self, pixel: float) -> float:
        return self.domain_min + (float(pixel) - self.range_start) / self.pixel_span * self.span

    def contains(self, value: float) -> bool:
        return self.domain_min <= value <= self.domain_max

    def tick_positions(self) -> tuple[float, ...]:
        return tuple(self(t) for t in self.ticks)

    def tick_labels(self, formatter: ValueFormatter = format_integer) -> tuple[str, ...]:
        """Display labels; the default rounds each tick to an integer."""

        return tuple(formatter(t) for t in self.ticks)


def compute_scale(
    values: Any,
    pixel_range: tuple[float, float],
    padding_ratio: float = 0.0,
    *,
    zero_baseline: bool = False,
    integer_domain: bool = False,
    ceil_steps: Sequence[float] = (),
) -> Scale:
    """Derive a three-tick scale from a numeric series.

    - `padding_ratio` widens the domain by that fraction of the data span on each side
      (on the top only when `zero_baseline` pins the bottom to 0).
    - `integer_domain` floors/ceils the padded bounds.
    - `ceil_steps` rounds the top up to the first step yielding a positive multiple,
      e.g. `(100, 10)`.
    """

    arr = as_value_array(values)
    if padding_ratio < 0 or not math.isfinite(padding_ratio):
        raise ValueError("padding_ratio must be a finite value >= 0")
    start, end = (float(pixel_range[0]), float(pixel_range[1]))

    vmin = float(np.min(arr))
    vmax = float(np.max(arr))
    if zero_baseline:
        if vmin < 0:
            index = int(np.argmin(arr))
            raise InvalidValueError(f"value at index {index} is negative on a zero-based scale: {vmin}", index=index)
        vmin = 0.0

    if vmax == vmin:
        delta = max(1.0, abs(vmin) * padding_ratio)
        LOGGER.debug("constant series at %s; widening domain by %s", vmin, delta)
        dmin = vmin if zero_baseline else vmin - delta
        dmax = vmax + delta
    else:
        pad = (vmax - vmin) * padding_ratio
        dmin = vmin if zero_baseline else vmin - pad
        dmax = vmax + pad

    for step in ceil_steps:
        if step <= 0:
            raise ValueError("ceil_steps must be > 0")
        candidate = math.ceil(dmax / step) * step
        if candidate > dmin:
            dmax = float(candidate)
            break

    if integer_domain:
        dmin = float(math.floor(dmin))
        dmax = float(math.ceil(dmax))

    return Scale(
        domain_min=dmin,
        domain_max=dmax,
        range_start=start,
        range_end=end,
        ticks=three_ticks(dmin, dmax),
    )


def fixed_scale(
    domain: tuple[float, float],
    pixel_range: tuple[float, float],
    ticks: Sequence[float] | None = None,
) -> Scale:
    dmin, dmax = float(domain[0]), float(domain[1])
    resolved = tuple(float(t) for t in ticks) if ticks is not None else three_ticks(dmin, dmax)
    return Scale(
        domain_min=dmin,
        domain_max=dmax,
        range_start=float(pixel_range[0]),
        range_end=float(pixel_range[1]),
        ticks=resolved,
    )


def three_ticks(domain_min: float, domain_max: float) -> tuple[float, float, float]:
    mid = float(round_half_up((domain_min + domain_max) / 2.0))
    mid = min(max(mid, domain_min), domain_max)
    return (domain_min, mid, domain_max)


def as_value_array(values: Any) -> np.ndarray:
    """Validate a numeric series into a float64 array, naming the first bad index."""

    if isinstance(values, np.ndarray):
        if values.ndim != 1:
            raise InvalidValueError("values must be 1-D")
        items = values.tolist()
    else:
        items = list(values)
    if not items:
        raise EmptyDatasetError("cannot compute a scale for an empty dataset")
    return np.asarray([coerce_value(v, index=i) for i, v in enumerate(items)], dtype=np.float64)

from __future__ import annotations

import logging
import re
import tomllib
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Mapping


LOGGER = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")


@dataclass(frozen=True)
class ChartTheme:
    """Style tokens shared by every chart scene."""

    grid_color: str = "#E5E7EB"
    axis_color: str = "#9CA3AF"
    tick_text_color: str = "#6B7280"
    track_color: str = "#E5E7EB"
    tooltip_bg: str = "#1F2937"
    tooltip_text: str = "#FFFFFF"
    marker_fill: str = "#FFFFFF"
    font_family: str = "System"
    tick_font_px: float = 10.0
    label_font_px: float = 9.0
    tooltip_font_px: float = 11.0
    grid_stroke_width: float = 1.0
    axis_stroke_width: float = 1.5
    gradient_top_opacity: float = 0.3
    gradient_bottom_opacity: float = 0.05


DEFAULT_THEME = ChartTheme()


def is_hex_color(value: Any) -> bool:
    return isinstance(value, str) and bool(_HEX_COLOR.match(value))

_COLOR_TOKENS = (
    "grid_color",
    "axis_color",
    "tick_text_color",
    "track_color",
    "tooltip_bg",
    "tooltip_text",
    "marker_fill",
)
_SIZE_TOKENS = ("tick_font_px", "label_font_px", "tooltip_font_px", "grid_stroke_width", "axis_stroke_width")
_OPACITY_TOKENS = ("gradient_top_opacity", "gradient_bottom_opacity")


def validate_chart_theme(overrides: Mapping[str, Any] | None = None) -> ChartTheme:
    """Validate and merge token overrides against the defaults."""

    raw: dict[str, Any] = asdict(DEFAULT_THEME)
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ValueError(f"Unknown theme token: {key}")
            raw[key] = value

    for key in _COLOR_TOKENS:
        if not is_hex_color(raw[key]):
            raise ValueError(f"Token `{key}` must be a hex color (#RRGGBB or #RRGGBBAA)")

    if not isinstance(raw["font_family"], str) or not raw["font_family"].strip():
        raise ValueError("Token `font_family` must be a non-empty string")

    for key in _SIZE_TOKENS:
        if isinstance(raw[key], bool) or not isinstance(raw[key], (int, float)) or float(raw[key]) <= 0:
            raise ValueError(f"Token `{key}` must be a positive number")

    for key in _OPACITY_TOKENS:
        value = raw[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not 0.0 <= float(value) <= 1.0:
            raise ValueError(f"Token `{key}` must be a number in [0, 1]")

    return ChartTheme(**{f.name: _coerce(f.name, raw[f.name]) for f in fields(ChartTheme)})


def load_chart_theme(path: str | Path, *, strict: bool = True) -> ChartTheme:
    """Load theme overrides from a TOML file (top level or a `[theme]` table).

    With `strict=False` unknown tokens are dropped with a warning instead of failing.
    """

    theme_path = Path(path)
    if not theme_path.exists():
        raise FileNotFoundError(f"theme file not found: {theme_path}")
    with theme_path.open("rb") as f:
        raw = tomllib.load(f)
    table = raw.get("theme", raw)
    if not isinstance(table, dict):
        raise ValueError("`theme` must be a TOML table")

    overrides = dict(table)
    if not strict:
        known = {f.name for f in fields(ChartTheme)}
        unknown = sorted(k for k in overrides if k not in known)
        if unknown:
            LOGGER.warning("ignoring unknown theme tokens in %s: %s", theme_path, ", ".join(unknown))
        overrides = {k: v for k, v in overrides.items() if k in known}
    return validate_chart_theme(overrides)


def _coerce(name: str, value: Any) -> Any:
    if name in _SIZE_TOKENS or name in _OPACITY_TOKENS:
        return float(value)
    return str(value)

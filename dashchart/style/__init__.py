"""Palette, category styles and theme tokens for dashchart scenes."""

from .palette import AdoptionStatus, CategoryStyle, ChartColor, FeatureUsage, StyledCategory, series_color
from .theme import DEFAULT_THEME, ChartTheme, is_hex_color, load_chart_theme, validate_chart_theme

__all__ = [
    "AdoptionStatus",
    "CategoryStyle",
    "ChartColor",
    "ChartTheme",
    "DEFAULT_THEME",
    "FeatureUsage",
    "StyledCategory",
    "is_hex_color",
    "load_chart_theme",
    "series_color",
    "validate_chart_theme",
]

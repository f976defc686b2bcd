from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ChartColor(str, Enum):
    INDIGO = "#6366f1"
    EMERALD = "#10b981"
    AMBER = "#f59e0b"
    SLATE = "#94a3b8"
    PURPLE = "#a855f7"
    VIOLET = "#8b5cf6"
    VIOLET_DARK = "#7c3aed"


@dataclass(frozen=True)
class CategoryStyle:
    label: str
    color: str


class StyledCategory(Enum):
    """Base for category enums whose member values are `CategoryStyle`s."""

    @property
    def style(self) -> CategoryStyle:
        return self.value

    @property
    def label(self) -> str:
        return self.value.label

    @property
    def color(self) -> str:
        return self.value.color


class AdoptionStatus(StyledCategory):
    ENROLLED = CategoryStyle("Enrolled", ChartColor.EMERALD.value)
    ENROLLING = CategoryStyle("Enrolling", ChartColor.AMBER.value)
    NOT_ENROLLED = CategoryStyle("Not enrolled", ChartColor.SLATE.value)


class FeatureUsage(StyledCategory):
    TRACK = CategoryStyle("Track", ChartColor.INDIGO.value)
    PAY = CategoryStyle("Pay", ChartColor.EMERALD.value)
    SAVE = CategoryStyle("Save", ChartColor.AMBER.value)


SERIES_COLORS: tuple[str, ...] = (
    ChartColor.INDIGO.value,
    ChartColor.EMERALD.value,
    ChartColor.AMBER.value,
    ChartColor.PURPLE.value,
    ChartColor.SLATE.value,
)


def series_color(index: int) -> str:
    return SERIES_COLORS[index % len(SERIES_COLORS)]

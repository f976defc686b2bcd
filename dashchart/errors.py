from __future__ import annotations


class ChartDataError(ValueError):
    """Raised when chart input cannot be turned into well-defined geometry."""


class EmptyDatasetError(ChartDataError):
    pass


class DegenerateDatasetError(ChartDataError):
    """Dataset is non-empty but too small or too flat for the requested chart."""


class InvalidValueError(ChartDataError):
    """A record carries a missing, non-numeric or out-of-range value."""

    def __init__(self, message: str, *, index: int | None = None, label: str | None = None) -> None:
        super().__init__(message)
        self.index = index
        self.label = label

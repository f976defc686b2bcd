from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal
from numbers import Real
from types import MappingProxyType
from typing import Any, Mapping, Protocol

import numpy as np

from dashchart.errors import InvalidValueError


DEFAULT_SERIES_KEY = "value"


def coerce_value(
    raw: Any, *, index: int | None = None, label: str | None = None, field: str | None = None
) -> float:
    """Accept ints, floats, Decimals and numpy scalars; reject everything else.

    Strings are never parsed. Booleans, `None`, NaN and infinities raise
    `InvalidValueError` naming the record.
    """

    if index is not None:
        where = f"record {index}" + (f" (`{label}`)" if label is not None else "")
    else:
        where = f"record `{label}`"
    if field is not None:
        where = f"{where} field `{field}`"
    if raw is None:
        raise InvalidValueError(f"{where} is missing a value", index=index, label=label)
    if isinstance(raw, (bool, np.bool_)):
        raise InvalidValueError(f"{where} is boolean, expected a number", index=index, label=label)
    if isinstance(raw, (Decimal, Real, np.integer, np.floating)):
        value = float(raw)
    else:
        raise InvalidValueError(f"{where} is non-numeric: {raw!r}", index=index, label=label)
    if not math.isfinite(value):
        raise InvalidValueError(f"{where} is not finite: {raw!r}", index=index, label=label)
    return value


@dataclass(frozen=True)
class Record:
    """One x-position of a dataset: a display label plus one value per series."""

    label: str
    values: Mapping[str, float]

    # values are a mapping proxy
    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        checked = {
            key: coerce_value(raw, label=self.label, field=key) for key, raw in dict(self.values).items()
        }
        object.__setattr__(self, "values", MappingProxyType(checked))

    def value(self, series_key: str = DEFAULT_SERIES_KEY) -> float:
        try:
            return self.values[series_key]
        except KeyError as exc:
            raise KeyError(f"record `{self.label}` has no series `{series_key}`") from exc


@dataclass(frozen=True)
class Dataset:
    """Ordered, immutable chart input. Record order is visual order."""

    records: tuple[Record, ...] = ()
    series_keys: tuple[str, ...] = (DEFAULT_SERIES_KEY,)
    name: str | None = None
    _columns: dict[str, np.ndarray] = field(default_factory=dict, init=False, repr=False, compare=False)

    # records hold mapping proxies and the column cache is a dict
    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if not self.series_keys:
            raise ValueError("Dataset.series_keys must not be empty")
        if len(set(self.series_keys)) != len(self.series_keys):
            raise ValueError("Dataset.series_keys must be unique")
        for index, record in enumerate(self.records):
            missing = [key for key in self.series_keys if key not in record.values]
            if missing:
                raise ValueError(f"record {index} (`{record.label}`) is missing series: {', '.join(missing)}")

    def __len__(self) -> int:
        return len(self.records)

    @property
    def is_multi_series(self) -> bool:
        return len(self.series_keys) > 1

    def labels(self) -> tuple[str, ...]:
        return tuple(record.label for record in self.records)

    def values(self, series_key: str | None = None) -> np.ndarray:
        key = self._resolve_key(series_key)
        cached = self._columns.get(key)
        if cached is None:
            cached = np.asarray([record.values[key] for record in self.records], dtype=np.float64)
            cached.setflags(write=False)
            self._columns[key] = cached
        return cached

    def all_values(self) -> np.ndarray:
        if not self.records:
            return np.empty(0, dtype=np.float64)
        return np.concatenate([self.values(key) for key in self.series_keys])

    def value(self, index: int, series_key: str | None = None) -> float:
        return float(self.records[index].values[self._resolve_key(series_key)])

    def _resolve_key(self, series_key: str | None) -> str:
        if series_key is None:
            return self.series_keys[0]
        if series_key not in self.series_keys:
            raise KeyError(f"unknown series `{series_key}`; expected one of {', '.join(self.series_keys)}")
        return series_key


class DataProvider(Protocol):
    """Source of named datasets injected into chart consumers."""

    def dataset(self, key: str) -> Dataset:
        ...


class StaticDataProvider:
    """In-memory provider backed by a fixed mapping of datasets."""

    def __init__(self, datasets: Mapping[str, Dataset]) -> None:
        self._datasets = dict(datasets)

    def keys(self) -> tuple[str, ...]:
        return tuple(self._datasets.keys())

    def dataset(self, key: str) -> Dataset:
        try:
            return self._datasets[key]
        except KeyError as exc:
            raise KeyError(f"no dataset registered under `{key}`") from exc

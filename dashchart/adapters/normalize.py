from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import numpy as np

from dashchart.dataset import DEFAULT_SERIES_KEY, Dataset, Record, coerce_value
from dashchart.errors import InvalidValueError


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]


LABEL_KEYS: tuple[str, ...] = ("label", "name", "month")


def dataset_from_values(
    values: Any,
    *,
    labels: Sequence[str] | None = None,
    series_key: str = DEFAULT_SERIES_KEY,
    name: str | None = None,
) -> Dataset:
    """Build a single-series dataset from a flat numeric sequence or 1-D array."""

    raw = _coerce_sequence(values)
    if labels is not None and len(labels) != len(raw):
        raise InvalidValueError(f"labels and values length mismatch: {len(labels)} != {len(raw)}")
    records = []
    for index, item in enumerate(raw):
        label = str(labels[index]) if labels is not None else str(index)
        records.append(Record(label=label, values={series_key: coerce_value(item, index=index, label=label)}))
    return Dataset(records=tuple(records), series_keys=(series_key,), name=name)


def dataset_from_records(
    records: Iterable[Mapping[str, Any]],
    *,
    series_keys: Sequence[str] | None = None,
    label_key: str | None = None,
    name: str | None = None,
) -> Dataset:
    """Build a dataset from `{label, value}` or `{label, seriesA, seriesB, ...}` mappings.

    When `series_keys` is omitted every non-label key of the first record is a series.
    """

    rows = list(records)
    if not rows:
        return Dataset(records=(), series_keys=tuple(series_keys or (DEFAULT_SERIES_KEY,)), name=name)

    keys = tuple(series_keys) if series_keys else _series_keys_of(rows[0], label_key)
    out: list[Record] = []
    for index, row in enumerate(rows):
        if not isinstance(row, Mapping):
            raise InvalidValueError(f"record {index} is not a mapping: {row!r}", index=index)
        resolved_label_key = label_key or _detect_label_key(row)
        if resolved_label_key is None or resolved_label_key not in row:
            raise InvalidValueError(f"record {index} has no label field", index=index)
        label = str(row[resolved_label_key])
        values: dict[str, float] = {}
        for key in keys:
            if key not in row:
                raise InvalidValueError(
                    f"record {index} (`{label}`) is missing series `{key}`", index=index, label=label
                )
            values[key] = coerce_value(row[key], index=index, label=label, field=key)
        out.append(Record(label=label, values=values))
    return Dataset(records=tuple(out), series_keys=keys, name=name)


def _series_keys_of(row: Any, label_key: str | None) -> tuple[str, ...]:
    """Every non-label key of the first record, in its order."""

    if not isinstance(row, Mapping):
        raise InvalidValueError(f"record 0 is not a mapping: {row!r}", index=0)
    resolved_label_key = label_key or _detect_label_key(row)
    keys = tuple(k for k in row.keys() if k != resolved_label_key)
    if not keys:
        raise InvalidValueError("record 0 has no numeric series", index=0)
    return keys


def dataset_from_counts(counts: Mapping[str, Any], *, name: str | None = None) -> Dataset:
    """Category → count mapping as a single-series dataset, in mapping order."""

    records = []
    for index, (label, raw) in enumerate(counts.items()):
        value = coerce_value(raw, index=index, label=str(label))
        if value < 0:
            raise InvalidValueError(f"count for `{label}` must be >= 0, got {raw!r}", index=index, label=str(label))
        records.append(Record(label=str(label), values={DEFAULT_SERIES_KEY: value}))
    return Dataset(records=tuple(records), name=name)


def dataset_from_frame(frame: Any, *, label_column: str, series_columns: Sequence[str] | None = None) -> Dataset:
    if pd is None:
        raise InvalidValueError("pandas is required to build datasets from DataFrames")
    if not isinstance(frame, pd.DataFrame):
        raise InvalidValueError("`frame` must be a pandas DataFrame")
    if label_column not in frame.columns:
        raise InvalidValueError(f"column not found: {label_column}")
    columns = list(series_columns) if series_columns else [c for c in frame.columns if c != label_column]
    for column in columns:
        if column not in frame.columns:
            raise InvalidValueError(f"column not found: {column}")
    return dataset_from_records(
        frame[[label_column, *columns]].to_dict(orient="records"),
        series_keys=[str(c) for c in columns],
        label_key=label_column,
    )


def _coerce_sequence(values: Any) -> list[Any]:
    if pd is not None and isinstance(values, pd.Series):
        return values.tolist()
    if isinstance(values, np.ndarray):
        if values.ndim != 1:
            raise InvalidValueError("values must be 1-D")
        return values.tolist()
    if isinstance(values, Sequence) and not isinstance(values, (str, bytes, bytearray)):
        return list(values)
    raise InvalidValueError(f"unsupported values input type: {type(values)!r}")


def _detect_label_key(row: Mapping[str, Any]) -> str | None:
    for key in LABEL_KEYS:
        if key in row:
            return key
    return None


def as_dataset(data: Any, *, name: str | None = None) -> Dataset:
    """Accept a ready `Dataset` or any raw form the other constructors understand."""

    if isinstance(data, Dataset):
        return data
    if pd is not None and isinstance(data, pd.DataFrame):
        raise InvalidValueError("use dataset_from_frame() for DataFrames to name the label column")
    if isinstance(data, Mapping):
        return dataset_from_counts(data, name=name)
    if isinstance(data, Sequence) and not isinstance(data, (str, bytes, bytearray)) and data and isinstance(data[0], Mapping):
        return dataset_from_records(data, name=name)
    return dataset_from_values(data, name=name)

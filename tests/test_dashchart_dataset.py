from __future__ import annotations

from collections.abc import Hashable
from decimal import Decimal
import unittest

import numpy as np

from dashchart import LineChart
from dashchart.adapters import (
    as_dataset,
    coerce_value,
    dataset_from_counts,
    dataset_from_frame,
    dataset_from_records,
    dataset_from_values,
)
from dashchart.dataset import Dataset, Record, StaticDataProvider
from dashchart.errors import ChartDataError, InvalidValueError

try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None


class DatasetTests(unittest.TestCase):
    def test_records_keep_order_and_series(self) -> None:
        dataset = dataset_from_records(
            [
                {"month": "Jan", "track": 40, "pay": 20},
                {"month": "Feb", "track": 55, "pay": 30},
            ]
        )
        self.assertEqual(dataset.labels(), ("Jan", "Feb"))
        self.assertEqual(dataset.series_keys, ("track", "pay"))
        self.assertTrue(dataset.is_multi_series)
        self.assertEqual(dataset.values("pay").tolist(), [20.0, 30.0])
        self.assertEqual(dataset.value(1, "track"), 55.0)

    def test_values_are_read_only(self) -> None:
        dataset = dataset_from_values([1, 2, 3], labels=["a", "b", "c"])
        column = dataset.values()
        with self.assertRaises(ValueError):
            column[0] = 10.0

    def test_record_values_are_immutable(self) -> None:
        record = Record(label="x", values={"value": 1.0})
        with self.assertRaises(TypeError):
            record.values["value"] = 2.0  # type: ignore[index]

    def test_hand_built_record_values_are_checked(self) -> None:
        for raw in ("12", True, None, float("nan")):
            with self.assertRaises(InvalidValueError) as ctx:
                Record(label="Mar", values={"value": raw})
            self.assertEqual(ctx.exception.label, "Mar")
            self.assertIsNone(ctx.exception.index)
        record = Record(label="Apr", values={"value": Decimal("2.5"), "other": np.int64(3)})
        self.assertEqual(dict(record.values), {"value": 2.5, "other": 3.0})
        self.assertIsInstance(record.value("other"), float)

    def test_hand_built_dataset_cannot_reach_a_chart_with_bad_values(self) -> None:
        chart = LineChart()
        with self.assertRaises(InvalidValueError):
            chart.render(Dataset(records=(Record(label="a", values={"value": 1}), Record(label="b", values={"value": "12"}))))
        frame = chart.render(Dataset(records=(Record(label="a", values={"value": 1}), Record(label="b", values={"value": 4}))))
        self.assertEqual(frame.dataset.values().tolist(), [1.0, 4.0])

    def test_records_and_datasets_are_unhashable(self) -> None:
        dataset = dataset_from_values([1, 2])
        self.assertNotIsInstance(dataset, Hashable)
        self.assertNotIsInstance(dataset.records[0], Hashable)
        with self.assertRaises(TypeError):
            hash(dataset)
        with self.assertRaises(TypeError):
            {dataset.records[0]}
        self.assertEqual(dataset, dataset_from_values([1, 2]))

    def test_missing_series_rejected(self) -> None:
        with self.assertRaises(InvalidValueError):
            dataset_from_records([{"label": "a", "value": 1}, {"label": "b"}])
        with self.assertRaises(ValueError):
            Dataset(records=(Record(label="a", values={"x": 1.0}),), series_keys=("y",))

    def test_unknown_series_key(self) -> None:
        dataset = dataset_from_values([1, 2])
        with self.assertRaises(KeyError):
            dataset.values("missing")

    def test_counts_reject_negative(self) -> None:
        dataset = dataset_from_counts({"enrolled": 1012, "enrolling": 29})
        self.assertEqual(dataset.labels(), ("enrolled", "enrolling"))
        with self.assertRaises(InvalidValueError):
            dataset_from_counts({"a": -1})

    def test_record_without_series_rejected(self) -> None:
        with self.assertRaisesRegex(InvalidValueError, "no numeric series"):
            dataset_from_records([{"label": "a"}])
        with self.assertRaises(InvalidValueError):
            dataset_from_records(["a", {"label": "b", "value": 1}])

    def test_label_length_mismatch(self) -> None:
        with self.assertRaises(InvalidValueError):
            dataset_from_values([1, 2], labels=["a"])

    def test_as_dataset_dispatch(self) -> None:
        ready = dataset_from_values([1])
        self.assertIs(as_dataset(ready), ready)
        self.assertEqual(as_dataset({"a": 1, "b": 2}).labels(), ("a", "b"))
        self.assertEqual(as_dataset([{"name": "a", "value": 3}]).values().tolist(), [3.0])
        self.assertEqual(as_dataset(np.asarray([4.0, 5.0])).values().tolist(), [4.0, 5.0])
        self.assertEqual(len(as_dataset([])), 0)

    def test_provider_lookup(self) -> None:
        provider = StaticDataProvider({"monthly": dataset_from_values([1, 2])})
        self.assertEqual(provider.keys(), ("monthly",))
        self.assertEqual(len(provider.dataset("monthly")), 2)
        with self.assertRaises(KeyError):
            provider.dataset("weekly")


class CoerceValueTests(unittest.TestCase):
    def test_accepts_numeric_types(self) -> None:
        self.assertEqual(coerce_value(3, index=0), 3.0)
        self.assertEqual(coerce_value(Decimal("2.5"), index=0), 2.5)
        self.assertEqual(coerce_value(np.int64(7), index=0), 7.0)

    def test_rejects_strings_bools_and_missing(self) -> None:
        for raw in ("12", True, None, float("inf"), [1]):
            with self.assertRaises(InvalidValueError):
                coerce_value(raw, index=2, label="Mar")

    def test_error_carries_position(self) -> None:
        with self.assertRaises(InvalidValueError) as ctx:
            dataset_from_values([1, "x"], labels=["Jan", "Feb"])
        self.assertEqual(ctx.exception.index, 1)
        self.assertEqual(ctx.exception.label, "Feb")
        self.assertIsInstance(ctx.exception, ChartDataError)
        self.assertIsInstance(ctx.exception, ValueError)


@unittest.skipIf(pd is None, "pandas is not installed")
class FrameAdapterTests(unittest.TestCase):
    def test_frame_columns_become_series(self) -> None:
        frame = pd.DataFrame({"month": ["Jan", "Feb"], "track": [40, 55], "pay": [20, 30]})
        dataset = dataset_from_frame(frame, label_column="month")
        self.assertEqual(dataset.series_keys, ("track", "pay"))
        self.assertEqual(dataset.values("track").tolist(), [40.0, 55.0])

    def test_missing_column(self) -> None:
        frame = pd.DataFrame({"month": ["Jan"], "track": [40]})
        with self.assertRaises(InvalidValueError):
            dataset_from_frame(frame, label_column="month", series_columns=["pay"])

    def test_as_dataset_refuses_frames(self) -> None:
        frame = pd.DataFrame({"month": ["Jan"], "track": [40]})
        with self.assertRaises(InvalidValueError):
            as_dataset(frame)

    def test_series_values(self) -> None:
        dataset = dataset_from_values(pd.Series([1.5, 2.5]))
        self.assertEqual(dataset.values().tolist(), [1.5, 2.5])


if __name__ == "__main__":
    unittest.main()

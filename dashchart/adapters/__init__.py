from dashchart.adapters.normalize import (
    as_dataset,
    coerce_value,
    dataset_from_counts,
    dataset_from_frame,
    dataset_from_records,
    dataset_from_values,
)

__all__ = [
    "as_dataset",
    "coerce_value",
    "dataset_from_counts",
    "dataset_from_frame",
    "dataset_from_records",
    "dataset_from_values",
]

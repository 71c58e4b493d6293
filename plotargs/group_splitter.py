"""Split one command's rows into series by a grouping key.

``group=labels`` assigns every data row a label; each distinct label becomes
its own series. Labels keep their *first-seen* order rather than sort order,
so ``group=["b", "a", "b"]`` yields the ``"b"`` series first.

Partitions are disjoint and exhaustive: every row index appears in exactly
one partition. When the data has several columns, series are produced group
by group, and within a group column by column.
"""

from __future__ import annotations

import math
from collections.abc import Hashable, Sequence
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np
import pandas as pd

from .errors import GroupKeyLengthMismatch, InvalidAttributeValue, UnplottableData
from .series_data import SeriesData

# One shared object so every NaN label lands in the same bucket.
_NAN_LABEL = float("nan")


@dataclass(frozen=True)
class GroupPartition:
    """Rows sharing one group label."""

    label: Hashable
    rows: np.ndarray


@dataclass(frozen=True)
class SeriesSlot:
    """One series-to-be: its data, source column and (optional) group rows."""

    data: tuple[np.ndarray, ...]
    column: int
    group: Optional[Hashable] = None
    rows: Optional[np.ndarray] = None


def _label_list(value: Any) -> list[Any]:
    if isinstance(value, (pd.Series, pd.Index, pd.Categorical)):
        return value.tolist()
    if isinstance(value, (str, bytes)) or not isinstance(value, (Sequence, np.ndarray)):
        raise InvalidAttributeValue(
            f"group= expects one label per data row, got a single {type(value).__name__}."
        )
    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise InvalidAttributeValue(f"group= must be one-dimensional, got shape {value.shape}.")
        return value.tolist()
    return list(value)


def _clean_label(label: Any) -> Hashable:
    if isinstance(label, np.generic):
        label = label.item()
    if isinstance(label, float) and math.isnan(label):
        return _NAN_LABEL
    if isinstance(label, list):
        label = tuple(label)
    try:
        hash(label)
    except TypeError as exc:
        raise InvalidAttributeValue(f"group labels must be hashable, got {label!r}.") from exc
    return label


def normalize_group_key(value: Any, n_rows: int) -> list[Hashable]:
    """Return one hashable label per row.

    A tuple of equal-length sequences is a compound key; its labels are
    tuples, e.g. ``group=(sex, treatment)``.

    Raises
    ------
    GroupKeyLengthMismatch
        If the key does not have exactly ``n_rows`` labels.
    """
    if isinstance(value, tuple):
        parts = [_label_list(part) for part in value]
        for part in parts:
            if len(part) != n_rows:
                raise GroupKeyLengthMismatch(n_rows, len(part))
        labels = [tuple(_clean_label(v) for v in row) for row in zip(*parts)]
    else:
        labels = [_clean_label(v) for v in _label_list(value)]
    if len(labels) != n_rows:
        raise GroupKeyLengthMismatch(n_rows, len(labels))
    return labels


def partition_rows(labels: Sequence[Hashable]) -> tuple[GroupPartition, ...]:
    """Partition row indices by label in first-seen order."""
    buckets: dict[Hashable, list[int]] = {}
    for row, label in enumerate(labels):
        buckets.setdefault(label, []).append(row)
    return tuple(
        GroupPartition(label, np.asarray(rows, dtype=np.intp)) for label, rows in buckets.items()
    )


def ungrouped_slots(data: SeriesData) -> list[SeriesSlot]:
    """Each data column is its own series."""
    return [SeriesSlot(parts, column=j) for j, parts in enumerate(data.columns)]


def split_series(data: SeriesData, partitions: Sequence[GroupPartition]) -> list[SeriesSlot]:
    """Slice every data column by every partition, group-major."""
    if data.n_rows is None:
        raise UnplottableData("group= requires every series to have the same number of rows.")
    slots = []
    for partition in partitions:
        for j, parts in enumerate(data.columns):
            slots.append(
                SeriesSlot(
                    tuple(part[partition.rows] for part in parts),
                    column=j,
                    group=partition.label,
                    rows=partition.rows,
                )
            )
    return slots


def group_series(data: SeriesData, key: Any) -> list[SeriesSlot]:
    """Apply grouping when ``key`` is given, else one slot per data column."""
    if key is None:
        return ungrouped_slots(data)
    n_rows = data.n_rows
    if n_rows is None:
        raise UnplottableData("group= requires every series to have the same number of rows.")
    return split_series(data, partition_rows(normalize_group_key(key, n_rows)))


__all__ = [
    "GroupPartition",
    "SeriesSlot",
    "normalize_group_key",
    "partition_rows",
    "ungrouped_slots",
    "split_series",
    "group_series",
]

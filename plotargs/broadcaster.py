"""Per-series attribute broadcasting.

Given ``N`` series, every attribute value resolves to ``N`` concrete values:

- scalars, strings, tuples, ``None`` and ``sequence``-kind values replicate;
- a 1-D list/array of length ``N`` assigns element ``i`` to series ``i``
  (a length-1 vector replicates its element);
- a 2-D array aligns its columns with the series (the axis the data was
  split on); when only its row count equals ``N`` the rows align instead;
- attributes declared ``per_point`` also accept one entry per data row,
  which every series receives sliced to its own rows;
- for grouped data, any other attribute given one entry per data row takes
  the entry at each group's first row.

Anything else raises :class:`~plotargs.errors.BroadcastShapeMismatch`. When
``N`` equals the row count, the per-series reading wins.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Optional

import numpy as np
import pandas as pd

from .attribute_table import AttributeInfo, AttributeTable
from .errors import BroadcastShapeMismatch

_UNBROADCAST_SCOPES = ("magic", "command")


def _scalar(value: Any) -> Any:
    return value.item() if isinstance(value, np.generic) else value


def _as_array(value: Any) -> Optional[np.ndarray]:
    """Return list/array-like values as an object-safe ndarray, else ``None``."""
    if isinstance(value, np.ndarray):
        return value
    if isinstance(value, pd.Series):
        return value.to_numpy()
    if not isinstance(value, list):
        return None
    if value and all(isinstance(item, (list, np.ndarray)) for item in value):
        rows = [list(item) for item in value]
        width = {len(row) for row in rows}
        if len(width) == 1:
            matrix = np.empty((len(rows), width.pop()), dtype=object)
            for i, row in enumerate(rows):
                for j, item in enumerate(row):
                    matrix[i, j] = item
            return matrix
    # Build element-wise so tuple entries (RGB colors, limits) stay whole.
    vector = np.empty(len(value), dtype=object)
    for i, item in enumerate(value):
        vector[i] = item
    return vector


def _per_point(
    info: AttributeInfo,
    values: np.ndarray,
    n_rows: Optional[int],
    rows: Optional[np.ndarray],
) -> Optional[np.ndarray]:
    if not info.per_point or n_rows is None or len(values) != n_rows:
        return None
    return values if rows is None else values[rows]


def broadcast_value(
    info: AttributeInfo,
    value: Any,
    n_series: int,
    *,
    n_rows: Optional[int] = None,
    row_indices: Optional[Sequence[Optional[np.ndarray]]] = None,
) -> list[Any]:
    """Return ``n_series`` concrete values of one attribute."""
    if n_series == 0:
        return []
    rows_for = list(row_indices) if row_indices is not None else [None] * n_series
    if isinstance(value, np.ndarray) and value.ndim == 0:
        value = value.item()
    array = None if info.kind == "sequence" else _as_array(value)
    if array is None:
        return [value] * n_series

    if array.ndim == 1:
        if len(array) == n_series:
            return [_scalar(item) for item in array]
        if len(array) == 1:
            return [_scalar(array[0])] * n_series
        if _per_point(info, array, n_rows, None) is not None:
            return [_per_point(info, array, n_rows, rows) for rows in rows_for]
        if n_rows is not None and len(array) == n_rows and all(rows is not None for rows in rows_for):
            return [_scalar(array[rows[0]]) for rows in rows_for]
        raise BroadcastShapeMismatch(info.key, array.shape, n_series)

    if array.ndim == 2:
        if array.shape[1] == n_series:
            slices = [array[:, j] for j in range(n_series)]
        elif array.shape[0] == n_series:
            slices = [array[i, :] for i in range(n_series)]
        else:
            raise BroadcastShapeMismatch(info.key, array.shape, n_series)
        out = []
        for column, rows in zip(slices, rows_for):
            if len(column) == 1:
                out.append(_scalar(column[0]))
                continue
            per_point = _per_point(info, column, n_rows, rows)
            if per_point is None:
                raise BroadcastShapeMismatch(info.key, array.shape, n_series)
            out.append(per_point)
        return out

    raise BroadcastShapeMismatch(info.key, array.shape, n_series)


def broadcast_attributes(
    attributes: Mapping[str, Any],
    table: AttributeTable,
    n_series: int,
    *,
    n_rows: Optional[int] = None,
    row_indices: Optional[Sequence[Optional[np.ndarray]]] = None,
) -> list[dict[str, Any]]:
    """Resolve every broadcastable table key into ``n_series`` attribute maps.

    Parameters
    ----------
    attributes : Mapping[str, Any]
        Canonical attributes after magic expansion and recipes.
    table : AttributeTable
        Supplies defaults, kinds and per-point capability.
    n_series : int
        Number of series ``N``.
    n_rows : int, optional
        Rows of the original data, enabling per-point vectors.
    row_indices : sequence, optional
        For grouped data, each series' row indices into the original rows.

    Returns
    -------
    list[dict[str, Any]]
        One complete attribute map per series. Keys absent from
        ``attributes`` take the table default.
    """
    per_series: list[dict[str, Any]] = [{} for _ in range(n_series)]
    for key, info in table.items():
        if info.scope in _UNBROADCAST_SCOPES:
            continue
        value = attributes[key] if key in attributes else info.default
        values = broadcast_value(info, value, n_series, n_rows=n_rows, row_indices=row_indices)
        for target, item in zip(per_series, values):
            target[key] = item
    return per_series


__all__ = ["broadcast_value", "broadcast_attributes"]

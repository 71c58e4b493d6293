"""Turn recipe-fixpoint positional data into per-series column tuples.

After recipes have run, positional data is expected to be array-like. This
module applies the plotting-call grammar:

- ``(y,)``       -> ``x`` defaults to ``0 .. n-1``
- ``(x, y)``     -> 2-D series
- ``(x, y, z)``  -> 3-D series

A 1-D array is one column, a 2-D array contributes one column per matrix
column, and a :class:`ColumnSet` contributes ragged columns. Arguments with a
single column pair with every column of the others.

A :class:`SampledFunction` given alone plots its own samples; given after
``x`` it is evaluated at ``x`` instead. Anywhere else it is unplottable.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np

from .errors import UnplottableData

_AXIS_NAMES = ("x", "y", "z")


class ColumnSet(Sequence[np.ndarray]):
    """Ragged collection of 1-D columns, one per series.

    Produced by recipes for inputs such as a list of lists whose inner
    lists have different lengths. It has no recipe, so it is terminal.
    """

    def __init__(self, columns: Iterable[Any]) -> None:
        arrays = tuple(np.asarray(column) for column in columns)
        for array in arrays:
            if array.ndim != 1:
                raise UnplottableData(
                    f"ColumnSet columns must be 1-D, got an array of shape {array.shape}."
                )
        self._columns = arrays

    def __getitem__(self, index: Any) -> Any:
        return self._columns[index]

    def __len__(self) -> int:
        return len(self._columns)

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self._columns)

    def __repr__(self) -> str:
        lengths = ", ".join(str(len(c)) for c in self._columns)
        return f"ColumnSet([{lengths}])"


@dataclass(frozen=True)
class SampledFunction:
    """A function of ``x`` together with its samples over the default domain.

    Produced by the function and expression recipes. It has no recipe, so it
    is terminal.
    """

    function: Callable[..., Any]
    x: np.ndarray
    y: np.ndarray
    name: str = ""

    @classmethod
    def sample(cls, function: Callable[..., Any], xs: np.ndarray, name: str = "") -> SampledFunction:
        return cls(function, xs, evaluate_function(function, xs, name), name)

    def evaluate(self, xs: Any) -> np.ndarray:
        """Return the function at ``xs`` as a float array of the same shape."""
        return evaluate_function(self.function, xs, self.name)


def evaluate_function(function: Callable[..., Any], xs: Any, name: str = "") -> np.ndarray:
    try:
        points = np.asarray(xs, dtype=float)
    except (TypeError, ValueError) as exc:
        raise UnplottableData(f"Cannot evaluate {name or 'a function'} at non-numeric x values.") from exc
    ys = np.asarray(function(points), dtype=float)
    # Constants compile to scalars; give them the sample shape.
    return np.broadcast_to(ys, points.shape).copy()


@dataclass(frozen=True)
class SeriesData:
    """Per-series data tuples ``(x, y)`` or ``(x, y, z)`` in series order."""

    columns: tuple[tuple[np.ndarray, ...], ...]

    @property
    def n_series(self) -> int:
        return len(self.columns)

    @property
    def n_rows(self) -> Optional[int]:
        """Common row count of every series, ``None`` for ragged data."""
        lengths = {len(parts[0]) for parts in self.columns}
        if not lengths:
            return 0
        return lengths.pop() if len(lengths) == 1 else None


def _as_columns(value: Any, position: int) -> list[np.ndarray]:
    if isinstance(value, ColumnSet):
        return list(value)
    array = value if isinstance(value, np.ndarray) else np.asarray(value)
    if array.ndim == 1:
        return [array]
    if array.ndim == 2:
        return [array[:, j] for j in range(array.shape[1])]
    raise UnplottableData(
        f"Cannot plot positional argument {position} of type {type(value).__name__} "
        f"(array shape {array.shape}); register a recipe that converts it to 1-D or 2-D data."
    )


def _place_functions(args: Sequence[Any]) -> Sequence[Any]:
    positions = [i for i, value in enumerate(args) if isinstance(value, SampledFunction)]
    if not positions:
        return args
    if len(args) == 1:
        only = args[0]
        return (only.x, only.y)
    if len(args) == 2 and positions == [1]:
        x, function = args
        if isinstance(x, ColumnSet):
            return (x, ColumnSet(function.evaluate(column) for column in x))
        return (x, function.evaluate(x))
    shown = args[positions[0]].name or "a function"
    raise UnplottableData(
        f"Cannot plot {shown} as positional argument {positions[0]} of {len(args)}; "
        "pass a function alone or as y after the x values to evaluate it at."
    )


def shape_series_data(args: Sequence[Any]) -> SeriesData:
    """Pair positional arguments into per-series column tuples.

    Raises
    ------
    UnplottableData
        For more than three positional arguments, non-array data, column
        counts that do not pair up, or paired columns of different lengths.
    """
    args = _place_functions(args)
    if not args:
        return SeriesData(())
    if len(args) > len(_AXIS_NAMES):
        raise UnplottableData(
            f"Expected at most {len(_AXIS_NAMES)} positional data arguments (x, y, z), got {len(args)}."
        )

    axes = [_as_columns(value, i) for i, value in enumerate(args)]
    if len(axes) == 1:
        axes.insert(0, [np.arange(len(column)) for column in axes[0]])

    n_columns = max(len(columns) for columns in axes)
    for name, columns in zip(_AXIS_NAMES, axes):
        if len(columns) not in (1, n_columns):
            raise UnplottableData(
                f"{name} provides {len(columns)} columns but another argument provides {n_columns}; "
                "pass one column or the same number of columns."
            )

    series = []
    for j in range(n_columns):
        parts = tuple(columns[0] if len(columns) == 1 else columns[j] for columns in axes)
        lengths = [len(part) for part in parts]
        if len(set(lengths)) > 1:
            shown = ", ".join(f"{n}={m}" for n, m in zip(_AXIS_NAMES, lengths))
            raise UnplottableData(f"Series {j + 1} has mismatched lengths: {shown}.")
        series.append(parts)
    return SeriesData(tuple(series))


__all__ = ["ColumnSet", "SampledFunction", "SeriesData", "evaluate_function", "shape_series_data"]

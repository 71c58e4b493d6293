"""Recipes the default registry is seeded with.

Purpose
-------
Convert the inputs users most often pass to a plot call into arrays:

- ``range`` and ``list`` values become NumPy arrays (a list of sequences
  becomes a :class:`~plotargs.series_data.ColumnSet`, one series each);
- pandas ``Series``/``DataFrame`` become their numeric values, suggesting
  labels from their names;
- SymPy expressions, Python functions and NumPy ufuncs are sampled over the
  x-limits (or ``DEFAULT_DOMAIN``) into a
  :class:`~plotargs.series_data.SampledFunction`; given after ``x`` values
  they are evaluated there instead.

Sampling
--------
Symbolic expressions are compiled once per ``(expr, var)`` and cached, so
re-plotting the same expression does not re-run ``lambdify``. Sample count
comes from the ``sampling_points`` attribute. A logarithmic ``xscale`` with a
positive domain samples geometrically.
"""

from __future__ import annotations

import logging
import types
from collections.abc import Callable, Mapping
from functools import lru_cache
from typing import Any

import numpy as np
import pandas as pd
import sympy as sp
from sympy.core.expr import Expr
from sympy.core.symbol import Symbol

from .errors import InvalidAttributeValue, UnplottableData
from .recipes import RecipeResult, Transform
from .series_data import ColumnSet, SampledFunction

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

DEFAULT_DOMAIN: tuple[float, float] = (-4.0, 4.0)

_LOG_SCALES = ("log", "log10", "log2", "ln")
_COMPILE_CACHE_MAXSIZE = 256


def _sample_points(attributes: Mapping[str, Any]) -> np.ndarray:
    num = attributes.get("sampling_points")
    if isinstance(num, bool) or not isinstance(num, (int, np.integer)) or num < 2:
        raise InvalidAttributeValue(f"sampling_points must be an integer >= 2, got {num!r}.")

    limits = attributes.get("xlims")
    if (
        isinstance(limits, tuple)
        and len(limits) == 2
        and all(isinstance(v, (int, float, np.number)) and not isinstance(v, bool) for v in limits)
    ):
        x_min, x_max = float(limits[0]), float(limits[1])
    else:
        x_min, x_max = DEFAULT_DOMAIN

    if attributes.get("xscale") in _LOG_SCALES and 0 < x_min < x_max:
        return np.geomspace(x_min, x_max, num=int(num))
    return np.linspace(x_min, x_max, num=int(num))


@lru_cache(maxsize=_COMPILE_CACHE_MAXSIZE)
def _compile_expression(expr: Expr, var: Symbol) -> Callable[..., Any]:
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("compile cache MISS for %s in %s", expr, var)
    return sp.lambdify(var, expr, modules="numpy")


def expression_recipe(expr: Expr, attributes: Mapping[str, Any]) -> RecipeResult:
    """Sample a SymPy expression of at most one free symbol."""
    free = sorted(expr.free_symbols, key=lambda s: s.sort_key())
    if len(free) > 1:
        names = ", ".join(s.name for s in free)
        raise UnplottableData(
            f"Cannot sample {expr} with several free symbols ({names}); "
            "substitute values for all but the plotting variable."
        )
    var = free[0] if free else sp.Symbol("x")
    xs = _sample_points(attributes)
    sampled = SampledFunction.sample(_compile_expression(expr, var), xs, str(expr))
    return RecipeResult((sampled,), {"label": str(expr), "xguide": var.name})


def function_recipe(fn: Callable[..., Any], attributes: Mapping[str, Any]) -> RecipeResult:
    """Sample a vectorized one-argument Python callable."""
    name = getattr(fn, "__name__", "")
    sampled = SampledFunction.sample(fn, _sample_points(attributes), name)
    suggested = {"label": name} if name and name != "<lambda>" else {}
    return RecipeResult((sampled,), suggested)


def range_recipe(value: range, attributes: Mapping[str, Any]) -> np.ndarray:
    return np.asarray(value)


def list_recipe(value: list, attributes: Mapping[str, Any]) -> Any:
    """Numbers become an array, a list of sequences one series per entry."""
    if value and all(isinstance(item, (list, tuple, range, np.ndarray, pd.Series)) for item in value):
        return ColumnSet(np.asarray(item) for item in value)
    return np.asarray(value)


def pandas_series_recipe(series: pd.Series, attributes: Mapping[str, Any]) -> RecipeResult:
    suggested: dict[str, Any] = {}
    # Grouped series label by group instead.
    if series.name is not None and attributes.get("group") is None:
        suggested["label"] = str(series.name)
    return RecipeResult((series.to_numpy(),), suggested)


def dataframe_recipe(frame: pd.DataFrame, attributes: Mapping[str, Any]) -> RecipeResult:
    """One series per numeric column, labelled by column name."""
    numeric = frame.select_dtypes(include="number")
    if numeric.shape[1] == 0:
        raise UnplottableData("DataFrame has no numeric columns to plot.")
    suggested: dict[str, Any] = {}
    # Grouped frames label series by group instead.
    if attributes.get("group") is None:
        suggested["label"] = [[str(column) for column in numeric.columns]]
    return RecipeResult((numeric.to_numpy(dtype=float),), suggested)


def default_recipes() -> dict[type, Transform]:
    """Return the recipes the default registry is seeded with."""
    return {
        range: range_recipe,
        list: list_recipe,
        pd.Series: pandas_series_recipe,
        pd.DataFrame: dataframe_recipe,
        Expr: expression_recipe,
        types.FunctionType: function_recipe,
        np.ufunc: function_recipe,
    }


__all__ = [
    "DEFAULT_DOMAIN",
    "expression_recipe",
    "function_recipe",
    "range_recipe",
    "list_recipe",
    "pandas_series_recipe",
    "dataframe_recipe",
    "default_recipes",
]

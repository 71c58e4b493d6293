"""Resolve one plot command into fully specified series.

Purpose
-------
:func:`resolve` is the single entry point renderers call. It runs every stage
in a fixed order, each a pure function of its input and one registry
snapshot::

    Raw -> AliasResolved -> MagicExpanded -> RecipeFixpoint
        -> Grouped -> Broadcast -> Resolved

No stage is skipped; a plain ``resolve(([1, 2, 3],))`` passes through magic
expansion and grouping as no-ops.

Architecture
------------
The registry snapshot is taken once per call, so an extension registered on
another thread mid-call is seen by the *next* call only. The caller's
positional values and attribute mapping are never mutated; every
:class:`~plotargs.SeriesSpec.SeriesSpec` owns read-only copies of its data.

The final stage fills ``"auto"`` values: series colours cycle the colour
palette, line/marker/fill colours follow the series colour, and labels come
from the group label or the series number.

Examples
--------
>>> import numpy as np
>>> from plotargs.pipeline import resolve
>>> specs = resolve((np.ones((5, 3)),), {"line": (0.5, [4, 1, 0])})
>>> [spec["linewidth"] for spec in specs]
[4, 1, 0]
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import plotly.colors

from .SeriesSpec import SeriesSpec
from .alias_resolver import resolve_aliases
from .broadcaster import broadcast_attributes
from .errors import InvalidAttributeValue
from .group_splitter import SeriesSlot, group_series
from .magic_arguments import expand_magic_arguments
from .recipes import DEFAULT_MAX_RECIPE_DEPTH, apply_recipes
from .registry import PlotRegistry, default_registry
from .series_data import shape_series_data

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

_DERIVED_COLORS = ("linecolor", "markercolor", "fillcolor")


class PipelineStage(Enum):
    RAW = "Raw"
    ALIAS_RESOLVED = "AliasResolved"
    MAGIC_EXPANDED = "MagicExpanded"
    RECIPE_FIXPOINT = "RecipeFixpoint"
    GROUPED = "Grouped"
    BROADCAST = "Broadcast"
    RESOLVED = "Resolved"


@dataclass(frozen=True)
class PipelineOptions:
    """Per-call knobs for :func:`resolve`.

    Parameters
    ----------
    max_recipe_depth : int, optional
        Longest chain of recipe transforms allowed for one positional value.
    label_prefix : str, optional
        Prefix of automatic labels for ungrouped series (``y1``, ``y2``, ...).
    """

    max_recipe_depth: int = DEFAULT_MAX_RECIPE_DEPTH
    label_prefix: str = "y"

    def __post_init__(self) -> None:
        """Validate option values."""
        if isinstance(self.max_recipe_depth, bool) or not isinstance(self.max_recipe_depth, int):
            raise TypeError("max_recipe_depth must be an integer")
        if self.max_recipe_depth < 1:
            raise ValueError("max_recipe_depth must be >= 1")
        if not isinstance(self.label_prefix, str):
            raise TypeError("label_prefix must be a string")


def _log_stage(stage: PipelineStage, detail: str) -> None:
    logger.debug("stage %s: %s", stage.value, detail)


def _is_auto(value: Any) -> bool:
    return isinstance(value, str) and value == "auto"


def _palette(value: Any) -> tuple[Any, ...]:
    """Return the colours of a palette given by plotly name or as a sequence."""
    if isinstance(value, str):
        colors = getattr(plotly.colors.qualitative, value, None)
        if not isinstance(colors, list):
            raise InvalidAttributeValue(
                f"Unknown color_palette {value!r}; use a plotly.colors.qualitative name "
                "(e.g. 'Plotly', 'D3', 'Set1') or a sequence of colours."
            )
        return tuple(colors)
    if isinstance(value, (list, tuple)) and value:
        return tuple(value)
    raise InvalidAttributeValue(f"color_palette must be a palette name or a non-empty sequence, got {value!r}.")


def _group_label(group: Hashable) -> str:
    if isinstance(group, tuple):
        return ", ".join(str(part) for part in group)
    return str(group)


def _finalize(
    index: int,
    slot: SeriesSlot,
    values: dict[str, Any],
    *,
    n_columns: int,
    options: PipelineOptions,
) -> SeriesSpec:
    if _is_auto(values.get("seriescolor")):
        palette = _palette(values["color_palette"])
        values["seriescolor"] = palette[index % len(palette)]
    for key in _DERIVED_COLORS:
        if key in values and _is_auto(values[key]):
            values[key] = values["seriescolor"]

    if _is_auto(values.get("label")):
        if slot.group is not None:
            label = _group_label(slot.group)
            if n_columns > 1:
                label = f"{label} {options.label_prefix}{slot.column + 1}"
        else:
            label = f"{options.label_prefix}{index + 1}"
        values["label"] = label

    return SeriesSpec(index=index, data=slot.data, attributes=values, group=slot.group)


def resolve(
    positional_data: Any,
    attribute_map: Optional[Mapping[str, Any]] = None,
    *,
    registry: Optional[PlotRegistry] = None,
    options: Optional[PipelineOptions] = None,
) -> tuple[SeriesSpec, ...]:
    """Resolve one plot command into an ordered tuple of series.

    Parameters
    ----------
    positional_data : tuple or list
        Positional plot arguments, e.g. ``(x, y)`` or ``(frame,)``. Any other
        value is taken as the single positional argument.
    attribute_map : Mapping[str, Any], optional
        Keyword attributes under any spelling: canonical keys, aliases or
        magic-group names.
    registry : PlotRegistry, optional
        Registry to resolve against. Defaults to the process-wide registry.
    options : PipelineOptions, optional
        Per-call options.

    Returns
    -------
    tuple[SeriesSpec, ...]
        One spec per series, in data-column order (group-major when grouped).

    Raises
    ------
    PlotArgumentError
        Any member of the error taxonomy, from the stage that detects it.
    """
    options = options or PipelineOptions()
    snapshot = (registry or default_registry()).snapshot()
    table = snapshot.table

    if isinstance(positional_data, (tuple, list)):
        args = tuple(positional_data)
    else:
        args = (positional_data,)
    raw = dict(attribute_map or {})
    _log_stage(PipelineStage.RAW, f"{len(args)} positional value(s), attributes {sorted(raw)}")

    attributes = resolve_aliases(raw, table)
    _log_stage(PipelineStage.ALIAS_RESOLVED, f"{sorted(attributes)}")

    attributes = expand_magic_arguments(attributes, table, snapshot.magic_groups)
    _log_stage(PipelineStage.MAGIC_EXPANDED, f"{sorted(attributes)}")

    args, attributes = apply_recipes(
        args,
        attributes,
        recipes=snapshot.recipes,
        table=table,
        groups=snapshot.magic_groups,
        max_depth=options.max_recipe_depth,
    )
    data = shape_series_data(args)
    _log_stage(PipelineStage.RECIPE_FIXPOINT, f"{data.n_series} data column(s), rows={data.n_rows}")

    slots = group_series(data, attributes.get("group"))
    _log_stage(PipelineStage.GROUPED, f"{len(slots)} series")

    per_series = broadcast_attributes(
        attributes,
        table,
        len(slots),
        n_rows=data.n_rows,
        row_indices=[slot.rows for slot in slots],
    )
    _log_stage(PipelineStage.BROADCAST, f"{len(per_series)} attribute map(s)")

    specs = tuple(
        _finalize(i, slot, values, n_columns=data.n_series, options=options)
        for i, (slot, values) in enumerate(zip(slots, per_series))
    )
    _log_stage(PipelineStage.RESOLVED, f"{len(specs)} series")
    return specs


def series_specs(
    *args: Any,
    registry: Optional[PlotRegistry] = None,
    options: Optional[PipelineOptions] = None,
    **attributes: Any,
) -> tuple[SeriesSpec, ...]:
    """Call-style wrapper: ``series_specs(x, y, lw=2)``."""
    return resolve(args, attributes, registry=registry, options=options)


__all__ = [
    "PipelineStage",
    "PipelineOptions",
    "resolve",
    "series_specs",
]

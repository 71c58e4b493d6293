"""Plotly adapter for resolved series.

Purpose
-------
Turn the output of :func:`~plotargs.pipeline.resolve` into Plotly graph
objects. Every value is read straight from the
:class:`~plotargs.SeriesSpec.SeriesSpec` attribute maps; nothing is
re-resolved here.

Supported series types
----------------------
``path``/``line``/``steppre``/``steppost`` and ``scatter`` become
``go.Scatter``; ``path3d``/``scatter3d`` become ``go.Scatter3d``; ``bar``
becomes ``go.Bar``; ``histogram``/``density`` become ``go.Histogram`` over the
series' ``y`` values. ``none`` draws nothing. Other types raise ``ValueError``.

Axis and plot attributes are read from the first series, since they are
shared by the whole command.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import Any, Dict, List, Optional

import numpy as np
import plotly.colors
import plotly.graph_objects as go

from .SeriesSpec import SeriesSpec

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

_LINE_TYPES = {"path", "line", "steppre", "steppost", "path3d"}
_MARKER_TYPES = {"scatter", "scatter3d"}
_THREE_D_TYPES = {"path3d", "scatter3d"}
_STEP_SHAPES = {"steppre": "vh", "steppost": "hv"}
_LOG_SCALES = {"log", "log10", "log2", "ln"}

_DASHES = {
    "auto": "solid",
    "solid": "solid",
    "dash": "dash",
    "dot": "dot",
    "dashdot": "dashdot",
    "dashdotdot": "10px,4px,2px,4px,2px,4px",
    "longdash": "longdash",
    "longdashdot": "longdashdot",
}

_SYMBOLS = {
    "auto": "circle",
    "circle": "circle",
    "o": "circle",
    "rect": "square",
    "square": "square",
    "s": "square",
    "star5": "star",
    "*": "star",
    "diamond": "diamond",
    "d": "diamond",
    "hexagon": "hexagon",
    "cross": "cross",
    "+": "cross",
    "xcross": "x",
    "x": "x",
    "utriangle": "triangle-up",
    "^": "triangle-up",
    "dtriangle": "triangle-down",
    "v": "triangle-down",
    "pentagon": "pentagon",
    "octagon": "octagon",
    "vline": "line-ns",
    "hline": "line-ew",
}


def _plotly_color(color: Any, alpha: Optional[float] = None) -> Any:
    """Return ``color`` in a form Plotly accepts, applying ``alpha`` where possible.

    RGB(A) tuples are read as fractions when every channel is at most 1.
    Named colours keep their name; their alpha is carried by trace opacity.
    """
    if color is None:
        return None
    if isinstance(color, np.ndarray):
        return [_plotly_color(item, alpha) for item in color.tolist()]
    if isinstance(color, tuple):
        channels = [float(v) for v in color[:3]]
        if all(v <= 1.0 for v in channels):
            channels = [v * 255.0 for v in channels]
        rgb = tuple(int(round(v)) for v in channels)
        if len(color) == 4 and alpha is None:
            alpha = float(color[3])
    elif isinstance(color, str) and color.startswith("#"):
        rgb = plotly.colors.hex_to_rgb(color)
    elif isinstance(color, str) and color.startswith("rgb(") and alpha is not None:
        rgb = tuple(int(float(v)) for v in plotly.colors.unlabel_rgb(color))
    else:
        return color
    if alpha is None:
        return "rgb({}, {}, {})".format(*rgb)
    return "rgba({}, {}, {}, {})".format(*rgb, alpha)


def _per_point(value: Any, mapping: Optional[Dict[str, str]] = None) -> Any:
    if isinstance(value, np.ndarray):
        items = value.tolist()
        return [mapping.get(item, item) for item in items] if mapping else items
    return mapping.get(value, value) if mapping and isinstance(value, str) else value


def _first_set(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def _marker(spec: SeriesSpec) -> Dict[str, Any]:
    shape = spec["markershape"]
    if isinstance(shape, str) and shape == "none":
        shape = "circle"
    alpha = _first_set(spec["markeralpha"], spec["seriesalpha"])
    return dict(
        symbol=_per_point(shape, _SYMBOLS),
        size=_per_point(spec["markersize"]),
        color=_plotly_color(spec["markercolor"]),
        opacity=alpha,
        line=dict(
            width=spec["markerstrokewidth"],
            color=_plotly_color(spec["markerstrokecolor"], spec["markerstrokealpha"]),
        ),
    )


def _fill(spec: SeriesSpec) -> Dict[str, Any]:
    fillrange = spec["fillrange"]
    if fillrange is None:
        return {}
    if isinstance(fillrange, (int, float)) and not isinstance(fillrange, bool) and fillrange == 0:
        return dict(
            fill="tozeroy",
            fillcolor=_plotly_color(spec["fillcolor"], _first_set(spec["fillalpha"], spec["seriesalpha"])),
        )
    raise ValueError(f"Plotly can only fill to zero; series {spec.index} has fillrange={fillrange!r}.")


def _scatter_trace(spec: SeriesSpec) -> go.BaseTraceType:
    seriestype = spec.seriestype
    has_marker = seriestype in _MARKER_TYPES or _per_point(spec["markershape"]) != "none"
    modes = []
    if seriestype in _LINE_TYPES:
        modes.append("lines")
    if has_marker:
        modes.append("markers")

    kwargs: Dict[str, Any] = dict(
        x=spec.x,
        y=spec.y,
        mode="+".join(modes),
        name=spec.label,
        showlegend=bool(spec.label),
        opacity=_first_set(spec["linealpha"], spec["seriesalpha"]),
    )
    if "lines" in modes:
        kwargs["line"] = dict(
            color=_plotly_color(spec["linecolor"]),
            width=spec["linewidth"],
            dash=_DASHES.get(spec["linestyle"], spec["linestyle"]),
        )
    if has_marker:
        kwargs["marker"] = _marker(spec)

    if seriestype in _THREE_D_TYPES:
        if spec.z is None:
            raise ValueError(f"Series {spec.index} of type {seriestype!r} needs x, y and z data.")
        kwargs["z"] = spec.z
        kwargs["line"] = {k: v for k, v in kwargs.get("line", {}).items() if k != "dash"} or None
        return go.Scatter3d(**{k: v for k, v in kwargs.items() if v is not None})

    if seriestype in _STEP_SHAPES:
        kwargs["line"]["shape"] = _STEP_SHAPES[seriestype]
    kwargs.update(_fill(spec))
    return go.Scatter(**kwargs)


def _trace(spec: SeriesSpec) -> Optional[go.BaseTraceType]:
    seriestype = spec.seriestype
    if seriestype == "none":
        return None
    if seriestype in _LINE_TYPES or seriestype in _MARKER_TYPES:
        return _scatter_trace(spec)
    if seriestype == "bar":
        return go.Bar(
            x=spec.x,
            y=spec.y,
            name=spec.label,
            showlegend=bool(spec.label),
            marker_color=_plotly_color(spec["fillcolor"]),
            opacity=_first_set(spec["fillalpha"], spec["seriesalpha"]),
        )
    if seriestype in ("histogram", "density"):
        return go.Histogram(
            x=spec.y,
            name=spec.label,
            showlegend=bool(spec.label),
            histnorm="probability density" if seriestype == "density" else "",
            marker_color=_plotly_color(spec["fillcolor"]),
            opacity=_first_set(spec["fillalpha"], spec["seriesalpha"]),
        )
    raise ValueError(f"The Plotly adapter does not draw series type {seriestype!r} (series {spec.index}).")


def to_plotly_traces(specs: Sequence[SeriesSpec]) -> List[go.BaseTraceType]:
    """Return one Plotly trace per drawable series, in series order."""
    traces = []
    for spec in specs:
        trace = _trace(spec)
        if trace is None:
            logger.debug("series %d has type 'none'; no trace", spec.index)
            continue
        traces.append(trace)
    return traces


def _axis_layout(spec: SeriesSpec, letter: str) -> Dict[str, Any]:
    axis: Dict[str, Any] = dict(
        showgrid=bool(spec[f"{letter}grid"]),
        visible=bool(spec[f"{letter}showaxis"]),
    )
    if spec[f"{letter}guide"]:
        axis["title"] = dict(text=str(spec[f"{letter}guide"]))
    if spec[f"{letter}rotation"]:
        # Plotly rotates tick labels clockwise.
        axis["tickangle"] = -spec[f"{letter}rotation"]

    is_log = spec[f"{letter}scale"] in _LOG_SCALES
    if is_log:
        axis["type"] = "log"

    limits = spec[f"{letter}lims"]
    flip = bool(spec[f"{letter}flip"])
    if isinstance(limits, tuple) and len(limits) == 2 and None not in limits:
        low, high = (float(v) for v in limits)
        if is_log:
            low, high = math.log10(low), math.log10(high)
        axis["range"] = [high, low] if flip else [low, high]
    elif flip:
        axis["autorange"] = "reversed"

    ticks = spec[f"{letter}ticks"]
    if isinstance(ticks, str):
        if ticks == "none":
            axis["showticklabels"] = False
            axis["ticks"] = ""
    elif isinstance(ticks, (tuple, list, np.ndarray)):
        axis["tickvals"] = list(ticks)
    elif isinstance(ticks, (int, float)) and not isinstance(ticks, bool):
        axis["dtick"] = ticks
    return axis


def plotly_layout(specs: Sequence[SeriesSpec]) -> Dict[str, Any]:
    """Return Plotly layout keyword arguments for one resolved command."""
    layout: Dict[str, Any] = dict(template="plotly_white")
    if not specs:
        return layout
    first = specs[0]
    if first["title"]:
        layout["title"] = dict(text=str(first["title"]))
    layout["showlegend"] = first["legend"] != "none"

    if any(spec.seriestype in _THREE_D_TYPES for spec in specs):
        layout["scene"] = {f"{letter}axis": _axis_layout(first, letter) for letter in "xyz"}
    else:
        layout["xaxis"] = _axis_layout(first, "x")
        layout["yaxis"] = _axis_layout(first, "y")
    return layout


def to_plotly_figure(specs: Sequence[SeriesSpec]) -> go.Figure:
    """Return a ``go.Figure`` drawing ``specs``."""
    return go.Figure(data=to_plotly_traces(specs), layout=plotly_layout(specs))


__all__ = ["to_plotly_traces", "plotly_layout", "to_plotly_figure"]

"""Seeded attribute declarations and the tag vocabularies they accept.

The process-wide registry starts from :func:`default_attributes`. Keeping the
declarations out of ``attribute_table.py`` gives tests and extensions one place
to read which keys, aliases and defaults exist.
"""

from __future__ import annotations

from .attribute_table import AttributeInfo

AXIS_LETTERS: tuple[str, ...] = ("x", "y", "z")

SERIES_TYPES: frozenset[str] = frozenset(
    {
        "path",
        "line",
        "scatter",
        "steppre",
        "steppost",
        "sticks",
        "bar",
        "histogram",
        "density",
        "heatmap",
        "contour",
        "surface",
        "path3d",
        "scatter3d",
        "hline",
        "vline",
        "none",
    }
)

LINE_STYLES: frozenset[str] = frozenset(
    {"auto", "solid", "dash", "dot", "dashdot", "dashdotdot", "longdash", "longdashdot"}
)

# Long names plus the one-letter codes users type out of matplotlib habit.
MARKER_SHAPES: frozenset[str] = frozenset(
    {
        "none",
        "auto",
        "circle",
        "rect",
        "square",
        "star5",
        "diamond",
        "hexagon",
        "cross",
        "xcross",
        "utriangle",
        "dtriangle",
        "pentagon",
        "octagon",
        "vline",
        "hline",
        "o",
        "s",
        "x",
        "d",
        "^",
        "v",
        "+",
        "*",
    }
)

SCALES: frozenset[str] = frozenset({"identity", "linear", "log", "log10", "log2", "ln"})

LEGEND_POSITIONS: frozenset[str] = frozenset(
    {"none", "best", "right", "left", "top", "bottom", "inside", "topright", "topleft", "bottomright", "bottomleft"}
)


def _series_attributes() -> list[AttributeInfo]:
    return [
        AttributeInfo(
            "seriestype", "path", aliases=("st", "t", "typ", "linetype", "lt"),
            doc="How the series is drawn, e.g. path, scatter, bar, density.",
        ),
        AttributeInfo("label", "auto", aliases=("lab",), doc="Legend entry; 'auto' numbers series or uses the group label."),
        AttributeInfo(
            "seriescolor", "auto", aliases=("c", "color", "colour"),
            doc="Base color of the series; 'auto' cycles the color palette.",
        ),
        AttributeInfo(
            "seriesalpha", None, aliases=("alpha", "opacity"),
            doc="Overall opacity from 0.0 (transparent) to 1.0 (opaque).",
        ),
        AttributeInfo("linecolor", "auto", aliases=("lc", "lcolor", "lcolour", "linecolour"), doc="Line color; 'auto' follows seriescolor."),
        AttributeInfo("linealpha", None, aliases=("la", "lalpha", "lineopacity"), doc="Line opacity."),
        AttributeInfo("linewidth", 1, aliases=("w", "width", "lw", "thickness"), doc="Line width in pixels."),
        AttributeInfo("linestyle", "solid", aliases=("style", "ls", "dash"), doc="Line pattern, e.g. solid, dash, dot."),
        AttributeInfo(
            "markershape", "none", per_point=True, aliases=("shape", "mshape", "markershapes"),
            bool_values=("circle", "none"), doc="Marker glyph; True means circle, False means none.",
        ),
        AttributeInfo("markersize", 4, per_point=True, aliases=("ms", "msize"), doc="Marker size in pixels."),
        AttributeInfo(
            "markercolor", "auto", per_point=True, aliases=("mc", "mcolor", "markercolour", "mcolour"),
            doc="Marker fill color; 'auto' follows seriescolor.",
        ),
        AttributeInfo("markeralpha", None, per_point=True, aliases=("ma", "malpha", "markeropacity"), doc="Marker opacity."),
        AttributeInfo("markerstrokewidth", 1, aliases=("msw", "mswidth"), doc="Marker outline width."),
        AttributeInfo("markerstrokecolor", "black", aliases=("msc", "mscolor", "mscolour"), doc="Marker outline color."),
        AttributeInfo("markerstrokealpha", None, aliases=("msa", "msalpha"), doc="Marker outline opacity."),
        AttributeInfo(
            "fillrange", None, per_point=True, aliases=("frange", "fillto", "fill_between"),
            bool_values=(0, None), doc="Level the area under the series is filled to; True means 0.",
        ),
        AttributeInfo("fillcolor", "auto", aliases=("fc", "fcolor", "fillcolour"), doc="Fill color; 'auto' follows seriescolor."),
        AttributeInfo("fillalpha", None, aliases=("fa", "falpha", "fillopacity"), doc="Fill opacity."),
    ]


def _axis_attributes(letter: str) -> list[AttributeInfo]:
    return [
        AttributeInfo(f"{letter}guide", "", scope="axis", aliases=(f"{letter}label", f"{letter}lab"), doc="Axis label."),
        AttributeInfo(
            f"{letter}lims", "auto", scope="axis", aliases=(f"{letter}lim", f"{letter}limits", f"{letter}range"),
            doc="Axis limits as a (low, high) pair, or 'auto'.",
        ),
        AttributeInfo(
            f"{letter}ticks", "auto", scope="axis", kind="sequence", aliases=(f"{letter}tick",),
            bool_values=("auto", "none"), doc="Tick positions, a spacing, 'auto' or 'none'.",
        ),
        AttributeInfo(f"{letter}scale", "identity", scope="axis", aliases=(f"{letter}scaling",), doc="Axis scale, e.g. identity, log10."),
        AttributeInfo(f"{letter}flip", False, scope="axis", aliases=(f"{letter}flips",), doc="Reverse the axis direction."),
        AttributeInfo(f"{letter}grid", True, scope="axis", aliases=(f"{letter}grids", f"{letter}gridlines"), doc="Draw grid lines."),
        AttributeInfo(f"{letter}showaxis", True, scope="axis", aliases=(f"{letter}showaxes",), doc="Draw the axis line and ticks."),
        AttributeInfo(f"{letter}rotation", 0, scope="axis", aliases=(f"{letter}rot",), doc="Tick label rotation in degrees."),
    ]


def _plot_attributes() -> list[AttributeInfo]:
    return [
        AttributeInfo("title", "", scope="plot", aliases=("titles",), doc="Plot title."),
        AttributeInfo(
            "legend", "best", scope="plot", aliases=("leg", "key", "legend_position"),
            bool_values=("best", "none"), doc="Legend position; False hides the legend.",
        ),
        AttributeInfo(
            "colorbar", "right", scope="plot", aliases=("cb", "cbar", "colorkey"),
            bool_values=("right", "none"), doc="Colorbar position; False hides it.",
        ),
        AttributeInfo(
            "color_palette", "Plotly", scope="plot", kind="sequence", aliases=("palette",),
            doc="Colors cycled by 'auto' series colors: a Plotly qualitative palette name or a sequence.",
        ),
    ]


def _command_attributes() -> list[AttributeInfo]:
    return [
        AttributeInfo("group", None, scope="command", aliases=("groups", "groupby"), doc="One label per data row; splits rows into series."),
        AttributeInfo(
            "sampling_points", 500, scope="command", aliases=("samples", "n_samples"),
            doc="Samples taken when a function or expression is plotted.",
        ),
    ]


def default_attributes() -> tuple[AttributeInfo, ...]:
    """Return the attribute declarations the default registry is seeded with."""
    infos = _series_attributes()
    for letter in AXIS_LETTERS:
        infos.extend(_axis_attributes(letter))
    infos.extend(_plot_attributes())
    infos.extend(_command_attributes())
    return tuple(infos)


__all__ = [
    "AXIS_LETTERS",
    "SERIES_TYPES",
    "LINE_STYLES",
    "MARKER_SHAPES",
    "SCALES",
    "LEGEND_POSITIONS",
    "default_attributes",
]

"""Top-level public API for the ``plotargs`` package.

``plotargs`` turns a flexible plot call (positional data plus keyword
attributes under any alias or composite shorthand) into an ordered tuple of
fully resolved :class:`SeriesSpec` values a renderer can draw directly:

>>> import numpy as np
>>> from plotargs import resolve
>>> specs = resolve((np.random.rand(10, 3),), {"lw": 2, "marker": (6, "s")})
>>> len(specs), specs[0]["linewidth"], specs[0]["markershape"]
(3, 2, 's')

Extension points (aliases, magic groups, recipes, new attributes) act on the
process-wide registry; pass ``registry=`` to :func:`resolve` to work against
an isolated :class:`PlotRegistry` instead.
"""

from .SeriesSpec import SeriesSpec
from .attribute_table import AttributeInfo, AttributeTable
from .errors import (
    BroadcastShapeMismatch,
    ConflictingAlias,
    DuplicateRecipe,
    DuplicateRegistration,
    GroupKeyLengthMismatch,
    InvalidAttributeValue,
    PlotArgumentError,
    RecipeCycleDetected,
    UnknownAttribute,
    UnplottableData,
    UnrecognizedMagicComponent,
)
from .magic_arguments import MagicGroup, MagicRule, Tag
from .pipeline import PipelineOptions, PipelineStage, resolve, series_specs
from .plotly_render import plotly_layout, to_plotly_figure, to_plotly_traces
from .recipes import RecipeResult
from .registry import (
    PlotRegistry,
    RegistrySnapshot,
    default_registry,
    register_alias,
    register_attribute,
    register_magic_group,
    register_recipe,
    reset_default_registry,
)
from .series_data import ColumnSet, SampledFunction

__version__ = "0.1.0"

"""Type-driven recipe dispatch.

Purpose
-------
A *recipe* turns one positional value of some type (a SymPy expression, a
pandas DataFrame, a Python function, a user's domain object) into plottable
positional data, optionally suggesting attribute values such as a label.

Architecture
------------
Recipes live in an explicit registry keyed by a type descriptor (a class).
Lookup is one dictionary probe per class in the value's MRO, so subclasses
(e.g. ``sympy.sin`` under ``sympy.Expr``) reuse their base recipe.

:func:`apply_recipes` runs a bounded fixpoint: each positional value is
transformed until it reaches a type without a recipe. Values produced by a
transform are spliced in place of their source, keeping positional order.
Every derived value carries its chain depth; exceeding ``max_depth`` raises
:class:`~plotargs.errors.RecipeCycleDetected` instead of recursing forever.

Attribute suggestions from recipes are soft: they never replace a key that
is already set (by the user, by magic expansion, or by an earlier recipe).
"""

from __future__ import annotations

import logging
from collections import ChainMap, deque
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Optional

from .alias_resolver import resolve_aliases
from .attribute_table import AttributeTable
from .errors import RecipeCycleDetected
from .magic_arguments import MagicGroup, expand_magic_arguments

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

Transform = Callable[[Any, Mapping[str, Any]], Any]

DEFAULT_MAX_RECIPE_DEPTH = 32


@dataclass(frozen=True)
class RecipeResult:
    """Replacement positional values plus suggested attributes.

    Parameters
    ----------
    args : tuple
        Values spliced in place of the transformed value.
    attributes : Mapping[str, Any]
        Suggested attributes. Any spelling the alias table accepts, including
        magic groups, may be used.

    Notes
    -----
    A transform may also return a bare value, which is shorthand for
    ``RecipeResult((value,))``.
    """

    args: tuple[Any, ...]
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))


def lookup_recipe(
    recipes: Mapping[type, Transform], value: Any
) -> Optional[tuple[type, Transform]]:
    """Return ``(descriptor, transform)`` for ``value`` or ``None``."""
    for klass in type(value).__mro__:
        transform = recipes.get(klass)
        if transform is not None:
            return klass, transform
    return None


def apply_recipes(
    args: tuple[Any, ...],
    attributes: Mapping[str, Any],
    *,
    recipes: Mapping[type, Transform],
    table: AttributeTable,
    groups: Mapping[str, MagicGroup],
    max_depth: int = DEFAULT_MAX_RECIPE_DEPTH,
) -> tuple[tuple[Any, ...], dict[str, Any]]:
    """Transform positional values to a recipe fixpoint.

    Parameters
    ----------
    args : tuple
        Positional plot data.
    attributes : Mapping[str, Any]
        Canonical, magic-expanded attributes. Not mutated.
    recipes : Mapping[type, Transform]
        Registered recipes.
    table, groups :
        Used to canonicalize recipe attribute suggestions.
    max_depth : int
        Longest allowed chain of transforms for one value.

    Returns
    -------
    tuple
        ``(args, attributes)`` after the fixpoint. Values without a recipe
        pass through unchanged.

    Raises
    ------
    RecipeCycleDetected
        If a chain of transforms exceeds ``max_depth``.
    """
    resolved = dict(attributes)
    defaults = {key: info.default for key, info in table.items() if not info.is_magic}
    view = MappingProxyType(ChainMap(resolved, defaults))

    pending: deque[tuple[Any, int, tuple[str, ...]]] = deque((value, 0, ()) for value in args)
    finished: list[Any] = []
    while pending:
        value, depth, chain = pending.popleft()
        match = lookup_recipe(recipes, value)
        if match is None:
            finished.append(value)
            continue

        descriptor, transform = match
        chain = chain + (descriptor.__name__,)
        if depth >= max_depth:
            raise RecipeCycleDetected(chain, max_depth)

        result = transform(value, view)
        if not isinstance(result, RecipeResult):
            result = RecipeResult((result,))
        logger.debug(
            "recipe %s (depth %d): -> %d value(s), suggests %s",
            descriptor.__name__,
            depth + 1,
            len(result.args),
            sorted(result.attributes),
        )

        if result.attributes:
            suggested = expand_magic_arguments(
                resolve_aliases(result.attributes, table), table, groups
            )
            for key, item in suggested.items():
                if key in resolved:
                    logger.debug("recipe %s: kept %s, already set", descriptor.__name__, key)
                    continue
                resolved[key] = item

        pending.extendleft(reversed([(item, depth + 1, chain) for item in result.args]))

    return tuple(finished), resolved


__all__ = [
    "RecipeResult",
    "Transform",
    "DEFAULT_MAX_RECIPE_DEPTH",
    "lookup_recipe",
    "apply_recipes",
]

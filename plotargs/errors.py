"""Exception taxonomy raised by the plot-argument resolution pipeline.

Every error derives from :class:`PlotArgumentError` and from the closest
builtin exception family, so callers that already catch ``KeyError`` or
``ValueError`` around plotting calls keep working.
"""

from __future__ import annotations

from typing import Any, Sequence


class PlotArgumentError(Exception):
    """Base class for all resolution and registration errors."""


class UnknownAttribute(PlotArgumentError, KeyError):
    """An attribute name is neither canonical, an alias, nor a magic group."""

    def __init__(self, name: str, suggestions: Sequence[str] = ()) -> None:
        self.name = name
        self.suggestions = tuple(suggestions)
        message = f"Unknown plot attribute {name!r}."
        if self.suggestions:
            message += " Did you mean: " + ", ".join(repr(s) for s in self.suggestions) + "?"
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError repr-quotes its message; keep the plain text.
        return str(self.args[0])


class ConflictingAlias(PlotArgumentError, ValueError):
    """One attribute was supplied through more than one spelling."""

    def __init__(self, key: str, names: Sequence[str]) -> None:
        self.key = key
        self.names = tuple(sorted(names))
        super().__init__(
            f"Attribute {key!r} was given more than once as "
            + ", ".join(repr(n) for n in self.names)
            + "; use only one spelling."
        )


class UnrecognizedMagicComponent(PlotArgumentError, ValueError):
    """An element of a composite (magic) argument matched no decomposition rule."""

    def __init__(self, group: str, component: Any, reason: str = "") -> None:
        self.group = group
        self.component = component
        message = f"Could not interpret {component!r} in {group}=(...)"
        message += f": {reason}" if reason else "; it matches none of the group's rules."
        super().__init__(message)


class RecipeCycleDetected(PlotArgumentError, RuntimeError):
    """Recipe transforms did not reach a fixpoint within the depth bound."""

    def __init__(self, chain: Sequence[str], max_depth: int) -> None:
        self.chain = tuple(chain)
        self.max_depth = max_depth
        shown = " -> ".join(self.chain[-8:])
        super().__init__(
            f"Recipe transforms exceeded the maximum depth of {max_depth} "
            f"(last types: {shown}). Check the registered recipes for a cycle."
        )


class DuplicateRegistration(PlotArgumentError, ValueError):
    """An extension tried to re-register an existing name without ``override=True``."""


class DuplicateRecipe(DuplicateRegistration):
    """A recipe is already registered for the given type descriptor."""


class BroadcastShapeMismatch(PlotArgumentError, ValueError):
    """An attribute value cannot be broadcast to the number of series."""

    def __init__(self, key: str, got: Any, expected: Any) -> None:
        self.key = key
        self.got = got
        self.expected = expected
        super().__init__(
            f"Cannot broadcast attribute {key!r} with shape {got} over {expected} series. "
            "Pass a scalar, one value per series, or one value per data row where supported."
        )


class GroupKeyLengthMismatch(PlotArgumentError, ValueError):
    """The grouping key does not have one label per data row."""

    def __init__(self, expected: int, got: int) -> None:
        self.expected = expected
        self.got = got
        super().__init__(
            f"group= must provide one label per data row: expected {expected}, got {got}."
        )


class UnplottableData(PlotArgumentError, TypeError):
    """Positional data could not be turned into numeric columns."""


class InvalidAttributeValue(PlotArgumentError, ValueError):
    """An attribute value the pipeline must interpret is malformed."""


__all__ = [
    "PlotArgumentError",
    "UnknownAttribute",
    "ConflictingAlias",
    "UnrecognizedMagicComponent",
    "RecipeCycleDetected",
    "DuplicateRegistration",
    "DuplicateRecipe",
    "BroadcastShapeMismatch",
    "GroupKeyLengthMismatch",
    "UnplottableData",
    "InvalidAttributeValue",
]

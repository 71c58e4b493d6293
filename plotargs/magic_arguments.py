"""Composite ("magic") argument expansion.

Purpose
-------
Plot calls accept shorthand such as ``marker=(10, 0.3, "s")`` or
``xaxis=("time", (0, 10), "log")``. This module decomposes those composite
values into the canonical attributes they stand for.

Concepts
--------
- A :class:`MagicGroup` owns an *ordered* list of :class:`MagicRule` objects.
- Each element of a composite tuple is matched against the rules in
  declaration order and assigned to the first rule whose predicate accepts
  it. When predicates overlap the earlier rule wins.
- Predicates only look at one element's runtime type and shape. Vector
  elements (lists, arrays) match when every entry matches, which is how
  ``line=(2, ["path", "scatter"])`` assigns per-series series types.
- Tuples are composites; every other value is treated as a one-element
  composite. ``True``/``False`` map through the group's ``on_true`` /
  ``on_false`` tables when declared.

Precedence
----------
Explicitly supplied attributes always beat magic-derived values for the same
key. Two *different* groups deriving different values for one key is an
ambiguity and raises :class:`~plotargs.errors.ConflictingAlias`.
"""

from __future__ import annotations

import logging
import numbers
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Optional, Union

import numpy as np
from _plotly_utils.basevalidators import ColorValidator

from .attribute_defaults import AXIS_LETTERS, LINE_STYLES, MARKER_SHAPES, SCALES, SERIES_TYPES
from .attribute_table import AttributeTable
from .errors import ConflictingAlias, UnrecognizedMagicComponent

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

Predicate = Callable[[Any], bool]


class Tag(str):
    """A string that must be read as a tag, never as free text.

    Plain strings are read as tags whenever they belong to a rule's
    vocabulary, so ``xaxis="log"`` sets the scale. ``Tag`` only matters for
    the reverse case: it never matches a label predicate.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f"Tag({str.__repr__(self)})"


# -----------------------------
# Predicates
# -----------------------------


def _is_vector(value: Any) -> bool:
    return isinstance(value, (list, np.ndarray))


def _flatten(value: Any) -> list[Any]:
    if isinstance(value, np.ndarray):
        return value.ravel().tolist()
    items: list[Any] = []
    for item in value:
        items.extend(_flatten(item) if _is_vector(item) else [item])
    return items


def vectorized(predicate: Predicate) -> Predicate:
    """Lift ``predicate`` so a non-empty list/array matches when all entries do."""

    def check(value: Any) -> bool:
        if _is_vector(value):
            items = _flatten(value)
            return bool(items) and all(predicate(item) for item in items)
        return predicate(value)

    check.__name__ = f"vectorized_{getattr(predicate, '__name__', 'predicate')}"
    return check


def is_bool(value: Any) -> bool:
    return isinstance(value, (bool, np.bool_))


def is_real(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not is_bool(value)


def is_alpha(value: Any) -> bool:
    """Floats in ``[0, 1]``. Integers are never alphas, so ``line=(1,)`` is a width."""
    return isinstance(value, (float, np.floating)) and 0.0 <= float(value) <= 1.0


def is_label(value: Any) -> bool:
    return isinstance(value, str) and not isinstance(value, Tag)


def is_limits(value: Any) -> bool:
    return (
        isinstance(value, tuple)
        and len(value) == 2
        and all(v is None or is_real(v) for v in value)
    )


def is_color(value: Any) -> bool:
    """Accept what Plotly accepts as a color string, or an RGB(A) tuple."""
    if isinstance(value, tuple):
        return len(value) in (3, 4) and all(is_real(v) for v in value)
    if isinstance(value, str):
        return ColorValidator.perform_validate_coerce(value, allow_number=False) is not None
    return False


def is_tag_in(vocabulary: Iterable[str]) -> Predicate:
    words = frozenset(vocabulary)

    def check(value: Any) -> bool:
        return isinstance(value, str) and value in words

    check.__name__ = f"is_tag_in_{len(words)}"
    return check


def is_tag(word: str) -> Predicate:
    return is_tag_in((word,))


# -----------------------------
# Groups
# -----------------------------


@dataclass(frozen=True)
class MagicRule:
    """One ``(predicate, targets)`` decomposition rule.

    ``convert`` may rewrite the matched element. When it returns a mapping,
    the mapping's items are assigned instead of one value to every target.
    """

    predicate: Predicate
    targets: tuple[str, ...]
    convert: Optional[Callable[[Any], Any]] = None

    def assignments(self, component: Any) -> dict[str, Any]:
        value = self.convert(component) if self.convert is not None else component
        if isinstance(value, Mapping):
            return dict(value)
        return {target: value for target in self.targets}


RuleSpec = Union[
    MagicRule,
    tuple[Predicate, Union[str, tuple[str, ...]]],
    tuple[Predicate, Union[str, tuple[str, ...]], Callable[[Any], Any]],
]


def _coerce_rule(spec: RuleSpec) -> MagicRule:
    if isinstance(spec, MagicRule):
        return spec
    predicate, targets, *rest = spec
    if isinstance(targets, str):
        targets = (targets,)
    return MagicRule(predicate, tuple(targets), rest[0] if rest else None)


@dataclass(frozen=True)
class MagicGroup:
    """A named composite argument and its ordered decomposition rules."""

    name: str
    rules: tuple[MagicRule, ...]
    on_true: Optional[Mapping[str, Any]] = None
    on_false: Optional[Mapping[str, Any]] = None
    aliases: tuple[str, ...] = field(default=())

    @classmethod
    def build(
        cls,
        name: str,
        ordered_rules: Iterable[RuleSpec],
        *,
        on_true: Optional[Mapping[str, Any]] = None,
        on_false: Optional[Mapping[str, Any]] = None,
        aliases: Iterable[str] = (),
    ) -> "MagicGroup":
        return cls(
            name=name,
            rules=tuple(_coerce_rule(r) for r in ordered_rules),
            on_true=MappingProxyType(dict(on_true)) if on_true is not None else None,
            on_false=MappingProxyType(dict(on_false)) if on_false is not None else None,
            aliases=tuple(aliases),
        )

    @property
    def targets(self) -> tuple[str, ...]:
        """Every key this group may assign, in first-declared order."""
        keys: dict[str, None] = {}
        for rule in self.rules:
            keys.update(dict.fromkeys(rule.targets))
        for mapping in (self.on_true, self.on_false):
            keys.update(dict.fromkeys(mapping or ()))
        return tuple(keys)

    def decompose(self, value: Any) -> dict[str, Any]:
        """Split one composite value into ``{target_key: value}``.

        Raises
        ------
        UnrecognizedMagicComponent
            If an element matches no rule, or two elements assign one key.
        """
        if is_bool(value):
            mapping = self.on_true if value else self.on_false
            if mapping is not None:
                return dict(mapping)

        components = value if isinstance(value, tuple) else (value,)
        assigned: dict[str, Any] = {}
        origin: dict[str, Any] = {}
        for component in components:
            rule = next((r for r in self.rules if r.predicate(component)), None)
            if rule is None:
                raise UnrecognizedMagicComponent(self.name, component)
            for key, item in rule.assignments(component).items():
                if key in assigned:
                    raise UnrecognizedMagicComponent(
                        self.name,
                        component,
                        f"{key!r} is already set by {origin[key]!r}",
                    )
                assigned[key] = item
                origin[key] = component
        return assigned


def _values_equal(a: Any, b: Any) -> bool:
    if isinstance(a, np.ndarray) or isinstance(b, np.ndarray):
        return np.array_equal(np.asarray(a, dtype=object), np.asarray(b, dtype=object))
    return type(a) is type(b) and a == b


def normalize_booleans(attributes: Mapping[str, Any], table: AttributeTable) -> dict[str, Any]:
    """Replace boolean convenience values by each attribute's declared tag."""
    out = dict(attributes)
    for key, value in attributes.items():
        info = table.get(key)
        if info is not None and info.bool_values is not None and is_bool(value):
            out[key] = info.bool_values[0] if value else info.bool_values[1]
    return out


def expand_magic_arguments(
    attributes: Mapping[str, Any],
    table: AttributeTable,
    groups: Mapping[str, MagicGroup],
) -> dict[str, Any]:
    """Expand every magic-group entry of a canonical attribute map.

    Parameters
    ----------
    attributes : Mapping[str, Any]
        Output of :func:`~plotargs.alias_resolver.resolve_aliases`.
    table : AttributeTable
        Identifies which keys are magic groups and their boolean tags.
    groups : Mapping[str, MagicGroup]
        Registered groups keyed by name.

    Returns
    -------
    dict[str, Any]
        Canonical attributes with no magic-group keys left. Boolean
        convenience values are normalized.
    """
    explicit = {k: v for k, v in attributes.items() if not table[k].is_magic}
    derived: dict[str, Any] = {}
    source: dict[str, str] = {}

    for name, value in attributes.items():
        if not table[name].is_magic:
            continue
        for key, item in groups[name].decompose(value).items():
            if key in explicit:
                logger.debug("magic %s: dropped %s=%r, explicit value wins", name, key, item)
                continue
            if key in derived and not _values_equal(derived[key], item):
                raise ConflictingAlias(key, (source[key], name))
            derived[key] = item
            source[key] = name

    expanded = {**explicit, **derived}
    return normalize_booleans(expanded, table)


# -----------------------------
# Seeded groups
# -----------------------------


def _axis_group(name: str, letters: tuple[str, ...], aliases: tuple[str, ...] = ()) -> MagicGroup:
    def keys(suffix: str) -> tuple[str, ...]:
        return tuple(f"{letter}{suffix}" for letter in letters)

    return MagicGroup.build(
        name,
        [
            (is_tag_in(SCALES), keys("scale")),
            (is_tag("flip"), keys("flip"), lambda _: True),
            (is_tag("grid"), keys("grid"), lambda _: True),
            (is_tag("nogrid"), keys("grid"), lambda _: False),
            (is_tag("hide"), keys("showaxis"), lambda _: False),
            (is_limits, keys("lims")),
            (is_label, keys("guide")),
            (vectorized(is_real), keys("ticks")),
            (is_bool, keys("showaxis")),
        ],
        on_false={
            **dict.fromkeys(keys("showaxis"), False),
            **dict.fromkeys(keys("grid"), False),
            **dict.fromkeys(keys("ticks"), "none"),
        },
        aliases=aliases,
    )


def _grid_visibility(tag: str) -> dict[str, bool]:
    if tag in ("all", "xyz"):
        return {f"{letter}grid": True for letter in AXIS_LETTERS}
    return {f"{letter}grid": letter in tag and tag != "none" for letter in AXIS_LETTERS}


def default_magic_groups() -> tuple[MagicGroup, ...]:
    """Return the composite groups the default registry is seeded with."""
    grids = tuple(f"{letter}grid" for letter in AXIS_LETTERS)
    groups = [
        MagicGroup.build(
            "line",
            [
                (vectorized(is_tag_in(SERIES_TYPES)), "seriestype"),
                (vectorized(is_tag_in(LINE_STYLES)), "linestyle"),
                (vectorized(is_alpha), "linealpha"),
                (vectorized(is_real), "linewidth"),
                (vectorized(is_color), "linecolor"),
            ],
            aliases=("lines",),
        ),
        MagicGroup.build(
            "marker",
            [
                (vectorized(is_tag_in(MARKER_SHAPES)), "markershape"),
                (vectorized(is_alpha), "markeralpha"),
                (vectorized(is_real), "markersize"),
                (vectorized(is_color), "markercolor"),
            ],
            on_true={"markershape": "circle"},
            on_false={"markershape": "none"},
            aliases=("m", "mark", "markers"),
        ),
        MagicGroup.build(
            "markerstrokes",
            [
                (vectorized(is_alpha), "markerstrokealpha"),
                (vectorized(is_real), "markerstrokewidth"),
                (vectorized(is_color), "markerstrokecolor"),
            ],
            aliases=("markerstroke", "stroke"),
        ),
        MagicGroup.build(
            "fill",
            [
                (vectorized(is_alpha), "fillalpha"),
                (vectorized(is_real), "fillrange"),
                (vectorized(is_color), "fillcolor"),
            ],
            on_true={"fillrange": 0},
            on_false={"fillrange": None},
            aliases=("f", "area"),
        ),
    ]
    groups.extend(_axis_group(f"{letter}axis", (letter,)) for letter in AXIS_LETTERS)
    groups.append(_axis_group("axis", AXIS_LETTERS, aliases=("axes",)))
    groups.append(
        MagicGroup.build(
            "grid",
            [(is_tag_in({"x", "y", "z", "xy", "xz", "yz", "xyz", "all", "none"}), grids, _grid_visibility)],
            on_true=dict.fromkeys(grids, True),
            on_false=dict.fromkeys(grids, False),
            aliases=("grids",),
        )
    )
    return tuple(groups)


__all__ = [
    "Tag",
    "MagicRule",
    "MagicGroup",
    "expand_magic_arguments",
    "normalize_booleans",
    "default_magic_groups",
    "vectorized",
    "is_bool",
    "is_real",
    "is_alpha",
    "is_label",
    "is_limits",
    "is_color",
    "is_tag",
    "is_tag_in",
]

"""Process-wide attribute, magic-group and recipe registry.

Purpose
-------
Extensions register aliases, composite groups and recipes here; every
:func:`~plotargs.pipeline.resolve` call reads one immutable
:class:`RegistrySnapshot`.

Concurrency
-----------
Registration is serialized by a re-entrant lock and replaces the current
snapshot with a new one (copy-on-write). Readers take the snapshot reference
once per call and never lock, so concurrent resolves are safe and never see
a half-applied registration.

Examples
--------
>>> from plotargs.registry import PlotRegistry
>>> registry = PlotRegistry.seeded()
>>> registry.register_alias("thick", "linewidth")
>>> registry.snapshot().table.canonical("thick")
'linewidth'
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any, Optional

from .attribute_defaults import default_attributes
from .attribute_table import AttributeInfo, AttributeTable
from .builtin_recipes import default_recipes
from .errors import DuplicateRecipe, DuplicateRegistration, UnknownAttribute
from .magic_arguments import MagicGroup, RuleSpec, default_magic_groups
from .recipes import Transform

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class RegistrySnapshot:
    """Immutable view of the registry handed to one pipeline call."""

    table: AttributeTable
    magic_groups: Mapping[str, MagicGroup]
    recipes: Mapping[type, Transform]


class PlotRegistry:
    """Registry of attributes, aliases, magic groups and recipes.

    Parameters
    ----------
    attributes : Iterable[AttributeInfo]
        Initial attribute declarations.
    magic_groups : Iterable[MagicGroup]
        Initial composite groups, registered in order.
    recipes : Mapping[type, Transform], optional
        Initial recipes.
    """

    def __init__(
        self,
        attributes: Iterable[AttributeInfo] = (),
        magic_groups: Iterable[MagicGroup] = (),
        recipes: Optional[Mapping[type, Transform]] = None,
    ) -> None:
        self._lock = threading.RLock()
        self._snapshot = RegistrySnapshot(
            table=AttributeTable(attributes),
            magic_groups=MappingProxyType({}),
            recipes=MappingProxyType({}),
        )
        for group in magic_groups:
            self.register_magic_group(
                group.name,
                group.rules,
                aliases=group.aliases,
                on_true=group.on_true,
                on_false=group.on_false,
            )
        for descriptor, transform in (recipes or {}).items():
            self.register_recipe(descriptor, transform)

    @classmethod
    def seeded(cls) -> "PlotRegistry":
        """Return a registry holding the default attributes, groups and recipes."""
        return cls(default_attributes(), default_magic_groups(), default_recipes())

    def snapshot(self) -> RegistrySnapshot:
        """Return the current immutable snapshot."""
        return self._snapshot

    def _swap(self, **changes: Any) -> None:
        self._snapshot = replace(self._snapshot, **changes)

    def register_attribute(self, info: AttributeInfo, *, override: bool = False) -> None:
        """Declare a new canonical attribute (e.g. one a custom recipe sets)."""
        if info.is_magic:
            raise ValueError("Use register_magic_group() to declare magic groups.")
        with self._lock:
            snapshot = self._snapshot
            if info.key in snapshot.magic_groups:
                raise DuplicateRegistration(f"{info.key!r} is already a magic group name.")
            self._swap(table=snapshot.table.with_attribute(info, override=override))
            logger.debug("registered attribute %s", info.key)

    def register_alias(self, alias_name: str, canonical_key: str, *, override: bool = False) -> None:
        """Make ``alias_name`` resolve to ``canonical_key``."""
        with self._lock:
            table = self._snapshot.table.with_alias(alias_name, canonical_key, override=override)
            self._swap(table=table)
            logger.debug("registered alias %s -> %s", alias_name, table.canonical(alias_name))

    def register_magic_group(
        self,
        group_name: str,
        ordered_rules: Iterable[RuleSpec],
        *,
        aliases: Iterable[str] = (),
        on_true: Optional[Mapping[str, Any]] = None,
        on_false: Optional[Mapping[str, Any]] = None,
        override: bool = False,
    ) -> None:
        """Declare a composite argument.

        Parameters
        ----------
        group_name : str
            Keyword users pass, e.g. ``"marker"``.
        ordered_rules : Iterable
            ``MagicRule`` objects or ``(predicate, target[, convert])``
            tuples, tried in order for each element of the composite.
        aliases : Iterable[str]
            Alternate keywords for the group.
        on_true, on_false : Mapping, optional
            Attributes assigned when the group is passed ``True``/``False``.
        override : bool
            Replace an existing group of the same name.

        Raises
        ------
        UnknownAttribute
            If a rule targets an undeclared attribute.
        DuplicateRegistration
            If the name is taken and ``override`` is false.
        """
        group = MagicGroup.build(
            group_name, ordered_rules, on_true=on_true, on_false=on_false, aliases=aliases
        )
        with self._lock:
            snapshot = self._snapshot
            table = snapshot.table
            for target in group.targets:
                info = table.get(target)
                if info is None or info.is_magic:
                    raise UnknownAttribute(target, table.suggest(target))
            existing = table.get(group_name)
            if existing is not None and not existing.is_magic:
                raise DuplicateRegistration(
                    f"Magic group {group_name!r} collides with the attribute {group_name!r}."
                )
            if existing is not None and not override:
                raise DuplicateRegistration(
                    f"Magic group {group_name!r} is already registered; pass override=True to replace it."
                )
            info = AttributeInfo(
                group_name,
                scope="magic",
                kind="magic",
                aliases=group.aliases,
                doc=f"Composite argument setting {', '.join(group.targets)}.",
            )
            groups = dict(snapshot.magic_groups)
            groups[group_name] = group
            self._swap(
                table=table.with_attribute(info, override=override),
                magic_groups=MappingProxyType(groups),
            )
            logger.debug("registered magic group %s -> %s", group_name, group.targets)

    def register_recipe(
        self, type_descriptor: type, transform: Transform, *, override: bool = False
    ) -> None:
        """Register ``transform`` for values of ``type_descriptor`` (and subclasses).

        Raises
        ------
        DuplicateRecipe
            If a recipe already exists for ``type_descriptor`` and ``override``
            is false.
        """
        if not isinstance(type_descriptor, type):
            raise TypeError(f"Recipe descriptors must be classes, got {type_descriptor!r}.")
        if not callable(transform):
            raise TypeError(f"Recipe transform for {type_descriptor.__name__} must be callable.")
        with self._lock:
            recipes = dict(self._snapshot.recipes)
            if type_descriptor in recipes and not override:
                raise DuplicateRecipe(
                    f"A recipe for {type_descriptor.__name__} is already registered; "
                    "pass override=True to replace it."
                )
            recipes[type_descriptor] = transform
            self._swap(recipes=MappingProxyType(recipes))
            logger.debug("registered recipe for %s", type_descriptor.__name__)


_DEFAULT_REGISTRY: Optional[PlotRegistry] = None
_DEFAULT_REGISTRY_LOCK = threading.Lock()


def default_registry() -> PlotRegistry:
    """Return the process-wide registry, seeding it on first use."""
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        with _DEFAULT_REGISTRY_LOCK:
            if _DEFAULT_REGISTRY is None:
                _DEFAULT_REGISTRY = PlotRegistry.seeded()
    return _DEFAULT_REGISTRY


def reset_default_registry() -> PlotRegistry:
    """Discard every extension registration and reseed the process-wide registry."""
    global _DEFAULT_REGISTRY
    with _DEFAULT_REGISTRY_LOCK:
        _DEFAULT_REGISTRY = PlotRegistry.seeded()
    return _DEFAULT_REGISTRY


def register_attribute(info: AttributeInfo, *, override: bool = False) -> None:
    default_registry().register_attribute(info, override=override)


def register_alias(alias_name: str, canonical_key: str, *, override: bool = False) -> None:
    default_registry().register_alias(alias_name, canonical_key, override=override)


def register_magic_group(
    group_name: str,
    ordered_rules: Iterable[RuleSpec],
    *,
    aliases: Iterable[str] = (),
    on_true: Optional[Mapping[str, Any]] = None,
    on_false: Optional[Mapping[str, Any]] = None,
    override: bool = False,
) -> None:
    default_registry().register_magic_group(
        group_name,
        ordered_rules,
        aliases=aliases,
        on_true=on_true,
        on_false=on_false,
        override=override,
    )


def register_recipe(type_descriptor: type, transform: Transform, *, override: bool = False) -> None:
    default_registry().register_recipe(type_descriptor, transform, override=override)


__all__ = [
    "RegistrySnapshot",
    "PlotRegistry",
    "default_registry",
    "reset_default_registry",
    "register_attribute",
    "register_alias",
    "register_magic_group",
    "register_recipe",
]

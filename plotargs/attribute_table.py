"""Canonical attribute metadata and alias lookup.

Purpose
-------
``AttributeTable`` is the leaf of the resolution pipeline. It maps every
canonical attribute key (``linewidth``, ``xlims``, ...) to an
:class:`AttributeInfo` record and owns the alias namespace
(``lw -> linewidth``). Every other stage reads it; none mutates it.

Architecture
------------
Tables are immutable after construction. Extension points
(:meth:`AttributeTable.with_alias`, :meth:`AttributeTable.with_attribute`)
return *new* tables so a registry can swap snapshots atomically while
concurrent resolves keep reading the old one.

Examples
--------
>>> from plotargs.attribute_table import AttributeInfo, AttributeTable
>>> table = AttributeTable([AttributeInfo("linewidth", 1, aliases=("lw",))])
>>> table.canonical("lw")
'linewidth'
>>> table.default("linewidth")
1
"""

from __future__ import annotations

import difflib
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, replace
from typing import Any, Literal, Optional

from .errors import DuplicateRegistration, UnknownAttribute

Scope = Literal["series", "axis", "plot", "command", "magic"]
Kind = Literal["scalar", "sequence", "magic"]


@dataclass(frozen=True)
class AttributeInfo:
    """Metadata for one canonical attribute key.

    Parameters
    ----------
    key : str
        Canonical identifier.
    default : Any
        Value used when the command does not set the attribute.
    scope : {"series", "axis", "plot", "command", "magic"}
        Where the attribute applies. ``command`` keys steer the pipeline and
        are consumed by it; ``magic`` entries name composite argument groups.
    kind : {"scalar", "sequence", "magic"}
        ``sequence`` values (tick positions, palettes) are always one unit and
        never broadcast per series.
    per_point : bool
        Whether a vector with one entry per data row is accepted.
    aliases : tuple[str, ...]
        Alternate spellings.
    bool_values : tuple[Any, Any] or None
        ``(value_for_True, value_for_False)`` used to normalize boolean
        convenience values.
    doc : str
        One-line description.
    """

    key: str
    default: Any = None
    scope: Scope = "series"
    kind: Kind = "scalar"
    per_point: bool = False
    aliases: tuple[str, ...] = ()
    bool_values: Optional[tuple[Any, Any]] = None
    doc: str = ""

    @property
    def is_magic(self) -> bool:
        return self.kind == "magic"


class AttributeTable(Mapping[str, AttributeInfo]):
    """Immutable mapping of canonical keys to :class:`AttributeInfo`.

    Parameters
    ----------
    infos : Iterable[AttributeInfo]
        Attribute declarations. Their ``aliases`` seed the alias namespace.
    aliases : Mapping[str, str], optional
        Additional ``alias -> canonical`` entries.

    Raises
    ------
    DuplicateRegistration
        If a key is declared twice, an alias shadows a canonical key, or one
        alias points at two different keys.
    UnknownAttribute
        If an alias points at an undeclared key.
    """

    def __init__(
        self,
        infos: Iterable[AttributeInfo],
        aliases: Optional[Mapping[str, str]] = None,
    ) -> None:
        entries: dict[str, AttributeInfo] = {}
        for info in infos:
            if info.key in entries:
                raise DuplicateRegistration(f"Attribute {info.key!r} is declared twice.")
            entries[info.key] = info

        alias_map: dict[str, str] = {}
        pairs = [(a, info.key) for info in entries.values() for a in info.aliases]
        pairs.extend((aliases or {}).items())
        for alias, key in pairs:
            if key not in entries:
                raise UnknownAttribute(key)
            if alias in entries:
                raise DuplicateRegistration(
                    f"Alias {alias!r} collides with the canonical attribute {alias!r}."
                )
            previous = alias_map.get(alias)
            if previous is not None and previous != key:
                raise DuplicateRegistration(
                    f"Alias {alias!r} already refers to {previous!r}, not {key!r}."
                )
            alias_map[alias] = key

        # Each stored info lists exactly the aliases that resolve to it.
        self._entries = {
            key: replace(info, aliases=tuple(a for a, k in alias_map.items() if k == key))
            for key, info in entries.items()
        }
        self._aliases = alias_map

    @classmethod
    def _rebuild(
        cls, entries: Iterable[AttributeInfo], aliases: Mapping[str, str]
    ) -> "AttributeTable":
        return cls((replace(info, aliases=()) for info in entries), aliases=aliases)

    def __getitem__(self, key: str) -> AttributeInfo:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"AttributeTable({len(self._entries)} keys, {len(self._aliases)} aliases)"

    def canonical(self, name: str) -> Optional[str]:
        """Return the canonical key for ``name`` (key or alias), or ``None``."""
        if name in self._entries:
            return name
        return self._aliases.get(name)

    def is_alias(self, name: str) -> bool:
        return name in self._aliases

    def aliases_of(self, key: str) -> tuple[str, ...]:
        """Return every alias registered for ``key`` in registration order."""
        return tuple(a for a, k in self._aliases.items() if k == key)

    def alias_items(self) -> tuple[tuple[str, str], ...]:
        return tuple(self._aliases.items())

    def default(self, key: str) -> Any:
        return self._entries[key].default

    def keys_in_scope(self, *scopes: str) -> tuple[str, ...]:
        """Return canonical keys whose scope is one of ``scopes``."""
        return tuple(k for k, info in self._entries.items() if info.scope in scopes)

    def suggest(self, name: str, limit: int = 3) -> list[str]:
        """Return close spellings of ``name`` for error messages."""
        vocabulary = list(self._entries) + list(self._aliases)
        return difflib.get_close_matches(name, vocabulary, n=limit)

    def with_attribute(self, info: AttributeInfo, *, override: bool = False) -> "AttributeTable":
        """Return a new table that also declares ``info``."""
        if info.key in self._entries and not override:
            raise DuplicateRegistration(
                f"Attribute {info.key!r} is already declared; pass override=True to replace it."
            )
        if info.key in self._aliases:
            raise DuplicateRegistration(
                f"Attribute {info.key!r} collides with an alias of {self._aliases[info.key]!r}."
            )
        entries = dict(self._entries)
        entries[info.key] = info
        aliases = dict(self._aliases)
        for alias in info.aliases:
            previous = aliases.get(alias)
            if previous is not None and previous != info.key and not override:
                raise DuplicateRegistration(
                    f"Alias {alias!r} already refers to {previous!r}; pass override=True to rebind it."
                )
            aliases[alias] = info.key
        return self._rebuild(entries.values(), aliases)

    def with_alias(self, alias: str, key: str, *, override: bool = False) -> "AttributeTable":
        """Return a new table in which ``alias`` resolves to ``key``.

        Re-registering the same pair is a no-op. ``override=True`` lets an
        alias move to another key; it never lets an alias shadow a canonical
        key.
        """
        canonical = self.canonical(key)
        if canonical is None:
            raise UnknownAttribute(key, self.suggest(key))
        if alias in self._entries:
            raise DuplicateRegistration(
                f"Alias {alias!r} collides with the canonical attribute {alias!r}."
            )
        previous = self._aliases.get(alias)
        if previous == canonical:
            return self
        if previous is not None and not override:
            raise DuplicateRegistration(
                f"Alias {alias!r} already refers to {previous!r}; pass override=True to rebind it."
            )
        aliases = dict(self._aliases)
        aliases[alias] = canonical
        return self._rebuild(self._entries.values(), aliases)


__all__ = ["AttributeInfo", "AttributeTable", "Scope", "Kind"]

"""Rewrite user keyword names into canonical attribute keys.

Users may spell an attribute by its canonical key (``linewidth``), by an alias
(``lw``, ``width``, ``thickness``) or name a magic group (``marker``). This
stage maps every name onto the table's canonical vocabulary and rejects
unknown names and double spellings, so later stages never see an alias.

The resolver is stateless and order independent: the returned mapping and
any raised error depend only on the *set* of names supplied, never on their
iteration order.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .attribute_table import AttributeTable
from .errors import ConflictingAlias, UnknownAttribute

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


def resolve_aliases(attributes: Mapping[str, Any], table: AttributeTable) -> dict[str, Any]:
    """Return ``attributes`` keyed purely by canonical attribute keys.

    Parameters
    ----------
    attributes : Mapping[str, Any]
        Raw keyword mapping from a plotting command.
    table : AttributeTable
        Canonical vocabulary, including magic-group names.

    Returns
    -------
    dict[str, Any]
        New mapping in table declaration order. Values are passed through
        untouched.

    Raises
    ------
    UnknownAttribute
        If a name is neither a canonical key nor an alias.
    ConflictingAlias
        If two supplied names resolve to the same key, e.g. ``linewidth`` and
        ``lw`` together.

    Examples
    --------
    >>> from plotargs.registry import default_registry
    >>> table = default_registry().snapshot().table
    >>> resolve_aliases({"lw": 2, "c": "red"}, table)
    {'seriescolor': 'red', 'linewidth': 2}
    """
    spellings: dict[str, list[str]] = {}
    unknown: list[str] = []
    for name in attributes:
        key = table.canonical(name) if isinstance(name, str) else None
        if key is None:
            unknown.append(name if isinstance(name, str) else repr(name))
            continue
        spellings.setdefault(key, []).append(name)

    if unknown:
        first = sorted(unknown)[0]
        raise UnknownAttribute(first, table.suggest(first))

    for key in sorted(spellings):
        names = spellings[key]
        if len(names) > 1:
            raise ConflictingAlias(key, names)

    resolved = {key: attributes[spellings[key][0]] for key in table if key in spellings}
    if logger.isEnabledFor(logging.DEBUG):
        renamed = {n[0]: k for k, n in spellings.items() if n[0] != k}
        if renamed:
            logger.debug("resolve_aliases: renamed %s", renamed)
    return resolved


__all__ = ["resolve_aliases"]

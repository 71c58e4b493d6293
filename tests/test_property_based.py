"""Property-based tests of the resolution stages."""

from __future__ import annotations

import numpy as np
import pytest

from plotargs.alias_resolver import resolve_aliases
from plotargs.broadcaster import broadcast_value
from plotargs.group_splitter import normalize_group_key, partition_rows
from plotargs.registry import PlotRegistry

try:
    from hypothesis import given
    from hypothesis import strategies as st
except ModuleNotFoundError:  # pragma: no cover - environment-specific fallback
    pytest.skip("hypothesis is required for property-based tests", allow_module_level=True)


TABLE = PlotRegistry.seeded().snapshot().table
SPELLINGS = sorted({name for name, _ in TABLE.alias_items()} | set(TABLE))
LABELS = st.one_of(st.integers(-3, 3), st.sampled_from(["a", "b", "c"]), st.just(float("nan")))


@given(labels=st.lists(LABELS, max_size=40))
def test_partitions_are_exhaustive_and_disjoint(labels) -> None:
    partitions = partition_rows(normalize_group_key(labels, len(labels)))
    seen: set[int] = set()
    for partition in partitions:
        rows = set(partition.rows.tolist())
        assert not rows & seen
        seen |= rows
    assert seen == set(range(len(labels)))


@given(labels=st.lists(st.sampled_from(["a", "b", "c", "d"]), min_size=1, max_size=30))
def test_partition_order_is_first_seen(labels) -> None:
    partitions = partition_rows(labels)
    assert [p.label for p in partitions] == list(dict.fromkeys(labels))
    assert all(p.rows[0] == labels.index(p.label) for p in partitions)


@given(names=st.lists(st.sampled_from(SPELLINGS), unique=True, max_size=6), data=st.data())
def test_alias_resolution_ignores_input_order(names, data) -> None:
    keys = [TABLE.canonical(name) for name in names]
    if len(set(keys)) != len(keys):
        return
    attributes = {name: i for i, name in enumerate(names)}
    shuffled = data.draw(st.permutations(names))
    reordered = {name: attributes[name] for name in shuffled}
    first = resolve_aliases(attributes, TABLE)
    second = resolve_aliases(reordered, TABLE)
    assert first == second
    assert list(first) == list(second)


@given(value=st.integers(), n=st.integers(0, 20))
def test_scalars_broadcast_to_every_series(value, n) -> None:
    assert broadcast_value(TABLE["linewidth"], value, n) == [value] * n


@given(values=st.lists(st.floats(allow_nan=False), min_size=2, max_size=20))
def test_vectors_broadcast_elementwise(values) -> None:
    assert broadcast_value(TABLE["linewidth"], np.asarray(values), len(values)) == values

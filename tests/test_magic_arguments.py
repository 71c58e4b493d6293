from __future__ import annotations

from itertools import permutations

import numpy as np
import pytest

from plotargs.alias_resolver import resolve_aliases
from plotargs.errors import ConflictingAlias, UnrecognizedMagicComponent
from plotargs.magic_arguments import (
    MagicGroup,
    Tag,
    expand_magic_arguments,
    is_alpha,
    is_color,
    is_label,
    is_limits,
    is_real,
    vectorized,
)
from plotargs.registry import PlotRegistry


def _expand(registry: PlotRegistry, **attributes):
    snapshot = registry.snapshot()
    resolved = resolve_aliases(attributes, snapshot.table)
    return expand_magic_arguments(resolved, snapshot.table, snapshot.magic_groups)


def test_predicates() -> None:
    assert is_alpha(0.5) and not is_alpha(1) and not is_alpha(1.5)
    assert is_real(3) and is_real(2.5) and not is_real(True)
    assert is_label("time") and not is_label(Tag("time"))
    assert is_limits((0, 10)) and is_limits((None, 1)) and not is_limits((0, 1, 2))
    assert is_color("red") and is_color("#ff0000") and is_color((1, 0, 0))
    assert not is_color("definitely-not-a-color")
    assert vectorized(is_real)([1, 2.5, 3]) and not vectorized(is_real)([])
    assert vectorized(is_real)(np.array([[1, 2], [3, 4]]))


def test_xaxis_shorthand_equals_separate_attributes(registry) -> None:
    composite = _expand(registry, xaxis=("lbl", (0, 10), 0.5, "log", "flip"))
    separate = _expand(registry, xlabel="lbl", xlim=(0, 10), xticks=0.5, xscale="log", xflip=True)
    assert composite == separate == {
        "xguide": "lbl",
        "xlims": (0, 10),
        "xticks": 0.5,
        "xscale": "log",
        "xflip": True,
    }


def test_disjoint_components_are_order_independent(registry) -> None:
    parts = ("lbl", (0, 10), "log", "flip")
    results = [_expand(registry, xaxis=order) for order in permutations(parts)]
    assert all(result == results[0] for result in results)


def test_overlapping_predicates_take_the_first_rule(registry) -> None:
    assert _expand(registry, line=(0.5,)) == {"linealpha": 0.5}
    assert _expand(registry, line=(2,)) == {"linewidth": 2}
    assert _expand(registry, line=(2.0,)) == {"linewidth": 2.0}


def test_first_declared_rule_wins_for_custom_groups(registry) -> None:
    registry.register_magic_group("size", [(is_real, "linewidth"), (is_real, "markersize")])
    assert _expand(registry, size=(3,)) == {"linewidth": 3}
    with pytest.raises(UnrecognizedMagicComponent, match="already set"):
        _expand(registry, size=(3, 4))


def test_vector_components_assign_per_series_values(registry) -> None:
    expanded = _expand(registry, line=(0.5, [4, 1, 0], ["path", "scatter", "density"]))
    assert expanded == {
        "linealpha": 0.5,
        "linewidth": [4, 1, 0],
        "seriestype": ["path", "scatter", "density"],
    }


def test_single_value_is_a_one_element_composite(registry) -> None:
    assert _expand(registry, xaxis="log") == {"xscale": "log"}
    assert _expand(registry, line="dash") == {"linestyle": "dash"}
    assert _expand(registry, line="red") == {"linecolor": "red"}


def test_explicit_value_beats_magic_in_any_order(registry) -> None:
    first = _expand(registry, marker=(10, "s"), markersize=3)
    second = _expand(registry, markersize=3, marker=(10, "s"))
    assert first == second == {"markersize": 3, "markershape": "s"}


def test_explicit_alias_beats_magic(registry) -> None:
    assert _expand(registry, ms=3, m=(10,)) == {"markersize": 3}


def test_unmatched_component_raises(registry) -> None:
    with pytest.raises(UnrecognizedMagicComponent) as info:
        _expand(registry, marker=(10, "definitely-not-a-marker"))
    assert info.value.group == "marker"
    assert info.value.component == "definitely-not-a-marker"


def test_tag_never_reads_as_a_label(registry) -> None:
    assert _expand(registry, xaxis=Tag("log")) == {"xscale": "log"}
    assert _expand(registry, xaxis="time") == {"xguide": "time"}
    with pytest.raises(UnrecognizedMagicComponent):
        _expand(registry, xaxis=(Tag("time"),))


def test_boolean_groups_use_their_tables(registry) -> None:
    assert _expand(registry, marker=True) == {"markershape": "circle"}
    assert _expand(registry, fill=True) == {"fillrange": 0}
    assert _expand(registry, xaxis=False) == {"xshowaxis": False, "xgrid": False, "xticks": "none"}


def test_boolean_attributes_are_normalized(registry) -> None:
    assert _expand(registry, legend=False) == {"legend": "none"}
    assert _expand(registry, markershape=True) == {"markershape": "circle"}
    assert _expand(registry, xticks=False) == {"xticks": "none"}
    # No boolean tags declared: the flag stays a flag.
    assert _expand(registry, xflip=True) == {"xflip": True}


def test_grid_tags(registry) -> None:
    assert _expand(registry, grid="x") == {"xgrid": True, "ygrid": False, "zgrid": False}
    assert _expand(registry, grid=False) == {"xgrid": False, "ygrid": False, "zgrid": False}


def test_two_groups_agreeing_is_fine(registry) -> None:
    assert _expand(registry, xaxis="log", axis="log") == {"xscale": "log", "yscale": "log", "zscale": "log"}


def test_two_groups_disagreeing_conflict(registry) -> None:
    with pytest.raises(ConflictingAlias) as info:
        _expand(registry, xaxis="log", axis="identity")
    assert info.value.key == "xscale"
    assert info.value.names == ("axis", "xaxis")


def test_group_targets_are_listed_in_declaration_order(registry) -> None:
    marker = registry.snapshot().magic_groups["marker"]
    assert isinstance(marker, MagicGroup)
    assert marker.targets == ("markershape", "markeralpha", "markersize", "markercolor")

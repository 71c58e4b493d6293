from __future__ import annotations

import pytest

from plotargs.alias_resolver import resolve_aliases
from plotargs.errors import ConflictingAlias, UnknownAttribute


def test_canonical_map_is_returned_unchanged(table) -> None:
    attributes = {"linewidth": 2, "seriescolor": "red", "xlims": (0, 1)}
    assert resolve_aliases(attributes, table) == attributes
    assert resolve_aliases(resolve_aliases(attributes, table), table) == attributes


def test_every_alias_matches_its_canonical_key(table) -> None:
    for key in ("linewidth", "seriescolor", "markersize", "xguide", "group"):
        expected = resolve_aliases({key: 3}, table)
        for alias in table.aliases_of(key):
            assert resolve_aliases({alias: 3}, table) == expected == {key: 3}


def test_magic_group_names_and_aliases_resolve(table) -> None:
    assert resolve_aliases({"m": (4,)}, table) == {"marker": (4,)}
    assert resolve_aliases({"axes": "log"}, table) == {"axis": "log"}


def test_values_are_passed_through_untouched(table) -> None:
    value = [1, 2, 3]
    assert resolve_aliases({"lw": value}, table)["linewidth"] is value


def test_input_mapping_is_not_mutated(table) -> None:
    attributes = {"lw": 2, "c": "red"}
    resolve_aliases(attributes, table)
    assert attributes == {"lw": 2, "c": "red"}


def test_unknown_name_raises_with_suggestions(table) -> None:
    with pytest.raises(UnknownAttribute) as info:
        resolve_aliases({"linewdith": 2}, table)
    assert info.value.name == "linewdith"
    assert "linewidth" in info.value.suggestions
    assert "Did you mean" in str(info.value)
    assert isinstance(info.value, KeyError)


def test_non_string_name_is_unknown(table) -> None:
    with pytest.raises(UnknownAttribute):
        resolve_aliases({3: "x"}, table)


def test_canonical_and_alias_together_conflict(table) -> None:
    with pytest.raises(ConflictingAlias) as info:
        resolve_aliases({"linewidth": 1, "lw": 2}, table)
    assert info.value.key == "linewidth"
    assert info.value.names == ("linewidth", "lw")


def test_two_aliases_of_one_key_conflict(table) -> None:
    with pytest.raises(ConflictingAlias, match="only one spelling"):
        resolve_aliases({"w": 1, "lw": 1}, table)


def test_error_choice_does_not_depend_on_order(table) -> None:
    forward = {"zzz": 1, "aaa": 2}
    backward = {"aaa": 2, "zzz": 1}
    names = []
    for attributes in (forward, backward):
        with pytest.raises(UnknownAttribute) as info:
            resolve_aliases(attributes, table)
        names.append(info.value.name)
    assert names == ["aaa", "aaa"]


def test_result_order_follows_the_table(table) -> None:
    resolved = resolve_aliases({"lw": 2, "c": "red"}, table)
    assert list(resolved) == ["seriescolor", "linewidth"]

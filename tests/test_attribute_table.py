from __future__ import annotations

import pytest

from plotargs.attribute_defaults import default_attributes
from plotargs.attribute_table import AttributeInfo, AttributeTable
from plotargs.errors import DuplicateRegistration, UnknownAttribute


def test_canonical_resolves_keys_and_aliases(table) -> None:
    assert table.canonical("linewidth") == "linewidth"
    assert table.canonical("lw") == "linewidth"
    assert table.canonical("thickness") == "linewidth"
    assert table.canonical("xlim") == "xlims"
    assert table.canonical("nope") is None


def test_default_table_has_no_alias_shadowing_a_key() -> None:
    table = AttributeTable(default_attributes())
    for alias, key in table.alias_items():
        assert alias not in table
        assert key in table


def test_duplicate_key_is_rejected() -> None:
    with pytest.raises(DuplicateRegistration):
        AttributeTable([AttributeInfo("a"), AttributeInfo("a")])


def test_alias_may_not_shadow_a_canonical_key() -> None:
    with pytest.raises(DuplicateRegistration, match="collides"):
        AttributeTable([AttributeInfo("a", aliases=("b",)), AttributeInfo("b")])


def test_alias_to_an_undeclared_key_is_rejected() -> None:
    with pytest.raises(UnknownAttribute):
        AttributeTable([AttributeInfo("a")], aliases={"z": "missing"})


def test_with_alias_returns_a_new_table(table) -> None:
    extended = table.with_alias("thick", "linewidth")
    assert extended.canonical("thick") == "linewidth"
    assert table.canonical("thick") is None
    assert "thick" in extended["linewidth"].aliases


def test_with_alias_same_pair_is_a_no_op(table) -> None:
    assert table.with_alias("lw", "linewidth") is table


def test_with_alias_accepts_an_alias_as_target(table) -> None:
    assert table.with_alias("thick", "lw").canonical("thick") == "linewidth"


def test_rebinding_an_alias_requires_override(table) -> None:
    with pytest.raises(DuplicateRegistration, match="override=True"):
        table.with_alias("w", "markersize")

    moved = table.with_alias("w", "markersize", override=True)
    assert moved.canonical("w") == "markersize"
    assert "w" not in moved.aliases_of("linewidth")
    assert "w" not in moved["linewidth"].aliases
    assert "w" in moved["markersize"].aliases


def test_with_attribute_declares_a_new_key(table) -> None:
    extended = table.with_attribute(AttributeInfo("hover", "", aliases=("tooltip",)))
    assert extended.canonical("tooltip") == "hover"
    assert extended.default("hover") == ""
    assert "hover" not in table

    with pytest.raises(DuplicateRegistration):
        extended.with_attribute(AttributeInfo("hover"))


def test_keys_in_scope(table) -> None:
    assert table.keys_in_scope("command") == ("group", "sampling_points")
    assert "xlims" in table.keys_in_scope("axis")
    assert "marker" in table.keys_in_scope("magic")


def test_suggest_offers_close_spellings(table) -> None:
    assert "linewidth" in table.suggest("linewidht")

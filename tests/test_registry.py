from __future__ import annotations

import queue
import threading

import numpy as np
import pytest

import plotargs
from plotargs.attribute_table import AttributeInfo
from plotargs.errors import DuplicateRegistration, UnknownAttribute
from plotargs.magic_arguments import is_real
from plotargs.pipeline import resolve
from plotargs.registry import (
    PlotRegistry,
    default_registry,
    register_alias,
    register_magic_group,
    reset_default_registry,
)


@pytest.fixture
def clean_default_registry():
    reset_default_registry()
    yield default_registry()
    reset_default_registry()


def test_snapshots_are_not_affected_by_later_registration(registry) -> None:
    before = registry.snapshot()
    registry.register_alias("thick", "linewidth")
    after = registry.snapshot()
    assert before.table.canonical("thick") is None
    assert after.table.canonical("thick") == "linewidth"
    with pytest.raises(TypeError):
        after.recipes[int] = lambda value, attributes: value


def test_registered_alias_is_used_by_resolve(registry) -> None:
    registry.register_alias("thick", "lw")
    (spec,) = resolve(([1, 2],), {"thick": 7}, registry=registry)
    assert spec["linewidth"] == 7


def test_alias_rebinding_requires_override(registry) -> None:
    with pytest.raises(DuplicateRegistration):
        registry.register_alias("lw", "markersize")
    registry.register_alias("lw", "markersize", override=True)
    assert registry.snapshot().table.canonical("lw") == "markersize"


def test_alias_to_unknown_key(registry) -> None:
    with pytest.raises(UnknownAttribute):
        registry.register_alias("thick", "linewidht")


def test_register_magic_group(registry) -> None:
    registry.register_magic_group(
        "sizes", [(is_real, ("linewidth", "markersize"))], aliases=("sz",), on_false={"markershape": "none"}
    )
    (spec,) = resolve(([1, 2],), {"sz": 3}, registry=registry)
    assert spec["linewidth"] == 3
    assert spec["markersize"] == 3
    assert registry.snapshot().table["sizes"].is_magic


def test_magic_group_targets_must_exist(registry) -> None:
    with pytest.raises(UnknownAttribute):
        registry.register_magic_group("bad", [(is_real, "linewidht")])
    with pytest.raises(UnknownAttribute):
        registry.register_magic_group("bad", [(is_real, "marker")])


def test_magic_group_names_are_unique(registry) -> None:
    with pytest.raises(DuplicateRegistration):
        registry.register_magic_group("marker", [(is_real, "markersize")])
    with pytest.raises(DuplicateRegistration, match="collides"):
        registry.register_magic_group("linewidth", [(is_real, "linewidth")], override=True)
    with pytest.raises(DuplicateRegistration):
        registry.register_magic_group("sizes", [(is_real, "linewidth")], aliases=("lw",))

    registry.register_magic_group("marker", [(is_real, "markersize")], override=True)
    (spec,) = resolve(([1],), {"marker": 9}, registry=registry)
    assert spec["markersize"] == 9


def test_register_attribute(registry) -> None:
    registry.register_attribute(AttributeInfo("hover", "", aliases=("tooltip",)))
    (spec,) = resolve(([1, 2],), {"tooltip": "point"}, registry=registry)
    assert spec["hover"] == "point"

    with pytest.raises(DuplicateRegistration):
        registry.register_attribute(AttributeInfo("marker"))
    with pytest.raises(ValueError):
        registry.register_attribute(AttributeInfo("lines2", kind="magic", scope="magic"))


def test_empty_registry_only_knows_what_it_is_given() -> None:
    registry = PlotRegistry([AttributeInfo("linewidth", 1, aliases=("lw",))])
    snapshot = registry.snapshot()
    assert list(snapshot.table) == ["linewidth"]
    assert dict(snapshot.recipes) == {}
    assert dict(snapshot.magic_groups) == {}


def test_module_functions_act_on_the_default_registry(clean_default_registry) -> None:
    register_alias("thick", "linewidth")
    register_magic_group("sizes", [(is_real, "markersize")])
    plotargs.register_recipe(complex, lambda value, attributes: np.array([value.real, value.imag]))

    (spec,) = resolve((complex(3, 4),), {"thick": 2, "sizes": 5})
    np.testing.assert_array_equal(spec.y, [3.0, 4.0])
    assert spec["linewidth"] == 2
    assert spec["markersize"] == 5

    reset_default_registry()
    assert default_registry().snapshot().table.canonical("thick") is None


def test_default_registry_is_created_once(clean_default_registry) -> None:
    assert default_registry() is default_registry()


def test_resolves_run_safely_while_extensions_register(registry) -> None:
    errors: queue.Queue[BaseException] = queue.Queue()
    results: queue.Queue[int] = queue.Queue()
    start = threading.Event()
    data = np.ones((10, 3))

    def _worker() -> None:
        start.wait()
        try:
            for _ in range(20):
                specs = resolve((data,), {"lw": [1, 2, 3], "marker": (4, "s")}, registry=registry)
                results.put(len(specs))
        except BaseException as exc:  # noqa: BLE001 - surfaced to the main thread
            errors.put(exc)

    threads = [threading.Thread(target=_worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    start.set()
    for i in range(50):
        registry.register_alias(f"width_{i}", "linewidth")
    for thread in threads:
        thread.join(timeout=30)

    assert errors.empty()
    assert results.qsize() == 80
    assert all(results.get() == 3 for _ in range(80))
    assert registry.snapshot().table.canonical("width_49") == "linewidth"


def test_concurrent_registration_loses_nothing(registry) -> None:
    def _register(offset: int) -> None:
        for i in range(25):
            registry.register_alias(f"alias_{offset}_{i}", "markersize")

    threads = [threading.Thread(target=_register, args=(n,)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    table = registry.snapshot().table
    assert all(table.canonical(f"alias_{n}_{i}") == "markersize" for n in range(4) for i in range(25))

"""Immutable, fully resolved description of one series.

A ``SeriesSpec`` is what a renderer receives: the series' data columns and a
complete attribute map. No aliases, magic groups or ``"auto"`` colors remain,
so a renderer never re-resolves anything.
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Optional

import numpy as np


def _frozen_array(values: Any) -> np.ndarray:
    array = np.array(values, copy=True)
    array.setflags(write=False)
    return array


def _frozen_value(value: Any) -> Any:
    if isinstance(value, np.ndarray):
        return _frozen_array(value)
    if isinstance(value, list):
        return tuple(value)
    return value


@dataclass(frozen=True, eq=False)
class SeriesSpec:
    """Immutable record of one resolved series.

    Parameters
    ----------
    index : int
        Position of the series in the resolved command.
    data : tuple[numpy.ndarray, ...]
        ``(x, y)`` or ``(x, y, z)`` columns, copied and made read-only.
    attributes : Mapping[str, Any]
        Every broadcastable attribute key mapped to this series' value.
        Per-point values are read-only arrays.
    group : Hashable or None
        Group label when the command used ``group=``.
    """

    index: int
    data: tuple[np.ndarray, ...]
    attributes: Mapping[str, Any]
    group: Optional[Hashable] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", tuple(_frozen_array(part) for part in self.data))
        object.__setattr__(
            self,
            "attributes",
            MappingProxyType({key: _frozen_value(value) for key, value in self.attributes.items()}),
        )

    def __getitem__(self, key: str) -> Any:
        return self.attributes[key]

    @property
    def x(self) -> np.ndarray:
        return self.data[0]

    @property
    def y(self) -> np.ndarray:
        return self.data[1]

    @property
    def z(self) -> Optional[np.ndarray]:
        return self.data[2] if len(self.data) > 2 else None

    @property
    def seriestype(self) -> str:
        return self.attributes["seriestype"]

    @property
    def label(self) -> str:
        return self.attributes["label"]

    def __repr__(self) -> str:
        return (
            f"SeriesSpec(index={self.index}, seriestype={self.attributes.get('seriestype')!r}, "
            f"label={self.attributes.get('label')!r}, points={len(self.data[0]) if self.data else 0})"
        )

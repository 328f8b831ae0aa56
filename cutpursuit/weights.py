"""Per-element or uniform coefficient arrays."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np


@dataclass(frozen=True)
class Uniform:
    """Same value for every element."""

    value: float

    def at(self, index) -> np.ndarray | float:
        if np.ndim(index) == 0:
            return float(self.value)
        return np.full(np.shape(index), float(self.value))

    def full(self, n: int) -> np.ndarray:
        return np.full(n, float(self.value))

    def component_sum(self, comp_list: np.ndarray, first_vertex: np.ndarray) -> np.ndarray:
        return np.diff(first_vertex).astype(float) * float(self.value)

    def total(self, n: int) -> float:
        return n * float(self.value)

    def is_zero(self) -> bool:
        return self.value == 0.0


@dataclass(frozen=True)
class PerElement:
    """One value per element; the array is borrowed, not copied."""

    values: np.ndarray

    def at(self, index) -> np.ndarray | float:
        return self.values[index]

    def full(self, n: int) -> np.ndarray:
        return self.values

    def component_sum(self, comp_list: np.ndarray, first_vertex: np.ndarray) -> np.ndarray:
        if len(comp_list) == 0:
            return np.zeros(len(first_vertex) - 1)
        return np.add.reduceat(self.values[comp_list], first_vertex[:-1])

    def total(self, n: int) -> float:
        return float(np.sum(self.values))

    def is_zero(self) -> bool:
        return False


Weights = Union[Uniform, PerElement]


def as_weights(value, default: float = 0.0) -> Weights:
    """Wrap ``None``, a scalar or an array into a weight variant."""
    if value is None:
        return Uniform(float(default))
    if isinstance(value, (Uniform, PerElement)):
        return value
    if np.ndim(value) == 0:
        return Uniform(float(value))
    return PerElement(np.asarray(value, dtype=float))

"""Observation operator variants for the quadratic data term.

Each variant carries only the arrays it needs:

- :class:`Direct` keeps the ``N x V`` matrix ``A`` and observation ``Y``; the
  quadratic term is ``1/2 ||Y - A x||^2``.
- :class:`Full`, :class:`Diagonal` and :class:`ScaledIdentity` are already
  premultiplied by ``A^t``: they carry ``A^t A`` (full, diagonal, or ``a I``) and
  the correlation ``A^t Y``; the quadratic term is ``1/2 <x, A^t A x> - <x, A^t Y>``
  up to a constant.

A missing observation stands for zeros. ``ScaledIdentity(0.0)`` means there is
no quadratic part at all.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

import numpy as np


@dataclass(frozen=True)
class Direct:
    matrix: np.ndarray
    observation: Optional[np.ndarray] = None

    @property
    def N(self) -> int:
        return self.matrix.shape[0]

    @property
    def V(self) -> int:
        return self.matrix.shape[1]


@dataclass(frozen=True)
class Full:
    matrix: np.ndarray
    observation: Optional[np.ndarray] = None

    @property
    def V(self) -> int:
        return self.matrix.shape[0]


@dataclass(frozen=True)
class Diagonal:
    diag: np.ndarray
    observation: Optional[np.ndarray] = None

    @property
    def V(self) -> int:
        return self.diag.shape[0]


@dataclass(frozen=True)
class ScaledIdentity:
    scale: float = 1.0
    observation: Optional[np.ndarray] = None


Operator = Union[Direct, Full, Diagonal, ScaledIdentity]
Premultiplied = (Full, Diagonal, ScaledIdentity)


def is_premultiplied(operator: Operator) -> bool:
    return isinstance(operator, Premultiplied)


def observation_or_zeros(operator: Operator, n: int) -> np.ndarray:
    """Observation vector of the operator, zeros when it has none."""
    if operator.observation is None:
        return np.zeros(n)
    return operator.observation


def make_operator(A, Y=None, premultiplied: bool = False) -> Operator:
    """Build an operator variant from loosely typed input.

    Args:
        A: ``N x V`` matrix (direct), ``V x V`` matrix ``A^t A`` when
            ``premultiplied`` is true, 1-D diagonal of ``A^t A``, or a scalar
            ``a`` for ``A^t A = a I``.
        Y: Observation ``Y`` for the direct case, ``A^t Y`` otherwise.
        premultiplied: Interpret a 2-D ``A`` as ``A^t A``.
    """
    if isinstance(A, (Direct, Full, Diagonal, ScaledIdentity)):
        return A
    Y = None if Y is None else np.asarray(Y, dtype=float)
    if A is None:
        return ScaledIdentity(0.0, Y)
    if np.ndim(A) == 0:
        return ScaledIdentity(float(A), Y)
    A = np.asarray(A, dtype=float)
    if A.ndim == 1:
        return Diagonal(A, Y)
    if premultiplied:
        return Full(A, Y)
    return Direct(A, Y)

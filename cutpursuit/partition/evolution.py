"""Relative evolution of the solution between two partition refinements."""

from __future__ import annotations

import numpy as np


def compute_evolution(
    rX: np.ndarray,
    last_rX: np.ndarray,
    last_comp_assign: np.ndarray,
    comp_list: np.ndarray,
    first_vertex: np.ndarray,
    saturation: np.ndarray,
    dif_tol: float,
    compute_dif: bool = True,
    eps: float = 1e-15,
) -> tuple[float, int]:
    """Compare ``rX`` with the previous values and refresh saturation flags.

    A saturated component is checked through its first vertex only: it stays
    saturated when its value moved by at most ``|rX| * dif_tol``. Other
    components accumulate their change vertex by vertex.

    ``saturation`` is updated in place.

    Returns:
        ``(dif, saturated)``: ``||X - last_X|| / ||X||`` (floored at ``eps``
        in the denominator, ``0.0`` when ``compute_dif`` is false) and the
        number of components still saturated.
    """
    rX = np.asarray(rX, dtype=float)
    sizes = np.diff(first_vertex)
    was_saturated = saturation.copy()

    representatives = comp_list[first_vertex[:-1]]
    rep_dif = np.abs(rX - last_rX[last_comp_assign[representatives]])
    moved = was_saturated & (rep_dif > np.abs(rX) * dif_tol)
    saturation[moved] = False
    num_saturated = int(np.count_nonzero(was_saturated & ~moved))

    if not compute_dif:
        return 0.0, num_saturated

    dif = float(np.sum(rep_dif[was_saturated] ** 2 * sizes[was_saturated]))
    comp_of = np.repeat(np.arange(len(rX)), sizes)
    open_ = ~was_saturated[comp_of]
    members = comp_list[open_]
    dif += float(np.sum((rX[comp_of[open_]] - last_rX[last_comp_assign[members]]) ** 2))
    amp = float(np.sum(rX ** 2 * sizes))

    dif, amp = np.sqrt(dif), np.sqrt(amp)
    return (dif / amp if amp > eps else dif / eps), num_saturated

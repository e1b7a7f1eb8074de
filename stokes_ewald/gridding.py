"""
Window placement and fast Gaussian gridding factors.

Spreading, gathering and the direct reference evaluator all place their
``(P+1) x (P+1)`` stencils through :func:`stencil_origin`, so a source and a
target at the same coordinate always land on the same grid window.
"""

from __future__ import annotations

import math
from functools import lru_cache

import numpy as np
from numba import njit

# Snapping tolerances for points on (or a rounding error away from) a grid line.
GRIDLINE_TOL = 1e-13
OFFSET_TOL = 1e-12


@njit
def stencil_origin(p, L, h, P):
    """
    First stencil index and in-cell offset for coordinate ``p``.

    Parameters
    ----------
    p : float
        Coordinate along one axis (need not lie in the primary cell).
    L : float
        Box length along that axis.
    h : float
        Grid spacing along that axis.
    P : int
        Even window parameter.

    Returns
    -------
    m : int
        Index of the first stencil node, not yet wrapped modulo ``M``.
    p0 : float
        ``p`` folded into ``[0, h)``.
    """
    p0 = p - h * math.floor(p / h)
    t = (p + 0.5 * L) / h
    half = P // 2
    t_round = math.floor(t + 0.5)
    if abs(t - t_round) < GRIDLINE_TOL:
        m = t_round - half
    elif abs(p0) > OFFSET_TOL:
        m = int(math.ceil(t - 1.0)) - half
    else:
        m = int(math.floor(t)) - half
    if abs(p0 - h) < OFFSET_TOL:
        p0 = 0.0
    return m, p0


@njit
def gaussian_factors(px, py, xi, eta, w, hx, hy):
    """
    Per-point exponentials of the factorised Gaussian ``exp(-2 xi^2/eta |r|^2)``.

    At stencil node ``(x, y)`` the Gaussian equals
    ``ex * e3x**x * e4y * e1[x] * e1[y] * e3y**y``.
    """
    a = -2.0 * xi * xi / eta
    ex = math.exp(a * (px * px + py * py + 2.0 * w * px))
    e4y = math.exp(2.0 * a * w * py)
    e3x = math.exp(-2.0 * a * hx * px)
    e3y = math.exp(-2.0 * a * hy * py)
    return ex, e4y, e3x, e3y


@lru_cache(maxsize=32)
def gaussian_table(xi: float, eta: float, hx: float, hy: float, P: int) -> np.ndarray:
    """
    Source-independent part of the window, ``exp(-2 xi^2/eta hx hy j^2)`` for
    ``j = -P/2..P/2``. Cached per geometry and returned read-only.
    """
    j = np.arange(-(P // 2), P // 2 + 1, dtype=np.float64)
    e1 = np.exp(-2.0 * xi * xi / eta * hx * hy * j * j)
    e1.setflags(write=False)
    return e1


__all__ = ["GRIDLINE_TOL", "OFFSET_TOL", "stencil_origin", "gaussian_factors", "gaussian_table"]

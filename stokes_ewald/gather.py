"""
Fast Gaussian gridding convolution of filtered grid channels onto targets.
"""

from __future__ import annotations

import numpy as np
from numba import njit, prange

from .grid import EwaldGrid
from .gridding import gaussian_factors, gaussian_table, stencil_origin
from .params import EwaldParameters


@njit(parallel=True)
def _gather_targets(points, Ht, e1, xi, eta, w, Lx, Ly, P, scale):
    n_channels, My, Mx = Ht.shape
    n_tar = points.shape[1]
    hx = Lx / Mx
    hy = Ly / My
    out = np.zeros((n_channels, n_tar), dtype=np.float64)
    for k in prange(n_tar):
        mx, px = stencil_origin(points[0, k], Lx, hx, P)
        my, py = stencil_origin(points[1, k], Ly, hy, P)
        ex, e4y, e3x, e3y = gaussian_factors(px, py, xi, eta, w, hx, hy)
        if mx >= 0 and my >= 0 and mx < Mx - P - 1 and my < My - P - 1:
            # window fits inside the box: contiguous indexing
            for x in range(P + 1):
                ey = ex * e4y * e1[x]
                ix = mx + x
                for y in range(P + 1):
                    g = ey * e1[y]
                    for ch in range(n_channels):
                        out[ch, k] += g * Ht[ch, my + y, ix]
                    ey *= e3y
                ex *= e3x
        else:
            for x in range(P + 1):
                ey = ex * e4y * e1[x]
                ix = (x + mx) % Mx
                for y in range(P + 1):
                    g = ey * e1[y]
                    iy = (y + my) % My
                    for ch in range(n_channels):
                        out[ch, k] += g * Ht[ch, iy, ix]
                    ey *= e3y
                ex *= e3x
        for ch in range(n_channels):
            out[ch, k] *= scale
    return out


def gather(points: np.ndarray, Ht: np.ndarray, grid: EwaldGrid, params: EwaldParameters) -> np.ndarray:
    """
    Evaluate the filtered, inverse-transformed channels at target points.

    Parameters
    ----------
    points : np.ndarray
        Target positions, shape ``(2, Ntar)``.
    Ht : np.ndarray
        Real grid channels ``(C, My, Mx)``; only read.

    Returns
    -------
    np.ndarray
        ``(C, Ntar)`` values scaled to the continuum field.
    """
    points = np.ascontiguousarray(points, dtype=np.float64)
    Ht = np.ascontiguousarray(Ht, dtype=np.float64)
    e1 = gaussian_table(params.xi, params.eta, grid.hx, grid.hy, params.P)
    return _gather_targets(
        points,
        Ht,
        e1,
        params.xi,
        params.eta,
        params.resolve_width(grid),
        grid.Lx,
        grid.Ly,
        params.P,
        params.normalization(grid),
    )


__all__ = ["gather"]

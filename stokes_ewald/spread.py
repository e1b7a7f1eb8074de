"""
Fast Gaussian gridding of weighted point sources onto periodic grid channels.
"""

from __future__ import annotations

import numba
import numpy as np
from numba import njit, prange

from .grid import EwaldGrid
from .gridding import gaussian_factors, gaussian_table, stencil_origin
from .params import EwaldParameters

# Upper bound on the private accumulation grids held at once by one spread call.
MAX_CHUNK_BYTES = 1 << 30


@njit(parallel=True)
def _spread_chunks(points, weights, e1, xi, eta, w, Lx, Ly, Mx, My, P, n_chunks):
    # Each chunk of sources owns a private grid, so no two threads write the
    # same cell; the private grids are reduced afterwards.
    n_channels = weights.shape[0]
    n_src = points.shape[1]
    hx = Lx / Mx
    hy = Ly / My
    local = np.zeros((n_chunks, n_channels, My, Mx), dtype=np.float64)
    chunk = (n_src + n_chunks - 1) // n_chunks
    starts = np.minimum(np.arange(n_chunks) * chunk, n_src)
    stops = np.minimum(starts + chunk, n_src)
    for c in prange(n_chunks):
        H = local[c]
        for k in range(starts[c], stops[c]):
            mx, px = stencil_origin(points[0, k], Lx, hx, P)
            my, py = stencil_origin(points[1, k], Ly, hy, P)
            ex, e4y, e3x, e3y = gaussian_factors(px, py, xi, eta, w, hx, hy)
            for x in range(P + 1):
                ey = ex * e4y * e1[x]
                ix = (x + mx) % Mx
                if my >= 0 and my < My - P - 1:
                    for y in range(P + 1):
                        g = ey * e1[y]
                        for ch in range(n_channels):
                            H[ch, my + y, ix] += g * weights[ch, k]
                        ey *= e3y
                else:
                    for y in range(P + 1):
                        g = ey * e1[y]
                        iy = (y + my) % My
                        for ch in range(n_channels):
                            H[ch, iy, ix] += g * weights[ch, k]
                        ey *= e3y
                ex *= e3x

    out = np.zeros((n_channels, My, Mx), dtype=np.float64)
    for iy in prange(My):
        for c in range(n_chunks):
            for ch in range(n_channels):
                for ix in range(Mx):
                    out[ch, iy, ix] += local[c, ch, iy, ix]
    return out


def chunk_count(n_chunks: int | None, n_src: int, grid_bytes: int, max_bytes: int | None = None) -> int:
    """
    Number of private grids for a spread call: the requested count (numba
    thread count by default), at most one per source and at most as many
    grids of ``grid_bytes`` as fit in ``max_bytes`` (``MAX_CHUNK_BYTES``).
    Always at least 1.
    """
    if n_chunks is None:
        n_chunks = numba.get_num_threads()
    if max_bytes is None:
        max_bytes = MAX_CHUNK_BYTES
    by_memory = max_bytes // max(int(grid_bytes), 1)
    return max(1, min(int(n_chunks), max(n_src, 1), by_memory))


def spread(
    points: np.ndarray,
    weights: np.ndarray,
    grid: EwaldGrid,
    params: EwaldParameters,
    *,
    n_chunks: int | None = None,
) -> np.ndarray:
    """
    Spread weighted sources onto ``C`` grid channels.

    Parameters
    ----------
    points : np.ndarray
        Source positions, shape ``(2, N)``.
    weights : np.ndarray
        Per-source channel weights, shape ``(C, N)``; forces for the Stokeslet,
        :func:`stresslet_weights` for the stresslet.
    grid, params :
        Grid geometry and Ewald parameters.
    n_chunks : int, optional
        Number of private accumulation grids; defaults to the numba thread
        count. Each chunk holds a full ``(C, My, Mx)`` float64 grid, so memory
        grows with the chunk count; it is capped by the number of sources and
        by ``MAX_CHUNK_BYTES`` (see :func:`chunk_count`).

    Returns
    -------
    np.ndarray
        ``(C, My, Mx)`` grid channels with all contributions summed.
    """
    points = np.ascontiguousarray(points, dtype=np.float64)
    weights = np.ascontiguousarray(weights, dtype=np.float64)
    n_chunks = chunk_count(n_chunks, points.shape[1], weights.shape[0] * grid.Mx * grid.My * 8)

    e1 = gaussian_table(params.xi, params.eta, grid.hx, grid.hy, params.P)
    return _spread_chunks(
        points,
        weights,
        e1,
        params.xi,
        params.eta,
        params.resolve_width(grid),
        grid.Lx,
        grid.Ly,
        grid.Mx,
        grid.My,
        params.P,
        n_chunks,
    )


def stresslet_weights(forces: np.ndarray, normals: np.ndarray) -> np.ndarray:
    """Outer-product channels ``(f1 n1, f2 n1, f1 n2, f2 n2)``, shape ``(4, N)``."""
    f = np.asarray(forces, dtype=np.float64)
    n = np.asarray(normals, dtype=np.float64)
    return np.stack([f[0] * n[0], f[1] * n[0], f[0] * n[1], f[1] * n[1]], axis=0)


__all__ = ["MAX_CHUNK_BYTES", "chunk_count", "spread", "stresslet_weights"]

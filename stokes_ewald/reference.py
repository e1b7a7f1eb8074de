"""
Brute-force reference evaluations of the k-space sums.

Two references are provided:

* ``direct_*``: the same discrete pipeline as :mod:`stokes_ewald.kspace`, but
  with every window weight evaluated by its own ``exp`` at the true node
  distance and explicit DFT matrices in place of the FFT. Agreement with the
  fast pipeline checks the Gaussian factorization, the transforms and the
  window bookkeeping.
* ``ewald_kspace_*``: the continuum truncated Ewald k-sum over the grid
  wavenumbers, which the pipeline approaches as ``P`` grows once the grid
  resolves the spreading Gaussian.

Both are O(N M^2) or worse and meant for validation only.
"""

from __future__ import annotations

from typing import Callable, Tuple

import numpy as np

from .filters import apply_dlp_filter, apply_slp_filter, stokeslet_symbol, stresslet_symbol
from .grid import EwaldGrid
from .gridding import stencil_origin
from .kspace import as_point_array
from .params import EwaldParameters
from .spread import stresslet_weights


# -------------------------------------------------------------------------
# Direct discrete pipeline
# -------------------------------------------------------------------------


def _window(p: np.ndarray, grid: EwaldGrid, params: EwaldParameters) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Wrapped row/column indices and Gaussian weights ``(P+1, P+1)`` around ``p``."""
    P = params.P
    mx, px = stencil_origin(float(p[0]), grid.Lx, grid.hx, P)
    my, py = stencil_origin(float(p[1]), grid.Ly, grid.hy, P)
    steps = np.arange(P + 1)
    dx = px + (P // 2 - steps) * grid.hx
    dy = py + (P // 2 - steps) * grid.hy
    a = -2.0 * params.xi * params.xi / params.eta
    g = np.exp(a * (dy[:, None] ** 2 + dx[None, :] ** 2))
    return (my + steps) % grid.My, (mx + steps) % grid.Mx, g


def direct_spread(points, weights, grid: EwaldGrid, params: EwaldParameters) -> np.ndarray:
    weights = np.asarray(weights, dtype=np.float64)
    H = grid.zeros(weights.shape[0])
    for k in range(points.shape[1]):
        iy, ix, g = _window(points[:, k], grid, params)
        for ch in range(weights.shape[0]):
            np.add.at(H[ch], (iy[:, None], ix[None, :]), g * weights[ch, k])
    return H


def direct_gather(points, Ht: np.ndarray, grid: EwaldGrid, params: EwaldParameters) -> np.ndarray:
    out = np.zeros((Ht.shape[0], points.shape[1]))
    for k in range(points.shape[1]):
        iy, ix, g = _window(points[:, k], grid, params)
        for ch in range(Ht.shape[0]):
            out[ch, k] = np.sum(g * Ht[ch][np.ix_(iy, ix)])
    return out * params.normalization(grid)


def _dft_matrix(M: int) -> np.ndarray:
    n = np.arange(M)
    return np.exp(-2j * np.pi * np.outer(n, n) / M)


def direct_dft2(H: np.ndarray) -> np.ndarray:
    """Forward 2D DFT of a ``(C, My, Mx)`` stack by explicit matrix products."""
    Fy = _dft_matrix(H.shape[-2])
    Fx = _dft_matrix(H.shape[-1])
    return np.einsum("ab,cbd,ed->cae", Fy, H, Fx)


def direct_idft2(Hhat: np.ndarray) -> np.ndarray:
    My, Mx = Hhat.shape[-2:]
    Fy = _dft_matrix(My).conj()
    Fx = _dft_matrix(Mx).conj()
    return np.einsum("ab,cbd,ed->cae", Fy, Hhat, Fx) / (Mx * My)


def _direct_pipeline(sources, targets, weights, grid, params, apply_filter: Callable) -> np.ndarray:
    H = direct_spread(sources, weights, grid, params)
    Hhat = direct_dft2(H)
    apply_filter(Hhat, grid, params.xi, params.eta)
    Ht = direct_idft2(Hhat).real
    return direct_gather(targets, Ht, grid, params)


def direct_velocity(sources, targets, forces, grid: EwaldGrid, params: EwaldParameters) -> np.ndarray:
    """Stokeslet k-space sum without fast gridding or FFT, shape ``(2, Ntar)``."""
    sources = as_point_array("sources", sources)
    targets = as_point_array("targets", targets)
    forces = as_point_array("forces", forces, n_cols=sources.shape[1])
    return _direct_pipeline(sources, targets, forces, grid, params, apply_slp_filter)


def direct_stress(sources, targets, forces, normals, grid: EwaldGrid, params: EwaldParameters) -> np.ndarray:
    """Stresslet k-space sum without fast gridding or FFT, shape ``(4, Ntar)``."""
    sources = as_point_array("sources", sources)
    targets = as_point_array("targets", targets)
    forces = as_point_array("forces", forces, n_cols=sources.shape[1])
    normals = as_point_array("normals", normals, n_cols=sources.shape[1])
    weights = stresslet_weights(forces, normals)
    return _direct_pipeline(sources, targets, weights, grid, params, apply_dlp_filter)


# -------------------------------------------------------------------------
# Continuum truncated Ewald k-sum
# -------------------------------------------------------------------------


def _structure_factors(points: np.ndarray, weights: np.ndarray, grid: EwaldGrid) -> np.ndarray:
    # sum_n w_n exp(-i k.x_n) for every grid wavenumber, shape (C, My, Mx)
    phase = np.exp(
        -1j * (grid.K1[None, :, :] * points[0][:, None, None] + grid.K2[None, :, :] * points[1][:, None, None])
    )
    return np.einsum("cn,nab->cab", weights, phase)


def _evaluate_modes(spectra, targets: np.ndarray, grid: EwaldGrid) -> np.ndarray:
    out = np.zeros((len(spectra), targets.shape[1]))
    for k in range(targets.shape[1]):
        phase = np.exp(1j * (grid.K1 * targets[0, k] + grid.K2 * targets[1, k]))
        for ch, spectrum in enumerate(spectra):
            out[ch, k] = np.sum(spectrum * phase).real
    return out * (4.0 * np.pi / (grid.Lx * grid.Ly))


def _zero_dc(spectra):
    for spectrum in spectra:
        spectrum[0, 0] = 0.0
    return spectra


def ewald_kspace_velocity(sources, targets, forces, xi: float, grid: EwaldGrid) -> np.ndarray:
    """
    Continuum reciprocal-space Stokeslet sum over the grid wavenumbers,
    ``4 pi/(Lx Ly) sum_{k != 0} A(k) e^{-k^2/(4 xi^2)} f_hat(k) e^{i k.x}``.
    """
    sources = as_point_array("sources", sources)
    targets = as_point_array("targets", targets)
    forces = as_point_array("forces", forces, n_cols=sources.shape[1])
    fhat = _structure_factors(sources, forces, grid)
    damping = np.exp(-grid.ksq / (4.0 * xi * xi))
    with np.errstate(divide="ignore", invalid="ignore"):
        spectra = stokeslet_symbol(grid.K1, grid.K2, fhat[0], fhat[1], xi, damping)
    return _evaluate_modes(_zero_dc(list(spectra)), targets, grid)


def ewald_kspace_stress(sources, targets, forces, normals, xi: float, grid: EwaldGrid) -> np.ndarray:
    """Continuum reciprocal-space stresslet sum over the grid wavenumbers."""
    sources = as_point_array("sources", sources)
    targets = as_point_array("targets", targets)
    forces = as_point_array("forces", forces, n_cols=sources.shape[1])
    normals = as_point_array("normals", normals, n_cols=sources.shape[1])
    chat = _structure_factors(sources, stresslet_weights(forces, normals), grid)
    damping = np.exp(-grid.ksq / (4.0 * xi * xi))
    with np.errstate(divide="ignore", invalid="ignore"):
        spectra = stresslet_symbol(grid.K1, grid.K2, tuple(chat), xi, damping)
    return _evaluate_modes(_zero_dc(list(spectra)), targets, grid)


__all__ = [
    "direct_spread",
    "direct_gather",
    "direct_dft2",
    "direct_idft2",
    "direct_velocity",
    "direct_stress",
    "ewald_kspace_velocity",
    "ewald_kspace_stress",
]

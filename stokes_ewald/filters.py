"""
Closed-form Stokeslet and stresslet filters applied per Fourier mode.

The ``*_symbol`` functions evaluate the kernels for arbitrary wavenumber
arrays and an arbitrary Gaussian damping, so they serve both the grid filter
(damping ``exp(-(1-eta) k^2 / (4 xi^2))``) and the continuum reference sum
(damping ``exp(-k^2 / (4 xi^2))``). They are undefined at ``k = 0``.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from .grid import EwaldGrid

# Viscosity of the stresslet kernel.
MU = 1.0


def stokeslet_symbol(k1, k2, f1, f2, xi: float, damping) -> Tuple[np.ndarray, np.ndarray]:
    """
    Velocity spectrum of the Stokeslet for force spectra ``(f1, f2)``.

    The antisymmetric projector makes the result divergence free,
    ``k1*u1 + k2*u2 == 0`` at every mode.
    """
    ksq = k1 * k1 + k2 * k2
    B = (1.0 / (ksq * ksq) + 0.25 / (ksq * xi * xi)) * damping
    u1 = k2 * (k2 * f1 - k1 * f2) * B
    u2 = k1 * (k1 * f2 - k2 * f1) * B
    return u1, u2


def stresslet_symbol(k1, k2, c: Sequence, xi: float, damping, mu: float = MU):
    """
    Stress spectrum of the stresslet.

    Parameters
    ----------
    k1, k2 : array_like
        Wavenumber components.
    c : sequence of 4 array_like
        Spread channels ``(f1 n1, f2 n1, f1 n2, f2 n2)``.
    xi : float
        Ewald splitting parameter.
    damping : array_like
        Gaussian damping factor per mode.
    mu : float
        Viscosity.

    Returns
    -------
    tuple of 4 arrays
        Stress components ``(T11, T21, T12, T22)``.
    """
    c0, c1, c2, c3 = c
    ksq = k1 * k1 + k2 * k2
    S = k1 * k1 * c0 + k1 * k2 * c1 + k2 * k1 * c2 + k2 * k2 * c3
    S_k = S / ksq
    tr = c0 + c3
    q = mu * (1.0 / ksq + 0.25 / (xi * xi))

    a0 = k1 * c0 + k2 * c1
    a1 = k1 * c0 + k2 * c2
    b0 = k1 * c2 + k2 * c3
    b1 = k1 * c1 + k2 * c3

    T11 = damping * (S_k - q * (2.0 * k1 * k1 * tr + 2.0 * k1 * a0 + 2.0 * k1 * a1 - 4.0 * k1 * k1 * S_k))
    T21 = -damping * q * (2.0 * k2 * k1 * tr + k2 * a0 + k2 * a1 + k1 * b0 + k1 * b1 - 4.0 * k2 * k1 * S_k)
    T12 = -damping * q * (2.0 * k1 * k2 * tr + k1 * b0 + k1 * b1 + k2 * a0 + k2 * a1 - 4.0 * k1 * k2 * S_k)
    T22 = damping * (S_k - q * (2.0 * k2 * k2 * tr + 2.0 * k2 * b0 + 2.0 * k2 * b1 - 4.0 * k2 * k2 * S_k))
    return T11, T21, T12, T22


def grid_damping(grid: EwaldGrid, xi: float, eta: float) -> np.ndarray:
    return np.exp(-grid.ksq * (1.0 - eta) / (4.0 * xi * xi))


def remove_zero_mode(Hhat: np.ndarray) -> None:
    """Force the DC entry of every channel to exactly zero."""
    Hhat[:, 0, 0] = 0.0


def apply_slp_filter(Hhat: np.ndarray, grid: EwaldGrid, xi: float, eta: float) -> np.ndarray:
    """
    Turn the two force spectra in ``Hhat`` (``(2, My, Mx)``, complex) into the
    velocity spectra, in place.
    """
    damping = grid_damping(grid, xi, eta)
    # The DC mode divides by zero; it is overwritten below.
    with np.errstate(divide="ignore", invalid="ignore"):
        u1, u2 = stokeslet_symbol(grid.K1, grid.K2, Hhat[0], Hhat[1], xi, damping)
    Hhat[0] = u1
    Hhat[1] = u2
    remove_zero_mode(Hhat)
    return Hhat


def apply_dlp_filter(Hhat: np.ndarray, grid: EwaldGrid, xi: float, eta: float) -> np.ndarray:
    """
    Turn the four force-normal spectra in ``Hhat`` (``(4, My, Mx)``, complex)
    into the stress spectra ``(T11, T21, T12, T22)``, in place.
    """
    damping = grid_damping(grid, xi, eta)
    with np.errstate(divide="ignore", invalid="ignore"):
        T = stresslet_symbol(grid.K1, grid.K2, (Hhat[0], Hhat[1], Hhat[2], Hhat[3]), xi, damping)
    for i in range(4):
        Hhat[i] = T[i]
    remove_zero_mode(Hhat)
    return Hhat


__all__ = [
    "MU",
    "stokeslet_symbol",
    "stresslet_symbol",
    "grid_damping",
    "remove_zero_mode",
    "apply_slp_filter",
    "apply_dlp_filter",
]

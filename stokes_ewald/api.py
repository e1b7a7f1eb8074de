"""
High-level API bundling one grid and parameter set for repeated evaluations.
"""

from __future__ import annotations

from typing import Optional

import numba
import numpy as np

from .fft import set_fftw_threads, warm_fft_cache as _warm_fft_cache
from .grid import EwaldGrid
from .kspace import KSpaceResult, dlp_kspace, slp_kspace
from .params import EwaldParameters
from .plotting import plot_grid_channel, plot_velocity_field
from .reference import direct_stress, direct_velocity, ewald_kspace_stress, ewald_kspace_velocity


class StokesEwaldAPI:
    """
    Facade for k-space Stokeslet/stresslet sums at fixed grid geometry.

    The Gaussian table and FFT plans are reused across calls with the same
    geometry.
    """

    def __init__(
        self,
        Mx: int,
        My: int,
        Lx: float,
        Ly: float,
        xi: float,
        eta: float,
        P: int,
        w: Optional[float] = None,
        *,
        warm_cache: bool = False,
        verbose: bool = False,
    ):
        self.grid = EwaldGrid(Mx=Mx, My=My, Lx=Lx, Ly=Ly)
        self.params = EwaldParameters(xi=xi, eta=eta, P=P, w=w)
        self.verbose = verbose
        if warm_cache:
            self.warm_fft_cache()

    # ------------------------------------------------------------------
    # k-space sums
    # ------------------------------------------------------------------
    def velocity(self, sources, targets, forces) -> np.ndarray:
        return self.velocity_result(sources, targets, forces).values

    def velocity_result(self, sources, targets, forces) -> KSpaceResult:
        return slp_kspace(sources, targets, forces, self.grid, self.params, verbose=self.verbose)

    def stress(self, sources, targets, forces, normals) -> np.ndarray:
        return self.stress_result(sources, targets, forces, normals).values

    def stress_result(self, sources, targets, forces, normals) -> KSpaceResult:
        return dlp_kspace(sources, targets, forces, normals, self.grid, self.params, verbose=self.verbose)

    # ------------------------------------------------------------------
    # Reference evaluations
    # ------------------------------------------------------------------
    def direct_velocity(self, sources, targets, forces) -> np.ndarray:
        return direct_velocity(sources, targets, forces, self.grid, self.params)

    def direct_stress(self, sources, targets, forces, normals) -> np.ndarray:
        return direct_stress(sources, targets, forces, normals, self.grid, self.params)

    def reference_velocity(self, sources, targets, forces) -> np.ndarray:
        return ewald_kspace_velocity(sources, targets, forces, self.params.xi, self.grid)

    def reference_stress(self, sources, targets, forces, normals) -> np.ndarray:
        return ewald_kspace_stress(sources, targets, forces, normals, self.params.xi, self.grid)

    # ------------------------------------------------------------------
    # Threads and FFT utilities
    # ------------------------------------------------------------------
    @staticmethod
    def set_threads(n: int) -> None:
        """Set the thread count for both the FFT backend and the numba kernels."""
        n = max(1, int(n))
        set_fftw_threads(n)
        numba.set_num_threads(min(n, numba.config.NUMBA_NUM_THREADS))

    def warm_fft_cache(self) -> None:
        for channels in (2, 4):
            _warm_fft_cache((channels, self.grid.My, self.grid.Mx))

    # ------------------------------------------------------------------
    # Visualization shortcuts (pass-through)
    # ------------------------------------------------------------------
    @staticmethod
    def plot_velocity_field(targets, velocity, **kwargs):
        return plot_velocity_field(targets, velocity, **kwargs)

    def plot_grid_channel(self, H, **kwargs):
        return plot_grid_channel(H, self.grid, **kwargs)


__all__ = ["StokesEwaldAPI"]

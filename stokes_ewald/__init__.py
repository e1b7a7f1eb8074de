"""
Spectral Ewald toolkit for the reciprocal-space part of doubly periodic
Stokeslet and stresslet sums in 2D.
"""

from .api import StokesEwaldAPI
from .errors import InputShapeError, InvalidParameterError
from .grid import EwaldGrid
from .params import EwaldParameters
from .kspace import KSpaceResult, compute_stress, compute_velocity, dlp_kspace, slp_kspace
from .spread import spread, stresslet_weights
from .gather import gather
from .filters import apply_dlp_filter, apply_slp_filter, stokeslet_symbol, stresslet_symbol
from .gridding import gaussian_table, stencil_origin
from .reference import direct_stress, direct_velocity, ewald_kspace_stress, ewald_kspace_velocity
from .plotting import plot_grid_channel, plot_velocity_field
from .fft import FFT_BACKEND, set_fftw_threads, warm_fft_cache

__all__ = [
    "StokesEwaldAPI",
    "InputShapeError",
    "InvalidParameterError",
    "EwaldGrid",
    "EwaldParameters",
    "KSpaceResult",
    "compute_velocity",
    "compute_stress",
    "slp_kspace",
    "dlp_kspace",
    "spread",
    "stresslet_weights",
    "gather",
    "apply_slp_filter",
    "apply_dlp_filter",
    "stokeslet_symbol",
    "stresslet_symbol",
    "gaussian_table",
    "stencil_origin",
    "direct_velocity",
    "direct_stress",
    "ewald_kspace_velocity",
    "ewald_kspace_stress",
    "plot_velocity_field",
    "plot_grid_channel",
    "FFT_BACKEND",
    "set_fftw_threads",
    "warm_fft_cache",
]

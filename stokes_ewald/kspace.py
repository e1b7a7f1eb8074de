"""
Reciprocal-space Ewald sums for the doubly periodic Stokeslet and stresslet.

Both kernels run the same pipeline::

    sources -> spread -> FFT -> spectral filter -> inverse FFT -> gather

and differ only in the number of grid channels (2 or 4) and the filter.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

import numpy as np

from .errors import InputShapeError, InvalidParameterError
from .fft import FFT_BACKEND, forward_transform, inverse_transform
from .filters import apply_dlp_filter, apply_slp_filter
from .gather import gather
from .grid import EwaldGrid
from .params import EwaldParameters
from .spread import spread, stresslet_weights


@dataclass
class KSpaceResult:
    """Gathered field and wall-clock time spent in each stage."""

    values: np.ndarray
    timings: Dict[str, float] = field(default_factory=dict)


def as_point_array(name: str, arr, n_cols: Optional[int] = None) -> np.ndarray:
    """Validate a ``(2, N)`` array and return it as contiguous float64."""
    a = np.asarray(arr, dtype=np.float64)
    if a.ndim != 2 or a.shape[0] != 2:
        raise InputShapeError(f"{name} must be a 2 x N array, got shape {a.shape}")
    if n_cols is not None and a.shape[1] != n_cols:
        raise InputShapeError(
            f"{name} must have one column per source ({n_cols}), got {a.shape[1]}"
        )
    return np.ascontiguousarray(a)


def build_setup(xi, eta, Mx, My, Lx, Ly, w, P) -> tuple[EwaldGrid, EwaldParameters]:
    for name, value in (("Mx", Mx), ("My", My), ("Lx", Lx), ("Ly", Ly), ("xi", xi), ("eta", eta), ("P", P)):
        if value is None:
            raise InvalidParameterError(f"{name} must be supplied")
    grid = EwaldGrid(Mx=Mx, My=My, Lx=Lx, Ly=Ly)
    params = EwaldParameters(xi=xi, eta=eta, P=P, w=w)
    return grid, params


def _run_pipeline(
    sources: np.ndarray,
    targets: np.ndarray,
    weights: np.ndarray,
    grid: EwaldGrid,
    params: EwaldParameters,
    apply_filter: Callable[[np.ndarray, EwaldGrid, float, float], np.ndarray],
    *,
    verbose: bool = False,
) -> KSpaceResult:
    timings: Dict[str, float] = {}

    t0 = time.perf_counter()
    H = spread(sources, weights, grid, params)
    timings["spread"] = time.perf_counter() - t0

    t0 = time.perf_counter()
    Hhat = forward_transform(H)
    del H
    apply_filter(Hhat, grid, params.xi, params.eta)
    Ht = inverse_transform(Hhat)
    del Hhat
    timings["filter"] = time.perf_counter() - t0

    t0 = time.perf_counter()
    values = gather(targets, Ht, grid, params)
    timings["gather"] = time.perf_counter() - t0

    if verbose:
        print(
            f"  k-space sum: {sources.shape[1]} sources -> {targets.shape[1]} targets "
            f"on {grid.Mx}x{grid.My} grid, P={params.P} (FFT backend: {FFT_BACKEND})"
        )
        for stage, elapsed in timings.items():
            print(f"    {stage:<7s} {elapsed:.3e} s")
    return KSpaceResult(values=values, timings=timings)


def slp_kspace(
    sources,
    targets,
    forces,
    grid: EwaldGrid,
    params: EwaldParameters,
    *,
    verbose: bool = False,
) -> KSpaceResult:
    """Stokeslet k-space sum with a prebuilt grid and parameter set."""
    sources = as_point_array("sources", sources)
    targets = as_point_array("targets", targets)
    forces = as_point_array("forces", forces, n_cols=sources.shape[1])
    return _run_pipeline(sources, targets, forces, grid, params, apply_slp_filter, verbose=verbose)


def dlp_kspace(
    sources,
    targets,
    forces,
    normals,
    grid: EwaldGrid,
    params: EwaldParameters,
    *,
    verbose: bool = False,
) -> KSpaceResult:
    """Stresslet k-space sum with a prebuilt grid and parameter set."""
    sources = as_point_array("sources", sources)
    targets = as_point_array("targets", targets)
    forces = as_point_array("forces", forces, n_cols=sources.shape[1])
    normals = as_point_array("normals", normals, n_cols=sources.shape[1])
    weights = stresslet_weights(forces, normals)
    return _run_pipeline(sources, targets, weights, grid, params, apply_dlp_filter, verbose=verbose)


def compute_velocity(
    sources,
    targets,
    forces,
    xi: float,
    eta: float,
    Mx: int,
    My: int,
    Lx: float,
    Ly: float,
    w: Optional[float] = None,
    P: Optional[int] = None,
    *,
    verbose: bool = False,
) -> np.ndarray:
    """
    Reciprocal-space velocity of periodic Stokeslets.

    Parameters
    ----------
    sources, targets : array_like
        Positions, shapes ``(2, Nsrc)`` and ``(2, Ntar)``.
    forces : array_like
        Point forces, shape ``(2, Nsrc)``.
    xi, eta : float
        Ewald splitting parameter and Gaussian splitting fraction.
    Mx, My : int
        Grid intervals per axis (even).
    Lx, Ly : float
        Periodic box lengths.
    w : float, optional
        Gaussian window half-width, default ``P*hx/2``.
    P : int
        Even window parameter.

    Returns
    -------
    np.ndarray
        Velocity, shape ``(2, Ntar)``.
    """
    sources = as_point_array("sources", sources)
    targets = as_point_array("targets", targets)
    forces = as_point_array("forces", forces, n_cols=sources.shape[1])
    grid, params = build_setup(xi, eta, Mx, My, Lx, Ly, w, P)
    return slp_kspace(sources, targets, forces, grid, params, verbose=verbose).values


def compute_stress(
    sources,
    targets,
    forces,
    normals,
    xi: float,
    eta: float,
    Mx: int,
    My: int,
    Lx: float,
    Ly: float,
    w: Optional[float] = None,
    P: Optional[int] = None,
    *,
    verbose: bool = False,
) -> np.ndarray:
    """
    Reciprocal-space stress of periodic stresslets.

    Arguments as :func:`compute_velocity`, plus ``normals`` of shape
    ``(2, Nsrc)``. Returns the stress tensor per target as rows
    ``(T11, T21, T12, T22)``, shape ``(4, Ntar)``.
    """
    sources = as_point_array("sources", sources)
    targets = as_point_array("targets", targets)
    forces = as_point_array("forces", forces, n_cols=sources.shape[1])
    normals = as_point_array("normals", normals, n_cols=sources.shape[1])
    grid, params = build_setup(xi, eta, Mx, My, Lx, Ly, w, P)
    return dlp_kspace(sources, targets, forces, normals, grid, params, verbose=verbose).values


__all__ = [
    "KSpaceResult",
    "as_point_array",
    "build_setup",
    "slp_kspace",
    "dlp_kspace",
    "compute_velocity",
    "compute_stress",
]

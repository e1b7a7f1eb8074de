"""
Periodic grid geometry shared by spreading, spectral filtering and gathering.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .errors import InvalidParameterError


def signed_wavenumbers(M: int, L: float) -> np.ndarray:
    """
    Wavenumbers in FFT order with the Nyquist index counted as positive.

    Index 0 is the DC mode, ``1..M/2`` ascend through the positive
    frequencies and ``M/2+1..M-1`` hold the wrapped negative ones.
    """
    j = np.arange(M)
    j = np.where(j <= M // 2, j, j - M)
    return (2.0 * np.pi / L) * j.astype(np.float64)


@dataclass(frozen=True)
class EwaldGrid:
    """
    Uniform grid over the periodic box ``[-Lx/2, Lx/2) x [-Ly/2, Ly/2)``.

    Parameters
    ----------
    Mx, My : int
        Number of grid intervals along x and y (must be even).
    Lx, Ly : float
        Periodic box lengths.

    Notes
    -----
    Grid channels are stored as ``(My, Mx)`` arrays indexed ``[iy, ix]``;
    node ``(iy, ix)`` sits at ``(-Lx/2 + ix*hx, -Ly/2 + iy*hy)``. Stacks of
    channels are ``(C, My, Mx)``.
    """

    Mx: int
    My: int
    Lx: float
    Ly: float

    def __post_init__(self) -> None:
        for name in ("Mx", "My"):
            value = getattr(self, name)
            try:
                valid = value is not None and int(value) == value and value > 0
            except (TypeError, ValueError):
                valid = False
            if not valid:
                raise InvalidParameterError(f"{name} must be a positive integer, got {value!r}")
            if value % 2 != 0:
                raise InvalidParameterError(f"{name} must be even, got {value}")
            object.__setattr__(self, name, int(value))
        for name in ("Lx", "Ly"):
            value = getattr(self, name)
            try:
                length = float(value)
            except (TypeError, ValueError):
                length = np.nan
            if not np.isfinite(length) or length <= 0:
                raise InvalidParameterError(f"{name} must be a positive finite length, got {value!r}")
            object.__setattr__(self, name, length)

        object.__setattr__(self, "hx", self.Lx / self.Mx)
        object.__setattr__(self, "hy", self.Ly / self.My)

        k1 = signed_wavenumbers(self.Mx, self.Lx)
        k2 = signed_wavenumbers(self.My, self.Ly)
        object.__setattr__(self, "k1", k1)
        object.__setattr__(self, "k2", k2)
        K1, K2 = np.meshgrid(k1, k2, indexing="xy")
        object.__setattr__(self, "K1", K1)
        object.__setattr__(self, "K2", K2)
        object.__setattr__(self, "ksq", K1**2 + K2**2)

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.My, self.Mx)

    def zeros(self, channels: int = 1, *, complex_: bool = False) -> np.ndarray:
        """Return a zero ``(channels, My, Mx)`` stack."""
        dtype = np.complex128 if complex_ else np.float64
        return np.zeros((channels, self.My, self.Mx), dtype=dtype)

    def node_coordinates(self) -> Tuple[np.ndarray, np.ndarray]:
        """Physical coordinates ``(X, Y)`` of every grid node, each ``(My, Mx)``."""
        x = -0.5 * self.Lx + self.hx * np.arange(self.Mx)
        y = -0.5 * self.Ly + self.hy * np.arange(self.My)
        return np.meshgrid(x, y, indexing="xy")


__all__ = ["EwaldGrid", "signed_wavenumbers"]

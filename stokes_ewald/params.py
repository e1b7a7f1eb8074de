"""
Ewald splitting and Gaussian window parameters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .errors import InvalidParameterError
from .grid import EwaldGrid


def _positive(name: str, value) -> float:
    if value is None:
        raise InvalidParameterError(f"{name} must be supplied")
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidParameterError(f"{name} must be a number, got {value!r}") from None
    if not np.isfinite(value) or value <= 0.0:
        raise InvalidParameterError(f"{name} must be positive, got {value!r}")
    return value


@dataclass(frozen=True)
class EwaldParameters:
    """
    Parameters of the k-space sum.

    Parameters
    ----------
    xi : float
        Ewald splitting parameter.
    eta : float
        Fraction of the Gaussian screening handled by the spreading window.
    P : int
        Window parameter; the stencil covers ``(P+1) x (P+1)`` nodes and must be
        centred, so ``P`` has to be even.
    w : float, optional
        Physical half-width of the window. Defaults to ``P*hx/2``.
    """

    xi: float
    eta: float
    P: int
    w: Optional[float] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "xi", _positive("xi", self.xi))
        object.__setattr__(self, "eta", _positive("eta", self.eta))
        P = self.P
        try:
            valid = P is not None and int(P) == P and P > 0
        except (TypeError, ValueError):
            valid = False
        if not valid:
            raise InvalidParameterError(f"P must be a positive integer, got {P!r}")
        if P % 2 != 0:
            raise InvalidParameterError(f"P must be even so the stencil is centred, got {P}")
        object.__setattr__(self, "P", int(P))
        if self.w is not None:
            object.__setattr__(self, "w", _positive("w", self.w))

    def resolve_width(self, grid: EwaldGrid) -> float:
        if self.w is not None:
            return self.w
        return self.P * grid.hx / 2.0

    def normalization(self, grid: EwaldGrid) -> float:
        """Scale turning the discrete gathered convolution into the continuum field."""
        c = 4.0 * self.xi * self.xi / self.eta
        return c * c * grid.hx * grid.hy / np.pi


__all__ = ["EwaldParameters"]

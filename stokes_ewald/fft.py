"""
FFT provider for the k-space pipeline with optional FFTW acceleration.

Transforms act on the last two axes, so a ``(C, My, Mx)`` stack of grid
channels is transformed channel by channel in one call.
"""

from __future__ import annotations

import os
import numpy as np

FFTW_THREADS = int(os.environ.get("FFTW_THREADS", "4"))

try:  # pragma: no cover - relies on optional dependency
    import pyfftw
    from pyfftw.interfaces.numpy_fft import fft2 as _fft2
    from pyfftw.interfaces.numpy_fft import ifft2 as _ifft2

    pyfftw.interfaces.cache.enable()

    def fft2(a):
        """2D FFT over the last two axes using FFTW."""
        return _fft2(a, axes=(-2, -1), threads=FFTW_THREADS)

    def ifft2(a):
        """2D inverse FFT over the last two axes using FFTW."""
        return _ifft2(a, axes=(-2, -1), threads=FFTW_THREADS)

    FFT_BACKEND = "FFTW"
except ImportError:  # pragma: no cover - falls back automatically
    from numpy.fft import fft2, ifft2  # type: ignore  # noqa: F401

    FFT_BACKEND = "NumPy"


def forward_transform(H: np.ndarray) -> np.ndarray:
    """
    Forward transform of real grid channels.

    The result always carries a materialised imaginary part (zeros included),
    so the spectral filter can update it in place.
    """
    return np.array(fft2(H), dtype=np.complex128, copy=True)


def inverse_transform(Hhat: np.ndarray) -> np.ndarray:
    """Inverse transform keeping the real part only."""
    return np.ascontiguousarray(ifft2(Hhat).real, dtype=np.float64)


def set_fftw_threads(n: int) -> None:
    """
    Update the number of threads used by the FFTW backend.

    Parameters
    ----------
    n : int
        Desired number of threads (>=1). Ignored when FFTW is unavailable.
    """
    global FFTW_THREADS
    FFTW_THREADS = max(1, int(n))


def warm_fft_cache(shape, dtype=np.float64) -> None:
    """
    Perform dummy transforms to warm plan caches for the given grid shape.

    Parameters
    ----------
    shape : tuple[int, ...]
        Array shape to warm, e.g. ``(C, My, Mx)``.
    dtype : np.dtype
        Real-space dtype to emulate (np.float64 by default).
    """
    arr = np.zeros(shape, dtype=dtype)
    coeffs = forward_transform(arr)
    _ = inverse_transform(coeffs)


__all__ = [
    "fft2",
    "ifft2",
    "forward_transform",
    "inverse_transform",
    "FFT_BACKEND",
    "FFTW_THREADS",
    "set_fftw_threads",
    "warm_fft_cache",
]

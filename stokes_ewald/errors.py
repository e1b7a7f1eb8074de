"""
Exceptions raised by the k-space Ewald pipeline before any work is done.
"""

from __future__ import annotations


class InputShapeError(ValueError):
    """Point, force or normal arrays have the wrong shape or mismatched sizes."""


class InvalidParameterError(ValueError):
    """A grid or Ewald parameter is missing, non-positive or otherwise unusable."""


__all__ = ["InputShapeError", "InvalidParameterError"]

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from stokes_ewald import EwaldGrid, EwaldParameters


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def small_setup():
    """Unit box, well resolved Gaussian, stencil narrower than the grid."""
    grid = EwaldGrid(Mx=32, My=32, Lx=1.0, Ly=1.0)
    params = EwaldParameters(xi=10.0, eta=0.8, P=8)
    return grid, params

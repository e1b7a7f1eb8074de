import numpy as np
import pytest

from stokes_ewald import EwaldGrid, EwaldParameters, InvalidParameterError
from stokes_ewald.grid import signed_wavenumbers


def test_signed_wavenumbers_follow_fft_order_with_positive_nyquist():
    k = signed_wavenumbers(8, 2.0 * np.pi)
    np.testing.assert_array_equal(k, [0, 1, 2, 3, 4, -3, -2, -1])


def test_grid_layout_and_spacing():
    grid = EwaldGrid(Mx=16, My=8, Lx=2.0, Ly=1.0)
    assert grid.hx == pytest.approx(0.125)
    assert grid.hy == pytest.approx(0.125)
    assert grid.shape == (8, 16)
    assert grid.K1.shape == (8, 16)
    assert grid.ksq[0, 0] == 0.0
    X, Y = grid.node_coordinates()
    assert X[0, 0] == pytest.approx(-1.0)
    assert Y[0, 0] == pytest.approx(-0.5)
    assert X[0, 1] - X[0, 0] == pytest.approx(grid.hx)
    assert grid.zeros(4).shape == (4, 8, 16)
    assert grid.zeros(2, complex_=True).dtype == np.complex128


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(Mx=0, My=8, Lx=1.0, Ly=1.0),
        dict(Mx=8, My=-4, Lx=1.0, Ly=1.0),
        dict(Mx=7, My=8, Lx=1.0, Ly=1.0),
        dict(Mx=8, My=8, Lx=0.0, Ly=1.0),
        dict(Mx=8, My=8, Lx=1.0, Ly=-2.0),
        dict(Mx=8, My=8, Lx=1.0, Ly=np.inf),
        dict(Mx=8, My=8, Lx="wide", Ly=1.0),
        dict(Mx=8, My=8, Lx=1.0, Ly=None),
        dict(Mx="eight", My=8, Lx=1.0, Ly=1.0),
        dict(Mx=8.5, My=8, Lx=1.0, Ly=1.0),
    ],
)
def test_invalid_grid(kwargs):
    with pytest.raises(InvalidParameterError):
        EwaldGrid(**kwargs)


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(xi=0.0, eta=0.5, P=8),
        dict(xi=-1.0, eta=0.5, P=8),
        dict(xi=1.0, eta=0.0, P=8),
        dict(xi=1.0, eta=0.5, P=0),
        dict(xi=1.0, eta=0.5, P=7),
        dict(xi=1.0, eta=0.5, P=None),
        dict(xi=1.0, eta=0.5, P=8, w=-0.1),
        dict(xi="large", eta=0.5, P=8),
        dict(xi=1.0, eta=[0.5], P=8),
        dict(xi=1.0, eta=0.5, P="8"),
    ],
)
def test_invalid_parameters(kwargs):
    with pytest.raises(InvalidParameterError):
        EwaldParameters(**kwargs)


def test_parameter_errors_are_value_errors():
    with pytest.raises(ValueError, match="xi"):
        EwaldParameters(xi=0.0, eta=0.5, P=8)


def test_default_width_and_normalization():
    grid = EwaldGrid(Mx=32, My=32, Lx=2.0 * np.pi, Ly=2.0 * np.pi)
    params = EwaldParameters(xi=5.0, eta=0.9, P=16)
    assert params.resolve_width(grid) == pytest.approx(16 * grid.hx / 2)
    assert EwaldParameters(xi=5.0, eta=0.9, P=16, w=0.3).resolve_width(grid) == 0.3
    expected = (4 * 25 / 0.9) ** 2 * grid.hx * grid.hy / np.pi
    assert params.normalization(grid) == pytest.approx(expected)

import numpy as np
import pytest

from stokes_ewald import EwaldGrid
from stokes_ewald.fft import forward_transform, inverse_transform
from stokes_ewald.filters import apply_dlp_filter, apply_slp_filter, stokeslet_symbol, stresslet_symbol

XI = 5.0
ETA = 0.9


@pytest.fixture
def grid():
    return EwaldGrid(Mx=32, My=16, Lx=2.0 * np.pi, Ly=np.pi)


def _random_spectrum(rng, grid, channels):
    return rng.normal(size=(channels,) + grid.shape) + 1j * rng.normal(size=(channels,) + grid.shape)


def test_slp_filter_output_is_divergence_free(rng, grid):
    Hhat = _random_spectrum(rng, grid, 2)
    apply_slp_filter(Hhat, grid, XI, ETA)
    div = grid.K1 * Hhat[0] + grid.K2 * Hhat[1]
    scale = np.max(np.abs(grid.K1 * Hhat[0]))
    assert np.max(np.abs(div)) <= 1e-13 * scale


def test_slp_filter_matches_symbol_away_from_dc(rng, grid):
    Hhat = _random_spectrum(rng, grid, 2)
    f1, f2 = Hhat[0].copy(), Hhat[1].copy()
    apply_slp_filter(Hhat, grid, XI, ETA)
    j, k = 3, 5
    k1, k2 = grid.K1[j, k], grid.K2[j, k]
    damping = np.exp(-(k1**2 + k2**2) * (1 - ETA) / (4 * XI**2))
    u1, u2 = stokeslet_symbol(k1, k2, f1[j, k], f2[j, k], XI, damping)
    assert Hhat[0, j, k] == pytest.approx(u1)
    assert Hhat[1, j, k] == pytest.approx(u2)


@pytest.mark.parametrize("channels, apply_filter", [(2, apply_slp_filter), (4, apply_dlp_filter)])
def test_zero_mode_is_exactly_zero_and_output_finite(rng, grid, channels, apply_filter):
    Hhat = _random_spectrum(rng, grid, channels)
    with np.errstate(all="raise"):
        apply_filter(Hhat, grid, XI, ETA)
    for ch in range(channels):
        assert Hhat[ch, 0, 0].real == 0.0
        assert Hhat[ch, 0, 0].imag == 0.0
    assert np.all(np.isfinite(Hhat))


def test_filter_acts_on_materialised_imaginary_part(grid):
    # a real-valued transform still yields a full complex array
    Hhat = forward_transform(np.zeros((2,) + grid.shape))
    assert Hhat.dtype == np.complex128
    assert Hhat.shape == (2,) + grid.shape
    apply_slp_filter(Hhat, grid, XI, ETA)
    assert np.all(Hhat == 0)


def test_forward_inverse_round_trip(rng, grid):
    H = rng.normal(size=(4,) + grid.shape)
    np.testing.assert_allclose(inverse_transform(forward_transform(H)), H, atol=1e-12)


def test_dlp_filter_off_diagonal_components_agree(rng, grid):
    Hhat = _random_spectrum(rng, grid, 4)
    apply_dlp_filter(Hhat, grid, XI, ETA)
    np.testing.assert_allclose(Hhat[1], Hhat[2], rtol=1e-12, atol=1e-14)


def test_stresslet_symbol_isotropic_source():
    # f n = identity gives T11 = T22 by symmetry along the diagonal wavevector
    k1 = k2 = 1.5
    T11, T21, T12, T22 = stresslet_symbol(k1, k2, (1.0, 0.0, 0.0, 1.0), XI, 1.0)
    assert T11 == pytest.approx(T22)
    assert T21 == pytest.approx(T12)


# (iy, ix) modes covering every sign combination of (k1, k2) and both
# Nyquist indices (ix = Mx/2, iy = My/2).
MODES = [(3, 5), (13, 29), (3, 27), (11, 7), (0, 16), (8, 0), (8, 16), (8, 21)]


def _stokeslet_by_projector(k1, k2, f1, f2, xi, e):
    # u = e (1/K^4 + 1/(4 xi^2 K^2)) (K^2 I - k k^T) f
    Ksq = k1 * k1 + k2 * k2
    proj = Ksq * np.eye(2) - np.outer([k1, k2], [k1, k2])
    u = (1.0 / Ksq**2 + 0.25 / (Ksq * xi * xi)) * e * (proj @ np.array([f1, f2]))
    return u[0], u[1]


def _stresslet_by_components(k1, k2, c, xi, e, mu=1.0):
    # channels in spread order: f1n1, f2n1, f1n2, f2n2
    f1n1, f2n1, f1n2, f2n2 = c
    Ksq = k1 * k1 + k2 * k2
    q = mu * (1 / Ksq + 0.25 / (xi * xi))
    kfk = k1 * k1 * f1n1 + k1 * k2 * f2n1 + k2 * k1 * f1n2 + k2 * k2 * f2n2
    T11 = e * (
        kfk / Ksq
        - q
        * (
            2 * k1 * k1 * (f1n1 + f2n2)
            + k1 * (k1 * f1n1 + k2 * f2n1)
            + k1 * (k1 * f1n1 + k2 * f1n2)
            + k1 * (k1 * f1n1 + k2 * f2n1)
            + k1 * (k1 * f1n1 + k2 * f1n2)
            - 4 * k1 * k1 * kfk / Ksq
        )
    )
    T21 = (
        -e
        * q
        * (
            2 * k2 * k1 * (f1n1 + f2n2)
            + k2 * (k1 * f1n1 + k2 * f2n1)
            + k2 * (k1 * f1n1 + k2 * f1n2)
            + k1 * (k1 * f1n2 + k2 * f2n2)
            + k1 * (k1 * f2n1 + k2 * f2n2)
            - 4 * k2 * k1 * kfk / Ksq
        )
    )
    T12 = (
        -e
        * q
        * (
            2 * k1 * k2 * (f1n1 + f2n2)
            + k1 * (k1 * f1n2 + k2 * f2n2)
            + k1 * (k1 * f2n1 + k2 * f2n2)
            + k2 * (k1 * f1n1 + k2 * f2n1)
            + k2 * (k1 * f1n1 + k2 * f1n2)
            - 4 * k1 * k2 * kfk / Ksq
        )
    )
    T22 = e * (
        kfk / Ksq
        - q
        * (
            2 * k2 * k2 * (f1n1 + f2n2)
            + k2 * (k1 * f1n2 + k2 * f2n2)
            + k2 * (k1 * f2n1 + k2 * f2n2)
            + k2 * (k1 * f1n2 + k2 * f2n2)
            + k2 * (k1 * f2n1 + k2 * f2n2)
            - 4 * k2 * k2 * kfk / Ksq
        )
    )
    return T11, T21, T12, T22


def test_slp_filter_matches_projector_form_of_stokeslet(rng, grid):
    Hhat = _random_spectrum(rng, grid, 2)
    f = Hhat.copy()
    apply_slp_filter(Hhat, grid, XI, ETA)
    for iy, ix in MODES:
        k1, k2 = grid.K1[iy, ix], grid.K2[iy, ix]
        e = np.exp(-(k1 * k1 + k2 * k2) * (1 - ETA) / (4 * XI * XI))
        u1, u2 = _stokeslet_by_projector(k1, k2, f[0, iy, ix], f[1, iy, ix], XI, e)
        assert Hhat[0, iy, ix] == pytest.approx(u1, rel=1e-12, abs=1e-14)
        assert Hhat[1, iy, ix] == pytest.approx(u2, rel=1e-12, abs=1e-14)


def test_stokeslet_symbol_at_known_mode():
    # k = (3, 4), K^2 = 25, xi = 0.5, no damping: B = 1/625 + 1/25
    u1, u2 = stokeslet_symbol(3.0, 4.0, 1.0, 2.0, 0.5, 1.0)
    B = 1.0 / 625.0 + 1.0 / 25.0
    assert u1 == pytest.approx(4.0 * (4.0 * 1.0 - 3.0 * 2.0) * B, rel=1e-14)
    assert u2 == pytest.approx(3.0 * (3.0 * 2.0 - 4.0 * 1.0) * B, rel=1e-14)


def test_dlp_filter_matches_component_formulas(rng, grid):
    Hhat = _random_spectrum(rng, grid, 4)
    c = Hhat.copy()
    apply_dlp_filter(Hhat, grid, XI, ETA)
    for iy, ix in MODES:
        k1, k2 = grid.K1[iy, ix], grid.K2[iy, ix]
        e = np.exp(-(k1 * k1 + k2 * k2) * (1 - ETA) / (4 * XI * XI))
        expected = _stresslet_by_components(k1, k2, c[:, iy, ix], XI, e)
        for ch in range(4):
            assert Hhat[ch, iy, ix] == pytest.approx(expected[ch], rel=1e-12, abs=1e-13)


def test_stresslet_cross_channels_enter_symmetrically():
    # f2n1 and f1n2 each contribute, and only through their sum
    c = (0.3, 1.7, -0.9, 0.4)
    swapped = (0.3, -0.9, 1.7, 0.4)
    T = stresslet_symbol(1.0, 2.0, c, XI, 1.0)
    np.testing.assert_allclose(T, _stresslet_by_components(1.0, 2.0, c, XI, 1.0), rtol=1e-13, atol=1e-15)
    np.testing.assert_allclose(stresslet_symbol(1.0, 2.0, swapped, XI, 1.0), T, rtol=1e-13)
    for single in [(0.0, 1.0, 0.0, 0.0), (0.0, 0.0, 1.0, 0.0)]:
        np.testing.assert_allclose(
            stresslet_symbol(1.0, 2.0, single, XI, 1.0),
            _stresslet_by_components(1.0, 2.0, single, XI, 1.0),
            rtol=1e-13,
            atol=1e-15,
        )

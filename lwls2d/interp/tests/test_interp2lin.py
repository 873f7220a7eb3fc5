import numpy as np
import pytest
from numpy.testing import assert_allclose

from lwls2d.errors import DimensionMismatch
from lwls2d.interp import interp2lin


def _make_surface():
    A = np.array(
        [
            [13.0, 8.0, 5.0, 1.0],
            [-1.0, 2.0, 4.0, 6.0],
            [12.0, 7.0, 3.0, 2.0],
            [-5.0, -4.0, 1.0, 4.0],
            [8.0, 4.0, 2.0, -3.0],
        ]
    )
    x = np.array([0.0, 1.0, 3.0, 4.0, 5.0])
    y = np.array([10.0, 11.0, 12.0, 13.0])
    return x, y, A


def test_interp2lin_end_to_end_example():
    out = interp2lin(np.array([0.0, 1.0]), np.array([0.0, 1.0]), np.array([[0.0, 1.0], [1.0, 2.0]]), np.array([0.5]), np.array([0.5]))
    assert out.shape == (1,)
    assert_allclose(out, [1.0], rtol=0, atol=1e-12)


def test_interp2lin_accepts_lists():
    out = interp2lin([0.0, 1.0], [0.0, 1.0], [[0.0, 1.0], [1.0, 2.0]], [0.25, 1.0], [0.75, 0.0])
    assert_allclose(out, [1.0, 1.0], rtol=0, atol=1e-12)


def test_interp2lin_happy_case():
    x, y, A = _make_surface()
    x_new = np.linspace(0.0, 5.0, 7)
    y_new = np.linspace(10.0, 13.0, 7)
    # fmt: off
    expected = np.array(
        [
            [13.00000000, 10.50000000, 8.00000000, 6.50000000, 5.00000000, 3.00000000, 1.00000000],
            [1.33333333, 2.16666667, 3.00000000, 3.58333333, 4.16666667, 4.66666667, 5.16666667],
            [3.33333333, 3.50000000, 3.66666667, 3.66666667, 3.66666667, 4.16666667, 4.66666667],
            [8.75000000, 7.25000000, 5.75000000, 4.50000000, 3.25000000, 3.12500000, 3.00000000],
            [6.33333333, 4.83333333, 3.33333333, 2.83333333, 2.33333333, 2.50000000, 2.66666667],
            [-2.83333333, -2.75000000, -2.66666667, -0.75000000, 1.16666667, 2.00000000, 2.83333333],
            [8.00000000, 6.00000000, 4.00000000, 3.00000000, 2.00000000, -0.50000000, -3.00000000],
        ]
    )
    # fmt: on
    xv, yv = np.meshgrid(x_new, y_new, indexing="ij")
    out = interp2lin(x, y, A, xv.ravel(), yv.ravel())
    assert_allclose(out.reshape(7, 7), expected, rtol=1e-7, atol=1e-7)


def test_interp2lin_exact_at_grid_points():
    x, y, A = _make_surface()
    xv, yv = np.meshgrid(x, y, indexing="ij")
    out = interp2lin(x, y, A, xv.ravel(), yv.ravel())
    assert_allclose(out, A.ravel(), rtol=0, atol=1e-12)


def test_interp2lin_affine_between_adjacent_rows():
    x, y, A = _make_surface()
    t = np.linspace(0.0, 1.0, 11)
    # along x between x[1] and x[2] at y[2]
    out = interp2lin(x, y, A, x[1] + t * (x[2] - x[1]), np.full(t.size, y[2]))
    assert_allclose(out, (1.0 - t) * A[1, 2] + t * A[2, 2], rtol=0, atol=1e-12)
    # along y between y[0] and y[1] at x[3]
    out = interp2lin(x, y, A, np.full(t.size, x[3]), y[0] + t * (y[1] - y[0]))
    assert_allclose(out, (1.0 - t) * A[3, 0] + t * A[3, 1], rtol=0, atol=1e-12)


def test_interp2lin_reproduces_bilinear_function():
    x = np.array([0.0, 0.3, 1.0, 2.5])
    y = np.array([-1.0, 0.0, 2.0])
    xv, yv = np.meshgrid(x, y, indexing="ij")
    A = 1.0 + 2.0 * xv - 3.0 * yv + 0.5 * xv * yv
    rng = np.random.default_rng(7)
    xq = rng.uniform(0.0, 2.5, 50)
    yq = rng.uniform(-1.0, 2.0, 50)
    assert_allclose(interp2lin(x, y, A, xq, yq), 1.0 + 2.0 * xq - 3.0 * yq + 0.5 * xq * yq, rtol=0, atol=1e-12)


def test_interp2lin_clamps_outside_grid():
    x, y, A = _make_surface()
    xq = np.array([-1.0, 7.0, 2.0, 2.0, -3.0, 9.0])
    yq = np.array([10.5, 10.5, 5.0, 20.0, 0.0, 99.0])
    clamped_x = np.clip(xq, x[0], x[-1])
    clamped_y = np.clip(yq, y[0], y[-1])
    assert_allclose(interp2lin(x, y, A, xq, yq), interp2lin(x, y, A, clamped_x, clamped_y), rtol=0, atol=1e-12)
    assert_allclose(interp2lin(x, y, A, [-3.0], [0.0]), [A[0, 0]])
    assert_allclose(interp2lin(x, y, A, [9.0], [99.0]), [A[-1, -1]])


def test_interp2lin_single_point_axis():
    x = np.array([1.0])
    y = np.array([0.0, 2.0])
    A = np.array([[4.0, 8.0]])
    assert_allclose(interp2lin(x, y, A, [0.0, 1.0, 5.0], [1.0, 1.0, 3.0]), [6.0, 6.0, 8.0])


def test_interp2lin_nan_cells_stay_local():
    x = np.array([0.0, 1.0, 2.0])
    y = np.array([0.0, 1.0, 2.0])
    A = np.arange(9.0).reshape(3, 3)
    A[2, 2] = np.nan
    out = interp2lin(x, y, A, [0.5, 1.0, 1.5, 2.0], [0.5, 1.0, 1.5, 1.0])
    assert_allclose(out[:2], [2.0, 4.0])
    assert np.isnan(out[2])
    assert_allclose(out[3], A[2, 1])


def test_interp2lin_empty_query():
    x, y, A = _make_surface()
    assert interp2lin(x, y, A, np.array([]), np.array([])).shape == (0,)


def test_interp2lin_shape_mismatch():
    x, y, A = _make_surface()
    with pytest.raises(DimensionMismatch, match="zin must have shape"):
        interp2lin(x, y, A.T, [1.0], [11.0])
    with pytest.raises(DimensionMismatch, match="zin must have shape"):
        interp2lin(x[:-1], y, A, [1.0], [11.0])
    with pytest.raises(DimensionMismatch, match="xou and you must have the same length"):
        interp2lin(x, y, A, [1.0, 2.0], [11.0])


def test_interp2lin_dimension_mismatch_is_value_error():
    x, y, A = _make_surface()
    with pytest.raises(ValueError):
        interp2lin(x, y, A[:, :2], [1.0], [11.0])


def test_interp2lin_invalid_axes():
    x, y, A = _make_surface()
    with pytest.raises(ValueError, match="xin must be strictly increasing"):
        interp2lin(x[::-1], y, A, [1.0], [11.0])
    with pytest.raises(ValueError, match="yin must be strictly increasing"):
        interp2lin(x, np.array([10.0, 11.0, 11.0, 13.0]), A, [1.0], [11.0])
    with pytest.raises(ValueError, match="Input array xin contains NaN or infinite values"):
        interp2lin(np.array([0.0, np.nan, 3.0, 4.0, 5.0]), y, A, [1.0], [11.0])
    with pytest.raises(ValueError, match="Input array xin contains NaN or infinite values"):
        interp2lin(np.array([0.0, 1.0, np.inf]), np.array([0.0, 1.0]), np.ones((3, 2)), [np.inf, 0.5], [0.5, 0.5])
    with pytest.raises(ValueError, match="Input array yin contains NaN or infinite values"):
        interp2lin(np.array([0.0, 1.0]), np.array([-np.inf, 0.0]), np.ones((2, 2)), [0.5], [0.5])
    with pytest.raises(ValueError, match="xou and you must be 1D arrays"):
        interp2lin(x, y, A, [[1.0]], [11.0])
    with pytest.raises(ValueError, match="Input array you contains NaN values"):
        interp2lin(x, y, A, [1.0], [np.nan])

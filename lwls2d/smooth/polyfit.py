"""Local weighted least squares smoothing of scattered 2D data for lwls2d."""

# Authors: Ching-Chuan Chen
# SPDX-License-Identifier: MIT

import logging
import warnings
from typing import Optional, Tuple, Union

import numpy as np
from scipy import linalg
from sklearn.utils.validation import check_array

from lwls2d.errors import DimensionMismatch, InvalidBandwidth, InvalidPolynomialOrder
from lwls2d.interp.interp import check_grid_axis
from lwls2d.smooth.kernel import KernelType, get_kernel_function, kernel_weights_2d, resolve_kernel

logger = logging.getLogger(__name__)

# Singular values of the weighted local design below RANK_TOLERANCE times the largest one
# count as zero; a rank-deficient local design yields the no-estimate sentinel (NaN).
RANK_TOLERANCE = 1e-10

# Relative slack on the compact-kernel window. An observation that rounding puts just past
# one bandwidth is kept, with its scaled offset set back to the window edge.
WINDOW_TOLERANCE = 1e-12

SUPPORTED_POLY_ORDERS = (1, 2)

# (x, y) -> ((x - y) / sqrt(2), (x + y) / sqrt(2))
ROTATION_MATRIX = np.array([[1.0, -1.0], [1.0, 1.0]]) / np.sqrt(2.0)


def rotate_coordinates(points: np.ndarray) -> np.ndarray:
    """Rotate (n, 2) points by 45 degrees so that the diagonal x == y becomes the axis u == 0."""
    return points @ ROTATION_MATRIX.T


def check_bandwidth(bandwidth) -> np.ndarray:
    """Validate a bandwidth and return it as a float64 pair.

    A scalar is used on both axes.

    Raises
    ------
    InvalidBandwidth
        If `bandwidth` is not numeric, has more than two entries, is NaN or is not positive.
    """
    try:
        raw = np.asarray(bandwidth)
    except ValueError:
        raise InvalidBandwidth("bandwidth must be a numeric value or a pair of numeric values.") from None
    if raw.dtype.kind not in "iuf":
        raise InvalidBandwidth("bandwidth must be a numeric value or a pair of numeric values.")
    if raw.ndim == 0:
        bw = np.full(2, raw, dtype=np.float64)
    elif raw.shape == (2,):
        bw = raw.astype(np.float64)
    else:
        raise InvalidBandwidth(f"bandwidth must be a scalar or have exactly 2 entries, got shape {raw.shape}.")
    if np.isnan(bw).any():
        raise InvalidBandwidth("bandwidth must not be NaN.")
    if np.any(bw <= 0) or not np.all(np.isfinite(bw)):
        raise InvalidBandwidth(f"bandwidth must be positive and finite, got {bw.tolist()}.")
    return bw


def check_poly_order(npoly) -> int:
    """Validate the order of the local polynomial."""
    if isinstance(npoly, (bool, np.bool_)) or not isinstance(npoly, (int, np.integer)):
        raise InvalidPolynomialOrder(f"npoly must be an integer in {SUPPORTED_POLY_ORDERS}, got {npoly!r}.")
    if int(npoly) not in SUPPORTED_POLY_ORDERS:
        raise InvalidPolynomialOrder(f"npoly must be one of {SUPPORTED_POLY_ORDERS}, got {npoly}.")
    return int(npoly)


def check_samples(t_pairs, cxxn, win) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Validate observation locations, values and weights.

    Parameters
    ----------
    t_pairs : array_like of shape (n, 2)
        Observation locations.
    cxxn : array_like of shape (n,), (1, n) or (n, 1)
        Observed values.
    win : array_like of shape (n,)
        Nonnegative observation weights.

    Returns
    -------
    tuple of np.ndarray
        ``(t_pairs, values, weights)`` as float64 arrays of shapes (n, 2), (n,) and (n,).
    """
    t_pairs = check_array(t_pairs, ensure_2d=True, dtype=np.float64)
    if t_pairs.shape[1] != 2:
        raise DimensionMismatch(f"t_pairs must be a 2D array with shape (n, 2), got {t_pairs.shape}.")
    n = t_pairs.shape[0]

    values = check_array(cxxn, ensure_2d=False, dtype=np.float64)
    if values.ndim == 2 and 1 in values.shape:
        values = values.ravel()
    if values.ndim != 1:
        raise DimensionMismatch(f"cxxn must be a vector or a single row/column matrix, got shape {values.shape}.")
    if values.size != n:
        raise DimensionMismatch(f"cxxn must have {n} values to match t_pairs, got {values.size}.")

    weights = check_array(win, ensure_2d=False, dtype=np.float64)
    if weights.ndim != 1:
        raise DimensionMismatch("win must be a 1D array.")
    if weights.size != n:
        raise DimensionMismatch(f"win must have {n} weights to match t_pairs, got {weights.size}.")
    if np.any(weights < 0):
        raise ValueError("All weights in win must be nonnegative.")
    return t_pairs, values, weights


def check_query_points(xygrid) -> np.ndarray:
    """Validate an arbitrary set of (q, 2) query points."""
    xygrid = check_array(xygrid, ensure_2d=True, dtype=np.float64)
    if xygrid.shape[1] != 2:
        raise DimensionMismatch(f"xygrid must be a 2D array with shape (q, 2), got {xygrid.shape}.")
    return xygrid


def _num_params(npoly: int) -> int:
    return 3 if npoly == 1 else 6


def _design_matrix(scaled: np.ndarray, npoly: int) -> np.ndarray:
    u = scaled[:, 0]
    v = scaled[:, 1]
    columns = [np.ones_like(u), u, v]
    if npoly == 2:
        columns += [u * u, u * v, v * v]
    return np.column_stack(columns)


class _LocalSmoother:
    """Window selection and weighted design shared by the full smoothing pass and the bandwidth probe.

    Observations are sorted by their first coordinate once (stable, so ties keep the input
    order) and every local window is located by binary search along that axis.
    """

    def __init__(
        self,
        coords: np.ndarray,
        values: np.ndarray,
        weights: np.ndarray,
        bandwidth: np.ndarray,
        kernel_type: KernelType,
        npoly: int,
    ) -> None:
        order = np.argsort(coords[:, 0], kind="stable")
        self.coords = coords[order]
        self.values = values[order]
        self.weights = weights[order]
        self.bandwidth = bandwidth
        self.kernel_type = kernel_type
        self.kernel_func = get_kernel_function(kernel_type)
        self.npoly = npoly
        self.num_params = _num_params(npoly)

    def _window(self, center: np.ndarray) -> np.ndarray:
        if not self.kernel_type.is_compact:
            return np.arange(self.coords.shape[0])
        reach = self.bandwidth * (1.0 + WINDOW_TOLERANCE)
        first = self.coords[:, 0]
        lo = np.searchsorted(first, center[0] - reach[0], side="left")
        hi = np.searchsorted(first, center[0] + reach[0], side="right")
        in_band = np.abs(self.coords[lo:hi, 1] - center[1]) <= reach[1]
        return lo + np.flatnonzero(in_band)

    def local_system(self, center: np.ndarray) -> Optional[Tuple[np.ndarray, np.ndarray]]:
        """Return the square-root weighted design and response around `center`.

        None means the window holds fewer distinct points than local parameters.
        """
        idx = self._window(center)
        scaled = (self.coords[idx] - center) / self.bandwidth
        if self.kernel_type.is_compact:
            scaled = np.clip(scaled, -1.0, 1.0)
        kw = kernel_weights_2d(scaled, self.kernel_func, self.weights[idx])
        positive = kw > 0.0
        if np.count_nonzero(positive) < self.num_params:
            return None
        scaled = scaled[positive]
        if np.unique(scaled, axis=0).shape[0] < self.num_params:
            return None
        sqrt_kw = np.sqrt(kw[positive])
        design = _design_matrix(scaled, self.npoly) * sqrt_kw[:, np.newaxis]
        return design, self.values[idx[positive]] * sqrt_kw

    def is_supported(self, center: np.ndarray) -> bool:
        system = self.local_system(center)
        if system is None:
            return False
        singular_values = linalg.svdvals(system[0])
        return bool(singular_values[-1] > RANK_TOLERANCE * singular_values[0])

    def estimate(self, center: np.ndarray) -> float:
        system = self.local_system(center)
        if system is None:
            return np.nan
        design, response = system
        beta, _, rank, _ = linalg.lstsq(design, response, cond=RANK_TOLERANCE)
        if rank < self.num_params:
            return np.nan
        return beta[0]

    def smooth(self, queries: np.ndarray) -> np.ndarray:
        out = np.array([self.estimate(center) for center in queries], dtype=np.float64)
        num_missing = int(np.count_nonzero(np.isnan(out)))
        logger.debug(
            "Smoothed %d observations at %d query points with %s kernel, bandwidth %s and npoly %d; %d points without estimate.",
            self.coords.shape[0],
            queries.shape[0],
            self.kernel_type,
            self.bandwidth.tolist(),
            self.npoly,
            num_missing,
        )
        if queries.shape[0] > 0 and num_missing == queries.shape[0]:
            warnings.warn("No query point has enough local data for the local fit; consider increasing the bandwidth.")
        return out

    def all_supported(self, queries: np.ndarray) -> bool:
        for center in queries:
            if not self.is_supported(center):
                logger.debug("Bandwidth %s leaves the query point %s without enough local data.", self.bandwidth.tolist(), center.tolist())
                return False
        return True


def _grid_points(xgrid: np.ndarray, ygrid: np.ndarray) -> np.ndarray:
    xv, yv = np.meshgrid(xgrid, ygrid, indexing="ij")
    return np.column_stack((xv.ravel(), yv.ravel()))


def _prepare_grid_smoother(bandwidth, kernel_type, t_pairs, cxxn, win, xgrid, ygrid) -> Tuple[_LocalSmoother, np.ndarray, Tuple[int, int]]:
    bandwidth = check_bandwidth(bandwidth)
    kernel_type = resolve_kernel(kernel_type)
    t_pairs, values, weights = check_samples(t_pairs, cxxn, win)
    xgrid = check_grid_axis(xgrid, "xgrid")
    ygrid = check_grid_axis(ygrid, "ygrid")
    smoother = _LocalSmoother(t_pairs, values, weights, bandwidth, kernel_type, npoly=1)
    return smoother, _grid_points(xgrid, ygrid), (xgrid.size, ygrid.size)


def _prepare_rotated_smoother(bandwidth, kernel_type, t_pairs, cxxn, win, xygrid, npoly) -> Tuple[_LocalSmoother, np.ndarray]:
    bandwidth = check_bandwidth(bandwidth)
    kernel_type = resolve_kernel(kernel_type)
    npoly = check_poly_order(npoly)
    t_pairs, values, weights = check_samples(t_pairs, cxxn, win)
    xygrid = check_query_points(xygrid)
    smoother = _LocalSmoother(rotate_coordinates(t_pairs), values, weights, bandwidth, kernel_type, npoly)
    return smoother, rotate_coordinates(xygrid)


def mullwlsk(
    bandwidth: Union[float, np.ndarray],
    kernel_type: Union[KernelType, str],
    t_pairs: np.ndarray,
    cxxn: np.ndarray,
    win: np.ndarray,
    xgrid: np.ndarray,
    ygrid: np.ndarray,
    bw_check: bool = False,
) -> Union[np.ndarray, bool]:
    """Local linear smoothing of scattered 2D data onto a rectangular grid.

    For each grid point ``g = (gx, gy)`` a plane ``b0 + b1 * (x - gx) + b2 * (y - gy)`` is
    fitted by weighted least squares to the observations within the bandwidth window
    ``|x - gx| <= bw_x, |y - gy| <= bw_y``, with weights ``K((x - gx) / bw_x) * K((y - gy) / bw_y) * w``.
    The estimate is the intercept ``b0``. Kernels with infinite support use every observation.

    Parameters
    ----------
    bandwidth : float or array_like of shape (2,)
        Window half-widths ``(bw_x, bw_y)``; a scalar is used on both axes.
    kernel_type : KernelType or str
        Kernel, as a `KernelType` or a name accepted by `KernelType.from_name`.
    t_pairs : array_like of shape (n, 2)
        Observation locations.
    cxxn : array_like of shape (n,)
        Observed values; (1, n) and (n, 1) matrices are flattened.
    win : array_like of shape (n,)
        Nonnegative observation weights.
    xgrid : array_like of shape (gx,)
        Strictly increasing output grid along the first dimension.
    ygrid : array_like of shape (gy,)
        Strictly increasing output grid along the second dimension.
    bw_check : bool, default=False
        Return the result of `mullwlsk_bandwidth_check` instead of the surface.

    Returns
    -------
    np.ndarray of shape (gx, gy) or bool
        Smoothed surface. Grid points whose window holds fewer than 3 distinct
        points, or whose local design is rank deficient, are NaN.

    Raises
    ------
    InvalidBandwidth
        If the bandwidth is not positive.
    UnknownKernel
        If the kernel is not supported.
    DimensionMismatch
        If the sample arrays disagree in length or shape.
    ValueError
        If inputs contain NaN, weights are negative or a grid is not strictly increasing.

    See Also
    --------
    rotatedmullwlsk : Smoothing in rotated coordinates at arbitrary query points.
    """
    if bw_check:
        return mullwlsk_bandwidth_check(bandwidth, kernel_type, t_pairs, cxxn, win, xgrid, ygrid)
    smoother, queries, grid_shape = _prepare_grid_smoother(bandwidth, kernel_type, t_pairs, cxxn, win, xgrid, ygrid)
    return smoother.smooth(queries).reshape(grid_shape)


def mullwlsk_bandwidth_check(bandwidth, kernel_type, t_pairs, cxxn, win, xgrid, ygrid) -> bool:
    """Check that a bandwidth supports a local linear fit at every grid point.

    The arguments are those of `mullwlsk`. No fit is solved: each window is only tested
    for at least 3 distinct points and a full-rank weighted design.

    Returns
    -------
    bool
        False as soon as one grid point is under-supported, True otherwise.
    """
    smoother, queries, _ = _prepare_grid_smoother(bandwidth, kernel_type, t_pairs, cxxn, win, xgrid, ygrid)
    return smoother.all_supported(queries)


def rotatedmullwlsk(
    bandwidth: Union[float, np.ndarray],
    kernel_type: Union[KernelType, str],
    t_pairs: np.ndarray,
    cxxn: np.ndarray,
    win: np.ndarray,
    xygrid: np.ndarray,
    npoly: int = 1,
    bw_check: bool = False,
) -> Union[np.ndarray, bool]:
    """Local polynomial smoothing in coordinates rotated by 45 degrees.

    Observations and query points are mapped to ``u = (x - y) / sqrt(2)`` and
    ``v = (x + y) / sqrt(2)``. The window, the kernel weights and the local polynomial
    all use the rotated offsets, so the neighbourhood of a point on the diagonal
    ``x == y`` is symmetric across it. This is the usual way to estimate a covariance
    surface on its diagonal when the diagonal observations themselves are left out.

    Parameters
    ----------
    bandwidth : float or array_like of shape (2,)
        Window half-widths along ``(u, v)``.
    kernel_type : KernelType or str
        Kernel, as a `KernelType` or a name accepted by `KernelType.from_name`.
    t_pairs : array_like of shape (n, 2)
        Observation locations in the original coordinates.
    cxxn : array_like of shape (n,)
        Observed values.
    win : array_like of shape (n,)
        Nonnegative observation weights.
    xygrid : array_like of shape (q, 2)
        Query points in the original coordinates; any layout.
    npoly : {1, 2}, default=1
        Local polynomial order: 1 fits ``[1, u, v]``, 2 fits ``[1, u, v, u^2, uv, v^2]``.
    bw_check : bool, default=False
        Return the result of `rotatedmullwlsk_bandwidth_check` instead of the estimates.

    Returns
    -------
    np.ndarray of shape (q,) or bool
        Estimates in the order of `xygrid`; NaN where the window holds too few
        distinct points (3 or 6) or the local design is rank deficient.

    Raises
    ------
    InvalidPolynomialOrder
        If `npoly` is not 1 or 2.
    InvalidBandwidth, UnknownKernel, DimensionMismatch, ValueError
        As in `mullwlsk`.
    """
    if bw_check:
        return rotatedmullwlsk_bandwidth_check(bandwidth, kernel_type, t_pairs, cxxn, win, xygrid, npoly)
    smoother, queries = _prepare_rotated_smoother(bandwidth, kernel_type, t_pairs, cxxn, win, xygrid, npoly)
    return smoother.smooth(queries)


def rotatedmullwlsk_bandwidth_check(bandwidth, kernel_type, t_pairs, cxxn, win, xygrid, npoly: int = 1) -> bool:
    """Check that a bandwidth supports the rotated local fit at every query point.

    The arguments are those of `rotatedmullwlsk`.
    """
    smoother, queries = _prepare_rotated_smoother(bandwidth, kernel_type, t_pairs, cxxn, win, xygrid, npoly)
    return smoother.all_supported(queries)


def polyfit2d_points(
    t_pairs: np.ndarray,
    values: np.ndarray,
    weights: np.ndarray,
    new_points: np.ndarray,
    bandwidth: np.ndarray,
    kernel_type: KernelType,
) -> np.ndarray:
    """Local linear estimates at arbitrary (q, 2) points in the original coordinates.

    Inputs are assumed to be validated already.
    """
    return _LocalSmoother(t_pairs, values, weights, bandwidth, kernel_type, npoly=1).smooth(new_points)

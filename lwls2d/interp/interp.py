"""Bilinear interpolation on a rectangular 2D grid."""

# Authors: Ching-Chuan Chen
# SPDX-License-Identifier: MIT

from typing import Tuple

import numpy as np
from sklearn.utils.validation import check_array

from lwls2d.errors import DimensionMismatch

"""
lwls2d.interp.interp
====================

This module resamples a surface known on a rectangular grid onto arbitrary query points.

Functions
---------
- `find_le_indices`: Locate the bracketing interval of each query on a sorted axis.
- `interp2lin`: Bilinear interpolation with boundary clamping.
"""


def find_le_indices(axis: np.ndarray, x_new: np.ndarray) -> np.ndarray:
    """Find the index of the last axis value less than or equal to each query.

    Parameters
    ----------
    axis : np.ndarray of shape (n,)
        Strictly increasing axis.
    x_new : np.ndarray of shape (m,)
        Query coordinates.

    Returns
    -------
    np.ndarray of shape (m,)
        Indices into `axis`; -1 for queries below ``axis[0]``.

    Examples
    --------
    >>> find_le_indices(np.array([1.0, 2.0, 3.0]), np.array([0.5, 1.0, 2.5, 4.0]))
    array([-1,  0,  1,  2])
    """
    return np.searchsorted(axis, x_new, side="right").astype(np.int64) - 1


def _bracket(axis: np.ndarray, x_new: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return lower/upper cell indices and the blend factor after clamping to the axis range."""
    if axis.size == 1:
        zeros = np.zeros(x_new.size, dtype=np.int64)
        return zeros, zeros, np.zeros(x_new.size, dtype=axis.dtype)
    x_clamped = np.clip(x_new, axis[0], axis[-1])
    lower = np.clip(find_le_indices(axis, x_clamped), 0, axis.size - 2)
    upper = lower + 1
    frac = (x_clamped - axis[lower]) / (axis[upper] - axis[lower])
    return lower, upper, frac


def check_grid_axis(axis, name: str) -> np.ndarray:
    """Validate a grid axis: 1D, non-empty, finite and strictly increasing."""
    axis = check_array(axis, ensure_2d=False, dtype=np.float64, ensure_all_finite=False)
    if axis.ndim != 1:
        raise ValueError(f"{name} must be a 1D array.")
    if axis.size == 0:
        raise ValueError(f"{name} must not be empty.")
    if not np.all(np.isfinite(axis)):
        raise ValueError(f"Input array {name} contains NaN or infinite values.")
    if np.any(np.diff(axis) <= 0):
        raise ValueError(f"{name} must be strictly increasing.")
    return axis


def interp2lin(xin, yin, zin, xou, you) -> np.ndarray:
    """Bilinear interpolation of a gridded surface at paired query coordinates.

    Entry ``i`` of the output is the value of the surface at ``(xou[i], you[i])``.
    Queries outside ``[xin[0], xin[-1]] x [yin[0], yin[-1]]`` are clamped to the
    nearest boundary point, so boundary values are held rather than extrapolated.

    Parameters
    ----------
    xin : array_like of shape (m,)
        Strictly increasing grid coordinates along the first dimension.
    yin : array_like of shape (n,)
        Strictly increasing grid coordinates along the second dimension.
    zin : array_like of shape (m, n)
        Surface values, ``zin[i, j]`` at ``(xin[i], yin[j])``. NaN cells are
        allowed and propagate to the queries whose cell touches them.
    xou : array_like of shape (q,)
        Query coordinates along the first dimension.
    you : array_like of shape (q,)
        Query coordinates along the second dimension.

    Returns
    -------
    np.ndarray of shape (q,)
        Interpolated values.

    Raises
    ------
    DimensionMismatch
        If ``zin`` is not of shape (m, n) or `xou` and `you` differ in length.
    ValueError
        If an axis is empty, not finite or not strictly increasing, or a query is NaN.

    Examples
    --------
    >>> interp2lin([0.0, 1.0], [0.0, 1.0], [[0.0, 1.0], [1.0, 2.0]], [0.5], [0.5])
    array([1.])
    """
    xin = check_grid_axis(xin, "xin")
    yin = check_grid_axis(yin, "yin")
    zin = check_array(zin, ensure_2d=False, dtype=np.float64, ensure_all_finite=False)
    if zin.ndim != 2 or zin.shape != (xin.size, yin.size):
        raise DimensionMismatch(f"zin must have shape ({xin.size}, {yin.size}) to match xin and yin, got {zin.shape}.")

    xou = check_array(xou, ensure_2d=False, dtype=np.float64, ensure_all_finite=False, ensure_min_samples=0)
    you = check_array(you, ensure_2d=False, dtype=np.float64, ensure_all_finite=False, ensure_min_samples=0)
    if xou.ndim != 1 or you.ndim != 1:
        raise ValueError("xou and you must be 1D arrays.")
    if xou.size != you.size:
        raise DimensionMismatch(f"xou and you must have the same length, got {xou.size} and {you.size}.")
    if np.isnan(xou).any():
        raise ValueError("Input array xou contains NaN values.")
    if np.isnan(you).any():
        raise ValueError("Input array you contains NaN values.")

    x_lo, x_hi, x_frac = _bracket(xin, xou)
    y_lo, y_hi, y_frac = _bracket(yin, you)

    # interpolate along x on both bracketing columns, then along y
    z_lo = _blend(zin[x_lo, y_lo], zin[x_hi, y_lo], x_frac)
    z_hi = _blend(zin[x_lo, y_hi], zin[x_hi, y_hi], x_frac)
    return _blend(z_lo, z_hi, y_frac)


def _blend(lower: np.ndarray, upper: np.ndarray, frac: np.ndarray) -> np.ndarray:
    # grid nodes take the node value so that a NaN neighbour with zero weight does not leak in
    with np.errstate(invalid="ignore"):
        mixed = (1.0 - frac) * lower + frac * upper
    return np.where(frac == 0.0, lower, np.where(frac == 1.0, upper, mixed))

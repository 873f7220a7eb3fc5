"""Utility functions for covariance surface smoothing"""

# Authors: Ching-Chuan Chen
# SPDX-License-Identifier: MIT

from typing import Tuple, Union

import numpy as np

from lwls2d.interp.interp import check_grid_axis
from lwls2d.smooth.kernel import KernelType
from lwls2d.smooth.polyfit import check_samples, mullwlsk, rotatedmullwlsk


def aggregate_pairs(t_pairs: np.ndarray, values: np.ndarray, weights: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Collapse repeated coordinate pairs into one weighted observation each.

    Raw covariances of functional data repeat the same pair ``(t1, t2)`` once per subject.
    Each group of identical pairs is replaced by its weighted mean value and total weight,
    which leaves every local least squares fit unchanged while shrinking the data.

    Parameters
    ----------
    t_pairs : array_like of shape (n, 2)
        Observation locations.
    values : array_like of shape (n,)
        Observed values.
    weights : array_like of shape (n,)
        Nonnegative observation weights.

    Returns
    -------
    unique_pairs : np.ndarray of shape (k, 2)
        Distinct pairs in lexicographic order.
    mean_values : np.ndarray of shape (k,)
        Weighted mean value of each pair; the plain mean when the pair's weights sum to zero.
    sum_weights : np.ndarray of shape (k,)
        Summed weight of each pair.
    """
    t_pairs, values, weights = check_samples(t_pairs, values, weights)
    unique_pairs, idx = np.unique(t_pairs, axis=0, return_inverse=True)
    idx = idx.ravel()
    sum_weights = np.bincount(idx, weights=weights)
    weighted_sums = np.bincount(idx, weights=weights * values)
    plain_means = np.bincount(idx, weights=values) / np.bincount(idx)
    positive = sum_weights > 0.0
    mean_values = np.where(positive, weighted_sums / np.where(positive, sum_weights, 1.0), plain_means)
    return unique_pairs, mean_values, sum_weights


def smooth_covariance_surface(
    t_pairs: np.ndarray,
    values: np.ndarray,
    weights: np.ndarray,
    reg_grid: np.ndarray,
    bandwidth: Union[float, np.ndarray],
    kernel_type: Union[KernelType, str] = KernelType.EPANECHNIKOV,
) -> np.ndarray:
    """Smooth raw covariances into a symmetric surface on ``reg_grid x reg_grid``.

    Parameters
    ----------
    t_pairs : array_like of shape (n, 2)
        Time pairs ``(t1, t2)`` of the raw covariances.
    values : array_like of shape (n,)
        Raw covariances.
    weights : array_like of shape (n,)
        Nonnegative weights.
    reg_grid : array_like of shape (m,)
        Strictly increasing output grid.
    bandwidth : float or array_like of shape (2,)
        Bandwidth passed to `mullwlsk`.
    kernel_type : KernelType or str, default=KernelType.EPANECHNIKOV
        Kernel passed to `mullwlsk`.

    Returns
    -------
    np.ndarray of shape (m, m)
        ``(S + S.T) / 2`` where ``S`` is the `mullwlsk` surface; NaN where unsupported.
    """
    reg_grid = check_grid_axis(reg_grid, "reg_grid")
    unique_pairs, mean_values, sum_weights = aggregate_pairs(t_pairs, values, weights)
    surface = mullwlsk(bandwidth, kernel_type, unique_pairs, mean_values, sum_weights, reg_grid, reg_grid)
    return (surface + surface.T) / 2.0


def smooth_covariance_diagonal(
    t_pairs: np.ndarray,
    values: np.ndarray,
    weights: np.ndarray,
    reg_grid: np.ndarray,
    bandwidth: Union[float, np.ndarray],
    kernel_type: Union[KernelType, str] = KernelType.EPANECHNIKOV,
    npoly: int = 1,
) -> np.ndarray:
    """Estimate the covariance surface on its diagonal from the off-diagonal raw covariances.

    Raw covariances with ``t1 == t2`` carry the measurement error variance, so they are
    dropped and the diagonal is reached with `rotatedmullwlsk`, whose window is symmetric
    across the diagonal.

    Parameters
    ----------
    t_pairs : array_like of shape (n, 2)
        Time pairs ``(t1, t2)`` of the raw covariances.
    values : array_like of shape (n,)
        Raw covariances.
    weights : array_like of shape (n,)
        Nonnegative weights.
    reg_grid : array_like of shape (m,)
        Strictly increasing grid; the surface is evaluated at ``(t, t)`` for ``t`` in it.
    bandwidth : float or array_like of shape (2,)
        Bandwidth along the rotated axes.
    kernel_type : KernelType or str, default=KernelType.EPANECHNIKOV
        Kernel passed to `rotatedmullwlsk`.
    npoly : {1, 2}, default=1
        Local polynomial order.

    Returns
    -------
    np.ndarray of shape (m,)
        Diagonal estimates; NaN where unsupported.
    """
    reg_grid = check_grid_axis(reg_grid, "reg_grid")
    t_pairs, values, weights = check_samples(t_pairs, values, weights)
    off_diagonal = t_pairs[:, 0] != t_pairs[:, 1]
    if not off_diagonal.any():
        raise ValueError("t_pairs must contain off-diagonal pairs (t1 != t2).")
    unique_pairs, mean_values, sum_weights = aggregate_pairs(t_pairs[off_diagonal], values[off_diagonal], weights[off_diagonal])
    diagonal_points = np.column_stack((reg_grid, reg_grid))
    return rotatedmullwlsk(bandwidth, kernel_type, unique_pairs, mean_values, sum_weights, diagonal_points, npoly=npoly)

"""Polyfit2DModel for local linear surface smoothing with bilinear resampling."""

# Authors: Ching-Chuan Chen
# SPDX-License-Identifier: MIT

from typing import List, Optional, Tuple, Union

import numpy as np
from sklearn.base import BaseEstimator, RegressorMixin
from sklearn.utils.validation import check_array, check_is_fitted

from lwls2d.interp import interp2lin
from lwls2d.interp.interp import check_grid_axis
from lwls2d.smooth.kernel import KernelType, resolve_kernel
from lwls2d.smooth.polyfit import check_bandwidth, check_samples, mullwlsk, mullwlsk_bandwidth_check, polyfit2d_points


class Polyfit2DModel(BaseEstimator, RegressorMixin):
    """Local linear (2D) regression with kernel smoothing and bilinear interpolation.

    The surface is estimated on a regular grid with `mullwlsk`; predictions at other
    points resample that grid with `interp2lin`.

    Parameters
    ----------
    kernel_type : KernelType or str, default=KernelType.GAUSSIAN
        Kernel used for smoothing; names are parsed with `KernelType.from_name`.

    Attributes
    ----------
    X_ : np.ndarray of shape (n_samples, 2)
        Training inputs.
    y_ : np.ndarray of shape (n_samples,)
        Training targets.
    sample_weight_ : np.ndarray of shape (n_samples,)
        Sample weights.
    kernel_type_ : KernelType
        Resolved kernel.
    reg_grid1_ : np.ndarray of shape (m1,)
        Regular grid along the first dimension.
    reg_grid2_ : np.ndarray of shape (m2,)
        Regular grid along the second dimension.
    reg_fitted_values_ : np.ndarray of shape (m1, m2)
        Smoothed values on the regular grid; NaN where the data cannot support a fit.
    bandwidth1_ : float
        Bandwidth for the first dimension.
    bandwidth2_ : float
        Bandwidth for the second dimension.

    See Also
    --------
    mullwlsk : The smoother behind `fit`.
    """

    def __init__(self, kernel_type: Union[KernelType, str] = KernelType.GAUSSIAN) -> None:
        resolve_kernel(kernel_type)
        self.kernel_type = kernel_type

    def _make_reg_grid(self, reg_grid, x: np.ndarray, num_points_reg_grid: int, name: str) -> np.ndarray:
        if reg_grid is None:
            return np.linspace(np.min(x), np.max(x), num_points_reg_grid)
        return check_grid_axis(reg_grid, name)

    def fit(
        self,
        X: Union[np.ndarray, List[List[float]]],
        y: Union[np.ndarray, List[float]],
        sample_weight: Optional[Union[np.ndarray, List[float]]] = None,
        bandwidth1: Optional[float] = None,
        bandwidth2: Optional[float] = None,
        reg_grid1: Optional[Union[np.ndarray, List[float]]] = None,
        reg_grid2: Optional[Union[np.ndarray, List[float]]] = None,
        num_points_reg_grid: int = 100,
        check_bandwidth: bool = False,
    ):
        """Fit the 2D local linear model on a regular grid.

        Parameters
        ----------
        X : array-like of shape (n_samples, 2)
            Training inputs.
        y : array-like of shape (n_samples,)
            Training targets.
        sample_weight : array-like of shape (n_samples,), optional
            Nonnegative sample weights; ones by default.
        bandwidth1 : float
            Bandwidth for the first axis.
        bandwidth2 : float, optional
            Bandwidth for the second axis; `bandwidth1` is used when omitted.
        reg_grid1 : array-like of shape (m1,), optional
            Strictly increasing grid on axis-1, one point or more. If None, a uniform grid over the data range is created.
        reg_grid2 : array-like of shape (m2,), optional
            Strictly increasing grid on axis-2, one point or more. If None, a uniform grid over the data range is created.
        num_points_reg_grid : int, default=100
            Number of points of the uniform grids.
        check_bandwidth : bool, default=False
            Probe the bandwidth with `mullwlsk_bandwidth_check` before smoothing.

        Returns
        -------
        Polyfit2DModel
            Fitted estimator (self).

        Raises
        ------
        ValueError
            If inputs are invalid, or `check_bandwidth` is set and the bandwidth
            leaves some grid point without enough local data.
        """
        if bandwidth1 is None:
            raise ValueError("bandwidth1 must be provided; bandwidth selection is not supported.")
        if bandwidth2 is None:
            bandwidth2 = bandwidth1
        bandwidth = check_bandwidth_pair(bandwidth1, bandwidth2)
        if num_points_reg_grid is None or not isinstance(num_points_reg_grid, int):
            raise TypeError("Number of points for the regular grid, num_points_reg_grid, should be an integer.")
        if num_points_reg_grid < 2:
            raise ValueError("Number of points for the regular grid, num_points_reg_grid, should be at least 2.")

        if sample_weight is None:
            sample_weight = np.ones(np.size(y), dtype=np.float64)
        X, y, sample_weight = check_samples(X, y, sample_weight)
        self.kernel_type_ = resolve_kernel(self.kernel_type)

        self.X_ = X
        self.y_ = y
        self.sample_weight_ = sample_weight
        self.n_features_in_ = 2
        self.bandwidth1_ = float(bandwidth[0])
        self.bandwidth2_ = float(bandwidth[1])
        self.reg_grid1_ = self._make_reg_grid(reg_grid1, X[:, 0], num_points_reg_grid, "reg_grid1")
        self.reg_grid2_ = self._make_reg_grid(reg_grid2, X[:, 1], num_points_reg_grid, "reg_grid2")

        smoother_args = (bandwidth, self.kernel_type_, X, y, sample_weight, self.reg_grid1_, self.reg_grid2_)
        if check_bandwidth and not mullwlsk_bandwidth_check(*smoother_args):
            raise ValueError(
                f"Bandwidths ({self.bandwidth1_}, {self.bandwidth2_}) leave some grid points without enough local data, please increase bandwidth."
            )
        self.reg_fitted_values_ = mullwlsk(*smoother_args)
        return self

    def predict(self, X: Union[np.ndarray, List[List[float]]], use_model_interp: bool = True) -> np.ndarray:
        """Predict responses at arbitrary points.

        Parameters
        ----------
        X : array-like of shape (n_points, 2)
            Query points.
        use_model_interp : bool, default=True
            If True, interpolate bilinearly from the fitted grid (points outside the grid
            take the boundary values); if False, fit locally at each point.

        Returns
        -------
        np.ndarray of shape (n_points,)
            Predicted values; NaN where no estimate is available.

        Raises
        ------
        sklearn.exceptions.NotFittedError
            If the model is not fitted.
        """
        check_is_fitted(self, ["reg_fitted_values_", "reg_grid1_", "reg_grid2_", "bandwidth1_", "bandwidth2_"])

        X = check_array(X, ensure_2d=True, dtype=np.float64)
        if X.shape[1] != 2:
            raise ValueError(f"X must have exactly 2 features for 2D model, got {X.shape[1]}")

        if use_model_interp:
            return interp2lin(self.reg_grid1_, self.reg_grid2_, self.reg_fitted_values_, X[:, 0], X[:, 1])
        return polyfit2d_points(
            self.X_,
            self.y_,
            self.sample_weight_,
            X,
            np.array([self.bandwidth1_, self.bandwidth2_]),
            self.kernel_type_,
        )

    def fitted_values(self) -> np.ndarray:
        """
        Return fitted values on the model's regular grid.

        Returns
        -------
        np.ndarray of shape (len(``reg_grid1_``), len(``reg_grid2_``))
            Copy of ``reg_fitted_values_``.
        """
        check_is_fitted(self, ["reg_fitted_values_", "reg_grid1_", "reg_grid2_", "bandwidth1_", "bandwidth2_"])
        return self.reg_fitted_values_.copy()

    def get_fitted_grids(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Return regular grids and fitted values.

        Returns
        -------
        reg_grid1 : np.ndarray of shape (m1,)
            Copy of ``reg_grid1_``.
        reg_grid2 : np.ndarray of shape (m2,)
            Copy of ``reg_grid2_``.
        reg_fitted_values : np.ndarray of shape (m1, m2)
            Copy of ``reg_fitted_values_``.
        """
        check_is_fitted(self, ["reg_fitted_values_", "reg_grid1_", "reg_grid2_", "bandwidth1_", "bandwidth2_"])
        return self.reg_grid1_.copy(), self.reg_grid2_.copy(), self.reg_fitted_values_.copy()


def check_bandwidth_pair(bandwidth1, bandwidth2) -> np.ndarray:
    """Validate two per-axis bandwidths given separately."""
    for name, bw in (("bandwidth1", bandwidth1), ("bandwidth2", bandwidth2)):
        if isinstance(bw, bool) or not isinstance(bw, (float, int, np.floating, np.integer)):
            raise ValueError(f"{name} must be positive float or integer.")
    return check_bandwidth([bandwidth1, bandwidth2])

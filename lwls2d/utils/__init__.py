"""Utilities to help with covariance surface smoothing."""

# Authors: Ching-Chuan Chen
# SPDX-License-Identifier: MIT
from lwls2d.utils.covariance_utils import aggregate_pairs, smooth_covariance_diagonal, smooth_covariance_surface

__all__ = [
    "aggregate_pairs",
    "smooth_covariance_diagonal",
    "smooth_covariance_surface",
]

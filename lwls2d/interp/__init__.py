"""Interpolation utilities for smoothed surfaces."""

# Authors: Ching-Chuan Chen
# SPDX-License-Identifier: MIT

from lwls2d.interp.interp import find_le_indices, interp2lin

__all__ = ["find_le_indices", "interp2lin"]

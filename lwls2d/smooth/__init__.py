"""Smooth utilities for lwls2d."""

# Authors: Ching-Chuan Chen
# SPDX-License-Identifier: MIT

from lwls2d.smooth.kernel import KernelType, calculate_kernel_value
from lwls2d.smooth.polyfit import (
    mullwlsk,
    mullwlsk_bandwidth_check,
    rotate_coordinates,
    rotatedmullwlsk,
    rotatedmullwlsk_bandwidth_check,
)
from lwls2d.smooth.polyfit_model_2d import Polyfit2DModel

__all__ = [
    "KernelType",
    "Polyfit2DModel",
    "calculate_kernel_value",
    "mullwlsk",
    "mullwlsk_bandwidth_check",
    "rotate_coordinates",
    "rotatedmullwlsk",
    "rotatedmullwlsk_bandwidth_check",
]

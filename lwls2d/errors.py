"""Shared error types for lwls2d."""

# Authors: Ching-Chuan Chen
# SPDX-License-Identifier: MIT


class Lwls2dError(Exception):
    """Base error type for lwls2d."""


class DimensionMismatch(Lwls2dError, ValueError):
    """Raised when array lengths or shapes disagree with each other."""


class UnknownKernel(Lwls2dError, ValueError):
    """Raised when a kernel name or value is not supported."""


class InvalidBandwidth(Lwls2dError, ValueError):
    """Raised when a bandwidth is not a pair of positive finite numbers."""


class InvalidPolynomialOrder(Lwls2dError, ValueError):
    """Raised when the local polynomial order is not supported."""

"""Configure global settings and get information about the working environment."""

# Authors: Ching-Chuan Chen
# SPDX-License-Identifier: MIT

# Local Weighted Least Squares surface smoothing (lwls2d) for Python
# ==================================================================
#
# lwls2d reconstructs smooth surfaces, such as covariance surfaces of functional data,
# from noisy and irregularly sampled observations. It is inspired by the smoothers of
# the MATLAB PACE (Principal Analysis by Conditional Expectation) package and the R
# fdapace package.
#
# The package includes bilinear grid interpolation, local linear smoothing onto a
# rectangular grid and a rotated local polynomial smoother for diagonal boundaries.

import importlib as _importlib
import logging

logger = logging.getLogger(__name__)


# PEP0440 compatible formatted version, see:
# https://www.python.org/dev/peps/pep-0440/
#
# Generic release markers:
#   X.Y.0   # For first release after an increment in Y
#   X.Y.Z   # For bugfix releases
#
# Admissible pre-release markers:
#   X.Y.ZaN   # Alpha release
#   X.Y.ZbN   # Beta release
#   X.Y.ZrcN  # Release Candidate
#   X.Y.Z     # Final release
#
# Dev branch marker is: 'X.Y.dev' or 'X.Y.devN' where N is an integer.
# 'X.Y.dev0' is the canonical version of 'X.Y.dev'

__version__ = "0.1.0.dev0"

_submodules = [
    "errors",
    "interp",
    "smooth",
    "utils",
]

__all__ = _submodules + ["__version__"]


def __dir__():
    return __all__


def __getattr__(name):
    if name in _submodules:
        return _importlib.import_module(f"lwls2d.{name}")
    else:
        try:
            return globals()[name]
        except KeyError:
            raise AttributeError(f"Module 'lwls2d' has no attribute '{name}'")

"""Kernel types and kernel weights for local regression in lwls2d."""

# Authors: Ching-Chuan Chen
# SPDX-License-Identifier: MIT

from enum import Enum
from typing import Callable, Dict, Union

import numpy as np

from lwls2d.errors import UnknownKernel


class KernelType(Enum):
    """Enum for kernel types used in local regression.

    Kernels with a value below 100 have infinite support; the others vanish for ``|u| > 1``.
    """

    GAUSSIAN = 0
    LOGISTIC = 1
    SIGMOID = 2
    # GAUSSIAN_VAR is left out since it produces negative weights for |u| > sqrt(5).
    RECTANGULAR = 100  # Uniform Kernel
    TRIANGULAR = 101
    EPANECHNIKOV = 102
    BIWEIGHT = 103  # Quartic Kernel
    TRIWEIGHT = 104
    TRICUBE = 105
    COSINE = 106

    def __repr__(self):
        return f"KernelType.{self.name}"

    def __str__(self):
        return self.name

    @property
    def is_compact(self) -> bool:
        """Whether the kernel vanishes outside ``|u| <= 1``."""
        return self.value >= 100

    @classmethod
    def from_name(cls, name: str) -> "KernelType":
        """Look up a kernel by name.

        Names are case-insensitive. Every member name is accepted, together with the
        short aliases used by PACE/fdapace: ``"gauss"``, ``"epan"``, ``"rect"``,
        ``"unif"``, ``"uniform"``, ``"quar"``, ``"quartic"`` and ``"tria"``.

        Raises
        ------
        UnknownKernel
            If `name` is not a string or is not a supported kernel name.
        """
        if not isinstance(name, str):
            raise UnknownKernel(f"kernel name must be a string, got {type(name).__name__}.")
        key = name.strip().lower()
        if key in _KERNEL_ALIASES:
            return _KERNEL_ALIASES[key]
        try:
            return cls[key.upper()]
        except KeyError:
            raise UnknownKernel(f"Unknown kernel {name!r}; kernel must be one of {sorted(supported_kernel_names())}.") from None


_KERNEL_ALIASES: Dict[str, KernelType] = {
    "gauss": KernelType.GAUSSIAN,
    "epan": KernelType.EPANECHNIKOV,
    "rect": KernelType.RECTANGULAR,
    "unif": KernelType.RECTANGULAR,
    "uniform": KernelType.RECTANGULAR,
    "quar": KernelType.BIWEIGHT,
    "quartic": KernelType.BIWEIGHT,
    "tria": KernelType.TRIANGULAR,
}


def supported_kernel_names() -> list:
    """Return every accepted kernel name in lower case."""
    return [k.name.lower() for k in KernelType] + list(_KERNEL_ALIASES)


def resolve_kernel(kernel_type: Union[KernelType, str]) -> KernelType:
    """Return `kernel_type` as a `KernelType`, parsing names with `KernelType.from_name`."""
    if isinstance(kernel_type, KernelType):
        return kernel_type
    if isinstance(kernel_type, str):
        return KernelType.from_name(kernel_type)
    raise UnknownKernel(f"kernel must be one of {list(KernelType)} or a kernel name, got {kernel_type!r}.")


def _inside(u: np.ndarray) -> np.ndarray:
    return np.abs(u) <= 1.0


def _gaussian(u):
    return np.exp(-0.5 * u * u) / np.sqrt(2.0 * np.pi)


def _logistic(u):
    # 1 / (e^u + 2 + e^-u), written with e^-|u| to avoid overflow
    e = np.exp(-np.abs(u))
    return e / (1.0 + e) ** 2


def _sigmoid(u):
    # 2 / pi / (e^u + e^-u)
    e = np.exp(-np.abs(u))
    return 2.0 / np.pi * e / (1.0 + e * e)


def _rectangular(u):
    return np.where(_inside(u), 0.5, 0.0)


def _triangular(u):
    return np.where(_inside(u), 1.0 - np.abs(u), 0.0)


def _epanechnikov(u):
    return np.where(_inside(u), 0.75 * (1.0 - u * u), 0.0)


def _biweight(u):
    return np.where(_inside(u), 15.0 / 16.0 * (1.0 - u * u) ** 2, 0.0)


def _triweight(u):
    return np.where(_inside(u), 35.0 / 32.0 * (1.0 - u * u) ** 3, 0.0)


def _tricube(u):
    return np.where(_inside(u), 70.0 / 81.0 * (1.0 - np.abs(u) ** 3) ** 3, 0.0)


def _cosine(u):
    return np.where(np.abs(u) < 1.0, np.pi / 4.0 * np.cos(np.pi / 2.0 * u), 0.0)


_KERNEL_FUNCS: Dict[KernelType, Callable[[np.ndarray], np.ndarray]] = {
    KernelType.GAUSSIAN: _gaussian,
    KernelType.LOGISTIC: _logistic,
    KernelType.SIGMOID: _sigmoid,
    KernelType.RECTANGULAR: _rectangular,
    KernelType.TRIANGULAR: _triangular,
    KernelType.EPANECHNIKOV: _epanechnikov,
    KernelType.BIWEIGHT: _biweight,
    KernelType.TRIWEIGHT: _triweight,
    KernelType.TRICUBE: _tricube,
    KernelType.COSINE: _cosine,
}


def get_kernel_function(kernel_type: Union[KernelType, str]) -> Callable[[np.ndarray], np.ndarray]:
    """Return the vectorized one-dimensional kernel for `kernel_type`."""
    return _KERNEL_FUNCS[resolve_kernel(kernel_type)]


def calculate_kernel_value(u, kernel_type: Union[KernelType, str]) -> np.ndarray:
    """Evaluate a one-dimensional kernel at normalized distances.

    Parameters
    ----------
    u : array_like
        Normalized distances ``(coordinate - center) / bandwidth``.
    kernel_type : KernelType or str
        Kernel to evaluate.

    Returns
    -------
    np.ndarray
        Nonnegative kernel values with the shape of `u`.
    """
    return get_kernel_function(kernel_type)(np.asarray(u, dtype=np.float64))


def kernel_weights_2d(scaled_offsets: np.ndarray, kernel_func: Callable[[np.ndarray], np.ndarray], weights: np.ndarray) -> np.ndarray:
    """Product kernel weights of observations relative to one query point.

    Parameters
    ----------
    scaled_offsets : np.ndarray of shape (n, 2)
        Offsets from the query point divided by the bandwidth on each axis.
    kernel_func : callable
        One-dimensional kernel, see `get_kernel_function`.
    weights : np.ndarray of shape (n,)
        Observation weights.

    Returns
    -------
    np.ndarray of shape (n,)
        ``K(u1) * K(u2) * w`` for every observation.
    """
    return kernel_func(scaled_offsets[:, 0]) * kernel_func(scaled_offsets[:, 1]) * weights

import numpy as np
import pytest
from numpy.testing import assert_allclose

from lwls2d.errors import UnknownKernel
from lwls2d.smooth.kernel import (
    KernelType,
    calculate_kernel_value,
    get_kernel_function,
    kernel_weights_2d,
    resolve_kernel,
    supported_kernel_names,
)


def test_kernel_types():
    assert KernelType.GAUSSIAN.value == 0
    assert KernelType.LOGISTIC.value == 1
    assert KernelType.SIGMOID.value == 2
    assert KernelType.RECTANGULAR.value == 100
    assert KernelType.TRIANGULAR.value == 101
    assert KernelType.EPANECHNIKOV.value == 102
    assert KernelType.BIWEIGHT.value == 103
    assert KernelType.TRIWEIGHT.value == 104
    assert KernelType.TRICUBE.value == 105
    assert KernelType.COSINE.value == 106

    assert str(KernelType.EPANECHNIKOV) == "EPANECHNIKOV"
    assert repr(KernelType.EPANECHNIKOV) == "KernelType.EPANECHNIKOV"

    assert not KernelType.GAUSSIAN.is_compact
    assert not KernelType.LOGISTIC.is_compact
    assert not KernelType.SIGMOID.is_compact
    for k in KernelType:
        if k.value >= 100:
            assert k.is_compact


@pytest.mark.parametrize(
    "name, expected",
    [
        ("gauss", KernelType.GAUSSIAN),
        ("gaussian", KernelType.GAUSSIAN),
        ("GAUSSIAN", KernelType.GAUSSIAN),
        ("epan", KernelType.EPANECHNIKOV),
        ("Epanechnikov", KernelType.EPANECHNIKOV),
        ("rect", KernelType.RECTANGULAR),
        ("unif", KernelType.RECTANGULAR),
        ("uniform", KernelType.RECTANGULAR),
        ("quar", KernelType.BIWEIGHT),
        ("quartic", KernelType.BIWEIGHT),
        ("biweight", KernelType.BIWEIGHT),
        ("tria", KernelType.TRIANGULAR),
        ("triangular", KernelType.TRIANGULAR),
        (" cosine ", KernelType.COSINE),
    ],
)
def test_kernel_from_name(name, expected):
    assert KernelType.from_name(name) is expected
    assert resolve_kernel(name) is expected


def test_every_supported_name_resolves():
    for name in supported_kernel_names():
        assert isinstance(KernelType.from_name(name), KernelType)


@pytest.mark.parametrize("bad", ["gausvar", "", "epanechnikovv", "silverman"])
def test_kernel_from_name_unknown(bad):
    with pytest.raises(UnknownKernel, match="Unknown kernel"):
        KernelType.from_name(bad)


@pytest.mark.parametrize("bad", [999, None, 1.5])
def test_resolve_kernel_rejects_non_kernels(bad):
    with pytest.raises(UnknownKernel, match="kernel must be one of"):
        resolve_kernel(bad)
    with pytest.raises(ValueError):
        resolve_kernel(bad)


def test_calculate_kernel_value_at_0():
    expected = {
        KernelType.GAUSSIAN: 1 / np.sqrt(2 * np.pi),
        KernelType.LOGISTIC: 0.25,
        KernelType.SIGMOID: 1 / np.pi,
        KernelType.RECTANGULAR: 0.5,
        KernelType.TRIANGULAR: 1.0,
        KernelType.EPANECHNIKOV: 0.75,
        KernelType.BIWEIGHT: 15 / 16,
        KernelType.TRIWEIGHT: 35 / 32,
        KernelType.TRICUBE: 70 / 81,
        KernelType.COSINE: np.pi / 4.0,
    }
    for kernel_type, value in expected.items():
        assert_allclose(calculate_kernel_value(0.0, kernel_type), value, rtol=1e-12, atol=0.0)


def test_calculate_kernel_value():
    u = np.linspace(-1.1, 1.1, 111)

    assert_allclose(calculate_kernel_value(u, KernelType.GAUSSIAN), (1 / np.sqrt(2 * np.pi)) * np.exp(-0.5 * u**2), rtol=1e-12)
    assert_allclose(calculate_kernel_value(u, KernelType.LOGISTIC), 1 / (np.exp(u) + 2.0 + np.exp(-u)), rtol=1e-12)
    assert_allclose(calculate_kernel_value(u, KernelType.SIGMOID), 2.0 / np.pi / (np.exp(u) + np.exp(-u)), rtol=1e-12)

    idx = np.nonzero(np.abs(u) <= 1.0)

    expected = np.zeros_like(u)
    expected[idx] = 0.5
    assert_allclose(calculate_kernel_value(u, KernelType.RECTANGULAR), expected, rtol=1e-12, atol=0.0)

    expected = np.zeros_like(u)
    expected[idx] = 1 - np.abs(u[idx])
    assert_allclose(calculate_kernel_value(u, KernelType.TRIANGULAR), expected, rtol=1e-12, atol=1e-15)

    expected = np.zeros_like(u)
    expected[idx] = 0.75 * (1 - u[idx] ** 2)
    assert_allclose(calculate_kernel_value(u, KernelType.EPANECHNIKOV), expected, rtol=1e-12, atol=1e-15)

    expected = np.zeros_like(u)
    expected[idx] = (15 / 16) * (1 - u[idx] ** 2) ** 2
    assert_allclose(calculate_kernel_value(u, KernelType.BIWEIGHT), expected, rtol=1e-12, atol=1e-15)

    expected = np.zeros_like(u)
    expected[idx] = (35 / 32) * (1 - u[idx] ** 2) ** 3
    assert_allclose(calculate_kernel_value(u, KernelType.TRIWEIGHT), expected, rtol=1e-12, atol=1e-15)

    expected = np.zeros_like(u)
    expected[idx] = (70 / 81) * (1 - np.abs(u[idx]) ** 3) ** 3
    assert_allclose(calculate_kernel_value(u, KernelType.TRICUBE), expected, rtol=1e-12, atol=1e-15)

    expected = np.zeros_like(u)
    expected[idx] = np.pi / 4.0 * np.abs(np.cos(np.pi / 2.0 * u[idx]))
    expected[np.abs(np.abs(u) - 1.0) <= 1e-7] = 0.0
    assert_allclose(calculate_kernel_value(u, KernelType.COSINE), expected, rtol=1e-12, atol=1e-15)


@pytest.mark.parametrize("kernel_type", list(KernelType))
def test_kernel_values_nonnegative_and_symmetric(kernel_type):
    u = np.linspace(-5.0, 5.0, 201)
    values = calculate_kernel_value(u, kernel_type)
    assert np.all(values >= 0.0)
    assert_allclose(values, values[::-1], rtol=1e-12, atol=1e-15)
    if kernel_type.is_compact:
        assert np.all(values[np.abs(u) > 1.0] == 0.0)


def test_logistic_and_sigmoid_do_not_overflow():
    u = np.array([-1000.0, 1000.0])
    with np.errstate(over="raise"):
        assert_allclose(calculate_kernel_value(u, KernelType.LOGISTIC), [0.0, 0.0])
        assert_allclose(calculate_kernel_value(u, KernelType.SIGMOID), [0.0, 0.0])


def test_calculate_kernel_value_by_name():
    assert_allclose(calculate_kernel_value([0.0, 0.5], "epan"), [0.75, 0.5625])


def test_kernel_weights_2d_is_product_times_weight():
    scaled = np.array([[0.0, 0.0], [0.5, -0.5], [1.5, 0.0], [0.2, 0.9]])
    w = np.array([1.0, 2.0, 3.0, 0.5])
    func = get_kernel_function(KernelType.EPANECHNIKOV)
    expected = 0.75 * (1 - scaled[:, 0] ** 2) * 0.75 * (1 - scaled[:, 1] ** 2) * w
    expected[2] = 0.0
    assert_allclose(kernel_weights_2d(scaled, func, w), expected, rtol=1e-12)

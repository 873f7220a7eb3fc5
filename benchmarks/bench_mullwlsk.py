import sys
import gc
import time
import pprint
import numpy as np
from lwls2d.smooth import KernelType, Polyfit2DModel, rotatedmullwlsk


def _make_data_2d(rng, n_side: int):
    # Grid in [-1, 1] x [-1, 1]
    x1 = np.linspace(-1.0, 1.0, n_side, dtype=np.float64)
    x2 = np.linspace(-1.0, 1.0, n_side, dtype=np.float64)
    X1, X2 = np.meshgrid(x1, x2, indexing="ij")
    # Smooth target + noise
    Z = np.sin(np.pi * X1) * np.cos(np.pi * X2) + 0.1 * rng.standard_normal(X1.shape)
    X = np.column_stack([X1.ravel(), X2.ravel()])
    y = Z.ravel()
    w = np.ones_like(y)
    return (x1, x2, X, y, w)


def benchmark_mullwlsk(
    X: np.ndarray,
    y: np.ndarray,
    w: np.ndarray,
    x1_new: np.ndarray,
    x2_new: np.ndarray,
    bandwidth1: float,
    bandwidth2: float,
    kernel_type: KernelType = KernelType.GAUSSIAN,
) -> int:
    """Return elapsed time in ns for one fit+predict run."""
    gc.collect()
    start = time.time_ns()
    model = Polyfit2DModel(kernel_type=kernel_type)
    model.fit(
        X,
        y,
        sample_weight=w,
        bandwidth1=bandwidth1,
        bandwidth2=bandwidth2,
        reg_grid1=x1_new,
        reg_grid2=x2_new,
    )
    X1_new, X2_new = np.meshgrid(x1_new, x2_new, indexing="ij")
    _ = model.predict(np.column_stack([X1_new.ravel(), X2_new.ravel()]), use_model_interp=True)
    elapsed = time.time_ns() - start
    return elapsed


def benchmark_rotatedmullwlsk(
    X: np.ndarray,
    y: np.ndarray,
    w: np.ndarray,
    x_diag: np.ndarray,
    bandwidth: float,
    kernel_type: KernelType = KernelType.GAUSSIAN,
    npoly: int = 1,
) -> int:
    """Return elapsed time in ns for one diagonal run of the rotated smoother."""
    gc.collect()
    start = time.time_ns()
    _ = rotatedmullwlsk(bandwidth, kernel_type, X, y, w, np.column_stack([x_diag, x_diag]), npoly=npoly)
    return time.time_ns() - start


def _report(label: str, run_times: dict, num_replications: int) -> None:
    for kernel, times in run_times.items():
        arr_sorted = np.sort(np.array(times, dtype=np.int64))
        trimmed = arr_sorted[1:-1]  # drop fastest/slowest
        print(
            f"Average time (remove fastest and slowest) for {num_replications} replications "
            f"on {label} with {kernel} kernel runs: {np.mean(trimmed) / 1e9:.6f} seconds"
        )
        print(f"Standard deviation of run times: {np.std(trimmed) / 1e9:.6f} seconds")
    for kernel, times in run_times.items():
        print(f"{label} kernel - {kernel}, run_time (s):")
        pprint.pprint(np.array(times) / 1e9)


if __name__ == "__main__":
    rng = np.random.default_rng(42)

    n_side = 60               # 60 x 60 => 3,600 samples
    x1, x2, X, y, w = _make_data_2d(rng, n_side)

    # Output grid, coarser than the data
    x1_new = np.linspace(-1.0, 1.0, 30)
    x2_new = np.linspace(-1.0, 1.0, 30)

    bw1 = 0.15
    bw2 = 0.15

    kernel_types = [KernelType.GAUSSIAN, KernelType.EPANECHNIKOV]

    print("Python Information:\n", sys.version)
    np.show_config()

    num_replications = 10
    grid_times = {k: [] for k in kernel_types}
    rotated_times = {k: [] for k in kernel_types}

    for kernel in kernel_types:
        for _ in range(num_replications):
            grid_times[kernel].append(benchmark_mullwlsk(X, y, w, x1_new, x2_new, bw1, bw2, kernel_type=kernel))
            rotated_times[kernel].append(benchmark_rotatedmullwlsk(X, y, w, x1_new, bw1, kernel_type=kernel, npoly=2))

    _report(f"Polyfit2DModel with grid {x1_new.size}x{x2_new.size}", grid_times, num_replications)
    _report(f"rotatedmullwlsk with {x1_new.size} diagonal points", rotated_times, num_replications)

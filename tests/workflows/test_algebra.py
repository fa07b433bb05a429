"""Unit tests for algebraic solvers in laketherm."""

import numpy as np

from laketherm.workflows.algebra import tdma_solver


def _solve(a: np.ndarray, b: np.ndarray, c: np.ndarray, d: np.ndarray) -> np.ndarray:
    """Solve with freshly allocated work arrays, starting at the first row."""
    x = np.empty_like(d)
    tdma_solver(a, b, c, d, x, np.zeros_like(d), np.zeros_like(d))
    return x


def test_tdma_solver_identity() -> None:
    """Test TDMA solver with an identity matrix."""
    n = 5
    a = np.zeros(n, dtype=np.float64)
    b = np.ones(n, dtype=np.float64)
    c = np.zeros(n, dtype=np.float64)
    d = np.array([1, 2, 3, 4, 5], dtype=np.float64)

    x = _solve(a, b, c, d)

    np.testing.assert_allclose(x, d, atol=1e-12)


def test_tdma_solver_simple_system() -> None:
    """Test TDMA solver with a known 3x3 system.

    Matrix:
    [ 2  -1   0 ] [ x1 ]   [ 1 ]
    [ -1  2  -1 ] [ x2 ] = [ 0 ]
    [ 0  -1   2 ] [ x3 ]   [ 1 ]

    Solution: x = [1, 1, 1]
    """
    a = np.array([0, -1, -1], dtype=np.float64)
    b = np.array([2, 2, 2], dtype=np.float64)
    c = np.array([-1, -1, 0], dtype=np.float64)
    d = np.array([1, 0, 1], dtype=np.float64)

    x = _solve(a, b, c, d)

    np.testing.assert_allclose(x, np.ones(3), atol=1e-12)


def test_tdma_solver_sum_of_rows() -> None:
    """Test TDMA solver using the sum of rows method.

    If x is a vector of ones, then Ax = d where d_i is the sum of row i.
    """
    n = 10
    rng = np.random.default_rng(42)
    # diagonally dominant to ensure stability
    a = rng.uniform(-1, -0.5, n)
    c = rng.uniform(-1, -0.5, n)
    b = np.abs(a) + np.abs(c) + 1.0

    # a[0] and c[n-1] are unused
    a[0] = 0.0
    c[n - 1] = 0.0

    d = np.zeros(n, dtype=np.float64)
    d[0] = b[0] + c[0]
    for i in range(1, n - 1):
        d[i] = a[i] + b[i] + c[i]
    d[n - 1] = a[n - 1] + b[n - 1]

    x = _solve(a, b, c, d)

    np.testing.assert_allclose(x, np.ones(n), atol=1e-12)


def test_tdma_solver_matches_dense_solve() -> None:
    """Test TDMA solver against a dense solve of the same system."""
    n = 8
    rng = np.random.default_rng(1)
    a = rng.uniform(-2, 0, n)
    c = rng.uniform(-2, 0, n)
    b = np.abs(a) + np.abs(c) + rng.uniform(0.1, 1.0, n)
    a[0] = 0.0
    c[n - 1] = 0.0
    d = rng.uniform(-5, 5, n)

    matrix = np.diag(b) + np.diag(a[1:], k=-1) + np.diag(c[:-1], k=1)
    expected = np.linalg.solve(matrix, d)

    np.testing.assert_allclose(_solve(a, b, c, d), expected, rtol=1e-10)


def test_tdma_solver_first_index() -> None:
    """Rows above the first index are ignored and their solution is left untouched."""
    n = 6
    first_index = 2
    a = np.full(n, -1.0)
    b = np.full(n, 3.0)
    c = np.full(n, -1.0)
    # garbage in the inactive rows must not influence the solve
    a[:first_index] = np.nan
    b[:first_index] = np.nan
    c[:first_index] = np.nan
    a[first_index] = 123.0  # ignored, no row above
    c[n - 1] = 0.0

    expected_active = np.ones(n - first_index)
    d = np.zeros(n)
    d[first_index] = 3.0 - 1.0
    d[first_index + 1 : n - 1] = 1.0
    d[n - 1] = 2.0

    x = np.full(n, -99.0)
    c_prime = np.zeros(n)
    d_prime = np.zeros(n)
    tdma_solver(a, b, c, d, x, c_prime, d_prime, first_index)

    np.testing.assert_allclose(x[first_index:], expected_active, atol=1e-12)
    np.testing.assert_array_equal(x[:first_index], -99.0)

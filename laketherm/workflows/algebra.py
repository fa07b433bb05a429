"""Algebraic solvers shared by the column kernels."""

import numpy as np
from numba import njit

from laketherm.types import ArrayFloat64


@njit(cache=True, inline="always")
def tdma_solver(
    lower_diagonal_a: ArrayFloat64,
    main_diagonal_b: ArrayFloat64,
    upper_diagonal_c: ArrayFloat64,
    rhs_vector_d: ArrayFloat64,
    solution_vector_x: ArrayFloat64,
    c_prime: ArrayFloat64,
    d_prime: ArrayFloat64,
    first_index: int = 0,
) -> None:
    """Solve a tridiagonal system Ax = d in-place using the Thomas algorithm.

    Only rows `first_index .. n-1` take part in the solve, so a column with inactive
    top slots can be solved without copying. `lower_diagonal_a[first_index]` and
    `upper_diagonal_c[n-1]` are ignored. Entries of the solution above `first_index`
    are left untouched.

    Notes:
        All arrays must have the same length and dtype.

    Args:
        lower_diagonal_a: Lower diagonal (length n).
        main_diagonal_b: Main diagonal (length n).
        upper_diagonal_c: Upper diagonal (length n).
        rhs_vector_d: Right hand side (length n).
        solution_vector_x: Output solution array (length n), modified in-place.
        c_prime: Work array (length n), modified in-place.
        d_prime: Work array (length n), modified in-place.
        first_index: Index of the first active row.
    """
    n = len(rhs_vector_d)

    c_prime[first_index] = upper_diagonal_c[first_index] / main_diagonal_b[first_index]
    d_prime[first_index] = rhs_vector_d[first_index] / main_diagonal_b[first_index]

    for i in range(first_index + 1, n):
        denominator = main_diagonal_b[i] - lower_diagonal_a[i] * c_prime[i - 1]

        # Avoid division by zero
        eps = np.float64(1e-10)
        if abs(denominator) < eps:
            denominator = eps

        if i < n - 1:
            c_prime[i] = upper_diagonal_c[i] / denominator
        d_prime[i] = (
            rhs_vector_d[i] - lower_diagonal_a[i] * d_prime[i - 1]
        ) / denominator

    solution_vector_x[n - 1] = d_prime[n - 1]
    for i in range(n - 2, first_index - 1, -1):
        solution_vector_x[i] = d_prime[i] - c_prime[i] * solution_vector_x[i + 1]

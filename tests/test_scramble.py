"""Tests for the scramble matrix builders."""

import numpy as np
import pytest

from digital_qmc.faure import faure_factors
from digital_qmc.scramble import (
    LOWER_FAURE,
    LOWER_UNIFORM,
    LOWER_ZERO,
    diagonal_scramble_matrices,
    faure_ibinomial_scramble_matrices,
    faure_left_scramble_matrices,
    faure_striped_scramble_matrices,
    ibinomial_scramble_matrices,
    is_invertible_lower,
    left_multiply,
    left_multiply_diagonal,
    left_scramble_matrices,
    right_multiply,
    right_scramble_matrix,
    striped_scramble_matrices,
)

DIM, ROWS = 6, 7


@pytest.mark.parametrize("base", [2, 3, 5, 7, 8])
def test_left_scramble_is_invertible(rng, base):
    M = left_scramble_matrices(rng, base, DIM, ROWS)
    assert M.shape == (DIM, ROWS, ROWS)
    assert np.all((M >= 0) & (M < base))
    assert np.all(np.diagonal(M, axis1=1, axis2=2) != 0)
    if base != 8:
        assert is_invertible_lower(M, base)


def test_base2_left_scramble_has_unit_diagonal(rng):
    M = left_scramble_matrices(rng, 2, DIM, ROWS)
    assert np.all(np.diagonal(M, axis1=1, axis2=2) == 1)


def test_base2_diagonal_scramble_is_all_ones(rng):
    assert np.all(diagonal_scramble_matrices(rng, 2, DIM, ROWS) == 1)


def test_base2_ibinomial_scramble_has_unit_diagonal(rng):
    M = ibinomial_scramble_matrices(rng, 2, DIM, ROWS)
    assert np.all(np.diagonal(M, axis1=1, axis2=2) == 1)


def test_diagonal_scramble(rng):
    diag = diagonal_scramble_matrices(rng, 5, DIM, ROWS)
    assert diag.shape == (DIM, ROWS)
    assert np.all((diag >= 1) & (diag < 5))


@pytest.mark.parametrize("lower_flag", [LOWER_ZERO, LOWER_FAURE, LOWER_UNIFORM])
def test_faure_left_scramble(rng, lower_flag):
    factors = faure_factors(7)
    sb = 3
    M = faure_left_scramble_matrices(rng, 7, DIM, ROWS, factors, sb, lower_flag)
    assert is_invertible_lower(M, 7)
    assert set(np.diagonal(M, axis1=1, axis2=2).ravel()) <= set(factors[:sb])
    lower = M[np.tril(np.ones((DIM, ROWS, ROWS), dtype=bool), k=-1)]
    if lower_flag == LOWER_ZERO:
        assert not np.any(lower)
    elif lower_flag == LOWER_FAURE:
        assert set(lower) <= set(factors[:sb])


def _is_toeplitz(M):
    return np.array_equal(M[:, 1:, 1:], M[:, :-1, :-1])


def test_ibinomial_scramble(rng):
    M = ibinomial_scramble_matrices(rng, 5, DIM, ROWS)
    assert is_invertible_lower(M, 5)
    assert _is_toeplitz(M)


@pytest.mark.parametrize("lower_flag", [LOWER_ZERO, LOWER_FAURE, LOWER_UNIFORM])
def test_faure_ibinomial_scramble(rng, lower_flag):
    factors = faure_factors(5)
    M = faure_ibinomial_scramble_matrices(rng, 5, DIM, ROWS, factors, 2, lower_flag)
    assert is_invertible_lower(M, 5)
    assert _is_toeplitz(M)
    assert set(M[:, 0, 0]) <= {2, 3}


def _is_striped(M):
    r = M.shape[1]
    for c in range(r):
        column = M[:, c:, c]
        if not np.all(column == column[:, :1]):
            return False
    return True


def test_striped_scramble(rng):
    M = striped_scramble_matrices(rng, 3, DIM, ROWS)
    assert is_invertible_lower(M, 3)
    assert _is_striped(M)


def test_faure_striped_scramble(rng):
    factors = faure_factors(11)
    M = faure_striped_scramble_matrices(rng, 11, DIM, ROWS, factors, 4)
    assert is_invertible_lower(M, 11)
    assert _is_striped(M)
    assert set(np.diagonal(M, axis1=1, axis2=2).ravel()) <= set(factors[:4])


def test_right_scramble_matrix(rng):
    U = right_scramble_matrix(rng, 5, 4)
    assert U.shape == (4, 4)
    assert not np.any(np.tril(U, k=-1))
    assert np.all(np.diag(U) != 0)


def test_is_invertible_lower_rejects():
    M = np.array([[[1, 0], [1, 1]]])
    assert is_invertible_lower(M, 3)
    assert not is_invertible_lower(np.array([[[1, 1], [0, 1]]]), 3)
    assert not is_invertible_lower(np.array([[[2, 0], [1, 1]]]), 4)


def test_left_multiply_matches_matrix_product(rng):
    base, k = 5, 3
    T = rng.integers(0, base, size=(DIM, k, ROWS))
    M = left_scramble_matrices(rng, base, DIM, ROWS)
    result = left_multiply(T, M, base)
    for j in range(DIM):
        C = T[j].T                      # r x k
        np.testing.assert_array_equal(result[j].T, (M[j] @ C) % base)


def test_left_multiply_diagonal_matches_full(rng):
    base, k = 7, 3
    T = rng.integers(0, base, size=(DIM, k, ROWS))
    diag = diagonal_scramble_matrices(rng, base, DIM, ROWS)
    full = np.zeros((DIM, ROWS, ROWS), dtype=np.int64)
    idx = np.arange(ROWS)
    full[:, idx, idx] = diag
    np.testing.assert_array_equal(
        left_multiply_diagonal(T, diag, base), left_multiply(T, full, base)
    )


def test_right_multiply_matches_matrix_product(rng):
    base, k = 3, 4
    T = rng.integers(0, base, size=(DIM, k, ROWS))
    U = right_scramble_matrix(rng, base, k)
    result = right_multiply(T, U, base)
    for j in range(DIM):
        np.testing.assert_array_equal(result[j].T, (T[j].T @ U) % base)

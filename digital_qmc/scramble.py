"""
Linear Matrix Scrambles over Z/bZ
=================================

This module builds the random scrambling matrices used to randomize a
digital net, and applies them to generator matrices.

A left matrix scramble replaces every generator matrix C_j by

    C_j' = M_j C_j  (mod b)

where M_j is an r x r nonsingular lower-triangular matrix. Since M_j is
invertible, C_j' generates a net with the same equidistribution
properties as C_j. The variants below differ only in how the entries of
M_j are drawn:

    - plain:        nonzero diagonal, uniform entries below it
    - diagonal:     nonzero diagonal, zeros elsewhere
    - Faure:        diagonal (and optionally lower) entries drawn from the
                    first ``sb`` ordered Faure multipliers of the base
    - i-binomial:   M_j is Toeplitz: each diagonal holds a single value
    - striped:      every column is constant from the diagonal down

A right matrix scramble multiplies every C_j on the right by one shared
k x k nonsingular upper-triangular matrix. It only changes the order in
which points are enumerated.

Generator matrices are handled through a ``(dim, num_cols, num_rows)``
view ``T`` where ``T[j, c, l]`` is row l, column c of C_j.

References
----------
[1] Matousek, J. (1998). On the L2-discrepancy for anchored boxes.
[2] Tezuka, S. and Faure, H. (2003). I-binomial scrambling of digital nets
    and sequences.
[3] Owen, A.B. (2003). Variance with alternative scramblings of digital nets.
"""

import numpy as np
from typing import Sequence

# Lower-triangular entries: 0 = zeros below the diagonal,
# 1 = drawn from the Faure multipliers, 2 = uniform over Z/bZ.
LOWER_ZERO, LOWER_FAURE, LOWER_UNIFORM = 0, 1, 2


def _draw_faure(rng: np.random.Generator, factors: Sequence[int], sb: int, size) -> np.ndarray:
    table = np.asarray(factors[:sb], dtype=np.int64)
    return table[rng.integers(0, sb, size=size)]


def _draw_lower(
    rng: np.random.Generator,
    base: int,
    size,
    lower_flag: int,
    factors: Sequence[int] = (),
    sb: int = 0,
) -> np.ndarray:
    if lower_flag == LOWER_UNIFORM:
        return rng.integers(0, base, size=size, dtype=np.int64)
    if lower_flag == LOWER_FAURE:
        return _draw_faure(rng, factors, sb, size)
    return np.zeros(size, dtype=np.int64)


def _lower_triangular(diag: np.ndarray, lower: np.ndarray) -> np.ndarray:
    """Assemble ``(dim, r, r)`` matrices from diagonals and full lower parts."""
    r = diag.shape[1]
    mats = np.tril(lower, k=-1)
    idx = np.arange(r)
    mats[:, idx, idx] = diag
    return mats


def left_scramble_matrices(rng: np.random.Generator, base: int, dim: int, num_rows: int) -> np.ndarray:
    """
    Draw plain left-scramble matrices.

    Parameters
    ----------
    rng : np.random.Generator
        Source of uniform integers.
    base : int
        The base b.
    dim : int
        Number of matrices to draw.
    num_rows : int
        Size r of each square matrix.

    Returns
    -------
    np.ndarray
        Array of shape (dim, r, r): diagonal uniform in {1, ..., b-1},
        strictly lower part uniform in {0, ..., b-1}, zeros above.
    """
    diag = rng.integers(1, base, size=(dim, num_rows), dtype=np.int64)
    lower = rng.integers(0, base, size=(dim, num_rows, num_rows), dtype=np.int64)
    return _lower_triangular(diag, lower)


def diagonal_scramble_matrices(rng: np.random.Generator, base: int, dim: int, num_rows: int) -> np.ndarray:
    """Draw the diagonals (shape ``(dim, r)``) of diagonal scramble matrices."""
    return rng.integers(1, base, size=(dim, num_rows), dtype=np.int64)


def faure_left_scramble_matrices(
    rng: np.random.Generator,
    base: int,
    dim: int,
    num_rows: int,
    factors: Sequence[int],
    sb: int,
    lower_flag: int,
) -> np.ndarray:
    """
    Draw left-scramble matrices with diagonal restricted to Faure multipliers.

    Each diagonal entry is drawn uniformly from ``factors[:sb]``. Entries
    below the diagonal follow ``lower_flag`` (see ``LOWER_*``).

    Returns
    -------
    np.ndarray
        Array of shape (dim, r, r).
    """
    diag = _draw_faure(rng, factors, sb, (dim, num_rows))
    lower = _draw_lower(rng, base, (dim, num_rows, num_rows), lower_flag, factors, sb)
    return _lower_triangular(diag, lower)


def _toeplitz_lower(values: np.ndarray) -> np.ndarray:
    """Lower-triangular Toeplitz matrices: ``M[j, l, c] = values[j, l - c]``."""
    r = values.shape[1]
    offset = np.subtract.outer(np.arange(r), np.arange(r))
    mats = values[:, np.clip(offset, 0, None)]
    return np.where(offset >= 0, mats, 0)


def ibinomial_scramble_matrices(rng: np.random.Generator, base: int, dim: int, num_rows: int) -> np.ndarray:
    """
    Draw i-binomial (Tezuka) scramble matrices.

    One random nonzero value fills the whole main diagonal of M_j, and one
    random value in {0, ..., b-1} fills each sub-diagonal.

    Returns
    -------
    np.ndarray
        Array of shape (dim, r, r).
    """
    values = np.empty((dim, num_rows), dtype=np.int64)
    values[:, 0] = rng.integers(1, base, size=dim, dtype=np.int64)
    values[:, 1:] = rng.integers(0, base, size=(dim, num_rows - 1), dtype=np.int64)
    return _toeplitz_lower(values)


def faure_ibinomial_scramble_matrices(
    rng: np.random.Generator,
    base: int,
    dim: int,
    num_rows: int,
    factors: Sequence[int],
    sb: int,
    lower_flag: int,
) -> np.ndarray:
    """i-binomial matrices whose diagonal value comes from ``factors[:sb]``."""
    values = np.empty((dim, num_rows), dtype=np.int64)
    values[:, 0] = _draw_faure(rng, factors, sb, dim)
    values[:, 1:] = _draw_lower(rng, base, (dim, num_rows - 1), lower_flag, factors, sb)
    return _toeplitz_lower(values)


def _striped(values: np.ndarray) -> np.ndarray:
    r = values.shape[1]
    return np.tril(np.broadcast_to(values[:, np.newaxis, :], (values.shape[0], r, r))).copy()


def striped_scramble_matrices(rng: np.random.Generator, base: int, dim: int, num_rows: int) -> np.ndarray:
    """
    Draw striped (Owen) scramble matrices.

    In column c of M_j, every entry from the diagonal down holds the same
    random nonzero value; entries above the diagonal are zero.
    """
    return _striped(rng.integers(1, base, size=(dim, num_rows), dtype=np.int64))


def faure_striped_scramble_matrices(
    rng: np.random.Generator,
    base: int,
    dim: int,
    num_rows: int,
    factors: Sequence[int],
    sb: int,
) -> np.ndarray:
    """Striped matrices whose column values come from ``factors[:sb]``."""
    return _striped(_draw_faure(rng, factors, sb, (dim, num_rows)))


def right_scramble_matrix(rng: np.random.Generator, base: int, num_cols: int) -> np.ndarray:
    """
    Draw one k x k upper-triangular matrix for the right matrix scramble.

    Diagonal entries are uniform in {1, ..., b-1}, entries above it are
    uniform in {0, ..., b-1}.
    """
    diag = rng.integers(1, base, size=num_cols, dtype=np.int64)
    upper = np.triu(rng.integers(0, base, size=(num_cols, num_cols), dtype=np.int64), k=1)
    return upper + np.diag(diag)


def left_multiply(T: np.ndarray, M: np.ndarray, base: int) -> np.ndarray:
    """
    Compute ``M_j C_j mod b`` for every dimension.

    Parameters
    ----------
    T : np.ndarray
        Generator matrices, shape (dim, k, r) with ``T[j, c, l] = C_j[l, c]``.
    M : np.ndarray
        Lower-triangular scrambles, shape (dim, r, r).
    base : int
        The base b.

    Returns
    -------
    np.ndarray
        Scrambled matrices in the same layout as T.

    Notes
    -----
    Each entry accumulates at most r products bounded by (b-1)^2 in
    int64 before reduction, so r * (b-1)^2 must stay below 2^63.
    """
    # new T[j, c, l] = sum_i M[j, l, i] * T[j, c, i]
    return np.matmul(T, np.swapaxes(M, 1, 2)) % base


def left_multiply_diagonal(T: np.ndarray, diag: np.ndarray, base: int) -> np.ndarray:
    """Left multiplication by diagonal matrices given as ``(dim, r)`` diagonals."""
    return (T * diag[:, np.newaxis, :]) % base


def right_multiply(T: np.ndarray, U: np.ndarray, base: int) -> np.ndarray:
    """Compute ``C_j U mod b`` for every dimension, U of shape (k, k)."""
    # new T[j, c, l] = sum_i T[j, i, l] * U[i, c]
    return np.matmul(U.T, T) % base


def is_invertible_lower(M: np.ndarray, base: int) -> bool:
    """True if every lower-triangular matrix in M is invertible over Z/bZ."""
    diag = np.diagonal(M, axis1=-2, axis2=-1)
    upper_zero = not np.any(np.triu(M, k=1))
    return upper_zero and bool(np.all(np.gcd(diag, base) == 1))

"""Pytest fixtures for digital_qmc tests."""

from math import comb

import numpy as np
import pytest

from digital_qmc import DigitalNet, DigitalNetBase2, DigitalSequence, DigitalSequenceBase2
from digital_qmc.digital_net_base2 import pack_columns


def pascal_matrices(base: int, dim: int, num_cols: int, num_rows: int) -> np.ndarray:
    """
    Faure generator matrices C_j = P^j mod b, P the upper-triangular Pascal
    matrix, in the ``(dim * num_cols, num_rows)`` layout.
    """
    mats = np.zeros((dim * num_cols, num_rows), dtype=np.int64)
    for j in range(dim):
        for c in range(num_cols):
            for l in range(min(c + 1, num_rows)):
                mats[j * num_cols + c, l] = comb(c, l) * pow(j, c - l) % base
    return mats


def random_matrices(rng, base: int, dim: int, num_cols: int, num_rows: int) -> np.ndarray:
    return rng.integers(0, base, size=(dim * num_cols, num_rows))


class PascalSequence(DigitalSequence):
    """Faure-style sequence used to exercise the sequence conversions."""

    def __init__(self, base: int, dim: int, k: int, num_rows: int = 6):
        super().__init__(base, k, num_rows, num_rows, pascal_matrices(base, dim, k, num_rows))

    def extend_sequence(self, k: int) -> None:
        self._set_generator_matrices(k, pascal_matrices(self.base, self.dim, k, self.num_rows))


class PascalSequenceBase2(DigitalSequenceBase2):
    """Base-2 version of ``PascalSequence`` (Sobol-like for j <= 1)."""

    def __init__(self, dim: int, k: int, num_rows: int = 6):
        super().__init__(k, num_rows, num_rows, self._columns_for(dim, k, num_rows))

    @staticmethod
    def _columns_for(dim: int, k: int, num_rows: int) -> np.ndarray:
        return pack_columns(pascal_matrices(2, dim, k, num_rows), num_rows)

    def extend_sequence(self, k: int) -> None:
        self._set_generator_matrices(k, self._columns_for(self.dim, k, self.num_rows))


@pytest.fixture
def rng():
    return np.random.default_rng(20240611)


@pytest.fixture
def identity_net():
    """Base 2, k = r = w = 3, one dimension, identity generator matrix."""
    return DigitalNet(2, 3, 3, 3, np.eye(3, dtype=int))


@pytest.fixture
def identity_net_base2():
    return DigitalNetBase2(3, 3, 3, [4, 2, 1])


@pytest.fixture
def net_base3(rng):
    """Base 3, 27 points, 3 dimensions, 4 rows and 5 output digits."""
    return DigitalNet(3, 3, 4, 5, random_matrices(rng, 3, 3, 3, 4))


@pytest.fixture
def net_base5():
    return DigitalNet(5, 2, 3, 4, pascal_matrices(5, 4, 2, 3))


@pytest.fixture
def net_base2(rng):
    """Base 2, 32 points, 4 dimensions, 6 rows and 8 output bits."""
    mats = random_matrices(rng, 2, 4, 5, 6)
    return DigitalNetBase2(5, 6, 8, pack_columns(mats, 8))

"""
Digital nets in base 2, with each generator matrix column packed into an
integer so that digit arithmetic modulo 2 becomes bitwise XOR.

Column c of C_j is stored as one integer whose bit ``w-1-l`` holds row l,
so the most significant of the w output bits is the first output digit.
A coordinate is the XOR of the columns selected by the bits of the
(Gray code of the) point index, multiplied by 2^-w.
"""

import logging
import numpy as np
from typing import Optional

from .digital_net import DigitalNet, DigitalNetIterator
from .point_set import EPSILON_HALF
from .utils import trailing_ones

LOG = logging.getLogger(__name__)

# Width of a packed column; keeps every column a non-negative int64.
MAX_BITS = 62


def unpack_columns(columns: np.ndarray, out_digits: int, num_rows: int) -> np.ndarray:
    """
    Expand packed columns into their first ``num_rows`` binary digits.

    Returns an array with one more trailing axis of length ``num_rows``;
    entry ``[..., l]`` is row l of the column.
    """
    shifts = out_digits - 1 - np.arange(num_rows, dtype=np.int64)
    return (np.asarray(columns, dtype=np.int64)[..., np.newaxis] >> shifts) & 1


def pack_columns(digits: np.ndarray, out_digits: int) -> np.ndarray:
    """Inverse of ``unpack_columns`` over the trailing axis."""
    num_rows = digits.shape[-1]
    shifts = out_digits - 1 - np.arange(num_rows, dtype=np.int64)
    return np.bitwise_or.reduce(np.asarray(digits, dtype=np.int64) << shifts, axis=-1)


class DigitalNetBase2(DigitalNet):
    """
    Digital net in base 2.

    Parameters
    ----------
    num_cols : int
        Number of columns k; the net has 2^k points.
    num_rows : int
        Number of rows r kept in each generator matrix (k <= r <= w).
    out_digits : int
        Number of output bits w (at most ``MAX_BITS``).
    generator_columns : array_like
        Integer array of length dim * num_cols; element ``j * num_cols + c``
        is column c of C_j, row l being bit ``w-1-l``. Bits for rows
        r, ..., w-1 must be zero.

    Examples
    --------
    >>> cols = [4, 2, 1]                 # identity, k = r = w = 3
    >>> net = DigitalNetBase2(3, 3, 3, cols)
    >>> net.get_coordinate(1, 0)
    0.5
    """

    def __init__(self, num_cols: int, num_rows: int, out_digits: int, generator_columns):
        super().__init__(2, num_cols, num_rows, out_digits, generator_columns)

    def _check_parameters(self, base: int, num_cols: int, num_rows: int, out_digits: int) -> None:
        super()._check_parameters(base, num_cols, num_rows, out_digits)
        if out_digits > MAX_BITS:
            raise ValueError(f"out_digits = {out_digits} exceeds {MAX_BITS} bits")

    def _coerce_matrices(self, generator_columns, num_cols: int) -> np.ndarray:
        columns = np.asarray(generator_columns, dtype=np.int64)
        if columns.ndim != 1 or columns.shape[0] == 0 or columns.shape[0] % num_cols:
            raise ValueError(
                f"generator columns must be a 1-d array whose length is a "
                f"positive multiple of num_cols = {num_cols}, got shape {columns.shape}"
            )
        if np.any(columns < 0) or np.any(columns >> self.out_digits):
            raise ValueError(f"generator columns must fit in {self.out_digits} bits")
        low_rows = (1 << (self.out_digits - self.num_rows)) - 1
        if np.any(columns & low_rows):
            raise ValueError(f"generator columns have nonzero bits beyond row {self.num_rows}")
        return columns

    def _net_from_matrices(self, matrices: np.ndarray) -> "DigitalNetBase2":
        return DigitalNetBase2(self.num_cols, self.num_rows, self.out_digits, matrices)

    # Generator matrices -------------------------------------------------

    def generator_matrix(self, j: int) -> np.ndarray:
        if not 0 <= j < self.dim:
            raise IndexError(f"dimension {j} out of range [0, {self.dim})")
        return unpack_columns(self._columns(j), self.out_digits, self.num_rows).T.copy()

    def _as_columns(self, matrices: np.ndarray) -> np.ndarray:
        return matrices.reshape(-1, self.num_cols)

    def _index_dimension_block(self) -> np.ndarray:
        # Reflected identity: column c has its 1 in row k-1-c.
        c = np.arange(self.num_cols, dtype=np.int64)
        return np.left_shift(1, self.out_digits - self.num_cols + c)

    def _baseline_digits(self) -> np.ndarray:
        columns = self._matrices.baseline.reshape(-1, self.num_cols)
        return unpack_columns(columns, self.out_digits, self.num_rows)

    def _install_digits(self, T: np.ndarray, method: str) -> None:
        self._matrices.replace_active(pack_columns(T, self.out_digits).reshape(-1))
        self._invalidate()
        LOG.debug("%s: base 2 dim=%d rows=%d cols=%d",
                  method, self.dim, self.num_rows, self.num_cols)

    # Coordinates ---------------------------------------------------------

    def get_coordinate(self, i: int, j: int) -> float:
        self._check_index(i, j)
        return self._coordinate_from_bits(i ^ (i >> 1), j)

    def get_coordinate_no_gray(self, i: int, j: int) -> float:
        self._check_index(i, j)
        return self._coordinate_from_bits(i, j)

    def _coordinate_from_bits(self, code: int, j: int) -> float:
        columns = self._columns(j)
        result = 0
        pos = 0
        while code >> pos:
            if (code >> pos) & 1:
                result ^= int(columns[pos])
            pos += 1
        if self._shift is not None:
            self._ensure_shift(j + 1)
            result ^= int(self._shift[j])
        return self._digits_to_coordinate(result)

    def _digits_to_coordinate(self, packed) -> float:
        x = float(packed) * self.norm_factor
        if self._shift is not None:
            x += EPSILON_HALF
        return x

    # Digital shift -------------------------------------------------------

    @property
    def digital_shift(self) -> Optional[np.ndarray]:
        if self._shift is None:
            return None
        return unpack_columns(self._shift, self.out_digits, self.out_digits)

    def _draw_shift(self, rng: np.random.Generator, count: int) -> np.ndarray:
        return rng.integers(0, 1 << self.out_digits, size=count, dtype=np.int64)

    def _zero_shift(self, count: int) -> np.ndarray:
        return np.zeros(count, dtype=np.int64)

    def _pack_shift(self, digits: np.ndarray) -> np.ndarray:
        return pack_columns(digits, self.out_digits)

    # Iterators -----------------------------------------------------------

    def _make_iterator(self, gray: bool, prepend_index: bool) -> DigitalNetIterator:
        cls = DigitalNetBase2Iterator if gray else DigitalNetBase2IteratorNoGray
        return cls(self, prepend_index)


class DigitalNetBase2Iterator(DigitalNetIterator):
    """
    Gray code iterator over a base-2 net.

    The cached point holds one packed integer per coordinate. Going from
    point i to i+1 flips the Gray code bit at the position of the lowest
    zero bit of i, so each coordinate is XORed with one column.
    """

    def _reset_digits(self) -> None:
        pass

    def _code(self, i: int) -> int:
        return i ^ (i >> 1)

    def _recompute(self, i: int) -> None:
        code = self._code(i)
        bits = [c for c in range(self._net.num_cols) if (code >> c) & 1]
        if bits:
            self._cache ^= np.bitwise_xor.reduce(self._mats[:, bits], axis=1)

    def advance_to_next_point(self) -> int:
        self._check_fresh()
        self.cur_coord_index = 0
        if self.cur_point_index + 1 >= self._num_points:
            self.cur_point_index = self._num_points
            return self.cur_point_index
        pos = trailing_ones(self.cur_point_index)
        self.cur_point_index += 1
        self._step(pos)
        return self.cur_point_index

    def _step(self, pos: int) -> None:
        self._cache ^= self._mats[:, pos]


class DigitalNetBase2IteratorNoGray(DigitalNetBase2Iterator):
    """Base-2 iterator in ordinary index order: i+1 flips bits 0 to pos of i."""

    def _code(self, i: int) -> int:
        return i

    def _step(self, pos: int) -> None:
        self._cache ^= np.bitwise_xor.reduce(self._mats[:, :pos + 1], axis=1)


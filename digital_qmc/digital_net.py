"""
Digital Nets in Base b
======================

A digital net in base b with n = b^k points in s dimensions is defined by
s generator matrices C_0, ..., C_{s-1}, each with r rows and k columns
over Z/bZ. Coordinate j of point i is obtained by writing i in base b
(or as its Gray code), multiplying the digit vector by C_j modulo b, and
reading the result as the digits of a number in [0, 1):

    u_{i,j} = sum_{l=0}^{w-1} y_{j,l} b^{-(l+1)},
    y_{j,l} = sum_{c=0}^{k-1} C_j[l, c] a_c  (mod b)

where a_c are the digits of i. Only the first r <= w output digits can be
nonzero before randomization; the remaining ones can become nonzero after
a digital shift.

Enumerating points in Gray code order lets consecutive points differ by
a single column of each C_j, so the iterator updates its cached point in
O(s r) operations instead of recomputing it in O(s r k).

Randomizations provided:
    - digital shift: add an independent uniform digit modulo b to every
      output digit of every coordinate
    - left matrix scrambles (plain, diagonal, Faure-restricted, i-binomial,
      striped): C_j <- M_j C_j with M_j lower triangular and invertible
    - right matrix scramble: C_j <- C_j U with one shared upper-triangular U

References
----------
[1] Niederreiter, H. (1992). Random Number Generation and Quasi-Monte
    Carlo Methods.
[2] L'Ecuyer, P. and Lemieux, C. (2002). Recent advances in randomized
    quasi-Monte Carlo methods.
"""

import logging
import numpy as np
from typing import Optional, Tuple

from .faure import check_faure_parameters
from .matrix_store import GeneratorMatrices
from .point_set import EPSILON_HALF, PointSet, PointSetIterator
from .scramble import (
    LOWER_FAURE,
    LOWER_UNIFORM,
    LOWER_ZERO,
    diagonal_scramble_matrices,
    faure_ibinomial_scramble_matrices,
    faure_left_scramble_matrices,
    faure_striped_scramble_matrices,
    ibinomial_scramble_matrices,
    left_multiply,
    left_multiply_diagonal,
    left_scramble_matrices,
    right_multiply,
    right_scramble_matrix,
    striped_scramble_matrices,
)
from .utils import increment_digits, int_to_digits, int_to_digits_gray

LOG = logging.getLogger(__name__)

_INT64_LIMIT = 2 ** 63


class DigitalNet(PointSet):
    """
    Digital net in an arbitrary base b.

    The generator matrices are supplied by a producer (Sobol, Faure,
    Niederreiter, a file reader, ...). The net keeps two copies of them:
    the baseline every scramble starts from, and the active matrices
    used to compute points. Scrambling never compounds: each scramble
    recomputes the active matrices from the baseline, until
    ``commit_scramble`` makes the scrambled matrices the new baseline.

    Parameters
    ----------
    base : int
        Base b >= 2 of the digit arithmetic.
    num_cols : int
        Number of columns k of each generator matrix; the net has b^k points.
    num_rows : int
        Number of rows r retained in each generator matrix (r >= k).
    out_digits : int
        Number of output digits w of each coordinate (w >= r).
    generator_matrices : array_like
        Integer array of shape (dim * num_cols, num_rows): entry
        ``[j * num_cols + c, l]`` is row l, column c of C_j. Entries must
        lie in {0, ..., b-1}.

    Attributes
    ----------
    base : int
        Base b.
    num_cols : int
        Number of columns k.
    num_rows : int
        Number of rows r.
    out_digits : int
        Number of output digits w.
    norm_factor : float
        b^-w.
    factor : np.ndarray
        ``factor[l] = b^-(l+1)`` for l = 0, ..., w-1.
    dim_shift : int
        Number of dimensions covered by the digital shift (0 if none).

    Examples
    --------
    >>> import numpy as np
    >>> C = np.eye(3, dtype=int)            # one dimension, identity matrix
    >>> net = DigitalNet(base=2, num_cols=3, num_rows=3, out_digits=3,
    ...                  generator_matrices=C)
    >>> net.num_points
    8
    >>> net.left_matrix_scramble(np.random.default_rng(1))
    >>> points = net.points
    """

    def __init__(
        self,
        base: int,
        num_cols: int,
        num_rows: int,
        out_digits: int,
        generator_matrices,
    ):
        self._check_parameters(base, num_cols, num_rows, out_digits)
        self.base = base
        self.num_cols = num_cols
        self.num_rows = num_rows
        self.out_digits = out_digits
        matrices = self._coerce_matrices(generator_matrices, num_cols)
        super().__init__(matrices.shape[0] // num_cols, base ** num_cols)

        self.norm_factor = float(base) ** -out_digits
        self.factor = float(base) ** -np.arange(1, out_digits + 1, dtype=np.float64)
        self._matrices = GeneratorMatrices(matrices)
        self._shift = None
        self.dim_shift = 0

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def _check_parameters(self, base: int, num_cols: int, num_rows: int, out_digits: int) -> None:
        if base < 2:
            raise ValueError(f"base must be >= 2, got {base}")
        if num_cols < 1:
            raise ValueError(f"num_cols must be >= 1, got {num_cols}")
        if num_rows < num_cols:
            raise ValueError(f"num_rows = {num_rows} must be >= num_cols = {num_cols}")
        if out_digits < num_rows:
            raise ValueError(f"out_digits = {out_digits} must be >= num_rows = {num_rows}")
        if num_rows * (base - 1) ** 2 >= _INT64_LIMIT:
            raise ValueError(
                f"num_rows * (base - 1)^2 overflows a 64-bit accumulator "
                f"(base={base}, num_rows={num_rows})"
            )

    def _coerce_matrices(self, generator_matrices, num_cols: int) -> np.ndarray:
        matrices = np.asarray(generator_matrices, dtype=np.int64)
        if matrices.ndim != 2 or matrices.shape[1] != self.num_rows:
            raise ValueError(
                f"generator matrices must have shape (dim * {num_cols}, "
                f"{self.num_rows}), got {matrices.shape}"
            )
        if matrices.shape[0] == 0 or matrices.shape[0] % num_cols:
            raise ValueError(
                f"{matrices.shape[0]} matrix columns is not a positive "
                f"multiple of num_cols = {num_cols}"
            )
        if np.any((matrices < 0) | (matrices >= self.base)):
            raise ValueError(f"generator matrix entries must lie in [0, {self.base})")
        return matrices

    def _set_generator_matrices(self, num_cols: int, generator_matrices) -> None:
        """
        Replace the generator matrices, e.g. when a sequence is extended
        to more columns. Any scramble is forgotten; the shift is kept.
        Nothing changes if the new matrices are rejected.
        """
        self._check_parameters(self.base, num_cols, self.num_rows, self.out_digits)
        matrices = self._coerce_matrices(generator_matrices, num_cols)
        self.num_cols = num_cols
        self._dim = matrices.shape[0] // num_cols
        self._num_points = self.base ** num_cols
        self._matrices = GeneratorMatrices(matrices)
        self._invalidate()

    def _net_from_matrices(self, matrices: np.ndarray) -> "DigitalNet":
        return DigitalNet(self.base, self.num_cols, self.num_rows, self.out_digits, matrices)

    # ------------------------------------------------------------------
    # Generator matrices
    # ------------------------------------------------------------------

    @property
    def generator_matrices(self) -> np.ndarray:
        """Active (possibly scrambled) generator matrices, read-only."""
        return self._matrices.active

    @property
    def original_generator_matrices(self) -> np.ndarray:
        """Baseline generator matrices that scrambles start from, read-only."""
        return self._matrices.baseline

    @property
    def scrambled(self) -> bool:
        return self._matrices.scrambled

    def generator_matrix(self, j: int) -> np.ndarray:
        """
        Return C_j as an r x k array.

        Parameters
        ----------
        j : int
            Dimension index.

        Returns
        -------
        np.ndarray
            ``C[l, c]`` is row l, column c of the active C_j.
        """
        if not 0 <= j < self.dim:
            raise IndexError(f"dimension {j} out of range [0, {self.dim})")
        return self._columns(j).T.copy()

    def _columns(self, j: int) -> np.ndarray:
        k = self.num_cols
        return self._matrices.active[j * k:(j + 1) * k]

    def _as_columns(self, matrices: np.ndarray) -> np.ndarray:
        return matrices.reshape(-1, self.num_cols, self.num_rows)

    def _index_dimension_block(self) -> np.ndarray:
        # Reflected identity: column c has a single 1 in row k-1-c, so the
        # coordinate of point i in ordinary digit order is i / b^k.
        k = self.num_cols
        block = np.zeros((k, self.num_rows), dtype=np.int64)
        block[np.arange(k), k - 1 - np.arange(k)] = 1
        return block

    def _matrices_with_index_dimension(self) -> np.ndarray:
        """Active matrices with the index dimension prepended as C_0."""
        return np.concatenate([self._index_dimension_block(), self._matrices.active])

    def format_generator_matrices(self, s: Optional[int] = None) -> str:
        """Text dump of the active generator matrices of the first s dimensions."""
        s = self.dim if s is None else min(s, self.dim)
        lines = []
        for j in range(s):
            lines.append(f"dim = {j + 1}")
            lines.append("")
            for row in self.generator_matrix(j):
                lines.append("  ".join(str(int(x)) for x in row))
            lines.append("----------------------------------")
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Coordinates
    # ------------------------------------------------------------------

    def get_coordinate(self, i: int, j: int) -> float:
        """
        Return coordinate j of point i, with points in Gray code order.

        Parameters
        ----------
        i : int
            Point index, 0 <= i < num_points.
        j : int
            Coordinate index, 0 <= j < dim.

        Returns
        -------
        float
            The coordinate in [0, 1).
        """
        self._check_index(i, j)
        _, _, gray = int_to_digits_gray(self.base, i, self.num_cols)
        return self._coordinate(gray, j)

    def get_coordinate_no_gray(self, i: int, j: int) -> float:
        """
        Return coordinate j of point i, using the ordinary base-b digits of i.

        This enumerates the same points as ``get_coordinate`` in a
        different order.
        """
        self._check_index(i, j)
        return self._coordinate(int_to_digits(self.base, i, self.num_cols), j)

    def _coordinate(self, index_digits: np.ndarray, j: int) -> float:
        digits = np.zeros(self.out_digits, dtype=np.int64)
        digits[:self.num_rows] = index_digits @ self._columns(j)
        if self._shift is not None:
            self._ensure_shift(j + 1)
            digits += self._shift[j]
        return self._digits_to_coordinate(digits % self.base)

    def _digits_to_coordinate(self, digits: np.ndarray) -> float:
        x = float(digits @ self.factor)
        if self._shift is not None:
            x += EPSILON_HALF
        return x

    # ------------------------------------------------------------------
    # Digital shift
    # ------------------------------------------------------------------

    @property
    def digital_shift(self) -> Optional[np.ndarray]:
        """
        Copy of the digital shift as digits, shape (dim_shift, out_digits),
        or None when the net is not shifted.
        """
        return None if self._shift is None else self._shift.copy()

    def _draw_shift(self, rng: np.random.Generator, count: int) -> np.ndarray:
        return rng.integers(0, self.base, size=(count, self.out_digits), dtype=np.int64)

    def _zero_shift(self, count: int) -> np.ndarray:
        return np.zeros((count, self.out_digits), dtype=np.int64)

    def add_random_shift(self, from_dim: int = 0, to_dim: Optional[int] = None, rng=None) -> None:
        """
        Draw a random digital shift for dimensions ``from_dim`` to ``to_dim - 1``.

        Every output digit of every coordinate in that range gets an
        independent uniform digit in {0, ..., b-1}, added modulo b to the
        digits of each point. Shift digits of dimensions below
        ``from_dim`` are kept; dimensions at or above ``to_dim`` are no
        longer covered and are drawn again, from the same generator, the
        first time they are needed.

        Parameters
        ----------
        from_dim : int, optional
            First dimension to draw (default: 0). Must not exceed the
            number of dimensions already covered.
        to_dim : int, optional
            One past the last dimension to draw (default: dim).
        rng : np.random.Generator or seed, optional
            Source of the shift. If omitted, the generator remembered
            from the previous call is used.
        """
        if rng is not None:
            self.stream = rng
        if self._stream is None:
            raise ValueError("add_random_shift called without a random generator")
        if not to_dim:
            to_dim = max(1, self.dim)
        if not 0 <= from_dim <= to_dim:
            raise ValueError(f"invalid shift range [{from_dim}, {to_dim})")
        if from_dim > self.dim_shift:
            raise ValueError(
                f"from_dim = {from_dim} would leave dimensions "
                f"[{self.dim_shift}, {from_dim}) without shift"
            )

        appending = self._shift is not None and from_dim == self.dim_shift
        kept = self._zero_shift(0) if self._shift is None else self._shift[:from_dim]
        fresh = self._draw_shift(self._stream, to_dim - from_dim)
        self._shift = np.concatenate([kept, fresh])
        self.dim_shift = to_dim
        # Appending new dimensions leaves every cached point valid.
        if not appending:
            self._invalidate()
        LOG.debug("Digital shift drawn for dimensions [%d, %d)", from_dim, to_dim)

    def set_digital_shift(self, digits) -> None:
        """
        Install a given digital shift.

        Parameters
        ----------
        digits : array_like
            Integer array of shape (d, out_digits) with d >= dim and
            entries in {0, ..., b-1}; row j is the shift of coordinate j.

        Notes
        -----
        Any generator remembered by ``add_random_shift`` is dropped, so
        dimensions beyond d are shifted by zero digits.
        """
        digits = np.asarray(digits, dtype=np.int64)
        if digits.ndim != 2 or digits.shape[0] < self.dim or digits.shape[1] != self.out_digits:
            raise ValueError(
                f"digital shift must have shape (>= {self.dim}, {self.out_digits}), "
                f"got {digits.shape}"
            )
        if np.any((digits < 0) | (digits >= self.base)):
            raise ValueError(f"shift digits must lie in [0, {self.base})")
        self._shift = self._pack_shift(digits)
        self.dim_shift = digits.shape[0]
        self._stream = None
        self._invalidate()

    def _pack_shift(self, digits: np.ndarray) -> np.ndarray:
        return digits.copy()

    def _ensure_shift(self, d: int) -> None:
        """
        Extend an active shift so that it covers the first d dimensions.

        New dimensions are drawn from the remembered generator; a shift
        installed with ``set_digital_shift`` has none and is padded with
        zero digits instead.
        """
        if self._shift is None or self.dim_shift >= d:
            return
        if self._stream is not None:
            self.add_random_shift(self.dim_shift, d)
        else:
            self._shift = np.concatenate([self._shift, self._zero_shift(d - self.dim_shift)])
            self.dim_shift = d

    def _shift_rows(self, d: int) -> np.ndarray:
        """Shift of the first d dimensions, zeros when the net is unshifted."""
        if self._shift is None:
            return self._zero_shift(d)
        self._ensure_shift(d)
        return self._shift[:d].copy()

    def clear_random_shift(self) -> None:
        """Remove the digital shift."""
        super().clear_random_shift()
        if self._shift is not None:
            self._shift = None
            self._invalidate()
        self.dim_shift = 0

    # ------------------------------------------------------------------
    # Matrix scrambles
    # ------------------------------------------------------------------

    def _baseline_digits(self) -> np.ndarray:
        return self._as_columns(self._matrices.baseline)

    def _install_digits(self, T: np.ndarray, method: str) -> None:
        self._matrices.replace_active(T.reshape(-1, self.num_rows))
        self._invalidate()
        LOG.debug("%s: base=%d dim=%d rows=%d cols=%d",
                  method, self.base, self.dim, self.num_rows, self.num_cols)

    def _apply_left(self, M: np.ndarray, method: str) -> None:
        self._install_digits(left_multiply(self._baseline_digits(), M, self.base), method)

    def _apply_left_diagonal(self, diag: np.ndarray, method: str) -> None:
        self._install_digits(
            left_multiply_diagonal(self._baseline_digits(), diag, self.base), method
        )

    def left_matrix_scramble(self, rng) -> None:
        """
        Left matrix scramble (Matousek).

        Each C_j is replaced by M_j C_j mod b, where M_j is an r x r
        lower-triangular matrix with diagonal entries uniform in
        {1, ..., b-1} and entries below the diagonal uniform in
        {0, ..., b-1}.

        Parameters
        ----------
        rng : np.random.Generator or seed
            Source of the random entries.
        """
        rng = np.random.default_rng(rng)
        M = left_scramble_matrices(rng, self.base, self.dim, self.num_rows)
        self._apply_left(M, "left_matrix_scramble")

    def left_matrix_scramble_diag(self, rng) -> None:
        """Left scramble with diagonal M_j: multiply each row of C_j by a random nonzero digit."""
        rng = np.random.default_rng(rng)
        diag = diagonal_scramble_matrices(rng, self.base, self.dim, self.num_rows)
        self._apply_left_diagonal(diag, "left_matrix_scramble_diag")

    def _lms_faure_permut(self, method: str, rng, sb: int, lower_flag: int) -> None:
        factors = check_faure_parameters(method, self.base, sb, lower_flag)
        rng = np.random.default_rng(rng)
        M = faure_left_scramble_matrices(
            rng, self.base, self.dim, self.num_rows, factors, sb, lower_flag
        )
        if lower_flag == LOWER_ZERO:
            self._apply_left_diagonal(np.diagonal(M, axis1=1, axis2=2), method)
        else:
            self._apply_left(M, method)

    def left_matrix_scramble_faure_permut(self, rng, sb: int) -> None:
        """
        Left matrix scramble whose diagonal entries are drawn from the
        first ``sb`` Faure multipliers of the base; entries below the
        diagonal are uniform in {0, ..., b-1}.

        Raises
        ------
        ValueError
            If ``sb`` is not in [1, b) or the base has no Faure table.
        """
        self._lms_faure_permut("left_matrix_scramble_faure_permut", rng, sb, LOWER_UNIFORM)

    def left_matrix_scramble_faure_permut_diag(self, rng, sb: int) -> None:
        """Diagonal left scramble with entries drawn from the first ``sb`` Faure multipliers."""
        self._lms_faure_permut("left_matrix_scramble_faure_permut_diag", rng, sb, LOWER_ZERO)

    def left_matrix_scramble_faure_permut_all(self, rng, sb: int) -> None:
        """Left scramble with every lower-triangular entry drawn from the Faure multipliers."""
        self._lms_faure_permut("left_matrix_scramble_faure_permut_all", rng, sb, LOWER_FAURE)

    def ibinomial_matrix_scramble(self, rng) -> None:
        """
        i-binomial scramble (Tezuka): M_j is lower-triangular Toeplitz,
        with one random nonzero digit on the whole diagonal and one
        random digit on each sub-diagonal.
        """
        rng = np.random.default_rng(rng)
        M = ibinomial_scramble_matrices(rng, self.base, self.dim, self.num_rows)
        self._apply_left(M, "ibinomial_matrix_scramble")

    def _ibms_faure_permut(self, method: str, rng, sb: int, lower_flag: int) -> None:
        factors = check_faure_parameters(method, self.base, sb, lower_flag)
        rng = np.random.default_rng(rng)
        M = faure_ibinomial_scramble_matrices(
            rng, self.base, self.dim, self.num_rows, factors, sb, lower_flag
        )
        if lower_flag == LOWER_ZERO:
            self._apply_left_diagonal(np.diagonal(M, axis1=1, axis2=2), method)
        else:
            self._apply_left(M, method)

    def ibinomial_matrix_scramble_faure_permut(self, rng, sb: int) -> None:
        """i-binomial scramble with the diagonal value drawn from the first ``sb`` Faure multipliers."""
        self._ibms_faure_permut("ibinomial_matrix_scramble_faure_permut", rng, sb, LOWER_UNIFORM)

    def ibinomial_matrix_scramble_faure_permut_diag(self, rng, sb: int) -> None:
        self._ibms_faure_permut("ibinomial_matrix_scramble_faure_permut_diag", rng, sb, LOWER_ZERO)

    def ibinomial_matrix_scramble_faure_permut_all(self, rng, sb: int) -> None:
        self._ibms_faure_permut("ibinomial_matrix_scramble_faure_permut_all", rng, sb, LOWER_FAURE)

    def striped_matrix_scramble(self, rng) -> None:
        """
        Striped scramble (Owen): in each column of M_j, all entries from
        the diagonal down hold the same random nonzero digit.
        """
        rng = np.random.default_rng(rng)
        M = striped_scramble_matrices(rng, self.base, self.dim, self.num_rows)
        self._apply_left(M, "striped_matrix_scramble")

    def striped_matrix_scramble_faure_permut_all(self, rng, sb: int) -> None:
        """Striped scramble with column values drawn from the first ``sb`` Faure multipliers."""
        method = "striped_matrix_scramble_faure_permut_all"
        factors = check_faure_parameters(method, self.base, sb, LOWER_FAURE)
        rng = np.random.default_rng(rng)
        M = faure_striped_scramble_matrices(rng, self.base, self.dim, self.num_rows, factors, sb)
        self._apply_left(M, method)

    def right_matrix_scramble(self, rng) -> None:
        """
        Right matrix scramble (Faure-Tezuka).

        Every C_j is replaced by C_j U mod b for a single random k x k
        upper-triangular U with nonzero diagonal. This permutes the order
        of the points but not the point set itself.
        """
        rng = np.random.default_rng(rng)
        U = right_scramble_matrix(rng, self.base, self.num_cols)
        self._install_digits(
            right_multiply(self._baseline_digits(), U, self.base), "right_matrix_scramble"
        )

    def reset_generator_matrices(self) -> None:
        """Restore the baseline generator matrices, undoing any scramble."""
        if self._matrices.scrambled:
            self._matrices.reset()
            self._invalidate()

    def commit_scramble(self) -> None:
        """
        Make the current (scrambled) matrices the baseline, so that the
        next scramble is applied on top of them.
        """
        self._matrices.commit()

    def unrandomize(self) -> None:
        """Restore the baseline generator matrices and remove the digital shift."""
        self.reset_generator_matrices()
        self.clear_random_shift()

    # ------------------------------------------------------------------
    # Iterators
    # ------------------------------------------------------------------

    def _make_iterator(self, gray: bool, prepend_index: bool) -> "DigitalNetIterator":
        cls = DigitalNetIterator if gray else DigitalNetIteratorNoGray
        return cls(self, prepend_index)

    def iterator(self) -> "DigitalNetIterator":
        """Incremental iterator enumerating points in Gray code order."""
        return self._make_iterator(True, False)

    def iterator_no_gray(self) -> "DigitalNetIterator":
        """Incremental iterator enumerating points in ordinary index order."""
        return self._make_iterator(False, False)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def info(self) -> dict:
        """Return a dictionary with net information."""
        info = super().info()
        info.update({
            "base": self.base,
            "num_cols": self.num_cols,
            "num_rows": self.num_rows,
            "out_digits": self.out_digits,
            "scrambled": self.scrambled,
            "shifted": self._shift is not None,
            "randomized": self.scrambled or self._shift is not None,
        })
        return info

    def __str__(self) -> str:
        return (f"{super().__str__()}\n"
                f"base = {self.base}, Num cols = {self.num_cols}, "
                f"Num rows = {self.num_rows}, outDigits = {self.out_digits}")

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(base={self.base}, dim={self.dim}, "
                f"num_cols={self.num_cols}, num_rows={self.num_rows}, "
                f"out_digits={self.out_digits})")


class DigitalNetIterator(PointSetIterator):
    """
    Gray code iterator over a digital net.

    The iterator caches the output digits of every coordinate of the
    current point, with the digital shift already added. Moving from
    point i to i+1 changes one Gray code digit, at the position of the
    first b-ary digit of i that is not b-1, so the cache is updated by
    adding one column of each generator matrix.

    Parameters
    ----------
    net : DigitalNet
        The net to enumerate.
    prepend_index : bool, optional
        If True, points get one extra leading coordinate generated by the
        reflected identity, i.e. i/n in ordinary digit order, and the
        coordinates of the net are shifted one position to the right.
    """

    def __init__(self, net: DigitalNet, prepend_index: bool = False):
        super().__init__(net, net.dim + 1 if prepend_index else net.dim)
        self._net = net
        self._prepend = prepend_index
        self.reset_to_first_point()

    def _load_matrices(self) -> None:
        net = self._net
        self._sync_size()
        if self._prepend:
            matrices = net._matrices_with_index_dimension()
        else:
            matrices = net.generator_matrices
        self._mats = net._as_columns(matrices)
        self._cache = net._shift_rows(self._dim)
        self._generation = net.generation

    def _reset_digits(self) -> None:
        self._bdigit = np.zeros(self._net.num_cols, dtype=np.int64)
        self._gdigit = np.zeros(self._net.num_cols, dtype=np.int64)

    def reset_to_first_point(self) -> None:
        """Move to point 0; its digits are the shift digits alone."""
        self._load_matrices()
        self._reset_digits()
        self.cur_point_index = 0
        self.cur_coord_index = 0

    def set_current_point(self, i: int) -> None:
        """Move to point i, recomputing the cached point from scratch."""
        if i == 0:
            self.reset_to_first_point()
            return
        self._sync_size()
        if not 0 < i <= self._num_points:
            raise IndexError(f"point index {i} out of range [0, {self._num_points}]")
        self._load_matrices()
        self.cur_point_index = i
        self.cur_coord_index = 0
        if i < self._num_points:
            self._recompute(i)

    def _weights(self) -> np.ndarray:
        return self._gdigit

    def _recompute(self, i: int) -> None:
        net = self._net
        _, self._bdigit, self._gdigit = int_to_digits_gray(net.base, i, net.num_cols)
        self._cache[:, :net.num_rows] += np.einsum("c,jcl->jl", self._weights(), self._mats)
        self._cache %= net.base

    def advance_to_next_point(self) -> int:
        """Move to the next point with an incremental update; return its index."""
        self._check_fresh()
        self.cur_coord_index = 0
        if self.cur_point_index + 1 >= self._num_points:
            self.cur_point_index = self._num_points
            return self.cur_point_index
        self.cur_point_index += 1
        pos = increment_digits(self._net.base, self._bdigit)
        self._step(pos)
        return self.cur_point_index

    def _step(self, pos: int) -> None:
        b = self._net.base
        r = self._net.num_rows
        self._gdigit[pos] = (self._gdigit[pos] + 1) % b
        # Shift digits are already in the cache; rows >= r get no contribution.
        self._cache[:, :r] += self._mats[:, pos, :]
        self._cache[:, :r] %= b

    def next_coordinate(self) -> float:
        if self.cur_point_index >= self._num_points or self.cur_coord_index >= self._dim:
            self._out_of_bounds()
        self._check_fresh()
        x = self._net._digits_to_coordinate(self._cache[self.cur_coord_index])
        self.cur_coord_index += 1
        return x

    def current_digits(self) -> np.ndarray:
        """Copy of the cached output digits of the current point."""
        return self._cache.copy()


class DigitalNetIteratorNoGray(DigitalNetIterator):
    """
    Iterator enumerating the points of a digital net in ordinary index order.

    Going from i to i+1 adds one unit at the first digit of i that is not
    b-1 and removes b-1 units from each lower digit, which modulo b is the
    same as adding columns 0 to pos of each generator matrix.
    """

    def _weights(self) -> np.ndarray:
        return self._bdigit

    def _step(self, pos: int) -> None:
        b = self._net.base
        r = self._net.num_rows
        self._cache[:, :r] += self._mats[:, :pos + 1, :].sum(axis=1)
        self._cache[:, :r] %= b

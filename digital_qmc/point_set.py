"""
Abstract point sets and their iterators.

A point set holds ``num_points`` points in ``[0, 1)^dim``. Points are read
either by random access with ``get_coordinate(i, j)`` or sequentially
through an iterator that walks point by point, coordinate by coordinate.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

LOG = logging.getLogger(__name__)

# Added to randomized coordinates so that 0 is never returned.
EPSILON_HALF = 2.0 ** -55


class StaleIteratorError(RuntimeError):
    """Raised when an iterator is used after its point set was re-randomized."""


class PointSet(ABC):
    """
    Base class for point sets in the unit hypercube.

    Parameters
    ----------
    dim : int
        Dimension of the points.
    num_points : int
        Number of points.

    Attributes
    ----------
    generation : int
        Incremented every time the points change (scramble, new shift),
        so that iterators can detect that their cached state is stale.
    """

    def __init__(self, dim: int, num_points: int):
        if dim <= 0:
            raise ValueError(f"dimension must be positive, got {dim}")
        self._dim = dim
        self._num_points = num_points
        self._stream = None
        self.generation = 0

    @property
    def dim(self) -> int:
        """Dimension of the points."""
        return self._dim

    @property
    def num_points(self) -> int:
        """Number of points."""
        return self._num_points

    @property
    def stream(self) -> Optional[np.random.Generator]:
        """Random generator remembered for lazy extension of the randomization."""
        return self._stream

    @stream.setter
    def stream(self, rng) -> None:
        self._stream = None if rng is None else np.random.default_rng(rng)

    def _invalidate(self) -> None:
        self.generation += 1

    def _check_index(self, i: int, j: int) -> None:
        if not 0 <= i < self._num_points:
            raise IndexError(f"point index {i} out of range [0, {self._num_points})")
        if not 0 <= j < self._dim:
            raise IndexError(f"coordinate index {j} out of range [0, {self._dim})")

    @abstractmethod
    def get_coordinate(self, i: int, j: int) -> float:
        """Return coordinate j of point i."""

    def iterator(self) -> "PointSetIterator":
        """Return a new iterator positioned on the first point."""
        return PointSetIterator(self)

    def __iter__(self):
        return iter(self.iterator())

    def __len__(self) -> int:
        return self._num_points

    def add_random_shift(self, from_dim: int = 0, to_dim: Optional[int] = None, rng=None) -> None:
        """Randomize coordinates ``from_dim`` to ``to_dim - 1``."""
        raise NotImplementedError(f"{type(self).__name__} has no random shift")

    def clear_random_shift(self) -> None:
        """Remove the random shift."""
        self._stream = None

    def randomize(self, rng=None) -> None:
        """Re-randomize all coordinates with a fresh random shift."""
        self.add_random_shift(0, self._dim, rng)

    def unrandomize(self) -> None:
        """Undo every randomization."""
        self.clear_random_shift()

    def to_array(self, n: Optional[int] = None, d: Optional[int] = None) -> np.ndarray:
        """
        Materialize the first n points in their first d coordinates.

        Parameters
        ----------
        n : int, optional
            Number of points (default: all).
        d : int, optional
            Number of coordinates (default: all).

        Returns
        -------
        np.ndarray
            Array of shape (n, d), points in enumeration order.
        """
        n = self._num_points if n is None else min(n, self._num_points)
        d = self._dim if d is None else min(d, self._dim)
        points = np.empty((n, d))
        it = self.iterator()
        for i in range(n):
            points[i] = it.next_point(d)
        return points

    @property
    def points(self) -> np.ndarray:
        """
        All points of the set.

        Returns
        -------
        np.ndarray
            Point set of shape (num_points, dim) in [0, 1)^dim.
        """
        return self.to_array()

    def format_points(self, n: Optional[int] = None, d: Optional[int] = None) -> str:
        """Human-readable listing of the first n points in d coordinates."""
        lines = [str(self), "", "Points of the point set:"]
        for row in self.to_array(n, d):
            lines.append("".join(f"  {float(x)!r}" for x in row))
        return "\n".join(lines)

    def format_points_numbered(self, n: Optional[int] = None, d: Optional[int] = None) -> str:
        """Same as ``format_points`` with each point labelled by its index."""
        lines = [str(self), "", "Points of the point set:"]
        for i, row in enumerate(self.to_array(n, d)):
            coords = ", ".join(repr(float(x)) for x in row)
            lines.append(f"Point {i}  =  ({coords})")
        return "\n".join(lines)

    def info(self) -> dict:
        """Return a dictionary with point set information."""
        return {
            "type": type(self).__name__,
            "dimension": self._dim,
            "num_points": self._num_points,
            "randomized": self._stream is not None,
        }

    def __str__(self) -> str:
        return f"Number of points: {self._num_points}\nPoint set dimension: {self._dim}"


class PointSetIterator:
    """
    Sequential access to the points of a point set.

    The iterator keeps a current point index and a current coordinate
    index. ``next_coordinate`` returns the current coordinate and moves to
    the next one; ``advance_to_next_point`` moves to coordinate 0 of the
    next point. This default version reads coordinates through
    ``get_coordinate``; digital nets override it with incremental
    enumeration.

    Python iteration yields whole points as arrays.
    """

    def __init__(self, point_set: PointSet, dim: Optional[int] = None):
        self._point_set = point_set
        self._extra_dims = 0 if dim is None else dim - point_set.dim
        self._sync_size()
        self.cur_point_index = 0
        self.cur_coord_index = 0
        self._generation = point_set.generation

    @property
    def dim(self) -> int:
        return self._dim

    @property
    def num_points(self) -> int:
        return self._num_points

    def _sync_size(self) -> None:
        # The point set may have grown (e.g. an extended sequence).
        self._dim = self._point_set.dim + self._extra_dims
        self._num_points = self._point_set.num_points

    def _out_of_bounds(self):
        if self.cur_point_index >= self._num_points:
            raise IndexError("Not enough points available")
        raise IndexError("Not enough coordinates available")

    def _check_fresh(self) -> None:
        if self._generation != self._point_set.generation:
            raise StaleIteratorError(
                "point set was modified after this iterator was positioned; "
                "call reset_to_first_point() or set_current_point()"
            )

    def set_cur_coord_index(self, j: int) -> None:
        self.cur_coord_index = j

    def reset_cur_coord_index(self) -> None:
        self.cur_coord_index = 0

    def has_next_coordinate(self) -> bool:
        return self.cur_coord_index < self._dim

    def has_next_point(self) -> bool:
        return self.cur_point_index < self._num_points

    def next_coordinate(self) -> float:
        if self.cur_point_index >= self._num_points or self.cur_coord_index >= self._dim:
            self._out_of_bounds()
        self._check_fresh()
        x = self._point_set.get_coordinate(self.cur_point_index, self.cur_coord_index)
        self.cur_coord_index += 1
        return x

    def next_coordinates(self, d: int) -> np.ndarray:
        """Return the next d coordinates of the current point."""
        if self.cur_coord_index + d > self._dim:
            self._out_of_bounds()
        return np.array([self.next_coordinate() for _ in range(d)])

    def set_current_point(self, i: int) -> None:
        """
        Move to coordinate 0 of point i.

        ``i == num_points`` is allowed and leaves the iterator exhausted.
        """
        self._sync_size()
        if not 0 <= i <= self._num_points:
            raise IndexError(f"point index {i} out of range [0, {self._num_points}]")
        self.cur_point_index = i
        self.cur_coord_index = 0
        self._generation = self._point_set.generation

    def reset_to_first_point(self) -> None:
        self.set_current_point(0)

    def advance_to_next_point(self) -> int:
        """Move to coordinate 0 of the next point and return its index."""
        self.set_current_point(min(self.cur_point_index + 1, self._num_points))
        return self.cur_point_index

    def next_point(self, d: Optional[int] = None, from_dim: int = 0) -> np.ndarray:
        """
        Return coordinates ``from_dim`` to ``from_dim + d - 1`` of the
        current point, then advance to the next point.
        """
        if d is None:
            d = self._dim - from_dim
        if self.cur_point_index >= self._num_points:
            self._out_of_bounds()
        self.set_cur_coord_index(from_dim)
        p = self.next_coordinates(d)
        self.advance_to_next_point()
        return p

    def next_double(self) -> float:
        """Next coordinate, never exactly 0."""
        return self.next_coordinate() + EPSILON_HALF

    def next_int(self, lo: int, hi: int) -> int:
        """Next coordinate mapped to an integer in [lo, hi]."""
        return lo + int(self.next_double() * (hi - lo + 1.0))

    def __iter__(self):
        return self

    def __next__(self) -> np.ndarray:
        if not self.has_next_point():
            raise StopIteration
        return self.next_point()

    def format_state(self) -> str:
        return (f"Current point index: {self.cur_point_index}\n"
                f"Current coordinate index: {self.cur_coord_index}")

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(point={self.cur_point_index}, "
                f"coord={self.cur_coord_index}, dim={self._dim})")

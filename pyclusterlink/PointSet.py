"""
Point set module
================

Immutable 3-D integer points and the ordered :class:`PointSet` that owns
them.  Points are identified by their position in the set for every
algorithmic purpose; equality and hashing of a single :class:`Point` are by
coordinate value.

Two distances are offered.  The integer squared distance is exact and is the
only one used to order candidate connections; the floating point Euclidean
distance exists for reporting.
"""

import logging
import math
from collections import Counter
from typing import Iterable, Iterator, NamedTuple, Sequence, Union

import numpy as np

# Largest coordinate magnitude for which 3 * (2 * c)**2 still fits in int64.
MAX_COORDINATE = 2**29


class Point(NamedTuple):
    """A point in 3-D space with signed integer coordinates."""

    x: int
    y: int
    z: int

    def sq_distance(self, other: "Point") -> int:
        """Exact squared Euclidean distance to another point.

        Parameters
        ----------
        other : Point
            The point to measure to.

        Returns
        -------
        int
            ``dx**2 + dy**2 + dz**2``.

        """
        dx = self.x - other.x
        dy = self.y - other.y
        dz = self.z - other.z
        return dx * dx + dy * dy + dz * dz

    def distance(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        return math.sqrt(self.sq_distance(other))


PointLike = Union[Point, Sequence[int]]


class PointSet:
    """An ordered, read-only collection of 3-D integer points."""

    def __init__(self, points: Union[np.ndarray, Sequence[PointLike]]):
        """Build a point set.

        Parameters
        ----------
        points : np.ndarray or sequence of (x, y, z)
            An (N, 3) array-like of integer coordinates.  An empty sequence
            gives an empty point set.

        """
        arr = np.asarray(points)
        if arr.ndim == 1 and arr.size == 0:
            arr = np.empty((0, 3), dtype=np.int64)
        if arr.ndim != 2 or arr.shape[1] != 3:
            raise ValueError("points must have shape (N, 3)")
        if not np.issubdtype(arr.dtype, np.integer):
            if not np.issubdtype(arr.dtype, np.floating) or not np.all(
                np.equal(np.mod(arr, 1), 0)
            ):
                raise ValueError("point coordinates must be integers")
        if arr.size and (arr.max() > MAX_COORDINATE or arr.min() < -MAX_COORDINATE):
            raise ValueError(
                f"point coordinates must lie within +/-{MAX_COORDINATE}"
            )

        self._coords = arr.astype(np.int64)
        self._coords.flags.writeable = False

        counts = Counter(map(tuple, self._coords.tolist()))
        duplicates = sum(c - 1 for c in counts.values() if c > 1)
        if duplicates:
            logging.warning(
                "Point set contains %d duplicate point(s); they will be "
                "joined by zero-length edges.",
                duplicates,
            )

    @classmethod
    def from_records(cls, records: Iterable[PointLike]) -> "PointSet":
        """Build a point set from an iterable of ``(x, y, z)`` records."""
        return cls([tuple(r) for r in records])

    @property
    def coordinates(self) -> np.ndarray:
        """Read-only (N, 3) ``int64`` array of coordinates."""
        return self._coords

    def __len__(self) -> int:
        return self._coords.shape[0]

    def __getitem__(self, index: int) -> Point:
        x, y, z = self._coords[index].tolist()
        return Point(x, y, z)

    def __iter__(self) -> Iterator[Point]:
        for x, y, z in self._coords.tolist():
            yield Point(x, y, z)

    def __repr__(self) -> str:
        return f"PointSet(n_points={len(self)})"

    def sq_distance(self, i: int, j: int) -> int:
        """Exact squared distance between the points at indices i and j.

        Parameters
        ----------
        i : int
            Index of the first point.
        j : int
            Index of the second point.

        Returns
        -------
        int
            The integer squared Euclidean distance.

        """
        return self[i].sq_distance(self[j])

    def distance(self, i: int, j: int) -> float:
        """Euclidean distance between the points at indices i and j."""
        return math.sqrt(self.sq_distance(i, j))

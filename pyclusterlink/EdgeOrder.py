"""
Edge ordering module
====================

Every unordered pair of points in a :class:`~pyclusterlink.PointSet` is a
candidate connection (an *edge*).  This module enumerates all
``N * (N - 1) / 2`` of them with their exact integer squared distance and
sorts them into the total order used by every connectivity query:

* ascending squared distance, then
* ascending index of the first point, then
* ascending index of the second point.

The order is a pure function of the point set, so repeated calls (and serial
versus threaded generation) always agree.

Generation is ``O(N^2)`` in time and memory and the sort is
``O(N^2 log N)``.  This is fine for hundreds to a few thousand points; past
:data:`MAX_RECOMMENDED_POINTS` a warning is logged and the work still runs to
completion.  Much larger inputs need a spatial index instead of the full pair
set.
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, List, NamedTuple, Optional, Tuple, Union

import numpy as np

from pyclusterlink.PointSet import PointSet

MAX_RECOMMENDED_POINTS = 20_000


class Edge(NamedTuple):
    """A candidate connection between the points at indices ``i < j``."""

    i: int
    j: int
    sq_distance: int

    @property
    def distance(self) -> float:
        """Euclidean length of the edge."""
        return math.sqrt(self.sq_distance)


def pairwise_sq_distances(
    coords: np.ndarray, rows: Optional[Tuple[int, int]] = None
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Enumerate point pairs ``i < j`` with their squared distances.

    Parameters
    ----------
    coords : np.ndarray
        An (N, 3) integer array of coordinates.
    rows : tuple of int, optional
        A half-open ``(start, stop)`` range of first indices to generate. All
        first indices are generated when omitted.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray, np.ndarray]
        Three ``int64`` arrays ``(i, j, sq_distance)`` in row-major pair
        order (unsorted by distance).

    """
    coords = np.asarray(coords, dtype=np.int64)
    n = coords.shape[0]
    start, stop = (0, n) if rows is None else rows
    start, stop = max(start, 0), min(stop, n)

    first = np.arange(start, stop, dtype=np.int64)
    counts = np.maximum(n - 1 - first, 0)
    total = int(counts.sum())
    if total == 0:
        empty = np.empty(0, dtype=np.int64)
        return empty, empty.copy(), empty.copy()

    i_idx = np.repeat(first, counts)
    # position of each pair inside its row, offset past the diagonal
    offsets = np.repeat(np.cumsum(counts) - counts, counts)
    j_idx = i_idx + 1 + (np.arange(total, dtype=np.int64) - offsets)

    diff = coords[i_idx] - coords[j_idx]
    sq = np.einsum("ij,ij->i", diff, diff)
    return i_idx, j_idx, sq


class EdgeSequence:
    """An ordered, read-only sequence of :class:`Edge` records.

    Backed by three parallel numpy arrays so that large sequences stay
    compact; individual edges are materialised on access. ``n_points`` is the
    size of the point set the indices refer to, when known.
    """

    def __init__(
        self,
        i: np.ndarray,
        j: np.ndarray,
        sq_distance: np.ndarray,
        n_points: Optional[int] = None,
    ):
        if not (len(i) == len(j) == len(sq_distance)):
            raise ValueError("edge arrays must have equal length")
        self._i = np.asarray(i, dtype=np.int64)
        self._j = np.asarray(j, dtype=np.int64)
        self._sq = np.asarray(sq_distance, dtype=np.int64)
        for arr in (self._i, self._j, self._sq):
            arr.flags.writeable = False
        self.n_points = n_points

    @property
    def first(self) -> np.ndarray:
        """First point index of every edge."""
        return self._i

    @property
    def second(self) -> np.ndarray:
        """Second point index of every edge."""
        return self._j

    @property
    def sq_distances(self) -> np.ndarray:
        """Squared distance of every edge."""
        return self._sq

    def __len__(self) -> int:
        return len(self._sq)

    def __getitem__(self, index: Union[int, slice]) -> Union[Edge, "EdgeSequence"]:
        if isinstance(index, slice):
            return EdgeSequence(
                self._i[index], self._j[index], self._sq[index], n_points=self.n_points
            )
        return Edge(int(self._i[index]), int(self._j[index]), int(self._sq[index]))

    def __iter__(self) -> Iterator[Edge]:
        for i, j, sq in zip(self._i.tolist(), self._j.tolist(), self._sq.tolist()):
            yield Edge(i, j, sq)

    def __eq__(self, other) -> bool:
        if not isinstance(other, EdgeSequence):
            return NotImplemented
        return (
            np.array_equal(self._i, other._i)
            and np.array_equal(self._j, other._j)
            and np.array_equal(self._sq, other._sq)
        )

    def __repr__(self) -> str:
        return f"EdgeSequence(n_edges={len(self)})"

    def head(self, k: int) -> "EdgeSequence":
        """Return the first ``k`` edges, or all of them if fewer exist."""
        if k < 0:
            raise ValueError("k must be non-negative")
        return self[: min(k, len(self))]


def _row_blocks(n: int, n_blocks: int) -> List[Tuple[int, int]]:
    """Split first indices ``0..n-1`` into blocks holding similar pair counts."""
    # row r owns n-1-r pairs, so cumulative work is quadratic in r
    bounds = [0]
    total = n * (n - 1) / 2
    for b in range(1, n_blocks):
        target = total * b / n_blocks
        # smallest r with r*(2n-r-1)/2 >= target
        r = int(math.ceil(n - 0.5 - math.sqrt(max((n - 0.5) ** 2 - 2 * target, 0.0))))
        bounds.append(min(max(r, bounds[-1]), n))
    bounds.append(n)
    return [(lo, hi) for lo, hi in zip(bounds[:-1], bounds[1:]) if hi > lo]


def order_edges(point_set: PointSet, n_workers: Optional[int] = None) -> EdgeSequence:
    """Generate every point pair and sort by ascending squared distance.

    Parameters
    ----------
    point_set : PointSet
        The points to connect.
    n_workers : int, optional
        Number of threads used to generate pairs. ``None`` or 1 generates in
        the calling thread. The sort always runs once, after generation.

    Returns
    -------
    EdgeSequence
        All ``N * (N - 1) / 2`` edges in ascending ``(sq_distance, i, j)``
        order.

    """
    if n_workers is not None and n_workers < 1:
        raise ValueError("n_workers must be >= 1")

    coords = point_set.coordinates
    n = len(point_set)
    if n > MAX_RECOMMENDED_POINTS:
        logging.warning(
            "Ordering all pairs of %d points (%d edges); inputs above %d points "
            "are better served by a spatial index.",
            n,
            n * (n - 1) // 2,
            MAX_RECOMMENDED_POINTS,
        )

    if n_workers is None or n_workers == 1 or n < 2:
        i_idx, j_idx, sq = pairwise_sq_distances(coords)
    else:
        blocks = _row_blocks(n, n_workers)
        with ThreadPoolExecutor(max_workers=n_workers) as executor:
            parts = list(
                executor.map(lambda rows: pairwise_sq_distances(coords, rows), blocks)
            )
        i_idx = np.concatenate([p[0] for p in parts])
        j_idx = np.concatenate([p[1] for p in parts])
        sq = np.concatenate([p[2] for p in parts])

    # lexsort keys are applied last-to-first: distance, then i, then j
    order = np.lexsort((j_idx, i_idx, sq))
    logging.debug("Ordered %d edges over %d points", len(order), n)
    return EdgeSequence(i_idx[order], j_idx[order], sq[order], n_points=n)

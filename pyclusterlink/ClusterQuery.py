"""
Cluster query module
====================

Queries that feed ordered edges into a :class:`ConnectivityEngine` and
observe how the points coalesce into clusters.

* **Bounded mode** (:func:`connect_closest_pairs`) connects the K closest
  pairs and reports the resulting cluster sizes.  Every one of the K edges is
  ingested, including edges whose endpoints were already connected.
* **Saturation mode** (:func:`find_saturating_edge`) keeps connecting pairs
  until every point belongs to one cluster and reports the edge that closed
  the last gap.  This is the final edge Kruskal's algorithm would add to a
  minimum spanning tree of the complete graph.

Both modes run on :func:`ingest_edges`, a strictly sequential loop: the
engine has a single writer and edges are applied in order.  Engines are
built by the caller and handed over fresh; use :class:`ClusterQuery` to have
that done for you.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Iterator, Literal, NamedTuple, Optional, Tuple, Union

import numpy as np

from pyclusterlink.ConnectivityEngine import ConnectivityEngine
from pyclusterlink.EdgeOrder import Edge, EdgeSequence, order_edges
from pyclusterlink.PointSet import Point, PointSet

DEFAULT_TOP_N = 3


class IngestStep(NamedTuple):
    """Engine state observed right after one edge was ingested."""

    rank: int
    edge: Edge
    merged: bool
    component_count: int


@dataclass(frozen=True)
class ClusterSnapshot:
    """Cluster sizes after a bounded number of edges was ingested.

    Attributes
    ----------
    edges_ingested : int
        Number of edges fed to the engine (after clamping).
    merges : int
        How many of those edges joined two different clusters.
    sizes : Tuple[int, ...]
        Every cluster size, largest first.
    """

    edges_ingested: int
    merges: int
    sizes: Tuple[int, ...]

    @property
    def component_count(self) -> int:
        return len(self.sizes)

    def product_of_largest(self, n: int = DEFAULT_TOP_N) -> int:
        """Multiply the sizes of the ``n`` largest clusters.

        When fewer than ``n`` clusters exist the product runs over those that
        do; an empty snapshot yields 1.

        Parameters
        ----------
        n : int, optional
            Number of clusters to include. Default is 3.

        Returns
        -------
        int
            The product of the selected sizes.

        """
        if n < 1:
            raise ValueError("n must be >= 1")
        return math.prod(self.sizes[:n])


@dataclass(frozen=True)
class SaturationResult:
    """Outcome of a saturation query.

    ``status`` is ``"saturated"`` when an edge completed the connection of
    all points, or ``"trivial"`` for point sets of fewer than two points,
    which are connected before any edge exists. Trivial results carry no
    edge, rank or points.
    """

    status: Literal["saturated", "trivial"]
    edge: Optional[Edge] = None
    rank: Optional[int] = None
    points: Optional[Tuple[Point, Point]] = None
    spanning_edges: Tuple[Edge, ...] = ()

    @property
    def is_trivial(self) -> bool:
        return self.status == "trivial"

    @property
    def product(self) -> Optional[int]:
        """Product of the x coordinates of the two saturating points.

        Signed: negative when exactly one of the two x coordinates is negative.
        """
        if self.points is None:
            return None
        a, b = self.points
        return a.x * b.x


def _require_fresh(engine: ConnectivityEngine, num_nodes: Optional[int] = None) -> None:
    if num_nodes is not None and engine.num_nodes != num_nodes:
        raise ValueError(
            f"engine tracks {engine.num_nodes} nodes but the point set has {num_nodes}"
        )
    if not engine.is_pristine:
        raise ValueError("engine must be freshly initialized")


def ingest_edges(
    edges: Union[EdgeSequence, Iterable[Edge]],
    engine: ConnectivityEngine,
    limit: Optional[int] = None,
) -> Iterator[IngestStep]:
    """Feed edges into the engine in order, one union per edge.

    Parameters
    ----------
    edges : EdgeSequence or iterable of Edge
        Edges in the order they should be applied.
    engine : ConnectivityEngine
        The engine to mutate.
    limit : int, optional
        Stop after this many edges. All edges are ingested when omitted.

    Yields
    ------
    IngestStep
        The rank and edge just applied, whether it merged two components and
        the number of components left.

    """
    if limit is not None and limit < 0:
        raise ValueError("limit must be non-negative")
    for rank, edge in enumerate(edges):
        if limit is not None and rank >= limit:
            return
        merged = engine.union(edge.i, edge.j)
        yield IngestStep(rank, edge, merged, engine.component_count())


def connect_closest_pairs(
    edges: EdgeSequence, engine: ConnectivityEngine, k: int
) -> ClusterSnapshot:
    """Connect the ``k`` closest pairs and snapshot the cluster sizes.

    Parameters
    ----------
    edges : EdgeSequence
        All edges in ascending distance order.
    engine : ConnectivityEngine
        A freshly initialized engine sized to the point set the edges were
        ordered from; it is consumed by the query.
    k : int
        Number of edges to ingest. Values above ``len(edges)`` are clamped.

    Returns
    -------
    ClusterSnapshot
        Number of edges ingested, how many merged, and every cluster size.

    """
    if k < 0:
        raise ValueError("k must be non-negative")
    _require_fresh(engine, edges.n_points)
    if k > len(edges):
        logging.info(
            "Requested %d pairs but only %d exist; ingesting all of them.",
            k,
            len(edges),
        )
        k = len(edges)

    merges = sum(step.merged for step in ingest_edges(edges, engine, limit=k))
    return ClusterSnapshot(
        edges_ingested=k,
        merges=merges,
        sizes=tuple(engine.all_component_sizes()),
    )


def find_saturating_edge(
    point_set: PointSet, edges: EdgeSequence, engine: ConnectivityEngine
) -> SaturationResult:
    """Find the first edge after which every point is in one cluster.

    Parameters
    ----------
    point_set : PointSet
        The points the edges index into.
    edges : EdgeSequence
        All edges in ascending distance order.
    engine : ConnectivityEngine
        A freshly initialized engine sized to ``point_set``; it is consumed
        by the query.

    Returns
    -------
    SaturationResult
        The saturating edge, its 0-based rank, both points and the spanning
        edges collected on the way; or a ``"trivial"`` result for fewer than
        two points.

    """
    _require_fresh(engine, len(point_set))
    if len(point_set) < 2:
        logging.debug("%d point(s): trivially connected, no edges", len(point_set))
        return SaturationResult(status="trivial")

    spanning = []
    for step in ingest_edges(edges, engine):
        if not step.merged:
            continue
        spanning.append(step.edge)
        if step.component_count == 1:
            edge = step.edge
            logging.debug(
                "Saturated at rank %d by edge (%d, %d), distance %.3f",
                step.rank,
                edge.i,
                edge.j,
                edge.distance,
            )
            return SaturationResult(
                status="saturated",
                edge=edge,
                rank=step.rank,
                points=(point_set[edge.i], point_set[edge.j]),
                spanning_edges=tuple(spanning),
            )

    raise ValueError(
        f"edges leave {engine.component_count()} components; "
        "pass the full ordered edge sequence"
    )


class ClusterQuery:
    """Run bounded and saturation queries against one point set.

    The edge ordering is computed once, on first use, and shared by every
    query; each query gets its own freshly initialized engine.
    """

    def __init__(
        self,
        points: Union[PointSet, np.ndarray, Iterable],
        n_workers: Optional[int] = None,
        top_n: int = DEFAULT_TOP_N,
    ):
        """Prepare queries over a point set.

        Parameters
        ----------
        points : PointSet or array-like
            The points, or anything :class:`PointSet` accepts.
        n_workers : int, optional
            Threads used to generate pairs. Default generates serially.
        top_n : int, optional
            Number of largest clusters multiplied by :meth:`bounded_product`.
            Default is 3.

        """
        if n_workers is not None and n_workers < 1:
            raise ValueError("n_workers must be >= 1")
        if top_n < 1:
            raise ValueError("top_n must be >= 1")
        self.point_set = points if isinstance(points, PointSet) else PointSet(points)
        self.n_workers = n_workers
        self.top_n = top_n
        self._edges: Optional[EdgeSequence] = None

    @property
    def edges(self) -> EdgeSequence:
        """All edges of the point set in ascending distance order."""
        if self._edges is None:
            self._edges = order_edges(self.point_set, n_workers=self.n_workers)
        return self._edges

    def new_engine(self) -> ConnectivityEngine:
        """A fresh engine with every point in its own component."""
        return ConnectivityEngine(len(self.point_set))

    def bounded(self, k: int) -> ClusterSnapshot:
        """Cluster sizes after connecting the ``k`` closest pairs."""
        return connect_closest_pairs(self.edges, self.new_engine(), k)

    def bounded_product(self, k: int) -> int:
        """Product of the ``top_n`` largest cluster sizes after ``k`` pairs."""
        return self.bounded(k).product_of_largest(self.top_n)

    def saturation(self) -> SaturationResult:
        """The edge that first connects every point into one cluster."""
        return find_saturating_edge(self.point_set, self.edges, self.new_engine())

    def __repr__(self) -> str:
        return f"ClusterQuery(n_points={len(self.point_set)}, top_n={self.top_n})"

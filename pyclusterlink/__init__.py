from pyclusterlink.PointSet import Point, PointSet
from pyclusterlink.EdgeOrder import (
    Edge,
    EdgeSequence,
    order_edges,
    pairwise_sq_distances
)
from pyclusterlink.ConnectivityEngine import ConnectivityEngine
from pyclusterlink.ClusterQuery import (
    ClusterQuery,
    ClusterSnapshot,
    IngestStep,
    SaturationResult,
    connect_closest_pairs,
    find_saturating_edge,
    ingest_edges
)
from pyclusterlink.plotting import (
    plot_clusters,
    plot_edges
)

__all__ = [
    "Point",
    "PointSet",
    "Edge",
    "EdgeSequence",
    "order_edges",
    "pairwise_sq_distances",
    "ConnectivityEngine",
    "ClusterQuery",
    "ClusterSnapshot",
    "IngestStep",
    "SaturationResult",
    "connect_closest_pairs",
    "find_saturating_edge",
    "ingest_edges",
    "plot_clusters",
    "plot_edges",
]

import numpy as np
from pyclusterlink import ClusterQuery, plot_clusters

rng = np.random.default_rng(0)
points = rng.integers(0, 1000, size=(300, 3))

query = ClusterQuery(points)
result = query.saturation()

engine = query.new_engine()
for edge in result.spanning_edges:
    engine.union(edge.i, edge.j)

fig = plot_clusters(
    query.point_set,
    engine,
    edges=result.spanning_edges,
    title=f"Spanning edges; saturated at rank {result.rank}",
    marker_size=3,
)
fig.show()

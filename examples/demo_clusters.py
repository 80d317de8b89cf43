from sklearn.datasets import make_blobs
import matplotlib.pyplot as plt
import numpy as np
from pyclusterlink import ClusterQuery, plot_clusters

data, _ = make_blobs(
        n_samples=200,
        n_features=3,
        centers=4,
        cluster_std=40.0,
        center_box=(-500.0, 500.0),
        random_state=0,
        shuffle=False,
    )

query = ClusterQuery(np.rint(data).astype(int), n_workers=4)

snapshot = query.bounded(150)
print(f"Largest clusters after 150 pairs: {snapshot.sizes[:3]}")
print(f"Product of the three largest: {snapshot.product_of_largest()}")

result = query.saturation()
print(f"Saturated at rank {result.rank} by {result.points}, product {result.product}")

engine = query.new_engine()
for edge in query.edges.head(150):
    engine.union(edge.i, edge.j)

fig = plt.figure()
ax = fig.add_subplot(projection="3d")
plot_clusters(query.point_set, engine, ax=ax, title="After 150 closest pairs")
plt.show()

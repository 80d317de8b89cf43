import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import plotly.graph_objects as go
import pytest
from pyclusterlink.ClusterQuery import ClusterQuery
from pyclusterlink.ConnectivityEngine import ConnectivityEngine
from pyclusterlink.plotting import _cluster_colors, plot_clusters, plot_edges


def make_query():
    return ClusterQuery([(0, 0, 0), (1, 0, 0), (0, 1, 0), (100, 100, 100), (101, 100, 100)])


def bounded_engine(query, k):
    engine = query.new_engine()
    for edge in query.edges.head(k):
        engine.union(edge.i, edge.j)
    return engine


def test_cluster_colors_follow_components():
    query = make_query()
    engine = bounded_engine(query, 2)
    colors = _cluster_colors(engine, "tab10")
    assert colors[0] == colors[1] == colors[2]
    assert colors[3] != colors[0]
    assert colors[3] != colors[4]


def test_plot_clusters_matplotlib():
    query = make_query()
    engine = bounded_engine(query, 3)
    fig = plt.figure()
    ax = fig.add_subplot(projection="3d")
    edges = query.edges.head(3)
    out = plot_clusters(query.point_set, engine, edges=edges, ax=ax, title="Three pairs")
    assert out is ax
    assert ax.get_title() == "Three pairs"
    assert len(ax.lines) == 3
    plt.close(fig)


def test_plot_edges_draws_one_line_per_edge():
    query = make_query()
    fig = plt.figure()
    ax = fig.add_subplot(projection="3d")
    plot_edges(query.point_set, query.edges.head(4), ax, line_color="r")
    assert len(ax.lines) == 4
    plt.close(fig)


def test_plot_clusters_plotly():
    query = make_query()
    result = query.saturation()
    engine = bounded_engine(query, result.rank + 1)
    fig = plot_clusters(query.point_set, engine)
    assert isinstance(fig, go.Figure)
    assert len(fig.data) == 1
    fig = plot_clusters(query.point_set, engine, edges=result.spanning_edges, fig=go.Figure())
    assert len(fig.data) == 2
    assert fig.data[0].name == "Edges"


def test_plot_clusters_size_mismatch():
    query = make_query()
    with pytest.raises(ValueError):
        plot_clusters(query.point_set, ConnectivityEngine(2))

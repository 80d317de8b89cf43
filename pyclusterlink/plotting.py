import matplotlib.pyplot as plt
from pyclusterlink.ConnectivityEngine import ConnectivityEngine
from pyclusterlink.EdgeOrder import Edge
from pyclusterlink.PointSet import PointSet
from typing import Any, Iterable, List, Optional
from matplotlib.axes import Axes
from mpl_toolkits.mplot3d import Axes3D  # noqa
import plotly.graph_objects as go


def _cluster_colors(engine: ConnectivityEngine, colormap: str) -> List[Any]:
    """
    Assign one colour per point so that members of a cluster share a colour.

    Clusters are coloured in the order of
    :meth:`ConnectivityEngine.all_component_sizes`, largest first.
    """

    cmap = plt.get_cmap(colormap)
    clusters = engine.clusters()
    colors: List[Any] = [None] * engine.num_nodes
    for rank, members in enumerate(clusters):
        color = cmap(rank % cmap.N)
        for node in members:
            colors[node] = color
    return colors


def plot_edges(
    point_set: PointSet,
    edges: Iterable[Edge],
    ax: Axes,
    line_color: str = "b",
    line_width: float = 1.0,
):
    """
    Plot a set of edges as line segments on a 3D Matplotlib axis.

    Parameters
    ----------
    point_set : PointSet
        The points the edge indices refer to.
    edges : Iterable[Edge]
        The edges to draw.
    ax : matplotlib.axes.Axes
        A Matplotlib 3D Axes object to plot on.
    line_color : str, optional
        Color of the edges, by default 'b'.
    line_width : float, optional
        Width of the edge lines, by default 1.0.
    """
    coords = point_set.coordinates
    for edge in edges:
        p1, p2 = coords[edge.i], coords[edge.j]
        ax.plot(
            [p1[0], p2[0]],
            [p1[1], p2[1]],
            [p1[2], p2[2]],
            linestyle="-",
            color=line_color,
            linewidth=line_width,
        )


def plot_clusters(
    point_set: PointSet,
    engine: ConnectivityEngine,
    edges: Optional[Iterable[Edge]] = None,
    title: str = "Clusters",
    fig: Optional[go.Figure] = None,
    ax: Optional[Axes] = None,
    marker_size: float = 5,
    colormap: str = "tab10",
    line_width: float = 1.0,
    line_color: Any = "grey",
):
    """
    Visualize points coloured by the cluster they belong to, using either
    Matplotlib or Plotly.

    Parameters
    ----------
    point_set : PointSet
        The points to draw.
    engine : ConnectivityEngine
        Engine holding the current clusters; must be sized to ``point_set``.
    edges : Iterable[Edge], optional
        Edges to draw between points, e.g. the spanning edges of a
        saturation result.
    title : str, optional
        Title of the plot. Default is "Clusters".
    fig : plotly.graph_objects.Figure, optional
        A Plotly figure to add to. If None, a new figure is created.
    ax : matplotlib.axes.Axes, optional
        A Matplotlib 3D axis object to plot on. If provided, Matplotlib is used.
    marker_size : float, optional
        Size of the point markers. Default is 5.
    colormap : str, optional
        Name of the Matplotlib colormap used for clusters. Default is "tab10".
    line_width : float, optional
        Width of edge lines. Default is 1.0.
    line_color : Any, optional
        Color of edge lines. Default is "grey".

    Returns
    -------
    plotly.graph_objects.Figure or matplotlib.axes.Axes
        The figure or axis object used for plotting.
    """

    if engine.num_nodes != len(point_set):
        raise ValueError("engine size does not match point set")

    pts = point_set.coordinates
    colors = _cluster_colors(engine, colormap)

    if ax is not None:
        ax.set_title(title)
        ax.grid(False)
        if edges is not None:
            plot_edges(point_set, edges, ax, line_color=line_color, line_width=line_width)
        if len(pts):
            ax.scatter(pts[:, 0], pts[:, 1], pts[:, 2], color=colors, s=marker_size**2)
        return ax

    return _plot_clusters_plotly(
        point_set, engine, edges, title, fig, marker_size, colors, line_width, line_color
    )


def _plot_clusters_plotly(
    point_set: PointSet,
    engine: ConnectivityEngine,
    edges: Optional[Iterable[Edge]],
    title: str,
    fig: Optional[go.Figure],
    marker_size: float,
    colors: List[Any],
    line_width: float,
    line_color: Any,
):
    """
    Internal helper to render clusters using Plotly.

    Returns
    -------
    plotly.graph_objects.Figure
        The updated or newly created Plotly figure.
    """

    if fig is None:
        fig = go.Figure()

    pts = point_set.coordinates
    if edges is not None:
        xs: List[Optional[float]] = []
        ys: List[Optional[float]] = []
        zs: List[Optional[float]] = []
        for edge in edges:
            for node in (edge.i, edge.j):
                xs.append(int(pts[node, 0]))
                ys.append(int(pts[node, 1]))
                zs.append(int(pts[node, 2]))
            # None breaks the polyline between segments
            xs.append(None)
            ys.append(None)
            zs.append(None)
        fig.add_trace(go.Scatter3d(
            x=xs, y=ys, z=zs,
            mode='lines',
            line=dict(color=line_color, width=line_width),
            name='Edges'
        ))

    labels = engine.labels()
    rgba = [
        "rgba({:.0f},{:.0f},{:.0f},{:.2f})".format(c[0] * 255, c[1] * 255, c[2] * 255, c[3])
        for c in colors
    ]
    fig.add_trace(go.Scatter3d(
        x=pts[:, 0], y=pts[:, 1], z=pts[:, 2],
        mode='markers',
        marker=dict(size=marker_size, color=rgba),
        text=[f"cluster {label}" for label in labels.tolist()],
        name='Points'
    ))

    fig.update_layout(
        title=title,
        scene=dict(xaxis=dict(showgrid=False),
                   yaxis=dict(showgrid=False),
                   zaxis=dict(showgrid=False),
                   aspectmode='data'),
        margin=dict(l=0, r=0, b=0, t=30)
    )
    return fig

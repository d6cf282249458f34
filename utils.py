import plotly.graph_objects as go

from flight_calculator import polygons_of
from map_utils import PATH_COLORS


def create_flight_path_plot(union, paths):
    """Create a Plotly figure showing the selected area and both flight paths"""
    fig = go.Figure()

    if union is not None:
        for i, polygon in enumerate(polygons_of(union)):
            x_coords, y_coords = polygon.exterior.xy
            fig.add_trace(go.Scatter(
                x=list(x_coords),
                y=list(y_coords),
                mode='lines',
                name='Selected area',
                showlegend=(i == 0),
                line=dict(color='cornflowerblue', width=3),
            ))

    for orientation, path in paths.items():
        fig.add_trace(go.Scatter(
            x=[v.lng for v in path.vertices],
            y=[v.lat for v in path.vertices],
            mode='lines+markers',
            name=f'Paths by {orientation.value}',
            line=dict(color=PATH_COLORS[orientation], width=2),
            marker=dict(size=4)
        ))

    # Airport is the first vertex of every path
    first_path = next(iter(paths.values()), None)
    if first_path is not None:
        fig.add_trace(go.Scatter(
            x=[first_path.vertices[0].lng],
            y=[first_path.vertices[0].lat],
            mode='markers',
            name='Airport',
            marker=dict(size=12, color='black', symbol='star')
        ))

    fig.update_layout(
        title="Flight Paths Preview",
        xaxis_title="Longitude",
        yaxis_title="Latitude",
        showlegend=True,
        xaxis_scaleanchor="y",
        xaxis_scaleratio=1,
    )

    return fig

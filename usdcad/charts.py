import plotly.graph_objects as go

from usdcad.utils import ChartSeries

ACCENT = "#667eea"
FILL = "rgba(102, 126, 234, 0.1)"


def _y_range(values):
    # a tozeroy fill would otherwise pull the axis down to 0 and flatten the rate
    if not values:
        return None
    lo, hi = min(values), max(values)
    pad = (hi - lo) * 0.1 or abs(hi) * 0.01 or 0.01
    return [lo - pad, hi + pad]


def rate_line(series: ChartSeries, title: str = "USD to CAD", height: int = 400):
    fig = go.Figure(data=[go.Scatter(
        x=series.labels, y=series.data, name="USD to CAD",
        mode="lines+markers", line=dict(color=ACCENT, shape="spline", smoothing=0.8),
        marker=dict(color=ACCENT, line=dict(color="#fff", width=1)),
        fill="tozeroy", fillcolor=FILL,
    )])
    fig.update_layout(
        title=title, height=height, showlegend=False, hovermode="x unified",
        margin=dict(l=10, r=10, t=40, b=10),
        xaxis=dict(title="Date", showgrid=False),
        yaxis=dict(title="CAD Rate", gridcolor="rgba(0, 0, 0, 0.1)", range=_y_range(series.data)),
    )
    return fig

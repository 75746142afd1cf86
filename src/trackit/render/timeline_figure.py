# trackit/render/timeline_figure.py

from __future__ import annotations

from typing import Iterable, Optional

import plotly.graph_objects as go

from trackit.config import FLAT_COLORS, STATUS_COLORS
from trackit.roadmap.models import ProjectStatus
from trackit.roadmap.timeline_layout import (
    ProjectSelected,
    TimelineEvent,
    TimelineLayout,
    UpdateInspected,
)

BAR_KIND = "bar"
MARKER_KIND = "marker"

MARGIN = dict(l=150, r=30, t=20, b=40)


def _marker_symbol(status: ProjectStatus) -> str:
    # delayed updates stand out by shape as well as colour
    return "diamond" if status == ProjectStatus.DELAYED else "circle"


def build_timeline_figure(layout: TimelineLayout, title: Optional[str] = None) -> go.Figure:
    """
    Render a TimelineLayout with plotly, in layout coordinates:
    x in [0, width], y growing downwards from the first band.

    Trace order: connectors, bars, markers (markers on top).
    customdata carries (kind, id) so chart selections can be routed.
    """
    fig = go.Figure()

    if layout.is_empty:
        fig.update_layout(
            title=title,
            xaxis=dict(visible=False),
            yaxis=dict(visible=False),
            annotations=[dict(text="No projects to display", showarrow=False, x=0.5, y=0.5,
                              xref="paper", yref="paper")],
        )
        return fig

    # --- Connectors ---
    if layout.connectors:
        xs, ys = [], []
        for c in layout.connectors:
            xs += [c.x0, c.x1, None]
            ys += [c.y0, c.y1, None]
        fig.add_trace(go.Scatter(
            x=xs,
            y=ys,
            mode="lines",
            line=dict(color=FLAT_COLORS["grey"], width=1.5, dash="dot"),
            hoverinfo="skip",
            name="Dependencies",
        ))

    # --- Project bars ---
    bars = layout.bars
    fig.add_trace(go.Bar(
        x=[b.width for b in bars],
        base=[b.x0 for b in bars],
        y=[b.center_y for b in bars],
        width=[b.height for b in bars],
        orientation="h",
        marker=dict(
            color=[FLAT_COLORS["orange"] if b.emphasized else FLAT_COLORS["navy"] for b in bars],
            opacity=[1.0 if b.emphasized else 0.55 for b in bars],
            line=dict(width=0),
        ),
        customdata=[[BAR_KIND, b.project_id] for b in bars],
        hovertext=[b.name for b in bars],
        hoverinfo="text",
        name="Projects",
    ))

    # --- Update markers ---
    if layout.markers:
        markers = layout.markers
        fig.add_trace(go.Scatter(
            x=[m.x for m in markers],
            y=[m.y for m in markers],
            mode="markers",
            marker=dict(
                size=10,
                color=[STATUS_COLORS[m.status.value] for m in markers],
                symbol=[_marker_symbol(m.status) for m in markers],
                line=dict(color="white", width=1.5),
            ),
            customdata=[[MARKER_KIND, m.update_id] for m in markers],
            hovertext=[
                f"<b>{m.milestone}</b><br>{m.status.value} · {m.update.manager_name}"
                for m in markers
            ],
            hoverinfo="text",
            name="Updates",
        ))

    fig.update_layout(
        title=title,
        barmode="overlay",
        showlegend=False,
        height=int(layout.height + MARGIN["t"] + MARGIN["b"]),
        margin=MARGIN,
        plot_bgcolor="rgba(0,0,0,0)",
        paper_bgcolor="rgba(0,0,0,0)",
        clickmode="event+select",
        xaxis=dict(
            range=[0, layout.width],
            tickvals=[pos for pos, _ in layout.ticks],
            ticktext=[label for _, label in layout.ticks],
            showgrid=True,
            zeroline=False,
        ),
        yaxis=dict(
            range=[layout.height, 0],
            tickvals=[b.center_y for b in bars],
            ticktext=[b.name for b in bars],
            showgrid=False,
            zeroline=False,
        ),
    )
    return fig


def route_selection(points: Iterable[dict], layout: TimelineLayout) -> Optional[TimelineEvent]:
    """
    Turn chart selection points into a single timeline event.

    A marker anywhere in the selection wins; its click never also
    selects the project underneath it.
    """
    points = list(points or [])
    updates = {m.update_id: m.update for m in layout.markers}
    project_ids = {b.project_id for b in layout.bars}

    for p in points:
        kind, ident = _kind_and_id(p)
        if kind == MARKER_KIND and ident in updates:
            return UpdateInspected(update=updates[ident])

    for p in points:
        kind, ident = _kind_and_id(p)
        if kind == BAR_KIND and ident in project_ids:
            return ProjectSelected(project_id=ident)

    return None


def _kind_and_id(point):
    data = point.get("customdata") if isinstance(point, dict) else None
    if not data or len(data) < 2:
        return None, None
    return data[0], data[1]

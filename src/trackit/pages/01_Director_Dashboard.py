# trackit/pages/01_Director_Dashboard.py

import os
import sys
from datetime import datetime, timedelta, timezone

# -------------------------------------------------------------------
# Path bootstrap: same pattern as other pages
# -------------------------------------------------------------------
APP_ROOT = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(APP_ROOT, "../.."))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import streamlit as st
import plotly.express as px

from trackit.config import STATUS_COLORS, STATUS_LABELS, get_settings
from trackit.render.timeline_figure import build_timeline_figure, route_selection
from trackit.roadmap.insights_engine import generate_director_insights
from trackit.roadmap.models import ProjectStatus, current_status
from trackit.roadmap.portfolio_engine import (
    build_portfolio_frame,
    compute_portfolio_kpis,
    filter_projects,
    status_breakdown,
)
from trackit.roadmap.timeline_layout import compute_layout
from trackit.ui.session import (
    apply_event_once,
    ensure_selection,
    get_store,
    needs_insight_refresh,
    select_project,
    store_insight,
)

# -------------------------------------------------------------------
# Page config
# -------------------------------------------------------------------
st.set_page_config(
    page_title="Director Dashboard",
    layout="wide",
)

st.title("🧭 Director Dashboard")

settings = get_settings()
store = get_store(st.session_state)
projects = store.projects()
now = datetime.now(timezone.utc)

# -------------------------------------------------------------------
# Sidebar filters
# -------------------------------------------------------------------
st.sidebar.header("Filters")

sel_statuses = st.sidebar.multiselect(
    "Current status",
    options=[s.value for s in ProjectStatus],
    format_func=lambda s: STATUS_LABELS[s],
    key="filter_statuses",
)

owners = sorted({p.owner for p in projects})
sel_owners = st.sidebar.multiselect("Owner", options=owners, key="filter_owners")

query = st.sidebar.text_input("Search name / description", key="filter_query")

visible = filter_projects(projects, statuses=sel_statuses, owners=sel_owners, query=query)

# -------------------------------------------------------------------
# KPI strip
# -------------------------------------------------------------------
window = timedelta(days=settings.regression_window_days)
df = build_portfolio_frame(visible, now, window=window)
kpi = compute_portfolio_kpis(df)

c1, c2, c3, c4 = st.columns(4)
with c1:
    st.metric("Active Projects", kpi["active_projects"])
with c2:
    st.metric("At Risk", kpi["at_risk"])
with c3:
    st.metric("Status Updates Logged", kpi["total_updates"])
with c4:
    st.metric(
        "Regression Alerts",
        kpi["regression_alerts"],
        help=f"Projects whose status got worse compared with {settings.regression_window_days} days ago.",
    )

if not visible:
    st.info("No projects match the current filters.")
    st.stop()

st.divider()

# -------------------------------------------------------------------
# Execution roadmap
# -------------------------------------------------------------------
selected_id = ensure_selection(st.session_state, visible)

st.subheader("Execution Roadmap")

layout = compute_layout(
    visible,
    width=settings.timeline_width,
    band_height=settings.band_height,
    selected_project_id=selected_id,
)
fig = build_timeline_figure(layout)

event = st.plotly_chart(
    fig,
    use_container_width=True,
    on_select="rerun",
    selection_mode="points",
    key="roadmap_chart",
)

points = event.selection.points if event and event.selection else []
timeline_event = route_selection(points, layout)
if timeline_event is not None:
    before = st.session_state.get("selected_project_id")
    if apply_event_once(st.session_state, timeline_event) and st.session_state.get("selected_project_id") != before:
        st.rerun()

inspected = st.session_state.get("inspected_update")
if inspected is not None:
    with st.container(border=True):
        st.markdown(f"**{inspected.milestone}** · {STATUS_LABELS[inspected.status.value]}")
        st.caption(f"{inspected.timestamp:%d %b %Y %H:%M} UTC by {inspected.manager_name}")
        st.write(inspected.content)

st.divider()

# -------------------------------------------------------------------
# Portfolio + AI insights
# -------------------------------------------------------------------
col_list, col_ai = st.columns([1, 2])

with col_list:
    st.subheader("Project Portfolio")

    alerts = dict(zip(df["ProjectID"], df["RegressionAlert"]))
    for p in visible:
        status = current_status(p)
        badge = "🚨 " if alerts.get(p.id) else ""
        label = f"{badge}{p.name} · {STATUS_LABELS[status.value]}"
        if st.button(
            label,
            key=f"select_{p.id}",
            use_container_width=True,
            type="primary" if p.id == selected_id else "secondary",
        ):
            select_project(st.session_state, p.id)
            st.rerun()

    breakdown = status_breakdown(df)
    if breakdown["Count"].sum() > 0:
        fig_status = px.pie(
            breakdown,
            names="StatusLabel",
            values="Count",
            hole=0.5,
            color="Status",
            color_discrete_map=STATUS_COLORS,
        )
        fig_status.update_traces(textinfo="label+percent")
        fig_status.update_layout(showlegend=False, margin=dict(l=10, r=10, t=10, b=10))
        st.plotly_chart(fig_status, use_container_width=True)

with col_ai:
    selected = store.get(selected_id)
    st.subheader(f"Strategic Insights · {selected.name}")

    if needs_insight_refresh(st.session_state, selected):
        with st.spinner("Generating director insights..."):
            store_insight(st.session_state, selected, generate_director_insights(selected, settings=settings))

    insight = st.session_state["insight"]

    st.markdown("#### Executive Summary")
    st.markdown(f"> {insight.summary}")

    c_risk, c_rec = st.columns(2)
    with c_risk:
        st.markdown("#### Critical Risks")
        for risk in insight.risks:
            st.markdown(f"- ❗ {risk}")
    with c_rec:
        st.markdown("#### Recommendations")
        for rec in insight.recommendations:
            st.markdown(f"- ✅ {rec}")

    st.markdown("#### Latest Activity Log")
    if not selected.updates:
        st.caption("No updates submitted yet.")
    for u in reversed(selected.updates):
        st.markdown(
            f"<span style='color:{STATUS_COLORS[u.status.value]}'>●</span> "
            f"**{u.milestone}** · {u.timestamp:%d %b %Y} by {u.manager_name}",
            unsafe_allow_html=True,
        )
        st.caption(u.content)

with st.expander("Nerd view: portfolio dataframe"):
    st.dataframe(df, use_container_width=True)

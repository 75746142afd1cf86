# trackit/ui/session.py
"""
Session state for the Streamlit pages.

Functions take any mutable mapping so they work on st.session_state
and on plain dicts alike.
"""

from __future__ import annotations

from typing import MutableMapping, Optional, Sequence

from trackit.roadmap.insights_engine import DirectorInsight
from trackit.roadmap.models import Project
from trackit.roadmap.store import ProjectStore
from trackit.roadmap.timeline_layout import ProjectSelected, TimelineEvent, UpdateInspected

DEFAULT_SESSION_STATE = {
    "store": None,
    "selected_project_id": None,
    "inspected_update": None,
    "insight": None,
    "insight_key": None,
    "last_chart_event": None,
    # Filters
    "filter_statuses": [],
    "filter_owners": [],
    "filter_query": "",
}


def initialize_session(state: MutableMapping) -> None:
    for key, default in DEFAULT_SESSION_STATE.items():
        if key not in state:
            state[key] = list(default) if isinstance(default, list) else default

    if state["store"] is None:
        state["store"] = ProjectStore.with_seed_data()


def get_store(state: MutableMapping) -> ProjectStore:
    initialize_session(state)
    return state["store"]


# -----------------------------
# Selection
# -----------------------------

def select_project(state: MutableMapping, project_id: Optional[str]) -> bool:
    """Returns True when the selection actually changed."""
    if state.get("selected_project_id") == project_id:
        return False
    state["selected_project_id"] = project_id
    state["inspected_update"] = None
    return True


def ensure_selection(state: MutableMapping, visible: Sequence[Project]) -> Optional[str]:
    """Keep the selection inside the visible set; default to the first project."""
    visible_ids = [p.id for p in visible]
    current = state.get("selected_project_id")
    if current not in visible_ids:
        select_project(state, visible_ids[0] if visible_ids else None)
    return state.get("selected_project_id")


def apply_event(state: MutableMapping, event: Optional[TimelineEvent]) -> None:
    if isinstance(event, ProjectSelected):
        select_project(state, event.project_id)
    elif isinstance(event, UpdateInspected):
        state["inspected_update"] = event.update


def apply_event_once(state: MutableMapping, event: Optional[TimelineEvent]) -> bool:
    """
    Apply a chart event unless it is the one already applied.
    Chart selections survive reruns, so the same event arrives repeatedly.
    """
    if event is None or state.get("last_chart_event") == event:
        return False
    state["last_chart_event"] = event
    apply_event(state, event)
    return True


# -----------------------------
# Insight cache
# -----------------------------

def insight_key(project: Project):
    latest = project.latest_update
    return (project.id, len(project.updates), latest.id if latest else None)


def needs_insight_refresh(state: MutableMapping, project: Optional[Project]) -> bool:
    """True after a selection change or a new update on the selected project."""
    if project is None:
        return False
    return state.get("insight") is None or state.get("insight_key") != insight_key(project)


def store_insight(state: MutableMapping, project: Project, insight: DirectorInsight) -> None:
    state["insight"] = insight
    state["insight_key"] = insight_key(project)

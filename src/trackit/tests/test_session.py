from trackit import ProjectSelected, ProjectStore, UpdateInspected
from trackit.roadmap.insights_engine import FALLBACK_INSIGHT
from trackit.ui.session import (
    apply_event,
    apply_event_once,
    ensure_selection,
    get_store,
    initialize_session,
    needs_insight_refresh,
    select_project,
    store_insight,
)


def fresh_state():
    state = {}
    initialize_session(state)
    return state


def test_initialize_seeds_store_once():
    state = fresh_state()
    store = state["store"]

    initialize_session(state)
    assert get_store(state) is store
    assert len(store) == 3


def test_ensure_selection_defaults_to_first_visible():
    state = fresh_state()
    projects = get_store(state).projects()

    assert ensure_selection(state, projects) == "p1"
    assert ensure_selection(state, projects[1:]) == "p2"
    assert ensure_selection(state, []) is None


def test_select_project_clears_inspected_update():
    state = fresh_state()
    update = get_store(state).get("p1").updates[0]

    apply_event(state, UpdateInspected(update))
    assert state["inspected_update"] == update

    assert select_project(state, "p2") is True
    assert state["inspected_update"] is None
    assert select_project(state, "p2") is False


def test_stale_chart_event_is_applied_once():
    state = fresh_state()

    assert apply_event_once(state, ProjectSelected("p3")) is True
    select_project(state, "p1")
    # same chart selection on the next rerun must not override
    assert apply_event_once(state, ProjectSelected("p3")) is False
    assert state["selected_project_id"] == "p1"


def test_insight_refreshes_on_selection_change_and_new_update():
    state = fresh_state()
    store: ProjectStore = get_store(state)
    p1, p2 = store.get("p1"), store.get("p2")

    assert needs_insight_refresh(state, p1)
    store_insight(state, p1, FALLBACK_INSIGHT)
    assert not needs_insight_refresh(state, p1)

    assert needs_insight_refresh(state, p2)

    store.submit_update("p1", "Mike", "AT_RISK", "Phase 2", "Supplier delay on sensors")
    assert needs_insight_refresh(state, store.get("p1"))
    assert not needs_insight_refresh(state, None)

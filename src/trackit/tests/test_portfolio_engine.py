from datetime import datetime, timedelta, timezone

import pandas as pd

from trackit import ProjectStatus, ProjectStore, compute_layout
from trackit.roadmap.portfolio_engine import (
    build_portfolio_frame,
    compute_portfolio_kpis,
    filter_projects,
    status_breakdown,
)

NOW = datetime(2024, 3, 10, tzinfo=timezone.utc)


def seeded_store():
    store = ProjectStore.with_seed_data()
    # p1: ON_TRACK (Feb 1) -> DELAYED (Mar 9): regression inside the window
    store.submit_update("p1", "Mike", "DELAYED", "Load tests", "Cluster failing",
                        timestamp=datetime(2024, 3, 9, tzinfo=timezone.utc))
    return store


# ----------------------------------------------------------------
# 1. FRAME & KPIs
# ----------------------------------------------------------------
def test_portfolio_frame_has_one_row_per_project():
    df = build_portfolio_frame(seeded_store().projects(), NOW)

    assert list(df["ProjectID"]) == ["p1", "p2", "p3"]
    assert list(df["Status"]) == ["DELAYED", "AT_RISK", "ON_TRACK"]
    assert list(df["UpdateCount"]) == [2, 1, 0]
    assert list(df["RegressionAlert"]) == [True, False, False]
    assert df.loc[2, "LatestMilestone"] == ""
    assert pd.isna(df.loc[2, "LastUpdate"])


def test_kpis_use_current_status():
    kpi = compute_portfolio_kpis(build_portfolio_frame(seeded_store().projects(), NOW))

    assert kpi["active_projects"] == 3
    assert kpi["at_risk"] == 1
    assert kpi["delayed"] == 1
    assert kpi["total_updates"] == 3
    assert kpi["regression_alerts"] == 1
    assert round(kpi["health_pct"], 1) == 33.3


def test_regression_window_is_configurable():
    projects = seeded_store().projects()

    week = compute_portfolio_kpis(build_portfolio_frame(projects, NOW, window=timedelta(days=7)))
    day = compute_portfolio_kpis(build_portfolio_frame(projects, NOW, window=timedelta(days=1)))

    assert week["regression_alerts"] == 1
    # the Mar 9 update is already the baseline one day back
    assert day["regression_alerts"] == 0


def test_empty_portfolio():
    df = build_portfolio_frame([], NOW)
    kpi = compute_portfolio_kpis(df)

    assert df.empty
    assert kpi["active_projects"] == 0
    assert kpi["health_pct"] == 0.0


def test_status_breakdown_lists_every_status():
    out = status_breakdown(build_portfolio_frame(seeded_store().projects(), NOW))

    assert list(out["Status"]) == [s.value for s in ProjectStatus]
    assert out["Count"].sum() == 3
    assert int(out.loc[out["Status"] == "COMPLETED", "Count"].iloc[0]) == 0


# ----------------------------------------------------------------
# 2. FILTERING
# ----------------------------------------------------------------
def test_filter_by_current_status():
    projects = seeded_store().projects()
    assert [p.id for p in filter_projects(projects, statuses=["AT_RISK", "DELAYED"])] == ["p1", "p2"]


def test_filter_by_owner_and_query():
    projects = seeded_store().projects()

    assert [p.id for p in filter_projects(projects, owners=["Robert Tan"])] == ["p3"]
    assert [p.id for p in filter_projects(projects, query="TELEMETRY")] == ["p2"]
    assert filter_projects(projects, query="nothing matches") == []


def test_no_filters_keeps_everything_in_order():
    projects = seeded_store().projects()
    assert filter_projects(projects) == projects


def test_filtering_drops_connectors_to_hidden_projects():
    projects = seeded_store().projects()
    visible = filter_projects(projects, statuses=["AT_RISK", "ON_TRACK"])

    layout = compute_layout(visible, 800, 60)
    # p2 depends on hidden p1; p3 -> p2 still resolves
    assert [(c.from_project_id, c.to_project_id) for c in layout.connectors] == [("p2", "p3")]

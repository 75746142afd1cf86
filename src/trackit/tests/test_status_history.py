from datetime import datetime, timedelta, timezone

import pytest

from trackit import (
    ProjectStatus,
    detect_regression,
    find_baseline,
    is_regression,
    project_from_dict,
    regression_alerts,
    status_severity,
)

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def make_project(statuses_and_days, project_id="p1"):
    """Helper: [(status, day offset from T0), ...] -> Project"""
    return project_from_dict({
        "id": project_id,
        "name": "Test Project",
        "start_date": "2024-01-01",
        "end_date": "2024-12-31",
        "updates": [
            {
                "id": f"u{i}",
                "manager_name": "Test",
                "timestamp": T0 + timedelta(days=days),
                "status": status,
                "milestone": f"M{i}",
            }
            for i, (status, days) in enumerate(statuses_and_days)
        ],
    })


# ----------------------------------------------------------------
# 1. SEVERITY POLICY
# ----------------------------------------------------------------
def test_severity_ordering():
    assert status_severity("ON_TRACK") < status_severity("AT_RISK") < status_severity("DELAYED")
    assert status_severity(ProjectStatus.COMPLETED) < status_severity(ProjectStatus.ON_TRACK)


@pytest.mark.parametrize("other", ["ON_TRACK", "AT_RISK", "DELAYED"])
def test_completed_never_counts(other):
    assert not is_regression("COMPLETED", other)
    assert not is_regression(other, "COMPLETED")


def test_equal_severity_is_not_regression():
    assert not is_regression("AT_RISK", "AT_RISK")


# ----------------------------------------------------------------
# 2. DETECT REGRESSION
# ----------------------------------------------------------------
def test_no_updates_is_false():
    project = make_project([])
    assert detect_regression(project, T0) is False


def test_single_update_is_false():
    """One update: no baseline at all, whatever its age."""
    assert detect_regression(make_project([("DELAYED", 0)]), T0 + timedelta(days=1)) is False
    assert detect_regression(make_project([("DELAYED", 0)]), T0 + timedelta(days=30)) is False


def test_worsening_after_a_week_is_flagged():
    """ON_TRACK at t0, DELAYED at t0+10d, evaluated at t0+11d."""
    project = make_project([("ON_TRACK", 0), ("DELAYED", 10)])
    assert detect_regression(project, T0 + timedelta(days=11)) is True


def test_old_lower_severity_baseline_is_flagged():
    project = make_project([("AT_RISK", 0), ("DELAYED", 9)])
    assert detect_regression(project, T0 + timedelta(days=9)) is True


def test_improvement_is_not_flagged():
    project = make_project([("DELAYED", 0), ("ON_TRACK", 10)])
    assert detect_regression(project, T0 + timedelta(days=11)) is False


def test_monotonic_improvement_never_flags():
    steps = [("DELAYED", 0), ("AT_RISK", 8), ("ON_TRACK", 16)]
    for n in range(1, len(steps) + 1):
        project = make_project(steps[:n])
        now = T0 + timedelta(days=steps[n - 1][1] + 1)
        assert detect_regression(project, now) is False


def test_recent_updates_fall_back_to_earliest():
    """Both updates inside the window: earliest becomes the baseline."""
    project = make_project([("ON_TRACK", 0), ("AT_RISK", 2)])
    now = T0 + timedelta(days=3)

    baseline = find_baseline(project.updates, now)
    assert baseline is project.updates[0]
    assert detect_regression(project, now) is True


def test_baseline_is_latest_update_in_effect_at_cutoff():
    project = make_project([("ON_TRACK", 0), ("DELAYED", 3), ("DELAYED", 12)])
    now = T0 + timedelta(days=12)

    # cutoff = day 5 -> day-3 update is the baseline, DELAYED vs DELAYED
    assert find_baseline(project.updates, now).id == "u1"
    assert detect_regression(project, now) is False


def test_baseline_equal_to_latest_is_false():
    """Latest update itself is older than the cutoff: nothing to compare."""
    project = make_project([("ON_TRACK", 0), ("DELAYED", 1)])
    assert detect_regression(project, T0 + timedelta(days=20)) is False


def test_completed_transitions_never_flag():
    into = make_project([("ON_TRACK", 0), ("COMPLETED", 10)])
    out_of = make_project([("COMPLETED", 0), ("DELAYED", 10)])
    now = T0 + timedelta(days=11)

    assert detect_regression(into, now) is False
    assert detect_regression(out_of, now) is False


def test_detect_regression_is_deterministic():
    project = make_project([("ON_TRACK", 0), ("AT_RISK", 10)])
    now = T0 + timedelta(days=11)
    assert detect_regression(project, now) == detect_regression(project, now)


def test_naive_now_is_treated_as_utc():
    project = make_project([("ON_TRACK", 0), ("DELAYED", 10)])
    assert detect_regression(project, datetime(2024, 3, 12, 9, 0)) is True


def test_regression_alerts_per_project():
    calm = make_project([("ON_TRACK", 0), ("ON_TRACK", 10)], project_id="calm")
    hot = make_project([("ON_TRACK", 0), ("DELAYED", 10)], project_id="hot")

    alerts = regression_alerts([calm, hot], T0 + timedelta(days=11))
    assert alerts == {"calm": False, "hot": True}

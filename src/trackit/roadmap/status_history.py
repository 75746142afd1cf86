# trackit/roadmap/status_history.py

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, Iterable, Optional, Sequence

from trackit.roadmap.models import Project, ProjectStatus, StatusUpdate, parse_timestamp

# ---------------------------------------------------------
# SEVERITY POLICY
# ---------------------------------------------------------

# COMPLETED is a sentinel below every other level and is exempt
# from regression checks in both directions.
STATUS_SEVERITY = {
    ProjectStatus.COMPLETED: -1,
    ProjectStatus.ON_TRACK: 0,
    ProjectStatus.AT_RISK: 1,
    ProjectStatus.DELAYED: 2,
}

REGRESSION_WINDOW = timedelta(days=7)


def status_severity(status) -> int:
    return STATUS_SEVERITY[ProjectStatus(status)]


def is_regression(baseline_status, latest_status) -> bool:
    """True when `latest_status` is strictly worse than `baseline_status`."""
    baseline_status = ProjectStatus(baseline_status)
    latest_status = ProjectStatus(latest_status)

    if ProjectStatus.COMPLETED in (baseline_status, latest_status):
        return False
    return status_severity(latest_status) > status_severity(baseline_status)


# ---------------------------------------------------------
# BASELINE SELECTION
# ---------------------------------------------------------

def find_baseline(
    updates: Sequence[StatusUpdate],
    now: datetime,
    window: timedelta = REGRESSION_WINDOW,
) -> Optional[StatusUpdate]:
    """
    Pick the update a project's latest status is compared against.

      1. the most recent update already in effect at `now - window`
      2. otherwise the earliest update, but only when there are 2+
      3. otherwise None
    """
    if not updates:
        return None

    cutoff = parse_timestamp(now) - window

    baseline = None
    for u in updates:
        if u.timestamp <= cutoff and (baseline is None or u.timestamp >= baseline.timestamp):
            baseline = u

    if baseline is None and len(updates) > 1:
        baseline = updates[0]

    return baseline


def detect_regression(
    project: Project,
    now: datetime,
    window: timedelta = REGRESSION_WINDOW,
) -> bool:
    """
    Has the project's health gotten worse within the trailing window?

    Pure function of (update sequence, now). Ties and any comparison
    involving COMPLETED never count.
    """
    updates = project.updates
    if not updates:
        return False

    latest = updates[-1]
    baseline = find_baseline(updates, now, window)

    if baseline is None or baseline is latest:
        return False

    return is_regression(baseline.status, latest.status)


def regression_alerts(
    projects: Iterable[Project],
    now: datetime,
    window: timedelta = REGRESSION_WINDOW,
) -> Dict[str, bool]:
    return {p.id: detect_regression(p, now, window) for p in projects}

# trackit/roadmap/portfolio_engine.py

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from trackit.config import STATUS_LABELS
from trackit.roadmap.models import Project, ProjectStatus, current_status
from trackit.roadmap.status_history import REGRESSION_WINDOW, detect_regression

PORTFOLIO_COLUMNS = [
    "ProjectID",
    "Name",
    "Owner",
    "Description",
    "Start",
    "End",
    "DurationDays",
    "Status",
    "StatusLabel",
    "UpdateCount",
    "LatestMilestone",
    "LastUpdate",
    "DependencyCount",
    "RegressionAlert",
]


# ---------------------------------------------------------
# PORTFOLIO FRAME
# ---------------------------------------------------------

def build_portfolio_frame(
    projects: Sequence[Project],
    now: datetime,
    window: timedelta = REGRESSION_WINDOW,
) -> pd.DataFrame:
    """
    One row per project, in input order:
      - current status (last update, ON_TRACK default)
      - update count / latest milestone / last update time
      - RegressionAlert from the status history analyzer
    """
    rows = []
    for p in projects:
        latest = p.latest_update
        rows.append(
            {
                "ProjectID": p.id,
                "Name": p.name,
                "Owner": p.owner,
                "Description": p.description,
                "Start": p.start_date,
                "End": p.end_date,
                "Status": current_status(p).value,
                "UpdateCount": len(p.updates),
                "LatestMilestone": latest.milestone if latest else "",
                "LastUpdate": latest.timestamp if latest else pd.NaT,
                "DependencyCount": len(p.dependencies),
                "RegressionAlert": detect_regression(p, now, window),
            }
        )

    df = pd.DataFrame(rows, columns=[c for c in PORTFOLIO_COLUMNS if c not in ("DurationDays", "StatusLabel")])

    df["Start"] = pd.to_datetime(df["Start"], errors="coerce")
    df["End"] = pd.to_datetime(df["End"], errors="coerce")
    df["LastUpdate"] = pd.to_datetime(df["LastUpdate"], errors="coerce", utc=True)
    df["DurationDays"] = (df["End"] - df["Start"]).dt.days.clip(lower=0)
    df["StatusLabel"] = df["Status"].map(STATUS_LABELS).fillna("N/A")
    df["RegressionAlert"] = df["RegressionAlert"].astype(bool)

    return df[PORTFOLIO_COLUMNS]


def compute_portfolio_kpis(df: pd.DataFrame) -> Dict[str, Any]:
    """
    Headline numbers for the director overview cards.

    Returns a dict with:
      - active_projects
      - at_risk
      - delayed
      - completed
      - total_updates
      - regression_alerts
      - health_pct   (share of projects on track or completed, 0–100)
    """
    out: Dict[str, Any] = {}

    out["active_projects"] = int(len(df))

    status = df["Status"] if "Status" in df.columns else pd.Series(dtype=str)
    out["at_risk"] = int((status == ProjectStatus.AT_RISK.value).sum())
    out["delayed"] = int((status == ProjectStatus.DELAYED.value).sum())
    out["completed"] = int((status == ProjectStatus.COMPLETED.value).sum())

    if "UpdateCount" in df.columns:
        out["total_updates"] = int(df["UpdateCount"].fillna(0).sum())
    else:
        out["total_updates"] = 0

    if "RegressionAlert" in df.columns:
        out["regression_alerts"] = int(df["RegressionAlert"].sum())
    else:
        out["regression_alerts"] = 0

    healthy = np.where(
        status.isin([ProjectStatus.ON_TRACK.value, ProjectStatus.COMPLETED.value]), 1.0, 0.0
    )
    out["health_pct"] = float(healthy.mean() * 100) if len(healthy) else 0.0

    return out


def status_breakdown(df: pd.DataFrame) -> pd.DataFrame:
    """Project count per status, every status present (zeros included)."""
    counts = df["Status"].value_counts() if "Status" in df.columns else pd.Series(dtype=int)
    out = pd.DataFrame({"Status": [s.value for s in ProjectStatus]})
    out["Count"] = out["Status"].map(counts).fillna(0).astype(int)
    out["StatusLabel"] = out["Status"].map(STATUS_LABELS)
    return out


# ---------------------------------------------------------
# FILTERING
# ---------------------------------------------------------

def filter_projects(
    projects: Iterable[Project],
    statuses: Optional[Iterable] = None,
    owners: Optional[Iterable[str]] = None,
    query: str = "",
) -> List[Project]:
    """
    Keep input order. Empty / None filters mean "no restriction".

      statuses: matched against the current status
      owners:   exact owner names
      query:    case-insensitive substring of name or description
    """
    wanted_status = {ProjectStatus(s) for s in statuses} if statuses else None
    wanted_owner = set(owners) if owners else None
    needle = (query or "").strip().lower()

    out = []
    for p in projects:
        if wanted_status is not None and current_status(p) not in wanted_status:
            continue
        if wanted_owner is not None and p.owner not in wanted_owner:
            continue
        if needle and needle not in p.name.lower() and needle not in p.description.lower():
            continue
        out.append(p)
    return out

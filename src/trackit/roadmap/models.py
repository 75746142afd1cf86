# trackit/roadmap/models.py

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from enum import Enum
from typing import Tuple


class ProjectStatus(str, Enum):
    ON_TRACK = "ON_TRACK"
    AT_RISK = "AT_RISK"
    DELAYED = "DELAYED"
    COMPLETED = "COMPLETED"


# ---------------------------------------------------------
# PARSING HELPERS
# ---------------------------------------------------------

def parse_date(value) -> date:
    """Accept a date, a datetime or a 'YYYY-MM-DD' string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def parse_timestamp(value) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Naive values are taken to be UTC; a trailing 'Z' is accepted.
    """
    if isinstance(value, datetime):
        ts = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        ts = datetime.fromisoformat(text)

    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


# ---------------------------------------------------------
# ENTITIES
# ---------------------------------------------------------

@dataclass(frozen=True)
class StatusUpdate:
    id: str
    project_id: str
    manager_name: str
    timestamp: datetime
    content: str
    milestone: str
    status: ProjectStatus

    def __post_init__(self):
        object.__setattr__(self, "timestamp", parse_timestamp(self.timestamp))
        object.__setattr__(self, "status", ProjectStatus(self.status))


@dataclass(frozen=True)
class Project:
    id: str
    name: str
    owner: str
    description: str
    start_date: date
    end_date: date
    updates: Tuple[StatusUpdate, ...] = ()
    dependencies: Tuple[str, ...] = field(default=())

    def __post_init__(self):
        object.__setattr__(self, "start_date", parse_date(self.start_date))
        object.__setattr__(self, "end_date", parse_date(self.end_date))
        object.__setattr__(self, "updates", tuple(self.updates))
        deps = self.dependencies or ()
        if isinstance(deps, str):
            deps = (deps,)
        # ordered, de-duplicated
        object.__setattr__(self, "dependencies", tuple(dict.fromkeys(deps)))

    @property
    def latest_update(self):
        return self.updates[-1] if self.updates else None


def current_status(project: Project) -> ProjectStatus:
    """Status of the last update; ON_TRACK when nothing was reported yet."""
    latest = project.latest_update
    return latest.status if latest is not None else ProjectStatus.ON_TRACK


def append_update(project: Project, update: StatusUpdate) -> Project:
    """
    Return a new Project snapshot with `update` appended.

    Keeps the update sequence chronological so the last update is
    always the current status. Equal timestamps keep submission order.
    """
    if update.project_id != project.id:
        raise ValueError(
            f"Update {update.id!r} belongs to project {update.project_id!r}, "
            f"not {project.id!r}."
        )

    if any(u.id == update.id for u in project.updates):
        raise ValueError(f"Update id {update.id!r} already exists on project {project.id!r}.")

    latest = project.latest_update
    if latest is not None and update.timestamp < latest.timestamp:
        raise ValueError(
            f"Update {update.id!r} at {update.timestamp.isoformat()} is older than the "
            f"latest update {latest.id!r} at {latest.timestamp.isoformat()}."
        )

    return replace(project, updates=project.updates + (update,))


def project_from_dict(data: dict) -> Project:
    """Build a Project (and its updates) from a plain dict of primitives."""
    updates = tuple(
        StatusUpdate(
            id=u["id"],
            project_id=u.get("project_id", data["id"]),
            manager_name=u["manager_name"],
            timestamp=u["timestamp"],
            content=u.get("content", ""),
            milestone=u.get("milestone", ""),
            status=u["status"],
        )
        for u in data.get("updates", [])
    )

    project = Project(
        id=data["id"],
        name=data["name"],
        owner=data.get("owner", ""),
        description=data.get("description", ""),
        start_date=data["start_date"],
        end_date=data["end_date"],
        dependencies=tuple(data.get("dependencies") or ()),
    )
    for u in updates:
        project = append_update(project, u)
    return project

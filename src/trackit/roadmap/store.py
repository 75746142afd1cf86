# trackit/roadmap/store.py

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from trackit.roadmap.models import (
    Project,
    ProjectStatus,
    StatusUpdate,
    append_update,
    parse_date,
    project_from_dict,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------
# DEMO PORTFOLIO
# ---------------------------------------------------------

SEED_PROJECTS = [
    {
        "id": "p1",
        "name": "LEAP Engine Optimization",
        "owner": "Sarah Chen",
        "description": "Aeronautical component database migration to secure cloud-native infrastructure.",
        "start_date": "2024-01-15",
        "end_date": "2024-06-30",
        "updates": [
            {
                "id": "u1",
                "manager_name": "Mike Jones",
                "timestamp": "2024-02-01T10:00:00Z",
                "content": "Stress testing simulations complete. GovCloud deployment verified.",
                "status": "ON_TRACK",
                "milestone": "Core Systems Finalized",
            }
        ],
    },
    {
        "id": "p2",
        "name": "Falcon Avionics Hub",
        "owner": "David Miller",
        "description": "Real-time telemetry portal for high-precision flight tracking.",
        "start_date": "2024-02-10",
        "end_date": "2024-09-15",
        "dependencies": ["p1"],
        "updates": [
            {
                "id": "u2",
                "manager_name": "Ana Smith",
                "timestamp": "2024-03-05T14:30:00Z",
                "content": "Latencies detected in high-bandwidth sensor ingestion. Investigating queue bottlenecks.",
                "status": "AT_RISK",
                "milestone": "Cockpit Interface Prototype",
            }
        ],
    },
    {
        "id": "p3",
        "name": "Eco-Propulsion AI",
        "owner": "Robert Tan",
        "description": "ML models for optimizing fuel efficiency in civil aviation.",
        "start_date": "2024-03-01",
        "end_date": "2024-12-20",
        "dependencies": ["p2"],
        "updates": [],
    },
]


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:9]}"


# ---------------------------------------------------------
# IN-MEMORY STORE
# ---------------------------------------------------------

class ProjectStore:
    """
    Session-lifetime list of projects.

    Every mutation swaps in a new Project snapshot, so lists handed
    out by `projects()` are never changed underneath a caller.
    """

    def __init__(self, projects: Optional[Iterable[Project]] = None):
        self._projects: List[Project] = []
        for p in projects or ():
            self._add(p)

    @classmethod
    def with_seed_data(cls) -> "ProjectStore":
        return cls(project_from_dict(d) for d in SEED_PROJECTS)

    # ---- reads ----

    def projects(self) -> List[Project]:
        return list(self._projects)

    def get(self, project_id: str) -> Project:
        for p in self._projects:
            if p.id == project_id:
                return p
        raise ValueError(f"Unknown project id: {project_id!r}")

    def __len__(self) -> int:
        return len(self._projects)

    def __contains__(self, project_id) -> bool:
        return any(p.id == project_id for p in self._projects)

    # ---- writes ----

    def _add(self, project: Project) -> Project:
        if project.id in self:
            raise ValueError(f"Duplicate project id: {project.id!r}")
        if project.end_date < project.start_date:
            raise ValueError(
                f"Project {project.name!r} ends ({project.end_date}) before it starts "
                f"({project.start_date})."
            )
        self._projects.append(project)
        return project

    def create_project(
        self,
        name: str,
        owner: str,
        description: str,
        start_date,
        end_date,
        dependencies: Iterable[str] = (),
        project_id: Optional[str] = None,
    ) -> Project:
        project = Project(
            id=project_id or _new_id("p"),
            name=name.strip(),
            owner=owner.strip(),
            description=description.strip(),
            start_date=parse_date(start_date),
            end_date=parse_date(end_date),
            dependencies=dependencies,
        )
        self._add(project)
        logger.info(f"Created project {project.id} ({project.name})")
        return project

    def submit_update(
        self,
        project_id: str,
        manager_name: str,
        status,
        milestone: str,
        content: str,
        timestamp: Optional[datetime] = None,
        update_id: Optional[str] = None,
    ) -> StatusUpdate:
        project = self.get(project_id)
        if update_id is not None and any(u.id == update_id for p in self._projects for u in p.updates):
            raise ValueError(f"Duplicate update id: {update_id!r}")

        update = StatusUpdate(
            id=update_id or _new_id("u"),
            project_id=project_id,
            manager_name=manager_name.strip(),
            timestamp=timestamp or datetime.now(timezone.utc),
            content=content.strip(),
            milestone=milestone.strip(),
            status=ProjectStatus(status),
        )

        updated = append_update(project, update)
        self._projects = [updated if p.id == project_id else p for p in self._projects]
        logger.info(f"Recorded {update.status.value} update {update.id} for project {project_id}")
        return update

# trackit/roadmap/timeline_layout.py

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import pandas as pd

from trackit.roadmap.models import Project, ProjectStatus, StatusUpdate

DEFAULT_BAND_PADDING = 0.4
DOMAIN_PADDING = pd.DateOffset(months=1)


# ---------------------------------------------------------
# TIME SCALE
# ---------------------------------------------------------

def _to_timestamp(value) -> pd.Timestamp:
    """Dates and datetimes as naive UTC pandas Timestamps."""
    ts = pd.Timestamp(value)
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts


@dataclass(frozen=True)
class TimeScale:
    """Linear map from the time domain [start, end] onto [0, width]."""
    start: pd.Timestamp
    end: pd.Timestamp
    width: float

    def __call__(self, value) -> float:
        span = (self.end - self.start).total_seconds()
        if span <= 0:
            return 0.0
        offset = (_to_timestamp(value) - self.start).total_seconds()
        return offset / span * self.width

    def ticks(self, max_ticks: int = 6) -> Tuple[Tuple[float, str], ...]:
        """Month-start ticks inside the domain, thinned to at most `max_ticks`."""
        months = pd.date_range(start=self.start.normalize(), end=self.end, freq="MS")
        months = [m for m in months if m >= self.start]
        if not months or max_ticks <= 0:
            return ()

        step = max(1, math.ceil(len(months) / max_ticks))
        return tuple((self(m), m.strftime("%b %Y")) for m in months[::step])


def build_time_scale(projects: Sequence[Project], width: float) -> Optional[TimeScale]:
    """
    Shared horizontal scale for the displayed projects, padded by one
    month on each side. None when there is nothing to display.
    """
    if not projects:
        return None

    min_date = min(_to_timestamp(p.start_date) for p in projects)
    max_date = max(_to_timestamp(p.end_date) for p in projects)

    return TimeScale(
        start=min_date - DOMAIN_PADDING,
        end=max_date + DOMAIN_PADDING,
        width=float(width),
    )


# ---------------------------------------------------------
# DRAW PRIMITIVES
# ---------------------------------------------------------

@dataclass(frozen=True)
class Bar:
    project_id: str
    name: str
    x0: float
    x1: float
    y: float
    height: float
    center_y: float
    emphasized: bool

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    def contains(self, x: float, y: float) -> bool:
        return self.x0 <= x <= self.x1 and self.y <= y <= self.y + self.height


@dataclass(frozen=True)
class Marker:
    update: StatusUpdate
    x: float
    y: float

    @property
    def update_id(self) -> str:
        return self.update.id

    @property
    def project_id(self) -> str:
        return self.update.project_id

    @property
    def status(self) -> ProjectStatus:
        return self.update.status

    @property
    def milestone(self) -> str:
        return self.update.milestone

    @property
    def content(self) -> str:
        return self.update.content


@dataclass(frozen=True)
class Connector:
    from_project_id: str
    to_project_id: str
    x0: float
    y0: float
    x1: float
    y1: float


@dataclass(frozen=True)
class TimelineLayout:
    bars: Tuple[Bar, ...] = ()
    markers: Tuple[Marker, ...] = ()
    connectors: Tuple[Connector, ...] = ()
    ticks: Tuple[Tuple[float, str], ...] = ()
    width: float = 0.0
    height: float = 0.0
    scale: Optional[TimeScale] = None

    @property
    def is_empty(self) -> bool:
        return not self.bars

    def bar_for(self, project_id: str) -> Optional[Bar]:
        return next((b for b in self.bars if b.project_id == project_id), None)


# ---------------------------------------------------------
# LAYOUT
# ---------------------------------------------------------

def compute_layout(
    projects: Sequence[Project],
    width: float,
    band_height: float,
    selected_project_id: Optional[str] = None,
    band_padding: float = DEFAULT_BAND_PADDING,
) -> TimelineLayout:
    """
    Lay out the displayed projects on a shared time axis:

      bars:       one per project, one band per project in input order
      markers:    one per status update, at its timestamp, band centre
      connectors: dependency end -> dependent start, for dependencies
                  present in the same displayed set

    Pure: identical inputs give identical layouts. The selected id only
    flips `Bar.emphasized`.
    """
    projects = list(projects)
    scale = build_time_scale(projects, width)
    if scale is None:
        return TimelineLayout(width=float(width))

    bar_height = band_height * (1.0 - band_padding)
    centers = {}
    bars = []
    markers = []

    for i, project in enumerate(projects):
        band_top = i * band_height
        center = band_top + band_height / 2.0
        # first occurrence wins if an id is repeated
        centers.setdefault(project.id, (center, project))

        bars.append(
            Bar(
                project_id=project.id,
                name=project.name,
                x0=scale(project.start_date),
                x1=scale(project.end_date),
                y=center - bar_height / 2.0,
                height=bar_height,
                center_y=center,
                emphasized=project.id == selected_project_id,
            )
        )

        for update in project.updates:
            markers.append(Marker(update=update, x=scale(update.timestamp), y=center))

    connectors = []
    for i, project in enumerate(projects):
        this_center = bars[i].center_y
        for dep_id in project.dependencies:
            resolved = centers.get(dep_id)
            if resolved is None:
                continue
            dep_center, dep = resolved
            connectors.append(
                Connector(
                    from_project_id=dep.id,
                    to_project_id=project.id,
                    x0=scale(dep.end_date),
                    y0=dep_center,
                    x1=scale(project.start_date),
                    y1=this_center,
                )
            )

    return TimelineLayout(
        bars=tuple(bars),
        markers=tuple(markers),
        connectors=tuple(connectors),
        ticks=scale.ticks(),
        width=float(width),
        height=float(len(projects) * band_height),
        scale=scale,
    )


# ---------------------------------------------------------
# INTERACTION
# ---------------------------------------------------------

@dataclass(frozen=True)
class ProjectSelected:
    project_id: str


@dataclass(frozen=True)
class UpdateInspected:
    update: StatusUpdate


TimelineEvent = Union[ProjectSelected, UpdateInspected]


def resolve_click(
    layout: TimelineLayout,
    x: float,
    y: float,
    marker_radius: float = 6.0,
) -> Optional[TimelineEvent]:
    """
    Hit-test a click in layout coordinates.

    Markers sit on top of bars: a marker hit yields only UpdateInspected,
    never a project selection.
    """
    best = None
    best_dist = None
    for m in layout.markers:
        dist = math.hypot(m.x - x, m.y - y)
        if dist <= marker_radius and (best_dist is None or dist < best_dist):
            best, best_dist = m, dist

    if best is not None:
        return UpdateInspected(update=best.update)

    for bar in layout.bars:
        if bar.contains(x, y):
            return ProjectSelected(project_id=bar.project_id)

    return None

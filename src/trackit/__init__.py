from trackit.roadmap.models import (
    Project,
    ProjectStatus,
    StatusUpdate,
    append_update,
    current_status,
    parse_date,
    parse_timestamp,
    project_from_dict,
)
from trackit.roadmap.status_history import (
    STATUS_SEVERITY,
    detect_regression,
    find_baseline,
    is_regression,
    regression_alerts,
    status_severity,
)
from trackit.roadmap.timeline_layout import (
    Bar,
    Connector,
    Marker,
    ProjectSelected,
    TimelineLayout,
    UpdateInspected,
    compute_layout,
    resolve_click,
)
from trackit.roadmap.store import ProjectStore

__version__ = "0.1.0"

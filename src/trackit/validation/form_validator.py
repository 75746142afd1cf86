# trackit/validation/form_validator.py

from trackit.roadmap.models import ProjectStatus, parse_date


# ------------------------------------------------------------------
# Helper: make a consistent issue dictionary
# ------------------------------------------------------------------
def make_issue(field, severity, issue_type, description, suggestion):
    return {
        "Field": field,
        "Severity": severity,
        "IssueType": issue_type,
        "Description": description,
        "SuggestedFix": suggestion,
    }


def has_blocking_issues(issues):
    return any(i["Severity"] == "critical" for i in issues)


def _blank(value):
    return value is None or not str(value).strip()


# ------------------------------------------------------------------
# Manager update form
# ------------------------------------------------------------------
def validate_update_form(form, known_project_ids):
    """
    form keys: project_id, manager_name, status, milestone, content
    """
    issues = []

    project_id = form.get("project_id")
    if _blank(project_id):
        issues.append(make_issue(
            "project_id", "critical", "MissingProject",
            "No project selected.",
            "Pick the initiative this update is for."
        ))
    elif project_id not in set(known_project_ids):
        issues.append(make_issue(
            "project_id", "critical", "UnknownProject",
            f"Project '{project_id}' does not exist.",
            "Refresh the page and pick a project from the list."
        ))

    for field, label in [
        ("manager_name", "Manager name"),
        ("milestone", "Milestone reached"),
        ("content", "Update details"),
    ]:
        if _blank(form.get(field)):
            issues.append(make_issue(
                field, "critical", "RequiredField",
                f"{label} is required.",
                f"Fill in '{label}' before submitting."
            ))

    status = form.get("status")
    try:
        ProjectStatus(status)
    except ValueError:
        issues.append(make_issue(
            "status", "critical", "InvalidStatus",
            f"Unknown status '{status}'.",
            "Use one of: " + ", ".join(s.value for s in ProjectStatus)
        ))

    content = form.get("content") or ""
    if not _blank(content) and len(content.strip()) < 20:
        issues.append(make_issue(
            "content", "warning", "ShortUpdate",
            "Update details are very short.",
            "Mention achievements, blockers and next steps."
        ))

    return issues


# ------------------------------------------------------------------
# New project form
# ------------------------------------------------------------------
def validate_project_form(form, existing_names=(), known_project_ids=()):
    """
    form keys: name, owner, description, start_date, end_date, dependencies
    """
    issues = []

    for field, label in [
        ("name", "Project name"),
        ("owner", "Lead owner"),
        ("description", "Mission description"),
    ]:
        if _blank(form.get(field)):
            issues.append(make_issue(
                field, "critical", "RequiredField",
                f"{label} is required.",
                f"Fill in '{label}'."
            ))

    name = (form.get("name") or "").strip()
    if name and name.lower() in {n.strip().lower() for n in existing_names}:
        issues.append(make_issue(
            "name", "critical", "DuplicateName",
            f"A project named '{name}' already exists.",
            "Choose a unique designation."
        ))

    dates = {}
    for field, label in [("start_date", "Start date"), ("end_date", "Target end date")]:
        raw = form.get(field)
        if _blank(raw):
            issues.append(make_issue(
                field, "critical", "RequiredField",
                f"{label} is required.",
                f"Pick a {label.lower()}."
            ))
            continue
        try:
            dates[field] = parse_date(raw)
        except ValueError:
            issues.append(make_issue(
                field, "critical", "InvalidDate",
                f"{label} '{raw}' is not a valid date.",
                "Use the YYYY-MM-DD format."
            ))

    if len(dates) == 2 and dates["end_date"] < dates["start_date"]:
        issues.append(make_issue(
            "end_date", "critical", "InvalidDateOrder",
            "End date is before start date.",
            "Move the end date on or after the start date."
        ))

    known = set(known_project_ids)
    for dep in form.get("dependencies") or []:
        if dep not in known:
            issues.append(make_issue(
                "dependencies", "error", "MissingDependency",
                f"Depends on unknown project '{dep}'.",
                "Remove the dependency or create that project first."
            ))

    return issues

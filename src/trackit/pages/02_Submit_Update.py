# trackit/pages/02_Submit_Update.py

import os
import sys

APP_ROOT = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(APP_ROOT, "../.."))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pandas as pd
import streamlit as st

from trackit.config import STATUS_LABELS
from trackit.roadmap.models import ProjectStatus
from trackit.ui.session import get_store, select_project
from trackit.validation.form_validator import has_blocking_issues, validate_update_form

st.set_page_config(page_title="Submit Status Update", layout="wide")

st.title("📝 Manager Status Update")
st.caption("Report progress, blockers and the milestone you just reached.")

store = get_store(st.session_state)
projects = store.projects()

if not projects:
    st.warning("No projects yet. Create one on the New Project page first.")
    st.stop()

names = {p.id: p.name for p in projects}

with st.form("update_form", clear_on_submit=True):
    c1, c2 = st.columns(2)
    with c1:
        project_id = st.selectbox("Project", options=list(names), format_func=names.get)
    with c2:
        manager_name = st.text_input("Manager name", placeholder="e.g. Alex Rivera")

    status = st.radio(
        "Current status",
        options=[s.value for s in ProjectStatus],
        format_func=lambda s: STATUS_LABELS[s],
        horizontal=True,
    )
    milestone = st.text_input("Milestone reached", placeholder="e.g. Beta release deployed to staging")
    content = st.text_area(
        "Update details",
        height=140,
        placeholder="Describe achievements, blockers, and next steps...",
    )

    submitted = st.form_submit_button("Submit Update", type="primary")

if submitted:
    form = {
        "project_id": project_id,
        "manager_name": manager_name,
        "status": status,
        "milestone": milestone,
        "content": content,
    }
    issues = validate_update_form(form, known_project_ids=names.keys())

    if has_blocking_issues(issues):
        st.error("❌ Update not submitted. Fix the issues below.")
        st.dataframe(pd.DataFrame(issues), use_container_width=True, hide_index=True)
        st.stop()

    try:
        update = store.submit_update(**form)
    except ValueError as ve:
        st.error(f"❌ Update rejected: {ve}")
        st.stop()

    for issue in issues:
        st.warning(f"{issue['Description']} {issue['SuggestedFix']}")

    select_project(st.session_state, update.project_id)
    st.success(f"✅ Update recorded for **{names[update.project_id]}** ({STATUS_LABELS[update.status.value]}).")
    st.page_link("pages/01_Director_Dashboard.py", label="Open the Director Dashboard", icon="🧭")

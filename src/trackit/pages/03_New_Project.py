# trackit/pages/03_New_Project.py

import os
import sys
from datetime import date, timedelta

APP_ROOT = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(APP_ROOT, "../.."))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pandas as pd
import streamlit as st

from trackit.ui.session import get_store
from trackit.validation.form_validator import has_blocking_issues, validate_project_form

st.set_page_config(page_title="New Project", layout="wide")

st.title("➕ Launch New Initiative")
st.caption("Define the mission, timeline and prerequisites of a new project.")

store = get_store(st.session_state)
projects = store.projects()
names = {p.id: p.name for p in projects}

with st.form("project_form", clear_on_submit=True):
    c1, c2 = st.columns(2)
    with c1:
        name = st.text_input("Project name", placeholder="Unique designation")
        start_date = st.date_input("Start date", value=date.today())
    with c2:
        owner = st.text_input("Lead owner", placeholder="Officer name")
        end_date = st.date_input("Target end date", value=date.today() + timedelta(days=90))

    dependencies = st.multiselect(
        "Depends on",
        options=list(names),
        format_func=names.get,
        help="Projects that must finish before this one starts.",
    )
    description = st.text_area(
        "Mission description",
        height=110,
        placeholder="Define the primary mission and technical parameters...",
    )

    submitted = st.form_submit_button("Commit Roadmap", type="primary")

if submitted:
    form = {
        "name": name,
        "owner": owner,
        "description": description,
        "start_date": start_date,
        "end_date": end_date,
        "dependencies": dependencies,
    }
    issues = validate_project_form(
        form,
        existing_names=names.values(),
        known_project_ids=names.keys(),
    )

    if has_blocking_issues(issues):
        st.error("❌ Project not created. Fix the issues below.")
        st.dataframe(pd.DataFrame(issues), use_container_width=True, hide_index=True)
        st.stop()

    try:
        project = store.create_project(**form)
    except ValueError as ve:
        st.error(f"❌ Project rejected: {ve}")
        st.stop()

    st.success(f"✅ New initiative **{project.name}** provisioned.")
    st.page_link("pages/01_Director_Dashboard.py", label="See it on the roadmap", icon="🧭")

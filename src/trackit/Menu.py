import os, sys
import logging
from datetime import datetime, timedelta, timezone

# Absolute directory containing Menu.py
APP_ROOT = os.path.dirname(os.path.abspath(__file__))

# The project root: Menu.py → trackit → src
PROJECT_ROOT = os.path.abspath(os.path.join(APP_ROOT, ".."))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import streamlit as st

from trackit.config import get_settings
from trackit.roadmap.portfolio_engine import build_portfolio_frame, compute_portfolio_kpis
from trackit.ui.session import initialize_session, get_store

settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

st.set_page_config(page_title="TrackIT Intelligence", layout="wide")

st.title("🚀 TrackIT Intelligence")

st.markdown("""
Managers submit status updates, directors read the roadmap.
The portfolio below lives for this session only.
""")

initialize_session(st.session_state)
store = get_store(st.session_state)

now = datetime.now(timezone.utc)
window = timedelta(days=settings.regression_window_days)
df = build_portfolio_frame(store.projects(), now, window=window)
kpi = compute_portfolio_kpis(df)

c1, c2, c3 = st.columns(3)
with c1:
    st.metric("Active Projects", kpi["active_projects"])
with c2:
    st.metric("At Risk", kpi["at_risk"])
with c3:
    st.metric(f"Regression Alerts ({settings.regression_window_days}d)", kpi["regression_alerts"])

st.info("Navigate to **Director Dashboard**, **Submit Update** or **New Project** in the sidebar.")

if not settings.openai_api_key:
    st.warning("OPENAI_API_KEY is not set: director insights will show a placeholder summary.")

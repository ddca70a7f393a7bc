"""
Dreamscape Streamlit UI - main entry point.

Run with: ``streamlit run dreamscape/ui/app.py``
"""

import streamlit as st

from dreamscape.ui.api_client import get_api_client
from dreamscape.ui.components.archive import render_archive, render_detail
from dreamscape.ui.components.recorder import render_recorder
from dreamscape.ui.components.settings import render_settings
from dreamscape.ui.navigation import View, ViewController

# ---------------------------------------------------------------------------
# Page config (must be first Streamlit call)
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="Dreamscape",
    page_icon="\U0001f319",
    layout="wide",
)

# ---------------------------------------------------------------------------
# Session state defaults
# ---------------------------------------------------------------------------
_DEFAULTS = {
    "api_base_url": "http://localhost:8000",
    "recording_status": "idle",
    "emojis": [],
    "last_dream": None,
    "recording_error": None,
    "archive_page": 1,
}

for key, value in _DEFAULTS.items():
    if key not in st.session_state:
        st.session_state[key] = value

if "views" not in st.session_state:
    st.session_state.views = ViewController()

views: ViewController = st.session_state.views

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
_NAV = [
    (View.home, "\U0001f3e0 Home"),
    (View.recording, "\U0001f3a4 Record"),
    (View.archive, "\U0001f4da Archive"),
    (View.settings, "\u2699\ufe0f Settings"),
]

with st.sidebar:
    st.title("\U0001f319 Dreamscape")
    st.caption("Speak your dream, watch it unfold")
    st.divider()
    for view, label in _NAV:
        if st.button(label, use_container_width=True, disabled=views.current is view):
            views.open(view)
            st.rerun()

    st.divider()
    st.session_state.api_base_url = st.text_input(
        "Backend API URL",
        value=st.session_state.api_base_url,
    )
    _conn_ok, _conn_msg = get_api_client(st.session_state.api_base_url).check_connection()
    if _conn_ok:
        st.success(f"Backend: {_conn_msg}")
    else:
        st.error(f"Backend: {_conn_msg}")

# ---------------------------------------------------------------------------
# Current view
# ---------------------------------------------------------------------------
if views.current is View.home:
    st.header("Dreamscape")
    st.write(
        "Record a dream the moment you wake up. It is transcribed, structured, "
        "and turned into a short video that lands in your archive."
    )
    if st.button("Record a dream", type="primary"):
        views.open(View.recording)
        st.rerun()
elif views.current is View.recording:
    st.header("Record")
    render_recorder()
elif views.current is View.archive:
    st.header("Dream Archive")
    render_archive(views)
elif views.current is View.detail:
    render_detail(views)
elif views.current is View.settings:
    st.header("Dreamer Profile")
    render_settings()

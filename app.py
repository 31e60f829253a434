"""
app.py
ConnectionPro: professional networking.
Entry point. The root route only ever redirects: to /auth, /onboarding or /home.
"""

import streamlit as st

from connectpro.navigation import enter_route

st.set_page_config(
    page_title   = "ConnectionPro",
    page_icon    = "🔗",
    layout       = "wide",
    initial_sidebar_state = "expanded",
)

# ── Routing ───────────────────────────────────────────────────────────────────
enter_route("/")

# Not reached in practice: the gate always redirects "/".
st.page_link("pages/auth.py", label="Continue to sign in")

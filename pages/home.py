"""
pages/home.py
Signed-in landing page.
"""

import html

import streamlit as st

from connectpro.navigation import enter_route, get_current_user_id, logout
from connectpro.profiles import get_profile

st.set_page_config(page_title="ConnectionPro", page_icon="🔗", layout="wide")

gate = enter_route("/home")

try:
    profile = get_profile(get_current_user_id()) or {}
except Exception as error:
    st.error(f"Database error: {error}")
    st.stop()

with st.sidebar:
    st.page_link("pages/home.py", label="Home")
    st.divider()
    if profile.get("full_name"):
        st.markdown(f"**{profile['full_name']}**")
    if gate.session is not None and gate.session.email:
        st.caption(gate.session.email)
    if st.button("Sign Out", key="sidebar_signout_home"):
        logout()

_name = html.escape(profile.get("full_name") or "")
_headline = " · ".join(
    html.escape(str(part)) for part in (profile.get("job_title"), profile.get("industry")) if part
)

st.markdown(
    f"""
<div style="background:linear-gradient(90deg,#0A66C2 0%,#378FE9 100%);
            border-radius:0.6rem; padding:1rem 1.4rem 0.9rem; margin-bottom:1.2rem;">
  <h1 style="color:#FFFFFF; font-size:1.8rem; font-weight:700; margin:0 0 0.2rem 0;">
    Welcome back{", " + _name if _name else ""}
  </h1>
  <p style="color:rgba(255,255,255,0.82); font-size:0.88rem; margin:0;">
    {_headline or "Your professional network"}
  </p>
</div>
""",
    unsafe_allow_html=True,
)

_skills = profile.get("skills")
if _skills is not None and len(_skills) > 0:
    st.subheader("Skills")
    st.write(", ".join(str(skill) for skill in _skills))

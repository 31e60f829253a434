"""
pages/onboarding.py
One-time professional goals form shown after the first sign-in.
"""

import streamlit as st

from connectpro.navigation import enter_route, get_auth
from connectpro.profiles import (
    CAREER_LEVELS,
    COMMON_SKILLS,
    INDUSTRIES,
    clean_skills,
    default_full_name,
    mark_onboarding_completed,
    save_onboarding,
)

st.set_page_config(page_title="ConnectionPro · Welcome", page_icon="🔗", layout="centered")

gate = enter_route("/onboarding")

session = gate.session
if session is None:
    st.info("Sign in to set up your profile.")
    st.page_link("pages/auth.py", label="Go to sign in")
    st.stop()

try:
    _metadata = get_auth().get_user_metadata()
except Exception:
    _metadata = {}
full_name = default_full_name(_metadata, session.email)

st.markdown(
    """
    <div style="text-align:center;margin-bottom:16px;">
      <h1 style="margin:0;font-size:2rem;font-weight:700;">Set your professional goals</h1>
      <p style="margin:4px 0 0;color:#888;">
        Tell us about your goals so we can tailor ConnectionPro to you.
      </p>
    </div>
    """,
    unsafe_allow_html=True,
)

col_title, col_industry = st.columns(2)
with col_title:
    job_title = st.text_input("Current or desired role", placeholder="e.g. Full Stack Developer", key="onboarding_job_title")
with col_industry:
    industry = st.selectbox("Industry", INDUSTRIES, index=None, placeholder="Select your industry", key="onboarding_industry")

col_level, col_location = st.columns(2)
with col_level:
    career_level = st.selectbox("Career level", CAREER_LEVELS, index=None, placeholder="Select your level", key="onboarding_career_level")
with col_location:
    location = st.text_input("Location", placeholder="e.g. Lisbon, Portugal", key="onboarding_location")

bio = st.text_area("About you", placeholder="A few lines about your experience and what you are looking for", key="onboarding_bio")

skills = st.multiselect("Skills", COMMON_SKILLS, key="onboarding_skills")
custom_skills = st.text_input("Other skills", placeholder="Comma separated", key="onboarding_custom_skills")

col_skip, col_save = st.columns(2)

with col_skip:
    if st.button("Skip for now", key="onboarding_skip", use_container_width=True):
        try:
            mark_onboarding_completed(session.user_id, full_name, session.email or "")
        except Exception:
            st.error("Could not save your progress. Please try again.")
        else:
            gate.set_onboarding_completed(True)

with col_save:
    if st.button("Save and continue", key="onboarding_save", type="primary", use_container_width=True):
        if not job_title or not industry or not career_level:
            st.warning("Role, industry and career level are required.")
        else:
            answers = {
                "job_title":    job_title,
                "industry":     industry,
                "career_level": career_level,
                "location":     location,
                "bio":          bio,
                "skills":       clean_skills(skills + custom_skills.split(",")),
            }
            try:
                save_onboarding(session.user_id, answers, full_name, session.email or "")
            except Exception as error:
                st.error(f"Could not save your goals: {error}")
            else:
                gate.set_onboarding_completed(True)

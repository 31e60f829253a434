"""
pages/auth.py
Sign in, account creation and password reset.
"""

import streamlit as st

from connectpro.db import get_app_url
from connectpro.navigation import enter_route, get_auth

st.set_page_config(page_title="ConnectionPro · Sign In", page_icon="🔗", layout="centered")

gate = enter_route("/auth")

st.markdown(
    """
    <div style="text-align:center;margin:24px 0 16px;">
      <h1 style="margin:0;font-size:2.2rem;font-weight:700;">ConnectionPro</h1>
      <p style="margin:4px 0 0;color:#888;">Your professional network</p>
    </div>
    """,
    unsafe_allow_html=True,
)

sign_in_tab, create_account_tab, reset_tab = st.tabs(["Sign In", "Create Account", "Forgot Password"])

with sign_in_tab:
    email = st.text_input("Email", key="sign_in_email")
    password = st.text_input("Password", type="password", key="sign_in_password")

    if st.button("Sign In", use_container_width=True):
        if not email or not password:
            st.warning("Email and password are required.")
        else:
            try:
                get_auth().sign_in(email, password)
            except Exception:
                st.error("Invalid email or password. Please try again.")
            else:
                # The SIGNED_IN event normally redirects before this line.
                gate.evaluate()

with create_account_tab:
    full_name = st.text_input("Full name", key="register_full_name")
    register_email = st.text_input("Email", key="register_email")
    register_password = st.text_input("Password", type="password", key="register_password")
    confirm_password = st.text_input("Confirm password", type="password", key="confirm_password")

    if st.button("Create Account", key="register_submit", use_container_width=True):
        if not all([full_name, register_email, register_password, confirm_password]):
            st.warning("All fields are required.")
        elif register_password != confirm_password:
            st.warning("Passwords must match.")
        elif len(register_password) < 8:
            st.warning("Password must be at least 8 characters.")
        else:
            # A new account always starts with onboarding pending.
            gate.set_onboarding_completed(False)
            try:
                session = get_auth().sign_up(register_email, register_password, full_name)
            except Exception:
                st.error("Could not create account. Please try again.")
            else:
                if session is None:
                    st.success(
                        "Account created. Please check your email to confirm your address before signing in."
                    )
                else:
                    gate.evaluate()

with reset_tab:
    reset_email = st.text_input("Email", key="reset_email")

    if st.button("Send reset link", use_container_width=True):
        if not reset_email:
            st.warning("Enter the email you signed up with.")
        else:
            try:
                get_auth().reset_password(reset_email, redirect_to=f"{get_app_url()}/auth")
            except Exception:
                st.error("Could not send the reset email. Please try again.")
            else:
                st.success("If an account exists for that email, a reset link is on its way.")

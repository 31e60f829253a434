from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
import streamlit as st
from streamlit.testing.v1 import AppTest

from connectpro import navigation, profiles
from connectpro.gate import NavigationGate

ROOT = Path(__file__).resolve().parent.parent


def _page(name: str) -> AppTest:
    at = AppTest.from_file(str(ROOT / "app.py"), default_timeout=30)
    at.switch_page(f"pages/{name}")
    return at


@pytest.fixture
def switched(monkeypatch):
    pages = []
    monkeypatch.setattr(st, "switch_page", pages.append)
    return pages


@pytest.fixture
def client(monkeypatch, browser):
    client = MagicMock()
    client.auth.get_session.return_value = None
    monkeypatch.setattr(navigation, "get_supabase_client", lambda storage=None: client)
    monkeypatch.setattr(navigation, "streamlit_js_eval", lambda js_expressions, key: browser.run_js(js_expressions, key))
    monkeypatch.setattr(navigation, "get_onboarding_completed", lambda user_id: False)
    return client


@pytest.fixture
def signed_in(client):
    user = SimpleNamespace(id="user-1", email="ana@example.com", user_metadata={})
    client.auth.get_session.return_value = SimpleNamespace(user=user)
    return client


@pytest.fixture
def profile_writes(monkeypatch):
    calls = []
    monkeypatch.setattr(profiles, "mark_onboarding_completed", lambda *args: calls.append(("skip", args)))
    monkeypatch.setattr(profiles, "save_onboarding", lambda *args: calls.append(("save", args)))
    return calls


# ─── /auth ───────────────────────────────────────────────────────────────────

def test_sign_up_resets_onboarding_before_creating_the_account(client, switched, monkeypatch):
    order = []
    original = NavigationGate.set_onboarding_completed

    def recording(self, completed):
        order.append(("onboarding", completed))
        original(self, completed)

    def sign_up(credentials):
        order.append(("sign_up", navigation.get_store().get_item("onboardingCompleted")))
        return SimpleNamespace(user=SimpleNamespace(id="user-2"), session=None)

    monkeypatch.setattr(NavigationGate, "set_onboarding_completed", recording)
    client.auth.sign_up.side_effect = sign_up

    at = _page("auth.py").run()
    at.text_input(key="register_full_name").input("Ana Silva")
    at.text_input(key="register_email").input("ana@example.com")
    at.text_input(key="register_password").input("secret123")
    at.text_input(key="confirm_password").input("secret123")
    at.button(key="register_submit").click().run()

    assert not at.exception
    assert order == [("onboarding", False), ("sign_up", "false")]
    assert "Account created" in at.success[0].value
    assert switched == []


def test_sign_up_with_mismatched_passwords_is_blocked(client, switched):
    at = _page("auth.py").run()
    at.text_input(key="register_full_name").input("Ana Silva")
    at.text_input(key="register_email").input("ana@example.com")
    at.text_input(key="register_password").input("secret123")
    at.text_input(key="confirm_password").input("secret124")
    at.button(key="register_submit").click().run()

    assert at.warning[0].value == "Passwords must match."
    client.auth.sign_up.assert_not_called()


# ─── /onboarding ─────────────────────────────────────────────────────────────

def test_skip_marks_the_profile_and_goes_home(signed_in, switched, profile_writes):
    at = _page("onboarding.py").run()
    assert switched == []

    at.button(key="onboarding_skip").click().run()

    assert not at.exception
    assert profile_writes == [("skip", ("user-1", "ana", "ana@example.com"))]
    assert switched == ["pages/home.py"]
    assert at.session_state["browser_storage"].get_item("onboardingCompleted") == "true"


def test_save_with_missing_answers_writes_nothing(signed_in, switched, profile_writes):
    at = _page("onboarding.py").run()
    at.text_input(key="onboarding_job_title").input("Data Engineer")
    at.button(key="onboarding_save").click().run()

    assert at.warning[0].value == "Role, industry and career level are required."
    assert profile_writes == []
    assert switched == []
    assert at.session_state["browser_storage"].get_item("onboardingCompleted") is None


def test_save_stores_answers_and_goes_home(signed_in, switched, profile_writes):
    at = _page("onboarding.py").run()
    at.text_input(key="onboarding_job_title").input("Data Engineer")
    at.selectbox(key="onboarding_industry").select("Technology")
    at.selectbox(key="onboarding_career_level").select("Senior")
    at.multiselect(key="onboarding_skills").select("SQL")
    at.text_input(key="onboarding_custom_skills").input("dbt, SQL")
    at.button(key="onboarding_save").click().run()

    assert not at.exception
    kind, (user_id, answers, full_name, email) = profile_writes[0]
    assert kind == "save"
    assert user_id == "user-1"
    assert answers["industry"] == "Technology"
    assert answers["career_level"] == "Senior"
    assert answers["skills"] == ["SQL", "dbt"]
    assert switched == ["pages/home.py"]


def test_onboarding_without_a_session_links_to_sign_in(client, switched, profile_writes):
    at = _page("onboarding.py").run()

    assert "Sign in" in at.info[0].value
    assert switched == []
    assert profile_writes == []

"""
connectpro/navigation.py
Streamlit wiring for the navigation gate.

Each browser session owns one BrowserStore, one Supabase client and one
NavigationGate, all kept in st.session_state.  Pages call enter_route() at the
top so the gate can redirect before anything renders.
"""

import logging
from collections import deque

import streamlit as st
from streamlit.runtime.scriptrunner import get_script_run_ctx
from streamlit_js_eval import streamlit_js_eval

from connectpro.auth import Session, SupabaseAuth
from connectpro.db import get_supabase_client
from connectpro.gate import AUTH_PATH, HOME_PATH, ONBOARDING_PATH, ROOT_PATH, NavigationGate
from connectpro.profiles import get_onboarding_completed
from connectpro.storage import BrowserStore

logger = logging.getLogger(__name__)

_GATE_KEY   = "navigation_gate"
_AUTH_KEY   = "auth_adapter"
_STORE_KEY  = "browser_storage"
_EVENTS_KEY = "auth_events"
_PATH_KEY   = "current_path"

ROUTE_PAGES = {
    ROOT_PATH:       "app.py",
    AUTH_PATH:       "pages/auth.py",
    ONBOARDING_PATH: "pages/onboarding.py",
    HOME_PATH:       "pages/home.py",
}


# ─── Router ──────────────────────────────────────────────────────────────────

class StreamlitRouter:
    """
    Router collaborator for the gate.

    The current path lives in session state and is set by enter_route().
    st.switch_page keeps no back history, so every navigation is a replace.
    """

    def get_current_path(self) -> str | None:
        return st.session_state.get(_PATH_KEY)

    def navigate(self, path: str, replace: bool = True) -> None:
        page = ROUTE_PAGES[path]
        st.session_state[_PATH_KEY] = path
        st.switch_page(page)


# ─── Auth events ─────────────────────────────────────────────────────────────

def _in_script_thread() -> bool:
    return get_script_run_ctx(suppress_warning=True) is not None


class AuthEventRelay:
    """
    Auth collaborator that holds back events raised off the script thread.

    The Supabase client refreshes tokens from a timer thread, where session
    state and st.switch_page are unavailable.  Those events are queued and
    replayed by drain() at the start of the next script run.
    """

    def __init__(self, auth):
        self._auth = auth
        self._callback = None
        self._queued = deque()

    def get_current_session(self) -> Session | None:
        return self._auth.get_current_session()

    def on_auth_state_change(self, callback):
        self._callback = callback

        def _listener(event, session):
            if _in_script_thread():
                callback(event, session)
            else:
                self._queued.append((event, session))

        return self._auth.on_auth_state_change(_listener)

    @property
    def queued(self) -> int:
        return len(self._queued)

    def drain(self) -> None:
        while self._queued:
            event, session = self._queued.popleft()
            self._callback(event, session)


class _UnreachableAuth:
    """Stand-in provider used when no Supabase client could be created."""

    def get_current_session(self):
        raise ConnectionError("Authentication service is not configured.")

    def on_auth_state_change(self, callback):
        return _NoSubscription()


class _NoSubscription:
    def unsubscribe(self) -> None:
        return None


# ─── Per-session singletons ──────────────────────────────────────────────────

def _run_js(expression: str, key: str):
    return streamlit_js_eval(js_expressions=expression, key=key)


def get_store() -> BrowserStore:
    """Return this browser session's localStorage mirror."""
    store = st.session_state.get(_STORE_KEY)
    if store is None:
        store = BrowserStore(_run_js)
        st.session_state[_STORE_KEY] = store
    return store


def get_auth() -> SupabaseAuth:
    """Return this browser session's auth adapter, creating it on first use."""
    auth = st.session_state.get(_AUTH_KEY)
    if auth is None:
        auth = SupabaseAuth(get_supabase_client(storage=get_store()))
        st.session_state[_AUTH_KEY] = auth
    return auth


def get_gate() -> NavigationGate:
    """
    Return this browser session's gate, creating and starting it on first use.

    The gate is only built once the browser has sent its localStorage, so the
    saved flags and auth session are there to restore; until then the run
    stops here and the page stays blank.  If the Supabase client cannot even
    be built, the gate runs with no provider and the user is treated as
    signed out.
    """
    gate = st.session_state.get(_GATE_KEY)
    if gate is not None:
        return gate

    store = get_store()
    if not store.load():
        st.stop()

    try:
        auth = get_auth()
    except Exception:
        logger.warning("Supabase client unavailable", exc_info=True)
        auth = _UnreachableAuth()

    relay = AuthEventRelay(auth)
    gate = NavigationGate(
        auth=relay,
        router=StreamlitRouter(),
        store=store,
        onboarding_lookup=get_onboarding_completed,
    )
    st.session_state[_EVENTS_KEY] = relay
    st.session_state[_GATE_KEY] = gate
    gate.start()
    return gate


# ─── Page guard ──────────────────────────────────────────────────────────────

def enter_route(path: str) -> NavigationGate:
    """
    Declare the route of the page being rendered and apply the gate.

    Call at the very top of every page.  Replays auth events that arrived
    between runs, then evaluates; if the user may not be here, Streamlit
    switches page and nothing below the call runs.  Otherwise pending
    storage writes are sent to the browser.
    """
    st.session_state[_PATH_KEY] = path
    gate = get_gate()
    relay = st.session_state.get(_EVENTS_KEY)
    if relay is not None:
        relay.drain()
    gate.evaluate()
    get_store().flush()
    return gate


def get_current_session() -> Session | None:
    gate = st.session_state.get(_GATE_KEY)
    return gate.session if gate is not None else None


def get_current_user_id() -> str | None:
    session = get_current_session()
    return session.user_id if session is not None else None


# ─── Session teardown ────────────────────────────────────────────────────────

def logout() -> None:
    """
    Sign the current user out and send them to /auth.

    A provider failure is logged and the local session is cleared anyway.
    The provider's SIGNED_OUT event normally drives the redirect; the explicit
    handle_auth_event call covers the case where it never arrives.
    """
    gate = get_gate()
    try:
        get_auth().sign_out()
    except Exception:
        logger.warning("Sign-out call failed; clearing local session", exc_info=True)
    gate.handle_auth_event("SIGNED_OUT", None)

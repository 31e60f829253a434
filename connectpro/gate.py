"""
connectpro/gate.py
Session / onboarding navigation gate for ConnectionPro.

Decides, for the route the user is on, whether they must be sent elsewhere:
  - signed-out users are kept on /auth
  - signed-in users who have not finished onboarding are kept on /onboarding
  - signed-in, onboarded users are kept off /, /auth and /onboarding

Entry points:
  resolve_redirect(path, is_logged_in, onboarding_completed) -> str | None
    Pure decision table.
  NavigationGate
    Owns the login / onboarding state, listens to the auth provider, mirrors
    the flags into local storage and redirects through the router.

Nothing here imports Streamlit; the collaborators are injected.
"""

import logging
from typing import Callable

from connectpro.auth import Session
from connectpro.storage import LOGGED_IN_KEY, ONBOARDING_KEY, LocalStore

logger = logging.getLogger(__name__)


# ─── Routes ──────────────────────────────────────────────────────────────────

ROOT_PATH       = "/"
AUTH_PATH       = "/auth"
ONBOARDING_PATH = "/onboarding"
HOME_PATH       = "/home"

# Matched by prefix, so /homepage and /jobs/42 are protected too.
PROTECTED_PREFIXES = (
    "/home",
    "/feed",
    "/connections",
    "/jobs",
    "/profile",
    "/settings",
)


def is_protected(path: str) -> bool:
    """Return True if path falls under one of the protected prefixes."""
    return path.startswith(PROTECTED_PREFIXES)


def resolve_redirect(path: str, is_logged_in: bool, onboarding_completed: bool) -> str | None:
    """
    Return the path the user must be sent to, or None to stay on path.

    onboarding_completed is ignored while signed out.  Every target returned
    here maps to None when fed back in with the same flags, so evaluating the
    table repeatedly never oscillates.
    """
    if path == ROOT_PATH:
        if not is_logged_in:
            return AUTH_PATH
        return HOME_PATH if onboarding_completed else ONBOARDING_PATH

    if path == AUTH_PATH:
        if not is_logged_in:
            return None
        return HOME_PATH if onboarding_completed else ONBOARDING_PATH

    if is_protected(path):
        if not is_logged_in:
            return AUTH_PATH
        if not onboarding_completed:
            return ONBOARDING_PATH
        return None

    if path == ONBOARDING_PATH and is_logged_in and onboarding_completed:
        return HOME_PATH

    return None


# ─── Gate ────────────────────────────────────────────────────────────────────

class NavigationGate:
    """
    Single owner of the login and onboarding flags.

    Collaborators:
      auth   : get_current_session() -> Session | None and
               on_auth_state_change(callback) -> subscription with .unsubscribe()
      router : navigate(path, replace=True) and get_current_path() -> str | None
      store  : LocalStore holding the "isLoggedIn" / "onboardingCompleted" strings
      onboarding_lookup: optional user_id -> bool, consulted when a user signs
        in while the local onboarding flag is false

    The table is evaluated after every change of login state, onboarding state
    or (via evaluate()) path, and skipped while the initial session check is
    still loading.
    """

    def __init__(
        self,
        auth,
        router,
        store: LocalStore,
        onboarding_lookup: Callable[[str], bool] | None = None,
    ):
        self._auth = auth
        self._router = router
        self._store = store
        self._onboarding_lookup = onboarding_lookup
        self._subscription = None

        self.loading = True
        self.session: Session | None = None
        self.is_logged_in = store.get_flag(LOGGED_IN_KEY)
        self.onboarding_completed = store.get_flag(ONBOARDING_KEY)

    # ─── Lifecycle ──────────────────────────────────────────────────────────

    def start(self) -> None:
        """
        Subscribe to auth events, then resolve the initial session.

        If the provider cannot be reached the failure is logged and the user is
        treated as signed out, which routes them to /auth.
        """
        if self._subscription is None:
            self._subscription = self._auth.on_auth_state_change(self.handle_auth_event)

        try:
            session = self._auth.get_current_session()
        except Exception:
            logger.warning("Initial session check failed; treating user as signed out", exc_info=True)
            session = None
        self._apply_session(session)

    def stop(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    @property
    def subscribed(self) -> bool:
        return self._subscription is not None

    # ─── Inputs ─────────────────────────────────────────────────────────────

    def handle_auth_event(self, event: str, session: Session | None) -> None:
        """Auth-stream callback: mirror the session, then re-evaluate."""
        logger.debug("Auth event %s (signed in: %s)", event, session is not None)
        self._apply_session(session)

    def set_onboarding_completed(self, completed: bool) -> None:
        self._store.set_flag(ONBOARDING_KEY, completed)
        self.onboarding_completed = bool(completed)
        self.evaluate()

    def _apply_session(self, session: Session | None) -> None:
        logged_in = session is not None and session.authenticated
        self.session = session if logged_in else None
        self.is_logged_in = logged_in
        self._store.set_flag(LOGGED_IN_KEY, logged_in)

        if not logged_in:
            # Never carry a previous user's onboarding state into a new session.
            self._store.set_flag(ONBOARDING_KEY, False)
            self.onboarding_completed = False
        elif not self.onboarding_completed:
            self._hydrate_onboarding(session.user_id)

        self.loading = False
        self.evaluate()

    def _hydrate_onboarding(self, user_id: str) -> None:
        if self._onboarding_lookup is None or user_id is None:
            return
        try:
            completed = bool(self._onboarding_lookup(user_id))
        except Exception:
            logger.warning("Onboarding lookup failed for user %s", user_id, exc_info=True)
            return
        if completed:
            self._store.set_flag(ONBOARDING_KEY, True)
            self.onboarding_completed = True

    # ─── Evaluation ─────────────────────────────────────────────────────────

    def target_for(self, path: str | None) -> str | None:
        """Return the redirect target for path under the current flags."""
        if self.loading or path is None:
            return None
        return resolve_redirect(path, self.is_logged_in, self.onboarding_completed)

    def evaluate(self) -> str | None:
        """
        Apply the table to the router's current path.

        Returns the path redirected to, or None when the user may stay.
        Redirects always replace the current history entry.
        """
        path = self._router.get_current_path()
        target = self.target_for(path)
        if target is None:
            return None
        logger.info("Redirecting %s -> %s", path, target)
        self._router.navigate(target, replace=True)
        return target

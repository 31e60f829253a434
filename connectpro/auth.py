"""
connectpro/auth.py
Supabase Auth adapter for ConnectionPro.
Wraps the provider so the rest of the app never calls client.auth directly,
and converts provider sessions into the app's Session model.
"""

import logging
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """Read-only copy of the provider's authenticated-user context."""

    user_id: str | None
    authenticated: bool = True
    email: str | None = None

    @classmethod
    def from_supabase(cls, raw) -> "Session | None":
        """
        Convert a Supabase session (or anything with a .user) to a Session.

        Returns None when there is no session or it carries no user, which the
        rest of the app treats as signed out.
        """
        user = getattr(raw, "user", None) if raw is not None else None
        user_id = getattr(user, "id", None) if user is not None else None
        if user_id is None:
            return None
        return cls(user_id=str(user_id), authenticated=True, email=getattr(user, "email", None))


class AuthError(Exception):
    """Raised when the provider rejects a credential operation."""


class SupabaseAuth:
    """
    Authentication collaborator backed by a Supabase client.

    get_current_session() and on_auth_state_change() are what the navigation
    gate consumes; the credential methods are used by the sign-in page.
    """

    def __init__(self, client):
        self._client = client

    # ─── Gate contract ──────────────────────────────────────────────────────

    def get_current_session(self) -> Session | None:
        return Session.from_supabase(self._client.auth.get_session())

    def on_auth_state_change(self, callback: Callable[[str, Session | None], None]):
        """
        Register callback(event, session) for provider auth events.

        Returns the provider's subscription handle; call .unsubscribe() on it
        to stop receiving events.
        """
        # May be called from the client's token-refresh thread.
        def _listener(event, raw_session):
            callback(str(getattr(event, "value", event)), Session.from_supabase(raw_session))

        return self._client.auth.on_auth_state_change(_listener)

    # ─── Credentials ────────────────────────────────────────────────────────

    def sign_in(self, email: str, password: str) -> Session:
        response = self._client.auth.sign_in_with_password(
            {"email": email, "password": password}
        )
        session = Session.from_supabase(getattr(response, "session", None))
        if session is None:
            raise AuthError("Invalid email or password.")
        return session

    def sign_up(self, email: str, password: str, full_name: str) -> Session | None:
        """
        Create an account with full_name stored in the user metadata.

        Returns the new Session, or None when the project requires email
        confirmation before the first sign-in.
        """
        response = self._client.auth.sign_up(
            {
                "email": email,
                "password": password,
                "options": {"data": {"full_name": full_name}},
            }
        )
        if response is None or getattr(response, "user", None) is None:
            raise AuthError("Could not create account.")
        return Session.from_supabase(getattr(response, "session", None))

    def sign_out(self) -> None:
        self._client.auth.sign_out()

    def reset_password(self, email: str, redirect_to: str) -> None:
        self._client.auth.reset_password_for_email(email, {"redirect_to": redirect_to})

    def get_user_metadata(self) -> dict:
        """Return the signed-in user's metadata dict, or {} when signed out."""
        raw = self._client.auth.get_session()
        user = getattr(raw, "user", None) if raw is not None else None
        return dict(getattr(user, "user_metadata", None) or {})

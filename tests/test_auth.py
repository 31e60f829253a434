from enum import Enum
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from connectpro.auth import AuthError, Session, SupabaseAuth


class AuthChangeEvent(Enum):
    SIGNED_IN = "SIGNED_IN"


def _raw_session(user_id="user-1", email="ana@example.com", metadata=None):
    user = SimpleNamespace(id=user_id, email=email, user_metadata=metadata or {})
    return SimpleNamespace(user=user, access_token="token")


@pytest.fixture
def client():
    client = MagicMock()
    client.auth.get_session.return_value = None
    return client


def test_session_from_provider_session():
    session = Session.from_supabase(_raw_session())
    assert session == Session(user_id="user-1", authenticated=True, email="ana@example.com")


def test_session_without_user_is_none():
    assert Session.from_supabase(None) is None
    assert Session.from_supabase(SimpleNamespace(user=None)) is None


def test_get_current_session(client):
    auth = SupabaseAuth(client)
    assert auth.get_current_session() is None

    client.auth.get_session.return_value = _raw_session()
    assert auth.get_current_session().user_id == "user-1"


def test_listener_receives_converted_events(client):
    subscription = MagicMock()
    client.auth.on_auth_state_change.return_value = subscription
    received = []

    handle = SupabaseAuth(client).on_auth_state_change(lambda event, session: received.append((event, session)))
    listener = client.auth.on_auth_state_change.call_args.args[0]
    listener(AuthChangeEvent.SIGNED_IN, _raw_session())
    listener("SIGNED_OUT", None)

    assert handle is subscription
    assert received == [
        ("SIGNED_IN", Session(user_id="user-1", email="ana@example.com")),
        ("SIGNED_OUT", None),
    ]


def test_sign_in_returns_session(client):
    client.auth.sign_in_with_password.return_value = SimpleNamespace(
        user=_raw_session().user, session=_raw_session()
    )
    session = SupabaseAuth(client).sign_in("ana@example.com", "secret123")
    client.auth.sign_in_with_password.assert_called_once_with(
        {"email": "ana@example.com", "password": "secret123"}
    )
    assert session.user_id == "user-1"


def test_sign_in_without_session_raises(client):
    client.auth.sign_in_with_password.return_value = SimpleNamespace(user=None, session=None)
    with pytest.raises(AuthError):
        SupabaseAuth(client).sign_in("ana@example.com", "wrong")


def test_sign_up_stores_full_name(client):
    client.auth.sign_up.return_value = SimpleNamespace(user=_raw_session().user, session=None)
    assert SupabaseAuth(client).sign_up("ana@example.com", "secret123", "Ana Silva") is None
    client.auth.sign_up.assert_called_once_with(
        {
            "email": "ana@example.com",
            "password": "secret123",
            "options": {"data": {"full_name": "Ana Silva"}},
        }
    )


def test_sign_up_without_user_raises(client):
    client.auth.sign_up.return_value = SimpleNamespace(user=None, session=None)
    with pytest.raises(AuthError):
        SupabaseAuth(client).sign_up("ana@example.com", "secret123", "Ana Silva")


def test_sign_out_and_reset_password(client):
    auth = SupabaseAuth(client)
    auth.sign_out()
    auth.reset_password("ana@example.com", redirect_to="http://localhost:8501/auth")
    client.auth.sign_out.assert_called_once_with()
    client.auth.reset_password_for_email.assert_called_once_with(
        "ana@example.com", {"redirect_to": "http://localhost:8501/auth"}
    )


def test_user_metadata(client):
    auth = SupabaseAuth(client)
    assert auth.get_user_metadata() == {}
    client.auth.get_session.return_value = _raw_session(metadata={"full_name": "Ana Silva"})
    assert auth.get_user_metadata() == {"full_name": "Ana Silva"}

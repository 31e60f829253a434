import json

import pytest

from connectpro.auth import Session
from connectpro.gate import NavigationGate
from connectpro.storage import LocalStore


class FakeSubscription:
    def __init__(self):
        self.unsubscribed = False

    def unsubscribe(self):
        self.unsubscribed = True


class FakeAuth:
    """Auth collaborator with a settable current session and a manual event feed."""

    def __init__(self, session=None, error=None):
        self.session = session
        self.error = error
        self.callbacks = []
        self.subscriptions = []

    def get_current_session(self):
        if self.error is not None:
            raise self.error
        return self.session

    def on_auth_state_change(self, callback):
        self.callbacks.append(callback)
        subscription = FakeSubscription()
        self.subscriptions.append(subscription)
        return subscription

    def emit(self, event, session):
        for callback in list(self.callbacks):
            callback(event, session)


class FakeBrowser:
    """Stands in for window.localStorage behind the JavaScript component."""

    def __init__(self, local=None, ready=True, ack=True):
        self.local = dict(local or {})
        self.ready = ready
        self.ack = ack
        self.keys = []

    def run_js(self, expression, key):
        self.keys.append(key)
        if not self.ready:
            return None
        if expression.startswith("JSON.stringify"):
            return json.dumps(self.local)
        if not self.ack:
            return None
        first_line = expression.split(";", 1)[0]
        changes = json.loads(first_line[len("const changes = "):])
        for name, value in changes.items():
            if value is None:
                self.local.pop(name, None)
            else:
                self.local[name] = value
        return "ok"


class FakeRouter:
    def __init__(self, path=None):
        self.path = path
        self.navigations = []

    def get_current_path(self):
        return self.path

    def navigate(self, path, replace=True):
        self.navigations.append((path, replace))
        self.path = path


@pytest.fixture
def user_session():
    return Session(user_id="user-1", authenticated=True, email="ana@example.com")


@pytest.fixture
def browser():
    return FakeBrowser()


@pytest.fixture
def store():
    return LocalStore()


@pytest.fixture
def make_gate(store):
    def _make(path=None, session=None, error=None, lookup=None):
        auth = FakeAuth(session=session, error=error)
        router = FakeRouter(path)
        gate = NavigationGate(auth=auth, router=router, store=store, onboarding_lookup=lookup)
        return gate, auth, router

    return _make

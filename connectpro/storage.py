"""
connectpro/storage.py
Local key/value storage for the navigation flags and the Supabase session.

Values are strings, as in browser localStorage.  Booleans are written as
"true" / "false" and read back as True only for the exact string "true".
"""

import json
import logging
import threading
from collections.abc import MutableMapping
from typing import Callable

logger = logging.getLogger(__name__)

LOGGED_IN_KEY  = "isLoggedIn"
ONBOARDING_KEY = "onboardingCompleted"

_LOAD_SCRIPT = "JSON.stringify(Object.assign({}, window.localStorage))"

_APPLY_SCRIPT = """
for (const [name, value] of Object.entries(changes)) {
  if (value === null) {
    window.localStorage.removeItem(name);
  } else {
    window.localStorage.setItem(name, value);
  }
}
"ok"
"""


class LocalStore:
    """
    String key/value store backed by any mutable mapping.

    get_item / set_item / remove_item is also the storage interface the
    Supabase auth client expects, so a store can hold the auth session too.
    """

    def __init__(self, backing: MutableMapping | None = None):
        self._data = backing if backing is not None else {}

    def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def get_flag(self, key: str) -> bool:
        return self.get_item(key) == "true"

    def set_flag(self, key: str, value: bool) -> None:
        self.set_item(key, "true" if value else "false")


def write_script(changes: dict) -> str:
    """JavaScript applying changes (name -> value, None to remove) to localStorage."""
    return "const changes = " + json.dumps(changes) + ";" + _APPLY_SCRIPT


class BrowserStore(LocalStore):
    """
    LocalStore mirrored to the browser's window.localStorage.

    run_js(expression, key) evaluates JavaScript in the browser through a
    Streamlit component and returns the result, or None until the browser has
    answered (the answer arrives with the next rerun).

    Reads are served from an in-memory copy filled by load().  Writes land in
    the copy immediately and reach the browser in batches on flush(); a batch
    is re-sent under the same component key until the browser acknowledges it.
    Auth-client token refreshes write from a background thread, hence the lock.
    """

    _LOAD_KEY = "connectpro_storage_load"

    def __init__(self, run_js: Callable[[str, str], object]):
        super().__init__({})
        self._run_js = run_js
        self._lock = threading.Lock()
        self._pending: dict[str, str | None] = {}
        self._inflight: dict[str, str | None] = {}
        self._batch = 0
        self.loaded = False

    # ─── Reading the browser ────────────────────────────────────────────────

    def load(self) -> bool:
        """
        Copy the browser's localStorage into memory.

        Returns False while the browser has not answered yet.  Keys written
        before the load finished keep their newer in-memory value.
        """
        if self.loaded:
            return True

        raw = self._run_js(_LOAD_SCRIPT, self._LOAD_KEY)
        if raw is None:
            return False

        try:
            stored = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Unreadable localStorage payload; starting empty")
            stored = {}
        if not isinstance(stored, dict):
            stored = {}

        with self._lock:
            for key, value in stored.items():
                if key not in self._pending and key not in self._data:
                    self._data[key] = str(value)
            self.loaded = True
        return True

    # ─── Writing ────────────────────────────────────────────────────────────

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = str(value)
            self._pending[key] = str(value)

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)
            self._pending[key] = None

    @property
    def dirty(self) -> bool:
        return bool(self._pending or self._inflight)

    def flush(self) -> None:
        """Send unsaved writes to the browser (call once per script run)."""
        with self._lock:
            if not self._inflight and self._pending:
                self._inflight, self._pending = self._pending, {}
                self._batch += 1
            changes = dict(self._inflight)
            batch = self._batch

        if not changes:
            return

        ack = self._run_js(write_script(changes), f"connectpro_storage_write_{batch}")
        if ack is not None:
            with self._lock:
                self._inflight = {}

"""In-memory store for the last known desk state and connectivity status.

The bus mirror is the only writer of the desk state; the night-mode policy and
the HTTP gateway only read. Each field sits behind its own lock and is always
replaced as a whole, so readers never observe a partial update. No history is
kept and nothing is pushed to readers; they poll on their own schedule.
"""

from __future__ import annotations

import threading

from .models import INITIAL_STATUS, DeskState


class DeskStateStore:
    def __init__(self, state: DeskState | None = None, status: str = INITIAL_STATUS) -> None:
        self._state = state or DeskState.unknown()
        self._status = status
        self._state_lock = threading.Lock()
        self._status_lock = threading.Lock()

    def read(self) -> tuple[DeskState, str]:
        """Return the current state and status.

        The two fields are read under separate locks; no caller needs them to
        be consistent with each other.
        """
        return self.read_state(), self.read_status()

    def read_state(self) -> DeskState:
        with self._state_lock:
            return self._state

    def read_status(self) -> str:
        with self._status_lock:
            return self._status

    def write_state(self, state: DeskState) -> bool:
        """Replace the desk state. Returns True when the stored value changed."""
        with self._state_lock:
            changed = state != self._state
            self._state = state
        return changed

    def write_status(self, status: str) -> bool:
        """Replace the status string. Returns True when the stored value changed."""
        with self._status_lock:
            changed = status != self._status
            self._status = status
        return changed

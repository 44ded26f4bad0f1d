"""Lock-guarded connection status cell shared by a session and the renderer."""

from __future__ import annotations

import threading

from tailgrid_core.models import ConnectionStatus


class StatusCell:
    """Holds one ``ConnectionStatus``; ``Error`` is terminal."""

    def __init__(self, initial: ConnectionStatus | None = None):
        self._status = initial or ConnectionStatus.connecting()
        self._lock = threading.Lock()

    def get(self) -> ConnectionStatus:
        with self._lock:
            return self._status

    def set(self, status: ConnectionStatus) -> bool:
        """Store ``status`` unless the cell already holds an error."""
        with self._lock:
            if self._status.is_error:
                return False
            self._status = status
            return True

"""Per-source ingestion loop: connect, authenticate, tail and buffer lines."""

from __future__ import annotations

import functools
import logging
import shlex
import threading
from typing import Callable

from tailgrid_core.errors import NoAuthMethodError, SourceError
from tailgrid_core.formatting import decode_line
from tailgrid_core.history import HistoryBuffer
from tailgrid_core.models import ConnectionStatus, Source
from tailgrid_core.status import StatusCell
from tailgrid_core.transport import DEFAULT_READ_TIMEOUT, SSHTransport, Transport
from tailgrid_core.viewport import ViewportState

logger = logging.getLogger(__name__)

STOP_JOIN_TIMEOUT = 1.0


def tail_command(source: Source) -> str:
    return f"tail -n {int(source.tail_lines)} -f {shlex.quote(source.log_path)}"


class SourceSession:
    """Owns the ingestion thread of one source.

    The session is the only writer of its history buffer and status cell.
    Every failure ends the loop with a terminal ``Error`` status; there is no
    reconnection.
    """

    def __init__(
        self,
        source: Source,
        history: HistoryBuffer,
        status: StatusCell,
        viewport: ViewportState,
        transport_factory: Callable[[], Transport] | None = None,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
    ):
        self.source = source
        self.history = history
        self.status = status
        self.viewport = viewport
        self._transport_factory = transport_factory or functools.partial(
            SSHTransport, read_timeout=read_timeout
        )
        self._transport: Transport | None = None
        self._transport_lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def command(self) -> str:
        return tail_command(self.source)

    def start(self) -> threading.Thread:
        if self._thread is None:
            self._thread = threading.Thread(
                target=self.run, name=f"tail-{self.source.name}", daemon=True
            )
            self._thread.start()
        return self._thread

    def run(self) -> None:
        self.status.set(ConnectionStatus.connecting())
        try:
            self._ingest()
        except SourceError as exc:
            if self._stop.is_set():
                logger.info("source %s stopped: %s", self.source.name, exc)
                return
            message = exc.status_message(self.source.host)
            logger.warning("source %s failed: %s", self.source.name, message)
            self.status.set(ConnectionStatus.error(message))
        finally:
            self._close_transport()

    def _ingest(self) -> None:
        source = self.source
        if not source.has_credential():
            raise NoAuthMethodError()

        transport = self._transport_factory()
        with self._transport_lock:
            self._transport = transport
        if self._stop.is_set():
            return

        logger.info("connecting to %s:%s for %s", source.host, source.port, source.name)
        transport.connect(source.host, source.port)
        transport.handshake()
        transport.authenticate(source.username or "", source.password, source.key_path)
        lines = transport.exec(self.command)
        self.status.set(ConnectionStatus.connected())
        logger.info("tailing %s on %s", source.log_path, source.name)

        for raw in lines:
            if self._stop.is_set():
                return
            self.push(decode_line(raw))
        logger.info("stream for %s ended", source.name)

    def push(self, line: str) -> None:
        length = self.history.push(line)
        # A full buffer evicted a line for this one; the tail did not grow.
        self.viewport.follow_tail(1 if length < self.history.max_history else 0)

    def stop(self, timeout: float = STOP_JOIN_TIMEOUT) -> None:
        """Signal the loop to finish and unblock any pending read."""
        self._stop.set()
        self._close_transport()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    def _close_transport(self) -> None:
        with self._transport_lock:
            transport, self._transport = self._transport, None
        if transport is not None:
            transport.close()

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

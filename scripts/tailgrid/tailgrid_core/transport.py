"""Remote line-stream transport: the collaborator a session tails through.

A transport goes through four steps, each raising its own ``SourceError``
subclass: ``connect`` opens the byte stream, ``handshake`` negotiates the
secure channel, ``authenticate`` logs in, ``exec`` runs the remote command
and returns an iterator of raw lines that ends at end-of-stream.
"""

from __future__ import annotations

import logging
import socket
import threading
from typing import Iterator, Protocol

import paramiko
from paramiko.pkey import UnknownKeyType

from tailgrid_core.errors import (
    AuthError,
    ConnectError,
    ExecError,
    HandshakeError,
    NoAuthMethodError,
    ReadError,
)

logger = logging.getLogger(__name__)

DEFAULT_CONNECT_TIMEOUT = 10.0
DEFAULT_READ_TIMEOUT = 30.0


class Transport(Protocol):
    def connect(self, host: str, port: int) -> None: ...

    def handshake(self) -> None: ...

    def authenticate(
        self, username: str, password: str | None = None, key_path: str | None = None
    ) -> None: ...

    def exec(self, command: str) -> Iterator[bytes]: ...

    def close(self) -> None: ...


def _reason(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


class SSHTransport:
    """SSH implementation on top of ``paramiko.Transport``."""

    def __init__(
        self,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
    ):
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout
        self._sock: socket.socket | None = None
        self._transport: paramiko.Transport | None = None
        self._channel: paramiko.Channel | None = None
        self._lock = threading.Lock()

    def connect(self, host: str, port: int) -> None:
        try:
            self._sock = socket.create_connection((host, port), timeout=self.connect_timeout)
        except OSError as exc:
            raise ConnectError(_reason(exc)) from exc

    def handshake(self) -> None:
        if self._sock is None:
            raise HandshakeError("not connected")
        try:
            self._transport = paramiko.Transport(self._sock)
            self._transport.start_client(timeout=self.connect_timeout)
        except (paramiko.SSHException, OSError, EOFError) as exc:
            raise HandshakeError(_reason(exc)) from exc
        remote_key = self._transport.get_remote_server_key()
        logger.debug("server key %s %s", remote_key.get_name(), remote_key.fingerprint)

    def authenticate(
        self, username: str, password: str | None = None, key_path: str | None = None
    ) -> None:
        if not password and not key_path:
            raise NoAuthMethodError()
        if self._transport is None:
            raise AuthError("no transport")
        try:
            if password:
                self._transport.auth_password(username, password)
            else:
                key = paramiko.PKey.from_path(key_path)
                self._transport.auth_publickey(username, key)
        except (paramiko.SSHException, UnknownKeyType, OSError, ValueError) as exc:
            raise AuthError(_reason(exc)) from exc
        if not self._transport.is_authenticated():
            raise AuthError("authentication rejected")

    def exec(self, command: str) -> Iterator[bytes]:
        if self._transport is None:
            raise ExecError("no transport")
        try:
            channel = self._transport.open_session(timeout=self.connect_timeout)
            channel.settimeout(self.read_timeout)
            channel.exec_command(command)
        except (paramiko.SSHException, OSError) as exc:
            raise ExecError(_reason(exc)) from exc
        self._channel = channel
        return self._iter_lines(channel.makefile("rb"))

    def _iter_lines(self, stream) -> Iterator[bytes]:
        while True:
            try:
                line = stream.readline()
            except (paramiko.SSHException, OSError) as exc:
                raise ReadError(_reason(exc)) from exc
            if not line:
                return
            yield line

    def close(self) -> None:
        with self._lock:
            channel, transport, sock = self._channel, self._transport, self._sock
            self._channel = self._transport = self._sock = None
        if channel is not None:
            channel.close()
        if transport is not None:
            transport.close()
        elif sock is not None:
            sock.close()

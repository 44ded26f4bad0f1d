"""Error taxonomy for configuration and per-source failures."""

from __future__ import annotations


class TailgridError(Exception):
    """Base class for every error raised by tailgrid."""


class ConfigError(TailgridError, ValueError):
    """Missing or malformed configuration; fatal before any pane exists."""


class SourceError(TailgridError):
    """A failure contained to one source's ingestion loop.

    ``stage`` prefixes the status message shown in the pane.
    """

    stage = "source"

    def status_message(self, host: str = "") -> str:
        return f"{self.stage}: {self}"


class ConnectError(SourceError):
    stage = "connect"


class HandshakeError(SourceError):
    stage = "handshake"


class AuthError(SourceError):
    stage = "auth"


class NoAuthMethodError(AuthError):
    def __init__(self, message: str = "No authentication method provided") -> None:
        super().__init__(message)

    def status_message(self, host: str = "") -> str:
        return str(self)


class ExecError(SourceError):
    stage = "exec"


class ReadError(SourceError):
    stage = "read"

    def status_message(self, host: str = "") -> str:
        if host:
            return f"read ({host}): {self}"
        return f"read: {self}"

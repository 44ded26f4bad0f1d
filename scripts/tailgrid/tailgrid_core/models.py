"""Shared model contracts for sources, connection state and draw items."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

DEFAULT_MAX_HISTORY = 10000
DEFAULT_TAIL_LINES = 100

# A styled run of text; style is a rich style string, "" for unstyled.
Segment = tuple[str, str]


@dataclass(frozen=True)
class Source:
    name: str
    host: str
    port: int
    log_path: str
    username: str | None = None
    password: str | None = None
    key_path: str | None = None
    max_history: int = DEFAULT_MAX_HISTORY
    tail_lines: int = DEFAULT_TAIL_LINES

    def has_credential(self) -> bool:
        return bool(self.password) or bool(self.key_path)

    def to_dict(self) -> dict[str, Any]:
        # Credentials stay out of anything that may be printed or logged.
        return {
            "name": self.name,
            "host": self.host,
            "port": self.port,
            "log_path": self.log_path,
            "username": self.username,
            "auth": "password" if self.password else ("key" if self.key_path else "none"),
            "max_history": self.max_history,
            "tail_lines": self.tail_lines,
        }


class ConnectionState(str, Enum):
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


@dataclass(frozen=True)
class ConnectionStatus:
    state: ConnectionState = ConnectionState.CONNECTING
    message: str = ""

    @classmethod
    def connecting(cls) -> "ConnectionStatus":
        return cls(ConnectionState.CONNECTING)

    @classmethod
    def connected(cls) -> "ConnectionStatus":
        return cls(ConnectionState.CONNECTED)

    @classmethod
    def error(cls, message: str) -> "ConnectionStatus":
        return cls(ConnectionState.ERROR, message)

    @property
    def is_error(self) -> bool:
        return self.state is ConnectionState.ERROR


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def area(self) -> int:
        return max(0, self.width) * max(0, self.height)

    @property
    def inner_width(self) -> int:
        return max(0, self.width - 2)

    @property
    def inner_height(self) -> int:
        return max(0, self.height - 2)


@dataclass
class PaneFrame:
    """One draw item handed to the terminal renderer for a single frame."""

    rect: Rect
    title: str
    lines: list[list[Segment]] = field(default_factory=list)
    border_style: str = "white"

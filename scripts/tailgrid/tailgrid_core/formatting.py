"""Text helpers applied to raw remote lines and pane titles."""

from __future__ import annotations

import re

from tailgrid_core.models import ConnectionState, ConnectionStatus

TAB_WIDTH = 4

# Remote tails may carry colour codes from the producing program.
_ANSI_ESCAPE_RE = re.compile(r"""
    \x1b\[[\?0-9;:]*[ -/]*[@-~]        | # CSI sequences
    \x1b\][^\x07\x1b]*(?:\x07|\x1b\\)  | # OSC sequences (BEL or ST terminated)
    \x1b\([A-Za-z0-9]                  | # Character set selection
    \x1b[>=78DEHMc]                    | # Single-char escape commands
    [\x00-\x08\x0b-\x1f\x7f]             # Remaining C0 controls and DEL
""", re.VERBOSE)

STATUS_SUFFIX = {
    ConnectionState.CONNECTING: " [connecting]",
    ConnectionState.CONNECTED: "",
    ConnectionState.ERROR: " [error]",
}


def trim_line_ending(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith("\n") or line.endswith("\r"):
        return line[:-1]
    return line


def sanitize_line(line: str) -> str:
    line = line.replace("\t", " " * TAB_WIDTH)
    return _ANSI_ESCAPE_RE.sub("", line)


def decode_line(raw: bytes | str) -> str:
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    return sanitize_line(trim_line_ending(raw))


def pane_title(name: str, scroll_position: int, status: ConnectionStatus) -> str:
    return f"{name} (Scroll: {scroll_position}){STATUS_SUFFIX[status.state]}"

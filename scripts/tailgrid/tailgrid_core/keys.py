"""Single-key terminal input with a poll timeout."""

from __future__ import annotations

import os
import select
import sys
import time

try:
    import termios
    import tty
except ImportError:  # pragma: no cover - non-POSIX
    termios = None
    tty = None

ESCAPE_SEQUENCE_WAIT = 0.05

ESCAPE_KEYS = {
    b"[A": "up",
    b"[B": "down",
    b"[C": "right",
    b"[D": "left",
    b"OA": "up",
    b"OB": "down",
    b"OC": "right",
    b"OD": "left",
    b"[5~": "pageup",
    b"[6~": "pagedown",
    b"[H": "home",
    b"[1~": "home",
    b"[7~": "home",
    b"OH": "home",
    b"[F": "end",
    b"[4~": "end",
    b"[8~": "end",
    b"OF": "end",
}

PLAIN_KEYS = {
    b"\r": "enter",
    b"\n": "enter",
    b"\x03": "ctrl-c",
}


def decode_key(raw: bytes) -> str | None:
    """Map the bytes of one key press to a key name."""
    if not raw:
        return None
    if raw in PLAIN_KEYS:
        return PLAIN_KEYS[raw]
    if raw.startswith(b"\x1b"):
        if len(raw) == 1:
            return "escape"
        return ESCAPE_KEYS.get(raw[1:])
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return None


class KeyPoller:
    """Puts stdin in cbreak mode for the lifetime of the context."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdin
        self.enabled = termios is not None and self.stream.isatty()
        self.fd: int | None = None
        self._old = None

    def __enter__(self) -> "KeyPoller":
        if self.enabled:
            self.fd = self.stream.fileno()
            self._old = termios.tcgetattr(self.fd)
            tty.setcbreak(self.fd)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.enabled and self.fd is not None and self._old is not None:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._old)

    def poll(self, timeout: float) -> str | None:
        """Wait up to ``timeout`` seconds for a key; None when nothing arrived."""
        if not self.enabled or self.fd is None:
            time.sleep(timeout)
            return None
        ready, _, _ = select.select([self.fd], [], [], timeout)
        if not ready:
            return None
        raw = os.read(self.fd, 1)
        if raw == b"\x1b":
            raw += self._read_sequence()
        elif raw and raw[0] >= 0xC0:
            # Rest of a multi-byte UTF-8 character.
            raw += os.read(self.fd, 3 if raw[0] >= 0xF0 else 2 if raw[0] >= 0xE0 else 1)
        return decode_key(raw)

    def _read_sequence(self) -> bytes:
        seq = b""
        deadline = time.monotonic() + ESCAPE_SEQUENCE_WAIT
        while time.monotonic() < deadline:
            ready, _, _ = select.select([self.fd], [], [], 0.005)
            if not ready:
                break
            chunk = os.read(self.fd, 1)
            if not chunk:
                break
            seq += chunk
            if len(seq) >= 2 and (seq[-1:].isalpha() or seq.endswith(b"~")):
                break
        return seq

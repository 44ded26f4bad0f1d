"""Scroll state for one pane: auto-follow versus manual scrolling.

Positions are counted in wrapped lines. The render loop calls ``reconcile``
every frame with the freshly computed wrapped total and pane height; the
navigation commands reuse the values from the most recent frame.
"""

from __future__ import annotations

import threading
from enum import Enum


class ScrollCommand(str, Enum):
    LINE_UP = "line_up"
    LINE_DOWN = "line_down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    HOME = "home"
    END = "end"


def max_scroll(total_lines: int, pane_height: int) -> int:
    return max(0, total_lines - max(0, pane_height))


class ViewportState:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.scroll_position = 0
        self.has_user_scrolled = False
        self.total_lines = 0
        self.pane_height = 0
        # Rows pushed since the last frame; never used as a scroll bound.
        self.pending_lines = 0

    def reconcile(self, total_lines: int, pane_height: int) -> int:
        """Apply the per-frame scroll rule and return the top visible line."""
        with self._lock:
            self.total_lines = max(0, total_lines)
            self.pending_lines = 0
            self.pane_height = max(0, pane_height)
            bound = max_scroll(self.total_lines, self.pane_height)
            if self.has_user_scrolled:
                self.scroll_position = min(self.scroll_position, bound)
            else:
                self.scroll_position = bound
            return self.scroll_position

    def scroll(self, command: ScrollCommand) -> bool:
        """Move the view; returns True when the position changed.

        Any change switches the pane to manual mode.
        """
        with self._lock:
            bound = max_scroll(self.total_lines, self.pane_height)
            page = max(1, self.pane_height)
            current = min(self.scroll_position, bound)
            if command is ScrollCommand.LINE_UP:
                target = current - 1
            elif command is ScrollCommand.LINE_DOWN:
                target = current + 1
            elif command is ScrollCommand.PAGE_UP:
                target = current - page
            elif command is ScrollCommand.PAGE_DOWN:
                target = current + page
            elif command is ScrollCommand.HOME:
                target = 0
            else:
                target = bound
            target = min(max(0, target), bound)
            changed = target != current
            if changed:
                self.scroll_position = target
                self.has_user_scrolled = True
            return changed

    def follow_tail(self, added: int = 1) -> None:
        """Called by the ingestion thread after a push.

        Each new raw line is at least one wrapped line, so the estimate keeps
        the view on the tail until the next frame computes the exact total.
        Navigation keeps clamping against the total of the last frame.
        """
        with self._lock:
            if self.has_user_scrolled:
                return
            self.pending_lines += max(0, added)
            self.scroll_position = max_scroll(
                self.total_lines + self.pending_lines, self.pane_height
            )

    def snap_to_tail(self) -> None:
        with self._lock:
            self.has_user_scrolled = False
            self.scroll_position = max_scroll(
                self.total_lines + self.pending_lines, self.pane_height
            )

    def reset(self) -> None:
        with self._lock:
            self.scroll_position = 0
            self.total_lines = 0
            self.pending_lines = 0
            self.has_user_scrolled = False

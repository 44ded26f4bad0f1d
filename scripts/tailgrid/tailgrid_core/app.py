"""Dashboard driver and CLI entrypoint for tailgrid."""

from __future__ import annotations

import argparse
import logging
import os
from dataclasses import dataclass, field
from typing import Callable

from rich.console import Console
from rich.live import Live

from tailgrid_core.config import MAX_REFRESH_MS, MIN_REFRESH_MS, load_settings
from tailgrid_core.errors import ConfigError
from tailgrid_core.formatting import pane_title
from tailgrid_core.highlight import HighlightEngine, create_log_formatter, split_segments
from tailgrid_core.history import HistoryBuffer
from tailgrid_core.keys import KeyPoller
from tailgrid_core.layout import neighbour_index, pane_rects
from tailgrid_core.models import PaneFrame, Rect, Segment, Source
from tailgrid_core.panels import ERROR_LINE_STYLE, border_for
from tailgrid_core.panels.pane import compose
from tailgrid_core.session import SourceSession
from tailgrid_core.status import StatusCell
from tailgrid_core.transport import DEFAULT_READ_TIMEOUT, Transport
from tailgrid_core.viewport import ScrollCommand, ViewportState
from tailgrid_core.wrapping import WrapIndex, wrap_line

logger = logging.getLogger(__name__)

LOG_FILE_ENV = "TAILGRID_LOG_FILE"

QUIT_KEYS = {"q", "Q", "ctrl-c"}
MAXIMIZE_KEYS = {"enter", "m", "M"}
CLEAR_KEYS = {"r", "R"}
SCROLL_KEYS = {
    "up": ScrollCommand.LINE_UP,
    "down": ScrollCommand.LINE_DOWN,
    "pageup": ScrollCommand.PAGE_UP,
    "pagedown": ScrollCommand.PAGE_DOWN,
    "home": ScrollCommand.HOME,
    "end": ScrollCommand.END,
}
SELECTION_KEYS = {"left", "right", "up", "down"}


@dataclass
class PaneState:
    source: Source
    history: HistoryBuffer
    status: StatusCell
    viewport: ViewportState
    session: SourceSession
    wrap_index: WrapIndex = field(default_factory=WrapIndex)


class Dashboard:
    """Owns every source's shared state and turns it into frames.

    Key events only touch viewport and selection state; sessions run on
    their own threads and are never driven by input.
    """

    def __init__(
        self,
        sources: list[Source],
        formatter: HighlightEngine | None = None,
        transport_factory: Callable[[], Transport] | None = None,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
    ):
        self.formatter = formatter or create_log_formatter()
        self.panes: list[PaneState] = []
        for source in sources:
            history = HistoryBuffer(source.max_history)
            status = StatusCell()
            viewport = ViewportState()
            session = SourceSession(
                source,
                history,
                status,
                viewport,
                transport_factory=transport_factory,
                read_timeout=read_timeout,
            )
            self.panes.append(PaneState(source, history, status, viewport, session))
        self.selected_index = 0
        self.is_maximized = False
        self.running = False

    @property
    def active(self) -> PaneState:
        return self.panes[self.selected_index]

    def start(self) -> None:
        """One-time startup: every pane follows its tail, every session runs."""
        for pane in self.panes:
            pane.viewport.reset()
        for pane in self.panes:
            pane.session.start()
        self.running = True
        logger.info("dashboard started with %d sources", len(self.panes))

    def stop(self) -> None:
        self.running = False
        for pane in self.panes:
            pane.session.stop()

    # -- input ---------------------------------------------------------------

    def handle_key(self, key: str) -> bool:
        """Dispatch one key; returns False once the dashboard should exit."""
        if key in QUIT_KEYS:
            self.running = False
            return False
        if not self.panes:
            return True

        if key in MAXIMIZE_KEYS:
            self.toggle_maximize()
        elif key in CLEAR_KEYS:
            self.clear_active()
        elif self.is_maximized:
            if key in SCROLL_KEYS:
                self.active.viewport.scroll(SCROLL_KEYS[key])
        elif key in SELECTION_KEYS:
            self.move_selection(key)
        return True

    def toggle_maximize(self) -> None:
        self.is_maximized = not self.is_maximized
        self.active.viewport.snap_to_tail()

    def move_selection(self, direction: str) -> None:
        self.selected_index = neighbour_index(self.selected_index, len(self.panes), direction)

    def clear_active(self) -> None:
        pane = self.active
        pane.history.clear()
        pane.viewport.reset()

    # -- rendering -----------------------------------------------------------

    def build_frame(self, width: int, height: int) -> list[PaneFrame]:
        area = Rect(0, 0, width, height)
        rects = pane_rects(area, len(self.panes), self.is_maximized, self.selected_index)
        return [
            self.render_pane(self.panes[index], rect, index == self.selected_index)
            for index, rect in rects.items()
        ]

    def render_pane(self, pane: PaneState, rect: Rect, selected: bool) -> PaneFrame:
        inner_width = rect.inner_width
        inner_height = rect.inner_height

        first_seq, lines = pane.history.window()
        counts = pane.wrap_index.update(first_seq, lines, inner_width)
        top = pane.viewport.reconcile(pane.wrap_index.total, inner_height)

        rows: list[list[Segment]] = []
        skip = top
        for line, count in zip(lines, counts):
            if len(rows) >= inner_height:
                break
            if skip >= count:
                skip -= count
                continue
            sub_lines = wrap_line(line, inner_width)
            formatted = split_segments(self.formatter.format(line), sub_lines)
            rows.extend(formatted[skip : skip + inner_height - len(rows)])
            skip = 0

        status = pane.status.get()
        if status.is_error and inner_height > 0:
            error_row = [(status.message, ERROR_LINE_STYLE)]
            if len(rows) < inner_height:
                rows.append(error_row)
            else:
                rows[inner_height - 1] = error_row

        return PaneFrame(
            rect=rect,
            title=pane_title(pane.source.name, top, status),
            lines=rows,
            border_style=border_for(selected, status),
        )


def run(dashboard: Dashboard, console: Console, refresh_seconds: float, poller: KeyPoller) -> None:
    dashboard.start()
    try:
        with poller, Live(console=console, screen=True, auto_refresh=False) as live:
            while dashboard.running:
                size = console.size
                frames = dashboard.build_frame(size.width, size.height)
                live.update(compose(frames, size.width), refresh=True)
                key = poller.poll(refresh_seconds)
                if key is not None and not dashboard.handle_key(key):
                    break
    except KeyboardInterrupt:
        pass
    finally:
        dashboard.stop()


def configure_logging(log_file: str | None, level: str) -> None:
    if not log_file:
        # Keep library warnings (paramiko included) off the full-screen terminal.
        logging.getLogger().addHandler(logging.NullHandler())
        return
    logging.basicConfig(
        filename=log_file,
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(threadName)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Tail remote logs side by side")
    parser.add_argument("--config", help="Config file (TOML or JSON); default $TAILGRID_CONFIG or ~/.rogger/config.toml")
    parser.add_argument("--log-file", default=os.environ.get(LOG_FILE_ENV), help="Write diagnostics to this file")
    parser.add_argument("--log-level", default="INFO", help="Diagnostics level: DEBUG|INFO|WARNING|ERROR")
    parser.add_argument("--refresh-ms", type=int, help="Input poll timeout / redraw cadence override")
    parser.add_argument("--once", action="store_true", help="Render a single frame to stdout and exit")
    args = parser.parse_args(argv)

    configure_logging(args.log_file, args.log_level)
    console = Console()

    try:
        settings = load_settings(args.config)
    except ConfigError as exc:
        Console(stderr=True).print(f"[bold red]config error:[/bold red] {exc}", highlight=False)
        return 2

    refresh_ms = settings.refresh_ms
    if args.refresh_ms is not None:
        refresh_ms = min(MAX_REFRESH_MS, max(MIN_REFRESH_MS, args.refresh_ms))

    dashboard = Dashboard(settings.sources, read_timeout=settings.read_timeout)

    if args.once:
        dashboard.start()
        try:
            size = console.size
            console.print(compose(dashboard.build_frame(size.width, size.height), size.width))
        finally:
            dashboard.stop()
        return 0

    run(dashboard, console, refresh_ms / 1000.0, KeyPoller())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
